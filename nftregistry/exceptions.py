class RegistryError(Exception):
    """
    The base exception for the registry. The fmt directive
    will be overloaded by the inheriting classes

    Registry errors carry no payload beyond their kind. Every one
    is fatal to the call that raised it and undoes all of its writes.
    """
    fmt = 'An unspecified registry error occurred'

    def __init__(self):
        Exception.__init__(self, self.fmt)

    @property
    def kind(self):
        return self.__class__.__name__


class ZeroAddress(RegistryError):
    """
    The null account was used where a real account is required
    """
    fmt = 'The null account is not a valid account here'


class InvalidAccount(RegistryError):
    """
    The account cannot be used as a storage key, either because it is not a
    string or because it contains a key delimiter or separator
    """
    fmt = 'Account name is not a valid account'


class Unminted(RegistryError):
    fmt = 'Token has not been minted'


class AlreadyMinted(RegistryError):
    fmt = 'Token has already been minted'


class NotOwner(RegistryError):
    """
    The account a transfer names as the sender does not own the token
    """
    fmt = 'Sender is not the owner of the token'


class Unauthorized(RegistryError):
    fmt = 'Caller is not authorized to perform this action'


class UnsafeRecipient(RegistryError):
    """
    A contract recipient rejected the token, failed inside its receiver
    hook, or does not implement one
    """
    fmt = 'Recipient did not acknowledge receipt of the token'


class InsufficientPayment(RegistryError):
    fmt = 'Attached payment is below the mint price'


class MintLimitReached(RegistryError):
    fmt = 'Mint limit has been reached'


class RuntimeFault(Exception):
    """
    The base exception for the contract runtime. The fmt directive
    will be overloaded by the inheriting classes

    :ivar msg: The message associated with the error
    """
    fmt = 'An unspecified runtime error occurred'

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs


class ContractExists(RuntimeFault):
    """
    When attempting to set a contract, found that it
    already exists in the database

    :ivar contract_name: The name of the contract
                         submitted.
    """
    fmt = "Contract with name '{contract_name}' already exists in the database"


class ContractNotFound(RuntimeFault):
    fmt = "Contract with name '{contract_name}' does not exist"


class PrivateMethodError(RuntimeFault):
    fmt = "Method '{function_name}' is private and cannot be called"


class FunctionNotExported(RuntimeFault):
    fmt = "Contract '{contract_name}' does not export '{function_name}'"

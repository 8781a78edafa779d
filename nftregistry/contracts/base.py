from nftregistry.db.driver import ContractDriver
from nftregistry.db.orm import Variable, Hash
from nftregistry.execution.runtime import rt
from nftregistry import config


def is_null(account):
    return account is None or account == config.NULL_ACCOUNT


class SmartContract:
    """
    Base class for contracts run by the executor.

    All state lives in the driver under keys prefixed with the contract's name, so an instance holds
    nothing but its name and driver and can be rebuilt on every call. Methods decorated with export
    are callable by accounts and other contracts; everything else is internal.
    """
    def __init__(self, name, driver: ContractDriver=None):
        self.name = name
        self.driver = driver or rt.env.get('__Driver') or ContractDriver()

    def construct(self, **kwargs):
        pass

    @property
    def ctx(self):
        return rt.context

    def variable(self, name, t=None, default_value=None):
        return Variable(self.name, name, driver=self.driver, t=t, default_value=default_value)

    def hash(self, name, default_value=None):
        return Hash(self.name, name, driver=self.driver, default_value=default_value)

    def emit(self, event, data, indexed=()):
        rt.emit(self.name, event, data, indexed=indexed)

    def is_contract(self, account):
        return isinstance(account, str) and not is_null(account) and self.driver.get_contract(account) is not None

    def import_contract(self, name):
        return rt.load_contract(name, self.driver)

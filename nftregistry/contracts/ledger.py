from nftregistry.contracts.base import SmartContract, is_null
from nftregistry.execution.runtime import export
from nftregistry.exceptions import ZeroAddress, InvalidAccount, Unminted, AlreadyMinted
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Ledger')


def valid_token_id(token_id):
    return isinstance(token_id, int) and not isinstance(token_id, bool) and token_id >= 0


def valid_account(account):
    # Accounts become hash keys, so they may not contain the key delimiter or separator
    return isinstance(account, str) and 0 < len(account) <= config.MAX_KEY_SIZE and \
        config.DELIMITER not in account and config.INDEX_SEPARATOR not in account


def require_account(account):
    if is_null(account):
        raise ZeroAddress()

    if not valid_account(account):
        raise InvalidAccount()

    return account


class OwnershipLedger(SmartContract):
    """
    Authoritative token id -> owner and owner -> balance maps.

    _credit and _move are the only writers of either map, and each keeps the
    two in step so that balances[a] always equals the number of tokens owned by a.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.owners = self.hash('owners')
        self.balances = self.hash('balances', default_value=0)

    def _owner(self, token_id):
        if not valid_token_id(token_id):
            return None
        return self.owners[token_id]

    def _require_owner(self, token_id):
        owner = self._owner(token_id)
        if is_null(owner):
            raise Unminted()
        return owner

    def _credit(self, to, token_id):
        require_account(to)

        if not valid_token_id(token_id):
            raise ValueError('Token id must be a non-negative integer, got {!r}'.format(token_id))

        if self._owner(token_id) is not None:
            raise AlreadyMinted()

        self.owners[token_id] = to
        self.balances[to] += 1

        log.debug('{}: credited token {} to {}'.format(self.name, token_id, to))

    def _move(self, sender, to, token_id):
        self.balances[sender] -= 1
        self.balances[to] += 1
        self.owners[token_id] = to

    @export
    def balance_of(self, account):
        return self.balances[require_account(account)]

    @export
    def owner_of(self, token_id):
        return self._require_owner(token_id)

from enum import Enum
from nftregistry.contracts.base import is_null
from nftregistry.contracts.ledger import OwnershipLedger, valid_account, require_account
from nftregistry.execution.runtime import export
from nftregistry.exceptions import Unauthorized, InvalidAccount
from nftregistry import config


class Capability(Enum):
    OWNER = 'owner'
    OPERATOR = 'operator'
    DELEGATE = 'delegate'
    NONE = 'none'


class DelegationLayer(OwnershipLedger):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.approvals = self.hash('approvals')
        self.operators = self.hash('operators', default_value=False)

    def capability_of(self, actor, token_id):
        """
        The strongest authority actor holds over a minted token. The null account holds none.
        """
        owner = self._require_owner(token_id)

        if is_null(actor) or not valid_account(actor):
            return Capability.NONE

        if actor == owner:
            return Capability.OWNER

        if self.operators[owner, actor] is True:
            return Capability.OPERATOR

        if actor == self.approvals[token_id]:
            return Capability.DELEGATE

        return Capability.NONE

    @export
    def approve(self, operator, token_id):
        owner = self._require_owner(token_id)

        if self.capability_of(self.ctx.caller, token_id) not in (Capability.OWNER, Capability.OPERATOR):
            raise Unauthorized()

        if is_null(operator):
            operator = config.NULL_ACCOUNT
            self.approvals[token_id] = None
        else:
            self.approvals[token_id] = require_account(operator)

        self.emit('Approval', {
            'owner': owner,
            'operator': operator,
            'token_id': token_id
        }, indexed=('owner', 'operator', 'token_id'))

    @export
    def get_approved(self, token_id):
        self._require_owner(token_id)

        approved = self.approvals[token_id]
        if approved is None:
            return config.NULL_ACCOUNT

        return approved

    @export
    def is_approved_for_all(self, owner, operator):
        if not (valid_account(owner) and valid_account(operator)):
            return False
        return self.operators[owner, operator] is True

    @export
    def set_approval_for_all(self, operator, approved):
        if not (valid_account(self.ctx.caller) and valid_account(operator)):
            raise InvalidAccount()

        approved = bool(approved)
        self.operators[self.ctx.caller, operator] = approved

        self.emit('ApprovalForAll', {
            'owner': self.ctx.caller,
            'operator': operator,
            'approved': approved
        }, indexed=('owner', 'operator'))

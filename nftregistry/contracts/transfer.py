from nftregistry.contracts.delegation import DelegationLayer, Capability
from nftregistry.contracts.ledger import require_account
from nftregistry.execution.runtime import export
from nftregistry.exceptions import NotOwner, Unauthorized
from nftregistry.logger import get_logger

log = get_logger('Transfer')


class TransferEngine(DelegationLayer):
    def _transfer(self, caller, sender, to, token_id):
        # Every check runs before the first write, so a rejected transfer leaves nothing behind
        owner = self._require_owner(token_id)

        if owner != sender:
            raise NotOwner()

        require_account(to)

        if self.capability_of(caller, token_id) is Capability.NONE:
            raise Unauthorized()

        self._move(sender, to, token_id)
        self.approvals[token_id] = None

        self.emit('Transfer', {
            'from': sender,
            'to': to,
            'token_id': token_id
        }, indexed=('from', 'to', 'token_id'))

        log.debug('{}: token {} moved from {} to {} by {}'.format(self.name, token_id, sender, to, caller))

    @export
    def transfer_from(self, sender, to, token_id):
        self._transfer(self.ctx.caller, sender, to, token_id)

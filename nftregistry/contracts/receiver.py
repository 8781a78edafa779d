from nftregistry.contracts.base import SmartContract
from nftregistry.contracts.transfer import TransferEngine
from nftregistry.execution.runtime import export, is_exported, rt
from nftregistry.exceptions import UnsafeRecipient
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Receiver')


class SafeRecipientProtocol(TransferEngine):
    """
    Transfers that are only final once a contract recipient acknowledges them.

    The protocol runs in two phases. First the transfer is written, so a recipient that calls back
    into the registry sees the new owner, the new balances and the cleared delegate. Then the
    recipient is notified. If the notification fails, the savepoint opened before the first phase
    is restored, which discards the transfer together with anything the recipient wrote.
    """
    def notify_recipient(self, operator, sender, to, token_id, data):
        if not self.is_contract(to):
            return True

        try:
            recipient = self.import_contract(to)
            hook = getattr(recipient, config.RECEIVER_HOOK, None)

            if hook is None or not is_exported(hook):
                log.warning('{} has no receiver hook, rejecting token {}'.format(to, token_id))
                return False

            response = hook(operator=operator, sender=sender, token_id=token_id, data=data)
        except Exception as e:
            log.warning('Receiver hook of {} failed for token {}: {}'.format(to, token_id, e))
            return False

        return response == config.RECEIVER_MAGIC

    @export
    def safe_transfer_from(self, sender, to, token_id, data=b''):
        caller = self.ctx.caller

        with rt.savepoint(self.driver):
            self._transfer(caller, sender, to, token_id)

            if not self.notify_recipient(caller, sender, to, token_id, data):
                raise UnsafeRecipient()


class TokenReceiver(SmartContract):
    """
    Base for contracts that accept tokens. Override accept to inspect or refuse incoming tokens.
    """
    def accept(self, operator, sender, token_id, data):
        return True

    @export
    def on_receive(self, operator, sender, token_id, data=b''):
        if self.accept(operator, sender, token_id, data):
            return config.RECEIVER_MAGIC
        return b''

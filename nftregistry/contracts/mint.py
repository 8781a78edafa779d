from nftregistry.contracts.admin import Administration
from nftregistry.contracts.receiver import SafeRecipientProtocol
from nftregistry.execution.runtime import export, rt
from nftregistry.exceptions import InsufficientPayment, MintLimitReached, UnsafeRecipient
from nftregistry.logger import get_logger
from nftregistry import config
import decimal

log = get_logger('Mint')


def valid_payment(value):
    return isinstance(value, (int, decimal.Decimal)) and not isinstance(value, bool)


class MintController(SafeRecipientProtocol, Administration):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.next_token_id = self.variable('next_token_id', default_value=0)

    def _mint(self, to, token_id):
        """
        Issues token_id to `to` without payment or supply checks. Not exported.
        """
        self._credit(to, token_id)

        self.emit('Transfer', {
            'from': config.NULL_ACCOUNT,
            'to': to,
            'token_id': token_id
        }, indexed=('from', 'to', 'token_id'))

    @export
    def total_minted(self):
        return self.next_token_id.get()

    @export
    def mint(self, to):
        payment = self.ctx.value

        if not valid_payment(payment) or payment < self.mint_price_var.get():
            raise InsufficientPayment()

        token_id = self.next_token_id.get()

        if token_id >= self.mint_limit_var.get():
            raise MintLimitReached()

        with rt.savepoint(self.driver):
            self._mint(to, token_id)

            # The counter moves before the recipient runs so a reentrant mint gets the next id
            self.next_token_id.set(token_id + 1)
            self.proceeds_var.set(self.proceeds_var.get() + payment)

            if not self.notify_recipient(self.ctx.caller, config.NULL_ACCOUNT, to, token_id, b''):
                raise UnsafeRecipient()

            self.emit('Mint', {
                'to': to,
                'token_id': token_id
            }, indexed=('to', 'token_id'))

        log.info('{}: minted token {} to {}'.format(self.name, token_id, to))

        return token_id

from nftregistry.contracts.base import SmartContract, is_null
from nftregistry.contracts.ledger import require_account
from nftregistry.execution.runtime import export
from nftregistry.exceptions import Unauthorized
from nftregistry import config


class Administration(SmartContract):
    """
    Admin-controlled parameters of the collection and the guard that protects them.

    Only the stored owner may change the mint price, the mint limit or the metadata URIs,
    hand over ownership or withdraw the proceeds collected from paid mints.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.owner_var = self.variable('owner')
        self.mint_price_var = self.variable('mint_price', default_value=config.DEFAULT_MINT_PRICE)
        self.mint_limit_var = self.variable('mint_limit', default_value=config.DEFAULT_MINT_LIMIT)
        self.proceeds_var = self.variable('proceeds', default_value=0)
        self.payouts = self.hash('payouts', default_value=0)
        self.base_uri_var = self.variable('base_uri', default_value='')
        self.contract_uri_var = self.variable('contract_uri', default_value='')

    def _only_owner(self):
        caller = self.ctx.caller
        if is_null(caller) or caller != self.owner_var.get():
            raise Unauthorized()

    @staticmethod
    def _non_negative(name, value):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError('{} must be a non-negative integer, got {!r}'.format(name, value))

    @export
    def owner(self):
        return self.owner_var.get()

    @export
    def transfer_ownership(self, new_owner):
        self._only_owner()

        require_account(new_owner)

        previous = self.owner_var.get()
        self.owner_var.set(new_owner)

        self.emit('OwnershipTransferred', {
            'previous_owner': previous,
            'new_owner': new_owner
        }, indexed=('previous_owner', 'new_owner'))

    @export
    def mint_price(self):
        return self.mint_price_var.get()

    @export
    def set_mint_price(self, price):
        self._only_owner()
        self._non_negative('price', price)

        self.mint_price_var.set(price)
        self.emit('PriceChange', {'new_price': price}, indexed=('new_price', ))

    @export
    def mint_limit(self):
        return self.mint_limit_var.get()

    @export
    def set_mint_limit(self, limit):
        self._only_owner()
        self._non_negative('limit', limit)

        self.mint_limit_var.set(limit)

    @export
    def set_base_uri(self, uri):
        self._only_owner()
        self.base_uri_var.set(uri)

    @export
    def set_contract_uri(self, uri):
        self._only_owner()
        self.contract_uri_var.set(uri)

    @export
    def proceeds(self):
        return self.proceeds_var.get()

    @export
    def withdraw(self):
        self._only_owner()

        to = self.owner_var.get()
        amount = self.proceeds_var.get()

        self.proceeds_var.set(0)
        self.payouts[to] += amount

        self.emit('Withdrawal', {'to': to, 'amount': amount}, indexed=('to', ))

        return amount

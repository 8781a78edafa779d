from nftregistry.contracts.admin import Administration
from nftregistry.contracts.ledger import OwnershipLedger
from nftregistry.execution.runtime import export


class Metadata(OwnershipLedger, Administration):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.metadata_name = self.variable('metadata_name', default_value='')
        self.metadata_symbol = self.variable('metadata_symbol', default_value='')

    @export
    def collection_name(self):
        return self.metadata_name.get()

    @export
    def symbol(self):
        return self.metadata_symbol.get()

    @export
    def token_uri(self, token_id):
        self._require_owner(token_id)

        base = self.base_uri_var.get()
        if not base:
            return ''

        return '{}{}'.format(base, token_id)

    @export
    def contract_uri(self):
        return self.contract_uri_var.get()

from nftregistry.contracts.metadata import Metadata
from nftregistry.contracts.mint import MintController
from nftregistry.execution.runtime import export
from nftregistry import config

SUPPORTED_INTERFACES = frozenset(config.INTERFACE_IDS.values())


def interface_id(discriminator):
    if isinstance(discriminator, (bytes, bytearray)):
        return bytes(discriminator)

    if isinstance(discriminator, int) and not isinstance(discriminator, bool):
        if 0 <= discriminator < 2 ** 32:
            return discriminator.to_bytes(4, 'big')
        return None

    if isinstance(discriminator, str):
        if discriminator.lower().startswith('0x'):
            discriminator = discriminator[2:]
        try:
            return bytes.fromhex(discriminator)
        except ValueError:
            return None

    return None


class NonFungibleRegistry(Metadata, MintController):
    """
    A bounded, paid-mint collection of non-fungible tokens.

    Construct once with the collection name and symbol. The deploying account becomes the admin owner.
    """
    def construct(self, collection_name, symbol, mint_price=config.DEFAULT_MINT_PRICE,
                  mint_limit=config.DEFAULT_MINT_LIMIT, base_uri='', contract_uri=''):
        self._non_negative('mint_price', mint_price)
        self._non_negative('mint_limit', mint_limit)

        self.metadata_name.set(collection_name)
        self.metadata_symbol.set(symbol)

        self.owner_var.set(self.ctx.caller)
        self.mint_price_var.set(mint_price)
        self.mint_limit_var.set(mint_limit)
        self.base_uri_var.set(base_uri)
        self.contract_uri_var.set(contract_uri)

        self.next_token_id.set(0)

    @export
    def supports_interface(self, discriminator):
        return interface_id(discriminator) in SUPPORTED_INTERFACES

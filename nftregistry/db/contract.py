from nftregistry.db.driver import ContractDriver
from nftregistry.execution.runtime import rt
from nftregistry.exceptions import ContractExists
from nftregistry.logger import get_logger
from nftregistry import config

log = get_logger('Contract')


class Contract:
    def __init__(self, driver: ContractDriver=None):
        self._driver = driver or rt.env.get('__Driver') or ContractDriver()

    def submit(self, name, contract_class, owner=None, constructor_args={}, signer=None):
        """
        Deploys contract_class under name and runs its constructor with signer as ctx.caller.
        A failing constructor leaves no trace of the contract.
        """
        if self._driver.get_contract(name) is not None:
            raise ContractExists(contract_name=name)

        code = rt.register_contract_class(contract_class)

        rt.set_up({
            'signer': signer,
            'caller': signer,
            'this': name,
            'owner': owner,
            'value': 0
        })

        try:
            with rt.savepoint(self._driver):
                self._driver.set_contract(name=name, code=code, owner=owner)

                instance = contract_class(name, driver=self._driver)

                if constructor_args is None:
                    constructor_args = {}

                getattr(instance, config.INIT_FUNC_NAME)(**constructor_args)
        finally:
            rt.clean_up()

        log.debug('Submitted {} as {}'.format(code, name))

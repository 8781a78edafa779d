from nftregistry.execution import runtime
from nftregistry.execution.runtime import is_exported
from nftregistry.db.driver import ContractDriver
from nftregistry.exceptions import PrivateMethodError, FunctionNotExported, Unauthorized
from nftregistry.logger import get_logger
from nftregistry import config
from copy import deepcopy
import traceback

log = get_logger('Executor')


class Executor:
    def __init__(self, driver=None, bypass_privates=False):
        self.driver = driver

        if not self.driver:
            self.driver = ContractDriver()

        self.bypass_privates = bypass_privates

        runtime.rt.env.update({'__Driver': self.driver})

    def execute(self, sender, contract_name, function_name, kwargs,
                environment={},
                auto_commit=False,
                driver=None,
                value=0) -> dict:
        """
        Runs one exported function as an atomic unit. Any failure, including one raised inside a
        nested contract call, discards every write and event the call produced.
        """

        if driver is None:
            driver = self.driver

        runtime.rt.env.update({'__Driver': driver})
        runtime.rt.env.update(environment)

        runtime.rt.set_up({
            'signer': sender,
            'caller': sender,
            'this': contract_name,
            'owner': None,
            'value': value
        })

        status_code = 0
        try:
            with runtime.rt.savepoint(driver):
                if not self.bypass_privates and function_name.startswith(config.PRIVATE_METHOD_PREFIX):
                    raise PrivateMethodError(function_name=function_name)

                owner = driver.get_owner(contract_name)
                runtime.rt.context._base_state['owner'] = owner

                if owner is not None and owner != sender:
                    raise Unauthorized()

                contract = runtime.rt.load_contract(contract_name, driver)
                func = getattr(contract, function_name, None)

                if func is None or not callable(func) or \
                        not (is_exported(func) or self.bypass_privates):
                    raise FunctionNotExported(contract_name=contract_name, function_name=function_name)

                result = func(**kwargs)

            if auto_commit:
                driver.commit()
        except Exception as e:
            result = e
            log.error('{}.{} failed for {}: {}'.format(contract_name, function_name, sender, e))
            log.debug(traceback.format_exc())
            status_code = 1
            if auto_commit:
                driver.clear_pending_state()

        events = list(runtime.rt.events)

        runtime.rt.clean_up()
        runtime.rt.env.update({'__Driver': driver})

        output = {
            'status_code': status_code,
            'result': result,
            'writes': deepcopy(driver.pending_writes),
            'events': events
        }

        return output

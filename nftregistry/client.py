from nftregistry.execution.executor import Executor
from nftregistry.execution.runtime import rt, is_exported
from nftregistry.db.driver import ContractDriver
from nftregistry.db.contract import Contract
from nftregistry.db.orm import Variable, Hash
from nftregistry.exceptions import ContractNotFound
from functools import partial
import inspect

from . import config


class AbstractContract:
    def __init__(self, name, signer, environment, executor: Executor, funcs, client=None):
        self.name = name
        self.signer = signer
        self.environment = environment
        self.executor = executor
        self.functions = funcs
        self.client = client

        # set up virtual functions
        for func in funcs:
            # each function is a partial that allows kwarg overloading and overriding
            setattr(self, func, partial(self._abstract_function_call,
                                        signer=self.signer,
                                        contract_name=self.name,
                                        executor=self.executor,
                                        func=func,
                                        environment=self.environment))

    def keys(self):
        return self.executor.driver.get_contract_keys(self.name)

    def quick_read(self, variable, key=None, args=None):
        a = []

        if key is not None:
            a.append(key)

        if args is not None and isinstance(args, list):
            for arg in args:
                a.append(arg)

        k = self.executor.driver.make_key(contract=self.name, variable=variable, args=a)
        return self.executor.driver.get(k)

    def quick_write(self, variable, key=None, value=None, args=None):
        if key is not None:
            a = [key]
        else:
            a = []

        if args is not None and isinstance(args, list):
            for arg in args:
                a.append(arg)

        k = self.executor.driver.make_key(contract=self.name, variable=variable, args=a)

        self.executor.driver.set(k, value)
        self.executor.driver.commit()

    def run_private_function(self, f, signer=None, environment=None, **kwargs):
        # Override kwargs if provided
        signer = signer or self.signer
        environment = environment or self.environment

        # Append private method prefix to function name if it isn't there already
        if not f.startswith(config.PRIVATE_METHOD_PREFIX):
            f = '{}{}'.format(config.PRIVATE_METHOD_PREFIX, f)

        # Let executor access private functions
        self.executor.bypass_privates = True

        try:
            return self._abstract_function_call(signer=signer, executor=self.executor, contract_name=self.name,
                                                environment=environment, func=f, **kwargs)
        finally:
            # Set executor back to restricted mode
            self.executor.bypass_privates = False

    def __getattr__(self, item):
        # Only called when normal lookup fails. Resolve the name against the contract's state.
        if item.startswith('__'):
            raise AttributeError(item)

        prefix = '{}.{}'.format(self.name, item)

        if self.executor.driver.get(prefix) is not None:
            return Variable(contract=self.name, name=item, driver=self.executor.driver)

        if len(self.executor.driver.keys(prefix=prefix + config.DELIMITER)) > 0:
            return Hash(contract=self.name, name=item, driver=self.executor.driver)

        raise AttributeError("'{}' has no function or variable '{}'".format(self.name, item))

    def _abstract_function_call(self, signer, executor, contract_name, environment, func, value=0,
                                auto_commit=True, **kwargs):
        output = executor.execute(sender=signer,
                                  contract_name=contract_name,
                                  function_name=func,
                                  kwargs=kwargs,
                                  environment=environment,
                                  auto_commit=auto_commit,
                                  value=value)

        if self.client is not None:
            self.client.events.extend(output['events'])

        if output['status_code'] == 1:
            raise output['result']

        return output['result']


class RegistryClient:
    def __init__(self, signer='sys', driver=None, environment=None):
        self.raw_driver = driver or ContractDriver()
        self.executor = Executor(driver=self.raw_driver)
        self.signer = signer
        self.environment = environment or {}
        self.events = []

    def flush(self):
        self.raw_driver.flush()
        self.events = []

    def submit(self, contract_class, name=None, owner=None, constructor_args={}, signer=None):
        if name is None:
            name = contract_class.__name__.lower()

        Contract(driver=self.raw_driver).submit(name=name,
                                                contract_class=contract_class,
                                                owner=owner,
                                                constructor_args=constructor_args,
                                                signer=signer or self.signer)
        self.raw_driver.commit()

        return self.get_contract(name)

    # Returns abstract contract which has partial methods mapped to each exported function.
    def get_contract(self, name):
        code = self.raw_driver.get_contract(name)

        if code is None:
            return None

        contract_class = rt.contract_class(code)

        funcs = [func_name for func_name, func in inspect.getmembers(contract_class, callable)
                 if is_exported(func)]

        return AbstractContract(name=name,
                                signer=self.signer,
                                environment=self.environment,
                                executor=self.executor,
                                funcs=funcs,
                                client=self)

    def get_methods(self, name):
        code = self.raw_driver.get_contract(name)

        if code is None:
            raise ContractNotFound(contract_name=name)

        contract_class = rt.contract_class(code)

        methods = []
        for func_name, func in inspect.getmembers(contract_class, callable):
            if not is_exported(func):
                continue

            arguments = [p for p in inspect.signature(func).parameters if p != 'self']
            methods.append({'name': func_name, 'arguments': arguments})

        return methods

    def get_contracts(self):
        contracts = []
        suffix = '{}{}'.format(config.INDEX_SEPARATOR, config.CODE_KEY)
        for key in self.raw_driver.keys():
            if key.endswith(suffix):
                contracts.append(key[:-len(suffix)])
        return contracts

    def get_var(self, contract, variable, arguments=[], mark=False):
        return self.raw_driver.get_var(contract, variable, arguments, mark)

    def set_var(self, contract, variable, arguments=[], value=None, mark=False):
        self.raw_driver.set_var(contract, variable, arguments, value, mark)

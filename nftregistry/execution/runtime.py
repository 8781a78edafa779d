from contextlib import ContextDecorator, contextmanager
from nftregistry import config
from nftregistry.exceptions import ContractNotFound, Unauthorized
import functools
import importlib


class Context:
    def __init__(self, base_state, maxlen=config.RECURSION_LIMIT):
        self._state = []
        self._base_state = base_state
        self._maxlen = maxlen

    def _context_changed(self, contract):
        if self._get_state()['this'] == contract:
            return False
        return True

    def _get_state(self):
        if len(self._state) == 0:
            return self._base_state
        return self._state[-1]

    def _add_state(self, state: dict):
        if not self._context_changed(state['this']):
            return False

        if len(self._state) >= self._maxlen:
            raise RecursionError('Contract call depth exceeded {}'.format(self._maxlen))

        self._state.append(state)
        return True

    def _pop_state(self):
        if len(self._state) > 0:
            self._state.pop(-1)

    def _reset(self):
        self._state = []

    @property
    def this(self):
        return self._get_state()['this']

    @property
    def caller(self):
        return self._get_state()['caller']

    @property
    def signer(self):
        return self._get_state()['signer']

    @property
    def owner(self):
        return self._get_state()['owner']

    @property
    def value(self):
        return self._get_state().get('value', 0)


def empty_state():
    return {
        'this': None,
        'caller': None,
        'owner': None,
        'signer': None,
        'value': 0
    }


class Runtime:
    env = {}
    events = []

    # Contract classes known to this process, keyed by the path stored under __code__
    contract_classes = {}

    context = Context(empty_state())

    @classmethod
    def set_up(cls, base_state):
        cls.context._reset()
        cls.context._base_state = base_state
        cls.events = []

    @classmethod
    def clean_up(cls):
        cls.context._reset()
        cls.context._base_state = empty_state()
        cls.env = {}

    @classmethod
    def emit(cls, contract, event, data, indexed=()):
        cls.events.append({
            'contract': contract,
            'event': event,
            'data': dict(data),
            'indexed': list(indexed)
        })

    @classmethod
    @contextmanager
    def savepoint(cls, driver):
        snapshot = driver.snapshot()
        mark = len(cls.events)

        try:
            yield
        except Exception:
            driver.restore(snapshot)
            del cls.events[mark:]
            raise

    @classmethod
    def register_contract_class(cls, contract_class):
        path = '{}.{}'.format(contract_class.__module__, contract_class.__qualname__)
        cls.contract_classes[path] = contract_class
        return path

    @classmethod
    def contract_class(cls, path):
        contract_class = cls.contract_classes.get(path)

        if contract_class is None:
            module_name, _, class_name = path.rpartition('.')
            module = importlib.import_module(module_name)
            contract_class = getattr(module, class_name)
            cls.contract_classes[path] = contract_class

        return contract_class

    @classmethod
    def load_contract(cls, name, driver):
        code = driver.get_contract(name)

        if code is None:
            raise ContractNotFound(contract_name=name)

        return cls.contract_class(code)(name, driver=driver)


rt = Runtime()


class ContractContext(ContextDecorator):
    """
    Pushes a new frame onto the context stack when execution crosses into another contract.
    Inside the frame, ctx.caller is the contract that made the call and ctx.this is the callee.
    """
    def __init__(self, contract):
        self.contract = contract
        self.pushed = False

    def __enter__(self, *args, **kwargs):
        name = self.contract.name

        if rt.context._context_changed(name):
            current_state = rt.context._get_state()

            state = {
                'owner': self.contract.driver.get_owner(name),
                'caller': current_state['this'],
                'signer': current_state['signer'],
                'this': name,
                'value': 0
            }

            self.pushed = rt.context._add_state(state)

            if state['owner'] is not None and state['owner'] != state['caller']:
                rt.context._pop_state()
                self.pushed = False
                raise Unauthorized()

        return self

    def __exit__(self, *args, **kwargs):
        if self.pushed:
            rt.context._pop_state()
            self.pushed = False


def export(func):
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        with ContractContext(self):
            return func(self, *args, **kwargs)

    wrapper.__exported__ = True
    return wrapper


def is_exported(func):
    return getattr(func, '__exported__', False)

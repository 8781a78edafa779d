from nftregistry.db.encoder import encode_kv, decode, make_key
from nftregistry import config
from nftregistry.logger import get_logger
from copy import deepcopy
from datetime import datetime
import decimal

# DB maps bytes to bytes
# Driver maps string to python object
CODE_KEY = config.CODE_KEY
OWNER_KEY = config.OWNER_KEY
TIME_KEY = config.TIME_KEY


class InMemDriver:
    def __init__(self):
        self.db = {}

    def get(self, item: str):
        res = self.db.get(item.encode())
        if res is None:
            return None
        return decode(res)

    def set(self, key: str, value):
        if value is None:
            self.__delitem__(key)
        else:
            k, v = encode_kv(key, value)
            self.db[k] = v

    def delete(self, key: str):
        self.__delitem__(key)

    def iter(self, prefix: str, length=0):
        p = prefix.encode()

        l = []
        for k in sorted(self.db.keys()):
            if k.startswith(p):
                l.append(k.decode())
            if 0 < length <= len(l):
                break

        return l

    def keys(self):
        return sorted([k.decode() for k in self.db.keys()])

    def flush(self):
        self.db.clear()

    def __getitem__(self, item: str):
        value = self.get(item)
        if value is None:
            raise KeyError(item)
        return value

    def __setitem__(self, key: str, value):
        self.set(key, value)

    def __delitem__(self, key: str):
        try:
            del self.db[key.encode()]
        except KeyError:
            pass


class CacheDriver:
    def __init__(self, driver=None):
        self.pending_writes = {}  # L1 cache
        self.pending_reads = {}
        self.driver = driver or InMemDriver()  # L0 cache
        self.log = get_logger('Driver')

    def find(self, key: str):
        # A pending None is a pending delete, so membership is checked instead of the value
        if key in self.pending_writes:
            return self.pending_writes[key]

        return self.driver.get(key)

    def get(self, key: str, save: bool = True):
        value = self.find(key)

        if save and key not in self.pending_reads:
            self.pending_reads[key] = value

        return value

    def set(self, key, value):
        if key not in self.pending_reads:
            self.get(key)

        if type(value) == float:
            value = decimal.Decimal(str(value))

        self.pending_writes[key] = value

    def delete(self, key):
        self.set(key, None)

    # Savepoints let a caller undo everything written after a given moment without touching earlier writes
    def snapshot(self):
        return deepcopy(self.pending_writes), deepcopy(self.pending_reads)

    def restore(self, snapshot):
        writes, reads = snapshot
        self.log.debug('Restoring savepoint, discarding {} writes'.format(
            len(self.pending_writes) - len(writes)
        ))
        self.pending_writes = deepcopy(writes)
        self.pending_reads = deepcopy(reads)

    def commit(self):
        self.log.debug('Committing {} writes'.format(len(self.pending_writes)))

        for k, v in self.pending_writes.items():
            if v is None:
                self.driver.delete(k)
            else:
                self.driver.set(k, v)

        self.pending_writes.clear()
        self.pending_reads = {}

    def rollback(self):
        # Returns to disk state which should be whatever it was prior to any write sessions
        self.log.debug('Rolling back {} writes'.format(len(self.pending_writes)))
        self.pending_reads = {}
        self.pending_writes.clear()

    def clear_pending_state(self):
        self.rollback()


class ContractDriver(CacheDriver):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.delimiter = config.INDEX_SEPARATOR

    def items(self, prefix=''):
        # Get all of the items in the cache currently
        _items = {}
        keys = set()

        for k, v in self.pending_writes.items():
            if k.startswith(prefix):
                keys.add(k)
                if v is not None:
                    _items[k] = v

        # Get all of the keys we need, skipping the ones the cache already answered
        db_keys = set(self.driver.iter(prefix=prefix))

        for k in db_keys - keys:
            _items[k] = self.get(k)

        return _items

    def keys(self, prefix=''):
        return sorted(self.items(prefix).keys())

    def values(self, prefix=''):
        return [v for _, v in sorted(self.items(prefix).items())]

    def make_key(self, contract, variable, args=()):
        return make_key(contract, variable, args)

    def get_var(self, contract, variable, arguments=(), mark=True):
        key = self.make_key(contract, variable, arguments)
        return self.get(key, save=mark)

    def set_var(self, contract, variable, arguments=(), value=None, mark=True):
        key = self.make_key(contract, variable, arguments)
        self.set(key, value)

    def get_contract(self, name):
        return self.get_var(name, CODE_KEY)

    def get_owner(self, name):
        owner = self.get_var(name, OWNER_KEY)
        if owner == '':
            owner = None
        return owner

    def get_time_submitted(self, name):
        return self.get_var(name, TIME_KEY)

    def set_contract(self, name, code, owner=None, timestamp=None):
        if self.get_contract(name) is None:
            if timestamp is None:
                timestamp = datetime.now().isoformat()

            self.set_var(name, CODE_KEY, value=code)
            self.set_var(name, OWNER_KEY, value=owner)
            self.set_var(name, TIME_KEY, value=timestamp)

    def delete_contract(self, name):
        for key in self.keys(name + self.delimiter):
            self.delete(key)

    def get_contract_keys(self, name):
        return self.keys(name + self.delimiter)

    def flush(self):
        self.driver.flush()
        self.clear_pending_state()

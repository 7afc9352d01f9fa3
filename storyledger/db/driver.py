from storyledger.db.encoder import encode, decode, encode_kv, make_key
from storyledger.logger import get_logger
from storyledger import config
from copy import deepcopy
from datetime import datetime
from pathlib import Path
import marshal
import json
import os
import shutil

# DB maps bytes to bytes
# Driver maps string to python object
CODE_KEY = config.CODE_KEY
COMPILED_KEY = config.COMPILED_KEY
OWNER_KEY = config.OWNER_KEY
TIME_KEY = config.TIME_KEY
DEVELOPER_KEY = config.DEVELOPER_KEY

FILE_EXT = '.json'


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


class FSDriver:
    """
    Stores every contract in its own JSON file under ``root``. Keys without a
    contract part land in a shared misc file in the run state directory.
    """
    def __init__(self, root=None):
        self.root = Path(root) if root is not None else config.STORAGE_HOME
        self.log = get_logger('Driver')
        self.log.debug('Using root {}'.format(self.root))
        self.contract_state = self.root.joinpath('contract_state')
        self.run_state = self.root.joinpath('run_state')

        self.__build_directories()

    def __build_directories(self):
        self.contract_state.mkdir(exist_ok=True, parents=True)
        self.run_state.mkdir(exist_ok=True, parents=True)

    def __parse_key(self, key):
        if config.INDEX_SEPARATOR in key:
            filename, _ = key.split(config.INDEX_SEPARATOR, 1)
        else:
            filename = config.MISC_FILENAME

        return filename

    def __filename_to_path(self, filename):
        directory = self.run_state if filename.startswith('__') else self.contract_state
        return directory.joinpath(filename + FILE_EXT)

    def __read(self, filename):
        path = self.__filename_to_path(filename)
        if not path.is_file():
            return {}

        with open(path) as f:
            return json.load(f)

    def __write(self, filename, data):
        path = self.__filename_to_path(filename)

        if not data:
            if path.is_file():
                path.unlink()
            return

        tmp = path.with_suffix('.tmp')
        with open(tmp, 'w') as f:
            json.dump(data, f, sort_keys=True)
        os.replace(tmp, path)

    def __get_files(self):
        names = []
        for directory in (self.contract_state, self.run_state):
            names.extend(p.stem for p in directory.glob('*' + FILE_EXT))
        return sorted(names)

    def __getitem__(self, key):
        return self.get(key)

    def __setitem__(self, key, value):
        self.set(key, value)

    def __delitem__(self, key):
        self.delete(key)

    def get(self, item: str):
        return decode(self.__read(self.__parse_key(item)).get(item))

    def set(self, key, value):
        if value is None:
            self.delete(key)
            return

        filename = self.__parse_key(key)
        data = self.__read(filename)
        data[key] = encode(value)
        self.__write(filename, data)

    def delete(self, key):
        filename = self.__parse_key(key)
        data = self.__read(filename)
        if data.pop(key, None) is not None:
            self.__write(filename, data)

    def flush(self):
        if self.run_state.is_dir():
            shutil.rmtree(self.run_state)
        if self.contract_state.is_dir():
            shutil.rmtree(self.contract_state)

        self.__build_directories()

    def iter(self, prefix='', length=0):
        if config.INDEX_SEPARATOR in prefix:
            keys = [k for k in self.__read(self.__parse_key(prefix)).keys() if k.startswith(prefix)]
        else:
            keys = self.keys(prefix=prefix)

        keys.sort()

        return keys if length == 0 else keys[:length]

    def keys(self, prefix=None):
        keys = []
        for filename in self.__get_files():
            for key in self.__read(filename).keys():
                if not prefix or key.startswith(prefix):
                    keys.append(key)

        keys.sort()
        return keys

    def get_contracts(self):
        return sorted(p.stem for p in self.contract_state.glob('*' + FILE_EXT))


class CacheDriver:
    def __init__(self, driver=None):
        self.pending_writes = {}  # L2 cache
        self.cache = {}  # L1 cache
        self.driver = driver if driver is not None else InMemDriver()  # L0 cache

        self.pending_reads = {}

    def find(self, key: str):
        # Callers get their own copy, mutating it never changes stored state
        if key in self.pending_writes:
            return deepcopy(self.pending_writes[key])

        value = self.cache.get(key)
        if value is not None:
            return deepcopy(value)

        return self.driver.get(key)

    def get(self, key: str, save: bool = True):
        value = self.find(key)

        if save and key not in self.pending_reads:
            self.pending_reads[key] = value

        return value

    def set(self, key, value):
        if key not in self.pending_reads:
            self.get(key)

        self.pending_writes[key] = deepcopy(value)

    def delete(self, key):
        self.set(key, None)

    def checkpoint(self):
        return dict(self.pending_writes), dict(self.pending_reads)

    def revert(self, checkpoint):
        writes, reads = checkpoint
        self.pending_writes = dict(writes)
        self.pending_reads = dict(reads)

    def writes_since(self, checkpoint):
        writes, _ = checkpoint
        return {k: deepcopy(v) for k, v in self.pending_writes.items() if k not in writes or writes[k] != v}

    def commit(self):
        self.cache.update(self.pending_writes)

        for k, v in self.cache.items():
            if v is None:
                self.driver.delete(k)
            else:
                self.driver.set(k, v)

        self.cache.clear()
        self.pending_writes.clear()
        self.pending_reads = {}

    def rollback(self):
        # Returns to disk state which should be whatever it was prior to any write sessions
        self.cache.clear()
        self.pending_reads = {}
        self.pending_writes.clear()

    def clear_pending_state(self):
        self.rollback()


class ContractDriver(CacheDriver):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.delimiter = config.INDEX_SEPARATOR
        self.log = get_logger('Driver')

    def items(self, prefix=''):
        # Get all of the items in the cache currently
        _items = {}
        keys = set()

        for k, v in self.pending_writes.items():
            if k.startswith(prefix):
                keys.add(k)
                if v is not None:
                    _items[k] = v

        for k, v in self.cache.items():
            if k.startswith(prefix) and k not in keys:
                keys.add(k)
                if v is not None:
                    _items[k] = v

        # Get all of the keys we need
        db_keys = set(self.driver.iter(prefix=prefix))

        # Subtract the already gotten keys
        for k in db_keys - keys:
            _items[k] = self.get(k)

        return _items

    def keys(self, prefix=''):
        return sorted(self.items(prefix).keys())

    def values(self, prefix=''):
        return list(self.items(prefix).values())

    def make_key(self, contract, variable, args=[]):
        return make_key(contract, variable, args)

    def get_var(self, contract, variable, arguments=[]):
        key = self.make_key(contract, variable, arguments)
        return self.get(key)

    def set_var(self, contract, variable, arguments=[], value=None):
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

    def get_compiled(self, name):
        return self.get_var(name, COMPILED_KEY)

    def set_contract(self, name, code, code_obj=None, owner=None, overwrite=False, timestamp=None, developer=None):
        if self.get_contract(name) is not None and not overwrite:
            return

        if code_obj is None:
            code_obj = compile(code, name, 'exec')

        if timestamp is None:
            timestamp = datetime.now().isoformat()

        self.set_var(name, CODE_KEY, value=code)
        self.set_var(name, COMPILED_KEY, value=marshal.dumps(code_obj))
        self.set_var(name, OWNER_KEY, value=owner)
        self.set_var(name, TIME_KEY, value=timestamp)
        self.set_var(name, DEVELOPER_KEY, value=developer)

        self.log.debug('Stored contract {}'.format(name))

    def delete_contract(self, name):
        for key in self.keys(name + self.delimiter):
            self.cache.pop(key, None)
            self.pending_writes.pop(key, None)
            self.driver.delete(key)

    def get_contract_keys(self, name):
        return self.keys(name + self.delimiter)

    def get_contracts(self):
        return sorted(k[:-len(self.delimiter + CODE_KEY)] for k in self.keys()
                      if k.endswith(self.delimiter + CODE_KEY))

    def flush(self):
        self.driver.flush()
        self.clear_pending_state()

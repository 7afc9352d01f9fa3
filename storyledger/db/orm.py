from storyledger.db.driver import ContractDriver
from storyledger.exceptions import ReadOnlyState
from storyledger import config


def hash_key_parts(key):
    """
    Splits a hash subscript into the parts stored after the hash name.

    ``owners[1]`` has the single part ``'1'`` and ``allowed['stu', 'colin']``
    has two. Parts are stringified, so ``owners[1]`` and ``owners['1']`` are the
    same entry.
    """
    parts = key if isinstance(key, tuple) else (key,)

    assert len(parts) <= config.MAX_HASH_DIMENSIONS, 'Too many dimensions ({}) for hash. Max is {}'.format(
        len(parts), config.MAX_HASH_DIMENSIONS
    )

    formatted = []
    for part in parts:
        assert not isinstance(part, slice), 'Slices prohibited in hashes.'

        part = str(part)

        assert config.DELIMITER not in part, 'Illegal delimiter in key.'
        assert config.INDEX_SEPARATOR not in part, 'Illegal separator in key.'

        formatted.append(part)

    size = len(config.DELIMITER.join(formatted))
    assert size <= config.MAX_KEY_SIZE, 'Key is too long ({}). Max is {}.'.format(size, config.MAX_KEY_SIZE)

    return formatted


class Datum:
    """
    A piece of state owned by one contract. Its keys all start with
    ``contract.name``. A read-only datum raises ReadOnlyState on writes.
    """
    def __init__(self, contract, name, driver: ContractDriver, read_only=False):
        self.contract = contract
        self.name = name
        self.read_only = read_only

        self._driver = driver
        self._key = driver.make_key(contract, name)

    def _write(self, key, value):
        if self.read_only:
            raise ReadOnlyState(key=key)

        self._driver.set(key, value)


class Variable(Datum):
    def __init__(self, contract, name, driver: ContractDriver, t=None, read_only=False):
        super().__init__(contract, name, driver, read_only=read_only)

        self._type = t if isinstance(t, type) else None

    def set(self, value):
        if self._type is not None:
            assert isinstance(value, self._type), 'Variable {} holds {}, got {}.'.format(
                self._key, self._type.__name__, type(value).__name__
            )

        self._write(self._key, value)

    def get(self):
        return self._driver.get(self._key)


class Hash(Datum):
    def __init__(self, contract, name, driver: ContractDriver, default_value=None, read_only=False):
        super().__init__(contract, name, driver, read_only=read_only)

        self._default_value = default_value

    def _item_key(self, key):
        return self._driver.make_key(self.contract, self.name, hash_key_parts(key))

    def all(self, *args):
        if args:
            prefix = self._item_key(args)
        else:
            prefix = self._key

        return self._driver.values(prefix=prefix + config.DELIMITER)

    def __setitem__(self, key, value):
        self._write(self._item_key(key), value)

    def __getitem__(self, key):
        value = self._driver.get(self._item_key(key))

        # Missing entries read as the default, like a defaultdict
        if value is None:
            return self._default_value

        return value

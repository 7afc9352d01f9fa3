class Context:
    def __init__(self, base_state):
        self._base_state = base_state

    def _get_state(self):
        return self._base_state

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


EMPTY_STATE = {
    'this': None,
    'caller': None,
    'owner': None,
    'signer': None
}

_context = Context(dict(EMPTY_STATE))


class Runtime:
    loaded_modules = []

    env = {}

    context = _context

    @classmethod
    def set_up(cls, base_state):
        cls.context._base_state = base_state

    @classmethod
    def clean_up(cls):
        cls.context._base_state = dict(EMPTY_STATE)

        cls.loaded_modules = []

        driver = cls.env.get('__Driver')
        cls.env = {}
        if driver is not None:
            cls.env['__Driver'] = driver


rt = Runtime()

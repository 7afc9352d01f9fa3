import os
from pathlib import Path

STORAGE_HOME = Path(os.getenv('STORYLEDGER_HOME', Path.home().joinpath('.storyledger')))

DELIMITER = ':'
INDEX_SEPARATOR = '.'
MISC_FILENAME = '__misc'

CODE_KEY = '__code__'
COMPILED_KEY = '__compiled__'
OWNER_KEY = '__owner__'
TIME_KEY = '__submitted__'
DEVELOPER_KEY = '__developer__'

PRIVATE_METHOD_PREFIX = '__'
EXPORT_DECORATOR_STRING = 'export'
INIT_DECORATOR_STRING = 'construct'
INIT_FUNC_NAME = '__{}'.format(PRIVATE_METHOD_PREFIX)
VALID_DECORATORS = {EXPORT_DECORATOR_STRING, INIT_DECORATOR_STRING}

ORM_CLASS_NAMES = {'Variable', 'Hash'}

MAX_HASH_DIMENSIONS = 16
MAX_KEY_SIZE = 1024

# Used when stdlib_list does not know the running interpreter yet
STDLIB_FALLBACK_VERSION = '3.11'

DEFAULT_MINT_CAPACITY = 1000
STORY_NFT_NAME = 'story_nft'

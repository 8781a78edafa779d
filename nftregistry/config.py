import os

DELIMITER = ':'
INDEX_SEPARATOR = '.'

CODE_KEY = '__code__'
OWNER_KEY = '__owner__'
TIME_KEY = '__submitted__'

PRIVATE_METHOD_PREFIX = '_'
INIT_FUNC_NAME = 'construct'

# Max depth of nested contract calls, including receiver callbacks
RECURSION_LIMIT = int(os.getenv('RECURSION_LIMIT', 1024))

MAX_HASH_DIMENSIONS = 16
MAX_KEY_SIZE = 1024

# The null account means "unminted" or "no delegate". It is never a valid actor.
NULL_ACCOUNT = '0x' + '0' * 40

# Value a receiver hook must return to accept a token
RECEIVER_HOOK = 'on_receive'
RECEIVER_MAGIC = bytes.fromhex('150b7a02')

INTERFACE_IDS = {
    'introspection': bytes.fromhex('01ffc9a7'),
    'ownership': bytes.fromhex('80ac58cd'),
    'metadata': bytes.fromhex('5b5e139f'),
}

DEFAULT_MINT_PRICE = int(os.getenv('DEFAULT_MINT_PRICE', 0))
DEFAULT_MINT_LIMIT = int(os.getenv('DEFAULT_MINT_LIMIT', 10000))

WEB_SERVER_HOST = os.getenv('WEB_SERVER_HOST', '0.0.0.0')
WEB_SERVER_PORT = int(os.getenv('WEB_SERVER_PORT', 8080))
NUM_WORKERS = int(os.getenv('NUM_WORKERS', 1))

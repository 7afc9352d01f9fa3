from storyledger.exceptions import (
    Unauthorized, NotFound, MintLimitReached, InvalidMetadata,
    NotTokenOwner, SelfTransfer, TokenDoesNotExist
)

# Ledger failures a contract may raise. The executor reports their codes to the caller.
exports = {
    'Unauthorized': Unauthorized,
    'NotFound': NotFound,
    'MintLimitReached': MintLimitReached,
    'InvalidMetadata': InvalidMetadata,
    'NotTokenOwner': NotTokenOwner,
    'SelfTransfer': SelfTransfer,
    'TokenDoesNotExist': TokenDoesNotExist,
}

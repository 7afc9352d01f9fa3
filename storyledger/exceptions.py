class ContractingError(Exception):
    """
    The base exception for storyledger. The fmt directive
    will be overloaded by the inheriting classes

    :ivar msg: The message associated with the error
    """
    fmt = 'An unspecified error occurred'

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs


class ContractExists(ContractingError):
    """
    When attempting to set a contract, found that it
    already exists in the database

    :ivar contract_name: The name of the contract
                         submitted.
    """
    fmt = "Contract with name '{contract_name}' already exists in the database"


class ContractNotFound(ContractingError):
    fmt = "Contract '{contract_name}' does not exist"


class CompilationException(Exception):
    def __init__(self, violations):
        super().__init__('\n'.join(violations))
        self.violations = violations


class LedgerError(ContractingError):
    """
    Base for the failures a ledger contract returns to its caller. Every
    subclass carries the numeric code that callers match on.

    :ivar code: Stable numeric error code
    """
    code = None


class Unauthorized(LedgerError):
    code = 403
    fmt = "Caller '{caller}' is not authorized to {action}"


class NotFound(LedgerError):
    code = 404
    fmt = "Token {token_id} does not exist"


class MintLimitReached(LedgerError):
    code = 405
    fmt = "Mint capacity of {capacity} tokens reached"


class InvalidMetadata(LedgerError):
    code = 406
    fmt = "Invalid {field}: must be a non-empty string of at most {max_length} characters"


class TransferRejected(LedgerError):
    """
    Raised by the ownership move itself, after the caller check passed.
    """
    fmt = "Transfer of token {token_id} rejected"


class NotTokenOwner(TransferRejected):
    code = 1
    fmt = "'{sender}' does not own token {token_id}"


class SelfTransfer(TransferRejected):
    code = 2
    fmt = "Token {token_id} is already owned by '{sender}'"


class TokenDoesNotExist(TransferRejected):
    code = 3
    fmt = "Token {token_id} does not exist"


class ReadOnlyState(ContractingError):
    """
    Raised when state handed out for inspection is written to. Contract
    state only changes through contract calls.

    :ivar key: The storage key of the write
    """
    fmt = "State '{key}' is read-only"

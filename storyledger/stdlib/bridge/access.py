from storyledger.execution.runtime import rt
from typing import Any


class CallContext:
    """
    What a contract sees as ``ctx``. Every property reads the identities of
    the call in progress from the runtime, so nothing is remembered between calls.

    caller: the identity that signed this call, and the one guards compare against
    signer: same as caller, since contracts never call each other
    this: the name of the contract being run
    owner: the contract owner, or None when anyone may call it
    """
    @property
    def caller(self):
        return rt.context.caller

    @property
    def signer(self):
        return rt.context.signer

    @property
    def this(self):
        return rt.context.this

    @property
    def owner(self):
        return rt.context.owner


exports = {
    'ctx': CallContext(),
    'Any': Any
}

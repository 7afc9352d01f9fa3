from storyledger.db.orm import Variable, Hash
from storyledger.execution.runtime import rt


def executing_contract(contract=None):
    # State declared by contract code always belongs to the contract being run
    this = rt.context.this
    assert contract is None or contract == this, "Contract '{}' cannot declare state of '{}'.".format(this, contract)
    return this


def state_driver():
    return rt.env['__Driver']


class ContractVariable(Variable):
    def __init__(self, contract=None, name=None, t=None):
        assert name is not None, 'Variable must be assigned to a name.'
        super().__init__(executing_contract(contract), name, state_driver(), t=t)


class ContractHash(Hash):
    def __init__(self, contract=None, name=None, default_value=None):
        assert name is not None, 'Hash must be assigned to a name.'
        super().__init__(executing_contract(contract), name, state_driver(), default_value=default_value)


exports = {
    'Variable': ContractVariable,
    'Hash': ContractHash,
}

import importlib.util
from importlib.abc import Loader
from importlib.machinery import ModuleSpec
import marshal

from storyledger.stdlib import env
from storyledger.execution.runtime import rt
from storyledger.exceptions import ContractNotFound

# Contracts are never installed on sys.path. A fresh module is built from the compiled code in the database for every
# call, so no state other than what lives in the driver survives between calls.


class DatabaseLoader(Loader):
    def __init__(self, d):
        self.d = d

    def create_module(self, spec):
        return None

    def exec_module(self, module):
        # fetch the individual contract
        code = self.d.get_compiled(module.__name__)
        if code is None:
            raise ContractNotFound(contract_name=module.__name__)

        if type(code) != bytes:
            code = bytes.fromhex(code)

        code = marshal.loads(code)

        scope = env.gather()
        scope.update(rt.env)

        scope.update({'__contract__': True})

        # execute the module with the std env and update the module to pass forward
        exec(code, scope)

        # Update the module's attributes with the new scope
        vars(module).update(scope)
        del vars(module)['__builtins__']

        rt.loaded_modules.append(module.__name__)


def load_contract(name, driver):
    spec = ModuleSpec(name, DatabaseLoader(driver))
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module

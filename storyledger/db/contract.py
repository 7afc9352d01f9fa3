from storyledger.compilation.compiler import ContractingCompiler
from storyledger.db.driver import ContractDriver
from storyledger.execution.runtime import rt
from storyledger.exceptions import ContractExists
from storyledger.stdlib import env
from storyledger import config


class Contract:
    def __init__(self, driver: ContractDriver=None):
        self._driver = driver or rt.env.get('__Driver') or ContractDriver()

    def submit(self, name, code, owner=None, constructor_args=None, developer=None):
        assert name.isidentifier() and not name.startswith('_'), 'Invalid contract name {}.'.format(name)

        if self._driver.get_contract(name) is not None:
            raise ContractExists(contract_name=name)

        c = ContractingCompiler(module_name=name)

        tree = c.parse(code, lint=True)
        code_obj = compile(tree, name, 'exec')

        scope = env.gather()
        scope.update({'__contract__': True})
        scope.update(rt.env)

        exec(code_obj, scope)

        if scope.get(config.INIT_FUNC_NAME) is not None:
            scope[config.INIT_FUNC_NAME](**(constructor_args or {}))

        self._driver.set_contract(name=name, code=c.to_source(tree), code_obj=code_obj, owner=owner,
                                  developer=developer)

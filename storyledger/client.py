from storyledger.execution.executor import Executor
from storyledger.db.driver import ContractDriver
from storyledger.compilation.compiler import ContractingCompiler
from storyledger.logger import get_logger
from functools import partial
import ast
import inspect
import astor
import autopep8
from types import FunctionType
import os

from . import config

from .db.orm import Variable
from .db.orm import Hash

STORY_NFT_FILENAME = os.path.join(os.path.dirname(__file__), 'contracts', 'story_nft.s.py')

log = get_logger('Ledger.Client')


class AbstractContract:
    def __init__(self, name, signer, environment, executor: Executor, funcs):
        self.name = name
        self.signer = signer
        self.environment = environment
        self.executor = executor
        self.functions = funcs

        # set up virtual functions
        for f in funcs:
            # unpack tuple packed in ContractingClient
            func, kwargs = f

            # set the kwargs to None. these will fail if they are not provided
            default_kwargs = {}
            for kwarg in kwargs:
                default_kwargs[kwarg] = None

            # each function is a partial that allows kwarg overloading and overriding
            setattr(self, func, partial(self._abstract_function_call,
                                        signer=self.signer,
                                        contract_name=self.name,
                                        executor=self.executor,
                                        func=func,
                                        environment=self.environment,
                                        **default_kwargs))

    def keys(self):
        return self.executor.driver.get_contract_keys(self.name)

    # a variable contains a DOT, but no __, and no :
    # a hash contains a DOT, no __, and a :
    # a constant contains __, a DOT, and :

    def quick_read(self, variable, key=None, args=None):
        a = []

        if key is not None:
            a.append(key)

        if args is not None and isinstance(args, list):
            for arg in args:
                a.append(arg)

        k = self.executor.driver.make_key(contract=self.name, variable=variable, args=a)
        return self.executor.driver.get(k)

    def __getattr__(self, item):
        # Only called when normal lookup fails, so resolve it against the contract state.
        # State is handed out read-only, writes go through the exported functions.
        if item.startswith('__'):
            raise AttributeError(item)

        # full name is contract.item
        fullname = '{}{}{}'.format(self.name, config.INDEX_SEPARATOR, item)

        # if the raw name exists, it is a variable
        if fullname in self.keys():
            return Variable(contract=self.name, name=item, driver=self.executor.driver, read_only=True)

        # otherwise, see if contract.item: has more than one entry
        if len(self.executor.driver.values(prefix=fullname + config.DELIMITER)) > 0:

            # if so, it is a hash. return the hash object
            return Hash(contract=self.name, name=item, driver=self.executor.driver, read_only=True)

        # otherwise, the attribute does not exist, so throw the error.
        raise AttributeError("'{}' has no function or variable '{}'".format(self.name, item))

    def _abstract_function_call(self, signer, executor, contract_name, environment, func, **kwargs):
        output = executor.execute(sender=signer,
                                  contract_name=contract_name,
                                  function_name=func,
                                  kwargs=kwargs,
                                  environment=environment)

        if output['status_code'] == 1:
            raise output['result']

        return output['result']


class ContractingClient:
    def __init__(self, signer='sys', driver=None, compiler=None, environment=None):

        self.raw_driver = driver if driver is not None else ContractDriver()
        self.executor = Executor(driver=self.raw_driver)
        self.signer = signer
        self.compiler = compiler or ContractingCompiler()
        self.environment = environment or {}

    def flush(self):
        self.raw_driver.flush()

    # Returns abstract contract which has partial methods mapped to each exported function.
    def get_contract(self, name):
        contract = self.raw_driver.get_contract(name)

        if contract is None:
            return None

        tree = ast.parse(contract)

        function_defs = [n for n in tree.body if isinstance(n, ast.FunctionDef)]

        funcs = []
        for definition in function_defs:
            func_name = definition.name

            # private and constructor methods are never callable from outside
            if func_name.startswith(config.PRIVATE_METHOD_PREFIX):
                continue

            kwargs = [arg.arg for arg in definition.args.args]

            funcs.append((func_name, kwargs))

        return AbstractContract(name=name,
                                signer=self.signer,
                                environment=self.environment,
                                executor=self.executor,
                                funcs=funcs)

    def closure_to_code_string(self, f):
        closure_code = inspect.getsource(f)
        closure_code = autopep8.fix_code(closure_code)
        closure_tree = ast.parse(closure_code)

        # Remove the enclosing function by swapping out the function def node with its children
        assert len(closure_tree.body) == 1, 'Module has multiple body nodes.'
        assert isinstance(closure_tree.body[0], ast.FunctionDef), 'Function definition not found at root.'

        func_def_body = closure_tree.body[0]
        closure_tree.body = func_def_body.body

        contract_code = astor.to_source(closure_tree)
        name = func_def_body.name

        return contract_code, name

    def lint(self, f, raise_errors=False):
        if isinstance(f, FunctionType):
            f, _ = self.closure_to_code_string(f)

        tree = ast.parse(f)
        violations = self.compiler.linter.check(tree)

        if violations is None:
            return None
        else:
            if raise_errors:
                for v in violations:
                    raise Exception(v)
            else:
                return violations

    def compile(self, f):
        if isinstance(f, FunctionType):
            f, _ = self.closure_to_code_string(f)

        code = self.compiler.parse_to_code(f)
        return code

    def submit(self, f, name=None, owner=None, constructor_args=None, signer=None):

        if isinstance(f, FunctionType):
            f, n = self.closure_to_code_string(f)
            if name is None:
                name = n

        assert name is not None, 'No name provided.'

        output = self.executor.submit(sender=signer or self.signer,
                                      name=name,
                                      code=f,
                                      owner=owner,
                                      constructor_args=constructor_args,
                                      environment=self.environment)

        if output['status_code'] == 1:
            raise output['result']

        log.debug('Submitted contract {}'.format(name))

        return self.get_contract(name)

    def submit_file(self, filename, name=None, owner=None, constructor_args=None, signer=None):
        if name is None:
            # story_nft.s.py -> story_nft
            name = os.path.basename(filename).split('.')[0]

        with open(filename) as f:
            code = f.read()

        return self.submit(code, name=name, owner=owner, constructor_args=constructor_args, signer=signer)

    def submit_story_nft(self, capacity=config.DEFAULT_MINT_CAPACITY, signer=None, name=config.STORY_NFT_NAME):
        return self.submit_file(STORY_NFT_FILENAME, name=name, constructor_args={'capacity': capacity},
                                signer=signer)

    def get_contracts(self):
        return self.raw_driver.get_contracts()

    def get_var(self, contract, variable, arguments=[]):
        return self.raw_driver.get_var(contract, variable, arguments)

    def set_var(self, contract, variable, arguments=[], value=None):
        """
        Writes straight into the driver, skipping every contract guard. Meant for
        operators seeding or repairing state, never for ledger users.
        """
        log.warning('Operator write to {} bypasses contract checks'.format(
            self.raw_driver.make_key(contract, variable, arguments)))
        self.raw_driver.set_var(contract, variable, arguments, value)

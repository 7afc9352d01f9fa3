from unittest import TestCase
from storyledger.compilation.compiler import ContractingCompiler
from storyledger.exceptions import CompilationException
import ast


CONTRACT = '''
counter = Variable()

@construct
def seed(start: int = 0):
    counter.set(start)

def bump(amount):
    return counter.get() + amount

@export
def increment(amount: int):
    counter.set(bump(amount))
    return counter.get()
'''


class TestCompiler(TestCase):
    def setUp(self):
        self.c = ContractingCompiler(module_name='counter_contract')

    def function_names(self, tree):
        return [n.name for n in tree.body if isinstance(n, ast.FunctionDef)]

    def test_export_keeps_name_and_drops_decorator(self):
        tree = self.c.parse(CONTRACT)

        increment = [n for n in tree.body if isinstance(n, ast.FunctionDef) and n.name == 'increment'][0]

        self.assertEqual(increment.decorator_list, [])

    def test_constructor_renamed(self):
        tree = self.c.parse(CONTRACT)

        self.assertIn('____', self.function_names(tree))
        self.assertNotIn('seed', self.function_names(tree))

    def test_private_function_privatized(self):
        tree = self.c.parse(CONTRACT)

        self.assertIn('__bump', self.function_names(tree))
        self.assertNotIn('bump', self.function_names(tree))

    def test_private_function_calls_rewritten(self):
        code = self.c.parse_to_code(CONTRACT)

        self.assertIn('__bump(amount)', code)
        self.assertNotIn(' bump(', code)

    def test_orm_assignment_gets_contract_and_name(self):
        tree = self.c.parse(CONTRACT)

        assign = tree.body[0]
        keywords = {k.arg: k.value.value for k in assign.value.keywords}

        self.assertEqual(keywords, {'contract': 'counter_contract', 'name': 'counter'})

    def test_parse_to_code_is_valid_python(self):
        code = self.c.parse_to_code(CONTRACT)

        compile(code, 'counter_contract', 'exec')

    def test_lint_failure_raises(self):
        with self.assertRaises(CompilationException) as e:
            self.c.parse('def a():\n    pass\n')

        self.assertIn('Line 0: S13- No valid contracting decorator found', e.exception.violations)

    def test_lint_can_be_skipped(self):
        tree = self.c.parse('def a():\n    pass\n', lint=False)

        self.assertEqual(self.function_names(tree), ['__a'])

    def test_privatize(self):
        self.assertEqual(ContractingCompiler.privatize('thing'), '__thing')

    def test_compiled_tree_runs(self):
        tree = self.c.parse(CONTRACT)
        code = compile(tree, 'counter_contract', 'exec')

        calls = []

        class FakeVariable:
            def __init__(self, contract, name):
                calls.append((contract, name))
                self.value = None

            def set(self, value):
                self.value = value

            def get(self):
                return self.value

        scope = {'Variable': FakeVariable}
        exec(code, scope)

        scope['____'](start=5)

        self.assertEqual(scope['increment'](amount=2), 7)
        self.assertEqual(calls, [('counter_contract', 'counter')])

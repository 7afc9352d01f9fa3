import ast
import sys

from stdlib_list import stdlib_list

from .. import config
from ..logger import get_logger
from ..compilation.whitelists import ALLOWED_AST_TYPES, ALLOWED_ANNOTATION_TYPES, VIOLATION_TRIGGERS, ILLEGAL_BUILTINS


def stdlib_modules():
    version = '{}.{}'.format(sys.version_info.major, sys.version_info.minor)
    try:
        return set(stdlib_list(version))
    except ValueError:
        return set(stdlib_list(config.STDLIB_FALLBACK_VERSION))


class Linter(ast.NodeVisitor):

    def __init__(self):
        self.log = get_logger('Ledger.Linter')
        self._violations = []
        self._is_one_export = False
        self._is_success = True
        self._constructor_visited = False
        self.orm_names = set()
        self.orm_declarations = set()
        self.visited_args = set()
        self.return_annotation = set()
        self.arg_types = set()

        self.builtins = stdlib_modules()

    def _violation(self, lnum, trigger, detail=None):
        s = "Line {}: {}".format(lnum, VIOLATION_TRIGGERS[trigger])
        if detail is not None:
            s += " : {}".format(detail)
        self._violations.append(s)
        self._is_success = False

    def ast_types(self, t, lnum):
        if type(t) not in ALLOWED_AST_TYPES:
            self._violation(lnum, 0, type(t).__name__)

    def not_system_variable(self, v, lnum):
        if v.startswith('_'):
            self._violation(lnum, 1, v)

    def no_nested_imports(self, node):
        for item in ast.walk(node):
            if type(item) in [ast.ImportFrom, ast.Import]:
                self._violation(node.lineno, 2)
                break

    def visit(self, node):
        self.ast_types(node, getattr(node, 'lineno', 0))
        return super().visit(node)

    def visit_Name(self, node):
        self.not_system_variable(node.id, node.lineno)
        # Referencing is enough to misuse a builtin, e.g. `raise SystemExit`
        if node.id in ILLEGAL_BUILTINS:
            self._violation(node.lineno, 13, node.id)
        self.generic_visit(node)
        return node

    def visit_Attribute(self, node):
        self.not_system_variable(node.attr, node.lineno)
        self.generic_visit(node)
        return node

    def visit_Import(self, node):
        for n in node.names:
            if n.name.split('.')[0] in self.builtins:
                self._violation(node.lineno, 13, n.name)
            else:
                self._violation(node.lineno, 4, n.name)
        return node

    def visit_ImportFrom(self, node):
        self._violation(node.lineno, 3)

    def visit_ClassDef(self, node):
        self._violation(node.lineno, 5)
        self.generic_visit(node)
        return node

    def visit_AsyncFunctionDef(self, node):
        self._violation(node.lineno, 6)
        self.generic_visit(node)
        return node

    def visit_Assign(self, node):
        if isinstance(node.value, ast.Call) and isinstance(node.value.func, ast.Name) and \
                node.value.func.id in config.ORM_CLASS_NAMES:
            kwargs = [k.arg for k in node.value.keywords]
            if node.value.args or 'contract' in kwargs or 'name' in kwargs:
                self._violation(node.lineno, 10)

            if len(node.targets) > 1 or not isinstance(node.targets[0], ast.Name):
                self._violation(node.lineno, 11)
            else:
                self.orm_names.add(node.targets[0].id)
                self.orm_declarations.add(node.value)

        self.generic_visit(node)

        return node

    def visit_Call(self, node):
        # Contract state is only declared as `name = Variable()` or `name = Hash()`
        if isinstance(node.func, ast.Name) and node.func.id in config.ORM_CLASS_NAMES and \
                node not in self.orm_declarations:
            self._violation(node.lineno, 18, node.func.id)

        self.generic_visit(node)
        return node

    def visit_FunctionDef(self, node):
        self.no_nested_imports(node)

        # Only allow 1 decorator per function definition.
        if len(node.decorator_list) > 1:
            self._violation(node.lineno, 9, "Detected: {} MAX limit: 1".format(len(node.decorator_list)))

        export_decorator = False
        for d in node.decorator_list:
            name = d.id if isinstance(d, ast.Name) else None

            # Only allow decorators from the allowed set.
            if name not in config.VALID_DECORATORS:
                self._violation(node.lineno, 7, "valid list: {}".format(sorted(config.VALID_DECORATORS)))

            if name == config.EXPORT_DECORATOR_STRING:
                self._is_one_export = True
                export_decorator = True

            if name == config.INIT_DECORATOR_STRING:
                if self._constructor_visited:
                    self._violation(node.lineno, 8)
                self._constructor_visited = True

        # Add argument names to set to make sure that no ORM variable names are being reused in function def args
        for a in node.args.args:
            self.visited_args.add((a.arg, node.lineno))
            if export_decorator:
                if isinstance(a.annotation, ast.Name):
                    self.arg_types.add((a.annotation.id, node.lineno))
                elif a.annotation is not None:
                    self.arg_types.add((ast.dump(a.annotation), node.lineno))
                else:
                    self.arg_types.add((None, node.lineno))

        if export_decorator and node.returns is not None:
            self.return_annotation.add((getattr(node.returns, 'id', ast.dump(node.returns)), node.lineno))

        # Decorators and annotations are checked above, visit only the body
        for item in node.body:
            self.visit(item)
        for default in node.args.defaults:
            self.visit(default)

        return node

    def annotation_types(self, t, lnum):
        if t is None:
            self._violation(lnum, 16)
        elif t not in ALLOWED_ANNOTATION_TYPES:
            self._violation(lnum, 15, t)

    def check_return_types(self, t, lnum):
        if t is not None:
            self._violation(lnum, 17, t)

    def _reset(self):
        self._violations = []
        self._is_one_export = False
        self._is_success = True
        self._constructor_visited = False
        self.orm_names = set()
        self.orm_declarations = set()
        self.visited_args = set()
        self.return_annotation = set()
        self.arg_types = set()

    def _final_checks(self):
        for name, lineno in sorted(self.visited_args):
            if name in self.orm_names:
                self._violation(lineno, 14, name)

        if not self._is_one_export:
            self._violation(0, 12)

        for t, lineno in sorted(self.arg_types, key=lambda a: (a[1], str(a[0]))):
            self.annotation_types(t, lineno)

        for t, lineno in sorted(self.return_annotation, key=lambda a: (a[1], str(a[0]))):
            self.check_return_types(t, lineno)

    def check(self, ast_tree):
        self._reset()
        self.visit(ast_tree)
        self._final_checks()
        if self._is_success is False:
            self.log.debug('Lint failed with {} violation(s)'.format(len(self._violations)))
            return self._violations
        else:
            return None

"""Small builders for the AST nodes of generated model modules.

The generators assemble modules from ``ast`` nodes and unparse them at the
end; these helpers keep that code short. :class:`ImportCollector` gathers
the ``from X import Y`` statements a module needs while its classes are
being built.
"""

import ast
import functools
from collections import defaultdict
from collections.abc import Iterable

__all__ = [
    # AST helpers
    '_name',
    '_attr',
    '_subscript',
    '_union_expr',
    '_assign',
    '_call',
    '_all',
    '_docstring',
    # Import collection
    'ImportCollector',
]


def _name(name: str, store: bool = False) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Store() if store else ast.Load())


def _attr(owner: str | ast.expr, attr: str) -> ast.Attribute:
    """``owner.attr``; a string owner is turned into a name."""
    if isinstance(owner, str):
        owner = _name(owner)
    return ast.Attribute(value=owner, attr=attr, ctx=ast.Load())


def _subscript(generic: str, inner: ast.expr) -> ast.Subscript:
    """``generic[inner]``, e.g. ``list[Receipt]``."""
    return ast.Subscript(value=_name(generic), slice=inner, ctx=ast.Load())


def _union_expr(members: list[ast.expr]) -> ast.expr:
    """Join annotations with ``|``, left to right."""
    if not members:
        raise ValueError('a union needs at least one member')
    return functools.reduce(
        lambda left, right: ast.BinOp(left=left, op=ast.BitOr(), right=right),
        members,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # names on the left-hand side need a Store context
    if isinstance(target, ast.Name) and not isinstance(target.ctx, ast.Store):
        target = _name(target.id, store=True)
    return ast.Assign(targets=[target], value=value)


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(func=func, args=list(args or ()), keywords=list(keywords or ()))


def _all(names: Iterable[str]) -> ast.Assign:
    """``__all__ = ('A', 'B')``."""
    exported = ast.Tuple(elts=[ast.Constant(value=n) for n in names], ctx=ast.Load())
    return _assign(_name('__all__', store=True), exported)


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


# =============================================================================
# Import Collection
# =============================================================================


class ImportCollector:
    """Accumulates the imports of one generated module.

    Names from ``builtins`` are dropped. Statements are rendered one per
    module, modules and names sorted, with ``__future__`` leading.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_import('pydantic', 'BaseModel')
        >>> collector.add_imports({'typing': {'Any', 'Literal'}})
        >>> statements = collector.to_ast()
    """

    def __init__(self):
        self._imports: defaultdict[str, set[str]] = defaultdict(set)

    def add_import(self, module: str, name: str) -> None:
        if module != 'builtins':
            self._imports[module].add(name)

    def add_imports(self, imports: dict[str, set[str]]) -> None:
        for module, names in imports.items():
            for name in names:
                self.add_import(module, name)

    def to_ast(self) -> list[ast.ImportFrom]:
        """Render the collected imports as ``ImportFrom`` statements."""
        ordered = sorted(self._imports, key=lambda module: (module != '__future__', module))
        return [
            ast.ImportFrom(
                module=module,
                names=[ast.alias(name=name) for name in sorted(self._imports[module])],
                level=0,
            )
            for module in ordered
        ]

"""Code generators that turn isolated documents into source text.

The splitter only relies on :class:`CodeGenerator`; any target language can
be plugged in by implementing :meth:`CodeGenerator.generate`. The bundled
:class:`PydanticModelGenerator` emits a Python module of pydantic models.
"""

import ast
import logging
from abc import ABC, abstractmethod

from splitapi.codegen.ast_utils import _all, _attr, _call, _docstring
from splitapi.codegen.types import ModelBuilder
from splitapi.config import CodegenOptions, TypeStyle
from splitapi.exceptions import CodeGenerationError
from splitapi.splitting.closure import IsolatedDocument
from splitapi.splitting.grouper import DEFAULT_SEPARATOR

logger = logging.getLogger(__name__)

__all__ = ['CodeGenerator', 'PydanticModelGenerator']


class CodeGenerator(ABC):
    """Abstract base class for code generators.

    A generator receives a self-contained document: every reference in it
    either points at one of its own definitions or at a name the source
    document never defined.
    """

    file_extension: str = 'py'

    @abstractmethod
    def generate(self, document: IsolatedDocument, module_name: str) -> str:
        """Generate the source text for one isolated document.

        Args:
            document: The isolated document of one group.
            module_name: File-system-safe name derived from the group key.

        Returns:
            The generated source code.

        Raises:
            CodeGenerationError: If the document cannot be emitted.
        """
        pass


class PydanticModelGenerator(CodeGenerator):
    """Generates a Python module of pydantic models (or TypedDicts).

    Example:
        >>> generator = PydanticModelGenerator(CodegenOptions(generate_clone_method=True))
        >>> source = generator.generate(document, 'Corax.Core.Inbound')
    """

    file_extension = 'py'

    def __init__(
        self,
        options: CodegenOptions | None = None,
        separator: str = DEFAULT_SEPARATOR,
    ):
        """Initialize the generator.

        Args:
            options: Rendering options; defaults to ``CodegenOptions()``.
            separator: Namespace separator used to shorten class names.
        """
        self.options = options or CodegenOptions()
        self.separator = separator

    def generate(self, document: IsolatedDocument, module_name: str) -> str:
        try:
            source = self._render(document, module_name)
        except CodeGenerationError:
            raise
        except Exception as e:
            raise CodeGenerationError(
                'Failed to generate models', group=document.key, cause=e
            )

        self._validate_python_syntax(source, module_name, document.key)
        logger.debug(
            f"Generated {len(document)} definitions for group '{document.key}'"
        )
        return source

    def build_module(self, document: IsolatedDocument, module_name: str) -> ast.Module:
        """Build the module AST for a document."""
        builder = ModelBuilder(document, self.options, separator=self.separator)
        builder.imports.add_import('__future__', 'annotations')
        definitions = builder.build()

        body: list[ast.stmt] = [
            _docstring(self._module_docstring(document, module_name)),
            *builder.imports.to_ast(),
        ]
        if builder.exported:
            body.append(_all(builder.exported))
        body.extend(definitions)

        if self.options.type_style == TypeStyle.MODEL:
            body.extend(
                ast.Expr(value=_call(_attr(name, 'model_rebuild')))
                for name in builder.models
            )

        mod = ast.Module(body=body, type_ignores=[])
        ast.fix_missing_locations(mod)
        return mod

    def _render(self, document: IsolatedDocument, module_name: str) -> str:
        return ast.unparse(self.build_module(document, module_name)) + '\n'

    @staticmethod
    def _module_docstring(document: IsolatedDocument, module_name: str) -> str:
        lines = [
            f'Models for {document.key} ({document.info.title} {document.info.version}).',
            '',
            f'Generated by splitapi as {module_name}. Do not edit by hand.',
        ]
        if document.dependencies:
            lines.append('')
            lines.append('Includes definitions from other namespaces:')
            lines.extend(f'    {name}' for name in document.dependencies)
        return '\n'.join(lines)

    @staticmethod
    def _validate_python_syntax(source: str, module_name: str, group: str) -> None:
        try:
            compile(source, f'{module_name}.py', 'exec')
        except SyntaxError as e:
            raise CodeGenerationError(
                'Generated code is not valid Python', group=group, cause=e
            )

"""Type translation for SplitAPI code generation.

This module provides:
- Type, the annotation of a schema node plus the imports it needs
- ModelBuilder, which turns the definitions of an isolated document into
  class definitions (pydantic models, TypedDicts, enums and root models)
"""

import ast
import dataclasses
import keyword
import logging
import re
from collections import Counter
from collections.abc import Iterable
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal, NotRequired, TypedDict
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, RootModel

from splitapi.codegen.ast_utils import (
    ImportCollector,
    _assign,
    _attr,
    _call,
    _docstring,
    _name,
    _subscript,
    _union_expr,
)
from splitapi.codegen.utils import (
    remove_accents,
    sanitize_identifier,
    sanitize_parameter_field_name,
)
from splitapi.config import CodegenOptions, DateTimeType, NullValue, TypeStyle
from splitapi.schema.models import SchemaNode
from splitapi.splitting.closure import IsolatedDocument
from splitapi.splitting.references import extract_reference_name

logger = logging.getLogger(__name__)

__all__ = ['Type', 'ModelBuilder']

_PRIMITIVE_TYPE_MAP = {
    ('string', None): str,
    ('string', 'date-time'): datetime,
    ('string', 'date'): date,
    ('string', 'uuid'): UUID,
    ('string', 'binary'): bytes,
    ('integer', None): int,
    ('number', None): float,
    ('boolean', None): bool,
    ('file', None): bytes,
}

# Names the generated module imports; definitions must not shadow them.
_RESERVED_NAMES = {
    'annotations',
    'Any',
    'BaseModel',
    'ConfigDict',
    'Enum',
    'Field',
    'Literal',
    'NotRequired',
    'RootModel',
    'TypedDict',
    'UUID',
    'date',
    'datetime',
}

_LITERAL_VALUE_TYPES = (str, int, bool)

# Builtins used in annotations; a field of the same name would shadow them
# inside the class body.
_BUILTIN_ANNOTATION_NAMES = {'bool', 'bytes', 'dict', 'float', 'int', 'list', 'str'}


@dataclasses.dataclass
class Type:
    annotation_ast: ast.expr
    imports: dict[str, set[str]] = dataclasses.field(default_factory=dict)
    nullable: bool = False

    def add_import(self, module: str, name: str) -> None:
        # Skip builtins - they don't need to be imported
        if module == 'builtins':
            return
        self.imports.setdefault(module, set()).add(name)

    def copy_imports_from_sub_types(self, types: Iterable['Type']) -> None:
        for t in types:
            for module, names in t.imports.items():
                for name in names:
                    self.add_import(module, name)

    def make_nullable(self) -> 'Type':
        if self.nullable:
            return self
        return Type(
            annotation_ast=_union_expr([self.annotation_ast, ast.Constant(value=None)]),
            imports={module: set(names) for module, names in self.imports.items()},
            nullable=True,
        )


def _any_type() -> Type:
    type_ = Type(_name(Any.__name__))
    type_.add_import(Any.__module__, Any.__name__)
    return type_


def _schema_types(schema: SchemaNode) -> tuple[str | None, bool]:
    """Return the non-null type of a schema and whether null is allowed."""
    nullable = bool(schema.nullable)
    if isinstance(schema.type, list):
        non_null = [t for t in schema.type if t != 'null']
        nullable = nullable or len(non_null) != len(schema.type)
        return (non_null[0] if len(non_null) == 1 else None), nullable
    return schema.type, nullable


def _enum_member_name(value: Any) -> str:
    text = re.sub(r'[^A-Za-z0-9]+', '_', remove_accents(str(value))).strip('_').upper()
    if not text:
        return 'EMPTY'
    if text[0].isdigit():
        return f'VALUE_{text}'
    return text


class ModelBuilder:
    """Builds the class definitions of one isolated document.

    Every definition gets a class name derived from the last segment of its
    namespaced name (``Corax.Core.ReceiptModel`` -> ``ReceiptModel``). When
    two definitions in the document share a last segment, both fall back to
    their full sanitized names.

    Example:
        >>> builder = ModelBuilder(document, CodegenOptions())
        >>> statements = builder.build()
        >>> imports = builder.imports.to_ast()
    """

    def __init__(
        self,
        document: IsolatedDocument,
        options: CodegenOptions,
        separator: str = '.',
    ):
        self.document = document
        self.options = options
        self.separator = separator
        self.imports = ImportCollector()
        self.exported: list[str] = []
        self.models: list[str] = []
        self._used_names: set[str] = set(_RESERVED_NAMES)
        self.class_names = self._assign_class_names()
        self._kinds = {
            name: self._definition_kind(schema)
            for name, schema in document.definitions.items()
        }
        self._inline: list[ast.stmt] = []

    @property
    def typeddict_style(self) -> bool:
        return self.options.type_style == TypeStyle.TYPEDDICT

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def _unique_name(self, base: str) -> str:
        candidate = base
        counter = 2
        while candidate in self._used_names:
            candidate = f'{base}{counter}'
            counter += 1
        self._used_names.add(candidate)
        return candidate

    def _assign_class_names(self) -> dict[str, str]:
        short_names = {
            name: sanitize_identifier(name.split(self.separator)[-1])
            for name in self.document.definitions
        }
        counts = Counter(short_names.values())
        return {
            name: self._unique_name(
                short if counts[short] == 1 else sanitize_identifier(name)
            )
            for name, short in short_names.items()
        }

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def _enum_base(self, schema: SchemaNode) -> type | None:
        """Return str or int when a schema can be rendered as an Enum class."""
        if not schema.enum:
            return None
        if all(isinstance(v, str) for v in schema.enum):
            return str
        if all(isinstance(v, int) and not isinstance(v, bool) for v in schema.enum):
            return int
        return None

    def _definition_kind(self, schema: SchemaNode) -> Literal['enum', 'model', 'root']:
        if self._enum_base(schema) is not None:
            return 'enum'
        if schema.ref is not None or schema.any_of or schema.one_of:
            return 'root'
        if schema.properties or schema.all_of:
            return 'model'
        schema_type, _ = _schema_types(schema)
        if schema_type == 'object' and not isinstance(
            schema.additional_properties, SchemaNode
        ):
            return 'model'
        return 'root'

    def _model_bases(self, schema: SchemaNode) -> list[str]:
        """Definition names of the allOf references usable as base classes."""
        bases = []
        for member in schema.all_of or []:
            if not isinstance(member, SchemaNode):
                continue
            name = extract_reference_name(member.ref, self.document.reference_prefix)
            if name in self.document.definitions and self._kinds[name] == 'model':
                bases.append(name)
        return bases

    def _definition_order(self) -> list[str]:
        """Document order, with every base class moved before its subclasses."""
        ordered: list[str] = []
        done: set[str] = set()
        in_progress: set[str] = set()

        def visit(name: str) -> None:
            if name in done or name in in_progress:
                return
            in_progress.add(name)
            for base in self._model_bases(self.document.definitions[name]):
                visit(base)
            in_progress.discard(name)
            done.add(name)
            ordered.append(name)

        for name in self.document.definitions:
            visit(name)
        return ordered

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def _reference_type(self, ref: str) -> Type:
        name = extract_reference_name(ref, self.document.reference_prefix)
        if name is None or name not in self.class_names:
            logger.debug(
                f"Group '{self.document.key}': unresolved reference {ref}, using Any"
            )
            return _any_type()
        return Type(_name(self.class_names[name]))

    def _literal_type(self, values: list[Any]) -> Type | None:
        literals = [v for v in values if v is not None]
        if not literals or not all(isinstance(v, _LITERAL_VALUE_TYPES) for v in literals):
            return None
        elts = [ast.Constant(value=v) for v in dict.fromkeys(literals)]
        type_ = Type(
            _subscript(
                Literal.__name__,
                elts[0] if len(elts) == 1 else ast.Tuple(elts=elts, ctx=ast.Load()),
            )
        )
        type_.add_import(Literal.__module__, Literal.__name__)
        if None in values:
            type_ = type_.make_nullable()
        return type_

    def _primitive_type(self, schema_type: str | None, schema_format: str | None) -> Type:
        mapped = _PRIMITIVE_TYPE_MAP.get((schema_type, schema_format))
        if mapped is None:
            mapped = _PRIMITIVE_TYPE_MAP.get((schema_type, None))
        if mapped is None:
            return _any_type()
        if mapped in (date, datetime) and self.options.datetime_type == DateTimeType.STR:
            mapped = str

        type_ = Type(_name(mapped.__name__))
        type_.add_import(mapped.__module__, mapped.__name__)
        return type_

    def schema_to_type(
        self, schema: SchemaNode | bool, owner: str, field_name: str | None = None
    ) -> Type:
        """Translate a schema node into an annotation.

        Inline objects with properties become auxiliary classes named after
        their owner and field, e.g. ``ReceiptLines``. Boolean subschemas
        become ``Any``.
        """
        if isinstance(schema, bool):
            return _any_type()
        if schema.ref is not None:
            return self._reference_type(schema.ref)

        schema_type, nullable = _schema_types(schema)

        type_ = self._literal_type(schema.enum) if schema.enum else None

        if type_ is not None:
            return type_.make_nullable() if nullable else type_

        if schema.any_of or schema.one_of:
            members = [
                self.schema_to_type(member, owner, field_name)
                for member in (schema.any_of or schema.one_of)
            ]
            type_ = Type(_union_expr([m.annotation_ast for m in members]))
            type_.copy_imports_from_sub_types(members)
        elif schema.all_of:
            if len(schema.all_of) == 1:
                type_ = self.schema_to_type(schema.all_of[0], owner, field_name)
            else:
                type_ = _any_type()
        elif schema_type == 'array' or schema.items is not None:
            if isinstance(schema.items, SchemaNode):
                item_type = self.schema_to_type(schema.items, owner, field_name)
            else:
                item_type = _any_type()
            type_ = Type(_subscript(list.__name__, item_type.annotation_ast))
            type_.copy_imports_from_sub_types([item_type])
        elif schema.properties:
            type_ = self._inline_model(schema, owner, field_name)
        elif schema_type == 'object' or (
            schema_type is None and schema.additional_properties is not None
        ):
            if isinstance(schema.additional_properties, SchemaNode):
                value_type = self.schema_to_type(
                    schema.additional_properties, owner, field_name
                )
            else:
                value_type = _any_type()
            type_ = Type(
                _subscript(
                    dict.__name__,
                    ast.Tuple(
                        elts=[_name(str.__name__), value_type.annotation_ast],
                        ctx=ast.Load(),
                    ),
                )
            )
            type_.copy_imports_from_sub_types([value_type])
        else:
            type_ = self._primitive_type(schema_type, schema.format)

        if nullable:
            type_ = type_.make_nullable()
        return type_

    def _inline_model(self, schema: SchemaNode, owner: str, field_name: str | None) -> Type:
        suffix = sanitize_identifier(field_name) if field_name else 'Item'
        class_name = self._unique_name(f'{owner}{suffix[:1].upper()}{suffix[1:]}')
        self._inline.extend(
            self._object_class(class_name, schema, bases=[], all_of=[])
        )
        return Type(_name(class_name))

    # ------------------------------------------------------------------
    # Class definitions
    # ------------------------------------------------------------------

    def build(self) -> list[ast.stmt]:
        """Build the statements for every definition of the document."""
        body: list[ast.stmt] = []
        for name in self._definition_order():
            body.extend(self._build_definition(name, self.document.definitions[name]))
        return body

    def _build_definition(self, name: str, schema: SchemaNode) -> list[ast.stmt]:
        class_name = self.class_names[name]
        kind = self._kinds[name]

        self._inline = []
        if kind == 'enum':
            statements = [self._enum_class(class_name, schema)]
        elif kind == 'model':
            # a base caught in an inheritance cycle is not defined yet
            bases = [
                self.class_names[base]
                for base in self._model_bases(schema)
                if self.class_names[base] in self.exported
            ]
            statements = self._object_class(
                class_name, schema, bases=bases, all_of=schema.all_of or []
            )
        else:
            statements = [self._root_definition(class_name, schema)]

        self.exported.append(class_name)
        return self._inline + statements

    def _class_docstring(self, schema: SchemaNode, class_name: str) -> ast.Expr | None:
        text = schema.description or schema.title
        if schema.deprecated:
            note = f'{class_name} is deprecated.\n\n.. deprecated::\n    This model is deprecated.'
            text = f'{text}\n\n{note}' if text else note
        return _docstring(text) if text else None

    def _enum_class(self, class_name: str, schema: SchemaNode) -> ast.ClassDef:
        value_type = self._enum_base(schema)
        self.imports.add_import(Enum.__module__, Enum.__name__)

        body: list[ast.stmt] = []
        docstring = self._class_docstring(schema, class_name)
        if docstring:
            body.append(docstring)

        seen: set[str] = set()
        for value in dict.fromkeys(schema.enum):
            member = base = _enum_member_name(value)
            counter = 2
            while member in seen:
                member = f'{base}_{counter}'
                counter += 1
            seen.add(member)
            body.append(_assign(_name(member), ast.Constant(value=value)))

        return ast.ClassDef(
            name=class_name,
            bases=[_name(value_type.__name__), _name(Enum.__name__)],
            keywords=[],
            body=body,
            decorator_list=[],
            type_params=[],
        )

    def _root_definition(self, class_name: str, schema: SchemaNode) -> ast.stmt:
        type_ = self.schema_to_type(schema, class_name)
        self.imports.add_imports(type_.imports)

        if self.typeddict_style:
            return ast.TypeAlias(
                name=ast.Name(id=class_name, ctx=ast.Store()),
                type_params=[],
                value=type_.annotation_ast,
            )

        self.imports.add_import(RootModel.__module__, RootModel.__name__)
        self.models.append(class_name)

        body: list[ast.stmt] = []
        docstring = self._class_docstring(schema, class_name)
        if docstring:
            body.append(docstring)
        body.append(
            ast.AnnAssign(
                target=_name('root'),
                annotation=type_.annotation_ast,
                value=None,
                simple=1,
            )
        )
        return ast.ClassDef(
            name=class_name,
            bases=[_name(RootModel.__name__)],
            keywords=[],
            body=body,
            decorator_list=[],
            type_params=[],
        )

    def _collect_properties(
        self, schema: SchemaNode, all_of: list[SchemaNode | bool]
    ) -> tuple[dict[str, SchemaNode], set[str]]:
        """Merge own properties with those of inline allOf members.

        Boolean property schemas are replaced by an empty schema.
        """
        properties: dict[str, SchemaNode | bool] = {}
        required: set[str] = set()
        for member in all_of:
            if isinstance(member, SchemaNode) and member.ref is None and member.properties:
                properties.update(member.properties)
                required.update(member.required or [])
        properties.update(schema.properties or {})
        required.update(schema.required or [])
        return {
            name: prop if isinstance(prop, SchemaNode) else SchemaNode()
            for name, prop in properties.items()
        }, required

    def _field_name_taken(self, field_name: str) -> bool:
        """Whether a field would shadow a module name or a pydantic attribute."""
        return (
            field_name in self._used_names
            or field_name in _BUILTIN_ANNOTATION_NAMES
            or field_name.startswith('model_')
            or hasattr(BaseModel, field_name)
            or (self.options.generate_clone_method and field_name == 'clone')
        )

    def _field_name(self, property_name: str, used_fields: set[str]) -> str:
        base = sanitize_parameter_field_name(property_name)
        if base.startswith('model_'):
            base = f'field_{base}'
        elif self._field_name_taken(base):
            base = f'{base}_'

        field_name = base
        counter = 2
        while field_name in used_fields or self._field_name_taken(field_name):
            field_name = f'{base}_{counter}'
            counter += 1
        used_fields.add(field_name)
        return field_name

    def _object_class(
        self,
        class_name: str,
        schema: SchemaNode,
        bases: list[str],
        all_of: list[SchemaNode | bool],
    ) -> list[ast.stmt]:
        properties, required = self._collect_properties(schema, all_of)

        # inline classes are named before any field so no field can shadow them
        types = {
            property_name: self.schema_to_type(property_schema, class_name, property_name)
            for property_name, property_schema in properties.items()
        }

        fields: list[tuple[str, str, Type, bool, SchemaNode]] = []
        used_fields: set[str] = set()
        for property_name, property_schema in properties.items():
            type_ = types[property_name]
            field_name = self._field_name(property_name, used_fields)
            is_required = (
                property_name in required or self.options.null_value == NullValue.REQUIRED
            )
            fields.append((property_name, field_name, type_, is_required, property_schema))
            self.imports.add_imports(type_.imports)

        if self.typeddict_style:
            return [self._typeddict_class(class_name, schema, bases, fields)]
        return [self._pydantic_class(class_name, schema, bases, fields)]

    def _pydantic_class(self, class_name, schema, bases, fields) -> ast.ClassDef:
        self.models.append(class_name)
        body: list[ast.stmt] = []
        docstring = self._class_docstring(schema, class_name)
        if docstring:
            body.append(docstring)

        if any(name != field_name for name, field_name, *_ in fields):
            self.imports.add_import(ConfigDict.__module__, ConfigDict.__name__)
            body.append(
                _assign(
                    _name('model_config'),
                    _call(
                        _name(ConfigDict.__name__),
                        keywords=[
                            ast.keyword(arg='populate_by_name', value=ast.Constant(True))
                        ],
                    ),
                )
            )

        for property_name, field_name, type_, is_required, property_schema in fields:
            body.append(
                self._pydantic_field(
                    property_name, field_name, type_, is_required, property_schema
                )
            )

        if self.options.generate_clone_method:
            body.append(self._clone_method(class_name))

        if not bases:
            self.imports.add_import(BaseModel.__module__, BaseModel.__name__)

        return ast.ClassDef(
            name=class_name,
            bases=[_name(base) for base in bases] or [_name(BaseModel.__name__)],
            keywords=[],
            body=body or [ast.Pass()],
            decorator_list=[],
            type_params=[],
        )

    def _pydantic_field(
        self,
        property_name: str,
        field_name: str,
        type_: Type,
        is_required: bool,
        property_schema: SchemaNode,
    ) -> ast.AnnAssign:
        annotation = type_.annotation_ast
        keywords: list[ast.keyword] = []

        if not is_required:
            annotation = type_.make_nullable().annotation_ast
            default = property_schema.default
            if not isinstance(default, (str, int, float, bool)):
                default = None
            keywords.append(ast.keyword(arg='default', value=ast.Constant(default)))

        if field_name != property_name:
            keywords.append(ast.keyword(arg='alias', value=ast.Constant(property_name)))

        if property_schema.description:
            keywords.append(
                ast.keyword(
                    arg='description', value=ast.Constant(property_schema.description)
                )
            )

        value = None
        if keywords:
            self.imports.add_import(Field.__module__, Field.__name__)
            value = _call(_name(Field.__name__), keywords=keywords)

        return ast.AnnAssign(
            target=_name(field_name),
            annotation=annotation,
            value=value,
            simple=1,
        )

    def _clone_method(self, class_name: str) -> ast.FunctionDef:
        return ast.FunctionDef(
            name='clone',
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg='self')],
                kwonlyargs=[],
                kw_defaults=[],
                defaults=[],
            ),
            body=[
                _docstring('Return a deep copy of this model.'),
                ast.Return(
                    value=_call(
                        _attr('self', 'model_copy'),
                        keywords=[ast.keyword(arg='deep', value=ast.Constant(True))],
                    )
                ),
            ],
            decorator_list=[],
            returns=_name(class_name),
            type_params=[],
        )

    def _typeddict_class(self, class_name, schema, bases, fields) -> ast.stmt:
        self.imports.add_import(TypedDict.__module__, TypedDict.__name__)

        annotations = []
        for property_name, _, type_, is_required, _ in fields:
            annotation = type_.annotation_ast
            if not is_required:
                self.imports.add_import(NotRequired.__module__, NotRequired.__name__)
                annotation = _subscript(NotRequired.__name__, annotation)
            annotations.append((property_name, annotation))

        # Keys that are not identifiers need the functional syntax, which
        # cannot inherit, so such classes lose their allOf bases.
        if any(
            not name.isidentifier() or keyword.iskeyword(name) for name, _ in annotations
        ):
            return _assign(
                _name(class_name),
                _call(
                    _name(TypedDict.__name__),
                    args=[
                        ast.Constant(class_name),
                        ast.Dict(
                            keys=[ast.Constant(name) for name, _ in annotations],
                            values=[
                                ast.Constant(ast.unparse(annotation))
                                for _, annotation in annotations
                            ],
                        ),
                    ],
                ),
            )

        body: list[ast.stmt] = []
        docstring = self._class_docstring(schema, class_name)
        if docstring:
            body.append(docstring)
        for name, annotation in annotations:
            body.append(
                ast.AnnAssign(
                    target=_name(name), annotation=annotation, value=None, simple=1
                )
            )

        return ast.ClassDef(
            name=class_name,
            bases=[_name(base) for base in bases] or [_name(TypedDict.__name__)],
            keywords=[],
            body=body or [ast.Pass()],
            decorator_list=[],
            type_params=[],
        )

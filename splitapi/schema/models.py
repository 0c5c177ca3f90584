"""Pydantic models for the parts of a Swagger/OpenAPI document SplitAPI uses.

Only the schema definitions and the ``info`` block matter for splitting, so
the models here are deliberately narrow: every other key of a schema node is
kept as an extra field and written back unchanged.

Usage Example:
-------------

    from splitapi.schema.models import ApiDocument

    document = ApiDocument.from_dict(json.load(open('swagger.json')))
    print(f"API: {document.info.title} v{document.info.version}")

    for name, schema in document.definitions.items():
        print(name, schema.type)
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    'SpecVersion',
    'SchemaNode',
    'Info',
    'ApiDocument',
    'DEFAULT_TITLE',
    'DEFAULT_VERSION',
]

DEFAULT_TITLE = 'Generated API'
DEFAULT_VERSION = '1.0.0'


class SpecVersion(str, Enum):
    """Flavour of the API description, which decides where definitions live."""

    SWAGGER_2 = '2.0'
    OPENAPI_3 = '3'

    @property
    def reference_prefix(self) -> str:
        if self is SpecVersion.SWAGGER_2:
            return '#/definitions/'
        return '#/components/schemas/'


class BaseModelWithVendorExtensions(BaseModel):
    """Base model that allows vendor extensions (x- fields)."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)


class SchemaNode(BaseModelWithVendorExtensions):
    """A schema object: a named definition or any node nested inside one.

    Nested nodes (properties, items, map values, composition members) are
    owned by the definition that contains them and have no name of their own.
    """

    ref: str | None = Field(None, alias='$ref')
    type: str | list[str] | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    default: Any | None = None
    enum: list[Any] | None = None
    required: list[str] | None = None
    nullable: bool | None = None
    deprecated: bool | None = None
    # JSON Schema (OpenAPI 3.1) allows true/false in place of a subschema
    properties: dict[str, 'SchemaNode | bool'] | None = None
    items: 'SchemaNode | bool | list[SchemaNode | bool] | None' = None
    additional_properties: 'SchemaNode | bool | None' = Field(
        None, alias='additionalProperties'
    )
    all_of: list['SchemaNode | bool'] | None = Field(None, alias='allOf')
    any_of: list['SchemaNode | bool'] | None = Field(None, alias='anyOf')
    one_of: list['SchemaNode | bool'] | None = Field(None, alias='oneOf')

    def children(self) -> list['SchemaNode']:
        """Return the nested schema nodes reachable in one step.

        Order: properties, items, additional properties, allOf, anyOf, oneOf.
        Boolean subschemas are skipped.
        """
        nested: list[SchemaNode | bool] = []
        if self.properties:
            nested.extend(self.properties.values())
        if isinstance(self.items, list):
            nested.extend(self.items)
        elif self.items is not None:
            nested.append(self.items)
        nested.append(self.additional_properties)
        for members in (self.all_of, self.any_of, self.one_of):
            if members:
                nested.extend(members)
        return [node for node in nested if isinstance(node, SchemaNode)]

    def to_dict(self) -> dict[str, Any]:
        """Dump the node back to its JSON form, keeping only keys that were set."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode='json')


class Info(BaseModelWithVendorExtensions):
    """Top-level document metadata carried into every split document."""

    title: str = DEFAULT_TITLE
    version: str = DEFAULT_VERSION


def _mapping(content: dict, key: str) -> dict:
    """Return ``content[key]``, ``{}`` when absent or empty."""
    value = content.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


class ApiDocument(BaseModel):
    """A loaded API description reduced to what splitting needs.

    Attributes:
        version: Swagger 2.0 or OpenAPI 3.x.
        info: Title and version of the document.
        definitions: The definition universe, in document order.
    """

    version: SpecVersion
    info: Info = Field(default_factory=Info)
    definitions: dict[str, SchemaNode] = Field(default_factory=dict)

    @property
    def reference_prefix(self) -> str:
        return self.version.reference_prefix

    @staticmethod
    def detect_version(content: dict) -> SpecVersion:
        """Detect the document flavour from its raw content.

        Raises:
            ValueError: If the content is neither Swagger 2.0 nor OpenAPI 3.x.
        """
        if 'swagger' in content:
            if not str(content['swagger']).startswith('2'):
                raise ValueError(f"Unsupported swagger version: {content['swagger']}")
            return SpecVersion.SWAGGER_2
        openapi_version = str(content.get('openapi', ''))
        if openapi_version.startswith('3'):
            return SpecVersion.OPENAPI_3
        raise ValueError(
            "Document has neither a 'swagger' nor an 'openapi' version field"
        )

    @classmethod
    def from_dict(cls, content: dict) -> 'ApiDocument':
        """Build an ApiDocument from parsed JSON/YAML content.

        Raises:
            ValueError: If the version cannot be detected or a section that
                        must be a mapping is not one.
            pydantic.ValidationError: If a definition is not a schema object.
        """
        if not isinstance(content, dict):
            raise ValueError('Document root must be a mapping')

        version = cls.detect_version(content)
        if version is SpecVersion.SWAGGER_2:
            definitions = _mapping(content, 'definitions')
        else:
            definitions = _mapping(_mapping(content, 'components'), 'schemas')

        info = _mapping(content, 'info')
        return cls(
            version=version,
            info=Info(
                title=info.get('title') or DEFAULT_TITLE,
                version=str(info.get('version') or DEFAULT_VERSION),
            ),
            definitions={
                name: SchemaNode.model_validate(schema)
                for name, schema in definitions.items()
            },
        )


SchemaNode.model_rebuild()

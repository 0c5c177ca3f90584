"""Loading and modelling of Swagger/OpenAPI documents."""

from splitapi.schema.loader import SchemaLoader
from splitapi.schema.models import ApiDocument, Info, SchemaNode, SpecVersion

__all__ = [
    'ApiDocument',
    'Info',
    'SchemaLoader',
    'SchemaNode',
    'SpecVersion',
]

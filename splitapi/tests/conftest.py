import pytest

from splitapi.schema.models import ApiDocument, SchemaNode, SpecVersion
from splitapi.tests.fixtures import (
    CYCLIC_SWAGGER_SPEC,
    DANGLING_SWAGGER_SPEC,
    NAMESPACED_SWAGGER_SPEC,
    OPENAPI3_SPEC,
)


def ref(name: str) -> SchemaNode:
    """Build a Swagger 2.0 reference node."""
    return SchemaNode.model_validate({'$ref': f'#/definitions/{name}'})


def make_document(definitions: dict[str, SchemaNode]) -> ApiDocument:
    return ApiDocument(version=SpecVersion.SWAGGER_2, definitions=definitions)


@pytest.fixture
def namespaced_document():
    return ApiDocument.from_dict(NAMESPACED_SWAGGER_SPEC)


@pytest.fixture
def openapi3_document():
    return ApiDocument.from_dict(OPENAPI3_SPEC)


@pytest.fixture
def cyclic_document():
    return ApiDocument.from_dict(CYCLIC_SWAGGER_SPEC)


@pytest.fixture
def dangling_document():
    return ApiDocument.from_dict(DANGLING_SWAGGER_SPEC)

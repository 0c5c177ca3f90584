"""SplitAPI - Split one large API description into per-namespace client modules.

SplitAPI partitions the schema definitions of a Swagger 2.0 or OpenAPI 3.x
document by namespace (``Corax.Core.Inbound.ReceiptModel`` belongs to
``Corax.Core.Inbound``), pulls every definition a namespace references into
its own self-contained document, and generates one module per namespace.

Quick Start:
    >>> from splitapi import DocumentConfig, NamespaceSplitter
    >>>
    >>> config = DocumentConfig(
    ...     source="https://api.example.com/swagger/docs/v1",
    ...     output="./src/api"
    ... )
    >>> NamespaceSplitter(config).run()

CLI Usage:
    $ splitapi generate --source ./swagger.json --output ./src/api
    $ splitapi generate -c splitapi.yaml
    $ splitapi inspect ./swagger.json  # Show namespace groups without writing
"""

from splitapi.codegen import CodeGenerator, OutputWriter, PydanticModelGenerator
from splitapi.config import CodegenOptions, DocumentConfig, SplitConfig, get_config
from splitapi.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaValidationError,
    SplitAPIError,
    SplitError,
)
from splitapi.schema import ApiDocument, SchemaLoader, SchemaNode
from splitapi.splitter import GroupResult, NamespaceSplitter, SplitResult
from splitapi.splitting import (
    DefinitionGroup,
    IsolatedDocument,
    build_closure,
    collect_references,
    extract_namespace,
    group_definitions,
)

__all__ = [
    # Main classes
    'NamespaceSplitter',
    'SplitResult',
    'GroupResult',
    'SchemaLoader',
    'ApiDocument',
    'SchemaNode',
    'CodeGenerator',
    'PydanticModelGenerator',
    'OutputWriter',
    # Splitting
    'DefinitionGroup',
    'IsolatedDocument',
    'build_closure',
    'collect_references',
    'extract_namespace',
    'group_definitions',
    # Configuration
    'CodegenOptions',
    'DocumentConfig',
    'SplitConfig',
    'get_config',
    # Exceptions
    'SplitAPIError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'CodeGenerationError',
    'ConfigurationError',
    'OutputError',
    'SplitError',
]

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version('splitapi')
except PackageNotFoundError:
    __version__ = 'unknown'

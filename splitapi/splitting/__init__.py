"""Namespace splitting functionality for SplitAPI.

This package partitions the definitions of one API description into
namespace groups and closes each group under reference, producing
documents that can be generated independently.

Classes:
    DefinitionGroup: Definitions sharing one grouping key.
    IsolatedDocument: A group closed under reference.
"""

from splitapi.splitting.closure import (
    IsolatedDocument,
    build_closure,
    find_dangling_references,
)
from splitapi.splitting.grouper import (
    DEFAULT_NAMESPACE,
    DEFAULT_SEPARATOR,
    DefinitionGroup,
    extract_namespace,
    group_definitions,
    namespace_key,
)
from splitapi.splitting.references import collect_references, extract_reference_name

__all__ = [
    'DEFAULT_NAMESPACE',
    'DEFAULT_SEPARATOR',
    'DefinitionGroup',
    'IsolatedDocument',
    'build_closure',
    'collect_references',
    'extract_namespace',
    'extract_reference_name',
    'find_dangling_references',
    'group_definitions',
    'namespace_key',
]

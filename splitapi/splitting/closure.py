"""Reference closure of a namespace group.

Builds, for one group, an isolated document that holds the group's own
definitions plus every definition they reach through ``$ref`` chains, so
that the document can be compiled on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from splitapi.schema.models import ApiDocument, Info, SchemaNode, SpecVersion
from splitapi.splitting.references import collect_references

logger = logging.getLogger(__name__)

__all__ = ['IsolatedDocument', 'build_closure', 'find_dangling_references']

OPENAPI_3_VERSION = '3.0.3'


@dataclass
class IsolatedDocument:
    """A self-contained document produced for one group.

    Attributes:
        key: The grouping key the document was built for.
        info: Title and version copied from the source document.
        version: The source document flavour, kept for rendering.
        definitions: Group members followed by the definitions they reach.
        members: Names of the group's own members.
    """

    key: str
    info: Info
    version: SpecVersion
    definitions: dict[str, SchemaNode] = field(default_factory=dict)
    members: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return list(self.definitions)

    @property
    def reference_prefix(self) -> str:
        return self.version.reference_prefix

    @property
    def dependencies(self) -> list[str]:
        """Names pulled in from other groups."""
        members = set(self.members)
        return [name for name in self.definitions if name not in members]

    def __contains__(self, name: object) -> bool:
        return name in self.definitions

    def __len__(self) -> int:
        return len(self.definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self.definitions)

    def to_dict(self) -> dict[str, Any]:
        """Render the document as a Swagger 2.0 or OpenAPI 3 mapping."""
        info = {'title': self.info.title, 'version': self.info.version}
        schemas = {name: schema.to_dict() for name, schema in self.definitions.items()}

        if self.version is SpecVersion.SWAGGER_2:
            return {
                'swagger': '2.0',
                'info': info,
                'paths': {},
                'definitions': schemas,
            }
        return {
            'openapi': OPENAPI_3_VERSION,
            'info': info,
            'paths': {},
            'components': {'schemas': schemas},
        }


def build_closure(
    key: str,
    initial: Mapping[str, SchemaNode],
    document: ApiDocument,
) -> IsolatedDocument:
    """Close a group's definitions under reference.

    Each round scans the definitions added by the previous round, adds every
    referenced name the universe defines, and stops when a round adds
    nothing. Names are only ever added, so the loop runs at most once per
    definition in the universe. References to names the universe does not
    define are dropped.

    Args:
        key: The grouping key of the group.
        initial: The group's own definitions.
        document: The source document; its definitions are the universe.

    Returns:
        The isolated document for the group.
    """
    universe = document.definitions
    prefix = document.reference_prefix

    result: dict[str, SchemaNode] = dict(initial)
    visited: set[int] = set()
    dangling: set[str] = set()
    pending = list(result)

    while pending:
        added: list[str] = []
        for name in pending:
            for reference in collect_references(result[name], prefix, visited):
                if reference in result:
                    continue
                if reference not in universe:
                    dangling.add(reference)
                    continue
                result[reference] = universe[reference]
                added.append(reference)
        pending = added

    if dangling:
        logger.debug(
            f"Group '{key}': skipped dangling references {', '.join(sorted(dangling))}"
        )

    logger.debug(
        f"Group '{key}': {len(initial)} members, {len(result)} definitions in closure"
    )
    return IsolatedDocument(
        key=key,
        info=document.info.model_copy(),
        version=document.version,
        definitions=result,
        members=list(initial),
    )


def find_dangling_references(document: ApiDocument) -> dict[str, list[str]]:
    """Find references that point at names the document does not define.

    Returns:
        Mapping of definition name to its dangling reference names, for
        definitions that have any.
    """
    universe = document.definitions
    found: dict[str, list[str]] = {}
    for name, schema in universe.items():
        missing = [
            reference
            for reference in dict.fromkeys(
                collect_references(schema, document.reference_prefix)
            )
            if reference not in universe
        ]
        if missing:
            found[name] = missing
    return found

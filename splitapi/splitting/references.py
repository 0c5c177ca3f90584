"""Extraction of named references from schema nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from splitapi.schema.models import SchemaNode

__all__ = ['extract_reference_name', 'collect_references']


def extract_reference_name(ref: str | None, prefix: str) -> str | None:
    """Extract the definition name from a local ``$ref``.

    Args:
        ref: The reference string, e.g. ``#/definitions/Corax.Core.Receipt``.
        prefix: The marker that precedes definition names,
                e.g. ``#/definitions/``.

    Returns:
        The definition name, or None for references that do not start with
        the prefix or have nothing after it.
    """
    if not ref or not ref.startswith(prefix):
        return None

    name = ref[len(prefix):]
    if not name:
        return None

    # JSON pointer escapes
    return name.replace('~1', '/').replace('~0', '~')


def collect_references(
    node: SchemaNode | None,
    prefix: str,
    visited: set[int] | None = None,
) -> list[str]:
    """Collect every definition name referenced from a node's inline structure.

    The walk descends into properties, array items, additionalProperties and
    the allOf/anyOf/oneOf members. It does not follow references into other
    definitions; that is the closure builder's job.

    Args:
        node: The schema node to scan.
        prefix: Reference prefix marking definition names.
        visited: Identities (``id()``) of nodes already scanned. Nodes found
                 here are skipped, and every scanned node is added, so the
                 same set can be passed to later calls.

    Returns:
        Referenced names in discovery order. Duplicates are possible.
    """
    if visited is None:
        visited = set()

    references: list[str] = []
    stack = [node] if node is not None else []

    while stack:
        current = stack.pop()
        if id(current) in visited:
            continue
        visited.add(id(current))

        if current.ref is not None:
            name = extract_reference_name(current.ref, prefix)
            if name:
                references.append(name)

        # reversed so that children are visited in declaration order
        stack.extend(reversed(current.children()))

    return references

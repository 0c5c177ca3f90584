"""Partitioning of schema definitions into namespace groups.

Definitions are grouped by a key derived from their name alone. With the
default key function, ``Corax.Core.Inbound.ReceiptModel`` lands in group
``Corax.Core.Inbound`` and a name without a separator lands in ``Global``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from splitapi.schema.models import SchemaNode

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = 'Global'
DEFAULT_SEPARATOR = '.'

KeyFunction = Callable[[str], str]


@dataclass
class DefinitionGroup:
    """The definitions that share one grouping key.

    Attributes:
        key: The grouping key, e.g. ``Corax.Core.Inbound``.
        definitions: Member definitions keyed by name, in document order.
    """

    key: str
    definitions: dict[str, SchemaNode] = field(default_factory=dict)

    @property
    def names(self) -> list[str]:
        return list(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self.definitions)


def extract_namespace(
    name: str,
    separator: str = DEFAULT_SEPARATOR,
    default: str = DEFAULT_NAMESPACE,
) -> str:
    """Derive the grouping key of a definition name.

    All segments except the last are rejoined with the separator; a name
    without a separator gets the default key.

    Example:
        >>> extract_namespace('Corax.Core.Inbound.Commands.ManageReceiptLinesCommand')
        'Corax.Core.Inbound.Commands'
        >>> extract_namespace('Pet')
        'Global'
    """
    parts = name.split(separator)
    if len(parts) <= 1:
        return default
    return separator.join(parts[:-1])


def namespace_key(
    separator: str = DEFAULT_SEPARATOR, default: str = DEFAULT_NAMESPACE
) -> KeyFunction:
    """Build a key function for a given separator and default key."""

    def key_fn(name: str) -> str:
        return extract_namespace(name, separator=separator, default=default)

    return key_fn


def group_definitions(
    definitions: Mapping[str, SchemaNode],
    key_fn: KeyFunction | None = None,
) -> list[DefinitionGroup]:
    """Partition a definition universe into groups by derived key.

    Groups come out in first-seen key order and members keep the order of
    the universe. Every name ends up in exactly one group.

    Args:
        definitions: The full definition universe.
        key_fn: Pure function from definition name to grouping key.
                Defaults to :func:`extract_namespace`.

    Returns:
        The groups, or an empty list when the universe is empty.
    """
    key_fn = key_fn or extract_namespace

    if not definitions:
        logger.warning('No definitions found in the API description')
        return []

    groups: dict[str, DefinitionGroup] = {}
    for name, schema in definitions.items():
        key = key_fn(name)
        if key not in groups:
            groups[key] = DefinitionGroup(key=key)
        groups[key].definitions[name] = schema

    logger.debug(f'Grouped {len(definitions)} definitions into {len(groups)} groups')
    return list(groups.values())

"""Tests for namespace extraction and definition grouping."""

import logging

import pytest

from splitapi.schema.models import SchemaNode
from splitapi.splitting.grouper import (
    DEFAULT_NAMESPACE,
    DefinitionGroup,
    extract_namespace,
    group_definitions,
    namespace_key,
)


def obj() -> SchemaNode:
    return SchemaNode(type='object')


class TestExtractNamespace:
    """Tests for deriving the grouping key from a definition name."""

    @pytest.mark.parametrize(
        'name,expected',
        [
            (
                'Corax.Core.Inbound.Commands.ManageReceiptLinesCommand',
                'Corax.Core.Inbound.Commands',
            ),
            ('Corax.Core.Inbound.ReceiptModel', 'Corax.Core.Inbound'),
            ('A.B', 'A'),
            ('Pet', DEFAULT_NAMESPACE),
            ('', DEFAULT_NAMESPACE),
        ],
    )
    def test_default_separator(self, name, expected):
        """Test that all segments but the last form the key."""
        assert extract_namespace(name) == expected

    def test_trailing_separator_keeps_empty_last_segment(self):
        """Test that a trailing separator drops only the empty last segment."""
        assert extract_namespace('Corax.Core.') == 'Corax.Core'

    def test_custom_separator_and_default(self):
        """Test that the separator and default key are configurable."""
        assert extract_namespace('Shop/Orders/Order', separator='/') == 'Shop/Orders'
        assert extract_namespace('Order', separator='/', default='Root') == 'Root'
        # dots are plain characters when another separator is used
        assert extract_namespace('Shop.Order', separator='/') == DEFAULT_NAMESPACE

    def test_namespace_key_closure(self):
        """Test that namespace_key binds separator and default."""
        key_fn = namespace_key(separator='::', default='Misc')
        assert key_fn('Corax::Core::Receipt') == 'Corax::Core'
        assert key_fn('Receipt') == 'Misc'


class TestGroupDefinitions:
    """Tests for partitioning the definition universe."""

    def test_every_name_in_exactly_one_group(self):
        """Test that groups partition the universe."""
        definitions = {
            'A.B.X': obj(),
            'A.B.Y': obj(),
            'A.C.Z': obj(),
            'Pet': obj(),
        }
        groups = group_definitions(definitions)

        all_names = [name for group in groups for name in group]
        assert sorted(all_names) == sorted(definitions)
        assert len(all_names) == len(set(all_names))

        for group in groups:
            for name in group:
                assert extract_namespace(name) == group.key

    def test_first_seen_order(self):
        """Test that groups and their members keep document order."""
        definitions = {
            'B.One': obj(),
            'A.One': obj(),
            'B.Two': obj(),
            'Single': obj(),
        }
        groups = group_definitions(definitions)

        assert [group.key for group in groups] == ['B', 'A', DEFAULT_NAMESPACE]
        assert groups[0].names == ['B.One', 'B.Two']

    def test_members_share_schema_objects(self):
        """Test that grouping does not copy schema nodes."""
        schema = obj()
        groups = group_definitions({'A.X': schema})
        assert groups[0].definitions['A.X'] is schema

    def test_custom_key_function(self):
        """Test grouping with a caller supplied key function."""
        definitions = {'a_one': obj(), 'b_two': obj(), 'a_three': obj()}
        groups = group_definitions(definitions, key_fn=lambda name: name[0])

        assert {group.key: group.names for group in groups} == {
            'a': ['a_one', 'a_three'],
            'b': ['b_two'],
        }

    def test_empty_universe(self, caplog):
        """Test that an empty universe yields no groups and a warning."""
        with caplog.at_level(logging.WARNING):
            groups = group_definitions({})

        assert groups == []
        assert 'No definitions found' in caplog.text

    def test_fixture_document(self, namespaced_document):
        """Test grouping of a realistic namespaced document."""
        groups = group_definitions(namespaced_document.definitions)

        assert [group.key for group in groups] == [
            'Corax.Core.Inbound',
            'Corax.Core.Parties',
            'Corax.Core.Articles',
            DEFAULT_NAMESPACE,
        ]
        assert len(groups[0]) == 3


class TestDefinitionGroup:
    """Tests for the DefinitionGroup container."""

    def test_len_and_iter(self):
        group = DefinitionGroup(key='A', definitions={'A.X': obj(), 'A.Y': obj()})
        assert len(group) == 2
        assert list(group) == ['A.X', 'A.Y']
        assert group.names == ['A.X', 'A.Y']

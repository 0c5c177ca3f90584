"""End-to-end tests for the namespace splitter."""

import ast
import json
import logging
from unittest.mock import MagicMock

import pytest

from splitapi.codegen.file_writer import OutputWriter
from splitapi.codegen.generator import CodeGenerator, PydanticModelGenerator
from splitapi.config import DocumentConfig
from splitapi.exceptions import (
    CodeGenerationError,
    OutputError,
    SchemaLoadError,
    SplitError,
)
from splitapi.schema.models import ApiDocument
from splitapi.splitter import GroupResult, NamespaceSplitter, SplitResult
from splitapi.tests.fixtures import (
    EMPTY_SWAGGER_SPEC,
    NAMESPACED_SWAGGER_SPEC,
    OPENAPI3_SPEC,
)


def write_spec(tmp_path, spec: dict, name: str = 'swagger.json') -> str:
    path = tmp_path / name
    path.write_text(json.dumps(spec))
    return str(path)


def make_splitter(tmp_path, spec=NAMESPACED_SWAGGER_SPEC, **kwargs) -> NamespaceSplitter:
    config = DocumentConfig(
        source=write_spec(tmp_path, spec), output=str(tmp_path / 'out'), **kwargs
    )
    return NamespaceSplitter(config)


class FailingGenerator(PydanticModelGenerator):
    """Fails for a chosen set of group keys."""

    def __init__(self, failing: set[str]):
        super().__init__()
        self.failing = failing

    def generate(self, document, module_name):
        if document.key in self.failing:
            raise CodeGenerationError('Refused', group=document.key)
        return super().generate(document, module_name)


class TestRun:
    """Tests for a complete run."""

    def test_one_module_per_namespace(self, tmp_path):
        result = make_splitter(tmp_path).run()
        out = tmp_path / 'out'

        assert result.ok
        assert [group.key for group in result.groups] == [
            'Corax.Core.Inbound',
            'Corax.Core.Parties',
            'Corax.Core.Articles',
            'Global',
        ]
        assert sorted(p.name for p in out.iterdir()) == [
            'Corax.Core.Articles.py',
            'Corax.Core.Inbound.py',
            'Corax.Core.Parties.py',
            'Global.py',
        ]
        for group in result.groups:
            ast.parse(group.path.read_text())

    def test_group_counts(self, tmp_path):
        result = make_splitter(tmp_path).run()
        inbound = result.groups[0]

        assert inbound.file_name == 'Corax.Core.Inbound'
        assert inbound.definition_count == 3
        assert inbound.closure_count == 7
        assert inbound.ok

    def test_openapi3_document(self, tmp_path):
        result = make_splitter(tmp_path, spec=OPENAPI3_SPEC).run()

        assert [group.key for group in result.groups] == [
            'Shop.Orders',
            'Shop.Payments',
            'Shop.Customers',
        ]
        orders = (tmp_path / 'out' / 'Shop.Orders.py').read_text()
        assert 'class Address(BaseModel)' in orders

    def test_no_init_file_by_default(self, tmp_path):
        make_splitter(tmp_path).run()
        assert not (tmp_path / 'out' / '__init__.py').exists()

    def test_init_file_on_request(self, tmp_path):
        make_splitter(tmp_path, create_init=True).run()
        assert (tmp_path / 'out' / '__init__.py').read_text() == ''

    def test_emit_schemas(self, tmp_path):
        """Test that isolated documents are written next to the modules."""
        make_splitter(tmp_path, emit_schemas=True).run()

        data = json.loads((tmp_path / 'out' / 'Corax.Core.Parties.json').read_text())
        assert data['swagger'] == '2.0'
        assert list(data['definitions']) == [
            'Corax.Core.Parties.SupplierModel',
            'Corax.Core.Parties.AttributeValue',
        ]

    def test_custom_separator(self, tmp_path):
        spec = {
            'swagger': '2.0',
            'info': {'title': 'T', 'version': '1'},
            'definitions': {
                'Shop/Order': {'type': 'object', 'properties': {'id': {'type': 'integer'}}},
                'Plain.Name': {'type': 'string'},
            },
        }
        result = make_splitter(
            tmp_path, spec=spec, namespace_separator='/', default_namespace='Common'
        ).run()

        assert [group.key for group in result.groups] == ['Shop', 'Common']
        assert (tmp_path / 'out' / 'Common.py').exists()

    def test_invalid_file_name_characters(self, tmp_path):
        """Test that keys with path separators are written as flat files."""
        spec = {
            'swagger': '2.0',
            'definitions': {'Corax.Core/Inbound.Receipt': {'type': 'string'}},
        }
        result = make_splitter(tmp_path, spec=spec).run()

        assert result.groups[0].key == 'Corax.Core/Inbound'
        assert result.groups[0].file_name == 'Corax.Core_Inbound'
        assert (tmp_path / 'out' / 'Corax.Core_Inbound.py').exists()

    def test_empty_document(self, tmp_path, caplog):
        """Test that a document without definitions writes nothing."""
        splitter = make_splitter(tmp_path, spec=EMPTY_SWAGGER_SPEC)

        with caplog.at_level(logging.WARNING):
            result = splitter.run()

        assert result.groups == []
        assert result.ok
        assert not (tmp_path / 'out').exists()
        assert 'No definitions found' in caplog.text

    def test_load_failure_writes_nothing(self, tmp_path):
        config = DocumentConfig(
            source=str(tmp_path / 'missing.json'), output=str(tmp_path / 'out')
        )

        with pytest.raises(SchemaLoadError):
            NamespaceSplitter(config).run()

        assert not (tmp_path / 'out').exists()

    def test_document_loaded_once(self, tmp_path):
        loader = MagicMock()
        loader.load.return_value = ApiDocument.from_dict(NAMESPACED_SWAGGER_SPEC)
        splitter = NamespaceSplitter(
            DocumentConfig(source='swagger.json', output=str(tmp_path / 'out')),
            loader=loader,
        )

        splitter.plan()
        splitter.run()

        loader.load.assert_called_once_with('swagger.json')


class TestFailureIsolation:
    """Tests for per-group failure handling."""

    def test_failures_collected(self, tmp_path):
        """Test that other groups are written when one fails."""
        splitter = make_splitter(tmp_path)
        splitter.generator = FailingGenerator({'Corax.Core.Parties'})

        with pytest.raises(SplitError) as exc_info:
            splitter.run()

        error = exc_info.value
        assert list(error.failures) == ['Corax.Core.Parties']
        assert isinstance(error.failures['Corax.Core.Parties'], CodeGenerationError)

        result = error.result
        assert [group.key for group in result.failed] == ['Corax.Core.Parties']
        assert len(result.succeeded) == 3
        assert (tmp_path / 'out' / 'Global.py').exists()
        assert not (tmp_path / 'out' / 'Corax.Core.Parties.py').exists()

    def test_fail_fast(self, tmp_path):
        """Test that fail_fast stops at the first failing group."""
        splitter = make_splitter(tmp_path, fail_fast=True)
        splitter.generator = FailingGenerator({'Corax.Core.Parties'})

        with pytest.raises(CodeGenerationError):
            splitter.run()

        out = tmp_path / 'out'
        assert (out / 'Corax.Core.Inbound.py').exists()
        assert not (out / 'Corax.Core.Articles.py').exists()
        assert not (out / 'Global.py').exists()

    def test_output_errors_isolated(self, tmp_path):
        splitter = make_splitter(tmp_path)
        writer = MagicMock(spec=OutputWriter)
        writer.write_text.side_effect = OutputError('out')
        splitter.writer = writer

        with pytest.raises(SplitError) as exc_info:
            splitter.run()

        assert len(exc_info.value.failures) == 4
        assert all(isinstance(e, OutputError) for e in exc_info.value.failures.values())

    def test_failure_logged(self, tmp_path, caplog):
        splitter = make_splitter(tmp_path)
        splitter.generator = FailingGenerator({'Global'})

        with caplog.at_level(logging.ERROR, logger='splitapi.splitter'):
            with pytest.raises(SplitError):
                splitter.run()

        assert "Group 'Global' failed" in caplog.text


class TestSelection:
    """Tests for include/exclude namespace patterns."""

    def test_include(self, tmp_path):
        result = make_splitter(tmp_path, include_namespaces=['Corax.Core.*']).run()
        assert [group.key for group in result.groups] == [
            'Corax.Core.Inbound',
            'Corax.Core.Parties',
            'Corax.Core.Articles',
        ]

    def test_exclude(self, tmp_path):
        result = make_splitter(
            tmp_path, exclude_namespaces=['Global', '*.Articles']
        ).run()
        assert [group.key for group in result.groups] == [
            'Corax.Core.Inbound',
            'Corax.Core.Parties',
        ]

    def test_excluded_namespaces_still_reachable(self, tmp_path):
        """Test that excluded groups are still pulled into closures."""
        make_splitter(tmp_path, include_namespaces=['Corax.Core.Inbound']).run()

        source = (tmp_path / 'out' / 'Corax.Core.Inbound.py').read_text()
        assert 'class UnitModel(BaseModel)' in source
        assert not (tmp_path / 'out' / 'Corax.Core.Articles.py').exists()


class TestCustomGenerator:
    def test_file_extension(self, tmp_path):
        class NamesGenerator(CodeGenerator):
            file_extension = 'txt'

            def generate(self, document, module_name):
                return '\n'.join(document.names)

        splitter = make_splitter(tmp_path, create_init=True)
        splitter.generator = NamesGenerator()
        splitter.run()

        out = tmp_path / 'out'
        assert (out / 'Global.txt').read_text() == 'ProblemDetails'
        assert not (out / '__init__.py').exists()


class TestResults:
    def test_split_result_properties(self):
        result = SplitResult(
            source='s',
            output='o',
            groups=[
                GroupResult(key='A', file_name='A', definition_count=1),
                GroupResult(
                    key='B', file_name='B', definition_count=1, error=OutputError('b')
                ),
            ],
        )

        assert [g.key for g in result.succeeded] == ['A']
        assert [g.key for g in result.failed] == ['B']
        assert not result.ok

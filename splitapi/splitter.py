"""Namespace splitter: the driver of a SplitAPI run.

Loads one API description, partitions its definitions by namespace, closes
each group under reference and hands every resulting document to a code
generator, writing one module per namespace.

Example:
    >>> from splitapi import DocumentConfig, NamespaceSplitter
    >>>
    >>> config = DocumentConfig(
    ...     source="https://api.example.com/swagger/docs/v1",
    ...     output="./src/api"
    ... )
    >>> result = NamespaceSplitter(config).run()
    >>> [group.path for group in result.succeeded]
"""

import fnmatch
import logging
from dataclasses import dataclass, field

from upath import UPath

from splitapi.codegen.file_writer import OutputWriter
from splitapi.codegen.generator import CodeGenerator, PydanticModelGenerator
from splitapi.codegen.utils import sanitize_file_name
from splitapi.config import DocumentConfig
from splitapi.exceptions import CodeGenerationError, OutputError, SplitError
from splitapi.schema.loader import SchemaLoader
from splitapi.schema.models import ApiDocument
from splitapi.splitting.closure import IsolatedDocument, build_closure
from splitapi.splitting.grouper import (
    DefinitionGroup,
    group_definitions,
    namespace_key,
)

logger = logging.getLogger(__name__)

__all__ = ['GroupResult', 'NamespaceSplitter', 'SplitResult']


@dataclass
class GroupResult:
    """Outcome of processing one namespace group.

    Attributes:
        key: The grouping key.
        file_name: The sanitized module name, without extension.
        definition_count: Number of definitions in the group itself.
        closure_count: Number of definitions in its isolated document.
        path: Where the module was written, when it was.
        error: The failure, when the group failed.
    """

    key: str
    file_name: str
    definition_count: int
    closure_count: int = 0
    path: UPath | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SplitResult:
    """Outcome of a whole run over one document."""

    source: str
    output: str
    groups: list[GroupResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[GroupResult]:
        return [group for group in self.groups if group.ok]

    @property
    def failed(self) -> list[GroupResult]:
        return [group for group in self.groups if not group.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


class NamespaceSplitter:
    """Splits one API description into per-namespace generated modules.

    Groups are processed one at a time: isolate, generate, write. A failing
    group is recorded and the run moves on; once all groups were tried, a
    ``SplitError`` reports the failures. With ``fail_fast`` the first
    failure is raised as is and nothing after it is written.
    """

    def __init__(
        self,
        config: DocumentConfig,
        loader: SchemaLoader | None = None,
        generator: CodeGenerator | None = None,
        writer: OutputWriter | None = None,
    ):
        self.config = config
        self.loader = loader or SchemaLoader()
        self.generator = generator or PydanticModelGenerator(
            config.codegen, separator=config.namespace_separator
        )
        self.writer = writer or OutputWriter(config.output)
        self._document: ApiDocument | None = None

    @property
    def document(self) -> ApiDocument:
        """The source document, loaded on first access.

        Raises:
            SchemaLoadError: If the document cannot be retrieved.
            SchemaValidationError: If it is not a Swagger/OpenAPI document.
        """
        if self._document is None:
            self._document = self.loader.load(self.config.source)
        return self._document

    def plan(self) -> list[DefinitionGroup]:
        """Load the document and return the groups that would be generated."""
        groups = group_definitions(
            self.document.definitions,
            namespace_key(
                separator=self.config.namespace_separator,
                default=self.config.default_namespace,
            ),
        )
        return [group for group in groups if self._is_selected(group.key)]

    def isolate(self, group: DefinitionGroup) -> IsolatedDocument:
        """Build the self-contained document of one group."""
        return build_closure(group.key, group.definitions, self.document)

    def run(self) -> SplitResult:
        """Generate and write one module per namespace group.

        Returns:
            The per-group results.

        Raises:
            SchemaLoadError: If the source cannot be retrieved; nothing is written.
            SchemaValidationError: If the source is not an API description.
            CodeGenerationError: With ``fail_fast``, for the first failing group.
            OutputError: With ``fail_fast``, for the first failing write.
            SplitError: Without ``fail_fast``, when any group failed.
        """
        groups = self.plan()
        result = SplitResult(source=self.config.source, output=self.config.output)

        if not groups:
            logger.warning(f'No namespace groups to generate for {self.config.source}')
            return result

        self.writer.ensure_directory()
        if self.config.create_init and self.generator.file_extension == 'py':
            self.writer.write_init_file()

        for group in groups:
            group_result = GroupResult(
                key=group.key,
                file_name=sanitize_file_name(group.key),
                definition_count=len(group),
            )
            result.groups.append(group_result)
            logger.info(
                f'Processing namespace: {group.key} ({len(group)} definitions)'
            )

            try:
                self._process_group(group, group_result)
            except (CodeGenerationError, OutputError) as e:
                if self.config.fail_fast:
                    raise
                logger.error(f"Group '{group.key}' failed: {e}", exc_info=True)
                group_result.error = e

        if result.failed:
            raise SplitError(
                {group.key: group.error for group in result.failed}, result=result
            )
        return result

    def _process_group(self, group: DefinitionGroup, group_result: GroupResult) -> None:
        isolated = self.isolate(group)
        group_result.closure_count = len(isolated)

        source = self.generator.generate(isolated, group_result.file_name)
        group_result.path = self.writer.write_text(
            f'{group_result.file_name}.{self.generator.file_extension}', source
        )
        logger.info(f'Generated: {group_result.path}')

        if self.config.emit_schemas:
            self.writer.write_json(f'{group_result.file_name}.json', isolated.to_dict())

    def _is_selected(self, key: str) -> bool:
        include = self.config.include_namespaces
        exclude = self.config.exclude_namespaces
        if include and not any(fnmatch.fnmatchcase(key, p) for p in include):
            return False
        return not any(fnmatch.fnmatchcase(key, p) for p in exclude)

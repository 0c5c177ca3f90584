"""Custom exceptions for SplitAPI.

This module defines the hierarchy of exceptions raised while loading an API
description, splitting it into namespace documents and generating code for
each of them.

Only retrieval errors (``SchemaLoadError``, ``SchemaValidationError``) and
per-group failures (``CodeGenerationError``, ``OutputError``) stop a run.
Dangling references and empty documents are reported through logging.
"""


class SplitAPIError(Exception):
    """Base exception for all SplitAPI errors.

    All exceptions raised by SplitAPI inherit from this class, making it easy
    to catch every SplitAPI-related error with a single except clause.

    Example:
        try:
            splitter.run()
        except SplitAPIError as e:
            print(f"SplitAPI error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(SplitAPIError):
    """Base exception for schema-related errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load an API description from a source.

    This exception is raised when the document cannot be fetched from
    the specified URL or read from the file path.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load schema from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SchemaValidationError(SchemaError):
    """The loaded content is not a usable Swagger/OpenAPI document.

    Attributes:
        source: The source path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Schema validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class CodeGenerationError(SplitAPIError):
    """Error while generating code for one namespace group.

    Attributes:
        group: The grouping key of the document being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, group: str | None = None, cause: Exception | None = None
    ):
        self.group = group
        self.cause = cause
        full_message = message
        if group:
            full_message = f"{message} (while generating group '{group}')"
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class ConfigurationError(SplitAPIError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(SplitAPIError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SplitError(SplitAPIError):
    """One or more namespace groups failed while the run continued.

    Raised at the end of a run that isolates per-group failures, so that
    the caller still sees a failure after every other group was written.

    Attributes:
        failures: Mapping of grouping key to the exception raised for it.
        result: The run result, including the groups that succeeded.
    """

    def __init__(self, failures: dict[str, Exception], result=None):
        self.failures = dict(failures)
        self.result = result
        keys = ', '.join(self.failures)
        message = f'{len(self.failures)} group(s) failed: {keys}'
        super().__init__(message)

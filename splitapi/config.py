import json
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from splitapi.exceptions import ConfigurationError
from splitapi.splitting.grouper import DEFAULT_NAMESPACE, DEFAULT_SEPARATOR

DEFAULT_FILENAMES = ['splitapi.yaml', 'splitapi.yml', 'splitapi.json']

_ENV_VAR_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}')


class TypeStyle(str, Enum):
    """How object definitions are rendered."""

    MODEL = 'model'
    TYPEDDICT = 'typeddict'


class DateTimeType(str, Enum):
    """Python type used for ``date`` and ``date-time`` strings."""

    DATETIME = 'datetime'
    STR = 'str'


class NullValue(str, Enum):
    """How optional fields are rendered."""

    NONE = 'none'
    REQUIRED = 'required'


class CodegenOptions(BaseModel):
    """Options passed to the code generator for every group."""

    type_style: TypeStyle = Field(
        TypeStyle.MODEL,
        description='Render objects as pydantic models or as TypedDicts.',
    )

    datetime_type: DateTimeType = Field(
        DateTimeType.DATETIME,
        description='Type used for date and date-time string formats.',
    )

    null_value: NullValue = Field(
        NullValue.NONE,
        description="'none' makes optional fields 'T | None = None'; "
        "'required' renders every field as required.",
    )

    generate_clone_method: bool = Field(
        False, description='Add a clone() method to generated models.'
    )


class DocumentConfig(BaseModel):
    """Represents a single document to be split."""

    source: str = Field(..., description='Path or URL to the Swagger/OpenAPI document.')

    output: str = Field(..., description='Output directory for the generated modules.')

    namespace_separator: str = Field(
        DEFAULT_SEPARATOR,
        min_length=1,
        description='Separator between namespace segments in definition names.',
    )

    default_namespace: str = Field(
        DEFAULT_NAMESPACE,
        min_length=1,
        description='Group for definitions whose name has no separator.',
    )

    include_namespaces: list[str] = Field(
        default_factory=list,
        description='Glob patterns of namespaces to generate. Empty means all.',
    )

    exclude_namespaces: list[str] = Field(
        default_factory=list,
        description='Glob patterns of namespaces to skip.',
    )

    emit_schemas: bool = Field(
        False, description='Also write each isolated document as JSON.'
    )

    create_init: bool = Field(
        False,
        description='Create an __init__.py in the output directory. Module '
        'names containing the namespace separator (Corax.Core.Inbound.py) are '
        'still not importable as submodules of that package; load them by path '
        'or pick a separator-free file layout.',
    )

    fail_fast: bool = Field(
        False,
        description='Abort on the first failing group instead of '
        'finishing the others and failing at the end.',
    )

    codegen: CodegenOptions = Field(default_factory=CodegenOptions)


class SplitConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='SPLITAPI_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of API documents to split.'
    )


def _expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in a string."""

    def replace(match: re.Match) -> str:
        name, default = match.group(1), match.group(2)
        return os.environ.get(name, default if default is not None else '')

    return _ENV_VAR_PATTERN.sub(replace, value)


def _expand_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return _expand_env_vars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars_recursive(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars_recursive(item) for item in data]
    return data


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.safe_load(Path(path).read_text(encoding='utf-8'))


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text(encoding='utf-8'))


def _load_file(path: Path) -> dict:
    if path.suffix.lower() == '.json':
        return load_json(path)
    return load_yaml(path)


def _validate(data: Any, config_path: str) -> SplitConfig:
    if not isinstance(data, dict):
        raise ConfigurationError('Configuration must be a mapping', config_path)
    try:
        return SplitConfig.model_validate(_expand_env_vars_recursive(data))
    except ValidationError as e:
        raise ConfigurationError(f'Invalid configuration: {e}', config_path)


def create_default_config(
    source: str = 'https://api.example.com/swagger/docs/v1',
    output: str = './generated',
) -> dict:
    """Return the body of a starter configuration file."""
    return {
        'documents': [
            {
                'source': source,
                'output': output,
                'namespace_separator': DEFAULT_SEPARATOR,
                'default_namespace': DEFAULT_NAMESPACE,
                'codegen': {
                    'type_style': TypeStyle.MODEL.value,
                    'datetime_type': DateTimeType.DATETIME.value,
                },
            }
        ]
    }


def get_config(path: str | None = None) -> SplitConfig:
    """Load configuration from a file, the working directory or pyproject.toml."""
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError('Configuration file not found', str(config_path))
        return _validate(_load_file(config_path), str(config_path))

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        config_path = cwd / filename
        if config_path.exists():
            return _validate(_load_file(config_path), str(config_path))

    config_path = cwd / 'pyproject.toml'

    if config_path.exists():
        import tomllib

        pyproject = tomllib.loads(config_path.read_text(encoding='utf-8'))
        tools = pyproject.get('tool', {})

        if 'splitapi' in tools:
            return _validate(tools['splitapi'], str(config_path))

    raise ConfigurationError(
        f'No configuration found (looked for {", ".join(DEFAULT_FILENAMES)} '
        'and [tool.splitapi] in pyproject.toml)'
    )

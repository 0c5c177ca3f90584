"""Retrieval of the source API description.

A source is either an ``http(s)`` URL or a path to a local file; the body
is parsed as YAML when the content type or suffix says so and as JSON
otherwise, then reduced to an :class:`~splitapi.schema.models.ApiDocument`.
"""

import json
import logging
from pathlib import Path
from urllib.parse import urlsplit

import httpx
import yaml
from pydantic import ValidationError

from splitapi.exceptions import SchemaLoadError, SchemaValidationError
from splitapi.schema.models import ApiDocument

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = ('.yaml', '.yml')


class SchemaLoader:
    """Fetches and parses one Swagger/OpenAPI document.

    Example:
        >>> document = SchemaLoader().load('https://api.example.com/swagger/docs/v1')
        >>> document = SchemaLoader(base_path='specs').load('corax.yaml')
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
        base_path: str | Path | None = None,
    ):
        """
        Args:
            http_client: Client used for URL sources. Without one, a
                         single ``httpx.get`` call is made.
            timeout: Seconds allowed for that call.
            base_path: Directory relative file sources are resolved
                       against; the working directory by default.
        """
        self._http_client = http_client
        self._timeout = timeout
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def load(self, source: str) -> ApiDocument:
        """Retrieve ``source`` and build the document.

        Raises:
            SchemaLoadError: If the source cannot be read or parsed.
            SchemaValidationError: If it is not a Swagger/OpenAPI document.
        """
        try:
            if self._is_url(source):
                text, is_yaml = self._read_url(source)
            else:
                text, is_yaml = self._read_file(source)
            content = yaml.safe_load(text) if is_yaml else json.loads(text)
        except SchemaLoadError:
            raise
        except (OSError, httpx.HTTPError, ValueError, yaml.YAMLError) as e:
            # json.JSONDecodeError is a ValueError
            raise SchemaLoadError(source, cause=e)

        return self._build(content, source)

    @staticmethod
    def _is_url(source: str) -> bool:
        try:
            return urlsplit(source).scheme in ('http', 'https')
        except ValueError:
            return False

    def _read_url(self, url: str) -> tuple[str, bool]:
        logger.debug(f'Fetching API description from {url}')
        if self._http_client is not None:
            response = self._http_client.get(url)
        else:
            response = httpx.get(url, follow_redirects=True, timeout=self._timeout)
        response.raise_for_status()

        is_yaml = 'yaml' in response.headers.get('content-type', '') or url.endswith(
            _YAML_SUFFIXES
        )
        return response.text, is_yaml

    def _read_file(self, source: str) -> tuple[str, bool]:
        path = Path(source)
        if not path.is_absolute():
            path = self._base_path / path
        if not path.is_file():
            raise SchemaLoadError(source, cause=FileNotFoundError(f'No such file: {path}'))

        logger.debug(f'Reading API description from {path}')
        return path.read_text(encoding='utf-8'), path.suffix.lower() in _YAML_SUFFIXES

    @staticmethod
    def _build(content, source: str) -> ApiDocument:
        try:
            document = ApiDocument.from_dict(content)
        except (ValueError, ValidationError) as e:
            raise SchemaValidationError(source, errors=[str(e)])

        logger.info(
            f'Loaded {document.info.title} v{document.info.version} '
            f'({len(document.definitions)} definitions) from {source}'
        )
        return document

"""File writing utilities for generated output.

This module writes one artifact per namespace group into a single output
directory. Paths are handled with universal_pathlib, so the output may be a
local directory or any fsspec location such as ``memory://`` or ``s3://``.
"""

import json
import logging
from pathlib import Path
from typing import Any

from upath import UPath

from splitapi.exceptions import OutputError

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes generated artifacts into an output directory.

    The directory is created on the first write if it does not exist.

    Example:
        >>> writer = OutputWriter('./generated')
        >>> writer.write_text('Corax.Core.py', source)
    """

    def __init__(self, output_dir: UPath | Path | str):
        self.output_dir = UPath(output_dir)

    def ensure_directory(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(self.output_dir), cause=e)

    def write_text(self, file_name: str, content: str) -> UPath:
        """Write text content to ``<output_dir>/<file_name>``.

        Raises:
            OutputError: If the file cannot be written.
        """
        path = self.output_dir / file_name
        try:
            self.ensure_directory()
            path.write_text(content, encoding='utf-8')
        except OutputError:
            raise
        except OSError as e:
            raise OutputError(str(path), cause=e)

        logger.debug(f'Wrote {path}')
        return path

    def write_json(self, file_name: str, data: dict[str, Any]) -> UPath:
        return self.write_text(file_name, json.dumps(data, indent=2) + '\n')

    def write_init_file(self) -> UPath | None:
        """Create an empty __init__.py in the output directory if missing."""
        init_file = self.output_dir / '__init__.py'
        if init_file.exists():
            return None
        return self.write_text('__init__.py', '')

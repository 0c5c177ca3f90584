"""Code generation module for SplitAPI.

Main Components:
    - CodeGenerator: Interface the splitter uses to emit one group
    - PydanticModelGenerator: Python/pydantic implementation of CodeGenerator
    - ModelBuilder: Translates schema definitions into class AST
    - OutputWriter: Writes generated artifacts to the output directory
"""

from splitapi.codegen.file_writer import OutputWriter
from splitapi.codegen.generator import CodeGenerator, PydanticModelGenerator
from splitapi.codegen.types import ModelBuilder, Type
from splitapi.codegen.utils import (
    sanitize_file_name,
    sanitize_identifier,
    sanitize_parameter_field_name,
)

__all__ = [
    'CodeGenerator',
    'ModelBuilder',
    'OutputWriter',
    'PydanticModelGenerator',
    'Type',
    'sanitize_file_name',
    'sanitize_identifier',
    'sanitize_parameter_field_name',
]

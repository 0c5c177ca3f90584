import keyword
import re
import unicodedata

__all__ = (
    'INVALID_FILE_NAME_CHARS',
    'sanitize_file_name',
    'sanitize_identifier',
    'sanitize_parameter_field_name',
)

# Characters rejected in file names on Windows, the strictest common target.
INVALID_FILE_NAME_CHARS = frozenset('\\/:*?"<>|') | frozenset(
    chr(code) for code in range(32)
)


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name) or keyword.issoftkeyword(name):
        return f'{name}_'
    return name


def sanitize_file_name(name: str) -> str:
    """Replace characters that are illegal in file names with underscores.

    Nothing else changes, so dots inside a namespace key are kept:
    ``Corax.Core/Inbound`` becomes ``Corax.Core_Inbound``.
    """
    return ''.join('_' if c in INVALID_FILE_NAME_CHARS else c for c in name)


def sanitize_parameter_field_name(name: str) -> str:
    """Sanitize property names to be valid Python identifiers.

    - Replace spaces and hyphens with underscores
    - Remove other invalid characters
    - Ensure it doesn't start with a digit
    """
    if not name:
        raise ValueError('Name cannot be empty')

    sanitized = sanitize_name_python_keywords(name)
    sanitized = re.sub(r'[-\s.]+', '_', remove_accents(sanitized))
    sanitized = re.sub(r'[^A-Za-z0-9_]', '', sanitized)

    if not sanitized:
        return 'field_'
    if sanitized[0].isdigit():
        sanitized = '_' + sanitized
    # pydantic treats leading underscores as private attributes
    if sanitized.startswith('_'):
        sanitized = 'field' + sanitized
    return sanitized


def sanitize_identifier(name: str) -> str:
    """Convert a definition name into a valid Python class name.

    - Replace dots, spaces, hyphens and other separators with word breaks
    - Convert to PascalCase for class names
    - Ensure it doesn't start with a digit

    Example:
        >>> sanitize_identifier('Corax.Core.Inbound.ReceiptModel')
        'CoraxCoreInboundReceiptModel'
    """
    if not name:
        return 'UnnamedType'

    parts = re.sub(r'[^A-Za-z0-9]+', '_', remove_accents(name)).split('_')

    if len(parts) == 1:
        sanitized = parts[0]
    else:
        sanitized = ''.join(capitalize(part) for part in parts if part)

    sanitized = re.sub(r'[^A-Za-z0-9_]', '', sanitized)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized

    return sanitized or 'UnnamedType'

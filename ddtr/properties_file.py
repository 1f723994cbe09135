import logging
import os
import re
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PROPERTIES_EXTENSION = '.properties'

_CONTROL_ESCAPES = {'\\': '\\\\', '\n': '\\n', '\r': '\\r', '\t': '\\t', '\f': '\\f'}
_UNESCAPES = {'n': '\n', 'r': '\r', 't': '\t', 'f': '\f'}
_ESCAPE_SEQUENCE = re.compile(r'\\(u[0-9a-fA-F]{4}|.)', re.DOTALL)


def resolve_properties_path(output_dir: str, file_base_name: str, language_suffix: Optional[str] = None) -> str:
    """
    Build the path of a resource file.

    Args:
        output_dir (str): The directory holding the resource bundle.
        file_base_name (str): The bundle name (e.g. "messages").
        language_suffix (Optional[str]): The language code, or None for the default file.

    Returns:
        str: ``{output_dir}/{file_base_name}_{language_suffix}.properties``, or
        ``{output_dir}/{file_base_name}.properties`` without a suffix.
    """
    file_name = f"{file_base_name}_{language_suffix}" if language_suffix else file_base_name
    return os.path.join(output_dir, f"{file_name}{PROPERTIES_EXTENSION}")


def escape_key(key: str) -> str:
    """Escape a key the way java.util.Properties.store does: separators, whitespace and comment markers."""
    escaped = []
    for i, char in enumerate(key):
        if char in _CONTROL_ESCAPES:
            escaped.append(_CONTROL_ESCAPES[char])
        elif char in ('=', ':', ' ') or (i == 0 and char in ('#', '!')):
            escaped.append('\\' + char)
        else:
            escaped.append(char)
    return ''.join(escaped)


def escape_value(value: str) -> str:
    """Escape backslashes and line breaks, plus a leading space that readers would otherwise drop."""
    escaped = ''.join(_CONTROL_ESCAPES.get(char, char) for char in value)
    if escaped.startswith(' '):
        escaped = '\\' + escaped
    return escaped


def unescape(text: str) -> str:
    """Reverse escape_key/escape_value, including ``\\uXXXX`` sequences."""
    def replace(match):
        sequence = match.group(1)
        if len(sequence) == 5 and sequence[0] == 'u':
            return chr(int(sequence[1:], 16))
        return _UNESCAPES.get(sequence, sequence)

    return _ESCAPE_SEQUENCE.sub(replace, text)


def _has_unescaped_trailing_backslash(s: str) -> bool:
    """Check if a string ends with an odd number of backslashes."""
    count = len(s) - len(s.rstrip('\\'))
    return count % 2 == 1


def append_entry(
        output_dir: str,
        file_base_name: str,
        language_suffix: Optional[str],
        key: str,
        value: str
) -> str:
    """
    Append a single ``key=value`` line to a resource file.

    Key and value are escaped so the entry stays on one line and reads back
    unchanged. The file is created if needed, opened in append mode, flushed
    and closed before returning. Existing entries are never rewritten, so
    writing a key that is already present adds a second line; properties
    readers take the last occurrence.

    Returns:
        str: The path that was written.

    Raises:
        OSError: If the file cannot be opened, written or flushed.
        UnicodeEncodeError: If key or value cannot be encoded as UTF-8. Nothing
            is written in that case.
    """
    file_path = resolve_properties_path(output_dir, file_base_name, language_suffix)
    line = f"{escape_key(key)}={escape_value(value)}\n".encode('utf-8')
    with open(file_path, 'ab') as f:
        f.write(line)
        f.flush()
    logger.info("Wrote %s: %s=%s", file_path, key, value)
    return file_path


def read_properties(file_path: str) -> Dict[str, str]:
    """
    Parse a .properties file into a dictionary.

    Comment lines (``#`` or ``!``) and blank lines are skipped. The first
    unescaped ``=`` or ``:`` separates key from value, and escape sequences in
    both are resolved. When a key appears more than once the last occurrence
    wins.

    Args:
        file_path (str): The path to the .properties file.

    Returns:
        Dict[str, str]: The key/value pairs.
    """
    entries: Dict[str, str] = {}
    with open(file_path, 'r', encoding='utf-8', newline='') as file:
        for line in file:
            line = line.rstrip('\r\n')
            stripped_line = line.lstrip()
            if not stripped_line or stripped_line.startswith(('#', '!')):
                continue

            sep_index = -1
            for j, char in enumerate(stripped_line):
                if char in (':', '='):
                    backslash_count = 0
                    k = j - 1
                    while k >= 0 and stripped_line[k] == '\\':
                        backslash_count += 1
                        k -= 1
                    if backslash_count % 2 == 0:
                        sep_index = j
                        break

            if sep_index == -1:
                key_raw, value = stripped_line, ''
            else:
                key_raw, value = stripped_line[:sep_index], stripped_line[sep_index + 1:].lstrip()

            # Keep an escaped trailing space ("a\ =v") when trimming before the separator.
            key_trimmed = key_raw.rstrip()
            if len(key_trimmed) < len(key_raw) and _has_unescaped_trailing_backslash(key_trimmed):
                key_trimmed += key_raw[len(key_trimmed)]

            entries[unescape(key_trimmed)] = unescape(value)
    return entries

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from map_proxy.config import MAP_PROPERTIES_FILE
from map_proxy.logging_config import log_structured


class PropertyStore:
    """Named string properties such as ``map.service.token.username``.

    Keys missing from the loaded file fall back to the environment, using the
    key upper-cased with dots replaced by underscores
    (``map.service.token.username`` -> ``MAP_SERVICE_TOKEN_USERNAME``).
    """

    def __init__(self, values: Optional[Dict[str, str]] = None, use_environment: bool = True):
        self.values = dict(values or {})
        self.use_environment = use_environment

    @classmethod
    def from_file(cls, path: str, use_environment: bool = True) -> "PropertyStore":
        file_path = Path(path)
        if not file_path.is_file():
            log_structured("Properties file not found", level="warning", path=path)
            return cls(use_environment=use_environment)
        values = parse_properties(file_path.read_text(encoding="utf-8"))
        log_structured("Properties loaded", level="debug", path=path, count=len(values))
        return cls(values, use_environment=use_environment)

    def get_property(self, name: str) -> Optional[str]:
        if name in self.values:
            return self.values[name]
        if self.use_environment:
            return os.getenv(env_name(name))
        return None


def env_name(name: str) -> str:
    return name.upper().replace(".", "_")


ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def logical_lines(text: str) -> Iterator[str]:
    """Join lines ending in an odd number of backslashes with the next one."""
    pending = None
    for raw_line in text.splitlines():
        line = raw_line.lstrip()
        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = line[:-1]
            continue
        pending = None
        yield line
    if pending is not None:
        yield pending


def unescape(text: str) -> str:
    chars = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text):
            index += 1
            char = text[index]
            if char == "u":
                chars.append(chr(int(text[index + 1:index + 5], 16)))
                index += 5
                continue
            char = ESCAPES.get(char, char)
        chars.append(char)
        index += 1
    return "".join(chars)


def split_key_value(line: str) -> Tuple[str, str]:
    # Key ends at the first unescaped '=', ':' or whitespace
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=:" or char.isspace():
            break
        index += 1
    rest = line[index:].lstrip()
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip()
    return line[:index], rest


def parse_properties(text: str) -> Dict[str, str]:
    """Parse Java ``.properties`` text.

    Keys and values are separated by ``=``, ``:`` or whitespace. ``#`` and
    ``!`` start comments, a trailing backslash continues the line, and
    backslash escapes (``\\t``, ``\\n``, ``\\uXXXX``, ``\\\\``...) are decoded.
    """
    values: Dict[str, str] = {}
    for line in logical_lines(text):
        key, value = split_key_value(line)
        values[unescape(key)] = unescape(value)
    return values


@lru_cache()
def get_properties() -> PropertyStore:
    return PropertyStore.from_file(MAP_PROPERTIES_FILE)

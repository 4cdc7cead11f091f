"""
Pattern source handling for ``pattern`` rules.

Rules may hold either a compiled ``re.Pattern`` or its source text. Sources
read back from storage or a text editor use the delimited ``/body/flags``
form; a bare body is accepted too.
"""

import functools
import re

_FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "a": re.ASCII,
}


def split_pattern_source(source: str) -> tuple[str, int]:
    """Split a ``/body/flags`` source into its body and ``re`` flags."""
    if len(source) >= 2 and source.startswith("/"):
        end = source.rfind("/")
        if end > 0:
            suffix = source[end + 1:]
            if all(ch.isalpha() for ch in suffix):
                flags = 0
                for ch in suffix:
                    flags |= _FLAG_MAP.get(ch, 0)
                return source[1:end], flags
    return source, 0


@functools.lru_cache(maxsize=256)
def compile_pattern_source(source: str) -> re.Pattern | None:
    """
    Compile a pattern source, returning None if it is not a valid pattern.

    Results are cached per source string.
    """
    body, flags = split_pattern_source(source)
    try:
        return re.compile(body, flags)
    except (re.error, ValueError, OverflowError, RecursionError):
        return None


def pattern_to_source(pattern: re.Pattern) -> str:
    """Serialize a compiled pattern to its delimited source form."""
    suffix = "".join(
        ch for ch, flag in _FLAG_MAP.items() if pattern.flags & flag
    )
    return f"/{pattern.pattern}/{suffix}"

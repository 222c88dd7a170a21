"""
shadowcache - Key Namespacer

Maps logical keys to the physical keys sent to the backend store.

Three physical key families exist per prefix:

    data       prefix + key
    metadata   prefix + "_metadata" + SEPARATOR + key
    registry   prefix + "_metadata"
"""

import re

SEPARATOR = ":"
METADATA_MARKER = "_metadata"


class KeyNamespacer:
    """Pure string composition over a fixed prefix."""

    def __init__(self, prefix: str = ""):
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def physical_key(self, key: str) -> str:
        return self._prefix + key

    def metadata_key(self, key: str) -> str:
        return self._prefix + METADATA_MARKER + SEPARATOR + key

    def registry_key(self) -> str:
        return self._prefix + METADATA_MARKER

    def logical_key(self, physical_key: str) -> str:
        """Strip the leading prefix from a physical key."""
        if self._prefix and physical_key.startswith(self._prefix):
            return physical_key[len(self._prefix) :]
        return physical_key

    def pattern_to_regex(self, pattern: str) -> re.Pattern[str]:
        """
        Compile a glob pattern, applied under this prefix, into an anchored regex.

        ``*`` matches any run of characters (including none) and ``?`` matches
        exactly one character. Everything else, the prefix included, is literal,
        so under prefix "app:" the pattern "user:*" matches "app:user:42" but
        not "app:order:1".
        """
        return pattern_to_regex(self._prefix + pattern)


def pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate a ``*``/``?`` glob into a compiled, fully anchored regex."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile(r"\A" + "".join(parts) + r"\Z", re.DOTALL)

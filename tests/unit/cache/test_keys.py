"""
shadowcache - Key Namespacer Tests

Covers physical/metadata/registry key composition and glob translation.
"""

import pytest

from shadowcache.cache.keys import SEPARATOR, KeyNamespacer, pattern_to_regex


class TestKeyNamespacer:
    """Test suite for KeyNamespacer."""

    def test_physical_key_prepends_prefix(self) -> None:
        """Test physical keys are prefix + logical key."""
        keys = KeyNamespacer("app:")
        assert keys.physical_key("user:1") == "app:user:1"

    def test_metadata_key_layout(self) -> None:
        """Test metadata keys live under the _metadata marker."""
        keys = KeyNamespacer("app:")
        assert keys.metadata_key("user:1") == "app:_metadata" + SEPARATOR + "user:1"
        assert SEPARATOR == ":"

    def test_registry_key_differs_from_every_metadata_key(self) -> None:
        """Test the registry key is not the metadata slot of any key."""
        keys = KeyNamespacer("app:")
        assert keys.registry_key() == "app:_metadata"
        assert keys.registry_key() != keys.metadata_key("")

    def test_empty_prefix(self) -> None:
        """Test an empty prefix leaves logical keys untouched."""
        keys = KeyNamespacer()
        assert keys.physical_key("k") == "k"
        assert keys.registry_key() == "_metadata"

    @pytest.mark.parametrize("logical", ["", "a", "user:1", "user:10", "ünïcode", "with space"])
    def test_physical_key_starts_with_prefix(self, logical: str) -> None:
        """Test every physical key starts with the exact prefix."""
        keys = KeyNamespacer("ns|")
        assert keys.physical_key(logical).startswith("ns|")
        assert keys.logical_key(keys.physical_key(logical)) == logical

    def test_physical_key_is_injective(self) -> None:
        """Test distinct logical keys never share a physical key."""
        keys = KeyNamespacer("p:")
        logical = ["a", "b", "ab", "a:b", "", "p:", "p:a"]
        physical = [keys.physical_key(k) for k in logical]
        assert len(set(physical)) == len(logical)

    def test_logical_key_strips_only_leading_prefix(self) -> None:
        """Test the prefix is removed once, from the front only."""
        keys = KeyNamespacer("x")
        assert keys.logical_key("xax") == "ax"


class TestPatternTranslation:
    """Test suite for glob -> regex translation."""

    @pytest.mark.parametrize(
        ("pattern", "key", "expected"),
        [
            ("user:*", "user:1", True),
            ("user:*", "user:", True),
            ("user:*", "user:1:profile", True),
            ("user:*", "order:1", False),
            ("user:?", "user:1", True),
            ("user:?", "user:12", False),
            ("user:?", "user:", False),
            ("*", "anything at all", True),
            ("a.b", "a.b", True),
            ("a.b", "axb", False),
            ("[abc]", "[abc]", True),
            ("[abc]", "a", False),
            ("user:*", "user:1\n", True),
            ("user:1", "user:1\n", False),
        ],
    )
    def test_pattern_matching(self, pattern: str, key: str, expected: bool) -> None:
        """Test wildcards match and everything else is literal."""
        assert bool(pattern_to_regex(pattern).match(key)) is expected

    def test_pattern_is_anchored_under_prefix(self) -> None:
        """Test patterns only match inside the namespace."""
        regex = KeyNamespacer("app:").pattern_to_regex("user:*")
        assert regex.match("app:user:1")
        assert not regex.match("other:app:user:1")
        assert not regex.match("app:order:1")

    def test_prefix_only_pattern(self) -> None:
        """Test '*' matches every key under the namespace and nothing else."""
        regex = KeyNamespacer("app:").pattern_to_regex("*")
        assert regex.match("app:")
        assert regex.match("app:anything")
        assert not regex.match("ap")

    def test_regex_metacharacters_in_prefix_are_literal(self) -> None:
        """Test a prefix containing regex syntax is escaped."""
        regex = KeyNamespacer("a+b.").pattern_to_regex("*")
        assert regex.match("a+b.key")
        assert not regex.match("aab.key")
        assert not regex.match("a+bxkey")

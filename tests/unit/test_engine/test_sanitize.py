"""Unit tests for sanitize_path.

Tests cover:
- Documented examples
- Separator runs collapse to one hyphen
- Trailing hyphen removal
- Output alphabet over awkward inputs
- Idempotence
"""

import re

import pytest

from docserver.engine.sanitize import sanitize_path


SLUG_ALPHABET = re.compile(r"^[a-z0-9-]*$")

AWKWARD_INPUTS = [
    "",
    "-",
    "///",
    "My Project/v2",
    "libs/foo",
    "  leading and trailing  ",
    "Ünïcödé/ßtraße",
    "a--b__c..d",
    "CamelCase/Sub_Dir/",
    "tabs\tand\nnewlines",
    "../../etc/passwd",
    "123/456",
    "emoji 🚀 rocket",
]


class TestSanitizeExamples:
    """Known input/output pairs."""

    def test_project_with_space_and_slash(self) -> None:
        """'My Project/v2' becomes 'my-project-v2'."""
        assert sanitize_path("My Project/v2") == "my-project-v2"

    def test_already_sane(self) -> None:
        """An existing slug is returned unchanged."""
        assert sanitize_path("already-sane") == "already-sane"

    def test_nested_path(self) -> None:
        """Path separators become hyphens."""
        assert sanitize_path("libs/foo") == "libs-foo"

    def test_empty_string(self) -> None:
        """Empty input gives empty output."""
        assert sanitize_path("") == ""

    def test_only_separators(self) -> None:
        """A string with no alphanumerics collapses to nothing."""
        assert sanitize_path("/-_/") == ""

    def test_separator_run_collapses(self) -> None:
        """Runs of mixed separators become a single hyphen."""
        assert sanitize_path("a -_/ b") == "a-b"

    def test_trailing_separator_dropped(self) -> None:
        """A trailing separator leaves no trailing hyphen."""
        assert sanitize_path("docs/") == "docs"

    def test_leading_separator_kept(self) -> None:
        """A leading separator becomes a leading hyphen."""
        assert sanitize_path("/docs") == "-docs"

    def test_non_ascii_letters_are_separators(self) -> None:
        """Only ASCII alphanumerics survive."""
        assert sanitize_path("café") == "caf"
        assert sanitize_path("naïve") == "na-ve"

    def test_uppercase_lowered(self) -> None:
        """Uppercase ASCII is lowercased."""
        assert sanitize_path("ABC123") == "abc123"


class TestSanitizeProperties:
    """Properties that hold for any input."""

    @pytest.mark.parametrize("value", AWKWARD_INPUTS)
    def test_output_alphabet(self, value: str) -> None:
        """Only lowercase ASCII alphanumerics and hyphens appear."""
        assert SLUG_ALPHABET.match(sanitize_path(value))

    @pytest.mark.parametrize("value", AWKWARD_INPUTS)
    def test_no_double_hyphen(self, value: str) -> None:
        """No two hyphens are adjacent."""
        assert "--" not in sanitize_path(value)

    @pytest.mark.parametrize("value", AWKWARD_INPUTS)
    def test_no_trailing_hyphen(self, value: str) -> None:
        """Output never ends with a hyphen."""
        assert not sanitize_path(value).endswith("-")

    @pytest.mark.parametrize("value", AWKWARD_INPUTS)
    def test_idempotent(self, value: str) -> None:
        """Sanitizing a slug again changes nothing."""
        slug = sanitize_path(value)
        assert sanitize_path(slug) == slug

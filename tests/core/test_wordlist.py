"""Unit tests for wordlist loading."""

import pytest

from s3checker.core.error_handler import ScanConfigurationError
from s3checker.core.wordlist import DEFAULT_WORDLIST, load_wordlist, parse_words


def test_parse_words_skips_blanks_and_comments():
    """Test wordlist text parsing."""
    text = "data\n\n  logs  \n# comment\nbackup\ndata\n\t\n"

    assert parse_words(text) == ("data", "logs", "backup")


def test_load_custom_wordlist(tmp_path):
    """Test loading a wordlist file."""
    path = tmp_path / "words.txt"
    path.write_text("alpha\nbeta\n\ngamma\n")

    assert load_wordlist(path) == ("alpha", "beta", "gamma")


def test_load_default_wordlist():
    """Test the packaged default list."""
    words = load_wordlist()

    assert DEFAULT_WORDLIST.exists()
    assert "backup" in words
    assert "data" in words
    assert all(word == word.strip() and word for word in words)


def test_empty_wordlist_is_not_an_error(tmp_path):
    """Test an empty file gives no words."""
    path = tmp_path / "empty.txt"
    path.write_text("\n\n# nothing here\n")

    assert load_wordlist(path) == ()


def test_missing_wordlist_is_fatal(tmp_path):
    """Test an unreadable wordlist raises a configuration error."""
    with pytest.raises(ScanConfigurationError):
        load_wordlist(tmp_path / "missing.txt")

"""Wordlist loading."""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from loguru import logger

from s3checker.core.error_handler import ScanConfigurationError

DEFAULT_WORDLIST = Path(__file__).resolve().parent.parent / "data" / "common_bucket_prefixes.txt"


def parse_words(text: str) -> Tuple[str, ...]:
    """Split wordlist text into words, skipping blanks and ``#`` comments."""
    words: Dict[str, None] = {}
    for line in text.splitlines():
        word = line.strip()
        if not word or word.startswith("#"):
            continue
        words[word] = None
    return tuple(words)


def load_wordlist(path: Optional[Union[str, Path]] = None) -> Tuple[str, ...]:
    """
    Load words from a wordlist file.

    Args:
        path: Wordlist file; the packaged default list when omitted

    Returns:
        Tuple of unique words in file order

    Raises:
        ScanConfigurationError: If the file cannot be read
    """
    wordlist_path = Path(path) if path else DEFAULT_WORDLIST
    logger.debug(f"Loading wordlist: {wordlist_path}")

    try:
        text = wordlist_path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        raise ScanConfigurationError(f"Cannot read wordlist {wordlist_path}: {e}") from e

    words = parse_words(text)
    if not words:
        logger.warning(f"Wordlist {wordlist_path} is empty, scanning target and feeds only")
    else:
        logger.info(f"Loaded {len(words)} words from {wordlist_path}")

    return words

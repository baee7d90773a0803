"""Bucket name permutation."""

from typing import Dict, Iterable, Tuple

ENVIRONMENTS: Tuple[str, ...] = (
    "dev",
    "development",
    "stage",
    "s3",
    "staging",
    "prod",
    "production",
    "test",
)

# target, word, environment
ENVIRONMENT_TEMPLATES: Tuple[str, ...] = (
    "{target}-{word}-{env}",
    "{target}-{word}.{env}",
    "{target}-{word}{env}",
    "{target}.{word}-{env}",
    "{target}.{word}.{env}",
)

# target and word joined both ways round
PAIR_TEMPLATES: Tuple[str, ...] = (
    "{target}.{word}",
    "{target}-{word}",
    "{target}{word}",
    "{word}.{target}",
    "{word}-{target}",
    "{word}{target}",
)


def generate(target: str, words: Iterable[str]) -> Tuple[str, ...]:
    """
    Generate bucket name candidates for a target.

    The result always starts with the target itself, followed by every
    word/environment combination and then every target/word pair.
    Duplicates collapse on exact string equality; the order is stable for
    identical input. No naming-rule validation happens here: invalid names
    simply fail the existence probe.

    Args:
        target: Organization or keyword to build names around
        words: Word corpus, used verbatim

    Returns:
        Tuple of unique candidate names

    Example:
        >>> names = generate("acme", ["data"])
        >>> names[0], len(names)
        ('acme', 47)
    """
    words = tuple(words)
    candidates: Dict[str, None] = {target: None}

    for word in words:
        for env in ENVIRONMENTS:
            for template in ENVIRONMENT_TEMPLATES:
                candidates[template.format(target=target, word=word, env=env)] = None

    for word in words:
        for template in PAIR_TEMPLATES:
            candidates[template.format(target=target, word=word)] = None

    return tuple(candidates)

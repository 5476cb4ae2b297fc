"""Pure text helpers shared by the matcher and classifier."""

import math
import re
from typing import Sequence

from rapidfuzz.distance import Levenshtein

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_TOKEN_SPLIT = re.compile(r"[_\s\-.]+")
_NAME_PART = re.compile(r"[A-Z]+[a-z]*|[a-z]+|\d+")


def normalize(text: str) -> str:
    """Lower-case and drop every character outside [a-z0-9]."""
    return _NON_ALNUM.sub("", text.lower())


def similarity_ratio(a: str, b: str) -> float:
    """1 - levenshtein(a, b) / max(len(a), len(b)); 1.0 for two empty strings."""
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / max_length


def tokenize(text: str) -> list[str]:
    """Split lower-cased text on whitespace, '_', '-' and '.'; drop 1-char tokens."""
    return [token for token in _TOKEN_SPLIT.split(text.lower()) if len(token) > 1]


def split_field_name(name: str) -> list[str]:
    """Break a canonical name like 'MaxLoadPerPhase' into lower-case words."""
    words: list[str] = []
    for chunk in _TOKEN_SPLIT.split(name):
        words.extend(part.lower() for part in _NAME_PART.findall(chunk))
    return words


def word_similarity(word1: str, word2: str) -> float:
    """Common prefix plus common suffix length over the longer word's length."""
    if word1 == word2:
        return 1.0
    if len(word1) < 2 or len(word2) < 2:
        return 0.0

    min_length = min(len(word1), len(word2))
    common_prefix = 0
    for i in range(min_length):
        if word1[i] != word2[i]:
            break
        common_prefix += 1

    # Suffix may not overlap the prefix
    common_suffix = 0
    for i in range(1, min_length - common_prefix + 1):
        if word1[-i] != word2[-i]:
            break
        common_suffix += 1

    return (common_prefix + common_suffix) / max(len(word1), len(word2))


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors; 0.0 if either is a zero vector."""
    if len(vec_a) != len(vec_b):
        raise ValueError("Vectors must have the same length")

    dot_product = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot_product / (norm_a * norm_b)


def suggest_transformation(original_header: str, expected_field: str) -> str:
    """Human-readable hint for renaming a raw header to its canonical field."""
    original = original_header.lower()
    expected = expected_field.lower()

    if "_" in original and "_" not in expected:
        return "Remove underscores and use CamelCase"
    if " " in original and " " not in expected:
        return "Remove spaces and use CamelCase"
    if original_header != expected_field:
        return f'Rename to "{expected_field}"'
    return "Direct mapping"

"""Layered fuzzy matching between recipe ingredients and item names."""

from __future__ import annotations

from typing import List, Optional, Sequence

from rapidfuzz import fuzz

from .quantity import normalize_item_name, parse_ingredient

SIMILARITY_THRESHOLD = 0.7
_MIN_WORD_LENGTH = 3


def _significant_words(name: str) -> List[str]:
    return [word for word in name.split() if len(word) >= _MIN_WORD_LENGTH]


def _words_related(left: str, right: str) -> bool:
    return left == right or left in right or right in left


def _count_matched_words(words: Sequence[str], others: Sequence[str]) -> int:
    return sum(1 for word in words if any(_words_related(word, other) for other in others))


def similarity(left: str, right: str) -> float:
    """Share of significant words that find a related word on the other side."""

    left_words = _significant_words(left)
    right_words = _significant_words(right)
    if not left_words or not right_words:
        return 0.0
    matched = _count_matched_words(left_words, right_words)
    return matched / max(len(left_words), len(right_words))


def names_match(ingredient_name: str, candidate_name: str) -> bool:
    """Match two already-normalized names; the first layer that fires wins.

    Layers run from precise to lenient: exact, containment, word overlap and
    finally the word similarity ratio.
    """

    if not ingredient_name or not candidate_name:
        return False

    if ingredient_name == candidate_name:
        return True

    if ingredient_name in candidate_name or candidate_name in ingredient_name:
        return True

    ingredient_words = _significant_words(ingredient_name)
    candidate_words = _significant_words(candidate_name)
    if not ingredient_words or not candidate_words:
        return False

    required = min(2, min(len(ingredient_words), len(candidate_words)))
    if _count_matched_words(ingredient_words, candidate_words) >= required:
        return True

    return similarity(ingredient_name, candidate_name) >= SIMILARITY_THRESHOLD


def matches(ingredient: str, candidate_name: str) -> bool:
    """Return True when a raw ingredient line refers to ``candidate_name``."""

    parsed = parse_ingredient(ingredient)
    return names_match(
        normalize_item_name(parsed.item_name),
        normalize_item_name(candidate_name),
    )


def find_best_match(ingredient: str, candidate_names: Sequence[str]) -> Optional[str]:
    """Pick the closest matching candidate name, or ``None`` when nothing matches.

    Candidates must pass :func:`names_match`; among those the highest
    token-sort ratio wins, ties going to the earlier candidate.
    """

    normalized_ingredient = normalize_item_name(parse_ingredient(ingredient).item_name)
    best_name: Optional[str] = None
    best_score = -1.0
    for candidate in candidate_names:
        normalized_candidate = normalize_item_name(candidate)
        if not names_match(normalized_ingredient, normalized_candidate):
            continue
        score = fuzz.token_sort_ratio(normalized_ingredient, normalized_candidate)
        if score > best_score:
            best_name = candidate
            best_score = score
    return best_name


__all__ = [
    "SIMILARITY_THRESHOLD",
    "similarity",
    "names_match",
    "matches",
    "find_best_match",
]

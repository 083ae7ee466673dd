"""
Text utilities shared by the intelligence engines.

Provides the tokenisation, sentence and paragraph splitting, syllable
counting and whole-word matching that every scoring heuristic builds on.
"""

import re
import string
from collections import Counter
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

NON_WORD = re.compile(r"\W+")
SENTENCE_BREAK = re.compile(r"[.!?]+")
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
TERMINAL_PUNCTUATION = re.compile(r"[.!?]$")
DIGIT = re.compile(r"\d")


def words(text: str) -> List[str]:
    """Whitespace-separated words."""
    return text.split()


def tokens(text: str) -> List[str]:
    """Lower-cased word tokens, split on non-word characters."""
    return [token for token in NON_WORD.split(text.lower()) if token]


def split_sentences(text: str) -> List[str]:
    """Sentence fragments between terminal punctuation, blanks dropped."""
    return [s for s in SENTENCE_BREAK.split(text) if s.strip()]


def split_paragraphs(text: str) -> List[str]:
    """Paragraphs separated by blank lines, blanks dropped."""
    return [p for p in PARAGRAPH_BREAK.split(text) if p.strip()]


def count_syllables(word: str) -> int:
    """Count syllables in a word (simplified approach)."""
    word = word.lower().strip(string.punctuation)
    if not word:
        return 0

    # Count vowel groups
    vowels = "aeiouy"
    syllable_count = 0
    prev_was_vowel = False

    for char in word:
        is_vowel = char in vowels
        if is_vowel and not prev_was_vowel:
            syllable_count += 1
        prev_was_vowel = is_vowel

    # Handle silent 'e'
    if word.endswith("e"):
        syllable_count -= 1

    # Every word has at least one syllable
    return max(1, syllable_count)


@lru_cache(maxsize=1024)
def term_pattern(term: str) -> Pattern[str]:
    """Case-insensitive whole-word (or whole-phrase) pattern for a term."""
    body = r"\s+".join(re.escape(part) for part in term.split())
    return re.compile(rf"(?<!\w){body}(?!\w)", re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    return term_pattern(term).search(text) is not None


def find_term(text: str, term: str) -> Optional[re.Match]:
    return term_pattern(term).search(text)


def count_occurrences(text: str, terms: Iterable[str]) -> int:
    """Total number of whole-word matches of any of the terms."""
    return sum(len(term_pattern(term).findall(text)) for term in terms)


def count_present(text: str, terms: Iterable[str]) -> int:
    """Number of distinct terms that occur at least once."""
    return sum(1 for term in terms if contains_term(text, term))


def any_term(text: str, terms: Iterable[str]) -> bool:
    return any(contains_term(text, term) for term in terms)


def first_term(text: str, terms: Sequence[str]) -> Optional[str]:
    """First term of the sequence that occurs in the text."""
    for term in terms:
        if contains_term(text, term):
            return term
    return None


def replace_term(text: str, term: str, replacement: str) -> Tuple[str, int]:
    """Replace whole-word hits of a term, keeping an initial capital."""
    return term_pattern(term).subn(lambda match: match_case(match.group(0), replacement), text)


def unique_terms(
    text: str,
    stop_words: Iterable[str] = (),
    min_length: int = 3,
    limit: Optional[int] = None,
) -> List[str]:
    """Distinct tokens longer than ``min_length`` in first-seen order."""
    stops = set(stop_words)
    seen = dict.fromkeys(
        token for token in tokens(text)
        if len(token) > min_length and token not in stops
    )
    terms = list(seen)
    return terms if limit is None else terms[:limit]


def top_terms(
    text: str,
    stop_words: Iterable[str] = (),
    min_length: int = 4,
    limit: int = 5,
) -> List[str]:
    """Most frequent tokens; ties keep first-seen order."""
    stops = set(stop_words)
    counts = Counter(
        token for token in tokens(text)
        if len(token) > min_length and token not in stops
    )
    return [term for term, _ in counts.most_common(limit)]


def jaccard(first: Iterable[str], second: Iterable[str]) -> float:
    """Jaccard similarity of two term collections, 0 for two empty inputs."""
    a, b = set(first), set(second)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def ends_with_terminal(text: str) -> bool:
    return TERMINAL_PUNCTUATION.search(text.rstrip()) is not None


def snippet(text: str, start: int, length: int, radius: int = 20) -> str:
    """Excerpt around ``text[start:start + length]``."""
    begin = max(0, start - radius)
    end = min(len(text), start + length + radius)
    return text[begin:end] + "..."


def match_case(original: str, replacement: str) -> str:
    """Carry an initial capital from the original onto the replacement."""
    if original[:1].isupper() and replacement[:1].islower():
        return replacement[0].upper() + replacement[1:]
    return replacement

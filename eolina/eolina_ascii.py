"""ASCII character predicates and case transforms."""

import string

VOWELS = frozenset("aeiouAEIOU")
CONSONANTS = frozenset(ch for ch in string.ascii_letters if ch not in VOWELS)
UPPER = frozenset(string.ascii_uppercase)
LOWER = frozenset(string.ascii_lowercase)

_TO_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_TO_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_SWAP = str.maketrans(
    string.ascii_lowercase + string.ascii_uppercase,
    string.ascii_uppercase + string.ascii_lowercase,
)


def is_vowel(text: str) -> bool:
    return all(ch in VOWELS for ch in text)


def is_conso(text: str) -> bool:
    return all(ch in CONSONANTS for ch in text)


def is_upper(text: str) -> bool:
    return all(ch in UPPER for ch in text)


def is_lower(text: str) -> bool:
    return all(ch in LOWER for ch in text)


def to_upper(text: str) -> str:
    return text.translate(_TO_UPPER)


def to_lower(text: str) -> str:
    return text.translate(_TO_LOWER)


def swap_case(text: str) -> str:
    # Non-ASCII letters pass through untouched, unlike str.swapcase.
    return text.translate(_SWAP)

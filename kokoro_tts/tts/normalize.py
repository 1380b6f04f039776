# -*- coding: utf-8 -*-
"""
English text normalization ahead of phonemization.

Rewrites raw input into the canonical form the phonemizer reads well:
punctuation and quotes are canonicalized, titles are expanded, and years,
clock times, money and decimals are spelled the way they should be spoken.

Each rule is a small pure ``str -> str`` function; ``NORMALIZATION_RULES``
fixes their order. Later rules depend on the output of earlier ones
(money expansion only sees digit runs after thousands separators are gone),
so the order is part of the contract.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

Rule = Callable[[str], str]

CJK_PUNCTUATION = {
    "、": ",",
    "。": ".",
    "！": "!",
    "，": ",",
    "：": ":",
    "；": ";",
    "？": "?",
}

TITLE_ABBREVIATIONS = (
    (re.compile(r"\b(?:D[Rr]|DR)\.(?= [A-Z])"), "Doctor"),
    (re.compile(r"\b(?:Mr\.|MR\.)(?= [A-Z])"), "Mister"),
    (re.compile(r"\b(?:Ms\.|MS\.)(?= [A-Z])"), "Miss"),
    (re.compile(r"\b(?:Mrs\.|MRS\.)(?= [A-Z])"), "Mrs"),
    (re.compile(r"\betc\.(?! [A-Z])"), "etc"),
)

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SPACE_WHITESPACE_RE = re.compile(r"[^\S \n]")
_MULTI_SPACE_RE = re.compile(r"  +")
_BLANK_BETWEEN_NEWLINES_RE = re.compile(r"(?<=\n) +(?=\n)")
_YEAH_RE = re.compile(r"\b(?:yeah|yea)\b", re.IGNORECASE)
_NUMBER_RE = re.compile(
    r"\d*\.\d+|\b\d{4}s?\b|(?<!:)\b(?:[1-9]|1[0-2]):[0-5]\d\b(?!:)"
)
_THOUSANDS_COMMA_RE = re.compile(r"(?<=\d),(?=\d)")
_MONEY_RE = re.compile(
    r"[$£]\d+(?:\.\d+)?(?: hundred| thousand| (?:[bm]|tr)illion)*\b"
    r"|[$£]\d+\.\d\d?\b"
)
_DECIMAL_RE = re.compile(r"\d*\.\d+")
_RANGE_HYPHEN_RE = re.compile(r"(?<=\d)-(?=\d)")
_DIGIT_CAPITAL_S_RE = re.compile(r"(?<=\d)S")
_CONSONANT_POSSESSIVE_RE = re.compile(r"(?<=[BCDFGHJ-NP-TV-Z])'?s\b")
_X_POSSESSIVE_RE = re.compile(r"(?<=X')S\b")
_DOTTED_INITIALS_RE = re.compile(r"(?:[A-Za-z]\.){2,} [a-z]")
_INNER_DOT_RE = re.compile(r"(?<=[A-Z])\.(?=[A-Z])", re.IGNORECASE)


def canonicalize_quotes(text: str) -> str:
    text = (
        text.replace("—", ", ")
        .replace("“", '"')
        .replace("”", '"')
        .replace("‘", "'")
        .replace("’", "'")
    )
    return _WHITESPACE_RE.sub(" ", text).strip()


def parentheses_to_guillemets(text: str) -> str:
    """Fold guillemets/curly quotes to straight quotes, then mark parentheses as «»."""
    text = text.replace("«", '"').replace("»", '"')
    text = text.replace("“", '"').replace("”", '"')
    return text.replace("(", "«").replace(")", "»")


def replace_cjk_punctuation(text: str) -> str:
    for source, target in CJK_PUNCTUATION.items():
        text = text.replace(source, target + " ")
    return text


def collapse_whitespace(text: str) -> str:
    text = _NON_SPACE_WHITESPACE_RE.sub(" ", text)
    text = _MULTI_SPACE_RE.sub(" ", text)
    return _BLANK_BETWEEN_NEWLINES_RE.sub("", text)


def expand_titles(text: str) -> str:
    for pattern, replacement in TITLE_ABBREVIATIONS:
        text = pattern.sub(replacement, text)
    return text


def normalize_yeah(text: str) -> str:
    return _YEAH_RE.sub("ye'a", text)


def _split_number(match: re.Match) -> str:
    num = match.group()
    if "." in num:
        # Decimals are spoken later, after money has claimed its own
        return num
    if ":" in num:
        hours, minutes = (int(part) for part in num.split(":"))
        if minutes == 0:
            return f"{hours} o'clock"
        if minutes < 10:
            return f"{hours} oh {minutes}"
        return f"{hours} {minutes}"

    year = int(num[:4])
    if year < 1100 or year % 1000 < 10:
        return num
    left, right = num[:2], int(num[2:4])
    plural = "s" if num.endswith("s") else ""
    if 100 <= year % 1000 <= 999:
        if right == 0:
            return f"{left} hundred{plural}"
        if right < 10:
            return f"{left} oh {right}{plural}"
    return f"{left} {right}{plural}"


def expand_years_and_times(text: str) -> str:
    """Split 4-digit years into spoken pairs and read H:MM clock times.

    >>> expand_years_and_times("In 1984 at 3:05")
    'In 19 84 at 3 oh 5'
    """
    return _NUMBER_RE.sub(_split_number, text)


def strip_thousands_separators(text: str) -> str:
    return _THOUSANDS_COMMA_RE.sub("", text)


def _flip_money(match: re.Match) -> str:
    money = match.group()
    bill = "dollar" if money[0] == "$" else "pound"
    amount = money[1:]
    if money[-1].isalpha():
        return f"{amount} {bill}s"
    if "." not in amount:
        plural = "" if amount == "1" else "s"
        return f"{amount} {bill}{plural}"

    whole, fraction = amount.split(".")
    plural = "" if whole == "1" else "s"
    cents = int(fraction.ljust(2, "0"))
    if money[0] == "$":
        coins = "cent" if cents == 1 else "cents"
    else:
        coins = "penny" if cents == 1 else "pence"
    return f"{whole} {bill}{plural} and {cents} {coins}"


def expand_money(text: str) -> str:
    return _MONEY_RE.sub(_flip_money, text)


def _speak_decimal(match: re.Match) -> str:
    whole, fraction = match.group().split(".")
    return f"{whole} point {' '.join(fraction)}"


def expand_decimals(text: str) -> str:
    return _DECIMAL_RE.sub(_speak_decimal, text)


def fix_letters_and_ranges(text: str) -> str:
    """Ranges, plural acronyms, possessives and dotted initials."""
    text = _RANGE_HYPHEN_RE.sub(" to ", text)
    text = _DIGIT_CAPITAL_S_RE.sub(" S", text)
    text = _CONSONANT_POSSESSIVE_RE.sub("'S", text)
    text = _X_POSSESSIVE_RE.sub("s", text)
    text = _DOTTED_INITIALS_RE.sub(lambda m: m.group().replace(".", "-"), text)
    return _INNER_DOT_RE.sub("-", text)


NORMALIZATION_RULES: Sequence[Rule] = (
    canonicalize_quotes,
    parentheses_to_guillemets,
    replace_cjk_punctuation,
    collapse_whitespace,
    expand_titles,
    normalize_yeah,
    expand_years_and_times,
    strip_thousands_separators,
    expand_money,
    expand_decimals,
    fix_letters_and_ranges,
)


def normalize_text(text: str, rules: Sequence[Rule] = NORMALIZATION_RULES) -> str:
    """Apply every normalization rule in order and trim the result."""
    for rule in rules:
        text = rule(text)
    return text.strip()

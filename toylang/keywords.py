"""Keyword spellings for ToyLang.

The lexer never hard-codes how a keyword is written. It receives a
mapping from keyword kind to the spellings that produce it and builds its
keyword rules from that table. The default table accepts the English
spellings together with the Roman-Urdu ones the language started with.
"""

from __future__ import annotations

import re
from typing import Dict, Tuple

KEYWORD_KINDS = (
    'LET', 'IF', 'ELSE', 'WHILE', 'DO', 'FOR',
    'TRUE', 'FALSE', 'NULL', 'DEF', 'RETURN',
)

ENGLISH_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    'LET': ('let',),
    'IF': ('if',),
    'ELSE': ('else',),
    'WHILE': ('while',),
    'DO': ('do',),
    'FOR': ('for',),
    'TRUE': ('true',),
    'FALSE': ('false',),
    'NULL': ('null',),
    'DEF': ('def',),
    'RETURN': ('return',),
}

ROMAN_URDU_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    'LET': ('Banao', 'banao'),
    'IF': ('Agr', 'agr'),
    'ELSE': ('Warna', 'warna'),
    'WHILE': ('JabTak', 'jabTak'),
    'DO': ('Karo', 'karo'),
    'FOR': (),
    'TRUE': ('Sahi', 'sahi'),
    'FALSE': ('Ghalat', 'ghalat'),
    'NULL': (),
    'DEF': (),
    'RETURN': ('WapisBhejo', 'wapisBhejo'),
}


def merge_keywords(*tables: Dict[str, Tuple[str, ...]]) -> Dict[str, Tuple[str, ...]]:
    """Combine spelling tables, keeping the first occurrence of each spelling."""
    merged: Dict[str, Tuple[str, ...]] = {kind: () for kind in KEYWORD_KINDS}
    seen = set()
    for table in tables:
        for kind, spellings in table.items():
            if kind not in merged:
                raise ValueError(f'unknown keyword kind {kind!r}')
            for spelling in spellings:
                if spelling in seen:
                    continue
                seen.add(spelling)
                merged[kind] = merged[kind] + (spelling,)
    return merged


DEFAULT_KEYWORDS = merge_keywords(ENGLISH_KEYWORDS, ROMAN_URDU_KEYWORDS)


def keyword_pattern(spellings: Tuple[str, ...]) -> str:
    """Build a word-bounded regular expression matching any spelling.

    Longer spellings come first so that a spelling which is a prefix of
    another never shadows it.
    """
    ordered = sorted(spellings, key=len, reverse=True)
    return r'\b(?:' + '|'.join(re.escape(s) for s in ordered) + r')\b'

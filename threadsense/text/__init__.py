"""
Bilingual (English/Japanese) text processing.

Usage:
    from threadsense.text import tokenize_text, normalize_conjugation

    tokens = tokenize_text(clean_text(raw))
    base = normalize_conjugation("実装しています")  # -> "実装する"

The cleanup helpers (extract_plain_text, remove_chat_formatting,
normalize_text, clean_text_aggressive) and count_words_in_text are public
API for callers preparing raw message bodies; the engine itself uses
count_words_in_text for word counts and extract_plain_text for decision text.
"""

from .conjugation import CONJUGATION_RULES, normalize_conjugation
from .language import (
    LANGUAGE_ENGLISH,
    LANGUAGE_JAPANESE,
    LANGUAGE_MIXED,
    LanguageContent,
    clean_text,
    clean_text_aggressive,
    count_words_in_text,
    detect_language_content,
    extract_plain_text,
    has_kanji,
    is_japanese_char,
    is_katakana,
    normalize_text,
    remove_chat_formatting,
    tokenize_text,
)
from .stopwords import ENGLISH_STOP_WORDS, JAPANESE_STOP_WORDS

__all__ = [
    "CONJUGATION_RULES",
    "ENGLISH_STOP_WORDS",
    "JAPANESE_STOP_WORDS",
    "LANGUAGE_ENGLISH",
    "LANGUAGE_JAPANESE",
    "LANGUAGE_MIXED",
    "LanguageContent",
    "clean_text",
    "clean_text_aggressive",
    "count_words_in_text",
    "detect_language_content",
    "extract_plain_text",
    "has_kanji",
    "is_japanese_char",
    "is_katakana",
    "normalize_conjugation",
    "normalize_text",
    "remove_chat_formatting",
    "tokenize_text",
]

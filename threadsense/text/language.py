"""
Language Detection & Tokenization — ThreadSense

Script detection (Latin vs Japanese), chat markup cleanup and a
whitespace/punctuation tokenizer that works for unsegmented Japanese
as well as space-delimited English. No morphological analyzer: the
downstream extractors only need coarse tokens.
"""

import re
from dataclasses import dataclass

# Hiragana, Katakana, CJK unified ideographs
JAPANESE_CHAR_RE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
KANJI_RE = re.compile(r"[\u4E00-\u9FAF]")
KATAKANA_ONLY_RE = re.compile(r"^[\u30A0-\u30FF]+$")
LATIN_CHAR_RE = re.compile(r"[a-zA-Z]")

# Whitespace (incl. ideographic space) plus full-width punctuation:
# 、。！？「」（）【】〈〉《》〔〕『』｛｝ [] 〜 ～
TOKEN_SPLIT_RE = re.compile(
    r"[\s\u3000、。！？「」（）【】"
    r"〈〉《》〔〕『』｛｝\[\]〜～]+"
)

_MARKUP_RE = re.compile(r"<[^>]+>")
_EMOJI_RE = re.compile(r":[a-z_]+:")
_URL_RE = re.compile(r"https?://\S+")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w\s\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")
_MEANINGFUL_SINGLE_RE = re.compile(r"[a-zA-Z0-9\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")

LANGUAGE_JAPANESE = "japanese"
LANGUAGE_ENGLISH = "english"
LANGUAGE_MIXED = "mixed"


@dataclass(frozen=True)
class LanguageContent:
    """Script composition of a piece of text."""

    has_japanese: bool
    has_english: bool
    mixed_language: bool
    primary_language: str  # japanese | english | mixed

    def to_dict(self) -> dict:
        return {
            "has_japanese": self.has_japanese,
            "has_english": self.has_english,
            "mixed_language": self.mixed_language,
            "primary_language": self.primary_language,
        }


def is_japanese_char(text: str) -> bool:
    """True if text contains at least one Hiragana, Katakana or Kanji character."""
    return bool(JAPANESE_CHAR_RE.search(text))


def has_kanji(text: str) -> bool:
    return bool(KANJI_RE.search(text))


def is_katakana(text: str) -> bool:
    """True if text is non-empty and made only of Katakana."""
    return bool(KATAKANA_ONLY_RE.match(text))


def detect_language_content(text: str) -> LanguageContent:
    """
    Classify the scripts present in text.

    Text with neither script (digits, punctuation, empty) is reported
    as "mixed", same as text with both.
    """
    has_japanese = is_japanese_char(text)
    has_english = bool(LATIN_CHAR_RE.search(text))

    primary = LANGUAGE_MIXED
    if has_japanese and not has_english:
        primary = LANGUAGE_JAPANESE
    elif has_english and not has_japanese:
        primary = LANGUAGE_ENGLISH

    return LanguageContent(
        has_japanese=has_japanese,
        has_english=has_english,
        mixed_language=has_japanese and has_english,
        primary_language=primary,
    )


def clean_text(text: str) -> str:
    """Remove <...> mentions/links, :emoji: codes and URLs; collapse whitespace."""
    text = _MARKUP_RE.sub(" ", text)
    text = _EMOJI_RE.sub(" ", text)
    text = _URL_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def clean_text_aggressive(text: str) -> str:
    """clean_text plus punctuation removal and lowercasing, for search indexing."""
    text = _MARKUP_RE.sub(" ", text)
    text = _EMOJI_RE.sub(" ", text)
    text = _URL_RE.sub(" ", text)
    text = _NON_WORD_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def tokenize_text(text: str) -> list[str]:
    """Split on whitespace and Japanese punctuation, dropping empty tokens."""
    return [token for token in TOKEN_SPLIT_RE.split(text) if token]


def count_words_in_text(text: str | None) -> int:
    """
    Count meaningful tokens in mixed English/Japanese text.

    Single-character tokens only count when they are a letter, digit or
    Japanese character.
    """
    if not text:
        return 0

    count = 0
    for token in tokenize_text(text):
        if len(token) == 1 and not _MEANINGFUL_SINGLE_RE.match(token):
            continue
        count += 1
    return count


# =============================================================================
# CHAT MARKUP
# =============================================================================

_FORMATTING_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"<@[UW][A-Z0-9]+(\|[^>]+)?>"), ""),  # user mentions
    (re.compile(r"<#[CD][A-Z0-9]+(\|[^>]+)?>"), ""),  # channel mentions
    (re.compile(r"<![^>]+>"), ""),  # !here, !channel
    (re.compile(r"<[^|>]+\|([^>]+)>"), r"\1"),  # labelled links
    (re.compile(r"<([^>]+)>"), r"\1"),  # bare links
    (re.compile(r"```[\s\S]*?```"), ""),  # code blocks
    (re.compile(r"\*([^*]+)\*"), r"\1"),  # bold
    (re.compile(r"_([^_]+)_"), r"\1"),  # italic
    (re.compile(r"~([^~]+)~"), r"\1"),  # strikethrough
    (re.compile(r"`([^`]+)`"), r"\1"),  # inline code
    (re.compile(r"&gt;(.+)"), r"\1"),  # quotes
]

_CHARACTER_NORMALIZATION = {
    "　": " ",
    "！": "!",
    "？": "?",
    "（": "(",
    "）": ")",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "…": "...",
}


def remove_chat_formatting(text: str) -> str:
    """Strip mention, link and mrkdwn markup, keeping link labels and emphasized text."""
    for pattern, replacement in _FORMATTING_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def normalize_text(text: str) -> str:
    """Map full-width punctuation, smart quotes, dashes and ellipses to ASCII."""
    return "".join(_CHARACTER_NORMALIZATION.get(ch, ch) for ch in text).strip()


def extract_plain_text(text: str | None) -> str:
    """Full cleanup pipeline for a raw message body."""
    if not text:
        return ""
    return normalize_text(remove_chat_formatting(clean_text(text)))

"""
Stopword tables for keyword extraction.

Frozen sets so they can be shared across concurrent analyses and
injected into config objects without copying.
"""

ENGLISH_STOP_WORDS: frozenset[str] = frozenset(
    {
        "the",
        "a",
        "an",
        "and",
        "or",
        "but",
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "with",
        "by",
        "is",
        "are",
        "was",
        "were",
        "be",
        "been",
        "being",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "will",
        "would",
        "could",
        "should",
        "may",
        "might",
        "can",
        "cannot",
        "this",
        "that",
        "these",
        "those",
        "i",
        "you",
        "he",
        "she",
        "it",
        "we",
        "they",
        "what",
        "which",
        "who",
        "when",
        "where",
        "why",
        "how",
        "all",
        "each",
        "every",
        "both",
        "few",
        "more",
        "most",
        "other",
        "some",
        "such",
        "no",
        "not",
        "only",
        "own",
        "same",
        "so",
        "than",
        "too",
        "very",
        "just",
        "as",
    }
)

# Particles, auxiliaries and demonstratives
JAPANESE_STOP_WORDS: frozenset[str] = frozenset(
    {
        "の",
        "に",
        "は",
        "を",
        "た",
        "が",
        "で",
        "て",
        "と",
        "し",
        "れ",
        "さ",
        "ある",
        "いる",
        "も",
        "する",
        "から",
        "な",
        "こと",
        "として",
        "い",
        "や",
        "など",
        "なり",
        "へ",
        "か",
        "だ",
        "これ",
        "それ",
        "あれ",
        "この",
        "その",
        "もの",
        "ため",
        "なっ",
        "なる",
        "でも",
        "です",
        "ます",
        "ました",
        "でした",
    }
)

"""
Conjugation Normalizer — ThreadSense

Rewrites inflected Japanese verbs and adjectives to an approximate
dictionary form so that "実装しています", "実装しました" and "実装する"
count as one keyword. Rule based, no morphological dictionary.

The rule table is evaluated top to bottom and the first matching rule
wins. Order goes from most to least specific; reordering changes
results (e.g. "きました" must be tried before the generic "ました").
"""

from dataclasses import dataclass

# (stem-final mora, dictionary ending) for godan verbs
GODAN_MORA_ENDINGS: tuple[tuple[str, str], ...] = (
    ("き", "く"),
    ("ぎ", "ぐ"),
    ("び", "ぶ"),
    ("み", "む"),
    ("り", "る"),
    ("ち", "つ"),
    ("に", "ぬ"),
    ("い", "う"),
)

# Progressive forms that the mora table would get wrong
IRREGULAR_PROGRESSIVE_FORMS: tuple[tuple[str, str], ...] = (
    # ichidan stems ending in え/い-row kana
    ("考えています", "考える"),
    ("食べています", "食べる"),
    ("見ています", "見る"),
    ("着ています", "着る"),
    # godan く verbs whose stem ends in い
    ("動いています", "動く"),
    ("書いています", "書く"),
    ("歩いています", "歩く"),
)

# Adverbial (-く) forms mapped back to their i-adjective
ADVERB_TO_ADJECTIVE: tuple[tuple[str, str], ...] = (
    ("美しく", "美しい"),
    ("早く", "早い"),
    ("高く", "高い"),
    ("近く", "近い"),
    ("遠く", "遠い"),
    ("深く", "深い"),
    ("強く", "強い"),
    ("弱く", "弱い"),
)

# んで te-form stems: 読んで/飲んで/呼んで → む, 運んで/遊んで/学んで → ぶ
NDE_MU_STEMS = ("呼", "読", "飲", "込", "住")
NDE_BU_STEMS = ("運", "遊", "学")
# って te-form stems: 立って/持って/待って → つ, otherwise う
TTE_TSU_STEMS = ("立", "持", "待")


@dataclass(frozen=True)
class SuffixRewrite:
    """Replace `suffix` with `ending`; needs a non-empty stem to fire."""

    suffix: str
    ending: str
    unless: tuple[str, ...] = ()
    min_length: int = 0

    def apply(self, word: str) -> str | None:
        if not word.endswith(self.suffix):
            return None
        if any(word.endswith(blocked) for blocked in self.unless):
            return None
        if len(word) <= self.min_length:
            return None
        stem = word[: -len(self.suffix)]
        # matched but nothing to attach the ending to: leave the token alone
        return stem + self.ending if stem else word


@dataclass(frozen=True)
class FixedForm:
    """Any token ending in `suffix` normalizes to the literal `base`."""

    suffix: str
    base: str

    def apply(self, word: str) -> str | None:
        return self.base if word.endswith(self.suffix) else None


@dataclass(frozen=True)
class ExactForm:
    """Whole-token literal mapping."""

    word: str
    base: str

    def apply(self, word: str) -> str | None:
        return self.base if word == self.word else None


@dataclass(frozen=True)
class StemKeyedRewrite:
    """
    Replace `suffix` with an ending chosen by the stem's final character.

    `groups` maps stem endings to dictionary endings; `default` is used
    when no group matches.
    """

    suffix: str
    groups: tuple[tuple[tuple[str, ...], str], ...]
    default: str

    def apply(self, word: str) -> str | None:
        if not word.endswith(self.suffix):
            return None
        stem = word[: -len(self.suffix)]
        if not stem:
            return word
        for stem_endings, ending in self.groups:
            if stem.endswith(stem_endings):
                return stem + ending
        return stem + self.default


def _godan_rules(tail: str) -> list[SuffixRewrite]:
    return [SuffixRewrite(mora + tail, ending) for mora, ending in GODAN_MORA_ENDINGS]


def _build_rules() -> tuple:
    rules: list = []

    # 1. Passive
    rules += [
        SuffixRewrite("されています", "される"),
        SuffixRewrite("されている", "される"),
        SuffixRewrite("されました", "される"),
        SuffixRewrite("された", "される"),
    ]

    # 2. Suru verbs
    rules += [
        SuffixRewrite("しています", "する"),
        SuffixRewrite("している", "する"),
        SuffixRewrite("しました", "する"),
        SuffixRewrite("します", "する"),
        SuffixRewrite("して", "する"),
        SuffixRewrite("した", "する", unless=("ました", "でした")),
    ]

    # 3. Copula / na-adjective past and negative
    rules += [
        SuffixRewrite("でした", "だ"),
        SuffixRewrite("ではない", "だ"),
        SuffixRewrite("じゃない", "だ"),
    ]

    # 4. Irregular progressive verbs
    rules += [FixedForm(form, base) for form, base in IRREGULAR_PROGRESSIVE_FORMS]

    # 5-6. Progressive: godan by mora, then ichidan
    rules += _godan_rules("ています")
    rules.append(SuffixRewrite("ています", "る"))

    # 7-8. Polite past: godan by mora, then ichidan
    rules += _godan_rules("ました")
    rules.append(SuffixRewrite("ました", "る"))

    # 9. Potential
    rules.append(SuffixRewrite("できます", "できる"))

    # 10-11. Polite: godan by mora, then ichidan
    rules += _godan_rules("ます")
    rules.append(SuffixRewrite("ます", "る"))

    # 12. Godan te-form
    rules += [
        SuffixRewrite("いて", "く"),
        SuffixRewrite("いで", "ぐ"),
        StemKeyedRewrite(
            "んで",
            groups=((NDE_MU_STEMS, "む"), (NDE_BU_STEMS, "ぶ")),
            default="む",
        ),
        StemKeyedRewrite("って", groups=((TTE_TSU_STEMS, "つ"),), default="う"),
    ]

    # 13. Ichidan te-form
    rules.append(SuffixRewrite("て", "る", min_length=2))

    # 14. I-adjectives
    rules += [
        SuffixRewrite("くなかった", "い"),
        SuffixRewrite("かった", "い"),
        SuffixRewrite("くない", "い"),
    ]
    rules += [ExactForm(adverb, adjective) for adverb, adjective in ADVERB_TO_ADJECTIVE]

    # 15. Copula
    rules += [
        SuffixRewrite("です", "だ"),
        SuffixRewrite("である", "だ"),
    ]

    return tuple(rules)


CONJUGATION_RULES = _build_rules()


# Rewrites chain at most a few times ("雨ではなかった" -> "雨ではない" -> "雨だ")
MAX_NORMALIZATION_PASSES = 8


def _apply_first_rule(word: str) -> str:
    for rule in CONJUGATION_RULES:
        result = rule.apply(word)
        if result is not None:
            return result
    return word


def normalize_conjugation(word: str) -> str:
    """
    Best-effort dictionary form of a Japanese token.

    Each pass applies the first matching rule. Passes repeat until the
    token stops changing, so the result is itself a base form and
    normalizing twice gives the same answer as normalizing once.

    Returns the token unchanged when it is shorter than two characters
    or when no rule matches. Never raises.
    """
    for _ in range(MAX_NORMALIZATION_PASSES):
        if not word or len(word) < 2:
            return word
        normalized = _apply_first_rule(word)
        if normalized == word:
            return word
        word = normalized

    return word

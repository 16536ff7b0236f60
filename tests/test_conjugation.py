"""
Tests for the Japanese conjugation normalizer.
"""

import pytest

from threadsense.text.conjugation import CONJUGATION_RULES, normalize_conjugation


class TestSuruVerbs:
    def test_progressive(self):
        assert normalize_conjugation("実装しています") == "実装する"

    def test_polite_past(self):
        assert normalize_conjugation("実装しました") == "実装する"

    def test_polite(self):
        assert normalize_conjugation("確認します") == "確認する"

    def test_te_form(self):
        assert normalize_conjugation("確認して") == "確認する"

    def test_plain_past(self):
        assert normalize_conjugation("確認した") == "確認する"

    def test_passive(self):
        assert normalize_conjugation("確認されました") == "確認される"
        assert normalize_conjugation("修正されています") == "修正される"


class TestIrregularProgressive:
    @pytest.mark.parametrize(
        "word,expected",
        [
            ("食べています", "食べる"),
            ("考えています", "考える"),
            ("見ています", "見る"),
            ("書いています", "書く"),
            ("動いています", "動く"),
        ],
    )
    def test_table(self, word, expected):
        assert normalize_conjugation(word) == expected


class TestGodanVerbs:
    def test_polite_past_by_mora(self):
        assert normalize_conjugation("書きました") == "書く"

    def test_polite_by_mora(self):
        assert normalize_conjugation("行きます") == "行く"

    def test_potential_before_polite(self):
        assert normalize_conjugation("実装できます") == "実装できる"

    def test_nde_mu_stems(self):
        assert normalize_conjugation("読んで") == "読む"
        assert normalize_conjugation("飲んで") == "飲む"

    def test_nde_bu_stems(self):
        assert normalize_conjugation("遊んで") == "遊ぶ"
        assert normalize_conjugation("運んで") == "運ぶ"

    def test_tte_stems(self):
        assert normalize_conjugation("待って") == "待つ"
        assert normalize_conjugation("言って") == "言う"

    def test_ite_and_ide(self):
        assert normalize_conjugation("書いて") == "書く"
        assert normalize_conjugation("泳いで") == "泳ぐ"


class TestAdjectivesAndCopula:
    def test_i_adjective_past(self):
        assert normalize_conjugation("高かった") == "高い"

    def test_i_adjective_negative(self):
        assert normalize_conjugation("高くない") == "高い"

    def test_adverb_table(self):
        assert normalize_conjugation("美しく") == "美しい"
        assert normalize_conjugation("早く") == "早い"

    def test_copula_past(self):
        assert normalize_conjugation("静かでした") == "静かだ"

    def test_copula(self):
        assert normalize_conjugation("学生です") == "学生だ"

    def test_chained_rewrite(self):
        # past negative copula needs two rewrites
        assert normalize_conjugation("雨ではなかった") == "雨だ"


class TestPassThrough:
    def test_short_tokens(self):
        assert normalize_conjugation("") == ""
        assert normalize_conjugation("見") == "見"

    def test_base_forms_unchanged(self):
        assert normalize_conjugation("実装する") == "実装する"
        assert normalize_conjugation("食べる") == "食べる"

    def test_non_japanese(self):
        assert normalize_conjugation("deploy") == "deploy"

    def test_suffix_without_stem(self):
        assert normalize_conjugation("です") == "です"

    def test_idempotent_on_examples(self):
        for word in ("食べています", "雨ではなかった", "実装しました", "読んで"):
            once = normalize_conjugation(word)
            assert normalize_conjugation(once) == once


class TestRuleTable:
    def test_table_is_ordered_specific_first(self):
        suffixes = [getattr(rule, "suffix", None) for rule in CONJUGATION_RULES]
        assert suffixes.index("しました") < suffixes.index("ました")
        assert suffixes.index("できます") < suffixes.index("ます")

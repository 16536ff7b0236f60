"""
Tests for script detection, tokenization and chat markup cleanup.
"""

from threadsense.text.language import (
    LANGUAGE_ENGLISH,
    LANGUAGE_JAPANESE,
    LANGUAGE_MIXED,
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


class TestScriptDetection:
    def test_japanese_chars(self):
        assert is_japanese_char("ひらがな")
        assert is_japanese_char("カタカナ")
        assert is_japanese_char("漢字")
        assert not is_japanese_char("english only")

    def test_kanji(self):
        assert has_kanji("実装する")
        assert not has_kanji("ひらがな")

    def test_katakana(self):
        assert is_katakana("レビュー")
        assert not is_katakana("レビューする")
        assert not is_katakana("")


class TestDetectLanguageContent:
    def test_english(self):
        content = detect_language_content("deploy the service")
        assert content.primary_language == LANGUAGE_ENGLISH
        assert content.has_english
        assert not content.mixed_language

    def test_japanese(self):
        content = detect_language_content("デプロイしました")
        assert content.primary_language == LANGUAGE_JAPANESE
        assert not content.has_english

    def test_mixed(self):
        content = detect_language_content("APIを修正")
        assert content.primary_language == LANGUAGE_MIXED
        assert content.mixed_language

    def test_neither_script_is_mixed(self):
        content = detect_language_content("12345 !!!")
        assert content.primary_language == LANGUAGE_MIXED
        assert not content.has_japanese
        assert not content.has_english
        assert not content.mixed_language


class TestTokenize:
    def test_whitespace(self):
        assert tokenize_text("deploy  the\tservice") == ["deploy", "the", "service"]

    def test_japanese_punctuation(self):
        assert tokenize_text("実装しました。確認お願いします！") == ["実装しました", "確認お願いします"]

    def test_brackets_and_ideographic_space(self):
        assert tokenize_text("「仕様」　【確認】") == ["仕様", "確認"]

    def test_empty(self):
        assert tokenize_text("") == []
        assert tokenize_text("   ") == []


class TestCleanText:
    def test_removes_mentions_emoji_urls(self):
        text = "<@U123> please check :eyes: https://example.com/x now"
        assert clean_text(text) == "please check now"

    def test_aggressive_lowercases_and_strips_punctuation(self):
        assert clean_text_aggressive("Deploy, NOW!") == "deploy now"

    def test_aggressive_keeps_japanese(self):
        assert clean_text_aggressive("確認。OK") == "確認 ok"


class TestCountWords:
    def test_counts_meaningful_tokens(self):
        assert count_words_in_text("deploy the service") == 3

    def test_skips_single_punctuation(self):
        assert count_words_in_text("yes - no") == 2

    def test_empty(self):
        assert count_words_in_text("") == 0
        assert count_words_in_text(None) == 0


class TestChatFormatting:
    def test_mentions_removed(self):
        assert remove_chat_formatting("<@U123ABC> hello <#C42|general>") == "hello"

    def test_labelled_link_keeps_label(self):
        assert remove_chat_formatting("see <https://example.com|the docs>") == "see the docs"

    def test_emphasis(self):
        assert remove_chat_formatting("*bold* and _italic_ and `code`") == "bold and italic and code"

    def test_code_block_removed(self):
        assert remove_chat_formatting("before ```x = 1``` after") == "before  after"

    def test_normalize_text(self):
        assert normalize_text("本当？（確認）…") == "本当?(確認)..."

    def test_extract_plain_text(self):
        assert extract_plain_text(None) == ""
        assert extract_plain_text("*done*！") == "done!"

# tests/unit/text/test_text.py

from md_segmenter.text import (
    clean_ocr_text,
    collapse_whitespace,
    normalize_text,
    strip_think_tags,
    truncate,
)


class TestNormalizeText:
    def test_kangxi_radicals_folded(self) -> None:
        # U+2F00 KANGXI RADICAL ONE, U+2F08 KANGXI RADICAL MAN
        assert normalize_text("⼀⼈") == "一人"

    def test_fullwidth_ascii_folded(self) -> None:
        assert normalize_text("ＡＰＩ１２") == "API12"

    def test_empty(self) -> None:
        assert normalize_text("") == ""


class TestCleanOcrText:
    def test_log_lines_removed(self) -> None:
        text = (
            "订单管理\n"
            '10.0.0.1 - - "GET /api HTTP/1.1" 200 512\n'
            "[GIN] 2024/05/01 | 200 | 1.2ms\n"
            "sandbox-12-3 started\n"
            "提交"
        )

        assert clean_ocr_text(text) == '订单管理\n10.0.0.1 - - "GET /api \n\n提交'

    def test_long_tokens_removed(self) -> None:
        token = "eyJhbGciOiJIUzI1NiJ9" * 3

        assert clean_ocr_text(f"key: {token} end") == "key:  end"

    def test_short_tokens_kept(self) -> None:
        assert clean_ocr_text("user_id-42") == "user_id-42"

    def test_excess_blank_lines_collapsed(self) -> None:
        assert clean_ocr_text("a\n\n\n\n\nb") == "a\n\nb"

    def test_empty(self) -> None:
        assert clean_ocr_text("") == ""


class TestStripThinkTags:
    def test_block_removed(self) -> None:
        assert strip_think_tags("<think>\n推理过程\n</think>\n\n结论。") == "结论。"

    def test_stray_tags_removed(self) -> None:
        assert strip_think_tags("答案</think>") == "答案"

    def test_plain_text_unchanged(self) -> None:
        assert strip_think_tags("结论。") == "结论。"


class TestHelpers:
    def test_collapse_whitespace(self) -> None:
        assert collapse_whitespace("  a\n\tb   c ") == "a b c"

    def test_truncate(self) -> None:
        assert truncate("abcdef", 3) == "abc..."
        assert truncate("abc", 3) == "abc"

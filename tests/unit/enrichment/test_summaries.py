# tests/unit/enrichment/test_summaries.py

import asyncio
from unittest.mock import MagicMock

import pytest

from md_segmenter.enrichment.summaries import (
    Section,
    clean_summary,
    extract_sections,
    summarize_sections,
)
from md_segmenter.observability import names

LONG_BODY = "服务发现模块负责注册。" * 12


class FakeSummarizer:
    def __init__(
        self, reply: str = "本章介绍服务发现。", fail: set[str] | None = None
    ) -> None:
        self.reply = reply
        self.fail = fail or set()
        self.texts: list[str] = []

    async def summarize(self, text: str) -> str:
        self.texts.append(text)
        for title in self.fail:
            if text.startswith(f"标题：{title}\n"):
                raise RuntimeError("model overloaded")
        return self.reply


class HangingSummarizer:
    async def summarize(self, text: str) -> str:
        await asyncio.Event().wait()
        return ""


class TestExtractSections:
    def test_sections_per_top_level_heading(self) -> None:
        markdown = (
            "intro\n"
            "# A\n"
            "## sub\n"
            "![i](x.png)\n"
            "\n"
            "text\n"
            "```\n"
            "# not a heading\n"
            "```\n"
            "# B\n"
            "b"
        )

        sections = extract_sections(markdown)

        assert sections == [
            Section(title="A", heading_offset=6, body="text"),
            Section(title="B", heading_offset=markdown.index("# B"), body="b"),
        ]

    def test_no_headings(self) -> None:
        assert extract_sections("just text\n\nmore") == []

    def test_unclosed_fence_keeps_later_sections(self) -> None:
        markdown = "# A\n```\ncode\n# B\nbody b"

        sections = extract_sections(markdown)

        assert sections == [
            Section(title="A", heading_offset=0, body="```\ncode"),
            Section(title="B", heading_offset=markdown.index("# B"), body="body b"),
        ]


class TestCleanSummary:
    def test_strips_think_block_and_newlines(self) -> None:
        assert clean_summary("<think>推理</think>\n第一句。\n第二句。") == "第一句。 第二句。"


class TestSummarizeSections:
    @pytest.mark.asyncio
    async def test_summary_appended_to_heading(self) -> None:
        markdown = f"# 技术架构\n\n{LONG_BODY}\n\n# 短节\n\n太短。"
        summarizer = FakeSummarizer()

        outcome = await summarize_sections(markdown, summarizer)

        assert outcome.markdown == (
            f"# 技术架构 摘要：本章介绍服务发现。\n\n{LONG_BODY}\n\n# 短节\n\n太短。"
        )
        assert outcome.summaries == {"技术架构": "本章介绍服务发现。"}
        assert summarizer.texts == [f"标题：技术架构\n\n{LONG_BODY}"]

    @pytest.mark.asyncio
    async def test_multiline_reply_kept_on_heading_line(self) -> None:
        summarizer = FakeSummarizer(reply="<think>先想想</think>第一句。\n\n第二句。")

        outcome = await summarize_sections(f"# A\n{LONG_BODY}", summarizer)

        assert outcome.markdown.split("\n")[0] == "# A 摘要：第一句。 第二句。"

    @pytest.mark.asyncio
    async def test_no_eligible_sections_skips_summarizer(self) -> None:
        summarizer = FakeSummarizer()

        outcome = await summarize_sections("# A\n\nshort", summarizer)

        assert outcome.markdown == "# A\n\nshort"
        assert summarizer.texts == []

    @pytest.mark.asyncio
    async def test_failure_leaves_heading_untouched(self) -> None:
        markdown = f"# A\n{LONG_BODY}\n# B\n{LONG_BODY}"
        summarizer = FakeSummarizer(fail={"A"})

        outcome = await summarize_sections(markdown, summarizer)

        assert outcome.failed == ["A"]
        lines = outcome.markdown.split("\n")
        assert lines[0] == "# A"
        assert lines[2] == "# B 摘要：本章介绍服务发现。"

    @pytest.mark.asyncio
    async def test_timeout_leaves_heading_untouched(self) -> None:
        markdown = f"# A\n{LONG_BODY}"

        outcome = await summarize_sections(markdown, HangingSummarizer(), timeout=0.05)

        assert outcome.markdown == markdown
        assert outcome.failed == ["A"]

    @pytest.mark.asyncio
    async def test_short_summary_discarded(self) -> None:
        markdown = f"# A\n{LONG_BODY}"

        outcome = await summarize_sections(
            markdown, FakeSummarizer(reply="短"), min_summary_chars=5
        )

        assert outcome.markdown == markdown
        assert outcome.summaries == {}

    @pytest.mark.asyncio
    async def test_spliced_by_position_with_duplicate_titles(self) -> None:
        markdown = f"# A\nshort\n# A\n{LONG_BODY}"

        outcome = await summarize_sections(markdown, FakeSummarizer())

        lines = outcome.markdown.split("\n")
        assert lines[0] == "# A"
        assert lines[2] == "# A 摘要：本章介绍服务发现。"

    @pytest.mark.asyncio
    async def test_metrics_recorded(self) -> None:
        hook = MagicMock()
        markdown = f"# A\n{LONG_BODY}\n# B\nshort"

        await summarize_sections(markdown, FakeSummarizer(), metrics_hook=hook)

        hook.increment.assert_any_call(names.SECTIONS_SKIPPED_TOTAL, 1)
        hook.increment.assert_any_call(names.SECTIONS_SUMMARIZED_TOTAL, 1)
        hook.increment.assert_any_call(names.SECTION_SUMMARY_ERRORS_TOTAL, 0)

import re

from md_segmenter.segmenting.context import (
    inject_context,
    inject_heading_breadcrumbs,
    inject_parent_context,
)
from md_segmenter.segmenting.encoder import encode, encode_document
from md_segmenter.segmenting.models import ChildSegment, Markers


class TestInjectContext:
    def test_child_gets_parent_title(self) -> None:
        encoded = encode("# A\n\nHello world.\n\n# B\n\nGoodbye.")

        result = inject_context(encoded)

        assert result == (
            "{{>1#}} A\n\n"
            "{{>2#}} (所属章节: A) Hello world.\n\n"
            "{{>1#}} B\n\n"
            "{{>2#}} (所属章节: B) Goodbye.\n\n"
        )

    def test_summary_excluded_from_context(self) -> None:
        encoded = encode("# 技术架构 摘要：本章介绍服务发现\n\n服务发现模块负责注册。")

        result = inject_context(encoded)

        assert "{{>2#}} (所属章节: 技术架构) 服务发现模块负责注册。" in result

    def test_children_before_first_parent_untouched(self) -> None:
        document = inject_parent_context(encode_document("preface\n\n# A\n\nbody"))

        assert document.children == [
            ChildSegment("preface"),
            ChildSegment("body", context="A"),
        ]

    def test_reinjection_does_not_stack_prefixes(self) -> None:
        once = inject_context(encode("# A\n\nbody"))

        assert inject_context(once) == once

    def test_custom_markers(self) -> None:
        markers = Markers(parent="<P>", child="<C>")

        result = inject_context(encode("# A\n\nbody", markers), markers)

        assert result == "<P> A\n\n<C> (所属章节: A) body\n\n"

    def test_every_child_prefixed_with_an_emitted_parent_title(self) -> None:
        markdown = "# Intro\n\na\n\nb\n\n# Setup\n\n## Linux\n\nc\n\n# End\n\nd"
        result = inject_context(encode(markdown))

        titles = {
            line[len("{{>1#}} ") :]
            for line in result.split("\n")
            if line.startswith("{{>1#}}")
        }
        children = [line for line in result.split("\n") if line.startswith("{{>2#}}")]

        assert len(children) == 5
        for child in children:
            match = re.match(r"\{\{>2#\}\} \(所属章节: (.+?)\) ", child)
            assert match is not None
            assert match.group(1) in titles


class TestHeadingBreadcrumbs:
    def test_breadcrumb_before_body_lines(self) -> None:
        markdown = "# 部署\n## 环境准备\n### JDK 安装\n下载 JDK 17。\n# 运维\n巡检。"

        result = inject_heading_breadcrumbs(markdown)

        assert result == (
            "# 部署\n## 环境准备\n### JDK 安装\n"
            "[章节: 部署 > 环境准备 > JDK 安装]\n下载 JDK 17。\n"
            "# 运维\n"
            "[章节: 运维]\n巡检。"
        )

    def test_sibling_heading_replaces_previous(self) -> None:
        markdown = "# A\n## A1\nx\n## A2\ny"

        result = inject_heading_breadcrumbs(markdown)

        assert "[章节: A > A2]\ny" in result
        assert "A1 > A2" not in result

    def test_images_and_blank_lines_skipped(self) -> None:
        result = inject_heading_breadcrumbs("# A\n\n![fig](a.png)\ntext")

        assert result == "# A\n\n![fig](a.png)\n[章节: A]\ntext"

    def test_no_headings_unchanged(self) -> None:
        assert inject_heading_breadcrumbs("just text") == "just text"

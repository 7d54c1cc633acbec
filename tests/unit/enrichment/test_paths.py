# tests/unit/enrichment/test_paths.py

from md_segmenter.enrichment.capabilities import PrefixURLResolver
from md_segmenter.enrichment.paths import resolve_image_paths


def make_resolver() -> PrefixURLResolver:
    return PrefixURLResolver(
        "https://oss.example.com", {"a.png": "doc/a.png", "b.png": "doc/b.png"}
    )


class TestResolveImagePaths:
    def test_rewrites_parser_paths(self) -> None:
        markdown = "![fig 1](images/a.png)\n\ntext\n\n![](images/b.png)"

        result, unresolved = resolve_image_paths(
            markdown, ["a.png", "b.png"], make_resolver()
        )

        assert result == (
            "![fig 1](https://oss.example.com/doc/a.png)\n\n"
            "text\n\n"
            "![](https://oss.example.com/doc/b.png)"
        )
        assert unresolved == []

    def test_unresolved_names_reported_and_left_alone(self) -> None:
        markdown = "![](images/c.png)"

        result, unresolved = resolve_image_paths(markdown, ["c.png"], make_resolver())

        assert result == markdown
        assert unresolved == ["c.png"]

    def test_only_listed_names_rewritten(self) -> None:
        markdown = "![](images/a.png) ![](images/b.png)"

        result, _ = resolve_image_paths(markdown, ["a.png"], make_resolver())

        assert result == "![](https://oss.example.com/doc/a.png) ![](images/b.png)"

    def test_name_matched_exactly(self) -> None:
        markdown = "![](images/xa.png) ![](images/a.png.bak)"

        result, _ = resolve_image_paths(markdown, ["a.png"], make_resolver())

        assert result == markdown

    def test_plain_text_mentions_untouched(self) -> None:
        markdown = "see images/a.png for details"

        result, _ = resolve_image_paths(markdown, ["a.png"], make_resolver())

        assert result == markdown

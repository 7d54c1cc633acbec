import pytest

from md_segmenter.segmenting.models import (
    ChildSegment,
    EncodedDocument,
    Markers,
    ParentSegment,
    RawSegment,
    parse_encoded,
)


class TestMarkers:
    def test_defaults(self) -> None:
        markers = Markers()

        assert markers.parent == "{{>1#}}"
        assert markers.child == "{{>2#}}"

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            Markers(parent="", child="{{>2#}}")

    def test_rejects_identical(self) -> None:
        with pytest.raises(ValueError, match="must differ"):
            Markers(parent="##", child="##")

    def test_other_marker_levels_recognized(self) -> None:
        assert Markers().is_marker_line("{{>3#}} deeper")
        assert not Markers().is_marker_line("plain text")


class TestParentSegment:
    def test_title_cuts_summary(self) -> None:
        segment = ParentSegment("技术架构 摘要：本章介绍...")

        assert segment.title == "技术架构"

    def test_title_without_summary(self) -> None:
        assert ParentSegment("技术架构").title == "技术架构"

    def test_summary_label_at_start_is_not_cut(self) -> None:
        assert ParentSegment("摘要：总览").title == "摘要：总览"


class TestRender:
    def test_child_with_context(self) -> None:
        document = EncodedDocument(
            (ParentSegment("A"), ChildSegment("Hello world.", context="A"))
        )

        assert document.render() == (
            "{{>1#}} A\n\n{{>2#}} (所属章节: A) Hello world.\n\n"
        )

    def test_segments_are_frozen(self) -> None:
        segment = ChildSegment("text")

        with pytest.raises(AttributeError):
            segment.text = "modified"  # type: ignore


class TestParseEncoded:
    def test_round_trip_of_rendered_document(self) -> None:
        document = EncodedDocument(
            (
                ParentSegment("A 摘要：x"),
                ChildSegment("one\ntwo", context="A"),
                ChildSegment("three"),
            )
        )

        assert parse_encoded(document.render()) == document

    def test_continuation_lines_join_child(self) -> None:
        text = "{{>2#}} first\nsecond\n\nthird\n{{>1#}} B\n"

        document = parse_encoded(text)

        assert document.segments == (
            ChildSegment("first\nsecond\n\nthird"),
            ParentSegment("B"),
        )

    def test_title_with_parentheses_in_context(self) -> None:
        document = parse_encoded("{{>2#}} (所属章节: API (v2)) body\n")

        assert document.children == [ChildSegment("body", context="API (v2)")]

    def test_unknown_lines_pass_through(self) -> None:
        """Malformed input is kept as raw text instead of raising."""
        text = "stray line\n\n{{>3#}} level three\n{{>1#}} A\n"

        document = parse_encoded(text)

        assert document.segments == (
            RawSegment("stray line"),
            RawSegment("{{>3#}} level three"),
            ParentSegment("A"),
        )
        assert document.render() == (
            "stray line\n\n{{>3#}} level three\n\n{{>1#}} A\n\n"
        )

    def test_empty_child_dropped(self) -> None:
        assert parse_encoded("{{>2#}}\n\n").segments == ()

# src/md_segmenter/segmenting/models.py

"""Document tree for the two-level parent/child segment format.

Markdown is parsed once into an ``EncodedDocument``, transformed
(context injection, re-chunking) as a tree, and rendered to marker
syntax once at the end.
"""

import re
from dataclasses import dataclass, field

DEFAULT_PARENT_MARKER = "{{>1#}}"
DEFAULT_CHILD_MARKER = "{{>2#}}"

SUMMARY_LABEL = "摘要："
CONTEXT_LABEL = "所属章节"

# Marker levels other than the configured parent/child ones ({{>3#}} ...)
_ANY_LEVEL_MARKER = re.compile(r"^\{\{>\d+#\}\}")
_CONTEXT_PREFIX = re.compile(r"^\(" + CONTEXT_LABEL + r": (.+?)\)(?: |$)")


@dataclass(frozen=True)
class HeadingNode:
    level: int
    title: str
    offset: int


@dataclass(frozen=True)
class Markers:
    parent: str = DEFAULT_PARENT_MARKER
    child: str = DEFAULT_CHILD_MARKER

    def __post_init__(self) -> None:
        if not self.parent or not self.child:
            raise ValueError("markers must be non-empty")
        if self.parent == self.child:
            raise ValueError("parent and child markers must differ")

    def is_marker_line(self, line: str) -> bool:
        return (
            line.startswith(self.parent)
            or line.startswith(self.child)
            or _ANY_LEVEL_MARKER.match(line) is not None
        )


@dataclass(frozen=True)
class ParentSegment:
    """A top-level heading. ``heading`` is verbatim, summary suffix included."""

    heading: str

    @property
    def title(self) -> str:
        cut = self.heading.find(SUMMARY_LABEL)
        if cut > 0:
            return self.heading[:cut].strip()
        return self.heading.strip()

    def render(self, markers: Markers) -> str:
        return f"{markers.parent} {self.heading}"


@dataclass(frozen=True)
class ChildSegment:
    """A paragraph-level retrieval unit.

    ``context`` is the owning parent's title once injected. It is rendered
    as a prefix and does not count toward the size threshold.
    """

    text: str
    context: str | None = None

    def render(self, markers: Markers) -> str:
        if self.context:
            return f"{markers.child} ({CONTEXT_LABEL}: {self.context}) {self.text}"
        return f"{markers.child} {self.text}"


@dataclass(frozen=True)
class RawSegment:
    """Opaque pass-through text (foreign marker levels, stray lines)."""

    text: str

    def render(self, markers: Markers) -> str:
        return self.text


Segment = ParentSegment | ChildSegment | RawSegment


@dataclass(frozen=True)
class EncodedDocument:
    segments: tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def parents(self) -> list[ParentSegment]:
        return [s for s in self.segments if isinstance(s, ParentSegment)]

    @property
    def children(self) -> list[ChildSegment]:
        return [s for s in self.segments if isinstance(s, ChildSegment)]

    def render(self, markers: Markers = Markers()) -> str:
        """Linearize to marker syntax, one blank line after every segment."""
        return "".join(segment.render(markers) + "\n\n" for segment in self.segments)


def parse_encoded(text: str, markers: Markers = Markers()) -> EncodedDocument:
    """Read marker-syntax text back into a tree.

    A child's content runs from its marker line up to the next marker
    line of any level. Anything that is not a parent or child block is
    kept as a ``RawSegment`` rather than rejected.
    """
    segments: list[Segment] = []
    lines = text.split("\n")
    raw_buffer: list[str] = []

    def flush_raw() -> None:
        if raw_buffer:
            segments.append(RawSegment("\n".join(raw_buffer)))
            raw_buffer.clear()

    i = 0
    while i < len(lines):
        stripped = lines[i].strip()

        if stripped.startswith(markers.parent):
            flush_raw()
            segments.append(ParentSegment(stripped[len(markers.parent) :].strip()))
            i += 1
        elif stripped.startswith(markers.child):
            flush_raw()
            content = [stripped[len(markers.child) :].strip()]
            i += 1
            while i < len(lines) and not markers.is_marker_line(lines[i].strip()):
                content.append(lines[i])
                i += 1
            child = _parse_child("\n".join(content).strip())
            if child is not None:
                segments.append(child)
        elif not stripped:
            flush_raw()
            i += 1
        else:
            if markers.is_marker_line(stripped):
                flush_raw()
            raw_buffer.append(lines[i])
            i += 1

    flush_raw()
    return EncodedDocument(tuple(segments))


def _parse_child(content: str) -> ChildSegment | None:
    match = _CONTEXT_PREFIX.match(content)
    if match:
        text = content[match.end() :].strip()
        return ChildSegment(text=text, context=match.group(1)) if text else None
    return ChildSegment(text=content) if content else None

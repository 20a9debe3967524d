"""Diff-related data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .review import Comment


class HunkOp(str, Enum):
    """Directive letter of a normal-format diff hunk"""

    ADD = "a"
    DELETE = "d"
    CHANGE = "c"


class Hunk(BaseModel):
    """One parsed hunk of normal-format diff output"""

    op: HunkOp
    header_start: int  # start as written in the header
    header_end: int | None = None
    base_start: int  # effect line, 1-indexed
    removed_lines: list[str] = []
    added_lines: list[str] = []

    @property
    def base_count(self) -> int:
        return len(self.removed_lines)

    @property
    def diff_count(self) -> int:
        return len(self.added_lines)


class SegmentType(str, Enum):
    """Classification of a contiguous run of lines"""

    UNCHANGED = "Unchanged"
    CHANGED = "Changed"
    ADDED = "Added"
    DELETED = "Deleted"


class Segment(BaseModel):
    """A typed run of lines anchored on the base file.

    ``base_line_count`` and ``diff_line_count`` are ``None`` for the trailing
    Unchanged segment whose extent is only known once the base text ends.
    """

    type: SegmentType
    base_start_line: int
    base_line_count: int | None
    diff_line_count: int | None

    @property
    def is_open_ended(self) -> bool:
        return self.base_line_count is None


class LineEntry(BaseModel):
    """A line read from a cursor, with the comments attached to it"""

    line_number: int
    text: str
    comments: tuple[Comment, ...] = ()


class RenderLayout(str, Enum):
    SPLIT = "split"
    UNIFIED = "unified"
    SINGLE = "single"


class RowKind(str, Enum):
    LINE = "line"
    OMITTED = "omitted"


class RenderRow(BaseModel):
    """One row of the rendered comparison"""

    model_config = ConfigDict(frozen=True)

    kind: RowKind = RowKind.LINE
    side: str | None = None  # "base" or "diff" on unified change passes
    base_line_number: int | None = None
    base_text: str | None = None
    base_comments: tuple[Comment, ...] = ()
    diff_line_number: int | None = None
    diff_text: str | None = None
    diff_comments: tuple[Comment, ...] = ()
    omitted_count: int = 0
    message: str | None = None

    @property
    def comments(self) -> tuple[Comment, ...]:
        return self.base_comments + self.diff_comments


class RenderGroup(BaseModel):
    """Rows produced for one segment"""

    model_config = ConfigDict(frozen=True)

    index: int
    segment_type: SegmentType
    segment: Segment
    rows: tuple[RenderRow, ...]


class RenderPlan(BaseModel):
    """Complete, materialized rendering of a comparison"""

    model_config = ConfigDict(frozen=True)

    layout: RenderLayout
    base_on_left: bool = True
    columns: tuple[str, ...]
    groups: tuple[RenderGroup, ...]

    def rows(self) -> list[RenderRow]:
        return [row for group in self.groups for row in group.rows]


class ViewOptions(BaseModel):
    """Per-request rendering options"""

    unified_view: bool = False
    base_on_left: bool = True
    omit_unchanged_lines: bool = True
    context_lines: int = 50
    omit_threshold: int = 100
    max_line_length: int | None = None  # no server-side wrapping
    tab_replacement: str = "  \\t"

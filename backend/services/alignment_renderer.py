"""
Alignment Renderer - Lay out two file revisions as an aligned row plan

Segments drive two independent line cursors (base and diff). Each segment
becomes a row group; long unchanged runs are collapsed into "omitted" marker
rows except around the segment edges and around commented lines.
"""

from __future__ import annotations

import logging
from typing import Iterable

from models.diff import (
    LineEntry,
    RenderGroup,
    RenderLayout,
    RenderPlan,
    RenderRow,
    RowKind,
    Segment,
    SegmentType,
    ViewOptions,
)
from .comment_index import CommentIndex
from .line_encoder import DefaultLineEncoder
from .patched_text_reader import LineCursor

logger = logging.getLogger(__name__)

OMITTED_MESSAGE = "{count} unchanged lines omitted. Show entire file"


def columns_for(layout: RenderLayout, base_on_left: bool) -> tuple[str, ...]:
    """Column headers, left to right"""
    if layout is RenderLayout.SINGLE:
        return ("Num Base", "Txt Base")
    first, second = ("Base", "Diff") if base_on_left else ("Diff", "Base")
    if layout is RenderLayout.SPLIT:
        return (f"Num {first}", f"Txt {first}", f"Num {second}", f"Txt {second}")
    return (f"Num {first}", f"Num {second}", "Txt")


def visible_rows(
    row_count: int,
    anchors: Iterable[int],
    context_lines: int,
) -> list[bool]:
    """Which rows of an unchanged run stay visible.

    The first and last ``context_lines`` rows are kept, as is every anchor
    row together with ``context_lines`` rows before it and
    ``context_lines - 1`` rows after it.
    """
    visible = [False] * row_count
    for i in range(min(context_lines, row_count)):
        visible[i] = True
    for i in range(max(0, row_count - context_lines), row_count):
        visible[i] = True
    for anchor in anchors:
        visible[anchor] = True
        for i in range(max(0, anchor - context_lines), min(row_count, anchor + context_lines)):
            visible[i] = True
    return visible


class AlignmentRenderer:
    """Render segments plus base/diff cursors into a RenderPlan"""

    def __init__(self, options: ViewOptions | None = None, encoder=None):
        self.options = options or ViewOptions()
        self.encoder = encoder or DefaultLineEncoder()

    def render(
        self,
        segments: Iterable[Segment],
        base_cursor: LineCursor,
        diff_cursor: LineCursor | None,
        comments: CommentIndex | None = None,
        base_version_id: int | None = None,
        diff_version_id: int | None = None,
    ) -> RenderPlan:
        comments = comments or CommentIndex()
        single = (
            diff_cursor is None
            or diff_cursor is base_cursor
            or (base_version_id is not None and base_version_id == diff_version_id)
        )
        if single:
            layout = RenderLayout.SINGLE
        elif self.options.unified_view:
            layout = RenderLayout.UNIFIED
        else:
            layout = RenderLayout.SPLIT

        groups = []
        for segment in segments:
            base_lines = self._collect(base_cursor, segment.base_line_count, comments, base_version_id)
            if single:
                diff_lines = base_lines
            else:
                diff_lines = self._collect(diff_cursor, segment.diff_line_count, comments, diff_version_id)

            if segment.is_open_ended:
                # Trailing segment past the end of the file
                if not base_lines and not diff_lines:
                    continue
                segment = segment.model_copy(
                    update={"base_line_count": len(base_lines), "diff_line_count": len(diff_lines)}
                )

            rows = self._render_segment(layout, segment, base_lines, diff_lines)
            groups.append(
                RenderGroup(index=len(groups), segment_type=segment.type, segment=segment, rows=tuple(rows))
            )

        logger.debug(f"[AlignmentRenderer] Rendered {len(groups)} groups in {layout.value} layout")
        return RenderPlan(
            layout=layout,
            base_on_left=self.options.base_on_left,
            columns=columns_for(layout, self.options.base_on_left),
            groups=tuple(groups),
        )

    # ========== Line collection ==========

    @staticmethod
    def _collect(
        cursor: LineCursor,
        count: int | None,
        comments: CommentIndex,
        version_id: int,
    ) -> list[LineEntry]:
        """Advance the cursor `count` times, or to EOF when count is None"""
        entries = []
        while (count is None or len(entries) < count) and cursor.advance():
            entries.append(
                LineEntry(
                    line_number=cursor.line_number,
                    text=cursor.text,
                    comments=comments.lookup(version_id, cursor.line_number),
                )
            )
        return entries

    def _encode(self, entry: LineEntry) -> str:
        return self.encoder.encode_line(entry.text, self.options.max_line_length, self.options.tab_replacement)

    # ========== Row building ==========

    def _render_segment(
        self,
        layout: RenderLayout,
        segment: Segment,
        base_lines: list[LineEntry],
        diff_lines: list[LineEntry],
    ) -> list[RenderRow]:
        if layout is RenderLayout.SINGLE:
            diff_lines = []
        elif layout is RenderLayout.UNIFIED and segment.type is not SegmentType.UNCHANGED:
            rows = [self._base_row(entry, side="base") for entry in base_lines]
            rows.extend(self._diff_row(entry, side="diff") for entry in diff_lines)
            return rows

        row_count = max(len(base_lines), len(diff_lines))
        visible = None
        if (
            segment.type is SegmentType.UNCHANGED
            and self.options.omit_unchanged_lines
            and row_count > self.options.omit_threshold
        ):
            anchors = [
                i
                for i in range(row_count)
                if (i < len(base_lines) and base_lines[i].comments)
                or (i < len(diff_lines) and diff_lines[i].comments)
            ]
            visible = visible_rows(row_count, anchors, self.options.context_lines)

        rows = []
        i = 0
        while i < row_count:
            if visible is not None and not visible[i]:
                run_end = i
                while run_end < row_count and not visible[run_end]:
                    run_end += 1
                rows.append(self._omitted_row(base_lines, diff_lines, i, run_end))
                i = run_end
                continue

            base = base_lines[i] if i < len(base_lines) else None
            diff = diff_lines[i] if i < len(diff_lines) else None
            rows.append(self._pair_row(layout, base, diff))
            i += 1
        return rows

    def _pair_row(self, layout: RenderLayout, base: LineEntry | None, diff: LineEntry | None) -> RenderRow:
        fields = {}
        if base is not None:
            fields.update(
                base_line_number=base.line_number,
                base_text=self._encode(base),
                base_comments=base.comments,
            )
        if diff is not None:
            fields.update(diff_line_number=diff.line_number, diff_comments=diff.comments)
            # Unified unchanged rows show the text once
            if layout is RenderLayout.SPLIT:
                fields["diff_text"] = self._encode(diff)
        return RenderRow(**fields)

    def _base_row(self, entry: LineEntry, side: str | None = None) -> RenderRow:
        return RenderRow(
            side=side,
            base_line_number=entry.line_number,
            base_text=self._encode(entry),
            base_comments=entry.comments,
        )

    def _diff_row(self, entry: LineEntry, side: str | None = None) -> RenderRow:
        return RenderRow(
            side=side,
            diff_line_number=entry.line_number,
            diff_text=self._encode(entry),
            diff_comments=entry.comments,
        )

    @staticmethod
    def _omitted_row(
        base_lines: list[LineEntry],
        diff_lines: list[LineEntry],
        start: int,
        end: int,
    ) -> RenderRow:
        count = end - start
        return RenderRow(
            kind=RowKind.OMITTED,
            base_line_number=base_lines[start].line_number if start < len(base_lines) else None,
            diff_line_number=diff_lines[start].line_number if start < len(diff_lines) else None,
            omitted_count=count,
            message=OMITTED_MESSAGE.format(count=count),
        )

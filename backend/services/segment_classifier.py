"""
Segment Classifier - Turn a hunk stream into typed, base-anchored segments
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from models.diff import Hunk, Segment, SegmentType
from .hunk_grammar import HunkTokenizer, hunk_stream

logger = logging.getLogger(__name__)


def segment_type_for(hunk: Hunk) -> SegmentType:
    """Classify a hunk by what it actually removes and adds"""
    if hunk.diff_count == 0:
        return SegmentType.DELETED
    if hunk.base_count == 0:
        return SegmentType.ADDED
    return SegmentType.CHANGED


def _unchanged(start: int, count: int | None) -> Segment:
    return Segment(
        type=SegmentType.UNCHANGED,
        base_start_line=start,
        base_line_count=count,
        diff_line_count=count,
    )


def classify(source: str | Iterable[str] | Iterable[Hunk] | None) -> Iterator[Segment]:
    """Yield segments for diff output, filling the gaps between hunks.

    The last segment is an open-ended Unchanged segment covering whatever
    remains of the base file after the last hunk. It is not emitted when the
    diff output ends on an unexpected line.
    """
    tokenizer = HunkTokenizer()
    next_base_line = 1
    for hunk in hunk_stream(source, tokenizer):
        gap = hunk.base_start - next_base_line
        if gap > 0:
            yield _unchanged(next_base_line, gap)
        elif gap < 0:
            logger.debug(
                f"[SegmentClassifier] Hunk at line {hunk.base_start} overlaps previous hunk ending at "
                f"line {next_base_line - 1}"
            )

        yield Segment(
            type=segment_type_for(hunk),
            base_start_line=hunk.base_start,
            base_line_count=hunk.base_count,
            diff_line_count=hunk.diff_count,
        )
        next_base_line = hunk.base_start + hunk.base_count

    if tokenizer.stopped:
        return
    yield _unchanged(next_base_line, None)


def resolve_segments(segments: Iterable[Segment], base_line_count: int) -> list[Segment]:
    """Bound open-ended segments against the real length of the base file.

    An open-ended segment starting past the end of the base is dropped.
    """
    resolved = []
    for segment in segments:
        if segment.is_open_ended:
            remainder = base_line_count - segment.base_start_line + 1
            if remainder <= 0:
                continue
            segment = segment.model_copy(
                update={"base_line_count": remainder, "diff_line_count": remainder}
            )
        resolved.append(segment)
    return resolved


def classify_resolved(
    source: str | Iterable[str] | Iterable[Hunk] | None,
    base_line_count: int,
) -> list[Segment]:
    """Two-phase classification: parse every hunk, then size every segment"""
    return resolve_segments(list(classify(source)), base_line_count)

"""Models module - Pydantic data models"""

from .review import Comment, FileVersion, VersionTextResponse
from .diff import (
    Hunk,
    HunkOp,
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
from .requests import (
    PatchRequest,
    PatchResponse,
    RenderRequest,
    SegmentsRequest,
    SegmentsResponse,
)

__all__ = [
    # Review models
    "Comment",
    "FileVersion",
    "VersionTextResponse",
    # Diff models
    "Hunk",
    "HunkOp",
    "LineEntry",
    "RenderGroup",
    "RenderLayout",
    "RenderPlan",
    "RenderRow",
    "RowKind",
    "Segment",
    "SegmentType",
    "ViewOptions",
    # Request models
    "PatchRequest",
    "PatchResponse",
    "RenderRequest",
    "SegmentsRequest",
    "SegmentsResponse",
]

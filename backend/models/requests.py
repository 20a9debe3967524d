"""Request and response bodies for the diff API"""

from __future__ import annotations

from pydantic import BaseModel

from .diff import Segment, ViewOptions
from .review import Comment


class PatchRequest(BaseModel):
    """Request to apply normal-format hunks to a base text"""

    base_text: str
    hunk_text: str = ""
    strict: bool = False


class PatchResponse(BaseModel):
    """Patched text"""

    text: str
    lines: list[str]
    mismatch_count: int = 0


class SegmentsRequest(BaseModel):
    """Request to classify hunk text into segments"""

    hunk_text: str = ""
    base_text: str | None = None  # resolves the trailing segment when given


class SegmentsResponse(BaseModel):
    """Classified segments"""

    segments: list[Segment]


class RenderRequest(BaseModel):
    """Request to render an already diffed pair of texts"""

    base_version_id: int  # comments are matched against these ids
    diff_version_id: int
    base_text: str
    diff_text: str | None = None  # reconstructed from base_text + hunk_text when missing
    hunk_text: str = ""
    file_name: str = ""
    comments: list[Comment] = []
    options: ViewOptions = ViewOptions()

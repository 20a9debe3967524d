"""Review-side data models: file versions and comments"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Comment(BaseModel):
    """A reviewer comment anchored on one line of one file version"""

    model_config = ConfigDict(frozen=True)

    version_id: int
    line: int
    line_stamp: int = 0  # ordering within the line
    user_name: str
    timestamp: datetime | None = None
    is_read_only: bool = False
    text: str


class FileVersion(BaseModel):
    """A stored revision of a file.

    Full-text versions carry the whole file. Other versions carry normal-format
    diff output against the revision base of the same file and revision.
    """

    id: int
    file_id: int
    file_name: str = ""
    revision: int
    is_revision_base: bool = False
    is_full_text: bool = True
    text: str = ""


class VersionTextResponse(BaseModel):
    """Reconstructed text of a file version"""

    version_id: int
    text: str
    line_count: int

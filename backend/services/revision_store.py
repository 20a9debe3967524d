"""
Revision Store - File versions and comments held in memory

Stands in for the relational store. Versions that are not full text are
rebuilt from their revision base with PatchedTextReader.
"""

from __future__ import annotations

import logging
import threading

from models.review import Comment, FileVersion
from .patched_text_reader import PatchedTextReader

logger = logging.getLogger(__name__)


class VersionNotFoundError(LookupError):
    """No file version with the requested id"""


class BaseRevisionNotFoundError(LookupError):
    """A diff-only version has no revision base to apply to"""

    def __init__(self, version: FileVersion):
        super().__init__(
            f"Base revision not found for version {version.id} "
            f"(file {version.file_id}, revision {version.revision})"
        )
        self.version = version


class RevisionStore:
    """In-memory file versions and comments"""

    _instance = None

    def __init__(self):
        self._lock = threading.Lock()
        self._versions: dict[int, FileVersion] = {}
        self._comments: list[Comment] = []

    @classmethod
    def get_instance(cls) -> "RevisionStore":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = RevisionStore()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        cls._instance = None

    # ========== Versions ==========

    def add_version(self, version: FileVersion) -> FileVersion:
        with self._lock:
            self._versions[version.id] = version
        logger.info(
            f"[RevisionStore] Stored version {version.id} of file {version.file_id} "
            f"(revision {version.revision}, {'full text' if version.is_full_text else 'diff'})"
        )
        return version

    def get_version(self, version_id: int) -> FileVersion:
        version = self._versions.get(version_id)
        if version is None:
            raise VersionNotFoundError(f"File version {version_id} not found")
        return version

    def find_revision_base(self, version: FileVersion) -> FileVersion:
        candidates = [
            v
            for v in self._versions.values()
            if v.file_id == version.file_id and v.revision == version.revision and v.is_revision_base
        ]
        if len(candidates) != 1:
            raise BaseRevisionNotFoundError(version)
        return candidates[0]

    def get_text(self, version: FileVersion | int) -> str:
        """Full text of a version, reconstructing diff-only versions"""
        if isinstance(version, int):
            version = self.get_version(version)
        if version.is_full_text:
            return version.text

        base = self.find_revision_base(version)
        if not base.is_full_text:
            logger.error(f"[RevisionStore] Revision base {base.id} is not stored as full text")
            raise BaseRevisionNotFoundError(version)
        return PatchedTextReader(base.text, version.text).read_text()

    # ========== Comments ==========

    def add_comment(self, comment: Comment) -> Comment:
        self.get_version(comment.version_id)
        with self._lock:
            self._comments.append(comment)
        return comment

    def comments_for(self, version_id: int) -> list[Comment]:
        """Comments on a version, sorted by line then line stamp"""
        return sorted(
            (c for c in self._comments if c.version_id == version_id),
            key=lambda c: (c.line, c.line_stamp),
        )

"""
Comparison Service - Load, diff and render two file revisions
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from models.diff import RenderPlan, ViewOptions
from models.review import Comment
from .alignment_renderer import AlignmentRenderer
from .comment_index import CommentIndex
from .diff_runner import DiffRunner
from .line_encoder import get_encoder_for_file
from .patched_text_reader import LineCursor, PatchedTextReader
from .revision_store import RevisionStore
from .segment_classifier import classify

logger = logging.getLogger(__name__)


class ComparisonService:
    """Ties the revision store, the diff tool and the renderer together"""

    def __init__(
        self,
        config: dict[str, Any],
        store: RevisionStore | None = None,
        runner: DiffRunner | None = None,
    ):
        self.config = config
        self.store = store or RevisionStore.get_instance()
        self.runner = runner or DiffRunner(config.get("diff", {}))

    def compare(
        self,
        base_id: int,
        diff_id: int,
        options: ViewOptions,
        ignore_whitespace: bool = False,
    ) -> RenderPlan:
        """Render stored revision base_id against diff_id.

        Equal ids render a single revision and skip the diff tool.
        """
        base_version = self.store.get_version(base_id)
        diff_version = self.store.get_version(diff_id)
        base_text = self.store.get_text(base_version)
        comments = self.store.comments_for(base_id)

        if base_id == diff_id:
            diff_text, hunk_text = base_text, ""
        else:
            diff_text = self.store.get_text(diff_version)
            hunk_text = self.runner.run(base_text, diff_text, ignore_whitespace)
            comments += self.store.comments_for(diff_id)

        logger.info(f"[ComparisonService] Rendering {base_id} -> {diff_id} ({base_version.file_name or 'unnamed'})")
        return self.render_texts(
            base_text,
            diff_text,
            hunk_text,
            base_id,
            diff_id,
            options,
            comments=comments,
            file_name=base_version.file_name,
        )

    def render_texts(
        self,
        base_text: str,
        diff_text: str | None,
        hunk_text: str,
        base_version_id: int,
        diff_version_id: int,
        options: ViewOptions,
        comments: Iterable[Comment] = (),
        file_name: str = "",
    ) -> RenderPlan:
        """Render texts already at hand.

        When diff_text is None the "after" text is rebuilt from base_text and
        hunk_text.
        """
        base_cursor = LineCursor.from_text(base_text)
        if base_version_id == diff_version_id:
            diff_cursor = base_cursor
        elif diff_text is None:
            diff_cursor = LineCursor(PatchedTextReader(base_text, hunk_text))
        else:
            diff_cursor = LineCursor.from_text(diff_text)

        encoder = get_encoder_for_file(file_name, self.config.get("encoders"))
        renderer = AlignmentRenderer(options, encoder)
        return renderer.render(
            classify(hunk_text),
            base_cursor,
            diff_cursor,
            CommentIndex(comments),
            base_version_id,
            diff_version_id,
        )

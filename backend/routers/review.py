"""Review API endpoints: stored file versions, comments and comparisons"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from models.diff import RenderPlan
from models.review import Comment, FileVersion, VersionTextResponse
from services.comparison_service import ComparisonService
from services.config_manager import ConfigManager
from services.diff_runner import DiffRunnerError
from services.hunk_grammar import iter_text_lines
from services.revision_store import BaseRevisionNotFoundError, RevisionStore, VersionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/versions", response_model=FileVersion)
async def add_version(version: FileVersion) -> FileVersion:
    """Store a file version (full text or diff against its revision base)"""
    return RevisionStore.get_instance().add_version(version)


@router.get("/versions/{version_id}/text", response_model=VersionTextResponse)
async def get_version_text(version_id: int) -> VersionTextResponse:
    """Full text of a stored version"""
    store = RevisionStore.get_instance()
    try:
        text = store.get_text(version_id)
    except VersionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BaseRevisionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return VersionTextResponse(
        version_id=version_id,
        text=text,
        line_count=sum(1 for _ in iter_text_lines(text)),
    )


@router.post("/comments", response_model=Comment)
async def add_comment(comment: Comment) -> Comment:
    """Attach a comment to a line of a stored version"""
    try:
        return RevisionStore.get_instance().add_comment(comment)
    except VersionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/compare", response_model=RenderPlan)
async def compare(
    base: int,
    diff: int,
    unified: bool | None = None,
    base_on_left: bool | None = Query(None, alias="baseOnLeft"),
    show_all_lines: bool = Query(False, alias="showAllLines"),
    ignore_whitespace: bool = Query(False, alias="ignoreWhitespace"),
) -> RenderPlan:
    """Render stored version `base` against stored version `diff`"""
    config_manager = ConfigManager.get_instance()
    options = config_manager.view_options(
        unified_view=unified,
        base_on_left=base_on_left,
        omit_unchanged_lines=not show_all_lines,
    )
    service = ComparisonService(config_manager.get_config())

    try:
        return service.compare(base, diff, options, ignore_whitespace=ignore_whitespace)
    except VersionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BaseRevisionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DiffRunnerError as e:
        logger.error(f"[Review] Comparison {base} -> {diff} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

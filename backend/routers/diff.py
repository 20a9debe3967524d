"""Diff kernel API endpoints: patch, classify and render raw texts"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from models.diff import RenderPlan
from models.requests import (
    PatchRequest,
    PatchResponse,
    RenderRequest,
    SegmentsRequest,
    SegmentsResponse,
)
from services.comparison_service import ComparisonService
from services.config_manager import ConfigManager
from services.hunk_grammar import iter_text_lines
from services.patched_text_reader import PatchedTextReader, PatchMismatchError
from services.segment_classifier import classify, classify_resolved

router = APIRouter()


@router.post("/patch", response_model=PatchResponse)
async def apply_patch(request: PatchRequest) -> PatchResponse:
    """Apply normal-format hunks to a base text"""
    reader = PatchedTextReader(request.base_text, request.hunk_text, strict=request.strict)
    try:
        lines = list(reader.read_lines())
    except PatchMismatchError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PatchResponse(
        text="\n".join(lines) + "\n" if lines else "",
        lines=lines,
        mismatch_count=reader.mismatch_count,
    )


@router.post("/segments", response_model=SegmentsResponse)
async def classify_segments(request: SegmentsRequest) -> SegmentsResponse:
    """Classify hunk text into typed segments"""
    if request.base_text is None:
        segments = list(classify(request.hunk_text))
    else:
        line_count = sum(1 for _ in iter_text_lines(request.base_text))
        segments = classify_resolved(request.hunk_text, line_count)
    return SegmentsResponse(segments=segments)


@router.post("/render", response_model=RenderPlan)
async def render(request: RenderRequest) -> RenderPlan:
    """Render a base text against its diffed counterpart"""
    config = ConfigManager.get_instance().get_config()
    service = ComparisonService(config)
    return service.render_texts(
        request.base_text,
        request.diff_text,
        request.hunk_text,
        request.base_version_id,
        request.diff_version_id,
        request.options,
        comments=request.comments,
        file_name=request.file_name,
    )

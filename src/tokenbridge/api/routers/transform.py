"""
Transform router - analyze and rewrite component files sent inline.

Work is CPU-bound and synchronous, so handlers are plain ``def`` and run in
the threadpool.
"""

import logging
from dataclasses import replace

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from ...analyzer import ComponentAnalysis, analyze
from ...catalog import CatalogError
from ...style_config import generate_css_variables, generate_tailwind_config
from ...transformer import transform
from ..models import AnalysisResponse, AnalyzeRequest, TransformRequest, TransformResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_state():
    from ..main import state
    return state


@router.post("/analyze", response_model=AnalysisResponse)
def analyze_files(request: AnalyzeRequest):
    """Find hardcoded style literals in the given files."""
    config = get_state().get_config()
    files = [f.model_dump() for f in request.files]
    analysis = analyze(files, extensions=config.presentational_extensions)
    return AnalysisResponse(**analysis.to_dict())


@router.post("/transform", response_model=TransformResponse)
def transform_files(request: TransformRequest):
    """Rewrite matched literals into token references. Input files are echoed back transformed."""
    state = get_state()
    config = state.get_config()
    if request.style_object_reference is not None:
        config = replace(config, style_object_reference=request.style_object_reference.value)

    analysis = None
    if request.analysis is not None:
        analysis = ComponentAnalysis.from_dict(request.analysis.model_dump())

    try:
        result = transform(
            [f.model_dump() for f in request.files],
            analysis=analysis,
            catalog=state.get_catalog(),
            config=config,
        )
    except CatalogError as e:
        logger.error(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=503, detail=f"Catalog unavailable: {e}")

    data = result.to_dict()
    return TransformResponse(
        summary=data["summary"],
        files=[f.to_dict() for f in result.transformed_files],
        results=data["files"],
        errors=data["errors"],
        diff=result.diff() if request.include_diff else None,
    )


@router.get("/style-map")
def style_map():
    """Category -> {key: value} for style system configuration."""
    return get_state().get_catalog().to_style_map()


@router.get("/style-config/tailwind")
def tailwind_config():
    return generate_tailwind_config(get_state().get_catalog())


@router.get("/style-config/css", response_class=PlainTextResponse)
def css_variables():
    return generate_css_variables(get_state().get_catalog())

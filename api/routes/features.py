"""
Feature Routes
Endpoints for generating, editing, analyzing and exporting Gherkin features
"""
from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import Response
from typing import List, Optional
import logging

from ..models.features import (
    GenerateFeatureRequest,
    UpdateFeatureRequest,
    SuggestTitlesRequest,
    SuggestTitlesResponse,
    TitleCheckResponse,
    RegenerateResponse,
    FeatureResponse
)
from ..auth import get_current_user
from ..dependencies import get_feature_service
from featuregen.exceptions import (
    AnalysisError,
    AnalysisInProgressError,
    FeatureNotFoundError,
    GenerationError
)
from featuregen.feature_service import FeatureService

router = APIRouter()
logger = logging.getLogger(__name__)

# Handlers are plain functions: the LLM and SQLite calls block, so FastAPI
# runs them in its threadpool and different features are served in parallel.


@router.post("/api/features/generate",
          tags=["Features"],
          response_model=FeatureResponse,
          summary="Generate a feature",
          description="Generate a Gherkin feature from a user story, score its complexity and store it")
def generate_feature(
    request: GenerateFeatureRequest,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Generate and store a new feature"""
    try:
        logger.info(f"User {current_user} generating feature '{request.title}' ({request.scenario_count} scenarios)")
        result = service.generate_feature(
            title=request.title,
            story=request.story,
            scenario_count=request.scenario_count,
            domain=request.domain or "generic",
            epic_id=request.epic_id,
            user=current_user
        )
        return FeatureResponse.from_feature(result.feature, result.warnings)

    except HTTPException:
        raise
    except GenerationError as e:
        logger.error(f"Error generating feature: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating feature: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to generate feature: {str(e)}")


@router.post("/api/features/suggest-titles",
          tags=["Features"],
          response_model=SuggestTitlesResponse,
          summary="Suggest feature titles",
          description="Ask the LLM for short feature titles matching a user story")
def suggest_titles(
    request: SuggestTitlesRequest,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Suggest titles for a story"""
    try:
        return SuggestTitlesResponse(titles=service.suggest_titles(request.story))
    except GenerationError as e:
        logger.error(f"Error suggesting titles: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/features",
         tags=["Features"],
         response_model=List[FeatureResponse],
         summary="List features",
         description="List features, newest first; archived features only when include_deleted is set")
def list_features(
    include_deleted: bool = Query(False, description="Include archived features"),
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """List features"""
    try:
        return [FeatureResponse.from_feature(f) for f in service.list_features(include_deleted=include_deleted)]
    except Exception as e:
        logger.error(f"Error listing features: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to list features: {str(e)}")


@router.get("/api/features/check-title",
         tags=["Features"],
         response_model=TitleCheckResponse,
         summary="Check for a duplicate title",
         description="Case-insensitive check whether a feature with this title already exists")
def check_title(
    title: str = Query(..., min_length=1, description="Title to check"),
    exclude_id: Optional[int] = Query(None, description="Feature to ignore (the one being edited)"),
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Check whether a title is taken"""
    return TitleCheckResponse(title=title, exists=service.title_exists(title, exclude_id=exclude_id))


@router.get("/api/features/export/{feature_id}",
         tags=["Features"],
         summary="Export a feature",
         description="Download the feature text as an attachment")
def export_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Export the raw feature text"""
    try:
        filename, content = service.export_feature(feature_id)
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=content,
        media_type="application/msword",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.get("/api/features/{feature_id}",
         tags=["Features"],
         response_model=FeatureResponse,
         summary="Get feature details",
         description="Get a feature with its stored complexity analysis")
def get_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Get a feature"""
    try:
        return FeatureResponse.from_feature(service.get_feature(feature_id))
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/api/features/{feature_id}",
           tags=["Features"],
           response_model=FeatureResponse,
           summary="Update a feature",
           description=(
               "Save edits to a feature. When the edit leaves the stored complexity analysis "
               "out of step with the scenario headings it is re-analyzed; analysis problems are "
               "reported in `warnings` and never fail the edit."
           ))
def update_feature(
    feature_id: int,
    request: UpdateFeatureRequest,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Update a feature and reconcile its analysis"""
    try:
        logger.info(f"User {current_user} updating feature {feature_id}")
        changes = request.dict(exclude_unset=True)
        result = service.update_feature(feature_id, changes)
        return FeatureResponse.from_feature(result.feature, result.warnings)

    except HTTPException:
        raise
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating feature {feature_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update feature: {str(e)}")


def _reanalyze(feature_id: int, service: FeatureService) -> FeatureResponse:
    try:
        service.reanalyze_feature(feature_id)
        return FeatureResponse.from_feature(service.get_feature(feature_id))
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except AnalysisError as e:
        logger.warning(f"Re-analysis of feature {feature_id} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/api/features/{feature_id}/reanalyze",
          tags=["Features"],
          response_model=FeatureResponse,
          summary="Re-analyze complexity",
          description="Score the current feature text again and store the aligned analysis")
def reanalyze_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Force a complexity re-analysis"""
    logger.info(f"User {current_user} requested re-analysis of feature {feature_id}")
    return _reanalyze(feature_id, service)


@router.post("/api/features/{feature_id}/complexity",
          tags=["Features"],
          response_model=FeatureResponse,
          summary="Analyze complexity",
          description="Alias of the re-analyze endpoint")
def analyze_complexity(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    return _reanalyze(feature_id, service)


@router.post("/api/features/{feature_id}/regenerate",
          tags=["Features"],
          response_model=RegenerateResponse,
          summary="Regenerate feature text",
          description="Generate fresh Gherkin for an existing feature without saving it")
def regenerate_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    """Regenerate text for review"""
    try:
        feature = service.get_feature(feature_id)
        content = service.regenerate_content(
            feature.title, feature.story, feature.scenario_count, feature.domain
        )
        return RegenerateResponse(generated_content=content)
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except GenerationError as e:
        logger.error(f"Error regenerating feature {feature_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


def _archive(feature_id: int, service: FeatureService) -> FeatureResponse:
    try:
        return FeatureResponse.from_feature(service.archive_feature(feature_id))
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/api/features/{feature_id}/archive",
          tags=["Features"],
          response_model=FeatureResponse,
          summary="Archive a feature",
          description="Soft-delete a feature; it can be restored later")
def archive_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    logger.info(f"User {current_user} archiving feature {feature_id}")
    return _archive(feature_id, service)


@router.post("/api/features/{feature_id}/delete",
          tags=["Features"],
          response_model=FeatureResponse,
          summary="Delete a feature",
          description="Alias of the archive endpoint")
def delete_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    logger.info(f"User {current_user} deleting feature {feature_id}")
    return _archive(feature_id, service)


@router.post("/api/features/{feature_id}/restore",
          tags=["Features"],
          response_model=FeatureResponse,
          summary="Restore a feature",
          description="Bring an archived feature back")
def restore_feature(
    feature_id: int,
    current_user: str = Depends(get_current_user),
    service: FeatureService = Depends(get_feature_service)
):
    try:
        logger.info(f"User {current_user} restoring feature {feature_id}")
        return FeatureResponse.from_feature(service.restore_feature(feature_id))
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

"""
Epic Routes
Endpoints for grouping features into epics
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import List
import logging

from ..models.epics import EpicRequest, EpicUpdateRequest, EpicResponse
from ..models.features import FeatureResponse
from ..auth import get_current_user
from ..dependencies import get_feature_store
from featuregen.exceptions import FeatureNotFoundError
from featuregen.feature_store import FeatureStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/epics",
         tags=["Epics"],
         response_model=List[EpicResponse],
         summary="List epics",
         description="Get all epics, newest first")
def list_epics(
    current_user: str = Depends(get_current_user),
    store: FeatureStore = Depends(get_feature_store)
):
    """List epics"""
    try:
        return [EpicResponse(**epic.dict()) for epic in store.list_epics()]
    except Exception as e:
        logger.error(f"Error listing epics: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to list epics: {str(e)}")


@router.post("/api/epics",
          tags=["Epics"],
          response_model=EpicResponse,
          summary="Create epic",
          description="Create a new epic")
def create_epic(
    request: EpicRequest,
    current_user: str = Depends(get_current_user),
    store: FeatureStore = Depends(get_feature_store)
):
    """Create an epic"""
    try:
        logger.info(f"User {current_user} creating epic: {request.name}")
        epic = store.create_epic(
            name=request.name,
            description=request.description,
            status=request.status,
            created_by=current_user
        )
        return EpicResponse(**epic.dict())
    except Exception as e:
        logger.error(f"Error creating epic: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create epic: {str(e)}")


@router.patch("/api/epics/{epic_id}",
           tags=["Epics"],
           response_model=EpicResponse,
           summary="Update epic",
           description="Update epic name, description or status")
def update_epic(
    epic_id: int,
    request: EpicUpdateRequest,
    current_user: str = Depends(get_current_user),
    store: FeatureStore = Depends(get_feature_store)
):
    """Update an epic"""
    try:
        logger.info(f"User {current_user} updating epic {epic_id}")
        updates = {k: v for k, v in request.dict(exclude_unset=True).items() if v is not None}
        return EpicResponse(**store.update_epic(epic_id, **updates).dict())
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating epic {epic_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update epic: {str(e)}")


@router.delete("/api/epics/{epic_id}",
            tags=["Epics"],
            summary="Delete epic",
            description="Delete an epic; its features are kept and detached")
def delete_epic(
    epic_id: int,
    current_user: str = Depends(get_current_user),
    store: FeatureStore = Depends(get_feature_store)
):
    """Delete an epic"""
    try:
        logger.info(f"User {current_user} deleting epic {epic_id}")
        store.delete_epic(epic_id)
        return {"success": True, "message": f"Epic {epic_id} deleted"}
    except FeatureNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting epic {epic_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to delete epic: {str(e)}")


@router.get("/api/epics/{epic_id}/features",
         tags=["Epics"],
         response_model=List[FeatureResponse],
         summary="List epic features",
         description="Get the features attached to an epic")
def list_epic_features(
    epic_id: int,
    current_user: str = Depends(get_current_user),
    store: FeatureStore = Depends(get_feature_store)
):
    """List features of an epic"""
    if not store.get_epic(epic_id):
        raise HTTPException(status_code=404, detail=f"Epic {epic_id} not found")
    return [FeatureResponse.from_feature(f) for f in store.list_features_by_epic(epic_id)]

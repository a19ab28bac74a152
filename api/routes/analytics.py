"""
Analytics Routes
Feature generation statistics
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import List
import logging

from ..models.epics import AnalyticsEventResponse
from ..auth import get_current_user
from ..dependencies import get_feature_store
from featuregen.feature_store import FeatureStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/analytics",
         tags=["Analytics"],
         response_model=List[AnalyticsEventResponse],
         summary="List generation events",
         description="Get recorded feature generation attempts with their outcome, newest first")
def list_analytics(
    current_user: str = Depends(get_current_user),
    store: FeatureStore = Depends(get_feature_store)
):
    """List analytics events"""
    try:
        return [AnalyticsEventResponse(**event.dict()) for event in store.list_events()]
    except Exception as e:
        logger.error(f"Error listing analytics: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to list analytics: {str(e)}")

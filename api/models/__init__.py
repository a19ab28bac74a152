"""
Models Package
Export all API models for easy imports
"""
# Feature models
from .features import (
    GenerateFeatureRequest,
    UpdateFeatureRequest,
    SuggestTitlesRequest,
    SuggestTitlesResponse,
    TitleCheckResponse,
    RegenerateResponse,
    FeatureResponse
)

# Epic and analytics models
from .epics import (
    EpicRequest,
    EpicUpdateRequest,
    EpicResponse,
    AnalyticsEventResponse
)

__all__ = [
    'GenerateFeatureRequest',
    'UpdateFeatureRequest',
    'SuggestTitlesRequest',
    'SuggestTitlesResponse',
    'TitleCheckResponse',
    'RegenerateResponse',
    'FeatureResponse',
    'EpicRequest',
    'EpicUpdateRequest',
    'EpicResponse',
    'AnalyticsEventResponse',
]

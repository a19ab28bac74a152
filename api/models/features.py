"""
Feature Models
Request and response models for feature generation, editing and analysis endpoints
"""
from pydantic import BaseModel, Field, validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from featuregen.models import DOMAIN_VALUES, LIFECYCLE_STAGES, Feature


def _validate_domain(v):
    if v is not None and v not in DOMAIN_VALUES:
        raise ValueError(f"Unsupported domain: {v}. Supported domains: {DOMAIN_VALUES}")
    return v


def _validate_lifecycle_stage(v):
    if v is not None and v not in LIFECYCLE_STAGES:
        raise ValueError(f"Unsupported lifecycle stage: {v}. Supported stages: {LIFECYCLE_STAGES}")
    return v


class GenerateFeatureRequest(BaseModel):
    """Request model for generating a new feature from a user story"""
    title: str = Field(
        ...,
        min_length=1,
        description="Feature title",
        example="Checkout with saved card"
    )
    story: str = Field(
        ...,
        min_length=10,
        description="User story the scenarios should cover",
        example="As a returning customer I want to pay with a saved card so that checkout is faster"
    )
    scenario_count: int = Field(
        ...,
        ge=1,
        le=10,
        description="Number of scenarios to generate (1-10)",
        example=3
    )
    domain: Optional[str] = Field(
        "generic",
        description=f"Domain used to specialise the scenarios: {', '.join(DOMAIN_VALUES)}",
        example="ecommerce"
    )
    epic_id: Optional[int] = Field(None, description="Epic to attach the feature to")

    @validator('domain')
    def validate_domain(cls, v):
        return _validate_domain(v)


class UpdateFeatureRequest(BaseModel):
    """Partial update of a feature; only provided fields are written"""
    title: Optional[str] = Field(None, min_length=1, description="Feature title")
    story: Optional[str] = Field(None, min_length=10, description="User story")
    scenario_count: Optional[int] = Field(None, ge=1, le=10, description="Declared number of scenarios")
    generated_content: Optional[str] = Field(None, min_length=1, description="Edited Gherkin text (marks the feature as manually edited)")
    domain: Optional[str] = Field(None, description="Feature domain")
    epic_id: Optional[int] = Field(None, description="Epic the feature belongs to")
    status: Optional[str] = Field(None, description="Board status")
    lifecycle_stage: Optional[str] = Field(None, description=f"Lifecycle stage: {', '.join(LIFECYCLE_STAGES)}")

    @validator('domain')
    def validate_domain(cls, v):
        return _validate_domain(v)
    @validator('lifecycle_stage')
    def validate_lifecycle_stage(cls, v):
        return _validate_lifecycle_stage(v)


class SuggestTitlesRequest(BaseModel):
    story: str = Field(..., min_length=1, description="User story to suggest titles for")


class SuggestTitlesResponse(BaseModel):
    titles: List[str] = Field(default_factory=list, description="Suggested feature titles")


class TitleCheckResponse(BaseModel):
    title: str
    exists: bool = Field(..., description="Whether a feature with this title already exists")


class RegenerateResponse(BaseModel):
    generated_content: str = Field(..., description="Freshly generated Gherkin (not saved)")


class FeatureResponse(BaseModel):
    """Response model for feature details"""
    id: int = Field(..., description="Feature ID")
    title: str
    story: str
    scenario_count: int = Field(..., description="Declared number of scenarios")
    generated_content: Optional[str] = Field(None, description="Gherkin text")
    domain: str
    epic_id: Optional[int] = None
    status: str
    lifecycle_stage: str
    manually_edited: bool
    deleted: bool
    analysis: Optional[Dict[str, Any]] = Field(None, description="Complexity analysis aligned to the scenario headings")
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    warnings: List[str] = Field(default_factory=list, description="Non-fatal problems (e.g. failed re-analysis)")

    @classmethod
    def from_feature(cls, feature: Feature, warnings: Optional[List[str]] = None) -> "FeatureResponse":
        data = feature.dict(exclude={'analysis'})
        return cls(
            **data,
            analysis=feature.analysis.to_storage_dict() if feature.analysis else None,
            warnings=warnings or []
        )

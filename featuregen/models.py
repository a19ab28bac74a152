"""
Domain Models
Features, epics, analytics events and the complexity analysis value type
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Number = Union[int, float]

DOMAIN_VALUES = [
    "ai",
    "biotech",
    "crypto",
    "ecommerce",
    "finance",
    "generic",
    "healthcare",
    "infrastructure",
    "insurance",
    "performance",
    "rag",
    "salesforce",
    "security",
]

LIFECYCLE_STAGES = ["draft", "review", "approved", "implemented", "tested", "deployed"]

EPIC_STATUSES = ["active", "on-hold", "completed", "cancelled"]

PENDING_COMPLEXITY_MARKER = "Unknown"
PENDING_EXPLANATION = "Pending analysis"


def as_number(value: Any) -> Optional[Number]:
    """Coerce a JSON value to a number, returning None when it is not numeric"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return int(parsed) if parsed.is_integer() else parsed
    return None


class ScenarioFactors(BaseModel):
    """Per-scenario factor sub-scores (expected 0-10, not clamped)"""
    step_count: Number = 0
    data_dependencies: Number = 0
    conditional_logic: Number = 0
    technical_difficulty: Number = 0

    def to_storage_dict(self) -> Dict[str, Number]:
        return {
            "stepCount": self.step_count,
            "dataDependencies": self.data_dependencies,
            "conditionalLogic": self.conditional_logic,
            "technicalDifficulty": self.technical_difficulty,
        }

    @classmethod
    def from_storage_dict(cls, data: Any) -> "ScenarioFactors":
        if not isinstance(data, dict):
            return cls()
        return cls(
            step_count=as_number(data.get("stepCount")) or 0,
            data_dependencies=as_number(data.get("dataDependencies")) or 0,
            conditional_logic=as_number(data.get("conditionalLogic")) or 0,
            technical_difficulty=as_number(data.get("technicalDifficulty")) or 0,
        )


class ScenarioComplexity(BaseModel):
    """Complexity entry for a single scenario"""
    title: str
    complexity: Optional[Number] = None  # None while pending
    factors: ScenarioFactors = Field(default_factory=ScenarioFactors)
    explanation: str = ""
    pending: bool = False

    @classmethod
    def placeholder(cls, title: str) -> "ScenarioComplexity":
        """Entry reserved for a scenario that has not been scored yet"""
        return cls(title=title, complexity=None, explanation=PENDING_EXPLANATION, pending=True)

    def to_storage_dict(self) -> Dict[str, Any]:
        """Serialize for storage and API consumers; older readers expect `name` alongside `title`"""
        data = {
            "title": self.title,
            "name": self.title,
            "complexity": PENDING_COMPLEXITY_MARKER if self.pending or self.complexity is None else self.complexity,
            "factors": self.factors.to_storage_dict(),
            "explanation": self.explanation,
        }
        if self.pending:
            data["details"] = PENDING_EXPLANATION
        return data

    @classmethod
    def from_storage_dict(cls, data: Any) -> "ScenarioComplexity":
        if not isinstance(data, dict):
            return cls.placeholder("")
        title = data.get("title")
        if not isinstance(title, str):
            title = data.get("name") if isinstance(data.get("name"), str) else ""
        complexity = as_number(data.get("complexity"))
        explanation = data.get("explanation")
        if not isinstance(explanation, str):
            explanation = data.get("details") if isinstance(data.get("details"), str) else ""
        return cls(
            title=title,
            complexity=complexity,
            factors=ScenarioFactors.from_storage_dict(data.get("factors")),
            explanation=explanation,
            pending=complexity is None,
        )


class ComplexityAnalysis(BaseModel):
    """Complexity report derived from a feature's Gherkin text"""
    overall_complexity: Number = 1
    scenarios: List[ScenarioComplexity] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    def scenario_titles(self) -> List[str]:
        return [scenario.title for scenario in self.scenarios]

    def to_storage_dict(self) -> Dict[str, Any]:
        return {
            "overallComplexity": self.overall_complexity,
            "scenarios": [scenario.to_storage_dict() for scenario in self.scenarios],
            "recommendations": list(self.recommendations),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_storage_dict())

    @classmethod
    def from_storage_dict(cls, data: Dict[str, Any]) -> "ComplexityAnalysis":
        scenarios = data.get("scenarios")
        recommendations = data.get("recommendations")
        overall = as_number(data.get("overallComplexity"))
        return cls(
            overall_complexity=overall if overall is not None else 1,
            scenarios=[ScenarioComplexity.from_storage_dict(s) for s in scenarios] if isinstance(scenarios, list) else [],
            recommendations=[str(r) for r in recommendations] if isinstance(recommendations, list) else [],
        )

    @classmethod
    def from_json(cls, raw: Optional[str]) -> Optional["ComplexityAnalysis"]:
        """
        Parse a stored analysis.

        Unreadable values are treated as "no analysis" so that callers fall
        back to re-analysis instead of failing.
        """
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable stored analysis: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning(f"Ignoring stored analysis of unexpected type {type(data).__name__}")
            return None
        return cls.from_storage_dict(data)


class Feature(BaseModel):
    """Generated Gherkin feature and its stored analysis"""
    id: int
    title: str
    story: str
    scenario_count: int
    generated_content: Optional[str] = None
    domain: str = "generic"
    epic_id: Optional[int] = None
    status: str = "backlog"
    lifecycle_stage: str = "draft"
    manually_edited: bool = False
    deleted: bool = False
    analysis: Optional[ComplexityAnalysis] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


class Epic(BaseModel):
    """Grouping of related features"""
    id: int
    name: str
    description: Optional[str] = None
    status: str = "active"
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None


class AnalyticsEvent(BaseModel):
    """Recorded outcome of a generation attempt"""
    id: int
    event_type: str
    title: Optional[str] = None
    scenario_count: Optional[int] = None
    successful: bool
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None

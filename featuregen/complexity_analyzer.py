"""
Complexity Analyzer
Scores a feature file's scenarios for test-automation difficulty using the LLM
"""
import json
import logging
from typing import Any, Dict

from .exceptions import AnalysisError
from .llm_client import LLMClient
from .models import ComplexityAnalysis, Number, ScenarioComplexity, ScenarioFactors, as_number
from .prompts import Prompts

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10


def clamp_score(value: Any) -> Number:
    """Clamp a complexity score to [1, 10]; missing, zero or non-numeric values become 1"""
    number = as_number(value)
    if number is None or number != number or not number:
        number = MIN_SCORE
    return min(MAX_SCORE, max(MIN_SCORE, number))


def _factor(data: Dict[str, Any], key: str) -> Number:
    number = as_number(data.get(key))
    return number if number is not None else 0


def _parse_factors(data: Any) -> ScenarioFactors:
    if not isinstance(data, dict):
        return ScenarioFactors()
    return ScenarioFactors(
        step_count=_factor(data, "stepCount"),
        data_dependencies=_factor(data, "dataDependencies"),
        conditional_logic=_factor(data, "conditionalLogic"),
        technical_difficulty=_factor(data, "technicalDifficulty"),
    )


def _parse_scenario(data: Any) -> ScenarioComplexity:
    if not isinstance(data, dict):
        data = {}
    title = data.get("title") if isinstance(data.get("title"), str) else data.get("name")
    explanation = data.get("explanation")
    return ScenarioComplexity(
        title=title.strip() if isinstance(title, str) and title.strip() else "Unnamed Scenario",
        complexity=clamp_score(data.get("complexity")),
        factors=_parse_factors(data.get("factors")),
        explanation=explanation if isinstance(explanation, str) else "",
    )


def parse_analysis_payload(raw: Dict[str, Any]) -> ComplexityAnalysis:
    """
    Turn the model's JSON object into a ComplexityAnalysis.

    Scores are repaired rather than rejected: every complexity value is
    clamped to [1, 10] and factor sub-scores default to 0.

    Raises:
        AnalysisError: the payload is not a JSON object
    """
    if not isinstance(raw, dict):
        raise AnalysisError(f"Expected a JSON object from the analyzer, got {type(raw).__name__}")

    scenarios = raw.get("scenarios")
    recommendations = raw.get("recommendations")

    return ComplexityAnalysis(
        overall_complexity=clamp_score(raw.get("overallComplexity")),
        scenarios=[_parse_scenario(s) for s in scenarios] if isinstance(scenarios, list) else [],
        recommendations=[str(r) for r in recommendations] if isinstance(recommendations, list) else [],
    )


class ComplexityAnalyzer:
    """LLM-backed complexity scoring for feature files"""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def build_prompt(self, content: str) -> str:
        return Prompts.get_complexity_analysis_template().format(content=content)

    def analyze(self, content: str) -> ComplexityAnalysis:
        """
        Score a feature file.

        Args:
            content: Gherkin text to analyze

        Returns:
            Clamped analysis as returned by the model (not yet aligned to the text)

        Raises:
            AnalysisError: provider failure, timeout or malformed output
        """
        logger.info(f"Starting complexity analysis for content: {content[:100]!r}...")
        try:
            response = self.llm_client.generate_content_json(
                self.build_prompt(content),
                system_prompt=Prompts.get_complexity_analysis_system_prompt(),
            )
            raw = json.loads(response)
        except Exception as e:
            logger.error(f"Complexity analysis failed: {e}")
            raise AnalysisError(f"Failed to analyze complexity: {e}") from e

        analysis = parse_analysis_payload(raw)
        logger.info(
            f"Complexity analysis complete: overall={analysis.overall_complexity}, "
            f"scenarios={len(analysis.scenarios)}"
        )
        return analysis

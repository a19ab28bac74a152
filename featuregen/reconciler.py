"""
Analysis Reconciler
Keeps a feature's complexity analysis consistent with the scenario headings in its Gherkin text
"""
import logging
from typing import List, Optional

from .gherkin import extract_scenario_titles
from .models import ComplexityAnalysis, ScenarioComplexity

logger = logging.getLogger(__name__)


def needs_reanalysis(
    feature_text: Optional[str],
    existing_analysis: Optional[ComplexityAnalysis],
    content_edited: bool = False,
    scenario_count_hint_changed: bool = False,
) -> bool:
    """
    Decide whether the stored analysis must be recomputed.

    Any manual content edit or change of the declared scenario count forces
    re-analysis, even when the headings still line up. Otherwise the
    analysis is current only if its scenario titles equal the text's
    headings, position by position.

    Args:
        feature_text: Latest saved Gherkin text
        existing_analysis: Stored analysis, or None if never analyzed
        content_edited: The text was just overwritten by a human
        scenario_count_hint_changed: The declared scenario count was just changed

    Returns:
        True when a new scoring call is required
    """
    if content_edited or scenario_count_hint_changed:
        return True

    text_titles = extract_scenario_titles(feature_text)
    analysis_titles = existing_analysis.scenario_titles() if existing_analysis else []

    if len(text_titles) != len(analysis_titles):
        logger.debug(f"Scenario count drift: text={len(text_titles)}, analysis={len(analysis_titles)}")
        return True

    for index, (text_title, analysis_title) in enumerate(zip(text_titles, analysis_titles)):
        if text_title != analysis_title:
            logger.debug(f"Scenario title drift at {index}: {text_title!r} != {analysis_title!r}")
            return True

    return False


def _fallback_title(index: int) -> str:
    return f"Scenario {index + 1}"


def normalize_analysis_to_text(
    analysis: Optional[ComplexityAnalysis],
    feature_text: Optional[str],
    desired_len_hint: Optional[int] = None,
) -> ComplexityAnalysis:
    """
    Align an analysis' scenarios 1:1 with the headings found in the text.

    The result has max(len(headings), desired_len_hint) scenarios: missing
    entries become pending placeholders and surplus entries are dropped.
    Headings are the source of truth for titles. Overall complexity and
    recommendations pass through unchanged, and the input is not mutated.
    """
    if analysis is None:
        analysis = ComplexityAnalysis()

    titles = extract_scenario_titles(feature_text)
    hint = desired_len_hint if isinstance(desired_len_hint, int) and not isinstance(desired_len_hint, bool) else 0
    desired_len = max(len(titles), hint)

    scenarios: List[ScenarioComplexity] = [s.model_copy(deep=True) for s in analysis.scenarios]

    if len(scenarios) < desired_len:
        for index in range(len(scenarios), desired_len):
            title = titles[index] if index < len(titles) else _fallback_title(index)
            scenarios.append(ScenarioComplexity.placeholder(title))
    elif len(scenarios) > desired_len:
        logger.info(f"Dropping {len(scenarios) - desired_len} surplus scenario analyses")
        scenarios = scenarios[:desired_len]

    for index, scenario in enumerate(scenarios):
        if index < len(titles):
            scenario.title = titles[index]
        elif not scenario.title:
            scenario.title = _fallback_title(index)

    return analysis.model_copy(update={"scenarios": scenarios})

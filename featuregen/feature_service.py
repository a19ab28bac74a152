"""
Feature Service
Generation, editing and analysis workflows for features
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .complexity_analyzer import ComplexityAnalyzer
from .exceptions import AnalysisError, AnalysisInProgressError, FeatureNotFoundError, GenerationError
from .feature_generator import FeatureGenerator
from .feature_store import FeatureStore
from .inflight import InFlightRegistry
from .models import ComplexityAnalysis, Feature
from .reconciler import needs_reanalysis, normalize_analysis_to_text

logger = logging.getLogger(__name__)

GENERATION_EVENT = "feature_generation"

# Fields an update may explicitly clear; None for any other field means "leave as is"
NULLABLE_UPDATE_FIELDS = {'epic_id'}


class FeatureResult(BaseModel):
    """A feature plus any non-fatal problems hit while producing it"""
    feature: Feature
    warnings: List[str] = Field(default_factory=list)
    reanalyzed: bool = False


class FeatureService:
    """Coordinates the feature store with the generation and scoring collaborators"""

    def __init__(self, store: FeatureStore, generator: FeatureGenerator, analyzer: ComplexityAnalyzer,
                 inflight: Optional[InFlightRegistry] = None, max_scenarios: int = 10):
        self.store = store
        self.generator = generator
        self.analyzer = analyzer
        self.inflight = inflight or InFlightRegistry()
        self.max_scenarios = max_scenarios

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_feature(self, feature_id: int) -> Feature:
        feature = self.store.get_feature(feature_id)
        if not feature:
            raise FeatureNotFoundError(f"Feature {feature_id} not found")
        return feature

    def list_features(self, include_deleted: bool = False) -> List[Feature]:
        return self.store.list_features(include_deleted=include_deleted)

    def _check_epic(self, epic_id: Optional[int]) -> None:
        if epic_id is not None and not self.store.get_epic(epic_id):
            raise ValueError(f"Epic {epic_id} not found")

    def title_exists(self, title: str, exclude_id: Optional[int] = None) -> bool:
        """Whether another feature already uses this title (case-insensitive)"""
        existing = self.store.find_feature_by_title(title)
        return existing is not None and existing.id != exclude_id

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def suggest_titles(self, story: str) -> List[str]:
        return self.generator.suggest_titles(story)

    def regenerate_content(self, title: str, story: str, scenario_count: int, domain: str = "generic") -> str:
        """Produce fresh Gherkin for review without touching the stored feature"""
        return self.generator.generate_feature(title, story, scenario_count, domain)

    def generate_feature(self, title: str, story: str, scenario_count: int, domain: str = "generic",
                         epic_id: Optional[int] = None, user: Optional[str] = None) -> FeatureResult:
        """
        Generate, analyze and store a new feature.

        Analysis is best effort: a scoring failure leaves the feature without
        an analysis and is reported as a warning.

        Raises:
            GenerationError: the feature text could not be generated
            ValueError: unknown epic id or scenario count out of range
        """
        if not 1 <= scenario_count <= self.max_scenarios:
            raise ValueError(f"Scenario count must be between 1 and {self.max_scenarios}")
        self._check_epic(epic_id)
        try:
            content = self.generator.generate_feature(title, story, scenario_count, domain)
        except GenerationError as e:
            self._track_generation(title, scenario_count, False, str(e), user)
            raise

        warnings = []
        analysis = None
        try:
            raw = self.analyzer.analyze(content)
            analysis = normalize_analysis_to_text(raw, content, scenario_count)
        except AnalysisError as e:
            logger.warning(f"Analyze on generate failed: {e}")
            warnings.append(f"Complexity analysis failed: {e}")

        feature = self.store.create_feature(
            title=title,
            story=story,
            scenario_count=scenario_count,
            generated_content=content,
            domain=domain,
            epic_id=epic_id,
            analysis=analysis,
            manually_edited=False,
            created_by=user,
        )
        self._track_generation(title, scenario_count, True, None, user)

        return FeatureResult(feature=feature, warnings=warnings, reanalyzed=analysis is not None)

    def _track_generation(self, title: Optional[str], scenario_count: Optional[int], successful: bool,
                          error_message: Optional[str], user: Optional[str]) -> None:
        try:
            self.store.track_event(
                GENERATION_EVENT,
                successful=successful,
                title=title,
                scenario_count=scenario_count,
                error_message=error_message,
                created_by=user,
            )
        except Exception as e:
            logger.error(f"Failed to record {GENERATION_EVENT} event: {e}")

    # ------------------------------------------------------------------
    # Editing and reconciliation
    # ------------------------------------------------------------------

    def update_feature(self, feature_id: int, changes: Dict[str, Any]) -> FeatureResult:
        """
        Save edits, then re-analyze when the stored analysis no longer fits the text.

        Only `epic_id` may be cleared with an explicit None; None for any
        other field leaves it unchanged. The edit always succeeds once
        written. Scoring failures, a busy feature or a text change during
        scoring are returned as warnings and leave the previous analysis
        untouched.

        Raises:
            FeatureNotFoundError: unknown feature id
            ValueError: unknown epic id
        """
        changes = {
            k: v for k, v in changes.items()
            if k != 'analysis' and (v is not None or k in NULLABLE_UPDATE_FIELDS)
        }
        self._check_epic(changes.get('epic_id'))
        content_edited = isinstance(changes.get('generated_content'), str)
        scenario_count_hint_changed = isinstance(changes.get('scenario_count'), int)
        if content_edited:
            changes['manually_edited'] = True

        feature = self.store.update_feature(feature_id, **changes)

        must_reanalyze = needs_reanalysis(
            feature.generated_content,
            feature.analysis,
            content_edited=content_edited,
            scenario_count_hint_changed=scenario_count_hint_changed,
        )
        if not must_reanalyze:
            return FeatureResult(feature=feature)

        if not feature.generated_content:
            logger.info(f"Feature {feature_id} has no content to analyze")
            return FeatureResult(feature=feature)

        warnings = []
        reanalyzed = False
        try:
            self._analyze_and_save(feature)
            reanalyzed = True
        except AnalysisInProgressError as e:
            logger.warning(f"Skipping re-analysis of feature {feature_id}: {e}")
            warnings.append(str(e))
        except AnalysisError as e:
            logger.warning(f"Re-analysis after update failed for feature {feature_id}: {e}")
            warnings.append(f"Re-analysis failed: {e}")

        if reanalyzed:
            feature = self.store.get_feature(feature_id) or feature

        return FeatureResult(feature=feature, warnings=warnings, reanalyzed=reanalyzed)

    def reanalyze_feature(self, feature_id: int) -> ComplexityAnalysis:
        """
        Force a fresh analysis of the current content.

        Raises:
            FeatureNotFoundError: unknown feature or feature without content
            AnalysisInProgressError: an analysis for this feature is already running
            AnalysisError: scoring failed (stored analysis unchanged)
        """
        feature = self.store.get_feature(feature_id)
        if not feature or not feature.generated_content:
            raise FeatureNotFoundError("Feature not found or has no content")
        return self._analyze_and_save(feature)

    def _analyze_and_save(self, feature: Feature) -> ComplexityAnalysis:
        """Score once, align to the headings and persist if the text is still current"""
        content = feature.generated_content or ""
        with self.inflight.claim(feature.id):
            raw = self.analyzer.analyze(content)
            normalized = normalize_analysis_to_text(raw, content, feature.scenario_count)
            if not self.store.save_analysis(feature.id, normalized, feature.generated_content):
                raise AnalysisError("Feature content changed during analysis; result discarded")
        return normalized

    # ------------------------------------------------------------------
    # Archive / export
    # ------------------------------------------------------------------

    def archive_feature(self, feature_id: int) -> Feature:
        return self.store.soft_delete_feature(feature_id)

    def restore_feature(self, feature_id: int) -> Feature:
        return self.store.restore_feature(feature_id)

    def export_feature(self, feature_id: int) -> Tuple[str, str]:
        """
        Get a download filename and the raw feature text.

        Raises:
            FeatureNotFoundError: unknown feature id
            ValueError: the feature has no content
        """
        feature = self.get_feature(feature_id)
        if not feature.generated_content:
            raise ValueError("No content to export")
        filename = re.sub(r'[^a-zA-Z0-9]', '_', feature.title) + ".doc"
        return filename, feature.generated_content

import pytest
from unittest.mock import Mock

from featuregen.complexity_analyzer import ComplexityAnalyzer
from featuregen.feature_generator import FeatureGenerator
from featuregen.feature_service import FeatureService
from featuregen.feature_store import FeatureStore
from featuregen.inflight import InFlightRegistry
from featuregen.models import ComplexityAnalysis, ScenarioComplexity, ScenarioFactors


LOGIN_FEATURE = """@userLogin
Feature: User Login

  Scenario: Valid credentials
    Given a registered user
    When they log in
    Then they see the dashboard

  Scenario: Wrong password
    Given a registered user
    When they use a wrong password
    Then an error is shown"""


def scored_analysis(titles, overall=5):
    return ComplexityAnalysis(
        overall_complexity=overall,
        scenarios=[
            ScenarioComplexity(
                title=title,
                complexity=i + 2,
                factors=ScenarioFactors(step_count=3, data_dependencies=2, conditional_logic=1, technical_difficulty=2),
                explanation=f"Scenario {title} is straightforward",
            )
            for i, title in enumerate(titles)
        ],
        recommendations=["Seed a test user"],
    )


@pytest.fixture
def store(tmp_path):
    return FeatureStore(tmp_path / "featuregen.db")


@pytest.fixture
def mock_generator():
    generator = Mock(spec=FeatureGenerator)
    generator.generate_feature.return_value = LOGIN_FEATURE
    return generator


@pytest.fixture
def mock_analyzer():
    analyzer = Mock(spec=ComplexityAnalyzer)
    analyzer.analyze.return_value = scored_analysis(["Valid credentials", "Wrong password"])
    return analyzer


@pytest.fixture
def inflight():
    return InFlightRegistry()


@pytest.fixture
def service(store, mock_generator, mock_analyzer, inflight):
    return FeatureService(store, mock_generator, mock_analyzer, inflight=inflight)

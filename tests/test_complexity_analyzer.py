import json
import math

import pytest
from unittest.mock import Mock

from featuregen.complexity_analyzer import ComplexityAnalyzer, clamp_score, parse_analysis_payload
from featuregen.exceptions import AnalysisError
from featuregen.llm_client import LLMClient


@pytest.fixture
def mock_llm_client():
    return Mock(spec=LLMClient)


class TestClampScore:
    @pytest.mark.parametrize("raw, expected", [
        (15, 10),
        (0, 1),
        (None, 1),
        (-3, 1),
        (7, 7),
        (4.5, 4.5),
        ("8", 8),
        ("high", 1),
        (True, 1),
        (math.nan, 1),
    ])
    def test_clamps(self, raw, expected):
        assert clamp_score(raw) == expected


class TestParseAnalysisPayload:
    def test_parses_and_repairs(self):
        analysis = parse_analysis_payload({
            "overallComplexity": 12,
            "scenarios": [
                {"name": "Legacy name", "complexity": 15, "factors": {"stepCount": 4}},
                {"title": "Modern", "explanation": "ok"},
            ],
            "recommendations": ["Mock the gateway"],
        })

        assert analysis.overall_complexity == 10
        assert analysis.scenario_titles() == ["Legacy name", "Modern"]
        assert analysis.scenarios[0].complexity == 10
        assert analysis.scenarios[0].factors.step_count == 4
        assert analysis.scenarios[0].factors.technical_difficulty == 0
        assert analysis.scenarios[1].complexity == 1
        assert analysis.recommendations == ["Mock the gateway"]

    def test_missing_fields(self):
        analysis = parse_analysis_payload({"scenarios": [{}]})
        assert analysis.overall_complexity == 1
        assert analysis.scenario_titles() == ["Unnamed Scenario"]
        assert analysis.recommendations == []

    def test_rejects_non_object(self):
        with pytest.raises(AnalysisError):
            parse_analysis_payload(["not", "an", "object"])


class TestComplexityAnalyzer:
    def test_analyze_calls_llm_once(self, mock_llm_client):
        mock_llm_client.generate_content_json.return_value = json.dumps({
            "overallComplexity": 6,
            "scenarios": [{"title": "Pay", "complexity": 6}],
            "recommendations": [],
        })

        analysis = ComplexityAnalyzer(mock_llm_client).analyze("Feature: X\n  Scenario: Pay\n")

        assert mock_llm_client.generate_content_json.call_count == 1
        prompt = mock_llm_client.generate_content_json.call_args[0][0]
        assert "Scenario: Pay" in prompt
        assert analysis.scenarios[0].complexity == 6

    def test_provider_failure_raises_analysis_error(self, mock_llm_client):
        mock_llm_client.generate_content_json.side_effect = RuntimeError("timeout")

        with pytest.raises(AnalysisError, match="timeout"):
            ComplexityAnalyzer(mock_llm_client).analyze("Feature: X")

    def test_invalid_json_raises_analysis_error(self, mock_llm_client):
        mock_llm_client.generate_content_json.return_value = "not json"

        with pytest.raises(AnalysisError):
            ComplexityAnalyzer(mock_llm_client).analyze("Feature: X")

import json

import pytest
from unittest.mock import Mock

from featuregen.exceptions import GenerationError
from featuregen.feature_generator import FeatureGenerator, build_feature_tag, clean_generated_content
from featuregen.llm_client import LLMClient


TWO_SCENARIOS = """```gherkin
@login
@smoke
Feature: User Login

  Scenario: Valid credentials
    Given a registered user
    When they log in
    Then they see the dashboard

  Scenario: Wrong password
    Given a registered user
    When they use a wrong password
    Then an error is shown
```"""


@pytest.fixture
def mock_llm_client():
    return Mock(spec=LLMClient)


class TestFeatureTag:
    def test_camel_cases_title(self):
        assert build_feature_tag("User Login!") == "@userLogin"

    def test_single_word(self):
        assert build_feature_tag("Checkout") == "@checkout"


class TestCleanGeneratedContent:
    def test_strips_fences_and_replaces_tags(self):
        cleaned = clean_generated_content(TWO_SCENARIOS, "@userLogin")

        assert "```" not in cleaned
        assert cleaned.startswith("@userLogin\nFeature: User Login\n")
        assert "@smoke" not in cleaned


class TestFeatureGenerator:
    def test_generate_feature(self, mock_llm_client):
        mock_llm_client.generate_content.return_value = TWO_SCENARIOS
        generator = FeatureGenerator(mock_llm_client)

        content = generator.generate_feature("User Login", "As a user I want to log in", 2, "security")

        assert content.startswith("@userLogin")
        prompt = mock_llm_client.generate_content.call_args[0][0]
        assert "User Login" in prompt
        assert "security" in prompt

    def test_scenario_count_mismatch(self, mock_llm_client):
        mock_llm_client.generate_content.return_value = TWO_SCENARIOS
        generator = FeatureGenerator(mock_llm_client)

        with pytest.raises(GenerationError, match="Expected 3 scenarios, but found 2"):
            generator.generate_feature("User Login", "As a user I want to log in", 3)

    def test_llm_failure(self, mock_llm_client):
        mock_llm_client.generate_content.side_effect = RuntimeError("rate limited")

        with pytest.raises(GenerationError, match="rate limited"):
            FeatureGenerator(mock_llm_client).generate_feature("Title", "A long enough story", 1)

    def test_suggest_titles(self, mock_llm_client):
        mock_llm_client.generate_content_json.return_value = json.dumps({"titles": ["Pay by card", " ", "Saved cards"]})

        titles = FeatureGenerator(mock_llm_client).suggest_titles("As a shopper I want to pay")

        assert titles == ["Pay by card", "Saved cards"]

    def test_suggest_titles_failure(self, mock_llm_client):
        mock_llm_client.generate_content_json.side_effect = ValueError("LLM did not return valid JSON")

        with pytest.raises(GenerationError):
            FeatureGenerator(mock_llm_client).suggest_titles("story")

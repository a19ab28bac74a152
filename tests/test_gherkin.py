from featuregen.gherkin import extract_scenario_titles, count_scenarios


FEATURE_WITH_QUOTED_HEADING = """@checkout
Feature: Checkout
  Scenario: A
    Given a string "Scenario: fake"
    Then nothing happens

  Scenario Outline: B
    Given <value>

    Examples:
      | value |
      | 1     |
"""


class TestExtractScenarioTitles:
    def test_ignores_keyword_inside_step_text(self):
        assert extract_scenario_titles(FEATURE_WITH_QUOTED_HEADING) == ["A", "B"]

    def test_background_only_returns_empty(self):
        text = "Feature: Empty\n  Background:\n    Given a logged in user\n"
        assert extract_scenario_titles(text) == []

    def test_none_and_empty_text(self):
        assert extract_scenario_titles(None) == []
        assert extract_scenario_titles("") == []

    def test_titles_are_trimmed_and_ordered(self):
        text = "Scenario:   First one  \n\tScenario Outline:Second\r\nScenario: Third"
        assert extract_scenario_titles(text) == ["First one", "Second", "Third"]

    def test_heading_without_title_is_skipped(self):
        text = "Scenario:\nScenario: Named"
        assert extract_scenario_titles(text) == ["Named"]

    def test_indented_heading_is_detected(self):
        text = "Scenario: Real\n    Given a step\n      Scenario: fake"
        assert extract_scenario_titles(text) == ["Real", "fake"]

    def test_count_scenarios(self):
        assert count_scenarios(FEATURE_WITH_QUOTED_HEADING) == 2
        assert count_scenarios(None) == 0

import pytest

from featuregen.exceptions import AnalysisError, AnalysisInProgressError, FeatureNotFoundError, GenerationError
from featuregen.feature_service import GENERATION_EVENT, FeatureService

from conftest import LOGIN_FEATURE, scored_analysis


THREE_SCENARIOS = LOGIN_FEATURE + """

  Scenario: Locked account
    Given a locked user
    When they log in
    Then they are told to contact support"""


def stored_analysis_json(store, feature_id):
    conn = store.get_connection()
    try:
        return conn.execute("SELECT analysis_json FROM features WHERE id = ?", (feature_id,)).fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def feature(service):
    return service.generate_feature("User Login", "As a user I want to log in", 2, "security", user="alice").feature


class TestGenerateFeature:
    def test_generates_analyzes_and_stores(self, service, store, mock_analyzer):
        result = service.generate_feature("User Login", "As a user I want to log in", 2, user="alice")

        assert result.warnings == []
        assert result.reanalyzed is True
        stored = store.get_feature(result.feature.id)
        assert stored.generated_content == LOGIN_FEATURE
        assert stored.analysis.scenario_titles() == ["Valid credentials", "Wrong password"]
        assert mock_analyzer.analyze.call_count == 1

        events = store.list_events()
        assert [(e.event_type, e.successful) for e in events] == [(GENERATION_EVENT, True)]

    def test_analysis_failure_is_a_warning(self, service, store, mock_analyzer):
        mock_analyzer.analyze.side_effect = AnalysisError("Failed to analyze complexity: timeout")

        result = service.generate_feature("User Login", "As a user I want to log in", 2)

        assert result.feature.analysis is None
        assert "timeout" in result.warnings[0]
        assert store.get_feature(result.feature.id).generated_content == LOGIN_FEATURE

    def test_generation_failure_is_tracked(self, service, store, mock_generator):
        mock_generator.generate_feature.side_effect = GenerationError("Expected 3 scenarios, but found 2.")

        with pytest.raises(GenerationError):
            service.generate_feature("User Login", "As a user I want to log in", 3)

        assert store.list_features() == []
        events = store.list_events()
        assert len(events) == 1
        assert events[0].successful is False
        assert "Expected 3" in events[0].error_message

    def test_unknown_epic(self, service, mock_generator):
        with pytest.raises(ValueError, match="Epic 99"):
            service.generate_feature("User Login", "As a user I want to log in", 2, epic_id=99)
        mock_generator.generate_feature.assert_not_called()


    def test_scenario_count_limit(self, service, store, mock_generator, mock_analyzer):
        limited = FeatureService(store, mock_generator, mock_analyzer, max_scenarios=2)

        with pytest.raises(ValueError, match="between 1 and 2"):
            limited.generate_feature("User Login", "As a user I want to log in", 3)
        mock_generator.generate_feature.assert_not_called()


class TestUpdateFeature:
    def test_content_edit_reanalyzes(self, service, store, feature, mock_analyzer):
        mock_analyzer.analyze.reset_mock()
        mock_analyzer.analyze.return_value = scored_analysis(["Valid credentials", "Wrong password", "Locked account"])

        result = service.update_feature(feature.id, {"generated_content": THREE_SCENARIOS})

        assert result.reanalyzed is True
        assert result.warnings == []
        assert result.feature.manually_edited is True
        assert result.feature.analysis.scenario_titles() == ["Valid credentials", "Wrong password", "Locked account"]
        mock_analyzer.analyze.assert_called_once_with(THREE_SCENARIOS)

    def test_identical_content_edit_still_reanalyzes(self, service, feature, mock_analyzer):
        mock_analyzer.analyze.reset_mock()

        result = service.update_feature(feature.id, {"generated_content": LOGIN_FEATURE})

        assert result.reanalyzed is True
        assert mock_analyzer.analyze.call_count == 1

    def test_metadata_edit_does_not_reanalyze(self, service, feature, mock_analyzer):
        mock_analyzer.analyze.reset_mock()

        result = service.update_feature(feature.id, {"title": "Sign in", "status": "in-progress"})

        assert result.reanalyzed is False
        assert result.feature.title == "Sign in"
        assert result.feature.manually_edited is False
        mock_analyzer.analyze.assert_not_called()

    def test_count_hint_change_pads_analysis(self, service, feature, mock_analyzer):
        result = service.update_feature(feature.id, {"scenario_count": 4})

        titles = result.feature.analysis.scenario_titles()
        assert titles == ["Valid credentials", "Wrong password", "Scenario 3", "Scenario 4"]
        assert [s.pending for s in result.feature.analysis.scenarios] == [False, False, True, True]

    def test_scoring_failure_keeps_previous_analysis(self, service, store, feature, mock_analyzer):
        before = stored_analysis_json(store, feature.id)
        mock_analyzer.analyze.side_effect = AnalysisError("Failed to analyze complexity: provider down")

        result = service.update_feature(feature.id, {"generated_content": THREE_SCENARIOS})

        assert result.reanalyzed is False
        assert "provider down" in result.warnings[0]
        assert stored_analysis_json(store, feature.id) == before
        assert store.get_feature(feature.id).generated_content == THREE_SCENARIOS

    def test_busy_feature_is_skipped(self, service, store, feature, mock_analyzer, inflight):
        before = stored_analysis_json(store, feature.id)
        mock_analyzer.analyze.reset_mock()

        with inflight.claim(feature.id):
            result = service.update_feature(feature.id, {"generated_content": THREE_SCENARIOS})

        assert "already in progress" in result.warnings[0]
        mock_analyzer.analyze.assert_not_called()
        assert stored_analysis_json(store, feature.id) == before

    def test_content_changed_during_analysis_is_discarded(self, service, store, feature, mock_analyzer):
        before = stored_analysis_json(store, feature.id)

        def concurrent_edit(content):
            store.update_feature(feature.id, generated_content="Feature: rewritten\n  Scenario: Other")
            return scored_analysis(["Valid credentials", "Wrong password", "Locked account"])

        mock_analyzer.analyze.side_effect = concurrent_edit

        result = service.update_feature(feature.id, {"generated_content": THREE_SCENARIOS})

        assert result.reanalyzed is False
        assert "changed during analysis" in result.warnings[0]
        assert stored_analysis_json(store, feature.id) == before

    def test_unknown_feature(self, service):
        with pytest.raises(FeatureNotFoundError):
            service.update_feature(404, {"title": "x"})

    def test_explicit_none_detaches_epic(self, service, store):
        epic = store.create_epic("Accounts")
        feature = service.generate_feature(
            "User Login", "As a user I want to log in", 2, epic_id=epic.id
        ).feature

        result = service.update_feature(feature.id, {"epic_id": None, "title": None})

        assert result.feature.epic_id is None
        assert result.feature.title == "User Login"
        assert store.get_feature(feature.id).epic_id is None
        assert store.list_features_by_epic(epic.id) == []


class TestReanalyzeFeature:
    def test_reanalyze(self, service, store, feature, mock_analyzer):
        mock_analyzer.analyze.return_value = scored_analysis(["Valid credentials", "Wrong password"], overall=8)

        analysis = service.reanalyze_feature(feature.id)

        assert analysis.overall_complexity == 8
        assert store.get_feature(feature.id).analysis.overall_complexity == 8

    def test_failure_keeps_analysis_byte_for_byte(self, service, store, feature, mock_analyzer):
        before = stored_analysis_json(store, feature.id)
        mock_analyzer.analyze.side_effect = AnalysisError("Failed to analyze complexity: boom")

        with pytest.raises(AnalysisError):
            service.reanalyze_feature(feature.id)

        assert stored_analysis_json(store, feature.id) == before

    def test_busy(self, service, feature, inflight):
        with inflight.claim(feature.id):
            with pytest.raises(AnalysisInProgressError):
                service.reanalyze_feature(feature.id)

    def test_feature_without_content(self, service, store):
        feature = store.create_feature("Empty", "A story long enough", 1)
        with pytest.raises(FeatureNotFoundError):
            service.reanalyze_feature(feature.id)


class TestOtherOperations:
    def test_title_exists(self, service, feature):
        assert service.title_exists("user login") is True
        assert service.title_exists("user login", exclude_id=feature.id) is False
        assert service.title_exists("Checkout") is False

    def test_regenerate_does_not_persist(self, service, store, feature, mock_generator):
        mock_generator.generate_feature.return_value = "Feature: fresh\n  Scenario: New"

        content = service.regenerate_content(feature.title, feature.story, 1)

        assert content == "Feature: fresh\n  Scenario: New"
        assert store.get_feature(feature.id).generated_content == LOGIN_FEATURE

    def test_archive_and_restore(self, service, feature):
        assert service.archive_feature(feature.id).deleted is True
        assert service.list_features() == []
        assert service.restore_feature(feature.id).deleted is False

    def test_export(self, service, feature):
        filename, content = service.export_feature(feature.id)
        assert filename == "User_Login.doc"
        assert content == LOGIN_FEATURE

    def test_export_without_content(self, service, store):
        feature = store.create_feature("Empty", "A story long enough", 1)
        with pytest.raises(ValueError, match="No content"):
            service.export_feature(feature.id)

import pytest

from featuregen.exceptions import FeatureNotFoundError
from featuregen.models import ComplexityAnalysis, ScenarioComplexity

from conftest import LOGIN_FEATURE, scored_analysis


class TestFeatureStore:
    def test_database_ready(self, store):
        ready, message = store.check_database_ready()
        assert ready, message

    def test_create_and_get_feature(self, store):
        analysis = scored_analysis(["Valid credentials", "Wrong password"])
        created = store.create_feature(
            title="User Login",
            story="As a user I want to log in",
            scenario_count=2,
            generated_content=LOGIN_FEATURE,
            domain="security",
            analysis=analysis,
            created_by="alice",
        )

        fetched = store.get_feature(created.id)
        assert fetched.title == "User Login"
        assert fetched.domain == "security"
        assert fetched.manually_edited is False
        assert fetched.analysis == analysis
        assert fetched.created_by == "alice"

    def test_get_missing_feature(self, store):
        assert store.get_feature(999) is None

    def test_pending_entries_survive_storage(self, store):
        analysis = ComplexityAnalysis(scenarios=[ScenarioComplexity.placeholder("Later")])
        feature = store.create_feature("T", "A story long enough", 1, "Scenario: Later", analysis=analysis)

        stored = store.get_feature(feature.id).analysis.scenarios[0]
        assert stored.pending is True
        assert stored.complexity is None
        assert stored.title == "Later"

    def test_unreadable_analysis_is_treated_as_missing(self, store):
        feature = store.create_feature("T", "A story long enough", 1, "Scenario: X")
        conn = store.get_connection()
        conn.execute("UPDATE features SET analysis_json = ? WHERE id = ?", ("{broken", feature.id))
        conn.commit()
        conn.close()

        assert store.get_feature(feature.id).analysis is None

    def test_update_feature(self, store):
        feature = store.create_feature("T", "A story long enough", 1, "Scenario: X")

        updated = store.update_feature(feature.id, title="New title", manually_edited=True, ignored="x")

        assert updated.title == "New title"
        assert updated.manually_edited is True

    def test_update_missing_feature(self, store):
        with pytest.raises(FeatureNotFoundError):
            store.update_feature(42, title="Nope")

    def test_save_analysis_requires_current_content(self, store):
        feature = store.create_feature("T", "A story long enough", 1, "Scenario: X")
        analysis = scored_analysis(["X"])

        assert store.save_analysis(feature.id, analysis, "Scenario: Old") is False
        assert store.get_feature(feature.id).analysis is None

        assert store.save_analysis(feature.id, analysis, "Scenario: X") is True
        assert store.get_feature(feature.id).analysis == analysis

    def test_soft_delete_and_restore(self, store):
        feature = store.create_feature("T", "A story long enough", 1)

        store.soft_delete_feature(feature.id)
        assert [f.id for f in store.list_features()] == []
        assert [f.id for f in store.list_features(include_deleted=True)] == [feature.id]

        store.restore_feature(feature.id)
        assert [f.id for f in store.list_features()] == [feature.id]

    def test_find_feature_by_title_is_case_insensitive(self, store):
        feature = store.create_feature("User Login", "A story long enough", 1)
        assert store.find_feature_by_title("user login").id == feature.id
        assert store.find_feature_by_title("Other") is None

    def test_epics(self, store):
        epic = store.create_epic("Accounts", description="Account features", created_by="bob")
        feature = store.create_feature("T", "A story long enough", 1, epic_id=epic.id)

        assert [f.id for f in store.list_features_by_epic(epic.id)] == [feature.id]
        assert store.update_epic(epic.id, status="completed").status == "completed"

        store.delete_epic(epic.id)
        assert store.get_epic(epic.id) is None
        assert store.get_feature(feature.id).epic_id is None

    def test_missing_epic(self, store):
        with pytest.raises(FeatureNotFoundError):
            store.update_epic(7, name="x")
        with pytest.raises(FeatureNotFoundError):
            store.delete_epic(7)

    def test_analytics(self, store):
        store.track_event("feature_generation", successful=True, title="T", scenario_count=2)
        store.track_event("feature_generation", successful=False, error_message="boom")

        events = store.list_events()
        assert len(events) == 2
        assert {e.successful for e in events} == {True, False}

    def test_stats(self, store):
        store.create_feature("A", "A story long enough", 1, analysis=scored_analysis(["x"]))
        store.create_feature("B", "A story long enough", 1)
        assert store.get_stats() == {"features": 2, "analyzed_features": 1}

"""
Feature Store
SQLite persistence for features, epics and analytics events
"""
import sqlite3
import os
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple, Union
import logging
from pathlib import Path

from .exceptions import FeatureNotFoundError
from .models import AnalyticsEvent, ComplexityAnalysis, Epic, Feature

logger = logging.getLogger(__name__)

FEATURE_UPDATE_FIELDS = [
    'title', 'story', 'scenario_count', 'generated_content', 'domain', 'epic_id',
    'status', 'lifecycle_stage', 'manually_edited', 'deleted', 'analysis'
]

EPIC_UPDATE_FIELDS = ['name', 'description', 'status']

REQUIRED_TABLES = {'features', 'epics', 'analytics'}


def get_default_db_path() -> Path:
    """
    Get database file path from environment variable or use default.

    Environment variable: FEATUREGEN_DB_PATH
    Default: data/featuregen.db (relative to project root)
    """
    project_root = Path(__file__).parent.parent
    custom_path = os.getenv('FEATUREGEN_DB_PATH')

    if custom_path:
        db_path = Path(custom_path)
        if not db_path.is_absolute():
            db_path = project_root / db_path
        return db_path

    return project_root / "data" / "featuregen.db"


class FeatureStore:
    """Feature, epic and analytics persistence backed by a SQLite file"""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self.db_path = Path(db_path) if db_path else get_default_db_path()
        self.init_database()

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection, creating directory if needed"""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init_database(self) -> None:
        """Initialize database schema with all tables"""
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS epics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL DEFAULT 'active',
                    created_at TIMESTAMP,
                    created_by TEXT
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS features (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    story TEXT NOT NULL,
                    scenario_count INTEGER NOT NULL,
                    generated_content TEXT,
                    domain TEXT DEFAULT 'generic',
                    epic_id INTEGER,
                    status TEXT NOT NULL DEFAULT 'backlog',
                    lifecycle_stage TEXT NOT NULL DEFAULT 'draft',
                    manually_edited BOOLEAN NOT NULL DEFAULT 0,
                    deleted BOOLEAN NOT NULL DEFAULT 0,
                    analysis_json TEXT,
                    created_at TIMESTAMP,
                    created_by TEXT,
                    FOREIGN KEY (epic_id) REFERENCES epics(id) ON DELETE SET NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS analytics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    event_type TEXT NOT NULL,
                    title TEXT,
                    scenario_count INTEGER,
                    successful BOOLEAN NOT NULL,
                    error_message TEXT,
                    created_at TIMESTAMP,
                    created_by TEXT
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_features_epic ON features(epic_id)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_features_title ON features(title COLLATE NOCASE)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_analytics_created ON analytics(created_at)")

            conn.commit()
            logger.info(f"✅ Database initialized: {self.db_path}")
        except Exception as e:
            conn.rollback()
            logger.error(f"❌ Failed to initialize database: {str(e)}")
            raise
        finally:
            conn.close()

    def check_database_ready(self) -> Tuple[bool, str]:
        """
        Check if the database is ready and accessible.

        Returns:
            tuple: (is_ready, message)
        """
        try:
            conn = self.get_connection()
            try:
                cursor = conn.cursor()
                cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
                tables = {row[0] for row in cursor.fetchall()}
            finally:
                conn.close()

            missing_tables = REQUIRED_TABLES - tables
            if missing_tables:
                return False, f"Database missing required tables: {', '.join(sorted(missing_tables))}"
            return True, f"Database ready at {self.db_path}"
        except sqlite3.Error as e:
            return False, f"Database error: {str(e)}"
        except PermissionError as e:
            return False, f"Permission denied accessing database: {str(e)}"

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_feature(row: sqlite3.Row) -> Feature:
        data = dict(row)
        analysis = ComplexityAnalysis.from_json(data.pop('analysis_json', None))
        data['manually_edited'] = bool(data.get('manually_edited'))
        data['deleted'] = bool(data.get('deleted'))
        data['domain'] = data.get('domain') or 'generic'
        return Feature(analysis=analysis, **data)

    @staticmethod
    def _row_to_epic(row: sqlite3.Row) -> Epic:
        return Epic(**dict(row))

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> AnalyticsEvent:
        data = dict(row)
        data['successful'] = bool(data.get('successful'))
        return AnalyticsEvent(**data)

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def create_feature(self, title: str, story: str, scenario_count: int,
                       generated_content: Optional[str] = None, domain: Optional[str] = None,
                       epic_id: Optional[int] = None, analysis: Optional[ComplexityAnalysis] = None,
                       manually_edited: bool = False, created_by: Optional[str] = None) -> Feature:
        """Insert a feature and return it"""
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO features (title, story, scenario_count, generated_content, domain, epic_id,
                                      manually_edited, analysis_json, created_at, created_by)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                title, story, scenario_count, generated_content, domain or 'generic', epic_id,
                int(manually_edited), analysis.to_json() if analysis else None,
                datetime.now().isoformat(), created_by
            ))
            feature_id = cursor.lastrowid
            conn.commit()
            logger.info(f"✅ Created feature {feature_id}: {title}")
        except Exception as e:
            conn.rollback()
            logger.error(f"❌ Failed to create feature: {str(e)}")
            raise
        finally:
            conn.close()

        return self.get_feature(feature_id)

    def get_feature(self, feature_id: int) -> Optional[Feature]:
        """Get feature by ID"""
        conn = self.get_connection()
        try:
            row = conn.execute("SELECT * FROM features WHERE id = ?", (feature_id,)).fetchone()
            return self._row_to_feature(row) if row else None
        finally:
            conn.close()

    def list_features(self, include_deleted: bool = False) -> List[Feature]:
        """List features, newest first (archived ones only on request)"""
        conn = self.get_connection()
        try:
            query = "SELECT * FROM features"
            if not include_deleted:
                query += " WHERE deleted = 0"
            query += " ORDER BY created_at DESC, id DESC"
            return [self._row_to_feature(row) for row in conn.execute(query).fetchall()]
        finally:
            conn.close()

    def list_features_by_epic(self, epic_id: int) -> List[Feature]:
        conn = self.get_connection()
        try:
            rows = conn.execute(
                "SELECT * FROM features WHERE epic_id = ? ORDER BY created_at DESC, id DESC", (epic_id,)
            ).fetchall()
            return [self._row_to_feature(row) for row in rows]
        finally:
            conn.close()

    def find_feature_by_title(self, title: str) -> Optional[Feature]:
        """Case-insensitive exact title lookup"""
        conn = self.get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM features WHERE title = ? COLLATE NOCASE LIMIT 1", (title.strip(),)
            ).fetchone()
            return self._row_to_feature(row) if row else None
        finally:
            conn.close()

    def update_feature(self, feature_id: int, **kwargs) -> Feature:
        """
        Update the given feature fields in a single transaction.

        Unknown keys are ignored; `analysis` takes a ComplexityAnalysis (or None).

        Raises:
            FeatureNotFoundError: no feature with this id
        """
        updates = []
        params: List[Any] = []

        for field in FEATURE_UPDATE_FIELDS:
            if field not in kwargs:
                continue
            value = kwargs[field]
            if field == 'analysis':
                updates.append("analysis_json = ?")
                params.append(value.to_json() if value is not None else None)
            elif field in ('manually_edited', 'deleted'):
                updates.append(f"{field} = ?")
                params.append(int(bool(value)))
            else:
                updates.append(f"{field} = ?")
                params.append(value)

        conn = self.get_connection()
        try:
            if updates:
                params.append(feature_id)
                cursor = conn.execute(f"UPDATE features SET {', '.join(updates)} WHERE id = ?", params)
                if cursor.rowcount == 0:
                    raise FeatureNotFoundError(f"Feature {feature_id} not found")
                conn.commit()
                logger.info(f"✅ Updated feature {feature_id}: {', '.join(k for k in kwargs if k in FEATURE_UPDATE_FIELDS)}")
            row = conn.execute("SELECT * FROM features WHERE id = ?", (feature_id,)).fetchone()
        except FeatureNotFoundError:
            conn.rollback()
            raise
        except Exception as e:
            conn.rollback()
            logger.error(f"❌ Failed to update feature {feature_id}: {str(e)}")
            raise
        finally:
            conn.close()

        if not row:
            raise FeatureNotFoundError(f"Feature {feature_id} not found")
        return self._row_to_feature(row)

    def save_analysis(self, feature_id: int, analysis: ComplexityAnalysis,
                      expected_content: Optional[str]) -> bool:
        """
        Persist an analysis only if the feature text is still the one it was computed from.

        Returns:
            True when written, False when the text changed in the meantime
            (or the feature no longer exists)
        """
        conn = self.get_connection()
        try:
            cursor = conn.execute(
                "UPDATE features SET analysis_json = ? WHERE id = ? AND generated_content IS ?",
                (analysis.to_json(), feature_id, expected_content)
            )
            conn.commit()
            saved = cursor.rowcount > 0
        except Exception as e:
            conn.rollback()
            logger.error(f"❌ Failed to save analysis for feature {feature_id}: {str(e)}")
            raise
        finally:
            conn.close()

        if saved:
            logger.info(f"✅ Saved analysis for feature {feature_id} ({len(analysis.scenarios)} scenarios)")
        else:
            logger.warning(f"Analysis for feature {feature_id} not saved: content changed or feature missing")
        return saved

    def soft_delete_feature(self, feature_id: int) -> Feature:
        return self.update_feature(feature_id, deleted=True)

    def restore_feature(self, feature_id: int) -> Feature:
        return self.update_feature(feature_id, deleted=False)

    # ------------------------------------------------------------------
    # Epics
    # ------------------------------------------------------------------

    def create_epic(self, name: str, description: Optional[str] = None, status: str = 'active',
                    created_by: Optional[str] = None) -> Epic:
        conn = self.get_connection()
        try:
            cursor = conn.execute("""
                INSERT INTO epics (name, description, status, created_at, created_by)
                VALUES (?, ?, ?, ?, ?)
            """, (name, description, status, datetime.now().isoformat(), created_by))
            epic_id = cursor.lastrowid
            conn.commit()
            logger.info(f"✅ Created epic {epic_id}: {name}")
        except Exception as e:
            conn.rollback()
            logger.error(f"❌ Failed to create epic: {str(e)}")
            raise
        finally:
            conn.close()

        return self.get_epic(epic_id)

    def get_epic(self, epic_id: int) -> Optional[Epic]:
        conn = self.get_connection()
        try:
            row = conn.execute("SELECT * FROM epics WHERE id = ?", (epic_id,)).fetchone()
            return self._row_to_epic(row) if row else None
        finally:
            conn.close()

    def list_epics(self) -> List[Epic]:
        conn = self.get_connection()
        try:
            rows = conn.execute("SELECT * FROM epics ORDER BY created_at DESC, id DESC").fetchall()
            return [self._row_to_epic(row) for row in rows]
        finally:
            conn.close()

    def update_epic(self, epic_id: int, **kwargs) -> Epic:
        """
        Update epic fields.

        Raises:
            FeatureNotFoundError: no epic with this id
        """
        updates = [f"{field} = ?" for field in EPIC_UPDATE_FIELDS if field in kwargs]
        params = [kwargs[field] for field in EPIC_UPDATE_FIELDS if field in kwargs]

        if updates:
            conn = self.get_connection()
            try:
                cursor = conn.execute(f"UPDATE epics SET {', '.join(updates)} WHERE id = ?", params + [epic_id])
                conn.commit()
                if cursor.rowcount == 0:
                    raise FeatureNotFoundError(f"Epic {epic_id} not found")
            finally:
                conn.close()

        epic = self.get_epic(epic_id)
        if not epic:
            raise FeatureNotFoundError(f"Epic {epic_id} not found")
        return epic

    def delete_epic(self, epic_id: int) -> None:
        """Delete an epic; its features are kept and detached"""
        conn = self.get_connection()
        try:
            conn.execute("UPDATE features SET epic_id = NULL WHERE epic_id = ?", (epic_id,))
            cursor = conn.execute("DELETE FROM epics WHERE id = ?", (epic_id,))
            if cursor.rowcount == 0:
                conn.rollback()
                raise FeatureNotFoundError(f"Epic {epic_id} not found")
            conn.commit()
            logger.info(f"✅ Deleted epic {epic_id}")
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def track_event(self, event_type: str, successful: bool, title: Optional[str] = None,
                    scenario_count: Optional[int] = None, error_message: Optional[str] = None,
                    created_by: Optional[str] = None) -> AnalyticsEvent:
        conn = self.get_connection()
        try:
            cursor = conn.execute("""
                INSERT INTO analytics (event_type, title, scenario_count, successful, error_message, created_at, created_by)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (event_type, title, scenario_count, int(successful), error_message,
                  datetime.now().isoformat(), created_by))
            event_id = cursor.lastrowid
            conn.commit()
            row = conn.execute("SELECT * FROM analytics WHERE id = ?", (event_id,)).fetchone()
            return self._row_to_event(row)
        except Exception as e:
            conn.rollback()
            logger.error(f"❌ Failed to track {event_type} event: {str(e)}")
            raise
        finally:
            conn.close()

    def list_events(self) -> List[AnalyticsEvent]:
        conn = self.get_connection()
        try:
            rows = conn.execute("SELECT * FROM analytics ORDER BY created_at DESC, id DESC").fetchall()
            return [self._row_to_event(row) for row in rows]
        finally:
            conn.close()

    def get_stats(self) -> Dict[str, Any]:
        """Counts used by the health endpoint"""
        conn = self.get_connection()
        try:
            features = conn.execute("SELECT COUNT(*) FROM features WHERE deleted = 0").fetchone()[0]
            analyzed = conn.execute(
                "SELECT COUNT(*) FROM features WHERE deleted = 0 AND analysis_json IS NOT NULL"
            ).fetchone()[0]
            return {"features": features, "analyzed_features": analyzed}
        finally:
            conn.close()

"""
Schema creation for the users/work tables and the ``v_work`` read view.
"""

from sqlmodel import SQLModel

from worklog.core.logging import get_logger
from worklog.db.database import Database
from worklog.models import tables  # noqa: F401  (registers the table metadata)

logger = get_logger(__name__)

# is_under_hours: 1 when the owner has a working-hours preference and the
# record's duration stays below it.
V_WORK_SELECT = """
    SELECT
        w.id,
        w.dt_created,
        w.user_id,
        w.dt_day,
        w.duration_sec,
        w.note,
        CASE
            WHEN u.max_hours IS NOT NULL AND u.max_hours > 0 AND w.duration_sec < u.max_hours
            THEN 1
            ELSE 0
        END AS is_under_hours,
        u.full_name AS user_name
    FROM work w
    JOIN users u ON u.id = w.user_id
"""


def create_schema(database: Database) -> None:
    """Create tables and views if they do not exist yet."""
    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(database.engine)

    if database.dialect == "sqlite":
        database.execute(f"CREATE VIEW IF NOT EXISTS v_work AS {V_WORK_SELECT}")
    else:
        database.execute(f"CREATE OR REPLACE VIEW v_work AS {V_WORK_SELECT}")

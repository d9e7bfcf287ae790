from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

import app.models  # noqa: F401
from app.db.base import Base
from app.db.session import engine as default_engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "classes": {"id", "periods_per_day", "period_length", "periods_per_day_overrides"},
    "section_teachers": {"id", "section_id", "subject_id", "teacher_id"},
    "timetables": {"id", "class_id", "section_id", "periods_per_day", "break_start_time", "break_end_time"},
    "timetable_entries": {"id", "timetable_id", "day_of_week", "period_number", "start_time", "end_time"},
    "time_slots": {"id", "class_id", "start_time", "end_time", "day", "type"},
}


def _ensure_time_slot_type_column(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "time_slots" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("time_slots")}
        if "type" in column_names:
            return
        connection.execute(
            text("ALTER TABLE time_slots ADD COLUMN type VARCHAR(10) NOT NULL DEFAULT 'PERIOD'")
        )


def _ensure_time_slot_class_column(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "time_slots" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("time_slots")}
        if "class_id" in column_names:
            return
        connection.execute(text("ALTER TABLE time_slots ADD COLUMN class_id INTEGER"))


def _ensure_class_overrides_column(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "classes" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("classes")}
        if "periods_per_day_overrides" in column_names:
            return

        if connection.dialect.name == "postgresql":
            connection.execute(
                text(
                    "ALTER TABLE classes "
                    "ADD COLUMN periods_per_day_overrides JSONB NOT NULL DEFAULT '{}'::jsonb"
                )
            )
            return

        connection.execute(
            text(
                "ALTER TABLE classes "
                "ADD COLUMN periods_per_day_overrides JSON NOT NULL DEFAULT '{}'"
            )
        )


def _assert_required_columns(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema_compatibility(engine: Engine | None = None) -> None:
    bind = engine if engine is not None else default_engine
    try:
        # Ensure missing tables are present before additive compatibility patches.
        Base.metadata.create_all(bind=bind)
        _ensure_class_overrides_column(bind)
        _ensure_time_slot_type_column(bind)
        _ensure_time_slot_class_column(bind)
        _assert_required_columns(bind)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc

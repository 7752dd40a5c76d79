from __future__ import annotations

from alembic import command
from sqlalchemy import create_engine, inspect

from releasedesk.adapters.sqlalchemy.migrations import build_config, upgrade_head


def test_upgrade_head_creates_indexed_schema() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)

    inspector = inspect(engine)
    release_indexes = {index["name"] for index in inspector.get_indexes("release")}
    track_indexes = {index["name"] for index in inspector.get_indexes("track")}
    unique_constraints = {item["name"] for item in inspector.get_unique_constraints("track")}

    assert "ix_release_status_created_at" in release_indexes
    assert "ix_track_release_id" in track_indexes
    assert "uq_track_isrc" in unique_constraints
    engine.dispose()


def test_upgrade_head_is_repeatable_and_reversible() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    upgrade_head(engine=engine)

    config = build_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.downgrade(config, "base")

    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()

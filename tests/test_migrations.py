# tests/test_migrations.py

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ROOT = Path(__file__).resolve().parents[1]


def alembic_config(url: str) -> Config:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    cfg.attributes["configure_logger"] = False
    return cfg


def test_upgrade_matches_models_and_downgrade_cleans_up(tmp_path: Path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = alembic_config(url)

    command.upgrade(cfg, "head")

    engine = create_engine(url)
    inspector = inspect(engine)
    assert {"users", "tasks"} <= set(inspector.get_table_names())
    assert {c["name"] for c in inspector.get_columns("tasks")} == {
        "id", "title", "description", "status", "owner_id", "created_at", "updated_at",
    }
    assert {c["name"] for c in inspector.get_columns("users")} == {
        "id", "username", "email", "hashed_password", "created_at",
    }

    command.downgrade(cfg, "base")
    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()

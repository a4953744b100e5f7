"""Alembic migration tests."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from app.db.base import Base

ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(db_file: Path) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_file}")
    return config


def test_upgrade_creates_order_tables(tmp_path: Path) -> None:
    db_file = tmp_path / "migrated.db"

    command.upgrade(_alembic_config(db_file), "head")

    inspector = inspect(create_engine(f"sqlite:///{db_file}"))
    assert {"pickup_orders", "pickup_order_lines"} <= set(inspector.get_table_names())
    columns = {column["name"] for column in inspector.get_columns("pickup_orders")}
    assert {"order_number", "pickup_date", "pickup_time", "status", "total_cents", "checkout_url"} <= columns
    assert {"checkout_expires_at", "status_updated_at"} <= columns
    index_names = {index["name"] for index in inspector.get_indexes("pickup_orders")}
    assert "ix_pickup_orders_pickup_date_status" in index_names


def test_downgrade_drops_order_tables(tmp_path: Path) -> None:
    db_file = tmp_path / "migrated.db"
    config = _alembic_config(db_file)

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    inspector = inspect(create_engine(f"sqlite:///{db_file}"))
    assert "pickup_orders" not in inspector.get_table_names()


def test_migrated_columns_match_models(tmp_path: Path) -> None:
    db_file = tmp_path / "migrated.db"
    command.upgrade(_alembic_config(db_file), "head")

    inspector = inspect(create_engine(f"sqlite:///{db_file}"))
    for table in Base.metadata.sorted_tables:
        migrated = {column["name"] for column in inspector.get_columns(table.name)}
        assert migrated == set(table.columns.keys()), table.name

"""Pytest configuration and shared fixtures"""

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import pytest

from dbdiff.models import Column, DatabaseSchema, DataType, Table, View


@pytest.fixture
def extracted_at() -> datetime:
    """Return a fixed extraction timestamp"""
    return datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone.utc)


@pytest.fixture
def users_table() -> Table:
    """Return the dbo.Users table with columns supplied out of name order"""
    return Table(
        schema_name="dbo",
        table_name="Users",
        columns=[
            Column(
                name="Name",
                data_type=DataType("nvarchar"),
                is_nullable=True,
                ordinal_position=2,
                max_length=100,
            ),
            Column(name="Id", data_type=DataType("int"), is_nullable=False, ordinal_position=1),
        ],
    )


@pytest.fixture
def sample_schema(extracted_at: datetime, users_table: Table) -> DatabaseSchema:
    """Return a schema with tables and views in non-sorted order"""
    orders = Table(
        schema_name="dbo",
        table_name="Orders",
        columns=[
            Column(
                name="Total",
                data_type=DataType("decimal"),
                is_nullable=False,
                ordinal_position=2,
                precision=18,
                scale=2,
            ),
            Column(name="OrderId", data_type=DataType("int"), is_nullable=False, ordinal_position=1),
        ],
    )
    audit = Table(
        schema_name="audit",
        table_name="Log",
        columns=[Column(name="Message", data_type=DataType("text"), is_nullable=True, ordinal_position=1)],
    )
    active_users = View(
        schema_name="dbo",
        view_name="ActiveUsers",
        columns=[Column(name="Id", data_type=DataType("int"), is_nullable=False, ordinal_position=1)],
        definition="CREATE VIEW dbo.ActiveUsers AS\nSELECT Id\nFROM dbo.Users",
    )
    encrypted = View(
        schema_name="dbo",
        view_name="Secret",
        columns=[Column(name="Value", data_type=DataType("int"), is_nullable=True, ordinal_position=1)],
        definition=None,
    )
    return DatabaseSchema(
        database_name="Shop",
        extracted_at=extracted_at,
        tables=[users_table, orders, audit],
        views=[encrypted, active_users],
    )


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Path:
    """Create a SQLite database with tables and a view"""
    db_path = tmp_path / "shop.db"

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            username TEXT NOT NULL,
            email VARCHAR(255),
            balance DECIMAL(10, 2),
            notes
        )
    """)
    cursor.execute("""
        CREATE TABLE orders (
            order_id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL,
            amount REAL,
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """)
    cursor.execute("""
        CREATE VIEW big_orders AS
        SELECT order_id, amount
        FROM orders
        WHERE amount > 100
    """)

    conn.commit()
    conn.close()

    return db_path

"""
Schema reflection over a freshly built workshop fixture.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import TypeAlias

from fixture import dataset
from sandbox.failures import FixtureUnavailable


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    type: str
    is_primary_key: bool
    is_not_null: bool


SchemaDescriptor: TypeAlias = dict[str, list[ColumnDescriptor]]


def describe_schema() -> SchemaDescriptor:
    """Describe every table of the fixture. Raises FixtureUnavailable on provisioning faults."""
    with dataset.open_fixture() as fixture:
        try:
            return _reflect(fixture.connection)
        except sqlite3.Error as exc:
            raise FixtureUnavailable(f"Could not read workshop schema: {exc}") from exc


def _reflect(connection: sqlite3.Connection) -> SchemaDescriptor:
    tables = connection.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
    ).fetchall()
    schema: SchemaDescriptor = {}
    for table in tables:
        table_name = str(table["name"])
        # PRAGMA arguments cannot be bound; names come from sqlite_master, not user input.
        columns = connection.execute(f'PRAGMA table_info("{table_name}")').fetchall()
        schema[table_name] = [
            ColumnDescriptor(
                name=str(column["name"]),
                type=str(column["type"]),
                is_primary_key=column["pk"] == 1,
                is_not_null=column["notnull"] == 1,
            )
            for column in columns
        ]
    return schema

"""
In-memory SQLite fixture for the workshop dataset.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from sandbox.failures import FixtureUnavailable

TABLE_NAMES = ("employees", "departments", "products", "orders")


SCHEMA_SQL = """
CREATE TABLE employees (
  id INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  department TEXT NOT NULL,
  salary INTEGER NOT NULL,
  hire_date DATE NOT NULL,
  manager_id INTEGER
);

CREATE TABLE departments (
  id INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  budget INTEGER NOT NULL,
  location TEXT NOT NULL
);

CREATE TABLE products (
  id INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  category TEXT NOT NULL,
  price DECIMAL(10,2) NOT NULL,
  stock_quantity INTEGER NOT NULL
);

CREATE TABLE orders (
  id INTEGER PRIMARY KEY,
  customer_name TEXT NOT NULL,
  product_id INTEGER NOT NULL,
  quantity INTEGER NOT NULL,
  order_date DATE NOT NULL,
  total_amount DECIMAL(10,2) NOT NULL,
  FOREIGN KEY (product_id) REFERENCES products(id)
);
"""

EMPLOYEES: tuple[tuple[str, str, int, str, int | None], ...] = (
    ("Tony Stark", "Engineering", 250000, "2008-05-02", None),
    ("Pepper Potts", "Management", 180000, "2008-05-15", 1),
    ("Happy Hogan", "Security", 75000, "2010-06-01", 2),
    ("Bruce Banner", "Research", 160000, "2012-05-04", 1),
    ("Natasha Romanoff", "Security", 95000, "2010-08-15", 2),
    ("Steve Rogers", "Leadership", 120000, "2011-07-04", 1),
    ("James Rhodes", "Engineering", 140000, "2008-10-15", 1),
    ("Vision", "Analysis", 200000, "2015-05-01", 1),
    ("Harley Keener", "Engineering", 90000, "2013-05-03", 1),
)

DEPARTMENTS: tuple[tuple[str, int, str], ...] = (
    ("Engineering", 5000000, "Malibu Workshop"),
    ("Management", 2000000, "Stark Tower"),
    ("Security", 1500000, "Stark Tower"),
    ("Research", 3000000, "Avengers Compound"),
    ("Leadership", 1000000, "Avengers Compound"),
    ("Analysis", 2500000, "Avengers Compound"),
)

PRODUCTS: tuple[tuple[str, str, float, int], ...] = (
    ("Arc Reactor v1", "Energy", 50000000.00, 1),
    ("Iron Man Suit Mark 85", "Defense", 100000000.00, 1),
    ("Repulsor Ray", "Weapons", 25000000.00, 2),
    ("FRIDAY AI License", "Software", 10000000.00, 5),
    ("Stark Phone", "Consumer", 1500.00, 1000),
    ("Holographic Display", "Technology", 500000.00, 10),
    ("Vibranium Shield", "Defense", 75000000.00, 1),
    ("Web Shooters", "Gadgets", 50000.00, 20),
)

ORDERS: tuple[tuple[str, int, int, str, float], ...] = (
    ("S.H.I.E.L.D.", 2, 1, "2023-01-15", 100000000.00),
    ("Avengers Initiative", 4, 3, "2023-02-20", 30000000.00),
    ("Peter Parker", 8, 2, "2023-03-10", 100000.00),
    ("Wakanda", 7, 1, "2023-04-05", 75000000.00),
    ("Daily Bugle", 5, 100, "2023-05-12", 150000.00),
    ("MIT", 6, 5, "2023-06-18", 2500000.00),
    ("Stark Industries", 1, 1, "2023-07-22", 50000000.00),
    ("U.S. Government", 3, 10, "2023-08-30", 250000000.00),
)

_SEED_STATEMENTS: tuple[tuple[str, tuple[tuple[object, ...], ...]], ...] = (
    (
        "INSERT INTO employees (name, department, salary, hire_date, manager_id) "
        "VALUES (?, ?, ?, ?, ?)",
        EMPLOYEES,
    ),
    (
        "INSERT INTO departments (name, budget, location) VALUES (?, ?, ?)",
        DEPARTMENTS,
    ),
    (
        "INSERT INTO products (name, category, price, stock_quantity) VALUES (?, ?, ?, ?)",
        PRODUCTS,
    ),
    (
        "INSERT INTO orders (customer_name, product_id, quantity, order_date, total_amount) "
        "VALUES (?, ?, ?, ?, ?)",
        ORDERS,
    ),
)


class Fixture:
    """A private, single-use copy of the workshop dataset."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection: sqlite3.Connection | None = connection

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise FixtureUnavailable("Fixture has already been closed")
        return self._connection

    @property
    def closed(self) -> bool:
        return self._connection is None

    def close(self) -> None:
        if self._connection is None:
            return
        connection = self._connection
        self._connection = None
        connection.close()


def build() -> Fixture:
    """Create a fresh in-memory database with the schema and seed rows."""
    connection: sqlite3.Connection | None = None
    try:
        connection = sqlite3.connect(":memory:")
        connection.row_factory = sqlite3.Row
        _ = connection.executescript(SCHEMA_SQL)
        for statement, rows in _SEED_STATEMENTS:
            _ = connection.executemany(statement, rows)
        connection.commit()
        _ = connection.execute("PRAGMA query_only = ON")
    except sqlite3.Error as exc:
        if connection is not None:
            connection.close()
        raise FixtureUnavailable(f"Could not provision workshop database: {exc}") from exc
    return Fixture(connection)


@contextmanager
def open_fixture() -> Iterator[Fixture]:
    """Build a fixture and close it on every exit path."""
    fixture = build()
    try:
        yield fixture
    finally:
        fixture.close()

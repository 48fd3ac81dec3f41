"""Pytest configuration and shared fixtures for easydb tests"""

from typing import Generator

import pytest

from easydb import EasyDB


@pytest.fixture
def db_path(tmp_path) -> str:
    """Path of a throwaway SQLite database file"""
    return str(tmp_path / "easy.db")


@pytest.fixture
def db(db_path: str) -> Generator[EasyDB, None, None]:
    """EasyDB over an empty SQLite file, closed after the test"""
    database = EasyDB(type="sqlite", db=db_path)
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def people(db: EasyDB) -> EasyDB:
    """EasyDB with table `a` holding Bob, Kelly and Alex"""
    db.execute("CREATE TABLE a (id INTEGER PRIMARY KEY, name TEXT, weight REAL)")
    db.insert("a", name="Bob", weight=1.5)
    db.insert("a", name="Kelly", weight=2.3)
    db.insert("a", name="Alex", weight=0.7)
    return db

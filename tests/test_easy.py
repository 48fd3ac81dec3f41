"""End-to-end tests for EasyDB against SQLite"""

import pytest

from easydb import (
    CompiledStatement,
    EasyDB,
    ExecutionError,
    PreparedStatement,
    ValidationError,
)


class TestSelect:
    """Select with each output mode."""

    def test_where_equality(self, people: EasyDB):
        rows = people.select("a", where={"id": 1})
        assert len(rows) == 1
        assert rows[0]["name"] == "Bob"

    def test_where_comparison(self, people: EasyDB):
        rows = people.select("a", where={"weight": {">": 1}})
        assert sorted(r["name"] for r in rows) == ["Bob", "Kelly"]

    def test_all_rows_ordered(self, people: EasyDB):
        rows = people.select("a", get=["name"], order=[{"-desc": "weight"}])
        assert rows == [{"name": "Kelly"}, {"name": "Bob"}, {"name": "Alex"}]

    def test_get_comma_separated(self, people: EasyDB):
        assert people.select("a", get="id, name", where={"id": 1}) == [{"id": 1, "name": "Bob"}]

    def test_where_list_of_ranges(self, people: EasyDB):
        rows = people.select("a", get="name", where={"weight": [{">": 2}, {"<": 1}]}, order="id")
        assert [r["name"] for r in rows] == ["Kelly", "Alex"]

    def test_no_rows_is_empty_list(self, people: EasyDB):
        assert people.select("a", where={"name": "Nobody"}) == []

    def test_limit_offset(self, people: EasyDB):
        rows = people.select("a", get="id", order="id", limit=2, offset=1)
        assert [r["id"] for r in rows] == [2, 3]

    def test_return_scalar(self, people: EasyDB):
        assert people.select("a", where={"id": 2}, returning="name") == "Kelly"

    def test_return_keyword_spelling(self, people: EasyDB):
        assert people.select("a", where={"id": 3}, **{"return": "weight"}) == 0.7

    def test_return_no_row_is_none(self, people: EasyDB):
        assert people.select("a", where={"id": 99}, returning="name") is None

    def test_return_forces_single_row_limit(self, people: EasyDB):
        stmt = people.select("a", returning="name", build=True)
        assert stmt.sql == "SELECT * FROM a LIMIT 1"

    def test_return_keeps_explicit_limit(self, people: EasyDB):
        stmt = people.select("a", returning="name", limit=3, build=True)
        assert stmt.sql == "SELECT * FROM a LIMIT 3"

    def test_index(self, people: EasyDB):
        indexed = people.select("a", index="id")
        assert set(indexed) == {1, 2, 3}
        assert indexed[2]["name"] == "Kelly"

    def test_index_duplicate_keys_last_wins(self, people: EasyDB):
        people.insert("a", name="Bob", weight=9.9)
        indexed = people.select("a", index="name", order="id")
        assert len(indexed) == 3
        assert indexed["Bob"]["weight"] == 9.9

    def test_index_missing_column_raises(self, people: EasyDB):
        with pytest.raises(KeyError):
            people.select("a", index="nope")

    def test_unknown_option(self, people: EasyDB):
        with pytest.raises(ValidationError):
            people.select("a", wehre={"id": 1})


class TestBuildAndPrepare:
    """Statement-or-handle short circuits."""

    def test_build_does_not_connect(self, db: EasyDB):
        stmt = db.select("a", where={"id": 1}, order="name", build=True)
        assert isinstance(stmt, CompiledStatement)
        assert stmt == ("SELECT * FROM a WHERE ( id = ? ) ORDER BY name", (1,))
        assert db.manager.connected is False

    def test_build_wins_over_prepare(self, db: EasyDB):
        assert isinstance(db.select("a", build=True, prepare=True), CompiledStatement)

    def test_prepare_connects_without_executing(self, people: EasyDB):
        sth = people.select("a", where={"id": 1}, prepare=True)
        assert isinstance(sth, PreparedStatement)
        assert sth.sql == "SELECT * FROM a WHERE ( id = ? )"
        assert people.manager.connected is True

    def test_prepared_statement_reexecutes(self, people: EasyDB):
        sth = people.select("a", get="name", where={"id": 0}, prepare=True)
        assert sth.execute(1).scalar() == "Bob"
        assert sth.execute(3).scalar() == "Alex"

    def test_prepared_statement_bind_count(self, people: EasyDB):
        sth = people.select("a", where={"id": 0}, prepare=True)
        with pytest.raises(ExecutionError):
            sth.execute()


class TestWrites:
    """Insert, update and delete."""

    def test_insert_reports_rowid(self, people: EasyDB):
        result = people.insert("a", {"name": "Nick", "weight": 1.1})
        assert result.rowcount == 1
        assert result.lastrowid == 4

    def test_insert_requires_fields(self, db: EasyDB):
        with pytest.raises(ValidationError, match="fields required"):
            db.insert("a")
        assert db.manager.connected is False

    def test_update(self, people: EasyDB):
        result = people.update("a", set={"weight": 3.0}, where={"name": "Alex"})
        assert result.rowcount == 1
        assert people.select("a", where={"id": 3}, returning="weight") == 3.0

    def test_update_without_where_touches_all(self, people: EasyDB):
        assert people.update("a", set={"weight": 0}).rowcount == 3

    def test_update_requires_set(self, db: EasyDB):
        with pytest.raises(ValidationError, match="set required"):
            db.update("a", where={"id": 1})
        assert db.manager.connected is False

    def test_delete(self, people: EasyDB):
        assert people.delete("a", id=2).rowcount == 1
        assert people.delete("a", {"weight": {"<": 1}}).rowcount == 1
        assert [r["name"] for r in people.select("a")] == ["Bob"]

    def test_delete_requires_where(self, db: EasyDB):
        with pytest.raises(ValidationError, match="where required"):
            db.delete("a")
        assert db.manager.connected is False


class TestExecute:
    """Raw statements and error reporting."""

    def test_positional_binds(self, people: EasyDB):
        result = people.execute("SELECT name FROM a WHERE weight > ? AND weight < ?", 1, 2)
        assert [row.name for row in result] == ["Bob"]

    def test_question_mark_in_literal_is_not_a_bind(self, people: EasyDB):
        result = people.execute("SELECT name FROM a WHERE name != 'who?' AND id = ?", 1)
        assert result.scalar() == "Bob"

    def test_colon_in_literal_is_not_a_bind(self, people: EasyDB):
        result = people.execute("SELECT name || ' :x' AS n FROM a WHERE id = ?", 1)
        assert result.scalar() == "Bob :x"

    def test_time_literal_with_colons(self, people: EasyDB):
        result = people.execute("SELECT '12:30:00' FROM a WHERE id = ?", 2)
        assert result.scalar() == "12:30:00"

    def test_error_carries_statement(self, db: EasyDB):
        with pytest.raises(ExecutionError) as info:
            db.select("missing_table")
        assert info.value.statement == "SELECT * FROM missing_table"
        assert "missing_table" in info.value.message


class TestLifecycle:
    """Construction and teardown."""

    def test_context_manager_closes(self, db_path: str):
        with EasyDB(type="sqlite", db=db_path) as db:
            db.execute("CREATE TABLE t (id INTEGER)")
            assert db.manager.connected is True
        assert db.manager.connected is False

    def test_close_never_connected(self, db_path: str):
        db = EasyDB(type="sqlite", db=db_path)
        db.close()
        db.close()

    def test_close_twice(self, people: EasyDB):
        people.close()
        people.close()
        assert people.manager.connected is False

    def test_accessors(self, db: EasyDB, db_path: str):
        assert db.dsn == f"sqlite:dbname={db_path}"
        assert db.sql.select("t").sql == "SELECT * FROM t"
        assert db.dbh is db.manager.handle()

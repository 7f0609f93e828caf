"""Unit tests for DML generation."""

import pytest

from src.operation import SqlBuilder
from src.utils.database_types import DatabaseType


class TestSqlBuilder:
    """Test statements for each dialect's paramstyle."""

    def setup_method(self):
        self.pg = SqlBuilder(DatabaseType.POSTGRESQL)
        self.mssql = SqlBuilder(DatabaseType.SQLSERVER)

    def test_insert(self):
        assert self.pg.insert("users", ["ID", "NAME"]) == "INSERT INTO users (ID, NAME) VALUES (%s, %s)"
        assert self.mssql.insert("dbo.users", ["ID"]) == "INSERT INTO dbo.users (ID) VALUES (?)"

    def test_insert_without_columns(self):
        with pytest.raises(ValueError, match="without columns"):
            self.pg.insert("users", [])

    def test_update_by_key(self):
        sql = self.mssql.update_by_key("users", ["ID", "NAME", "EMAIL"])

        assert sql == "UPDATE users SET NAME = ?, EMAIL = ? WHERE ID = ?"

    def test_update_needs_value_column(self):
        with pytest.raises(ValueError, match="at least one value column"):
            self.pg.update_by_key("users", ["ID"])

    def test_delete_and_exists_by_key(self):
        assert self.pg.delete_by_key("users", "ID") == "DELETE FROM users WHERE ID = %s"
        assert self.mssql.exists_by_key("users", "ID") == "SELECT 1 FROM users WHERE ID = ?"

    def test_delete_all_and_truncate(self):
        assert self.pg.delete_all("app.users") == "DELETE FROM app.users"
        assert self.pg.truncate("app.users") == "TRUNCATE TABLE app.users"

    def test_select(self):
        assert self.pg.select("users") == "SELECT * FROM users"
        assert (
            self.pg.select("users", ["ID", "NAME"], order_by=["ID"])
            == "SELECT ID, NAME FROM users ORDER BY ID"
        )

    @pytest.mark.parametrize(
        "build",
        [
            lambda b: b.insert("users; DROP TABLE x", ["ID"]),
            lambda b: b.insert("users", ["ID", "NAME); DROP TABLE x; --"]),
            lambda b: b.delete_by_key("users", "1=1 OR ID"),
            lambda b: b.truncate("users --"),
            lambda b: b.select("users", order_by=["ID DESC"]),
        ],
    )
    def test_rejects_unsafe_identifiers(self, build):
        with pytest.raises(ValueError):
            build(self.pg)

"""Tests for the command executor."""

import pytest

from docsql.adapters.memory import MemoryStoreAdapter
from docsql.connection import StoreSession
from docsql.core.models import ResultType
from docsql.execution.executor import CommandExecutor
from docsql.execution.result_formatter import is_permission_error


@pytest.fixture
def executor(recording_store) -> CommandExecutor:
    return CommandExecutor(StoreSession(recording_store), page_size=10)


class TestSelect:
    """Tests for SELECT execution."""

    async def test_filtered_select(self):
        store = MemoryStoreAdapter(
            {
                "users": {
                    "a": {"age": 30, "name": "Bob"},
                    "b": {"name": "Ann", "age": 45},
                    "c": {"age": 20, "name": "Kid"},
                }
            }
        )
        executor = CommandExecutor(StoreSession(store))

        result = await executor.run("SELECT * FROM users WHERE age > 21")

        assert result.type == ResultType.READ
        assert result.columns == ["id", "age", "name"]
        assert len(result.rows) == 2
        assert result.message == "Fetched 2 documents from 'users'"
        assert result.collection_name == "users"
        assert all("id" in row for row in result.rows)
        assert result.page_cursor == "b"

    async def test_empty_select(self, executor):
        result = await executor.run("SELECT * FROM nothing")

        assert result.type == ResultType.READ
        assert result.columns == ["id"]
        assert result.rows == []
        assert result.page_cursor is None
        assert result.message == "Fetched 0 documents from 'nothing'"

    async def test_document_id_wins_over_id_field(self):
        store = MemoryStoreAdapter({"things": {"real": {"id": "fake", "x": 1}}})
        result = await CommandExecutor(StoreSession(store)).run("SELECT * FROM things")

        assert result.columns == ["id", "x"]
        assert result.rows == [{"id": "real", "x": 1}]

    async def test_select_passes_filter_and_cursor(self, executor, recording_store):
        await executor.run("SELECT * FROM users WHERE name = 'Ann'", cursor="u1")

        _, collection, where, cursor = recording_store.calls[0]
        assert collection == "users"
        assert where.value == "Ann"
        assert cursor == "u1"

    async def test_same_select_twice_is_identical(self, executor):
        first = await executor.run("SELECT * FROM users")
        second = await executor.run("SELECT * FROM users")

        assert first.columns == second.columns
        assert first.rows == second.rows


class TestWrites:
    """Tests for INSERT, UPDATE and DELETE execution."""

    async def test_insert(self, executor, recording_store, monkeypatch):
        async def create(collection, fields):
            recording_store.calls.append(("create", collection, fields))
            return "abc123"

        monkeypatch.setattr(recording_store, "create_document", create)

        result = await executor.run('INSERT INTO users JSON {"name":"Ann"}')

        assert result.type == ResultType.WRITE
        assert result.columns == ["id", "status"]
        assert result.rows == [{"id": "abc123", "status": "Created"}]
        assert result.message == "Document created in 'users' with ID: abc123"
        assert recording_store.calls == [("create", "users", {"name": "Ann"})]

    async def test_invalid_json_makes_no_store_call(self, executor, recording_store):
        result = await executor.run("INSERT INTO users JSON {bad}")

        assert result.type == ResultType.ERROR
        assert "Invalid JSON" in result.message
        assert result.columns == []
        assert result.rows == []
        assert recording_store.calls == []

    async def test_update_reads_back(self, executor, recording_store):
        result = await executor.run("UPDATE users SET JSON {\"age\": 31} WHERE id = 'u1'")

        assert result.type == ResultType.WRITE
        assert result.rows == [{"id": "u1", "status": "Updated"}]
        assert result.message == "Document 'u1' updated in 'users'"
        assert [call[0] for call in recording_store.calls] == ["update", "get"]
        assert (await recording_store.get_document("users", "u1")).fields["age"] == 31

    async def test_failed_read_back_still_succeeds(self, executor, recording_store):
        recording_store.fail_with["get"] = RuntimeError("read failed")

        result = await executor.run("UPDATE users SET JSON {\"age\": 31} WHERE id = 'u1'")

        assert result.type == ResultType.WRITE
        assert result.rows[0]["status"] == "Updated"

    async def test_update_missing_document_is_an_error(self, executor):
        result = await executor.run("UPDATE users SET JSON {\"age\": 1} WHERE id = 'nobody'")

        assert result.type == ResultType.ERROR
        assert "No document to update" in result.message

    async def test_delete_strips_quotes(self, executor, recording_store):
        result = await executor.run("DELETE FROM users WHERE id = 'abc123'")

        assert recording_store.calls == [("delete", "users", "abc123")]
        assert result.type == ResultType.WRITE
        assert result.rows == [{"id": "abc123", "status": "Deleted"}]
        assert result.message == "Document 'abc123' deleted from 'users'"


class TestErrors:
    """Tests for error results."""

    async def test_syntax_error(self, executor):
        result = await executor.run("DROP TABLE users")

        assert result.type == ResultType.ERROR
        assert result.message.startswith("Syntax error")
        assert result.permission_denied is False

    async def test_not_connected(self, store):
        session = StoreSession(store)
        await session.disconnect()

        result = await CommandExecutor(session).run("SELECT * FROM users")

        assert result.type == ResultType.ERROR
        assert result.message == "Database not connected"

    async def test_store_message_is_verbatim(self, executor, recording_store):
        recording_store.fail_with["list"] = RuntimeError("boom: quota exceeded")

        result = await executor.run("SELECT * FROM users")

        assert result.type == ResultType.ERROR
        assert result.message == "boom: quota exceeded"

    async def test_permission_errors_are_flagged(self, executor, recording_store):
        recording_store.fail_with["list"] = RuntimeError(
            "FirebaseError: Missing or insufficient permissions."
        )

        result = await executor.run("SELECT * FROM users")

        assert result.type == ResultType.ERROR
        assert result.permission_denied is True

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("PERMISSION-DENIED: nope", True),
            ("missing or insufficient permissions", True),
            ("not authorized on app to execute command", True),
            ("network unreachable", False),
        ],
    )
    def test_permission_classification(self, message, expected):
        assert is_permission_error(message) is expected

"""
Tests for the key-value stores

The Google Sheets store runs against a mocked worksheet.
No real API calls are made.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from src.services.storage import (
    CorruptDataError,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageError,
)
from src.services.storage.google_sheets import CELL_CHUNK_SIZE, split_value


class TestInMemoryStore:
    """Tests for the dictionary-backed store."""

    def test_missing_key(self):
        assert InMemoryKeyValueStore().get("accounts") is None

    def test_set_then_get(self):
        store = InMemoryKeyValueStore()
        store.set("theme", "dark")
        assert store.get("theme") == "dark"

    def test_initial_data_is_copied(self):
        initial = {"theme": "dark"}
        store = InMemoryKeyValueStore(initial)
        store.set("theme", "light")
        assert initial == {"theme": "dark"}


class TestJsonFileStore:
    """Tests for the JSON file store."""

    def test_missing_file_reads_as_empty(self, tmp_path):
        assert JsonFileKeyValueStore(tmp_path / "store.json").get("accounts") is None

    def test_values_survive_reopen(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileKeyValueStore(path).set("accounts", "[]")
        JsonFileKeyValueStore(path).set("theme", "dark")

        reopened = JsonFileKeyValueStore(path)
        assert reopened.get("accounts") == "[]"
        assert reopened.get("theme") == "dark"
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "accounts": "[]",
            "theme": "dark",
        }

    def test_no_temp_file_left_behind(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        store.set("theme", "dark")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_blank_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("  \n", encoding="utf-8")
        assert JsonFileKeyValueStore(path).get("theme") is None

    def test_corrupt_file_is_never_overwritten(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{oops", encoding="utf-8")
        store = JsonFileKeyValueStore(path)

        with pytest.raises(CorruptDataError):
            store.get("accounts")
        with pytest.raises(CorruptDataError):
            store.set("accounts", "[]")
        assert path.read_text(encoding="utf-8") == "{oops"

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileKeyValueStore(path).get("accounts")

    def test_non_string_value_is_corrupt(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text('{"accounts": [1]}', encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileKeyValueStore(path).get("accounts")


class TestSplitValue:
    """Tests for cell chunking."""

    def test_empty_value_is_one_empty_cell(self):
        assert split_value("") == [""]

    def test_chunks_rejoin(self):
        chunks = split_value("abcdefg", chunk_size=3)
        assert chunks == ["abc", "def", "g"]
        assert "".join(chunks) == "abcdefg"


class TestGoogleSheetsStore:
    """Tests for the Google Sheets store with a mocked worksheet."""

    @pytest.fixture
    def sheet(self):
        sheet = MagicMock()
        sheet.col_count = 2
        sheet.get_all_values.return_value = [["key", "value"]]
        return sheet

    @pytest.fixture
    def store(self, sheet):
        client = MagicMock()
        client.get_store_sheet.return_value = sheet
        return GoogleSheetsKeyValueStore(client=client)

    def test_missing_key(self, store):
        assert store.get("accounts") is None

    def test_get_joins_chunks(self, store, sheet):
        sheet.get_all_values.return_value = [
            ["key", "value"],
            ["theme", "dark"],
            ["accounts", "[{", "}]"],
        ]
        assert store.get("accounts") == "[{}]"

    def test_header_row_is_not_a_key(self, store):
        assert store.get("key") is None

    def test_set_new_key_appends_row(self, store, sheet):
        store.set("theme", "dark")
        sheet.append_row.assert_called_once_with(["theme", "dark"], value_input_option="RAW")
        sheet.update.assert_not_called()

    def test_set_existing_key_updates_row(self, store, sheet):
        sheet.get_all_values.return_value = [["key", "value"], ["theme", "light"]]
        store.set("theme", "dark")
        sheet.update.assert_called_once_with(
            values=[["theme", "dark"]],
            range_name="A2",
            value_input_option="RAW",
        )

    def test_shorter_value_blanks_old_chunks(self, store, sheet):
        sheet.col_count = 4
        sheet.get_all_values.return_value = [
            ["key", "value"],
            ["accounts", "x", "y", "z"],
        ]
        store.set("accounts", "q")
        sheet.update.assert_called_once_with(
            values=[["accounts", "q", "", ""]],
            range_name="A2",
            value_input_option="RAW",
        )
        sheet.add_cols.assert_not_called()

    def test_long_value_adds_columns(self, store, sheet):
        sheet.get_all_values.return_value = [["key", "value"], ["accounts", "old"]]
        value = "a" * (CELL_CHUNK_SIZE + 1)

        store.set("accounts", value)

        sheet.add_cols.assert_called_once_with(1)
        row = sheet.update.call_args.kwargs["values"][0]
        assert row[0] == "accounts"
        assert "".join(row[1:]) == value

    def test_api_failure_is_retried_then_wrapped(self, store, sheet):
        sheet.get_all_values.side_effect = Exception("API down")
        with patch("time.sleep"):
            with pytest.raises(StorageError, match="API down"):
                store.get("accounts")
        assert sheet.get_all_values.call_count == 3

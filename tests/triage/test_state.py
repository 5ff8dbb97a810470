# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Tests for the processed-PR state file.
"""

import json
from unittest.mock import patch

import pytest

from nixpr.errors import StateError
from nixpr.triage.state import ProcessedStore, mark_processed


class TestLoad:
    def test_missing_file_is_empty(self, store):
        assert not store.path.exists()
        assert store.load() == set()

    def test_loads_saved_numbers(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('[3, 1, 2]')
        assert store.load() == {1, 2, 3}

    def test_corrupt_json_raises(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text('[1, 2,')
        with pytest.raises(StateError) as exc_info:
            store.load()
        assert 'Failed to parse state' in str(exc_info.value)

    @pytest.mark.parametrize('content', ['{"processed": [1]}', '"12"', '[1, "2"]', '[0]', '[-4]', '[true]', '[1.5]'])
    def test_malformed_content_raises(self, store, content):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(content)
        with pytest.raises(StateError):
            store.load()

    def test_non_utf8_bytes_raise(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b'\xff\xfe\x00garbage')
        with pytest.raises(StateError) as exc_info:
            store.load()
        assert 'Failed to parse state' in str(exc_info.value)

    def test_unreadable_path_raises(self, tmp_path):
        # A directory where the file should be cannot be read as state
        path = tmp_path / 'processed.json'
        path.mkdir()
        with pytest.raises(StateError):
            ProcessedStore(path).load()


class TestSave:
    def test_creates_parent_directory(self, store):
        store.save({42})
        assert store.path.exists()
        assert json.loads(store.path.read_text()) == [42]

    def test_full_overwrite_sorted(self, store):
        store.save({1, 2, 3})
        store.save({9, 5})
        assert json.loads(store.path.read_text()) == [5, 9]

    def test_no_temp_files_left(self, store):
        store.save({1})
        store.save({1, 2})
        assert [p.name for p in store.path.parent.iterdir()] == ['processed.json']

    def test_temp_file_creation_failure_raises(self, store):
        with patch('nixpr.triage.state.tempfile.mkstemp', side_effect=PermissionError('denied')):
            with pytest.raises(StateError) as exc_info:
                store.save({1})
        assert 'Failed to write state' in str(exc_info.value)
        assert not store.path.exists()

    def test_round_trip(self, store):
        processed = store.load()
        mark_processed(processed, 7)
        mark_processed(processed, 7)
        store.save(processed)
        assert store.load() == {7}


class TestClear:
    def test_reset_then_load_is_empty(self, store):
        store.save({1, 2, 3})
        store.clear()
        assert store.load() == set()

    def test_clear_without_prior_state(self, store):
        store.clear()
        assert store.path.exists()
        assert store.load() == set()


def test_default_path_under_home():
    store = ProcessedStore()
    assert store.path.name == 'processed.json'
    assert store.path.parent.name == '.nixpr'

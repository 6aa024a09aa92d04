# backend/src/src_tests/test_manager.py
import json
import logging

import pytest

from nosqlmanager.config import StoreConfig
from nosqlmanager.core.document import Document
from nosqlmanager.errors import CorruptFile, InvalidArgument, IoFailure
from nosqlmanager.manager import DatabaseManager


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "test_database.json")


@pytest.fixture
def manager(db_path):
    return DatabaseManager(db_path)


def person(i, name, age, city):
    return Document(i, {"nombre": name, "edad": age, "ciudad": city})


def read_file(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def test_new_store_on_missing_file_is_empty(manager, db_path):
    assert manager.size() == 0
    assert manager.is_empty()
    assert manager.load_error is None


def test_default_config_path():
    assert StoreConfig().file_path == "database.json"


def test_blank_path_rejected():
    with pytest.raises(ValueError):
        StoreConfig(file_path="  ")


def test_save_and_find_by_id(manager):
    doc = person(1, "Juan", 25, "Bogotá")
    manager.save(doc)
    assert manager.find_by_id(1) == doc
    assert manager.find_by_id(2) is None
    assert manager.exists_by_id(1)
    assert not manager.exists_by_id(2)


def test_save_writes_mirror(manager, db_path):
    manager.save(person(2, "Ana", 30, "Medellín"))
    manager.save(person(1, "Juan", 25, "Bogotá"))
    on_disk = read_file(db_path)
    assert [d["id"] for d in on_disk] == [1, 2]
    assert on_disk[1]["data"]["ciudad"] == "Medellín"


def test_mirror_is_pretty_printed_id_first(manager, db_path):
    manager.save(Document(1, {"a": 1}))
    with open(db_path, encoding="utf-8") as f:
        text = f.read()
    assert text.startswith("[\n  {\n    \"id\": 1,\n    \"data\"")


def test_save_is_upsert(manager):
    manager.save(person(1, "Juan", 25, "Bogotá"))
    manager.save(person(1, "Juan", 26, "Cali"))
    assert manager.size() == 1
    assert manager.find_by_id(1).data["ciudad"] == "Cali"


@pytest.mark.parametrize("doc", [None, Document(None, {})])
def test_save_rejects_null(manager, doc, db_path):
    with pytest.raises(InvalidArgument):
        manager.save(doc)
    assert manager.size() == 0


def test_save_rejects_non_integer_id(manager):
    with pytest.raises(InvalidArgument):
        manager.save(Document("1", {}))


def test_update_existing(manager, db_path):
    manager.save(person(1, "Juan", 25, "Bogotá"))
    assert manager.update(person(1, "Juan", 26, "Cali")) is True
    assert manager.find_by_id(1).data["edad"] == 26
    assert read_file(db_path)[0]["data"]["edad"] == 26


def test_update_missing_returns_false(manager, db_path):
    assert manager.update(person(999, "Fantasma", 0, "Nada")) is False
    assert manager.size() == 0


def test_update_rejects_null(manager):
    with pytest.raises(InvalidArgument):
        manager.update(None)


def test_delete(manager, db_path):
    manager.save(person(1, "Juan", 25, "Bogotá"))
    manager.save(person(2, "Ana", 30, "Medellín"))
    assert manager.delete_by_id(1) is True
    assert manager.find_by_id(1) is None
    assert manager.size() == 1
    assert [d["id"] for d in read_file(db_path)] == [2]
    assert manager.delete_by_id(1) is False


def test_delete_missing_does_not_touch_file(manager, db_path):
    manager.save(person(1, "Juan", 25, "Bogotá"))
    before = manager.file.stats.flushes
    assert manager.delete_by_id(999) is False
    assert manager.file.stats.flushes == before


def test_all_documents_and_keys_sorted(manager):
    for i in (5, 3, 7, 1, 9):
        manager.save(Document(i, {"n": i}))
    assert manager.all_keys() == [1, 3, 5, 7, 9]
    assert [d.id for d in manager.all_documents()] == [1, 3, 5, 7, 9]
    assert [d.id for d in manager] == [1, 3, 5, 7, 9]
    assert len(manager) == 5 and 7 in manager and "7" not in manager


def test_persistence_round_trip(db_path):
    first = DatabaseManager(db_path)
    for i in (5, 3, 7, 1, 9):
        first.save(Document(i, {"n": i, "name": f"doc{i}"}))
    del first
    second = DatabaseManager(db_path)
    assert second.all_keys() == [1, 3, 5, 7, 9]
    for i in (5, 3, 7, 1, 9):
        assert second.find_by_id(i).data == {"n": i, "name": f"doc{i}"}


def test_hydration_keeps_last_duplicate(db_path):
    with open(db_path, "w", encoding="utf-8") as f:
        json.dump([{"id": 1, "data": "a"}, {"data": "b", "id": 1}], f)
    m = DatabaseManager(db_path)
    assert m.size() == 1
    assert m.find_by_id(1).data == "b"


def test_corrupt_file_starts_empty(db_path, caplog):
    with open(db_path, "wb") as f:
        f.write(b"{not json")
    with caplog.at_level(logging.WARNING, logger="nosqlmanager.manager"):
        m = DatabaseManager(db_path)
    assert m.size() == 0
    assert isinstance(m.load_error, CorruptFile)
    assert "starting empty" in caplog.text

    m.save(Document(1, {}))
    assert DatabaseManager(db_path).size() == 1


def test_empty_file_is_not_an_error(db_path):
    open(db_path, "wb").close()
    m = DatabaseManager(db_path)
    assert m.size() == 0 and m.load_error is None


def test_clear(manager, db_path):
    manager.save(person(1, "Juan", 25, "Bogotá"))
    manager.save(person(2, "Ana", 30, "Medellín"))
    manager.clear()
    assert manager.size() == 0 and manager.is_empty()
    with open(db_path, encoding="utf-8") as f:
        assert f.read() == "[]"


def test_write_failure_keeps_memory_state(tmp_path):
    target = tmp_path / "as_dir"
    target.mkdir()
    m = DatabaseManager(str(target))  # a directory: reads fail, writes fail
    with pytest.raises(IoFailure):
        m.save(Document(1, {"x": 1}))
    assert m.find_by_id(1) == Document(1, {"x": 1})


def test_balance_after_ascending_saves(manager):
    for i in range(1, 64):
        manager.save(Document(i, {}))
    manager.index.check()
    assert manager.index.height() == 6


def test_export_to_other_file(manager, db_path, tmp_path):
    manager.save(Document(2, {"b": True}))
    other = str(tmp_path / "copy.json")
    manager.export_to(other)
    assert manager.file_path == db_path
    assert DatabaseManager.open(other).all_documents() == [Document(2, {"b": True})]


def test_print_index_logs_heap_array(manager, caplog):
    for i in (10, 20, 30):
        manager.save(Document(i, {}))
    with caplog.at_level(logging.INFO, logger="nosqlmanager.manager"):
        rows = manager.print_index()
    assert rows == ["(20,h=2)", "(10,h=1)", "(30,h=1)"]
    assert "[0]: (20,h=2)" in caplog.text


def test_open_blank_path_rejected():
    with pytest.raises(InvalidArgument):
        DatabaseManager.open("")


def test_unserializable_data_rejected_before_index(manager, db_path):
    with pytest.raises(InvalidArgument):
        manager.save(Document(1, {"s": {1, 2}}))
    assert manager.size() == 0
    manager.save(Document(2, {}))
    assert DatabaseManager(db_path).all_keys() == [2]


def test_update_with_unserializable_data_keeps_old_value(manager, db_path):
    manager.save(Document(1, {"v": 1}))
    with pytest.raises(InvalidArgument):
        manager.update(Document(1, {"v": object()}))
    assert manager.find_by_id(1).data == {"v": 1}
    assert read_file(db_path)[0]["data"] == {"v": 1}


@pytest.mark.parametrize("bad_id", ["1", True, 1.0, None])
def test_reads_and_deletes_reject_non_integer_id(manager, db_path, bad_id):
    manager.save(Document(1, {"a": 1}))
    with pytest.raises(InvalidArgument):
        manager.find_by_id(bad_id)
    with pytest.raises(InvalidArgument):
        manager.exists_by_id(bad_id)
    with pytest.raises(InvalidArgument):
        manager.delete_by_id(bad_id)
    assert manager.all_keys() == [1]
    assert [d["id"] for d in read_file(db_path)] == [1]


def test_mirror_stats_per_file(manager, db_path):
    manager.save(Document(1, {}))
    manager.save(Document(2, {}))
    stats = manager.file.stats
    assert stats.flushes == 2 and stats.loads == 0
    assert stats.bytes_flushed > 0
    reopened = DatabaseManager(db_path)
    assert reopened.file.stats.loads == 1
    assert reopened.file.stats.bytes_loaded == reopened.file.size()

import io
from pathlib import Path

import pytest

from linxcli.exceptions import DataError
from linxcli.keystore import DeleteKeyStore


def test_save(tmp_path: Path):
    store = DeleteKeyStore(tmp_path)
    assert store.path == tmp_path / "delete_keys"
    assert store.save(["a.txt/k1", "b.txt/k2"])
    assert store.save(["a.txt/k3"])
    assert store.path.read_text() == "a.txt/k1\nb.txt/k2\na.txt/k3\n"


def test_save_nothing(tmp_path: Path):
    out = io.StringIO()
    assert not DeleteKeyStore(tmp_path).save([], out)
    assert not DeleteKeyStore(None).save([], out)
    assert not out.getvalue()
    assert not (tmp_path / "delete_keys").exists()


@pytest.mark.parametrize("store_dir", [None, "missing"])
def test_save_without_store_dir(tmp_path: Path, store_dir):
    if store_dir is not None:
        store_dir = tmp_path / store_dir
    out = io.StringIO()
    assert not DeleteKeyStore(store_dir).save(["a.txt/k1", "b.txt/k2"], out)
    assert out.getvalue() == "Deletion keys (not logged):\n\ta.txt/k1\n\tb.txt/k2\n"
    assert not (tmp_path / "missing").exists()


def test_save_write_error_is_tolerated(tmp_path: Path):
    (tmp_path / "delete_keys").mkdir()
    assert DeleteKeyStore(tmp_path).save(["a.txt/k1"])


def test_read_records(tmp_path: Path):
    store = DeleteKeyStore(tmp_path)
    store.path.write_text("a.txt/k1\r\nno-separator\nb.txt/k/2\n\n")
    assert store.read_records() == [("a.txt", "k1"), ("b.txt", "k/2")]


def test_read_records_without_file(tmp_path: Path):
    with pytest.raises(DataError, match="Unable to open deletion key file"):
        DeleteKeyStore(tmp_path).read_records()
    with pytest.raises(DataError):
        DeleteKeyStore(None).read_records()


def test_lookup_last_record_wins():
    records = [("a", "key1"), ("b", "key9"), ("a", "key2"), ("a.b", "key3")]
    assert DeleteKeyStore.lookup("a", records) == "key2"
    assert DeleteKeyStore.lookup("b", records) == "key9"
    # plain equality, no pattern matching
    assert DeleteKeyStore.lookup("a?b", records) is None
    assert DeleteKeyStore.lookup("a.*", records) is None
    assert DeleteKeyStore.lookup("", records) is None


def test_non_utf8_names(tmp_path: Path):
    store = DeleteKeyStore(tmp_path)
    store.path.write_bytes(b"caf\xe9.txt/k1\n")
    assert store.read_records() == [("caf\udce9.txt", "k1")]
    # names taken from argv come back as the bytes they were read from
    assert store.save(["na\udcefve.txt/k2"])
    assert store.path.read_bytes() == b"caf\xe9.txt/k1\nna\xefve.txt/k2\n"
    # a lone surrogate can't be encoded at all, the batch is just not logged
    assert store.save(["\ud800.txt/k3"])
    assert store.path.read_bytes() == b"caf\xe9.txt/k1\nna\xefve.txt/k2\n"

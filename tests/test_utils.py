import io
from pathlib import Path

import pytest

from linxcli.exceptions import DataError
from linxcli.utils import appromix, check_file, read_file, read_stream


def test_appromix():
    assert appromix(0) == "0.00B"
    assert appromix(1536) == "1.50KB"
    assert appromix(3 * 1024**3) == "3.00GB"
    with pytest.raises(ValueError):
        appromix(-1)


def test_check_file(tmp_path: Path):
    f = tmp_path / "a.txt"
    f.write_text("a")
    assert check_file(f) == (True, "")
    assert check_file(tmp_path) == (False, "Is a directory")
    assert check_file(tmp_path / "b.txt") == (False, "No such file or directory")


def test_read_file(tmp_path: Path):
    f = tmp_path / "a.bin"
    f.write_bytes(b"\x00\xffraw")
    assert read_file(f) == b"\x00\xffraw"
    with pytest.raises(DataError, match="Unable to read file"):
        read_file(tmp_path / "missing")
    with pytest.raises(DataError, match="Is a directory"):
        read_file(tmp_path)
    (empty := tmp_path / "empty").touch()
    with pytest.raises(DataError, match="is an empty file!"):
        read_file(empty)


def test_read_stream():
    assert read_stream(io.BytesIO(b"data")) == b"data"
    with pytest.raises(DataError, match="No data provided!"):
        read_stream(io.BytesIO(b""))

    class Broken(io.RawIOBase):
        def read(self, size=-1):
            raise OSError(5, "Input/output error")

    with pytest.raises(DataError, match="Unable to read data from STDIN"):
        read_stream(Broken())


def test_read_closed_stream():
    with pytest.raises(DataError, match="stdin is closed"):
        read_stream(None)

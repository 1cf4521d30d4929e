from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from .config import STORE_FILE_NAME
from .exceptions import DataError
from .utils import logger


class DeleteKeyStore:
    """
    Append-only log of 'filename/delete_key' lines kept in
    ${LINXCLI_DIR}/delete_keys.

    Keys are never purged: if the server reports a successful deletion that
    didn't really happen, the key is still around to retry by hand. A file
    that was uploaded, deleted and re-uploaded under the same name has
    several records, the last one is the valid one.
    """

    def __init__(self, store_dir: Path | None) -> None:
        self.store_dir = store_dir

    @property
    def path(self) -> Path | None:
        if self.store_dir is None:
            return None
        return self.store_dir / STORE_FILE_NAME

    def is_available(self) -> bool:
        """The directory must already exist, it is never created here"""
        return self.store_dir is not None and self.store_dir.is_dir()

    def save(self, records: Sequence[str], out: TextIO | None = None) -> bool:
        """Append records to the store file, or print them when there is no
        store directory so they don't get lost.

        :return: True if the records went to the store directory
        """
        if not records:
            return False
        if not self.is_available():
            out = out or sys.stdout
            out.write("Deletion keys (not logged):\n\t" + "\n\t".join(records) + "\n")
            return False
        try:
            with open(
                self.path, "a", encoding="utf-8", errors="surrogateescape"  # type:ignore[arg-type]
            ) as f:
                f.write("\n".join(records) + "\n")
        except (OSError, UnicodeError) as e:
            logger.debug(f"Failed to write {self.path}: {e}")
        return True

    def read_records(self) -> list[tuple[str, str]]:
        if self.path is None:
            raise DataError("Unable to open deletion key file: LINXCLI_DIR is not set")
        try:
            with open(self.path, encoding="utf-8", errors="surrogateescape") as f:
                lines = f.readlines()
        except OSError as e:
            raise DataError(
                f'Unable to open deletion key file ("{self.path}"): {e.strerror or e}'
            ) from e
        return [rec for line in lines if (rec := self.parse_record(line))]

    @staticmethod
    def parse_record(line: str) -> tuple[str, str] | None:
        filename, sep, key = line.rstrip("\r\n").partition("/")
        if not sep:
            return None
        return filename, key

    @staticmethod
    def lookup(filename: str, records: Iterable[tuple[str, str]]) -> str | None:
        """Delete key of the most recent record for filename"""
        key = None
        for name, k in records:
            if name == filename:
                key = k
        return key

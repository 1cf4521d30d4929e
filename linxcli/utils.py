#!/usr/bin/env python
import logging
import os
import stat
from pathlib import Path

from .exceptions import DataError

SUFFIX = ["B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]
logger = logging.getLogger("linxcli")


def appromix(size: int | float, base=0) -> str:
    """Conver bytes stream size to human-readable format.

    :param size: int, bytes stream size
    :param base: int, suffix index
    Return: string
    """
    multiples = 1024
    if size < 0:
        raise ValueError("[-] Error: number must be non-negative.")
    for suffix in SUFFIX[base:]:
        if size < multiples:
            return "{0:.2f}{1}".format(size, suffix)
        size /= float(multiples)
    raise ValueError("[-] Error: number too big.")


def check_file(filename: str | Path) -> tuple[bool, str]:
    ret = True
    errmsg = ""
    if not os.path.exists(filename):
        ret = False
        errmsg = "No such file or directory"
    elif stat.S_ISDIR(os.stat(filename).st_mode):
        # pipes and character devices (e.g. <(cmd), /dev/stdin) are fine
        ret = False
        errmsg = "Is a directory"
    return (ret, errmsg)


def read_file(filename: str | Path) -> bytes:
    """Read a local file fully as raw bytes.

    :param filename: path of the file to upload
    :raise DataError: the file is missing, a directory, unreadable or empty
    """
    isfile, errmsg = check_file(filename)
    if not isfile:
        raise DataError(f'Unable to read file "{filename}": {errmsg} (not uploading)')
    try:
        content = Path(filename).read_bytes()
    except OSError as e:
        raise DataError(
            f'Unable to read file "{filename}": {e.strerror or e} (not uploading)'
        ) from e
    if not content:
        raise DataError(f'"{filename}" is an empty file! (not uploading)')
    logger.debug(f"Read {appromix(len(content))} from {filename}")
    return content


def read_stream(stream) -> bytes:
    """Read everything from a binary stream (usually stdin)."""
    if stream is None:
        # sys.stdin is None when the process was started with it closed
        raise DataError("Unable to read data from STDIN: stdin is closed (not uploading)")
    try:
        content = stream.read()
    except OSError as e:
        raise DataError(
            f"Unable to read data from STDIN: {e.strerror or e} (not uploading)"
        ) from e
    if not content:
        raise DataError("No data provided! (not uploading)")
    logger.debug(f"Read {appromix(len(content))} from STDIN")
    return content

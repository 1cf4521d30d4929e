from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import Mapping, NamedTuple

from .exceptions import ConfigError

AGENT = "LinxCLI/1.0"
# seconds, a large PUT can take a while to be answered
TIMEOUT = 180
STORE_DIR_ENV = "LINXCLI_DIR"
STORE_DIR_NAME = ".linxcli"
STORE_FILE_NAME = "delete_keys"

# All current linx API compliant sites share one backend, these are the
# ones that serve over SSL.
DOMAINS: dict[str, str] = {
    "linxli": "https://linx.li",
    "linxbin": "https://linxb.in",
}
DEFAULT_API_URL = next(iter(DOMAINS.values()))


class Mode(str, enum.Enum):
    UPLOAD = "upload"
    INFO = "info"
    DELETE = "delete"
    HELP = "help"


def resolve_mode(prog: str) -> Mode:
    """Default mode for the name this command was invoked with.

    Example::
        unlinx    -> Mode.DELETE
        linx-info -> Mode.INFO
        linx      -> Mode.UPLOAD
    """
    name = Path(prog).name
    if any(i in name for i in ("rm", "del", "un")):
        return Mode.DELETE
    if "info" in name:
        return Mode.INFO
    return Mode.UPLOAD


def resolve_domain(alias: str) -> str:
    try:
        return DOMAINS[alias]
    except KeyError:
        valid = "\n\t".join(f"{k}\t({v})" for k, v in DOMAINS.items())
        raise ConfigError(
            f'"{alias}" is not a valid domain. Valid domains are:\n\t{valid}'
        ) from None


def get_store_dir(environ: Mapping[str, str] | None = None) -> Path | None:
    """Directory holding the delete_keys file, None if it can't be resolved"""
    if environ is None:
        environ = os.environ
    if d := environ.get(STORE_DIR_ENV):
        return Path(d)
    if home := environ.get("HOME"):
        return Path(home) / STORE_DIR_NAME
    return None


class Config(NamedTuple):
    mode: Mode = Mode.UPLOAD
    api_url: str = DEFAULT_API_URL
    expires: int | None = None
    name: str | None = None
    randomize: bool = False
    barename_randomize: bool = False
    delete_key: str | None = None
    store_dir: Path | None = None

    def check_targets(self, files: list[str]) -> None:
        """Options that only make sense for a single file"""
        if self.name is not None and len(files) > 1:
            raise ConfigError(
                "Error: --name can only be used when uploading one file at a time!"
            )
        if self.delete_key is not None and len(files) > 1:
            raise ConfigError(
                "Error: --key can only be used to delete one file at a time!"
            )

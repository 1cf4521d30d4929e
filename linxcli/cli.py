"""
Command line interface: ``linx [options] [file ...]``

The mode (upload/info/delete) defaults from the name the command was invoked
with, so ``unlinx`` and ``linx-info`` (or any symlink with "rm", "del", "un"
or "info" in its name) behave as if ``--delete``/``--info`` were given.

The exit status is the number of files that failed, or -1 when the command
line itself is invalid.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable

from .client import LinxClient, UploadResult
from .config import (
    AGENT,
    DEFAULT_API_URL,
    DOMAINS,
    Config,
    Mode,
    get_store_dir,
    resolve_domain,
    resolve_mode,
)
from .exceptions import ConfigError, DataError, LinxError, ResponseError
from .keystore import DeleteKeyStore
from .utils import logger, read_file, read_stream

FATAL = -1
# 255 is what FATAL looks like to the shell
MAX_STATUS = 254
LOG_LEVEL_ENV = "LINXCLI_LOG_LEVEL"

U, E = "\x1b[4m", "\x1b[0m"
HELP = f"""\
Usage: {{prog}} [{U}options{E}] [{U}file{E} {U}...{E}]

Options summary:
  --upload
	Uploads all {U}file{E}s. This is usually the default mode,
	depending on the name used to invoke this command. See the notes
	below for more info.
  --info
	Gets info on all {U}file{E}s.
  --delete
	Deletes all {U}file{E}s. The delete keys must be in your
	${{{{LINXCLI_DIR}}}}/delete_keys. By default, ${{{{LINXCLI_DIR}}}} is
	${{{{HOME}}}}/.linxcli/. Delete keys are stored in the delete_keys file
	automatically when uploaded with this utility, as long as the
	directory exists. This directory is not created automatically.
  --key {U}delete_key{E}
	In the event that the delete key is not in the delete_keys file,
	but you know it anyway, you can specify it with this option.
	However, you may only delete one file at a time with this method.
  --expires {U}time{E}
	Specifies the time (in seconds from now) that the file(s) to
	upload will expire (become unavailable for downloading).
  --name {U}new_filename{E}
	This option may be used to rename files that you are uploading.
	This option may only be used when uploading one file. This is
	especially useful when taking input from stdin instead of a file.
  --randomize
	Randomizes the filename of the file(s) being uploaded.
  --barename-randomize
	Randomizes the filename of the file(s) being uploaded, keeping
	the file extension intact.
  --to {U}domain{E}
	Specifies the site to upload to. This is a shortcut for --api-url.
	The only supported shortcuts at this time are:
		{U}domain{E}\t{U}api-url{E}
		{{domains}}
  --api-url {U}url{E}
	Specifies the exact upload URL. See --to for examples.
  --version
	Prints the version and exits.
  --help
	Prints this help page and exits.

Where options are mutually exclusive, the last one prevails. Options given
which have no effect on the current mode (upload/info/delete) are silently
ignored.

All of the above options may also be specified with their short version,
a single dash, followed by the first letter of the long name, for example
--delete can also be specified as -d.

If this command is invoked with "rm", "del", or "un" in its name (e.g. via
a symlink) then the default mode will act as if --delete were specified. If
"info" is in its name, then it will act as if --info were specified.
"""


def format_help(prog: str) -> str:
    domains = "\n\t\t".join(f"{k}\t{v}" for k, v in DOMAINS.items())
    return HELP.format(prog=prog, domains=domains)


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type:ignore[override]
        self.exit(FATAL, f"{self.prog}: {message}\nSee --help for proper usage.\n")


class DomainAction(argparse.Action):
    """--to alias: store the api url the alias stands for"""

    def __call__(self, parser, namespace, values, option_string=None) -> None:
        setattr(namespace, self.dest, resolve_domain(values))


def build_parser(prog: str, default_mode: Mode) -> ArgumentParser:
    parser = ArgumentParser(prog=prog, add_help=False)
    parser.set_defaults(mode=default_mode, api_url=DEFAULT_API_URL)
    for mode in (Mode.UPLOAD, Mode.INFO, Mode.DELETE, Mode.HELP):
        parser.add_argument(
            f"-{mode.value[0]}",
            f"--{mode.value}",
            dest="mode",
            action="store_const",
            const=mode,
        )
    parser.add_argument("-k", "--key", dest="delete_key")
    parser.add_argument("-e", "--expires", type=int)
    parser.add_argument("-n", "--name")
    parser.add_argument("-r", "--randomize", action="store_true")
    parser.add_argument("-b", "--barename-randomize", action="store_true")
    parser.add_argument("-t", "--to", dest="api_url", action=DomainAction)
    parser.add_argument("-a", "--api-url", dest="api_url")
    parser.add_argument("-v", "--version", action="version", version=AGENT)
    parser.add_argument("files", nargs="*")
    return parser


def parse_config(argv: list[str] | None, prog: str) -> tuple[Config, list[str]]:
    """Build the configuration once; nothing reads sys.argv or os.environ
    after this point."""
    args = build_parser(prog, resolve_mode(prog)).parse_intermixed_args(argv)
    config = Config(
        mode=args.mode,
        api_url=args.api_url,
        expires=args.expires,
        name=args.name,
        randomize=args.randomize,
        barename_randomize=args.barename_randomize,
        delete_key=args.delete_key,
        store_dir=get_store_dir(),
    )
    return config, args.files


def report(e: Exception | str) -> None:
    print(e, file=sys.stderr)


def run_upload(client: LinxClient, config: Config, files: list[str]) -> int:
    failed = 0
    results: list[UploadResult] = []
    # A lone "" comes from old xargs(1) fed with blank lines, read stdin then
    if not files or files == [""]:
        sources: list[tuple[str | None, str | None]] = [(None, config.name)]
    else:
        sources = [(f, config.name or os.path.basename(f)) for f in files]
    for path, filename in sources:
        try:
            if path is None:
                content = read_stream(getattr(sys.stdin, "buffer", sys.stdin))
            else:
                content = read_file(path)
            ret = client.upload(
                content,
                filename,
                expires=config.expires,
                randomize=config.randomize,
                barename_randomize=config.barename_randomize,
            )
        except LinxError as e:
            report(e)
            failed += 1
            continue
        print(ret.url)
        results.append(ret)
    DeleteKeyStore(config.store_dir).save([r.record for r in results])
    return failed


def run_info(client: LinxClient, config: Config, files: list[str]) -> int:
    failed = 0
    for filename in files:
        try:
            data = client.info(filename)
        except ResponseError as e:
            report(f"{filename}: {e}\n")
            failed += 1
            continue
        except LinxError as e:
            # these messages already name the file
            report(e)
            failed += 1
            continue
        print(filename)
        for k, v in data.items():
            print(f"\t{k}: {v}")
        print()
    return failed


def run_delete(client: LinxClient, config: Config, files: list[str]) -> int:
    targets: list[tuple[str, str | None]]
    if config.delete_key is not None:
        targets = [(files[0], config.delete_key)]
    else:
        store = DeleteKeyStore(config.store_dir)
        try:
            records = store.read_records()
        except DataError as e:
            report(e)
            return len(files)
        targets = [(f, store.lookup(f, records)) for f in files]
    failed = 0
    for filename, key in targets:
        if key is None:
            report(f'No delete_key found for file "{filename}"')
            failed += 1
            continue
        try:
            client.delete(filename, key)
        except LinxError as e:
            report(f"{filename}: {e}")
            failed += 1
        else:
            logger.debug(f"Deleted {filename}")
    return failed


RUNNERS: dict[Mode, Callable[[LinxClient, Config, list[str]], int]] = {
    Mode.UPLOAD: run_upload,
    Mode.INFO: run_info,
    Mode.DELETE: run_delete,
}


def setup_logging() -> None:
    if not (level := os.environ.get(LOG_LEVEL_ENV)):
        return
    if isinstance(lvl := logging.getLevelName(level.upper()), int):
        logging.basicConfig(
            level=lvl, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )


def main(argv: list[str] | None = None, prog: str | None = None) -> int:
    prog = prog or os.path.basename(sys.argv[0]) or "linx"
    setup_logging()
    try:
        config, files = parse_config(argv, prog)
        if config.mode is Mode.HELP:
            print(format_help(prog), end="")
            return 0
        if config.mode is not Mode.UPLOAD and not files:
            raise ConfigError("No files specified! See --help for usage.")
        config.check_targets(files)
    except ConfigError as e:
        report(e)
        return FATAL
    logger.debug(f"{config.mode.value} {files} via {config.api_url}")
    with LinxClient(config.api_url) as client:
        failed = RUNNERS[config.mode](client, config, files)
    return min(failed, MAX_STATUS)

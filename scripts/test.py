#!/usr/bin/env python
"""
Run the test suite under coverage and print the report.

Usage::
    ./scripts/test.py [pytest args]
"""

import os
import shlex
import subprocess
import sys
from pathlib import Path

TOOL = ("poetry", "pdm", "")[0]
work_dir = Path(__file__).parent.resolve().parent
if Path.cwd() != work_dir:
    os.chdir(str(work_dir))

CMD = "coverage run -m pytest tests"
REPORT = "coverage report -m"


def run_command(cmd: str, tool=TOOL) -> None:
    prefix = tool + " run "
    if tool and not cmd.startswith(prefix):
        cmd = prefix + cmd
    print("-->", cmd, flush=True)
    r = subprocess.run(shlex.split(cmd))  # nosec
    r.returncode and sys.exit(r.returncode)


run_command(" ".join([CMD, *map(shlex.quote, sys.argv[1:])]))
run_command(REPORT)

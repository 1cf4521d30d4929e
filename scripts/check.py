#!/usr/bin/env python
"""
Check style with ruff, then type hints with mypy.
Only checks, to fix style issues run ./scripts/format.py

Usage::
    ./scripts/check.py
"""

import os
import sys

CMDS = ("ruff check linxcli tests", "ruff format --check linxcli tests", "mypy linxcli")
TOOL = ("poetry", "pdm", "")[0]
parent = os.path.abspath(os.path.dirname(__file__))
work_dir = os.path.dirname(parent)
if os.getcwd() != work_dir:
    os.chdir(work_dir)

for cmd in CMDS:
    cmd = "{} run {}".format(TOOL, cmd) if TOOL else cmd
    print("-->", cmd)
    if os.system(cmd) != 0:
        print("\033[1m Please run './scripts/format.py' to auto-fix style issues \033[0m")
        sys.exit(1)
print("Done.")

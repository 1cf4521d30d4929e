#!/usr/bin/env python
"""
Format code with ruff and sort imports

Usage:
    ./scripts/format.py
"""

import os
import sys

CMDS = ("ruff check --fix --select I linxcli tests", "ruff format linxcli tests")
TOOL = ("poetry", "pdm", "uv", "")[0]

parent = os.path.abspath(os.path.dirname(__file__))
work_dir = os.path.dirname(parent)
if os.getcwd() != work_dir:
    os.chdir(work_dir)  # where pyproject.toml is

for cmd in CMDS:
    # with tool prefix, so it works without an activated virtualenv
    cmd = (TOOL and f"{TOOL} run ") + cmd
    if os.system(cmd) != 0:
        sys.exit(1)

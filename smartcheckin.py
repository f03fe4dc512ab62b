#!/usr/bin/env python
"""
Thin wrapper script to invoke the vc_change_engine CLI.

Running ``python smartcheckin.py`` is equivalent to running the
``smartcheckin`` console script installed via ``pyproject.toml``.
"""

from vc_change_engine.cli import main


if __name__ == "__main__":
    main(prog_name="smartcheckin")

"""Centralized exit-code contract for the CLI.

Code  Meaning
----  -------
  0   Success — scan completed and the fail-on policy (if any) passed
  1   Failure — fail-on policy triggered, no package.json, or fatal scan error
  2   Usage — rejected arguments or configuration (e.g. unknown severity)
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    FAILURE = 1
    USAGE = 2

"""Thin ``subprocess.run`` wrapper shared by every collaborator that shells out."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class CommandError(RuntimeError):
    """The command could not be started or did not finish in time."""


@dataclass(frozen=True, slots=True)
class CommandOutput:
    returncode: int
    stdout: str
    stderr: str = ""


# Signature shared by ``run_command`` and the fakes used in tests.
CommandRunner = Callable[..., CommandOutput]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> CommandOutput:
    """Run *args* and capture text output.

    A non-zero exit status is not an error here: linters and audit tools
    exit non-zero when they find something, so callers inspect
    ``returncode`` themselves.

    Raises:
        CommandError: the binary is missing or *timeout* expired.
    """
    _logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    try:
        proc = subprocess.run(
            list(args),
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CommandError(f"command not found: {args[0]}") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandError(f"command timed out after {timeout}s: {args[0]}") from exc
    except OSError as exc:
        raise CommandError(f"failed to run {args[0]}: {exc}") from exc
    return CommandOutput(
        returncode=proc.returncode,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )

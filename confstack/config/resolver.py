"""
Config file resolution.

A same-named file in the working directory overrides the installed config
file, provided it exists and is not empty.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from .errors import ConfigFileUnavailableError
from .types import OverrideReason, ResolvedConfigFile

logger = logging.getLogger(__name__)


def _is_interactive() -> bool:
    """Detect a console session as opposed to a service or web request."""
    if os.environ.get("REMOTE_ADDR"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


def _warn_override(local_name: str, interactive: bool) -> None:
    message = f"Warning, overriding installed {local_name} file with local copy"
    if interactive:
        print(message, file=sys.stderr)
    else:
        logger.error(message)


def resolve_config_file(
    canonical_path: str | os.PathLike[str],
    cwd: str | os.PathLike[str] | None = None,
    interactive: bool | None = None,
) -> ResolvedConfigFile:
    """
    Choose which configuration file to read.

    Args:
        canonical_path: Installed config file location
        cwd: Directory searched for the override file (defaults to the process cwd)
        interactive: Send the override warning to the console instead of the log.
            Detected from the environment when None.

    Returns:
        The chosen path and the reason it was chosen

    Raises:
        ValueError: If canonical_path is empty
    """
    canonical = os.fspath(canonical_path)
    if not canonical:
        raise ValueError("canonical_path must not be empty")

    local_name = Path(canonical).name
    base = Path(cwd) if cwd is not None else Path.cwd()
    local_path = base / local_name

    try:
        use_local = local_path.is_file() and local_path.stat().st_size > 0
    except OSError:
        use_local = False

    if use_local:
        if interactive is None:
            interactive = _is_interactive()
        _warn_override(local_name, interactive)
        chosen = str(local_path) if cwd is not None else local_name
        return ResolvedConfigFile(path=chosen, canonical_path=canonical, reason=OverrideReason.OVERRIDE_APPLIED)

    return ResolvedConfigFile(path=canonical, canonical_path=canonical, reason=OverrideReason.CANONICAL_USED)


@contextmanager
def open_config_file(resolved: ResolvedConfigFile) -> Iterator[tuple[str, TextIO]]:
    """
    Open the resolved config file, falling back to the canonical path.

    Yields:
        (path actually opened, text handle); the handle is closed on exit

    Raises:
        ConfigFileUnavailableError: If no candidate path can be opened
    """
    attempted: list[str] = []
    last_error: OSError | None = None
    handle: TextIO | None = None
    opened = ""

    for path in resolved.candidates():
        attempted.append(path)
        try:
            handle = open(path, encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Cannot open config file {path}: {e}")
            last_error = e
            continue
        opened = path
        break

    if handle is None:
        raise ConfigFileUnavailableError(
            attempted, str(last_error) if last_error else None
        ) from last_error

    with handle:
        yield opened, handle

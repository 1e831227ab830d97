from __future__ import annotations

import logging
import subprocess
from typing import Mapping

from gmwrap.types import CompletedCommand

LOGGER = logging.getLogger("gmwrap.executor")


def run_command(command: str, env: Mapping[str, str] | None = None) -> CompletedCommand:
    """Run ``command`` through the shell and return its combined output."""
    LOGGER.debug("Running command", extra={"structured_data": {"command": command}})
    completed = subprocess.run(
        command,
        shell=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        env=dict(env) if env is not None else None,
        check=False,
    )
    if completed.returncode != 0:
        LOGGER.warning(
            "Command exited with non-zero status",
            extra={"structured_data": {"command": command, "returncode": completed.returncode}},
        )
    return {
        "command": command,
        "returncode": completed.returncode,
        "output": completed.stdout or "",
    }

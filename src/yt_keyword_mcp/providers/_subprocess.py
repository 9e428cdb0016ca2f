"""Run external command-line tools without blocking the event loop."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass
from typing import Sequence

from yt_keyword_mcp.exceptions import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def output_tail(self) -> str:
        text = (self.stderr or self.stdout).decode(errors="ignore").strip()
        return text[-2000:]


async def run_subprocess(args: Sequence[str], *, timeout_s: float | None = None) -> RunResult:
    """Run ``args`` on a worker thread and capture its output.

    A missing binary is reported as ProviderError; a non-zero exit status is
    returned to the caller, which decides whether it is fatal.
    """

    def _run() -> subprocess.CompletedProcess[bytes]:
        return subprocess.run(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
            timeout=timeout_s,
        )

    try:
        cp = await asyncio.to_thread(_run)
    except FileNotFoundError as exc:
        raise ProviderError(args[0], "binary not found; install it or set its path") from exc
    except subprocess.TimeoutExpired as exc:
        raise ProviderError(args[0], f"timed out after {timeout_s}s") from exc

    result = RunResult(
        returncode=int(cp.returncode),
        stdout=cp.stdout or b"",
        stderr=cp.stderr or b"",
    )
    logger.debug("%s exited with %s", args[0], result.returncode)
    return result

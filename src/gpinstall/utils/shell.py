# src/gpinstall/utils/shell.py

from __future__ import annotations

import logging
import subprocess
import threading
import time
from typing import Sequence

from gpinstall.errors import StepFailure

from .execution import ExecutionContext

log = logging.getLogger("gpinstall")


def run_logged(
    cmd: Sequence[str],
    *,
    label: str,
    ctx: ExecutionContext = ExecutionContext(),
    timeout: int = 1800,
) -> None:
    """
    Execute a local command, streaming its output into the run log.

    - stdout and stderr are merged and logged line by line
    - raises StepFailure on non-zero exit or timeout
    """
    log.info(f"[{label}] $ {' '.join(cmd)}")
    if ctx.dry_run:
        log.info(f"[{label}] dry-run, not executed")
        return

    start = time.time()
    try:
        proc = subprocess.Popen(
            list(cmd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        raise StepFailure(f"[{label}] cannot execute {cmd[0]}: {e}") from e

    assert proc.stdout

    def _pump(stream) -> None:
        for line in stream:
            log.debug(f"[{label}] {line.rstrip()}")

    # output is drained on a side thread so the deadline below holds
    reader = threading.Thread(target=_pump, args=(proc.stdout,), daemon=True)
    reader.start()

    try:
        rc = proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired as e:
        proc.kill()
        proc.wait()
        reader.join(timeout=5)
        raise StepFailure(f"[{label}] command timed out after {timeout}s") from e

    reader.join(timeout=5)

    elapsed = round(time.time() - start, 2)

    if rc != 0:
        raise StepFailure(f"[{label}] failed (rc={rc}) after {elapsed}s")

    log.info(f"[{label}] completed successfully in {elapsed}s")

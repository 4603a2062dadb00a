"""
External process runner used by the synchronizer and the build dispatcher

Commands run as asyncio subprocesses so the event loop keeps serving
requests while git or a build tool works. An optional timeout kills the
process; cancelling the awaiting task kills it too.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from docserver.errors import CommandTimeoutError


logger = logging.getLogger(__name__)

# Lines of streamed output kept on the result for error reporting
OUTPUT_TAIL_LINES = 200

# Streamed output is read in chunks; longer lines are split at this size
READ_CHUNK_SIZE = 64 * 1024
MAX_LINE_BYTES = 16 * 1024


@dataclass(frozen=True)
class CommandResult:
    """Exit status and output of a finished command"""

    argv: list[str]
    returncode: int
    stdout: str
    stderr: str
    duration_seconds: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def combined_output(self) -> str:
        return (self.stdout + self.stderr).strip()


async def run_command(
    argv: list[str],
    cwd: Path,
    *,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
    on_line: Callable[[str], None] | None = None,
) -> CommandResult:
    """
    Run a command and wait for it to exit.

    Args:
        argv: Program and arguments
        cwd: Working directory
        timeout: Seconds before the process is killed (None waits forever)
        env: Full environment for the child, inherited when None
        on_line: If given, stdout and stderr are merged and each line is
            passed to this callback as it arrives

    Returns:
        CommandResult; a non-zero exit status is not an error here

    Raises:
        OSError: If the program or working directory cannot be used
        CommandTimeoutError: If the timeout expired
    """
    logger.debug(f"+ ({cwd}) {' '.join(argv)}")
    started = time.monotonic()

    proc = await asyncio.create_subprocess_exec(
        *argv,
        cwd=str(cwd),
        env=env,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT if on_line else asyncio.subprocess.PIPE,
    )

    try:
        if on_line is not None:
            stdout = await asyncio.wait_for(_stream_lines(proc, proc.stdout, on_line), timeout)
            stderr = ""
        else:
            out, err = await asyncio.wait_for(proc.communicate(), timeout)
            stdout = out.decode(errors="replace")
            stderr = err.decode(errors="replace")
    except asyncio.TimeoutError:
        await _kill(proc)
        logger.warning(f"Killed '{' '.join(argv)}' after {timeout:g}s")
        raise CommandTimeoutError(argv, timeout or 0.0)
    except BaseException:
        # Cancellation or a failing line callback must not leave the child running
        await _kill(proc)
        raise

    return CommandResult(
        argv=list(argv),
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout,
        stderr=stderr,
        duration_seconds=time.monotonic() - started,
    )


async def _stream_lines(
    proc: asyncio.subprocess.Process,
    stream: asyncio.StreamReader,
    on_line: Callable[[str], None],
) -> str:
    """
    Feed each output line to on_line, return the tail of the output.

    Output is read in fixed-size chunks so a line of any length is handled;
    lines longer than MAX_LINE_BYTES are passed on in pieces.
    """
    tail: deque[str] = deque(maxlen=OUTPUT_TAIL_LINES)

    def emit(raw: bytes) -> None:
        line = raw.decode(errors="replace").rstrip()
        tail.append(line)
        on_line(line)

    pending = b""
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for raw in lines:
            emit(raw)
        while len(pending) > MAX_LINE_BYTES:
            emit(pending[:MAX_LINE_BYTES])
            pending = pending[MAX_LINE_BYTES:]
    if pending:
        emit(pending)

    await proc.wait()
    return "\n".join(tail)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        # Exited between the check and the kill
        pass
    await proc.wait()

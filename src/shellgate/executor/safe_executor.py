"""Safe executor: runs a command as a literal argument vector."""

from __future__ import annotations

import asyncio
import logging
import os
import signal

import psutil

from shellgate.config.settings import MAX_OUTPUT_BYTES
from shellgate.exceptions import OutputLimitExceeded
from shellgate.models.execution import ExecutionFailure, ExecutionRequest, ExecutionResult

logger = logging.getLogger(__name__)

_READ_CHUNK = 64 * 1024
_REAP_TIMEOUT = 5.0


class SafeExecutor:
    """Runs commands without a shell, bounded in time and output size.

    The program is started with its arguments as discrete strings, so shell
    metacharacters inside arguments are passed through literally.
    """

    def __init__(self, max_output_bytes: int = MAX_OUTPUT_BYTES) -> None:
        self._max_output_bytes = max_output_bytes

    async def execute(self, request: ExecutionRequest) -> ExecutionResult:
        command = request.command
        cwd = request.working_dir

        if cwd is not None and not cwd.is_dir():
            return _failure(ExecutionFailure.NON_ZERO_EXIT, f"Working directory not found: {cwd}")

        logger.debug("Executing %r with args %r (timeout %ss)", command, request.args, request.timeout)

        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *request.args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                start_new_session=True,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError):
            return _failure(ExecutionFailure.NOT_FOUND, f"Command not found: {command}")
        except OSError as exc:
            logger.error("Failed to start %r: %s", command, exc)
            return _failure(ExecutionFailure.NON_ZERO_EXIT, str(exc))

        try:
            stdout, stderr = await asyncio.wait_for(self._collect(proc, command), timeout=request.timeout)
        except TimeoutError:
            await _terminate(proc)
            logger.warning("Command %r timed out after %ss", command, request.timeout)
            return ExecutionResult(
                success=False,
                error=f"Command timed out after {request.timeout:g}s",
                timed_out=True,
                failure=ExecutionFailure.TIMEOUT,
            )
        except OutputLimitExceeded as exc:
            await _terminate(proc)
            logger.warning("Command %r: %s", command, exc)
            return _failure(ExecutionFailure.BUFFER_OVERFLOW, str(exc))
        except BaseException:
            await _terminate(proc)
            raise

        out = stdout.decode("utf-8", errors="replace").strip()
        err = stderr.decode("utf-8", errors="replace").strip()
        returncode = proc.returncode

        if returncode != 0:
            logger.debug("Command %r exited with %s", command, returncode)
            return ExecutionResult(
                success=False,
                error=err or f"Exit code: {returncode}",
                exit_code=returncode,
                output=out or None,
                failure=ExecutionFailure.NON_ZERO_EXIT,
            )

        return ExecutionResult(success=True, output=out, exit_code=0)

    async def _collect(self, proc: asyncio.subprocess.Process, command: str) -> tuple[bytes, bytes]:
        readers = [
            asyncio.ensure_future(self._read_capped(proc.stdout, command)),
            asyncio.ensure_future(self._read_capped(proc.stderr, command)),
        ]
        try:
            stdout, stderr = await asyncio.gather(*readers)
        finally:
            for reader in readers:
                reader.cancel()
        await proc.wait()
        return stdout, stderr

    async def _read_capped(self, stream: asyncio.StreamReader | None, command: str) -> bytes:
        if stream is None:
            return b""
        buf = bytearray()
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                return bytes(buf)
            buf.extend(chunk)
            if len(buf) > self._max_output_bytes:
                raise OutputLimitExceeded(self._max_output_bytes, command=command)


def _failure(kind: ExecutionFailure, error: str) -> ExecutionResult:
    return ExecutionResult(success=False, error=error, failure=kind)


def _kill_descendants(pid: int) -> None:
    try:
        children = psutil.Process(pid).children(recursive=True)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return
    for child in children:
        try:
            child.kill()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue


def _kill_group(pid: int) -> None:
    if not hasattr(os, "killpg"):
        return
    try:
        os.killpg(pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        pass


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill the process, its group and its descendants, then reap it."""
    if proc.returncode is None:
        _kill_descendants(proc.pid)
        _kill_group(proc.pid)
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    try:
        await asyncio.wait_for(proc.wait(), timeout=_REAP_TIMEOUT)
    except TimeoutError:
        # A detached grandchild can keep the pipes open after the kill.
        logger.warning("Process %s did not release its pipes after being killed", proc.pid)

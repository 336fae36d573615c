#
# src/testdeck/testing/runner.py
#
"""
Runs one test as an external process and streams its output, line by line,
into the session's output channel.
"""

import itertools
import os
import subprocess
import threading
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import IO

import structlog

from testdeck.exceptions import ChannelClosedError
from testdeck.state import TestGroup
from testdeck.testing.channel import OutputChannel
from testdeck.testing.profiles import RunnerProfile
from testdeck.testing.protocols import RunHandle

log = structlog.get_logger("testing.runner")

PROBE_TIMEOUT_SECONDS = 10.0
# A grandchild that inherits a pipe keeps it open past the process exit.
READER_JOIN_TIMEOUT = 1.0


def probe_command(argv: Sequence[str], timeout: float = PROBE_TIMEOUT_SECONDS) -> bool:
    """True when ``argv`` runs and exits with status 0."""
    try:
        result = subprocess.run(
            list(argv),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log.debug("Capability probe failed", command=" ".join(argv), error=str(e))
        return False
    return result.returncode == 0


class ExecutionPipeline:
    """
    Spawns test processes and fans their stdout/stderr into one channel.

    Whether the profile's fast runner is usable is decided once, here, and
    never re-probed per run. Runs are independent: starting a new one never
    stops an older one, whose remaining output keeps arriving tagged with its
    own run id.
    """

    def __init__(
        self,
        profile: RunnerProfile,
        channel: OutputChannel,
        env: Mapping[str, str] | None = None,
        probe: bool = True,
    ) -> None:
        self.profile = profile
        self.channel = channel
        self._env = {**os.environ, **profile.env, **(env or {})}
        self._run_ids = itertools.count(1)
        self._log = log.bind(profile=profile.name)

        self.use_fast_runner = bool(probe and profile.has_fast_runner and probe_command(profile.fast_probe))
        self._log.info("Execution pipeline ready", fast_runner=self.use_fast_runner)

    def build_command(self, test_name: str) -> list[str]:
        return self.profile.command_for(test_name, fast=self.use_fast_runner)

    def run_test(self, group: TestGroup, test_name: str) -> RunHandle:
        """Run ``test_name`` from the directory containing its source file."""
        working_dir = group.source_path.parent
        return self.run(self.build_command(test_name), working_dir, label=test_name)

    def run(self, command: Sequence[str], working_dir: Path, label: str | None = None) -> RunHandle:
        """
        Start ``command`` in ``working_dir`` and return immediately.

        The "Running test" line is enqueued before this returns, so it always
        precedes the run's process output. Spawn errors are reported as one
        output line and never raised.
        """
        handle = RunHandle(run_id=next(self._run_ids), label=label or " ".join(command))
        run_log = self._log.bind(run_id=handle.run_id, test=handle.label)

        try:
            self.channel.send(f"Running test: {handle.label}\n", run_id=handle.run_id)
        except ChannelClosedError:
            run_log.debug("Channel closed before run start, not spawning")
            handle.mark_done()
            return handle

        thread = threading.Thread(
            target=self._supervise,
            args=(handle, list(command), working_dir),
            name=f"testdeck-run-{handle.run_id}",
            daemon=True,
        )
        thread.start()
        run_log.info("Test run started", command=" ".join(command), working_dir=str(working_dir), emoji_key="run")
        return handle

    def _supervise(self, handle: RunHandle, command: list[str], working_dir: Path) -> None:
        run_log = self._log.bind(run_id=handle.run_id, test=handle.label)
        try:
            process = subprocess.Popen(
                command,
                cwd=working_dir,
                env=self._env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            run_log.error("Failed to start test command", command_executable=command[0] if command else "", error=str(e))
            try:
                self.channel.send(f"Failed to start test command: {e}\n", run_id=handle.run_id)
            except ChannelClosedError:
                run_log.debug("Channel closed, dropping spawn failure line")
            handle.mark_done()
            return

        handle.process_id = process.pid
        readers = [
            threading.Thread(
                target=self._forward_lines,
                args=(stream, handle.run_id),
                name=f"testdeck-run-{handle.run_id}-{name}",
                daemon=True,
            )
            for name, stream in (("stdout", process.stdout), ("stderr", process.stderr))
        ]
        for reader in readers:
            reader.start()

        exit_code = process.wait()
        for reader in readers:
            reader.join(timeout=READER_JOIN_TIMEOUT)
        lingering = [reader.name for reader in readers if reader.is_alive()]
        if lingering:
            run_log.warning("Output pipes still open after exit", readers=lingering)

        run_log.info("Test command finished", exit_code=exit_code, pid=process.pid)
        try:
            self.channel.send(f"Test finished with status: {exit_code}\n", run_id=handle.run_id)
        except ChannelClosedError:
            run_log.debug("Channel closed, dropping exit status line")
        handle.mark_done(exit_code)

    def _forward_lines(self, stream: IO[bytes], run_id: int) -> None:
        """Reader thread body: one per captured stream, FIFO within the stream."""
        with stream:
            for raw in iter(stream.readline, b""):
                text = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                try:
                    self.channel.send(text + "\n", run_id=run_id)
                except ChannelClosedError:
                    # Consumer is gone; stop reading and let the pipe close.
                    return


# 🔼⚙️

"""Open a directory in the first working editor or terminal candidate."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from launcher_core.capability_resolver import CapabilityResolver
from launcher_core.models import (
    HostPlatform,
    Invocation,
    LaunchErrorKind,
    LaunchResult,
    ToolCapability,
    ToolConfiguration,
)
from launcher_core.terminal_commands import CommandSpec, terminal_invocation


logger = logging.getLogger(__name__)

ConfigProvider = Callable[[], ToolConfiguration]
PopenFactory = Callable[..., Any]

DEFAULT_GRACE_PERIOD = 0.5
DEFAULT_POLL_INTERVAL = 0.05


class LaunchOrchestrator:
    """Try candidates strictly in order and keep the first one that starts.

    Each attempt spawns a detached process with its standard streams
    discarded, then watches it for `grace_period` seconds. An exec error or
    a non-zero exit inside that window fails the candidate; otherwise the
    tool is considered started and left running.
    """

    def __init__(
        self,
        resolver: CapabilityResolver,
        config_provider: Optional[ConfigProvider] = None,
        grace_period: float = DEFAULT_GRACE_PERIOD,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        popen: Optional[PopenFactory] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._resolver = resolver
        self._config_provider = config_provider
        self._grace_period = max(0.0, grace_period)
        self._poll_interval = max(0.001, poll_interval)
        self._popen = popen or subprocess.Popen
        self._clock = clock
        self._sleep = sleep

    @property
    def host(self) -> HostPlatform:
        return self._resolver.profile.host

    def launch(
        self,
        capability: ToolCapability,
        directory: str,
        config: Optional[ToolConfiguration] = None,
    ) -> LaunchResult:
        logger.info("Launching %s for directory: %s", capability.value, directory)
        target = Path(os.path.expanduser(str(directory)))
        if not target.is_dir():
            error = f"Directory does not exist: {directory}"
            logger.error(error)
            return LaunchResult(False, error=error, error_kind=LaunchErrorKind.DIRECTORY_NOT_FOUND)

        snapshot = self._snapshot(config)
        candidates = self.candidates_for(capability, snapshot)
        attempted: List[str] = []
        for candidate in candidates:
            attempted.append(candidate)
            invocation = self.build_invocation(capability, candidate, str(target))
            ok, detail = self._attempt(invocation)
            if ok:
                logger.info("Launched %s: %s", capability.value, " ".join(invocation.argv()))
                return LaunchResult(True, chosen_command=candidate, attempted=attempted, args=list(invocation.args))
            logger.debug("Candidate %s failed: %s", candidate, detail)

        error = f"no working command among: {', '.join(candidates)}"
        logger.warning("Failed to launch %s: %s", capability.value, error)
        return LaunchResult(
            False,
            error=error,
            error_kind=LaunchErrorKind.NO_WORKING_COMMAND,
            attempted=attempted,
        )

    def candidates_for(self, capability: ToolCapability, config: ToolConfiguration) -> List[str]:
        if capability is ToolCapability.TERMINAL:
            return list(config.terminal_candidates) or self._resolver.supported_variants(capability)
        configured = config.editor_command(capability)
        if configured:
            return [configured]
        return self._resolver.supported_variants(capability)

    def command_spec(self, capability: ToolCapability) -> CommandSpec:
        return CommandSpec(capability, self.host, tuple(self._resolver.supported_variants(capability)))

    def build_invocation(self, capability: ToolCapability, candidate: str, directory: str) -> Invocation:
        if capability is ToolCapability.TERMINAL:
            return terminal_invocation(self.host, candidate, directory)
        return self.command_spec(capability).build(candidate, directory)

    def _snapshot(self, config: Optional[ToolConfiguration]) -> ToolConfiguration:
        if config is not None:
            return config.copy()
        if self._config_provider is not None:
            return self._config_provider().copy()
        return self._resolver.default_configuration()

    def _attempt(self, invocation: Invocation) -> Tuple[bool, str]:
        resolved = self._resolver.resolve(invocation.executable)
        if resolved is None:
            return False, f"command not found: {invocation.executable}"

        command, use_shell = self._command_line(invocation, resolved)
        try:
            process = self._popen(command, shell=use_shell, **self._detach_options())
        except (OSError, ValueError) as exc:
            return False, f"spawn error: {exc}"

        return self._await_start(process)

    def _command_line(self, invocation: Invocation, resolved: str) -> Tuple[Any, bool]:
        if not invocation.use_shell:
            return [resolved, *invocation.args], False
        # The shell resolves the name itself; keep the short form.
        argv = invocation.argv()
        if self.host is HostPlatform.WINDOWS:
            # Windows rules quote for cmd.exe themselves.
            return " ".join(argv), True
        return " ".join(shlex.quote(part) for part in argv), True

    def _detach_options(self) -> dict:
        options: dict = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
            "close_fds": True,
        }
        if self.host is HostPlatform.WINDOWS:
            options["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0) | getattr(
                subprocess, "CREATE_NEW_PROCESS_GROUP", 0
            )
        else:
            options["start_new_session"] = True
        return options

    def _await_start(self, process: Any) -> Tuple[bool, str]:
        deadline = self._clock() + self._grace_period
        while True:
            returncode = process.poll()
            if returncode is not None:
                if returncode == 0:
                    return True, "exited cleanly"
                return False, f"exited with code {returncode}"
            if self._clock() >= deadline:
                return True, "running"
            self._sleep(self._poll_interval)

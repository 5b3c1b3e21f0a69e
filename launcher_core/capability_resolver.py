from __future__ import annotations

import logging
import os
import shutil
from typing import Callable, List, Optional

from launcher_core.models import ToolCapability, ToolConfiguration
from launcher_core.platform_profile import PlatformProfile


logger = logging.getLogger(__name__)

WhichFn = Callable[[str], Optional[str]]


class CapabilityResolver:
    """Answer "is this tool installed" and "which tools fit this role".

    `which` defaults to `shutil.which`, which already handles PATH search,
    absolute paths, the execute bit and PATHEXT on Windows. Tests inject a
    fake to simulate installed tools.
    """

    def __init__(self, profile: PlatformProfile, which: Optional[WhichFn] = None) -> None:
        self._profile = profile
        self._which = which or shutil.which

    @property
    def profile(self) -> PlatformProfile:
        return self._profile

    def resolve(self, name: str) -> Optional[str]:
        if not name or not name.strip():
            return None
        try:
            return self._which(os.path.expanduser(name.strip()))
        except (OSError, ValueError, TypeError) as exc:
            logger.debug("Command lookup failed for %s: %s", name, exc)
            return None

    def command_exists(self, name: str) -> bool:
        return self.resolve(name) is not None

    def supported_variants(self, capability: ToolCapability) -> List[str]:
        if capability is ToolCapability.TERMINAL:
            return self._profile.supported_terminals
        return self._profile.supported_editor_variants(capability)

    def default_configuration(self) -> ToolConfiguration:
        return self._profile.default_tool_configuration()

    def availability_issues(self, config: ToolConfiguration) -> List[str]:
        """List configured tools that are not installed on this machine.

        Purely informational: a missing tool is not a configuration error,
        the launcher simply falls through to the next candidate.
        """
        issues: List[str] = []
        for capability in ToolCapability.editors():
            command = config.editor_command(capability)
            if command and not self.command_exists(command):
                issues.append(f"Editor command not found: {command} ({capability.value})")
        for terminal in config.terminal_candidates:
            executable = terminal.split(" ", 1)[0]
            if not self.command_exists(executable):
                issues.append(f"Terminal command not found: {terminal}")
        return issues

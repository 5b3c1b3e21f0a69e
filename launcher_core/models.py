"""Shared value types for the launch subsystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional


class HostPlatform(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    @property
    def display_name(self) -> str:
        return {"windows": "Windows", "macos": "macOS", "linux": "Linux"}[self.value]


class ToolCapability(str, Enum):
    """Launchable roles. Values double as the persisted settings keys."""

    PRIMARY_EDITOR = "cursor"
    SECONDARY_EDITOR = "vscode"
    IDE = "idea"
    TERMINAL = "terminal"

    @classmethod
    def editors(cls) -> List["ToolCapability"]:
        return [cls.PRIMARY_EDITOR, cls.SECONDARY_EDITOR, cls.IDE]

    @classmethod
    def parse(cls, value: Any) -> "ToolCapability":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown tool capability: {value!r}") from None


class ConfigErrorKind(str, Enum):
    UNSUPPORTED_PLATFORM = "UnsupportedPlatform"
    INVALID_CONFIGURATION = "InvalidConfiguration"


class LaunchErrorKind(str, Enum):
    DIRECTORY_NOT_FOUND = "DirectoryNotFound"
    NO_WORKING_COMMAND = "NoWorkingCommand"


class ConfigurationError(Exception):
    """Raised for configuration problems that cannot be repaired at runtime."""

    def __init__(self, kind: ConfigErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class Invocation(NamedTuple):
    executable: str
    args: List[str]
    use_shell: bool = False

    def argv(self) -> List[str]:
        return [self.executable, *self.args]


@dataclass
class ToolConfiguration:
    """User-editable tool choices.

    An empty editor command means "use the platform default candidates".
    Values are not checked here; invalid entries survive until the
    validator repairs them.
    """

    editor_commands: Dict[ToolCapability, str] = field(default_factory=dict)
    terminal_candidates: List[str] = field(default_factory=list)

    def editor_command(self, capability: ToolCapability) -> str:
        return self.editor_commands.get(capability, "") or ""

    def copy(self) -> "ToolConfiguration":
        return ToolConfiguration(dict(self.editor_commands), list(self.terminal_candidates))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {cap.value: self.editor_command(cap) for cap in ToolCapability.editors()}
        data[ToolCapability.TERMINAL.value] = list(self.terminal_candidates)
        return data

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "ToolConfiguration":
        raw = raw if isinstance(raw, dict) else {}
        editors: Dict[ToolCapability, str] = {}
        for cap in ToolCapability.editors():
            value = raw.get(cap.value)
            editors[cap] = value.strip() if isinstance(value, str) else ""
        terminals = raw.get(ToolCapability.TERMINAL.value)
        if isinstance(terminals, str):
            terminals = [terminals]
        if not isinstance(terminals, list):
            terminals = []
        return cls(editors, [str(t).strip() for t in terminals if isinstance(t, str) and t.strip()])


@dataclass
class LaunchResult:
    succeeded: bool
    chosen_command: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[LaunchErrorKind] = None
    attempted: List[str] = field(default_factory=list)
    args: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.succeeded,
            "command": self.chosen_command,
            "args": list(self.args),
            "error": self.error,
            "errorKind": self.error_kind.value if self.error_kind else None,
            "attempted": list(self.attempted),
        }


@dataclass
class ValidationReport:
    is_valid: bool
    issues: List[str] = field(default_factory=list)

    @property
    def error_kind(self) -> Optional[ConfigErrorKind]:
        return None if self.is_valid else ConfigErrorKind.INVALID_CONFIGURATION


@dataclass
class FixOutcome:
    fixed_config: ToolConfiguration
    was_fixed: bool
    issues: List[str] = field(default_factory=list)
    error_kind: Optional[ConfigErrorKind] = None

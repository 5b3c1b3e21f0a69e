"""Static per-OS table of supported editors and terminals."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from launcher_core.models import (
    ConfigErrorKind,
    ConfigurationError,
    HostPlatform,
    ToolCapability,
    ToolConfiguration,
)


_SYSTEM_NAMES = {
    "windows": HostPlatform.WINDOWS,
    "darwin": HostPlatform.MACOS,
    "linux": HostPlatform.LINUX,
}


@dataclass(frozen=True)
class _PlatformDefaults:
    editor_variants: Dict[ToolCapability, Tuple[str, ...]]
    default_editors: Dict[ToolCapability, str]
    supported_terminals: Tuple[str, ...]
    default_terminals: Tuple[str, ...]


_PLATFORM_TABLE: Dict[HostPlatform, _PlatformDefaults] = {
    HostPlatform.WINDOWS: _PlatformDefaults(
        editor_variants={
            ToolCapability.PRIMARY_EDITOR: ("cursor.exe", "cursor"),
            ToolCapability.SECONDARY_EDITOR: ("code.exe", "code"),
            ToolCapability.IDE: ("idea64.exe", "idea64", "idea.exe", "idea"),
        },
        default_editors={
            ToolCapability.PRIMARY_EDITOR: "cursor",
            ToolCapability.SECONDARY_EDITOR: "code",
            ToolCapability.IDE: "idea64",
        },
        supported_terminals=("wt", "cmd", "powershell", "pwsh", "git-bash"),
        default_terminals=("wt", "cmd", "powershell"),
    ),
    HostPlatform.MACOS: _PlatformDefaults(
        editor_variants={
            ToolCapability.PRIMARY_EDITOR: ("cursor", "/Applications/Cursor.app/Contents/MacOS/Cursor"),
            ToolCapability.SECONDARY_EDITOR: ("code", "/Applications/Visual Studio Code.app/Contents/MacOS/Electron"),
            ToolCapability.IDE: ("idea", "/Applications/IntelliJ IDEA.app/Contents/MacOS/idea"),
        },
        default_editors={
            ToolCapability.PRIMARY_EDITOR: "cursor",
            ToolCapability.SECONDARY_EDITOR: "code",
            ToolCapability.IDE: "idea",
        },
        supported_terminals=(
            "open -a Terminal",
            "open -a iTerm",
            "open -a Alacritty",
            "open -a Kitty",
            "open -a Warp",
        ),
        default_terminals=("open -a Terminal", "open -a iTerm", "open -a Alacritty", "open -a Kitty"),
    ),
    HostPlatform.LINUX: _PlatformDefaults(
        editor_variants={
            ToolCapability.PRIMARY_EDITOR: ("cursor",),
            ToolCapability.SECONDARY_EDITOR: ("code", "code-insiders"),
            ToolCapability.IDE: ("idea", "intellij-idea-ultimate", "intellij-idea-community"),
        },
        default_editors={
            ToolCapability.PRIMARY_EDITOR: "cursor",
            ToolCapability.SECONDARY_EDITOR: "code",
            ToolCapability.IDE: "idea",
        },
        supported_terminals=(
            "gnome-terminal",
            "konsole",
            "xfce4-terminal",
            "alacritty",
            "kitty",
            "terminator",
            "tilix",
            "xterm",
            "urxvt",
            "st",
        ),
        default_terminals=("gnome-terminal", "konsole", "xfce4-terminal", "alacritty", "kitty", "xterm"),
    ),
}


def current_platform(system: Optional[str] = None) -> HostPlatform:
    """Map `platform.system()` (or an explicit name) onto a HostPlatform."""
    name = (system if system is not None else platform.system()).strip().lower()
    try:
        return _SYSTEM_NAMES[name]
    except KeyError:
        raise ConfigurationError(
            ConfigErrorKind.UNSUPPORTED_PLATFORM, f"Unsupported platform: {name or 'unknown'}"
        ) from None


class PlatformProfile:
    """Read-only view of the supported tools for one host platform."""

    def __init__(self, host: HostPlatform) -> None:
        defaults = _PLATFORM_TABLE.get(host)
        if defaults is None:
            raise ConfigurationError(ConfigErrorKind.UNSUPPORTED_PLATFORM, f"Unsupported platform: {host!r}")
        self._host = host
        self._defaults = defaults

    @classmethod
    def current(cls) -> "PlatformProfile":
        return cls(current_platform())

    @property
    def host(self) -> HostPlatform:
        return self._host

    @property
    def supported_terminals(self) -> List[str]:
        return list(self._defaults.supported_terminals)

    def supported_editor_variants(self, capability: ToolCapability) -> List[str]:
        if capability is ToolCapability.TERMINAL:
            return self.supported_terminals
        return list(self._defaults.editor_variants.get(capability, ()))

    def default_editor_command(self, capability: ToolCapability) -> str:
        return self._defaults.default_editors.get(capability, "")

    def default_terminals(self) -> List[str]:
        return list(self._defaults.default_terminals)

    def default_tool_configuration(self) -> ToolConfiguration:
        return ToolConfiguration(
            editor_commands=dict(self._defaults.default_editors),
            terminal_candidates=self.default_terminals(),
        )

"""Per-program rules for opening a terminal (or editor) at a directory.

Every terminal spells "start in this directory" differently, so each known
program gets a small pure function `directory -> Invocation`. Programs
without such a flag get a shell wrapper that changes directory first.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from launcher_core.models import HostPlatform, Invocation, ToolCapability

TerminalRule = Callable[[str], Invocation]


def _flag_rule(executable: str, *flag: str) -> TerminalRule:
    def build(directory: str) -> Invocation:
        return Invocation(executable, [*flag, directory])

    return build


def _cd_wrapper_rule(executable: str) -> TerminalRule:
    def build(directory: str) -> Invocation:
        script = f'cd {shlex.quote(directory)} && exec "${{SHELL:-/bin/sh}}" -i'
        return Invocation(executable, ["-e", "sh", "-c", script])

    return build


def _cmd_quoted(directory: str) -> str:
    return f'"{directory}"'


def _windows_rule(executable: str, build_args: Callable[[str], List[str]]) -> TerminalRule:
    def build(directory: str) -> Invocation:
        return Invocation(executable, build_args(directory), use_shell=True)

    return build


def _ps_literal(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def _powershell_args(shell: str) -> Callable[[str], List[str]]:
    def build_args(directory: str) -> List[str]:
        # Nested single-quoted literals: one for the new shell, one for Start-Process.
        inner = "Set-Location " + _ps_literal(directory)
        script = f"Start-Process {shell} -ArgumentList '-NoExit', '-Command', {_ps_literal(inner)}"
        return ["-Command", _cmd_quoted(script)]

    return build_args


_LINUX_RULES: Dict[str, TerminalRule] = {
    "gnome-terminal": _flag_rule("gnome-terminal", "--working-directory"),
    "konsole": _flag_rule("konsole", "--workdir"),
    "xfce4-terminal": _flag_rule("xfce4-terminal", "--working-directory"),
    "alacritty": _flag_rule("alacritty", "--working-directory"),
    "kitty": _flag_rule("kitty", "--directory"),
    "terminator": _flag_rule("terminator", "--working-directory"),
    "tilix": _flag_rule("tilix", "--working-directory"),
    "urxvt": _flag_rule("urxvt", "-cd"),
    "xterm": _cd_wrapper_rule("xterm"),
    "st": _cd_wrapper_rule("st"),
}

_WINDOWS_RULES: Dict[str, TerminalRule] = {
    "wt": _windows_rule("wt", lambda d: ["-d", _cmd_quoted(d)]),
    "cmd": _windows_rule("cmd", lambda d: ["/c", "start", "cmd", "/k", "cd", "/d", _cmd_quoted(d)]),
    "powershell": _windows_rule("powershell", _powershell_args("powershell")),
    "pwsh": _windows_rule("pwsh", _powershell_args("pwsh")),
    "git-bash": _windows_rule("git-bash", lambda d: [_cmd_quoted(f"--cd={d}")]),
}

_TERMINAL_RULES: Dict[HostPlatform, Dict[str, TerminalRule]] = {
    HostPlatform.LINUX: _LINUX_RULES,
    HostPlatform.WINDOWS: _WINDOWS_RULES,
    HostPlatform.MACOS: {},
}


def _macos_open_app(terminal: str, directory: str) -> Invocation:
    app_name = terminal[len("open -a "):].strip()
    return Invocation("open", ["-a", app_name, directory])


def terminal_invocation(host: HostPlatform, terminal: str, directory: str) -> Invocation:
    """Build the command line that opens `terminal` at `directory` on `host`."""
    name = terminal.strip()
    rule = _TERMINAL_RULES.get(host, {}).get(name)
    if rule is not None:
        return rule(directory)
    if host is HostPlatform.MACOS and name.startswith("open -a "):
        return _macos_open_app(name, directory)
    if host is HostPlatform.WINDOWS:
        return Invocation(name, [_cmd_quoted(directory)], use_shell=True)
    if host is HostPlatform.LINUX:
        return Invocation(name, ["--working-directory", directory])
    return Invocation(name, [directory])


def known_terminals(host: HostPlatform) -> List[str]:
    return sorted(_TERMINAL_RULES.get(host, {}))


@dataclass(frozen=True)
class CommandSpec:
    """How to invoke one non-terminal capability on one platform."""

    capability: ToolCapability
    platform: HostPlatform
    candidate_names: Tuple[str, ...]

    def build(self, candidate: str, directory: str) -> Invocation:
        return Invocation(candidate, [directory])

import subprocess
import tempfile
from pathlib import Path

from launcher_core.capability_resolver import CapabilityResolver
from launcher_core.launch_orchestrator import LaunchOrchestrator
from launcher_core.models import HostPlatform, LaunchErrorKind, ToolCapability, ToolConfiguration
from launcher_core.platform_profile import PlatformProfile


class FakeProcess:
    """Replays a sequence of poll() results; the last one repeats."""

    def __init__(self, polls=(None,)):
        self._polls = list(polls)

    def poll(self):
        if len(self._polls) > 1:
            return self._polls.pop(0)
        return self._polls[0]


class RecordingPopen:
    def __init__(self, behaviours=None):
        self.calls = []
        self._behaviours = behaviours or {}

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        executable = command[0] if isinstance(command, list) else command.split()[0]
        behaviour = self._behaviours.get(executable)
        if isinstance(behaviour, Exception):
            raise behaviour
        return FakeProcess(behaviour or (None,))

    def executables(self):
        return [c[0] if isinstance(c, list) else c.split()[0] for c, _ in self.calls]


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


def _setup(installed, behaviours=None, host=HostPlatform.LINUX, grace_period=0.0, **kwargs):
    lookups = []

    def fake_which(name):
        lookups.append(name)
        return f"/usr/bin/{name}" if name in installed else None

    resolver = CapabilityResolver(PlatformProfile(host), which=fake_which)
    popen = RecordingPopen(behaviours)
    orchestrator = LaunchOrchestrator(resolver, grace_period=grace_period, popen=popen, **kwargs)
    return orchestrator, popen, lookups


def test_first_existing_candidate_wins_and_later_ones_are_untouched():
    orchestrator, popen, lookups = _setup({"b", "c"})
    config = ToolConfiguration(terminal_candidates=["a", "b", "c"])
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td, config)
    assert result.succeeded is True
    assert result.chosen_command == "b"
    assert result.attempted == ["a", "b"]
    assert popen.executables() == ["/usr/bin/b"]
    assert "c" not in lookups


def test_editor_falls_back_to_platform_variants_in_order():
    orchestrator, popen, _ = _setup({"intellij-idea-ultimate", "intellij-idea-community"})
    config = ToolConfiguration(editor_commands={ToolCapability.IDE: ""})
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.IDE, td, config)
        assert popen.calls[0][0] == ["/usr/bin/intellij-idea-ultimate", td]
    assert result.chosen_command == "intellij-idea-ultimate"
    assert len(popen.calls) == 1


def test_configured_editor_is_the_only_candidate():
    orchestrator, popen, lookups = _setup({"code", "code-insiders"})
    config = ToolConfiguration(editor_commands={ToolCapability.SECONDARY_EDITOR: "code-insiders"})
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.SECONDARY_EDITOR, td, config)
    assert result.chosen_command == "code-insiders"
    assert lookups == ["code-insiders"]


def test_no_candidate_exists_reports_every_name():
    orchestrator, popen, _ = _setup(set())
    config = ToolConfiguration(terminal_candidates=["konsole", "kitty", "xterm"])
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td, config)
    assert result.succeeded is False
    assert result.error_kind is LaunchErrorKind.NO_WORKING_COMMAND
    assert result.error == "no working command among: konsole, kitty, xterm"
    assert popen.calls == []


def test_missing_directory_short_circuits_before_any_probe():
    for capability in ToolCapability:
        orchestrator, popen, lookups = _setup({"code", "konsole", "cursor", "idea"})
        with tempfile.TemporaryDirectory() as td:
            missing = str(Path(td) / "gone")
            result = orchestrator.launch(capability, missing, ToolConfiguration(terminal_candidates=["konsole"]))
        assert result.succeeded is False
        assert result.error_kind is LaunchErrorKind.DIRECTORY_NOT_FOUND
        assert missing in result.error
        assert lookups == []
        assert popen.calls == []


def test_file_path_is_not_a_directory():
    orchestrator, popen, _ = _setup({"code"})
    with tempfile.TemporaryDirectory() as td:
        file_path = Path(td) / "README.md"
        file_path.write_text("hello", encoding="utf-8")
        result = orchestrator.launch(ToolCapability.SECONDARY_EDITOR, str(file_path), ToolConfiguration())
    assert result.error_kind is LaunchErrorKind.DIRECTORY_NOT_FOUND
    assert popen.calls == []


def test_spawn_error_moves_on_to_next_candidate():
    orchestrator, popen, _ = _setup(
        {"konsole", "kitty"},
        behaviours={"/usr/bin/konsole": PermissionError("denied")},
    )
    config = ToolConfiguration(terminal_candidates=["konsole", "kitty"])
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td, config)
    assert result.chosen_command == "kitty"
    assert result.args == ["--directory", str(Path(td))]
    assert popen.executables() == ["/usr/bin/konsole", "/usr/bin/kitty"]


def test_early_nonzero_exit_inside_grace_window_fails_candidate():
    clock = FakeClock()
    orchestrator, popen, _ = _setup(
        {"gnome-terminal", "xterm"},
        behaviours={"/usr/bin/gnome-terminal": (None, None, 1)},
        grace_period=0.5,
        clock=clock,
        sleep=clock.sleep,
    )
    config = ToolConfiguration(terminal_candidates=["gnome-terminal", "xterm"])
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td, config)
    assert result.chosen_command == "xterm"
    assert clock.now <= 0.5 * 2 + 0.05


def test_clean_exit_counts_as_started():
    orchestrator, popen, _ = _setup({"code"}, behaviours={"/usr/bin/code": (0,)}, grace_period=5.0)
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.SECONDARY_EDITOR, td, ToolConfiguration())
    assert result.succeeded is True
    assert result.chosen_command == "code"


def test_still_running_after_grace_window_is_success():
    clock = FakeClock()
    orchestrator, popen, _ = _setup({"cursor"}, grace_period=0.5, clock=clock, sleep=clock.sleep)
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.PRIMARY_EDITOR, td, ToolConfiguration())
    assert result.succeeded is True
    assert 0.5 <= clock.now < 0.6


def test_posix_spawn_is_detached_with_streams_discarded():
    orchestrator, popen, _ = _setup({"code"})
    with tempfile.TemporaryDirectory() as td:
        orchestrator.launch(ToolCapability.SECONDARY_EDITOR, td, ToolConfiguration())
    _, kwargs = popen.calls[0]
    assert kwargs["shell"] is False
    assert kwargs["start_new_session"] is True
    assert kwargs["stdin"] is subprocess.DEVNULL
    assert kwargs["stdout"] is subprocess.DEVNULL
    assert kwargs["stderr"] is subprocess.DEVNULL


def test_windows_terminal_goes_through_command_interpreter():
    orchestrator, popen, _ = _setup({"wt"}, host=HostPlatform.WINDOWS)
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td, ToolConfiguration(terminal_candidates=["wt"]))
    assert result.succeeded is True
    command, kwargs = popen.calls[0]
    assert command == f'wt -d "{td}"'
    assert kwargs["shell"] is True
    assert "creationflags" in kwargs
    assert "start_new_session" not in kwargs


def _windows_command_line(terminal, directory):
    orchestrator, popen, _ = _setup({terminal}, host=HostPlatform.WINDOWS)
    result = orchestrator.launch(ToolCapability.TERMINAL, directory, ToolConfiguration(terminal_candidates=[terminal]))
    assert result.succeeded is True
    return popen.calls[0][0]


def test_windows_command_lines_quote_directory_for_cmd_exe():
    with tempfile.TemporaryDirectory() as td:
        target = Path(td) / "my project"
        target.mkdir()
        d = str(target)
        assert _windows_command_line("cmd", d) == f'cmd /c start cmd /k cd /d "{d}"'
        assert _windows_command_line("git-bash", d) == f'git-bash "--cd={d}"'
        assert _windows_command_line("powershell", d) == (
            "powershell -Command \"Start-Process powershell -ArgumentList "
            f"'-NoExit', '-Command', 'Set-Location ''{d}'''\""
        )
        assert _windows_command_line("pwsh", d) == (
            "pwsh -Command \"Start-Process pwsh -ArgumentList "
            f"'-NoExit', '-Command', 'Set-Location ''{d}'''\""
        )
        for terminal in ("wt", "cmd", "powershell", "pwsh", "git-bash"):
            assert '\\"' not in _windows_command_line(terminal, d), terminal


def test_empty_terminal_list_uses_platform_terminals():
    orchestrator, popen, _ = _setup({"xfce4-terminal"})
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td, ToolConfiguration(terminal_candidates=[]))
    assert result.chosen_command == "xfce4-terminal"
    assert result.attempted == ["gnome-terminal", "konsole", "xfce4-terminal"]


def test_config_provider_supplies_snapshot_when_none_given():
    calls = []

    def provider():
        calls.append(1)
        return ToolConfiguration(terminal_candidates=["kitty"])

    orchestrator, popen, _ = _setup({"kitty"}, config_provider=provider)
    with tempfile.TemporaryDirectory() as td:
        result = orchestrator.launch(ToolCapability.TERMINAL, td)
    assert calls == [1]
    assert result.chosen_command == "kitty"

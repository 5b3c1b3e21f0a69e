"""PyWebView-based RepoLauncher application."""

from __future__ import annotations

import atexit
import logging
import platform
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import webview

from launcher_core.capability_resolver import CapabilityResolver
from launcher_core.config_store import ConfigStore, default_base_dir
from launcher_core.config_validator import ConfigValidator
from launcher_core.launch_orchestrator import LaunchOrchestrator
from launcher_core.launch_service import LaunchService
from launcher_core.log_setup import configure_logging, debug_enabled
from launcher_core.models import HostPlatform, ToolCapability, ToolConfiguration
from launcher_core.platform_profile import PlatformProfile


logger = logging.getLogger("repolauncher")


_GUI_PREFERENCES: Dict[HostPlatform, List[Optional[str]]] = {
    HostPlatform.WINDOWS: ["edgechromium", "winforms", None],
    HostPlatform.MACOS: [None],
    HostPlatform.LINUX: ["gtk", "qt", None],
}

_GUI_HINTS: Dict[HostPlatform, str] = {
    HostPlatform.WINDOWS: "Install the Microsoft Edge WebView2 runtime.",
    HostPlatform.MACOS: "Install pyobjc (pip install pywebview[cocoa]).",
    HostPlatform.LINUX: "Install PyGObject/WebKit2GTK or run: pip install pywebview[qt]",
}


def _error(exc: Exception) -> Dict[str, Any]:
    return {"status": "error", "detail": str(exc)}


class RepoLauncherAPI:
    """Exposes the backend surface to the JavaScript UI.

    This is the composition root: it owns exactly one instance of every
    component and hands them to each other explicitly.
    """

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        profile: Optional[PlatformProfile] = None,
        resolver: Optional[CapabilityResolver] = None,
        orchestrator: Optional[LaunchOrchestrator] = None,
    ) -> None:
        self.profile = profile or PlatformProfile.current()
        self.store = ConfigStore(self.profile, base_dir=base_dir)
        self.resolver = resolver or CapabilityResolver(self.profile)
        self.validator = ConfigValidator(self.resolver)
        self.orchestrator = orchestrator or LaunchOrchestrator(
            self.resolver, config_provider=self.store.load_tool_configuration
        )
        self.service = LaunchService(self.store, self.validator, self.orchestrator, self.resolver)
        outcome = self.service.initialize()
        self._startup_issues = list(outcome.issues)
        logger.info("RepoLauncher ready on %s (settings: %s)", self.profile.host.display_name, self.store.path)

    def ping(self) -> Dict[str, Any]:
        return {"status": "success", "detail": "pong"}

    def platform_info(self) -> Dict[str, Any]:
        return {
            "platform": self.profile.host.value,
            "name": self.profile.host.display_name,
            "architecture": platform.machine(),
            "python": platform.python_version(),
            "settingsPath": str(self.store.path),
            "supportedTerminals": self.profile.supported_terminals,
            "supportedEditors": {
                cap.value: self.resolver.supported_variants(cap) for cap in ToolCapability.editors()
            },
            "startupIssues": list(self._startup_issues),
        }

    # Repositories

    def get_repos(self) -> List[Dict[str, str]]:
        return self.store.get_repos()

    def add_repo(self, path: str, label: Optional[str] = None) -> Dict[str, Any]:
        if not path or not Path(path).expanduser().is_dir():
            return {"status": "error", "detail": f"Directory does not exist: {path}"}
        try:
            entry = self.store.add_repo(path, label)
        except OSError as exc:
            return _error(exc)
        return {"status": "success", "detail": f"Added {entry['label']}", "repo": entry}

    def remove_repo(self, path: str) -> Dict[str, Any]:
        try:
            removed = self.store.remove_repo(path)
        except OSError as exc:
            return _error(exc)
        if not removed:
            return {"status": "error", "detail": f"Repository not found: {path}"}
        return {"status": "success", "detail": f"Removed {path}"}

    # Theme

    def get_theme(self) -> str:
        return self.store.get_theme()

    def set_theme(self, theme: str) -> Dict[str, Any]:
        try:
            self.store.set_theme(theme)
        except (ValueError, OSError) as exc:
            return _error(exc)
        return {"status": "success", "detail": f"Theme set to {theme}"}

    # Tool configuration

    def get_editors(self) -> Dict[str, Any]:
        return self.service.get_tool_configuration().to_dict()

    def set_editors(self, editors: Dict[str, Any]) -> Dict[str, Any]:
        try:
            outcome = self.service.set_tool_configuration(ToolConfiguration.from_dict(editors))
        except OSError as exc:
            return _error(exc)
        status = "warning" if outcome.was_fixed else "success"
        if outcome.was_fixed:
            detail = "Configuration auto-fixed: " + "; ".join(outcome.issues)
        else:
            detail = "Configuration saved"
        return {"status": status, "detail": detail, "editors": outcome.fixed_config.to_dict()}

    def reset_editors(self) -> Dict[str, Any]:
        try:
            defaults = self.service.reset_to_defaults()
        except OSError as exc:
            return _error(exc)
        return {"status": "success", "detail": "Reset to platform defaults", "editors": defaults.to_dict()}

    def check_tools(self) -> Dict[str, Any]:
        issues = self.service.check_tools()
        return {"status": "warning" if issues else "success", "issues": issues}

    # Launching

    def launch(self, capability: str, path: str) -> Dict[str, Any]:
        try:
            result = self.service.launch(capability, path)
        except ValueError as exc:
            return {"success": False, "error": str(exc), "errorKind": None, "command": None, "args": [], "attempted": []}
        if result.succeeded:
            self._touch_repo(path)
        else:
            logger.warning("Failed to launch %s: %s", capability, result.error)
        return result.to_dict()

    def launch_terminal(self, path: str) -> Dict[str, Any]:
        return self.launch(ToolCapability.TERMINAL.value, path)

    def _touch_repo(self, path: str) -> None:
        known = {r.get("path"): r for r in self.store.get_repos()}
        if path not in known:
            return
        try:
            self.store.add_repo(path, known[path].get("label"))
        except OSError as exc:
            logger.debug("Could not update lastOpened for %s: %s", path, exc)


def _log_gui_attempt(backend: Optional[str]) -> None:
    label = backend or "auto"
    print(f"[DEBUG] Attempting to start PyWebView backend '{label}'", flush=True)


def _start_webview(host: HostPlatform) -> None:
    last_error: Optional[Exception] = None
    for preferred in _GUI_PREFERENCES.get(host, [None]):
        try:
            _log_gui_attempt(preferred)
            webview.start(gui=preferred, debug=debug_enabled())
            return
        except webview.errors.WebViewException as exc:  # type: ignore[attr-defined]
            last_error = exc
            label = preferred or "auto"
            print(f"[WARNING] GUI backend '{label}' failed: {exc}", flush=True)
            logger.warning("GUI backend '%s' failed: %s", label, exc)
            continue
    print(f"[ERROR] PyWebView could not initialize a GUI backend. {_GUI_HINTS.get(host, '')}", flush=True)
    if last_error:
        raise last_error
    raise webview.errors.WebViewException("No GUI backend available")  # type: ignore[attr-defined]


def _log_platform_info(profile: PlatformProfile) -> None:
    logger.info("Platform: %s (%s)", profile.host.display_name, sys.platform)
    logger.info("Architecture: %s", platform.machine())
    logger.info("Python version: %s", platform.python_version())
    logger.info("PyWebView version: %s", getattr(webview, "__version__", "unknown"))


def main() -> None:
    profile = PlatformProfile.current()
    store_dir = default_base_dir()
    log_path = configure_logging(store_dir / "logs")
    print(f"[INFO] Logging to {log_path}", flush=True)
    _log_platform_info(profile)

    print("[DEBUG] RepoLauncherAPI init starting", flush=True)
    api = RepoLauncherAPI(base_dir=store_dir, profile=profile)
    print("[DEBUG] RepoLauncherAPI init complete", flush=True)
    atexit.register(lambda: logger.info("RepoLauncher shutting down"))

    html_path = Path(__file__).with_name("webview_ui") / "repolauncher.html"
    webview.create_window(
        "RepoLauncher",
        html=html_path.read_text(encoding="utf-8"),
        js_api=api,
        width=960,
        height=680,
        min_size=(640, 480),
    )
    print("[DEBUG] Starting PyWebView", flush=True)
    _start_webview(profile.host)


if __name__ == "__main__":
    main()

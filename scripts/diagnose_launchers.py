"""Report which editors and terminals RepoLauncher can find on this machine."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from launcher_core.capability_resolver import CapabilityResolver  # noqa: E402
from launcher_core.config_store import ConfigStore  # noqa: E402
from launcher_core.config_validator import ConfigValidator  # noqa: E402
from launcher_core.launch_orchestrator import LaunchOrchestrator  # noqa: E402
from launcher_core.models import ToolCapability  # noqa: E402
from launcher_core.platform_profile import PlatformProfile  # noqa: E402


def report_candidates(resolver: CapabilityResolver) -> None:
    for capability in ToolCapability:
        print(f"[INFO] {capability.value}:")
        for name in resolver.supported_variants(capability):
            executable = name.split(" ", 1)[0] if capability is ToolCapability.TERMINAL else name
            found = resolver.resolve(executable)
            marker = found if found else "not found"
            print(f"    {name:<45} {marker}")


def report_configuration(store: ConfigStore, validator: ConfigValidator, resolver: CapabilityResolver) -> None:
    config = store.load_tool_configuration()
    print(f"[INFO] Settings file: {store.path}")
    report = validator.validate(config)
    if report.is_valid:
        print("[INFO] Stored configuration is valid")
    for issue in report.issues:
        print(f"[WARN] {issue}")
    for issue in resolver.availability_issues(config):
        print(f"[WARN] {issue}")


def show_invocations(orchestrator: LaunchOrchestrator, store: ConfigStore, directory: str) -> None:
    config = store.load_tool_configuration()
    for capability in ToolCapability:
        for candidate in orchestrator.candidates_for(capability, config):
            invocation = orchestrator.build_invocation(capability, candidate, directory)
            shell = " (via shell)" if invocation.use_shell else ""
            print(f"[DEBUG] {capability.value}: {' '.join(invocation.argv())}{shell}")


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--directory", default=str(Path.cwd()), help="directory used to preview command lines")
    parser.add_argument("--home", default=None, help="profile directory (defaults to REPOLAUNCHER_HOME)")
    args = parser.parse_args(argv)

    profile = PlatformProfile.current()
    resolver = CapabilityResolver(profile)
    store = ConfigStore(profile, base_dir=Path(args.home) if args.home else None)
    validator = ConfigValidator(resolver)
    orchestrator = LaunchOrchestrator(resolver, config_provider=store.load_tool_configuration)

    print(f"[INFO] Diagnosing launchers on {profile.host.display_name}")
    report_candidates(resolver)
    report_configuration(store, validator, resolver)
    show_invocations(orchestrator, store, args.directory)
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import logging
from typing import List

from launcher_core.capability_resolver import CapabilityResolver
from launcher_core.models import FixOutcome, ToolCapability, ToolConfiguration, ValidationReport


logger = logging.getLogger(__name__)


class ConfigValidator:
    """Check a tool configuration against the platform and repair it.

    Validation only describes problems. `auto_fix` swaps every unsupported
    value for the platform default and always yields a configuration that
    validates; running it twice changes nothing.
    """

    def __init__(self, resolver: CapabilityResolver) -> None:
        self._resolver = resolver

    def validate(self, config: ToolConfiguration) -> ValidationReport:
        issues: List[str] = []
        for capability in ToolCapability.editors():
            command = config.editor_command(capability)
            if not command:
                continue
            supported = self._resolver.supported_variants(capability)
            if command not in supported:
                issues.append(
                    f"Unsupported {capability.value} configuration: {command}. Supported: {', '.join(supported)}"
                )

        terminals = config.terminal_candidates
        if not terminals:
            issues.append("Terminal configuration must be a non-empty list")
        else:
            supported_terminals = self._resolver.supported_variants(ToolCapability.TERMINAL)
            unsupported = [t for t in terminals if t not in supported_terminals]
            if unsupported:
                issues.append(f"Unsupported terminals: {', '.join(unsupported)}")

        return ValidationReport(is_valid=not issues, issues=issues)

    def auto_fix(self, config: ToolConfiguration) -> ToolConfiguration:
        defaults = self._resolver.default_configuration()
        fixed = config.copy()

        for capability in ToolCapability.editors():
            current = fixed.editor_command(capability)
            if not current:
                fixed.editor_commands[capability] = ""
                continue
            if current not in self._resolver.supported_variants(capability):
                replacement = defaults.editor_command(capability)
                fixed.editor_commands[capability] = replacement
                logger.warning("Auto-fixed %s configuration from %s to %s", capability.value, current, replacement)

        supported_terminals = self._resolver.supported_variants(ToolCapability.TERMINAL)
        kept = [t for t in fixed.terminal_candidates if t in supported_terminals]
        if not kept:
            fixed.terminal_candidates = list(defaults.terminal_candidates)
            logger.warning("Auto-fixed terminal configuration to %s", ", ".join(fixed.terminal_candidates))
        elif len(kept) != len(fixed.terminal_candidates):
            dropped = [t for t in fixed.terminal_candidates if t not in supported_terminals]
            fixed.terminal_candidates = kept
            logger.warning("Dropped unsupported terminals: %s", ", ".join(dropped))

        return fixed

    def validate_and_maybe_fix(self, config: ToolConfiguration) -> FixOutcome:
        report = self.validate(config)
        if report.is_valid:
            logger.debug("Tool configuration is valid")
            return FixOutcome(fixed_config=config.copy(), was_fixed=False)
        logger.warning("%s: %s", report.error_kind.value, "; ".join(report.issues))
        return FixOutcome(
            fixed_config=self.auto_fix(config),
            was_fixed=True,
            issues=report.issues,
            error_kind=report.error_kind,
        )

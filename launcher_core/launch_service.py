from __future__ import annotations

import logging
from typing import Any, List

from launcher_core.capability_resolver import CapabilityResolver
from launcher_core.config_store import ConfigStore
from launcher_core.config_validator import ConfigValidator
from launcher_core.launch_orchestrator import LaunchOrchestrator
from launcher_core.models import FixOutcome, LaunchResult, ToolCapability, ToolConfiguration


logger = logging.getLogger(__name__)


class LaunchService:
    """Caller-facing surface: stored configuration in, launch results out."""

    def __init__(
        self,
        store: ConfigStore,
        validator: ConfigValidator,
        orchestrator: LaunchOrchestrator,
        resolver: CapabilityResolver,
    ) -> None:
        self._store = store
        self._validator = validator
        self._orchestrator = orchestrator
        self._resolver = resolver

    def initialize(self) -> FixOutcome:
        """Validate the stored configuration once at startup and repair it in place."""
        outcome = self._validator.validate_and_maybe_fix(self._store.load_tool_configuration())
        if outcome.was_fixed:
            self._store.save_tool_configuration(outcome.fixed_config)
            logger.info("Tool configuration auto-fixed")
        return outcome

    def launch(self, capability: Any, directory: str) -> LaunchResult:
        cap = ToolCapability.parse(capability)
        return self._orchestrator.launch(cap, directory, self._store.load_tool_configuration())

    def validate_and_maybe_fix(self, config: ToolConfiguration) -> FixOutcome:
        return self._validator.validate_and_maybe_fix(config)

    def get_tool_configuration(self) -> ToolConfiguration:
        return self._store.load_tool_configuration()

    def set_tool_configuration(self, config: ToolConfiguration) -> FixOutcome:
        outcome = self._validator.validate_and_maybe_fix(config)
        self._store.save_tool_configuration(outcome.fixed_config)
        return outcome

    def reset_to_defaults(self) -> ToolConfiguration:
        defaults = self._resolver.default_configuration()
        self._store.save_tool_configuration(defaults)
        logger.info("Reset tool configuration to platform defaults")
        return defaults

    def check_tools(self) -> List[str]:
        config = self._store.load_tool_configuration()
        return self._validator.validate(config).issues + self._resolver.availability_issues(config)

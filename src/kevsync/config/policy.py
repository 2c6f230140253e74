"""Managed policy configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from kevsync.domain.model import PolicyOperator, ViolationState

from .env import env_list, env_or_default
from .errors import ConfigurationError, MissingConfigurationError

DEFAULT_POLICY_OPERATOR = PolicyOperator.ANY.value
DEFAULT_POLICY_VIOLATION_STATE = ViolationState.WARN.value


@dataclass(frozen=True, slots=True)
class PolicyConfig:
    """Holds the desired attributes of the managed Dependency-Track policy."""

    name: str
    operator: str = DEFAULT_POLICY_OPERATOR
    violation_state: str = DEFAULT_POLICY_VIOLATION_STATE
    projects: tuple[str, ...] = field(default_factory=tuple)
    tags: tuple[str, ...] = field(default_factory=tuple)

    def validate(self) -> None:
        if not self.name.strip():
            raise MissingConfigurationError("policy-name is required")
        self.policy_operator()
        self.policy_violation_state()

    def policy_operator(self) -> PolicyOperator:
        try:
            return PolicyOperator(self.operator.strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in PolicyOperator)
            raise ConfigurationError(
                f"Invalid policy operator {self.operator!r} (expected one of: {allowed})"
            ) from None

    def policy_violation_state(self) -> ViolationState:
        try:
            return ViolationState(self.violation_state.strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in ViolationState)
            raise ConfigurationError(
                f"Invalid policy violation state {self.violation_state!r} "
                f"(expected one of: {allowed})"
            ) from None


def get_policy_config() -> PolicyConfig:
    return PolicyConfig(
        name=env_or_default("DT_POLICY_NAME", ""),
        operator=env_or_default("DT_POLICY_OPERATOR", DEFAULT_POLICY_OPERATOR),
        violation_state=env_or_default(
            "DT_POLICY_VIOLATION_STATE", DEFAULT_POLICY_VIOLATION_STATE
        ),
        projects=env_list("DT_POLICY_PROJECTS"),
        tags=env_list("DT_POLICY_TAGS"),
    )

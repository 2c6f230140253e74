"""Policy value objects shared by the reconciler, ports and adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class PolicyOperator(StrEnum):
    """How a policy combines its conditions."""

    ANY = "ANY"
    ALL = "ALL"


class ViolationState(StrEnum):
    INFO = "INFO"
    WARN = "WARN"
    FAIL = "FAIL"


class ConditionSubject(StrEnum):
    AGE = "AGE"
    COMPONENT_HASH = "COMPONENT_HASH"
    COORDINATES = "COORDINATES"
    CPE = "CPE"
    CWE = "CWE"
    EPSS = "EPSS"
    EXPRESSION = "EXPRESSION"
    LICENSE = "LICENSE"
    LICENSE_GROUP = "LICENSE_GROUP"
    PACKAGE_URL = "PACKAGE_URL"
    SEVERITY = "SEVERITY"
    SWID_TAGID = "SWID_TAGID"
    VERSION = "VERSION"
    VERSION_DISTANCE = "VERSION_DISTANCE"
    VULNERABILITY_ID = "VULNERABILITY_ID"


class ConditionOperator(StrEnum):
    IS = "IS"
    IS_NOT = "IS_NOT"
    MATCHES = "MATCHES"
    NO_MATCH = "NO_MATCH"
    NUMERIC_GREATER_THAN = "NUMERIC_GREATER_THAN"
    NUMERIC_LESS_THAN = "NUMERIC_LESS_THAN"
    NUMERIC_EQUAL = "NUMERIC_EQUAL"
    NUMERIC_NOT_EQUAL = "NUMERIC_NOT_EQUAL"
    NUMERIC_GREATER_THAN_OR_EQUAL = "NUMERIC_GREATER_THAN_OR_EQUAL"
    NUMERIC_LESSER_THAN_OR_EQUAL = "NUMERIC_LESSER_THAN_OR_EQUAL"
    CONTAINS_ALL = "CONTAINS_ALL"
    CONTAINS_ANY = "CONTAINS_ANY"


@dataclass(frozen=True, slots=True)
class PolicyCondition:
    """One policy condition.

    ``uuid`` is assigned by the remote service on creation and is ``None`` for
    conditions that only exist in the desired state. Subjects and operators the
    enums do not know are kept as plain strings.
    """

    subject: ConditionSubject | str
    operator: ConditionOperator | str
    value: str
    uuid: UUID | None = None


@dataclass(frozen=True, slots=True)
class RemoteTag:
    name: str


@dataclass(frozen=True, slots=True)
class RemoteProject:
    uuid: UUID
    name: str
    version: str | None = None
    active: bool = True

    @property
    def label(self) -> str:
        return f"{self.name}:{self.version}" if self.version else self.name


@dataclass(frozen=True, slots=True)
class DesiredPolicyState:
    """Target shape of the managed policy.

    ``tags`` and ``conditions`` are deduplicated on construction; ``projects`` keeps
    the raw ``name`` / ``name:version`` references, which are resolved against the
    remote service during reconciliation.
    """

    name: str
    operator: PolicyOperator = PolicyOperator.ANY
    violation_state: ViolationState = ViolationState.WARN
    tags: tuple[str, ...] = ()
    projects: tuple[str, ...] = ()
    conditions: tuple[PolicyCondition, ...] = ()

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Policy name must not be blank")
        object.__setattr__(self, "tags", tuple(dict.fromkeys(self.tags)))
        object.__setattr__(self, "projects", tuple(dict.fromkeys(self.projects)))
        unique: dict[str, PolicyCondition] = {}
        for condition in self.conditions:
            unique.setdefault(condition.value, condition)
        object.__setattr__(self, "conditions", tuple(unique.values()))


@dataclass(frozen=True, slots=True)
class RemotePolicy:
    """Policy as last reported by the remote service."""

    uuid: UUID
    name: str
    operator: PolicyOperator
    violation_state: ViolationState
    tags: tuple[RemoteTag, ...] = field(default_factory=tuple)
    projects: tuple[RemoteProject, ...] = field(default_factory=tuple)
    conditions: tuple[PolicyCondition, ...] = field(default_factory=tuple)


__all__ = [
    "ConditionOperator",
    "ConditionSubject",
    "DesiredPolicyState",
    "PolicyCondition",
    "PolicyOperator",
    "RemotePolicy",
    "RemoteProject",
    "RemoteTag",
    "ViolationState",
]

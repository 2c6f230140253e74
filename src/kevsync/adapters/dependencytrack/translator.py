"""Translate Dependency-Track payloads to and from domain policy objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kevsync.domain.model import (
    PolicyCondition,
    RemotePolicy,
    RemoteProject,
    RemoteTag,
)

if TYPE_CHECKING:
    from kevsync.domain.model import PolicyOperator, ViolationState

    from .schema import PolicyConditionPayload, PolicyPayload, ProjectPayload


def translate_policy(payload: PolicyPayload) -> RemotePolicy:
    return RemotePolicy(
        uuid=payload.uuid,
        name=payload.name,
        operator=payload.operator,
        violation_state=payload.violation_state,
        tags=tuple(RemoteTag(name=tag.name) for tag in payload.tags),
        projects=tuple(translate_project(project) for project in payload.projects),
        conditions=tuple(
            translate_condition(condition) for condition in payload.policy_conditions
        ),
    )


def translate_project(payload: ProjectPayload) -> RemoteProject:
    return RemoteProject(
        uuid=payload.uuid,
        name=payload.name,
        version=payload.version,
        active=payload.active,
    )


def translate_condition(payload: PolicyConditionPayload) -> PolicyCondition:
    return PolicyCondition(
        subject=payload.subject,
        operator=payload.operator,
        value=payload.value,
        uuid=payload.uuid,
    )


def policy_create_body(
    *,
    name: str,
    operator: PolicyOperator,
    violation_state: ViolationState,
) -> dict[str, object]:
    return {
        "name": name,
        "operator": operator.value,
        "violationState": violation_state.value,
    }


def policy_update_body(
    policy: RemotePolicy,
    *,
    operator: PolicyOperator,
    violation_state: ViolationState,
) -> dict[str, object]:
    body = policy_create_body(
        name=policy.name,
        operator=operator,
        violation_state=violation_state,
    )
    body["uuid"] = str(policy.uuid)
    return body


def condition_body(condition: PolicyCondition) -> dict[str, object]:
    return {
        "subject": str(condition.subject),
        "operator": str(condition.operator),
        "value": condition.value,
    }

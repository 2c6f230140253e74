"""Pydantic models describing the Dependency-Track policy API payloads."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from kevsync.domain.model import (
    ConditionOperator,
    ConditionSubject,
    PolicyOperator,
    ViolationState,
)


class DependencyTrackBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TagPayload(DependencyTrackBaseModel):
    name: str


class ProjectPayload(DependencyTrackBaseModel):
    uuid: UUID
    name: str
    version: str | None = None
    active: bool = True


class PolicyConditionPayload(DependencyTrackBaseModel):
    # unknown subjects or operators on conditions not managed here are kept as text
    uuid: UUID | None = None
    subject: ConditionSubject | str = Field(union_mode="left_to_right")
    operator: ConditionOperator | str = Field(union_mode="left_to_right")
    value: str


class PolicyPayload(DependencyTrackBaseModel):
    uuid: UUID
    name: str
    operator: PolicyOperator
    violation_state: ViolationState = Field(alias="violationState")
    policy_conditions: list[PolicyConditionPayload] = Field(
        default_factory=list["PolicyConditionPayload"], alias="policyConditions"
    )
    projects: list[ProjectPayload] = Field(default_factory=list["ProjectPayload"])
    tags: list[TagPayload] = Field(default_factory=list["TagPayload"])
    include_children: bool | None = Field(default=None, alias="includeChildren")


PolicyListAdapter = TypeAdapter(list[PolicyPayload])
ProjectListAdapter = TypeAdapter(list[ProjectPayload])

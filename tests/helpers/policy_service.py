"""In-memory policy service used by reconciliation tests."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from kevsync.domain.errors import RemoteNotFoundError
from kevsync.domain.model import (
    PolicyCondition,
    PolicyOperator,
    RemotePolicy,
    RemoteProject,
    RemoteTag,
    ViolationState,
)

MUTATIONS = frozenset(
    {
        "create_policy",
        "update_policy",
        "add_tag",
        "delete_tag",
        "add_project",
        "delete_project",
        "create_condition",
        "delete_condition",
    }
)


@dataclass
class FakePolicyService:
    """Keeps policies in a dict and records every call by method name.

    ``known_tags`` limits which tags exist server side (``None`` accepts any tag).
    ``failures`` maps a method name to the exception it raises.
    ``ignore_attributes_on_create`` mimics servers that drop operator and
    violation state from a create request.
    """

    policies: dict[UUID, RemotePolicy] = field(default_factory=dict)
    projects: list[RemoteProject] = field(default_factory=list)
    known_tags: set[str] | None = None
    failures: dict[str, Exception] = field(default_factory=dict)
    ignore_attributes_on_create: bool = True
    calls: list[tuple[str, object]] = field(default_factory=list)

    def add_policy(self, policy: RemotePolicy) -> RemotePolicy:
        self.policies[policy.uuid] = policy
        return policy

    def add_remote_project(
        self, name: str, version: str | None = None, *, active: bool = True
    ) -> RemoteProject:
        project = RemoteProject(uuid=uuid4(), name=name, version=version, active=active)
        self.projects.append(project)
        return project

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    @property
    def mutations(self) -> list[tuple[str, object]]:
        return [call for call in self.calls if call[0] in MUTATIONS]

    # PolicyService

    def get_policy_by_name(self, name: str) -> RemotePolicy | None:
        self._record("get_policy_by_name", name)
        for policy in self.policies.values():
            if policy.name == name:
                return policy
        return None

    def get_policy(self, policy_uuid: UUID) -> RemotePolicy:
        self._record("get_policy", policy_uuid)
        return self._policy(policy_uuid)

    def create_policy(
        self,
        *,
        name: str,
        operator: PolicyOperator,
        violation_state: ViolationState,
    ) -> RemotePolicy:
        self._record("create_policy", name)
        if self.ignore_attributes_on_create:
            operator, violation_state = PolicyOperator.ANY, ViolationState.INFO
        policy = RemotePolicy(
            uuid=uuid4(), name=name, operator=operator, violation_state=violation_state
        )
        return self.add_policy(policy)

    def update_policy(
        self,
        policy: RemotePolicy,
        *,
        operator: PolicyOperator,
        violation_state: ViolationState,
    ) -> RemotePolicy:
        self._record("update_policy", (operator, violation_state))
        current = self._policy(policy.uuid)
        return self._store(
            dataclasses.replace(current, operator=operator, violation_state=violation_state)
        )

    def add_tag(self, policy_uuid: UUID, tag_name: str) -> RemotePolicy:
        self._record("add_tag", tag_name)
        self._require_tag(tag_name)
        policy = self._policy(policy_uuid)
        if any(tag.name == tag_name for tag in policy.tags):
            return policy
        return self._store(dataclasses.replace(policy, tags=(*policy.tags, RemoteTag(tag_name))))

    def delete_tag(self, policy_uuid: UUID, tag_name: str) -> RemotePolicy:
        self._record("delete_tag", tag_name)
        self._require_tag(tag_name)
        policy = self._policy(policy_uuid)
        tags = tuple(tag for tag in policy.tags if tag.name != tag_name)
        return self._store(dataclasses.replace(policy, tags=tags))

    def add_project(self, policy_uuid: UUID, project_uuid: UUID) -> RemotePolicy:
        self._record("add_project", project_uuid)
        project = self._project(project_uuid)
        policy = self._policy(policy_uuid)
        return self._store(dataclasses.replace(policy, projects=(*policy.projects, project)))

    def delete_project(self, policy_uuid: UUID, project_uuid: UUID) -> RemotePolicy:
        self._record("delete_project", project_uuid)
        self._project(project_uuid)
        policy = self._policy(policy_uuid)
        projects = tuple(project for project in policy.projects if project.uuid != project_uuid)
        return self._store(dataclasses.replace(policy, projects=projects))

    def get_projects_for_name(
        self,
        name: str,
        *,
        exclude_inactive: bool = True,
        only_root: bool = False,
    ) -> list[RemoteProject]:
        self._record("get_projects_for_name", name)
        matches = [
            project
            for project in self.projects
            if project.name == name and (project.active or not exclude_inactive)
        ]
        if not matches:
            raise RemoteNotFoundError(f"project not found: {name}")
        return matches

    def get_project_for_name_version(
        self,
        name: str,
        version: str,
        *,
        exclude_inactive: bool = True,
        only_root: bool = False,
    ) -> RemoteProject:
        self._record("get_project_for_name_version", (name, version))
        for project in self.projects:
            if project.name == name and project.version == version:
                return project
        raise RemoteNotFoundError(f"project not found: {name}:{version}")

    def create_condition(self, policy_uuid: UUID, condition: PolicyCondition) -> PolicyCondition:
        self._record("create_condition", condition.value)
        policy = self._policy(policy_uuid)
        created = dataclasses.replace(condition, uuid=uuid4())
        self._store(dataclasses.replace(policy, conditions=(*policy.conditions, created)))
        return created

    def delete_condition(self, condition_uuid: UUID) -> None:
        self._record("delete_condition", condition_uuid)
        for policy in self.policies.values():
            remaining = tuple(c for c in policy.conditions if c.uuid != condition_uuid)
            if len(remaining) != len(policy.conditions):
                self._store(dataclasses.replace(policy, conditions=remaining))
                return
        raise RemoteNotFoundError(f"condition not found: {condition_uuid}")

    # internals

    def _record(self, name: str, argument: object) -> None:
        self.calls.append((name, argument))
        failure = self.failures.get(name)
        if failure is not None:
            raise failure

    def _policy(self, policy_uuid: UUID) -> RemotePolicy:
        try:
            return self.policies[policy_uuid]
        except KeyError:
            raise RemoteNotFoundError(f"policy not found: {policy_uuid}") from None

    def _project(self, project_uuid: UUID) -> RemoteProject:
        for project in self.projects:
            if project.uuid == project_uuid:
                return project
        raise RemoteNotFoundError(f"project not found: {project_uuid}")

    def _require_tag(self, tag_name: str) -> None:
        if self.known_tags is not None and tag_name not in self.known_tags:
            raise RemoteNotFoundError(f"tag not found: {tag_name}")

    def _store(self, policy: RemotePolicy) -> RemotePolicy:
        self.policies[policy.uuid] = policy
        return policy

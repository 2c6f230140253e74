"""Orchestrator for policy reconciliation.

A run brings one remote policy in line with a ``DesiredPolicyState`` in four
strictly ordered steps: policy attributes, tags, project membership and
conditions. Each step diffs against the policy the service last returned and
applies one remote call per change.

The run is not transactional. A failing step leaves earlier changes in place;
the next run re-diffs against the remote state and finishes the job. Only the
tag step tolerates "not found" from the service, every other failure aborts.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kevsync.domain.errors import RemoteNotFoundError, RemoteOperationError

from .conditions import condition_key
from .diff import diff, diff_by_key
from .policy import needs_policy_update
from .projects import resolve_projects

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from kevsync.domain.model import (
        DesiredPolicyState,
        PolicyCondition,
        RemotePolicy,
        RemoteProject,
    )
    from kevsync.domain.ports.policy_service import PolicyService

    TagOperation = Callable[[UUID, str], RemotePolicy]

log = getLogger(__name__)


@dataclass(slots=True)
class PolicyReconciler:
    """Apply the minimal set of remote changes for one desired policy state."""

    service: PolicyService
    reapply_attributes_after_create: bool = True
    exclude_inactive_projects: bool = True
    only_root_projects: bool = False

    def reconcile(self, desired: DesiredPolicyState) -> RemotePolicy:
        """Run all reconciliation steps for ``desired`` and return the final policy."""

        policy = self._resolve_policy(desired)
        policy = self._reconcile_tags(policy, desired.tags)
        projects = resolve_projects(
            self.service,
            desired.projects,
            exclude_inactive=self.exclude_inactive_projects,
            only_root=self.only_root_projects,
        )
        policy = self._reconcile_projects(policy, projects)
        self._reconcile_conditions(policy, desired.conditions)
        return self.service.get_policy(policy.uuid)

    def _resolve_policy(self, desired: DesiredPolicyState) -> RemotePolicy:
        current = self.service.get_policy_by_name(desired.name)
        if current is None:
            log.info("Creating policy %s", desired.name)
            created = self.service.create_policy(
                name=desired.name,
                operator=desired.operator,
                violation_state=desired.violation_state,
            )
            if not self.reapply_attributes_after_create:
                return created
            # Dependency-Track ignores operator and violationState on create
            # (DependencyTrack/dependency-track#2365).
            return self.service.update_policy(
                created,
                operator=desired.operator,
                violation_state=desired.violation_state,
            )

        if needs_policy_update(current, desired):
            log.info(
                "Updating policy %s: operator %s -> %s, violation state %s -> %s",
                desired.name,
                current.operator,
                desired.operator,
                current.violation_state,
                desired.violation_state,
            )
            return self.service.update_policy(
                current,
                operator=desired.operator,
                violation_state=desired.violation_state,
            )

        log.info("Policy %s attributes are up to date", desired.name)
        return current

    def _reconcile_tags(self, policy: RemotePolicy, desired: Iterable[str]) -> RemotePolicy:
        changes = diff((tag.name for tag in policy.tags), desired)
        for tag_name in changes.to_remove:
            policy = self._apply_tag(policy, tag_name, self.service.delete_tag, "remove")
        for tag_name in changes.to_add:
            policy = self._apply_tag(policy, tag_name, self.service.add_tag, "add")
        log.info(
            "Tags reconciled: removed=%s, added=%s",
            len(changes.to_remove),
            len(changes.to_add),
        )
        return policy

    def _apply_tag(
        self,
        policy: RemotePolicy,
        tag_name: str,
        operation: TagOperation,
        action: str,
    ) -> RemotePolicy:
        try:
            return operation(policy.uuid, tag_name)
        except RemoteNotFoundError:
            log.warning(
                "Tag %s not found when trying to %s it on policy %s, skipping",
                tag_name,
                action,
                policy.name,
            )
            return policy

    def _reconcile_projects(
        self, policy: RemotePolicy, desired: Iterable[RemoteProject]
    ) -> RemotePolicy:
        changes = diff_by_key(policy.projects, desired, key=_project_key)
        for project in changes.to_remove:
            log.info("Removing project %s from policy %s", project.label, policy.name)
            policy = self.service.delete_project(policy.uuid, project.uuid)
        for project in changes.to_add:
            log.info("Adding project %s to policy %s", project.label, policy.name)
            policy = self.service.add_project(policy.uuid, project.uuid)
        log.info(
            "Projects reconciled: removed=%s, added=%s",
            len(changes.to_remove),
            len(changes.to_add),
        )
        return policy

    def _reconcile_conditions(
        self, policy: RemotePolicy, desired: Iterable[PolicyCondition]
    ) -> None:
        changes = diff_by_key(policy.conditions, desired, key=condition_key)
        for condition in changes.to_remove:
            if condition.uuid is None:
                raise RemoteOperationError(
                    f"Policy condition {condition.value} has no remote identifier"
                )
            self.service.delete_condition(condition.uuid)
        for condition in changes.to_add:
            self.service.create_condition(policy.uuid, condition)
        log.info(
            "Conditions reconciled: removed=%s, added=%s",
            len(changes.to_remove),
            len(changes.to_add),
        )


def _project_key(project: RemoteProject) -> UUID:
    return project.uuid


__all__ = ["PolicyReconciler"]

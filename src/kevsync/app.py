"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kevsync.adapters.dependencytrack import DependencyTrackClient
from kevsync.adapters.kev import load_kev_catalog
from kevsync.config import get_dependencytrack_config
from kevsync.domain.model import DesiredPolicyState
from kevsync.domain.reconciliation import PolicyReconciler, build_conditions

if TYPE_CHECKING:
    from kevsync.config import DependencyTrackConfig, KevConfig, PolicyConfig
    from kevsync.domain.catalog import Catalog
    from kevsync.domain.model import RemotePolicy
    from kevsync.domain.ports.policy_service import PolicyService

CatalogLoader = Callable[[], "Catalog"]


log = getLogger(__name__)


@dataclass(slots=True)
class PolicySyncResult:
    """Outcome of one policy synchronisation run."""

    policy: RemotePolicy
    catalog_size: int
    conditions: int


def build_desired_state(policy: PolicyConfig, identifiers: list[str]) -> DesiredPolicyState:
    return DesiredPolicyState(
        name=policy.name.strip(),
        operator=policy.policy_operator(),
        violation_state=policy.policy_violation_state(),
        tags=policy.tags,
        projects=policy.projects,
        conditions=build_conditions(identifiers),
    )


def apply_kev_policy(
    policy: PolicyConfig,
    *,
    dependencytrack: DependencyTrackConfig | None = None,
    kev: KevConfig | None = None,
    catalog_loader: CatalogLoader | None = None,
    service: PolicyService | None = None,
    reapply_attributes_after_create: bool = True,
) -> PolicySyncResult:
    """Bring the configured Dependency-Track policy in line with the KEV catalog."""

    policy.validate()
    effective_service = service or DependencyTrackClient(
        config=dependencytrack or get_dependencytrack_config()
    )
    effective_loader = catalog_loader or (lambda: load_kev_catalog(kev))
    catalog = effective_loader()
    identifiers = catalog.identifiers()
    desired = build_desired_state(policy, identifiers)

    log.info(
        "Starting policy sync: policy=%s, operator=%s, violation_state=%s, "
        "projects=%s, tags=%s, conditions=%s",
        desired.name,
        desired.operator,
        desired.violation_state,
        len(desired.projects),
        len(desired.tags),
        len(desired.conditions),
    )

    reconciler = PolicyReconciler(
        service=effective_service,
        reapply_attributes_after_create=reapply_attributes_after_create,
    )
    remote = reconciler.reconcile(desired)

    log.info("Finished policy sync: PolicyConditions count: %s", len(remote.conditions))

    return PolicySyncResult(
        policy=remote,
        catalog_size=len(identifiers),
        conditions=len(remote.conditions),
    )

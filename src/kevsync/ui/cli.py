from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from kevsync import __version__
from kevsync.app import apply_kev_policy
from kevsync.config import (
    DEFAULT_DEPENDENCYTRACK_BASE_URL,
    RATE_LIMIT_ENV,
    ConfigurationError,
    DependencyTrackConfig,
    KevConfig,
    MissingConfigurationError,
    PolicyConfig,
    build_dependencytrack_config,
    configure_logging,
    env_or_default,
    get_kev_config,
    get_policy_config,
    parse_rate_limit,
    split_list,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kevsync",
        description="Keep a Dependency-Track policy in line with the CISA KEV catalog",
    )
    parser.add_argument(
        "-u",
        "--base-url",
        type=str,
        help=f"Dependency-Track base URL (env: DT_BASE_URL, default: {DEFAULT_DEPENDENCYTRACK_BASE_URL})",
    )
    parser.add_argument(
        "-k",
        "--api-key",
        type=str,
        help="Dependency-Track API key (env: DT_API_KEY)",
    )
    parser.add_argument(
        "--max-requests-per-second",
        type=str,
        help=f"Cap on Dependency-Track API calls per second, 0 for no cap (env: {RATE_LIMIT_ENV})",
    )
    parser.add_argument(
        "--policy-name",
        type=str,
        help="Name of the managed policy (env: DT_POLICY_NAME)",
    )
    parser.add_argument(
        "--policy-operator",
        type=str,
        help="Policy operator, ANY or ALL (env: DT_POLICY_OPERATOR, default: ANY)",
    )
    parser.add_argument(
        "--policy-violation-state",
        type=str,
        help="Policy violation state, INFO, WARN or FAIL "
        "(env: DT_POLICY_VIOLATION_STATE, default: WARN)",
    )
    parser.add_argument(
        "--policy-projects",
        action="append",
        help="Project reference NAME or NAME:VERSION; repeatable or comma separated "
        "(env: DT_POLICY_PROJECTS)",
    )
    parser.add_argument(
        "--policy-tags",
        action="append",
        help="Tag name; repeatable or comma separated (env: DT_POLICY_TAGS)",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        help="Directory holding the cached KEV catalog (env: KEVSYNC_CACHE_DIR)",
    )
    parser.add_argument(
        "--kev-url",
        type=str,
        help="KEV catalog JSON feed URL (env: KEVSYNC_KEV_URL)",
    )
    parser.add_argument(
        "--no-reapply-after-create",
        action="store_true",
        help="Skip the attribute update that follows creating a new policy",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(list(argv))


def _policy_config(args: argparse.Namespace) -> PolicyConfig:
    env_policy = get_policy_config()
    config = PolicyConfig(
        name=args.policy_name if args.policy_name is not None else env_policy.name,
        operator=args.policy_operator or env_policy.operator,
        violation_state=args.policy_violation_state or env_policy.violation_state,
        projects=split_list(args.policy_projects) if args.policy_projects else env_policy.projects,
        tags=split_list(args.policy_tags) if args.policy_tags else env_policy.tags,
    )
    config.validate()
    return config


def _dependencytrack_config(args: argparse.Namespace) -> DependencyTrackConfig:
    api_key = args.api_key or os.getenv("DT_API_KEY")
    if api_key is None or not api_key.strip():
        raise MissingConfigurationError("api-key is required")
    base_url = args.base_url or env_or_default("DT_BASE_URL", DEFAULT_DEPENDENCYTRACK_BASE_URL)
    rate = args.max_requests_per_second
    ratelimit = parse_rate_limit(rate if rate is not None else os.getenv(RATE_LIMIT_ENV))
    return build_dependencytrack_config(
        base_url=base_url, api_key=api_key.strip(), ratelimit=ratelimit
    )


def _kev_config(args: argparse.Namespace) -> KevConfig:
    config = get_kev_config()
    if args.cache_dir:
        config = dataclasses.replace(config, cache_dir=Path(args.cache_dir))
    if args.kev_url:
        config = dataclasses.replace(config, url=args.kev_url)
    return config


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        dependencytrack = _dependencytrack_config(parsed_args)
        policy = _policy_config(parsed_args)
        kev = _kev_config(parsed_args)
    except (ConfigurationError, ValueError):
        log.exception("Configuration error")
        sys.exit(2)

    try:
        result = apply_kev_policy(
            policy,
            dependencytrack=dependencytrack,
            kev=kev,
            reapply_attributes_after_create=not parsed_args.no_reapply_after_create,
        )
    except Exception:
        log.exception("Fatal error during policy sync")
        sys.exit(1)

    log.info(
        "Policy %s synchronised: catalog=%s, conditions=%s",
        result.policy.name,
        result.catalog_size,
        result.conditions,
    )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

"""Effective policy resolution with a jurisdiction fallback chain."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date
from uuid import UUID

from time_ledger.calculators.errors import ConfigurationMissingError
from time_ledger.calculators.jurisdictions import (
    DEFAULT_JURISDICTION,
    KNOWN_JURISDICTIONS,
    JurisdictionRules,
    get_jurisdiction,
)
from time_ledger.calculators.types import OvertimePolicy, Policy

logger = logging.getLogger(__name__)

DEFAULT_MEAL_BREAK_MINUTES = 30
DEFAULT_REST_BREAK_MINUTES = 10


def system_default_policy(org_id: UUID) -> Policy:
    """Hard-coded terminal fallback: 3 days/week, weekly OT at 40h, no PTO."""
    return Policy(
        org_id=org_id,
        required_days_per_week=3,
        minimum_minutes_per_day=480,
        overtime_threshold_weekly=2400,
        overtime_threshold_daily=0,
        daily_double_time_minutes=0,
        seventh_day_rule=False,
        annual_pto_days=0,
        max_carryover_days=0,
    )


def _normalize(jurisdiction: str | None) -> str | None:
    if jurisdiction is None:
        return None
    jurisdiction = jurisdiction.strip().upper()
    return jurisdiction or None


def _latest(candidates: list[Policy]) -> Policy | None:
    if not candidates:
        return None
    # policy_id breaks effective_date ties so the pick never depends on input order
    return max(candidates, key=lambda p: (p.effective_date, str(p.policy_id or "")))


def resolve_effective_policy(
    policies: Iterable[Policy],
    org_id: UUID,
    jurisdiction: str | None = None,
    as_of: date | None = None,
) -> Policy:
    """Resolve the policy in force for an org, jurisdiction and date.

    Resolution order (first match wins):
    1. Active policy for (org, jurisdiction) with the latest effective date,
       only when a jurisdiction is given
    2. Active org default (no jurisdiction) with the latest effective date
    3. The system default

    Policies of other orgs, inactive policies and policies not yet in
    effect on as_of are never candidates. Never returns None.
    """
    wanted = _normalize(jurisdiction)
    candidates = [
        p
        for p in policies
        if p.org_id == org_id
        and p.is_active
        and (as_of is None or p.effective_date <= as_of)
    ]

    chain: list[tuple[str, Callable[[], Policy | None]]] = []
    if wanted is not None:
        chain.append((
            "jurisdiction",
            lambda: _latest([p for p in candidates if _normalize(p.jurisdiction) == wanted]),
        ))
    chain.append((
        "org default",
        lambda: _latest([p for p in candidates if _normalize(p.jurisdiction) is None]),
    ))
    chain.append(("system default", lambda: system_default_policy(org_id)))

    for level, step in chain:
        policy = step()
        if policy is not None:
            logger.debug(
                "Resolved %s policy for org %s (jurisdiction=%s, as_of=%s)",
                level,
                org_id,
                wanted,
                as_of,
            )
            return policy

    raise ConfigurationMissingError(org_id, jurisdiction)


def overtime_policy_for(policy: Policy) -> OvertimePolicy:
    """Derive overtime thresholds from a policy and its jurisdiction bundle.

    The bundle of the policy's jurisdiction (US-FLSA when unknown or unset)
    supplies the base; any threshold set on the policy itself wins.
    """
    bundle = get_jurisdiction(policy.jurisdiction) or KNOWN_JURISDICTIONS[DEFAULT_JURISDICTION]

    def pick(own: int | bool | None, inherited: int | bool) -> int | bool:
        return inherited if own is None else own

    return OvertimePolicy(
        weekly_threshold_minutes=pick(policy.overtime_threshold_weekly, bundle.overtime_weekly_minutes),
        daily_threshold_minutes=pick(policy.overtime_threshold_daily, bundle.overtime_daily_minutes),
        daily_double_time_minutes=pick(
            policy.daily_double_time_minutes, bundle.double_time_daily_minutes
        ),
        seventh_day_rule=bool(pick(policy.seventh_day_rule, bundle.seventh_day_rule)),
    )


def break_rules_for(policy: Policy) -> JurisdictionRules:
    """Break rules in force for a policy.

    Meal and rest settings configured on the policy replace those of its
    jurisdiction bundle; break durations always come from the bundle.
    """
    bundle = get_jurisdiction(policy.jurisdiction) or KNOWN_JURISDICTIONS[DEFAULT_JURISDICTION]
    if policy.meal_break_required and policy.meal_break_after_minutes > 0:
        bundle = replace(
            bundle,
            meal_break_after_minutes=policy.meal_break_after_minutes,
            meal_break_duration_minutes=(
                bundle.meal_break_duration_minutes or DEFAULT_MEAL_BREAK_MINUTES
            ),
        )
    if policy.rest_break_interval > 0:
        bundle = replace(
            bundle,
            rest_break_interval_minutes=policy.rest_break_interval,
            rest_break_duration_minutes=(
                bundle.rest_break_duration_minutes or DEFAULT_REST_BREAK_MINUTES
            ),
        )
    return bundle

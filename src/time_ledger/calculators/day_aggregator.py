"""Work day aggregation from raw clock events.

The scan over a day's events is an explicit fold: ScanState is an
immutable record and apply_event is the transition function.

Transition table:

    event        open session?   open break?   effect
    CLOCK_IN     no              -             open session
    CLOCK_IN     yes             -             close prior session at this instant, open new (anomaly)
    CLOCK_OUT    yes             -             credit worked time, close session
    CLOCK_OUT    no              -             ignored (anomaly)
    BREAK_START  -               no            open break
    BREAK_START  -               yes           close prior break at this instant, open new (anomaly)
    BREAK_END    -               yes           credit break time, close break
    BREAK_END    -               no            ignored (anomaly)
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from functools import reduce
from uuid import UUID

from time_ledger.calculators.dates import day_bounds, to_utc, today_in
from time_ledger.calculators.jurisdictions import JurisdictionRules
from time_ledger.calculators.types import (
    BreakViolation,
    DaySummary,
    EventType,
    Policy,
    RawEvent,
)

logger = logging.getLogger(__name__)

_MS = timedelta(milliseconds=1)


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return max(0, (end - start) // _MS)


@dataclass(frozen=True)
class ScanState:
    """Running state while scanning one day's events."""

    open_clock_in: datetime | None = None
    open_break: datetime | None = None
    worked_ms: int = 0
    break_ms: int = 0
    first_clock_in: datetime | None = None
    last_clock_out: datetime | None = None
    location_id: UUID | None = None
    anomalies: tuple[str, ...] = ()

    def with_anomaly(self, event: RawEvent, reason: str) -> ScanState:
        note = f"{event.event_type.value} {event.event_id} at {to_utc(event.server_timestamp).isoformat()}: {reason}"
        return replace(self, anomalies=self.anomalies + (note,))


def _on_clock_in(state: ScanState, event: RawEvent, ts: datetime) -> ScanState:
    first = ts if state.first_clock_in is None or ts < state.first_clock_in else state.first_clock_in
    if state.open_clock_in is not None:
        state = replace(
            state,
            worked_ms=state.worked_ms + _elapsed_ms(state.open_clock_in, ts),
        ).with_anomaly(event, "clock-in while a session was open; prior session closed here")
    return replace(state, open_clock_in=ts, first_clock_in=first)


def _on_clock_out(state: ScanState, event: RawEvent, ts: datetime) -> ScanState:
    last = ts if state.last_clock_out is None or ts > state.last_clock_out else state.last_clock_out
    if state.open_clock_in is None:
        return replace(state, last_clock_out=last).with_anomaly(event, "clock-out with no open session")
    return replace(
        state,
        worked_ms=state.worked_ms + _elapsed_ms(state.open_clock_in, ts),
        open_clock_in=None,
        last_clock_out=last,
    )


def _on_break_start(state: ScanState, event: RawEvent, ts: datetime) -> ScanState:
    if state.open_break is not None:
        state = replace(
            state,
            break_ms=state.break_ms + _elapsed_ms(state.open_break, ts),
        ).with_anomaly(event, "break start while a break was open; prior break closed here")
    return replace(state, open_break=ts)


def _on_break_end(state: ScanState, event: RawEvent, ts: datetime) -> ScanState:
    if state.open_break is None:
        return state.with_anomaly(event, "break end with no open break")
    return replace(
        state,
        break_ms=state.break_ms + _elapsed_ms(state.open_break, ts),
        open_break=None,
    )


_TRANSITIONS = {
    EventType.CLOCK_IN: _on_clock_in,
    EventType.CLOCK_OUT: _on_clock_out,
    EventType.BREAK_START: _on_break_start,
    EventType.BREAK_END: _on_break_end,
}


def apply_event(state: ScanState, event: RawEvent) -> ScanState:
    """Apply one event to the scan state and return the new state."""
    ts = to_utc(event.server_timestamp)
    state = _TRANSITIONS[EventType(event.event_type)](state, event, ts)
    if event.location_id is not None:
        state = replace(state, location_id=event.location_id)
    return state


def order_events(events: Iterable[RawEvent]) -> list[RawEvent]:
    """Order events by server timestamp, event id breaking ties."""
    return sorted(events, key=lambda e: (to_utc(e.server_timestamp), str(e.event_id)))


def aggregate_day(
    events: Iterable[RawEvent],
    day: date,
    tz_name: str,
    policy: Policy,
    *,
    remote_location_ids: Collection[UUID] = (),
    now: datetime | None = None,
    user_id: UUID | None = None,
) -> DaySummary:
    """Build the DaySummary for one local day from its raw events.

    Only events whose server timestamp falls in [start of day, end of day)
    in tz_name are counted. A session still open at the end of the scan is
    credited up to now only when day is today; otherwise it adds nothing.

    The result depends only on the events, day, timezone, policy, remote
    locations and (for today) now, so repeated calls are identical.
    """
    start, end = day_bounds(day, tz_name)
    now_utc = to_utc(now) if now is not None else datetime.now(timezone.utc)

    in_window = order_events(
        e for e in events if start <= to_utc(e.server_timestamp) < end
    )
    state = reduce(apply_event, in_window, ScanState())

    if state.open_clock_in is not None and day == today_in(tz_name, now_utc):
        live_end = min(now_utc, end)
        state = replace(state, worked_ms=state.worked_ms + _elapsed_ms(state.open_clock_in, live_end))
        if state.open_break is not None:
            state = replace(state, break_ms=state.break_ms + _elapsed_ms(state.open_break, live_end))

    total_minutes = max(0, (state.worked_ms - state.break_ms) // 60000)
    break_minutes = state.break_ms // 60000
    on_site = state.location_id not in remote_location_ids
    meets_policy = total_minutes >= policy.minimum_minutes_per_day and on_site

    if user_id is None and in_window:
        user_id = in_window[0].user_id

    for note in state.anomalies:
        logger.warning("Inconsistent event for user %s on %s: %s", user_id, day, note)

    return DaySummary(
        user_id=user_id,
        date=day,
        total_minutes=total_minutes,
        break_minutes=break_minutes,
        first_clock_in=state.first_clock_in,
        last_clock_out=state.last_clock_out,
        meets_policy=meets_policy,
        location_id=state.location_id,
        event_count=len(in_window),
        anomalies=state.anomalies,
    )


def evaluate_break_compliance(summary: DaySummary, rules: JurisdictionRules) -> list[BreakViolation]:
    """Check a day's recorded breaks against meal and rest break rules."""
    violations: list[BreakViolation] = []
    remaining_break = summary.break_minutes

    if rules.meal_break_required and summary.total_minutes > rules.meal_break_after_minutes:
        if remaining_break < rules.meal_break_duration_minutes:
            violations.append(
                BreakViolation(
                    kind="meal",
                    required_minutes=rules.meal_break_duration_minutes,
                    recorded_minutes=remaining_break,
                    explanation=(
                        f"Worked {summary.total_minutes}m; a {rules.meal_break_duration_minutes}m "
                        f"meal break is required after {rules.meal_break_after_minutes}m"
                    ),
                )
            )
        remaining_break = max(0, remaining_break - rules.meal_break_duration_minutes)

    if rules.rest_break_required:
        owed = (summary.total_minutes // rules.rest_break_interval_minutes) * rules.rest_break_duration_minutes
        if remaining_break < owed:
            violations.append(
                BreakViolation(
                    kind="rest",
                    required_minutes=owed,
                    recorded_minutes=remaining_break,
                    explanation=(
                        f"Worked {summary.total_minutes}m; {owed}m of rest breaks owed "
                        f"({rules.rest_break_duration_minutes}m every {rules.rest_break_interval_minutes}m)"
                    ),
                )
            )

    return violations

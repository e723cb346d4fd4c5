# =============================================================================
# core/classifiers.py - Team Tiers & Event Timeline
# =============================================================================
# Pure functions that turn fetched rows into what the public pages display:
# - classify_members(): administration + four student council tiers
# - partition_events(): upcoming / past split at day granularity
#
# Both accept raw backend rows or already-validated models. Rows that fail
# validation (no name, rank outside 1-7, unparseable date, ...) are logged
# and left out rather than failing the whole page.
# =============================================================================

import logging
from datetime import date
from typing import Any, Iterable, Literal, Mapping

from pydantic import ValidationError

from core.backend import OrderBy
from core.models.event import Event, EventPartition, EventView
from core.models.member import Member, MemberCategory, TeamRoster

logger = logging.getLogger(__name__)

AdministrationRule = Literal["category", "rank"]

# Under the rank rule, ranks up to this value are the administration
ADMINISTRATION_MAX_RANK = 2

# Student council tier for each rank. Ranks 1-2 only reach the student
# branch under the category rule; they sit with the most senior students.
STUDENT_TIER_BY_RANK = {
    1: "executive_core",
    2: "executive_core",
    3: "executive_core",
    4: "executive_core",
    5: "secretaries",
    6: "co_secretaries",
    7: "general_council",
}


# =============================================================================
# Boundary Validation
# =============================================================================

def validate_members(records: Iterable[Member | Mapping[str, Any]]) -> list[Member]:
    """Validate member rows, dropping (and logging) the malformed ones."""
    members: list[Member] = []
    for record in records:
        if isinstance(record, Member):
            members.append(record)
            continue
        try:
            members.append(Member.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed member row {record.get('id')!r}: "
                f"{e.error_count()} validation error(s)"
            )
    return members


def validate_events(records: Iterable[Event | Mapping[str, Any]]) -> list[Event]:
    """Validate event rows, dropping (and logging) the malformed ones."""
    events: list[Event] = []
    for record in records:
        if isinstance(record, Event):
            events.append(record)
            continue
        try:
            events.append(Event.model_validate(record))
        except ValidationError as e:
            logger.warning(
                f"Skipping event row {record.get('id')!r} "
                f"(event_date={record.get('event_date')!r}): {e.errors()[0]['msg']}"
            )
    return events


# =============================================================================
# Member Tiers
# =============================================================================

def is_administration(member: Member, rule: AdministrationRule = "category") -> bool:
    """Apply exactly one administration rule."""
    if rule == "rank":
        return member.rank <= ADMINISTRATION_MAX_RANK
    return member.category == MemberCategory.ADMINISTRATION


def classify_members(
    records: Iterable[Member | Mapping[str, Any]],
    rule: AdministrationRule = "category",
) -> TeamRoster:
    """
    Group members into the team page tiers.

    Input order is preserved inside every tier, so rows fetched by rank
    ascending stay sorted.

    Args:
        records: Member rows or models
        rule: "category" (category == administration) or "rank" (rank <= 2)

    Returns:
        TeamRoster with every valid member in exactly one tier

    Example:
        roster = classify_members([
            {"id": 1, "name": "Dr. Rao", "role": "Director", "rank": 1, "category": "administration"},
            {"id": 2, "name": "Asha", "role": "President", "rank": 3},
        ])
        roster.administration  # [Dr. Rao]
        roster.executive_core  # [Asha]
    """
    tiers: dict[str, list[Member]] = {name: [] for name in TeamRoster.model_fields}

    for member in validate_members(records):
        if is_administration(member, rule):
            tiers["administration"].append(member)
        else:
            tiers[STUDENT_TIER_BY_RANK[member.rank]].append(member)

    return TeamRoster(**tiers)


# =============================================================================
# Event Timeline
# =============================================================================

def order_for_view(view: EventView) -> OrderBy:
    """Backend sort for a view: soonest first when upcoming, latest first when past."""
    return OrderBy("event_date", ascending=view == EventView.UPCOMING)


def partition_events(
    records: Iterable[Event | Mapping[str, Any]],
    today: date | None = None,
) -> EventPartition:
    """
    Split events into upcoming (dated today or later) and past.

    Dates are compared as calendar days, so an event dated today is always
    upcoming whatever its time of day. Input order is preserved.
    """
    today = today or date.today()
    partition = EventPartition()

    for event in validate_events(records):
        if event.event_date >= today:
            partition.upcoming.append(event)
        else:
            partition.past.append(event)

    return partition

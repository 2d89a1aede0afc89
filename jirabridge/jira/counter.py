"""Occurrence counter stored in a Jira custom field.

A ticket that exists has happened at least once, so every value that can't
be read cleanly counts as 1 rather than 0.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Optional

from jirabridge.jira.errors import CounterUpdateFailed
from jirabridge.jira.models import TicketRef
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_error, log_info, log_warning

FIRST_OCCURRENCE = 1


@dataclass(frozen=True)
class CountResult:
    """Parsed counter value; ``fallback_reason`` is set when the raw value
    was unusable and ``value`` is the default."""

    value: int
    fallback_reason: Optional[str] = None

    @classmethod
    def ok(cls, value: int) -> CountResult:
        return cls(value=value)

    @classmethod
    def fallback(cls, reason: str) -> CountResult:
        return cls(value=FIRST_OCCURRENCE, fallback_reason=reason)

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None


def _checked(value: int, raw: Any) -> CountResult:
    if value < FIRST_OCCURRENCE:
        return CountResult.fallback(f"non-positive counter value {raw!r}")
    return CountResult.ok(value)


def parse_count(raw: Any) -> CountResult:
    """Read a counter field value. Never raises; the value is always >= 1."""
    if raw is None:
        return CountResult.ok(FIRST_OCCURRENCE)

    # bool is a Number subclass but never a valid count
    if isinstance(raw, bool):
        return CountResult.fallback(f"non-integer value of type {type(raw).__name__}")

    if isinstance(raw, numbers.Number):
        try:
            if isinstance(raw, float) and not math.isfinite(raw):
                return CountResult.fallback(f"non-finite counter value {raw!r}")
            return _checked(int(raw), raw)
        except (TypeError, ValueError, OverflowError):
            return CountResult.fallback(f"non-integer value of type {type(raw).__name__}")

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return CountResult.ok(FIRST_OCCURRENCE)
        try:
            return _checked(int(text), raw)
        except ValueError:
            return CountResult.fallback(f'non-integer string value "{text}"')

    return CountResult.fallback(f"non-integer value of type {type(raw).__name__}")


def read_count(repository: TicketRepository, ticket: TicketRef, counter_field: str) -> CountResult:
    """Parse the counter from the ticket snapshot, fetching it when the
    snapshot was taken without the field."""
    if ticket.has_field(counter_field):
        raw = ticket.get_field(counter_field)
    else:
        raw = repository.get_field(ticket, counter_field)
    result = parse_count(raw)
    if result.is_fallback:
        log_warning(f"Counter field '{counter_field}' is unusable, defaulting to {result.value}",
                    ticket_key=ticket.key, reason=result.fallback_reason)
    return result


def increment_and_apply(
    repository: TicketRepository,
    ticket: TicketRef,
    counter_field: str,
    *,
    project: Optional[str] = None,
    fingerprint: Optional[str] = None,
) -> Optional[int]:
    """Bump the occurrence counter on ``ticket``.

    Returns the new value, or ``None`` when counting is disabled.
    Raises ``CounterUpdateFailed`` if the tracker rejects the read or update.
    """
    if not counter_field:
        log_info("No counter field configured; occurrences of this problem are not tracked",
                 ticket_key=ticket.key)
        return None

    try:
        new_count = read_count(repository, ticket, counter_field).value + 1
        repository.update_field(ticket, counter_field, new_count)
    except Exception as e:
        log_error("Error updating Jira occurrence counter", ticket_key=ticket.key,
                  counter_field=counter_field, error=str(e))
        raise CounterUpdateFailed(
            f"Failed updating occurrence count on {ticket.key}",
            project=project, fingerprint=fingerprint, ticket_key=ticket.key,
        ) from e

    log_info("Updated occurrence count", ticket_key=ticket.key, project=project, count=new_count)
    return new_count

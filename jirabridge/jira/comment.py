"""Comments on existing tickets for repeated alerts."""
from __future__ import annotations

from typing import Optional

from jirabridge.jira.errors import CommentFailed
from jirabridge.jira.models import TicketRef
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_error, log_ticket_operation


def maybe_add_comment(
    repository: TicketRepository,
    ticket: TicketRef,
    text: str,
    enabled: bool,
    *,
    project: Optional[str] = None,
    fingerprint: Optional[str] = None,
) -> bool:
    """Post ``text`` verbatim as a comment when ``enabled``.

    Returns whether a comment was posted.
    """
    if not enabled:
        return False

    try:
        repository.add_comment(ticket, text)
    except Exception as e:
        msg = f"Error adding Jira comment to ticket {ticket.key}"
        log_error(msg, error=str(e))
        raise CommentFailed(msg, project=project, fingerprint=fingerprint, ticket_key=ticket.key) from e

    log_ticket_operation("comment", ticket.key, project=project)
    return True

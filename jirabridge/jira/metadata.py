"""Discovery of the fingerprint custom field from Jira create metadata."""
from __future__ import annotations

from typing import Mapping, Optional

from jirabridge.jira.errors import FieldDiscoveryFailed
from jirabridge.jira.models import FieldMeta
from jirabridge.jira.query import FINGERPRINT_FIELD_NAME
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_error, log_info, log_warning


def find_field_by_name(metadata: Mapping[str, FieldMeta], display_name: str) -> Optional[str]:
    """Return the key of the first custom field named ``display_name``
    (case-insensitive), or ``None``."""
    wanted = display_name.lower()
    for key, meta in metadata.items():
        if meta.is_custom and (meta.display_name or "").lower() == wanted:
            return key
    return None


def discover_fingerprint_field_name(
    repository: TicketRepository,
    project: str,
    issue_type: str,
) -> Optional[str]:
    """Look up the custom field holding the fingerprint for a project and
    issue type. Requires the Jira user to have create permissions."""
    log_warning("It is more efficient to configure JIRA_MD5_CUSTOM_FIELD than to discover it on every new ticket",
                project=project, issue_type=issue_type)
    try:
        metadata = repository.get_field_metadata(project, issue_type)
        field_key = find_field_by_name(metadata, FINGERPRINT_FIELD_NAME)
    except Exception as e:
        log_error("Error getting Jira create metadata", project=project, issue_type=issue_type, error=str(e))
        raise FieldDiscoveryFailed("Failed retrieving fingerprint field", project=project) from e

    if field_key:
        log_info("Discovered fingerprint field", project=project, field=field_key)
    return field_key

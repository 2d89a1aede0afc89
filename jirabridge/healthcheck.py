"""Health checks for the Jira bridge.

Verifies the configuration and that the configured project / issue type is
reachable before alerts start flowing.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from jirabridge.config import Config, get_config
from jirabridge.jira.errors import TrackerError
from jirabridge.jira.metadata import find_field_by_name
from jirabridge.jira.query import FINGERPRINT_FIELD_NAME
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_error, log_info


@dataclass
class HealthCheckResult:
    """Result of a single health check."""
    service: str
    healthy: bool
    message: str
    details: Dict[str, Any] = None

    def __post_init__(self):
        if self.details is None:
            self.details = {}


def check_configuration(config: Config) -> HealthCheckResult:
    """Check that the required settings are present and consistent."""
    issues = config.validate_configuration()
    if issues:
        return HealthCheckResult(
            service="Configuration",
            healthy=False,
            message="; ".join(issues),
            details={"issues": issues},
        )
    return HealthCheckResult(service="Configuration", healthy=True, message="OK")


def check_jira(repository: TicketRepository, config: Config) -> HealthCheckResult:
    """Check Jira connectivity via the create metadata of the target project.

    Also reports how the fingerprint will be stored on new tickets.
    """
    project = config.jira_project_key
    issue_type = config.jira_issue_type
    try:
        metadata = repository.get_field_metadata(project, issue_type)
    except TrackerError as e:
        error_msg = e.message
        if len(error_msg) > 100:
            error_msg = error_msg[:100] + "..."
        if e.status_code == 401:
            error_msg = "Authentication failed (check JIRA_USER and JIRA_API_TOKEN)"
        elif e.status_code == 403:
            error_msg = "Access forbidden (check create permissions on the project)"
        return HealthCheckResult(service="Jira", healthy=False, message=f"Connection failed: {error_msg}")

    if not metadata:
        return HealthCheckResult(
            service="Jira",
            healthy=False,
            message=f"No create metadata for project {project} / issue type {issue_type}",
        )

    fingerprint_storage = _fingerprint_storage(metadata, config)
    return HealthCheckResult(
        service="Jira",
        healthy=True,
        message=f"Connected ({config.jira_url})",
        details={
            "project": project,
            "issue_type": issue_type,
            "fields": len(metadata),
            "fingerprint_storage": fingerprint_storage,
        },
    )


def _fingerprint_storage(metadata, config: Config) -> str:
    if config.jira_md5_custom_field:
        return f"configured field {config.jira_md5_custom_field}"
    discovered: Optional[str] = find_field_by_name(metadata, FINGERPRINT_FIELD_NAME)
    if discovered:
        return f"discovered field {discovered} (set JIRA_MD5_CUSTOM_FIELD={discovered} to skip discovery)"
    return "inlined into the description"


def run_health_checks(
    repository: Optional[TicketRepository] = None,
    config: Optional[Config] = None,
    verbose: bool = True,
) -> Tuple[bool, List[HealthCheckResult]]:
    """Run all health checks.

    Args:
        repository: Tracker to probe; defaults to a ``JiraRestClient``.
        config: Configuration; defaults to the global instance.
        verbose: If True, print results to stdout

    Returns:
        Tuple of (all_healthy, list of results)
    """
    config = config or get_config()
    results = [check_configuration(config)]

    if results[0].healthy:
        if repository is None:
            from jirabridge.jira.client import JiraRestClient
            repository = JiraRestClient.from_config(config)
        results.append(check_jira(repository, config))

    all_healthy = all(r.healthy for r in results)

    if verbose:
        print()
        for r in results:
            icon = "✓" if r.healthy else "✗"
            print(f"  {r.service}: {icon} {r.message}")
            if r.details.get("fingerprint_storage"):
                print(f"    fingerprint: {r.details['fingerprint_storage']}")
        print()

    for result in results:
        if result.healthy:
            log_info(f"Health check passed: {result.service}", **result.details)
        else:
            log_error(f"Health check failed: {result.service}", error=result.message)

    return all_healthy, results


if __name__ == "__main__":
    # Allow running directly: python -m jirabridge.healthcheck
    from dotenv import load_dotenv
    load_dotenv()

    all_healthy, _ = run_health_checks()
    sys.exit(0 if all_healthy else 1)

"""HTTP client for the Jira REST API (v2).

Implements ``TicketRepository`` on top of a ``requests.Session``. Every
failure is raised as ``TrackerError``; the engine decides how to report it.
"""
from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional, Sequence

import requests

from jirabridge.jira.errors import TrackerError
from jirabridge.jira.models import FieldMeta, TicketRef
from jirabridge.jira.repository import TicketRepository
from jirabridge.utils.logger import log_api_response, log_error

SEARCH_PAGE_SIZE = 100

# Logical field -> Jira wire shape
_NAMED_FIELDS = ("priority",)
_NAMED_LIST_FIELDS = ("components",)


def to_wire_fields(project: str, issue_type: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Translate logical ticket fields into a Jira create payload."""
    wire: Dict[str, Any] = {
        "project": {"key": project},
        "issuetype": {"name": issue_type},
    }
    for name, value in fields.items():
        if name in _NAMED_FIELDS and isinstance(value, str):
            wire[name] = {"name": value}
        elif name in _NAMED_LIST_FIELDS and isinstance(value, list):
            wire[name] = [{"name": v} for v in value]
        else:
            wire[name] = value
    return {"fields": wire}


def _response_preview(exc: requests.RequestException) -> Optional[str]:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    try:
        return response.text[:500]
    except (AttributeError, TypeError):
        return None


def _expect(operation: str, value: Any, kind: type, what: str) -> Any:
    """Return ``value`` if it has the expected JSON type, else raise ``TrackerError``."""
    if not isinstance(value, kind):
        raise TrackerError(f"Jira {operation} returned malformed {what}: expected {kind.__name__}, "
                           f"got {type(value).__name__}")
    return value


class JiraRestClient(TicketRepository):
    """Jira REST client with basic authentication."""

    def __init__(
        self,
        base_url: str,
        user: str,
        api_token: str,
        *,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.api_token = api_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(self._headers())

    @classmethod
    def from_config(cls, config) -> JiraRestClient:
        return cls(
            config.jira_url,
            config.jira_user,
            config.jira_api_token,
            timeout=config.jira_timeout,
        )

    def _headers(self) -> Dict[str, str]:
        auth_string = f"{self.user}:{self.api_token}"
        auth_encoded = base64.b64encode(auth_string.encode()).decode()
        return {
            "Authorization": f"Basic {auth_encoded}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.base_url}/rest/api/2/{path}"

    def _request(self, operation: str, method: str, path: str, **kwargs) -> Any:
        """Perform a request and return the decoded JSON body (or ``None``)."""
        try:
            resp = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            preview = _response_preview(e)
            status = getattr(getattr(e, "response", None), "status_code", None)
            if preview:
                log_error(f"Jira {operation} failed", error=str(e), response=preview)
            else:
                log_error(f"Jira {operation} failed", error=str(e))
            raise TrackerError(f"Jira {operation} failed: {e}", status_code=status, response=preview) from e

        if resp.status_code == 204 or not resp.content:
            log_api_response(f"Jira {operation}", resp.status_code)
            return None
        try:
            data = resp.json()
        except ValueError as e:
            raise TrackerError(f"Jira {operation} returned invalid JSON", status_code=resp.status_code) from e
        log_api_response(f"Jira {operation}", resp.status_code, data if isinstance(data, dict) else None)
        return data

    # ------------------------------------------------------------------
    # TicketRepository
    # ------------------------------------------------------------------

    def search(
        self,
        project: str,
        query: str,
        attributes: Sequence[str],
        max_results: Optional[int] = None,
    ) -> List[TicketRef]:
        tickets: List[TicketRef] = []
        start_at = 0
        while True:
            page_size = SEARCH_PAGE_SIZE if max_results is None else min(SEARCH_PAGE_SIZE, max_results - len(tickets))
            data = _expect("search", self._request("search", "POST", "search", json={
                "jql": query,
                "startAt": start_at,
                "maxResults": page_size,
                "fields": list(attributes),
            }) or {}, dict, "response body")
            issues = _expect("search", data.get("issues") or [], list, "issue list")
            for issue in issues:
                _expect("search", issue, dict, "issue")
                _expect("search", issue.get("key"), str, "issue key")
                _expect("search", issue.get("fields") or {}, dict, "issue fields")
            tickets.extend(TicketRef.from_issue(issue) for issue in issues)
            start_at += len(issues)

            total = data.get("total", 0)
            if not isinstance(total, int) or isinstance(total, bool):
                total = start_at
            if not issues or start_at >= total:
                break
            if max_results is not None and len(tickets) >= max_results:
                break
        return tickets

    def create(self, project: str, issue_type: str, fields: Dict[str, Any]) -> TicketRef:
        data = self._request("issue creation", "POST", "issue", json=to_wire_fields(project, issue_type, fields))
        if not isinstance(data, dict) or not data.get("key"):
            raise TrackerError("Jira issue creation returned no issue key")
        return TicketRef(key=data["key"], id=data.get("id"), summary=fields.get("summary"))

    def add_comment(self, ticket: TicketRef, text: str) -> None:
        self._request("comment addition", "POST", f"issue/{ticket.key}/comment", json={"body": text})

    def update_field(self, ticket: TicketRef, field_name: str, value: Any) -> None:
        self._request("field update", "PUT", f"issue/{ticket.key}", json={"fields": {field_name: value}})

    def get_field_metadata(self, project: str, issue_type: str) -> Dict[str, FieldMeta]:
        data = self._request("create metadata", "GET", "issue/createmeta", params={
            "projectKeys": project,
            "issuetypeNames": issue_type,
            "expand": "projects.issuetypes.fields",
        }) or {}
        op = "create metadata"
        _expect(op, data, dict, "response body")
        metadata: Dict[str, FieldMeta] = {}
        for proj in _expect(op, data.get("projects") or [], list, "project list"):
            _expect(op, proj, dict, "project")
            for itype in _expect(op, proj.get("issuetypes") or [], list, "issue type list"):
                _expect(op, itype, dict, "issue type")
                for key, meta in _expect(op, itype.get("fields") or {}, dict, "field map").items():
                    meta = _expect(op, meta or {}, dict, "field metadata")
                    metadata[key] = FieldMeta(key=key, display_name=str(meta.get("name") or ""))
        return metadata

    def get_field(self, ticket: TicketRef, field_name: str) -> Any:
        data = self._request("issue fetch", "GET", f"issue/{ticket.key}", params={"fields": field_name}) or {}
        _expect("issue fetch", data, dict, "response body")
        return _expect("issue fetch", data.get("fields") or {}, dict, "issue fields").get(field_name)

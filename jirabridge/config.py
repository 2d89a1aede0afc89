"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the Jira alert bridge.
"""
import json
import re
from typing import Dict, List

from pydantic import Field, validator
from pydantic_settings import BaseSettings

_PROJECT_KEY_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # Jira connection
    jira_url: str = Field("", env="JIRA_URL", description="Jira server base URL")
    jira_user: str = Field("", env="JIRA_USER", description="Jira user name or email")
    jira_api_token: str = Field("", env="JIRA_API_TOKEN", description="Jira password or API token")
    jira_timeout: int = Field(30, env="JIRA_TIMEOUT", ge=1, le=300, description="Request timeout in seconds")

    # Ticket layout
    jira_project_key: str = Field("", env="JIRA_PROJECT_KEY", description="Jira project key")
    jira_issue_type: str = Field("Bug", env="JIRA_ISSUE_TYPE", description="Issue type for new tickets")
    jira_priority: str = Field("Minor", env="JIRA_PRIORITY", description="Priority for new tickets")
    jira_title: str = Field("[Graylog] Alert", env="JIRA_TITLE", description="Default ticket title")
    jira_description: str = Field("", env="JIRA_DESCRIPTION", description="Default ticket description")
    jira_description_as_comment: bool = Field(
        False, env="JIRA_DESCRIPTION_AS_COMMENT", description="Add the description as a comment on repeat alerts"
    )
    jira_labels: str = Field("graylog", env="JIRA_LABELS", description="Comma-separated labels")
    jira_components: str = Field("", env="JIRA_COMPONENTS", description="Comma-separated components")

    # Deduplication
    jira_duplicate_filter_query: str = Field(
        "", env="JIRA_DUPLICATE_FILTER_QUERY", description="JQL fragment appended to the duplicate search"
    )
    jira_md5_custom_field: str = Field(
        "", env="JIRA_MD5_CUSTOM_FIELD", description="Custom field holding the fingerprint"
    )
    jira_md5_history: bool = Field(
        False, env="JIRA_MD5_HISTORY", description="Append previous tickets for the fingerprint to new tickets"
    )
    jira_counter_custom_field: str = Field(
        "", env="JIRA_COUNTER_CUSTOM_FIELD", description="Custom field tracking occurrence counts"
    )

    # Field auto-mapping (JSON object, "field#i" keys are submitted as lists)
    jira_field_mapping: str = Field("", env="JIRA_FIELD_MAPPING", description="JSON object of extra Jira fields")

    # Logging
    log_level: str = Field("INFO", env="LOG_LEVEL", description="Logging level")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", env="LOG_FORMAT", description="Log format"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @validator('jira_url')
    def validate_jira_url(cls, v):
        v = v.strip().rstrip("/")
        if v and not v.startswith(("http://", "https://")):
            raise ValueError('jira_url must start with http:// or https://')
        return v

    @validator('jira_duplicate_filter_query', 'jira_md5_custom_field', 'jira_counter_custom_field')
    def strip_optional(cls, v):
        return (v or "").strip()

    @validator('jira_field_mapping')
    def validate_field_mapping(cls, v):
        if v.strip():
            try:
                mapping = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f'Invalid JSON in jira_field_mapping: {e}')
            if not isinstance(mapping, dict):
                raise ValueError('jira_field_mapping must be a JSON object')
            for key, value in mapping.items():
                if isinstance(value, (dict, list)):
                    raise ValueError(f'Mapping value for "{key}" must be a scalar')
        return v

    @validator('log_level')
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    def get_field_mapping(self) -> Dict[str, str]:
        """Parse and return the field mapping, preserving its key order.

        Non-string scalars keep their JSON spelling (``true``, ``1.5``).
        """
        if not self.jira_field_mapping.strip():
            return {}
        return {
            k: v if isinstance(v, str) else json.dumps(v)
            for k, v in json.loads(self.jira_field_mapping).items()
            if v is not None
        }

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        if not self.jira_url:
            issues.append("JIRA_URL is required")
        if not self.jira_user:
            issues.append("JIRA_USER is required")
        if not self.jira_api_token:
            issues.append("JIRA_API_TOKEN is required")
        if not self.jira_project_key:
            issues.append("JIRA_PROJECT_KEY is required")
        elif not _PROJECT_KEY_RE.match(self.jira_project_key):
            issues.append("JIRA_PROJECT_KEY must be an upper-case Jira project key (e.g. OPS)")
        if not self.jira_issue_type.strip():
            issues.append("JIRA_ISSUE_TYPE is required")
        if not self.jira_title.strip():
            issues.append("JIRA_TITLE must not be empty")

        if self.jira_md5_custom_field and self.jira_md5_custom_field == self.jira_counter_custom_field:
            issues.append("JIRA_MD5_CUSTOM_FIELD and JIRA_COUNTER_CUSTOM_FIELD must be different fields")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from jirabridge.utils.logger import log_info

        log_info("Configuration loaded",
                 jira_url=self.jira_url,
                 jira_project=self.jira_project_key,
                 issue_type=self.jira_issue_type,
                 duplicate_filter=self.jira_duplicate_filter_query,
                 md5_field=self.jira_md5_custom_field or "<auto>",
                 counter_field=self.jira_counter_custom_field or "<disabled>",
                 history=self.jira_md5_history,
                 description_as_comment=self.jira_description_as_comment,
                 mapped_fields=list(self.get_field_mapping()),
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config

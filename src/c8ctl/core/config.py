"""Cluster connection configuration resolved from the environment."""

import os
import re
from typing import Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:8080/v2"
DEFAULT_USERNAME = "demo"
DEFAULT_PASSWORD = "demo"
DEFAULT_TENANT_ID = "<default>"

_URL_PATTERN = re.compile(r"^https?://")


def init_env(dotenv_path: Optional[str] = None) -> None:
    """
    Initialize environment variables for the cluster connection.

    Args:
        dotenv_path: Optional path to a specific .env file to load.
    """
    load_dotenv(dotenv_path=dotenv_path, override=False)


class ClusterConfig:
    """Configuration for the cluster REST connection.

    Values passed explicitly win over ``CAMUNDA_*`` environment variables.
    Without a base URL anywhere, the local development cluster is assumed
    with its demo credentials.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        audience: Optional[str] = None,
        oauth_url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        env_base_url = os.environ.get("CAMUNDA_BASE_URL")
        self.base_url: str = (base_url or env_base_url or DEFAULT_BASE_URL).rstrip("/")
        self.client_id: Optional[str] = client_id or os.environ.get("CAMUNDA_CLIENT_ID")
        self.client_secret: Optional[str] = client_secret or os.environ.get(
            "CAMUNDA_CLIENT_SECRET"
        )
        self.audience: Optional[str] = audience or os.environ.get("CAMUNDA_AUDIENCE")
        self.oauth_url: Optional[str] = oauth_url or os.environ.get("CAMUNDA_OAUTH_URL")
        self.username: Optional[str] = username or os.environ.get("CAMUNDA_USERNAME")
        self.password: Optional[str] = password or os.environ.get("CAMUNDA_PASSWORD")

        if not (base_url or env_base_url) and not self.username and not self.client_id:
            self.username = DEFAULT_USERNAME
            self.password = DEFAULT_PASSWORD

        self.timeout: float = float(os.environ.get("C8CTL_HTTP_TIMEOUT", "30"))
        verify_env = os.environ.get("C8CTL_HTTP_VERIFY", "true").lower()
        self.verify: bool = verify_env not in {"0", "false", "no"}

    @property
    def uses_oauth(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def validate(self) -> None:
        """Validate the resolved connection settings."""
        problems = []

        if not _URL_PATTERN.match(self.base_url):
            problems.append(f"base URL must start with http:// or https:// (got '{self.base_url}')")
        if bool(self.client_id) != bool(self.client_secret):
            problems.append("CAMUNDA_CLIENT_ID and CAMUNDA_CLIENT_SECRET must be set together")
        if self.uses_oauth and not self.oauth_url:
            problems.append("CAMUNDA_OAUTH_URL is required for OAuth authentication")

        if problems:
            raise ValueError(
                "Invalid cluster configuration: "
                f"{'; '.join(problems)}. "
                "Please set these in your environment or .env file."
            )


def resolve_tenant_id(explicit: Optional[str] = None) -> str:
    """Resolve the tenant to deploy into.

    Priority: explicit value, CAMUNDA_DEFAULT_TENANT_ID, then the default tenant.
    """
    if explicit:
        return explicit
    return os.environ.get("CAMUNDA_DEFAULT_TENANT_ID") or DEFAULT_TENANT_ID

"""REST client for the Camunda 8 orchestration cluster."""

import errno
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from c8ctl.core.config import ClusterConfig, init_env
from c8ctl.core.exceptions import ApiError, TransportError, UnknownError
from c8ctl.core.models import DeploymentResult, ProblemDetail

logger = logging.getLogger(__name__)

# (file name, content, MIME type)
ResourceBlob = Tuple[str, bytes, str]

_ERRNO_CODES = {
    errno.ECONNREFUSED: "refused",
    errno.EHOSTUNREACH: "host-unreachable",
    errno.ENETUNREACH: "host-unreachable",
    errno.ECONNRESET: "reset",
    errno.EPIPE: "reset",
    errno.ETIMEDOUT: "timed-out",
    errno.ECONNABORTED: "aborted",
}

_MESSAGE_CODES = [
    ("refused", "refused"),
    ("unreachable", "host-unreachable"),
    ("name or service not known", "host-unreachable"),
    ("nodename nor servname", "host-unreachable"),
    ("reset", "reset"),
    ("timed out", "timed-out"),
    ("aborted", "aborted"),
]


def transport_failure_code(exc: BaseException) -> Optional[str]:
    """Narrow an httpx transport failure down to a known failure code.

    Looks at the exception type first, then at the errno of any OSError in
    the cause chain, then at the message text.
    """
    if isinstance(exc, httpx.TimeoutException):
        return "timed-out"

    current: Optional[BaseException] = exc
    seen = set()
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, OSError) and current.errno in _ERRNO_CODES:
            return _ERRNO_CODES[current.errno]
        current = current.__cause__ or current.__context__

    message = str(exc).lower()
    for needle, code in _MESSAGE_CODES:
        if needle in message:
            return code

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError)):
        return "reset"
    return None


def _problem_from_response(response: httpx.Response) -> ProblemDetail:
    """Parse a problem document, or synthesize one from a plain error body."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and ("title" in payload or "detail" in payload):
        return ProblemDetail.model_validate(payload)

    text = response.text.strip()
    return ProblemDetail(
        title=None,
        status=response.status_code,
        detail=text or response.reason_phrase or None,
    )


def _json_body(response: httpx.Response) -> Dict[str, Any]:
    """Decode a successful response body that must be a JSON object.

    Raises:
        UnknownError: If the body is not a JSON object
    """
    try:
        payload = response.json()
    except ValueError as e:
        raise UnknownError(
            f"Invalid JSON in response from {response.request.url}: {e}"
        ) from e
    if not isinstance(payload, dict):
        raise UnknownError(f"Unexpected response from {response.request.url}: {payload!r}")
    return payload


class ClusterClient:
    """Thin wrapper over an httpx client bound to one cluster."""

    def __init__(
        self, config: ClusterConfig, http_client: Optional[httpx.Client] = None
    ) -> None:
        self.config = config
        self._http = http_client or httpx.Client(timeout=config.timeout, verify=config.verify)
        self._token: Optional[str] = None

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ClusterClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _fetch_token(self) -> str:
        """Fetch an OAuth access token with the client-credentials grant.

        Raises:
            ValueError: If no token URL is configured
            ApiError: If the token request is rejected or returns no token
        """
        if not self.config.oauth_url:
            raise ValueError("CAMUNDA_OAUTH_URL is required for OAuth authentication")
        data = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
        }
        if self.config.audience:
            data["audience"] = self.config.audience
        response = self._send("POST", self.config.oauth_url, data=data)
        token = _json_body(response).get("access_token")
        if not token:
            raise ApiError(
                response.status_code,
                ProblemDetail(title="UNAUTHENTICATED", detail="No access_token in OAuth response"),
            )
        logger.debug("OAuth token acquired")
        return token

    def _auth(self) -> Dict[str, Any]:
        if self.config.uses_oauth:
            if self._token is None:
                self._token = self._fetch_token()
            return {"headers": {"Authorization": f"Bearer {self._token}"}}
        if self.config.username:
            return {"auth": (self.config.username, self.config.password or "")}
        return {}

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request, mapping failures onto the exception taxonomy."""
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            code = transport_failure_code(e)
            logger.debug(f"Transport failure ({code}) on {method} {url}: {e}")
            raise TransportError(str(e) or type(e).__name__, code=code) from e

        if response.status_code >= 400:
            problem = _problem_from_response(response)
            logger.debug(f"{method} {url} rejected with {response.status_code}: {problem.title}")
            raise ApiError(response.status_code, problem)
        return response

    def deploy_resources(self, tenant_id: str, resources: List[ResourceBlob]) -> DeploymentResult:
        """Deploy a batch of resources in a single request.

        Args:
            tenant_id: Tenant to deploy into
            resources: (name, content, MIME type) for every resource

        Returns:
            The parsed deployment result
        """
        files = [("resources", (name, content, mime)) for name, content, mime in resources]
        response = self._send(
            "POST",
            f"{self.config.base_url}/deployments",
            data={"tenantId": tenant_id},
            files=files,
            **self._auth(),
        )
        return DeploymentResult.from_api(_json_body(response))

    def create_process_instance(
        self,
        process_definition_id: str,
        tenant_id: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Start the latest version of a process definition.

        Returns:
            The key of the created process instance
        """
        body: Dict[str, Any] = {
            "processDefinitionId": process_definition_id,
            "tenantId": tenant_id,
        }
        if variables:
            body["variables"] = variables
        response = self._send(
            "POST",
            f"{self.config.base_url}/process-instances",
            json=body,
            **self._auth(),
        )
        return str(_json_body(response).get("processInstanceKey", ""))


def create_client(config: Optional[ClusterConfig] = None) -> ClusterClient:
    """Create a cluster client from explicit or environment configuration.

    Raises:
        ValueError: If the resolved configuration is invalid
    """
    if config is None:
        init_env()
        config = ClusterConfig()
    config.validate()
    logger.debug(f"Using cluster at {config.base_url}")
    return ClusterClient(config)

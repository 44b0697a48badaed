"""HTTP client shared by the remote collaborator gateways."""
import logging
import requests
from typing import Optional, Dict, Any
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from borrowing_service.config.settings import Config
from borrowing_service.domain.exceptions import GatewayCommunicationError, RecordNotFoundError


class ServiceHttpClient:
    """
    JSON-over-HTTP client for one collaborator service.

    Every call is bounded by a timeout. Transport failures, timeouts,
    server errors and unparseable bodies surface as
    ``GatewayCommunicationError``; a 404 surfaces as ``RecordNotFoundError``.
    """

    def __init__(
        self,
        service_name: str,
        base_url: Optional[str],
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            service_name: Name used in logs and errors (e.g. "catalog")
            base_url: Root URL of the service
            timeout: Per-request timeout in seconds (defaults to Config value)
            max_retries: Retries for idempotent requests (defaults to Config value)
            session: Pre-built session (Dependency Injection, for tests)
        """
        self.service_name = service_name
        self.base_url = base_url
        self.timeout = timeout if timeout is not None else Config.GATEWAY_TIMEOUT_SECONDS
        self._logger = logging.getLogger(__name__)
        self.session = session or self._create_session(
            max_retries if max_retries is not None else Config.GATEWAY_MAX_RETRIES
        )

    @staticmethod
    def _create_session(max_retries: int) -> requests.Session:
        """Create a requests session with connection pooling and retries on GET."""
        session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=0.3,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=10, pool_maxsize=20)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _build_url(self, endpoint: str) -> str:
        if not self.base_url:
            raise GatewayCommunicationError(self.service_name, "service URL not configured")
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make a request and decode the JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: Endpoint relative to base_url
            json_data: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON object, or an empty dict for an empty body

        Raises:
            RecordNotFoundError: On HTTP 404
            GatewayCommunicationError: On any other failure
        """
        url = self._build_url(endpoint)
        headers = {"Accept": "application/json"}

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            self._logger.error(f"[{self.service_name}] {method} {url} timed out after {self.timeout}s")
            raise GatewayCommunicationError(self.service_name, "request timed out") from e
        except requests.RequestException as e:
            self._logger.error(f"[{self.service_name}] {method} {url} failed: {e}")
            raise GatewayCommunicationError(self.service_name, "request failed") from e

        self._logger.debug(f"[{self.service_name}] {method} {url} -> {response.status_code}")

        if response.status_code == 404:
            raise RecordNotFoundError(self.service_name, f"{endpoint} not found")
        if response.status_code >= 400:
            self._logger.error(
                f"[{self.service_name}] HTTP error {response.status_code}: {method} {url} "
                f"- {response.text[:500]}"
            )
            raise GatewayCommunicationError(
                self.service_name, f"unexpected status {response.status_code}"
            )

        if not response.text:
            return {}

        try:
            data = response.json()
        except ValueError as json_error:
            self._logger.error(
                f"[{self.service_name}] Non-JSON response from {method} {url}: {response.text[:200]}"
            )
            raise GatewayCommunicationError(self.service_name, "invalid JSON response") from json_error

        if not isinstance(data, dict):
            raise GatewayCommunicationError(self.service_name, "expected a JSON object")
        return data

    def close(self) -> None:
        self.session.close()

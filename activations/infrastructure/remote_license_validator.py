"""
Backup license server client.

Cross-checks local activation decisions against an optional remote
server. Every call is best effort: failures come back as result objects,
never as exceptions, and every request carries a timeout.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from core.metrics import remote_requests_total

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Backup server URL not configured"

VALIDATE_ENDPOINT = "/license/validate"
RENEW_ENDPOINT = "/license/renew"
AUTHENTICATE_ENDPOINT = "/license/authenticate"
USER_ACTIVATION_ENDPOINT = "/license/get-user-activation"


@dataclass
class RemoteValidationResult:
    """Outcome of a remote license validation."""

    success: bool
    expired: bool = False
    expires_at: Optional[str] = None
    message: Optional[str] = None
    endpoint_available: bool = True


@dataclass
class RemoteRenewalResult:
    """Outcome of reporting a renewal. ``success`` refers to the local renewal."""

    success: bool
    message: Optional[str] = None
    remote_confirmed: bool = False


@dataclass
class RemoteAuthenticationResult:
    """Outcome of a remote user authentication."""

    success: bool
    user: Optional[Dict[str, Any]] = None
    expired: bool = False
    message: Optional[str] = None
    endpoint_available: bool = True


@dataclass
class RemoteUserActivationResult:
    """Outcome of resolving a username to its activation code remotely."""

    success: bool
    activation_code: Optional[str] = None
    expires_at: Optional[str] = None
    message: Optional[str] = None


def normalize_base_url(url: Optional[str]) -> Optional[str]:
    """
    Reduce a URL to ``scheme://host[:port]``.

    Returns:
        Normalized URL, or None when the URL is empty or invalid
    """
    if not url or not url.strip():
        return None
    parts = urlsplit(url.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        logger.warning(f"Ignoring invalid backup server URL: {url}")
        return None
    return f"{parts.scheme}://{parts.netloc}"


def _error_message(response: requests.Response) -> str:
    """Extract the server's error message, or describe the status."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return f"Server returned status {response.status_code}"


def _json_body(response: requests.Response) -> Dict[str, Any]:
    """Decode a JSON object body, raising ValueError otherwise."""
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError("Expected a JSON object")
    return body


class RemoteLicenseValidator:
    """
    HTTP client for the backup license server.

    Holds one ``requests.Session`` per instance. A timed-out request is
    aborted by closing the session's connection pools.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: float = 10,
        connectivity_retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backup server URL; any path is dropped
            timeout_seconds: Timeout applied to every request
            connectivity_retries: Default retries for the connectivity check
            session: Optional session (created if not provided)
        """
        self.base_url = normalize_base_url(base_url)
        self.timeout_seconds = timeout_seconds
        self.connectivity_retries = connectivity_retries
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @classmethod
    def from_settings(cls) -> "RemoteLicenseValidator":
        """Build a client from ``settings.BACKUP_SERVER``."""
        from django.conf import settings

        config = getattr(settings, "BACKUP_SERVER", {})
        return cls(
            base_url=config.get("URL"),
            timeout_seconds=config.get("TIMEOUT_SECONDS", 10),
            connectivity_retries=config.get("CONNECTIVITY_RETRIES", 2),
        )

    @property
    def is_configured(self) -> bool:
        """Check if a backup server URL is set."""
        return self.base_url is not None

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> requests.Response:
        return self.session.post(
            f"{self.base_url}{endpoint}",
            json=payload,
            timeout=self.timeout_seconds,
        )

    def _abort(self) -> None:
        """Drop pooled connections after a timeout."""
        self.session.close()

    def _record(self, endpoint: str, outcome: str) -> None:
        remote_requests_total.labels(endpoint=endpoint, outcome=outcome).inc()

    def validate_remote(self, activation_code: str) -> RemoteValidationResult:
        """
        Ask the backup server whether a license is still valid.

        Args:
            activation_code: Activation code

        Returns:
            RemoteValidationResult; ``endpoint_available`` is False when the
            server does not support validation and the local verdict applies
        """
        if not self.is_configured:
            return RemoteValidationResult(success=False, message=NOT_CONFIGURED_MESSAGE)

        try:
            response = self._post(VALIDATE_ENDPOINT, {"activationCode": activation_code})
        except requests.exceptions.Timeout:
            self._abort()
            self._record(VALIDATE_ENDPOINT, "timeout")
            logger.warning("License validation request timed out")
            return RemoteValidationResult(success=False, message="Request timeout")
        except requests.exceptions.RequestException as e:
            self._record(VALIDATE_ENDPOINT, "network_error")
            logger.warning(f"Failed to validate license from server: {e}")
            return RemoteValidationResult(success=False, message=f"Network error: {e}")

        if response.status_code == 404:
            self._record(VALIDATE_ENDPOINT, "unsupported")
            return RemoteValidationResult(
                success=False,
                message="License validation endpoint not available on server",
                endpoint_available=False,
            )
        if response.status_code != 200:
            self._record(VALIDATE_ENDPOINT, "http_error")
            return RemoteValidationResult(success=False, message=_error_message(response))

        try:
            body = _json_body(response)
        except ValueError as e:
            self._record(VALIDATE_ENDPOINT, "bad_response")
            return RemoteValidationResult(
                success=False, message=f"Failed to parse server response: {e}"
            )

        self._record(VALIDATE_ENDPOINT, "ok")
        return RemoteValidationResult(
            success=True,
            expired=bool(body.get("expired", False)),
            expires_at=body.get("expiresAt"),
            message=body.get("message"),
        )

    def report_renewal(
        self,
        activation_code: str,
        new_expires_at: datetime,
        username: Optional[str] = None,
    ) -> RemoteRenewalResult:
        """
        Report a completed local renewal to the backup server.

        The local renewal has already happened, so every outcome is a
        success; the message says whether the server echoed it.
        """
        if not self.is_configured:
            return RemoteRenewalResult(
                success=True,
                message="Renewal completed locally (backup server URL not configured)",
            )

        payload = {
            "activationCode": activation_code,
            "expiresAt": new_expires_at.isoformat(),
        }
        if username:
            payload["username"] = username

        try:
            response = self._post(RENEW_ENDPOINT, payload)
        except requests.exceptions.Timeout:
            self._abort()
            self._record(RENEW_ENDPOINT, "timeout")
            logger.warning("Renewal report timed out")
            return RemoteRenewalResult(
                success=True, message="Renewal completed locally (server update timeout)"
            )
        except requests.exceptions.RequestException as e:
            self._record(RENEW_ENDPOINT, "network_error")
            logger.warning(f"Failed to report renewal to server: {e}")
            return RemoteRenewalResult(
                success=True, message="Renewal completed locally (server update failed)"
            )

        if response.status_code in (200, 201):
            try:
                body = _json_body(response)
            except ValueError:
                self._record(RENEW_ENDPOINT, "bad_response")
                return RemoteRenewalResult(
                    success=True,
                    message="Renewal completed locally (server response parsing failed)",
                )
            self._record(RENEW_ENDPOINT, "ok")
            return RemoteRenewalResult(
                success=True,
                message=body.get("message") or "Renewal reported to server successfully",
                remote_confirmed=True,
            )

        if response.status_code == 404:
            self._record(RENEW_ENDPOINT, "unsupported")
            return RemoteRenewalResult(
                success=True, message="Renewal completed locally (server endpoint not available)"
            )

        self._record(RENEW_ENDPOINT, "http_error")
        logger.warning(f"Renewal report rejected with status {response.status_code}")
        return RemoteRenewalResult(
            success=True,
            message=f"Renewal completed locally (server returned status {response.status_code})",
        )

    def authenticate_remote(
        self,
        username: str,
        password: str,
        activation_code: Optional[str] = None,
    ) -> RemoteAuthenticationResult:
        """
        Authenticate a user against the backup server.

        Args:
            username: Username
            password: Password in clear text, sent over the configured transport
            activation_code: Optional code; the server resolves it from the
                username when omitted

        Returns:
            RemoteAuthenticationResult
        """
        if not self.is_configured:
            return RemoteAuthenticationResult(success=False, message=NOT_CONFIGURED_MESSAGE)

        payload = {"username": username, "password": password}
        if activation_code:
            payload["activationCode"] = activation_code

        try:
            response = self._post(AUTHENTICATE_ENDPOINT, payload)
        except requests.exceptions.Timeout:
            self._abort()
            self._record(AUTHENTICATE_ENDPOINT, "timeout")
            logger.warning("Remote authentication timed out")
            return RemoteAuthenticationResult(success=False, message="Request timeout")
        except requests.exceptions.RequestException as e:
            self._record(AUTHENTICATE_ENDPOINT, "network_error")
            logger.warning(f"Failed to authenticate user from server: {e}")
            return RemoteAuthenticationResult(success=False, message=f"Network error: {e}")

        if response.status_code == 404:
            self._record(AUTHENTICATE_ENDPOINT, "unsupported")
            return RemoteAuthenticationResult(
                success=False,
                message="Authentication endpoint not available on server",
                endpoint_available=False,
            )
        if response.status_code != 200:
            self._record(AUTHENTICATE_ENDPOINT, "http_error")
            return RemoteAuthenticationResult(success=False, message=_error_message(response))

        try:
            body = _json_body(response)
        except ValueError as e:
            self._record(AUTHENTICATE_ENDPOINT, "bad_response")
            return RemoteAuthenticationResult(
                success=False, message=f"Failed to parse server response: {e}"
            )

        self._record(AUTHENTICATE_ENDPOINT, "ok")
        if body.get("success"):
            return RemoteAuthenticationResult(
                success=True, user=body.get("user"), message=body.get("message")
            )
        return RemoteAuthenticationResult(
            success=False,
            expired=bool(body.get("expired", False)),
            message=body.get("message") or "Authentication failed",
        )

    def lookup_user_activation(self, username: str) -> RemoteUserActivationResult:
        """
        Resolve which activation code a username belongs to.

        Args:
            username: Username

        Returns:
            RemoteUserActivationResult
        """
        if not self.is_configured:
            return RemoteUserActivationResult(success=False, message=NOT_CONFIGURED_MESSAGE)

        try:
            response = self._post(USER_ACTIVATION_ENDPOINT, {"username": username})
        except requests.exceptions.Timeout:
            self._abort()
            self._record(USER_ACTIVATION_ENDPOINT, "timeout")
            return RemoteUserActivationResult(success=False, message="Request timeout")
        except requests.exceptions.RequestException as e:
            self._record(USER_ACTIVATION_ENDPOINT, "network_error")
            logger.warning(f"Failed to get user activation from server: {e}")
            return RemoteUserActivationResult(success=False, message=f"Network error: {e}")

        if response.status_code == 404:
            self._record(USER_ACTIVATION_ENDPOINT, "unsupported")
            return RemoteUserActivationResult(
                success=False, message="Endpoint not available on server"
            )
        if response.status_code != 200:
            self._record(USER_ACTIVATION_ENDPOINT, "http_error")
            return RemoteUserActivationResult(success=False, message=_error_message(response))

        try:
            body = _json_body(response)
        except ValueError as e:
            self._record(USER_ACTIVATION_ENDPOINT, "bad_response")
            return RemoteUserActivationResult(
                success=False, message=f"Failed to parse server response: {e}"
            )

        self._record(USER_ACTIVATION_ENDPOINT, "ok")
        if body.get("success") and body.get("activationCode"):
            return RemoteUserActivationResult(
                success=True,
                activation_code=body["activationCode"],
                expires_at=body.get("expiresAt"),
            )
        return RemoteUserActivationResult(
            success=False, message=body.get("message") or "User not found"
        )

    def check_connectivity(
        self, max_retries: Optional[int] = None, timeout_ms: int = 10000
    ) -> bool:
        """
        Check whether the backup server is reachable.

        Any HTTP response counts as reachable. Transport errors are retried
        with a fixed one-second pause.

        Args:
            max_retries: Retries after the first attempt, defaulting to
                ``connectivity_retries``
            timeout_ms: Per-attempt timeout in milliseconds

        Returns:
            True if the server answered, False after all attempts failed
        """
        if not self.is_configured:
            return False

        if max_retries is None:
            max_retries = self.connectivity_retries
        attempts = max_retries + 1
        for attempt in range(attempts):
            try:
                self.session.head(
                    f"{self.base_url}/",
                    timeout=timeout_ms / 1000,
                    allow_redirects=False,
                )
                self._record("/", "ok")
                return True
            except requests.exceptions.RequestException as e:
                if isinstance(e, requests.exceptions.Timeout):
                    self._abort()
                logger.info(f"Connectivity check attempt {attempt + 1}/{attempts} failed: {e}")
                if attempt < max_retries:
                    time.sleep(1)

        self._record("/", "unreachable")
        return False

"""
Unit tests for the backup license server client.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from activations.infrastructure.remote_license_validator import (
    RemoteLicenseValidator,
    normalize_base_url,
)

BASE_URL = "https://backup.example.com"


def make_response(status_code, body=None, json_error=None):
    response = Mock(status_code=status_code)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def session():
    """Fixture for a mocked requests session."""
    return MagicMock()


@pytest.fixture
def validator(session):
    """Fixture for a validator bound to the mocked session."""
    return RemoteLicenseValidator(base_url=BASE_URL, timeout_seconds=10, session=session)


class TestNormalizeBaseUrl:
    """Tests for base URL normalization."""

    def test_strips_path_and_query(self):
        """Test only scheme and host are kept."""
        assert normalize_base_url("https://backup.example.com/api/v1?x=1") == BASE_URL

    def test_keeps_port(self):
        """Test explicit port is kept."""
        assert normalize_base_url("http://127.0.0.1:8080/") == "http://127.0.0.1:8080"

    def test_empty(self):
        """Test empty URL means not configured."""
        assert normalize_base_url("") is None
        assert normalize_base_url(None) is None

    def test_invalid(self):
        """Test URL without scheme is rejected."""
        assert normalize_base_url("backup.example.com") is None


class TestNotConfigured:
    """Tests for a client without a backup server URL."""

    def test_validate(self):
        """Test validation reports missing configuration."""
        result = RemoteLicenseValidator(base_url="").validate_remote("GRC-1")

        assert result.success is False
        assert result.message == "Backup server URL not configured"

    def test_report_renewal_is_local_success(self):
        """Test renewal report succeeds locally."""
        result = RemoteLicenseValidator(base_url="").report_renewal(
            "GRC-1", datetime(2027, 1, 1, tzinfo=timezone.utc)
        )

        assert result.success is True
        assert result.remote_confirmed is False

    def test_connectivity(self):
        """Test connectivity check fails without a URL."""
        assert RemoteLicenseValidator(base_url="").check_connectivity() is False

    def test_from_settings(self, settings):
        """Test client reads BACKUP_SERVER settings."""
        settings.BACKUP_SERVER = {"URL": "https://backup.example.com/path", "TIMEOUT_SECONDS": 5}

        validator = RemoteLicenseValidator.from_settings()

        assert validator.base_url == BASE_URL
        assert validator.timeout_seconds == 5
        assert validator.connectivity_retries == 2

    def test_from_settings_connectivity_retries(self, settings):
        """Test the connectivity retry count comes from settings."""
        settings.BACKUP_SERVER = {"URL": BASE_URL, "CONNECTIVITY_RETRIES": 4}

        assert RemoteLicenseValidator.from_settings().connectivity_retries == 4


class TestValidateRemote:
    """Tests for remote license validation."""

    def test_valid(self, validator, session):
        """Test server verdict is returned on 200."""
        session.post.return_value = make_response(
            200, {"expired": False, "expiresAt": "2027-01-15T12:00:00Z", "message": "ok"}
        )

        result = validator.validate_remote("GRC-1")

        assert result.success is True
        assert result.expired is False
        assert result.expires_at == "2027-01-15T12:00:00Z"
        session.post.assert_called_once_with(
            f"{BASE_URL}/license/validate",
            json={"activationCode": "GRC-1"},
            timeout=10,
        )

    def test_expired(self, validator, session):
        """Test server-side expiry is reported."""
        session.post.return_value = make_response(200, {"expired": True})

        result = validator.validate_remote("GRC-1")

        assert result.success is True
        assert result.expired is True

    def test_endpoint_missing(self, validator, session):
        """Test 404 means the server does not support validation."""
        session.post.return_value = make_response(404)

        result = validator.validate_remote("GRC-1")

        assert result.success is False
        assert result.endpoint_available is False
        assert result.message == "License validation endpoint not available on server"

    def test_server_error_with_message(self, validator, session):
        """Test error body message is used."""
        session.post.return_value = make_response(500, {"message": "database offline"})

        result = validator.validate_remote("GRC-1")

        assert result.success is False
        assert result.message == "database offline"

    def test_server_error_without_body(self, validator, session):
        """Test status code is described when the body is unusable."""
        session.post.return_value = make_response(502, json_error=ValueError("no json"))

        result = validator.validate_remote("GRC-1")

        assert result.message == "Server returned status 502"

    def test_bad_json(self, validator, session):
        """Test unparseable 200 body."""
        session.post.return_value = make_response(200, json_error=ValueError("Expecting value"))

        result = validator.validate_remote("GRC-1")

        assert result.success is False
        assert result.message.startswith("Failed to parse server response")

    def test_network_error(self, validator, session):
        """Test transport errors become failure results."""
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        result = validator.validate_remote("GRC-1")

        assert result.success is False
        assert result.message == "Network error: refused"

    def test_timeout_aborts(self, validator, session):
        """Test timeouts close the session pools."""
        session.post.side_effect = requests.exceptions.ReadTimeout()

        result = validator.validate_remote("GRC-1")

        assert result.success is False
        assert result.message == "Request timeout"
        session.close.assert_called_once()


class TestReportRenewal:
    """Tests for renewal reporting."""

    NEW_EXPIRY = datetime(2027, 7, 15, 12, 0, tzinfo=timezone.utc)

    def test_confirmed(self, validator, session):
        """Test 201 confirms the renewal remotely."""
        session.post.return_value = make_response(201, {"message": "Renewed"})

        result = validator.report_renewal("GRC-1", self.NEW_EXPIRY, username="admin")

        assert result.success is True
        assert result.remote_confirmed is True
        assert result.message == "Renewed"
        session.post.assert_called_once_with(
            f"{BASE_URL}/license/renew",
            json={
                "activationCode": "GRC-1",
                "expiresAt": self.NEW_EXPIRY.isoformat(),
                "username": "admin",
            },
            timeout=10,
        )

    def test_server_error_is_local_success(self, validator, session):
        """Test HTTP 500 still reports local success."""
        session.post.return_value = make_response(500, {"message": "boom"})

        result = validator.report_renewal("GRC-1", self.NEW_EXPIRY)

        assert result.success is True
        assert result.remote_confirmed is False
        assert result.message == "Renewal completed locally (server returned status 500)"

    def test_endpoint_missing(self, validator, session):
        """Test 404 is a local success."""
        session.post.return_value = make_response(404)

        result = validator.report_renewal("GRC-1", self.NEW_EXPIRY)

        assert result.success is True
        assert "endpoint not available" in result.message

    def test_network_error(self, validator, session):
        """Test transport errors are a local success."""
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        result = validator.report_renewal("GRC-1", self.NEW_EXPIRY)

        assert result.success is True
        assert result.message == "Renewal completed locally (server update failed)"

    def test_timeout(self, validator, session):
        """Test timeouts are a local success."""
        session.post.side_effect = requests.exceptions.Timeout()

        result = validator.report_renewal("GRC-1", self.NEW_EXPIRY)

        assert result.success is True
        assert result.message == "Renewal completed locally (server update timeout)"
        session.close.assert_called_once()

    def test_bad_json(self, validator, session):
        """Test unparseable body is a local success."""
        session.post.return_value = make_response(200, json_error=ValueError("bad"))

        result = validator.report_renewal("GRC-1", self.NEW_EXPIRY)

        assert result.success is True
        assert result.remote_confirmed is False


class TestAuthenticateRemote:
    """Tests for remote authentication."""

    def test_success(self, validator, session):
        """Test successful remote login returns the user."""
        session.post.return_value = make_response(
            200, {"success": True, "user": {"username": "admin", "role": "admin"}}
        )

        result = validator.authenticate_remote("admin", "secret", "GRC-1")

        assert result.success is True
        assert result.user == {"username": "admin", "role": "admin"}
        sent = session.post.call_args.kwargs["json"]
        assert sent == {"username": "admin", "password": "secret", "activationCode": "GRC-1"}

    def test_rejected(self, validator, session):
        """Test rejected login keeps the server message."""
        session.post.return_value = make_response(
            200, {"success": False, "expired": True, "message": "License expired"}
        )

        result = validator.authenticate_remote("admin", "secret")

        assert result.success is False
        assert result.expired is True
        assert result.message == "License expired"
        assert "activationCode" not in session.post.call_args.kwargs["json"]

    def test_endpoint_missing(self, validator, session):
        """Test 404 means remote authentication is unsupported."""
        session.post.return_value = make_response(404)

        result = validator.authenticate_remote("admin", "secret")

        assert result.endpoint_available is False


class TestLookupUserActivation:
    """Tests for resolving a username remotely."""

    def test_found(self, validator, session):
        """Test the activation code is returned."""
        session.post.return_value = make_response(
            200, {"success": True, "activationCode": "GRC-9", "expiresAt": "2027-01-01"}
        )

        result = validator.lookup_user_activation("admin")

        assert result.success is True
        assert result.activation_code == "GRC-9"

    def test_not_found(self, validator, session):
        """Test unknown user."""
        session.post.return_value = make_response(200, {"success": False})

        result = validator.lookup_user_activation("ghost")

        assert result.success is False
        assert result.message == "User not found"


class TestCheckConnectivity:
    """Tests for the connectivity probe."""

    def test_any_status_is_reachable(self, validator, session):
        """Test any HTTP response counts as reachable."""
        session.head.return_value = Mock(status_code=503)

        assert validator.check_connectivity() is True
        session.head.assert_called_once_with(
            f"{BASE_URL}/", timeout=10.0, allow_redirects=False
        )

    @patch("activations.infrastructure.remote_license_validator.time.sleep")
    def test_unreachable_retries(self, mock_sleep, validator, session):
        """Test three attempts with two one-second pauses."""
        session.head.side_effect = requests.exceptions.ConnectionError("unreachable")

        assert validator.check_connectivity(max_retries=2) is False
        assert session.head.call_count == 3
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(1)

    @patch("activations.infrastructure.remote_license_validator.time.sleep")
    def test_recovers_on_retry(self, mock_sleep, validator, session):
        """Test a later attempt can succeed."""
        session.head.side_effect = [
            requests.exceptions.ConnectTimeout(),
            Mock(status_code=200),
        ]

        assert validator.check_connectivity(max_retries=2, timeout_ms=2500) is True
        assert session.head.call_count == 2
        assert mock_sleep.call_count == 1
        assert session.head.call_args.kwargs["timeout"] == 2.5

    @patch("activations.infrastructure.remote_license_validator.time.sleep")
    def test_default_retries_from_instance(self, mock_sleep, session):
        """Test the configured retry count applies when none is passed."""
        session.head.side_effect = requests.exceptions.ConnectionError("unreachable")
        validator = RemoteLicenseValidator(
            base_url=BASE_URL, connectivity_retries=0, session=session
        )

        assert validator.check_connectivity() is False
        assert session.head.call_count == 1
        mock_sleep.assert_not_called()

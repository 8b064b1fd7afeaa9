from typing import Any
from unittest.mock import patch

import pytest

from asf_rest.adapter import RestAdapter
from asf_rest.connectors import salesforce
from asf_rest.errors import AdapterNotConfiguredError

NO_SESSION = {
    "SALESFORCE__ACCESS_TOKEN": "",
    "SALESFORCE__INSTANCE": "",
}


def test_configured_session_skips_login(reload_settings: Any) -> None:
    reload_settings(
        {
            "SALESFORCE__ACCESS_TOKEN": "00Dxx!session",
            "SALESFORCE__INSTANCE": "na7.salesforce.com",
        }
    )

    with patch("asf_rest.connectors.salesforce.SalesforceLogin") as mock_login:
        session = salesforce.get_salesforce_session()

    assert session == ("00Dxx!session", "na7.salesforce.com")
    assert not mock_login.called


def test_login_with_username_and_password(reload_settings: Any) -> None:
    reload_settings(
        {
            **NO_SESSION,
            "SALESFORCE__USERNAME": "ops@example.com",
            "SALESFORCE__PASSWORD": "pw",
            "SALESFORCE__SECURITY_TOKEN": "tok",
            "SALESFORCE__DOMAIN": "test",
        }
    )

    with patch(
        "asf_rest.connectors.salesforce.SalesforceLogin",
        return_value=("00Dxx!login", "cs42.salesforce.com"),
    ) as mock_login:
        session = salesforce.get_salesforce_session()

    mock_login.assert_called_once_with(
        username="ops@example.com",
        password="pw",
        security_token="tok",
        domain="test",
    )
    assert session == ("00Dxx!login", "cs42.salesforce.com")


def test_login_failure_propagates(reload_settings: Any) -> None:
    reload_settings(
        {
            **NO_SESSION,
            "SALESFORCE__USERNAME": "ops@example.com",
            "SALESFORCE__PASSWORD": "x",
        }
    )

    with patch(
        "asf_rest.connectors.salesforce.SalesforceLogin",
        side_effect=RuntimeError("INVALID_LOGIN"),
    ):
        with pytest.raises(RuntimeError, match="INVALID_LOGIN"):
            salesforce.get_salesforce_session()


def test_missing_credentials_raise(reload_settings: Any) -> None:
    reload_settings(
        {**NO_SESSION, "SALESFORCE__USERNAME": "", "SALESFORCE__PASSWORD": ""}
    )

    with pytest.raises(AdapterNotConfiguredError, match="SALESFORCE__ACCESS_TOKEN"):
        salesforce.get_salesforce_session()


def test_create_rest_adapter_from_settings(reload_settings: Any) -> None:
    reload_settings(
        {
            "SALESFORCE__ACCESS_TOKEN": "00Dxx!session",
            "SALESFORCE__INSTANCE": "na7.salesforce.com",
            "SALESFORCE__API_VERSION": "v21.0",
            "SALESFORCE__TIMEOUT": "12.5",
        }
    )

    adapter = salesforce.create_rest_adapter()

    assert isinstance(adapter, RestAdapter)
    assert adapter.config.authorization == "OAuth 00Dxx!session"
    assert adapter.config.base_url == "na7.salesforce.com"
    assert adapter.config.timeout == 12.5
    assert salesforce.create_rest_adapter() is adapter

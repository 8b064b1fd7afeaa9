import importlib
from collections.abc import Iterator
from typing import Any, Callable, Optional
from unittest.mock import MagicMock, patch

import pytest
import requests
from pydantic import ValidationError
from pytest import MonkeyPatch

from asf_rest import cache, logging
from asf_rest import config as config_module
from asf_rest.adapter import RestAdapter, configure
from asf_rest.connectors import salesforce


def _clear_caches() -> None:
    config_module.get_settings.cache_clear()
    cache.get_cache_store.cache_clear()
    salesforce.get_salesforce_session.cache_clear()
    salesforce.create_rest_adapter.cache_clear()


def _reload_modules() -> None:
    importlib.reload(config_module)
    importlib.reload(logging)
    importlib.reload(cache)
    importlib.reload(salesforce)


@pytest.fixture
def reload_settings(monkeypatch: MonkeyPatch) -> Any:
    """
    Fixture to force a reload of the config module and
    all dependent modules *after* setting new env vars.
    """

    def _set_env_and_reload(vars_dict: dict[str, str]) -> None:
        for k, v in vars_dict.items():
            if v == "":
                monkeypatch.delenv(k, raising=False)
            else:
                monkeypatch.setenv(k, v)

        _clear_caches()
        _reload_modules()

    yield _set_env_and_reload

    # --- Teardown (after test) ---
    _clear_caches()
    monkeypatch.undo()
    try:
        _reload_modules()
    except ValidationError:
        pass  # We don't care about validation errors on cleanup


def _make_response(
    status_code: int = 200, body: str = "{}", headers: Optional[dict[str, str]] = None
) -> MagicMock:
    """A stand-in for a `requests.Response`."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.text = body
    response.headers = headers or {"Content-Type": "application/json"}
    return response


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    return _make_response


@pytest.fixture
def http_session() -> Iterator[MagicMock]:
    """
    Patches `requests.Session` in the adapter module.

    Supports ``with requests.Session() as session:``. Set
    ``http_session.request.return_value`` to change the response.
    """
    mock_session = MagicMock()
    mock_session.__enter__.return_value = mock_session
    mock_session.request.return_value = _make_response()

    with patch("asf_rest.adapter.requests.Session", return_value=mock_session):
        yield mock_session


@pytest.fixture
def adapter() -> RestAdapter:
    return RestAdapter(configure("token123", "na7.salesforce.com", "v21.0"))


@pytest.fixture
def last_request(http_session: MagicMock) -> Callable[[], dict[str, Any]]:
    """Returns the method, url, headers and body of the latest request."""

    def _last_request() -> dict[str, Any]:
        args, kwargs = http_session.request.call_args
        return {
            "method": args[0],
            "url": args[1],
            "headers": kwargs["headers"],
            "body": kwargs["data"],
            "timeout": kwargs["timeout"],
        }

    return _last_request

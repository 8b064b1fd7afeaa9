"""
Connection settings and HTTP plumbing for the Force.com REST API.

`configure()` builds the immutable `AdapterConfig`; a `RestAdapter` is
constructed from it once at startup and handed to the code that needs it.
Every request goes out on its own `requests.Session` and comes back as a
`RestResponse` whatever its status code.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union
from urllib.parse import urlparse

import requests
from pydantic import BaseModel, Field

from .errors import AdapterNotConfiguredError
from .resource import SObjectResource

logger = logging.getLogger(__name__)

# Request paths always use this version; see AdapterConfig.requested_api_version.
PINNED_API_VERSION = "v21.0"
SSL_PORT = 443
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class AdapterConfig:
    """Credentials and endpoint of the REST server."""

    oauth_token: str
    base_url: str
    api_version: str = PINNED_API_VERSION
    requested_api_version: str = PINNED_API_VERSION
    ssl_port: int = SSL_PORT
    timeout: Optional[float] = None

    @property
    def site(self) -> str:
        return (
            f"https://{self.base_url}/services/data/"
            f"{self.requested_api_version}/sobjects"
        )

    @property
    def authorization(self) -> str:
        return f"OAuth {self.oauth_token}"

    def __repr__(self) -> str:
        return (
            f"AdapterConfig(base_url={self.base_url!r}, "
            f"api_version={self.api_version!r}, "
            f"requested_api_version={self.requested_api_version!r})"
        )


def configure(
    oauth_token: str,
    base_url: str,
    api_version: str,
    *,
    timeout: Optional[float] = None,
) -> AdapterConfig:
    """
    Build the adapter configuration.

    Args:
        oauth_token: Session id or OAuth access token sent as
            ``Authorization: OAuth <token>``.
        base_url: The instance host without a scheme,
            e.g. ``na7.salesforce.com``.
        api_version: The API version, e.g. ``v21.0``. It reaches `site` and
            the paths built from it; hand-built request paths stay on
            ``v21.0``.
        timeout: Optional per-request timeout in seconds. None waits forever.

    Raises:
        AdapterNotConfiguredError: If the token or host is empty.
    """
    if not oauth_token:
        raise AdapterNotConfiguredError("An OAuth token is required")
    if not base_url:
        raise AdapterNotConfiguredError("A base URL is required")

    if api_version != PINNED_API_VERSION:
        logger.warning(
            f"API version {api_version} requested but request paths use "
            f"{PINNED_API_VERSION}"
        )

    config = AdapterConfig(
        oauth_token=oauth_token,
        base_url=base_url,
        api_version=PINNED_API_VERSION,
        requested_api_version=api_version,
        timeout=timeout,
    )
    logger.info(f"REST adapter configured for {config.site}")
    return config


class RestResponse(BaseModel):
    """Status, headers and undecoded body of one REST call."""

    status_code: int
    body: str = ""
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:  # type: ignore[override]
        return json.loads(self.body)

    @classmethod
    def from_requests(cls, response: requests.Response) -> "RestResponse":
        return cls(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )


class RestAdapter:
    """
    Issues single requests against the configured REST server.

    Operations on a particular sobject live on the `SObjectResource`
    returned by `resource()`.
    """

    def __init__(self, config: Optional[AdapterConfig]):
        if config is None:
            raise AdapterNotConfiguredError(
                "configure() must be called before creating a RestAdapter"
            )
        self.config = config

    # --- Paths ---

    def data_path(self) -> str:
        return "/services/data/"

    def version_path(self) -> str:
        return f"/services/data/{self.config.api_version}/"

    def sobjects_path(self) -> str:
        return f"/services/data/{self.config.api_version}/sobjects/"

    def site_path(self) -> str:
        """The path of `site`, on the requested version."""
        return f"{urlparse(self.config.site).path}/"

    def url_for(self, path: str) -> str:
        return f"https://{self.config.base_url}:{self.config.ssl_port}{path}"

    # --- Transport ---

    def headers(self, json_content: bool = False) -> dict[str, str]:
        headers = {"Authorization": self.config.authorization}
        if json_content:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return headers

    def send(
        self,
        method: str,
        path: str,
        body: Union[str, bytes, None] = None,
        json_content: bool = False,
    ) -> RestResponse:
        """
        Send one request and return the response without checking its status.

        Connection and TLS errors from `requests` propagate to the caller.
        """
        url = self.url_for(path)
        logger.debug(f"{method} {url}")

        with requests.Session() as session:
            response = session.request(
                method,
                url,
                data=body,
                headers=self.headers(json_content),
                timeout=self.config.timeout,
            )

        logger.debug(f"{method} {path} -> {response.status_code}")
        return RestResponse.from_requests(response)

    def resource(self, type_name: str) -> SObjectResource:
        return SObjectResource(self, type_name)

"""
REST operations on a single sobject type.

Paths follow the Force.com layout: the collection segment is the type name
itself (``/sobjects/Account/``), never a pluralized form.

`element_path`, `collection_path` and `find` sit under the path of the
adapter's `site` and so use the requested API version. Save, delete,
update, describe and metadata build their paths on the pinned ``v21.0``.
"""

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, Union
from urllib.parse import urlencode

from .errors import raise_error

if TYPE_CHECKING:
    from .adapter import RestAdapter, RestResponse

logger = logging.getLogger(__name__)


class SObjectResource:
    """
    Binds a `RestAdapter` to one sobject type, e.g. ``Account``.

    Only `get_detail_info` checks the status code. Every other call hands
    back the `RestResponse` as received, so callers inspect `status_code`.
    """

    def __init__(self, adapter: "RestAdapter", type_name: str):
        self.adapter = adapter
        self.type_name = type_name

    def __repr__(self) -> str:
        return f"SObjectResource({self.type_name!r})"

    @property
    def collection_name(self) -> str:
        return self.type_name

    # --- Paths ---

    def element_path(
        self, id: str, query_options: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Path of one record under `site`: ``.../sobjects/Account/<id>``."""
        return (
            f"{self.adapter.site_path()}{self.collection_name}/{id}"
            f"{_query_string(query_options)}"
        )

    def collection_path(self, query_options: Optional[Mapping[str, Any]] = None) -> str:
        """Path of the type itself, without the trailing slash."""
        return (
            f"{self.adapter.site_path()}{self.collection_name}"
            f"{_query_string(query_options)}"
        )

    def _pinned_path(self, suffix: str = "") -> str:
        return f"{self.adapter.sobjects_path()}{self.type_name}{suffix}"

    # --- Records ---

    def save(self, attributes: Mapping[str, Any]) -> "RestResponse":
        """
        Create a record.

        The body is the flat field mapping, ``{"Name": "Acme"}``, not
        ``{"Account": {"Name": "Acme"}}``.
        """
        data = json.dumps(dict(attributes))
        return self.adapter.send(
            "POST", self._pinned_path("/"), body=data, json_content=True
        )

    def delete(self, id: str) -> "RestResponse":
        return self.adapter.send("DELETE", self._pinned_path(f"/{id}"))

    def update(
        self, id: str, serialized_json: Union[str, bytes, Mapping[str, Any]]
    ) -> "RestResponse":
        """
        Update a record with PATCH.

        A string or bytes body is sent verbatim; a mapping is JSON-encoded.
        """
        if isinstance(serialized_json, Mapping):
            serialized_json = json.dumps(dict(serialized_json))
        return self.adapter.send(
            "PATCH",
            self._pinned_path(f"/{id}"),
            body=serialized_json,
            json_content=True,
        )

    def find(self, id: str) -> "RestResponse":
        return self.adapter.send("GET", self.element_path(id))

    # --- Describe and metadata ---

    def get_detail_info(self) -> str:
        """
        Fetch the describe document of this type.

        Returns:
            The raw JSON body.

        Raises:
            SalesforceRestError: On any status other than 200, with the
                message of the first entry of the error array.
        """
        response = self.adapter.send(
            "GET", self._pinned_path("/describe"), json_content=True
        )
        if response.status_code != 200:
            message = _first_error_message(response.body)
            logger.error(
                f"Describe of {self.type_name} failed with HTTP "
                f"{response.status_code}: {message}"
            )
            raise_error(
                f"HTTP code {response.status_code}: {message}", response.status_code
            )
        return response.body

    def get_meta_data(self) -> "RestResponse":
        return self.adapter.send("GET", self._pinned_path("/"), json_content=True)

    def describe_global(self) -> "RestResponse":
        return self.adapter.send("GET", self.adapter.sobjects_path())

    def list_available_resources(self) -> "RestResponse":
        return self.adapter.send("GET", self.adapter.version_path())

    def get_version(self) -> "RestResponse":
        return self.adapter.send("GET", self.adapter.data_path())

    # --- Query and search ---

    def run_soql(self, query: str) -> "RestResponse":
        """
        Run a SOQL query.

        `query` is not escaped, so pre-encode it (``SELECT+Id+FROM+Account``).
        `requests` still percent-encodes characters illegal in a URL.
        """
        path = f"{self.adapter.version_path()}query?q={query}"
        return self.adapter.send("GET", path)

    def run_sosl(self, search: str) -> "RestResponse":
        """
        Run a SOSL search.

        `search` is not escaped; `requests` still sends ``{Acme}`` as
        ``%7BAcme%7D``.
        """
        path = f"{self.adapter.version_path()}search/?q={search}"
        return self.adapter.send("GET", path)


def _query_string(query_options: Optional[Mapping[str, Any]]) -> str:
    if not query_options:
        return ""
    return f"?{urlencode(query_options)}"


def _first_error_message(body: str) -> str:
    # Error bodies look like [{"message": "...", "errorCode": "..."}]
    try:
        errors = json.loads(body)
        return str(errors[0]["message"])
    except (ValueError, LookupError, TypeError):
        return body

"""
Base class for local models of sobject types.

    class Account(SObject):
        pass

    class Invoice(SObject, type_name="Invoice__c"):
        pass

    Account(Name="Acme").save(adapter)
"""

from typing import Any, ClassVar, Optional

from .adapter import RestAdapter, RestResponse
from .resource import SObjectResource


class SObject:
    """A record held as a flat field mapping, named after its sobject type."""

    type_name: ClassVar[str] = "SObject"

    def __init_subclass__(cls, type_name: Optional[str] = None, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls.type_name = type_name or cls.__name__

    def __init__(self, **attributes: Any):
        self.attributes: dict[str, Any] = dict(attributes)

    def __getattr__(self, name: str) -> Any:
        attributes = self.__dict__.get("attributes", {})
        if name in attributes:
            return attributes[name]
        raise AttributeError(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SObject):
            return NotImplemented
        return self.type_name == other.type_name and self.attributes == other.attributes

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attributes!r})"

    @property
    def id(self) -> Optional[str]:
        return self.attributes.get("Id")

    @classmethod
    def resource(cls, adapter: RestAdapter) -> SObjectResource:
        return adapter.resource(cls.type_name)

    @classmethod
    def from_response(cls, response: RestResponse) -> "SObject":
        """Build a model from a record body, dropping its ``attributes`` metadata."""
        record = dict(response.json())
        record.pop("attributes", None)
        return cls(**record)

    def save(self, adapter: RestAdapter) -> RestResponse:
        return self.resource(adapter).save(self.attributes)

import json
from typing import Any, Callable

import pytest

from asf_rest.adapter import RestAdapter, RestResponse
from asf_rest.models import SObject


class Account(SObject):
    pass


class Invoice(SObject, type_name="Invoice__c"):
    pass


def test_type_name_defaults_to_class_name() -> None:
    assert Account.type_name == "Account"
    assert Invoice.type_name == "Invoice__c"


def test_attributes_are_readable() -> None:
    account = Account(Name="Acme", Id="001A")

    assert account.Name == "Acme"
    assert account.id == "001A"
    assert Account(Name="Acme").id is None
    with pytest.raises(AttributeError):
        account.Industry


def test_resource_is_bound_to_type(adapter: RestAdapter) -> None:
    resource = Invoice.resource(adapter)

    assert resource.type_name == "Invoice__c"
    assert resource.collection_path() == "/services/data/v21.0/sobjects/Invoice__c"


def test_save_posts_attributes(
    adapter: RestAdapter, last_request: Callable[[], Any]
) -> None:
    Account(Name="Acme", Industry="Retail").save(adapter)

    request = last_request()
    assert request["method"] == "POST"
    assert request["url"].endswith("/services/data/v21.0/sobjects/Account/")
    assert json.loads(request["body"]) == {"Name": "Acme", "Industry": "Retail"}


def test_from_response_drops_record_metadata() -> None:
    response = RestResponse(
        status_code=200,
        body=json.dumps(
            {
                "attributes": {
                    "type": "Account",
                    "url": "/services/data/v21.0/sobjects/Account/001A",
                },
                "Id": "001A",
                "Name": "Acme",
            }
        ),
    )

    account = Account.from_response(response)

    assert isinstance(account, Account)
    assert account == Account(Id="001A", Name="Acme")
    assert account != Invoice(Id="001A", Name="Acme")

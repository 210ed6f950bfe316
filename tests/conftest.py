"""
Shared fixtures: a DemoqaClient wired to a patched `requests.request`.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import pytest
import requests

from bookstore_contracts.api_caller import APICaller
from bookstore_contracts.clients import DemoqaClient

BASE_URL = "https://bookstore.test"

BOOK = {
    "isbn": "9781449325862",
    "title": "Git Pocket Guide",
    "subTitle": "A Working Introduction",
    "author": "Richard E. Silverman",
    "publish_date": "2020-06-04T08:48:39.000Z",
    "publisher": "O'Reilly Media",
    "pages": 234,
    "description": "This pocket guide is the perfect on-the-job companion to Git.",
    "website": "http://chimera.labs.oreilly.com/books/1230000000561/index.html",
}

SECOND_BOOK = dict(
    BOOK,
    isbn="9781449331818",
    title="Learning JavaScript Design Patterns",
    subTitle="A JavaScript and jQuery Developer's Guide",
    pages=254,
)

USER_ID = "3f1c2a9e-5a54-4a4b-9f0e-2f3c4d5e6f70"


def make_response(status: int, body: Any = None, text: str | None = None, headers: dict | None = None) -> requests.Response:
    """A real requests.Response with the given status and JSON body"""
    response = requests.Response()
    response.status_code = status
    if text is not None:
        response._content = text.encode("utf-8")
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    response.headers.update(headers or {"Content-Type": "application/json; charset=utf-8"})
    response.encoding = "utf-8"
    return response


@pytest.fixture
def http():
    """Patched requests.request; set `return_value` or `side_effect` per test"""
    with patch("bookstore_contracts.api_caller.requests.request") as mock_request:
        yield mock_request


@pytest.fixture
def client(http) -> DemoqaClient:
    return DemoqaClient(BASE_URL, APICaller(rate_limit=0, timeout=1))


def sent(http, index: int = -1) -> dict:
    """Method, url and keyword arguments of a recorded request"""
    call = http.call_args_list[index]
    method, url = call.args[:2]
    return {"method": method, "url": url, **call.kwargs}

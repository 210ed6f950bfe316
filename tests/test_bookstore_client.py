"""
Tests for BookStoreClient request shapes and failure classification.
"""

from __future__ import annotations

import pytest

from bookstore_contracts.exceptions import (
    Conflict,
    ContractViolation,
    NotFound,
    Unauthorized,
    ValidationError,
)

from conftest import BASE_URL, BOOK, SECOND_BOOK, USER_ID, make_response, sent


def test_list_catalog(http, client) -> None:
    http.return_value = make_response(200, {"books": [BOOK, SECOND_BOOK]})

    catalog = client.books.list_catalog()

    assert len(catalog) == 2
    assert catalog.isbns == [BOOK["isbn"], SECOND_BOOK["isbn"]]
    assert catalog.contains(SECOND_BOOK["isbn"])
    assert catalog.first().sub_title == "A Working Introduction"
    request = sent(http)
    assert request["url"] == f"{BASE_URL}/BookStore/v1/Books"
    assert "Authorization" not in request["headers"]


def test_list_catalog_rejects_malformed_book(http, client) -> None:
    broken = dict(SECOND_BOOK, pages="254")
    del broken["title"]
    http.return_value = make_response(200, {"books": [BOOK, broken]})

    with pytest.raises(ValidationError) as excinfo:
        client.books.list_catalog()

    assert [e.path for e in excinfo.value.errors] == ["books[1].title", "books[1].pages"]
    assert excinfo.value.operation == "list_catalog"


def test_fetch_book_sends_isbn_param(http, client) -> None:
    http.return_value = make_response(200, BOOK)

    book = client.books.fetch_book(BOOK["isbn"])

    assert book.isbn == BOOK["isbn"]
    assert book.pages == 234
    assert book.to_dict() == BOOK
    request = sent(http)
    assert request["url"] == f"{BASE_URL}/BookStore/v1/Book"
    assert request["params"] == {"ISBN": BOOK["isbn"]}


@pytest.mark.parametrize("status", [400, 404])
def test_fetch_unknown_book_is_not_found(http, client, status: int) -> None:
    http.return_value = make_response(status, {"code": "1205", "message": "ISBN supplied is not available in Books Collection!"})

    with pytest.raises(NotFound):
        client.books.fetch_book("0000000000000")


def test_add_books_payload_and_headers(http, client) -> None:
    http.return_value = make_response(201, {"books": [{"isbn": BOOK["isbn"]}, {"isbn": SECOND_BOOK["isbn"]}]})

    added = client.books.add_books(USER_ID, "tok-abc", [BOOK["isbn"], SECOND_BOOK["isbn"]])

    assert added.isbns == [BOOK["isbn"], SECOND_BOOK["isbn"]]
    request = sent(http)
    assert request["method"] == "POST"
    assert request["url"] == f"{BASE_URL}/BookStore/v1/Books"
    assert request["headers"]["Authorization"] == "Bearer tok-abc"
    assert request["json"] == {
        "userId": USER_ID,
        "collectionOfIsbns": [{"isbn": BOOK["isbn"]}, {"isbn": SECOND_BOOK["isbn"]}],
    }


def test_add_duplicate_isbn_is_refined_to_conflict(http, client) -> None:
    http.return_value = make_response(400, {"code": "1210", "message": "ISBN already present in the User's Collection!"})

    with pytest.raises(Conflict) as excinfo:
        client.books.add_books(USER_ID, "tok-abc", [BOOK["isbn"]])

    assert excinfo.value.status_code == 400
    assert excinfo.value.operation == "add_books"


def test_add_unknown_isbn_is_refined_to_not_found(http, client) -> None:
    http.return_value = make_response(400, {"code": "1205", "message": "ISBN supplied is not available in Books Collection!"})

    with pytest.raises(NotFound):
        client.books.add_books(USER_ID, "tok-abc", ["0000000000000"])


def test_add_with_unknown_envelope_code_stays_contract_violation(http, client) -> None:
    http.return_value = make_response(400, {"code": "9999", "message": "Something else"})

    with pytest.raises(ContractViolation) as excinfo:
        client.books.add_books(USER_ID, "tok-abc", [BOOK["isbn"]])

    assert type(excinfo.value) is ContractViolation


def test_add_without_token_is_unauthorized(http, client) -> None:
    http.return_value = make_response(401, {"code": "1200", "message": "User not authorized!"})

    with pytest.raises(Unauthorized):
        client.books.add_books(USER_ID, None, [BOOK["isbn"]])

    assert "Authorization" not in sent(http)["headers"]


def test_replace_book(http, client) -> None:
    http.return_value = make_response(200, {"userId": USER_ID, "username": "reader_01", "books": [SECOND_BOOK]})

    account = client.books.replace_book(USER_ID, "tok-abc", BOOK["isbn"], SECOND_BOOK["isbn"])

    assert account.isbns == [SECOND_BOOK["isbn"]]
    request = sent(http)
    assert request["method"] == "PUT"
    assert request["url"] == f"{BASE_URL}/BookStore/v1/Books/{BOOK['isbn']}"
    assert request["json"] == {"userId": USER_ID, "isbn": SECOND_BOOK["isbn"]}


def test_remove_book(http, client) -> None:
    http.return_value = make_response(204)

    client.books.remove_book(USER_ID, "tok-abc", BOOK["isbn"])

    request = sent(http)
    assert request["method"] == "DELETE"
    assert request["url"] == f"{BASE_URL}/BookStore/v1/Book"
    assert request["json"] == {"userId": USER_ID, "isbn": BOOK["isbn"]}


def test_remove_book_not_in_collection(http, client) -> None:
    http.return_value = make_response(400, {"code": "1206", "message": "ISBN supplied is not available in User's Collection!"})

    with pytest.raises(NotFound):
        client.books.remove_book(USER_ID, "tok-abc", BOOK["isbn"])


def test_remove_all_books(http, client) -> None:
    http.return_value = make_response(204)

    client.books.remove_all_books(USER_ID, "tok-abc")

    request = sent(http)
    assert request["method"] == "DELETE"
    assert request["url"] == f"{BASE_URL}/BookStore/v1/Books"
    assert request["params"] == {"UserId": USER_ID}


def test_remove_all_books_unexpected_status(http, client) -> None:
    http.return_value = make_response(418, {"message": "teapot"})

    with pytest.raises(ContractViolation, match="got 418"):
        client.books.remove_all_books(USER_ID, "tok-abc")


def test_sub_clients_share_one_caller(client) -> None:
    assert client.accounts.api_caller is client.books.api_caller is client.api_caller
    assert client.books.base_url == BASE_URL


def test_remove_all_books_twice_in_a_row(http, client) -> None:
    http.side_effect = [make_response(204), make_response(200, {})]

    client.books.remove_all_books(USER_ID, "tok-abc")
    client.books.remove_all_books(USER_ID, "tok-abc")

    assert http.call_count == 2
    assert sent(http, 0)["params"] == sent(http, 1)["params"] == {"UserId": USER_ID}

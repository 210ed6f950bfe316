# bookstore_contracts/scenarios/bookstore.py
"""
Book-store scenarios: catalog reads and collection changes.
"""

import asyncio
import time

from ..exceptions import Conflict, ContractViolation, NotFound, Unauthorized
from ..schemas import BOOK_LIST_SCHEMA, validate
from .assertions import ensure, expect_failure, expect_status
from .context import ScenarioContext
from .registry import scenario

GROUP = "bookstore"

CATALOG_LATENCY_BUDGET = 1.5


@scenario(GROUP)
def add_verify_remove_flow(ctx: ScenarioContext) -> None:
    """List -> add one -> verify -> delete one -> delete all"""
    catalog = ctx.client.books.list_catalog()
    ensure(len(catalog) > 0, "catalog is empty")
    isbn = catalog.first().isbn

    added = ctx.client.books.add_books(ctx.user_id, ctx.token, [isbn])
    ensure(isbn in added.isbns, f"add echoed {added.isbns}, missing {isbn}")

    account = ctx.client.accounts.fetch_account(ctx.user_id, ctx.token)
    ensure(account.count_isbn(isbn) == 1, f"{isbn} appears {account.count_isbn(isbn)} times")

    ctx.client.books.remove_book(ctx.user_id, ctx.token, isbn)
    ctx.client.books.remove_all_books(ctx.user_id, ctx.token)

    account = ctx.client.accounts.fetch_account(ctx.user_id, ctx.token)
    ensure(len(account.books) == 0, f"collection not empty: {account.isbns}")


@scenario(GROUP, provision=False)
def fetch_book_by_isbn(ctx: ScenarioContext) -> None:
    """Get a book by ISBN"""
    isbn = ctx.client.books.list_catalog().first().isbn
    book = ctx.client.books.fetch_book(isbn)
    ensure(book.isbn == isbn, f"fetched {book.isbn}, asked for {isbn}")
    ensure(bool(book.title), "book has no title")


@scenario(GROUP, provision=False)
def catalog_schema_and_latency(ctx: ScenarioContext) -> None:
    """Books list matches its schema, is JSON, and answers within budget"""
    start_time = time.time()
    result = ctx.raw("GET", "/BookStore/v1/Books", timeout=4)
    elapsed = time.time() - start_time

    expect_status(result, {200})
    validation = validate(BOOK_LIST_SCHEMA, result.body)
    ensure(validation.ok, f"catalog schema errors: {[str(e) for e in validation.errors[:5]]}")
    ensure("application/json" in result.content_type.lower(), f"content type {result.content_type!r}")
    ensure(elapsed < CATALOG_LATENCY_BUDGET, f"catalog took {elapsed:.2f}s")


@scenario(GROUP, provision=False)
def every_catalog_book_validates(ctx: ScenarioContext) -> None:
    """Each catalog item fetched on its own matches the Book schema"""
    isbns = ctx.client.books.list_catalog().isbns

    async def sweep():
        async with ctx.client.catalog() as catalog:
            return await catalog.fetch_books(isbns)

    checks = asyncio.run(sweep())
    failed = [f"{check.isbn}: {check.error}" for check in checks if not check.ok]
    ensure(not failed, f"{len(failed)} books failed: {failed[:3]}")


@scenario(GROUP)
def add_multiple_isbns(ctx: ScenarioContext) -> None:
    """Add multiple ISBNs at once"""
    to_add = ctx.client.books.list_catalog().isbns[:3]
    added = ctx.client.books.add_books(ctx.user_id, ctx.token, to_add)
    missing = [isbn for isbn in to_add if isbn not in added.isbns]
    ensure(not missing, f"not echoed: {missing}")


@scenario(GROUP)
def duplicate_isbn_is_not_duplicated(ctx: ScenarioContext) -> None:
    """
    Adding the same ISBN twice is either rejected or collapsed to one entry.

    Which of the two the remote side does is observed, not assumed.
    """
    isbn = ctx.client.books.list_catalog().first().isbn
    ctx.client.books.add_books(ctx.user_id, ctx.token, [isbn])

    try:
        ctx.client.books.add_books(ctx.user_id, ctx.token, [isbn])
    except (Conflict, ContractViolation) as e:
        expect_status(e, {400, 409})

    account = ctx.client.accounts.fetch_account(ctx.user_id, ctx.token)
    ensure(account.count_isbn(isbn) == 1, f"{isbn} stored {account.count_isbn(isbn)} times")


@scenario(GROUP, provision=False)
def lowercase_isbn_param(ctx: ScenarioContext) -> None:
    """GET /Book with a lowercase param name answers 400/404"""
    isbn = ctx.client.books.list_catalog().first().isbn
    result = ctx.raw("GET", "/BookStore/v1/Book", params={"isbn": isbn})
    expect_status(result, {400, 404})


@scenario(GROUP)
def remove_all_is_idempotent(ctx: ScenarioContext) -> None:
    """DELETE /Books twice in a row does not fail"""
    ctx.client.books.remove_all_books(ctx.user_id, ctx.token)
    ctx.client.books.remove_all_books(ctx.user_id, ctx.token)


@scenario(GROUP)
def remove_without_isbn(ctx: ScenarioContext) -> None:
    """DELETE /Book without isbn in body answers 400"""
    result = ctx.raw(
        "DELETE", "/BookStore/v1/Book",
        headers={"Authorization": f"Bearer {ctx.token}"},
        json={"userId": ctx.user_id},
    )
    expect_status(result, {400})


@scenario(GROUP)
def add_with_invalid_token(ctx: ScenarioContext) -> None:
    """Add book with an invalid token is refused"""
    isbn = ctx.client.books.list_catalog().first().isbn
    expect_failure(
        lambda: ctx.client.books.add_books(ctx.user_id, "invalid.token", [isbn]),
        Unauthorized,
        statuses={401},
    )


@scenario(GROUP)
def add_without_token(ctx: ScenarioContext) -> None:
    """Add book with no Authorization header is refused"""
    isbn = ctx.client.books.list_catalog().first().isbn
    expect_failure(
        lambda: ctx.client.books.add_books(ctx.user_id, None, [isbn]),
        Unauthorized,
        statuses={401},
    )


@scenario(GROUP)
def add_unknown_isbn(ctx: ScenarioContext) -> None:
    """Add a non-existing ISBN answers 400"""
    expect_failure(
        lambda: ctx.client.books.add_books(ctx.user_id, ctx.token, ["0000000000000"]),
        NotFound, ContractViolation,
        statuses={400},
    )


@scenario(GROUP, provision=False)
def invalid_isbns_are_not_found(ctx: ScenarioContext) -> None:
    """Malformed and unknown ISBNs never resolve to a book"""
    for isbn in ctx.generator.invalid_isbns():
        expect_failure(
            lambda: ctx.client.books.fetch_book(isbn),
            NotFound, ContractViolation,
            statuses={400, 404},
        )


@scenario(GROUP)
def replace_book_swaps_entry(ctx: ScenarioContext) -> None:
    """PUT /Books/{isbn} replaces one ISBN with another"""
    first, second = ctx.client.books.list_catalog().isbns[:2]
    ctx.client.books.add_books(ctx.user_id, ctx.token, [first])

    account = ctx.client.books.replace_book(ctx.user_id, ctx.token, first, second)
    ensure(account.isbns == [second], f"collection after replace: {account.isbns}")

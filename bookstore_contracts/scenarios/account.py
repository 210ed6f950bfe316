# bookstore_contracts/scenarios/account.py
"""
Account scenarios: happy path, lifecycle, and negative cases.
"""

from ..exceptions import Conflict, ContractViolation, NotFound, Unauthorized
from ..models import Credentials, TokenStatus
from .assertions import ensure, expect_failure, expect_status
from .context import ScenarioContext
from .registry import scenario

GROUP = "account"


@scenario(GROUP)
def fetch_returns_created_user(ctx: ScenarioContext) -> None:
    """GET /Account/v1/User/{id} returns the created user"""
    ensure(ctx.client.accounts.is_authorized(ctx.credentials) is True, "fresh credentials are not authorized")
    account = ctx.client.accounts.fetch_account(ctx.user_id, ctx.token)
    ensure(account.username == ctx.credentials.username, f"username {account.username!r} != {ctx.credentials.username!r}")
    ensure(account.books == [], f"new account has books: {account.isbns}")


@scenario(GROUP, provision=False)
def account_lifecycle(ctx: ScenarioContext) -> None:
    """Create, token, fetch, delete, then the old token no longer reads the account"""
    credentials = ctx.generator.unique_credentials()
    created = ctx.new_account(credentials)
    ensure(created.username == credentials.username, "create echoed a different username")

    token = ctx.client.accounts.issue_token(credentials)
    ensure(token.status is TokenStatus.SUCCESS and bool(token.token), f"token refused: {token.result}")

    account = ctx.client.accounts.fetch_account(created.user_id, token.token)
    ensure(account.username == credentials.username and account.books == [], "fetched account mismatch")

    ctx.client.accounts.delete_account(created.user_id, token.token)
    ctx.forget(created.user_id)

    expect_failure(
        lambda: ctx.client.accounts.fetch_account(created.user_id, token.token),
        Unauthorized, NotFound,
        statuses={401, 404},
    )


@scenario(GROUP, provision=False)
def unicode_and_spaces_username(ctx: ScenarioContext) -> None:
    """Create user with Unicode and surrounding spaces"""
    stamp = ctx.generator.random_string(10)
    credentials = Credentials(f" John_Ü_{stamp} ", f"Str0ng!Pass_{stamp}")
    created = ctx.new_account(credentials)
    ensure("John_Ü_" in created.username.strip(), f"unexpected username {created.username!r}")


@scenario(GROUP, provision=False)
def duplicate_user_is_rejected(ctx: ScenarioContext) -> None:
    """Creating the same generated username twice fails the second time"""
    credentials = ctx.generator.unique_credentials()
    ctx.new_account(credentials)
    expect_failure(
        lambda: ctx.client.accounts.create_account(credentials),
        Conflict, ContractViolation,
        statuses={400, 406, 409},
    )


@scenario(GROUP, provision=False)
def invalid_bodies_are_rejected(ctx: ScenarioContext) -> None:
    """Missing password, empty body and wrong content type answer 400/415"""
    missing_password = ctx.raw("POST", "/Account/v1/User", json={"userName": ctx.generator.valid_username()})
    expect_status(missing_password, {400, 415})

    empty = ctx.raw("POST", "/Account/v1/User", json={})
    expect_status(empty, {400, 415})

    wrong_type = ctx.raw(
        "POST", "/Account/v1/User",
        headers={"Content-Type": "text/plain"},
        data='{"userName": "x", "password": "y"}',
    )
    expect_status(wrong_type, {400, 415})


@scenario(GROUP)
def authorized_with_wrong_password(ctx: ScenarioContext) -> None:
    """Authorized with a wrong password reports the user as not found"""
    wrong = Credentials(ctx.credentials.username, "Wrong!Pass123")
    expect_failure(lambda: ctx.client.accounts.is_authorized(wrong), NotFound, statuses={404})


@scenario(GROUP)
def token_issued_twice_is_valid(ctx: ScenarioContext) -> None:
    """GenerateToken twice, both tokens are well-formed"""
    for _ in range(2):
        token = ctx.client.accounts.issue_token(ctx.credentials)
        ensure(token.is_success, f"token refused: {token.result}")
        ensure(len(token.token.split(".")) >= 2, f"token is not a JWT: {token.token[:20]}")


@scenario(GROUP)
def foreign_token_is_unauthorized(ctx: ScenarioContext) -> None:
    """Reading another user's account with my token is refused"""
    other = ctx.new_account()
    expect_failure(
        lambda: ctx.client.accounts.fetch_account(other.user_id, ctx.token),
        Unauthorized,
        statuses={401},
    )


@scenario(GROUP)
def missing_authorization_header(ctx: ScenarioContext) -> None:
    """GET user without Authorization header is refused"""
    expect_failure(lambda: ctx.client.accounts.fetch_account(ctx.user_id), Unauthorized, statuses={401})


@scenario(GROUP, provision=False)
def weak_password_is_rejected(ctx: ScenarioContext) -> None:
    """Weak password answers 400 with a password policy hint"""
    credentials = Credentials(ctx.generator.valid_username(), "abc123")
    error = expect_failure(lambda: ctx.client.accounts.create_account(credentials), ContractViolation, statuses={400})
    ensure("password" in error.snippet(1000).lower(), f"no password hint in {error.snippet()!r}")


@scenario(GROUP, provision=False)
def malformed_user_id(ctx: ScenarioContext) -> None:
    """GET user with a malformed id answers 400 or 401"""
    expect_failure(
        lambda: ctx.client.accounts.fetch_account("not-a-uuid"),
        Unauthorized, ContractViolation, NotFound,
        statuses={400, 401},
    )


@scenario(GROUP, provision=False)
def token_for_unknown_user_fails_in_payload(ctx: ScenarioContext) -> None:
    """GenerateToken with invalid credentials answers 200 with status Failed"""
    token = ctx.client.accounts.issue_token(Credentials("no-user", "badpass"))
    ensure(token.status is TokenStatus.FAILED, f"expected Failed, got {token.status.value}")
    ensure(token.token is None, "failed token carries a value")


@scenario(GROUP, provision=False)
def injection_usernames_are_rejected(ctx: ScenarioContext) -> None:
    """SQL injection and XSS usernames are rejected with a documented failure"""
    password = ctx.generator.valid_password()
    payloads = ctx.generator.sql_injection_payloads() + ctx.generator.xss_payloads()
    accepted = []
    stored_raw = []
    for payload in payloads:
        # Suffix keeps reruns from colliding with accounts left by earlier runs
        username = f"{payload}_{ctx.generator.random_string(6)}"
        try:
            created = ctx.new_account(Credentials(username, password))
        except (ContractViolation, Conflict):
            continue
        accepted.append(payload)
        if payload in created.username:
            stored_raw.append(payload)
    ensure(not stored_raw, f"{len(stored_raw)} attack strings stored verbatim, e.g. {stored_raw[:3]}")
    ensure(not accepted, f"{len(accepted)} attack strings accepted with 201, e.g. {accepted[:3]}")

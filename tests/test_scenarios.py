"""
Tests for the scenario layer: registry, context cleanup, runner and helpers.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from bookstore_contracts.api_caller import ApiResult
from bookstore_contracts.config import Settings
from bookstore_contracts.exceptions import ContractViolation, NotFound, Timeout, Unauthorized
from bookstore_contracts.models import AuthToken, CreatedAccount, Credentials, TokenStatus
from bookstore_contracts.scenarios import (
    DEFAULT_REGISTRY,
    CleanupLedger,
    ExpectationFailed,
    Scenario,
    ScenarioContext,
    ScenarioRegistry,
    ScenarioRunner,
    ensure,
    expect_failure,
    expect_status,
    retry_with_backoff,
)

from conftest import USER_ID


def fake_client(token: str = "tok-abc") -> MagicMock:
    """A DemoqaClient stand-in whose account calls succeed"""
    client = MagicMock()
    client.base_url = "https://bookstore.test"
    client.accounts.create_account.side_effect = lambda creds: CreatedAccount(USER_ID, creds.username)
    client.accounts.issue_token.return_value = AuthToken(TokenStatus.SUCCESS, "User authorized successfully.", token)
    return client


# ===== Registry =====

def test_registry_decorator_and_lookup() -> None:
    registry = ScenarioRegistry()

    @registry.scenario("books")
    def lists_catalog(ctx):
        """Catalog is not empty"""

    @registry.scenario("accounts", name="custom", provision=False)
    def creates_user(ctx):
        pass

    assert len(registry) == 2
    assert registry.groups() == ["books", "accounts"]
    assert registry.get("books::lists_catalog").description == "Catalog is not empty"
    assert registry.get("accounts::custom").provision is False
    assert [s.name for s in registry.all("accounts")] == ["custom"]


def test_registry_rejects_duplicates() -> None:
    registry = ScenarioRegistry()
    registry.register(Scenario("a", "g", lambda ctx: None))
    with pytest.raises(ValueError, match="g::a"):
        registry.register(Scenario("a", "g", lambda ctx: None))


def test_default_registry_holds_both_groups() -> None:
    assert set(DEFAULT_REGISTRY.groups()) == {"account", "bookstore"}
    keys = {s.key for s in DEFAULT_REGISTRY.all()}
    assert "account::account_lifecycle" in keys
    assert "bookstore::add_verify_remove_flow" in keys
    assert "bookstore::duplicate_isbn_is_not_duplicated" in keys


# ===== Context =====

def test_provision_and_teardown() -> None:
    client = fake_client()
    ledger = CleanupLedger()

    with ScenarioContext(client, ledger=ledger) as ctx:
        ctx.provision()
        assert ctx.user_id == USER_ID
        assert ctx.token == "tok-abc"
        assert ctx.owned[0].token == "tok-abc"

    client.books.remove_all_books.assert_called_once_with(USER_ID, "tok-abc")
    client.accounts.delete_account.assert_called_once_with(USER_ID, "tok-abc")
    assert ledger.attempted == 1
    assert ledger.failed == 0
    assert ctx.owned == []


def test_teardown_logs_and_counts_failures_without_raising() -> None:
    client = fake_client()
    client.accounts.delete_account.side_effect = ContractViolation("delete_account: 500", status_code=500, body="oops")
    ledger = CleanupLedger()

    ctx = ScenarioContext(client, ledger=ledger)
    ctx.provision()
    ctx.teardown()

    assert ledger.attempted == 1
    assert ledger.failed == 1
    assert ledger.failures[0]["user_id"] == USER_ID
    assert ledger.failures[0]["status_code"] == 500


def test_teardown_treats_missing_account_as_clean() -> None:
    client = fake_client()
    client.accounts.delete_account.side_effect = NotFound("gone", status_code=404)
    ledger = CleanupLedger()

    with ScenarioContext(client, ledger=ledger) as ctx:
        ctx.new_account()

    assert ledger.attempted == 1
    assert ledger.failed == 0


def test_teardown_issues_token_when_none_was_taken() -> None:
    client = fake_client(token="late-token")

    with ScenarioContext(client) as ctx:
        ctx.new_account()
        ctx.new_account()

    assert client.accounts.issue_token.call_count == 2
    assert client.accounts.delete_account.call_count == 2
    client.books.remove_all_books.assert_called_with(USER_ID, "late-token")


def test_forget_skips_cleanup() -> None:
    client = fake_client()

    with ScenarioContext(client) as ctx:
        created = ctx.new_account()
        ctx.forget(created.user_id)

    client.accounts.delete_account.assert_not_called()
    assert ctx.ledger.attempted == 0


def test_login_refused_is_contract_violation() -> None:
    client = fake_client()
    client.accounts.issue_token.return_value = AuthToken(TokenStatus.FAILED, "User authorization failed.")

    ctx = ScenarioContext(client)
    with pytest.raises(ContractViolation, match="refused"):
        ctx.login(Credentials("reader", "Secret123!"))


def test_raw_prefixes_base_url() -> None:
    client = fake_client()
    ctx = ScenarioContext(client)

    ctx.raw("POST", "/Account/v1/User", json={})

    client.api_caller.request.assert_called_once_with("POST", "https://bookstore.test/Account/v1/User", json={})


# ===== Assertions =====

def test_expect_status() -> None:
    result = ApiResult("GET", "u", 500, text="Internal Server Error")
    expect_status(ApiResult("GET", "u", 400), {400, 415})
    with pytest.raises(ExpectationFailed) as excinfo:
        expect_status(result, [400])
    assert excinfo.value.status_code == 500
    assert excinfo.value.body_snippet == "Internal Server Error"


def test_expect_failure() -> None:
    def unauthorized():
        raise Unauthorized("no token", status_code=401, body={"code": "1200"})

    error = expect_failure(unauthorized, Unauthorized, statuses={401})
    assert error.status_code == 401

    with pytest.raises(ExpectationFailed, match="got Unauthorized"):
        expect_failure(unauthorized, NotFound)

    with pytest.raises(ExpectationFailed, match="expected status"):
        expect_failure(unauthorized, Unauthorized, statuses={403})

    with pytest.raises(ExpectationFailed, match="call succeeded"):
        expect_failure(lambda: "fine", Unauthorized)


def test_ensure() -> None:
    ensure(True, "unused")
    with pytest.raises(ExpectationFailed, match="broken"):
        ensure(False, "broken")


def test_retry_with_backoff_is_opt_in_and_bounded() -> None:
    delays = []
    calls = iter([Timeout("slow"), Timeout("slow"), "ok"])

    def flaky():
        outcome = next(calls)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    assert retry_with_backoff(flaky, attempts=3, base_delay=0.5, sleep=delays.append) == "ok"
    assert delays == [0.5, 1.0]

    delays.clear()
    with pytest.raises(Timeout):
        retry_with_backoff(lambda: (_ for _ in ()).throw(Timeout("slow")), attempts=2, sleep=delays.append)
    assert delays == [1.0]

    with pytest.raises(NotFound):
        retry_with_backoff(lambda: (_ for _ in ()).throw(NotFound("x")), sleep=delays.append)

    with pytest.raises(ValueError):
        retry_with_backoff(lambda: None, attempts=0)


# ===== Runner =====

def build_registry() -> ScenarioRegistry:
    registry = ScenarioRegistry()

    @registry.scenario("alpha", provision=False)
    def passes(ctx):
        pass

    @registry.scenario("alpha", provision=False)
    def fails_expectation(ctx):
        expect_status(ApiResult("GET", "u", 200, text="{}"), {404})

    @registry.scenario("beta", provision=False)
    def raises_client_error(ctx):
        raise Unauthorized("fetch_account: 401", status_code=401, body={"code": "1200", "message": "User not authorized!"})

    @registry.scenario("beta", provision=False)
    def crashes(ctx):
        raise RuntimeError("bug in scenario")

    return registry


def test_runner_records_pass_and_fail_with_status_and_body() -> None:
    runner = ScenarioRunner(fake_client, registry=build_registry())

    df = runner.run()

    assert list(df["name"]) == ["passes", "fails_expectation", "raises_client_error", "crashes"]
    assert list(df["passed"]) == [True, False, False, False]
    rows = df.set_index("name")
    assert rows.loc["fails_expectation", "status_code"] == 200
    assert rows.loc["fails_expectation", "body_snippet"] == "{}"
    assert rows.loc["raises_client_error", "error_type"] == "Unauthorized"
    assert "User not authorized!" in rows.loc["raises_client_error", "body_snippet"]
    assert rows.loc["crashes", "error_type"] == "RuntimeError"


def test_runner_cleans_up_provisioned_accounts() -> None:
    client = fake_client()
    registry = ScenarioRegistry()

    @registry.scenario("alpha")
    def uses_account(ctx):
        ensure(ctx.token == "tok-abc", "no token")

    runner = ScenarioRunner(lambda: client, registry=registry)
    df = runner.run()

    assert bool(df["passed"].iloc[0]) is True
    client.accounts.delete_account.assert_called_once_with(USER_ID, "tok-abc")
    assert runner.generate_report()["cleanup"] == {"attempted": 1, "failed": 0, "skipped": 0}


def test_report_and_saved_files(tmp_path) -> None:
    runner = ScenarioRunner(fake_client, registry=build_registry())
    runner.run()

    report = runner.generate_report()
    assert report["alpha"]["total"] == 2
    assert report["alpha"]["passed"] == 1
    assert report["alpha"]["pass_rate"] == 50.0
    assert report["alpha"]["failed_scenarios"] == ["fails_expectation"]
    assert report["beta"]["failed"] == 2

    csv_file = tmp_path / "out" / "results.csv"
    json_file = tmp_path / "out" / "report.json"
    runner.save_results(str(csv_file), str(json_file))

    assert csv_file.read_text().startswith("name,group,passed,duration")
    assert json.loads(json_file.read_text())["beta"]["total"] == 2


def test_empty_report() -> None:
    runner = ScenarioRunner(fake_client, registry=ScenarioRegistry())
    assert runner.generate_report() == {"error": "No results to analyze"}
    assert runner.results_frame().empty


def test_run_parallel_runs_every_group() -> None:
    runner = ScenarioRunner(fake_client, registry=build_registry())

    df = runner.run_parallel(max_workers=2)

    assert len(df) == 4
    assert set(df["group"]) == {"alpha", "beta"}
    alpha = df[df["group"] == "alpha"]["name"].tolist()
    assert alpha == ["passes", "fails_expectation"]


def test_worker_bound_below_one_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_workers"):
        ScenarioRunner(fake_client, registry=build_registry(), max_workers=0)

    runner = ScenarioRunner(fake_client, registry=build_registry())
    with pytest.raises(ValueError, match="max_workers"):
        runner.run_parallel(0)
    assert runner.results == []


def test_runner_from_settings_uses_concurrency_bound() -> None:
    settings = Settings(base_url="http://localhost:8080", rate_limit=0, max_concurrent=2)

    runner = ScenarioRunner.from_settings(settings, registry=build_registry())
    client = runner.client_factory()

    assert runner.max_workers == 2
    assert client.max_concurrent == 2
    assert client.base_url == "http://localhost:8080"


def test_stale_token_during_cleanup_is_logged_and_counted(caplog) -> None:
    client = fake_client()
    client.books.remove_all_books.side_effect = Unauthorized("remove_all_books: 401", status_code=401)
    ledger = CleanupLedger()

    with caplog.at_level(logging.INFO, logger="ScenarioContext"):
        with ScenarioContext(client, ledger=ledger) as ctx:
            ctx.provision()

    assert ledger.attempted == 1
    assert ledger.failed == 0
    assert ledger.skipped == 1
    assert ledger.skips[0]["user_id"] == USER_ID
    assert any("token refused" in record.message and record.levelno == logging.INFO for record in caplog.records)

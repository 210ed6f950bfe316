# bookstore_contracts/clients/account.py
"""
Account API client: create, authorize, read and delete users.
"""

from typing import Optional

from ..exceptions import Conflict, ContractViolation, NotFound, Unauthorized
from ..models import AccountView, AuthToken, CreatedAccount, Credentials
from ..schemas import (
    ACCOUNT_SCHEMA,
    AUTHORIZED_SCHEMA,
    CREATED_ACCOUNT_SCHEMA,
    TOKEN_SCHEMA,
    validate_or_raise,
)
from .base import BaseDomainClient, Contract, error_envelope

CREATE_ACCOUNT = Contract(
    "create_account",
    success=frozenset({201}),
    failures={400: ContractViolation, 406: Conflict, 409: Conflict},
)
ISSUE_TOKEN = Contract(
    "issue_token",
    success=frozenset({200}),
    failures={400: ContractViolation},
)
IS_AUTHORIZED = Contract(
    "is_authorized",
    success=frozenset({200}),
    failures={400: ContractViolation, 404: NotFound},
)
FETCH_ACCOUNT = Contract(
    "fetch_account",
    success=frozenset({200}),
    failures={400: ContractViolation, 401: Unauthorized, 404: NotFound},
)
DELETE_ACCOUNT = Contract(
    "delete_account",
    success=frozenset({200, 204}),
    failures={400: ContractViolation, 401: Unauthorized, 404: NotFound},
)


class AccountClient(BaseDomainClient):
    """Client for /Account/v1"""

    def create_account(self, credentials: Credentials) -> CreatedAccount:
        """
        Register a new user.

        Raises:
            Conflict: the username is already taken
            ContractViolation: any other status than 201 (e.g. weak password)
        """
        result = self._call(CREATE_ACCOUNT, "POST", "/Account/v1/User", json=credentials.to_payload())
        body = validate_or_raise(CREATED_ACCOUNT_SCHEMA, result.body, CREATE_ACCOUNT.operation)
        account = CreatedAccount.from_dict(body)
        self.logger.info(f"Created account {account.username} ({account.user_id})")
        return account

    def issue_token(self, credentials: Credentials) -> AuthToken:
        """
        Request a bearer token.

        Wrong credentials still answer 200; the returned token then has
        status FAILED and no value. Callers decide what that means.
        """
        result = self._call(ISSUE_TOKEN, "POST", "/Account/v1/GenerateToken", json=credentials.to_payload())
        body = validate_or_raise(TOKEN_SCHEMA, result.body, ISSUE_TOKEN.operation)
        try:
            token = AuthToken.from_dict(body)
        except ValueError:
            raise ContractViolation(
                f"issue_token: unknown status marker {body['status']!r}",
                operation=ISSUE_TOKEN.operation,
                status_code=result.status_code,
                body=body,
            ) from None
        if not token.is_success:
            self.logger.info(f"Token refused for {credentials.username}: {token.result}")
        return token

    def is_authorized(self, credentials: Credentials) -> bool:
        result = self._call(IS_AUTHORIZED, "POST", "/Account/v1/Authorized", json=credentials.to_payload())
        return validate_or_raise(AUTHORIZED_SCHEMA, result.body, IS_AUTHORIZED.operation)

    def fetch_account(self, user_id: str, token: Optional[str] = None) -> AccountView:
        """
        Read a user and their books.

        Raises:
            Unauthorized: no token, a bad token, or another user's token
            NotFound: the id does not resolve
        """
        result = self._call(FETCH_ACCOUNT, "GET", f"/Account/v1/User/{user_id}", token=token)
        body = validate_or_raise(ACCOUNT_SCHEMA, result.body, FETCH_ACCOUNT.operation)
        return AccountView.from_dict(body)

    def delete_account(self, user_id: str, token: Optional[str] = None) -> None:
        """
        Delete a user.

        A repeated delete is not reported as success: the remote side answers
        either 404 or a 200 carrying an error envelope, and both raise NotFound.
        """
        result = self._call(DELETE_ACCOUNT, "DELETE", f"/Account/v1/User/{user_id}", token=token)
        envelope = error_envelope(result.body)
        if envelope:
            raise NotFound(
                f"delete_account: {envelope['message']}",
                operation=DELETE_ACCOUNT.operation,
                status_code=result.status_code,
                body=result.body,
            )
        self.logger.info(f"Deleted account {user_id}")

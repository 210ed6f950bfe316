# bookstore_contracts/payloads.py
"""
Valid and adversarial input generation for identity and ISBN fields.

Catalog methods are pure and return a fresh list on every call, in a fixed
order. Only the uniqueness generators (usernames, passwords) depend on
time and randomness.
"""

import random
import string
import time
from typing import Any, Callable, Dict, List, Optional, Set

from .models import Credentials, Payload, PayloadClass

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits

# Numbers beyond the JavaScript safe-integer range the remote side runs on
MAX_SAFE_INTEGER = 2 ** 53 - 1


class PayloadGenerator:
    """
    Produces identities that do not collide within a run and fixed catalogs
    of edge-case and attack strings.

    Pass a seeded `random.Random` to make the random suffixes reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._issued: Set[str] = set()

    # ===== Unique identities =====

    def random_string(self, length: int = 8) -> str:
        return "".join(self.rng.choice(ALPHABET) for _ in range(length))

    def valid_username(self) -> str:
        while True:
            username = f"testuser_{self._now_ms()}_{self.random_string(5)}"
            if username not in self._issued:
                self._issued.add(username)
                return username

    def valid_password(self) -> str:
        return f"TestPass123!{self._now_ms()}"

    def unique_credentials(self) -> Credentials:
        return Credentials(username=self.valid_username(), password=self.valid_password())

    def _now_ms(self) -> int:
        return int(time.time() * 1000)

    # ===== Identity edge cases =====

    def invalid_usernames(self) -> List[str]:
        return [
            "",
            "a",
            "ab",
            "user with spaces",
            "user@domain.com",
            "1234567890" * 12,
            "user#test",
            "user$test",
        ]

    def invalid_passwords(self) -> List[str]:
        """Each entry breaks at least one complexity rule"""
        return [
            "",
            "123",
            "password",
            "PASSWORD",
            "12345678",
            "Password",
            "Password123",
            "password123!",
            "PASSWORD123!",
        ]

    # ===== Attack catalogs =====

    def sql_injection_payloads(self) -> List[str]:
        return [
            "'; DROP TABLE users; --",
            "' OR '1'='1",
            "' OR 1=1 --",
            "' UNION SELECT * FROM users --",
            "admin'--",
            "admin' #",
            "admin'/*",
            "' or 1=1#",
            "' or 1=1--",
            "') or '1'='1--",
            "') or ('1'='1--",
        ]

    def xss_payloads(self) -> List[str]:
        return [
            "<script>alert('XSS')</script>",
            "<img src=x onerror=alert('XSS')>",
            "javascript:alert('XSS')",
            "<svg onload=alert('XSS')>",
            "<iframe src=javascript:alert('XSS')></iframe>",
            "<body onload=alert('XSS')>",
            "<input onfocus=alert('XSS') autofocus>",
            "<select onfocus=alert('XSS') autofocus>",
            "<textarea onfocus=alert('XSS') autofocus>",
            "<keygen onfocus=alert('XSS') autofocus>",
        ]

    # ===== Size, encoding and type edges =====

    def large_payload(self, size: int = 10000, filler: str = "A") -> str:
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        return filler * size

    def special_characters_payload(self) -> str:
        return "!@#$%^&*()_+-=[]{}|;':,.<>?/~`"

    def unicode_payload(self) -> str:
        return "测试用户名αβγδεζηθικλμνξοπρστυφχψω🚀🎉💻🔥"

    def null_payloads(self) -> List[Any]:
        return [None, "null", "undefined", "NULL", "UNDEFINED"]

    def boolean_payloads(self) -> List[Any]:
        return [True, False, "true", "false", "TRUE", "FALSE", 1, 0]

    def numeric_payloads(self) -> List[Any]:
        return [
            0,
            -1,
            1,
            10 ** 30,
            -(10 ** 30),
            3.14159,
            -3.14159,
            MAX_SAFE_INTEGER,
            -MAX_SAFE_INTEGER,
            float("inf"),
            float("-inf"),
            float("nan"),
        ]

    # ===== ISBNs =====

    def test_book_isbns(self) -> List[str]:
        """ISBNs known to exist in the demo catalog"""
        return [
            "9781449325862",
            "9781449331818",
            "9781449337711",
            "9781449365035",
            "9781491904244",
            "9781491950296",
            "9781593275846",
            "9781593277574",
        ]

    def invalid_isbns(self) -> List[str]:
        return [
            "",
            "123",
            "12345678901234567890",
            "invalid-isbn",
            "978-1-449-32586-2",
            "9781449325863",  # bad checksum
            "abcdefghijklm",
            "!@#$%^&*()",
        ]

    # ===== Tagged access =====

    def payloads_for(self, payload_class: PayloadClass) -> List[Payload]:
        """Every value of one payload class, tagged"""
        builders: Dict[PayloadClass, Callable[[], List[Any]]] = {
            PayloadClass.VALID: lambda: [self.valid_username()],
            PayloadClass.EMPTY: lambda: ["", "   "],
            PayloadClass.OVERSIZED: lambda: [self.large_payload()],
            PayloadClass.SQL_INJECTION: self.sql_injection_payloads,
            PayloadClass.XSS: self.xss_payloads,
            PayloadClass.UNICODE: lambda: [self.unicode_payload()],
            PayloadClass.NULL_LIKE: self.null_payloads,
            PayloadClass.NUMERIC_EDGE: self.numeric_payloads,
            PayloadClass.SPECIAL_CHARACTERS: lambda: [self.special_characters_payload()],
            PayloadClass.BOOLEAN: self.boolean_payloads,
            PayloadClass.INVALID_USERNAME: self.invalid_usernames,
            PayloadClass.INVALID_PASSWORD: self.invalid_passwords,
            PayloadClass.INVALID_ISBN: self.invalid_isbns,
        }
        values = builders[payload_class]()
        return [Payload(payload_class, value) for value in values]

    def adversarial_payloads(self) -> List[Payload]:
        """All string-valued attack and edge payloads, in a stable order"""
        classes = [
            PayloadClass.EMPTY,
            PayloadClass.OVERSIZED,
            PayloadClass.SQL_INJECTION,
            PayloadClass.XSS,
            PayloadClass.UNICODE,
            PayloadClass.SPECIAL_CHARACTERS,
        ]
        payloads = []
        for payload_class in classes:
            payloads.extend(self.payloads_for(payload_class))
        return payloads

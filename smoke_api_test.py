#!/usr/bin/env python3
"""
Smoke test against a running clinic back-office server.

Logs in as each demo account (see ``manage.py ensure_demo_accounts``) and
hits the endpoints that account is expected to reach, then prints a
summary of failures.
"""
import os
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

BASE_URL = os.getenv("SMOKE_BASE_URL", "http://127.0.0.1:8000")
PASSWORD = os.getenv("SMOKE_PASSWORD", "123456")

# demo accounts, one per access level
TEST_USERS = {
    "owner": {"username": "owner", "level": "Owner"},
    "coowner": {"username": "coowner", "level": "Co-owner"},
    "admin": {"username": "admin", "level": "Admin"},
    "dokter": {"username": "dokter", "level": "Dokter"},
}

COMMON = [
    ("GET", "/healthz", None, 200, "health check"),
    ("GET", "/api/auth/me", None, 200, "current user"),
    ("GET", "/api/menu", None, 200, "menu"),
    ("GET", "/api/clinic-settings", None, 200, "clinic profile"),
    ("GET", "/api/doctors/active", None, 200, "active doctors"),
    ("GET", "/api/patients", None, 200, "patients"),
    ("GET", "/api/treatments", None, 200, "treatments"),
    ("GET", "/api/treatment-products", None, 200, "treatment products"),
    ("GET", "/api/medication-products", None, 200, "medication products"),
    ("GET", "/api/fee-settings", None, 200, "fee settings"),
    ("GET", "/api/dashboard", None, 200, "dashboard"),
    ("POST", "/api/vouchers/validate", {"code": "SMOKE-NONE", "treatmentAmount": 100000}, 200, "voucher check"),
]

STAFF = [
    ("GET", "/api/doctors", None, 200, "doctors"),
    ("GET", "/api/employees", None, 200, "employees"),
    ("GET", "/api/products", None, 200, "products"),
    ("GET", "/api/field-trip-products", None, 200, "field trip products"),
    ("GET", "/api/field-trip-sales", None, 200, "field trip sales"),
    ("GET", "/api/vouchers", None, 200, "vouchers"),
    ("GET", "/api/vouchers/usage", None, 200, "voucher usage"),
    ("GET", "/api/vouchers/stats", None, 200, "voucher stats"),
]

OWNER = [
    ("GET", "/api/salaries", None, 200, "salaries"),
    ("GET", "/api/reports/doctor-fees", None, 200, "doctor fee report"),
]

SUPER_USER = [
    ("GET", "/api/user-accounts", None, 200, "user accounts"),
]

DENIED_FOR_DOCTOR = [
    ("GET", "/api/employees", None, 403, "employees denied"),
    ("GET", "/api/salaries", None, 403, "salaries denied"),
    ("GET", "/api/user-accounts", None, 403, "user accounts denied"),
]


@dataclass
class TestResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    description: str = ""
    user_role: str = ""


class SmokeTester:
    def __init__(self):
        self.session = requests.Session()
        self.headers: Dict[str, str] = {}
        self.current_role: Optional[str] = None
        self.refresh: Optional[str] = None
        self.test_results: List[TestResult] = []
        self.error_results: List[TestResult] = []

    def _record(self, result: TestResult):
        self.test_results.append(result)
        if not result.success:
            self.error_results.append(result)

    def login(self, username: str, role: str) -> bool:
        print(f"login as {username} ({role})...")
        start = time.time()
        try:
            response = self.session.post(f"{BASE_URL}/api/auth/login",
                                         json={"username": username, "password": PASSWORD})
        except requests.RequestException as e:
            self._record(TestResult(False, "/api/auth/login", "POST", 0, 0, str(e), f"{username} login", role))
            print(f"  error: {e}")
            return False
        elapsed = time.time() - start
        if response.status_code != 200:
            self._record(TestResult(False, "/api/auth/login", "POST", response.status_code, elapsed,
                                    response.text[:200], f"{username} login", role))
            print(f"  failed: {response.status_code} {response.text[:100]}")
            return False

        data = response.json()
        # JWT first; the legacy token still works for older clients
        self.headers = {"Authorization": f"Bearer {data['jwt_access']}"}
        self.refresh = data.get("jwt_refresh")
        self.current_role = role
        self._record(TestResult(True, "/api/auth/login", "POST", 200, elapsed, description=f"{username} login",
                                user_role=role))
        print(f"  ok ({elapsed:.2f}s), accessLevel={data.get('accessLevel')}")
        return True

    def test_endpoint(self, method: str, endpoint: str, data: Optional[dict] = None,
                      expected_status: int = 200, description: str = "") -> TestResult:
        url = f"{BASE_URL}{endpoint}"
        start = time.time()
        try:
            response = self.session.request(method.upper(), url, json=data, headers=self.headers)
        except requests.RequestException as e:
            result = TestResult(False, endpoint, method, 0, time.time() - start, str(e), description,
                                self.current_role or "")
            print(f"  ERR  {method} {endpoint}: {e}")
            self._record(result)
            return result

        elapsed = time.time() - start
        ok = response.status_code == expected_status
        result = TestResult(ok, endpoint, method, response.status_code, elapsed,
                            "" if ok else response.text[:200], description, self.current_role or "")
        print(f"  {'ok  ' if ok else 'FAIL'} {method} {endpoint} -> {response.status_code} ({elapsed:.2f}s)")
        self._record(result)
        return result

    def test_role(self, role: str):
        user = TEST_USERS[role]
        if not self.login(user["username"], user["level"]):
            return

        cases = list(COMMON)
        if role in ("owner", "coowner", "admin"):
            cases += STAFF
        if role in ("owner", "coowner"):
            cases += OWNER
        if role == "owner":
            cases += SUPER_USER
        if role == "dokter":
            cases += DENIED_FOR_DOCTOR

        for method, endpoint, data, expected, description in cases:
            self.test_endpoint(method, endpoint, data, expected, description)

        self.test_endpoint("POST", "/api/auth/refresh", {"refresh": self.refresh}, 200, "refresh token")
        self.test_endpoint("POST", "/api/auth/logout", None, 200, "logout")
        # the access token is still valid until it expires; the refresh token is not
        self.test_endpoint("POST", "/api/auth/refresh", {"refresh": self.refresh}, 401, "refresh after logout")

    def run(self) -> bool:
        print("clinic back-office smoke test")
        print("=" * 50)
        for role in TEST_USERS:
            self.test_role(role)
            self.session = requests.Session()
            self.headers = {}
            self.current_role = None
            self.refresh = None
        self.report()
        return not self.error_results

    def report(self):
        total = len(self.test_results)
        passed = sum(1 for r in self.test_results if r.success)
        rate = (passed / total) * 100 if total else 0
        print(f"\ntotal: {total}  passed: {passed}  failed: {len(self.error_results)}  ({rate:.1f}%)")
        if self.error_results:
            print("=" * 80)
            for i, error in enumerate(self.error_results, 1):
                print(f"{i}. [{error.user_role}] {error.method} {error.endpoint}")
                print(f"   status: {error.status_code}")
                print(f"   error: {error.error_message}")
                print(f"   case: {error.description}")
                print("-" * 80)


def main():
    tester = SmokeTester()
    if tester.run():
        print("\nall endpoints answered as expected")
        sys.exit(0)
    print(f"\n{len(tester.error_results)} problem(s) found, see details above")
    sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Smoke check of the dashboard API against a running server.

Walks every read route, then creates and removes a throwaway department,
bed, medicine, stock record and protocol.  Exit status is non-zero when
any call returns an unexpected status.

    python smoke_api.py --base-url http://127.0.0.1:8000 [--username ops --password ...]
"""
import argparse
import sys
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests


@dataclass
class CheckResult:
    method: str
    endpoint: str
    status_code: int
    expected: int
    response_time: float
    error_message: str = ''

    @property
    def success(self) -> bool:
        return self.status_code == self.expected


class SmokeTester:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()
        self.results: list[CheckResult] = []

    def login(self, username: str, password: str) -> bool:
        r = self.session.post(f'{self.base_url}/v1/auth/login', json={'username': username, 'password': password})
        if r.status_code != 200:
            print(f'login failed for {username}: {r.status_code} {r.text[:100]}')
            return False
        self.session.headers['Authorization'] = f"Token {r.json()['token']}"
        print(f'logged in as {username}')
        return True

    def call(self, method: str, endpoint: str, data: Any = None, expected: int = 200) -> Optional[Any]:
        started = time.time()
        try:
            r = self.session.request(method, f'{self.base_url}{endpoint}', json=data, timeout=10)
        except requests.RequestException as e:
            self.results.append(CheckResult(method, endpoint, 0, expected, time.time() - started, str(e)))
            print(f'ERR  {method} {endpoint}: {e}')
            return None
        result = CheckResult(method, endpoint, r.status_code, expected, time.time() - started)
        if not result.success:
            result.error_message = r.text[:200]
        self.results.append(result)
        mark = 'ok ' if result.success else 'FAIL'
        print(f'{mark} {method} {endpoint} -> {r.status_code} ({result.response_time:.2f}s)')
        try:
            return r.json()
        except ValueError:
            return None

    def check_reads(self):
        for endpoint in ('/healthz', '/v1/web/staff', '/v1/web/departments', '/v1/web/beds',
                         '/v1/web/medicines', '/v1/web/inventory', '/v1/web/diseases',
                         '/v1/web/hospital', '/v1/web/stats', '/v1/web/alerts'):
            self.call('GET', endpoint)

    def check_write_cycle(self):
        stamp = int(time.time())
        dept = self.call('POST', '/v1/web/departments', {'name': f'Smoke {stamp}'}, 201)
        med = self.call('POST', '/v1/web/medicines', {
            'name': f'Smoke-{stamp}', 'form': 'Tablet', 'strength': '1mg', 'unit': 'mg',
        }, 201)
        if not dept or not med:
            return
        bed = self.call('POST', '/v1/web/beds', {'type': 'General', 'departmentId': dept['id']}, 201)
        stock = self.call('POST', '/v1/web/inventory', {'medicineId': med['id'], 'availableQty': 5}, 201)
        disease = self.call('POST', '/v1/web/diseases', {
            'name': f'Smoke protocol {stamp}',
            'subcategories': [{'name': 'Default', 'age_groups': [
                {'group': 'ADULT', 'age_range': '18-60', 'medicines': [{'medicineId': med['id'], 'dosage': '1 tab'}]},
            ]}],
        }, 201)
        # clean up in dependency order
        if disease:
            self.call('DELETE', f"/v1/web/diseases/{disease['id']}")
        if stock:
            self.call('DELETE', f"/v1/web/inventory/{stock['id']}")
        if bed:
            self.call('DELETE', f"/v1/web/beds/{bed['id']}")
        self.call('DELETE', f"/v1/web/medicines/{med['id']}")
        self.call('DELETE', f"/v1/web/departments/{dept['id']}")

    def report(self) -> bool:
        failed = [r for r in self.results if not r.success]
        print('=' * 50)
        print(f'{len(self.results)} calls, {len(failed)} failed')
        for r in failed:
            print(f'  {r.method} {r.endpoint}: expected {r.expected}, got {r.status_code} {r.error_message}')
        return not failed


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument('--base-url', default='http://127.0.0.1:8000')
    parser.add_argument('--username')
    parser.add_argument('--password')
    parser.add_argument('--read-only', action='store_true')
    args = parser.parse_args()

    tester = SmokeTester(args.base_url)
    if args.username and not tester.login(args.username, args.password or ''):
        return 1
    tester.check_reads()
    if not args.read_only:
        tester.check_write_cycle()
    return 0 if tester.report() else 1


if __name__ == '__main__':
    sys.exit(main())

"""
API probe: calls the public and authenticated endpoints of a running server
and prints one line per check.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Awaitable, Callable, List, Optional, Tuple

import httpx

from keyhost.client.api import KeyhostAPIError, KeyhostClient
from keyhost.config import settings

logger = logging.getLogger(__name__)

CheckResult = Tuple[str, bool, str]


async def _check(name: str, call: Callable[[], Awaitable[str]]) -> CheckResult:
    try:
        return name, True, await call()
    except KeyhostAPIError as e:
        return name, False, f"HTTP {e.status_code}: {e.message}"
    except httpx.HTTPError as e:
        return name, False, f"{type(e).__name__}: {e}"


async def probe(
    client: KeyhostClient,
    email: Optional[str] = None,
    password: Optional[str] = None,
) -> List[CheckResult]:
    """
    Run every check that the given credentials allow.

    Checks after a failed login are skipped rather than reported as failures
    of their own.
    """

    async def health():
        body = await client.health()
        return f"{body.get('status')} (database {body.get('database')})"

    async def public_settings():
        data = await client.public_settings()
        return f"{len(data)} public setting(s)"

    async def properties():
        data = await client.list_properties(limit=1)
        return f"{data['pagination']['total_items']} active propert(y/ies)"

    results = [
        await _check("health", health),
        await _check("public settings", public_settings),
        await _check("properties", properties),
    ]

    if not (email and password):
        return results

    async def login():
        data = await client.login(email, password)
        return f"logged in as {data['user']['email']} ({data['user']['user_type']})"

    results.append(await _check("login", login))
    if not results[-1][1]:
        return results

    async def dashboard():
        data = await client.admin_dashboard()
        stats = data["stats"]
        return f"{stats['total_users']} user(s), {stats['total_bookings']} booking(s)"

    async def owner_properties():
        data = await client.list_owner_properties(limit=1)
        return f"{data['pagination']['total_items']} owned propert(y/ies)"

    results.append(await _check("admin dashboard", dashboard))
    results.append(await _check("owner properties", owner_properties))
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keyhost-probe", description="Check a running Keyhost API")
    parser.add_argument("--base-url", default=f"http://localhost:{settings.port}", help="Server address")
    parser.add_argument("--email", default=os.getenv("KEYHOST_PROBE_EMAIL"), help="Account for authenticated checks")
    parser.add_argument("--password", default=os.getenv("KEYHOST_PROBE_PASSWORD"))
    parser.add_argument("--timeout", type=float, default=10.0)
    return parser


async def run(args: argparse.Namespace) -> List[CheckResult]:
    async with KeyhostClient(args.base_url, api_prefix=settings.api_prefix, timeout=args.timeout) as client:
        return await probe(client, args.email, args.password)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)

    results = asyncio.run(run(args))
    for name, ok, detail in results:
        print(f"{'PASS' if ok else 'FAIL'} {name}: {detail}")

    failed = sum(1 for _, ok, _ in results if not ok)
    print(f"{len(results) - failed}/{len(results)} checks passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Quick health check script.

Usage:
    python check_health.py                              # Check services from this process
    python check_health.py --url http://localhost:8000  # Ask a running server
    python check_health.py --json                       # Output as JSON
"""

import asyncio
import argparse
import json
import sys
from pathlib import Path

import httpx

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from app.services.healthcheck import get_health_checker, HealthStatus


COLORS = {
    HealthStatus.HEALTHY.value: "\033[92m",    # Green
    HealthStatus.DEGRADED.value: "\033[93m",   # Yellow
    HealthStatus.UNHEALTHY.value: "\033[91m",  # Red
    HealthStatus.UNKNOWN.value: "\033[90m",    # Gray
}
RESET = "\033[0m"


async def fetch_report(url: str | None) -> dict:
    """Run checks locally, or fetch them from a running server's /health/services."""
    if not url:
        report = await get_health_checker().run_all_checks()
        return report.to_dict()

    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(f"{url.rstrip('/')}/health/services")
        response.raise_for_status()
        return response.json()


def print_report(report: dict) -> None:
    print("\n" + "=" * 60)
    print("  MEAL PLANNER HEALTH CHECK")
    print(f"  Version: {report['version']}")
    print(f"  Time: {report['timestamp']}")
    print("=" * 60 + "\n")

    color = COLORS.get(report["status"], "")
    print(f"  Overall: {color}{report['status'].upper()}{RESET}")
    print(f"  Summary: {report['summary']}\n")

    print("  " + "-" * 56)
    print(f"  {'Service':<20} {'Status':<12} {'Latency':<10} Message")
    print("  " + "-" * 56)

    for check in report["checks"]:
        color = COLORS.get(check["status"], "")
        status = f"{color}{check['status']:<12}{RESET}"
        latency = f"{check['latency_ms']:.0f}ms" if check["latency_ms"] else "-"
        print(f"  {check['name']:<20} {status} {latency:<10} {check['message']}")

    print("  " + "-" * 56 + "\n")


async def main():
    parser = argparse.ArgumentParser(description="Check system health")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--url", help="Base URL of a running server")
    args = parser.parse_args()

    try:
        report = await fetch_report(args.url)
    except httpx.HTTPError as e:
        print(f"Could not reach {args.url}: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_report(report)

    # Degraded is still operational
    if report["status"] == HealthStatus.UNHEALTHY.value:
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    asyncio.run(main())

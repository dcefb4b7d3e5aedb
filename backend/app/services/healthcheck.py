"""
Health check system.

Checks:
- API responsiveness
- Database connectivity (Supabase)
- Tables the shopping list service reads and writes
- Security configuration
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from app.config import get_settings

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


@dataclass
class CheckResult:
    """Outcome of one check."""
    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0
    details: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "latency_ms": round(self.latency_ms, 2),
            "details": self.details,
        }


def overall_status(results: list[CheckResult]) -> HealthStatus:
    """All healthy -> healthy, all unhealthy -> unhealthy, anything else degraded."""
    statuses = {r.status for r in results}
    if statuses == {HealthStatus.HEALTHY}:
        return HealthStatus.HEALTHY
    if statuses == {HealthStatus.UNHEALTHY}:
        return HealthStatus.UNHEALTHY
    return HealthStatus.DEGRADED


@dataclass
class HealthReport:
    status: HealthStatus
    checks: list[CheckResult]
    timestamp: datetime = field(default_factory=_utcnow)
    version: str = VERSION

    @property
    def healthy_count(self) -> int:
        return len([c for c in self.checks if c.status == HealthStatus.HEALTHY])

    @property
    def total_count(self) -> int:
        return len(self.checks)

    def get(self, name: str) -> CheckResult | None:
        return next((c for c in self.checks if c.name == name), None)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp.isoformat(),
            "summary": f"{self.healthy_count}/{self.total_count} checks passing",
            "checks": [c.to_dict() for c in self.checks],
        }


class HealthChecker:
    """Runs every check concurrently and folds them into one report."""

    async def run_all_checks(self) -> HealthReport:
        outcomes = await asyncio.gather(
            self.check_api(),
            self.check_supabase(),
            self.check_schema(),
            self.check_config(),
            return_exceptions=True,
        )

        results = [
            outcome if isinstance(outcome, CheckResult)
            else CheckResult(name="unknown", status=HealthStatus.UNHEALTHY, message=str(outcome))
            for outcome in outcomes
        ]
        return HealthReport(status=overall_status(results), checks=results)

    async def check_api(self) -> CheckResult:
        start = time.perf_counter()
        return CheckResult(
            name="api",
            status=HealthStatus.HEALTHY,
            message="API is responsive",
            latency_ms=_elapsed_ms(start),
        )

    async def check_supabase(self) -> CheckResult:
        """Round-trip one query to the database."""
        start = time.perf_counter()
        try:
            from app.services.supabase import get_supabase_client, TABLES

            get_supabase_client().table(TABLES["meal_plans"]).select("id").limit(1).execute()
        except Exception as e:
            logger.warning(f"Supabase health check failed: {e}")
            return CheckResult(
                name="supabase",
                status=HealthStatus.UNHEALTHY,
                message=f"Database error: {e}",
                latency_ms=_elapsed_ms(start),
            )

        return CheckResult(
            name="supabase",
            status=HealthStatus.HEALTHY,
            message="Database connected",
            latency_ms=_elapsed_ms(start),
            details={"connected": True},
        )

    async def check_schema(self) -> CheckResult:
        """Every table generation and list management touch must be queryable."""
        from app.services.supabase import get_supabase_client, TABLES

        start = time.perf_counter()
        unreachable = []
        for table in TABLES.values():
            try:
                get_supabase_client().table(table).select("id").limit(1).execute()
            except Exception as e:
                logger.debug(f"Table {table} not queryable: {e}")
                unreachable.append(table)

        if not unreachable:
            status, message = HealthStatus.HEALTHY, f"{len(TABLES)} tables reachable"
        elif len(unreachable) == len(TABLES):
            status, message = HealthStatus.UNHEALTHY, "No tables reachable"
        else:
            status, message = HealthStatus.DEGRADED, f"Unreachable: {', '.join(unreachable)}"

        return CheckResult(
            name="schema",
            status=status,
            message=message,
            latency_ms=_elapsed_ms(start),
            details={"unreachable": unreachable},
        )

    async def check_config(self) -> CheckResult:
        """Production deployments must require an API key."""
        settings = get_settings()
        if settings.is_production and not settings.api_key:
            return CheckResult(
                name="config",
                status=HealthStatus.DEGRADED,
                message="API_KEY not set; /api endpoints are open",
                details={"environment": settings.environment},
            )
        return CheckResult(
            name="config",
            status=HealthStatus.HEALTHY,
            message="Configuration OK",
            details={"environment": settings.environment, "api_key_required": bool(settings.api_key)},
        )


_health_checker: HealthChecker | None = None


def get_health_checker() -> HealthChecker:
    global _health_checker
    if _health_checker is None:
        _health_checker = HealthChecker()
    return _health_checker

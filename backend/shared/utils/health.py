"""
Health Check Utilities.

Decorator and aggregation helpers so every dependency check reports the
same shape and never hangs the health endpoint.

Usage:
    from shared.utils.health import health_check_with_timeout

    @health_check_with_timeout(timeout=3.0, component="database")
    async def check_database_health():
        ...
        return {"dialect": "sqlite"}

    # Returns HealthCheckResult(status=HEALTHY, component="database", latency_ms=..., details={...})
"""

from __future__ import annotations

import asyncio
import functools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Coroutine

from shared.config.logging import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    """Result of a single component check."""
    status: HealthStatus
    component: str
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status.value,
            "component": self.component,
        }
        if self.latency_ms is not None:
            result["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


def health_check_with_timeout(
    timeout: float = 5.0,
    component: str | None = None,
):
    """
    Wrap an async check so it returns a HealthCheckResult instead of raising.

    A timeout or any exception marks the component unhealthy. A dict returned
    by the wrapped function becomes the result details.
    """
    def decorator(
        func: Callable[..., Coroutine[Any, Any, dict[str, Any] | None]]
    ) -> Callable[..., Coroutine[Any, Any, HealthCheckResult]]:
        comp_name = component or func.__name__.replace("check_", "").replace("_health", "")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> HealthCheckResult:
            start_time = time.perf_counter()
            try:
                result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
            except asyncio.TimeoutError:
                latency_ms = (time.perf_counter() - start_time) * 1000
                logger.warning("Health check timeout", component=comp_name, timeout=timeout)
                return HealthCheckResult(
                    status=HealthStatus.UNHEALTHY,
                    component=comp_name,
                    latency_ms=latency_ms,
                    error=f"timeout after {timeout}s",
                )
            except Exception as e:
                latency_ms = (time.perf_counter() - start_time) * 1000
                logger.warning("Health check failed", component=comp_name, error=str(e))
                return HealthCheckResult(
                    status=HealthStatus.UNHEALTHY,
                    component=comp_name,
                    latency_ms=latency_ms,
                    error=str(e),
                )

            return HealthCheckResult(
                status=HealthStatus.HEALTHY,
                component=comp_name,
                latency_ms=(time.perf_counter() - start_time) * 1000,
                details=result if isinstance(result, dict) else {},
            )

        return wrapper
    return decorator


async def aggregate_health_checks(
    checks: list[Coroutine[Any, Any, HealthCheckResult]],
) -> dict[str, Any]:
    """
    Run checks concurrently. Overall status is degraded if any component is not healthy.
    """
    results = await asyncio.gather(*checks, return_exceptions=True)

    components: dict[str, dict] = {}
    all_healthy = True

    for result in results:
        if isinstance(result, HealthCheckResult):
            components[result.component] = result.to_dict()
            if result.status != HealthStatus.HEALTHY:
                all_healthy = False
        elif isinstance(result, Exception):
            components["unknown"] = {
                "status": HealthStatus.UNHEALTHY.value,
                "error": str(result),
            }
            all_healthy = False

    return {
        "status": HealthStatus.HEALTHY.value if all_healthy else HealthStatus.DEGRADED.value,
        "components": components,
    }

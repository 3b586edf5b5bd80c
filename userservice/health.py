"""Liveness probes against the backing store."""

from __future__ import annotations

import abc
import logging

import anyio

from .database import Database

logger = logging.getLogger("userservice.health")


class HealthService(abc.ABC):
    @abc.abstractmethod
    async def check_health(self) -> bool:
        """Return ``True`` when the backing store answers queries."""


class DatabaseHealthService(HealthService):
    """Report database reachability by running ``SELECT 1``.

    Failures are logged and reported as ``False``; they are never raised.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def check_health(self) -> bool:
        try:
            await anyio.to_thread.run_sync(self._database.ping)
        except Exception as exc:
            logger.warning("Database health check failed: %s", exc)
            return False
        return True


__all__ = ["DatabaseHealthService", "HealthService"]

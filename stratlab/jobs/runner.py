"""Background simulation jobs with pollable status.

A strategy moves through ``saved -> in_progress -> completed``. A failed or
cancelled run returns to ``saved`` with the error recorded. The simulation
itself is synchronous and CPU-bound, so each job runs ``engine.run`` in a
worker thread wrapped by an asyncio task.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from stratlab.backtest.engine import SimulationEngine
from stratlab.core.config import StrategyConfig, parse_strategy
from stratlab.core.event_bus import EventBus
from stratlab.core.exceptions import SimulationError
from stratlab.core.results import SimulationResults

logger = logging.getLogger(__name__)

STATUS_EVENT = "simulation.status"


class StrategyStatus(str, Enum):
    SAVED = "saved"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class JobSnapshot:
    """Point-in-time view of a strategy's simulation job."""

    strategy_id: str
    status: StrategyStatus
    results: SimulationResults | None = None
    error: str | None = None


@dataclass
class _Job:
    strategy_id: str
    strategy: StrategyConfig
    status: StrategyStatus = StrategyStatus.SAVED
    results: SimulationResults | None = None
    error: str | None = None
    task: asyncio.Task | None = None

    def snapshot(self) -> JobSnapshot:
        return JobSnapshot(
            strategy_id=self.strategy_id,
            status=self.status,
            results=self.results,
            error=self.error,
        )


class SimulationJobRunner:
    """Schedules simulations and tracks their status per strategy id.

    Usage::

        runner = SimulationJobRunner(SimulationEngine(provider))
        await runner.submit("s1", strategy_doc)
        snapshot = runner.poll("s1")       # in_progress
        snapshot = await runner.wait("s1")  # completed (or saved on failure)
    """

    def __init__(self, engine: SimulationEngine, bus: EventBus | None = None) -> None:
        self._engine = engine
        self._bus = bus
        self._jobs: dict[str, _Job] = {}

    async def submit(
        self, strategy_id: str, strategy: StrategyConfig | Mapping[str, Any]
    ) -> JobSnapshot:
        """Validate ``strategy`` and start simulating it in the background.

        Raises:
            ConfigError: If the strategy is invalid; no job is created.
            SimulationError: If a run for ``strategy_id`` is already in progress.
        """
        config = parse_strategy(strategy)
        existing = self._jobs.get(strategy_id)
        if existing is not None and existing.status is StrategyStatus.IN_PROGRESS:
            raise SimulationError(f"Simulation already in progress for strategy {strategy_id}")

        job = _Job(strategy_id=strategy_id, strategy=config, status=StrategyStatus.IN_PROGRESS)
        self._jobs[strategy_id] = job
        logger.info("Simulation started for strategy %s", strategy_id)
        await self._publish(job)
        job.task = asyncio.create_task(self._execute(job), name=f"simulation-{strategy_id}")
        return job.snapshot()

    def poll(self, strategy_id: str) -> JobSnapshot:
        job = self._jobs.get(strategy_id)
        if job is None:
            return JobSnapshot(strategy_id=strategy_id, status=StrategyStatus.SAVED)
        return job.snapshot()

    async def wait(self, strategy_id: str) -> JobSnapshot:
        """Block until the strategy's current job finishes."""
        job = self._jobs.get(strategy_id)
        if job is not None and job.task is not None:
            await asyncio.wait({job.task})
        return self.poll(strategy_id)

    async def cancel(self, strategy_id: str) -> bool:
        """Cancel a running job.

        The worker thread cannot be interrupted; it finishes in the background
        and its result is discarded.

        Returns:
            True if a running job was cancelled.
        """
        job = self._jobs.get(strategy_id)
        if job is None or job.task is None or job.task.done():
            return False
        job.task.cancel()
        await asyncio.wait({job.task})
        if job.status is StrategyStatus.IN_PROGRESS:
            # Cancelled before the task body ran
            job.status = StrategyStatus.SAVED
            job.error = "cancelled"
            await self._publish(job)
        return True

    async def _execute(self, job: _Job) -> None:
        try:
            results = await asyncio.to_thread(self._engine.run, job.strategy)
        except asyncio.CancelledError:
            logger.warning("Simulation cancelled for strategy %s", job.strategy_id)
            job.status = StrategyStatus.SAVED
            job.error = "cancelled"
            await self._publish(job)
            raise
        except Exception as exc:
            logger.exception("Simulation failed for strategy %s", job.strategy_id)
            job.status = StrategyStatus.SAVED
            job.error = str(exc)
            await self._publish(job)
            return

        job.results = results
        job.status = StrategyStatus.COMPLETED
        logger.info(
            "Simulation completed for strategy %s: %d trades, pnl=%.2f",
            job.strategy_id, results.metrics.total_trades, results.total_pnl,
        )
        await self._publish(job)

    async def _publish(self, job: _Job) -> None:
        if self._bus is not None:
            await self._bus.emit(STATUS_EVENT, job.snapshot())

"""Background simulation job orchestration.

This package contains:
- SimulationJobRunner: runs SimulationEngine in worker threads and tracks status
- StrategyStatus: saved / in_progress / completed lifecycle states
- JobSnapshot: pollable view of a job
"""
from stratlab.jobs.runner import STATUS_EVENT, JobSnapshot, SimulationJobRunner, StrategyStatus

__all__ = ["STATUS_EVENT", "JobSnapshot", "SimulationJobRunner", "StrategyStatus"]

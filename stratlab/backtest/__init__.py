from stratlab.backtest.engine import SimulationEngine
from stratlab.core.results import PerformanceMetrics, SimulationResults, results_to_dict

__all__ = ["PerformanceMetrics", "SimulationEngine", "SimulationResults", "results_to_dict"]

"""Core exception hierarchy for stratlab.

This module defines the exception hierarchy used throughout stratlab
for error handling and exception propagation.
"""


class StratLabError(Exception):
    """Base exception class for all stratlab errors.

    All stratlab-specific exceptions inherit from this class,
    allowing callers to catch all framework errors with a single except clause.
    """


class ConfigError(StratLabError):
    """Configuration-related errors.

    Raised when a settings file or strategy document is invalid: missing
    required parameters, out-of-range simulation values, or malformed YAML
    structure. Always raised before a simulation starts.
    """


class DataError(StratLabError):
    """Price data retrieval errors.

    Raised when a price series provider fails to produce a series for a
    symbol. A DataError terminates the simulation run; the core does not
    retry.

    Attributes:
        symbol: Trading symbol whose series could not be fetched.
        reason: Detailed reason for the failure.
    """

    def __init__(self, symbol: str, reason: str):
        """Initialize DataError with symbol and reason details.

        Args:
            symbol: Trading symbol (e.g., "AAPL").
            reason: Description of why the fetch failed.
        """
        super().__init__(f"[{symbol}] Price data error: {reason}")
        self.symbol = symbol
        self.reason = reason


class RiskLimitError(StratLabError):
    """Portfolio constraint violated during a simulated trade.

    Raised when opening a position would break a portfolio invariant such
    as the maximum concurrent position count or the available cash.

    Attributes:
        rule: Name of the violated constraint.
        detail: Specific details about the violation.
    """

    def __init__(self, rule: str, detail: str):
        """Initialize RiskLimitError with rule and detail information.

        Args:
            rule: Name of the constraint (e.g., "max_positions", "available_cash").
            detail: Specific information about what was exceeded and by how much.
        """
        super().__init__(f"Risk limit [{rule}]: {detail}")
        self.rule = rule
        self.detail = detail


class SimulationError(StratLabError):
    """Simulation job errors.

    Raised by the job runner when a run cannot be scheduled, for example
    when the same strategy is already being simulated.
    """

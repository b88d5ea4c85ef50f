"""
Factory for creating hour-accounting strategies.

This module provides the factory pattern implementation that maps a worker's
accounting mode to the strategy that resolves their daily worked time.
"""

import logging
from typing import Dict, Type

from .contracts import PayrollConfigurationError, PayrollRules
from .enums import AccountingMode
from .strategies.base import AbstractAccountingStrategy

logger = logging.getLogger(__name__)


class StrategyNotFoundError(PayrollConfigurationError):
    """Raised when requested strategy is not available or not registered"""

    def __init__(self, message: str):
        super().__init__(message, "accounting_mode")


class AccountingStrategyFactory:
    """
    Factory class for creating hour-accounting strategies.

    Unlike a best-effort lookup, an unregistered mode is an error: crediting
    hours under the wrong accounting rule would silently change pay.
    """

    def __init__(self):
        """Initialize the factory with empty strategy registry"""
        self._strategies: Dict[AccountingMode, Type[AbstractAccountingStrategy]] = {}

    def register_strategy(
        self,
        mode: AccountingMode,
        strategy_class: Type[AbstractAccountingStrategy],
    ) -> None:
        """
        Register a strategy implementation with the factory.

        Args:
            mode: The accounting mode identifier
            strategy_class: The concrete strategy class to register

        Raises:
            ValueError: If strategy_class doesn't inherit from AbstractAccountingStrategy
        """
        if not issubclass(strategy_class, AbstractAccountingStrategy):
            raise ValueError(
                f"Strategy class {strategy_class} must inherit from AbstractAccountingStrategy"
            )

        self._strategies[mode] = strategy_class
        logger.debug(
            f"Registered strategy {mode.value} with class {strategy_class.__name__}",
            extra={
                "accounting_mode": mode.value,
                "strategy_class": strategy_class.__name__,
                "action": "strategy_registered",
            },
        )

    def create_resolver(
        self, mode: AccountingMode, rules: PayrollRules
    ) -> AbstractAccountingStrategy:
        """
        Create a resolver instance for the given accounting mode.

        Raises:
            StrategyNotFoundError: If the requested mode is not registered
        """
        if mode not in self._strategies:
            raise StrategyNotFoundError(
                f"Strategy {mode.value} not found. "
                f"Available strategies: {[m.value for m in self._strategies]}"
            )

        strategy_class = self._strategies[mode]
        resolver = strategy_class(rules)
        logger.debug(
            f"Created resolver for accounting mode {mode.value}",
            extra={
                "accounting_mode": mode.value,
                "strategy_class": strategy_class.__name__,
                "action": "resolver_created",
            },
        )
        return resolver

    def get_available_strategies(self) -> list:
        return list(self._strategies.keys())

    def is_strategy_available(self, mode: AccountingMode) -> bool:
        return mode in self._strategies


# Global factory instance
_global_factory = AccountingStrategyFactory()


def get_accounting_factory() -> AccountingStrategyFactory:
    """
    Get the global accounting strategy factory, registering the built-in
    strategies on first use.
    """
    if not _global_factory.get_available_strategies():
        register_default_strategies()
    return _global_factory


def register_default_strategies() -> None:
    """
    Register the actual and schedule accounting strategies.

    Called from the payroll app's ready() hook and lazily by
    get_accounting_factory() when the engine is used outside Django.
    """
    from .strategies.actual import ActualHoursStrategy
    from .strategies.schedule import ScheduleHoursStrategy

    _global_factory.register_strategy(AccountingMode.ACTUAL, ActualHoursStrategy)
    _global_factory.register_strategy(AccountingMode.SCHEDULE, ScheduleHoursStrategy)

    logger.info(
        "Default accounting strategies registered",
        extra={
            "action": "default_strategies_registered",
            "registered_strategies": [m.value for m in AccountingMode],
        },
    )

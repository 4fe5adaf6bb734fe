"""Типизированные ошибки ядра.

Обе ветки наследуются от ValueError: вход детерминирован, повторять нечего,
вызывающий код исправляет вход и запускает операцию заново.
"""

from __future__ import annotations


class PressSimError(ValueError):
    """Base class for all presssim failures."""


class ParameterValidationError(PressSimError):
    """MachineParameters violate a precondition; nothing was computed."""


class LogFormatError(PressSimError):
    """Raw row table cannot be turned into a time series."""


class EmptyLogError(LogFormatError):
    """The row table has no rows at all."""


class UnrecognizedLogFormatError(LogFormatError):
    """No row starts with a numeric cell, so the data block cannot be located."""

"""
Исключения проверки входного лога.

Все ошибки наследуются от `LogValidationError`, которая хранит понятное
пользователю описание причины в атрибуте `reason`. Повторять проверку
бессмысленно: вход статичен, поэтому вызывающий код просто показывает
причину пользователю.
"""


class LogValidationError(ValueError):
    """Базовая ошибка: лог не прошёл предварительную проверку."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class EmptyInputError(LogValidationError):
    """Лог пустой или состоит только из пробельных символов."""


class InsufficientLinesError(LogValidationError):
    """Непустых строк меньше минимального порога."""


class ExcessiveLinesError(LogValidationError):
    """Непустых строк больше максимального порога."""


class NoErrorSignalError(LogValidationError):
    """Ни одна строка не содержит признаков ошибки."""

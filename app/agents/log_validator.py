"""
Предварительная проверка лога перед разбором.

Проверки выполняются строго по порядку и останавливаются на первой
неудачной: пустой ввод, слишком мало строк, слишком много строк,
отсутствие признаков ошибки. Метод `check` выбрасывает типизированное
исключение, а `validate` возвращает `ValidationResult`, чтобы интерфейс
мог показать причину сразу, не запуская полный разбор.
"""

import logging
import re
from typing import List

from app.agents.exceptions import (
    EmptyInputError,
    ExcessiveLinesError,
    InsufficientLinesError,
    LogValidationError,
    NoErrorSignalError,
)
from app.models.parsed_report import ValidationResult

logger = logging.getLogger(__name__)

MIN_LINES = 5
MAX_LINES = 50_000

# Слова, по которым считаем, что в логе вообще есть ошибки
ERROR_SIGNAL_PATTERN = re.compile(
    r'\b(ERROR|FATAL|CRITICAL|SEVERE|Exception|Error)\b', re.IGNORECASE
)


def split_lines(raw_logs: str) -> List[str]:
    """Делит текст по ``\\n`` и отбрасывает пустые строки, не изменяя остальные."""
    return [line for line in raw_logs.split('\n') if line.strip()]


class LogValidator:
    @staticmethod
    def check(raw_logs: str) -> List[str]:
        """
        Проверяет лог и возвращает список его непустых строк.

        :param raw_logs: исходный текст лога.
        :raises EmptyInputError: текст пустой после обрезки пробелов.
        :raises InsufficientLinesError: непустых строк меньше ``MIN_LINES``.
        :raises ExcessiveLinesError: непустых строк больше ``MAX_LINES``.
        :raises NoErrorSignalError: ни одна строка не похожа на ошибку.
        """
        if not raw_logs or not raw_logs.strip():
            raise EmptyInputError('Логи не переданы')

        lines = split_lines(raw_logs)

        if len(lines) < MIN_LINES:
            raise InsufficientLinesError(
                f'Слишком мало строк лога ({len(lines)}). '
                f'Вставьте не менее {MIN_LINES} строк.'
            )

        if len(lines) > MAX_LINES:
            raise ExcessiveLinesError(
                f'Слишком много строк лога ({len(lines)}). '
                f'Ограничьте лог {MAX_LINES} строками.'
            )

        if not any(ERROR_SIGNAL_PATTERN.search(line) for line in lines):
            raise NoErrorSignalError(
                'В логе не найдено ошибок. Вставьте лог, содержащий сообщения об ошибках.'
            )

        return lines

    @staticmethod
    def validate(raw_logs: str) -> ValidationResult:
        """
        Неразрушающий вариант `check`: вместо исключения возвращает
        результат с флагом и причиной.
        """
        try:
            LogValidator.check(raw_logs)
        except LogValidationError as err:
            logger.info("Лог не прошёл проверку: %s", err.reason)
            return ValidationResult(valid=False, error=err.reason)
        return ValidationResult(valid=True)

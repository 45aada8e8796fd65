"""
    Парсер логов: превращает вставленный или загруженный текст лога в
    структурированный отчёт.

    В этом модуле определяется класс `LogParser`. Метод `parse` проверяет
    лог, определяет его формат, классифицирует каждую непустую строку,
    собирает ошибки вместе со стектрейсами в группы и подсчитывает
    предупреждения, информационные и отладочные сообщения. Разбор не
    хранит состояния между вызовами: одинаковый текст всегда даёт
    одинаковый отчёт.
    """

import logging
from typing import List

from app.agents.error_grouper import ErrorGrouper
from app.agents.format_detector import FormatDetector
from app.agents.line_classifier import (
    DEBUG_LEVELS,
    INFO_LEVELS,
    WARNING_LEVELS,
    LineClassifier,
)
from app.agents.log_validator import LogValidator
from app.models.classified_line import ClassifiedLine
from app.models.parsed_report import ParsedReport, TimeRange, ValidationResult

logger = logging.getLogger(__name__)

# Пример лога платёжного сервиса для демонстрации и тестов
EXAMPLE_LOGS = """2025-10-25 12:00:01.234 INFO  [payment-processor] Processing payment request id=pay_123
2025-10-25 12:00:02.456 INFO  [payment-processor] Validating payment details
2025-10-25 12:00:03.789 ERROR [payment-processor] NullPointerException: Customer ID cannot be null
\tat com.example.payment.PaymentService.process(PaymentService.java:142)
\tat com.example.payment.PaymentController.checkout(PaymentController.java:78)
\tat jdk.internal.reflect.NativeMethodAccessorImpl.invoke0(Native Method)
\tat java.base/jdk.internal.reflect.NativeMethodAccessorImpl.invoke(NativeMethodAccessorImpl.java:77)
2025-10-25 12:00:04.012 ERROR [payment-processor] Payment processing failed for order ord_456
2025-10-25 12:00:05.234 INFO  [payment-processor] Retrying payment with exponential backoff
2025-10-25 12:00:07.456 ERROR [payment-processor] NullPointerException: Customer ID cannot be null
\tat com.example.payment.PaymentService.process(PaymentService.java:142)
\tat com.example.payment.PaymentController.checkout(PaymentController.java:78)
2025-10-25 12:00:08.789 WARN  [payment-processor] Max retry attempts reached for payment pay_123
2025-10-25 12:00:09.012 ERROR [payment-processor] Failed to process payment after 3 retries
2025-10-25 12:00:10.234 ERROR [payment-processor] NullPointerException: Customer ID cannot be null
\tat com.example.payment.PaymentService.process(PaymentService.java:142)
2025-10-25 12:00:12.456 INFO  [payment-processor] Payment marked as failed in database
2025-10-25 12:00:13.789 ERROR [payment-processor] TimeoutException: Database connection timeout after 30s
\tat com.example.database.ConnectionPool.getConnection(ConnectionPool.java:89)
\tat com.example.payment.PaymentRepository.save(PaymentRepository.java:45)
2025-10-25 12:00:15.012 ERROR [payment-processor] TimeoutException: Database connection timeout after 30s
\tat com.example.database.ConnectionPool.getConnection(ConnectionPool.java:89)"""


class LogParser:
    @staticmethod
    def parse(raw_logs: str) -> ParsedReport:
        """
        Разбирает текст лога и возвращает `ParsedReport`.

        Перед разбором лог проходит `LogValidator.check`, поэтому отсюда
        могут прилететь только исключения `LogValidationError`. После
        успешной проверки разбор не падает ни на каких строках.

        :param raw_logs: исходный текст лога, строки разделены ``\\n``.
        :return: отчёт с группами ошибок, счётчиками и диапазоном времени.
        """
        # Непустые строки в исходном виде: они попадают в примеры и raw_lines
        lines = LogValidator.check(raw_logs)

        detected_format = FormatDetector.detect_format(lines)
        logger.debug("Определён формат лога: %s", detected_format)

        parsed_lines = [LineClassifier.classify_line(line) for line in lines]

        grouper = ErrorGrouper()
        for line, parsed in zip(lines, parsed_lines):
            grouper.feed(line, parsed)
        errors = grouper.finish()

        report = ParsedReport(
            total_lines=len(lines),
            errors=errors,
            warnings=LogParser._count_levels(parsed_lines, WARNING_LEVELS),
            info=LogParser._count_levels(parsed_lines, INFO_LEVELS),
            debug=LogParser._count_levels(parsed_lines, DEBUG_LEVELS),
            time_range=LogParser._time_range(parsed_lines),
            detected_format=detected_format,
        )
        logger.info(
            "Разобрано %d строк (%s): групп ошибок %d, предупреждений %d",
            report.total_lines, detected_format, len(errors), report.warnings,
        )
        return report

    @staticmethod
    def validate(raw_logs: str) -> ValidationResult:
        """Проверяет лог без разбора; см. `LogValidator.validate`."""
        return LogValidator.validate(raw_logs)

    @staticmethod
    def get_example_logs() -> str:
        return EXAMPLE_LOGS

    @staticmethod
    def _count_levels(parsed_lines: List[ClassifiedLine], levels: frozenset) -> int:
        return sum(1 for parsed in parsed_lines if parsed.level in levels)

    @staticmethod
    def _time_range(parsed_lines: List[ClassifiedLine]) -> TimeRange | None:
        """
        Первая и последняя временные метки в порядке строк.

        Метки не сортируются: если в логе перемешаны источники с разными
        часами, диапазон отражает порядок строк, а не хронологию.
        """
        timestamps = [parsed.timestamp for parsed in parsed_lines if parsed.timestamp]
        if not timestamps:
            return None
        return TimeRange(start=timestamps[0], end=timestamps[-1])

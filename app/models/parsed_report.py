from typing import List

from pydantic import BaseModel


class ErrorGroup(BaseModel):
    """
    Группа повторяющихся ошибок с одинаковым коротким сообщением.

    Поля:
        message: короткое сообщение (тип исключения или начало текста), по
            которому объединяются вхождения;
        level: уровень первого вхождения (``ERROR``, ``FATAL``, ``CRITICAL``, ``SEVERE``);
        timestamp: временная метка последнего вхождения, у которого она была;
        count: сколько раз ошибка встретилась в логе;
        samples: до трёх исходных строк, на которых ошибка была замечена;
        raw_lines: все строки всех вхождений, включая строки стектрейса;
        stack_trace: строки стектрейса последнего вхождения, у которого он был.
    """

    message: str
    level: str
    timestamp: str | None = None
    count: int = 1
    samples: List[str]
    raw_lines: List[str]
    stack_trace: List[str] | None = None


class TimeRange(BaseModel):
    """Первая и последняя временные метки в порядке следования строк."""

    start: str
    end: str


class ParsedReport(BaseModel):
    """
    Итог разбора лога.

    ``errors`` отсортирован по убыванию ``count``; при равенстве сохраняется
    порядок первого появления группы.
    """

    total_lines: int
    errors: List[ErrorGroup]
    warnings: int
    info: int
    debug: int
    time_range: TimeRange | None = None
    detected_format: str


class ValidationResult(BaseModel):
    valid: bool
    error: str | None = None

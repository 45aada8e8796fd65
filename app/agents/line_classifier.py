"""
Классификатор отдельных строк лога.

Для каждой строки извлекаются временная метка (только в начале строки),
уровень логирования (первое целое слово из словаря уровней в любом месте
строки) и текст сообщения. Отдельно определяется, является ли строка
продолжением стектрейса. Функции этого модуля не выбрасывают исключений:
строка без метки и без уровня тоже даёт корректный результат.
"""

import re

from app.models.classified_line import ClassifiedLine

# ISO‑8601‑подобная метка: дата, ``T`` или пробел, время, необязательные
# миллисекунды и необязательная зона (``Z`` или ``±HH:MM``)
TIMESTAMP_PATTERN = re.compile(
    r'^(\d{4}-\d{2}-\d{2}[T\s]\d{2}:\d{2}:\d{2}(?:\.\d{3})?(?:Z|[+-]\d{2}:\d{2})?)'
)

LEVEL_PATTERN = re.compile(
    r'\b(ERROR|FATAL|CRITICAL|SEVERE|WARN|WARNING|INFO|DEBUG|TRACE)\b',
    re.IGNORECASE,
)

ERROR_LEVELS = frozenset({"ERROR", "FATAL", "CRITICAL", "SEVERE"})
WARNING_LEVELS = frozenset({"WARN", "WARNING"})
INFO_LEVELS = frozenset({"INFO"})
DEBUG_LEVELS = frozenset({"DEBUG", "TRACE"})

# Шаблоны строк стектрейса. Все, кроме INDENTED_FRAME, применяются к
# строке без начальных и конечных пробелов.
JAVA_FRAME = re.compile(r'^at\s+[\w.$<>/]+\(.*\)')
PYTHON_FRAME = re.compile(r'^File ".*", line \d+')
INDENTED_FRAME = re.compile(r'^\s+at\s+')
CAUSED_BY = re.compile(r'^Caused by:')


def is_stack_trace_line(line: str) -> bool:
    """Проверяет, продолжает ли строка стектрейс предыдущей ошибки."""
    stripped = line.strip()
    if JAVA_FRAME.match(stripped):
        return True
    if PYTHON_FRAME.match(stripped):
        return True
    # Node.js и прочие кадры вида "    at fn (file:1:2)" узнаём по отступу
    if INDENTED_FRAME.match(line):
        return True
    if CAUSED_BY.match(stripped):
        return True
    return False


class LineClassifier:
    @staticmethod
    def classify_line(line: str) -> ClassifiedLine:
        """
        Разбирает одну строку лога.

        Сначала от начала строки отрезается временная метка, затем в
        остатке отбрасывается всё до первого вхождения найденного уровня
        включительно. То, что осталось, и есть сообщение.
        """
        message = line
        timestamp = None
        timestamp_match = TIMESTAMP_PATTERN.match(line)
        if timestamp_match:
            timestamp = timestamp_match.group(1)
            message = line[timestamp_match.end():].strip()

        level = None
        level_match = LEVEL_PATTERN.search(line)
        if level_match:
            token = level_match.group(1)
            level = token.upper()
            position = message.find(token)
            if position != -1:
                message = message[position + len(token):]

        return ClassifiedLine(
            timestamp=timestamp,
            level=level,
            message=message.strip(),
            is_stack_trace=is_stack_trace_line(line),
        )

    @staticmethod
    def is_error_level(level: str | None) -> bool:
        return level in ERROR_LEVELS

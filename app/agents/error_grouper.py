"""
Группировка ошибок с учётом многострочных стектрейсов.

Строки обходятся по порядку конечным автоматом с двумя состояниями:

* ``IDLE`` — открытой записи нет;
* ``OPEN_RECORD`` — накапливаем строки стектрейса для последней ошибки.

Строка уровня ERROR/FATAL/CRITICAL/SEVERE открывает новую запись (закрывая
предыдущую, если она была). Строка стектрейса дописывается в открытую
запись. Любая другая строка закрывает запись и сама никуда не попадает.
Закрытая запись сливается с группой, ключом которой служит короткое
сообщение об ошибке (см. `extract_error_type`).
"""

import logging
import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.agents.line_classifier import LineClassifier
from app.models.classified_line import ClassifiedLine
from app.models.parsed_report import ErrorGroup

logger = logging.getLogger(__name__)

MAX_SAMPLES = 3
MAX_KEY_LENGTH = 200
MAX_TYPE_LENGTH = 100

# Шаблоны для короткого сообщения, проверяются по порядку
JAVA_ERROR_TYPE = re.compile(r'\b(\w+Exception|\w+Error)\b')
PYTHON_ERROR_TYPE = re.compile(r'^(\w+Error|Exception):')
NODE_ERROR_TEXT = re.compile(r'Error:\s*(.+?)(?:\n|$)')
GENERIC_PREFIX = re.compile(r'^([^:]+):')


def extract_error_type(message: str) -> Optional[str]:
    """
    Извлекает тип ошибки из сообщения, не зная формата лога.

    Порядок попыток:
    1. Java: ``NullPointerException``, ``OutOfMemoryError`` в любом месте;
    2. Python: ``ValueError:`` или ``Exception:`` в начале сообщения;
    3. Node.js: текст после ``Error:`` (до 100 символов);
    4. всё, что стоит до первого двоеточия (до 100 символов).

    :return: найденный тип или ``None``, если ничего не подошло.
    """
    java_match = JAVA_ERROR_TYPE.search(message)
    if java_match:
        return java_match.group(1)

    python_match = PYTHON_ERROR_TYPE.match(message)
    if python_match:
        return python_match.group(1)

    node_match = NODE_ERROR_TEXT.search(message)
    if node_match:
        return node_match.group(1)[:MAX_TYPE_LENGTH]

    generic_match = GENERIC_PREFIX.match(message)
    if generic_match:
        return generic_match.group(1)[:MAX_TYPE_LENGTH]

    return None


def group_key(message: str) -> str:
    """Ключ группы: тип ошибки или первые 200 символов сообщения."""
    return extract_error_type(message) or message[:MAX_KEY_LENGTH]


class ErrorRecord(BaseModel):
    """
    Одно вхождение ошибки, которое ещё собирается.

    Поля:
        timestamp: временная метка строки, открывшей запись;
        level: уровень этой строки;
        message: ключ группы;
        samples: исходная строка ошибки (единственный пример);
        raw_lines: строка ошибки и все строки её стектрейса в исходном виде;
        stack_trace: обрезанные строки стектрейса.
    """

    timestamp: str | None = None
    level: str
    message: str
    samples: List[str]
    # Строки хранятся в исходном виде, с отступами; обрезаются только кадры stack_trace
    raw_lines: List[str]
    stack_trace: List[str] = Field(default_factory=list)

    @classmethod
    def open(cls, raw_line: str, parsed: ClassifiedLine) -> "ErrorRecord":
        return cls(
            timestamp=parsed.timestamp,
            level=parsed.level,
            message=group_key(parsed.message),
            samples=[raw_line],
            raw_lines=[raw_line],
        )

    def append_frame(self, raw_line: str) -> None:
        self.stack_trace.append(raw_line.strip())
        self.raw_lines.append(raw_line)

    def close(self) -> ErrorGroup:
        """Завершает запись; пустой стектрейс превращается в ``None``."""
        return ErrorGroup(
            message=self.message,
            level=self.level,
            timestamp=self.timestamp,
            count=1,
            samples=list(self.samples),
            raw_lines=list(self.raw_lines),
            stack_trace=list(self.stack_trace) or None,
        )


class GrouperState(str, Enum):
    IDLE = "idle"
    OPEN_RECORD = "open_record"


class ErrorGroupCollection:
    """
    Словарь групп по ключу с явным списком ключей в порядке создания.

    Порядок ключей нужен для сортировки: при равном количестве вхождений
    раньше идёт группа, которая появилась раньше.
    """

    def __init__(self) -> None:
        self._groups: Dict[str, ErrorGroup] = {}
        self._order: List[str] = []

    def merge(self, record: ErrorGroup) -> None:
        """
        Добавляет закрытую запись в группу с тем же ключом.

        Счётчик растёт всегда, примеры добавляются только пока их меньше
        трёх, сырые строки копятся без ограничения. Стектрейс и временная
        метка перезаписываются последним вхождением, но только непустыми
        значениями.
        """
        key = record.message
        existing = self._groups.get(key)
        if existing is None:
            self._groups[key] = record
            self._order.append(key)
            return

        existing.count += 1
        if len(existing.samples) < MAX_SAMPLES:
            existing.samples.extend(record.samples[:MAX_SAMPLES - len(existing.samples)])
        existing.raw_lines.extend(record.raw_lines)
        if record.stack_trace:
            existing.stack_trace = record.stack_trace
        if record.timestamp:
            existing.timestamp = record.timestamp

    def sorted_groups(self) -> List[ErrorGroup]:
        """Группы по убыванию ``count``; ``sorted`` устойчив, поэтому ничьи идут в порядке создания."""
        ordered = [self._groups[key] for key in self._order]
        return sorted(ordered, key=lambda group: group.count, reverse=True)

    def __len__(self) -> int:
        return len(self._order)


class ErrorGrouper:
    """
    Конечный автомат, собирающий ошибки и их стектрейсы в группы.

    Экземпляр одноразовый: создаётся на один вызов разбора и хранит
    только его рабочее состояние.
    """

    def __init__(self) -> None:
        self.state = GrouperState.IDLE
        self.groups = ErrorGroupCollection()
        self._record: Optional[ErrorRecord] = None

    def feed(self, raw_line: str, parsed: ClassifiedLine) -> None:
        """Обрабатывает одну классифицированную строку."""
        if LineClassifier.is_error_level(parsed.level):
            # Закрываем предыдущую запись (если была) и сразу открываем новую
            self._close_record()
            self._record = ErrorRecord.open(raw_line, parsed)
            self.state = GrouperState.OPEN_RECORD
        elif self.state is GrouperState.OPEN_RECORD and parsed.is_stack_trace:
            self._record.append_frame(raw_line)
        elif self.state is GrouperState.OPEN_RECORD:
            self._close_record()

    def finish(self) -> List[ErrorGroup]:
        """Закрывает последнюю запись и возвращает отсортированные группы."""
        self._close_record()
        groups = self.groups.sorted_groups()
        logger.debug("Найдено %d уникальных ошибок", len(groups))
        return groups

    def _close_record(self) -> None:
        if self._record is not None:
            self.groups.merge(self._record.close())
        self._record = None
        self.state = GrouperState.IDLE

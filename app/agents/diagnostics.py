"""
Поиск места ошибки в исходном коде по стектрейсу.

Для каждой группы ошибок берётся первый кадр стектрейса, из которого
удаётся извлечь файл и строку. Результат используется редактором для
расстановки маркеров, поэтому строки и столбцы считаются с единицы.
"""

import re
from typing import List, Optional

from pydantic import BaseModel

from app.models.parsed_report import ParsedReport

# Node.js: "at handler (/app/src/index.js:10:15)", "at C:\app\x.js:1:2" (скобки необязательны)
NODE_FRAME_LOCATION = re.compile(r'at\s+(?:.*?\()?((?:[A-Za-z]:)?[^:()]+):(\d+):(\d+)\)?')
# Python: 'File "/app/service.py", line 42, in handler'
PYTHON_FRAME_LOCATION = re.compile(r'File "([^"]+)", line (\d+)')
# Java: "at com.example.Service.run(Service.java:142)"
JAVA_FRAME_LOCATION = re.compile(r'at\s+[\w.$<>/]+\(([\w$.-]+\.\w+):(\d+)\)')


class FrameLocation(BaseModel):
    file: str
    line: int
    column: int = 1


class ErrorDiagnostic(BaseModel):
    message: str
    level: str
    count: int
    location: FrameLocation | None = None


class DiagnosticsMapper:
    @staticmethod
    def find_frame_location(stack_trace: Optional[List[str]]) -> Optional[FrameLocation]:
        """
        Возвращает расположение первого распознанного кадра или ``None``.

        Кадры без файла (например, ``Native Method``) пропускаются.
        """
        for frame in stack_trace or []:
            node_match = NODE_FRAME_LOCATION.search(frame)
            if node_match:
                return FrameLocation(
                    file=node_match.group(1),
                    line=int(node_match.group(2)),
                    column=int(node_match.group(3)),
                )
            python_match = PYTHON_FRAME_LOCATION.search(frame)
            if python_match:
                return FrameLocation(file=python_match.group(1), line=int(python_match.group(2)))
            java_match = JAVA_FRAME_LOCATION.search(frame)
            if java_match:
                return FrameLocation(file=java_match.group(1), line=int(java_match.group(2)))
        return None

    @staticmethod
    def map_report(report: ParsedReport) -> List[ErrorDiagnostic]:
        """Одна диагностика на каждую группу ошибок, в порядке отчёта."""
        return [
            ErrorDiagnostic(
                message=group.message,
                level=group.level,
                count=group.count,
                location=DiagnosticsMapper.find_frame_location(group.stack_trace),
            )
            for group in report.errors
        ]

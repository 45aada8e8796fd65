"""
Определение диалекта лога по первым строкам.

Результат носит справочный характер: он показывается пользователю и
передаётся в контекст для LLM, но на разбор строк не влияет.
"""

import re
from typing import List, Pattern, Tuple

SAMPLE_SIZE = 10
UNKNOWN_FORMAT = "Unknown"

# Порядок важен: проверки идут сверху вниз и побеждает первое совпадение.
# Например, строка CloudWatch с меткой ``2025-10-25T12:00:01.234Z`` и уровнем
# в квадратных скобках подходит и под "AWS CloudWatch", и под "Generic".
FORMAT_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (
        re.compile(r'^\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}\.\d{3}\s+(ERROR|INFO|WARN|DEBUG)', re.MULTILINE),
        "Java/Spring Boot",
    ),
    (
        re.compile(r'^(ERROR|INFO|WARNING|DEBUG):[\w.]+:', re.MULTILINE),
        "Python",
    ),
    (
        re.compile(r'"level":"(error|info|warn|debug)"'),
        "Node.js/Winston (JSON)",
    ),
    (
        re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z', re.MULTILINE),
        "AWS CloudWatch",
    ),
    (
        re.compile(r'\[(ERROR|INFO|WARN|DEBUG)\]', re.IGNORECASE),
        "Generic",
    ),
]


class FormatDetector:
    @staticmethod
    def detect_format(lines: List[str]) -> str:
        """
        Возвращает метку формата для первых ``SAMPLE_SIZE`` непустых строк
        или ``"Unknown"``, если ни один шаблон не подошёл.
        """
        sample = "\n".join(lines[:SAMPLE_SIZE])
        for pattern, label in FORMAT_PATTERNS:
            if pattern.search(sample):
                return label
        return UNKNOWN_FORMAT

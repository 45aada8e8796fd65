"""
Генератор отчётов для результатов разбора логов.

Этот модуль содержит класс `ReportGenerator`, предоставляющий методы для
создания отчётов в форматах JSON и CSV на основе `ParsedReport`. JSON‑отчёт
может быть возвращён напрямую через API, а CSV‑файл сохраняется на диск для
последующей загрузки.
"""

import json
import os
from datetime import datetime

import pandas as pd

from app.models.parsed_report import ParsedReport

CSV_COLUMNS = ["message", "level", "count", "timestamp", "samples", "stack_trace"]


class ReportGenerator:
    """
    Служебный класс для выгрузки отчёта о разборе лога.

    Методы не требуют создания экземпляра: они принимают `ParsedReport` и
    формируют отчёт в одном из двух форматов.
    """

    @staticmethod
    def generate_json_report(report: ParsedReport) -> str:
        """
        Формирует JSON‑отчёт.

        :param report: результат `LogParser.parse`.
        :return: строка JSON с полями `summary`, `total_errors`, `total_groups`
            и всеми полями самого отчёта.
        """
        data = {
            # Заголовок отчёта с текущей датой и временем
            "summary": f"Анализ логов от {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "total_errors": sum(group.count for group in report.errors),
            "total_groups": len(report.errors),
            **report.model_dump(),
        }
        return json.dumps(data, ensure_ascii=False, indent=4)

    @staticmethod
    def generate_csv_report(report: ParsedReport, filepath: str) -> str:
        """
        Сохраняет отчёт в формате CSV: одна строка на группу ошибок.

        :param report: результат `LogParser.parse`.
        :param filepath: полный путь к CSV‑файлу, который будет создан.
        :return: путь к созданному CSV‑файлу.
        """
        rows = [
            {
                "message": group.message,
                "level": group.level,
                "count": group.count,
                "timestamp": group.timestamp or "",
                # Несколько примеров и кадров стектрейса храним в одной ячейке
                "samples": "\n".join(group.samples),
                "stack_trace": "\n".join(group.stack_trace or []),
            }
            for group in report.errors
        ]
        df = pd.DataFrame(rows, columns=CSV_COLUMNS)
        # Создаём директорию для файла, если её ещё нет
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # BOM‑метка нужна для корректного отображения в Excel
        df.to_csv(filepath, index=False, encoding='utf-8-sig')
        return filepath

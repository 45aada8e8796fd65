"""
Настройки приложения.

Значения читаются из переменных окружения; при наличии файла ``.env``
он загружается заранее. Пороговые значения проверки лога (5 и 50 000
строк) сюда намеренно не вынесены: это часть контракта парсера.
"""

import os

from dotenv import load_dotenv


# Загружаем переменные из .env файла, если он существует
load_dotenv()

# Уровень логирования приложения (DEBUG, INFO, WARNING, ...)
LOG_LEVEL = os.getenv("LOG_ANALYZER_LOG_LEVEL", "INFO").upper()

# Каталог, куда сохраняются CSV‑ и markdown‑отчёты для скачивания
REPORTS_DIR = os.getenv("LOG_ANALYZER_REPORTS_DIR", "app/reports")

# Максимальный размер загружаемого файла, байт
MAX_UPLOAD_BYTES = int(os.getenv("LOG_ANALYZER_MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))

# Сколько последних анализов (CSV + JSON + markdown) хранить в REPORTS_DIR
REPORTS_KEEP = int(os.getenv("LOG_ANALYZER_REPORTS_KEEP", "50"))

"""
Главная точка входа FastAPI‑приложения.

Этот модуль настраивает логирование, создаёт объект приложения,
подключает маршруты API и веб‑интерфейса, а также, при наличии каталога
`static`, обслуживает статические файлы.
"""

import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app import config
from app.api.endpoints import router
from app.frontend import router_ui


logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Local Log Analyzer", version="1.0")

# Маршрутизатор `router` обслуживает JSON‑эндпоинты (с префиксом `/api`),
# а `router_ui` — HTML‑формы и шаблоны.
app.include_router(router, prefix="/api")
app.include_router(router_ui)

# Монтируем обработчик статики `/static` только если каталог существует
static_dir = os.path.join(os.path.dirname(__file__), "static")
if os.path.isdir(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

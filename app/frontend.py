"""
Обработчики FastAPI для веб‑интерфейса (HTML‑форма вставки и загрузки
логов и страница с кратким отчётом).

`main_form` возвращает форму, `analyze_text` и `upload_log` принимают
вставленный текст или файл, сначала проверяют его и при ошибке проверки
показывают ту же форму с причиной. Если проверка пройдена, лог
разбирается и отображается страница с итогами. Параметр `mode`
ограничивает список показанных групп ошибок.
"""

import os

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app import config
from app.api.endpoints import save_reports
from app.agents.exceptions import LogValidationError
from app.agents.log_parser import LogParser

router_ui = APIRouter()
templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))

# Сколько групп показывать в режиме "short"
SHORT_MODE_LIMIT = 3


def render_form(
    request: Request,
    logs: str = "",
    error: str | None = None,
    status_code: int | None = None,
) -> HTMLResponse:
    if status_code is None:
        status_code = 400 if error else 200
    return templates.TemplateResponse(
        request,
        "upload.html",
        {"logs": logs, "error": error},
        status_code=status_code,
    )


async def render_report(request: Request, logs: str, mode: str, source: str) -> HTMLResponse:
    """
    Проверяет и разбирает лог, затем отображает отчёт.

    :param logs: текст лога.
    :param mode: ``full`` (все группы), ``repeated`` (только повторявшиеся)
        или ``short`` (первые три).
    :param source: подпись источника лога (имя файла или «вставленный текст»).
    """
    try:
        report = LogParser.parse(logs)
    except LogValidationError as err:
        return render_form(request, logs, err.reason)

    saved = await save_reports(report, source)

    groups = report.errors
    if mode == "repeated":
        groups = [group for group in groups if group.count > 1]
    elif mode == "short":
        groups = groups[:SHORT_MODE_LIMIT]

    return templates.TemplateResponse(request, "report.html", {
        "report": report,
        "groups": groups,
        "total_errors": sum(group.count for group in report.errors),
        "csv_url": saved.csv_url,
        "json_url": saved.json_url,
        "context_url": saved.context_url,
        "mode": mode,
        "source": source,
    })


@router_ui.get("/", response_class=HTMLResponse)
async def main_form(request: Request, example: bool = False):
    """
    Отображает HTML‑форму на главной странице.

    :param example: если ``true``, форма заполняется демонстрационным логом.
    """
    logs = LogParser.get_example_logs() if example else ""
    return render_form(request, logs)


@router_ui.post("/analyze", response_class=HTMLResponse)
async def analyze_text(
    request: Request,
    logs: str = Form(""),
    mode: str = Form("full"),
) -> HTMLResponse:
    return await render_report(request, logs, mode, "вставленный текст")


@router_ui.post("/upload", response_class=HTMLResponse)
async def upload_log(
    request: Request,
    file: UploadFile = File(...),
    mode: str = Form("full"),
) -> HTMLResponse:
    """
    Обрабатывает загрузку лог‑файла и отображает отчёт.

    Слишком большой файл или файл, который не удалось прочитать как UTF‑8,
    возвращает форму с сообщением об ошибке.
    """
    content = await file.read()
    if len(content) > config.MAX_UPLOAD_BYTES:
        return render_form(request, "", "Файл слишком большой", status_code=413)
    try:
        logs = content.decode("utf-8")
    except UnicodeDecodeError:
        return render_form(request, "", "Ошибка при чтении файла: ожидается текст в UTF-8")
    return await render_report(request, logs, mode, file.filename or "файл")

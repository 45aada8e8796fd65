"""
    Модуль содержит HTTP‑эндпоинты API для разбора логов и скачивания
    отчётов.

    `/validate` быстро проверяет вставленный лог и возвращает причину
    отказа, не выполняя разбор. `/analyze` и `/analyze-log` разбирают лог
    (из JSON‑тела или из загруженного файла), сохраняют CSV‑отчёт и
    markdown‑контекст для ассистента и возвращают структурированный отчёт.
    `/context` и `/diagnostics` отдают отдельные представления отчёта,
    `/example` — демонстрационный лог, `/download-report` — готовый файл.
"""

import logging
import os
import tempfile
from typing import List

import aiofiles
from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import FileResponse, PlainTextResponse
from pydantic import BaseModel

from app import config
from app.agents.diagnostics import DiagnosticsMapper, ErrorDiagnostic
from app.agents.exceptions import LogValidationError
from app.agents.log_parser import LogParser
from app.agents.prompt_builder import PromptBuilder
from app.agents.report_generator import ReportGenerator
from app.models.parsed_report import ParsedReport, ValidationResult

logger = logging.getLogger(__name__)
router = APIRouter()

# Расширение сохранённого файла -> имя при скачивании и MIME‑тип
DOWNLOADS = {
    ".csv": ("errors_report.csv", "text/csv"),
    ".json": ("errors_report.json", "application/json"),
    ".md": ("log_context.md", "text/markdown"),
}


class LogsPayload(BaseModel):
    logs: str
    service_name: str | None = None


class AnalysisResponse(BaseModel):
    report: ParsedReport
    csv_url: str
    json_url: str
    context_url: str


def parse_or_400(log_content: str) -> ParsedReport:
    """
    Разбирает лог, превращая ошибки проверки в ответ HTTP 400.

    :param log_content: текст лога.
    :raises HTTPException: если лог не прошёл проверку.
    """
    try:
        return LogParser.parse(log_content)
    except LogValidationError as err:
        logger.warning("Лог отклонён: %s", err.reason)
        raise HTTPException(status_code=400, detail=err.reason)


def prune_reports(reports_dir: str, keep: int, keep_base: str | None = None) -> int:
    """
    Удаляет старые отчёты, оставляя файлы последних `keep` анализов.

    Файлы одного анализа (CSV, JSON и markdown) имеют общее имя и
    удаляются вместе. Анализ с базовым путём `keep_base` не удаляется
    никогда, даже если время изменения совпало с более старыми.

    :return: количество удалённых файлов.
    """
    analyses: dict[str, float] = {}
    for name in os.listdir(reports_dir):
        base, extension = os.path.splitext(name)
        if extension not in DOWNLOADS:
            continue
        path = os.path.join(reports_dir, name)
        analyses[base] = max(analyses.get(base, 0.0), os.path.getmtime(path))

    keep_name = os.path.basename(keep_base) if keep_base else None
    candidates = sorted(
        (base for base in analyses if base != keep_name),
        key=lambda base: analyses[base],
        reverse=True,
    )
    slots = keep - 1 if keep_name in analyses else keep
    removed = 0
    for base in candidates[max(slots, 0):]:
        for extension in DOWNLOADS:
            path = os.path.join(reports_dir, base + extension)
            if os.path.exists(path):
                os.remove(path)
                removed += 1
    if removed:
        logger.info("Удалено старых файлов отчётов: %d", removed)
    return removed


async def save_reports(report: ParsedReport, service_name: str | None = None) -> AnalysisResponse:
    """
    Сохраняет CSV‑отчёт и markdown‑контекст в каталог отчётов и возвращает
    ссылки на их скачивание вместе с самим отчётом.
    """
    reports_dir = config.REPORTS_DIR
    os.makedirs(reports_dir, exist_ok=True)

    with tempfile.NamedTemporaryFile(mode="w+", delete=False, suffix=".csv", dir=reports_dir) as tmp:
        csv_path = tmp.name
    ReportGenerator.generate_csv_report(report, csv_path)
    logger.info("CSV-отчёт сохранён: %s", csv_path)

    base_path = os.path.splitext(csv_path)[0]
    json_path = base_path + ".json"
    async with aiofiles.open(json_path, "w", encoding="utf-8") as f:
        await f.write(ReportGenerator.generate_json_report(report))

    context_path = base_path + ".md"
    async with aiofiles.open(context_path, "w", encoding="utf-8") as f:
        await f.write(PromptBuilder.build_context(report, service_name))
    logger.info("Контекст для ассистента сохранён: %s", context_path)

    prune_reports(reports_dir, config.REPORTS_KEEP, keep_base=base_path)

    return AnalysisResponse(
        report=report,
        csv_url=f"/api/download-report?path={os.path.basename(csv_path)}",
        json_url=f"/api/download-report?path={os.path.basename(json_path)}",
        context_url=f"/api/download-report?path={os.path.basename(context_path)}",
    )


@router.post("/validate", response_model=ValidationResult)
async def validate_logs(payload: LogsPayload) -> ValidationResult:
    """
    Проверяет лог без разбора. Всегда отвечает 200: результат проверки
    передаётся в теле ответа.
    """
    return LogParser.validate(payload.logs)


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_logs(payload: LogsPayload) -> AnalysisResponse:
    """
    Разбирает лог, переданный в JSON‑теле запроса.

    :param payload: тело запроса с полем ``logs`` и необязательным ``service_name``.
    :return: отчёт и ссылки для скачивания CSV и markdown‑контекста.
    """
    logger.info("Начат разбор вставленного лога (%d символов)", len(payload.logs))
    report = parse_or_400(payload.logs)
    return await save_reports(report, payload.service_name)


@router.post("/analyze-log", response_model=AnalysisResponse)
async def analyze_log(file: UploadFile = File(...)) -> AnalysisResponse:
    """
    Разбирает загруженный лог‑файл.

    :param file: загруженный пользователем лог‑файл (UploadFile).
    :return: отчёт и ссылки для скачивания CSV и markdown‑контекста.
    """
    logger.info("Начат анализ загруженного лог-файла %s", file.filename)
    content = await file.read()
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Файл слишком большой")
    try:
        log_content = content.decode("utf-8")
    except UnicodeDecodeError as ex:
        logger.warning("Не удалось декодировать файл %s: %s", file.filename, ex)
        raise HTTPException(status_code=400, detail="Ошибка при чтении файла: ожидается текст в UTF-8")
    logger.info("Получено %d байт логов", len(content))

    report = parse_or_400(log_content)
    return await save_reports(report, file.filename)


@router.post("/context", response_class=PlainTextResponse)
async def build_context(payload: LogsPayload) -> PlainTextResponse:
    """Возвращает отчёт в виде markdown‑документа для ассистента."""
    report = parse_or_400(payload.logs)
    return PlainTextResponse(
        PromptBuilder.build_context(report, payload.service_name),
        media_type="text/markdown",
    )


@router.post("/diagnostics", response_model=List[ErrorDiagnostic])
async def diagnostics(payload: LogsPayload) -> List[ErrorDiagnostic]:
    """Возвращает для каждой группы ошибок место первого распознанного кадра стектрейса."""
    report = parse_or_400(payload.logs)
    return DiagnosticsMapper.map_report(report)


@router.get("/example")
async def example_logs():
    return {"logs": LogParser.get_example_logs()}


@router.get("/download-report")
async def download_report(path: str):
    """
    Возвращает сохранённый отчёт по имени файла.

    :param path: имя CSV‑ или markdown‑файла в каталоге отчётов.
    :raises HTTPException: если файл не найден.
    """
    # Берём только имя файла, чтобы нельзя было выйти за пределы каталога
    filename = os.path.basename(path)
    full_path = os.path.join(config.REPORTS_DIR, filename)
    if not filename or not os.path.isfile(full_path):
        raise HTTPException(status_code=404, detail="Файл не найден")
    extension = os.path.splitext(filename)[1]
    if extension not in DOWNLOADS:
        raise HTTPException(status_code=404, detail="Файл не найден")
    download_name, media_type = DOWNLOADS[extension]
    return FileResponse(full_path, filename=download_name, media_type=media_type)

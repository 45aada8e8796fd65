import pytest
from fastapi.testclient import TestClient

from app import config
from app.agents.log_parser import LogParser


@pytest.fixture
def example_logs() -> str:
    return LogParser.get_example_logs()


@pytest.fixture
def example_report(example_logs):
    return LogParser.parse(example_logs)


@pytest.fixture
def client(tmp_path, monkeypatch):
    # Отчёты пишем во временный каталог, а не в app/reports
    monkeypatch.setattr(config, "REPORTS_DIR", str(tmp_path))
    from app.main import app

    return TestClient(app)

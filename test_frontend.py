def test_main_form(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Анализ логов" in response.text


def test_main_form_with_example(client):
    response = client.get("/", params={"example": "true"})
    assert "NullPointerException: Customer ID cannot be null" in response.text


def test_invalid_logs_show_reason(client):
    response = client.post("/analyze", data={"logs": "too short"})
    assert response.status_code == 400
    assert "Слишком мало строк" in response.text


def test_analyze_pasted_logs(client, example_logs):
    response = client.post("/analyze", data={"logs": example_logs, "mode": "repeated"})
    assert response.status_code == 200
    assert "Java/Spring Boot" in response.text
    assert "NullPointerException" in response.text
    assert "TimeoutException" in response.text
    assert "Payment processing failed for order" not in response.text


def test_upload_log(client, example_logs):
    response = client.post(
        "/upload",
        files={"file": ("payments.log", example_logs.encode("utf-8"), "text/plain")},
        data={"mode": "short"},
    )
    assert response.status_code == 200
    assert "payments.log" in response.text


def test_upload_without_errors(client):
    logs = "\n".join(["INFO all good"] * 5)
    response = client.post(
        "/upload",
        files={"file": ("ok.log", logs.encode("utf-8"), "text/plain")},
    )
    assert response.status_code == 400
    assert "не найдено ошибок" in response.text


def test_upload_too_large(client, monkeypatch, example_logs):
    from app import config

    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 10)
    response = client.post(
        "/upload",
        files={"file": ("payments.log", example_logs.encode("utf-8"), "text/plain")},
    )
    assert response.status_code == 413
    assert "Файл слишком большой" in response.text


def test_logs_are_validated_once(client, monkeypatch, example_logs):
    from app.agents.log_validator import LogValidator

    calls = []
    original_check = LogValidator.check

    def counting_check(raw_logs):
        calls.append(raw_logs)
        return original_check(raw_logs)

    monkeypatch.setattr(LogValidator, "check", staticmethod(counting_check))
    response = client.post("/analyze", data={"logs": example_logs})
    assert response.status_code == 200
    assert len(calls) == 1

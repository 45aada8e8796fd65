from app.agents.format_detector import FormatDetector, UNKNOWN_FORMAT


def test_spring_boot(example_logs):
    assert FormatDetector.detect_format(example_logs.split("\n")) == "Java/Spring Boot"


def test_python_logging():
    lines = [
        "INFO:app.worker:Starting task",
        "ERROR:app.worker:ValueError: invalid literal",
    ]
    assert FormatDetector.detect_format(lines) == "Python"


def test_winston_json():
    lines = [
        '{"level":"info","message":"Server started"}',
        '{"level":"error","message":"Error: ECONNREFUSED"}',
    ]
    assert FormatDetector.detect_format(lines) == "Node.js/Winston (JSON)"


def test_cloudwatch_wins_over_generic():
    lines = ["2025-10-25T12:00:01.234Z [ERROR] request failed"]
    assert FormatDetector.detect_format(lines) == "AWS CloudWatch"


def test_generic_bracketed_level():
    assert FormatDetector.detect_format(["[error] disk full"]) == "Generic"


def test_unknown():
    assert FormatDetector.detect_format(["hello", "world"]) == UNKNOWN_FORMAT


def test_only_first_ten_lines_are_sampled():
    lines = ["plain text"] * 10 + ["[ERROR] late error"]
    assert FormatDetector.detect_format(lines) == UNKNOWN_FORMAT

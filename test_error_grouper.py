import pytest

from app.agents.error_grouper import (
    ErrorGroupCollection,
    ErrorGrouper,
    ErrorRecord,
    GrouperState,
    extract_error_type,
    group_key,
)
from app.agents.line_classifier import LineClassifier


def run_grouper(lines):
    grouper = ErrorGrouper()
    for line in lines:
        grouper.feed(line, LineClassifier.classify_line(line))
    return grouper.finish()


@pytest.mark.parametrize(
    "message, expected",
    [
        ("[svc] NullPointerException: Customer ID cannot be null", "NullPointerException"),
        ("java.lang.OutOfMemoryError: Java heap space", "OutOfMemoryError"),
        ("ValueError: invalid literal for int()", "ValueError"),
        ("Exception: boom", "Exception"),
        ("Error: ECONNREFUSED 127.0.0.1:5432", "ECONNREFUSED 127.0.0.1:5432"),
        ("Database unavailable: retrying in 5s", "Database unavailable"),
        ("something went wrong", None),
    ],
)
def test_extract_error_type(message, expected):
    assert extract_error_type(message) == expected


def test_extracted_text_is_capped():
    assert extract_error_type("Error: " + "x" * 150) == "x" * 100
    assert extract_error_type("y" * 150 + ": details") == "y" * 100


def test_group_key_falls_back_to_message_prefix():
    assert group_key("something went wrong") == "something went wrong"
    assert group_key("z" * 300) == "z" * 200


def test_state_transitions():
    grouper = ErrorGrouper()
    assert grouper.state is GrouperState.IDLE

    line = "ERROR TimeoutException: db"
    grouper.feed(line, LineClassifier.classify_line(line))
    assert grouper.state is GrouperState.OPEN_RECORD

    frame = "\tat com.example.Db.connect(Db.java:10)"
    grouper.feed(frame, LineClassifier.classify_line(frame))
    assert grouper.state is GrouperState.OPEN_RECORD

    info = "INFO recovered"
    grouper.feed(info, LineClassifier.classify_line(info))
    assert grouper.state is GrouperState.IDLE
    assert len(grouper.groups) == 1


def test_stack_trace_is_attached_to_error():
    groups = run_grouper([
        "ERROR IllegalStateException: bad state",
        "\tat com.example.A.run(A.java:1)",
        "Caused by: java.io.IOException: Broken pipe",
        "INFO next",
    ])
    assert len(groups) == 1
    assert groups[0].stack_trace == [
        "at com.example.A.run(A.java:1)",
        "Caused by: java.io.IOException: Broken pipe",
    ]
    assert groups[0].raw_lines == [
        "ERROR IllegalStateException: bad state",
        "\tat com.example.A.run(A.java:1)",
        "Caused by: java.io.IOException: Broken pipe",
    ]


def test_error_after_error_closes_and_reopens():
    groups = run_grouper([
        "ERROR FooException: one",
        "ERROR BarException: two",
        "\tat com.example.B.run(B.java:2)",
    ])
    assert [group.message for group in groups] == ["FooException", "BarException"]
    assert groups[0].stack_trace is None
    assert groups[1].stack_trace == ["at com.example.B.run(B.java:2)"]


def test_frames_without_open_record_are_ignored():
    groups = run_grouper([
        "\tat com.example.A.run(A.java:1)",
        "INFO ok",
        "\tat com.example.A.run(A.java:1)",
    ])
    assert groups == []


def test_closing_line_is_not_part_of_record():
    groups = run_grouper(["FATAL OutOfMemoryError: heap", "INFO shutting down"])
    assert groups[0].raw_lines == ["FATAL OutOfMemoryError: heap"]
    assert groups[0].level == "FATAL"


def test_samples_are_capped_but_raw_lines_are_not():
    lines = [f"ERROR TimeoutException: attempt {idx}" for idx in range(5)]
    groups = run_grouper(lines)
    assert len(groups) == 1
    assert groups[0].count == 5
    assert groups[0].samples == lines[:3]
    assert groups[0].raw_lines == lines


def test_latest_stack_trace_and_timestamp_win():
    groups = run_grouper([
        "2025-10-25 12:00:00.000 ERROR TimeoutException: first",
        "\tat com.example.Old.call(Old.java:1)",
        "2025-10-25 12:00:05.000 ERROR TimeoutException: second",
        "\tat com.example.New.call(New.java:2)",
        "ERROR TimeoutException: third, no trace and no timestamp",
    ])
    group = groups[0]
    assert group.count == 3
    assert group.stack_trace == ["at com.example.New.call(New.java:2)"]
    assert group.timestamp == "2025-10-25 12:00:05.000"


def test_groups_sorted_by_count_then_first_seen():
    groups = run_grouper([
        "ERROR AlphaException: a",
        "ERROR BetaException: b",
        "ERROR GammaException: c",
        "ERROR BetaException: b",
        "ERROR DeltaException: d",
    ])
    assert [(group.message, group.count) for group in groups] == [
        ("BetaException", 2),
        ("AlphaException", 1),
        ("GammaException", 1),
        ("DeltaException", 1),
    ]


def test_merge_keeps_first_occurrence_level():
    collection = ErrorGroupCollection()
    first = ErrorRecord(level="ERROR", message="Boom", samples=["a"], raw_lines=["a"])
    second = ErrorRecord(level="FATAL", message="Boom", samples=["b"], raw_lines=["b"])
    collection.merge(first.close())
    collection.merge(second.close())
    [group] = collection.sorted_groups()
    assert group.level == "ERROR"
    assert group.count == 2
    assert group.samples == ["a", "b"]


def test_severities_all_open_records():
    groups = run_grouper([
        "ERROR one",
        "FATAL two",
        "CRITICAL three",
        "SEVERE four",
        "WARN not an error",
    ])
    assert sum(group.count for group in groups) == 4


def test_raw_lines_keep_indentation_while_trace_is_trimmed():
    groups = run_grouper(["ERROR BoomException: x", "\tat com.example.A.run(A.java:1)"])
    assert groups[0].raw_lines[1] == "\tat com.example.A.run(A.java:1)"
    assert groups[0].stack_trace == ["at com.example.A.run(A.java:1)"]

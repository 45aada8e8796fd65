from app.agents.diagnostics import DiagnosticsMapper, FrameLocation


def test_java_frame():
    location = DiagnosticsMapper.find_frame_location(
        ["at com.example.payment.PaymentService.process(PaymentService.java:142)"]
    )
    assert location == FrameLocation(file="PaymentService.java", line=142, column=1)


def test_node_frame_with_column():
    location = DiagnosticsMapper.find_frame_location(["at Object.<anonymous> (/app/index.js:10:5)"])
    assert location == FrameLocation(file="/app/index.js", line=10, column=5)


def test_python_frame():
    location = DiagnosticsMapper.find_frame_location(['File "/app/worker.py", line 42, in run'])
    assert location == FrameLocation(file="/app/worker.py", line=42, column=1)


def test_frames_without_file_are_skipped():
    location = DiagnosticsMapper.find_frame_location([
        "at jdk.internal.reflect.NativeMethodAccessorImpl.invoke0(Native Method)",
        "Caused by: java.io.IOException",
        "at com.example.Foo.bar(Foo.java:3)",
    ])
    assert location == FrameLocation(file="Foo.java", line=3, column=1)


def test_no_stack_trace():
    assert DiagnosticsMapper.find_frame_location(None) is None
    assert DiagnosticsMapper.find_frame_location(["Caused by: nothing useful"]) is None


def test_map_report(example_report):
    diagnostics = DiagnosticsMapper.map_report(example_report)
    assert [d.message for d in diagnostics] == [g.message for g in example_report.errors]
    assert diagnostics[0].location == FrameLocation(file="PaymentService.java", line=142)
    assert diagnostics[1].location == FrameLocation(file="ConnectionPool.java", line=89)
    assert diagnostics[2].location is None
    assert diagnostics[0].count == 3


def test_node_frame_without_parentheses():
    location = DiagnosticsMapper.find_frame_location(["at /app/server.js:25:13"])
    assert location == FrameLocation(file="/app/server.js", line=25, column=13)


def test_node_frame_with_windows_path():
    location = DiagnosticsMapper.find_frame_location(["at handler (C:\\app\\x.js:1:2)"])
    assert location == FrameLocation(file="C:\\app\\x.js", line=1, column=2)
    location = DiagnosticsMapper.find_frame_location(["at C:\\app\\x.js:3:4"])
    assert location == FrameLocation(file="C:\\app\\x.js", line=3, column=4)

"""
Tests for the function header command: end-to-end scenarios against an
in-memory host, the command singleton lifecycle, UI thread marshaling and
host error paths.
"""

import logging
import threading

import pytest

from editor_host import OutputPane, TextBufferHost
from function_header import FunctionHeaderCommand, NOT_A_SIGNATURE_MESSAGE
from header_generator import HEADER_OPEN


def run(command, lines, cursor_line=0, pane=True):
    host = TextBufferHost(lines, cursor_line=cursor_line,
                          output_pane=OutputPane() if pane else None)
    return host, command.execute(host)


# ===== SCENARIOS =====

def test_return_value_without_brief(command):
    host, result = run(command, ["int MyClass::GetValue()", "{", "}"])
    assert result.status == 'inserted'
    assert host.lines == [
        HEADER_OPEN,
        "* @brief ",
        "*",
        "* @return ",
        "*/",
        "int MyClass::GetValue()",
        "{",
        "}",
    ]


def test_tick_with_parameter(command):
    host, result = run(command, ["void MyClass::Tick(float DeltaTime)"])
    assert result.header == (
        HEADER_OPEN + "\n"
        "* @brief Called every frame\n"
        "*\n"
        "* @param DeltaTime \n"
        "*/\n"
    )
    assert host.lines[-1] == "void MyClass::Tick(float DeltaTime)"


def test_constructor(command):
    host, result = run(command, ["MyClass::MyClass()"])
    assert result.header == HEADER_OPEN + "\n* @brief Default constructor\n*/\n"


def test_insertion_log_reports_params_and_return(command, caplog):
    with caplog.at_level(logging.INFO, logger='function_header'):
        run(command, ["int AMyActor::Compute(int a, float b)"])

    messages = [r.getMessage() for r in caplog.records if r.name == 'function_header']
    assert any("AMyActor::Compute at line 1 (2 param(s), return: yes)" in m for m in messages)


def test_begin_play(command):
    _, result = run(command, ["void AActor::BeginPlay()"])
    assert "* @brief Called once actor has been spawned into world\n" in result.header


def test_wrapped_signature(command):
    lines = ["// helpers", "int* MyClass::Compute(int a,", "float b)", "{", "}"]
    host, result = run(command, lines, cursor_line=1)

    assert result.status == 'inserted'
    assert result.accumulated_text == "int* MyClass::Compute(int a,float b)"
    assert result.lines_consumed == 1
    assert host.lines == [
        "// helpers",
        HEADER_OPEN,
        "* @brief ",
        "*",
        "* @param a ",
        "* @param b ",
        "*",
        "* @return ",
        "*/",
        "int* MyClass::Compute(int a,",
        "float b)",
        "{",
        "}",
    ]


def test_no_match_reports_line_verbatim(command):
    pane = OutputPane()
    host = TextBufferHost(["foo bar baz"], cursor_line=0, output_pane=pane)
    result = command.execute(host)

    assert result.status == 'no_match'
    assert result.diagnostic == "The following line is not a function signature:\n\tfoo bar baz\n"
    assert pane.messages == [result.diagnostic]
    assert pane.activated
    assert host.lines == ["foo bar baz"]


def test_wrapped_signature_that_never_matches_reports_start_line(command):
    host, result = run(command, ["void A::Run", "{", "}"])
    assert result.status == 'no_match'
    assert result.diagnostic == NOT_A_SIGNATURE_MESSAGE.format("void A::Run")
    assert host.lines == ["void A::Run", "{", "}"]


def test_same_input_same_output(command):
    _, first = run(command, ["int* MyClass::Compute(int a, float b)"])
    _, second = run(command, ["int* MyClass::Compute(int a, float b)"])
    assert first.header == second.header


def test_host_selection_is_not_moved(command):
    host = TextBufferHost(["int A::f(int a,", "int b)"], cursor_line=0, output_pane=OutputPane())
    command.execute(host)
    assert host.get_active_cursor().line == 0


# ===== HOST ERROR PATHS =====

def test_missing_host_context_aborts_silently(command):
    pane = OutputPane()
    host = TextBufferHost(["foo"], cursor_line=None, output_pane=pane)
    result = command.execute(host)
    assert result.status == 'aborted'
    assert pane.messages == []


def test_missing_diagnostic_sink_is_silent(command):
    host, result = run(command, ["foo bar baz"], pane=False)
    assert result.status == 'no_match'
    assert result.diagnostic is None


# ===== SINGLETON LIFECYCLE =====

def test_initialize_is_idempotent(command):
    assert FunctionHeaderCommand.initialize() is command
    assert FunctionHeaderCommand.instance() is command


def test_shutdown_releases_instance():
    first = FunctionHeaderCommand.initialize()
    FunctionHeaderCommand.shutdown()
    assert FunctionHeaderCommand.instance() is None
    assert not first.executor.is_running

    second = FunctionHeaderCommand.initialize()
    try:
        assert second is not first
    finally:
        FunctionHeaderCommand.shutdown()


def test_shutdown_without_instance_is_noop():
    FunctionHeaderCommand.shutdown()
    assert FunctionHeaderCommand.instance() is None


def test_command_identity():
    assert FunctionHeaderCommand.COMMAND_ID == 0x0100
    assert str(FunctionHeaderCommand.COMMAND_SET) == "38dfd4d0-7b42-4360-a7f0-2095537a05e2"


# ===== UI THREAD =====

def test_executor_runs_on_single_worker(executor):
    names = {executor.run(lambda: threading.current_thread().name) for _ in range(5)}
    assert len(names) == 1
    assert names.pop().startswith('test-ui')


def test_executor_nested_run_is_inline(executor):
    assert executor.run(lambda: executor.run(lambda: 42)) == 42


def test_executor_propagates_exceptions(executor):
    def boom():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        executor.run(boom)


def test_executor_rejects_work_after_shutdown(executor):
    executor.shutdown()
    with pytest.raises(RuntimeError):
        executor.run(lambda: None)


def test_validate_and_insert_requires_ui_thread(command):
    host = TextBufferHost(["int A::f()"])
    with pytest.raises(RuntimeError):
        command.validate_and_insert(host, "int A::f()", host.create_insert_point(host.get_active_cursor()))


def test_validate_and_insert_on_ui_thread(command):
    host = TextBufferHost(["int A::f()"])
    point = host.create_insert_point(host.get_active_cursor())
    header = command.executor.run(command.validate_and_insert, host, "int A::f()", point)
    assert header.startswith(HEADER_OPEN)
    assert host.lines[-1] == "int A::f()"


# ===== EDITOR HOST =====

def test_text_round_trip_keeps_trailing_newline():
    host = TextBufferHost.from_text("a\nb\n")
    assert host.lines == ["a", "b"]
    assert host.text() == "a\nb\n"
    assert TextBufferHost.from_text("a\nb").text() == "a\nb"


def test_from_file_records_line_terminator(tmp_path):
    crlf = tmp_path / "crlf.cpp"
    crlf.write_bytes(b"a\r\nb\r\n")
    host = TextBufferHost.from_file(str(crlf))
    assert host.lines == ["a", "b"]
    assert host.newline == '\r\n'

    lf = tmp_path / "lf.cpp"
    lf.write_bytes(b"a\nb\n")
    assert TextBufferHost.from_file(str(lf)).newline == '\n'


def test_insert_without_newline_prefixes_line():
    host = TextBufferHost(["int x;"])
    host.insert_text_at(host.create_insert_point(host.get_active_cursor()), "/* a */ ")
    assert host.lines == ["/* a */ int x;"]


def test_cursor_stops_on_last_line():
    host = TextBufferHost(["a", "b"])
    cursor = host.get_active_cursor().copy()
    host.advance_cursor_one_line(cursor)
    host.advance_cursor_one_line(cursor)
    assert cursor.line == 1
    assert host.is_at_end_of_document(cursor)


def test_cursor_outside_document_is_rejected():
    with pytest.raises(ValueError):
        TextBufferHost(["a"], cursor_line=3)


def test_report_diagnostic_without_pane():
    assert TextBufferHost(["a"]).report_diagnostic("x") is False

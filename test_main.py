"""Tests for the click command-line interface."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from function_header import FunctionHeaderCommand
from header_generator import HEADER_OPEN
from main import __version__, cli


@pytest.fixture
def runner():
    yield CliRunner()
    # Every command tears its registration down again
    assert FunctionHeaderCommand.instance() is None


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.json")


def test_version(runner):
    result = runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert f"v{__version__}" in result.output


def test_check_prints_header(runner):
    result = runner.invoke(cli, ['check', 'int MyClass::GetValue()'])
    assert result.exit_code == 0
    assert HEADER_OPEN in result.output
    assert "* @return" in result.output


def test_check_wrapped_signature(runner):
    result = runner.invoke(cli, ['check', r'int* MyClass::Compute(int a,\nfloat b)'])
    assert result.exit_code == 0
    assert "* @param a" in result.output
    assert "* @param b" in result.output


def test_check_reports_non_signature(runner):
    result = runner.invoke(cli, ['check', 'foo bar baz'])
    assert result.exit_code == 1
    assert "The following line is not a function signature:" in result.output
    assert "foo bar baz" in result.output


def test_insert_writes_commented_copy(runner, tmp_path, config_path):
    source = tmp_path / "MyActor.cpp"
    source.write_text("// actor\nvoid AMyActor::BeginPlay()\n{\n}\n", encoding='utf-8')

    result = runner.invoke(cli, ['insert', '--file', str(source), '--line', '2', '--config', config_path])

    assert result.exit_code == 0, result.output
    assert "Called once actor has been spawned into world" in result.output
    written = (tmp_path / "MyActor_commented.cpp").read_text(encoding='utf-8')
    assert written.split('\n')[1] == HEADER_OPEN
    assert source.read_text(encoding='utf-8').count(HEADER_OPEN) == 0


def test_insert_in_place_with_backup(runner, tmp_path, config_path):
    source = tmp_path / "Widget.cpp"
    original = "MyWidget::MyWidget()\n{\n}\n"
    source.write_text(original, encoding='utf-8')

    result = runner.invoke(cli, ['insert', '-f', str(source), '-l', '1', '-c', config_path, '--in-place'])

    assert result.exit_code == 0, result.output
    assert source.read_text(encoding='utf-8').startswith(HEADER_OPEN + "\n* @brief Default constructor\n*/\n")
    assert (tmp_path / "Widget_backup.cpp").read_text(encoding='utf-8') == original


def test_insert_dry_run_writes_nothing(runner, tmp_path, config_path):
    source = tmp_path / "A.cpp"
    source.write_text("int A::f()\n", encoding='utf-8')

    result = runner.invoke(cli, ['insert', '-f', str(source), '-l', '1', '-c', config_path, '--dry-run'])

    assert result.exit_code == 0
    assert not (tmp_path / "A_commented.cpp").exists()


def test_insert_non_signature_fails(runner, tmp_path, config_path):
    source = tmp_path / "A.cpp"
    source.write_text("int x = 0;\n", encoding='utf-8')

    result = runner.invoke(cli, ['insert', '-f', str(source), '-l', '1', '-c', config_path])

    assert result.exit_code == 1
    assert "int x = 0;" in result.output
    assert not (tmp_path / "A_commented.cpp").exists()


def test_insert_line_out_of_range(runner, tmp_path, config_path):
    source = tmp_path / "A.cpp"
    source.write_text("int A::f()\n", encoding='utf-8')

    result = runner.invoke(cli, ['insert', '-f', str(source), '-l', '9', '-c', config_path])

    assert result.exit_code == 1
    assert "Insert failed" in result.output


def test_annotate_and_analyze(runner, tmp_path, config_path):
    root = tmp_path / "Source"
    root.mkdir()
    (root / "A.cpp").write_text("int A::f()\n{\n}\n\nvoid A::g(int x,\n int y)\n{\n}\n", encoding='utf-8')
    (root / "B.h").write_text("#pragma once\n", encoding='utf-8')

    analyzed = runner.invoke(cli, ['analyze', '--root', str(root), '--config', config_path])
    assert analyzed.exit_code == 0, analyzed.output
    assert "Single-line signatures: 1" in analyzed.output
    assert "Possible wrapped signatures: 1" in analyzed.output

    result = runner.invoke(cli, ['annotate', '--root', str(root), '--config', config_path])
    assert result.exit_code == 0, result.output
    assert "Inserted 2 header(s) in 1 file(s)" in result.output
    written = (root / "A_commented.cpp").read_text(encoding='utf-8')
    assert written.count(HEADER_OPEN) == 2
    assert not Path(root / "B_commented.h").exists()


def test_show_config(runner, config_path):
    result = runner.invoke(cli, ['show-config', '--config', config_path])
    assert result.exit_code == 0
    assert "FUNCTION HEADER TOOL CONFIGURATION" in result.output


def test_insert_in_place_keeps_crlf_line_endings(runner, tmp_path, config_path):
    source = tmp_path / "Widget.cpp"
    source.write_bytes(b"MyWidget::MyWidget()\r\n{\r\n}\r\n")

    result = runner.invoke(cli, ['insert', '-f', str(source), '-l', '1', '-c', config_path, '--in-place'])

    assert result.exit_code == 0, result.output
    assert source.read_bytes() == (
        HEADER_OPEN.encode('utf-8') + b"\r\n* @brief Default constructor\r\n*/\r\n"
        b"MyWidget::MyWidget()\r\n{\r\n}\r\n"
    )

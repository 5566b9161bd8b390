import io

import pytest

from eolina.eolina_config import IoConfig
from eolina.eolina_datatypes import SourceSpan, String
from eolina.eolina_errors import (
    EmptyProgram, OutOfTargetRange, QueueTooShort, UnknownToken,
)
from eolina.eolina_io import Io
from eolina.eolina_runtime import (
    ExecutionResult, ProgramRunner, error_label, format_error, line_col,
    parse_error_span, source_context,
)


@pytest.fixture
def stdout():
    return io.StringIO()


@pytest.fixture
def runner(stdout):
    return ProgramRunner(Io(IoConfig(), stdin=io.StringIO(), stdout=stdout, stderr=io.StringIO()))


def test_run_success(runner, stdout):
    result = runner.run("<*[^][_]~>", ["AbC"])
    assert result.ok
    assert result.status == 'success'
    assert result.queue == []
    assert result.format_error() == ""
    assert stdout.getvalue() == "ACb\n"


def test_inputs_are_read_in_order(runner, stdout):
    result = runner.run("<<~>", ["a", "b"])
    assert result.ok
    assert stdout.getvalue() == "ab\n"


def test_queue_persists_between_runs(runner, stdout):
    assert runner.run("<", ["kept"]).ok
    result = runner.run("")
    assert result.queue == [String("kept")]
    assert runner.run(">").ok
    assert stdout.getvalue() == "kept\n"

    runner.run("<", ["x"])
    runner.clear()
    assert runner.run("").queue == []


def test_runtime_error_result(runner):
    result = runner.run(">")
    assert not result.ok
    assert isinstance(result.error, QueueTooShort)
    assert result.error_span == SourceSpan(">", 0, 1)
    assert result.format_error() == (
        "QueueTooShort: queue too short: needed 1 value(s), found 0 (line 1, col 1)\n"
        "> 1 | >\n"
        "    | ^"
    )


def test_eager_parse_error_touches_nothing(runner):
    runner.run("<", ["a"])
    result = runner.run(">?", eager=True)
    assert isinstance(result.error, UnknownToken)
    assert result.queue == [String("a")]
    assert result.format_error() == (
        "ParseError: unknown token at `?` (line 1, col 2)\n"
        "> 1 | >?\n"
        "    |  ^"
    )


def test_lazy_parse_error_runs_the_prefix(runner, stdout):
    result = runner.run("<>?", ["a"])
    assert isinstance(result.error, UnknownToken)
    assert stdout.getvalue() == "a\n"


def test_error_on_a_later_line(runner):
    result = runner.run("<\n  >\n~", ["a"])
    assert isinstance(result.error, QueueTooShort)
    text = result.format_error()
    assert "(line 3, col 1)" in text
    assert "> 3 | ~" in text
    assert "  1 | <" in text


def test_caret_spans_the_whole_token(runner):
    result = runner.run("<|9.|", ["abc"])
    assert isinstance(result.error, OutOfTargetRange)
    assert result.format_error().endswith("    |  ^^^^")


def test_run_file(runner, stdout, tmp_path):
    path = tmp_path / "upper.eol"
    path.write_text("<{^}>\n", encoding="utf-8")
    result = runner.run_file(str(path), ["shout"])
    assert result.ok
    assert stdout.getvalue() == "SHOUT\n"


def test_empty_program_is_a_no_op(runner):
    assert runner.run("").ok
    assert runner.run("  \n", eager=True).ok


@pytest.mark.parametrize("error, label", [
    (UnknownToken("x"), "ParseError"),
    (OutOfTargetRange("|5.|", (5, 4), (0, 4)), "RangeError"),
    (EOFError("end of input"), "IoError"),
    (OSError("broken pipe"), "IoError"),
    (QueueTooShort(2, 1), "QueueTooShort"),
])
def test_error_label(error, label):
    assert error_label(error) == label


def test_format_error_without_a_span():
    assert format_error(EOFError("end of input")) == "IoError: end of input"


def test_line_col():
    assert line_col("abc", 0) == (1, 1)
    assert line_col("a\nbc", 3) == (2, 2)


def test_source_context_marks_the_line():
    text = source_context("one\ntwo\nthree\nfour", 2, 1, width=3)
    assert text.splitlines() == [
        "  1 | one",
        "> 2 | two",
        "    | ^^^",
        "  3 | three",
        "  4 | four",
    ]


def test_source_context_out_of_bounds():
    assert source_context("abc", 5, 1) == ""


def test_parse_error_span():
    assert parse_error_span("<>?x", UnknownToken("?x")) == SourceSpan("<>?x", 2, 2)
    assert parse_error_span("  ", EmptyProgram()) == SourceSpan("  ", 0, 2)


def test_execution_result_defaults():
    result = ExecutionResult(status='success')
    assert result.ok
    assert result.queue == []
    assert result.error is None

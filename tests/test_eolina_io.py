import io

import pytest
from colorama import Fore, Style

from eolina.eolina_config import IoConfig, Mode
from eolina.eolina_datatypes import SourceSpan, StringList
from eolina.eolina_io import Io, OutputKind


def make_io(mode=Mode.LEAN, stdin_text="", **kwargs):
    config = IoConfig(mode=mode, **kwargs)
    return Io(config, stdin=io.StringIO(stdin_text), stdout=io.StringIO(), stderr=io.StringIO())


SPAN = SourceSpan("<*>", 1, 1)


def test_read_line_strips_one_newline():
    handle = make_io(stdin_text="a\n\nb")
    assert handle.read_line() == "a"
    assert handle.read_line() == ""
    assert handle.read_line() == "b"
    with pytest.raises(EOFError):
        handle.read_line()


def test_read_line_prompts_only_when_prompted():
    lean = make_io(stdin_text="x\n")
    lean.read_line(SPAN)
    assert lean.stderr.getvalue() == ""

    prompted = make_io(Mode.PROMPTED, stdin_text="x\n")
    prompted.read_line(SPAN)
    assert prompted.stderr.getvalue() == "[inp] [<'*'>]: "

    unprompted = make_io(Mode.PROMPTED, stdin_text="x\n")
    unprompted.read_line(None)
    assert unprompted.stderr.getvalue() == ""


def test_lean_writes_plain_output_and_drops_logs():
    handle = make_io()
    handle.write(OutputKind.OUTPUT, SPAN, StringList(["a"]))
    handle.info("hello")
    handle.error("bad")
    assert handle.stdout.getvalue() == "[a]\n"
    assert handle.stderr.getvalue() == ""


def test_muted_writes_nothing():
    handle = make_io(Mode.MUTED)
    handle.write(OutputKind.OUTPUT, None, "x")
    handle.warning("w")
    assert handle.stdout.getvalue() == ""
    assert handle.stderr.getvalue() == ""


def test_prompted_tags_output_and_logs():
    handle = make_io(Mode.PROMPTED)
    handle.write(OutputKind.OUTPUT, SPAN, "x")
    handle.write(OutputKind.OUTPUT, None, "plain")
    handle.warning("careful")
    handle.error("bad")
    assert handle.stdout.getvalue() == "[out] [<'*'>]: x\nplain\n"
    assert handle.stderr.getvalue() == "[wrn] careful\n[err] bad\n"


def test_custom_prompt_templates():
    handle = make_io(Mode.PROMPTED, prompts={"output": "{{context}} => ", "input": "? "})
    handle.write(OutputKind.OUTPUT, SPAN, "x")
    assert handle.stdout.getvalue() == "<'*'> => x\n"


def test_highlight_plain_and_colored():
    assert make_io().highlight(SPAN) == "<'*'>"

    colored = make_io(color=True).highlight(SPAN)
    assert Fore.CYAN + "*" + Style.RESET_ALL in colored
    assert "'" not in colored


def test_colored_tag():
    handle = make_io(Mode.PROMPTED, color=True)
    handle.error("bad")
    assert handle.stderr.getvalue() == f"[{Fore.RED}err{Style.RESET_ALL}] bad\n"


def test_streams_default_to_sys(monkeypatch):
    fake = io.StringIO()
    monkeypatch.setattr("sys.stdout", fake)
    handle = Io()
    handle.write(OutputKind.OUTPUT, None, "hi")
    assert fake.getvalue() == "hi\n"

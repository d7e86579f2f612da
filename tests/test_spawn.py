import io
import sys

import pytest

from jamkit.outfilter import OutputFilter
from jamkit.spawn import MAX_LINE, READ_SIZE, ExecStatus, filter_stream, spawn, split_lines


def test_split_lines_across_chunks():
    assert list(split_lines(["a\nb", "c\r\n", "d"])) == ["a", "bc", "d"]


def test_split_lines_cr_after_newline():
    assert list(split_lines(["x\n\ry\n"])) == ["x", "y"]


def test_split_lines_no_trailing_empty_line():
    assert list(split_lines(["one\n", "two\n"])) == ["one", "two"]


def test_split_lines_forced_cut():
    text = "z" * (MAX_LINE + 100)
    lines = list(split_lines([text]))
    assert MAX_LINE == READ_SIZE // 2
    assert [len(line) for line in lines] == [MAX_LINE, 100]
    assert "".join(lines) == text


def test_split_lines_preserves_content():
    text = "alpha\nbeta\r\ngamma\ndelta"
    chunks = [text[i : i + 3] for i in range(0, len(text), 3)]
    assert list(split_lines(chunks)) == text.replace("\r", "").split("\n")


def test_filter_stream_routes_lines():
    out = io.StringIO()
    with OutputFilter() as flt:
        flt.add_rule("nul", "^noise")
        flt.prepare()
        passed = filter_stream(["noise 1\nkeep", " this\nnoise 2\n"], flt, out)
    assert passed == 1
    assert out.getvalue() == "keep this\n"


def test_exec_status_from_codes():
    assert ExecStatus(0) is ExecStatus.OK
    assert ExecStatus(1) is ExecStatus.FAIL
    assert ExecStatus(2) is ExecStatus.INTR
    with pytest.raises(ValueError):
        ExecStatus(3)


def test_spawn_raw_output(capsys):
    code = spawn(sys.executable, "-c \"print('hello')\"")
    assert code == 0
    assert capsys.readouterr().out.strip() == "hello"


def test_spawn_exit_code(capsys):
    assert spawn(sys.executable, '-c "import sys; sys.exit(3)"') == 3


def test_spawn_with_filter(capsys, tmp_path):
    target = tmp_path / "picked.txt"
    script = "print('hello'); print('world'); print('pick me')"
    with OutputFilter() as flt:
        flt.add_rule("nul", "^hello")
        flt.add_rule(str(target), "^pick")
        code = spawn(sys.executable, f'-c "{script}"', flt, True)
    assert code == 0
    assert capsys.readouterr().out == "world\n"
    assert target.read_text() == "pick me\n"


def test_spawn_missing_program(tmp_path):
    with pytest.raises(OSError):
        spawn(str(tmp_path / "no-such-program"), "")
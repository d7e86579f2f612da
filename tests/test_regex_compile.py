import pytest

from jamkit.regex_compile import (
    MAX_PROGRAM_SIZE,
    NSUBEXP,
    Op,
    RegexError,
    compile_program,
)

PATTERNS = [
    "abc",
    "a|b",
    "a*",
    "(ab)*c",
    "(a|b)+x",
    "x?y",
    "^foo$",
    "[a-z]+\\.o",
    "\\<word\\>",
    "ab(c(d)e)?f",
    "",
]


def _ops(program):
    return [node.op for node in program.nodes]


def _exact(program):
    return [n.operand for n in program.nodes if n.op == Op.EXACTLY]


@pytest.mark.parametrize("pattern", PATTERNS)
def test_next_pointers_stay_inside_program(pattern):
    program = compile_program(pattern)
    count = len(program.nodes)
    assert all(n.next is None or 0 <= n.next < count for n in program.nodes)


@pytest.mark.parametrize("pattern", PATTERNS)
def test_top_level_chain_ends_in_end(pattern):
    program = compile_program(pattern)
    assert program.nodes[0].op == Op.BRANCH
    scan = 0
    seen = set()
    while program.nodes[scan].next is not None:
        assert scan not in seen
        seen.add(scan)
        scan = program.nodes[scan].next
    assert program.nodes[scan].op == Op.END


@pytest.mark.parametrize("pattern", PATTERNS)
def test_size_is_below_limit(pattern):
    program = compile_program(pattern)
    assert 1 < program.size < MAX_PROGRAM_SIZE


def test_plain_literal_is_single_exact_node():
    program = compile_program("abc")
    assert _exact(program) == ["abc"]
    assert program.start == "a"
    assert not program.anchored
    assert program.must is None


def test_simple_star_uses_star_node():
    program = compile_program("a*")
    assert program.nodes[1].op == Op.STAR
    assert program.nodes[2].op == Op.EXACTLY
    assert program.nodes[2].operand == "a"


def test_multiplier_splits_last_character():
    program = compile_program("abc*")
    assert _exact(program) == ["ab", "c"]
    assert Op.STAR in _ops(program)


def test_simple_plus_uses_plus_node():
    program = compile_program("b+")
    assert program.nodes[1].op == Op.PLUS
    assert program.start == ""


def test_complex_star_uses_back_node():
    program = compile_program("(ab)*")
    ops = _ops(program)
    assert Op.BACK in ops
    assert Op.STAR not in ops
    back = ops.index(Op.BACK)
    assert program.nodes[back].next < back


def test_complex_plus_uses_back_node():
    program = compile_program("(ab)+")
    ops = _ops(program)
    assert Op.BACK in ops
    assert Op.PLUS not in ops


def test_anchored_pattern():
    program = compile_program("^foo")
    assert program.anchored
    assert program.start == ""


def test_must_string_after_leading_star():
    program = compile_program("x*hello")
    assert program.must == "hello"
    assert program.start == ""


def test_alternation_has_no_start_hint():
    program = compile_program("a|b")
    assert program.start == ""
    assert _exact(program) == ["a", "b"]


def test_newline_is_alternation():
    assert _ops(compile_program("a\nb")) == _ops(compile_program("a|b"))


def test_groups_are_numbered():
    program = compile_program("(a)(b)")
    opens = [n.group for n in program.nodes if n.op == Op.OPEN]
    closes = [n.group for n in program.nodes if n.op == Op.CLOSE]
    assert opens == [1, 2]
    assert closes == [1, 2]
    assert program.group_count == 2


def test_maximum_groups_allowed():
    program = compile_program("(a)" * (NSUBEXP - 1))
    assert program.group_count == NSUBEXP - 1


def test_class_range_expands():
    program = compile_program("[a-e]")
    assert program.nodes[1].op == Op.ANYOF
    assert program.nodes[1].operand == "abcde"


def test_negated_class():
    program = compile_program("[^abc]")
    assert program.nodes[1].op == Op.ANYBUT
    assert program.nodes[1].operand == "abc"


def test_class_leading_bracket_and_trailing_dash():
    assert compile_program("[]a]").nodes[1].operand == "]a"
    assert compile_program("[a-]").nodes[1].operand == "a-"


def test_escaped_characters_are_literal():
    program = compile_program("\\.x")
    assert _exact(program) == [".x"]


def test_word_boundaries():
    ops = _ops(compile_program("\\<a\\>"))
    assert Op.WORDA in ops
    assert Op.WORDZ in ops


def test_text_after_nul_is_ignored():
    assert _ops(compile_program("ab\0(")) == _ops(compile_program("ab"))


@pytest.mark.parametrize(
    "pattern, message",
    [
        ("(a" , "unmatched ()"),
        ("a)", "unmatched ()"),
        ("[a", "unmatched []"),
        ("*a", "?+* follows nothing"),
        ("a**", "nested *?+"),
        ("()*", "*+ operand could be empty"),
        ("a\\", "trailing \\"),
        ("[z-a]", "invalid [] range"),
        ("(a)" * NSUBEXP, "too many ()"),
    ],
)
def test_errors(pattern, message):
    with pytest.raises(RegexError) as info:
        compile_program(pattern)
    assert str(info.value) == message


def test_too_big():
    with pytest.raises(RegexError, match="regexp too big"):
        compile_program("a" * MAX_PROGRAM_SIZE)


def test_none_pattern():
    with pytest.raises(RegexError, match="NULL argument"):
        compile_program(None)
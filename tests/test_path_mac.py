import pytest

from jamkit.path_mac import build_path, parent_path, parse_path
from jamkit.pathname import PathName


@pytest.mark.parametrize(
    "text",
    [
        "vol:dir:file.c",
        "file.c",
        ":dir:file.c",
        "vol:file.c",
        "::file",
        "vol:lib.a(mem.o)",
        "<g>vol:dir:f.c",
    ],
)
def test_round_trip(text):
    assert build_path(parse_path(text)) == text


def test_parse_nested_dir():
    name = parse_path("a:b:c.r")
    assert name.dir == "a:b"
    assert name.base == "c"
    assert name.suffix == ".r"


def test_volume_keeps_colon():
    assert parse_path("a:b").dir == "a:"


def test_leading_colon_dir():
    name = parse_path(":c")
    assert name.dir == ":"
    assert name.base == "c"


def test_all_colons_dir():
    assert parse_path("::c").dir == "::"


def test_dotdot_on_dotdot():
    assert build_path(PathName(root="::", dir="::")) == ":::"


def test_absolute_root_with_relative_dir():
    assert build_path(PathName(root="vol:", dir=":sub", base="f")) == "vol:sub:f"


def test_root_used_when_dir_empty():
    assert build_path(parse_path("f.c").with_root("vol:")) == "vol:f.c"


def test_absolute_dir_wins_over_root():
    name = parse_path("disk:x:f.c").with_root("vol:")
    assert build_path(name) == "disk:x:f.c"


def test_no_root_no_dir_has_no_separator():
    assert build_path(PathName(base="f", suffix=".c")) == "f.c"


def test_parent_drops_file_parts():
    parent = parent_path(parse_path("vol:dir:file.c"))
    assert (parent.base, parent.suffix, parent.member) == ("", "", "")
    assert build_path(parent) == "vol:dir"
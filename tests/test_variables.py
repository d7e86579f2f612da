import os

import pytest

from jamkit.variables import SetMode, VariableTable


def test_unset_variable_is_empty():
    table = VariableTable()
    assert table.get("NOPE") == []
    assert "NOPE" not in table


def test_set_replaces_value():
    table = VariableTable()
    table.set("CC", ["gcc"])
    table.set("CC", ["clang", "-O2"], SetMode.SET)
    assert table.get("CC") == ["clang", "-O2"]


def test_append_extends_value():
    table = VariableTable()
    table.set("FLAGS", ["-a"])
    table.set("FLAGS", ["-b", "-c"], SetMode.APPEND)
    assert table.get("FLAGS") == ["-a", "-b", "-c"]


def test_default_only_when_unset():
    table = VariableTable()
    table.set("X", ["first"], SetMode.DEFAULT)
    table.set("X", ["second"], SetMode.DEFAULT)
    assert table.get("X") == ["first"]


def test_default_applies_after_empty_value():
    table = VariableTable()
    table.set("X", [])
    table.set("X", ["filled"], SetMode.DEFAULT)
    assert table.get("X") == ["filled"]


def test_string_value_is_single_element():
    table = VariableTable()
    table.set("NAME", "abc")
    assert table.get("NAME") == ["abc"]


def test_get_returns_copy():
    table = VariableTable()
    table.set("L", ["a"])
    got = table.get("L")
    got.append("b")
    assert table.get("L") == ["a"]


def test_swap_returns_old_value():
    table = VariableTable()
    table.set("V", ["old"])
    old = table.swap("V", ["new"])
    assert old == ["old"]
    assert table.get("V") == ["new"]
    assert table.swap("V", old) == ["new"]
    assert table.get("V") == ["old"]


def test_swap_of_unset_returns_empty():
    table = VariableTable()
    assert table.swap("FRESH", ["v"]) == []
    assert table.get("FRESH") == ["v"]


def test_define_splits_at_blanks():
    table = VariableTable()
    table.define(["OPTS=x y z"])
    assert table.get("OPTS") == ["x", "y", "z"]


def test_define_keeps_empty_pieces():
    table = VariableTable()
    table.define(["OPTS=x  y", "EMPTY="])
    assert table.get("OPTS") == ["x", "", "y"]
    assert table.get("EMPTY") == [""]


@pytest.mark.parametrize("name", ["PATH", "LIBPATH", "Path", "mypath"])
def test_define_splits_path_names_at_separator(name):
    table = VariableTable()
    table.define([f"{name}=a b{os.pathsep}c"])
    assert table.get(name) == ["a b", "c"]


def test_define_ignores_windows_os_and_entries_without_equals():
    table = VariableTable()
    table.define(["OS=Windows_NT", "JUSTNAME", "OS2=yes"])
    assert table.get("OS") == []
    assert table.get("JUSTNAME") == []
    assert table.get("OS2") == ["yes"]


def test_define_value_may_contain_equals():
    table = VariableTable()
    table.define(["DEF=A=1 B=2"])
    assert table.get("DEF") == ["A=1", "B=2"]
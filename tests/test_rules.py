from jamkit.rules import (
    Action,
    Fate,
    RuleFlag,
    RuleTable,
    Settings,
    Target,
    TargetFlag,
    copy_target,
)
from jamkit.variables import SetMode, VariableTable


def test_bind_rule_is_stable():
    table = RuleTable()
    first = table.bind_rule("Cc")
    assert table.bind_rule("Cc") is first
    assert first.name == "Cc"
    assert first.procedure is None
    assert first.actions is None
    assert first.bindlist == [] and first.params == []
    assert first.flags == RuleFlag.NONE


def test_bind_target_defaults():
    table = RuleTable()
    target = table.bind_target("foo.o")
    assert table.bind_target("foo.o") is target
    assert target.boundname == "foo.o"
    assert target.flags == TargetFlag.NONE
    assert target.fate == Fate.INIT
    assert target.includes is None


def test_touch_target_sets_flag():
    table = RuleTable()
    table.touch_target("all")
    target = table.bind_target("all")
    assert target.flags == TargetFlag.TOUCHED
    table.touch_target("all")
    assert table.bind_target("all") is target
    assert target.flags == TargetFlag.TOUCHED


def test_target_list_order_and_identity():
    table = RuleTable()
    existing = table.bind_target("b")
    targets = table.target_list(["a", "b", "c"])
    assert [t.name for t in targets] == ["a", "b", "c"]
    assert targets[1] is existing
    assert table.target_list([]) == []


def test_copy_target_is_internal_and_unregistered():
    table = RuleTable()
    original = table.bind_target("lib.a")
    copy = copy_target(original)
    assert copy is not original
    assert copy.name == original.name
    assert copy.boundname == original.name
    assert copy.flags == TargetFlag.NOTFILE | TargetFlag.INTERNAL
    assert table.bind_target("lib.a") is original


def test_flag_values_fixed_by_source():
    table = RuleTable()
    copy = copy_target(table.bind_target("x"))
    assert int(copy.flags) == 0x44
    assert RuleFlag(0x41) == RuleFlag.UPDATED | RuleFlag.MAXLINE
    assert TargetFlag(0x40) == TargetFlag.INTERNAL


def test_fate_aliases():
    assert Fate(4) is Fate.SPOIL
    assert Fate(4) is Fate.ISTMP
    assert Fate(5) is Fate.TOUCHED
    assert Fate(10) is Fate.CANTFIND
    assert Fate(11) > Fate(10) > Fate(9)


def test_settings_add_modes():
    settings = Settings()
    settings.add(SetMode.APPEND, "X", ["a"])
    assert settings["X"] == ["a"]
    settings.add(SetMode.APPEND, "X", ["b"])
    assert settings["X"] == ["a", "b"]
    settings.add(SetMode.DEFAULT, "X", ["c"])
    assert settings["X"] == ["a", "b"]
    settings.add(SetMode.SET, "X", ["d"])
    assert settings["X"] == ["d"]
    assert len(settings) == 1


def test_settings_add_default_when_new():
    settings = Settings().add(SetMode.DEFAULT, "Y", ["v"])
    assert "Y" in settings
    assert settings["Y"] == ["v"]


def test_settings_copy_is_independent():
    settings = Settings().add(SetMode.SET, "X", ["a"])
    copy = settings.copy()
    copy.add(SetMode.APPEND, "X", ["b"])
    copy.values["X"].append("c")
    assert settings["X"] == ["a"]
    assert copy["X"] == ["a", "b", "c"]


def test_push_and_pop_restore_globals():
    variables = VariableTable()
    variables.set("CC", ["gcc"])
    settings = Settings().add(SetMode.SET, "CC", ["clang"])
    settings.add(SetMode.SET, "NEW", ["n"])
    pushed = settings.copy()
    pushed.push(variables)
    assert variables.get("CC") == ["clang"]
    assert variables.get("NEW") == ["n"]
    pushed.pop(variables)
    assert variables.get("CC") == ["gcc"]
    assert variables.get("NEW") == []
    assert pushed["CC"] == ["clang"]
    assert settings["CC"] == ["clang"]


def test_action_links_rule_and_targets():
    table = RuleTable()
    rule = table.bind_rule("Link")
    out = table.bind_target("app")
    action = Action(rule, targets=[out], sources=table.target_list(["x.o"]))
    out.actions.append(action)
    assert out.actions[0].rule is rule
    assert action.sources[0] is table.bind_target("x.o")
    assert not action.running


def test_targets_compare_by_identity():
    first = Target("same")
    second = Target("same")
    assert first.name == second.name == "same"
    assert [first, second].index(second) == 1
    assert first == first
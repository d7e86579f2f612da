"""Rules, targets, actions and target-specific variable settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any, Iterable, Iterator

from .variables import SetMode, VariableTable

__all__ = [
    "Action",
    "Binding",
    "Fate",
    "Progress",
    "Rule",
    "RuleFlag",
    "RuleTable",
    "Settings",
    "Target",
    "TargetFlag",
    "copy_target",
]


class RuleFlag(IntFlag):
    """Modifiers on a rule's actions."""

    NONE = 0
    UPDATED = 0x01  # $(>) is updated sources only
    TOGETHER = 0x02  # combine actions on single target
    IGNORE = 0x04  # ignore return status of executes
    QUIETLY = 0x08  # don't mention it unless verbose
    PIECEMEAL = 0x10  # split exec so each $(>) is small
    EXISTING = 0x20  # $(>) is pre-existing sources only
    MAXLINE = 0x40  # command specific maxline


class TargetFlag(IntFlag):
    """Status information on a target."""

    NONE = 0
    TEMP = 0x01
    NOCARE = 0x02
    NOTFILE = 0x04
    TOUCHED = 0x08
    LEAVES = 0x10
    NOUPDATE = 0x20
    INTERNAL = 0x40


class Binding(IntEnum):
    """How a target relates to a real file."""

    UNBOUND = 0
    MISSING = 1
    PARENTS = 2
    EXISTS = 3


class Fate(IntEnum):
    """The diagnosis of whether a target needs updating."""

    INIT = 0
    MAKING = 1
    STABLE = 2
    NEWER = 3
    SPOIL = 4
    ISTMP = 4
    BUILD = 5
    TOUCHED = 5
    MISSING = 6
    NEEDTMP = 7
    OUTDATED = 8
    UPDATE = 9
    BROKEN = 10
    CANTFIND = 10
    CANTMAKE = 11


class Progress(IntEnum):
    """How far updating a target has got."""

    INIT = 0
    ONSTACK = 1
    ACTIVE = 2
    RUNNING = 3
    DONE = 4


@dataclass(eq=False)
class Rule:
    """A named rule: a procedure body and/or an action command string."""

    name: str
    procedure: Any = None
    actions: str | None = None
    bindlist: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    flags: RuleFlag = RuleFlag.NONE


@dataclass
class Settings:
    """Variables to set while a target's actions run."""

    values: dict[str, list[str]] = field(default_factory=dict)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.values

    def __getitem__(self, symbol: str) -> list[str]:
        return self.values[symbol]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def add(
        self, mode: SetMode, symbol: str, value: Iterable[str]
    ) -> Settings:
        """Record a setting; a repeated symbol combines according to ``mode``."""
        new = list(value)
        if symbol not in self.values:
            self.values[symbol] = new
        elif mode == SetMode.SET:
            self.values[symbol] = new
        elif mode == SetMode.APPEND:
            self.values[symbol] = self.values[symbol] + new
        return self

    def copy(self) -> Settings:
        """Return an independent copy for temporary pushing."""
        return Settings({symbol: list(v) for symbol, v in self.values.items()})

    def push(self, variables: VariableTable) -> None:
        """Swap these settings into ``variables``, keeping the old values here."""
        for symbol, value in list(self.values.items()):
            self.values[symbol] = variables.swap(symbol, value)

    def pop(self, variables: VariableTable) -> None:
        """Restore the values that :meth:`push` replaced."""
        self.push(variables)


@dataclass(eq=False)
class Target:
    """A file or other thing that can be built."""

    name: str
    boundname: str = ""
    actions: list[Action] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    flags: TargetFlag = TargetFlag.NONE
    binding: Binding = Binding.UNBOUND
    depends: list[Target] = field(default_factory=list)
    includes: Target | None = None
    time: float = 0
    leaf: float = 0
    fate: Fate = Fate.INIT
    progress: Progress = Progress.INIT
    status: int = 0
    asynccnt: int = 0
    parents: list[Target] = field(default_factory=list)
    cmds: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.boundname:
            self.boundname = self.name


@dataclass(eq=False)
class Action:
    """One invocation of a rule on targets and sources."""

    rule: Rule
    targets: list[Target] = field(default_factory=list)
    sources: list[Target] = field(default_factory=list)
    running: bool = False
    status: int = 0


def copy_target(target: Target) -> Target:
    """Make an internal node carrying ``target``'s name; it is not registered."""
    return Target(
        name=target.name,
        flags=TargetFlag.NOTFILE | TargetFlag.INTERNAL,
    )


class RuleTable:
    """The registry of rules and targets by name."""

    def __init__(self) -> None:
        self.rules: dict[str, Rule] = {}
        self.targets: dict[str, Target] = {}

    def bind_rule(self, name: str) -> Rule:
        """Return the rule called ``name``, creating it if necessary."""
        rule = self.rules.get(name)
        if rule is None:
            rule = self.rules[name] = Rule(name)
        return rule

    def bind_target(self, name: str) -> Target:
        """Return the target called ``name``, creating it if necessary."""
        target = self.targets.get(name)
        if target is None:
            target = self.targets[name] = Target(name)
        return target

    def touch_target(self, name: str) -> Target:
        """Mark a target so that it is treated as new."""
        target = self.bind_target(name)
        target.flags |= TargetFlag.TOUCHED
        return target

    def target_list(self, names: Iterable[str]) -> list[Target]:
        """Return the targets for ``names``, in order."""
        return [self.bind_target(name) for name in names]
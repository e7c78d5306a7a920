from collections.abc import Sequence
from dataclasses import dataclass

import re2

from .errors import ConfigError
from .templates import references


@dataclass(frozen=True)
class MatchResult:
    rule: "Rule"
    groups: tuple[str | None, ...]


@dataclass(frozen=True)
class Rule:
    """A compiled rule: its pattern and one template per output field."""

    regex: str
    pattern: "re2._Regexp[str]"
    templates: tuple[str | None, ...]

    def match(self, s: str, /) -> MatchResult | None:
        m = self.pattern.search(s)
        if m is None:
            return None
        return MatchResult(self, tuple(m.groups()))


def compile_pattern(
    regex: str, flag: str | None = None, *, where: str = "rule"
) -> "re2._Regexp[str]":
    if flag not in (None, "i"):
        raise ConfigError(f"{where}: unsupported regex_flag {flag!r}")

    # Do not write errors to stderr (this still raises exceptions)
    options = re2.Options()
    options.log_errors = False
    if flag == "i":
        options.case_sensitive = False

    try:
        return re2.compile(regex, options=options)
    except re2.error as e:
        reason = e.args[0] if e.args else e
        if isinstance(reason, bytes):
            reason = reason.decode()
        raise ConfigError(f"{where}: bad regular expression {regex!r}: {reason}") from e


def compile_rule(
    regex: str,
    flag: str | None,
    templates: Sequence[str | None],
    *,
    where: str = "rule",
) -> Rule:
    pattern = compile_pattern(regex, flag, where=where)

    for template in templates:
        if template is None:
            continue
        for idx in references(template):
            if idx == 0:
                raise ConfigError(f"{where}: $0 is not a valid reference in {template!r}")
            if idx > pattern.groups:
                raise ConfigError(
                    f"{where}: {template!r} references group {idx} "
                    f"but {regex!r} only has {pattern.groups}"
                )

    return Rule(regex, pattern, tuple(templates))

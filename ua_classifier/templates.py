"""Replacement templates.

A template is a string which may contain ``$1`` to ``$9``, each standing for
the corresponding capture group of the rule's pattern. The rules are:

- if the template contains references, each is replaced by its group (or by
  an empty string if the group did not participate in the match), the result
  is stripped, and an empty result means the field is absent
- a template without references is a literal, returned as-is (absent only if
  it is itself empty)
- a missing template falls back to a positional capture group, if the field
  has one
"""

import re
from collections.abc import Sequence

Groups = Sequence[str | None]

_REFERENCE = re.compile(r"\$(\d)")


def references(template: str) -> list[int]:
    """Group indices referenced by ``template``, in order of appearance."""
    return [int(m[1]) for m in _REFERENCE.finditer(template)]


def group(groups: Groups, idx: int) -> str | None:
    """1-indexed group lookup, ``None`` for missing or empty groups."""
    if 0 < idx <= len(groups):
        return groups[idx - 1] or None
    return None


def substitute(template: str, groups: Groups) -> str | None:
    if _REFERENCE.search(template) is None:
        return template or None

    value = _REFERENCE.sub(lambda m: group(groups, int(m[1])) or "", template)
    return value.strip() or None


def resolve(template: str | None, groups: Groups, default: int | None) -> str | None:
    if template is not None:
        return substitute(template, groups)
    if default is None:
        return None
    return group(groups, default)

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import yaml

try:
    from yaml import CSafeLoader as SafeLoader
except ImportError:
    from yaml import SafeLoader  # type: ignore

from .config import rules_path
from .errors import ConfigError
from .extractors import (
    CPUExtractor,
    DeviceExtractor,
    EngineExtractor,
    Extractor,
    OSExtractor,
    ProductExtractor,
)

logger = logging.getLogger(__name__)

# Keys of each rule entry, in the order the extractors expect them. The
# pattern always comes first.
SECTIONS: dict[str, tuple[type[Extractor[Any]], tuple[str, ...]]] = {
    "user_agent_parsers": (
        ProductExtractor,
        (
            "regex",
            "family_replacement",
            "v1_replacement",
            "v2_replacement",
            "v3_replacement",
        ),
    ),
    "os_parsers": (
        OSExtractor,
        (
            "regex",
            "os_replacement",
            "os_v1_replacement",
            "os_v2_replacement",
            "os_v3_replacement",
            "os_v4_replacement",
        ),
    ),
    "device_parsers": (
        DeviceExtractor,
        (
            "regex",
            "regex_flag",
            "device_replacement",
            "brand_replacement",
            "model_replacement",
        ),
    ),
    "cpu_parsers": (
        CPUExtractor,
        ("regex", "regex_flag", "architecture_replacement"),
    ),
    "engine_parsers": (
        EngineExtractor,
        (
            "regex",
            "engine_replacement",
            "engine_v1_replacement",
            "engine_v2_replacement",
            "engine_v3_replacement",
            "engine_v4_replacement",
        ),
    ),
}


@dataclass(frozen=True)
class RuleTable:
    """The compiled rules of every category. Never modified once built."""

    product: ProductExtractor
    os: OSExtractor
    device: DeviceExtractor
    cpu: CPUExtractor
    engine: EngineExtractor

    def __len__(self) -> int:
        return sum(len(e) for e in (self.product, self.os, self.device, self.cpu, self.engine))


def read_document(path: str | os.PathLike[str]) -> Any:
    try:
        with open(path, "rb") as f:
            return yaml.load(f, Loader=SafeLoader)
    except OSError as e:
        raise ConfigError(f"cannot read rules from {os.fspath(path)!r}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {os.fspath(path)!r}: {e}") from e


def _value(where: str, key: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    # unquoted numbers arrive already resolved, `10.10` as 10.1
    raise ConfigError(
        f"{where}: {key} must be a string, got {type(value).__name__} (quote it)"
    )


def rule_tuples(document: Any) -> dict[str, list[tuple[str | None, ...]]]:
    """Validate a parsed rule document and flatten its entries to tuples."""
    if not isinstance(document, Mapping):
        raise ConfigError("rule document must be a mapping of sections")

    tuples = {}
    for section, (_, keys) in SECTIONS.items():
        if section not in document:
            raise ConfigError(f"missing section {section!r}")
        entries = document[section]
        if not isinstance(entries, list):
            raise ConfigError(f"{section} must be a list of rules")

        rules = []
        for i, entry in enumerate(entries):
            where = f"{section}[{i}]"
            if not isinstance(entry, Mapping):
                raise ConfigError(f"{where}: rule must be a mapping")
            regex = entry.get("regex")
            if not isinstance(regex, str) or not regex:
                raise ConfigError(f"{where}: missing regex")
            rules.append((regex, *(_value(where, k, entry.get(k)) for k in keys[1:])))
        tuples[section] = rules

    return tuples


def build(document: Any) -> RuleTable:
    """Validate and compile a parsed rule document."""
    tuples = rule_tuples(document)
    extractors = [cls(tuples[section]) for section, (cls, _) in SECTIONS.items()]
    return RuleTable(*extractors)


def load(path: str | os.PathLike[str] | None = None) -> RuleTable:
    """Load and compile the rule file at ``path`` (see ``config.rules_path``).

    Raises ``ConfigError`` if anything is wrong with the file, in which case
    nothing is returned: there are no partially loaded tables.
    """
    resolved = rules_path(path)
    table = build(read_document(resolved))
    logger.info(
        "Loaded %d user agent rules from %s (product=%d os=%d device=%d cpu=%d engine=%d)",
        len(table),
        resolved,
        len(table.product),
        len(table.os),
        len(table.device),
        len(table.cpu),
        len(table.engine),
    )
    return table

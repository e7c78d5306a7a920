import pathlib
from typing import Any

import pytest
import yaml

Document = dict[str, Any]


def _document(**sections: list[dict[str, Any]]) -> Document:
    doc: Document = {
        "user_agent_parsers": [{"regex": r"(Chrome)/(\d+)\.(\d+)"}],
        "os_parsers": [{"regex": r"(Windows) NT (\d+)\.(\d+)"}],
        "device_parsers": [{"regex": r"(iPhone)", "brand_replacement": "Apple"}],
        "cpu_parsers": [{"regex": "Win64", "architecture_replacement": "amd64"}],
        "engine_parsers": [{"regex": r"(AppleWebKit)/(\d+)\.(\d+)"}],
    }
    doc.update(sections)
    return doc


@pytest.fixture
def document():
    """Factory for a minimal valid rule document, sections can be overridden."""
    return _document


@pytest.fixture
def write_rules(tmp_path: pathlib.Path):
    def write(doc: Any, name: str = "regexes.yaml") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(doc if isinstance(doc, str) else yaml.safe_dump(doc))
        return path

    return write


@pytest.fixture
def no_shared_parser(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run with an uninitialized process-wide parser."""
    monkeypatch.setattr("ua_classifier.shared._parser", None)
    monkeypatch.delenv("USER_AGENT_PATH", raising=False)

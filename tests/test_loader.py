import pathlib

import pytest

import ua_classifier
from ua_classifier import ConfigError, loader
from ua_classifier.config import rules_path


def test_default_rules() -> None:
    table = loader.load(ua_classifier.DEFAULT_PATH)
    assert len(table.product) > 0
    assert len(table.os) > 0
    assert len(table.device) > 0
    assert len(table.cpu) > 0
    assert len(table.engine) > 0
    assert len(table) == sum(
        map(len, (table.product, table.os, table.device, table.cpu, table.engine))
    )


def test_read_document(write_rules, document) -> None:
    assert loader.read_document(write_rules(document())) == document()


def test_rules_path(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
    monkeypatch.delenv("USER_AGENT_PATH", raising=False)
    assert rules_path() == ua_classifier.DEFAULT_PATH

    monkeypatch.setenv("USER_AGENT_PATH", str(tmp_path / "env.yaml"))
    assert rules_path() == tmp_path / "env.yaml"
    assert rules_path(tmp_path / "explicit.yaml") == tmp_path / "explicit.yaml"


def test_load_from_env(monkeypatch: pytest.MonkeyPatch, write_rules, document) -> None:
    monkeypatch.setenv("USER_AGENT_PATH", str(write_rules(document())))
    table = loader.load()
    assert len(table) == 5


def test_missing_file(tmp_path: pathlib.Path) -> None:
    with pytest.raises(ConfigError, match="cannot read"):
        loader.load(tmp_path / "nope.yaml")


def test_invalid_yaml(write_rules) -> None:
    with pytest.raises(ConfigError, match="invalid YAML"):
        loader.load(write_rules("user_agent_parsers: [\n"))


def test_not_a_mapping(write_rules) -> None:
    with pytest.raises(ConfigError, match="mapping of sections"):
        loader.load(write_rules(["regex"]))


@pytest.mark.parametrize("section", list(loader.SECTIONS))
def test_missing_section(write_rules, document, section: str) -> None:
    doc = document()
    del doc[section]
    with pytest.raises(ConfigError, match=section):
        loader.load(write_rules(doc))


def test_section_not_a_list(write_rules, document) -> None:
    with pytest.raises(ConfigError, match="must be a list"):
        loader.load(write_rules(document(os_parsers={"regex": "Linux"})))


@pytest.mark.parametrize(
    "entry",
    [
        {"os_replacement": "Linux"},
        {"regex": ""},
        {"regex": 42},
        "Linux",
    ],
)
def test_bad_entry(write_rules, document, entry) -> None:
    with pytest.raises(ConfigError, match=r"os_parsers\[1\]"):
        loader.load(write_rules(document(os_parsers=[{"regex": "(Windows)"}, entry])))


def test_bad_replacement_type(write_rules, document) -> None:
    doc = document(os_parsers=[{"regex": "(Linux)", "os_replacement": ["Linux"]}])
    with pytest.raises(ConfigError, match="os_replacement must be a string"):
        loader.load(write_rules(doc))


def test_unquoted_number_rejected(write_rules) -> None:
    rules = """
user_agent_parsers: []
device_parsers: []
cpu_parsers: []
engine_parsers: []
os_parsers:
  - regex: '(Mac OS X)'
    os_v1_replacement: 10.10
"""
    with pytest.raises(ConfigError, match=r"os_parsers\[0\]: os_v1_replacement must be a string.*quote it"):
        loader.load(write_rules(rules))


def test_quoted_number(write_rules, document) -> None:
    doc = document(os_parsers=[{"regex": "(Mac OS X)", "os_v1_replacement": "10.10"}])
    table = loader.load(write_rules(doc))
    assert table.os.extract("Mac OS X").major == "10.10"


def test_unknown_keys_ignored(write_rules, document) -> None:
    doc = document(os_parsers=[{"regex": "(Linux)", "comment": "generic"}])
    assert loader.load(write_rules(doc)).os.extract("Linux").name == "Linux"


def test_bad_pattern(write_rules, document) -> None:
    doc = document(engine_parsers=[{"regex": "(AppleWebKit"}])
    with pytest.raises(ConfigError, match=r"engine_parsers\[0\]: bad regular expression"):
        loader.load(write_rules(doc))


def test_backreferences_rejected(write_rules, document) -> None:
    # not supported by RE2
    doc = document(user_agent_parsers=[{"regex": r"(a)\1"}])
    with pytest.raises(ConfigError, match="bad regular expression"):
        loader.load(write_rules(doc))


def test_bad_flag(write_rules, document) -> None:
    doc = document(device_parsers=[{"regex": "(iPhone)", "regex_flag": "x"}])
    with pytest.raises(ConfigError, match="unsupported regex_flag"):
        loader.load(write_rules(doc))


@pytest.mark.parametrize(
    "replacement,message",
    [
        ("$2", "references group 2"),
        ("$0", r"\$0 is not a valid reference"),
    ],
)
def test_bad_reference(write_rules, document, replacement: str, message: str) -> None:
    doc = document(device_parsers=[{"regex": "(iPhone)", "model_replacement": replacement}])
    with pytest.raises(ConfigError, match=message):
        loader.load(write_rules(doc))


def test_case_insensitive_flag(write_rules, document) -> None:
    doc = document(
        device_parsers=[
            {"regex": "(iphone)", "brand_replacement": "Apple"},
            {"regex": "(ipad)", "regex_flag": "i", "brand_replacement": "Apple"},
        ]
    )
    table = loader.load(write_rules(doc))
    assert table.device.extract("iPhone") is None
    assert table.device.extract("iPad").name == "iPad"

from __future__ import annotations

import json
from pathlib import Path

import pytest

from confbag import (
    NOT_FOUND,
    ConfigSource,
    ConfigSourceError,
    InvalidArgumentError,
    InvalidFormatError,
    Library,
    Node,
    NotFoundError,
    Scalar,
    StoreClosedError,
)


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class Widget:
    size = 10


def test_get_missing_key_returns_default():
    config = Library()

    assert config.get("missing") is None
    assert config.get("missing.deeper", "fallback") == "fallback"


@pytest.mark.parametrize("value", [0, "", None, [1, 2], {"nested": {"x": 1}}, 1.5, False])
def test_set_then_get_returns_value(value):
    config = Library()

    assert config.set("some.key", value) is config
    assert config.get("some.key") == value
    assert config.has("some.key")


def test_remove_then_has_is_false():
    config = Library({"a": {"b": 1}})

    assert config.remove("a.b") is config
    assert not config.has("a.b")
    # removing an absent key is a no-op
    config.remove("a.b").remove("never.there")
    assert config.all() == {"a": {}}


def test_set_none_replaces_entire_configuration():
    config = Library({"old": 1})
    replacement = {"a": {"b": 1}, "c": [1, 2]}

    config.set(None, replacement)

    assert config.all() == replacement
    assert not config.has("old")


@pytest.mark.parametrize("value", [None, 42, "text", [("a", 1)]])
def test_set_none_with_non_mapping_raises_and_keeps_tree(value):
    config = Library({"keep": True})

    with pytest.raises(InvalidArgumentError, match="must be a mapping"):
        config.set(None, value)

    assert config.all() == {"keep": True}


def test_set_array_scenario():
    config = Library()

    config.set_array(None, {"a": {"b": 1}})

    assert config.get("a.b") == 1
    assert config.get("a.c", "x") == "x"


def test_set_array_with_name_stores_under_namespace():
    config = Library({"existing": 1})

    config.set_array("db", {"host": "localhost"})

    assert config.all() == {"existing": 1, "db": {"host": "localhost"}}


def test_all_is_idempotent_without_mutation():
    config = Library({"a": {"b": [1, 2]}})

    assert config.all() == config.all()


def test_merge_keeps_existing_keys():
    config = Library({"app": {"debug": False, "name": "demo"}})

    config.merge("app", {"debug": True})
    config.merge(None, {"db": {"port": 5432}})
    config.merge("cache", {"ttl": 60})

    assert config.all() == {
        "app": {"debug": True, "name": "demo"},
        "db": {"port": 5432},
        "cache": {"ttl": 60},
    }


def test_merge_rejects_non_mapping():
    with pytest.raises(InvalidArgumentError):
        Library().merge(None, 1)  # type: ignore[arg-type]


def test_set_dir_scenario_with_exclusion(tmp_path: Path):
    write_json(tmp_path / "one.json", {"x": 1})
    write_json(tmp_path / "skip.json", {"y": 2})

    config = Library()
    config.set_dir(None, tmp_path, exclude=["skip"])

    assert config.get("one.x") == 1
    assert not config.has("skip")


def test_set_dir_prefixes_lowercases_and_ignores_other_files(tmp_path: Path):
    write_json(tmp_path / "Database.json", {"host": "db"})
    (tmp_path / "app.py").write_text("CONFIG = {'debug': True}\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not config", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    write_json(nested / "deep.json", {"z": 1})

    config = Library()
    config.set_dir("settings", tmp_path)

    assert config.all() == {
        "settings": {
            "database": {"host": "db"},
            "app": {"debug": True},
        }
    }


def test_set_dir_exclusion_is_case_insensitive_and_strips_extension(tmp_path: Path):
    write_json(tmp_path / "Local.json", {"secret": 1})
    write_json(tmp_path / "main.json", {"ok": 1})

    config = Library()
    config.set_dir(None, tmp_path, exclude=["LOCAL.json"])

    assert config.all() == {"main": {"ok": 1}}


def test_set_dir_exclusion_keeps_dotted_basenames(tmp_path: Path):
    write_json(tmp_path / "app.json", {"name": "main"})
    write_json(tmp_path / "app.local.json", {"secret": 1})

    config = Library()
    config.set_dir(None, tmp_path, exclude=["app.local"])

    assert config.all() == {"app": {"name": "main"}}

    config = Library()
    config.set_dir(None, tmp_path, exclude=["App.Local.JSON"])

    assert config.all() == {"app": {"name": "main"}}


def test_set_dir_restricts_suffixes(tmp_path: Path):
    write_json(tmp_path / "one.json", {"x": 1})
    (tmp_path / "two.py").write_text("CONFIG = {'y': 2}\n", encoding="utf-8")

    config = Library()
    config.set_dir(None, tmp_path, suffixes=["py"])

    assert config.all() == {"two": {"y": 2}}


def test_set_dir_requires_directory(tmp_path: Path):
    config_file = write_json(tmp_path / "one.json", {"x": 1})

    with pytest.raises(ConfigSourceError, match="not a valid directory"):
        Library().set_dir(None, config_file)


def test_set_dir_aborts_on_first_failure_without_rollback(tmp_path: Path):
    write_json(tmp_path / "a.json", {"x": 1})
    write_json(tmp_path / "b.json", [1, 2])
    write_json(tmp_path / "c.json", {"z": 3})

    config = Library()
    with pytest.raises(InvalidFormatError):
        config.set_dir(None, tmp_path)

    assert config.get("a.x") == 1
    assert not config.has("c")


def test_set_file_lowercases_name(tmp_path: Path):
    config_file = write_json(tmp_path / "mail.json", {"host": "smtp"})

    config = Library()
    config.set_file("Mail", config_file)

    assert config.get("mail.host") == "smtp"
    assert not config.has("Mail")


def test_set_file_without_name_replaces_configuration(tmp_path: Path):
    config_file = write_json(tmp_path / "all.json", {"a": 1})

    config = Library({"old": True})
    config.set_file(None, config_file)

    assert config.all() == {"a": 1}


def test_set_file_missing_raises(tmp_path: Path):
    with pytest.raises(ConfigSourceError):
        Library().set_file("x", tmp_path / "missing.json")


def test_set_file_optional_missing_is_ignored(tmp_path: Path):
    config = Library({"a": 1})

    config.set_file("x", tmp_path / "missing.json", optional=True)

    assert config.all() == {"a": 1}


def test_set_dir_wraps_undecodable_files(tmp_path: Path):
    (tmp_path / "bad.json").write_bytes(b"\xff\xfe\x00{")

    with pytest.raises(InvalidFormatError):
        Library().set_dir(None, tmp_path)


def test_set_file_non_mapping_raises(tmp_path: Path):
    config_file = write_json(tmp_path / "list.json", [1, 2])

    with pytest.raises(InvalidFormatError):
        Library().set_file("x", config_file)


def test_set_class_uses_class_name_case_preserved():
    config = Library()

    config.set_class(Widget)

    assert config.get("Widget.size") == 10
    assert not config.has("widget")


def test_set_class_with_instance_and_path():
    config = Library()

    config.set_class(Widget()).set_class(f"{__name__}.Widget")

    assert config.all() == {"Widget": {"size": 10}}


def test_set_class_unknown_raises():
    with pytest.raises(NotFoundError, match="not found"):
        Library().set_class("no_such_module.Widget")


@pytest.mark.parametrize("value", [123, None, 1.5, ["Widget"]])
def test_set_class_rejects_builtin_values(value):
    config = Library()

    with pytest.raises(NotFoundError):
        config.set_class(value)

    assert config.all() == {}


def test_set_source_imports_custom_sources():
    class StaticSource(ConfigSource):
        def __init__(self, data):
            self._data = data

        def load(self):
            return self._data

    config = Library()
    config.set_source("static", StaticSource({"a": 1}))
    config.set_source("empty", StaticSource(None))

    assert config.all() == {"static": {"a": 1}}


def test_navigate_returns_tagged_values():
    config = Library({"section": {"sub": {"key": 1}, "list": [1, 2], "none": None}})

    node = config.navigate("section.sub")
    assert isinstance(node, Node)
    assert node.key == 1

    assert config.navigate("section.sub.key") == Scalar(1)
    assert config.navigate("section.list") == Scalar([1, 2])
    assert config.navigate("section.none") == Scalar(None)
    assert config.navigate("section.missing") is NOT_FOUND


def test_attribute_access():
    config = Library({"section": {"sub_key": {"value": 3}}, "flag": True})

    assert config.flag is True
    assert config.section.sub_key.value == 3
    assert config.missing is None


def test_version():
    config = Library()

    assert config.version() == "1.0"
    assert Library.VERSION == "1.0"


def test_close_releases_data():
    config = Library({"a": 1})

    config.close()

    assert config.closed
    assert "closed" in repr(config)
    with pytest.raises(StoreClosedError):
        config.get("a")


def test_context_manager_closes_store():
    with Library({"a": 1}) as config:
        assert config.get("a") == 1

    assert config.closed


def test_custom_separator():
    config = Library(separator="/")

    config.set("a/b", 1).set_array("c", {"d": 2})

    assert config.get("a/b") == 1
    assert config.get("c/d") == 2
    assert config.get("a.b") is None


def test_repr_previews_keys():
    config = Library({"a": 1, "b": 2})

    assert repr(config) == "<Library version='1.0' keys=[a, b]>"


def test_keys_shadowed_by_methods_are_reachable_through_get_and_navigate():
    config = Library({"get": 1, "section": {"items": {"keys": 2}}})

    assert callable(config.get)
    assert config.get("get") == 1
    assert config.navigate("get") == Scalar(1)

    section = config.section
    assert callable(section.items)
    assert section["items"]["keys"] == 2
    assert config.navigate("section.items").get("keys") == 2

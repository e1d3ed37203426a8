"""
Tests for SettingsManager - reading, writing and saving settings.
"""

import json
from unittest.mock import Mock

import pytest

from appsettings.settings import (
    HandlerNotFoundError,
    HandlerRegistry,
    SettingsRequest,
    UploadedFile,
)
from tests.conftest import make_sections


class SpyHandler:
    """Named handler that records what it receives."""

    calls = []

    def handle(self, value, name):
        SpyHandler.calls.append((value, name))
        return f"handled:{value}"


class TestGetAndSet:
    """Test get/set casting and defaults."""

    def test_declared_default_before_any_set(self, manager):
        assert manager.get("max_items") == 10
        assert manager.get("tags") == []

    def test_untyped_field_without_value_uses_caller_default(self, manager):
        assert manager.get("site_title") is None
        assert manager.get("site_title", "Fallback") == "Fallback"

    def test_undeclared_name_returns_default_uncast(self, manager):
        assert manager.get("not_declared", "3.7") == "3.7"
        assert manager.get("not_declared") is None

    def test_array_stored_as_json_text(self, manager, settings_db):
        manager.set("tags", ["a", "b"])

        assert settings_db.get("tags") == '["a","b"]'
        assert manager.get("tags") == ["a", "b"]

    def test_boolean_cast_on_set_and_get(self, manager):
        manager.set("enabled", "on")
        assert manager.get("enabled") is True

        manager.set("enabled", None)
        assert manager.get("enabled") is False

    def test_integer_cast_truncates(self, manager, settings_db):
        manager.set("max_items", "3.7")

        assert settings_db.get("max_items") == 3
        assert manager.get("max_items") == 3

    def test_untyped_value_round_trips(self, manager):
        manager.set("site_title", "My Site")
        assert manager.get("site_title") == "My Site"

    def test_undeclared_name_is_stored_as_is(self, manager, settings_db):
        manager.set("free_form", "value")
        assert settings_db.get("free_form") == "value"

    def test_malformed_array_value_propagates(self, manager, settings_db):
        settings_db.set("tags", "[not json")

        with pytest.raises(json.JSONDecodeError):
            manager.get("tags")

    def test_remove(self, manager, settings_db):
        manager.set("site_title", "My Site")

        assert manager.remove("site_title") is True
        assert "site_title" not in settings_db.all()

    def test_all_returns_raw_values(self, manager):
        manager.set("tags", ["x"])
        manager.set("enabled", True)

        assert manager.all() == {"tags": '["x"]', "enabled": 1}


class TestAccessorsAndMutators:
    """Test accessor/mutator hooks."""

    def test_accessor_receives_cast_value(self, make_manager, settings_db):
        spy = Mock(return_value="accessed")
        manager = make_manager(make_sections(
            {"name": "max_items", "data_type": "int", "accessor": spy},
        ))
        settings_db.set("max_items", "7")

        assert manager.get("max_items") == "accessed"
        spy.assert_called_once_with(7, "max_items")

    def test_mutator_receives_original_value(self, make_manager, settings_db):
        spy = Mock(return_value="mutated")
        manager = make_manager(make_sections(
            {"name": "max_items", "data_type": "int", "mutator": spy},
        ))

        manager.set("max_items", "3.7")

        spy.assert_called_once_with("3.7", "max_items")
        assert settings_db.get("max_items") == "mutated"

    def test_named_handler_resolved_from_registry(self, make_manager, settings_db):
        SpyHandler.calls = []
        registry = HandlerRegistry({"spy": SpyHandler})
        manager = make_manager(
            make_sections({"name": "flag", "data_type": "bool", "accessor": "spy", "mutator": "spy"}),
            handlers=registry,
        )

        manager.set("flag", "on")
        assert settings_db.get("flag") == "handled:on"

        assert manager.get("flag") == "handled:True"
        assert SpyHandler.calls == [("on", "flag"), (True, "flag")]

    def test_handler_class_given_directly(self, make_manager, settings_db):
        SpyHandler.calls = []
        manager = make_manager(make_sections(
            {"name": "site_title", "accessor": SpyHandler, "mutator": SpyHandler},
        ))

        manager.set("site_title", "x")

        assert settings_db.get("site_title") == "handled:x"
        assert manager.get("site_title") == "handled:handled:x"
        assert SpyHandler.calls == [("x", "site_title"), ("handled:x", "site_title")]

    def test_handler_instance_given_directly(self, make_manager):
        handler = SpyHandler()
        SpyHandler.calls = []
        manager = make_manager(make_sections({"name": "site_title", "value": "d", "accessor": handler}))

        assert manager.get("site_title") == "handled:d"
        assert SpyHandler.calls == [("d", "site_title")]

    def test_unregistered_handler_raises(self, make_manager):
        manager = make_manager(make_sections({"name": "flag", "accessor": "missing"}))

        with pytest.raises(HandlerNotFoundError):
            manager.get("flag")

        with pytest.raises(HandlerNotFoundError):
            make_manager(make_sections({"name": "flag", "mutator": "missing"})).set("flag", 1)


class TestSave:
    """Test bulk saving of submitted settings."""

    def test_save_sets_submitted_fields(self, manager):
        manager.save(SettingsRequest(values={"site_title": "Hello", "max_items": "25"}))

        assert manager.get("site_title") == "Hello"
        assert manager.get("max_items") == 25

    def test_oversized_integer_is_saturated(self, manager, settings_db):
        manager.save(SettingsRequest(values={
            "site_title": "Hi",
            "max_items": "99999999999999999999",
        }))

        assert settings_db.get("max_items") == 2 ** 63 - 1
        assert manager.get("max_items") == 2 ** 63 - 1

    def test_unsubmitted_fields_left_untouched(self, manager, settings_db):
        manager.set("site_title", "Kept")

        manager.save(SettingsRequest(values={"max_items": "5"}))

        assert settings_db.get("site_title") == "Kept"
        assert "tags" not in settings_db.all()

    def test_absent_checkbox_is_written(self, manager, settings_db):
        manager.set("enabled", True)

        manager.save(SettingsRequest())

        assert "enabled" in settings_db.all()
        assert manager.get("enabled") is False

    def test_checked_checkbox(self, manager):
        manager.save(SettingsRequest(values={"enabled": "1"}))
        assert manager.get("enabled") is True

    def test_cleanup_removes_abandoned_settings(self, make_manager, settings_db):
        manager = make_manager(
            make_sections({"name": "a"}, {"name": "b"}),
            remove_abandoned_settings=True,
        )
        for name in ("a", "b", "c"):
            settings_db.set(name, "value")

        manager.save(SettingsRequest())

        assert set(settings_db.all(fresh=True)) == {"a", "b"}

    def test_cleanup_disabled_keeps_abandoned_settings(self, make_manager, settings_db):
        manager = make_manager(make_sections({"name": "a"}, {"name": "b"}))
        for name in ("a", "b", "c"):
            settings_db.set(name, "value")

        manager.save(SettingsRequest())

        assert set(settings_db.all(fresh=True)) == {"a", "b", "c"}


class TestFileUpload:
    """Test file and image fields during save."""

    def test_new_upload_replaces_old_file(self, manager, file_storage):
        old_path = file_storage.store(b"old", "logos", "public", "png")
        manager.set("logo", old_path)

        manager.save(SettingsRequest(files={"logo": UploadedFile("new.png", b"new")}))

        new_path = manager.get("logo")
        assert new_path != old_path
        assert new_path.startswith("logos/") and new_path.endswith(".png")
        assert file_storage.get(new_path, "public") == b"new"
        assert not file_storage.exists(old_path, "public")

    def test_missing_old_file_is_not_deleted(self, make_manager, file_storage):
        spy = Mock(wraps=file_storage)
        manager = make_manager(files=spy)
        manager.set("logo", "logos/old.png")

        manager.save(SettingsRequest(files={"logo": UploadedFile("new.png", b"new")}))

        spy.store.assert_called_once()
        spy.exists.assert_called_once_with("logos/old.png", "public")
        spy.delete.assert_not_called()

    def test_remove_flag_deletes_file_and_clears_value(self, manager, file_storage, settings_db):
        path = file_storage.store(b"logo", "logos", "public", "png")
        manager.set("logo", path)

        manager.save(SettingsRequest(values={"remove_file_logo": "1"}))

        assert not file_storage.exists(path, "public")
        assert "logo" in settings_db.all()
        assert manager.get("logo") is None

    def test_no_upload_and_no_remove_flag_keeps_file(self, manager, file_storage):
        path = file_storage.store(b"logo", "logos", "public", "png")
        manager.set("logo", path)

        manager.save(SettingsRequest(values={"site_title": "x"}))

        assert manager.get("logo") == path
        assert file_storage.exists(path, "public")

    def test_default_disk_used_when_field_has_none(self, make_manager, file_storage):
        manager = make_manager(
            make_sections({"name": "avatar", "type": "file"}),
            default_disk="local",
        )

        path = manager.upload_file(
            manager.get_setting_field("avatar"),
            SettingsRequest(files={"avatar": UploadedFile("me.jpg", b"jpg")}),
        )

        assert file_storage.exists(path, "local")
        assert not file_storage.exists(path, "public")

    def test_file_field_with_mutator_uses_mutator(self, make_manager, file_storage):
        mutator = Mock(return_value="custom/path.png")
        manager = make_manager(make_sections({"name": "logo", "type": "image", "mutator": mutator}))
        upload = UploadedFile("new.png", b"new")

        manager.save(SettingsRequest(files={"logo": upload}))

        mutator.assert_called_once_with(upload, "logo")
        assert manager.get("logo") == "custom/path.png"


class TestSchemaLookups:
    """Test field lookups and validation rules."""

    def test_all_fields_in_declaration_order(self, manager):
        names = [field.name for field in manager.get_all_setting_fields()]
        assert names == ["site_title", "max_items", "tags", "enabled", "logo"]

    def test_get_setting_field(self, manager):
        field = manager.get_setting_field("logo")

        assert field.type == "image"
        assert field.disk == "public"
        assert field.path == "logos"

    def test_get_setting_field_absent(self, manager):
        assert manager.get_setting_field("nope") is None

    def test_validation_rules_skip_fields_without_rules(self, manager):
        assert manager.get_validation_rules() == {
            "site_title": "required|min:2",
            "max_items": "integer|min:1",
            "logo": "image|max:500",
        }

    def test_settings_by_section(self, manager):
        manager.set("tags", ["a"])

        sections = manager.get_settings_by_section()

        assert [s.title for s in sections] == ["General", "Appearance"]
        values = {s.name: s.value for s in sections[0].settings}
        assert values == {"site_title": None, "max_items": 10, "tags": ["a"]}
        assert sections[1].settings[0].attributes == {"label": "Enabled"}

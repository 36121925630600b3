"""Tests for layout and editor settings."""

from mindtree.settings import LAYOUT_ENV_VAR, EditorSettings, LayoutSettings


def test_defaults():
    settings = LayoutSettings()
    assert settings.min_width == 50
    assert settings.max_width == 400
    assert settings.min_height == 40
    assert settings.horizontal_gap == 60
    assert settings.vertical_spacing == 20
    assert settings.drop_before_ratio == 0.3
    assert settings.drop_after_ratio == 0.7


def test_json_round_trip_preserves_values():
    settings = LayoutSettings(horizontal_gap=80, hit_padding=4)
    assert LayoutSettings.from_json(settings.to_json()) == settings


def test_unknown_keys_are_ignored():
    settings = LayoutSettings.from_json('{"vertical_spacing": 12, "theme": "dark"}')
    assert settings.vertical_spacing == 12


def test_malformed_json_falls_back_to_defaults():
    assert LayoutSettings.from_json("{not json") == LayoutSettings()
    assert LayoutSettings.from_json("[1, 2]") == LayoutSettings()
    assert LayoutSettings.from_json(None) == LayoutSettings()


def test_from_env(monkeypatch):
    monkeypatch.setenv(LAYOUT_ENV_VAR, '{"max_width": 250}')
    assert LayoutSettings.from_env().max_width == 250
    monkeypatch.delenv(LAYOUT_ENV_VAR)
    assert LayoutSettings.from_env() == LayoutSettings()


def test_editor_settings():
    settings = EditorSettings.from_json('{"max_undo": 5, "bogus": 1}')
    assert settings.max_undo == 5
    assert settings.max_redo == 100
    assert EditorSettings.from_json("oops") == EditorSettings()


def test_wrongly_typed_values_fall_back_per_field():
    settings = LayoutSettings.from_json(
        '{"min_width": "abc", "max_width": null, "hit_padding": true, "horizontal_gap": 75}'
    )
    assert settings.min_width == 50.0
    assert settings.max_width == 400.0
    assert settings.hit_padding == 8.0
    assert settings.horizontal_gap == 75.0
    assert isinstance(settings.horizontal_gap, float)


def test_editor_settings_types_are_checked():
    settings = EditorSettings.from_json('{"max_undo": "5", "max_redo": 7.0, "placeholder_text": 3}')
    assert settings.max_undo == 100
    assert settings.max_redo == 7
    assert isinstance(settings.max_redo, int)
    assert settings.placeholder_text == "New Idea"

# tests/test_debug_panel.py
# Tests for the debug bridge: panel registry, foldout layout and live bindings
# RELEVANT FILES: python/hdframe/debug.py, python/hdframe/lightloop.py
from __future__ import annotations

import json

import pytest

from hdframe import DebugPanelRegistry, Feature, FrameSettings, register_debug, unregister_debug
from hdframe.debug import BoolField, Foldout


@pytest.fixture
def registry() -> DebugPanelRegistry:
    return DebugPanelRegistry()


def test_register_creates_named_panel_with_categories(registry) -> None:
    register_debug("Main Camera", FrameSettings(), registry)
    assert "Main Camera" in registry
    panel = registry.get_panel("Main Camera")
    titles = [w.display_name for w in panel.children]
    assert titles == [
        "Rendering Passes",
        "Rendering Settings",
        "XR Settings",
        "Lighting Settings",
        "Light Loop Settings",
    ]
    assert all(isinstance(w, Foldout) for w in panel.children)


def test_every_feature_has_exactly_one_binding(registry) -> None:
    settings = FrameSettings()
    register_debug("cam", settings, registry)
    keys = [b.key for _, b in registry.get_panel("cam").bindings() if b.target is settings]
    assert sorted(keys) == sorted(Feature)


def test_binding_reads_and_writes_the_record(registry) -> None:
    settings = FrameSettings()
    register_debug("cam", settings, registry)
    msaa = registry.get_panel("cam").find("Rendering Settings/Enable MSAA")
    assert msaa.get() is False
    msaa.set(True)
    assert settings.enable_msaa is True
    settings.enable_msaa = False
    assert msaa.get() is False


def test_light_loop_bindings_follow_in_place_updates(registry) -> None:
    settings = FrameSettings()
    register_debug("cam", settings, registry)
    field = registry.get_panel("cam").find("Light Loop Settings/Enable Big Tile")
    FrameSettings().copy_to(settings)
    settings.light_loop_settings.enable_big_tile_prepass = False
    assert field.get() is False
    field.set(True)
    assert settings.light_loop_settings.enable_big_tile_prepass is True


def test_find_unknown_path_raises(registry) -> None:
    register_debug("cam", FrameSettings(), registry)
    with pytest.raises(KeyError, match="No binding"):
        registry.get_panel("cam").find("Rendering Settings/Enable Raytracing")


def test_unregister_removes_panel(registry) -> None:
    register_debug("cam", FrameSettings(), registry)
    unregister_debug("cam", registry)
    assert "cam" not in registry
    with pytest.raises(KeyError, match="Unknown debug panel"):
        registry.get_panel("cam")
    # unknown names are ignored
    unregister_debug("cam", registry)


def test_registries_are_independent() -> None:
    first, second = DebugPanelRegistry(), DebugPanelRegistry()
    register_debug("cam", FrameSettings(), first)
    assert "cam" in first
    assert "cam" not in second
    assert len(second) == 0


def test_registering_twice_appends_to_the_same_panel(registry) -> None:
    register_debug("cam", FrameSettings(), registry)
    register_debug("cam", FrameSettings(), registry)
    assert registry.panels() == ["cam"]
    assert len(registry.get_panel("cam").children) == 10


def test_panel_snapshot_is_json_serializable(registry) -> None:
    settings = FrameSettings(enable_ssr=False)
    register_debug("cam", settings, registry)
    snapshot = registry.get_panel("cam").to_dict()
    text = json.dumps(snapshot)
    assert "Enable SSR" in text
    lighting = next(c for c in snapshot["children"] if c["display_name"] == "Lighting Settings")
    ssr = next(c for c in lighting["children"] if c["display_name"] == "Enable SSR")
    assert ssr == {"type": "bool", "display_name": "Enable SSR", "key": "enable_ssr", "value": False}


def test_bool_field_with_custom_target() -> None:
    settings = FrameSettings()
    field = BoolField("Shadows", settings, "shadow")
    field.set(False)
    assert settings.enable_shadow is False
    assert field.key_name == "shadow"


def test_clear(registry) -> None:
    register_debug("a", FrameSettings(), registry)
    register_debug("b", FrameSettings(), registry)
    assert registry.panels() == ["a", "b"]
    registry.clear()
    assert len(registry) == 0

"""
Debug inspection panels exposing live frame settings toggles.

Panels live in an explicit :class:`DebugPanelRegistry` owned by the
application; there is no module-level registry. Each toggle is a
:class:`BoolField` binding, a display name plus a key into a record that
exposes ``get(key)`` / ``set(key, value)`` (FrameSettings and
LightLoopSettings both do), so a binding can be listed, serialized and
driven without holding a closure.

Usage:
    from hdframe import FrameSettings, debug

    registry = debug.DebugPanelRegistry()
    settings = FrameSettings()
    debug.register_debug("Main Camera", settings, registry)

    field = registry.get_panel("Main Camera").find("Rendering Settings/Enable MSAA")
    field.set(True)            # writes settings.enable_msaa

    debug.unregister_debug("Main Camera", registry)

Bindings read and write the record by reference. Drive them from the same
thread that resolves the record.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .lightloop import register_light_loop_debug
from .settings import Feature, FrameSettings

logger = logging.getLogger(__name__)

_PATH_SEP = "/"


class BoolField:
    """Named boolean binding onto one field of a settings record."""

    def __init__(self, display_name: str, target: Any, key: Union[Feature, str]):
        self.display_name = display_name
        self.target = target
        self.key = key

    def get(self) -> bool:
        return bool(self.target.get(self.key))

    def set(self, value: bool) -> None:
        self.target.set(self.key, value)

    @property
    def key_name(self) -> str:
        return self.key.attr if isinstance(self.key, Feature) else str(self.key)

    def to_dict(self) -> dict:
        return {
            "type": "bool",
            "display_name": self.display_name,
            "key": self.key_name,
            "value": self.get(),
        }

    def __repr__(self) -> str:
        return f"BoolField({self.display_name!r}, key={self.key_name!r})"


class Foldout:
    """Named group of widgets."""

    def __init__(self, display_name: str, children: Optional[Sequence["Widget"]] = None):
        self.display_name = display_name
        self.children: List[Widget] = list(children or [])

    def to_dict(self) -> dict:
        return {
            "type": "foldout",
            "display_name": self.display_name,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"Foldout({self.display_name!r}, {len(self.children)} children)"


Widget = Union[BoolField, Foldout]


def _walk(widgets: Sequence[Widget], prefix: str) -> Iterator[Tuple[str, BoolField]]:
    for widget in widgets:
        path = f"{prefix}{widget.display_name}"
        if isinstance(widget, Foldout):
            yield from _walk(widget.children, path + _PATH_SEP)
        else:
            yield path, widget


class Panel:
    def __init__(self, name: str):
        self.name = name
        self.children: List[Widget] = []

    def bindings(self) -> Iterator[Tuple[str, BoolField]]:
        """Yield ``("Foldout/Field", binding)`` pairs depth first."""
        return _walk(self.children, "")

    def find(self, path: str) -> BoolField:
        for candidate, binding in self.bindings():
            if candidate == path:
                return binding
        raise KeyError(f"No binding {path!r} in panel {self.name!r}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
        }


class DebugPanelRegistry:
    """Keyed store of debug panels, one per menu name."""

    def __init__(self) -> None:
        self._panels: Dict[str, Panel] = {}

    def get_panel(self, name: str, create: bool = False) -> Panel:
        panel = self._panels.get(name)
        if panel is None:
            if not create:
                raise KeyError(f"Unknown debug panel: {name!r} (available={self.panels()})")
            panel = Panel(name)
            self._panels[name] = panel
        return panel

    def add_panel(self, name: str, children: Sequence[Widget]) -> Panel:
        """Append ``children`` to the panel ``name``, creating it if needed."""
        panel = self.get_panel(name, create=True)
        panel.children.extend(children)
        return panel

    def remove_panel(self, name: str) -> bool:
        return self._panels.pop(name, None) is not None

    def panels(self) -> List[str]:
        return sorted(self._panels)

    def clear(self) -> None:
        self._panels.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._panels

    def __len__(self) -> int:
        return len(self._panels)


_FRAME_SETTINGS_LAYOUT: Tuple[Tuple[str, Tuple[Tuple[str, Feature], ...]], ...] = (
    (
        "Rendering Passes",
        (
            ("Enable Transparent Prepass", Feature.TRANSPARENT_PREPASS),
            ("Enable Transparent Postpass", Feature.TRANSPARENT_POSTPASS),
            ("Enable Motion Vectors", Feature.MOTION_VECTORS),
            ("Enable Object Motion Vectors", Feature.OBJECT_MOTION_VECTORS),
            ("Enable DBuffer", Feature.DBUFFER),
            ("Enable Rough Refraction", Feature.ROUGH_REFRACTION),
            ("Enable Distortion", Feature.DISTORTION),
            ("Enable Postprocess", Feature.POSTPROCESS),
        ),
    ),
    (
        "Rendering Settings",
        (
            ("Forward Only", Feature.FORWARD_RENDERING_ONLY),
            ("Deferred Depth Prepass", Feature.DEPTH_PREPASS_WITH_DEFERRED_RENDERING),
            ("Enable Async Compute", Feature.ASYNC_COMPUTE),
            ("Enable Opaque Objects", Feature.OPAQUE_OBJECTS),
            ("Enable Transparent Objects", Feature.TRANSPARENT_OBJECTS),
            ("Enable MSAA", Feature.MSAA),
        ),
    ),
    (
        "XR Settings",
        (
            ("Enable Stereo Rendering", Feature.STEREO),
        ),
    ),
    (
        "Lighting Settings",
        (
            ("Enable SSR", Feature.SSR),
            ("Enable SSAO", Feature.SSAO),
            ("Enable SubsurfaceScattering", Feature.SUBSURFACE_SCATTERING),
            ("Enable Transmission", Feature.TRANSMISSION),
            ("Enable Shadows", Feature.SHADOW),
            ("Enable Contact Shadows", Feature.CONTACT_SHADOWS),
            ("Enable ShadowMask", Feature.SHADOW_MASK),
            ("Enable Atmospheric Scattering", Feature.ATMOSPHERIC_SCATTERING),
            ("Enable volumetrics", Feature.VOLUMETRICS),
        ),
    ),
)


def frame_settings_widgets(frame_settings: FrameSettings) -> List[Widget]:
    widgets: List[Widget] = [
        Foldout(title, [BoolField(label, frame_settings, feature) for label, feature in fields])
        for title, fields in _FRAME_SETTINGS_LAYOUT
    ]
    register_light_loop_debug(frame_settings.light_loop_settings, widgets)
    return widgets


def register_debug(menu_name: str, frame_settings: FrameSettings, registry: DebugPanelRegistry) -> None:
    """Expose ``frame_settings`` as live toggles under the panel ``menu_name``."""
    panel = registry.add_panel(menu_name, frame_settings_widgets(frame_settings))
    logger.debug("Registered frame settings debug panel %r (%d widgets)", menu_name, len(panel.children))


def unregister_debug(menu_name: str, registry: DebugPanelRegistry) -> None:
    if registry.remove_panel(menu_name):
        logger.debug("Removed frame settings debug panel %r", menu_name)


__all__ = [
    "BoolField",
    "Foldout",
    "Panel",
    "Widget",
    "DebugPanelRegistry",
    "frame_settings_widgets",
    "register_debug",
    "unregister_debug",
]

"""Light loop settings: the lighting sub-record owned by every FrameSettings.

The light loop is resolved after the frame settings it belongs to, because
whether the FPTL tile lists are needed depends on the resolved forward-only,
MSAA and stereo flags.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from ._validate import as_bool

if TYPE_CHECKING:
    from .capabilities import RenderPipelineSettings
    from .context import FrameContext
    from .debug import Widget
    from .settings import FrameSettings


@dataclass
class LightLoopSettings:
    enable_tile_and_cluster: bool = True
    enable_compute_light_evaluation: bool = True
    enable_compute_light_variants: bool = True
    enable_compute_material_variants: bool = True
    # Deferred always uses FPTL; forward opaque only when this is set
    enable_fptl_for_forward_opaque: bool = True
    enable_big_tile_prepass: bool = True
    is_fptl_enabled: bool = True

    def copy_to(self, light_loop_settings: "LightLoopSettings") -> None:
        for f in fields(self):
            setattr(light_loop_settings, f.name, getattr(self, f.name))

    def get(self, key: str) -> bool:
        return bool(getattr(self, _field_name(key)))

    def set(self, key: str, value: Any) -> None:
        setattr(self, _field_name(key), as_bool(value))

    def to_dict(self) -> dict:
        return {f.name: bool(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["LightLoopSettings"] = None) -> "LightLoopSettings":
        base = copy.deepcopy(default) if default is not None else cls()
        for key, value in data.items():
            base.set(key, value)
        return base


_FIELD_NAMES = frozenset(f.name for f in fields(LightLoopSettings))


def _field_name(key: str) -> str:
    name = str(key).strip()
    if name not in _FIELD_NAMES:
        raise ValueError(f"Unknown light loop setting: {key!r}")
    return name


def resolve_light_loop_settings(
    context: "FrameContext",
    frame_settings: "FrameSettings",
    pipeline: "RenderPipelineSettings",
    author: "FrameSettings",
) -> None:
    """Resolve ``frame_settings.light_loop_settings`` in place.

    ``frame_settings`` must already hold the resolved frame flags.
    """
    src = author.light_loop_settings
    aggregate = frame_settings.light_loop_settings

    aggregate.enable_tile_and_cluster = src.enable_tile_and_cluster
    aggregate.enable_compute_light_evaluation = src.enable_compute_light_evaluation
    aggregate.enable_compute_light_variants = src.enable_compute_light_variants
    aggregate.enable_compute_material_variants = src.enable_compute_material_variants
    aggregate.enable_fptl_for_forward_opaque = src.enable_fptl_for_forward_opaque
    aggregate.enable_big_tile_prepass = src.enable_big_tile_prepass

    # FPTL for forward opaque is not supported with stereo or MSAA targets yet
    if frame_settings.enable_stereo or frame_settings.enable_msaa:
        aggregate.enable_fptl_for_forward_opaque = False

    aggregate.is_fptl_enabled = (
        not frame_settings.enable_forward_rendering_only or aggregate.enable_fptl_for_forward_opaque
    )


_DEBUG_FIELDS = (
    ("Enable Fptl for Forward Opaque", "enable_fptl_for_forward_opaque"),
    ("Enable Tile/Cluster", "enable_tile_and_cluster"),
    ("Enable Big Tile", "enable_big_tile_prepass"),
    ("Enable Compute Lighting", "enable_compute_light_evaluation"),
    ("Enable Light Classification", "enable_compute_light_variants"),
    ("Enable Material Classification", "enable_compute_material_variants"),
)


def register_light_loop_debug(light_loop_settings: LightLoopSettings, widgets: List["Widget"]) -> None:
    """Append a "Light Loop Settings" foldout bound to ``light_loop_settings``."""
    from .debug import BoolField, Foldout

    widgets.append(
        Foldout(
            "Light Loop Settings",
            [BoolField(label, light_loop_settings, key) for label, key in _DEBUG_FIELDS],
        )
    )


__all__ = [
    "LightLoopSettings",
    "resolve_light_loop_settings",
    "register_light_loop_debug",
]

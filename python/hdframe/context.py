# python/hdframe/context.py
# Classification of the camera a frame is being resolved for
# Exists to carry camera type and editor/XR predicates into the resolver
# RELEVANT FILES: python/hdframe/resolve.py, python/hdframe/rules.py, python/hdframe/config.py, tests/test_context.py
from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ._validate import as_bool


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


class CameraType(Enum):
    GAME = "game"
    REFLECTION = "reflection"
    PREVIEW = "preview"
    SCENE_VIEW = "scene-view"

    @classmethod
    def parse(cls, value: Any) -> "CameraType":
        if isinstance(value, CameraType):
            return value
        key = _normalize_key(value)
        if key not in _CAMERA_TYPES:
            raise ValueError(f"Unknown camera type: {value!r}")
        return _CAMERA_TYPES[key]


_CAMERA_TYPES: Dict[str, CameraType] = {
    "game": CameraType.GAME,
    "default": CameraType.GAME,
    "reflection": CameraType.REFLECTION,
    "mirror": CameraType.REFLECTION,
    "mirrorcapture": CameraType.REFLECTION,
    "probe": CameraType.REFLECTION,
    "preview": CameraType.PREVIEW,
    "thumbnail": CameraType.PREVIEW,
    "thumbnailpreview": CameraType.PREVIEW,
    "sceneview": CameraType.SCENE_VIEW,
    "scene": CameraType.SCENE_VIEW,
    "editor": CameraType.SCENE_VIEW,
    "editoroverview": CameraType.SCENE_VIEW,
}


class StereoTargetEye(Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"

    @classmethod
    def parse(cls, value: Any) -> "StereoTargetEye":
        if isinstance(value, StereoTargetEye):
            return value
        key = _normalize_key(value)
        for eye in cls:
            if eye.value == key:
                return eye
        raise ValueError(f"Unknown stereo target eye: {value!r}")


@dataclass
class FrameContext:
    """What the resolver needs to know about the camera being rendered."""

    camera_type: CameraType = CameraType.GAME
    # Camera component previews keep their features; thumbnails do not
    is_editor_camera_preview: bool = False
    scene_view_fog_enabled: bool = True
    xr_enabled: bool = False
    stereo_target_eye: StereoTargetEye = StereoTargetEye.BOTH
    wireframe: bool = False
    supports_async_compute: bool = True
    name: str = "camera"

    def __post_init__(self) -> None:
        self.camera_type = CameraType.parse(self.camera_type)
        self.stereo_target_eye = StereoTargetEye.parse(self.stereo_target_eye)

    @property
    def is_reflection(self) -> bool:
        return self.camera_type is CameraType.REFLECTION

    @property
    def is_regular_preview(self) -> bool:
        return self.camera_type is CameraType.PREVIEW and not self.is_editor_camera_preview

    @property
    def stereo_requested(self) -> bool:
        return self.xr_enabled and self.stereo_target_eye is StereoTargetEye.BOTH

    def to_dict(self) -> dict:
        return {
            "camera_type": self.camera_type.value,
            "is_editor_camera_preview": self.is_editor_camera_preview,
            "scene_view_fog_enabled": self.scene_view_fog_enabled,
            "xr_enabled": self.xr_enabled,
            "stereo_target_eye": self.stereo_target_eye.value,
            "wireframe": self.wireframe,
            "supports_async_compute": self.supports_async_compute,
            "name": self.name,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["FrameContext"] = None) -> "FrameContext":
        base = copy.deepcopy(default) if default is not None else cls()
        for key, value in data.items():
            if key in {"camera_type", "camera"}:
                base.camera_type = CameraType.parse(value)
            elif key in {"stereo_target_eye", "target_eye"}:
                base.stereo_target_eye = StereoTargetEye.parse(value)
            elif key == "name":
                base.name = str(value)
            elif key in _BOOL_FIELDS:
                setattr(base, key, as_bool(value))
            else:
                raise ValueError(f"Unknown frame context field: {key!r}")
        return base


_BOOL_FIELDS = frozenset(
    {
        "is_editor_camera_preview",
        "scene_view_fog_enabled",
        "xr_enabled",
        "wireframe",
        "supports_async_compute",
    }
)


__all__ = ["CameraType", "StereoTargetEye", "FrameContext"]

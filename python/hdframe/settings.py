# python/hdframe/settings.py
# Per-camera frame settings record and the feature enumeration indexing it
# Exists so resolution, presets and debug bindings share one field table
# RELEVANT FILES: python/hdframe/resolve.py, python/hdframe/rules.py, python/hdframe/lightloop.py, tests/test_frame_settings.py
from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import numpy as np

from ._validate import as_bool
from .lightloop import LightLoopSettings

FeatureKey = Union["Feature", str]


class Feature(IntEnum):
    """Boolean feature toggles of a frame, in storage order."""

    SHADOW = 0
    CONTACT_SHADOWS = 1
    SSR = 2
    SSAO = 3
    SUBSURFACE_SCATTERING = 4
    TRANSMISSION = 5
    ATMOSPHERIC_SCATTERING = 6
    VOLUMETRICS = 7
    FORWARD_RENDERING_ONLY = 8
    DEPTH_PREPASS_WITH_DEFERRED_RENDERING = 9
    TRANSPARENT_PREPASS = 10
    MOTION_VECTORS = 11
    OBJECT_MOTION_VECTORS = 12
    DBUFFER = 13
    ROUGH_REFRACTION = 14
    TRANSPARENT_POSTPASS = 15
    DISTORTION = 16
    POSTPROCESS = 17
    STEREO = 18
    ASYNC_COMPUTE = 19
    OPAQUE_OBJECTS = 20
    TRANSPARENT_OBJECTS = 21
    MSAA = 22
    SHADOW_MASK = 23

    @property
    def attr(self) -> str:
        return "enable_" + self.name.lower()

    @classmethod
    def parse(cls, value: Any) -> "Feature":
        if isinstance(value, Feature):
            return value
        key = _normalize_key(value)
        if key.startswith("enable") and key not in _FEATURE_ALIASES:
            key = key[len("enable"):]
        if key not in _FEATURE_ALIASES:
            raise ValueError(f"Unknown frame feature: {value!r}")
        return _FEATURE_ALIASES[key]


def _normalize_key(value: Any) -> str:
    return "".join(
        c
        for c in str(value).strip().lower()
        if c not in {"-", "_", " ", "."}
    )


_FEATURE_ALIASES: Dict[str, Feature] = {_normalize_key(f.name): f for f in Feature}
_FEATURE_ALIASES.update(
    {
        "shadows": Feature.SHADOW,
        "contactshadow": Feature.CONTACT_SHADOWS,
        "screenspacereflections": Feature.SSR,
        "screenspaceambientocclusion": Feature.SSAO,
        "ambientocclusion": Feature.SSAO,
        "sss": Feature.SUBSURFACE_SCATTERING,
        "atmosphere": Feature.ATMOSPHERIC_SCATTERING,
        "fog": Feature.ATMOSPHERIC_SCATTERING,
        "volumetric": Feature.VOLUMETRICS,
        "forwardonly": Feature.FORWARD_RENDERING_ONLY,
        "forward": Feature.FORWARD_RENDERING_ONLY,
        "deferreddepthprepass": Feature.DEPTH_PREPASS_WITH_DEFERRED_RENDERING,
        "depthprepass": Feature.DEPTH_PREPASS_WITH_DEFERRED_RENDERING,
        "motionvector": Feature.MOTION_VECTORS,
        "objectmotionvector": Feature.OBJECT_MOTION_VECTORS,
        "decals": Feature.DBUFFER,
        "decalbuffer": Feature.DBUFFER,
        "refraction": Feature.ROUGH_REFRACTION,
        "postprocessing": Feature.POSTPROCESS,
        "postfx": Feature.POSTPROCESS,
        "xr": Feature.STEREO,
        "asynccompute": Feature.ASYNC_COMPUTE,
        "opaque": Feature.OPAQUE_OBJECTS,
        "transparent": Feature.TRANSPARENT_OBJECTS,
        "multisampling": Feature.MSAA,
        "shadowmask": Feature.SHADOW_MASK,
    }
)

_DISABLED_BY_DEFAULT = (
    Feature.FORWARD_RENDERING_ONLY,
    Feature.DEPTH_PREPASS_WITH_DEFERRED_RENDERING,
    Feature.MSAA,
)

_DIMMER_VALUES = (0.0, 1.0)


def _default_flags() -> np.ndarray:
    flags = np.ones(len(Feature), dtype=bool)
    flags[list(_DISABLED_BY_DEFAULT)] = False
    return flags


def feature_indices(features: Iterable[FeatureKey]) -> np.ndarray:
    """Index array for bulk writes into a FrameSettings flag vector."""
    return np.fromiter((int(Feature.parse(f)) for f in features), dtype=np.intp)


class _Flag:
    """Attribute view over one slot of FrameSettings._flags."""

    def __init__(self, feature: Feature):
        self.feature = feature

    def __set_name__(self, owner: type, name: str) -> None:
        if name != self.feature.attr:
            raise TypeError(f"{owner.__name__}.{name} bound to {self.feature.name}")

    def __get__(self, instance: Optional["FrameSettings"], owner: type) -> Any:
        if instance is None:
            return self
        return bool(instance._flags[self.feature])

    def __set__(self, instance: "FrameSettings", value: Any) -> None:
        instance._flags[self.feature] = as_bool(value)


class FrameSettings:
    """Feature toggles, global dimmers and light loop settings for one camera.

    The record is meant to be pooled: a camera keeps one instance and the
    resolver overwrites it every frame. Flags live in a dense boolean vector
    indexed by :class:`Feature`, so ``settings[Feature.SSR]`` and
    ``settings.enable_ssr`` read the same slot.
    """

    enable_shadow = _Flag(Feature.SHADOW)
    enable_contact_shadows = _Flag(Feature.CONTACT_SHADOWS)
    enable_ssr = _Flag(Feature.SSR)
    enable_ssao = _Flag(Feature.SSAO)
    enable_subsurface_scattering = _Flag(Feature.SUBSURFACE_SCATTERING)
    enable_transmission = _Flag(Feature.TRANSMISSION)
    enable_atmospheric_scattering = _Flag(Feature.ATMOSPHERIC_SCATTERING)
    enable_volumetrics = _Flag(Feature.VOLUMETRICS)
    enable_forward_rendering_only = _Flag(Feature.FORWARD_RENDERING_ONLY)
    enable_depth_prepass_with_deferred_rendering = _Flag(Feature.DEPTH_PREPASS_WITH_DEFERRED_RENDERING)
    enable_transparent_prepass = _Flag(Feature.TRANSPARENT_PREPASS)
    enable_motion_vectors = _Flag(Feature.MOTION_VECTORS)
    enable_object_motion_vectors = _Flag(Feature.OBJECT_MOTION_VECTORS)
    enable_dbuffer = _Flag(Feature.DBUFFER)
    enable_rough_refraction = _Flag(Feature.ROUGH_REFRACTION)
    enable_transparent_postpass = _Flag(Feature.TRANSPARENT_POSTPASS)
    enable_distortion = _Flag(Feature.DISTORTION)
    enable_postprocess = _Flag(Feature.POSTPROCESS)
    enable_stereo = _Flag(Feature.STEREO)
    enable_async_compute = _Flag(Feature.ASYNC_COMPUTE)
    enable_opaque_objects = _Flag(Feature.OPAQUE_OBJECTS)
    enable_transparent_objects = _Flag(Feature.TRANSPARENT_OBJECTS)
    enable_msaa = _Flag(Feature.MSAA)
    enable_shadow_mask = _Flag(Feature.SHADOW_MASK)

    def __init__(
        self,
        diffuse_global_dimmer: float = 1.0,
        specular_global_dimmer: float = 1.0,
        light_loop_settings: Optional[LightLoopSettings] = None,
        **flags: Any,
    ):
        self._flags = _default_flags()
        # Set by the resolver from the camera type
        self.diffuse_global_dimmer = float(diffuse_global_dimmer)
        self.specular_global_dimmer = float(specular_global_dimmer)
        # Owned exclusively; a passed record is copied, never shared
        self.light_loop_settings = LightLoopSettings()
        if light_loop_settings is not None:
            light_loop_settings.copy_to(self.light_loop_settings)
        for key, value in flags.items():
            self.set(key, value)

    # ------------------------------------------------------------------
    # Indexed access
    # ------------------------------------------------------------------

    def __getitem__(self, key: FeatureKey) -> bool:
        return bool(self._flags[Feature.parse(key)])

    def __setitem__(self, key: FeatureKey, value: Any) -> None:
        self._flags[Feature.parse(key)] = as_bool(value)

    def get(self, key: FeatureKey) -> bool:
        return self[key]

    def set(self, key: FeatureKey, value: Any) -> None:
        self[key] = value

    def enable(self, features: Iterable[FeatureKey]) -> None:
        self._flags[feature_indices(features)] = True

    def disable(self, features: Iterable[FeatureKey]) -> None:
        self._flags[feature_indices(features)] = False

    def enabled_features(self) -> List[Feature]:
        return [Feature(int(i)) for i in np.flatnonzero(self._flags)]

    def as_array(self) -> np.ndarray:
        """Read-only copy of the flag vector, indexed by Feature."""
        out = self._flags.copy()
        out.flags.writeable = False
        return out

    # ------------------------------------------------------------------
    # Copy semantics
    # ------------------------------------------------------------------

    def copy_to(self, frame_settings: "FrameSettings") -> None:
        """Overwrite every field of ``frame_settings`` with this record's values.

        The destination keeps its own LightLoopSettings instance; it is
        updated in place rather than replaced.
        """
        np.copyto(frame_settings._flags, self._flags)
        frame_settings.diffuse_global_dimmer = self.diffuse_global_dimmer
        frame_settings.specular_global_dimmer = self.specular_global_dimmer
        self.light_loop_settings.copy_to(frame_settings.light_loop_settings)

    def copy(self) -> "FrameSettings":
        out = FrameSettings()
        self.copy_to(out)
        return out

    # ------------------------------------------------------------------
    # Dependent settings
    # ------------------------------------------------------------------

    def configure_msaa_dependent_settings(self) -> None:
        from .rules import MSAA_DEPENDENT_RULE, apply_implication

        apply_implication(MSAA_DEPENDENT_RULE, self)

    def configure_stereo_dependent_settings(self) -> None:
        from .rules import STEREO_DEPENDENT_RULE, apply_implication

        apply_implication(STEREO_DEPENDENT_RULE, self)

    # ------------------------------------------------------------------
    # Mapping helpers
    # ------------------------------------------------------------------

    def validate(self) -> None:
        if self.diffuse_global_dimmer not in _DIMMER_VALUES:
            raise ValueError(f"diffuse_global_dimmer must be 0.0 or 1.0, got {self.diffuse_global_dimmer}")
        if self.specular_global_dimmer not in _DIMMER_VALUES:
            raise ValueError(f"specular_global_dimmer must be 0.0 or 1.0, got {self.specular_global_dimmer}")

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {feature.attr: bool(self._flags[feature]) for feature in Feature}
        data["diffuse_global_dimmer"] = self.diffuse_global_dimmer
        data["specular_global_dimmer"] = self.specular_global_dimmer
        data["light_loop_settings"] = self.light_loop_settings.to_dict()
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["FrameSettings"] = None) -> "FrameSettings":
        base = default.copy() if default is not None else cls()
        for key, value in data.items():
            if key == "diffuse_global_dimmer":
                base.diffuse_global_dimmer = float(value)
            elif key == "specular_global_dimmer":
                base.specular_global_dimmer = float(value)
            elif key in {"light_loop_settings", "light_loop"}:
                if not isinstance(value, Mapping):
                    raise TypeError("light_loop_settings must be a mapping")
                LightLoopSettings.from_mapping(value, base.light_loop_settings).copy_to(base.light_loop_settings)
            else:
                base[key] = value
        return base

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameSettings):
            return NotImplemented
        return (
            bool(np.array_equal(self._flags, other._flags))
            and self.diffuse_global_dimmer == other.diffuse_global_dimmer
            and self.specular_global_dimmer == other.specular_global_dimmer
            and self.light_loop_settings == other.light_loop_settings
        )

    __hash__ = None  # mutable record

    def __repr__(self) -> str:
        enabled = ", ".join(f.name.lower() for f in self.enabled_features())
        return (
            f"FrameSettings(enabled=[{enabled}], "
            f"diffuse_global_dimmer={self.diffuse_global_dimmer}, "
            f"specular_global_dimmer={self.specular_global_dimmer})"
        )

    def __deepcopy__(self, memo: dict) -> "FrameSettings":
        out = self.copy()
        memo[id(self)] = out
        return out


def feature_names() -> List[str]:
    return [feature.attr for feature in Feature]


__all__ = [
    "Feature",
    "FrameSettings",
    "feature_indices",
    "feature_names",
]

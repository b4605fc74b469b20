"""
python/hdframe/presets.py
Named author frame settings for common camera setups.

Each preset returns a plain dict compatible with
python/hdframe/settings.py::FrameSettings.from_mapping(). Keys not listed
keep the FrameSettings defaults. Presets describe author intent only; the
resolver still gates every flag by pipeline capability and camera type.

Example
-------
>>> from hdframe import FrameSettings, presets
>>> camera_settings = FrameSettings()
>>> presets.apply("forward_msaa", camera_settings)
>>> camera_settings.enable_msaa
True
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List

from .settings import FrameSettings


def _normalize_name(name: str) -> str:
    return "".join(c for c in str(name).strip().lower() if c not in {"-", "_", " ", "."})


# -----------------------------------------------------------------------------
# Preset definitions (schema-aligned with python/hdframe/settings.py)
# -----------------------------------------------------------------------------

def default() -> Dict[str, Any]:
    """Deferred rendering with every feature requested."""
    return FrameSettings().to_dict()


def forward_msaa() -> Dict[str, Any]:
    """Forward rendering with MSAA.

    Notes
    -----
    - Passes that do not support multisampled targets are turned off here as
      well, so the authored record already reads the way it will resolve.
    """
    return {
        "enable_forward_rendering_only": True,
        "enable_msaa": True,
        "enable_motion_vectors": False,
        "enable_object_motion_vectors": False,
        "enable_dbuffer": False,
        "enable_distortion": False,
        "enable_postprocess": False,
        "enable_rough_refraction": False,
        "enable_ssao": False,
        "enable_ssr": False,
        "enable_subsurface_scattering": False,
        "enable_transparent_objects": False,
        "light_loop_settings": {
            "enable_fptl_for_forward_opaque": False,
        },
    }


def low_end() -> Dict[str, Any]:
    """Forward path without screen-space or volumetric effects."""
    return {
        "enable_forward_rendering_only": True,
        "enable_ssr": False,
        "enable_ssao": False,
        "enable_contact_shadows": False,
        "enable_subsurface_scattering": False,
        "enable_volumetrics": False,
        "enable_rough_refraction": False,
        "enable_distortion": False,
        "enable_async_compute": False,
        "light_loop_settings": {
            "enable_compute_light_evaluation": False,
            "enable_compute_light_variants": False,
            "enable_compute_material_variants": False,
            "enable_big_tile_prepass": False,
        },
    }


def reflection_probe() -> Dict[str, Any]:
    """Realtime reflection probe capture: no view dependent or temporal passes."""
    return {
        "enable_ssr": False,
        "enable_subsurface_scattering": False,
        "enable_volumetrics": False,
        "enable_motion_vectors": False,
        "enable_object_motion_vectors": False,
        "enable_distortion": False,
        "enable_postprocess": False,
        "enable_stereo": False,
    }


# -----------------------------------------------------------------------------
# Registry and lookup helpers
# -----------------------------------------------------------------------------

_PRESETS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "default": default,
    "forwardmsaa": forward_msaa,
    "lowend": low_end,
    "reflectionprobe": reflection_probe,
}

_ALIASES: Dict[str, str] = {
    "deferred": "default",
    "msaa": "forwardmsaa",
    "forward": "forwardmsaa",
    "mobile": "lowend",
    "low": "lowend",
    "probe": "reflectionprobe",
    "reflection": "reflectionprobe",
}


def available() -> List[str]:
    """List available preset names."""
    return sorted(_PRESETS.keys())


def get(name: str) -> Dict[str, Any]:
    """Resolve a preset by name (case-insensitive; supports common aliases).

    Raises
    ------
    ValueError
        If the preset name is unknown.
    """
    key = _normalize_name(name)
    if key in _ALIASES:
        key = _ALIASES[key]
    if key not in _PRESETS:
        raise ValueError(f"Unknown preset: {name!r}. Available: {', '.join(available())}")
    return _PRESETS[key]()


def build(name: str) -> FrameSettings:
    return FrameSettings.from_mapping(get(name))


def apply(name: str, frame_settings: FrameSettings) -> None:
    """Overwrite ``frame_settings`` in place with the preset ``name``."""
    build(name).copy_to(frame_settings)


__all__ = [
    "default",
    "forward_msaa",
    "low_end",
    "reflection_probe",
    "available",
    "get",
    "build",
    "apply",
]

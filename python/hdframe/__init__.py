# python/hdframe/__init__.py
# Public API for per-camera frame settings resolution
# Exists to re-export the records, resolver and debug bridge from one namespace
# RELEVANT FILES: python/hdframe/resolve.py, python/hdframe/settings.py, python/hdframe/debug.py, tests/test_api.py
from . import presets
from .capabilities import RenderPipelineSettings
from .config import (
    load_frame_context,
    load_frame_settings,
    load_pipeline_settings,
    split_frame_overrides,
)
from .context import CameraType, FrameContext, StereoTargetEye
from .debug import DebugPanelRegistry, register_debug, unregister_debug
from .lightloop import LightLoopSettings, resolve_light_loop_settings
from .resolve import RESOLUTION_STAGES, resolve_frame_settings
from .rules import check_invariants
from .settings import Feature, FrameSettings

__version__ = "0.3.0"

__all__ = [
    "CameraType",
    "DebugPanelRegistry",
    "Feature",
    "FrameContext",
    "FrameSettings",
    "LightLoopSettings",
    "RESOLUTION_STAGES",
    "RenderPipelineSettings",
    "StereoTargetEye",
    "check_invariants",
    "load_frame_context",
    "load_frame_settings",
    "load_pipeline_settings",
    "presets",
    "register_debug",
    "resolve_frame_settings",
    "resolve_light_loop_settings",
    "split_frame_overrides",
    "unregister_debug",
    "__version__",
]

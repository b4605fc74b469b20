# python/hdframe/config.py
# Loading of author settings, pipeline capabilities and camera context
# Exists so callers can feed records from mappings, JSON files or flat kwargs
# RELEVANT FILES: python/hdframe/settings.py, python/hdframe/capabilities.py, python/hdframe/context.py, tests/test_config.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple, Union

from ._validate import as_bool
from .capabilities import RenderPipelineSettings
from .context import FrameContext
from .settings import Feature, FrameSettings

logger = logging.getLogger(__name__)

FrameSettingsSource = Union[FrameSettings, Mapping[str, Any], str, Path, None]
PipelineSource = Union[RenderPipelineSettings, Mapping[str, Any], str, Path, None]
ContextSource = Union[FrameContext, Mapping[str, Any], str, Path, None]


def _load_from_path(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    if suffix not in {".json", ""}:
        raise ValueError(f"Unsupported settings file format: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise TypeError(f"{path} must contain a JSON object")
    logger.info(f"Loaded settings from {path}")
    return data


def _is_feature_key(key: Any) -> bool:
    try:
        Feature.parse(key)
    except ValueError:
        return False
    return True


def load_frame_settings(
    config: FrameSettingsSource = None,
    overrides: Optional[Mapping[str, Any]] = None,
    default: Optional[FrameSettings] = None,
) -> FrameSettings:
    """Build an author FrameSettings record.

    ``config`` may be a record (copied), a mapping, a JSON path or None.
    Mappings and files only set the keys they list; everything else comes
    from ``default`` (a preset record, say) or the FrameSettings defaults.
    ``overrides`` are flat feature keys (``{"ssr": False}``) applied on top.
    """
    if isinstance(config, FrameSettings):
        settings = config.copy()
    elif isinstance(config, Mapping):
        settings = FrameSettings.from_mapping(config, default)
    elif isinstance(config, (str, Path)):
        settings = FrameSettings.from_mapping(_load_from_path(Path(config)), default)
    elif config is None:
        settings = default.copy() if default is not None else FrameSettings()
    else:
        raise TypeError("config must be FrameSettings, mapping, path, or None")

    if overrides:
        settings = FrameSettings.from_mapping(overrides, settings)
    settings.validate()
    return settings


def load_pipeline_settings(
    config: PipelineSource = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> RenderPipelineSettings:
    if isinstance(config, RenderPipelineSettings):
        pipeline = config.copy()
    elif isinstance(config, Mapping):
        pipeline = RenderPipelineSettings.from_mapping(config)
    elif isinstance(config, (str, Path)):
        pipeline = RenderPipelineSettings.from_mapping(_load_from_path(Path(config)))
    elif config is None:
        pipeline = RenderPipelineSettings()
    else:
        raise TypeError("config must be RenderPipelineSettings, mapping, path, or None")

    if overrides:
        pipeline = RenderPipelineSettings.from_mapping(overrides, pipeline)
    return pipeline


def load_frame_context(
    config: ContextSource = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> FrameContext:
    if isinstance(config, FrameContext):
        context = FrameContext.from_mapping({}, config)
    elif isinstance(config, Mapping):
        context = FrameContext.from_mapping(config)
    elif isinstance(config, (str, Path)):
        context = FrameContext.from_mapping(_load_from_path(Path(config)))
    elif config is None:
        context = FrameContext()
    else:
        raise TypeError("config must be FrameContext, mapping, path, or None")

    if overrides:
        context = FrameContext.from_mapping(overrides, context)
    return context


def split_frame_overrides(kwargs: MutableMapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Pop feature keys out of ``kwargs``; return (overrides, remaining)."""
    overrides: Dict[str, Any] = {}
    remaining: Dict[str, Any] = {}
    for key, value in list(kwargs.items()):
        if key in {"diffuse_global_dimmer", "specular_global_dimmer"} or _is_feature_key(key):
            overrides[key] = kwargs.pop(key)
        else:
            remaining[key] = value
    return overrides, remaining


def parse_bool(value: Any) -> bool:
    """Parse CLI/env style booleans ("on", "0", "yes", ...)."""
    return as_bool(value)


__all__ = [
    "load_frame_settings",
    "load_pipeline_settings",
    "load_frame_context",
    "split_frame_overrides",
    "parse_bool",
]

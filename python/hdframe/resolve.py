# python/hdframe/resolve.py
# Per-frame resolution of author frame settings against camera and platform
# Exists to produce one consistent FrameSettings aggregate per camera per frame
# RELEVANT FILES: python/hdframe/rules.py, python/hdframe/settings.py, python/hdframe/lightloop.py, tests/test_resolve.py
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from .capabilities import RenderPipelineSettings
from .context import FrameContext
from .lightloop import resolve_light_loop_settings
from .rules import (
    FORCING_RULES,
    GATE_RULES,
    NORMALIZERS,
    PREVIEW_OVERRIDE,
    apply_implication,
    apply_override,
    dimmers_for,
)
from .settings import FrameSettings

logger = logging.getLogger(__name__)

LightLoopResolver = Callable[[FrameContext, FrameSettings, RenderPipelineSettings, FrameSettings], None]
_Stage = Callable[[FrameContext, RenderPipelineSettings, FrameSettings, FrameSettings], List[str]]


def _assign_dimmers(context, pipeline, author, aggregate) -> List[str]:
    aggregate.diffuse_global_dimmer, aggregate.specular_global_dimmer = dimmers_for(context)
    return []


def _apply_gates(context, pipeline, author, aggregate) -> List[str]:
    for rule in GATE_RULES:
        aggregate[rule.feature] = rule.evaluate(context, pipeline, author, aggregate)
    return []


def _apply_forcing(context, pipeline, author, aggregate) -> List[str]:
    for rule in FORCING_RULES:
        aggregate[rule.feature] = rule.evaluate(context, pipeline, author)
    return []


def _apply_normalizers(context, pipeline, author, aggregate) -> List[str]:
    return [rule.name for rule in NORMALIZERS if apply_implication(rule, aggregate)]


def _apply_preview_override(context, pipeline, author, aggregate) -> List[str]:
    if apply_override(PREVIEW_OVERRIDE, context, aggregate):
        return [PREVIEW_OVERRIDE.name]
    return []


# The override must stay after the normalizers so nothing re-enables its features.
_STAGES: Tuple[Tuple[str, _Stage], ...] = (
    ("dimmers", _assign_dimmers),
    ("gates", _apply_gates),
    ("forcing", _apply_forcing),
    ("normalizers", _apply_normalizers),
    ("preview_override", _apply_preview_override),
)

RESOLUTION_STAGES: Tuple[str, ...] = tuple(name for name, _ in _STAGES) + ("light_loop",)


def resolve_frame_settings(
    context: FrameContext,
    pipeline: RenderPipelineSettings,
    author: FrameSettings,
    aggregate: Optional[FrameSettings] = None,
    light_loop_resolver: LightLoopResolver = resolve_light_loop_settings,
) -> FrameSettings:
    """Aggregate author settings, pipeline capabilities and camera context.

    Parameters
    ----------
    context
        Camera classification and editor/XR predicates.
    pipeline
        Capabilities of the active pipeline; read only.
    author
        Settings requested for the camera; read only.
    aggregate
        Record to fill. Pass the camera's pooled record to avoid an
        allocation; every field is overwritten. ``None`` allocates one.
    light_loop_resolver
        Called last with the fully resolved aggregate to resolve
        ``aggregate.light_loop_settings`` in place.

    Returns
    -------
    FrameSettings
        ``aggregate``, or the newly allocated record.
    """
    if aggregate is None:
        aggregate = FrameSettings()

    fired: List[str] = []
    for _, stage in _STAGES:
        fired.extend(stage(context, pipeline, author, aggregate))

    light_loop_resolver(context, aggregate, pipeline, author)

    logger.debug(
        "Resolved frame settings for %s (%s camera), rules fired: %s",
        context.name,
        context.camera_type.value,
        ", ".join(fired) or "none",
    )
    return aggregate


__all__ = ["RESOLUTION_STAGES", "LightLoopResolver", "resolve_frame_settings"]

# python/hdframe/rules.py
# Declarative rule tables driving frame settings resolution
# Exists so gating, forcing, normalization and override order is data, not statement order
# RELEVANT FILES: python/hdframe/resolve.py, python/hdframe/settings.py, python/hdframe/context.py, tests/test_rules.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from .capabilities import RenderPipelineSettings
from .context import CameraType, FrameContext
from .settings import Feature, FrameSettings

_NOT_IN_REFLECTION: FrozenSet[CameraType] = frozenset({CameraType.REFLECTION})


@dataclass(frozen=True)
class GateRule:
    """Resolve one feature as a conjunction of its inputs.

    The author value (unless ``from_author`` is False), the named pipeline
    capability, the named context predicate and every already-resolved
    feature in ``requires`` must all hold, and the camera type must not be
    excluded.
    """

    feature: Feature
    capability: Optional[str] = None
    context_predicate: Optional[str] = None
    requires: Tuple[Feature, ...] = ()
    excluded_cameras: FrozenSet[CameraType] = frozenset()
    from_author: bool = True

    def evaluate(
        self,
        context: FrameContext,
        pipeline: RenderPipelineSettings,
        author: FrameSettings,
        aggregate: FrameSettings,
    ) -> bool:
        if context.camera_type in self.excluded_cameras:
            return False
        if self.from_author and not author[self.feature]:
            return False
        if self.capability is not None and not getattr(pipeline, self.capability):
            return False
        if self.context_predicate is not None and not getattr(context, self.context_predicate):
            return False
        return all(aggregate[f] for f in self.requires)


@dataclass(frozen=True)
class ForcingRule:
    """Enable a feature when the author or any forcing input asks for it."""

    feature: Feature
    forced_by_capabilities: Tuple[str, ...] = ()
    forced_by_context: Tuple[str, ...] = ()

    def evaluate(
        self,
        context: FrameContext,
        pipeline: RenderPipelineSettings,
        author: FrameSettings,
    ) -> bool:
        return (
            author[self.feature]
            or any(getattr(pipeline, name) for name in self.forced_by_capabilities)
            or any(getattr(context, name) for name in self.forced_by_context)
        )


@dataclass(frozen=True)
class ImplicationRule:
    """When ``trigger`` is enabled, force ``force_on`` on and ``force_off`` off.

    ``candidates`` lists features expected to join the rule later; they are
    documentation only.
    """

    name: str
    trigger: Feature
    force_on: Tuple[Feature, ...] = ()
    force_off: Tuple[Feature, ...] = ()
    candidates: Tuple[Feature, ...] = ()


@dataclass(frozen=True)
class OverrideRule:
    """Force features off whenever a context predicate holds."""

    name: str
    context_predicate: str
    force_off: Tuple[Feature, ...]


# -----------------------------------------------------------------------------
# Tables
# -----------------------------------------------------------------------------

# Evaluated in order; a gate may only require features gated before it.
GATE_RULES: Tuple[GateRule, ...] = (
    GateRule(Feature.SHADOW),
    GateRule(Feature.CONTACT_SHADOWS),
    GateRule(Feature.SSR, capability="support_ssr", excluded_cameras=_NOT_IN_REFLECTION),
    GateRule(Feature.SSAO, capability="support_ssao"),
    GateRule(
        Feature.SUBSURFACE_SCATTERING,
        capability="support_subsurface_scattering",
        excluded_cameras=_NOT_IN_REFLECTION,
    ),
    GateRule(Feature.TRANSMISSION),
    # Scene view fog toggle in the editor
    GateRule(Feature.ATMOSPHERIC_SCATTERING, context_predicate="scene_view_fog_enabled"),
    # Volumetrics inside planar reflections are unsupported
    GateRule(
        Feature.VOLUMETRICS,
        capability="support_volumetrics",
        requires=(Feature.ATMOSPHERIC_SCATTERING,),
        excluded_cameras=_NOT_IN_REFLECTION,
    ),
    GateRule(Feature.DEPTH_PREPASS_WITH_DEFERRED_RENDERING),
    GateRule(Feature.TRANSPARENT_PREPASS),
    GateRule(Feature.MOTION_VECTORS, capability="support_motion_vectors", excluded_cameras=_NOT_IN_REFLECTION),
    GateRule(Feature.OBJECT_MOTION_VECTORS, capability="support_motion_vectors", excluded_cameras=_NOT_IN_REFLECTION),
    GateRule(Feature.DBUFFER, capability="support_dbuffer"),
    GateRule(Feature.ROUGH_REFRACTION),
    GateRule(Feature.TRANSPARENT_POSTPASS),
    GateRule(Feature.DISTORTION, excluded_cameras=_NOT_IN_REFLECTION),
    # Reflection captures render FP16 without post
    GateRule(Feature.POSTPROCESS, excluded_cameras=_NOT_IN_REFLECTION),
    GateRule(
        Feature.STEREO,
        context_predicate="stereo_requested",
        excluded_cameras=frozenset({CameraType.REFLECTION, CameraType.SCENE_VIEW}),
        from_author=False,
    ),
    GateRule(Feature.ASYNC_COMPUTE, context_predicate="supports_async_compute"),
    GateRule(Feature.OPAQUE_OBJECTS),
    GateRule(Feature.TRANSPARENT_OBJECTS),
    GateRule(Feature.MSAA, capability="support_msaa"),
    GateRule(Feature.SHADOW_MASK, capability="support_shadow_mask"),
)

FORCING_RULES: Tuple[ForcingRule, ...] = (
    # Wireframe and deferred do not mix
    ForcingRule(
        Feature.FORWARD_RENDERING_ONLY,
        forced_by_capabilities=("support_only_forward",),
        forced_by_context=("wireframe",),
    ),
)

# These passes do not run on multisampled targets yet. Shrink the list as
# they gain MSAA support.
MSAA_DEPENDENT_RULE = ImplicationRule(
    name="msaa",
    trigger=Feature.MSAA,
    force_on=(Feature.FORWARD_RENDERING_ONLY,),
    force_off=(
        Feature.MOTION_VECTORS,
        Feature.DBUFFER,
        Feature.DISTORTION,
        Feature.POSTPROCESS,
        Feature.ROUGH_REFRACTION,
        Feature.SSAO,
        Feature.SSR,
        Feature.SUBSURFACE_SCATTERING,
        Feature.TRANSPARENT_OBJECTS,
    ),
)

# Nothing is enforced for stereo yet; users keep the choice of deferred.
STEREO_DEPENDENT_RULE = ImplicationRule(
    name="stereo",
    trigger=Feature.STEREO,
    candidates=(
        Feature.FORWARD_RENDERING_ONLY,
        Feature.MOTION_VECTORS,
        Feature.DBUFFER,
        Feature.DISTORTION,
        Feature.POSTPROCESS,
        Feature.ROUGH_REFRACTION,
        Feature.SSAO,
        Feature.SSR,
        Feature.SUBSURFACE_SCATTERING,
        Feature.TRANSPARENT_OBJECTS,
    ),
)

NORMALIZERS: Tuple[ImplicationRule, ...] = (MSAA_DEPENDENT_RULE, STEREO_DEPENDENT_RULE)

# Camera component previews in the editor are excluded by the predicate.
PREVIEW_OVERRIDE = OverrideRule(
    name="regular_preview",
    context_predicate="is_regular_preview",
    force_off=(
        Feature.SHADOW,
        Feature.CONTACT_SHADOWS,
        Feature.SSR,
        Feature.SSAO,
        Feature.ATMOSPHERIC_SCATTERING,
        Feature.VOLUMETRICS,
        Feature.TRANSPARENT_PREPASS,
        Feature.MOTION_VECTORS,
        Feature.OBJECT_MOTION_VECTORS,
        Feature.DBUFFER,
        Feature.TRANSPARENT_POSTPASS,
        Feature.DISTORTION,
        Feature.POSTPROCESS,
        Feature.STEREO,
        Feature.SHADOW_MASK,
    ),
)

DEFAULT_DIMMERS: Tuple[float, float] = (1.0, 1.0)

# Specular is view dependent, so captures keep diffuse only.
CAMERA_DIMMERS: Dict[CameraType, Tuple[float, float]] = {
    CameraType.REFLECTION: (1.0, 0.0),
}


# -----------------------------------------------------------------------------
# Evaluation helpers
# -----------------------------------------------------------------------------

def dimmers_for(context: FrameContext) -> Tuple[float, float]:
    """(diffuse, specular) global dimmers for the context's camera type."""
    return CAMERA_DIMMERS.get(context.camera_type, DEFAULT_DIMMERS)


def apply_implication(rule: ImplicationRule, settings: FrameSettings) -> bool:
    """Apply ``rule`` to ``settings``; returns True when the trigger fired."""
    if not settings[rule.trigger]:
        return False
    settings.enable(rule.force_on)
    settings.disable(rule.force_off)
    return True


def apply_override(rule: OverrideRule, context: FrameContext, settings: FrameSettings) -> bool:
    if not getattr(context, rule.context_predicate):
        return False
    settings.disable(rule.force_off)
    return True


def resolved_features() -> Set[Feature]:
    """Features written by the gate and forcing tables on every resolve."""
    out = {rule.feature for rule in GATE_RULES}
    out.update(rule.feature for rule in FORCING_RULES)
    return out


def check_invariants(
    settings: FrameSettings,
    context: FrameContext,
    pipeline: RenderPipelineSettings,
) -> List[str]:
    """List the rule-table invariants that ``settings`` violates.

    An empty list means the record is consistent with what the resolver
    would guarantee for ``context`` and ``pipeline``. Records edited through
    debug bindings may legitimately fail.
    """
    problems: List[str] = []

    diffuse, specular = dimmers_for(context)
    if settings.diffuse_global_dimmer != diffuse:
        problems.append(f"diffuse_global_dimmer is {settings.diffuse_global_dimmer}, expected {diffuse}")
    if settings.specular_global_dimmer != specular:
        problems.append(f"specular_global_dimmer is {settings.specular_global_dimmer}, expected {specular}")

    for rule in GATE_RULES:
        if not settings[rule.feature]:
            continue
        label = rule.feature.attr
        if context.camera_type in rule.excluded_cameras:
            problems.append(f"{label} enabled for a {context.camera_type.value} camera")
        if rule.capability is not None and not getattr(pipeline, rule.capability):
            problems.append(f"{label} enabled without {rule.capability}")
        if rule.context_predicate is not None and not getattr(context, rule.context_predicate):
            problems.append(f"{label} enabled without {rule.context_predicate}")
        for required in rule.requires:
            if not settings[required]:
                problems.append(f"{label} enabled without {required.attr}")

    for rule in FORCING_RULES:
        if settings[rule.feature]:
            continue
        inputs = [name for name in rule.forced_by_capabilities if getattr(pipeline, name)]
        inputs += [name for name in rule.forced_by_context if getattr(context, name)]
        for name in inputs:
            problems.append(f"{rule.feature.attr} disabled despite {name}")

    for rule in NORMALIZERS:
        if not settings[rule.trigger]:
            continue
        for feature in rule.force_on:
            if not settings[feature]:
                problems.append(f"{rule.name}: {feature.attr} must be enabled")
        for feature in rule.force_off:
            if settings[feature]:
                problems.append(f"{rule.name}: {feature.attr} must be disabled")

    if getattr(context, PREVIEW_OVERRIDE.context_predicate):
        for feature in PREVIEW_OVERRIDE.force_off:
            if settings[feature]:
                problems.append(f"{PREVIEW_OVERRIDE.name}: {feature.attr} must be disabled")

    return problems


__all__ = [
    "GateRule",
    "ForcingRule",
    "ImplicationRule",
    "OverrideRule",
    "GATE_RULES",
    "FORCING_RULES",
    "MSAA_DEPENDENT_RULE",
    "STEREO_DEPENDENT_RULE",
    "NORMALIZERS",
    "PREVIEW_OVERRIDE",
    "CAMERA_DIMMERS",
    "DEFAULT_DIMMERS",
    "dimmers_for",
    "apply_implication",
    "apply_override",
    "resolved_features",
    "check_invariants",
]

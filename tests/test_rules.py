# tests/test_rules.py
# Tests for the declarative rule tables and the invariant checker
# RELEVANT FILES: python/hdframe/rules.py, python/hdframe/resolve.py
from __future__ import annotations

import pytest

from hdframe import CameraType, Feature, FrameContext, FrameSettings, RenderPipelineSettings
from hdframe.rules import (
    FORCING_RULES,
    GATE_RULES,
    MSAA_DEPENDENT_RULE,
    NORMALIZERS,
    PREVIEW_OVERRIDE,
    STEREO_DEPENDENT_RULE,
    apply_implication,
    apply_override,
    check_invariants,
    dimmers_for,
    resolved_features,
)


def test_gate_and_forcing_tables_cover_every_feature_once() -> None:
    written = [rule.feature for rule in GATE_RULES] + [rule.feature for rule in FORCING_RULES]
    assert len(written) == len(set(written))
    assert resolved_features() == set(Feature)


def test_gates_only_require_features_resolved_before_them() -> None:
    seen = set()
    for rule in GATE_RULES:
        assert set(rule.requires) <= seen, rule.feature
        seen.add(rule.feature)


def test_capability_names_exist_on_pipeline_settings() -> None:
    pipeline = RenderPipelineSettings()
    for rule in GATE_RULES:
        if rule.capability is not None:
            assert hasattr(pipeline, rule.capability)
    for rule in FORCING_RULES:
        for name in rule.forced_by_capabilities:
            assert hasattr(pipeline, name)


def test_context_predicates_exist_on_frame_context() -> None:
    context = FrameContext()
    names = [rule.context_predicate for rule in GATE_RULES if rule.context_predicate]
    names += [name for rule in FORCING_RULES for name in rule.forced_by_context]
    names.append(PREVIEW_OVERRIDE.context_predicate)
    for name in names:
        assert isinstance(getattr(context, name), bool), name


def test_normalizer_order() -> None:
    assert NORMALIZERS == (MSAA_DEPENDENT_RULE, STEREO_DEPENDENT_RULE)


def test_msaa_rule_contents() -> None:
    assert MSAA_DEPENDENT_RULE.force_on == (Feature.FORWARD_RENDERING_ONLY,)
    assert set(MSAA_DEPENDENT_RULE.force_off) == {
        Feature.MOTION_VECTORS,
        Feature.DBUFFER,
        Feature.DISTORTION,
        Feature.POSTPROCESS,
        Feature.ROUGH_REFRACTION,
        Feature.SSAO,
        Feature.SSR,
        Feature.SUBSURFACE_SCATTERING,
        Feature.TRANSPARENT_OBJECTS,
    }


def test_msaa_rule_applies_only_when_triggered() -> None:
    settings = FrameSettings()
    assert apply_implication(MSAA_DEPENDENT_RULE, settings) is False
    assert settings == FrameSettings()

    settings.enable_msaa = True
    assert apply_implication(MSAA_DEPENDENT_RULE, settings) is True
    assert settings.enable_forward_rendering_only is True
    assert settings.enable_ssr is False


def test_frame_settings_normalizer_methods() -> None:
    settings = FrameSettings(enable_msaa=True)
    settings.configure_msaa_dependent_settings()
    assert settings.enable_forward_rendering_only is True
    assert settings.enable_transparent_objects is False


def test_stereo_rule_is_an_inert_extension_point() -> None:
    assert STEREO_DEPENDENT_RULE.force_on == ()
    assert STEREO_DEPENDENT_RULE.force_off == ()
    assert Feature.MOTION_VECTORS in STEREO_DEPENDENT_RULE.candidates

    settings = FrameSettings(enable_stereo=True)
    before = settings.copy()
    settings.configure_stereo_dependent_settings()
    assert settings == before


def test_preview_override_lists_fifteen_features() -> None:
    assert len(PREVIEW_OVERRIDE.force_off) == 15
    assert len(set(PREVIEW_OVERRIDE.force_off)) == 15
    assert Feature.OPAQUE_OBJECTS not in PREVIEW_OVERRIDE.force_off


def test_apply_override_respects_predicate() -> None:
    settings = FrameSettings()
    assert apply_override(PREVIEW_OVERRIDE, FrameContext(), settings) is False
    assert settings.enable_shadow is True
    assert apply_override(PREVIEW_OVERRIDE, FrameContext(camera_type="thumbnail"), settings) is True
    assert settings.enable_shadow is False


@pytest.mark.parametrize(
    "camera, expected",
    [
        (CameraType.GAME, (1.0, 1.0)),
        (CameraType.REFLECTION, (1.0, 0.0)),
        (CameraType.PREVIEW, (1.0, 1.0)),
        (CameraType.SCENE_VIEW, (1.0, 1.0)),
    ],
)
def test_dimmers_for_camera(camera, expected) -> None:
    assert dimmers_for(FrameContext(camera_type=camera)) == expected


def test_check_invariants_reports_violations() -> None:
    pipeline = RenderPipelineSettings(support_ssr=False)
    context = FrameContext(camera_type=CameraType.REFLECTION)
    settings = FrameSettings(enable_msaa=True)
    problems = check_invariants(settings, context, pipeline)
    text = "\n".join(problems)
    assert "specular_global_dimmer is 1.0, expected 0.0" in text
    assert "enable_ssr enabled without support_ssr" in text
    assert "enable_postprocess enabled for a reflection camera" in text
    assert "msaa: enable_forward_rendering_only must be enabled" in text
    assert "enable_msaa enabled without support_msaa" in text


def test_check_invariants_reports_dependency_and_preview() -> None:
    settings = FrameSettings(enable_atmospheric_scattering=False)
    problems = check_invariants(settings, FrameContext(camera_type=CameraType.PREVIEW), RenderPipelineSettings.all_supported())
    assert "enable_volumetrics enabled without enable_atmospheric_scattering" in problems
    assert "regular_preview: enable_shadow must be disabled" in problems


@pytest.mark.parametrize(
    "context, pipeline, source",
    [
        (FrameContext(wireframe=True), RenderPipelineSettings(), "wireframe"),
        (FrameContext(), RenderPipelineSettings(support_only_forward=True), "support_only_forward"),
    ],
)
def test_check_invariants_reports_unforced_feature(context, pipeline, source) -> None:
    settings = FrameSettings(enable_forward_rendering_only=False)
    problems = check_invariants(settings, context, pipeline)
    assert f"enable_forward_rendering_only disabled despite {source}" in problems


def test_check_invariants_accepts_resolved_wireframe_record() -> None:
    from hdframe import resolve_frame_settings

    context = FrameContext(wireframe=True)
    pipeline = RenderPipelineSettings.all_supported()
    resolved = resolve_frame_settings(context, pipeline, FrameSettings())
    assert check_invariants(resolved, context, pipeline) == []
    resolved.enable_forward_rendering_only = False
    assert check_invariants(resolved, context, pipeline) == [
        "enable_forward_rendering_only disabled despite wireframe"
    ]

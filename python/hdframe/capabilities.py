# python/hdframe/capabilities.py
# Platform capability constraints consulted while resolving frame settings
# Exists so the pipeline asset can cap what any camera may enable
# RELEVANT FILES: python/hdframe/rules.py, python/hdframe/config.py, tests/test_capabilities.py
from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from ._validate import as_bool


@dataclass
class RenderPipelineSettings:
    support_shadow_mask: bool = True
    support_ssr: bool = True
    support_ssao: bool = True
    support_subsurface_scattering: bool = True
    support_volumetrics: bool = True
    # Forces forward rendering for every camera rather than gating a feature
    support_only_forward: bool = False
    support_motion_vectors: bool = True
    support_dbuffer: bool = False
    support_msaa: bool = False

    def to_dict(self) -> dict:
        return {f.name: bool(getattr(self, f.name)) for f in fields(self)}

    def copy(self) -> "RenderPipelineSettings":
        return copy.deepcopy(self)

    @classmethod
    def all_supported(cls) -> "RenderPipelineSettings":
        """Every gated feature supported; forward rendering not forced."""
        out = cls()
        for f in fields(out):
            if f.name != "support_only_forward":
                setattr(out, f.name, True)
        return out

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default: Optional["RenderPipelineSettings"] = None) -> "RenderPipelineSettings":
        base = copy.deepcopy(default) if default is not None else cls()
        for key, value in data.items():
            name = _capability_name(key)
            setattr(base, name, as_bool(value))
        return base


_CAPABILITY_NAMES = frozenset(f.name for f in fields(RenderPipelineSettings))


def _capability_name(key: Any) -> str:
    name = str(key).strip().lower().replace("-", "_")
    if not name.startswith("support_"):
        name = "support_" + name
    if name not in _CAPABILITY_NAMES:
        raise ValueError(f"Unknown pipeline capability: {key!r}")
    return name


__all__ = ["RenderPipelineSettings"]

#!/usr/bin/env python3
"""
Resolve frame settings once from JSON inputs and print the result.

- Author settings start from --preset, then keys in --author (JSON), then --set KEY=VALUE.
- Pipeline capabilities from --pipeline (JSON); camera context from --context (JSON)
  plus the --camera/--no-fog/--wireframe/--xr shortcuts.
- With --check, exits 1 when the resolved record breaks a rule-table invariant.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import presets
from .config import load_frame_context, load_frame_settings, load_pipeline_settings, parse_bool
from .resolve import resolve_frame_settings
from .rules import check_invariants

logger = logging.getLogger(__name__)


def _parse_assignments(items: List[str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"--set expects KEY=VALUE, got {item!r}")
        out[key.strip()] = parse_bool(value)
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="hdframe-resolve", description=__doc__.strip().splitlines()[0])
    ap.add_argument("--author", type=Path, help="author frame settings JSON")
    ap.add_argument("--preset", help=f"author preset ({', '.join(presets.available())})")
    ap.add_argument("--set", dest="assignments", action="append", default=[], metavar="KEY=VALUE",
                    help="override one author feature, e.g. --set ssr=off")
    ap.add_argument("--pipeline", type=Path, help="pipeline capabilities JSON")
    ap.add_argument("--context", type=Path, help="camera context JSON")
    ap.add_argument("--camera", help="camera type (game, reflection, preview, scene-view)")
    ap.add_argument("--no-fog", action="store_true", help="scene view fog disabled")
    ap.add_argument("--wireframe", action="store_true", help="wireframe rendering active")
    ap.add_argument("--xr", action="store_true", help="XR stereo rendering enabled")
    ap.add_argument("--check", action="store_true", help="fail when invariants are violated")
    ap.add_argument("--json", dest="out_json", type=Path, help="write the resolved record here")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    context_overrides: Dict[str, Any] = {}
    if args.camera:
        context_overrides["camera_type"] = args.camera
    if args.no_fog:
        context_overrides["scene_view_fog_enabled"] = False
    if args.wireframe:
        context_overrides["wireframe"] = True
    if args.xr:
        context_overrides["xr_enabled"] = True

    try:
        # Layered: preset, then the author file, then --set
        base = presets.build(args.preset) if args.preset else None
        author = load_frame_settings(args.author, _parse_assignments(args.assignments), default=base)
        pipeline = load_pipeline_settings(args.pipeline)
        context = load_frame_context(args.context, context_overrides)
    except (OSError, ValueError, TypeError) as exc:
        print(f"hdframe-resolve: {exc}", file=sys.stderr)
        return 2

    resolved = resolve_frame_settings(context, pipeline, author)
    report = {
        "context": context.to_dict(),
        "frame_settings": resolved.to_dict(),
    }

    status = 0
    if args.check:
        problems = check_invariants(resolved, context, pipeline)
        report["violations"] = problems
        if problems:
            for problem in problems:
                logger.error(problem)
            status = 1

    text = json.dumps(report, indent=2)
    if args.out_json:
        args.out_json.parent.mkdir(parents=True, exist_ok=True)
        args.out_json.write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return status


if __name__ == "__main__":
    raise SystemExit(main())

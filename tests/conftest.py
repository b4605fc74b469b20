# Ensure `import hdframe` works from a fresh clone:
# put repo/python on sys.path so the package is importable without prior install.
import sys
from pathlib import Path

import pytest


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _ensure_python_path():
    pkg_dir = _repo_root() / "python"
    if str(pkg_dir) not in sys.path:
        sys.path.insert(0, str(pkg_dir))


_ensure_python_path()

from hdframe import (  # noqa: E402
    CameraType,
    Feature,
    FrameContext,
    FrameSettings,
    RenderPipelineSettings,
)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "scenario: end-to-end resolution scenarios"
    )


def all_enabled_author() -> FrameSettings:
    """Author record with every feature requested except MSAA and stereo."""
    author = FrameSettings()
    author.enable(list(Feature))
    author.disable([Feature.MSAA, Feature.STEREO])
    return author


@pytest.fixture
def pipeline() -> RenderPipelineSettings:
    return RenderPipelineSettings.all_supported()


@pytest.fixture
def author() -> FrameSettings:
    return all_enabled_author()


@pytest.fixture
def game_context() -> FrameContext:
    return FrameContext(camera_type=CameraType.GAME, name="Main Camera")

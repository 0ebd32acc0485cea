"""
Pytest configuration and shared fixtures for binkit tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Optional

import pytest

from binkit.config.catalog import ToolCatalog, ToolDefinition
from binkit.core.platform import clear_platform_cache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    """Machine detection is cached per process; isolate tests from it."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def make_definition() -> Callable[..., ToolDefinition]:
    """Factory for tool definitions with sensible defaults."""

    def _make(name: str = "tool", **overrides) -> ToolDefinition:
        values = dict(
            name=name,
            application=name,
            repository=f"owner/{name}",
            archive_pattern=f"{name}_%VERSION%_linux_%ARCH%.tar.gz",
            binary_path=name,
            description=f"The {name} tool",
        )
        values.update(overrides)
        return ToolDefinition(**values)

    return _make


@pytest.fixture
def catalog(make_definition) -> ToolCatalog:
    """Catalog with two valid tools and one invalid record."""
    from binkit.core.exceptions import InvalidConfigurationError

    return ToolCatalog(
        {
            "alpha": make_definition("alpha"),
            "broken": InvalidConfigurationError(
                "Invalid configuration for tool broken: missing required fields: application"
            ),
            "beta": make_definition("beta", archive_pattern="beta-linux-%ARCH%", binary_path="beta"),
        },
        source="test-catalog.yaml",
    )


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Directory standing in for PATH."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def fake_executable(bin_dir: Path) -> Callable[..., Path]:
    """
    Create a shell script that prints a version string.

    Usage:
        fake_executable("tool", "tool version 1.2.3")
    """

    def _make(name: str, output: str = "", stderr: str = "", directory: Optional[Path] = None) -> Path:
        directory = directory or bin_dir
        directory.mkdir(parents=True, exist_ok=True)
        script = directory / name
        lines = ["#!/bin/sh"]
        if output:
            lines.append(f"echo '{output}'")
        if stderr:
            lines.append(f"echo '{stderr}' >&2")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(0o755)
        return script

    return _make


def _as_bytes(content) -> bytes:
    return content.encode() if isinstance(content, str) else content


def build_tar_gz(members: dict, mode: int = 0o755) -> bytes:
    """Build a gzipped tarball in memory from {name: content}."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            data = _as_bytes(content)
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def build_zip(members: dict, mode: int = 0o755) -> bytes:
    """Build a zip archive in memory from {name: content}."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in members.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, _as_bytes(content))
    return buffer.getvalue()


@pytest.fixture
def tar_gz_bytes() -> Callable[..., bytes]:
    return build_tar_gz


@pytest.fixture
def zip_bytes() -> Callable[..., bytes]:
    return build_zip

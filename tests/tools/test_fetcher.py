"""
Unit tests for artifact download and extraction.
"""

import tempfile

import pytest
import responses

from binkit.core.exceptions import DownloadFailedError, ExtractFailedError
from binkit.core.filesystem import ArchiveKind
from binkit.tools.artifact import resolve_artifact
from binkit.tools.fetcher import ArtifactFetcher


class TestArtifactFetcher:
    """Test ArtifactFetcher.fetch()."""

    @responses.activate
    def test_tar_gz(self, make_definition, tar_gz_bytes):
        """Test tarballs are extracted into the workspace."""
        definition = make_definition("tool", binary_path="tool-%VERSION%/tool")
        artifact = resolve_artifact(definition, "1.2.3", "amd64")
        responses.add(
            responses.GET, artifact.url, body=tar_gz_bytes({"tool-v1.2.3/tool": "bin"})
        )

        with ArtifactFetcher().fetch(artifact, "tool") as fetched:
            assert fetched.kind is ArchiveKind.TAR_GZ
            assert fetched.binary_path == "tool-v1.2.3/tool"
            assert (fetched.workspace / fetched.binary_path).read_text() == "bin"
            assert not (fetched.workspace / "archive.tar.gz").exists()
            workspace = fetched.workspace

        assert not workspace.exists()

    @responses.activate
    def test_zip(self, make_definition, zip_bytes):
        definition = make_definition("tool", archive_pattern="tool_%VERSION%.zip")
        artifact = resolve_artifact(definition, "1.2.3", "amd64")
        responses.add(responses.GET, artifact.url, body=zip_bytes({"tool": "bin"}))

        with ArtifactFetcher().fetch(artifact, "tool") as fetched:
            assert fetched.kind is ArchiveKind.ZIP
            assert (fetched.workspace / "tool").read_text() == "bin"

    @responses.activate
    def test_bare_binary(self, make_definition):
        """Test a bare artifact is saved under the application name."""
        definition = make_definition(
            "tool", archive_pattern="tool-linux-%ARCH%", binary_path="tool-linux-%ARCH%"
        )
        artifact = resolve_artifact(definition, "1.2.3", "amd64")
        responses.add(responses.GET, artifact.url, body=b"\x7fELF")

        with ArtifactFetcher().fetch(artifact, "tool") as fetched:
            assert fetched.kind is ArchiveKind.BINARY
            assert fetched.binary_path == "tool"
            assert (fetched.workspace / "tool").read_bytes() == b"\x7fELF"

    @responses.activate
    def test_download_failure(self, make_definition):
        """Test HTTP errors become DownloadFailedError."""
        artifact = resolve_artifact(make_definition(), "1.2.3", "amd64")
        responses.add(responses.GET, artifact.url, status=404)

        with pytest.raises(DownloadFailedError) as exc_info:
            with ArtifactFetcher().fetch(artifact, "tool"):
                pass

        assert exc_info.value.reason == "download failed"

    @responses.activate
    def test_extract_failure(self, make_definition, tmp_path, monkeypatch):
        """Test corrupt archives become ExtractFailedError and clean up."""
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        artifact = resolve_artifact(make_definition(), "1.2.3", "amd64")
        responses.add(responses.GET, artifact.url, body=b"not a tarball")

        with pytest.raises(ExtractFailedError) as exc_info:
            with ArtifactFetcher(workspace_prefix="binkit_fetch_").fetch(artifact, "tool"):
                pass

        assert exc_info.value.reason == "extract failed"
        assert not list(tmp_path.glob("binkit_fetch_*"))

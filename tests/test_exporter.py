"""
Unit tests for exporter module.
"""

import base64
import io
from unittest.mock import Mock

import pytest
from PIL import Image

from conftest import make_pattern
from PE_Libs.errors import EncodeError
from PE_Libs.ImageEditingLib.exporter import ExportedArtifact, export_raster
from PE_Libs.ImageEditingLib.raster_models import OutputRaster


@pytest.fixture
def output():
    return OutputRaster(width=4, height=3, pixels=make_pattern(4, 3))


class TestExportRaster:
    """Tests for export_raster function."""

    def test_exports_png_by_default(self, output):
        artifact = export_raster(output)
        assert artifact.image_format == "PNG"
        assert artifact.mime_type == "image/png"
        assert (artifact.width, artifact.height) == (4, 3)
        assert Image.open(io.BytesIO(artifact.data)).size == (4, 3)

    def test_quality_only_for_lossy_formats(self, output):
        encode = Mock(return_value=b"encoded")
        export_raster(output, "png", encode=encode, quality=40)
        encode.assert_called_once_with(output, "PNG")

        encode.reset_mock()
        artifact = export_raster(output, "jpg", encode=encode, quality=400)
        encode.assert_called_once_with(output, "JPEG", quality=100)
        assert artifact.mime_type == "image/jpeg"

    def test_nothing_to_export(self):
        with pytest.raises(EncodeError, match="Nothing to export"):
            export_raster(None)

    def test_encoder_error_propagates(self, output):
        encode = Mock(side_effect=EncodeError("no space"))
        with pytest.raises(EncodeError, match="no space"):
            export_raster(output, encode=encode)

    def test_memory_error_becomes_encode_error(self, output):
        encode = Mock(side_effect=MemoryError())
        with pytest.raises(EncodeError):
            export_raster(output, encode=encode)

    def test_empty_encoder_output(self, output):
        with pytest.raises(EncodeError):
            export_raster(output, encode=Mock(return_value=b""))


class TestExportedArtifact:
    """Tests for ExportedArtifact."""

    def test_data_url(self):
        artifact = ExportedArtifact(data=b"\x89PNG", image_format="PNG", mime_type="image/png", width=1, height=1)
        url = artifact.to_data_url()
        assert url.startswith("data:image/png;base64,")
        assert base64.b64decode(url.split(",", 1)[1]) == b"\x89PNG"

"""
Integration tests for the file-level conversion pipeline.

These tests go from an image on disk to a mesh file on disk, the same way
the CLI does.
"""

import json
import os
import tempfile
import shutil
import unittest
import sys
from pathlib import Path

# Add parent directory to path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from alpha_to_mesh.alpha_to_mesh import convert_image_to_mesh, format_filesize
from alpha_to_mesh.config import GeometryConfig
from alpha_to_mesh.constants import VERTICAL
from alpha_to_mesh.mesh_validation import ValidationResult
from alpha_to_mesh.region_builder import EmptySilhouetteError
from tests.helpers import (
    create_center_square_image,
    create_opaque_image,
    create_transparent_image
)


class TestFormatFilesize(unittest.TestCase):
    """Test human-readable file sizes."""

    def test_zero(self):
        self.assertEqual(format_filesize(0), "0B")

    def test_bytes(self):
        self.assertEqual(format_filesize(512), "512.0 B")

    def test_kilobytes(self):
        self.assertEqual(format_filesize(1536), "1.5 KB")

    def test_megabytes(self):
        self.assertEqual(format_filesize(3 * 1024 * 1024), "3.0 MB")


class TestConvertImageToMesh(unittest.TestCase):
    """Test the full image → mesh file conversion."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def path(self, name: str) -> str:
        return os.path.join(self.temp_dir, name)

    def test_center_square_obj(self):
        image = create_center_square_image(self.path("square.png"))
        output = self.path("square_mesh.obj")

        stats = convert_image_to_mesh(image, output)

        self.assertTrue(os.path.exists(output))
        self.assertEqual(stats['image_width'], 4)
        self.assertEqual(stats['image_height'], 4)
        self.assertEqual(stats['mode'], "horizontal")
        self.assertEqual(stats['num_regions'], 1)
        self.assertEqual(stats['min_transitions'], 0)
        self.assertEqual(stats['max_transitions'], 2)
        self.assertEqual(stats['num_triangles'], 2)
        self.assertEqual(stats['num_vertices'], 6)
        self.assertEqual(stats['output_path'], output)
        self.assertNotIn('validation', stats)
        self.assertNotIn('debug_path', stats)

    def test_json_output(self):
        image = create_center_square_image(self.path("square.png"))
        output = self.path("square.json")

        convert_image_to_mesh(image, output, GeometryConfig(output_format="json"))

        with open(output, encoding="utf-8") as f:
            document = json.load(f)
        self.assertEqual(len(document["data"]["attributes"]["position"]["array"]), 18)

    def test_vertical_mode(self):
        image = create_opaque_image(6, 6, self.path("block.png"))
        stats = convert_image_to_mesh(image, self.path("block.obj"), GeometryConfig(mode=VERTICAL))

        self.assertEqual(stats['mode'], "vertical")
        self.assertEqual(stats['image_width'], 6)
        self.assertGreater(stats['num_triangles'], 0)

    def test_validation_runs_when_enabled(self):
        image = create_opaque_image(8, 5, self.path("block.png"))
        stats = convert_image_to_mesh(
            image, self.path("block.obj"), GeometryConfig(validate_mesh=True)
        )

        self.assertIsInstance(stats['validation'], ValidationResult)
        self.assertTrue(stats['validation'].is_valid, stats['validation'].errors)

    def test_debug_overlay_written(self):
        image = create_center_square_image(self.path("square.png"))
        output = self.path("square.obj")

        stats = convert_image_to_mesh(image, output, GeometryConfig(debug_render=True))

        self.assertEqual(stats['debug_path'], self.path("square_debug.png"))
        self.assertTrue(os.path.exists(stats['debug_path']))

    def test_progress_stages(self):
        image = create_center_square_image(self.path("square.png"))
        stages = []

        convert_image_to_mesh(
            image,
            self.path("square.obj"),
            GeometryConfig(validate_mesh=True, debug_render=True),
            progress_callback=lambda stage, message: stages.append(stage)
        )

        seen = list(dict.fromkeys(stages))
        self.assertEqual(seen, ["load", "scan", "triangulate", "mesh", "validate", "export", "debug"])

    def test_missing_input(self):
        with self.assertRaises(FileNotFoundError):
            convert_image_to_mesh(self.path("nope.png"), self.path("nope.obj"))

    def test_transparent_image(self):
        image = create_transparent_image(self.path("empty.png"))
        output = self.path("empty.obj")

        with self.assertRaises(EmptySilhouetteError):
            convert_image_to_mesh(image, output)
        self.assertFalse(os.path.exists(output))


if __name__ == '__main__':
    unittest.main()

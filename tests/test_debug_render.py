"""
Tests for the diagnostic overlay renderer.
"""

import os
import tempfile
import shutil
import unittest
import sys
from pathlib import Path

from PIL import Image

# Add parent directory to path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from alpha_to_mesh.debug_render import render_debug_overlay, generate_debug_path
from alpha_to_mesh.mesh_generator import triangulate_image
from tests.helpers import make_buffer, center_square_alpha


class TestGenerateDebugPath(unittest.TestCase):
    """Test overlay path derivation."""

    def test_obj_path(self):
        self.assertEqual(generate_debug_path("sprite_mesh.obj"), "sprite_mesh_debug.png")

    def test_keeps_directory(self):
        path = generate_debug_path(os.path.join("out", "leaf.json"))
        self.assertEqual(path, os.path.join("out", "leaf_debug.png"))


class TestRenderDebugOverlay(unittest.TestCase):
    """Test overlay rendering."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_writes_png(self):
        buffer = make_buffer(center_square_alpha())
        result = triangulate_image(buffer, 40, 0.06)
        output = os.path.join(self.temp_dir, "overlay.png")

        render_debug_overlay(buffer, result.regions, result.triangles, output)

        self.assertTrue(os.path.exists(output))
        with Image.open(output) as img:
            self.assertEqual(img.format, "PNG")
            self.assertGreater(img.width, 0)

    def test_wide_image(self):
        buffer = make_buffer([[255] * 64 for _ in range(8)])
        result = triangulate_image(buffer, 40, 1.0)
        output = os.path.join(self.temp_dir, "wide.png")

        render_debug_overlay(buffer, result.regions, result.triangles, output)

        with Image.open(output) as img:
            self.assertGreater(img.width, img.height)


if __name__ == '__main__':
    unittest.main()

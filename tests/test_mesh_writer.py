"""
Tests for the OBJ and BufferGeometry JSON writers, and the JSON helpers
they use.
"""

import json
import os
import tempfile
import unittest
import sys
from pathlib import Path

# Add parent directory to path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from alpha_to_mesh.json_utils import dumps_compact_arrays, rounded
from alpha_to_mesh.mesh_generator import generate_mesh
from alpha_to_mesh.mesh_writer import (
    write_obj,
    write_json,
    write_mesh,
    mesh_to_buffer_geometry
)
from tests.helpers import make_buffer, center_square_alpha, cleanup_test_file


def temp_path(suffix: str) -> str:
    fd, path = tempfile.mkstemp(suffix=suffix)
    os.close(fd)
    return path


class TestDumpsCompactArrays(unittest.TestCase):
    """Test JSON array compaction."""

    def test_all_numeric_arrays_compacted(self):
        text = dumps_compact_arrays({"a": [1, 2, 3], "b": {"c": [0.5, -1]}})
        self.assertIn('"a": [1, 2, 3]', text)
        self.assertIn('"c": [0.5, -1]', text)

    def test_only_named_fields_compacted(self):
        text = dumps_compact_arrays({"array": [1, 2], "other": [3, 4]}, array_fields=["array"])
        self.assertIn('"array": [1, 2]', text)
        self.assertNotIn('"other": [3, 4]', text)

    def test_string_arrays_untouched(self):
        text = dumps_compact_arrays({"names": ["x", "y"]})
        self.assertNotIn('["x", "y"]', text)

    def test_output_still_valid_json(self):
        data = {"data": {"array": [1.5, 2.25, 1e-07]}}
        self.assertEqual(json.loads(dumps_compact_arrays(data)), data)

    def test_rounded(self):
        self.assertEqual(rounded([0.1234567, 1], 3), [0.123, 1.0])


class TestWriteObj(unittest.TestCase):
    """Test Wavefront OBJ output."""

    def setUp(self):
        self.mesh = generate_mesh(make_buffer(center_square_alpha()))
        self.path = temp_path(".obj")

    def tearDown(self):
        cleanup_test_file(self.path)

    def test_record_counts(self):
        write_obj(self.mesh, self.path)
        lines = Path(self.path).read_text(encoding="utf-8").splitlines()

        self.assertEqual(sum(1 for line in lines if line.startswith("v ")), 6)
        self.assertEqual(sum(1 for line in lines if line.startswith("vt ")), 6)
        self.assertEqual(sum(1 for line in lines if line.startswith("vn ")), 6)
        self.assertEqual(sum(1 for line in lines if line.startswith("f ")), 2)

    def test_values(self):
        write_obj(self.mesh, self.path)
        lines = Path(self.path).read_text(encoding="utf-8").splitlines()

        self.assertIn("v 0.25 0.75 0", lines)
        self.assertIn("vn 0 -1 0", lines)
        self.assertIn("f 1/1/1 2/2/2 3/3/3", lines)
        self.assertIn("f 4/4/4 5/5/5 6/6/6", lines)

    def test_header_comment(self):
        write_obj(self.mesh, self.path)
        first = Path(self.path).read_text(encoding="utf-8").splitlines()[0]
        self.assertTrue(first.startswith("# alpha_to_mesh"))


class TestWriteJson(unittest.TestCase):
    """Test BufferGeometry JSON output."""

    def setUp(self):
        self.mesh = generate_mesh(make_buffer(center_square_alpha()))
        self.path = temp_path(".json")

    def tearDown(self):
        cleanup_test_file(self.path)

    def test_document_structure(self):
        document = mesh_to_buffer_geometry(self.mesh)

        self.assertEqual(document["metadata"]["type"], "BufferGeometry")
        attributes = document["data"]["attributes"]
        self.assertEqual(attributes["position"]["itemSize"], 3)
        self.assertEqual(attributes["normal"]["itemSize"], 3)
        self.assertEqual(attributes["uv"]["itemSize"], 2)
        self.assertEqual(len(attributes["position"]["array"]), 18)
        self.assertEqual(len(attributes["uv"]["array"]), 12)

    def test_file_loads(self):
        write_json(self.mesh, self.path)
        with open(self.path, encoding="utf-8") as f:
            document = json.load(f)

        self.assertEqual(document["data"]["attributes"]["position"]["array"][:3], [0.25, 0.75, 0.0])

    def test_arrays_on_one_line(self):
        write_json(self.mesh, self.path)
        text = Path(self.path).read_text(encoding="utf-8")
        array_lines = [line for line in text.splitlines() if '"array"' in line]

        self.assertEqual(len(array_lines), 3)
        for line in array_lines:
            self.assertIn("]", line)


class TestWriteMesh(unittest.TestCase):
    """Test format dispatch."""

    def setUp(self):
        self.mesh = generate_mesh(make_buffer(center_square_alpha()))
        self.path = temp_path(".out")

    def tearDown(self):
        cleanup_test_file(self.path)

    def test_dispatch_json(self):
        write_mesh(self.mesh, self.path, "json")
        with open(self.path, encoding="utf-8") as f:
            self.assertIn("data", json.load(f))

    def test_dispatch_obj(self):
        write_mesh(self.mesh, self.path, "obj")
        self.assertIn("f 1/1/1", Path(self.path).read_text(encoding="utf-8"))

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            write_mesh(self.mesh, self.path, "stl")


if __name__ == '__main__':
    unittest.main()

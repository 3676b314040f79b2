"""Tests for run parameters."""

import json
import os
import shutil
import tempfile
import unittest

from danielsson.config import DistanceMapParams
from danielsson.errors import InvalidInput


class TestDistanceMapParams(unittest.TestCase):
    """Test cases for the DistanceMapParams class."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def write_params(self, params):
        path = os.path.join(self.temp_dir, "params.json")
        with open(path, 'w') as f:
            json.dump(params, f)
        return path

    def test_defaults(self):
        params = DistanceMapParams()
        self.assertEqual(params.threshold, 0.5)
        self.assertTrue(params.display)
        self.assertEqual(params.method, "wavefront")
        self.assertEqual(params.device, "cpu")
        self.assertEqual(params.colormap, "viridis")
        self.assertIs(params.validate(), params)

    def test_unknown_keyword(self):
        with self.assertRaises(TypeError):
            DistanceMapParams(radius=3)

    def test_from_json(self):
        path = self.write_params({"threshold": 0.25, "display": False, "steps": 10})
        with self.assertLogs("danielsson.config", level="WARNING") as logs:
            params = DistanceMapParams.from_json(path)
        self.assertEqual(params.threshold, 0.25)
        self.assertFalse(params.display)
        self.assertEqual(params.method, "wavefront")
        self.assertTrue(any("steps" in message for message in logs.output))

    def test_from_json_requires_object(self):
        path = self.write_params([0.5])
        with self.assertRaises(InvalidInput):
            DistanceMapParams.from_json(path)

    def test_update_ignores_none(self):
        params = DistanceMapParams(threshold=0.3).update(threshold=None, display=False, method="sequential")
        self.assertEqual(params.threshold, 0.3)
        self.assertFalse(params.display)
        self.assertEqual(params.method, "sequential")

    def test_validate(self):
        for overrides in ({"threshold": 1.2}, {"threshold": -0.01}, {"threshold": "half"},
                          {"display": "yes"}, {"method": "exact"}, {"device": "gpu0"}):
            with self.assertRaises(InvalidInput):
                DistanceMapParams(**overrides).validate()

        DistanceMapParams(threshold=0, display=0).validate()
        DistanceMapParams(threshold=1, display=1).validate()

    def test_to_dict_roundtrip(self):
        params = DistanceMapParams(threshold=0.7, colormap="gray")
        self.assertEqual(DistanceMapParams.from_dict(params.to_dict()).to_dict(), params.to_dict())


if __name__ == '__main__':
    unittest.main()

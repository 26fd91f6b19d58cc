import os
import tempfile
import unittest

from config import CFG
from io_files import write_layout_view_html, write_report
from models import Box, BoxPlacementResult, CropPlacement, FailedPlacement
from render import render_layout
from crops import CROPS_BY_ID


class WriteOutputsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self._orig_report = CFG.REPORT_OUT
        self._orig_layout = CFG.LAYOUT_HTML

    def tearDown(self) -> None:
        CFG.REPORT_OUT = self._orig_report
        CFG.LAYOUT_HTML = self._orig_layout

    def test_write_report_uses_configured_relative_path(self) -> None:
        CFG.REPORT_OUT = "outputs/custom_report.txt"
        results = [
            BoxPlacementResult(
                "bed-1",
                placed=(CropPlacement("tomato", 0),),
                failed=(FailedPlacement("kale", "No valid spot found (space or constraints)"),),
            )
        ]

        path = write_report(results, {"kale": 1}, self.tmpdir.name)

        expected = os.path.join(self.tmpdir.name, "outputs", "custom_report.txt")
        self.assertEqual(path, expected)
        self.assertTrue(os.path.exists(path))

        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn("[bed-1] placed 1, failed 1", contents)
        self.assertIn("tomato @ cell 0", contents)
        self.assertIn("Remaining: kale×1", contents)

    def test_write_report_without_leftovers(self) -> None:
        CFG.REPORT_OUT = "report.txt"
        path = write_report([BoxPlacementResult("bed-1")], {}, self.tmpdir.name)
        with open(path, "r", encoding="utf-8") as fh:
            self.assertIn("Remaining: none", fh.read())

    def test_write_layout_view_html_accepts_absolute_path(self) -> None:
        target = os.path.join(self.tmpdir.name, "html", "layout.html")
        CFG.LAYOUT_HTML = target

        box = Box("bed-1", 2, [CROPS_BY_ID["tomato"], None, CROPS_BY_ID["basil"], None], name="North bed")
        svg, legend = render_layout([box])

        path = write_layout_view_html(svg, legend, self.tmpdir.name)

        self.assertEqual(path, target)
        self.assertTrue(os.path.exists(path))

        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn(svg, contents)
        self.assertIn(legend, contents)
        self.assertIn("North bed", contents)
        self.assertIn("Tomato", legend)
        self.assertIn("Basil", legend)


if __name__ == "__main__":
    unittest.main()

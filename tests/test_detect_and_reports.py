import io
from pathlib import Path
import tempfile
import unittest

import pandas as pd
from scipy.io import loadmat

from udf_reader.core.metrics import scan_metrics
from udf_reader.core.reports import write_report
from udf_reader.loaders.udf_loader import load_stream
from udf_reader.main import main
from udf_reader.utils.detect import detect_kind, discover_inputs


def _udf_text(ident: str, values: str) -> str:
    return (
        f"SampleIdent,{ident} ,/\n"
        "Title1,Dat2rit program ,/\n"
        "DataAngleRange,  10.0000,  11.0000,/\n"
        "ScanStepSize,    0.500,/\n"
        "RawScan\n"
        f"{values}\n"
    )


class DetectTests(unittest.TestCase):
    def test_detect_by_content_not_extension(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "a.udf").write_text(_udf_text("A", "1, 2/"), encoding="latin-1")
            (root / "renamed.txt").write_text(_udf_text("B", "3/"), encoding="latin-1")
            (root / "fake.udf").write_text("not a udf file\n", encoding="latin-1")
            (root / "tiny.udf").write_bytes(b"Samp")

            self.assertEqual("udf", detect_kind(root / "a.udf"))
            self.assertEqual("udf", detect_kind(root / "renamed.txt"))
            self.assertEqual("unknown", detect_kind(root / "fake.udf"))
            self.assertEqual("unknown", detect_kind(root / "tiny.udf"))
            self.assertEqual("unknown", detect_kind(root / "missing.udf"))

    def test_discover_recurse_and_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "sub").mkdir()
            (root / "b.udf").write_text(_udf_text("B", "3/"), encoding="latin-1")
            (root / "a.udf").write_text(_udf_text("A", "1/"), encoding="latin-1")
            (root / "sub" / "c.udf").write_text(_udf_text("C", "2/"), encoding="latin-1")

            names = [d.path.name for d in discover_inputs(root, recurse=True)]
            self.assertEqual(["a.udf", "b.udf", "c.udf"], names)
            flat = [d.path.name for d in discover_inputs(root, recurse=False)]
            self.assertEqual(["a.udf", "b.udf"], flat)
            single = discover_inputs(root / "a.udf")
            self.assertEqual(1, len(single))
            self.assertEqual("udf", single[0].kind)


class ReportTests(unittest.TestCase):
    def _scans(self):
        return [
            load_stream(io.StringIO(_udf_text("A", "1, 2, 3/"))),
            load_stream(io.StringIO(_udf_text("B", "10  20/"))),
        ]

    def test_metrics_row(self):
        row = scan_metrics(self._scans()[0], "a.udf")
        self.assertEqual("a.udf", row["file"])
        self.assertEqual("A", row["sample_ident"])
        self.assertEqual(3, row["n_points"])
        self.assertEqual(10.0, row["x_start"])
        self.assertEqual(11.0, row["x_end"])
        self.assertEqual(6.0, row["y_sum"])
        self.assertEqual(2, row["n_meta"])

    def test_write_csv_and_mat(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out_base = Path(tmpdir) / "out" / "summary"
            write_report(self._scans(), out_base, "test", fmt="both", mat_variable="rep")

            df = pd.read_csv(out_base.with_suffix(".csv"))
            self.assertEqual([3, 2], df["n_points"].tolist())
            self.assertEqual(["A", "B"], df["sample_ident"].tolist())

            mat = loadmat(out_base.with_suffix(".mat"), squeeze_me=True, struct_as_record=False)
            self.assertIn("rep", mat)
            self.assertEqual([3.0, 2.0], list(mat["rep"].n_points))

    def test_unknown_format_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ValueError):
                write_report(self._scans(), Path(tmpdir) / "x", "test", fmt="xlsx")


class MainTests(unittest.TestCase):
    def test_main_writes_summary_and_skips_corrupt_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            data = root / "data"
            data.mkdir()
            (data / "good.udf").write_text(_udf_text("G", "5, 6/"), encoding="latin-1")
            (data / "bad.udf").write_text(_udf_text("X", "5, 6x/"), encoding="latin-1")
            cfg_path = root / "config.yaml"
            cfg_path.write_text(
                "input:\n"
                f"  path: {data.as_posix()}\n"
                "output:\n"
                f"  root: {(root / 'out').as_posix()}\n"
                "logging:\n"
                "  verbose: false\n",
                encoding="utf-8",
            )

            self.assertEqual(0, main([str(cfg_path)]))
            df = pd.read_csv(root / "out" / "udf_summary.csv")
            self.assertEqual(["good.udf"], df["file"].tolist())


if __name__ == "__main__":
    unittest.main()

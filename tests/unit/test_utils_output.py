"""Tests for PyRFCorr.utils.output utilities.

This module tests the error handling decorator and the output file
preparation helpers.
"""
import unittest
from unittest.mock import Mock
import logging
import os
import tempfile
import shutil
from pathlib import Path

from PyRFCorr.utils.output import catch_IOError, normalize_output_path, prepare_outfile


class TestCatchIOError(unittest.TestCase):
    """Test catch_IOError decorator functionality."""

    def setUp(self):
        self.mock_logger = Mock(spec=logging.Logger)
        self.decorator = catch_IOError(self.mock_logger)

    def test_successful_function_call(self):
        @self.decorator
        def dummy_function(x, y):
            return x + y

        self.assertEqual(dummy_function(2, 3), 5)
        self.mock_logger.error.assert_not_called()

    def test_ioerror_is_logged_and_reraised(self):
        @self.decorator
        def failing_function():
            raise IOError(13, "Permission denied", "/test/path.csv")

        with self.assertRaises(IOError):
            failing_function()

        self.mock_logger.error.assert_called_once()
        message = self.mock_logger.error.call_args[0][0]
        self.assertIn("/test/path.csv", message)
        self.assertIn("[Errno 13]", message)
        self.assertIn("Permission denied", message)

    def test_other_errors_pass_through(self):
        @self.decorator
        def failing_function():
            raise ValueError("not an I/O error")

        with self.assertRaises(ValueError):
            failing_function()
        self.mock_logger.error.assert_not_called()


class TestNormalizeOutputPath(unittest.TestCase):

    def test_csv_suffix_kept(self):
        self.assertEqual(normalize_output_path("rf_correlate.csv"), Path("rf_correlate.csv"))

    def test_csv_suffix_appended(self):
        self.assertEqual(normalize_output_path("out"), Path("out.csv"))
        self.assertEqual(normalize_output_path("dir/out.txt"), Path("dir/out.txt.csv"))


class TestPrepareOutfile(unittest.TestCase):
    """Test output file validation."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.mock_logger = Mock(spec=logging.Logger)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_new_file(self):
        path = Path(self.temp_dir) / "out.csv"
        self.assertTrue(prepare_outfile(path, False, self.mock_logger))
        self.mock_logger.critical.assert_not_called()

    def test_existing_file_without_overwrite(self):
        path = Path(self.temp_dir) / "out.csv"
        path.write_text("RNA1;0.5;0.1\n")
        self.assertFalse(prepare_outfile(path, False, self.mock_logger))
        self.mock_logger.critical.assert_called_once()
        self.assertEqual(path.read_text(), "RNA1;0.5;0.1\n")

    def test_existing_file_with_overwrite(self):
        path = Path(self.temp_dir) / "out.csv"
        path.write_text("RNA1;0.5;0.1\n")
        self.assertTrue(prepare_outfile(path, True, self.mock_logger))
        self.mock_logger.warning.assert_called_once()

    def test_directory_as_output(self):
        path = Path(self.temp_dir) / "out.csv"
        path.mkdir()
        self.assertFalse(prepare_outfile(path, True, self.mock_logger))

    def test_missing_parent_directory(self):
        path = Path(self.temp_dir) / "missing" / "out.csv"
        self.assertFalse(prepare_outfile(path, False, self.mock_logger))

    @unittest.skipIf(hasattr(os, "geteuid") and os.geteuid() == 0, "root ignores permissions")
    def test_unwritable_directory(self):
        os.chmod(self.temp_dir, 0o500)
        try:
            path = Path(self.temp_dir) / "out.csv"
            self.assertFalse(prepare_outfile(path, False, self.mock_logger))
        finally:
            os.chmod(self.temp_dir, 0o700)

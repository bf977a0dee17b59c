import logging
import os
import shutil
import sys
import tempfile
import unittest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from drawledger.logging_config import configure_logging


class TestConfigureLogging(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        shutil.rmtree(self.test_dir)

    def test_file_handler_writes_records(self):
        path = os.path.join(self.test_dir, "logs", "drawledger.log")
        level = configure_logging("info", path)
        self.assertEqual(level, logging.INFO)

        logging.getLogger("drawledger.test").info("ledger built")
        for handler in logging.getLogger().handlers:
            handler.flush()

        with open(path, encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn("INFO drawledger.test - ledger built", contents)

    def test_unknown_level_falls_back_to_warning(self):
        self.assertEqual(configure_logging("chatty"), logging.WARNING)
        self.assertEqual(logging.getLogger().level, logging.WARNING)

    def test_library_loggers_stay_quiet(self):
        configure_logging("DEBUG")
        self.assertEqual(logging.getLogger("xlsxwriter").level, logging.WARNING)
        configure_logging("ERROR")
        self.assertEqual(logging.getLogger("dateutil").level, logging.ERROR)


if __name__ == '__main__':
    unittest.main()

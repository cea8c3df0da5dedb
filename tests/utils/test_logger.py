import logging
import os
import shutil
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

from manga_archiver.utils.logger import (
    LOGS_DIR,
    MAIN_LOGGER_NAME,
    get_logger,
    level_from_name,
    set_console_level,
    setup_logger,
)


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.log_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.log_dir, "nested", "test.log")
        self.logger = setup_logger("manga_archiver_test", self.log_file, logging.DEBUG, add_console_handler=False)

    def tearDown(self):
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()
        shutil.rmtree(self.log_dir)

    def test_log_file_creation_and_content(self):
        test_message = "This is a test log message from test_log_file_creation_and_content."
        self.logger.info(test_message)
        for handler in self.logger.handlers:
            handler.flush()

        self.assertTrue(os.path.exists(self.log_file), f"Log file not found at {self.log_file}")
        with open(self.log_file, 'r', encoding='utf-8') as f:
            log_content = f.read()

        self.assertIn(test_message, log_content)
        self.assertIn("INFO", log_content)
        self.assertIn("manga_archiver_test", log_content)
        # %(module)s and %(funcName)s
        self.assertIn("test_logger", log_content)
        self.assertIn("test_log_file_creation_and_content", log_content)

    def test_setup_is_idempotent(self):
        logger = setup_logger("manga_archiver_test", self.log_file, logging.DEBUG, add_console_handler=False)

        self.assertIs(logger, self.logger)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], RotatingFileHandler)
        self.assertEqual(logger.handlers[0].maxBytes, 5 * 1024 * 1024)
        self.assertEqual(logger.handlers[0].backupCount, 5)

    def test_set_console_level_leaves_file_handler(self):
        logger = setup_logger("manga_archiver_test", self.log_file, logging.DEBUG, add_console_handler=True)

        set_console_level(logging.WARNING, logger_name="manga_archiver_test")

        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        console_handlers = [h for h in logger.handlers if not isinstance(h, logging.FileHandler)]
        self.assertEqual(len(console_handlers), 1)
        self.assertEqual(console_handlers[0].level, logging.WARNING)
        self.assertEqual(file_handlers[0].level, logging.NOTSET)

    def test_level_from_name(self):
        self.assertEqual(level_from_name("debug"), logging.DEBUG)
        self.assertEqual(level_from_name(" WARNING "), logging.WARNING)
        self.assertEqual(level_from_name("chatty"), logging.INFO)
        self.assertEqual(level_from_name("chatty", default=logging.ERROR), logging.ERROR)


class TestGetLogger(unittest.TestCase):

    def test_default_is_main_logger(self):
        self.assertEqual(get_logger().name, MAIN_LOGGER_NAME)

    def test_module_loggers_are_children_of_main_logger(self):
        logger = get_logger("manga_archiver.core.http_client")

        self.assertIs(logger.parent, logging.getLogger(MAIN_LOGGER_NAME))

    def test_log_directory_created_on_import(self):
        self.assertTrue(os.path.isdir(LOGS_DIR))


if __name__ == '__main__':
    unittest.main()

from __future__ import annotations

import logging
import unittest

from rich.logging import RichHandler

from xogen.codegen.core.generator import (
    GenerationResult,
    GeneratorError,
    UnknownKindError,
    UnmappedNullableError,
    WarningLog,
)
from xogen.logging_config import ROOT_LOGGER_NAME, get_logger, setup_logging


class WarningLogTests(unittest.TestCase):
    def test_one_record_per_field(self) -> None:
        log = WarningLog()
        self.assertTrue(log.warn("Ticket", "Status", "Ticket.Status could be null, skipping!"))
        self.assertFalse(log.warn("Ticket", "Status", "again"))
        self.assertTrue(log.warn("Ticket", "Owner", "Ticket.Owner could be null, skipping!"))

        self.assertEqual(len(log), 2)
        self.assertEqual(
            log.messages(),
            [
                "Ticket.Status could be null, skipping!",
                "Ticket.Owner could be null, skipping!",
            ],
        )
        self.assertEqual([r.field_name for r in log], ["Status", "Owner"])

    def test_warning_is_logged(self) -> None:
        log = WarningLog()
        with self.assertLogs(ROOT_LOGGER_NAME, level="WARNING") as captured:
            log.warn("Ticket", "Status", "Ticket.Status could be null, skipping!")
        self.assertIn("WARN: Ticket.Status could be null, skipping!", captured.output[0])

    def test_clear(self) -> None:
        log = WarningLog()
        log.warn("Ticket", "Status", "msg")
        log.clear()
        self.assertEqual(len(log), 0)
        self.assertTrue(log.warn("Ticket", "Status", "msg"))


class ErrorTests(unittest.TestCase):
    def test_errors_share_a_base(self) -> None:
        self.assertTrue(issubclass(UnknownKindError, GeneratorError))
        self.assertTrue(issubclass(UnmappedNullableError, GeneratorError))

    def test_unknown_kind_message(self) -> None:
        err = UnknownKindError("relation kind", "matview")
        self.assertEqual(str(err), "unknown relation kind: 'matview'")

    def test_failed_result(self) -> None:
        exc = GeneratorError("boom")
        result = GenerationResult.error("failed", exception=exc)
        self.assertFalse(result.success)
        self.assertEqual(result.error_message, "failed")
        self.assertIs(result.exception, exc)
        self.assertEqual(result.code, "")


class LoggingConfigTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    def test_get_logger_namespacing(self) -> None:
        self.assertEqual(get_logger("xogen.codegen").name, "xogen.codegen")
        self.assertEqual(get_logger("templates").name, "xogen.templates")

    def test_setup_logging_rich(self) -> None:
        logger = setup_logging(logging.DEBUG)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], RichHandler)
        self.assertFalse(logger.propagate)

    def test_setup_logging_replaces_handler(self) -> None:
        setup_logging()
        logger = setup_logging("WARNING", use_rich=False)
        self.assertEqual(len(logger.handlers), 1)
        self.assertNotIsInstance(logger.handlers[0], RichHandler)
        self.assertEqual(logger.level, logging.WARNING)

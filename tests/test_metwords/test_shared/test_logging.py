"""Tests for session-aware logging."""

import logging

from metwords.shared import SessionLogger, get_logger


class TestSessionLogger:
    """Tests for SessionLogger."""

    def test_component_defaults_to_module_name(self) -> None:
        """Test the component is derived from the logger name."""
        logger = get_logger("metwords.tree.walker")
        assert isinstance(logger, SessionLogger)
        assert logger.component == "walker"
        assert logger.session_id is None

    def test_records_carry_session_info(self, caplog) -> None:
        """Test session id, component and extra fields reach the record."""
        logger = get_logger("metwords.test", "page-1", "annotator")
        with caplog.at_level(logging.DEBUG, logger="metwords.test"):
            logger.debug("Annotated range", extra={"word": "cat"})
        (record,) = caplog.records
        assert record.session_id == "page-1"
        assert record.component == "annotator"
        assert record.word == "cat"
        assert record.getMessage() == "Annotated range"

    def test_levels(self, caplog) -> None:
        """Test each helper logs at its level."""
        logger = get_logger("metwords.test")
        with caplog.at_level(logging.DEBUG, logger="metwords.test"):
            logger.info("info")
            logger.warning("warning")
            logger.error("error", exc_info=False)
        assert [r.levelno for r in caplog.records] == [
            logging.INFO, logging.WARNING, logging.ERROR,
        ]

    def test_sessions_do_not_share_fields(self, caplog) -> None:
        """Test two sessions on one module logger keep their own ids."""
        first = get_logger("metwords.test", "page-1")
        second = get_logger("metwords.test", "page-2")
        with caplog.at_level(logging.INFO, logger="metwords.test"):
            first.info("one", extra={"marker": 1})
            second.info("two")
        assert [r.session_id for r in caplog.records] == ["page-1", "page-2"]
        assert not hasattr(caplog.records[1], "marker")

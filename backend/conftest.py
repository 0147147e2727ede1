"""Root conftest: test environment and structlog routing shared by every package."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import _serialize_enums

# .env.tests turns on strict invariants for everything the tests build
load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")


def _configure_test_logging() -> None:
    """Send structlog events through stdlib logging so caplog sees them.

    No handlers are installed here; pytest's capture handler is the only sink.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


_configure_test_logging()


@pytest.fixture(autouse=True)
def _reset_log_context():
    """Drop participant_id and other bound context between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()

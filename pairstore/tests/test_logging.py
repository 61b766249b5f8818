import logging

import pytest

from pairstore.config.settings import Settings
from pairstore.core.store import AssociationStore
from pairstore.observability.logging import log_event
from pairstore.storage.sqlite_store import SqliteKVBackend
from pairstore.util.logger import configure_logging, logger, reset_logging


@pytest.fixture
def clean_logger():
    reset_logging()
    yield logger
    reset_logging()


def test_import_installs_no_output_handlers(clean_logger):
    assert clean_logger.propagate is True
    assert all(isinstance(handler, logging.NullHandler) for handler in clean_logger.handlers)


def test_configure_logging_without_file(clean_logger, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    configure_logging(Settings(log_level="debug"))

    assert clean_logger.level == logging.DEBUG
    assert clean_logger.propagate is True
    assert not any(isinstance(handler, logging.FileHandler) for handler in clean_logger.handlers)
    assert list(tmp_path.iterdir()) == []


def test_configure_logging_with_file_is_repeatable(clean_logger, tmp_path):
    log_file = tmp_path / "logs" / "pairstore.log"
    configure_logging(Settings(log_level="info", log_file=str(log_file)))
    configure_logging(Settings(log_level="info", log_file=str(log_file)))

    file_handlers = [h for h in clean_logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    clean_logger.info("hello file")
    file_handlers[0].flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_log_event_reaches_host_handlers(clean_logger, caplog):
    caplog.set_level(logging.INFO, logger="pairstore")
    log_event("scope_cleared", scope="acme", removed=4)

    assert "event=scope_cleared" in caplog.text
    assert "scope='acme'" in caplog.text
    assert "removed=4" in caplog.text


@pytest.mark.asyncio
async def test_scope_clear_is_logged(clean_logger, caplog, tmp_path):
    caplog.set_level(logging.INFO, logger="pairstore")
    store = AssociationStore(SqliteKVBackend(db_path=str(tmp_path / "pairs.db")))
    await store.save("acme", "1", "2")

    assert await store.delete_all_for_scope("acme") is True
    records = [r for r in caplog.records if r.name == "pairstore.events"]
    assert any("removed=2" in r.getMessage() for r in records)

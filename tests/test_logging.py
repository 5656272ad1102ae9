import subprocess
import sys

from loguru import logger

from taggg.engine import TagEngine
from taggg.logging_config import setup_logging


EMBEDDED = """
import sqlalchemy as sa
from taggg import TagEngine

tags = TagEngine(sa.create_engine("sqlite://")).init()
tags.write(1, "dc:title", "x", 1)
assert tags.exists(1, "dc:title", "x", 1)
"""


def test_embedded_use_is_silent():
    """Test importing the library adds no output of its own"""
    result = subprocess.run(
        [sys.executable, "-c", EMBEDDED],
        capture_output=True,
        text=True,
        check=True,
    )
    
    assert result.stderr == ""
    assert result.stdout == ""


def test_setup_logging_enables_records(engine):
    setup_logging("DEBUG")
    messages = []
    sink = logger.add(messages.append, level="DEBUG")
    try:
        TagEngine(engine).init().write(1, "dc:title", "x", 1)
    finally:
        logger.remove(sink)
        logger.disable("taggg")
    
    assert any("taggg.store.resolver" in message.record["name"] for message in messages)

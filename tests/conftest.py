# declguard test configuration

import logging
import textwrap

import pytest

from declguard.engine.policy import PolicyEngine
from declguard.logging_config import PACKAGE_LOGGER


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer env vars from leaking into config tests."""
    for var in (
        "DECLGUARD_CONFIG",
        "DECLGUARD_ALLOWED_FILE_PATTERNS",
        "DECLGUARD_ALLOWED_TYPE_SUFFIXES",
        "DECLGUARD_LOG_LEVEL",
        "DECLGUARD_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo configure_logging, which every CLI invocation calls."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    saved = package_logger.handlers[:], package_logger.level, package_logger.propagate
    yield
    package_logger.handlers, level, package_logger.propagate = saved
    package_logger.setLevel(level)


@pytest.fixture
def engine():
    """Engine with the default '*.d.ts' / 'Props' configuration."""
    return PolicyEngine()


@pytest.fixture
def config_file(tmp_path):
    """Write a declguard config with legacy exclusions."""
    f = tmp_path / "declguard.yaml"
    f.write_text(textwrap.dedent("""\
        declguard:
          allowedFilePatterns:
            - "*.d.ts"
            - "src/types/*"
            - "!src/types/legacy/*"
          allowedTypeSuffixes:
            - Props
            - State
    """))
    return f

"""Shared fixtures for the leakproof test suite"""

import logging
from pathlib import Path
from typing import Optional

import pytest

from leakproof.ignore import ExclusionManager, LeakProofConfig


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep the real home directory and LEAKPROOF_* settings out of every test"""
    for name in ('LEAKPROOF_EXCLUDE_FILENAME', 'LEAKPROOF_IGNORE_FILENAME',
                 'LEAKPROOF_CACHE_SIZE', 'LEAKPROOF_LOG_LEVEL', 'LEAKPROOF_LOG_FORMAT',
                 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv('LEAKPROOF_HOME', str(home))


@pytest.fixture(autouse=True)
def restore_package_logger():
    """configure_logging() mutates the package logger; undo it after each test"""
    package_logger = logging.getLogger('leakproof')
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(level)
    package_logger.propagate = propagate


@pytest.fixture
def home_dir(tmp_path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def config(home_dir) -> LeakProofConfig:
    return LeakProofConfig(home_dir=home_dir)


@pytest.fixture
def make_manager(project_root, home_dir):
    """Write the three sources and build a manager over them"""

    def factory(home_rules: Optional[str] = None,
                gitignore: Optional[str] = None,
                exclude: Optional[str] = None,
                cache_size: int = 0) -> ExclusionManager:
        if home_rules is not None:
            (home_dir / ".aiexclude").write_text(home_rules)
        if gitignore is not None:
            (project_root / ".gitignore").write_text(gitignore)
        if exclude is not None:
            (project_root / ".aiexclude").write_text(exclude)
        manager_config = LeakProofConfig(home_dir=home_dir, cache_size=cache_size)
        return ExclusionManager(project_root, config=manager_config)

    return factory

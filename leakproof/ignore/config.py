"""
Configuration for leakproof.

Defaults can be overridden with environment variables:
    LEAKPROOF_HOME              directory holding the global exclude file
    LEAKPROOF_EXCLUDE_FILENAME  name of the exclude files (default .aiexclude)
    LEAKPROOF_IGNORE_FILENAME   name of the project ignore file (default .gitignore)
    LEAKPROOF_CACHE_SIZE        verdict cache entries, 0 disables caching
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from .constants import EXCLUDE_FILENAME, GITIGNORE_FILENAME
from leakproof.utils import get_logger

logger = get_logger(__name__)

ENV_HOME = 'LEAKPROOF_HOME'
ENV_EXCLUDE_FILENAME = 'LEAKPROOF_EXCLUDE_FILENAME'
ENV_IGNORE_FILENAME = 'LEAKPROOF_IGNORE_FILENAME'
ENV_CACHE_SIZE = 'LEAKPROOF_CACHE_SIZE'

DEFAULT_CACHE_SIZE = 0


@dataclass
class LeakProofConfig:
    """Where exclusion sources live and how verdicts are cached"""
    home_dir: Path = field(default_factory=Path.home)
    exclude_filename: str = EXCLUDE_FILENAME
    ignore_filename: str = GITIGNORE_FILENAME
    cache_size: int = DEFAULT_CACHE_SIZE

    def __post_init__(self):
        """Validate configuration"""
        self.home_dir = Path(self.home_dir)
        for name in ('exclude_filename', 'ignore_filename'):
            value = getattr(self, name)
            if not value or '/' in value or '\\' in value:
                raise ValueError(f"{name} must be a plain file name, got {value!r}")
        if self.cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {self.cache_size}")

    @property
    def global_exclude_path(self) -> Path:
        return self.home_dir / self.exclude_filename

    def project_ignore_path(self, project_root: Path) -> Path:
        return Path(project_root) / self.ignore_filename

    def project_exclude_path(self, project_root: Path) -> Path:
        return Path(project_root) / self.exclude_filename

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'LeakProofConfig':
        """Build a config with environment variable overrides applied"""
        env = os.environ if environ is None else environ
        overrides: Dict[str, object] = {}

        if env.get(ENV_HOME):
            overrides['home_dir'] = Path(env[ENV_HOME]).expanduser()
        if env.get(ENV_EXCLUDE_FILENAME):
            overrides['exclude_filename'] = env[ENV_EXCLUDE_FILENAME]
        if env.get(ENV_IGNORE_FILENAME):
            overrides['ignore_filename'] = env[ENV_IGNORE_FILENAME]

        cache_size = env.get(ENV_CACHE_SIZE)
        if cache_size:
            try:
                overrides['cache_size'] = int(cache_size)
            except ValueError:
                logger.warning(
                    f"Invalid {ENV_CACHE_SIZE}={cache_size!r}, using {DEFAULT_CACHE_SIZE}"
                )

        return cls(**overrides)

    def to_dict(self) -> Dict[str, object]:
        return {
            'home_dir': str(self.home_dir),
            'exclude_filename': self.exclude_filename,
            'ignore_filename': self.ignore_filename,
            'cache_size': self.cache_size,
        }

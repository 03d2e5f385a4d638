"""
leakproof - keep sensitive paths and content out of AI tool pipelines
"""

__version__ = "1.0.0"

from .guards import (
    ExclusionGuard,
    ExclusionViolation,
    activate,
    extract_candidate,
    extract_output,
)
from .ignore import ExclusionManager, LeakProofConfig, Origin

__all__ = [
    '__version__',
    'ExclusionGuard',
    'ExclusionViolation',
    'activate',
    'extract_candidate',
    'extract_output',
    'ExclusionManager',
    'LeakProofConfig',
    'Origin',
]

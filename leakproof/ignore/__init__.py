"""
Exclusion rule processing for leakproof

This package compiles gitignore-like rule text from three ranked sources
(~/.aiexclude, <project>/.gitignore, <project>/.aiexclude) into one rule set
and evaluates paths, commands and output fragments against it.
"""

from .constants import EXCLUDE_FILENAME, GITIGNORE_FILENAME, Origin
from .config import LeakProofConfig
from .glob_compiler import GlobMatcher, GlobSyntaxError, MatchMode, compile_glob, escape_glob
from .rule_engine import (
    Anchoring,
    BuildResult,
    CompiledRule,
    Diagnostic,
    DiagnosticKind,
    EvaluationVerdict,
    RawPatternLine,
    RuleSet,
    build_rule_set,
    compile_pattern,
    evaluate,
    is_excluded,
    normalize_input,
    summarize,
)
from .file_loader import ExclusionFileLoader, SourceInfo, check_pattern_warnings
from .cache import VerdictCache
from .manager import ExclusionManager
from .init import init_exclude_file, generate_exclude_content

__all__ = [
    'EXCLUDE_FILENAME',
    'GITIGNORE_FILENAME',
    'Origin',
    'LeakProofConfig',
    'GlobMatcher',
    'GlobSyntaxError',
    'MatchMode',
    'compile_glob',
    'escape_glob',
    'Anchoring',
    'BuildResult',
    'CompiledRule',
    'Diagnostic',
    'DiagnosticKind',
    'EvaluationVerdict',
    'RawPatternLine',
    'RuleSet',
    'build_rule_set',
    'compile_pattern',
    'evaluate',
    'is_excluded',
    'normalize_input',
    'summarize',
    'ExclusionFileLoader',
    'SourceInfo',
    'check_pattern_warnings',
    'VerdictCache',
    'ExclusionManager',
    'init_exclude_file',
    'generate_exclude_content',
]

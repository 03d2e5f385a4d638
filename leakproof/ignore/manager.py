"""
Main exclusion manager API: loads ranked sources once and evaluates strings
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .cache import VerdictCache
from .config import LeakProofConfig
from .file_loader import ExclusionFileLoader, SourceInfo
from .rule_engine import (
    Diagnostic, DiagnosticKind, EvaluationVerdict, RuleSet, build_rule_set, evaluate, summarize,
)
from leakproof.utils import get_logger, log_with_context

logger = get_logger(__name__)


class ExclusionManager:
    """
    Builds the combined rule set for a project and answers exclusion checks

    The rule set is immutable once built; evaluate() and is_excluded() may be
    called from any number of threads.
    """

    def __init__(self,
                 project_root: Union[str, Path],
                 config: Optional[LeakProofConfig] = None,
                 auto_load: bool = True):
        """
        Initialize the exclusion manager

        Args:
            project_root: Project directory whose .gitignore/.aiexclude apply
            config: Source locations and cache settings (defaults to environment)
            auto_load: Read sources and build the rule set immediately
        """
        self.project_root = Path(project_root).resolve()
        self.config = config if config is not None else LeakProofConfig.from_env()

        self._file_loader = ExclusionFileLoader()
        self._cache = VerdictCache(self.config.cache_size)

        self._rule_set = RuleSet()
        self._sources: List[SourceInfo] = []
        self._diagnostics: List[Diagnostic] = []

        if auto_load:
            self.reload()

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    @property
    def sources(self) -> List[SourceInfo]:
        return list(self._sources)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def is_active(self) -> bool:
        """False when there are no rules and guards should not be installed"""
        return not self._rule_set.is_empty

    @property
    def pattern_summary(self) -> str:
        return summarize(self._rule_set)

    def reload(self) -> RuleSet:
        """
        Read all sources and rebuild the rule set

        Returns:
            The new rule set
        """
        sources = self._file_loader.load_sources(self.config, self.project_root)
        result = build_rule_set(
            ((source.origin, source.lines) for source in sources),
            self.project_root,
        )

        diagnostics: List[Diagnostic] = []
        for source in sources:
            diagnostics.extend(source.diagnostics)
        diagnostics.extend(result.diagnostics)

        # Swap in the complete state at once
        self._sources = sources
        self._diagnostics = diagnostics
        self._rule_set = result.rule_set
        self._cache.clear()

        for source in sources:
            self._report(source, source.diagnostics)
        for diagnostic in result.diagnostics:
            self._log_diagnostic(diagnostic)

        if result.is_noop:
            logger.warning("No exclusion patterns found.")
        else:
            logger.info(
                f"Loaded {len(self._rule_set.patterns)} exclusion patterns "
                f"({len(self._rule_set)} rules) for {self.project_root}"
            )

        return self._rule_set

    def evaluate(self, text: str) -> EvaluationVerdict:
        """
        Check a string (path, command, output fragment) against the rules

        Args:
            text: Candidate string

        Returns:
            EvaluationVerdict
        """
        cached = self._cache.get(text) if self.config.cache_size else None
        if cached is not None:
            return cached

        verdict = evaluate(text, self._rule_set)
        if self.config.cache_size:
            self._cache.put(text, verdict)

        logger.trace(
            f"Exclusion check for {text!r}: {verdict.excluded} "
            f"(matched: {verdict.matched_pattern})"
        )
        return verdict

    def is_excluded(self, text: str) -> bool:
        return self.evaluate(text).excluded

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about loaded sources and rules"""
        return {
            'project_root': str(self.project_root),
            'active': self.is_active,
            'rule_count': len(self._rule_set),
            'pattern_count': len(self._rule_set.patterns),
            'diagnostic_count': len(self._diagnostics),
            'sources': [
                {
                    'path': str(source.path),
                    'origin': source.origin.name,
                    'exists': source.exists,
                    **source.stats,
                }
                for source in self._sources
            ],
            'cache': self._cache.get_stats(),
        }

    def _report(self, source: SourceInfo, diagnostics: List[Diagnostic]):
        for diagnostic in diagnostics:
            if diagnostic.kind is DiagnosticKind.SOURCE_UNREADABLE and not source.exists:
                # A missing source is the common case, not a problem
                logger.debug(diagnostic.message)
            else:
                self._log_diagnostic(diagnostic)

    def _log_diagnostic(self, diagnostic: Diagnostic):
        location = ""
        if diagnostic.origin is not None and diagnostic.line:
            location = f" [{diagnostic.origin.name} line {diagnostic.line}]"
        log_with_context(
            logger,
            logging.WARNING,
            f"{diagnostic.message}{location}",
            kind=diagnostic.kind.value,
            origin=diagnostic.origin.name if diagnostic.origin is not None else None,
            line=diagnostic.line,
            pattern=diagnostic.pattern,
            source=str(diagnostic.source) if diagnostic.source else None,
        )

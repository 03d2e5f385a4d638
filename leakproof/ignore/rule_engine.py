"""
Rule engine for pattern compilation and precedence evaluation

Rules from every source are compiled in ascending precedence and
declaration order, then reversed so that evaluation stops at the
most recently declared matching rule.

Nothing in this module performs I/O or logging. Problems are returned as
Diagnostic values for the caller to report.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from .constants import COMMENT_PREFIX, NEGATION_PREFIX, Origin
from .glob_compiler import GlobSyntaxError, MatchMode, compile_glob, escape_glob

Matcher = Callable[[str], bool]
GlobCompiler = Callable[[str, MatchMode], Matcher]


class Anchoring(Enum):
    """Which variant of a pattern a compiled rule represents"""
    RELATIVE = "relative"  # bare pattern, must match the whole input
    ROOT = "root"          # project-root prefixed, may appear anywhere in the input


class DiagnosticKind(Enum):
    SOURCE_UNREADABLE = "source_unreadable"
    PATTERN_UNPARSABLE = "pattern_unparsable"


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal problem found while loading or compiling rules"""
    kind: DiagnosticKind
    message: str
    pattern: str = ""
    origin: Optional[Origin] = None
    line: int = 0
    source: Optional[Path] = None


@dataclass(frozen=True)
class RawPatternLine:
    """One line of rule text and where it came from"""
    text: str
    origin: Origin
    line: int = 0


@dataclass(frozen=True)
class CompiledRule:
    source_pattern: str
    matcher: Matcher = field(compare=False)
    negated: bool
    anchoring: Anchoring
    origin: Optional[Origin] = None


@dataclass(frozen=True)
class RuleSet:
    """
    Compiled rules in evaluation order (highest precedence first) plus the
    original pattern text in declaration order.
    """
    rules: Tuple[CompiledRule, ...] = ()
    patterns: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.rules

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[CompiledRule]:
        return iter(self.rules)


@dataclass(frozen=True)
class EvaluationVerdict:
    excluded: bool
    matched_pattern: Optional[str] = None
    origin: Optional[Origin] = None

    def __bool__(self) -> bool:
        return self.excluded


@dataclass
class CompileResult:
    rules: List[CompiledRule] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass
class BuildResult:
    rule_set: RuleSet
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        """True when there is nothing to enforce and no guard should be installed"""
        return self.rule_set.is_empty


def is_pattern_line(text: str) -> bool:
    """Check whether a trimmed line carries a pattern"""
    return bool(text) and not text.startswith(COMMENT_PREFIX)


def normalize_root(project_root: Union[str, Path]) -> str:
    """Forward-slash form of the project root without a trailing separator"""
    return str(project_root).replace('\\', '/').rstrip('/')


def compile_pattern(raw_line: str,
                    project_root: Union[str, Path],
                    origin: Optional[Origin] = None,
                    line: int = 0,
                    glob_compiler: GlobCompiler = compile_glob) -> CompileResult:
    """
    Compile one line of rule text into at most two rules

    Args:
        raw_line: Line as read from the source (trimmed here)
        project_root: Absolute project root used by the ROOT variant
        origin: Source the line came from
        line: 1-based line number, for diagnostics
        glob_compiler: Factory turning (glob, mode) into a matcher

    Returns:
        CompileResult with 0..2 rules and any diagnostics
    """
    result = CompileResult()
    pattern = raw_line.strip()
    if not is_pattern_line(pattern):
        return result

    negated = pattern.startswith(NEGATION_PREFIX)
    effective = pattern[1:] if negated else pattern
    if not effective:
        return result

    if effective.endswith('/'):
        effective += '**'
    if effective.startswith('/'):
        effective = effective[1:]

    root = normalize_root(project_root)
    variants = (
        (Anchoring.RELATIVE, effective, MatchMode.FULL),
        (Anchoring.ROOT, f"{escape_glob(root)}/{effective}", MatchMode.CONTAINS),
    )

    for anchoring, glob, mode in variants:
        try:
            matcher = glob_compiler(glob, mode)
        except GlobSyntaxError as e:
            result.diagnostics.append(Diagnostic(
                kind=DiagnosticKind.PATTERN_UNPARSABLE,
                message=f"Could not parse pattern {pattern!r} ({anchoring.value}), skipping: {e.reason}",
                pattern=pattern,
                origin=origin,
                line=line,
            ))
            continue
        result.rules.append(CompiledRule(
            source_pattern=pattern,
            matcher=matcher,
            negated=negated,
            anchoring=anchoring,
            origin=origin,
        ))

    return result


def _as_raw_lines(origin: Origin,
                  lines: Iterable[Union[RawPatternLine, str]]) -> Iterator[RawPatternLine]:
    for number, entry in enumerate(lines, 1):
        if isinstance(entry, RawPatternLine):
            yield entry
        else:
            yield RawPatternLine(text=entry, origin=origin, line=number)


def build_rule_set(sources: Iterable[Tuple[Origin, Iterable[Union[RawPatternLine, str]]]],
                   project_root: Union[str, Path],
                   glob_compiler: GlobCompiler = compile_glob) -> BuildResult:
    """
    Aggregate rules from ranked sources into one RuleSet

    Args:
        sources: (origin, lines) pairs in ascending precedence order
        project_root: Absolute project root
        glob_compiler: Factory turning (glob, mode) into a matcher

    Returns:
        BuildResult; an empty rule set means enforcement is a no-op
    """
    compiled: List[CompiledRule] = []
    patterns: List[str] = []
    seen = set()
    diagnostics: List[Diagnostic] = []

    for origin, lines in sources:
        for raw in _as_raw_lines(origin, lines):
            text = raw.text.strip()
            if not is_pattern_line(text):
                continue

            result = compile_pattern(text, project_root, raw.origin, raw.line, glob_compiler)
            diagnostics.extend(result.diagnostics)
            compiled.extend(result.rules)

            if result.rules and text not in seen:
                seen.add(text)
                patterns.append(text)

    compiled.reverse()
    return BuildResult(
        rule_set=RuleSet(rules=tuple(compiled), patterns=tuple(patterns)),
        diagnostics=diagnostics,
    )


def normalize_input(text: str) -> str:
    """Replace backslashes with forward slashes; nothing else changes"""
    return text.replace('\\', '/')


def evaluate(text: str, rule_set: RuleSet) -> EvaluationVerdict:
    """
    Test a string against a rule set

    The first rule whose matcher accepts the normalized input decides the
    verdict; a negated rule re-allows the input.
    """
    normalized = normalize_input(text)
    for rule in rule_set.rules:
        if rule.matcher(normalized):
            return EvaluationVerdict(
                excluded=not rule.negated,
                matched_pattern=rule.source_pattern,
                origin=rule.origin,
            )
    return EvaluationVerdict(excluded=False)


def is_excluded(text: str, rule_set: RuleSet) -> bool:
    return evaluate(text, rule_set).excluded


def summarize(rule_set: RuleSet) -> str:
    """Comma-separated original patterns, for rejection messages"""
    return ', '.join(rule_set.patterns)

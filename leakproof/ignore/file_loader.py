"""
File loader for reading exclusion sources
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from .config import LeakProofConfig
from .constants import COMMENT_PREFIX, NEGATION_PREFIX, Origin
from .rule_engine import Diagnostic, DiagnosticKind, RawPatternLine


@dataclass
class SourceInfo:
    """Lines read from one exclusion source"""
    path: Path
    origin: Origin
    lines: List[RawPatternLine] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    exists: bool = False
    stats: Dict[str, int] = field(default_factory=lambda: {
        'total_lines': 0,
        'empty_lines': 0,
        'comment_lines': 0,
        'pattern_lines': 0,
    })

    @property
    def is_readable(self) -> bool:
        """True if the source was read without problems"""
        return self.exists and not self.diagnostics

    @property
    def patterns(self) -> List[str]:
        """Trimmed pattern lines, comments and blanks removed"""
        return [line.text.strip() for line in self.lines
                if line.text.strip() and not line.text.strip().startswith(COMMENT_PREFIX)]


class ExclusionFileLoader:
    """
    Reads exclusion sources. Never raises: a missing or unreadable source
    loads as empty and carries a SOURCE_UNREADABLE diagnostic.
    """

    def load(self, file_path: Union[str, Path], origin: Origin) -> SourceInfo:
        """
        Load one exclusion source

        Args:
            file_path: Path to the source file
            origin: Precedence rank of the source

        Returns:
            SourceInfo with raw lines and diagnostics
        """
        file_path = Path(file_path)
        info = SourceInfo(path=file_path, origin=origin)

        if not file_path.exists():
            info.diagnostics.append(Diagnostic(
                kind=DiagnosticKind.SOURCE_UNREADABLE,
                message=f"File not found: {file_path}",
                origin=origin,
                source=file_path,
            ))
            return info

        info.exists = True
        try:
            content = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            info.diagnostics.append(Diagnostic(
                kind=DiagnosticKind.SOURCE_UNREADABLE,
                message=f"Failed to read config at {file_path}: {e}",
                origin=origin,
                source=file_path,
            ))
            return info

        self._parse_into(info, content)
        return info

    def parse(self, content: str, origin: Origin, path: Union[str, Path] = '<string>') -> SourceInfo:
        """Parse rule text that did not come from disk"""
        info = SourceInfo(path=Path(path), origin=origin, exists=True)
        self._parse_into(info, content)
        return info

    def _parse_into(self, info: SourceInfo, content: str) -> None:
        # Same split as the file reader: \n or \r\n, a lone trailing newline
        # leaves one empty last line
        raw_lines = content.split('\n')
        info.stats['total_lines'] = len(raw_lines)

        for line_num, line in enumerate(raw_lines, 1):
            line = line[:-1] if line.endswith('\r') else line
            stripped = line.strip()

            if not stripped:
                info.stats['empty_lines'] += 1
            elif stripped.startswith(COMMENT_PREFIX):
                info.stats['comment_lines'] += 1
            else:
                info.stats['pattern_lines'] += 1

            info.lines.append(RawPatternLine(text=line, origin=info.origin, line=line_num))

    def load_sources(self, config: LeakProofConfig,
                     project_root: Union[str, Path]) -> List[SourceInfo]:
        """
        Load the three ranked sources in ascending precedence

        Returns:
            [global exclude, project ignore, project exclude]
        """
        project_root = Path(project_root)
        return [
            self.load(config.global_exclude_path, Origin.GLOBAL),
            self.load(config.project_ignore_path(project_root), Origin.PROJECT_IGNORE),
            self.load(config.project_exclude_path(project_root), Origin.PROJECT_EXCLUDE),
        ]


def check_pattern_warnings(pattern: str) -> List[str]:
    """
    Check pattern for potential issues that aren't errors

    Args:
        pattern: Trimmed pattern line

    Returns:
        List of warning messages
    """
    warnings = []
    body = pattern[1:] if pattern.startswith(NEGATION_PREFIX) else pattern

    if '\\' in body:
        warnings.append(
            "Pattern contains backslash. Inputs are matched with forward slashes "
            "and backslash escapes the next character."
        )

    if body in ('*', '**', '**/*', '/**'):
        warnings.append(
            "Very broad pattern - will exclude nearly every path and command"
        )

    if body.startswith(NEGATION_PREFIX):
        warnings.append(
            "Only the first '!' negates; a file name starting with '!' cannot be matched"
        )

    if '/' not in body.rstrip('/') and not body.startswith('*'):
        warnings.append(
            f"Pattern only matches '{body}' at the project root. "
            f"Use '**/{body}' to match it in any directory."
        )

    return warnings

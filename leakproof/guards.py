"""
Pre- and post-operation guards for a host tool pipeline

The host hands each tool call to the guards before it runs (path or command
about to be used) and after it ran (its output). An excluded string raises
ExclusionViolation, which the host must treat as a failure of that single
operation.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from leakproof.ignore import ExclusionManager, LeakProofConfig
from leakproof.ignore.constants import HOOK_AFTER, HOOK_BEFORE, MESSAGE_PREFIX
from leakproof.utils import get_logger

logger = get_logger(__name__)

HookFn = Callable[[Any, Optional[Mapping[str, Any]]], None]


class ExclusionViolation(Exception):
    """Raised when a path, command or output matches the exclusion rules."""

    def __init__(self, message: str, content: str, patterns: str):
        super().__init__(message)
        self.content = content
        self.patterns = patterns


def format_rejection(subject: str, content: str, patterns: str) -> str:
    return (
        f"{MESSAGE_PREFIX} {subject} `{content}` rejected due to sensitive content exclusions. "
        f"PAY ATTENTION TO THESE EXCLUSIONS GOING FORWARD: {patterns}"
    )


class ExclusionGuard:
    """Blocks operations whose input or output is excluded"""

    def __init__(self, manager: ExclusionManager):
        self.manager = manager

    def check_before(self, candidate: Optional[str]) -> None:
        """
        Check a path or command before the operation runs

        Raises:
            ExclusionViolation: If the candidate is excluded
        """
        if not candidate:
            return
        if self.manager.is_excluded(candidate):
            self._reject("Content", candidate)

    def check_after(self, output: Any) -> None:
        """
        Check operation output: a string, or a sequence whose string
        elements are checked in order (other elements are ignored)

        Raises:
            ExclusionViolation: On the first excluded string
        """
        if not output:
            return
        if isinstance(output, str):
            elements: Iterable[Any] = (output,)
        elif isinstance(output, (list, tuple)):
            elements = output
        else:
            return

        for element in elements:
            if isinstance(element, str) and self.manager.is_excluded(element):
                self._reject("Output", element)

    def _reject(self, subject: str, content: str) -> None:
        patterns = self.manager.pattern_summary
        message = format_rejection(subject, content, patterns)
        logger.error(message)
        raise ExclusionViolation(message, content=content, patterns=patterns)


def _section(event: Any, key: str) -> Mapping[str, Any]:
    """event[key] when both are mappings, otherwise an empty mapping"""
    if not isinstance(event, Mapping):
        return {}
    value = event.get(key)
    return value if isinstance(value, Mapping) else {}


def extract_candidate(event: Optional[Mapping[str, Any]]) -> Optional[str]:
    """The file path, or failing that the command, of a tool call event"""
    args = _section(event, 'args')
    candidate = args.get('filePath') or args.get('command')
    return candidate if isinstance(candidate, str) else None


def extract_output(event: Optional[Mapping[str, Any]]) -> Any:
    """The output of a finished tool call, falling back to metadata.output"""
    if not isinstance(event, Mapping):
        return None
    output = event.get('output')
    if not output:
        output = _section(event, 'metadata').get('output')
    return output


def activate(project_root: Union[str, Path],
             config: Optional[LeakProofConfig] = None) -> Dict[str, HookFn]:
    """
    Build the guard hooks for a project

    Args:
        project_root: Project directory
        config: Source locations (defaults to environment)

    Returns:
        Empty dict when there are no exclusion rules (install nothing),
        otherwise the before/after hook callables keyed by hook name
    """
    manager = ExclusionManager(project_root, config=config)
    if not manager.is_active:
        return {}

    guard = ExclusionGuard(manager)

    def before(tool_input: Any, event: Optional[Mapping[str, Any]] = None) -> None:
        guard.check_before(extract_candidate(event))

    def after(tool_input: Any, event: Optional[Mapping[str, Any]] = None) -> None:
        guard.check_after(extract_output(event))

    return {
        HOOK_BEFORE: before,
        HOOK_AFTER: after,
    }

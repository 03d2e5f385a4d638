#!/usr/bin/env python3
"""
leakproof command line interface

    leakproof check [--root DIR] [--json] STRING...
    leakproof patterns [--root DIR] [--lint]
    leakproof hook {before,after} [--root DIR]   < event.json
    leakproof init [DIR] [--force] [--minimal] [--add PATTERN]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from leakproof import __version__
from leakproof.guards import ExclusionGuard, ExclusionViolation, extract_candidate, extract_output
from leakproof.ignore import DiagnosticKind, ExclusionManager, check_pattern_warnings, init_exclude_file
from leakproof.ignore.constants import EXCLUDE_FILENAME
from leakproof.utils import configure_logging

EXIT_OK = 0
EXIT_EXCLUDED = 1
EXIT_ERROR = 1
EXIT_BLOCKED = 2


def cmd_check(args: argparse.Namespace, stdout: TextIO) -> int:
    manager = ExclusionManager(args.root)
    results = []
    for text in args.strings:
        verdict = manager.evaluate(text)
        results.append({
            'input': text,
            'excluded': verdict.excluded,
            'matched_pattern': verdict.matched_pattern,
            'origin': verdict.origin.name if verdict.origin is not None else None,
        })

    if args.json:
        print(json.dumps(results, indent=2), file=stdout)
    else:
        for result in results:
            if result['excluded']:
                print(f"EXCLUDED  {result['input']}  ({result['matched_pattern']})", file=stdout)
            else:
                print(f"allowed   {result['input']}", file=stdout)

    return EXIT_EXCLUDED if any(r['excluded'] for r in results) else EXIT_OK


def cmd_patterns(args: argparse.Namespace, stdout: TextIO) -> int:
    manager = ExclusionManager(args.root)
    rule_set = manager.rule_set

    if rule_set.is_empty:
        print("# No exclusion patterns found", file=stdout)
    else:
        print(f"# {len(rule_set.patterns)} patterns, {len(rule_set)} rules", file=stdout)
        for pattern in rule_set.patterns:
            print(pattern, file=stdout)
            if args.lint:
                for warning in check_pattern_warnings(pattern):
                    print(f"#   warning: {warning}", file=stdout)

    for source in manager.sources:
        state = "loaded" if source.exists else "missing"
        print(f"# {source.origin.name:<16} {state:<8} {source.path}", file=stdout)
        if source.exists:
            for diagnostic in source.diagnostics:
                print(f"# {diagnostic.kind.value}: {diagnostic.message}", file=stdout)

    for diagnostic in manager.diagnostics:
        if diagnostic.kind is DiagnosticKind.PATTERN_UNPARSABLE:
            print(f"# {diagnostic.kind.value}: {diagnostic.message}", file=stdout)

    return EXIT_OK


def cmd_hook(args: argparse.Namespace, stdin: TextIO, stderr: TextIO) -> int:
    try:
        raw = stdin.read()
        event = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as e:
        print(f"Error: invalid hook event JSON: {e}", file=stderr)
        return EXIT_ERROR

    if not isinstance(event, dict):
        print("Error: hook event must be a JSON object", file=stderr)
        return EXIT_ERROR

    manager = ExclusionManager(args.root)
    if not manager.is_active:
        return EXIT_OK

    guard = ExclusionGuard(manager)
    try:
        if args.stage == 'before':
            guard.check_before(extract_candidate(event))
        else:
            guard.check_after(extract_output(event))
    except ExclusionViolation as e:
        print(str(e), file=stderr)
        return EXIT_BLOCKED

    return EXIT_OK


def cmd_init(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    path = Path(args.path)
    if not path.is_dir():
        print(f"Error: {path} is not a directory", file=stderr)
        return EXIT_ERROR

    created = init_exclude_file(
        path=path,
        force=args.force,
        minimal=args.minimal,
        custom_patterns=args.patterns,
    )

    exclude_path = path / EXCLUDE_FILENAME
    if created:
        print(f"Created {exclude_path}", file=stdout)
        return EXIT_OK

    print(f"{exclude_path} already exists. Use --force to overwrite.", file=stderr)
    return EXIT_ERROR


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser"""
    parser = argparse.ArgumentParser(
        prog='leakproof',
        description='Keep sensitive paths and content out of AI tool pipelines'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--log-level', help='Log level (TRACE, DEBUG, INFO, WARNING, ERROR)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    check = subparsers.add_parser('check', help='Check strings against the exclusion rules')
    check.add_argument('strings', nargs='+', help='Paths, commands or output fragments')
    check.add_argument('--root', default='.', help='Project root (default: current directory)')
    check.add_argument('--json', action='store_true', help='Output JSON')

    patterns = subparsers.add_parser('patterns', help='Show the combined exclusion patterns')
    patterns.add_argument('--root', default='.', help='Project root (default: current directory)')
    patterns.add_argument('--lint', action='store_true', help='Show warnings for suspicious patterns')

    hook = subparsers.add_parser('hook', help='Run a guard on a JSON tool event read from stdin')
    hook.add_argument('stage', choices=['before', 'after'], help='Guard to run')
    hook.add_argument('--root', default='.', help='Project root (default: current directory)')

    init = subparsers.add_parser('init', help=f'Create a starter {EXCLUDE_FILENAME}')
    init.add_argument(
        'path',
        nargs='?',
        default='.',
        help=f'Directory where to create {EXCLUDE_FILENAME} (default: current directory)'
    )
    init.add_argument('--force', '-f', action='store_true', help=f'Overwrite existing {EXCLUDE_FILENAME}')
    init.add_argument('--minimal', '-m', action='store_true', help='Only essential patterns')
    init.add_argument(
        '--add', '-a',
        action='append',
        dest='patterns',
        help='Add custom pattern (can be used multiple times)'
    )

    return parser


def main(argv: Optional[List[str]] = None,
         stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None,
         stderr: Optional[TextIO] = None) -> int:
    """Main entry point"""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level)

    if args.command == 'check':
        return cmd_check(args, stdout)
    if args.command == 'patterns':
        return cmd_patterns(args, stdout)
    if args.command == 'hook':
        return cmd_hook(args, stdin, stderr)
    return cmd_init(args, stdout, stderr)


if __name__ == "__main__":
    sys.exit(main())

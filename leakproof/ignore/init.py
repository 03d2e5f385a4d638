"""
Initialize .aiexclude files with secret-oriented defaults
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .constants import DEFAULT_EXCLUSIONS, EXCLUDE_FILENAME, MINIMAL_EXCLUSIONS

CATEGORY_MARKERS = {
    "Environment files": ['.env'],
    "Keys and certificates": ['.key', '.pem', '.p12', '.pfx', 'id_rsa', 'id_ed25519'],
    "Credential stores": ['credentials', 'secrets.y', '.netrc', '.npmrc', '.pypirc'],
    "Infrastructure state": ['.tfstate', '.tfvars', '.docker/', '.kube/'],
    "Directories": ['secrets/', '.ssh/', '.aws/', '.gnupg/'],
}


def categorize_patterns(patterns: List[str]) -> Dict[str, List[str]]:
    """
    Group patterns by category, keeping declaration order within a group

    Grouping reorders patterns across categories. A '!' pattern must land in
    the same category as every pattern it overrides, or the generated file
    gets a different precedence than the list it was built from.
    """
    categories: Dict[str, List[str]] = {name: [] for name in CATEGORY_MARKERS}
    categories["Other"] = []

    for pattern in patterns:
        for name, markers in CATEGORY_MARKERS.items():
            if any(marker in pattern for marker in markers):
                categories[name].append(pattern)
                break
        else:
            categories["Other"].append(pattern)

    return categories


def generate_exclude_content(custom_patterns: Optional[List[str]] = None,
                             minimal: bool = False) -> str:
    """
    Generate content for a .aiexclude file

    Args:
        custom_patterns: Additional patterns to include
        minimal: Generate minimal file with just essential patterns

    Returns:
        Content for .aiexclude file
    """
    lines = [
        f"# {EXCLUDE_FILENAME} - leakproof exclusion patterns",
        f"# Generated on {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "#",
        "# Paths, commands and tool output matching these patterns are blocked.",
        "# Patterns use gitignore-like syntax and are matched from the project root.",
        "# Later lines win; use ! to re-allow something an earlier line excluded.",
        "",
    ]

    defaults = MINIMAL_EXCLUSIONS if minimal else DEFAULT_EXCLUSIONS
    # Each negation sits in the same category as the pattern it overrides
    for category, patterns in categorize_patterns(defaults).items():
        if patterns:
            lines.extend([
                f"# {category}",
                f"# {'-' * len(category)}",
            ])
            lines.extend(patterns)
            lines.append("")

    if custom_patterns:
        lines.extend([
            "# Custom patterns",
            "# ---------------",
        ])
        lines.extend(custom_patterns)
        lines.append("")

    lines.extend([
        "# Additional patterns for your project",
        "# -----------------------------------",
        "# Examples:",
        "# **/*.sqlite          # Local databases",
        "# config/prod/**       # Production configuration",
        "# !config/prod/README.md",
        "",
    ])

    return '\n'.join(lines)


def init_exclude_file(path: Path,
                      force: bool = False,
                      minimal: bool = False,
                      custom_patterns: Optional[List[str]] = None) -> bool:
    """
    Initialize a .aiexclude file in the given directory

    Args:
        path: Directory where to create .aiexclude
        force: Overwrite existing file
        minimal: Create minimal file instead of comprehensive
        custom_patterns: Additional patterns to include

    Returns:
        True if file was created, False if already exists and not forced
    """
    exclude_path = Path(path) / EXCLUDE_FILENAME

    if exclude_path.exists() and not force:
        return False

    content = generate_exclude_content(custom_patterns=custom_patterns, minimal=minimal)
    exclude_path.write_text(content, encoding='utf-8')
    return True

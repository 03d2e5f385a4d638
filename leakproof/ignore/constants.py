"""
Central configuration for exclusion file processing
"""

from enum import IntEnum


class Origin(IntEnum):
    """Ranked source of a pattern, in ascending precedence"""
    GLOBAL = 0           # ~/.aiexclude
    PROJECT_IGNORE = 1   # <project>/.gitignore
    PROJECT_EXCLUDE = 2  # <project>/.aiexclude


# Single source of truth for exclusion filenames
EXCLUDE_FILENAME = ".aiexclude"
GITIGNORE_FILENAME = ".gitignore"

NEGATION_PREFIX = "!"
COMMENT_PREFIX = "#"

# Prefix used for every message surfaced to the host pipeline
MESSAGE_PREFIX = "[leakproof]"

# Keys of the hook mapping returned by activate()
HOOK_BEFORE = "tool.execute.before"
HOOK_AFTER = "tool.execute.after"

# Starter patterns written by `leakproof init`
DEFAULT_EXCLUSIONS = [
    # Environment files
    "**/*.env",
    ".env.*",
    "!.env.example",
    "!.env.template",

    # Keys and certificates
    "**/*.key",
    "**/*.pem",
    "**/*.p12",
    "**/*.pfx",
    "**/id_rsa*",
    "**/id_ed25519*",

    # Credential stores
    "**/credentials.json",
    "**/secrets.yaml",
    "**/secrets.yml",
    ".netrc",
    ".npmrc",
    ".pypirc",

    # Directories
    "secrets/",
    ".ssh/",
    ".aws/",
    ".gnupg/",
    ".docker/config.json",
    ".kube/config",

    # Terraform state
    "**/*.tfstate",
    "**/*.tfstate.*",
    "**/*.tfvars",
]

MINIMAL_EXCLUSIONS = [
    "**/*.env",
    "!.env.example",
    "**/*.key",
    "**/*.pem",
    "secrets/",
    ".ssh/",
]

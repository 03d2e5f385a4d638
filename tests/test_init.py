#!/usr/bin/env python3
"""
Tests for .aiexclude file initialization
"""

import pytest

from leakproof.ignore import ExclusionFileLoader, LeakProofConfig, Origin, build_rule_set, is_excluded
from leakproof.ignore.constants import DEFAULT_EXCLUSIONS, MINIMAL_EXCLUSIONS
from leakproof.ignore.init import categorize_patterns, generate_exclude_content, init_exclude_file


def patterns_of(content):
    return ExclusionFileLoader().parse(content, Origin.PROJECT_EXCLUDE).patterns


def test_default_content_contains_every_default():
    content = generate_exclude_content()
    assert content.startswith("# .aiexclude")
    assert patterns_of(content) == [p for ps in categorize_patterns(DEFAULT_EXCLUSIONS).values() for p in ps]
    assert set(patterns_of(content)) == set(DEFAULT_EXCLUSIONS)


def test_minimal_content():
    content = generate_exclude_content(minimal=True)
    assert set(patterns_of(content)) == set(MINIMAL_EXCLUSIONS)
    assert "**/*.tfstate" not in content


def test_custom_patterns_come_last():
    content = generate_exclude_content(custom_patterns=["*.sqlite", "!keep.sqlite"], minimal=True)
    assert "# Custom patterns" in content
    assert patterns_of(content)[-2:] == ["*.sqlite", "!keep.sqlite"]


def test_negations_stay_after_what_they_override():
    categories = categorize_patterns(DEFAULT_EXCLUSIONS)
    env = categories["Environment files"]
    assert env.index("**/*.env") < env.index("!.env.example")


def test_generated_defaults_block_secrets(tmp_path):
    init_exclude_file(tmp_path)
    content = (tmp_path / ".aiexclude").read_text()
    rule_set = build_rule_set([(Origin.PROJECT_EXCLUDE, content.split('\n'))], tmp_path).rule_set

    for path in (".env", "deploy/prod.env", ".env.local", "certs/server.pem",
                 ".ssh/id_rsa", "secrets/token", "infra/main.tfstate"):
        assert is_excluded(path, rule_set), path
    for path in (".env.example", "src/app.py", "README.md"):
        assert not is_excluded(path, rule_set), path


def test_init_creates_file(tmp_path):
    assert init_exclude_file(tmp_path) is True
    assert (tmp_path / ".aiexclude").exists()


def test_init_refuses_to_overwrite(tmp_path):
    path = tmp_path / ".aiexclude"
    path.write_text("mine\n")
    assert init_exclude_file(tmp_path) is False
    assert path.read_text() == "mine\n"


def test_init_force_overwrites(tmp_path):
    path = tmp_path / ".aiexclude"
    path.write_text("mine\n")
    assert init_exclude_file(tmp_path, force=True, custom_patterns=["*.db"]) is True
    assert "*.db" in path.read_text()


def test_generated_file_is_picked_up_by_loader(tmp_path):
    init_exclude_file(tmp_path, minimal=True)
    sources = ExclusionFileLoader().load_sources(LeakProofConfig(home_dir=tmp_path / "home"), tmp_path)
    assert sources[2].patterns == patterns_of(generate_exclude_content(minimal=True))


@pytest.mark.parametrize("minimal,defaults", [(False, DEFAULT_EXCLUSIONS), (True, MINIMAL_EXCLUSIONS)])
def test_grouping_keeps_declared_precedence(minimal, defaults):
    declared = build_rule_set([(Origin.PROJECT_EXCLUDE, defaults)], "/work/app").rule_set
    content = generate_exclude_content(minimal=minimal)
    generated = build_rule_set([(Origin.PROJECT_EXCLUDE, content.split('\n'))], "/work/app").rule_set

    negated = [p[1:] for p in defaults if p.startswith('!')]
    samples = negated + [p.lstrip('*/').rstrip('/') for p in defaults if not p.startswith('!')]
    samples += [".env", ".env.local", "app/.env", "secrets/key", ".ssh/id_rsa", "README.md"]

    for sample in samples:
        assert is_excluded(sample, generated) == is_excluded(sample, declared), sample

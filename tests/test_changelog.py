import os

from core.version import __version__


def _changelog():
    root = os.path.dirname(os.path.dirname(__file__))
    path = os.path.join(root, "CHANGELOG.md")
    assert os.path.exists(path), "CHANGELOG.md should exist"
    with open(path, encoding="utf-8") as f:
        return f.readlines()


def test_changelog_has_entries():
    entries = [line for line in _changelog() if line.strip().startswith("- ")]
    assert entries, "CHANGELOG.md should contain at least one bullet entry"


def test_changelog_mentions_current_version():
    headings = [line.strip() for line in _changelog() if line.startswith("## ")]
    assert f"## {__version__}" in headings

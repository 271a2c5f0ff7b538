"""Shared fixtures for Translation Stats tests."""

import pytest

from translation_stats.downloader.locales import resolve_locale
from translation_stats.downloader.projects import Project


@pytest.fixture
def pt_locale():
    return resolve_locale("pt_PT")


@pytest.fixture
def core_project():
    """Core project: no domain prefix."""
    return Project(slug="dev", project_type="wp", domain="")


@pytest.fixture
def plugin_project():
    return Project(slug="myplugin", project_type="wp-plugins", domain="myplugin")

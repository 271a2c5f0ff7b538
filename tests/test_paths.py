"""Tests for catalog file naming."""

import hashlib
from pathlib import Path

import pytest

from translation_stats.downloader.projects import Project, build_export_url
from translation_stats.utils.paths import (
    catalog_file_name,
    catalog_path,
    lock_file_path,
    normalize_script_path,
    script_json_file_name,
)


class TestCatalogFileName:
    """Test the {domain-}{locale}.{ext} convention."""

    def test_with_domain(self):
        assert catalog_file_name("myplugin", "pt_PT", "po") == "myplugin-pt_PT.po"
        assert catalog_file_name("myplugin", "pt_PT", "mo") == "myplugin-pt_PT.mo"
        assert catalog_file_name("myplugin", "pt_PT", "json") == "myplugin-pt_PT.json"

    def test_without_domain(self):
        assert catalog_file_name("", "pt_PT", "po") == "pt_PT.po"
        assert catalog_file_name("", "pt_PT", "mo") == "pt_PT.mo"

    def test_unsupported_extension(self):
        with pytest.raises(ValueError):
            catalog_file_name("", "pt_PT", "pot")

    def test_catalog_path(self, tmp_path):
        assert catalog_path(tmp_path, "myplugin", "pt_PT", "po") == tmp_path / "myplugin-pt_PT.po"
        assert catalog_path(str(tmp_path), "", "pt_PT", "mo") == Path(tmp_path) / "pt_PT.mo"

    def test_lock_file_path(self, tmp_path):
        assert lock_file_path(tmp_path, "pt_PT") == tmp_path / ".pt_PT.lock"


class TestScriptJsonFileName:
    """Test per-script JSON names."""

    def test_md5_of_script_path(self):
        digest = hashlib.md5(b"js/app.js").hexdigest()
        assert script_json_file_name("myplugin", "pt_PT", "js/app.js") == f"myplugin-pt_PT-{digest}.json"
        assert script_json_file_name("", "pt_PT", "js/app.js") == f"pt_PT-{digest}.json"

    def test_minified_shares_name(self):
        assert script_json_file_name("d", "pt_PT", "js/app.min.js") == script_json_file_name(
            "d", "pt_PT", "js/app.js"
        )

    def test_normalize_script_path(self):
        assert normalize_script_path("./js/app.min.js") == "js/app.js"
        assert normalize_script_path("js\\admin.js") == "js/admin.js"
        assert normalize_script_path(".hidden.js") == ".hidden.js"


class TestExportUrl:
    """Test translate.wordpress.org export URLs."""

    BASE = "https://translate.wordpress.org"

    def test_plugin(self, pt_locale):
        project = Project(slug="akismet", project_type="wp-plugins", domain="akismet")
        assert build_export_url(project, pt_locale, self.BASE) == (
            "https://translate.wordpress.org/projects/wp-plugins/akismet/stable/"
            "pt/default/export-translations/?format=po"
        )

    def test_dev_plugin(self, pt_locale):
        project = Project(slug="akismet", version="dev")
        assert "/wp-plugins/akismet/dev/pt/default/" in build_export_url(project, pt_locale, self.BASE)

    def test_theme(self, pt_locale):
        project = Project(slug="twentytwenty", project_type="wp-themes")
        assert "/projects/wp-themes/twentytwenty/pt/default/" in build_export_url(
            project, pt_locale, self.BASE + "/"
        )

    def test_core(self, pt_locale, core_project):
        assert build_export_url(core_project, pt_locale, self.BASE) == (
            "https://translate.wordpress.org/projects/wp/dev/"
            "pt/default/export-translations/?format=po"
        )


class TestProject:
    """Test project construction."""

    def test_from_path_plugin_uses_slug_as_domain(self):
        project = Project.from_path("wp-plugins/akismet")
        assert project.project_type == "wp-plugins"
        assert project.slug == "akismet"
        assert project.domain == "akismet"

    def test_from_path_core_has_no_domain(self):
        project = Project.from_path("wp/dev/admin")
        assert project.slug == "dev/admin"
        assert project.domain == ""

    def test_from_path_explicit_domain(self):
        assert Project.from_path("wp-themes/astra", domain="").domain == ""

    def test_invalid(self):
        with pytest.raises(ValueError):
            Project.from_path("akismet")
        with pytest.raises(ValueError):
            Project(slug="x", project_type="wp-widgets")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"slug": "../etc", "project_type": "wp"},
            {"slug": "wp/../../x", "project_type": "wp"},
            {"slug": "akismet", "domain": "my plugin"},
            {"slug": "akismet", "domain": "../outside"},
            {"slug": "akismet", "domain": "a/b"},
            {"slug": "akismet", "version": "stable/../x"},
        ],
    )
    def test_rejects_unsafe_names(self, kwargs):
        with pytest.raises(ValueError):
            Project(**kwargs)

    def test_from_path_rejects_nested_plugin_slug(self):
        with pytest.raises(ValueError):
            Project.from_path("wp-plugins/akismet/extra")

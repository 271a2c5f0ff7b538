"""WordPress translation projects and their export URLs."""

import re
from dataclasses import dataclass
from typing import Optional

from .locales import Locale

PROJECT_TYPES = ("wp-plugins", "wp-themes", "wp")

# One slug segment, text domain or version; these end up in URLs and file names
NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

# Example: https://translate.wordpress.org/projects/wp-plugins/akismet/stable/pt/default/export-translations/?format=po
EXPORT_URL_TEMPLATE = (
    "{base_url}/projects/{project_path}/{locale_slug}/"
    "export-translations/?format=po"
)


@dataclass(frozen=True)
class Project:
    """WordPress translation project."""

    slug: str
    project_type: str = "wp-plugins"  # wp-plugins, wp-themes, or wp
    domain: str = ""  # File name prefix; empty for core translations
    version: str = "stable"  # Plugins only: 'stable' or 'dev'
    name: str = ""

    def __post_init__(self):
        if self.project_type not in PROJECT_TYPES:
            raise ValueError(
                f"Unknown project type: {self.project_type!r} "
                f"(expected one of {', '.join(PROJECT_TYPES)})"
            )
        if not self.slug:
            raise ValueError("Project slug must not be empty")
        # Core sub-projects nest: wp/dev/admin/network
        if not all(NAME_PATTERN.match(part) for part in self.slug.split("/")):
            raise ValueError(f"Invalid project slug: {self.slug!r}")
        if not NAME_PATTERN.match(self.version):
            raise ValueError(f"Invalid project version: {self.version!r}")
        if self.domain and not NAME_PATTERN.match(self.domain):
            raise ValueError(
                f"Invalid text domain: {self.domain!r} "
                "(letters, digits, '.', '_' and '-' only)"
            )

    @property
    def full_path(self) -> str:
        """Project path below ``/projects/`` on translate.wordpress.org."""
        if self.project_type == "wp":
            return f"wp/{self.slug}"
        if self.project_type == "wp-themes":
            # Themes don't have a version in the path
            return f"wp-themes/{self.slug}"
        return f"wp-plugins/{self.slug}/{self.version}"

    @property
    def display_name(self) -> str:
        return self.name or self.slug

    @classmethod
    def from_path(
        cls,
        path: str,
        domain: Optional[str] = None,
        version: str = "stable",
    ) -> "Project":
        """Build a project from ``{type}/{slug}``, e.g. ``wp-plugins/akismet``.

        Without an explicit domain, plugins and themes use their slug and
        core projects use none.
        """
        project_type, _, slug = path.strip("/").partition("/")
        if not slug:
            raise ValueError(f"Expected '{{type}}/{{slug}}', got {path!r}")
        if domain is None:
            domain = "" if project_type == "wp" else slug
        return cls(
            slug=slug,
            project_type=project_type,
            domain=domain,
            version=version,
        )


def build_export_url(project: Project, locale: Locale, base_url: str) -> str:
    """Build the ``.po`` export URL for a project translation.

    Args:
        project: Project to export
        locale: Resolved locale
        base_url: translate.wordpress.org base URL

    Returns:
        URL to download the PO file
    """
    return EXPORT_URL_TEMPLATE.format(
        base_url=base_url.rstrip("/"),
        project_path=project.full_path,
        locale_slug=locale.locale_slug,
    )

"""File naming for downloaded and compiled catalogs.

Every step that touches a catalog file goes through these helpers, so the
writer, parser and compiler always agree on the same path.
"""

import hashlib
from pathlib import Path

CATALOG_EXTENSIONS = ("po", "mo", "json")


def file_prefix(domain: str, wp_locale: str) -> str:
    """``{domain}-{wp_locale}`` or just ``{wp_locale}`` without a domain."""
    if domain:
        return f"{domain}-{wp_locale}"
    return wp_locale


def catalog_file_name(domain: str, wp_locale: str, ext: str) -> str:
    """File name of a catalog, e.g. ``myplugin-pt_PT.po``.

    Args:
        domain: Text domain prefix (may be empty)
        wp_locale: WordPress locale code
        ext: One of 'po', 'mo', 'json'
    """
    if ext not in CATALOG_EXTENSIONS:
        raise ValueError(f"Unsupported catalog extension: {ext!r}")
    return f"{file_prefix(domain, wp_locale)}.{ext}"


def catalog_path(destination: str | Path, domain: str, wp_locale: str, ext: str) -> Path:
    """Full path of a catalog below ``destination``."""
    return Path(destination) / catalog_file_name(domain, wp_locale, ext)


def normalize_script_path(script_path: str) -> str:
    """Normalize a script reference the way WordPress looks it up.

    Minified files share the translations of their source file.
    """
    path = script_path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    if path.endswith(".min.js"):
        path = path[: -len(".min.js")] + ".js"
    return path


def script_json_file_name(domain: str, wp_locale: str, script_path: str) -> str:
    """JSON file name for one script: ``{domain-}{locale}-{md5}.json``."""
    digest = hashlib.md5(normalize_script_path(script_path).encode("utf-8")).hexdigest()
    return f"{file_prefix(domain, wp_locale)}-{digest}.json"


def lock_file_path(destination: str | Path, wp_locale: str) -> Path:
    """Advisory lock file guarding catalog writes for one locale."""
    return Path(destination) / f".{wp_locale}.lock"

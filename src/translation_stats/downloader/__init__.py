"""Locale resolution and translation file download."""

from .client import RateLimitedClient, HTTPResponse
from .fetcher import TranslationDownloader, write_po
from .locales import Locale, GPLocale, resolve_locale, available_locales
from .projects import Project, build_export_url

__all__ = [
    "RateLimitedClient",
    "HTTPResponse",
    "TranslationDownloader",
    "write_po",
    "Locale",
    "GPLocale",
    "resolve_locale",
    "available_locales",
    "Project",
    "build_export_url",
]

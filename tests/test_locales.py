"""Tests for locale resolution."""

import pytest

from translation_stats.downloader.locales import (
    GPLocale,
    available_locales,
    resolve_locale,
)
from translation_stats.errors import ErrorKind, LocaleResolutionError


class TestResolveLocale:
    """Test resolving WordPress locale codes."""

    def test_portuguese(self):
        """pt_PT resolves to the 'pt' translation set."""
        locale = resolve_locale("pt_PT")

        assert locale.wp_locale == "pt_PT"
        assert locale.slug == "pt"
        assert locale.locale_slug == "pt/default"
        assert locale.wporg_subdomain == "pt"
        assert locale.translations is None
        assert locale.english_name == "Portuguese (Portugal)"

    def test_gp_locale_fields(self):
        gp = resolve_locale("pt_PT").gp_locale

        assert gp.lang_code_iso_639_1 == "pt"
        assert gp.country_code == "pt"
        assert gp.google_code == "pt-PT"
        assert gp.facebook_locale == "pt_PT"

    def test_subdomain_differs_from_slug(self):
        locale = resolve_locale("pt_BR")
        assert locale.locale_slug == "pt-br/default"
        assert locale.wporg_subdomain == "br"

    def test_plural_forms(self):
        assert resolve_locale("de_DE").plural_forms == "nplurals=2; plural=n != 1;"
        assert resolve_locale("ja").plural_forms == "nplurals=1; plural=0;"
        assert resolve_locale("ru_RU").plural_forms.startswith("nplurals=3;")

    def test_locale_is_immutable(self):
        locale = resolve_locale("pt_PT")
        with pytest.raises(AttributeError):
            locale.translations = {}

    @pytest.mark.parametrize("code", ["", "PT_pt", "pt-PT", "p", "pt PT", "../pt"])
    def test_malformed_codes(self, code):
        with pytest.raises(LocaleResolutionError) as exc_info:
            resolve_locale(code)
        assert exc_info.value.kind == ErrorKind.LOCALE_RESOLUTION

    def test_unknown_code_is_not_defaulted(self):
        with pytest.raises(LocaleResolutionError, match="Unknown locale"):
            resolve_locale("xx_YY")

    def test_extra_locales(self):
        extra = {
            "xx_YY": GPLocale(
                english_name="Test",
                native_name="Test",
                lang_code_iso_639_1="xx",
                wp_locale="xx_YY",
                slug="xx",
            )
        }
        locale = resolve_locale("xx_YY", extra_locales=extra)
        assert locale.locale_slug == "xx/default"


def test_available_locales_sorted():
    codes = [gp.wp_locale for gp in available_locales()]
    assert codes == sorted(codes)
    assert "pt_PT" in codes

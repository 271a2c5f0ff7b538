"""WordPress locale metadata for translate.wordpress.org.

Maps a WordPress locale code (``pt_PT``) to the GlotPress locale record
used to build export URLs and file names.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from ..errors import LocaleResolutionError

# Valid WordPress locale codes: "fi", "pt_PT", "de_CH_informal", "pt_PT_ao90"
WP_LOCALE_PATTERN = re.compile(r"^[a-z]{2,3}(_[A-Za-z0-9]+)*$")

# Plural expressions shared by several languages
PLURAL_N_NOT_1 = "n != 1"
PLURAL_N_GT_1 = "n > 1"
PLURAL_NONE = "0"
PLURAL_SLAVIC = (
    "(n % 10 == 1 && n % 100 != 11) ? 0 : "
    "((n % 10 >= 2 && n % 10 <= 4 && (n % 100 < 12 || n % 100 > 14)) ? 1 : 2)"
)
PLURAL_CZECH = "(n == 1) ? 0 : ((n >= 2 && n <= 4) ? 1 : 2)"


@dataclass(frozen=True)
class GPLocale:
    """GlotPress locale record."""

    english_name: str
    native_name: str
    lang_code_iso_639_1: str
    wp_locale: str
    slug: str
    country_code: str = ""
    google_code: str = ""
    facebook_locale: str = ""
    nplurals: int = 2
    plural_expression: str = PLURAL_N_NOT_1
    wporg_subdomain: Optional[str] = None


@dataclass(frozen=True)
class Locale:
    """Locale metadata needed to reach translate.wordpress.org.

    Created fresh for every update and never modified.
    """

    gp_locale: GPLocale
    translations: Optional[dict] = None

    @property
    def wp_locale(self) -> str:
        return self.gp_locale.wp_locale

    @property
    def slug(self) -> str:
        return self.gp_locale.slug

    @property
    def locale_slug(self) -> str:
        """Translation set path segment, e.g. ``pt/default``."""
        return f"{self.gp_locale.slug}/default"

    @property
    def wporg_subdomain(self) -> str:
        return self.gp_locale.wporg_subdomain or self.gp_locale.slug

    @property
    def english_name(self) -> str:
        return self.gp_locale.english_name

    @property
    def native_name(self) -> str:
        return self.gp_locale.native_name

    @property
    def plural_forms(self) -> str:
        """``Plural-Forms`` header value for this locale."""
        return (
            f"nplurals={self.gp_locale.nplurals}; "
            f"plural={self.gp_locale.plural_expression};"
        )


def _gp(
    wp_locale: str,
    slug: str,
    english_name: str,
    native_name: str,
    nplurals: int = 2,
    plural_expression: str = PLURAL_N_NOT_1,
    subdomain: Optional[str] = None,
) -> GPLocale:
    lang, _, country = wp_locale.partition("_")
    country = country.split("_")[0].lower()
    return GPLocale(
        english_name=english_name,
        native_name=native_name,
        lang_code_iso_639_1=lang,
        wp_locale=wp_locale,
        slug=slug,
        country_code=country,
        google_code=f"{lang}-{country.upper()}" if country else lang,
        facebook_locale=wp_locale if country else "",
        nplurals=nplurals,
        plural_expression=plural_expression,
        wporg_subdomain=subdomain,
    )


GP_LOCALES: dict[str, GPLocale] = {
    locale.wp_locale: locale
    for locale in (
        _gp("ar", "ar", "Arabic", "العربية", 6,
            "(n == 0) ? 0 : ((n == 1) ? 1 : ((n == 2) ? 2 : "
            "((n % 100 >= 3 && n % 100 <= 10) ? 3 : "
            "((n % 100 >= 11 && n % 100 <= 99) ? 4 : 5))))"),
        _gp("bg_BG", "bg", "Bulgarian", "Български"),
        _gp("ca", "ca", "Catalan", "Català"),
        _gp("cs_CZ", "cs", "Czech", "Čeština", 3, PLURAL_CZECH),
        _gp("da_DK", "da", "Danish", "Dansk"),
        _gp("de_CH", "de-ch", "German (Switzerland)", "Deutsch (Schweiz)"),
        _gp("de_DE", "de", "German", "Deutsch"),
        _gp("el", "el", "Greek", "Ελληνικά"),
        _gp("en_AU", "en-au", "English (Australia)", "English (Australia)"),
        _gp("en_CA", "en-ca", "English (Canada)", "English (Canada)"),
        _gp("en_GB", "en-gb", "English (UK)", "English (UK)"),
        _gp("es_AR", "es-ar", "Spanish (Argentina)", "Español de Argentina"),
        _gp("es_ES", "es", "Spanish (Spain)", "Español"),
        _gp("es_MX", "es-mx", "Spanish (Mexico)", "Español de México", subdomain="mx"),
        _gp("et", "et", "Estonian", "Eesti"),
        _gp("eu", "eu", "Basque", "Euskara"),
        _gp("fa_IR", "fa", "Persian", "فارسی", 2, PLURAL_N_GT_1),
        _gp("fi", "fi", "Finnish", "Suomi"),
        _gp("fr_BE", "fr-be", "French (Belgium)", "Français de Belgique", 2, PLURAL_N_GT_1),
        _gp("fr_CA", "fr-ca", "French (Canada)", "Français du Canada", 2, PLURAL_N_GT_1),
        _gp("fr_FR", "fr", "French (France)", "Français", 2, PLURAL_N_GT_1),
        _gp("gl_ES", "gl", "Galician", "Galego"),
        _gp("he_IL", "he", "Hebrew", "עִבְרִית"),
        _gp("hi_IN", "hi", "Hindi", "हिन्दी"),
        _gp("hr", "hr", "Croatian", "Hrvatski", 3, PLURAL_SLAVIC),
        _gp("hu_HU", "hu", "Hungarian", "Magyar"),
        _gp("id_ID", "id", "Indonesian", "Bahasa Indonesia", 2, PLURAL_N_GT_1),
        _gp("it_IT", "it", "Italian", "Italiano"),
        _gp("ja", "ja", "Japanese", "日本語", 1, PLURAL_NONE),
        _gp("ko_KR", "ko", "Korean", "한국어", 1, PLURAL_NONE),
        _gp("lt_LT", "lt", "Lithuanian", "Lietuvių kalba", 3,
            "(n % 10 == 1 && (n % 100 < 11 || n % 100 > 19)) ? 0 : "
            "((n % 10 >= 2 && n % 10 <= 9 && (n % 100 < 11 || n % 100 > 19)) ? 1 : 2)"),
        _gp("lv", "lv", "Latvian", "Latviešu valoda", 3,
            "(n % 10 == 1 && n % 100 != 11) ? 0 : (n != 0 ? 1 : 2)"),
        _gp("nb_NO", "nb", "Norwegian (Bokmål)", "Norsk bokmål"),
        _gp("nl_BE", "nl-be", "Dutch (Belgium)", "Nederlands (België)"),
        _gp("nl_NL", "nl", "Dutch", "Nederlands"),
        _gp("pl_PL", "pl", "Polish", "Polski", 3,
            "(n == 1) ? 0 : ((n % 10 >= 2 && n % 10 <= 4 && "
            "(n % 100 < 12 || n % 100 > 14)) ? 1 : 2)"),
        _gp("pt_AO", "pt-ao", "Portuguese (Angola)", "Português de Angola"),
        _gp("pt_BR", "pt-br", "Portuguese (Brazil)", "Português do Brasil", 2,
            PLURAL_N_GT_1, subdomain="br"),
        _gp("pt_PT", "pt", "Portuguese (Portugal)", "Português"),
        _gp("pt_PT_ao90", "pt-ao90", "Portuguese (Portugal, AO90)", "Português (AO90)"),
        _gp("ro_RO", "ro", "Romanian", "Română", 3,
            "(n == 1) ? 0 : ((n == 0 || n % 100 > 0 && n % 100 < 20) ? 1 : 2)"),
        _gp("ru_RU", "ru", "Russian", "Русский", 3, PLURAL_SLAVIC),
        _gp("sk_SK", "sk", "Slovak", "Slovenčina", 3, PLURAL_CZECH),
        _gp("sl_SI", "sl", "Slovenian", "Slovenščina", 4,
            "(n % 100 == 1) ? 0 : ((n % 100 == 2) ? 1 : "
            "((n % 100 == 3 || n % 100 == 4) ? 2 : 3))"),
        _gp("sr_RS", "sr", "Serbian", "Српски језик", 3, PLURAL_SLAVIC),
        _gp("sv_SE", "sv", "Swedish", "Svenska"),
        _gp("th", "th", "Thai", "ไทย", 1, PLURAL_NONE),
        _gp("tr_TR", "tr", "Turkish", "Türkçe", 2, PLURAL_N_GT_1),
        _gp("uk", "uk", "Ukrainian", "Українська", 3, PLURAL_SLAVIC),
        _gp("vi", "vi", "Vietnamese", "Tiếng Việt", 1, PLURAL_NONE),
        _gp("zh_CN", "zh-cn", "Chinese (China)", "简体中文", 1, PLURAL_NONE, subdomain="cn"),
        _gp("zh_TW", "zh-tw", "Chinese (Taiwan)", "繁體中文", 1, PLURAL_NONE, subdomain="tw"),
    )
}


def resolve_locale(
    wp_locale: str,
    extra_locales: Optional[dict[str, GPLocale]] = None,
) -> Locale:
    """Resolve a WordPress locale code to its translate.wordpress.org metadata.

    Args:
        wp_locale: WordPress locale code (e.g. 'pt_PT')
        extra_locales: Additional locale records, checked before the built-in table

    Returns:
        Locale for the code

    Raises:
        LocaleResolutionError: If the code is malformed or unknown
    """
    if not isinstance(wp_locale, str) or not WP_LOCALE_PATTERN.match(wp_locale):
        raise LocaleResolutionError(f"Invalid locale code: {wp_locale!r}.")

    gp_locale = (extra_locales or {}).get(wp_locale) or GP_LOCALES.get(wp_locale)
    if gp_locale is None:
        raise LocaleResolutionError(f"Unknown locale: {wp_locale}.")

    return Locale(gp_locale=gp_locale)


def available_locales() -> Iterator[GPLocale]:
    """Iterate over the built-in locales sorted by WordPress locale code."""
    for code in sorted(GP_LOCALES):
        yield GP_LOCALES[code]

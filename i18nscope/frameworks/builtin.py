"""Built-in framework catalog."""

from __future__ import annotations

from i18nscope.engines.manifest_scanner.formats import composer_json, package_json
from i18nscope.frameworks.base import Framework

_JS_LANGUAGES = frozenset(
    {"javascript", "typescript", "javascriptreact", "typescriptreact"}
)

VUE = Framework(
    id="vue",
    display="Vue I18n",
    language_ids=_JS_LANGUAGES | {"vue"},
    detection={
        package_json.FORMAT_ID: (
            "vue-i18n",
            "vuex-i18n",
            "@intlify/vue-i18n-loader",
            "@nuxtjs/i18n",
            "nuxt-i18n",
        ),
    },
    preferred_locale_paths=("src/locales", "locales", "src/i18n", "i18n", "lang"),
    usage_match_regex=(
        r"""(?:i18n[ (]path=|v-t=['"`{]|(?:this\.|\$|i18n\.|[^\w\d])(?:t|tc|te)\()\s*['"`]({key})['"`]""",
    ),
    derived_key_rules=("{key}@:{key}",),
    support_auto_extraction=frozenset({"vue"}),
)

REACT_I18NEXT = Framework(
    id="react-i18next",
    display="React I18next",
    language_ids=_JS_LANGUAGES,
    detection={package_json.FORMAT_ID: ("react-i18next", "next-i18next")},
    preferred_locale_paths=("public/locales", "locales", "src/locales"),
    namespace_delimiter=":",
    usage_match_regex=(
        r"""\bt\(\s*['"`]({key})['"`]""",
        r"""\bi18nKey=['"`{]+({key})['"`]""",
    ),
    enable_features=frozenset({"namespace"}),
    derived_key_rules=("{key}_plural", "{key}_0", "{key}_1", "{key}_2", "{key}_other"),
    support_auto_extraction=frozenset({"javascriptreact", "typescriptreact"}),
)

I18NEXT = Framework(
    id="i18next",
    display="i18next",
    language_ids=_JS_LANGUAGES,
    detection={package_json.FORMAT_ID: ("i18next",)},
    preferred_locale_paths=("locales", "src/locales"),
    namespace_delimiter=":",
    usage_match_regex=(r"""\b(?:i18next\.)?t\(\s*['"`]({key})['"`]""",),
    derived_key_rules=("{key}_plural", "{key}_other"),
)

SVELTE = Framework(
    id="svelte",
    display="Svelte I18n",
    language_ids=_JS_LANGUAGES | {"svelte"},
    detection={package_json.FORMAT_ID: ("svelte-i18n",)},
    preferred_locale_paths=("src/lang", "src/locales", "locales"),
    usage_match_regex=(r"""\$(?:_|t|format)\(\s*['"`]({key})['"`]""",),
)

LARAVEL = Framework(
    id="laravel",
    display="Laravel",
    language_ids=frozenset({"php", "blade"}),
    detection={composer_json.FORMAT_ID: ("laravel/framework",)},
    preferred_key_style="nested",
    preferred_dir_structure="dir",
    preferred_locale_paths=("resources/lang", "lang"),
    usage_match_regex=(
        r"""(?:__|trans|trans_choice|Lang::get|@lang)\(\s*['"]({key})['"]""",
    ),
    usage_match_regex_by_language={
        "blade": (
            r"""(?:__|trans|trans_choice|@lang|@choice)\(\s*['"]({key})['"]""",
        ),
    },
    path_matcher_rules={"dir": ("{locale}/{namespaces}.{ext}",)},
    enabled_parsers=("php", "json"),
    enable_features=frozenset({"namespace"}),
)

BUILTIN_FRAMEWORKS: tuple[Framework, ...] = (VUE, REACT_I18NEXT, I18NEXT, SVELTE, LARAVEL)

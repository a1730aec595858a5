"""End-to-end tests for Localizer.

Walks the documented behaviours through the public API: load, wait,
navigate ``localizer.t`` and call, with sync and async loaders, nesting,
tagging, locale fallback and the Babel parse collaborator.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from nestlex import (
    AsyncPathResourceLoader,
    Localizer,
    PathResourceLoader,
    compile_message,
    create_localizer,
)
from nestlex.diagnostics.errors import CyclicReferenceError, KeyMissingError
from nestlex.localization.loading import FallbackInfo
from nestlex.proxy import key_path_of
from tests.strategies.localization import AsyncDictResourceLoader, DictResourceLoader

RESOURCES: dict[str, dict[str, Any]] = {
    "pt-BR": {
        "base": {
            "app": "Loja",
            "welcome": "Olá <:app/>",
            "link": "Veja <a>aqui</a>",
        },
    },
    "en-US": {
        "base": {
            "app": "Shop",
            "welcome": "Hi <:app/>",
            "only_en": "English only",
            "errors": {"not_found": "Not found"},
            "flat.key": "Flat",
            "cross": "See <:md:title/>",
            "loop": "<:loop/>",
        },
        "md": {"title": "# Title"},
    },
}


def make_localizer(**kwargs: Any) -> Localizer[Any]:
    localizer: Localizer[Any] = create_localizer(DictResourceLoader(RESOURCES), **kwargs)
    localizer.set_locales("pt-BR", "en-US")
    localizer.set_modules("base", "md")
    return localizer


class TestNavigationAndFormatting:
    def test_primary_locale_with_nesting(self) -> None:
        t = make_localizer().t
        assert t.base.welcome() == "Olá Loja"

    def test_locale_fallback(self) -> None:
        assert make_localizer().t.base.only_en() == "English only"

    def test_nested_key(self) -> None:
        assert make_localizer().t.base.errors.not_found() == "Not found"

    def test_flattened_key(self) -> None:
        assert make_localizer().t.base.flat.key() == "Flat"

    def test_cross_module_nesting(self) -> None:
        assert make_localizer().t.base.cross() == "See # Title"

    def test_total_fallback_marker(self) -> None:
        assert make_localizer().t.base.nope.deeper() == "pt-BR|en-US:base:nope.deeper"

    def test_partial_key_marker(self) -> None:
        assert make_localizer().t.base.errors() == "pt-BR|en-US:base:errors"

    def test_cycle_yields_marker(self) -> None:
        localizer = make_localizer()
        assert localizer.t.base.loop() == "pt-BR|en-US:base:loop"

    def test_read_raises_cycle(self) -> None:
        localizer = make_localizer()
        try:
            localizer.read("en-US", "base", ["loop"])
        except CyclicReferenceError as error:
            assert error.cycle == ("base:loop", "base:loop")
        else:
            raise AssertionError("expected CyclicReferenceError")

    def test_read_missing(self) -> None:
        localizer = make_localizer()
        try:
            localizer.read("pt-BR", "base", ["only_en"])
        except KeyMissingError as error:
            assert error.locale == "pt-BR"
        else:
            raise AssertionError("expected KeyMissingError")

    def test_format_method(self) -> None:
        assert make_localizer().format("base", ["app"]) == "Loja"

    def test_tagging(self) -> None:
        t = make_localizer().t
        result = t.base.link(None, {"a": lambda children, name: f"[{''.join(children)}]"})
        assert result == "Veja [aqui]"

    def test_localizer_tag_fallback(self) -> None:
        def tree(children: list[Any], name: str) -> Any:
            return (name, list(children))

        localizer = make_localizer(tag=tree)
        assert localizer.t.base.link(None, {}) == ("", ["Veja ", ("a", ["aqui"])])
        assert localizer.tagger.fallback is tree

    def test_dynamic_segment(self) -> None:
        t = make_localizer().t
        name = "not_found"
        assert getattr(t.base.errors, "$")[name]() == "Not found"
        assert key_path_of(t.base.errors["$"][name]) == ("base", ("errors", "not_found"))

    def test_locale_switch_takes_effect(self) -> None:
        localizer = make_localizer()
        localizer.set_locales("en-US")
        assert localizer.t.base.welcome() == "Hi Shop"

    def test_on_fallback(self) -> None:
        events: list[FallbackInfo] = []
        localizer = make_localizer(on_fallback=events.append)
        localizer.t.base.only_en()
        assert events == [FallbackInfo("pt-BR", "en-US", "base", ("only_en",))]

    def test_repr(self) -> None:
        assert repr(make_localizer()) == (
            "Localizer(locales=('pt-BR', 'en-US'), modules=('base', 'md'))"
        )


class TestLifecycle:
    def test_idempotent_selection(self) -> None:
        loader = DictResourceLoader(RESOURCES)
        localizer: Localizer[Any] = Localizer(loader)
        localizer.set_locales("pt-BR", "en-US")
        localizer.set_modules("base")
        localizer.set_locales("pt-BR", "en-US")
        assert len(loader.calls) == 2

    def test_summary_reports_missing_pairs(self) -> None:
        localizer = make_localizer()
        summary = asyncio.run(localizer.wait())
        assert summary.total_attempted == 4
        assert summary.successful == 3
        assert summary.not_found == 1
        assert [(r.locale, r.module) for r in summary.get_not_found()] == [("pt-BR", "md")]
        assert localizer.get_load_summary().total_attempted == 4

    def test_subscribe(self) -> None:
        localizer = make_localizer()
        seen: list[Any] = []
        localizer.subscribe(lambda locales, modules: seen.append((locales, modules)))
        localizer.set_modules("base")
        assert seen == [(("pt-BR", "en-US"), ("base", "md")), (("pt-BR", "en-US"), ("base",))]
        assert localizer.modules == ("base",)
        assert localizer.locales == ("pt-BR", "en-US")

    def test_unsubscribe(self) -> None:
        localizer = make_localizer()

        def handler(locales: Any, modules: Any) -> None:
            """Change observer."""

        localizer.subscribe(handler)
        assert localizer.unsubscribe(handler) is True

    def test_async_loader(self) -> None:
        localizer: Localizer[Any] = Localizer(AsyncDictResourceLoader(RESOURCES))

        async def main() -> tuple[str, str]:
            localizer.set_locales("pt-BR", "en-US")
            localizer.set_modules("base")
            before = localizer.t.base.welcome()
            await localizer.wait()
            return before, localizer.t.base.welcome()

        before, after = asyncio.run(main())
        assert before == "pt-BR|en-US:base:welcome"
        assert after == "Olá Loja"

    def test_compiled_messages_not_recompiled(self) -> None:
        """The first compilation for a triple sticks for the localizer lifetime."""
        base = {"app": "Shop"}
        localizer: Localizer[Any] = Localizer(DictResourceLoader({"en": {"base": base}}))
        localizer.set_locales("en")
        localizer.set_modules("base")

        assert localizer.t.base.app() == "Shop"
        base["app"] = "Changed"
        assert localizer.t.base.app() == "Shop"
        assert localizer.read("en", "base", ["app"]) == "Changed"

    def test_notify_observes_loads_and_accesses(self) -> None:
        loads: list[tuple[str, str]] = []
        accesses: list[tuple[str, tuple[str, ...]]] = []

        def notify(locale: str, module: str, future: Any) -> Any:
            loads.append((locale, module))
            return lambda key, raw: accesses.append((locale, key))

        localizer = make_localizer(notify=notify)
        localizer.t.base.only_en()

        assert sorted(loads) == sorted(
            [("pt-BR", "base"), ("pt-BR", "md"), ("en-US", "base"), ("en-US", "md")]
        )
        assert accesses == [("pt-BR", ("only_en",)), ("en-US", ("only_en",))]


class TestSuppliedCollaborators:
    def test_babel_parse_collaborator(self) -> None:
        resources = {
            "de-DE": {"shop": {"total": "Summe: {sum, number}"}},
            "en-US": {"shop": {"total": "Total: {sum, number}", "greet": "Hi {name}"}},
        }
        localizer: Localizer[Any] = Localizer(
            DictResourceLoader(resources), parse=compile_message
        )
        localizer.set_locales("de-DE", "en-US")
        localizer.set_modules("shop")

        assert localizer.t.shop.total({"sum": 1234.5}) == "Summe: 1.234,5"
        assert localizer.t.shop.greet({"name": "Ana"}) == "Hi Ana"
        # Missing values fail every locale
        assert localizer.t.shop.greet() == "de-DE|en-US:shop:greet"

    def test_path_loader(self, tmp_path: Path) -> None:
        (tmp_path / "en").mkdir()
        (tmp_path / "en" / "base.json").write_text(
            json.dumps({"hello": "Hello", "nested": {"x": "<:hello/>!"}}), encoding="utf-8"
        )
        localizer: Localizer[Any] = Localizer(PathResourceLoader(str(tmp_path / "{locale}")))
        localizer.set_locales("en", "fr")
        localizer.set_modules("base")

        summary = localizer.get_load_summary()
        assert summary.successful == 1
        assert summary.not_found == 1
        assert summary.get_successful()[0].source_path.endswith("en/base.json")  # type: ignore[union-attr]
        assert localizer.t.base.nested.x() == "Hello!"

    def test_async_path_loader(self, tmp_path: Path) -> None:
        (tmp_path / "en").mkdir()
        (tmp_path / "en" / "base.json").write_text('{"hello": "Hello"}', encoding="utf-8")
        loader = AsyncPathResourceLoader(PathResourceLoader(str(tmp_path / "{locale}")))
        localizer: Localizer[Any] = Localizer(loader)

        async def main() -> Any:
            localizer.set_locales("en")
            localizer.set_modules("base")
            return await localizer.wait()

        summary = asyncio.run(main())
        assert summary.all_successful
        assert localizer.t.base.hello() == "Hello"

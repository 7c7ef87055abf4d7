"""
Tests for the Resolver API.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from confucius.core.config import (
    CircularPlaceholder,
    CircularPlaceholderError,
    ConversionError,
    ConversionFailure,
    ConverterRegistry,
    DuplicateConverterError,
    Failure,
    InvalidSourceChainError,
    MapSource,
    MissingKey,
    MissingKeyError,
    PlaceholderSyntax,
    ProgrammingError,
    PropertiesFileSource,
    ResolvedEntry,
    Resolver,
    ResolverSettingsModel,
    SourceAdapter,
    SourceChain,
    UnknownConverterError,
    UnresolvedPlaceholder,
    UnresolvedPlaceholderError,
)
from confucius.core.config.models import MapSourceModel


def make_resolver(*mappings, **kwargs):
    sources = [MapSource(values, f"source{i}") for i, values in enumerate(mappings)]
    return Resolver(sources, **kwargs)


class CountingSource(SourceAdapter):
    """Map-backed source recording every lookup."""

    def __init__(self, values):
        self.values = dict(values)
        self.calls = []
        self._lock = threading.Lock()

    @property
    def origin(self):
        return "counting"

    def get(self, key):
        with self._lock:
            self.calls.append(key)
        return self.values.get(key)

    def keys(self):
        return self.values.keys()


class TestResolve:
    def test_override_through_placeholder(self):
        resolver = Resolver(
            [
                MapSource({"PORT": "9090"}, origin="env-override"),
                MapSource({"port": "${PORT}", "timeout": "30"}, origin="file"),
            ]
        )

        assert resolver.resolve("port", int) == 9090
        assert resolver.resolve("timeout", int) == 30
        assert resolver.resolve("port") == "9090"

    def test_untyped_lookup_returns_substituted_string(self):
        resolver = make_resolver({"a": "x", "b": "y", "c": "${a}-${b}"})
        assert resolver.resolve("c") == "x-y"

    def test_missing_key_is_a_value_not_an_exception(self):
        resolver = make_resolver({"a": "1"})
        result = resolver.resolve("missing", int)

        assert isinstance(result, MissingKey)
        assert result.key == "missing"
        assert result.searched == ("source0",)

    def test_unresolved_placeholder(self):
        resolver = make_resolver({"greeting": "Hello ${name}"})
        result = resolver.resolve("greeting")

        assert isinstance(result, UnresolvedPlaceholder)
        assert result.placeholder == "name"

    def test_cycle(self):
        resolver = make_resolver({"a": "${b}", "b": "${a}"})
        result = resolver.resolve("a")

        assert isinstance(result, CircularPlaceholder)
        assert set(result.cycle) == {"a", "b"}

    def test_conversion_failure(self):
        resolver = make_resolver({"port": "abc"})
        result = resolver.resolve("port", "integer")

        assert isinstance(result, ConversionFailure)
        assert result.key == "port"
        assert result.raw_value == "abc"

    def test_conversion_runs_on_substituted_value(self):
        resolver = make_resolver({"port": "80${suffix}", "suffix": "80"})
        assert resolver.resolve("port", int) == 8080

    def test_unknown_type_fails_fast(self):
        resolver = make_resolver({"a": "1"})
        with pytest.raises(UnknownConverterError):
            resolver.resolve("missing", "decimal")

    def test_non_string_key(self):
        resolver = make_resolver({"a": "1"})
        with pytest.raises(ProgrammingError):
            resolver.resolve(1)

    def test_custom_placeholder_syntax(self):
        resolver = make_resolver(
            {"a": "%{b} ${b}", "b": "x"}, placeholder=PlaceholderSyntax(prefix="%{", suffix="}")
        )
        assert resolver.resolve("a") == "x ${b}"

    def test_none_chain_rejected(self):
        with pytest.raises(InvalidSourceChainError):
            Resolver(None)

    def test_empty_chain_rejected(self):
        with pytest.raises(InvalidSourceChainError):
            Resolver([])

    def test_accepts_prebuilt_chain(self):
        chain = SourceChain([MapSource({"a": "1"})])
        assert Resolver(chain).chain is chain


class TestLists:
    def test_string_list(self):
        resolver = make_resolver({"hosts": "a, b ,c"})
        assert resolver.resolve_list("hosts") == ["a", "b", "c"]

    def test_typed_list(self):
        resolver = make_resolver({"ports": "80,443"})
        assert resolver.resolve_list("ports", int) == [80, 443]

    def test_bad_element_names_position(self):
        resolver = make_resolver({"ports": "80,http,443"})
        result = resolver.resolve_list("ports", "integer")

        assert isinstance(result, ConversionFailure)
        assert "element 1 'http'" in result.message

    def test_list_through_placeholders(self):
        resolver = make_resolver({"all": "${primary},${backup}", "primary": "a", "backup": "b"})
        assert resolver.resolve_list("all") == ["a", "b"]

    def test_missing_list(self):
        resolver = make_resolver({})
        assert isinstance(resolver.resolve_list("hosts"), MissingKey)

    def test_escaped_delimiter(self):
        resolver = make_resolver({"names": "Smith\\, John,Doe\\, Jane"})
        assert resolver.resolve_list("names") == ["Smith, John", "Doe, Jane"]

    def test_resolver_delimiter(self):
        resolver = make_resolver({"path": "/usr/bin:/bin"}, list_delimiter=":")
        assert resolver.resolve_list("path") == ["/usr/bin", "/bin"]
        assert resolver.resolve("path", "list") == ["/usr/bin", "/bin"]
        assert resolver.list_delimiter == ":"

    def test_empty_delimiter_override_is_rejected(self):
        resolver = make_resolver({"a": "x,y"})
        with pytest.raises(ProgrammingError):
            resolver.resolve_list("a", delimiter="")
        with pytest.raises(ProgrammingError):
            resolver.resolve_list("missing", delimiter="")

    def test_delimiter_override(self):
        resolver = make_resolver({"path": "a;b"})
        assert resolver.resolve_list("path", delimiter=";") == ["a", "b"]


class TestRequireAndGet:
    def test_require_returns_value(self):
        resolver = make_resolver({"port": "8080"})
        assert resolver.require("port", int) == 8080

    def test_require_missing(self):
        resolver = make_resolver({})
        with pytest.raises(MissingKeyError) as exc_info:
            resolver.require("port")

        assert exc_info.value.key == "port"
        assert isinstance(exc_info.value.failure, MissingKey)
        assert "port" in str(exc_info.value)

    def test_require_conversion(self):
        resolver = make_resolver({"port": "abc"})
        with pytest.raises(ConversionError) as exc_info:
            resolver.require("port", int)
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.to_dict()["kind"] == "conversion_error"

    def test_require_unresolved(self):
        resolver = make_resolver({"a": "${b}"})
        with pytest.raises(UnresolvedPlaceholderError):
            resolver.require("a")

    def test_require_cycle(self):
        resolver = make_resolver({"a": "${a}"})
        with pytest.raises(CircularPlaceholderError):
            resolver.require("a")

    def test_get_default_only_for_missing_keys(self):
        resolver = make_resolver({"port": "abc"})

        assert resolver.get("timeout", int, default=30) == 30
        assert resolver.get("timeout", int, default=None) is None
        with pytest.raises(ConversionError):
            resolver.get("port", int, default=8080)

    def test_get_without_default_raises(self):
        resolver = make_resolver({})
        with pytest.raises(MissingKeyError):
            resolver.get("timeout")

    def test_get_returns_converted_value(self):
        resolver = make_resolver({"debug": "TRUE"})
        assert resolver.get("debug", bool, default=False) is True


class TestConverters:
    def test_register_converter(self):
        resolver = make_resolver({"ttl": "90"})
        resolver.register_converter("minutes", lambda v: int(v) / 60)

        assert resolver.resolve("ttl", "minutes") == 1.5
        assert "minutes" in resolver.list_types()

    def test_duplicate_registration(self):
        resolver = make_resolver({})
        resolver.register_converter("minutes", int)
        with pytest.raises(DuplicateConverterError):
            resolver.register_converter("minutes", float)

    def test_registries_are_per_resolver(self):
        first = make_resolver({"a": "1"})
        second = make_resolver({"a": "1"})
        first.register_converter("custom", int)

        with pytest.raises(UnknownConverterError):
            second.resolve("a", "custom")

    def test_shared_registry(self):
        registry = ConverterRegistry()
        registry.register("custom", int)
        resolver = make_resolver({"a": "5"}, converters=registry)
        assert resolver.resolve("a", "custom") == 5

    def test_converter_returning_failure(self):
        resolver = make_resolver({"level": "loud"})

        def to_level(value):
            if value not in ("low", "high"):
                return ConversionFailure("level", value, "level", "unknown level")
            return value

        resolver.register_converter("level", to_level)
        result = resolver.resolve("level", "level")
        assert isinstance(result, ConversionFailure)
        assert result.reason == "unknown level"


class TestIntrospection:
    def test_describe_reports_provenance(self):
        resolver = make_resolver({"PORT": "9090"}, {"port": "${PORT}"})
        entry = resolver.describe("port")

        assert isinstance(entry, ResolvedEntry)
        assert entry.value == "9090"
        assert entry.raw_value == "${PORT}"
        assert entry.origin == "source1"
        assert entry.references == ("PORT",)
        assert entry.to_dict()["references"] == ["PORT"]

    def test_keys_and_contains(self):
        resolver = make_resolver({"b": "1"}, {"a": "2", "b": "3"})
        assert resolver.keys() == ["a", "b"]
        assert "a" in resolver
        assert "c" not in resolver

    def test_snapshot(self):
        resolver = make_resolver({"a": "1", "b": "${a}", "c": "${missing}"})
        snapshot = resolver.snapshot()

        assert snapshot["b"].value == "1"
        assert isinstance(snapshot["c"], Failure)

    def test_failure_to_dict(self):
        resolver = make_resolver({"a": "${b}", "b": "${a}"})
        payload = resolver.resolve("a").to_dict()

        assert payload["kind"] == "circular_placeholder"
        assert payload["cycle"] == ["a", "b", "a"]
        assert "a -> b -> a" in payload["message"]


class TestCache:
    def test_repeated_lookups_hit_the_cache(self):
        source = CountingSource({"a": "${b}", "b": "1"})
        resolver = Resolver([source])

        assert resolver.resolve("a") == "1"
        calls = len(source.calls)
        assert resolver.resolve("a") == "1"
        assert len(source.calls) == calls

    def test_failures_are_cached(self):
        source = CountingSource({})
        resolver = Resolver([source])

        first = resolver.resolve("a")
        second = resolver.resolve("a")
        assert first is second
        assert source.calls == ["a"]

    def test_cache_disabled(self):
        source = CountingSource({"a": "1"})
        resolver = Resolver([source], cache=False)

        resolver.resolve("a")
        resolver.resolve("a")
        assert source.calls == ["a", "a"]

    def test_invalidate(self):
        source = CountingSource({"a": "1", "b": "2"})
        resolver = Resolver([source])
        resolver.resolve("a")
        resolver.resolve("b")

        resolver.invalidate("a")
        resolver.resolve("a")
        resolver.resolve("b")
        assert source.calls == ["a", "b", "a"]

        resolver.invalidate()
        resolver.resolve("b")
        assert source.calls == ["a", "b", "a", "b"]

    def test_cached_entries_feed_placeholders(self):
        source = CountingSource({"base": "/srv", "logs": "${base}/logs"})
        resolver = Resolver([source])
        resolver.resolve("base")

        assert resolver.resolve("logs") == "/srv/logs"
        assert source.calls == ["base", "logs"]

    def test_concurrent_lookups_agree(self):
        values = {f"k{i}": f"${{k{i + 1}}}" for i in range(200)}
        values["k200"] = "end"
        resolver = make_resolver(values)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda i: resolver.resolve_entry(f"k{i % 50}"), range(400)))

        assert all(entry.value == "end" for entry in results)
        # Insert-once: every caller sees the same stored entry per key
        by_key = {}
        for entry in results:
            assert by_key.setdefault(entry.key, entry) is entry


class TestReload:
    def test_reload_picks_up_changes(self, write_file):
        path = write_file("app.properties", "port=8080\n")
        resolver = Resolver([PropertiesFileSource(path)])
        assert resolver.resolve("port", int) == 8080

        path.write_text("port=9090\n", encoding="utf-8")
        reloaded = resolver.reload()

        assert reloaded is not resolver
        assert reloaded.resolve("port", int) == 9090
        assert resolver.resolve("port", int) == 8080

    def test_reload_keeps_converters_and_settings(self):
        resolver = make_resolver({"path": "a:b"}, list_delimiter=":", cache=False)
        resolver.register_converter("custom", str.upper)
        reloaded = resolver.reload()

        assert reloaded.resolve("path", "custom") == "A:B"
        assert reloaded.resolve_list("path") == ["a", "b"]
        assert reloaded.cache_enabled is False

        reloaded.register_converter("other", str)
        assert "other" not in resolver.list_types()


class TestFromSettings:
    def test_from_settings(self):
        settings = ResolverSettingsModel(
            placeholder=PlaceholderSyntax(prefix="@{", suffix="}"),
            list_delimiter=";",
            sources=[MapSourceModel(values={"a": "@{b}", "b": "x;y"})],
        )
        resolver = Resolver.from_settings(settings)

        assert resolver.resolve_list("a") == ["x", "y"]

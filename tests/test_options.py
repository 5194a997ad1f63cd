import pytest

from openurl.aliases import AliasDefinition, Option, UrlEntry
from openurl.errors import ConfigError, HandlerNotConfiguredError, HandlerNotFoundError, InvalidOptionError
from openurl.handlers import HandlerRegistry, handler_kind
from openurl.models import HandlerEntry, HandlerKind
from openurl.options import CliOverride, EffectiveConfig, OptionMerger

URL = UrlEntry("https://example.com/{search}")


@pytest.fixture
def registry():
    return HandlerRegistry({
        "gui1": HandlerEntry(command="firefox"),
        "gui2": HandlerEntry(command="chromium --new-window"),
        "gui3": HandlerEntry(command="missing-browser"),
        "gui4": HandlerEntry(command=""),
        "term1": HandlerEntry(command="w3m"),
        "term2": HandlerEntry(command="lynx"),
    })


@pytest.fixture
def merger(registry):
    return OptionMerger(
        registry=registry,
        default_terminal="term1",
        command_exists=lambda path: path != "missing-browser",
    )


@pytest.fixture
def defaults():
    return EffectiveConfig(handler_name="gui1", handler_kind=HandlerKind.GUI)


def alias(*options, name="test"):
    return AliasDefinition(name=name, url_entries=(URL,), options=tuple(options))


def url_entry(*options):
    return UrlEntry(URL.template, tuple(options))


class TestPrecedence:
    def test_defaults_without_options(self, merger, defaults):
        assert merger.merge(defaults, None, alias(), URL) == defaults

    def test_alias_option_over_defaults(self, merger, defaults):
        cfg = merger.merge(defaults, None, alias(Option("browser", "gui2")), URL)
        assert cfg.handler_name == "gui2"
        assert cfg.handler_kind == HandlerKind.GUI

    def test_url_option_over_alias_option(self, merger, defaults):
        cfg = merger.merge(defaults, None, alias(Option("browser", "gui2")), url_entry(Option("browser", "term2")))
        assert cfg == EffectiveConfig("term2", HandlerKind.TERMINAL)

    def test_url_nodump_over_alias_dump(self, merger, defaults):
        cfg = merger.merge(defaults, None, alias(Option("dump", "3")), url_entry(Option("nodump")))
        assert cfg == defaults

    def test_unknown_keys_are_ignored(self, merger, defaults):
        cfg = merger.merge(defaults, None, alias(Option("colour", "red")), url_entry(Option("reader")))
        assert cfg == defaults


class TestDump:
    def test_dump_moves_gui_to_default_terminal(self, merger, defaults):
        cfg = merger.merge(defaults, None, alias(Option("dump")), URL)
        assert cfg == EffectiveConfig("term1", HandlerKind.TERMINAL, dump=True, dump_page_forward=0)

    def test_dump_keeps_terminal_handler(self, merger, defaults):
        cfg = merger.merge(defaults, None, alias(Option("browser", "term2"), Option("dump", "2")), URL)
        assert cfg == EffectiveConfig("term2", HandlerKind.TERMINAL, dump=True, dump_page_forward=2)

    def test_non_numeric_page_forward(self, merger, defaults):
        with pytest.raises(InvalidOptionError) as exc:
            merger.merge(defaults, None, alias(Option("dump", "two"), name="wiki"), URL)
        assert (exc.value.alias, exc.value.key, exc.value.value) == ("wiki", "dump", "two")

    def test_browser_without_value(self, merger, defaults):
        with pytest.raises(InvalidOptionError):
            merger.merge(defaults, None, alias(Option("browser")), URL)

    def test_negative_page_forward(self, merger, defaults):
        with pytest.raises(InvalidOptionError):
            merger.merge(defaults, None, alias(), url_entry(Option("dump", "-1")))


class TestCliOverride:
    def test_cli_handler_wins(self, merger, defaults):
        override = CliOverride(handler_name="term2")
        cfg = merger.merge(defaults, override, alias(Option("browser", "gui2")), url_entry(Option("browser", "gui1")))
        assert cfg.handler_name == "term2"

    def test_cli_dump_only_keeps_alias_terminal_handler(self, merger, defaults):
        override = CliOverride(dump=True)
        cfg = merger.merge(defaults, override, alias(Option("browser", "term2")), URL)
        assert cfg == EffectiveConfig("term2", HandlerKind.TERMINAL, dump=True)

    def test_cli_dump_only_on_gui_alias_uses_default_terminal(self, merger, defaults):
        override = CliOverride(dump=True, dump_page_forward=4)
        cfg = merger.merge(defaults, override, alias(Option("browser", "gui2")), URL)
        assert cfg == EffectiveConfig("term1", HandlerKind.TERMINAL, dump=True, dump_page_forward=4)

    def test_cli_handler_only_keeps_alias_dump(self, merger, defaults):
        override = CliOverride(handler_name="term2")
        cfg = merger.merge(defaults, override, alias(Option("dump", "1")), URL)
        assert cfg == EffectiveConfig("term2", HandlerKind.TERMINAL, dump=True, dump_page_forward=1)

    def test_cli_nodump_over_alias_dump(self, merger, defaults):
        cfg = merger.merge(defaults, CliOverride(dump=False), alias(Option("dump", "1")), URL)
        assert cfg == defaults

    def test_cli_handler_replaces_unknown_alias_handler(self, merger, defaults):
        override = CliOverride(handler_name="gui2")
        cfg = merger.merge(defaults, override, alias(Option("browser", "firefox")), URL)
        assert cfg == EffectiveConfig("gui2", HandlerKind.GUI)

    def test_cli_handler_replaces_unconfigured_url_handler(self, merger, defaults):
        override = CliOverride(handler_name="term2")
        cfg = merger.merge(defaults, override, alias(), url_entry(Option("browser", "gui7")))
        assert cfg == EffectiveConfig("term2", HandlerKind.TERMINAL)

    def test_empty_override(self):
        assert CliOverride().is_empty()
        assert not CliOverride(dump=False).is_empty()


class TestRegistryValidation:
    @pytest.mark.parametrize("name", ["gui7", "gui4", "browser", "term"])
    def test_handler_not_configured(self, merger, defaults, name):
        with pytest.raises(HandlerNotConfiguredError) as exc:
            merger.merge(defaults, None, alias(Option("browser", name)), URL)
        assert exc.value.handler == name

    def test_handler_not_found(self, merger, defaults):
        with pytest.raises(HandlerNotFoundError) as exc:
            merger.merge(defaults, None, alias(Option("browser", "gui3")), URL)
        assert exc.value.executable == "missing-browser"

    def test_executable_is_first_word(self, registry):
        assert registry.executable("gui2") == "chromium"

    def test_unbalanced_quotes_in_command(self):
        registry = HandlerRegistry({"gui1": HandlerEntry(command="firefox '--profile")})
        with pytest.raises(ConfigError) as exc:
            registry.executable("gui1")
        assert "gui1" in str(exc.value)

    def test_handler_kind(self):
        assert handler_kind("gui1") == HandlerKind.GUI
        assert handler_kind("term7") == HandlerKind.TERMINAL
        assert handler_kind("pager") is None


class TestIdempotence:
    @pytest.mark.parametrize("options", [
        (),
        (Option("browser", "gui2"),),
        (Option("browser", "term2"), Option("dump", "1")),
        (Option("dump"),),
    ])
    def test_merge_with_itself_as_alias_options(self, merger, defaults, options):
        cfg = merger.merge(defaults, None, alias(*options), URL)
        again = merger.merge(cfg, None, alias(*cfg.as_options()), UrlEntry(URL.template))
        assert again == cfg

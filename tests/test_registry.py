#!/usr/bin/env python3
"""Tests for the command registry and completion descriptor resolution"""

import logging

import pytest

from ghostline.exceptions import RegistryError
from ghostline.registry import (
    ArgumentDescriptor, CommandDescriptor, CommandRegistry, CompletionDescriptor, CompletionSource,
)


class Handler:
    def colors(self, ctx):
        return ["red", "green"]


class ColorProvider:
    def get_completions(self, ctx):
        return ["cyan", "magenta"]


class TestCompletionDescriptor:
    """Test descriptor constructors"""

    def test_none_has_no_completion(self):
        assert not CompletionDescriptor.none().has_completion

    def test_static_accepts_varargs_or_iterable(self):
        assert CompletionDescriptor.static("a", "b").values == ("a", "b")
        assert CompletionDescriptor.static(["a", "b"]).values == ("a", "b")

    def test_method_is_unresolved_until_registered(self):
        descriptor = CompletionDescriptor.method("colors")
        assert descriptor.source is CompletionSource.NAMED_METHOD
        assert not descriptor.has_completion

    def test_aliases_are_normalized_to_tuple(self):
        assert ArgumentDescriptor("Verbose", "v").aliases == ("v",)
        assert ArgumentDescriptor("Verbose", ["v", "V"]).aliases == ("v", "V")


class TestCommandRegistry:
    """Test registration and lookup"""

    def test_find_command_is_case_insensitive(self, registry):
        command = registry.find_command("CONNECT", ("Server",))
        assert command is not None
        assert command.path == "server connect"

    def test_find_group(self, registry):
        assert registry.find_group("server profile").name == "profile"
        assert registry.find_group(("server", "nope")) is None

    def test_groups_and_commands_in(self, registry):
        assert [g.name for g in registry.groups_in(("server",))] == ["profile"]
        names = sorted(c.name for c in registry.commands_in(("server",)))
        assert names == ["connect", "disconnect", "status"]

    def test_register_creates_parent_groups(self):
        registry = CommandRegistry()
        registry.register(CommandDescriptor("add", "cloud bucket"))
        assert registry.find_group("cloud") is not None
        assert registry.find_group("cloud bucket") is not None

    def test_duplicate_command_raises(self, registry):
        with pytest.raises(RegistryError) as exc:
            registry.register(CommandDescriptor("deploy"))
        assert exc.value.code == "REGISTRY_ERROR"

    def test_command_group_clash_raises(self, registry):
        with pytest.raises(RegistryError):
            registry.register(CommandDescriptor("server"))
        with pytest.raises(RegistryError):
            registry.register_group("deploy")

    def test_duplicate_alias_raises(self):
        registry = CommandRegistry()
        with pytest.raises(RegistryError):
            registry.register(CommandDescriptor("run", arguments=[
                ArgumentDescriptor("Fast", "f"),
                ArgumentDescriptor("Force", "f"),
            ]))

    def test_resolve_walks_groups(self, registry):
        resolved = registry.resolve(["server", "profile", "add", "x"])
        assert resolved.command.path == "server profile add"
        assert resolved.consumed == 3

    def test_resolve_group_only(self, registry):
        resolved = registry.resolve(["server"])
        assert resolved.command is None
        assert resolved.group == ("server",)
        assert not resolved.unrecognized

    def test_resolve_unrecognized(self, registry):
        resolved = registry.resolve(["server", "bogus"])
        assert resolved.unrecognized
        assert resolved.consumed == 1


class TestDescriptorResolution:
    """Test that completion descriptors are resolved once at registration"""

    def test_named_method_resolves_against_handler(self):
        registry = CommandRegistry()
        command = registry.register(CommandDescriptor("paint", handler=Handler(), arguments=[
            ArgumentDescriptor("Color", completion=CompletionDescriptor.method("colors")),
        ]))
        descriptor = command.find_argument("color").completion
        assert descriptor.has_completion
        assert descriptor.target(None) == ["red", "green"]

    def test_provider_type_from_class(self):
        registry = CommandRegistry()
        command = registry.register(CommandDescriptor("paint", arguments=[
            ArgumentDescriptor("Color", completion=CompletionDescriptor.provider_type(ColorProvider)),
        ]))
        descriptor = command.arguments[0].completion
        assert isinstance(descriptor.target, ColorProvider)
        assert descriptor.identity.endswith("ColorProvider")

    def test_provider_type_from_dotted_path(self):
        registry = CommandRegistry()
        command = registry.register(CommandDescriptor("remove", arguments=[
            ArgumentDescriptor("Name", completion=CompletionDescriptor.provider_type(
                "ghostline.cli.sample_commands.ProfileNameProvider")),
        ]))
        assert command.arguments[0].completion.has_completion

    def test_missing_method_is_logged_and_unresolved(self, caplog):
        registry = CommandRegistry()
        with caplog.at_level(logging.WARNING, logger="ghostline"):
            command = registry.register(CommandDescriptor("paint", handler=Handler(), arguments=[
                ArgumentDescriptor("Color", position=0, completion=CompletionDescriptor.method("missing")),
            ]))
        assert not command.arguments[0].completion.has_completion
        assert "missing" in caplog.text

    def test_unimportable_provider_is_unresolved(self):
        registry = CommandRegistry()
        command = registry.register(CommandDescriptor("paint", arguments=[
            ArgumentDescriptor("Color", completion=CompletionDescriptor.provider_type("no.such.module.Provider")),
        ]))
        assert not command.arguments[0].completion.has_completion

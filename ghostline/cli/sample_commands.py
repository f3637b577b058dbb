#!/usr/bin/env python3
"""
Demo command set for the Ghostline shell.

Covers every kind of completion the engine offers: nested groups, named
arguments with aliases, positional slots (including a variadic one and one
without completion), static values, enums, paths, a completion method on the
command handler and a provider type doing an asynchronous lookup.
"""

import asyncio
from enum import Enum

from ..registry import ArgumentDescriptor as Arg
from ..registry import CommandDescriptor, CommandRegistry
from ..registry import CompletionDescriptor as Complete


class Strategy(Enum):
    Rolling = "rolling"
    BlueGreen = "blue-green"
    Canary = "canary"


class LogLevel(Enum):
    Debug = 10
    Info = 20
    Warning = 30
    Error = 40


PROFILE_STORE = ["default", "production", "staging", "local-dev"]


class ProfileNameProvider:
    """Looks up saved profile names, as a remote profile service would"""

    async def get_completions(self, ctx):
        await asyncio.sleep(0)
        return list(PROFILE_STORE)


class ServiceHandler:
    """Handler object whose methods back NAMED_METHOD completions"""

    services = ("api", "worker", "scheduler", "web")

    def service_names(self, ctx):
        return list(self.services)


def build_sample_registry() -> CommandRegistry:
    registry = CommandRegistry()
    registry.register_group("server", "Manage the remote server connection")
    registry.register_group("server profile", "Saved connection profiles")

    registry.register(CommandDescriptor("connect", "server", "Connect to a server", [
        Arg("ApiKey", "k", description="API key used to authenticate"),
        Arg("Host", "H", description="Server host name"),
        Arg("Port", "p", description="Server port"),
        Arg("Profile", completion=Complete.provider_type(ProfileNameProvider), description="Saved profile to use"),
    ]))
    registry.register(CommandDescriptor("disconnect", "server", "Close the current connection"))
    registry.register(CommandDescriptor("status", "server", "Show connection status"))
    registry.register(CommandDescriptor("add", "server profile", "Save a new profile", [
        Arg("Name", position=0, description="Profile name"),
        Arg("Host", "H", description="Server host name"),
    ]))
    registry.register(CommandDescriptor("remove", "server profile", "Delete a saved profile", [
        Arg("Name", position=0, completion=Complete.provider_type(ProfileNameProvider), description="Profile name"),
    ]))
    registry.register(CommandDescriptor("list", "server profile", "List saved profiles"))

    registry.register(CommandDescriptor("deploy", description="Deploy a build", arguments=[
        Arg("Environment", "e", completion=Complete.static("dev", "staging", "production"), description="Target environment"),
        Arg("Strategy", "s", completion=Complete.enum(Strategy), description="Rollout strategy"),
        Arg("Force", "F", is_flag=True, description="Skip confirmation"),
        Arg("Tag", "t", description="Release tag"),
    ]))
    registry.register(CommandDescriptor("copy", description="Copy a file", arguments=[
        Arg("Source", position=0, completion=Complete.file_path(), description="File to copy"),
        Arg("Destination", position=1, completion=Complete.directory_path(), description="Target directory"),
        Arg("Force", "f", is_flag=True, description="Overwrite existing files"),
        Arg("Verbose", "v", is_flag=True, description="Print each file copied"),
    ]))
    registry.register(CommandDescriptor("logs", description="Show service logs", handler=ServiceHandler(), arguments=[
        Arg("Services", position=0, is_variadic=True, completion=Complete.method("service_names"), description="Services to tail"),
        Arg("Level", "l", completion=Complete.enum(LogLevel), description="Minimum level"),
        Arg("Follow", "f", is_flag=True, description="Keep streaming"),
    ]))
    registry.register(CommandDescriptor("process", description="Process an input file", arguments=[
        Arg("Input", position=0, description="Input to process"),
        Arg("Output", "o", completion=Complete.file_path(), description="Where to write the result"),
    ]))
    registry.register(CommandDescriptor("help", description="Show help"))
    registry.register(CommandDescriptor("exit", description="Leave the shell"))
    return registry

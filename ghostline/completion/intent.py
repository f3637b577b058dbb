#!/usr/bin/env python3
"""
Ghostline Intent Detector
Decides what the token under the cursor should be completed with
"""

from ..registry import CommandRegistry, CompletionDescriptor
from .models import CompletionContext, ElementType, Intent
from .tokens import active_token, tokenize
from .used_args import UsedArgumentTracker, bind_positionals, ends_options, lookup_option, scan_arguments


class IntentDetector:
    """
    Classifies the cursor position:

    - no command resolved yet: command and group names
    - `--` prefix: argument names
    - `-` prefix: argument aliases
    - after an option that takes a value: that argument's values
    - bare word with an open positional slot that completes: positional values
    - anything else after a command: argument names (option intent)

    After a bare `--` every word is a positional value, dashes included.
    """

    def __init__(self, registry: CommandRegistry, tracker: UsedArgumentTracker = None):
        self.registry = registry
        self.tracker = tracker or UsedArgumentTracker(registry)

    def detect(self, buffer: str, cursor: int = None) -> CompletionContext:
        cursor = len(buffer) if cursor is None else max(0, min(cursor, len(buffer)))
        tokens = tokenize(buffer)
        span, current = active_token(buffer, cursor, tokens)
        base = dict(buffer=buffer, cursor=cursor, partial=span.partial, token_start=span.start, token_end=span.end)

        before = [t for t in tokens if t.end <= span.start]
        resolved = self.registry.resolve([t.text for t in before])
        if resolved.unrecognized:
            return CompletionContext(**base, group=resolved.group)
        if resolved.command is None:
            return CompletionContext(
                **base, intent=Intent.COMMAND, element_type=ElementType.COMMAND, group=resolved.group,
            )

        command = resolved.command
        arguments_before = before[resolved.consumed:]
        others = [t for t in tokens[resolved.consumed:] if t is not current]
        used = self.tracker.used_for(command, others)
        base.update(group=command.group, command=command, used=used)

        options_ended = any(ends_options(t) for t in arguments_before)
        partial = span.partial
        if options_ended:
            return self._positional(command, base, others, arguments_before)
        if partial.startswith("--"):
            return CompletionContext(**base, intent=Intent.ARGUMENT_NAME, element_type=ElementType.ARGUMENT_NAME)
        if partial.startswith("-") and (current is None or current.is_option or partial == "-"):
            return CompletionContext(**base, intent=Intent.ARGUMENT_ALIAS, element_type=ElementType.ARGUMENT_ALIAS)

        previous = arguments_before[-1] if arguments_before else None
        if previous is not None and previous.is_option and "=" not in previous.text:
            argument = lookup_option(command, previous.text)
            if argument is not None and argument.takes_value:
                return CompletionContext(
                    **base, intent=Intent.ARGUMENT_VALUE, element_type=ElementType.ARGUMENT_VALUE,
                    argument_name=argument.name, completion=argument.completion,
                )

        positional = self._positional(command, base, others, arguments_before)
        if positional.intent is Intent.POSITIONAL_VALUE:
            return positional

        # No open slot, or the slot has nothing to offer: suggest argument names
        return CompletionContext(
            **base, intent=Intent.OPTION, element_type=ElementType.ARGUMENT_NAME,
            completion=CompletionDescriptor.none(),
        )

    @staticmethod
    def _positional(command, base, others, arguments_before) -> CompletionContext:
        """The open positional slot at the cursor, or a context with no intent"""
        named_everywhere = scan_arguments(command, others).named
        positional_before = scan_arguments(command, arguments_before).positional
        _, slot = bind_positionals(command, named_everywhere, len(positional_before))
        if slot is None or not slot.completion.has_completion:
            return CompletionContext(**base)
        return CompletionContext(
            **base, intent=Intent.POSITIONAL_VALUE, element_type=ElementType.POSITIONAL_VALUE,
            argument_name=slot.name, completion=slot.completion,
        )

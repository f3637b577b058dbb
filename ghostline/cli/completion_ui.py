#!/usr/bin/env python3
"""
Ghostline Completion UI
Styling of completion menu entries for prompt_toolkit
"""

from typing import Optional

from prompt_toolkit.formatted_text import FormattedText

from ..completion.models import CompletionItem, ItemKind
from ..config import config


class CompletionTheme:
    """Theme configuration for completion menu entries"""

    MINIMAL = {
        'group': 'bold',
        'command': '',
        'argument': '',
        'value': '',
        'path': '',
        'history': 'italic',
        'meta': 'italic',
    }

    PROFESSIONAL = {
        'group': 'bold #af87ff',
        'command': 'bold #00d7ff',
        'argument': '#00ff87',
        'value': '#ffaf00',
        'path': '#5fafff',
        'history': 'italic #7a7a7a',
        'meta': 'italic #7a7a7a',
    }


KIND_STYLE_KEYS = {
    ItemKind.GROUP: 'group',
    ItemKind.COMMAND: 'command',
    ItemKind.ARGUMENT_NAME: 'argument',
    ItemKind.ARGUMENT_ALIAS: 'argument',
    ItemKind.ARGUMENT_VALUE: 'value',
    ItemKind.PATH: 'path',
    ItemKind.HISTORY: 'history',
}


class CompletionFormatter:
    """Formats completion items for the prompt_toolkit menu"""

    def __init__(self, theme: Optional[str] = None, meta_width: int = 50):
        """theme defaults to the menu.theme setting"""
        theme = theme or config.get("menu.theme", "professional")
        self.theme_name = theme
        self.theme = self._load_theme(theme)
        self.meta_width = meta_width

    def _load_theme(self, theme: str) -> dict:
        themes = {
            'minimal': CompletionTheme.MINIMAL,
            'professional': CompletionTheme.PROFESSIONAL,
        }
        return themes.get(theme, CompletionTheme.PROFESSIONAL)

    def format_display(self, item: CompletionItem, highlight_prefix: str = "") -> FormattedText:
        """Menu text, with the already-typed prefix in bold"""
        style = self.theme[KIND_STYLE_KEYS.get(item.kind, 'value')]
        text = item.display
        if highlight_prefix and text.lower().startswith(highlight_prefix.lower()):
            cut = len(highlight_prefix)
            return FormattedText([(f'{style} bold'.strip(), text[:cut]), (style, text[cut:])])
        return FormattedText([(style, text)])

    def format_meta(self, item: CompletionItem) -> FormattedText:
        if not item.description:
            return FormattedText([])
        meta = item.description
        if len(meta) > self.meta_width:
            meta = meta[:self.meta_width - 3] + '...'
        return FormattedText([(self.theme['meta'], meta)])

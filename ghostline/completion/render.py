#!/usr/bin/env python3
"""
Render instructions emitted by the controller. Drawing them is up to the renderer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .models import CompletionItem


@dataclass(frozen=True)
class UpdateLine:
    buffer: str
    cursor: int


@dataclass(frozen=True)
class ShowGhost:
    text: str
    position: int


@dataclass(frozen=True)
class ClearGhost:
    pass


@dataclass(frozen=True)
class ShowMenu:
    items: Tuple[CompletionItem, ...]
    selected_index: int
    viewport_start: int = 0
    viewport_size: int = 10


@dataclass(frozen=True)
class ClearMenu:
    pass


RenderInstruction = Union[UpdateLine, ShowGhost, ClearGhost, ShowMenu, ClearMenu]


class Renderer(ABC):
    @abstractmethod
    def render(self, instructions: Sequence[RenderInstruction]) -> None:
        ...


class RecordingRenderer(Renderer):
    """Keeps every batch it is given"""

    def __init__(self):
        self.batches: List[List[RenderInstruction]] = []

    def render(self, instructions: Sequence[RenderInstruction]) -> None:
        self.batches.append(list(instructions))

    @property
    def instructions(self) -> List[RenderInstruction]:
        return [instruction for batch in self.batches for instruction in batch]

    def last(self, kind: type):
        for instruction in reversed(self.instructions):
            if isinstance(instruction, kind):
                return instruction
        return None

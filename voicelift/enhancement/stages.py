"""Base interface for enhancement pipeline stages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from voicelift._types import PipelineState, SampleBuffer


class EnhancementStage(ABC):
    """Individual enhancement pipeline stage.

    Each stage receives an immutable SampleBuffer and returns a buffer.
    A stage that alters the signal must allocate a new buffer; returning
    the input object is only allowed when nothing changed. Stages hold
    nothing but their parameters, so one instance may serve concurrent runs.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier name for the stage (e.g. 'noise_gate', 'normalize')."""
        ...

    @property
    @abstractmethod
    def state(self) -> PipelineState:
        """Pipeline state entered while this stage runs."""
        ...

    @property
    @abstractmethod
    def progress_label(self) -> str:
        """User-facing progress label emitted before the stage runs."""
        ...

    @abstractmethod
    def process(self, buffer: SampleBuffer) -> SampleBuffer:
        """Process a buffer.

        Args:
            buffer: Input buffer. Never mutated.

        Returns:
            Output buffer, same or smaller frame count.
        """
        ...

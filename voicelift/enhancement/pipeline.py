"""Enhancement Pipeline.

Orchestrates enhancement stages in the fixed order
noise gate -> voice enhance -> silence trim -> normalize.
Each stage is toggleable via ProcessingSettings; disabled stages are not
built at all. A fault in a stage or in the progress callback never reaches
the caller: the run resolves with the original, untouched input buffer.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from voicelift._audio_constants import PROGRESS_COMPLETE, PROGRESS_FAILED, PROGRESS_STARTING
from voicelift._types import PipelineState, SampleBuffer
from voicelift.config.processing import ProcessingSettings
from voicelift.enhancement.noise_gate import NoiseGateStage
from voicelift.enhancement.normalize import NormalizeStage
from voicelift.enhancement.silence_trim import SilenceTrimStage
from voicelift.enhancement.voice_enhance import VoiceEnhanceStage
from voicelift.exceptions import InvalidBufferError, StageFailureError
from voicelift.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from voicelift.enhancement.stages import EnhancementStage

    ProgressCallback = Callable[[str], None]

logger = get_logger("enhancement.pipeline")


@dataclass(frozen=True, slots=True)
class EnhancementResult:
    """Outcome of one pipeline run.

    On failure ``buffer`` is the exact input object and ``error`` holds the
    wrapped stage exception.
    """

    buffer: SampleBuffer
    state: PipelineState
    completed_stages: tuple[str, ...]
    error: StageFailureError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.DONE


def build_stages(
    settings: ProcessingSettings,
    highpass_reference_rate: int | None = None,
) -> list[EnhancementStage]:
    """Create the enabled stages for ``settings`` in pipeline order."""
    stages: list[EnhancementStage] = []

    if settings.noise_reduction > 0:
        stages.append(NoiseGateStage(settings.noise_reduction))

    if settings.voice_enhancement > 0:
        stages.append(
            VoiceEnhanceStage(
                settings.voice_enhancement,
                reference_sample_rate=highpass_reference_rate,
            )
        )

    if settings.silence_removal:
        stages.append(SilenceTrimStage(settings.silence_threshold))

    if settings.volume_normalization:
        stages.append(NormalizeStage(settings.target_volume))

    return stages


def _ignore_progress(_label: str) -> None:
    return None


class EnhancementPipeline:
    """Audio enhancement pipeline.

    Receives a SampleBuffer, runs the enabled stages in sequence and returns
    the enhanced buffer. Holds no per-run state, so a single instance can
    serve concurrent runs on different buffers.

    Args:
        settings: Run configuration. Defaults to ``ProcessingSettings()``.
        stages: Stages to execute. If None, built from ``settings`` with the
                high-pass reference rate taken from the engine settings.
    """

    def __init__(
        self,
        settings: ProcessingSettings | None = None,
        stages: list[EnhancementStage] | None = None,
    ) -> None:
        self._settings = settings if settings is not None else ProcessingSettings()
        if stages is None:
            from voicelift.config.settings import get_settings

            stages = build_stages(
                self._settings,
                highpass_reference_rate=get_settings().engine.highpass_reference_rate,
            )
        self._stages = stages

    @property
    def settings(self) -> ProcessingSettings:
        """Run configuration."""
        return self._settings

    @property
    def stages(self) -> list[EnhancementStage]:
        """List of pipeline stages."""
        return list(self._stages)

    def process(
        self,
        buffer: SampleBuffer,
        on_progress: ProgressCallback | None = None,
    ) -> EnhancementResult:
        """Run every stage and report the terminal state.

        Args:
            buffer: Input buffer. Never mutated.
            on_progress: Called synchronously with each progress label.

        Returns:
            EnhancementResult in state DONE, or FAILED with the original buffer.

        Raises:
            InvalidBufferError: If ``buffer`` is not a SampleBuffer.
        """
        if not isinstance(buffer, SampleBuffer):
            raise InvalidBufferError(f"expected SampleBuffer, got {type(buffer).__name__}")

        emit = on_progress or _ignore_progress
        state = PipelineState.IDLE
        completed: list[str] = []

        try:
            emit(PROGRESS_STARTING)
            current = buffer.copy()

            for stage in self._stages:
                state = stage.state
                emit(stage.progress_label)
                logger.debug("stage_start", stage=stage.name, frames=current.frame_count)
                current = stage.process(current)
                completed.append(stage.name)
                logger.debug(
                    "stage_complete",
                    stage=stage.name,
                    frames=current.frame_count,
                    channels=current.channel_count,
                )

            state = PipelineState.DONE
            emit(PROGRESS_COMPLETE)
        except Exception as exc:
            failure = StageFailureError(state.value, str(exc) or type(exc).__name__)
            failure.__cause__ = exc
            logger.exception("enhancement_failed", stage=state.value, completed=completed)
            try:
                emit(PROGRESS_FAILED)
            except Exception:
                logger.exception("progress_callback_failed", label=PROGRESS_FAILED)
            return EnhancementResult(
                buffer=buffer,
                state=PipelineState.FAILED,
                completed_stages=tuple(completed),
                error=failure,
            )

        logger.info(
            "enhancement_complete",
            stages=completed,
            input_s=round(buffer.duration, 3),
            output_s=round(current.duration, 3),
        )
        return EnhancementResult(
            buffer=current,
            state=PipelineState.DONE,
            completed_stages=tuple(completed),
        )

    def run(
        self,
        buffer: SampleBuffer,
        on_progress: ProgressCallback | None = None,
    ) -> SampleBuffer:
        """Run the pipeline and return only the resulting buffer."""
        return self.process(buffer, on_progress).buffer


def enhance(
    buffer: SampleBuffer,
    settings: ProcessingSettings | None = None,
    on_progress: ProgressCallback | None = None,
) -> SampleBuffer:
    """Enhance ``buffer`` with ``settings``.

    Returns the enhanced buffer, or ``buffer`` itself if any stage failed
    (the failure label is emitted through ``on_progress``).
    """
    return EnhancementPipeline(settings).run(buffer, on_progress)


async def enhance_async(
    buffer: SampleBuffer,
    settings: ProcessingSettings | None = None,
    on_progress: ProgressCallback | None = None,
) -> SampleBuffer:
    """Run ``enhance`` in a worker thread so the event loop stays responsive.

    ``on_progress`` is invoked from the worker thread.
    """
    return await asyncio.to_thread(enhance, buffer, settings, on_progress)

"""`voicelift enhance` command — enhance an audio file and export WAV."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from click.core import ParameterSource
from pydantic import ValidationError

from voicelift.audio_io import decode_audio
from voicelift.cli.main import cli
from voicelift.config.processing import ProcessingSettings
from voicelift.config.settings import get_settings
from voicelift.enhancement.pipeline import EnhancementPipeline
from voicelift.exceptions import VoiceliftError
from voicelift.export.wav import enhanced_filename, write_wav


def _format_time(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def _summary_lines(settings: ProcessingSettings, before_s: float, after_s: float) -> list[str]:
    """Enhancement summary shown after a successful run."""
    return [
        f"Noise reduced:     {round(settings.noise_reduction * 100)}%",
        f"Voice enhanced:    {round(settings.voice_enhancement * 100)}%",
        f"Silence trimmed:   {'Yes' if settings.silence_removal else 'No'}",
        f"Volume normalized: {'Yes' if settings.volume_normalization else 'No'}",
        f"Duration:          {_format_time(before_s)} -> {_format_time(after_s)}",
    ]


@cli.command("enhance")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output WAV path. Default: enhanced_<name>.wav next to the input.",
)
@click.option(
    "--noise-reduction",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Noise gate intensity (0 disables).",
)
@click.option(
    "--voice-enhancement",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Voice clarity intensity (0 disables).",
)
@click.option(
    "--silence-removal/--no-silence-removal",
    default=None,
    help="Remove pauses longer than one second.",
)
@click.option(
    "--silence-threshold",
    type=click.FloatRange(0.0, 1.0, min_open=True, max_open=True),
    default=None,
    help="RMS level below which audio counts as silence.",
)
@click.option(
    "--normalize/--no-normalize",
    "volume_normalization",
    default=None,
    help="Normalize the output peak level.",
)
@click.option(
    "--target-volume",
    type=click.FloatRange(0.0, 1.0, min_open=True),
    default=None,
    help="Target peak amplitude for normalization.",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress and summary output.")
def enhance_command(
    input_file: Path,
    output: Path | None,
    noise_reduction: float | None,
    voice_enhancement: float | None,
    silence_removal: bool | None,
    silence_threshold: float | None,
    volume_normalization: bool | None,
    target_volume: float | None,
    quiet: bool,
) -> None:
    """Enhance an audio file and write the result as 16-bit PCM WAV.

    INPUT_FILE can be WAV, FLAC, OGG or any format libsndfile reads.
    Options not given on the command line take their values from the
    VOICELIFT_* environment variables.
    """
    ctx = click.get_current_context()
    given = {
        "noise_reduction": noise_reduction,
        "voice_enhancement": voice_enhancement,
        "silence_removal": silence_removal,
        "silence_threshold": silence_threshold,
        "volume_normalization": volume_normalization,
        "target_volume": target_volume,
    }
    overrides = {
        name: value
        for name, value in given.items()
        if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT
    }
    try:
        defaults = get_settings().defaults.model_dump()
        settings = ProcessingSettings(**{**defaults, **overrides})
    except ValidationError as err:
        click.echo(f"Error: invalid configuration: {err}", err=True)
        sys.exit(1)

    target = output or input_file.with_name(enhanced_filename(input_file.name))

    try:
        buffer = decode_audio(input_file.read_bytes())
    except VoiceliftError as err:
        click.echo(f"Error: {err}", err=True)
        sys.exit(1)

    def on_progress(label: str) -> None:
        if not quiet:
            click.echo(label)

    result = EnhancementPipeline(settings).process(buffer, on_progress)

    try:
        write_wav(result.buffer, target)
    except OSError as err:
        click.echo(f"Error: could not write {target}: {err}", err=True)
        sys.exit(1)

    if quiet:
        return

    if result.error is not None:
        click.echo(f"Warning: {result.error}", err=True)
    else:
        for line in _summary_lines(settings, buffer.duration, result.buffer.duration):
            click.echo(line)
    click.echo(f"Saved: {target}")

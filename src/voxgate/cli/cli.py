"""CLI entry point for the speech segmentation pipeline."""

import logging
import sys
import time
from pathlib import Path

import click
import numpy as np
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from src.voxgate.config.schemas import Config, SegmentationParams, load_config
from src.voxgate.errors import AudioFormatError, ConfigurationError, VoxgateError
from src.voxgate.events.timestamps import Timestamp
from src.voxgate.utils.env import EnvConfig

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_or_default(config_path: Path | None) -> Config:
    if config_path is None:
        return Config(log_level=EnvConfig.log_level())  # type: ignore[arg-type]
    return load_config(config_path)


@click.group()
def cli() -> None:
    """Voxgate: streaming voice-activity segmentation."""
    pass


@cli.command()
@click.argument("config_path", type=click.Path(exists=True, path_type=Path))
def validate(config_path: Path) -> None:
    """Check a YAML config and show the derived sample counts."""
    console.print(f"[cyan]Checking[/cyan] {config_path}")
    try:
        raw = yaml.safe_load(config_path.read_text())
        if raw is not None and not isinstance(raw, dict):
            raise ConfigurationError("top level of the YAML file must be a mapping")
        cfg = Config(**(raw or {}))
        params = SegmentationParams.from_config(cfg.segmenter)

    except yaml.YAMLError as e:
        console.print(f"[red]❌ Cannot parse YAML:[/red] {e}")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red]❌ {e.error_count()} invalid setting(s):[/red]")
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            console.print(f"  [yellow]{field}[/yellow]: {err['msg']}")
        sys.exit(1)
    except ConfigurationError as e:
        console.print(f"[red]❌ Invalid configuration:[/red] {e}")
        sys.exit(1)

    console.print("[green]✅ Configuration is valid[/green]")
    _print_config_summary(cfg, params)


def _print_config_summary(config: Config, params: SegmentationParams) -> None:
    table = Table(title="Segmentation settings")
    table.add_column("Group", style="cyan")
    table.add_column("Values", style="white")

    seg = config.segmenter
    table.add_row(
        "Segmenter",
        f"Rate: {seg.sample_rate} Hz, threshold: {seg.threshold}\n"
        f"Window: {seg.window_size_ms} ms ({params.window_size_samples} samples)\n"
        f"Min speech: {seg.min_speech_ms} ms ({params.min_speech_samples} samples)\n"
        f"Min silence: {seg.min_silence_ms} ms ({params.min_silence_samples} samples)\n"
        f"Max speech: {seg.max_speech_s} s ({params.max_speech_samples} samples)\n"
        f"Padding: {seg.speech_pad_ms} ms ({params.speech_pad_samples} samples)",
    )
    table.add_row(
        "Model",
        f"Path: {config.model.path or EnvConfig.model_path() or '-'}\n"
        f"Context: {config.model.context_samples} samples\n"
        f"State shape: {config.model.state_shape}\n"
        f"Device: {config.model.device}",
    )
    table.add_row(
        "Output",
        f"Padding applied: {config.output.apply_padding}\n"
        f"Decimals: {config.output.decimals}",
    )
    console.print(table)


def _print_segments(
    segments: list[Timestamp], sample_rate: int, decimals: int, title: str
) -> None:
    table = Table(title=title)
    table.add_column("#", style="magenta")
    table.add_column("Start (s)", style="cyan")
    table.add_column("End (s)", style="cyan")
    table.add_column("Samples", style="white")

    for i, seg in enumerate(segments, start=1):
        start_s, end_s = seg.to_seconds(sample_rate)
        table.add_row(
            str(i), f"{start_s:.{decimals}f}", f"{end_s:.{decimals}f}", f"{seg.start}-{seg.end}"
        )
    console.print(table)


def _export(
    segments: list[Timestamp],
    sample_rate: int,
    output_json: Path | None,
    output_csv: Path | None,
    metadata: dict,
) -> None:
    from src.voxgate.events.export import export_csv, export_json

    if output_json:
        export_json(segments, output_json, sample_rate, metadata=metadata)
        console.print(f"[green]✅ Segments saved to:[/green] {output_json}")
    if output_csv:
        export_csv(segments, output_csv, sample_rate)
        console.print(f"[green]✅ Segments exported to:[/green] {output_csv}")


@cli.command()
@click.argument("audio_path", type=click.Path(exists=True, path_type=Path))
@click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path))
@click.option("--model", "model_path", type=click.Path(path_type=Path), help="TorchScript model")
@click.option("--pad/--no-pad", default=None, help="Pad segments by speech_pad_ms")
@click.option("--output-json", type=click.Path(path_type=Path), help="Save segments to JSON")
@click.option("--output-csv", type=click.Path(path_type=Path), help="Save segments to CSV")
def segment(
    audio_path: Path,
    config_path: Path | None,
    model_path: Path | None,
    pad: bool | None,
    output_json: Path | None,
    output_csv: Path | None,
) -> None:
    """Detect speech segments in a mono WAV file.

    Args:
        audio_path: Path to a mono WAV file at the configured sample rate
        config_path: Optional YAML config (defaults are used otherwise)
        model_path: TorchScript model; overrides config and VOXGATE_MODEL_PATH
        pad: Override output.apply_padding
        output_json: Optional path to save segments as JSON
        output_csv: Optional path to save segments as CSV
    """
    try:
        from src.voxgate.data.io import load_wav
        from src.voxgate.models.silero import TorchScriptVadModel
        from src.voxgate.post.postprocess import pad_segments
        from src.voxgate.streaming.driver import StreamDriver

        cfg = _load_or_default(config_path)
        _setup_logging(cfg.log_level)
        seg_cfg = cfg.segmenter

        audio = load_wav(audio_path)
        if audio.num_channels != 1:
            raise AudioFormatError(
                f"Expected mono audio, got {audio.num_channels} channels "
                "(channel mixing is not performed)"
            )
        if audio.sample_rate != seg_cfg.sample_rate:
            raise AudioFormatError(
                f"Audio is {audio.sample_rate} Hz but the segmenter expects "
                f"{seg_cfg.sample_rate} Hz (resampling is not performed)"
            )

        resolved_model = model_path or cfg.model.path or EnvConfig.model_path()
        if resolved_model is None:
            raise ConfigurationError(
                "No model given: pass --model, set model.path, or VOXGATE_MODEL_PATH"
            )
        model = TorchScriptVadModel.load(
            resolved_model,
            sample_rate=seg_cfg.sample_rate,
            device=cfg.model.device,
            num_threads=cfg.model.num_threads or EnvConfig.num_threads(),
        )
        driver = StreamDriver.from_config(cfg, model)

        console.print(f"[cyan]Segmenting:[/cyan] {audio_path}")
        started = time.perf_counter()
        segments = driver.run(audio.samples)
        elapsed = time.perf_counter() - started

        apply_padding = cfg.output.apply_padding if pad is None else pad
        if apply_padding:
            segments = pad_segments(
                segments, driver.params.speech_pad_samples, audio.num_samples
            )

        _print_segments(
            segments, seg_cfg.sample_rate, cfg.output.decimals, title="Speech Segments"
        )
        rtf = elapsed / audio.duration_s if audio.duration_s else 0.0
        console.print(
            f"[cyan]Frames:[/cyan] {driver.frames_processed}  "
            f"[cyan]Elapsed:[/cyan] {elapsed:.3f}s  [cyan]RTF:[/cyan] {rtf:.4f}"
        )

        _export(
            segments,
            seg_cfg.sample_rate,
            output_json,
            output_csv,
            metadata={
                "audio": str(audio_path),
                "model": str(resolved_model),
                "padded": apply_padding,
                "elapsed_s": elapsed,
            },
        )

    except (VoxgateError, FileNotFoundError) as e:
        console.print(f"[red]❌ Segmentation failed:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Segmentation error:[/red] {e}")
        sys.exit(1)


@cli.command("segment-probs")
@click.argument("probs_path", type=click.Path(exists=True, path_type=Path))
@click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--total-samples", type=int, default=None, help="Stream length for the trailing flush"
)
@click.option("--output-json", type=click.Path(path_type=Path), help="Save segments to JSON")
@click.option("--output-csv", type=click.Path(path_type=Path), help="Save segments to CSV")
def segment_probs(
    probs_path: Path,
    config_path: Path | None,
    total_samples: int | None,
    output_json: Path | None,
    output_csv: Path | None,
) -> None:
    """Segment precomputed per-frame probabilities (.npy or text, one per frame)."""
    try:
        from src.voxgate.streaming.driver import segment_probabilities

        cfg = _load_or_default(config_path)
        _setup_logging(cfg.log_level)
        params = SegmentationParams.from_config(cfg.segmenter)

        if probs_path.suffix == ".npy":
            probs = np.load(probs_path)
        else:
            probs = np.loadtxt(probs_path, ndmin=1)

        segments = segment_probabilities(probs, params, total_samples=total_samples)
        _print_segments(
            segments, params.sample_rate, cfg.output.decimals, title="Speech Segments"
        )
        console.print(f"[cyan]Frames:[/cyan] {np.size(probs)}  [cyan]Segments:[/cyan] {len(segments)}")

        _export(
            segments,
            params.sample_rate,
            output_json,
            output_csv,
            metadata={"probabilities": str(probs_path)},
        )

    except (VoxgateError, ValueError, OSError) as e:
        console.print(f"[red]❌ Segmentation failed:[/red] {e}")
        sys.exit(1)


@cli.command("inspect-model")
@click.argument("model_path", type=click.Path(exists=True, path_type=Path))
def inspect_model(model_path: Path) -> None:
    """List the inputs and outputs of a TorchScript VAD model."""
    try:
        from src.voxgate.models.silero import TorchScriptVadModel

        model = TorchScriptVadModel.load(model_path, sample_rate=16000)
        info = model.describe()

        table = Table(title=f"Model I/O: {model_path.name}")
        table.add_column("Kind", style="magenta")
        table.add_column("Index", style="white")
        table.add_column("Name", style="cyan")
        table.add_column("Type", style="green")
        for kind in ("inputs", "outputs"):
            for i, (name, type_str) in enumerate(info[kind]):
                table.add_row(kind[:-1], str(i), name, type_str)
        console.print(table)

    except Exception as e:
        console.print(f"[red]Model inspection error:[/red] {e}")
        sys.exit(1)


def main() -> int:
    """Main entry point."""
    return cli(standalone_mode=False) or 0


if __name__ == "__main__":
    sys.exit(main())

"""
Timelapse CLI - record the screen and save it sped up.

Commands:
    timelapse record                 - Record until Enter, then save
    timelapse finalize <capture>     - Save a leftover capture manually
    timelapse probe                  - Check that ffmpeg is available
    timelapse config                 - Show resolved settings
    timelapse platform-info          - Show platform lookups
    timelapse version                - Show version
"""

import sys
from typing import Optional

import click

from timelapse.cli.console import ConsoleFilePicker, ConsoleNotifier, ConsoleStatus, FixedFilePicker
from timelapse.config import (
    DISPLAY,
    FINAL_FPS,
    SAVE_DIRECTORY,
    SOURCE_FPS,
    ChainedSettingsProvider,
    DictSettingsProvider,
    FileSettingsProvider,
    Settings,
)
from timelapse.core.controller import RecordingController
from timelapse.core.finalizer import FinalizationRequest, Finalizer
from timelapse.core.naming import new_save_file
from timelapse.core.platform import Platform
from timelapse.encoder import FfmpegEncoder, ProbeResult
from timelapse.errors import TimelapseError
from timelapse.logging import get_timelapse_logger, setup_logging

logger = get_timelapse_logger(__name__)


def settings_options(func):
    """Options shared by commands that read settings."""
    func = click.option('--display', help='Display selector passed to ffmpeg -i')(func)
    func = click.option('--final-fps', type=int, help='Frame rate of the saved timelapse')(func)
    func = click.option('--source-fps', type=int, help='Frames captured per second')(func)
    func = click.option('--save-dir', help='Directory for generated save files')(func)
    func = click.option('--settings', 'settings_file', type=click.Path(dir_okay=False),
                        help='Settings JSON file (default: ~/.timelapse/settings.json)')(func)
    return func


def _settings_provider(settings_file: Optional[str], save_dir: Optional[str],
                       source_fps: Optional[int], final_fps: Optional[int],
                       display: Optional[str]) -> ChainedSettingsProvider:
    """Command line flags over the settings file."""
    flags = DictSettingsProvider({
        SAVE_DIRECTORY: save_dir,
        SOURCE_FPS: source_fps,
        FINAL_FPS: final_fps,
        DISPLAY: display,
    })
    return ChainedSettingsProvider(flags, FileSettingsProvider(settings_file))


@click.group(invoke_without_command=True)
@click.option('--log-level', default='WARNING', help='Log level (default: WARNING)')
@click.pass_context
def cli(ctx, log_level: str):
    """Timelapse - record your screen and speed it up with ffmpeg."""
    setup_logging(level=log_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@settings_options
@click.option('--output', '-o', help='Save to this path instead of asking (an existing file is replaced)')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for follow-up actions')
def record(settings_file: Optional[str], save_dir: Optional[str], source_fps: Optional[int],
           final_fps: Optional[int], display: Optional[str], output: Optional[str], yes: bool):
    """
    Record the screen until Enter is pressed, then save the timelapse.

    Example:
        timelapse record
        timelapse record --source-fps 2 --final-fps 30 -o demo.mp4
    """
    provider = _settings_provider(settings_file, save_dir, source_fps, final_fps, display)
    interactive = not yes
    picker = FixedFilePicker(output) if output else ConsoleFilePicker()

    controller = RecordingController(
        notifier=ConsoleNotifier(interactive=interactive),
        file_picker=picker,
        settings=provider,
        on_status=ConsoleStatus(),
    )

    try:
        if controller.activate() == ProbeResult.NOT_INSTALLED:
            sys.exit(1)

        controller.start()
        if controller.status.command != "stop":
            sys.exit(1)

        try:
            click.prompt("Press Enter to stop recording", default="", show_default=False,
                         prompt_suffix="", err=True)
        except (KeyboardInterrupt, click.Abort):
            click.echo("\nStopping...", err=True)

        result = controller.stop()
        if result is None or not result.success:
            sys.exit(1)
    except TimelapseError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    finally:
        controller.shutdown()


@cli.command()
@click.argument('capture_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('destination', required=False)
@settings_options
def finalize(capture_file: str, destination: Optional[str], settings_file: Optional[str],
             save_dir: Optional[str], source_fps: Optional[int], final_fps: Optional[int],
             display: Optional[str]):
    """
    Turn a leftover capture into a timelapse.

    A capture is kept in the temp directory when saving fails.

    Example:
        timelapse finalize /tmp/timelapse-temp-ab12.mp4 out.mp4 --final-fps 30
    """
    try:
        settings = Settings.from_provider(
            _settings_provider(settings_file, save_dir, source_fps, final_fps, display)
        )
        target = destination or new_save_file(settings.save_directory)
    except (TimelapseError, OSError) as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo(f"Finalizing {capture_file} at {settings.final_fps} fps...")
    result = Finalizer(FfmpegEncoder()).finalize(
        FinalizationRequest(capture_file, target, settings.final_fps)
    )

    if not result.success:
        click.secho(f"Could not save timelapse: {result.error}", fg="red", err=True)
        sys.exit(1)

    logger.success(f"Saved timelapse: {result.destination}")


@cli.command()
def probe():
    """Check whether ffmpeg can be run."""
    result = FfmpegEncoder().probe_available()

    if result == ProbeResult.INSTALLED:
        click.secho("ffmpeg is installed.", fg="green")
    elif result == ProbeResult.PROBE_FAILED:
        click.secho("Could not check if ffmpeg is installed.", fg="yellow")
    else:
        click.secho("ffmpeg is not installed. See https://ffmpeg.org/download.html", fg="red")
        sys.exit(1)


@cli.command()
@settings_options
def config(settings_file: Optional[str], save_dir: Optional[str], source_fps: Optional[int],
           final_fps: Optional[int], display: Optional[str]):
    """Show resolved settings."""
    try:
        settings = Settings.from_provider(
            _settings_provider(settings_file, save_dir, source_fps, final_fps, display)
        )
    except TimelapseError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.echo("Settings:")
    click.echo(f"  Save directory: {settings.save_directory}")
    click.echo(f"  Source fps:     {settings.source_fps}")
    click.echo(f"  Final fps:      {settings.final_fps}")
    click.echo(f"  Display:        {settings.display or '(platform default)'}")


@cli.command()
def platform_info():
    """Show detected platform information."""
    plat = Platform.detect()
    click.echo("Platform Information:")
    click.echo(f"  System:  {plat.system}")
    click.echo(f"  Version: {plat.version}")
    click.echo(f"  Arch:    {plat.arch}")

    if not plat.supported:
        click.secho("  Screen recording is not supported on this platform.", fg="red")
        return

    click.echo(f"  Driver:  {plat.input_driver()}")
    click.echo(f"  Display: {plat.default_display()}")
    click.echo(f"  Opener:  {' '.join(plat.opener())}")


@cli.command()
def version():
    """Show Timelapse version."""
    from timelapse import __version__
    click.echo(f"timelapse version {__version__}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

# src/flutter_asset_gen/main.py
import signal
import threading
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .config import ConfigError, load_config
from .logging_config import setup_logging
from .logic import generate_assets
from .watcher import AssetWatcher

try:
    from importlib.metadata import PackageNotFoundError, version
    __version__ = version("flutter-asset-gen")
except PackageNotFoundError:
    # 패키지가 설치되지 않은 상태로 실행하는 경우 (pyproject.toml 과 일치시키세요)
    __version__ = "0.1.0"


# --- Typer 앱 생성 및 기본 설정 ---
app = typer.Typer(
    name="flutter-asset-gen",
    help="Generates Dart constants for the files in your Flutter asset directories.",
    add_completion=False,
)


def version_callback(value: bool):
    if value:
        typer.echo(f"flutter-asset-gen version: {__version__}")
        raise typer.Exit()


def _run_watch(watcher: AssetWatcher) -> None:
    """watcher 를 시작하고 SIGINT/SIGTERM 을 받을 때까지 대기합니다."""
    stopped = threading.Event()

    def _handle_signal(signum, frame):
        watcher.stop()
        stopped.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    watcher.start()
    typer.echo("Press Ctrl+C to stop")
    # 짧은 timeout 으로 대기해야 메인 스레드에서 시그널 핸들러가 실행됨
    while not stopped.wait(0.5):
        pass


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def run(
    config_path: Annotated[Optional[Path], typer.Option(
        "--config",
        help="Path to the YAML config file. Defaults to 'asset_gen.yaml' in the current directory.",
        dir_okay=False,
    )] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Verbose output.")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Do not write the output file.")] = False,
    watch: Annotated[bool, typer.Option("--watch", help="Watch mode - regenerate on file changes.")] = False,
    no_validate: Annotated[bool, typer.Option("--no-validate", help="Skip pubspec.yaml validation.")] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show the application's version and exit.",
        callback=version_callback,
        is_eager=True,
    )] = None,
):
    """
    Scans the configured asset roots and writes the generated Dart constants file.
    The file is only rewritten when its content changes.
    """
    setup_logging(verbose=verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if no_validate:
        config = config.copy_with(validate_pubspec=False)

    # --- watch 모드 ---
    if watch or config.watch_mode:
        _run_watch(AssetWatcher(config.copy_with(watch_mode=True)))
        raise typer.Exit(code=0)

    # --- 1회 생성 ---
    try:
        result = generate_assets(config=config, dry_run=dry_run, verbose=verbose)
    except PermissionError as e:
        typer.secho(f"Error: Permission denied writing output: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except OSError as e:
        typer.secho(f"Error writing output file {config.output}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if not verbose:
        if result.skipped:
            typer.echo(f"No changes. ({result.count} assets)")
        else:
            suffix = " (dry run)" if dry_run else ""
            typer.secho(f"Generated {result.count} assets → {config.output}{suffix}", fg=typer.colors.GREEN)
        for warning in result.warnings:
            typer.secho(f"WARN: {warning}", fg=typer.colors.YELLOW, err=True)
        if result.validation is not None and not result.validation.is_valid:
            typer.secho(
                "Warning: pubspec.yaml validation failed. Run with --verbose for details.",
                fg=typer.colors.YELLOW,
                err=True,
            )


# --- 스크립트로 직접 실행될 때 app 실행 ---
if __name__ == "__main__":
    app()

"""Command line entry points: terminal session and web view server."""
import logging
import sys
from typing import Tuple

import typer
import uvicorn

from squat_trainer.config import settings
from squat_trainer.core import ConfigError, SessionConfig
from squat_trainer.services.session_driver import DriverOptions, SessionDriver
from squat_trainer.services.terminal_input import TerminalInput
from squat_trainer.services.terminal_renderer import TerminalRenderer
from squat_trainer.services.web_page import WebViewOptions

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="squat-trainer",
    help="CLI training utilities: paced slow squats in the terminal or the browser",
    add_completion=False,
)

CONFIG_ERROR_EXIT_CODE = 2


def setup_logging(interactive: bool = False) -> None:
    """
    Configure the root logger from settings.

    Interactive terminal sessions only log warnings to stderr unless a log
    file is configured, so log lines do not tear through the animation.
    """
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    if settings.LOG_FILE:
        logging.basicConfig(
            filename=settings.LOG_FILE,
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(
            level=max(level, logging.WARNING) if interactive else level,
            format="%(levelname)s %(name)s: %(message)s",
        )


def build_config(
    duration: float, count: int, hold: float, sets: int, interval: float
) -> SessionConfig:
    """Build a SessionConfig or exit with a readable message."""
    try:
        return SessionConfig.create(
            set_active_seconds=duration,
            reps_per_set=count,
            hold_seconds=hold,
            sets=sets,
            rest_seconds=interval,
        )
    except ConfigError as e:
        logger.warning(f"Rejected session config: {e.message}")
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE)


def parse_addr(addr: str) -> Tuple[str, int]:
    """Split ``host:port``."""
    host, sep, port = addr.rpartition(":")
    if not sep or not host:
        raise typer.BadParameter(f"expected HOST:PORT, got {addr!r}", param_hint="--addr")
    try:
        return host, int(port)
    except ValueError:
        raise typer.BadParameter(f"invalid port in {addr!r}", param_hint="--addr")


@app.command()
def squat(
    duration: int = typer.Option(300, "--duration", min=1, help="Active seconds per set"),
    count: int = typer.Option(20, "--count", min=1, help="Reps per set"),
    countdown: int = typer.Option(3, "--countdown", min=0, help="Seconds before the first rep"),
    hold: float = typer.Option(settings.HOLD_SECONDS, "--hold", min=0.0, help="Hold seconds at the bottom"),
    sets: int = typer.Option(1, "--sets", min=1, help="Number of sets"),
    interval: float = typer.Option(0.0, "--interval", min=0.0, help="Rest seconds between sets"),
    rest_countdown: int = typer.Option(
        settings.REST_COUNTDOWN_SECONDS, "--rest-countdown", min=0, help="Announce the last N seconds of rest"
    ),
) -> None:
    """Run a paced squat session in the terminal."""
    setup_logging(interactive=True)
    config = build_config(duration, count, hold, sets, interval)
    options = DriverOptions(
        countdown_seconds=countdown,
        rest_countdown_seconds=rest_countdown,
        tick_seconds=settings.tick_seconds,
    )

    renderer = TerminalRenderer(config, stream=sys.stdout)
    with TerminalInput() as terminal:
        driver = SessionDriver(config, renderer, terminal.read_input, options=options)
        driver.run()


@app.command("squat-web")
def squat_web(
    duration: int = typer.Option(150, "--duration", min=1, help="Active seconds per set"),
    count: int = typer.Option(10, "--count", min=1, help="Reps per set"),
    sets: int = typer.Option(2, "--sets", "--set", min=1, help="Number of sets"),
    interval: int = typer.Option(60, "--interval", min=0, help="Rest seconds between sets"),
    hold: float = typer.Option(settings.HOLD_SECONDS, "--hold", min=0.0, help="Hold seconds at the bottom"),
    swing_start: float = typer.Option(0.4, "--swing-start", help="Tremor amplitude at the start"),
    swing_stop: float = typer.Option(3.4, "--swing-stop", help="Tremor amplitude at the end"),
    freq: float = typer.Option(10.0, "--freq", help="Tremor frequency (Hz)"),
    voice: bool = typer.Option(True, "--voice/--no-voice", help="Speak callouts in the browser"),
    addr: str = typer.Option(f"{settings.HOST}:{settings.PORT}", "--addr", help="HOST:PORT to listen on"),
) -> None:
    """Serve the browser canvas view."""
    setup_logging()
    config = build_config(duration, count, hold, sets, interval)
    options = WebViewOptions(
        swing_start=swing_start,
        swing_stop=swing_stop,
        freq=freq,
        rest_countdown_seconds=settings.REST_COUNTDOWN_SECONDS,
        voice=voice,
    )
    try:
        options.validate()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=CONFIG_ERROR_EXIT_CODE)

    host, port = parse_addr(addr)

    # Imported here so the terminal command does not build the web app
    from squat_trainer.main import create_app

    logger.info(f"Serving squat web view on http://{host}:{port}")
    uvicorn.run(
        create_app(page_config=config, page_options=options),
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()

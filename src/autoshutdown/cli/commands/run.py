"""Run the restart schedule in a console host loop."""

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer

from autoshutdown.cli.console import dim, error
from autoshutdown.cli.host import ConsoleHost
from autoshutdown.config import ConfigError, load_config
from autoshutdown.scheduling.host import ExitCode
from autoshutdown.scheduling.orchestrator import ShutdownOrchestrator

logger = logging.getLogger(__name__)


class ReloadFlag:
    """Set from a signal handler, consumed by the host loop."""

    def __init__(self) -> None:
        self._requested = False

    def request(self, *_args: object) -> None:
        self._requested = True

    def consume(self) -> bool:
        requested, self._requested = self._requested, False
        return requested


def run_loop(
    orchestrator: ShutdownOrchestrator,
    host: ConsoleHost,
    tick_seconds: float,
    *,
    reload: Callable[[], None] | None = None,
    reload_flag: ReloadFlag | None = None,
    sleep: Callable[[float], None] = time.sleep,
    monotonic: Callable[[], float] = time.monotonic,
) -> ExitCode:
    """Drive ``orchestrator.tick`` until the host's shutdown countdown ends.

    Reloads requested through ``reload_flag`` run between ticks, on the same
    thread as the ticks themselves.
    """
    last = monotonic()
    while True:
        sleep(tick_seconds)

        if reload is not None and reload_flag is not None and reload_flag.consume():
            logger.info("config_reload_requested")
            reload()

        current = monotonic()
        orchestrator.tick(current - last)
        last = current

        exit_code = host.shutdown_due()
        if exit_code is not None:
            logger.info(
                "host_shutting_down",
                extra={
                    "shutdown.mode": host.mode.value,
                    "shutdown.exit_code": int(exit_code),
                },
            )
            return exit_code


def reload_config(
    orchestrator: ShutdownOrchestrator, host: ConsoleHost, path: Path | None
) -> None:
    """Re-read the config file and re-initialize the schedule from it.

    A config that fails to load is logged and the current schedule is kept.
    """
    try:
        reloaded = load_config(path)
    except ConfigError as e:
        logger.error("config_reload_failed", extra={"error.message": str(e)})
        return
    host.set_event_names(reloaded.auto_shutdown.event_names)
    orchestrator.tz = reloaded.tzinfo
    orchestrator.initialize(reloaded.auto_shutdown)


def register(app: typer.Typer) -> None:
    """Register the run command."""

    @app.command()
    def run(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        tick: Annotated[
            float,
            typer.Option(
                "--tick",
                "-t",
                help="Seconds between scheduler ticks",
                min=0.05,
            ),
        ] = 1.0,
    ) -> None:
        """Run the restart schedule with a console host.

        Announcements are printed to the terminal. When the restart fires the
        process exits with the requested exit code, so a supervisor can start
        the server again. Send SIGHUP to reload the configuration.
        """
        import signal as signal_module

        from autoshutdown.logging import configure_logging

        try:
            config_obj = load_config(config)
        except ConfigError as e:
            error(str(e))
            raise typer.Exit(1) from None

        configure_logging(
            level=config_obj.logging.level,
            use_rich=True,
            log_to_file=config_obj.logging.log_to_file,
        )

        host = ConsoleHost(event_names=config_obj.auto_shutdown.event_names)
        orchestrator = ShutdownOrchestrator(host, host, host, tz=config_obj.tzinfo)
        orchestrator.initialize(config_obj.auto_shutdown)

        def reload() -> None:
            reload_config(orchestrator, host, config)

        reload_flag = ReloadFlag()
        if hasattr(signal_module, "SIGHUP"):
            signal_module.signal(signal_module.SIGHUP, reload_flag.request)

        try:
            exit_code = run_loop(
                orchestrator,
                host,
                tick,
                reload=reload,
                reload_flag=reload_flag,
            )
        except KeyboardInterrupt:
            dim("Stopped")
            raise typer.Exit(0) from None

        raise typer.Exit(int(exit_code))

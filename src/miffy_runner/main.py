"""
Main entry point for Miffy Runner.

Loads settings, wires the progress store and launches the pygame simulator.
"""

import logging
import os
import sys

from miffy_runner.config.settings import Settings, load_settings
from miffy_runner.core.events import Event, EventBus, EventType
from miffy_runner.progress.store import create_store
from miffy_runner.simulation.run import RunController


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


def build_controller(settings: Settings, event_bus: EventBus | None = None) -> RunController:
    """Create a run controller with the configured storage backend."""
    store = create_store(settings.storage.backend, settings.storage.data_dir)
    return RunController(settings=settings, store=store, event_bus=event_bus or EventBus())


def _log_achievement(event: Event) -> None:
    data = event.data
    logging.getLogger(__name__).info(f"{data['icon']} {data['name']}: {data['description']}")


def run_simulator(settings: Settings) -> None:
    """Run the desktop simulator."""
    from miffy_runner.simulator.window import SimulatorWindow

    event_bus = EventBus()
    event_bus.subscribe(EventType.ACHIEVEMENT_UNLOCKED, _log_achievement)

    controller = build_controller(settings, event_bus)
    window = SimulatorWindow(controller)
    window.run()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    # Logging first so settings fallback warnings are shown
    setup_logging(_env_flag("MIFFY_DEBUG"))
    settings = load_settings(os.getenv("MIFFY_CONFIG"))
    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    logger = logging.getLogger(__name__)
    logger.info("Miffy Runner starting...")

    try:
        run_simulator(settings)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

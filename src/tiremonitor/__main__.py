"""
Tire Monitor CLI entry point.

Usage:
    python -m tiremonitor                     # Run the Kivy app
    python -m tiremonitor --console           # Headless telemetry log
    python -m tiremonitor --server 10.0.0.5   # Save a new server address
    python -m tiremonitor --help              # Show help
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from .core.config import Config
from .core.monitor_service import DEFAULT_PORT, DEFAULT_RECONNECT_DELAY, TireMonitorService
from .core.reading import ConnectionStatus, TireReading
from .core.settings import MonitorSettings, default_settings_path
from .core.status import CONNECTION_LABELS, check_alerts


def setup_logging(config: Config) -> None:
    """Configure logging based on config."""
    log_config = config["logging"]
    level = getattr(logging, log_config.get("level", "INFO"))

    log_file = log_config.get("file", "logs/tiremonitor.log")
    log_dir = Path(log_file).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file),
        ],
    )


def open_settings(config: Config) -> MonitorSettings:
    """Open the persisted settings used by the desktop app."""
    path = default_settings_path("desktop", config.get("storage.settings_file"))
    return MonitorSettings.create(path)


def create_service(config: Config, settings: MonitorSettings) -> TireMonitorService:
    """Build a TireMonitorService from configuration."""
    return TireMonitorService(
        settings,
        port=config.get("server.port", DEFAULT_PORT),
        reconnect_delay=config.get("connection.reconnect_delay", DEFAULT_RECONNECT_DELAY),
    )


def run_console_monitor(config: Config, settings: MonitorSettings) -> None:
    """
    Run the telemetry client without a UI, logging everything received.

    Stops on Ctrl+C.
    """
    logger = logging.getLogger(__name__)
    service = create_service(config, settings)
    last_status: list[ConnectionStatus] = []

    def on_status(status: ConnectionStatus) -> None:
        # CONNECTED is published on every message; log transitions only
        if last_status and last_status[-1] == status:
            return
        last_status[:] = [status]
        logger.info(f"Status: {CONNECTION_LABELS[status]}")

    def on_tire_data(readings: dict[str, TireReading]) -> None:
        for key, reading in readings.items():
            logger.info(
                f"{key}: pressure={reading.pressure:.1f} wear={reading.wear_percent:.1f}%"
            )
            for alert in check_alerts(reading, settings.pressure_threshold, settings.wear_threshold):
                logger.warning(f"{key}: {alert}")

    service.subscribe_connection_status(on_status)
    service.subscribe_tire_data(on_tire_data)

    logger.info(f"Console monitor connecting to {service.ws_url}")
    service.initialize()

    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        service.dispose()
        logger.info("Tire Monitor stopped")


def run_app(config: Config) -> None:
    """Start the Kivy application."""
    from .mobile.app import run_mobile_app

    run_mobile_app(config)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Tire Monitor - Bicycle tire telemetry viewer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m tiremonitor                        Run the app
    python -m tiremonitor --console              Log telemetry without a UI
    python -m tiremonitor --server 10.0.0.5      Save server address, then run
    python -m tiremonitor --reset-onboarding     Show onboarding on next launch
        """,
    )

    parser.add_argument(
        "--console", action="store_true", help="Log telemetry to the console instead of opening the UI"
    )
    parser.add_argument(
        "--server", type=str, help="Telemetry server IP address to save"
    )
    parser.add_argument(
        "--reset-onboarding", action="store_true", help="Show onboarding again on next launch"
    )
    parser.add_argument(
        "--config", type=str, help="Path to configuration directory"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug mode"
    )

    args = parser.parse_args()

    config_dir = Path(args.config) if args.config else None
    config = Config(config_dir)

    if args.debug:
        os.environ["TIREMONITOR_ENV"] = "development"
        config.reload()

    setup_logging(config)

    logger = logging.getLogger(__name__)
    logger.info("Tire Monitor starting...")
    logger.info(f"Environment: {config.env}")

    settings = open_settings(config)

    if args.server is not None:
        try:
            settings.set_server_ip(args.server)
        except ValueError as e:
            parser.error(str(e))

    if args.reset_onboarding:
        settings.reset_onboarding()
        logger.info("Onboarding will be shown on next launch")

    if args.console:
        run_console_monitor(config, settings)
    else:
        run_app(config)


if __name__ == "__main__":
    main()

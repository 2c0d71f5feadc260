#!/usr/bin/env python3

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from flight_telemetry.config import SystemConfig
from flight_telemetry.app import FlightTelemetryApp

logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('flight_telemetry.log'),
    ]
)

logging.getLogger('flight_telemetry').setLevel(logging.INFO)


def build_config(args: argparse.Namespace) -> SystemConfig:
    config = SystemConfig()
    if args.url:
        config.acquisition.endpoint_url = args.url
    if args.rate is not None:
        config.acquisition.samples_per_second = args.rate
    if args.window is not None:
        config.history.window_seconds = args.window
    if args.socket:
        config.use_socket = True
        config.socket.url = args.socket
    config.offline = args.offline
    return config


def main():
    parser = argparse.ArgumentParser(description="Real-time Flight Telemetry Dashboard")
    parser.add_argument("--url", help="Telemetry endpoint returning the latest record as JSON")
    parser.add_argument("--rate", type=int, help="Samples per second (poll frequency)")
    parser.add_argument("--window", type=int, help="Chart history window in seconds")
    parser.add_argument("--socket", metavar="WS_URL", help="Receive pushed records from a websocket instead of polling")
    parser.add_argument("--offline", action="store_true", help="Do not contact the endpoint, simulate every sample")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args()

    if args.rate is not None and args.rate <= 0:
        parser.error("--rate must be positive")
    if args.window is not None and args.window <= 0:
        parser.error("--window must be positive")

    if args.debug:
        logging.getLogger('flight_telemetry').setLevel(logging.DEBUG)

    print("""
+==============================================================+
|       FLIGHT TELEMETRY DASHBOARD                             |
+--------------------------------------------------------------+
|  Controls:                                                   |
|    Z - Zero attitude         C - Clear graphs                |
|    T - Record trajectory     X - Stop recording              |
|    R - Reset trajectory      M - Next map area               |
|    Q - Quit                                                  |
+==============================================================+
    """)

    try:
        config = build_config(args)
        app = FlightTelemetryApp(config)
        app.run()
    except KeyboardInterrupt:
        print("\nShutting down...")
    except Exception as e:
        print(f"Error: {e}")
        logging.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()

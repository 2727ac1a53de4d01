"""Dashboard watcher: polls a relay and prints each new-data signal.

Run: python -m scripts.watch_dashboard [--consumer] [--interval 10] [--base-url URL]
"""

import argparse
import asyncio
import json
import os
import sys

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _parse_args(argv=None) -> argparse.Namespace:
    from app.config import get_settings

    settings = get_settings()
    parser = argparse.ArgumentParser(description="Watch a LocaLink relay for new automation data.")
    parser.add_argument("--base-url", default=settings.RELAY_BASE_URL, help="Relay server base URL")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.DASHBOARD_POLL_INTERVAL_SECONDS,
        help="Seconds between reads",
    )
    parser.add_argument("--consumer", action="store_true", help="Watch the consumer relay")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


def _print_record(record: dict) -> None:
    print(f"[watch] New data at {record.get('timestamp')} (source: {record.get('source')})")
    print(json.dumps({k: v for k, v in record.items() if k != "rawData"}, indent=2))


async def watch(args: argparse.Namespace) -> None:
    """Run the poller until interrupted."""
    from dashboard.client import CONSUMER_RELAY_PATH, DASHBOARD_RELAY_PATH, RelayClient
    from dashboard.notifier import CallbackNotifier
    from dashboard.poller import DashboardPoller

    client = RelayClient(
        args.base_url,
        path=CONSUMER_RELAY_PATH if args.consumer else DASHBOARD_RELAY_PATH,
    )
    poller = DashboardPoller(client, interval=args.interval, notifier=CallbackNotifier(_print_record))

    await poller.start()
    print(f"[watch] Polling {client.url} every {args.interval}s (Ctrl+C to stop)")
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await poller.stop()


def main(argv=None) -> None:
    from core.logging_config import setup_logging

    args = _parse_args(argv)
    setup_logging(args.log_level)
    try:
        asyncio.run(watch(args))
    except KeyboardInterrupt:
        print("[watch] Stopped")


if __name__ == "__main__":
    main()

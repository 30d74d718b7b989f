"""CLI entry point for cloud cover forecasts and conditions."""

import argparse
import logging
import sys
import time
from datetime import datetime

from skycover.config.loader import get_config_value, load_config
from skycover.errors import SkycoverError
from skycover.service.weather_service import WeatherService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="skycover",
        description="NWS cloud cover forecasts and conditions",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Overall deadline in seconds for upstream requests",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    # forecast
    sub.add_parser("forecast", help="Print the classified forecast as JSON")

    # check
    check_p = sub.add_parser("check", help="Evaluate a condition")
    check_p.add_argument("condition", help="Condition name, e.g. max-cloud-cover")
    check_p.add_argument("arg", nargs="?", default=None, help="e.g. 'Partly Sunny'")
    check_p.add_argument(
        "--at", default=None,
        help="ISO 8601 time to evaluate at (default: now in the configured zone)",
    )

    # conditions
    sub.add_parser("conditions", help="List available conditions")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key, e.g. location.time_zone")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    deadline = None
    if args.timeout is not None:
        deadline = time.monotonic() + args.timeout

    try:
        if args.command == "forecast":
            return _cmd_forecast(WeatherService(config), deadline)
        elif args.command == "check":
            return _cmd_check(WeatherService(config), args, deadline)
        elif args.command == "conditions":
            return _cmd_conditions(WeatherService(config))
        elif args.command == "config":
            return _cmd_config(config, args)
        else:
            parser.print_help()
            return 1
    except SkycoverError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}")
        return 1


def _cmd_forecast(service: WeatherService, deadline: float | None) -> int:
    service.operations["forecast"](sys.stdout, deadline=deadline)
    return 0


def _cmd_check(service: WeatherService, args, deadline: float | None) -> int:
    conditions = service.conditions()
    try:
        condition = conditions.registry[args.condition]
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        return 1
    when = None
    if args.at is not None:
        try:
            when = datetime.fromisoformat(args.at)
        except ValueError:
            print(f"Error: invalid time: {args.at!r}")
            return 1
    result = condition(when, args.arg, writer=sys.stdout, deadline=deadline)
    print("true" if result else "false")
    return 0


def _cmd_conditions(service: WeatherService) -> int:
    for name, text in service.conditions().registry.help().items():
        print(f"{name}: {text}")
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            return 1
    else:
        print("Use: config show | config get key")
        return 1


if __name__ == "__main__":
    sys.exit(main())

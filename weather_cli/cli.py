"""
weather-cli command line entry point

Parses arguments, sets up logging, builds the AppContext and dispatches to
the handlers. Any WeatherCliError that reaches this level is printed to
stderr and turned into exit code 1.

Commands:
    weather get [LOCATION] [--date DATE] [--provider PROVIDER]
    weather provider [PROVIDER] [--key API_KEY] | --list
    weather alias [NAME] [--address ADDRESS | --remove] | --list
"""

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console
from dotenv import load_dotenv

from weather_cli import __version__, handlers
from weather_cli.context import APP_NAME, AppContext, resolve_log_dir
from weather_cli.errors import WeatherCliError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s %(message)s'
MAX_LOG_FILES = 10
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(debug: bool = False) -> None:
    """
    Configure root logging for one CLI run.

    - stderr: WARNING by default, DEBUG with --debug, or $LOG_LEVEL
    - file:   DEBUG, rotated daily, MAX_LOG_FILES kept, in resolve_log_dir()
    """
    console_level = "DEBUG" if debug else os.getenv("LOG_LEVEL", "WARNING").upper()
    if console_level not in LOG_LEVELS:
        print(f"WARNING: unknown LOG_LEVEL {console_level!r}, using WARNING", file=sys.stderr)
        console_level = "WARNING"

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    log_handlers: List[logging.Handler] = [console]

    log_dir = resolve_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_dir / f"{APP_NAME}.log",
            when="midnight",
            backupCount=MAX_LOG_FILES,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(file_handler)
    except OSError as e:
        print(f"WARNING: file logging disabled, cannot use {log_dir}: {e}", file=sys.stderr)

    logging.basicConfig(level=logging.DEBUG, handlers=log_handlers, force=True)
    # httpcore logs every socket event at DEBUG
    logging.getLogger("httpcore").setLevel(logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse tree for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="weather",
        description="Fetch current weather from interchangeable providers",
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug console output')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    # Subcommand copy of --debug; SUPPRESS leaves the top-level value when absent
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--debug', action='store_true', default=argparse.SUPPRESS,
                        help='Enable debug console output')

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')

    get_parser = subparsers.add_parser('get', parents=[common], help='Retrieve weather information')
    get_parser.add_argument('address', nargs='?', metavar='LOCATION',
                            help='The address or address alias to query')
    get_parser.add_argument('-d', '--date', metavar='DATE',
                            help='The date to retrieve weather information for')
    get_parser.add_argument('-p', '--provider', metavar='PROVIDER',
                            help='Weather provider to use for this request')

    provider_parser = subparsers.add_parser('provider', parents=[common], help='Manage weather service providers')
    provider_parser.add_argument('provider', nargs='?', metavar='PROVIDER',
                                 help='Set the specified provider as the default')
    provider_parser.add_argument('-k', '--key', metavar='API_KEY',
                                 help='Set or update the API key for the provider')
    provider_parser.add_argument('-l', '--list', action='store_true',
                                 help='List all supported providers and their configuration')
    provider_parser.set_defaults(help_parser=provider_parser)

    alias_parser = subparsers.add_parser('alias', parents=[common], help='Manage location aliases, e.g. "home" -> "London, UK"')
    alias_parser.add_argument('name', nargs='?', metavar='ALIAS',
                              help='Alias to set, or to make the default when given alone')
    alias_parser.add_argument('-a', '--address', metavar='ADDRESS',
                              help='The full address to assign to the alias')
    alias_parser.add_argument('-r', '--remove', action='store_true',
                              help='Remove the specified alias')
    alias_parser.add_argument('-l', '--list', action='store_true',
                              help='List all configured aliases')
    alias_parser.set_defaults(help_parser=alias_parser)

    return parser


def _validate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Argument combinations argparse cannot express on its own."""
    if args.command == 'provider':
        if args.list and (args.provider or args.key is not None):
            parser.error("provider: --list cannot be combined with PROVIDER or --key")
        if args.key is not None and not args.provider:
            parser.error("provider: --key requires PROVIDER")
    elif args.command == 'alias':
        if args.list and (args.name or args.address is not None or args.remove):
            parser.error("alias: --list cannot be combined with ALIAS, --address or --remove")
        if (args.address is not None or args.remove) and not args.name:
            parser.error("alias: --address and --remove require ALIAS")
        if args.remove and args.address is not None:
            parser.error("alias: --remove cannot be combined with --address")


def dispatch(ctx: AppContext, args: argparse.Namespace) -> None:
    if args.command == 'get':
        asyncio.run(handlers.get_weather(ctx, args.address, args.date, args.provider))

    elif args.command == 'provider':
        if args.list:
            handlers.list_providers(ctx)
        elif args.provider:
            handlers.set_provider(ctx, args.provider, args.key)
        else:
            args.help_parser.print_help()

    elif args.command == 'alias':
        if args.list:
            handlers.list_aliases(ctx)
        elif args.name and args.remove:
            handlers.remove_alias(ctx, args.name)
        elif args.name:
            handlers.set_alias(ctx, args.name, args.address)
        else:
            args.help_parser.print_help()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Returns:
        Process exit code: 0 on success, 1 on any WeatherCliError
    """
    just_fix_windows_console()
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)
    _validate(parser, args)

    configure_logging(args.debug)
    if args.debug:
        logger.debug("[main] Debug output enabled.")

    if args.command is None:
        parser.print_help()
        return 0

    try:
        ctx = AppContext.from_env()
        dispatch(ctx, args)
    except WeatherCliError as e:
        logger.debug(f"[main] {type(e).__name__}: {e}")
        print(f"{Fore.RED}{e}{Style.RESET_ALL}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

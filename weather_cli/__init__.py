"""
weather-cli: current weather from interchangeable providers

A small command-line tool that fetches the weather for a location through
one of several backend providers and remembers user preferences (location
aliases, provider API keys, defaults) in a local JSON config file.

Architecture:
    providers/       - Weather backends behind a single dispatch function:
                       * mock.py         - offline fixture (zero config)
                       * grpc_mock.py    - RPC mock with static fallback
                       * open_weather.py - geocode, then day summary (HTTP)
                       * weather_api.py  - single-call current weather (HTTP)
    config_store.py  - Thread-safe settings file with atomic writes
    resolution.py    - Picks provider/credential and address from input
    handlers.py      - `get`, `provider` and `alias` commands
    cli.py           - argparse entry point and logging setup

Entry Points:
    weather               - console script
    python main.py        - same, from a source checkout
"""

__version__ = "0.1.0"
__author__ = "weather-cli contributors"

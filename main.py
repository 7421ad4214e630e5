"""
weather-cli: fetch current weather from interchangeable providers

Source-checkout entry point, equivalent to the installed `weather` script.

Usage:
    python main.py get London --provider mock
    python main.py alias home --address "London, UK"
    python main.py provider --list
"""

import sys

from weather_cli.cli import main

if __name__ == "__main__":
    sys.exit(main())

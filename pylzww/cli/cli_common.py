import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click
import coloredlogs
from pygments import formatters, highlight, lexers

from pylzww.exceptions import PyLzwwException

logger = logging.getLogger(__name__)

# Global options
COLORED_OUTPUT: bool = True


def default_json_encoder(obj):
    if isinstance(obj, (bytes, bytearray)):
        return f'<{obj.hex()}>'
    raise TypeError()


def print_json(buf, colored: Optional[bool] = None, default=default_json_encoder) -> str:
    if colored is None:
        colored = user_requested_colored_output()
    formatted_json = json.dumps(buf, sort_keys=True, indent=4, default=default)
    if colored and isatty():
        colorful_json = highlight(formatted_json, lexers.JsonLexer(),
                                  formatters.Terminal256Formatter(style='stata-dark'))
        print(colorful_json)
        return colorful_json
    else:
        print(formatted_json)
        return formatted_json


def set_verbosity(ctx, param, value) -> None:
    coloredlogs.set_level(logging.INFO - (value * 10))


def set_color_flag(ctx, param, value) -> None:
    global COLORED_OUTPUT
    COLORED_OUTPUT = value


def isatty() -> bool:
    try:
        return os.isatty(sys.stdout.fileno())
    except (AttributeError, OSError, ValueError):
        # stdout replaced by something without a file descriptor
        return False


def user_requested_colored_output() -> bool:
    return COLORED_OUTPUT and isatty()


class BaseCommand(click.Command):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.params[:0] = [
            click.Option(('verbosity', '-v', '--verbose'), count=True, callback=set_verbosity, expose_value=False,
                         help='increase logging verbosity'),
            click.Option(('color', '--color/--no-color'), default=True, callback=set_color_flag,
                         expose_value=False, help='colorize json output'),
        ]


def run_batch(files, handler: Callable[[Path], Any], fail_fast: bool = False) -> bool:
    """
    Run `handler` on every file, independently of each other.

    A fatal error on one file is logged and the remaining files are still processed, unless `fail_fast` is set, in
    which case the error propagates and the batch stops.

    :return: True if every file was handled successfully
    """
    succeeded = True
    for path in files:
        try:
            handler(path)
        except PyLzwwException as e:
            if fail_fast:
                logger.error(f'{path}: aborting batch')
                raise
            logger.error(f'{path}: {e}')
            succeeded = False
    return succeeded

import difflib
import logging
import sys
import textwrap

import click
import coloredlogs

from pylzww.exceptions import FileAccessError, FileSizeError, FormatError, NotCompressedError, \
    NotWildWorldTextError, PyLzwwException

coloredlogs.install(level=logging.INFO)

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'], max_content_width=400)

# Mapping of index options to import file names
CLI_GROUPS = {
    'decode': 'decode',
    'info': 'info',
    'version': 'version',
}

# Mode selectors of the original command line tool
LEGACY_COMMANDS = {
    '-d': 'decode',
}


class LzwwCli(click.Group):
    def list_commands(self, ctx):
        return CLI_GROUPS.keys()

    def get_command(self, ctx: click.Context, name: str) -> click.Command:
        if name not in CLI_GROUPS.keys():
            self.handle_invalid_command(ctx, name)
        return self.import_and_get_command(ctx, name)

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if args and args[0] in LEGACY_COMMANDS:
            args = [LEGACY_COMMANDS[args[0]]] + args[1:]
        return super().parse_args(ctx, args)

    def handle_invalid_command(self, ctx: click.Context, name: str) -> None:
        suggested_commands = difflib.get_close_matches(name, CLI_GROUPS.keys(), n=3, cutoff=0.4)
        suggestion = self.format_suggestions(suggested_commands)
        ctx.fail(f'No such command {name!r}{suggestion}')

    @staticmethod
    def format_suggestions(suggestions: list[str]) -> str:
        if not suggestions:
            return ''
        cmds = textwrap.indent('\n'.join(suggestions), ' ' * 4)
        return f'\nDid you mean this?\n{cmds}'

    @staticmethod
    def import_and_get_command(ctx: click.Context, name: str) -> click.Command:
        module_name = f'pylzww.cli.{CLI_GROUPS[name]}'
        mod = __import__(module_name, None, None, ['cli'])
        return mod.cli.get_command(ctx, name)


@click.command(cls=LzwwCli, context_settings=CONTEXT_SETTINGS)
def cli() -> None:
    """
    \b
    Decode LZSS compressed Animal Crossing: Wild World text files
    """
    pass


def invoke_cli_with_error_handling() -> bool:
    """
    Invoke the command line interface and return `True` if it failed on a fatal error.
    """
    try:
        cli()
    except NotWildWorldTextError:
        logger.error('File is not a Wild World text')
    except NotCompressedError:
        logger.error('File is not LZSS encoded')
    except FileSizeError as e:
        logger.error(f'File size error: {e.size} bytes')
    except FormatError as e:
        logger.error(f'Invalid container: {e}')
    except FileAccessError as e:
        logger.error(f'File access error: {e}')
    except PyLzwwException as e:
        logger.error(f'Internal error: {e}')
    else:
        return False
    return True


def main() -> None:
    if invoke_cli_with_error_handling():
        sys.exit(1)


if __name__ == '__main__':
    main()

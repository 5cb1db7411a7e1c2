import click

from pylzww._version import __version__


@click.group()
def cli() -> None:
    pass


@cli.command()
def version() -> None:
    """ Query pylzww version """
    print(__version__)

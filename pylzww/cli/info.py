from pathlib import Path

import click

from pylzww.assembler import decode_container
from pylzww.cli.cli_common import BaseCommand, print_json, run_batch
from pylzww.container import parse_envelope
from pylzww.files import load_container


@click.group()
def cli() -> None:
    """ info cli """
    pass


def container_info(path: Path) -> dict:
    """ Describe the chunks of a container without writing anything """
    data = load_container(path)
    envelope = parse_envelope(data)
    result = decode_container(data)
    return {
        'path': str(path),
        'envelope': envelope.opaque,
        'size': len(data),
        'chunks': [{
            'offset': chunk.offset,
            'declared_length': chunk.declared_length,
            'decoded_length': chunk.written,
            'consumed': chunk.consumed,
            'warnings': [warning.value for warning in chunk.warnings],
        } for chunk in result.chunks],
        'termination': result.termination.value,
        'warnings': [warning.value for warning in result.warnings],
    }


@cli.command(cls=BaseCommand)
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False, path_type=Path))
def info(files: tuple[Path, ...]) -> None:
    """ Show the chunk layout of Wild World text files """
    entries = []
    succeeded = run_batch(files, lambda path: entries.append(container_info(path)))
    print_json(entries)
    if not succeeded:
        raise click.exceptions.Exit(1)

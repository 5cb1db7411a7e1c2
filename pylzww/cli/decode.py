import logging
from pathlib import Path
from typing import Optional

import click

from pylzww.assembler import DecodeResult, decode_container
from pylzww.cli.cli_common import BaseCommand, run_batch
from pylzww.files import load_container
from pylzww.sinks import FileSink

logger = logging.getLogger(__name__)


@click.group()
def cli() -> None:
    """ decode cli """
    pass


def decode_file(path: Path, output: Optional[Path] = None) -> DecodeResult:
    """
    Decode a single container file.

    :param path: container to decode
    :param output: directory to write the decoded file into, overwrite `path` itself when None
    """
    data = load_container(path)
    if output is None:
        sink = FileSink(path)
    else:
        # FileSink.reset() creates the directory
        sink = FileSink(output / path.name)

    logger.debug(f'decoding {path} into {sink.path}')
    result = decode_container(data, sink)
    logger.info(f'{path}: decoded {result.decoded_length} bytes from {len(result.chunks)} chunk(s)')
    if result.warnings:
        logger.warning(f'{path}: finished with warnings: {", ".join(w.value for w in result.warnings)}')
    return result


@cli.command(cls=BaseCommand)
@click.option('-o', '--output', type=click.Path(file_okay=False, path_type=Path),
              help='write decoded files into this directory instead of overwriting the originals')
@click.option('--fail-fast', is_flag=True, default=False, help='abort the whole batch on the first fatal error')
@click.argument('files', nargs=-1, required=True, type=click.Path(dir_okay=False, path_type=Path))
def decode(output: Optional[Path], fail_fast: bool, files: tuple[Path, ...]) -> None:
    """
    Decode Wild World text files.

    \b
    Every file is decoded independently. Unless --output is given, the original file is overwritten with the
    decoded data.
    """
    if output is not None:
        names = [path.name for path in files]
        collisions = sorted({name for name in names if names.count(name) > 1})
        if collisions:
            raise click.UsageError(f'files would overwrite each other in {output}: {", ".join(collisions)}')

    if not run_batch(files, lambda path: decode_file(path, output), fail_fast=fail_fast):
        raise click.exceptions.Exit(1)

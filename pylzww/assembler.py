import logging
from collections.abc import Generator
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pylzww.chunk import DecodedChunk, DecodeWarning, decode_chunk
from pylzww.container import scan_container
from pylzww.sinks import BytesSink, OutputSink
from pylzww.structs import CHUNK_HEADER_SIZE, CHUNK_MAGIC

logger = logging.getLogger(__name__)


class ContainerTermination(Enum):
    CLEAN = 'clean'
    INPUT_EXHAUSTED = 'input exhausted'
    TRAILING_CHUNK = 'trailing chunk'


@dataclass
class DecodeResult:
    chunks: list[DecodedChunk]
    termination: ContainerTermination
    warnings: list[DecodeWarning] = field(default_factory=list)

    @property
    def declared_length(self) -> int:
        return sum(chunk.declared_length for chunk in self.chunks)

    @property
    def decoded_length(self) -> int:
        return sum(len(chunk.data) for chunk in self.chunks)

    @property
    def end(self) -> int:
        return self.chunks[-1].end


def next_chunk_termination(data: bytes, chunk: DecodedChunk) -> Optional[ContainerTermination]:
    """
    Decide whether another chunk follows `chunk`.

    :return: None if a chunk header starts right after it, otherwise the reason the chunk loop ends
    """
    if DecodeWarning.UNEXPECTED_END in chunk.warnings:
        return ContainerTermination.INPUT_EXHAUSTED
    if chunk.end >= len(data):
        # container ends exactly on a chunk boundary
        return ContainerTermination.CLEAN
    if data[chunk.end] != CHUNK_MAGIC:
        return ContainerTermination.CLEAN
    if chunk.end + CHUNK_HEADER_SIZE > len(data):
        return ContainerTermination.TRAILING_CHUNK
    return None


def iter_chunks(data: bytes) -> Generator[DecodedChunk, None, ContainerTermination]:
    """
    Decode every chunk of a container, in order.

    The first chunk is located before anything is yielded, so format errors surface on the first `next()`. The
    generator's return value is the reason the chunk loop ended.
    """
    offset = scan_container(data)
    while True:
        chunk = decode_chunk(data, offset)
        yield chunk
        termination = next_chunk_termination(data, chunk)
        if termination is not None:
            return termination
        offset = chunk.end


def decode_container(data: bytes, sink: Optional[OutputSink] = None) -> DecodeResult:
    """
    Decode a whole container into a sink.

    Validation happens first: the sink is reset only once the first chunk was located, so a rejected container
    leaves the destination untouched.

    :param data: the whole container
    :param sink: destination of decoded bytes, an in-memory BytesSink when omitted
    """
    if sink is None:
        sink = BytesSink()

    chunks = []
    warnings = []
    generator = iter_chunks(data)
    try:
        chunk = next(generator)
        sink.reset()
        while True:
            logger.debug(f'chunk at 0x{chunk.offset:x}: declared length: {chunk.declared_length}, '
                         f'consumed: {chunk.consumed}')
            sink.append(chunk.data)
            chunks.append(chunk)
            warnings.extend(chunk.warnings)
            chunk = next(generator)
    except StopIteration as e:
        termination = e.value

    if termination == ContainerTermination.TRAILING_CHUNK:
        logger.warning(f'{DecodeWarning.MORE_TO_DECODE.value} (offset 0x{chunks[-1].end:x})')
        warnings.append(DecodeWarning.MORE_TO_DECODE)

    return DecodeResult(chunks=chunks, termination=termination, warnings=warnings)


def decompress(data: bytes) -> bytes:
    """ Decode a container and return the concatenated output of all of its chunks """
    sink = BytesSink()
    decode_container(data, sink)
    return sink.getvalue()

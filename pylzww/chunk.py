import logging
from dataclasses import dataclass, field
from enum import Enum

from construct import StreamError

from pylzww.exceptions import FormatError, TruncatedChunkHeaderError
from pylzww.structs import BACK_REFERENCE_MIN_LENGTH, BACK_REFERENCE_SIZE, CHUNK_HEADER_SIZE, CHUNK_MAGIC, \
    chunk_header

logger = logging.getLogger(__name__)

FLAG_MASK = 0x80


class DecodeWarning(Enum):
    UNEXPECTED_END = 'unexpected end of encoded file'
    WRONG_DECODED_LENGTH = 'wrong decoded length'
    INVALID_BACK_REFERENCE = 'back-reference before start of output'
    MORE_TO_DECODE = 'there is more to decode'


@dataclass
class DecodedChunk:
    offset: int
    declared_length: int
    written: int
    data: bytearray
    end: int
    warnings: list[DecodeWarning] = field(default_factory=list)

    @property
    def consumed(self) -> int:
        """ Number of container bytes this chunk occupies, header included """
        return self.end - self.offset

    @property
    def complete(self) -> bool:
        return self.written == self.declared_length


def read_chunk_header(data: bytes, offset: int) -> int:
    """
    Parse a chunk header and return the declared decompressed length.

    :raises TruncatedChunkHeaderError: less than 4 bytes left at offset
    :raises FormatError: low byte isn't the chunk magic
    """
    try:
        header = chunk_header.parse(data[offset:offset + CHUNK_HEADER_SIZE])
    except StreamError:
        raise TruncatedChunkHeaderError(offset) from None
    if header.magic != CHUNK_MAGIC:
        raise FormatError(f'invalid chunk magic 0x{header.magic:02x} at offset 0x{offset:x}')
    return header.length


def decode_chunk(data: bytes, offset: int) -> DecodedChunk:
    """
    Decompress a single chunk.

    Each flag byte classifies the next eight tokens, high bit first: a clear bit is a literal byte, a set bit is a
    big-endian 16 bit back-reference whose upper nibble is `length - 3` and lower 12 bits are `offset - 1`.
    Back-references are copied one byte at a time so they can overlap the bytes they produce.

    Running out of input, or a back-reference overflowing the declared length, doesn't fail the chunk: decoding
    stops and the condition is recorded on the result. The returned buffer always has the declared length.

    :param data: the whole container
    :param offset: offset of the chunk header inside data
    """
    raw_len = read_chunk_header(data, offset)
    raw = bytearray(raw_len)
    warnings = []

    pak = offset + CHUNK_HEADER_SIZE
    pak_end = len(data)
    pos = 0
    flags = 0
    mask = 0

    while pos < raw_len:
        mask >>= 1
        if not mask:
            if pak == pak_end:
                break
            flags = data[pak]
            pak += 1
            mask = FLAG_MASK

        if not flags & mask:
            if pak == pak_end:
                break
            raw[pos] = data[pak]
            pak += 1
            pos += 1
            continue

        if pak + BACK_REFERENCE_SIZE > pak_end:
            break
        token = (data[pak] << 8) | data[pak + 1]
        pak += BACK_REFERENCE_SIZE

        length = (token >> 12) + BACK_REFERENCE_MIN_LENGTH
        distance = (token & 0xfff) + 1
        if pos < distance and DecodeWarning.INVALID_BACK_REFERENCE not in warnings:
            logger.warning(f'chunk at 0x{offset:x}: {DecodeWarning.INVALID_BACK_REFERENCE.value} '
                           f'(output position: {pos}, distance: {distance})')
            warnings.append(DecodeWarning.INVALID_BACK_REFERENCE)
        if pos + length > raw_len:
            logger.warning(f'chunk at 0x{offset:x}: {DecodeWarning.WRONG_DECODED_LENGTH.value}')
            warnings.append(DecodeWarning.WRONG_DECODED_LENGTH)
            length = raw_len - pos

        for _ in range(length):
            # bytes before the start of the chunk output read as zero
            if pos >= distance:
                raw[pos] = raw[pos - distance]
            pos += 1

    if pos != raw_len:
        logger.warning(f'chunk at 0x{offset:x}: {DecodeWarning.UNEXPECTED_END.value} '
                       f'(decoded {pos} out of {raw_len} bytes)')
        warnings.append(DecodeWarning.UNEXPECTED_END)

    return DecodedChunk(offset=offset, declared_length=raw_len, written=pos, data=raw, end=pak, warnings=warnings)

import logging

from construct import StreamError

from pylzww.exceptions import NotCompressedError, NotWildWorldTextError, TruncatedChunkHeaderError
from pylzww.structs import CHUNK_HEADER_SIZE, CHUNK_MAGIC, CHUNK_SCAN_MAX_STRIDES, CHUNK_SCAN_STRIDE, \
    ENVELOPE_HEADER_SIZE, OUTER_MAGIC, envelope_header

logger = logging.getLogger(__name__)


def is_wild_world_text(data: bytes) -> bool:
    return len(data) > 0 and data[0] == OUTER_MAGIC


def parse_envelope(data: bytes):
    """
    Parse the envelope header (outer magic + opaque bytes).

    :raises NotWildWorldTextError: when the outer magic doesn't match
    """
    if not is_wild_world_text(data):
        raise NotWildWorldTextError(data[0] if data else None)
    try:
        return envelope_header.parse(data)
    except StreamError:
        # magic matched but the envelope itself is cut short
        raise NotCompressedError() from None


def scan_container(data: bytes) -> int:
    """
    Locate the first chunk of a container.

    The search starts right after the envelope header and tests every second byte for the chunk magic. The scan
    is pure: nothing is written anywhere until a chunk start is confirmed.

    :param data: the whole container
    :return: offset of the first chunk header
    :raises NotWildWorldTextError: outer magic mismatch
    :raises NotCompressedError: no chunk magic within the scan bound
    :raises TruncatedChunkHeaderError: chunk magic found but its header doesn't fit in the container
    """
    parse_envelope(data)

    for stride in range(CHUNK_SCAN_MAX_STRIDES + 1):
        offset = ENVELOPE_HEADER_SIZE + stride * CHUNK_SCAN_STRIDE
        if offset >= len(data):
            break
        if data[offset] != CHUNK_MAGIC:
            continue
        if offset + CHUNK_HEADER_SIZE > len(data):
            raise TruncatedChunkHeaderError(offset)
        logger.debug(f'first chunk found at offset 0x{offset:x}')
        return offset

    raise NotCompressedError()

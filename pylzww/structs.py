from construct import Bytes, Int8ul, Int24ul, Struct

OUTER_MAGIC = 0x4c
CHUNK_MAGIC = 0x10

ENVELOPE_HEADER_SIZE = 10
CHUNK_HEADER_SIZE = 4
BACK_REFERENCE_SIZE = 2

# first chunk lookup: offset 10, then up to 20 strides of 2 bytes
CHUNK_SCAN_STRIDE = 2
CHUNK_SCAN_MAX_STRIDES = 20

BACK_REFERENCE_THRESHOLD = 2
BACK_REFERENCE_MIN_LENGTH = BACK_REFERENCE_THRESHOLD + 1  # 3

envelope_header = Struct(
    'magic' / Int8ul,  # 0x4c
    'opaque' / Bytes(ENVELOPE_HEADER_SIZE - 1),
)

chunk_header = Struct(
    'magic' / Int8ul,  # 0x10
    'length' / Int24ul,  # declared decompressed length
)

from pathlib import Path
from typing import Union

from pylzww.exceptions import FileAccessError, FileSizeError

CONTAINER_MIN_SIZE = 0x00000004  # chunk header only
# header + 16MB - 1 raw bytes + flag bytes, padded to 20MB
CONTAINER_MAX_SIZE = 0x01400000


def load_container(path: Union[str, Path]) -> bytes:
    """
    Read a whole container file.

    :raises FileSizeError: file is smaller than a chunk header or larger than any valid container
    :raises FileAccessError: on any I/O failure
    """
    path = Path(path)
    try:
        size = path.stat().st_size
        if not CONTAINER_MIN_SIZE <= size <= CONTAINER_MAX_SIZE:
            raise FileSizeError(size)
        return path.read_bytes()
    except OSError as e:
        raise FileAccessError(f'file read error ({e.strerror})', str(path)) from e

__all__ = [
    "FileAccessError",
    "FileSizeError",
    "FormatError",
    "NotCompressedError",
    "NotWildWorldTextError",
    "PyLzwwException",
    "TruncatedChunkHeaderError",
]

from typing import Optional


class PyLzwwException(Exception):
    pass


class FormatError(PyLzwwException):
    """Container is malformed and cannot be decoded at all."""

    pass


class NotWildWorldTextError(FormatError):
    """Outer magic byte mismatch."""

    def __init__(self, magic: Optional[int]) -> None:
        super().__init__('file is not a Wild World text' if magic is None else
                         f'file is not a Wild World text (magic: 0x{magic:02x})')
        self.magic = magic


class NotCompressedError(FormatError):
    """No chunk magic inside the bounded scan region."""

    def __init__(self) -> None:
        super().__init__('file is not LZSS encoded')


class TruncatedChunkHeaderError(FormatError):
    def __init__(self, offset: int) -> None:
        super().__init__(f'truncated chunk header at offset 0x{offset:x}')
        self.offset = offset


class FileSizeError(FormatError):
    def __init__(self, size: int) -> None:
        super().__init__(f'file size error ({size} bytes)')
        self.size = size


class FileAccessError(PyLzwwException, OSError):
    def __init__(self, message: str, filename: Optional[str] = None) -> None:
        OSError.__init__(self, message)
        self.message = message
        self.filename = filename

    def __str__(self) -> str:
        if self.filename is None:
            return self.message
        return f'{self.message}: {self.filename}'

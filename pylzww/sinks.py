from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from pylzww.exceptions import FileAccessError


class OutputSink(ABC):
    """ Destination for decoded chunks, written in chunk order """

    @abstractmethod
    def reset(self) -> None:
        """ Discard any previous content. Called once, after the container was validated. """
        pass

    @abstractmethod
    def append(self, data: bytes) -> None:
        pass


class BytesSink(OutputSink):
    def __init__(self) -> None:
        self._buffer = bytearray()

    def reset(self) -> None:
        self._buffer.clear()

    def append(self, data: bytes) -> None:
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class FileSink(OutputSink):
    """
    Write decoded chunks into a file.

    `reset()` truncates the file (creating it and its parent directories if needed) and each `append()` reopens it in append mode, so a failure
    midway leaves every previously appended chunk on disk.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def reset(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('wb'):
                pass
        except OSError as e:
            raise FileAccessError(f'file create error ({e.strerror})', str(self.path)) from e

    def append(self, data: bytes) -> None:
        try:
            with self.path.open('ab') as f:
                f.write(data)
        except OSError as e:
            raise FileAccessError(f'file write error ({e.strerror})', str(self.path)) from e

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} PATH:{self.path}>'

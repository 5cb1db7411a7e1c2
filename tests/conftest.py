from pathlib import Path

import pytest

from tests.container_builder import build_chunk, build_container, reference


@pytest.fixture(scope='function')
def two_chunk_container() -> bytes:
    """
    Container holding two chunks: b'hello world' followed by b'A' * 10
    """
    return build_container(build_chunk(list(b'hello world')), build_chunk([ord('A'), reference(1, 9)]))


@pytest.fixture(scope='function')
def container_file(tmp_path: Path, two_chunk_container: bytes) -> Path:
    """
    Write the two chunk container into a temporary file.
    """
    path = tmp_path / 'mail.bin'
    path.write_bytes(two_chunk_container)
    return path


@pytest.fixture(scope='function')
def bad_magic_file(tmp_path: Path, two_chunk_container: bytes) -> Path:
    path = tmp_path / 'broken.bin'
    path.write_bytes(b'\x00' + two_chunk_container[1:])
    return path

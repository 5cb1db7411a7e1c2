from pathlib import Path

import pytest

from pylzww.assembler import ContainerTermination, decode_container, decompress, iter_chunks
from pylzww.chunk import DecodeWarning
from pylzww.exceptions import NotCompressedError, NotWildWorldTextError
from pylzww.sinks import FileSink, OutputSink
from tests.container_builder import build_chunk, build_container, reference


class RecordingSink(OutputSink):
    def __init__(self) -> None:
        self.calls = []

    def reset(self) -> None:
        self.calls.append('reset')

    def append(self, data: bytes) -> None:
        self.calls.append(bytes(data))


def test_two_chunks_are_concatenated_in_order(two_chunk_container: bytes):
    assert decompress(two_chunk_container) == b'hello world' + b'A' * 10


def test_total_length_is_sum_of_declared_lengths(two_chunk_container: bytes):
    result = decode_container(two_chunk_container)
    assert [chunk.declared_length for chunk in result.chunks] == [11, 10]
    assert result.declared_length == 21
    assert result.decoded_length == 21
    assert result.warnings == []


def test_sink_is_reset_before_first_chunk(two_chunk_container: bytes):
    sink = RecordingSink()
    decode_container(two_chunk_container, sink)
    assert sink.calls == ['reset', b'hello world', b'A' * 10]


def test_clean_end_on_chunk_boundary(two_chunk_container: bytes):
    result = decode_container(two_chunk_container)
    assert result.termination == ContainerTermination.CLEAN
    assert result.end == len(two_chunk_container)


def test_clean_end_on_non_chunk_byte():
    data = build_container(build_chunk(list(b'first')), trailer=b'\x00\x10\x05\x00\x00')
    result = decode_container(data)
    assert len(result.chunks) == 1
    assert result.termination == ContainerTermination.CLEAN
    assert result.warnings == []


def test_input_exhausted_mid_chunk():
    data = build_container(build_chunk(list(b'first')), build_chunk(list(b'abc'), declared_length=6))
    sink = RecordingSink()
    result = decode_container(data, sink)
    assert result.termination == ContainerTermination.INPUT_EXHAUSTED
    assert result.warnings == [DecodeWarning.UNEXPECTED_END]
    assert sink.calls == ['reset', b'first', b'abc\x00\x00\x00']


def test_trailing_chunk_magic():
    data = build_container(build_chunk(list(b'first')), trailer=b'\x10\x02')
    result = decode_container(data)
    assert result.termination == ContainerTermination.TRAILING_CHUNK
    assert result.warnings == [DecodeWarning.MORE_TO_DECODE]
    assert decompress(data) == b'first'


def test_trailing_chunk_is_logged(caplog):
    with caplog.at_level('WARNING'):
        decode_container(build_container(build_chunk(list(b'first')), trailer=b'\x10'))
    assert 'there is more to decode' in caplog.text


def test_chunk_warnings_are_collected():
    data = build_container(build_chunk([ord('A'), reference(1, 18)], declared_length=4),
                           build_chunk(list(b'ok')))
    result = decode_container(data)
    assert decompress(data) == b'AAAAok'
    assert result.warnings == [DecodeWarning.WRONG_DECODED_LENGTH]
    assert result.termination == ContainerTermination.CLEAN


def test_iter_chunks(two_chunk_container: bytes):
    chunks = list(iter_chunks(two_chunk_container))
    assert [chunk.data for chunk in chunks] == [b'hello world', b'A' * 10]
    assert chunks[1].offset == chunks[0].end


def test_iter_chunks_return_value(two_chunk_container: bytes):
    generator = iter_chunks(two_chunk_container)
    next(generator)
    next(generator)
    with pytest.raises(StopIteration) as e:
        next(generator)
    assert e.value.value == ContainerTermination.CLEAN


def test_rejected_container_leaves_sink_untouched(two_chunk_container: bytes):
    sink = RecordingSink()
    with pytest.raises(NotWildWorldTextError):
        decode_container(b'\x00' + two_chunk_container[1:], sink)
    with pytest.raises(NotCompressedError):
        decode_container(two_chunk_container[:10] + b'\x00' * 64, sink)
    assert sink.calls == []


def test_rejected_container_is_idempotent(tmp_path: Path, two_chunk_container: bytes):
    data = b'\x00' + two_chunk_container[1:]
    path = tmp_path / 'broken.bin'
    path.write_bytes(data)

    for _ in range(2):
        with pytest.raises(NotWildWorldTextError):
            decode_container(path.read_bytes(), FileSink(path))
        assert path.read_bytes() == data


def test_in_place_decode(tmp_path: Path, two_chunk_container: bytes):
    path = tmp_path / 'mail.bin'
    path.write_bytes(two_chunk_container)
    decode_container(path.read_bytes(), FileSink(path))
    assert path.read_bytes() == b'hello world' + b'A' * 10


def test_chunk_magic_inside_cut_token_is_not_a_trailing_chunk():
    # the back-reference 0x10 0x00 loses its second byte, leaving a lone 0x10 after the cursor
    data = build_container(build_chunk([ord('a'), reference(1, 4)]))[:-1]
    result = decode_container(data)
    chunk = result.chunks[0]
    assert chunk.end < len(data)
    assert data[chunk.end] == 0x10
    assert result.termination == ContainerTermination.INPUT_EXHAUSTED
    assert result.warnings == [DecodeWarning.UNEXPECTED_END]
    assert decompress(data) == b'a\x00\x00\x00\x00'

import dataclasses
import gzip
import zlib

import numpy as np
import pytest

from resmodel.compression import (
    CompressedBuffer,
    CompressionType,
    compress,
    compress_internal,
    decompress,
    decompress_internal,
)
from resmodel.errors import DecodeError, UnsupportedAlgorithmError
from resmodel.utils import get_counts

_RNG = np.random.default_rng(20240611)
_NOISE = _RNG.integers(0, 256, 40000, dtype=np.uint8).tobytes()

SAMPLES = {
    'empty': b"",
    'single': b"x",
    'short': b"abc",
    'text': b"The quick brown fox jumps over the lazy dog. " * 40,
    'run': b"\x00" * 5000,
    'noise': _NOISE[:3000],
    'far_repeat': _NOISE + _NOISE[:2000],
    'long_repeat': _NOISE[:500] + b"z" * 3 + _NOISE[:1500],
}

SUPPORTED = [
    CompressionType.UNCOMPRESSED,
    CompressionType.ZLIB,
    CompressionType.INTERNAL_COMPRESSION,
]


# =============================================================================
# Internal decoder
# =============================================================================

@pytest.mark.parametrize("payload, expected", [
    # one literal, then copy 6 bytes from 1 back
    ("10 FB 00 00 07 0D 00 61 FC", b"a" * 7),
    # three literals, copy 6 from 3 back, terminal with one literal
    ("10 FB 00 00 0A 0F 02 61 62 63 FD 58", b"abcabcabcX"),
    # medium code: two literals, copy 20 from 2 back
    ("10 FB 00 00 16 90 80 01 78 79 FC", b"xy" * 11),
    # literal run of four, long code copying 300 from 4 back
    ("10 FB 00 01 30 E0 41 42 43 44 C4 00 03 27 FC", b"ABCD" * 76),
    # four byte size field
    ("90 FB 00 00 00 07 0D 00 61 FC", b"a" * 7),
])
def test_decode_control_codes(payload, expected):
    assert decompress_internal(bytes.fromhex(payload), len(expected)) == expected


def test_decode_golden_file(golden_internal):
    data, expected = golden_internal

    result = decompress(data, CompressionType.INTERNAL_COMPRESSION, len(expected))

    assert result == expected


@pytest.mark.parametrize("payload, size", [
    ("10 FB 00 00 07 0D", 7),            # truncated copy code
    ("10 FB 00 00 06 0C 05 FC", 6),      # back reference before the output
    ("10 FB 00 00 07 0D 00 61 FC", 3),   # copy past the declared size
    ("10 FB 00 00 07 0D 00 61", 7),      # no terminal code
    ("10 FB 00 00 04 E0 61 62", 4),      # truncated literal run
    ("10 FB 00", 0),                     # truncated header
    ("", 0),
])
def test_decode_malformed_input(payload, size):
    with pytest.raises(DecodeError):
        decompress_internal(bytes.fromhex(payload), size)


def test_decode_error_reports_offset():
    with pytest.raises(DecodeError) as e:
        decompress_internal(bytes.fromhex("10 FB 00 00 06 0C 05 FC"), 6)

    assert e.value.offset == 5


def test_decode_short_stream_warns_and_pads():
    result = decompress_internal(bytes.fromhex("10 FB 00 00 08 0D 00 61 FC"), 8)

    assert result == b"a" * 7 + b"\x00"
    assert get_counts() == (0, 1)


# =============================================================================
# Internal encoder
# =============================================================================

def test_encoder_header():
    data = compress_internal(b"hello")

    assert data[:5] == bytes.fromhex("10 FB 00 00 05")


def test_encoder_compresses_repetition():
    data = compress_internal(b"ABCD" * 1000)

    assert len(data) < 100
    assert decompress_internal(data, 4000) == b"ABCD" * 1000


def test_encoder_uses_far_matches():
    data = compress_internal(SAMPLES['far_repeat'])

    assert len(data) < len(SAMPLES['far_repeat']) - 1000


# =============================================================================
# Dispatch
# =============================================================================

@pytest.mark.parametrize("compression_type", SUPPORTED, ids=lambda t: t.name)
@pytest.mark.parametrize("name", sorted(SAMPLES))
def test_round_trip(compression_type, name):
    data = SAMPLES[name]

    packed = compress(data, compression_type)

    assert decompress(packed, compression_type, len(data)) == data


def test_uncompressed_and_deleted_are_identity():
    assert compress(b"abc", CompressionType.UNCOMPRESSED) == b"abc"
    assert decompress(b"abc", CompressionType.DELETED_RECORD, 3) == b"abc"


def test_zlib_accepts_gzip_streams():
    data = b"gzip wrapped" * 10

    assert decompress(gzip.compress(data), CompressionType.ZLIB, len(data)) == data


def test_zlib_errors_become_decode_errors():
    with pytest.raises(DecodeError) as e:
        decompress(b"not zlib", CompressionType.ZLIB, 8)

    assert isinstance(e.value.__cause__, zlib.error)


@pytest.mark.parametrize("compression_type", [
    CompressionType.STREAMABLE_COMPRESSION,
    CompressionType.DELETED_RECORD,
    0x1234,
])
def test_compress_unsupported(compression_type):
    with pytest.raises(UnsupportedAlgorithmError) as e:
        compress(b"abc", compression_type)

    assert e.value.algorithm == compression_type
    assert "compress" in str(e.value)


def test_decompress_unsupported():
    with pytest.raises(ValueError) as e:
        decompress(b"abc", CompressionType.STREAMABLE_COMPRESSION, 3)

    assert isinstance(e.value, UnsupportedAlgorithmError)
    assert "STREAMABLE_COMPRESSION" in str(e.value)


def test_compression_type_tags():
    assert CompressionType.ZLIB == 23106
    assert CompressionType.lookup(0xFFFF) is CompressionType.INTERNAL_COMPRESSION
    assert CompressionType.lookup(0x1234) is None


# =============================================================================
# CompressedBuffer
# =============================================================================

def test_compressed_buffer_round_trip():
    packed = CompressedBuffer.compress(SAMPLES['text'], CompressionType.INTERNAL_COMPRESSION)

    assert packed.size_decompressed == len(SAMPLES['text'])
    assert packed.decompress() == SAMPLES['text']


def test_compressed_buffer_rejects_negative_size():
    with pytest.raises(ValueError):
        CompressedBuffer(b"", CompressionType.UNCOMPRESSED, -1)


def test_compressed_buffer_is_frozen():
    packed = CompressedBuffer(b"abc", CompressionType.UNCOMPRESSED, 3)

    with pytest.raises(dataclasses.FrozenInstanceError):
        packed.size_decompressed = 4

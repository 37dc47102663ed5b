import pytest

from pipetoolkit.b64 import base64_size, decode_base64, encode_base64

REFERENCE = [
    ("", ""),
    ("1", "MQ=="),
    ("22", "MjI="),
    ("333", "MzMz"),
    ("4444", "NDQ0NA=="),
    ("55555", "NTU1NTU="),
    ("666666", "NjY2NjY2"),
    ("abc:def", "YWJjOmRlZg=="),
]


@pytest.mark.parametrize("plain,encoded", REFERENCE)
def test_encode_matches_reference(plain, encoded):
    assert encode_base64(plain) == encoded


@pytest.mark.parametrize("plain,encoded", REFERENCE)
def test_decode_matches_reference(plain, encoded):
    assert decode_base64(encoded) == plain.encode()


def test_encode_accepts_bytes():
    assert encode_base64(b"abc:def") == "YWJjOmRlZg=="


@pytest.mark.parametrize("size", range(0, 40))
def test_binary_round_trip(size):
    data = bytes((i * 37 + 11) & 0xFF for i in range(size))
    assert decode_base64(encode_base64(data)) == data


@pytest.mark.parametrize("size", range(0, 20))
def test_base64_size_covers_output(size):
    encoded = encode_base64(b"x" * size)
    assert base64_size(size) == len(encoded) + 1


def test_decode_without_padding():
    assert decode_base64("MQ") == b"1"
    assert decode_base64("MjI") == b"22"


def test_decode_ignores_after_padding():
    assert decode_base64("MQ==garbage!!") == b"1"


def test_decode_invalid_character_raises():
    with pytest.raises(ValueError):
        decode_base64("MQ!=")


def test_decode_whitespace_is_invalid():
    with pytest.raises(ValueError):
        decode_base64("Mz Mz")


def test_decode_single_char_yields_nothing():
    assert decode_base64("M") == b""
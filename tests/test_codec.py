from modnet_keys import codec


def test_compact_encoding():
    assert codec.compact(0) == b"\x00"
    assert codec.compact(1) == b"\x04"
    assert codec.compact(63) == b"\xfc"
    assert codec.compact(64) == b"\x01\x01"
    assert codec.compact(16384) == b"\x02\x00\x01\x00"


def test_fixed_width_integers():
    assert codec.encode("u8", 7) == b"\x07"
    assert codec.encode("u32", 1) == b"\x01\x00\x00\x00"


def test_bytes_are_length_prefixed():
    assert codec.encode("Bytes", b"Ed25519HDKD") == b"\x2c" + b"Ed25519HDKD"


def test_decode_advances_offset():
    stream = codec.ScaleBytes(bytearray(b"\x05\x06"))
    assert codec.decode("u8", stream) == 5
    assert codec.decode("u8", stream) == 6

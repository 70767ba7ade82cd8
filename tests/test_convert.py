import pytest

from sigscan.convert import decode_text, encode_text, hex_string_to_bytes


def test_hex_pe_header():
    assert hex_string_to_bytes("4D5A") == b"MZ"


def test_hex_lower_and_upper_agree():
    assert hex_string_to_bytes("deadBEEF") == hex_string_to_bytes("DEADbeef")


def test_hex_odd_length_gets_leading_zero():
    assert hex_string_to_bytes("abc") == hex_string_to_bytes("0abc")
    assert len(hex_string_to_bytes("abc")) == 2


def test_hex_empty():
    assert hex_string_to_bytes("") == b""


@pytest.mark.parametrize("data", [b"\x00\x01\xff", bytes(range(256)), b"MZ\x90\x00"])
def test_hex_round_trip(data):
    assert hex_string_to_bytes(data.hex()) == data


@pytest.mark.parametrize("bad", ["zz", "1g", " 1", "+1"])
def test_hex_invalid(bad):
    with pytest.raises(ValueError):
        hex_string_to_bytes(bad)


def test_encode_is_two_bytes_per_char():
    assert encode_text("A") == b"A\x00"
    assert len(encode_text("Normal")) == 2 * len("Normal")


@pytest.mark.parametrize("text", ["Normal", "C:\\Windows\\a.exe", "Привет", ""])
def test_text_round_trip(text):
    assert decode_text(encode_text(text)) == text


def test_decode_stops_at_nul():
    assert decode_text(encode_text("abc\x00def")) == "abc"


def test_decode_odd_length_keeps_trailing_byte():
    assert decode_text(encode_text("ab") + b"c") == "abc"
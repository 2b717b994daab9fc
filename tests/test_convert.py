import math

import pytest

from jfegal.yaml.binary import Binary, decode_base64
from jfegal.yaml.convert import (
    decode_float,
    decode_integer,
    encode_scalar,
    is_infinity,
    is_nan,
    is_negative_infinity,
    is_numeric,
)
from jfegal.yaml.errors import BadConversion


@pytest.mark.parametrize("text", [".inf", ".Inf", ".INF", "+.inf", "+.Inf", "+.INF"])
def test_infinity_spellings(text):
    assert is_infinity(text) is True
    assert is_negative_infinity(text) is False


@pytest.mark.parametrize("text", ["-.inf", "-.Inf", "-.INF"])
def test_negative_infinity_spellings(text):
    assert is_negative_infinity(text) is True
    assert is_infinity(text) is False


@pytest.mark.parametrize("text", [".nan", ".NaN", ".NAN"])
def test_nan_spellings(text):
    assert is_nan(text) is True


def test_nan_rejects_other_text():
    assert is_nan("nan") is False
    assert is_infinity("inf") is False


def test_is_numeric():
    assert is_numeric(3) is True
    assert is_numeric(2.5) is True
    assert is_numeric(True) is False
    assert is_numeric("3") is False


def test_decode_decimal():
    assert decode_integer("42") == 42
    assert decode_integer("-42") == -42
    assert decode_integer("+42") == 42


def test_decode_prefixed_bases():
    assert decode_integer("0x1F") == 31
    assert decode_integer("010") == 8
    assert decode_integer("0") == 0


def test_trailing_whitespace_allowed_leading_refused():
    assert decode_integer("7  ") == 7
    with pytest.raises(BadConversion):
        decode_integer(" 7")


@pytest.mark.parametrize("text", ["", "abc", "08", "1.5", "0x"])
def test_decode_integer_rejects_garbage(text):
    with pytest.raises(BadConversion):
        decode_integer(text)


def test_decode_integer_range_limits():
    assert decode_integer("127", 8, True) == 127
    assert decode_integer("-128", 8, True) == -128
    assert decode_integer("255", 8, False) == 255
    with pytest.raises(BadConversion):
        decode_integer("128", 8, True)
    with pytest.raises(BadConversion):
        decode_integer("256", 8, False)


def test_unsigned_refuses_minus():
    with pytest.raises(BadConversion):
        decode_integer("-0", 32, False)


def test_decode_float_values():
    assert decode_float("2.5") == 2.5
    assert decode_float(".5") == 0.5
    assert decode_float("1e3") == 1000.0


def test_decode_float_special_values():
    assert decode_float(".inf") == math.inf
    assert decode_float("-.INF") == -math.inf
    assert math.isnan(decode_float(".NaN"))


@pytest.mark.parametrize("text", ["", "x", "1e999", " 1.0", "inf"])
def test_decode_float_rejects(text):
    with pytest.raises(BadConversion):
        decode_float(text)


def test_encode_bool_and_null():
    assert encode_scalar(True) == "true"
    assert encode_scalar(False) == "false"
    assert encode_scalar(None) == "null"


def test_encode_special_floats():
    assert encode_scalar(math.inf) == ".inf"
    assert encode_scalar(-math.inf) == "-.inf"
    assert encode_scalar(math.nan) == ".nan"


@pytest.mark.parametrize("value", [0.1, -3.75, 1e-300, 123456.789])
def test_float_round_trip(value):
    assert decode_float(encode_scalar(value)) == value


@pytest.mark.parametrize("value", [0, -17, 2147483647])
def test_integer_round_trip(value):
    assert decode_integer(encode_scalar(value)) == value


def test_encode_binary_round_trip():
    assert decode_base64(encode_scalar(Binary(b"\x00\xffdata"))) == b"\x00\xffdata"


def test_encode_refuses_containers():
    with pytest.raises(TypeError):
        encode_scalar([1, 2])
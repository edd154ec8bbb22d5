import io

import pytest

from noyau.serialio import SerialConsole, sformat


@pytest.mark.parametrize("value", [0, 1, 7, 42, -1, -42, 123456, -2**31, 2**31 - 1])
def test_decimal_round_trip(value):
    assert int(sformat("%d", value)) == value


@pytest.mark.parametrize("value", [0, 1, 15, 255, 4096, 0x7FFFFFFF])
def test_hex_round_trip(value):
    assert int(sformat("%x", value), 16) == value
    assert sformat("%X", value) == sformat("%x", value).upper()


def test_values_wrap_to_32_bits():
    assert int(sformat("%d", 2**32 + 5)) == 5


def test_unsigned_of_negative():
    assert sformat("%u", -1) == "4294967295"


def test_hex_of_negative_is_unsigned():
    assert int(sformat("%x", -1), 16) == 2**32 - 1


def test_width_pads_left_with_spaces():
    result = sformat("%5d", 7)
    assert len(result) == 5
    assert result.strip() == "7"
    assert result.endswith("7")


def test_zero_padding_keeps_sign_first():
    assert sformat("%05d", -42) == "-0042"


def test_negative_without_zero_padding():
    result = sformat("%6d", -3)
    assert len(result) == 6
    assert result.lstrip() == "-3"


def test_right_padding_string():
    assert sformat("%-4s|", "ab") == "ab".ljust(4) + "|"


def test_width_smaller_than_text_is_ignored():
    assert sformat("%2s", "hello") == "hello"


def test_null_string():
    assert sformat("%s", None) == "(null)"


def test_percent_literal():
    assert sformat("100%%") == "100%"


def test_char_conversion():
    assert sformat("%c", ord("z")) == "z"
    assert sformat("%c", "q") == "q"


def test_trailing_percent_is_dropped():
    assert sformat("abc%") == "abc"


def test_unknown_conversion_is_swallowed():
    assert sformat("a%qb") == "ab"


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        sformat("%d %d", 1)


def test_write_line_uses_crlf():
    out = io.StringIO()
    console = SerialConsole(out, io.StringIO())
    assert console.write_line("hi") == ord("\n")
    assert out.getvalue() == "hi\r\n"


def test_printf_counts_characters_before_crlf_expansion():
    out = io.StringIO()
    console = SerialConsole(out, io.StringIO())
    count = console.printf("%d\n", 5)
    assert count == len("5\n")
    assert out.getvalue() == "5\r\n"


def test_write_char_accepts_codes():
    out = io.StringIO()
    console = SerialConsole(out, io.StringIO())
    assert console.write_char(ord("A")) == ord("A")
    assert out.getvalue() == "A"


def test_read_char_then_eof():
    console = SerialConsole(io.StringIO(), io.StringIO("xy"))
    assert console.read_char() == "x"
    assert console.read_char() == "y"
    with pytest.raises(EOFError):
        console.read_char()
import pytest

from oauth_signer import EncodingError
from oauth_signer.encoding import percent_encoding


def test_unreserved_characters_stay_literal():
    assert percent_encoding('abc') == 'abc'
    assert percent_encoding('AZaz09-._~') == 'AZaz09-._~'


def test_reserved_characters_are_escaped():
    assert percent_encoding(' +=') == '%20%2B%3D'
    assert percent_encoding('http://example.com/a?b&c') == 'http%3A%2F%2Fexample.com%2Fa%3Fb%26c'


def test_hex_is_uppercase_and_two_digits():
    assert percent_encoding('\n') == '%0A'
    assert percent_encoding('/') == '%2F'


def test_multibyte_characters_are_encoded_per_byte():
    assert percent_encoding('é') == '%C3%A9'
    assert percent_encoding('☃') == '%E2%98%83'


def test_non_string_values_are_converted():
    assert percent_encoding(1318467427) == '1318467427'


def test_lone_surrogate_raises_encoding_error():
    with pytest.raises(EncodingError):
        percent_encoding('\ud800')


def test_bytes_are_decoded_as_utf8():
    assert percent_encoding(b'a b') == 'a%20b'
    assert percent_encoding('é'.encode('utf-8')) == '%C3%A9'


def test_invalid_utf8_bytes_raise_encoding_error():
    with pytest.raises(EncodingError):
        percent_encoding(b'\xff')

from oauth_signer import EncodingError

UNRESERVED = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._~'.encode('utf-8'))


def to_text(value) -> str:
    """
    Text form of a parameter: bytes must be valid UTF-8, anything else goes through str()
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError(f"cannot decode {value!r} as UTF-8: {e.reason}") from e
    return str(value)


def percent_encoding(string) -> str:
    """
    RFC 3986 percent encoding as OAuth 1.0 requires it: everything but the
    unreserved set is escaped as %XX with uppercase hex, space included
    :param string: text to encode, bytes are decoded as UTF-8 and other
                   non-string values are converted with str()
    :return: encoded text, pure ASCII
    """
    string = to_text(string)
    try:
        raw = string.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodingError(f"cannot encode {string!r} as UTF-8: {e.reason}") from e
    result = ''
    for char in raw:
        result += chr(char) if char in UNRESERVED else '%{:02X}'.format(char)
    return result

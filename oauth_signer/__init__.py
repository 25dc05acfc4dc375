import os
from dataclasses import dataclass

HEADER_AUTHORIZATION = 'Authorization'

OAUTH_VERSION_1_0 = '1.0'
OAUTH_SIGNATURE_METHOD = 'HMAC-SHA1'


class OAuthSignerError(Exception):
    def __init__(self, *args):
        super().__init__(*args)
        if args:
            self.message = args[0]
        else:
            self.message = None

    def __str__(self):
        if self.message:
            return "OAuth signer error: {0}".format(self.message)
        else:
            return "OAuth signer error: unknown"


class ConfigurationError(OAuthSignerError):
    """Credentials are missing or malformed; no signature can be produced."""


class EncodingError(OAuthSignerError):
    """Input text could not be UTF-8 encoded."""


class CryptoProviderError(OAuthSignerError):
    """HMAC-SHA1 is not available in this environment."""


def _require_str(name, value, allow_empty=True):
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a string, got {type(value).__name__}")
    if not allow_empty and not value:
        raise ConfigurationError(f"{name} must not be empty")


def _from_environ(environ, name):
    environ = os.environ if environ is None else environ
    value = environ.get(name)
    if value is None:
        raise ConfigurationError(f"environment variable {name} is not set")
    return value


@dataclass(frozen=True)
class ConsumerKey:
    """Credentials identifying the calling application."""
    key: str
    secret: str

    def __post_init__(self):
        _require_str("consumer key", self.key, allow_empty=False)
        _require_str("consumer secret", self.secret)

    def __repr__(self):
        return f"ConsumerKey(key={self.key!r}, secret='***')"

    @classmethod
    def from_env(cls, environ=None, prefix=''):
        """
        Reads <prefix>CONSUMER_KEY and <prefix>CONSUMER_SECRET
        :param environ: mapping to read from, os.environ by default
        :param prefix: prefix prepended to the variable names
        :return: ConsumerKey
        """
        return cls(_from_environ(environ, prefix + 'CONSUMER_KEY'),
                   _from_environ(environ, prefix + 'CONSUMER_SECRET'))


@dataclass(frozen=True)
class RequestToken:
    """Request or access token identifying the authorized user."""
    key: str
    secret: str = ''

    def __post_init__(self):
        _require_str("token key", self.key)
        _require_str("token secret", self.secret)

    def __repr__(self):
        return f"RequestToken(key={self.key!r}, secret='***')"

    @classmethod
    def from_env(cls, environ=None, prefix=''):
        """
        Reads <prefix>OAUTH_TOKEN and <prefix>OAUTH_TOKEN_SECRET, the secret may be unset
        """
        environ = os.environ if environ is None else environ
        return cls(_from_environ(environ, prefix + 'OAUTH_TOKEN'),
                   environ.get(prefix + 'OAUTH_TOKEN_SECRET', ''))

import time
import base64
import random
import logging
import threading

from collections.abc import Iterable, Mapping
from typing import NamedTuple

from oauth_signer import (HEADER_AUTHORIZATION, OAUTH_SIGNATURE_METHOD, OAUTH_VERSION_1_0,
                          ConfigurationError, ConsumerKey, RequestToken)
from oauth_signer.encoding import percent_encoding
from oauth_signer.hmac_signer import ThreadSafeHMAC

logger = logging.getLogger(__name__)

KEY_OAUTH_CONSUMER_KEY = 'oauth_consumer_key'
KEY_OAUTH_NONCE = 'oauth_nonce'
KEY_OAUTH_SIGNATURE = 'oauth_signature'
KEY_OAUTH_SIGNATURE_METHOD = 'oauth_signature_method'
KEY_OAUTH_TIMESTAMP = 'oauth_timestamp'
KEY_OAUTH_TOKEN = 'oauth_token'
KEY_OAUTH_VERSION = 'oauth_version'

NONCE_SIZE = 16

DEFAULT_PORTS = {'http': ':80', 'https': ':443'}


class SignatureContext(NamedTuple):
    http_method: str
    base_url: str
    timestamp: int
    nonce: str
    form_params: object = None
    query_params: object = None


class ParameterSet:
    """
    Parameters that take part in the signature. Keys and values are encoded
    when added and the encoded pairs are sorted afterwards: encoding can change
    the relative order of two strings, so the order of these steps is fixed.
    """

    def __init__(self):
        self._parameters = []

    def __len__(self):
        return len(self._parameters)

    def add(self, key, value) -> 'ParameterSet':
        self._parameters.append((percent_encoding(key), percent_encoding(value)))
        return self

    def add_all(self, params) -> 'ParameterSet':
        """
        Adds every (key, value) pair, repeated keys and values included
        :param params: mapping of key to a list of values (a bare str or bytes
                       is a single value) or an iterable of (key, value) pairs;
                       None values are skipped, requests does not send them
        """
        if params is None:
            return self
        items = params.items() if isinstance(params, Mapping) else params
        for key, values in items:
            if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
                values = [values]
            for value in values:
                if value is not None:
                    self.add(key, value)
        return self

    def sort_and_concat(self) -> str:
        # tuples order by encoded key, then encoded value; both are ASCII so
        # code point order is byte order
        return '&'.join('{}={}'.format(k, v) for k, v in sorted(self._parameters))


def normalize_base_url(url: str) -> str:
    """
    Drops an explicit default port (:80 for http, :443 for https) that closes
    the authority part of the URL. Any other port, or a port-like text further
    in the path, is left alone.
    """
    scheme, sep, rest = url.partition('://')
    port = DEFAULT_PORTS.get(scheme.lower())
    if not sep or port is None:
        return url
    authority_end = rest.find('/')
    if authority_end < 0:
        return url
    authority = rest[:authority_end]
    if authority.endswith(port):
        return scheme + sep + authority[:-len(port)] + rest[authority_end:]
    return url


def signature_base_string(http_method: str, base_url: str, encoded_params: str) -> str:
    return '&'.join([http_method,
                     percent_encoding(normalize_base_url(base_url)),
                     percent_encoding(encoded_params)])


class NonceGenerator:
    """
    Random nonces for a single signer. The random source belongs to the
    generator, not to the process, and is only touched under the lock so
    concurrent callers never share a draw.
    """

    def __init__(self, seed=None):
        if seed is None:
            seed = id(self) + time.time_ns()
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def generate(self) -> str:
        with self._lock:
            buffer = self._random.randbytes(NONCE_SIZE)
        return base64.b64encode(buffer).decode('utf-8')


class OAuthSignatureCalculator:
    """
    HMAC-SHA1 OAuth 1.0 signatures sent in the Authorization header.
    One instance can sign any number of requests from any number of threads.
    """

    def __init__(self, consumer_auth: ConsumerKey, user_auth: RequestToken,
                 nonce_generator: NonceGenerator = None):
        if not isinstance(consumer_auth, ConsumerKey):
            raise ConfigurationError(f"consumer credentials expected, got {type(consumer_auth).__name__}")
        if not isinstance(user_auth, RequestToken):
            raise ConfigurationError(f"token credentials expected, got {type(user_auth).__name__}")
        self.consumer_auth = consumer_auth
        self.user_auth = user_auth
        self.mac = ThreadSafeHMAC(consumer_auth, user_auth)
        self.nonce_generator = nonce_generator if nonce_generator is not None else NonceGenerator()

    def calculate_and_add_signature(self, http_method: str, base_url: str, headers,
                                    form_params=None, query_params=None):
        """
        Signs the request and stores the result in headers under Authorization
        :param headers: mutable mapping of the outgoing request headers
        """
        headers[HEADER_AUTHORIZATION] = self.calculate_authorization_header(http_method, base_url,
                                                                            form_params, query_params)
        return headers

    def calculate_authorization_header(self, http_method: str, base_url: str,
                                       form_params=None, query_params=None) -> str:
        nonce = self.generate_nonce()
        timestamp = self.generate_timestamp()
        signature = self.calculate_signature(http_method, base_url, timestamp, nonce, form_params, query_params)
        return self.construct_auth_header(signature, nonce, timestamp)

    def calculate_signature(self, http_method: str, base_url: str, timestamp: int, nonce: str,
                            form_params=None, query_params=None) -> str:
        context = SignatureContext(http_method.upper(), base_url, timestamp, nonce, form_params, query_params)
        base_string = self.signature_base_string(context)
        logger.debug(f"Signature base string: {base_string}")
        raw_signature = self.mac.digest(base_string.encode('utf-8'))
        return base64.b64encode(raw_signature).decode('utf-8')

    def signature_base_string(self, context: SignatureContext) -> str:
        parameters = ParameterSet()
        parameters.add(KEY_OAUTH_CONSUMER_KEY, self.consumer_auth.key)
        parameters.add(KEY_OAUTH_NONCE, context.nonce)
        parameters.add(KEY_OAUTH_SIGNATURE_METHOD, OAUTH_SIGNATURE_METHOD)
        parameters.add(KEY_OAUTH_TIMESTAMP, str(context.timestamp))
        parameters.add(KEY_OAUTH_TOKEN, self.user_auth.key)
        parameters.add(KEY_OAUTH_VERSION, OAUTH_VERSION_1_0)
        parameters.add_all(context.form_params)
        parameters.add_all(context.query_params)
        return signature_base_string(context.http_method, context.base_url, parameters.sort_and_concat())

    def construct_auth_header(self, signature: str, nonce: str, timestamp: int) -> str:
        # base64 output contains +, / and =, so signature and nonce are encoded again
        fields = [
            (KEY_OAUTH_CONSUMER_KEY, percent_encoding(self.consumer_auth.key)),
            (KEY_OAUTH_TOKEN, percent_encoding(self.user_auth.key)),
            (KEY_OAUTH_SIGNATURE_METHOD, OAUTH_SIGNATURE_METHOD),
            (KEY_OAUTH_SIGNATURE, percent_encoding(signature)),
            (KEY_OAUTH_TIMESTAMP, str(timestamp)),
            (KEY_OAUTH_NONCE, percent_encoding(nonce)),
            (KEY_OAUTH_VERSION, OAUTH_VERSION_1_0),
        ]
        return 'OAuth ' + ', '.join('{}="{}"'.format(k, v) for k, v in fields)

    def generate_nonce(self) -> str:
        return self.nonce_generator.generate()

    @staticmethod
    def generate_timestamp() -> int:
        return int(time.time())

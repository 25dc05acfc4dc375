import logging
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from requests.auth import AuthBase

from oauth_signer import ConsumerKey, EncodingError, RequestToken
from oauth_signer.oauth import OAuthSignatureCalculator

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded'


def split_url(url: str) -> tuple:
    """
    Splits a request URL into the base URL used for signing and its query parameters
    :param url: full request URL
    :return: base URL without userinfo, query and fragment, list of (key, value) query pairs
    """
    parts = urlsplit(url)
    netloc = parts.netloc.rpartition('@')[2]
    base_url = urlunsplit((parts.scheme, netloc, parts.path, '', ''))
    return base_url, parse_qsl(parts.query, keep_blank_values=True)


def form_params(request) -> list:
    """
    Form parameters of a prepared request, empty unless the body is url-encoded form data
    """
    content_type = request.headers.get('Content-Type', '')
    if not content_type.startswith(FORM_CONTENT_TYPE) or not request.body:
        return []
    body = request.body
    if isinstance(body, bytes):
        try:
            body = body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError(f"form body is not valid UTF-8: {e.reason}") from e
    return parse_qsl(body, keep_blank_values=True)


class OAuthSignatureAuth(AuthBase):
    """
    requests authentication that signs every outgoing request with OAuth 1.0 HMAC-SHA1

        session.auth = OAuthSignatureAuth(ConsumerKey("ck", "cs"), RequestToken("tk", "ts"))
    """

    def __init__(self, consumer_auth: ConsumerKey = None, user_auth: RequestToken = None,
                 calculator: OAuthSignatureCalculator = None):
        if calculator is None:
            calculator = OAuthSignatureCalculator(consumer_auth, user_auth)
        self.calculator = calculator

    @classmethod
    def from_calculator(cls, calculator: OAuthSignatureCalculator) -> 'OAuthSignatureAuth':
        return cls(calculator=calculator)

    def __call__(self, request):
        base_url, query_params = split_url(request.url)
        logger.debug(f"Signing {request.method} {base_url}")
        self.calculator.calculate_and_add_signature(request.method, base_url, request.headers,
                                                    form_params(request), query_params)
        return request

    def __eq__(self, other):
        return (isinstance(other, OAuthSignatureAuth)
                and self.calculator.consumer_auth == other.calculator.consumer_auth
                and self.calculator.user_auth == other.calculator.user_auth)

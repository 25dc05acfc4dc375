import hmac
import logging

from hashlib import sha1

from oauth_signer import ConsumerKey, RequestToken, CryptoProviderError
from oauth_signer.encoding import percent_encoding

logger = logging.getLogger(__name__)


def signing_key(consumer_secret: str, token_secret: str) -> bytes:
    return '&'.join([percent_encoding(consumer_secret), percent_encoding(token_secret)]).encode('utf-8')


class ThreadSafeHMAC:
    """
    HMAC-SHA1 over the key derived from the consumer and token secrets.
    The key is the only state and never changes, every digest() call works on
    its own hmac object, so one instance can be shared between threads.
    """

    def __init__(self, consumer_auth: ConsumerKey, user_auth: RequestToken):
        self._key = signing_key(consumer_auth.secret, user_auth.secret)
        # fail early if the provider refuses SHA-1, e.g. under a FIPS policy
        self._new()

    def _new(self):
        try:
            return hmac.new(self._key, digestmod=sha1)
        except ValueError as e:
            logger.error(f"HMAC-SHA1 is not available: {e}")
            raise CryptoProviderError(f"HMAC-SHA1 is not available: {e}") from e

    def digest(self, data: bytes) -> bytes:
        mac = self._new()
        mac.update(data)
        return mac.digest()

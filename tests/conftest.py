import pytest

from oauth_signer import ConsumerKey, RequestToken
from oauth_signer.oauth import OAuthSignatureCalculator

EXAMPLE_NONCE = 'abc123'
EXAMPLE_TIMESTAMP = 1318467427
EXAMPLE_SIGNATURE = 'QMFvlnH//bn0SBT1/EP12MU4IkU='


@pytest.fixture
def consumer():
    return ConsumerKey('ck', 'cs')


@pytest.fixture
def token():
    return RequestToken('tk', 'ts')


@pytest.fixture
def calculator(consumer, token):
    return OAuthSignatureCalculator(consumer, token)


@pytest.fixture
def fixed_calculator(calculator, monkeypatch):
    """Calculator that always uses the example nonce and timestamp"""
    monkeypatch.setattr(calculator, 'generate_nonce', lambda: EXAMPLE_NONCE)
    monkeypatch.setattr(calculator, 'generate_timestamp', lambda: EXAMPLE_TIMESTAMP)
    return calculator

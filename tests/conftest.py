"""
Pytest Configuration and Shared Fixtures

Fornisce fixture condivise per tutti i test:
- backend parametrizzato (native e software): ogni test che lo usa gira su entrambi
- engine con MetricsCollector isolato (nessuno stato globale condiviso)
- coppia di chiavi nota, derivata in modo indipendente con `cryptography`
- ScriptedRandom: sorgente di randomness deterministica per i test di parità

Author: ECIES Core Project
Date: October 2026
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.ecies_config import ECIESSettings
from protocols.backends import NativeSecp256k1Backend, SoftwareSecp256k1Backend
from protocols.ecies import ECIESEngine
from utils.logger import ECIESLogger
from utils.metrics import MetricsCollector

from helpers import KNOWN_PRIVATE_KEY, ScriptedRandom
from legacy_reference import public_key_for

BACKEND_CLASSES = {
    "native": NativeSecp256k1Backend,
    "software": SoftwareSecp256k1Backend,
}


@pytest.fixture(autouse=True)
def _reset_loggers():
    """Logger cache is global: handlers bound to a captured stderr must not leak."""
    yield
    ECIESLogger.clear_cache()


@pytest.fixture(params=sorted(BACKEND_CLASSES))
def backend_name(request):
    return request.param


@pytest.fixture
def backend(backend_name):
    return BACKEND_CLASSES[backend_name]()


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def settings():
    return ECIESSettings(log_level="WARNING")


@pytest.fixture
def engine(backend, metrics, settings):
    return ECIESEngine(backend, settings=settings, metrics=metrics)


@pytest.fixture
def native_engine(metrics, settings):
    return ECIESEngine(NativeSecp256k1Backend(), settings=settings, metrics=metrics)


@pytest.fixture
def software_engine(metrics, settings):
    return ECIESEngine(SoftwareSecp256k1Backend(), settings=settings, metrics=metrics)


@pytest.fixture
def known_private_key():
    return KNOWN_PRIVATE_KEY


@pytest.fixture
def known_public_key():
    """65 byte uncompressed public key of KNOWN_PRIVATE_KEY."""
    return public_key_for(KNOWN_PRIVATE_KEY)


@pytest.fixture
def known_compressed_public_key():
    return public_key_for(KNOWN_PRIVATE_KEY, compressed=True)


@pytest.fixture
def scripted_engine_factory(settings):
    """Build an engine on the given backend with a scripted random source."""

    def factory(backend_name: str, *chunks: bytes):
        rng = ScriptedRandom(*chunks)
        engine = ECIESEngine(
            BACKEND_CLASSES[backend_name](rng=rng),
            settings=settings,
            metrics=MetricsCollector(),
        )
        return engine, rng

    return factory

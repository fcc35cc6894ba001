# tests/conftest.py - shared fixtures
import pytest

from snippet_autocompleter.core.autocompleter import AutoCompleter
from snippet_autocompleter.host import LocalHost, LocalInputSource, TextDocument
from snippet_autocompleter.utils.settings_store import MemorySettingsStore


@pytest.fixture
def store():
    return MemorySettingsStore()


@pytest.fixture
def input_source():
    return LocalInputSource()


@pytest.fixture
def host():
    return LocalHost()


@pytest.fixture
def engine(host, store, input_source):
    ac = AutoCompleter(host, store, input_source=input_source)
    yield ac
    ac.shutdown()


@pytest.fixture
def doc():
    return TextDocument("")

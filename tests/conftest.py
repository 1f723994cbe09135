import asyncio
import json
import logging
import os

import pytest

from ddtr.logging_config import LOGGER_NAME


class FakeTranslator:
    """
    Stand-in for BaiduTranslateClient.

    ``results`` maps a target language code to either a list of variants or an
    exception to raise. ``delays`` maps a code to seconds to sleep before answering.
    """

    def __init__(self, results=None, delays=None):
        self.results = results or {}
        self.delays = delays or {}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def translate(self, text, from_language, to_language):
        loop = asyncio.get_running_loop()
        self.calls.append((to_language.code, loop.time()))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(to_language.code, 0)
            if delay:
                await asyncio.sleep(delay)
            result = self.results.get(to_language.code, [f"{text}-{to_language.code}"])
            if isinstance(result, Exception):
                raise result
            return list(result)
        finally:
            self.in_flight -= 1

    @property
    def called_languages(self):
        return [code for code, _ in self.calls]


@pytest.fixture
def fake_translator():
    """Factory fixture for FakeTranslator instances."""
    return FakeTranslator


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep credentials and config overrides from the host out of the tests."""
    for name in ('BAIDU_APP_ID', 'BAIDU_APP_KEY', 'DDTR_CONFIG_FILE'):
        monkeypatch.delenv(name, raising=False)

    yield

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "messages"
    path.mkdir()
    return path


@pytest.fixture
def write_config(tmp_path, output_dir, monkeypatch):
    """
    Write a .ddtr.json into a temporary working directory and chdir into it.

    Keyword arguments override individual settings; pass ``None`` to drop one.
    """
    monkeypatch.chdir(tmp_path)

    def _write(**overrides):
        config = {
            "apiId": "test-id",
            "apiKey": "test-key",
            "outputDir": "messages",
            "baseFilename": "bundle",
            "defaultLanguage": "zh",
            "targetLanguages": ["en", "ja"],
            "requestInterval": 0.01,
            "logging": {"log_level": "DEBUG", "log_file_path": "", "log_to_console": False},
        }
        config.update(overrides)
        config = {name: value for name, value in config.items() if value is not None}
        config_path = tmp_path / ".ddtr.json"
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(config, f, ensure_ascii=False)
        return str(config_path)

    return _write


def read_lines(path):
    if not os.path.exists(path):
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return f.read().splitlines()


@pytest.fixture
def lines_of():
    """Return the lines of a file, or None when it does not exist."""
    return read_lines

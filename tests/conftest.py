"""Shared fixtures for plugindex tests."""

import io
import zipfile
from unittest.mock import MagicMock

import pytest

from constants import Constants


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants overrides a test (or the CLI under test) applies."""
    saved = {k: v for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)


@pytest.fixture
def make_response():
    """Factory for fake requests.Response objects."""
    def _make(status_code=200, text="", headers=None, content=b""):
        res = MagicMock()
        res.status_code = status_code
        res.text = text
        res.content = text.encode("utf-8") if isinstance(text, str) else text
        res.headers = headers or {}
        res.iter_content.return_value = [content] if content else []
        return res
    return _make


@pytest.fixture
def make_archive():
    """Factory returning zip bytes holding ``{name: text}`` entries."""
    def _make(entries):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for name, text in entries.items():
                zf.writestr(name, text)
        return buf.getvalue()
    return _make


@pytest.fixture
def metadata_xml():
    return """<?xml version="1.0" encoding="UTF-8"?>
<metadata>
  <groupId>org.grails.plugins</groupId>
  <artifactId>spring-security-core</artifactId>
  <versioning>
    <latest>4.0.2-SNAPSHOT</latest>
    <release>4.0.1</release>
    <versions>
      <version>4.0.0</version>
      <version>4.0.1</version>
      <version>4.0.2-SNAPSHOT</version>
    </versions>
  </versioning>
</metadata>
"""

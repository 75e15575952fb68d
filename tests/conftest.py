"""Shared test fixtures."""

import tempfile
from pathlib import Path

import pytest

from fakes import FakeSession, make_record
from mailpull.config import Config, ImapConfig, RetrievalConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_records():
    """Three well-formed records in non-sorted server order."""
    return [
        make_record(5, subject="First"),
        make_record(2, subject="Second"),
        make_record(9, subject="Third"),
    ]


@pytest.fixture
def fake_session(sample_records):
    return FakeSession(sample_records)


@pytest.fixture
def sample_config():
    """Create a sample configuration for testing."""
    return Config(
        imap=ImapConfig(
            host="imap.example.com",
            port=993,
            username="test@example.com",
            password="testpass",
        ),
        retrieval=RetrievalConfig(),
    )


@pytest.fixture
def sample_config_toml(temp_dir, monkeypatch):
    """Create a sample TOML config file."""
    # Password must come from environment variable
    monkeypatch.setenv("MAILPULL_IMAP_PASSWORD", "secret")

    config_path = temp_dir / "config.toml"
    config_path.write_text('''
[imap]
host = "imap.test.com"
port = 143
username = "user@test.com"
use_ssl = false
folder = "Archive"
read_only = true

[retrieval]
queue_size = 25
mark_as_read = false
delete = true
''')
    return config_path

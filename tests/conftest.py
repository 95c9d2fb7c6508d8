"""Shared pytest fixtures for all tests."""

import pytest

from cli.config import Config
from fakes import PNG_HEADER, FakeLedger
from pipeline.header_map import HeaderMapping


@pytest.fixture
def fake_ledger():
    """In-memory ledger with an active creator account."""
    return FakeLedger()


@pytest.fixture
def header_map():
    return HeaderMapping({'image/png': PNG_HEADER, 'text/html': b'\x01html'})


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .onchfs-minter directory
    """
    config_dir = tmp_path / '.onchfs-minter'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance with pacing disabled.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    config = Config(temp_config_dir / 'config.json')
    config.data['submission_interval'] = 0
    return config


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a 70,000-byte PNG-named file (three chunks).

    Returns:
        Path to sample file
    """
    file_path = tmp_path / 'artwork.png'
    file_path.write_bytes(bytes(i % 251 for i in range(70_000)))
    return file_path


@pytest.fixture
def small_file(tmp_path):
    file_path = tmp_path / 'note.png'
    file_path.write_bytes(b'tiny artwork')
    return file_path

"""Root conftest — shared test configuration and fixtures."""

import os

import pytest

# Ensure tests never pick up a real wallet or development-mode error detail
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_FORMAT", "text")
os.environ["CHAIN_RPC_URL"] = ""
os.environ["CHAIN_PRIVATE_KEY"] = ""

from rice_supply.config import Settings  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    """Settings pointing snapshots at a per-test directory, chain disabled."""
    return Settings(
        _env_file=None,
        data_dir=str(tmp_path / "data"),
        persist_snapshots=True,
        chain_rpc_url=None,
        chain_private_key=None,
    )

from __future__ import annotations

import pytest

from mct.journal.config import reset_config

MCT_ENV_VARS = (
    "MCT_ENV",
    "MCT_CONFIG",
    "MCT_LOG_LEVEL",
    "MCT_OUTPUT_FORMAT",
    "MCT_QUEUE_MAXSIZE",
    "MCT_ENCODING",
)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    # setenv-then-delenv makes monkeypatch remove anything a .env file sets.
    for name in MCT_ENV_VARS:
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def journal_lines() -> list[bytes]:
    return [
        b"REM bootstrap coredns\n",
        b"MKDIR /etc/coredns && NOP && RM /etc/coredns\n",
        b"COPY Corefile /etc/coredns/Corefile && NOP && RM /etc/coredns/Corefile\n",
        b"EXEC apt install -y coredns && SYSCTL net.ipv4.ip_forward=1\n",
    ]

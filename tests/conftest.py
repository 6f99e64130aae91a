import os
from pathlib import Path

import pytest

from servemap import create_app
from servemap.settings import ServerConfig

T0 = 1_700_000_000_000_000_000  # ns


def write_save(save_dir: Path, filename: str, data: bytes = b"", mtime_ns: int = T0) -> Path:
    p = save_dir / filename
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data or filename.encode())
    os.utime(p, ns=(mtime_ns, mtime_ns))
    return p


@pytest.fixture
def save_dir(tmp_path):
    d = tmp_path / "saves"
    d.mkdir()
    return d


@pytest.fixture
def app(save_dir):
    return create_app(ServerConfig(save_dir=save_dir, base_url="https://sf.example.com"))


@pytest.fixture
def client(app):
    return app.test_client()

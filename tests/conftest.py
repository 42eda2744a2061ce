from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Create a file with the given bytes inside the test's temp dir."""

    def _make_file(content: bytes, name: str = "test.txt") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _make_file

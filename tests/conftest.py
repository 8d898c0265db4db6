"""Shared pytest fixtures for promo_kit tests."""

from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def _png_bytes(color: tuple[int, int, int], size: tuple[int, int] = (32, 24)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def solid_png():
    """Factory for solid-color PNG payloads."""
    return _png_bytes


@pytest.fixture
def solid_data_url():
    """Factory for solid-color PNGs as base64 data URLs."""

    def make(color: tuple[int, int, int]) -> str:
        return "data:image/png;base64," + base64.b64encode(_png_bytes(color)).decode("ascii")

    return make

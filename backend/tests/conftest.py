"""
Test configuration and fixtures for dominant color tests.
"""
import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from dominantcolor.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def solid_png():
    """PNG bytes of a 24x16 image filled with #d35400."""
    buffer = io.BytesIO()
    Image.new("RGB", (24, 16), (211, 84, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def solid_png_b64(solid_png):
    return base64.b64encode(solid_png).decode("ascii")

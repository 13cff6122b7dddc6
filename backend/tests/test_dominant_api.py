"""
API integration tests for the dominant color endpoints.

Tests the complete HTTP surface:
- multipart upload and base64 modes
- query overrides of estimator parameters
- uniform "no color" responses for undecodable or empty images
- transport validation errors and metrics
"""

import io

from PIL import Image


class TestUploadMode:
    """Test POST /colors/dominant"""

    def test_upload_png(self, test_client, solid_png):
        """A solid PNG returns its color"""
        response = test_client.post(
            "/colors/dominant",
            files={"file": ("solid.png", solid_png, "image/png")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["found"] is True
        assert data["hex"] == "d35400"
        assert data["rgb"] == [211, 84, 0]
        assert data["request_id"].startswith("dom-")
        assert data["debug"]["sample_width"] == 24
        assert data["debug"]["sample_height"] == 16
        assert data["debug"]["cluster_count"] == 1
        assert data["debug"]["converged"] is True

    def test_query_overrides_reach_estimator(self, test_client, solid_png):
        """Query parameters override the default configuration"""
        response = test_client.post(
            "/colors/dominant?sample_image_size=8&number_of_clusters=2&convergence_iterations=5",
            files={"file": ("solid.png", solid_png, "image/png")}
        )

        assert response.status_code == 200
        debug = response.json()["debug"]
        assert debug["sample_width"] == 8
        assert debug["sample_height"] == 5
        assert debug["config"]["number_of_clusters"] == 2
        assert debug["config"]["convergence_iterations"] == 5
        assert debug["config"]["maximum_brightness_threshold"] == 665

    def test_zero_clusters_gives_no_color(self, test_client, solid_png):
        """An empty cluster group maps to the no color response"""
        response = test_client.post(
            "/colors/dominant?number_of_clusters=0",
            files={"file": ("solid.png", solid_png, "image/png")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["found"] is False
        assert data["hex"] == ""
        assert data["rgb"] is None

    def test_undecodable_upload_gives_no_color(self, test_client):
        """Corrupt images are reported as no color, not as errors"""
        response = test_client.post(
            "/colors/dominant",
            files={"file": ("broken.png", b"\x89PNG\r\n\x1a\nbroken", "image/png")}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["found"] is False
        assert data["hex"] == ""
        assert data["debug"] is None

    def test_transparent_upload_gives_no_color(self, test_client):
        """Fully transparent images have no dominant color"""
        buffer = io.BytesIO()
        Image.new("RGBA", (8, 8), (10, 20, 30, 0)).save(buffer, format="PNG")

        response = test_client.post(
            "/colors/dominant",
            files={"file": ("clear.png", buffer.getvalue(), "image/png")}
        )

        assert response.status_code == 200
        assert response.json()["found"] is False

    def test_unsupported_media_type(self, test_client):
        """Non-image content types are rejected"""
        response = test_client.post(
            "/colors/dominant",
            files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 415

    def test_invalid_override_rejected(self, test_client, solid_png):
        """Out of range parameters fail validation"""
        response = test_client.post(
            "/colors/dominant?number_of_clusters=-1",
            files={"file": ("solid.png", solid_png, "image/png")}
        )

        assert response.status_code == 422

    def test_missing_file(self, test_client):
        """The file part is required"""
        response = test_client.post("/colors/dominant")
        assert response.status_code == 422


class TestBase64Mode:
    """Test POST /colors/dominant/base64"""

    def test_base64_png(self, test_client, solid_png_b64):
        """Base64 images return their color"""
        response = test_client.post("/colors/dominant/base64", json={"image_b64": solid_png_b64})

        assert response.status_code == 200
        assert response.json()["hex"] == "d35400"

    def test_data_url(self, test_client, solid_png_b64):
        """Data URLs are accepted"""
        response = test_client.post(
            "/colors/dominant/base64",
            json={"image_b64": f"data:image/png;base64,{solid_png_b64}"}
        )

        assert response.status_code == 200
        assert response.json()["hex"] == "d35400"

    def test_invalid_base64(self, test_client):
        """Invalid base64 is reported as no color"""
        response = test_client.post("/colors/dominant/base64", json={"image_b64": "invalid_base64_data"})

        assert response.status_code == 200
        assert response.json()["found"] is False
        assert response.json()["hex"] == ""


class TestServiceRoutes:
    """Test health and metrics routes"""

    def test_healthz(self, test_client):
        """Health check reports service identity"""
        response = test_client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "dominantcolor"
        assert "version" in data

    def test_root(self, test_client):
        """Root endpoint points at the docs"""
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_metrics_count_requests(self, test_client, solid_png_b64):
        """Requests and no color results are counted"""
        test_client.post("/colors/dominant/base64", json={"image_b64": solid_png_b64})
        test_client.post("/colors/dominant/base64", json={"image_b64": "invalid_base64_data"})

        response = test_client.get("/colors/metrics")

        assert response.status_code == 200
        summary = response.json()
        assert summary["counters"]["dominant_requests_total"] == 2
        assert summary["counters"]["dominant_mode_total_base64"] == 2
        assert summary["counters"]["dominant_no_color_total"] == 1
        assert summary["counters"]["dominant_decode_failed_total"] == 1
        assert summary["timing_stats"]["kmeans_duration_ms"]["count"] == 1
        assert summary["iteration_stats"]["count"] == 1

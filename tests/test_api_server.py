from __future__ import annotations

import base64
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from PIL import Image as PILImage

from art_que.api_server import create_app
from art_que.errors import ExternalServiceError
from art_que.repositories.blob_repository import BlobRepository
from art_que.repositories.image_repository import ImageRepository
from tests.helpers import RED, blank, fill_rect


def sample_png() -> bytes:
    return ImageRepository.encode_png(fill_rect(blank(60, 40), 10, 10, 29, 29, RED))


class ApiServerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory(prefix="art_que_api_")
        self.root = Path(self._tmp.name)
        self.images = mock.Mock(wraps=ImageRepository())
        self.background = mock.Mock()
        app = create_app(blob_repository=BlobRepository(root=self.root, base_url=""),
                         image_repository=self.images,
                         background_service=self.background)
        app.config["TESTING"] = True
        self.client = app.test_client()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _post(self, body: dict):
        return self.client.post("/api/postprocess-image", json=body)

    def test_requires_an_image_source(self) -> None:
        response = self._post({})
        self.assertEqual(response.status_code, 400)
        self.assertIn("required", response.get_json()["error"])

    def test_base64_buffer_is_processed_and_stored(self) -> None:
        png = sample_png()
        response = self._post({"image_buffer_base64": base64.b64encode(png).decode()})
        self.assertEqual(response.status_code, 200)

        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertTrue(body["url"].startswith("/api/image/postprocessed-"))
        self.assertEqual(body["metadata"]["originalSize"], len(png))
        self.assertFalse(body["metadata"]["backgroundRemoved"])
        self.assertTrue(body["metadata"]["advancedProcessing"])
        self.assertEqual(len(body["metadata"]["processingSteps"]), 4)
        self.background.remove_background_bytes.assert_not_called()

        served = self.client.get(body["url"])
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.mimetype, "image/png")
        decoded = ImageRepository.decode(served.data)
        self.assertEqual((decoded.width, decoded.height), (1024, 1024))
        served.close()

    def test_image_url_is_downloaded(self) -> None:
        self.images.fetch = mock.Mock(return_value=sample_png())
        response = self._post({"image_url": "https://cdn.test/art.png", "useAdvancedProcessing": False})
        self.assertEqual(response.status_code, 200)
        self.images.fetch.assert_called_once_with("https://cdn.test/art.png")
        self.assertNotIn("processingSteps", response.get_json()["metadata"])

    def test_download_failure_is_502(self) -> None:
        self.images.fetch = mock.Mock(side_effect=ExternalServiceError("nope", status_code=404))
        response = self._post({"image_url": "https://cdn.test/missing.png"})
        self.assertEqual(response.status_code, 502)

    def test_invalid_base64_is_400(self) -> None:
        response = self._post({"image_buffer_base64": "***not base64***"})
        self.assertEqual(response.status_code, 400)

    def test_undecodable_image_is_400(self) -> None:
        response = self._post({"image_buffer_base64": base64.b64encode(b"hello").decode()})
        self.assertEqual(response.status_code, 400)

    def test_oversized_image_is_400(self) -> None:
        encoded = base64.b64encode(sample_png()).decode()
        with mock.patch.object(PILImage, "MAX_IMAGE_PIXELS", 100):
            response = self._post({"image_buffer_base64": encoded})
        self.assertEqual(response.status_code, 400)

    def test_line_wrapped_base64_is_accepted(self) -> None:
        wrapped = base64.encodebytes(sample_png()).decode()
        self.assertIn("\n", wrapped)
        response = self._post({"image_buffer_base64": wrapped})
        self.assertEqual(response.status_code, 200)

    def test_filename_that_sanitises_to_nothing_is_404(self) -> None:
        response = self.client.get("/api/image/___")
        self.assertEqual(response.status_code, 404)

    def test_background_removal_failure_is_502(self) -> None:
        self.background.remove_background_bytes.side_effect = ExternalServiceError("FAL RMBG request failed")
        response = self._post({
            "image_buffer_base64": base64.b64encode(sample_png()).decode(),
            "skipBackgroundRemoval": False,
        })
        self.assertEqual(response.status_code, 502)
        self.assertIn("FAL", response.get_json()["error"])
        self.assertEqual(list(self.root.iterdir()), [])

    def test_missing_image_is_404(self) -> None:
        response = self.client.get("/api/image/nothing-here.png")
        self.assertEqual(response.status_code, 404)

    def test_health(self) -> None:
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()

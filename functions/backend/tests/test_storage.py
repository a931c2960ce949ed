import base64
import unittest
from unittest.mock import MagicMock, patch

from backend.storage import FirebaseImageStore, InMemoryImageStore, decode_data_uri

PNG_BYTES = b"\x89PNG fake"
PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


class DecodeDataUriTests(unittest.TestCase):
    def test_decodes_mime_and_payload(self):
        self.assertEqual(decode_data_uri(PNG_DATA_URI), ("image/png", PNG_BYTES))

    def test_rejects_non_data_uris(self):
        for value in ["https://placehold.co/150x150.png", "data:image/png;base64,***", ""]:
            with self.assertRaises(ValueError):
                decode_data_uri(value)


class ImageStoreTests(unittest.TestCase):
    def test_in_memory_store_adds_extension(self):
        store = InMemoryImageStore()
        url = store.upload_data_uri("supplement-images/abc", PNG_DATA_URI)

        self.assertEqual(url, "https://example.test/storage/supplement-images/abc.png")
        self.assertIn("supplement-images/abc.png", store.stored_objects)

    @patch("backend.storage.storage")
    def test_firebase_store_uploads_public_blob(self, mock_storage):
        bucket = MagicMock()
        blob = bucket.blob.return_value
        blob.public_url = "https://storage.googleapis.com/bucket/supplement-images/abc.png"
        mock_storage.bucket.return_value = bucket

        store = FirebaseImageStore("bucket")
        url = store.upload_data_uri("supplement-images/abc", PNG_DATA_URI)

        mock_storage.bucket.assert_called_once_with("bucket")
        bucket.blob.assert_called_once_with("supplement-images/abc.png")
        blob.upload_from_string.assert_called_once_with(PNG_BYTES, content_type="image/png")
        blob.make_public.assert_called_once()
        self.assertEqual(url, blob.public_url)


if __name__ == "__main__":
    unittest.main()

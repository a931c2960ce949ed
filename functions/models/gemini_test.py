# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================


import unittest
from unittest.mock import MagicMock, patch

from google.api_core import exceptions
from google.genai import errors as genai_errors
from pydantic import BaseModel

from models import gemini


class _Schedule(BaseModel):
    schedule: str


def _image_part(data=None, mime_type="image/png"):
    part = MagicMock()
    if data is None:
        part.inline_data = None
    else:
        part.inline_data.data = data
        part.inline_data.mime_type = mime_type
    return part


class GeminiTest(unittest.TestCase):

    @patch("models.gemini.genai.Client")
    def test_call_predict_with_schema(self, mock_client_cls):
        parsed = _Schedule(schedule="08:00 D3")
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(
            parsed=parsed
        )

        result = gemini.call_predict_with_schema("prompt", _Schedule, api_key="key")

        self.assertIs(result, parsed)
        mock_client_cls.assert_called_once_with(api_key="key")
        config = mock_client_cls.return_value.models.generate_content.call_args.kwargs[
            "config"
        ]
        self.assertEqual(config.response_mime_type, "application/json")
        self.assertEqual(config.temperature, gemini.ADVISOR_TEMPERATURE)

    @patch("models.gemini.genai.Client")
    def test_call_predict_with_schema_empty(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(
            parsed=None
        )
        with self.assertRaises(gemini.GeminiInvalidResponseException):
            gemini.call_predict_with_schema("prompt", _Schedule)

    @patch("models.gemini.genai.Client")
    def test_generate_image_returns_data_uri(self, mock_client_cls):
        candidate = MagicMock()
        candidate.content.parts = [_image_part(), _image_part(b"img", "image/jpeg")]
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(
            candidates=[candidate]
        )

        self.assertEqual(gemini.generate_image("a bottle"), "data:image/jpeg;base64,aW1n")

    @patch("models.gemini.genai.Client")
    def test_generate_image_without_image_part(self, mock_client_cls):
        candidate = MagicMock()
        candidate.content.parts = [_image_part()]
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(
            candidates=[candidate]
        )

        with self.assertRaises(gemini.GeminiInvalidResponseException) as ctx:
            gemini.generate_image("a bottle")
        self.assertEqual(str(ctx.exception), "Image generation failed.")

    @patch("models.gemini.genai.Client")
    def test_tools_disable_automatic_calls(self, mock_client_cls):
        gemini.call_predict_with_tools("prompt", tools=[])

        config = mock_client_cls.return_value.models.generate_content.call_args.kwargs[
            "config"
        ]
        self.assertTrue(config.automatic_function_calling.disable)

    def test_is_quota_error(self):
        self.assertTrue(
            gemini.is_quota_error(
                genai_errors.ClientError(429, {"error": {"code": 429, "message": "quota"}})
            )
        )
        self.assertTrue(gemini.is_quota_error(exceptions.TooManyRequests("quota")))
        self.assertFalse(
            gemini.is_quota_error(
                genai_errors.ClientError(400, {"error": {"code": 400, "message": "bad"}})
            )
        )
        self.assertFalse(gemini.is_quota_error(ValueError("quota")))


if __name__ == "__main__":
    unittest.main()

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

"""Generates a product image for a supplement."""

from models import gemini
from models import prompts


def generate_supplement_image(supplement_name: str, api_key: str | None = None) -> str:
    """
    Generates a photorealistic bottle image for `supplement_name`.

    Returns:
        str: The image as a data URI ("data:image/png;base64,...").

    Raises:
        GeminiInvalidResponseException: If the model returns no image.
    """
    return gemini.generate_image(
        prompts.make_image_prompt(supplement_name), api_key=api_key
    )

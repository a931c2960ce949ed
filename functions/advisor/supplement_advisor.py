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

"""
Recommends a personalized supplement stack for a user profile.

The model only picks the supplements. Product images are generated per
suggestion in parallel and the order links are synthesized here.
"""

import concurrent.futures
import dataclasses
import logging
import uuid
from typing import List, Optional

from pydantic import BaseModel

from advisor import affiliate
from advisor.supplement_image import generate_supplement_image
from backend.storage import ImageStore
from models import gemini
from models import prompts
from shared.api import (
    SupplementAdvisorInput,
    SupplementAdvisorOutput,
    SupplementSuggestion,
)
from shared.constants import AFFILIATE_TAG, PLACEHOLDER_IMAGE_URL
from shared.firebase_constants import GENERATED_IMAGES_PREFIX

logger = logging.getLogger(__name__)


class AdvisorError(Exception):
    pass


# Structured output for Gemini. Links and images are filled in afterwards.
class SuggestionSchema(BaseModel):
    supplement_name: str
    brand: str
    price: str
    user_reviews_summary: str
    scientific_data_summary: str
    asin: Optional[str] = None
    dosage: Optional[str] = None
    timing: Optional[str] = None
    description: Optional[str] = None


class AdvisorOutputSchema(BaseModel):
    suggestions: List[SuggestionSchema]
    daily_schedule: str
    additional_notes: Optional[str] = None


def _sanitize_input(advisor_input: SupplementAdvisorInput) -> SupplementAdvisorInput:
    return dataclasses.replace(
        advisor_input,
        budget=advisor_input.budget or None,
        other_criteria=advisor_input.other_criteria or None,
    )


def _image_for(
    suggestion: SupplementSuggestion,
    api_key: str | None,
    image_store: ImageStore | None,
) -> str:
    image_url = generate_supplement_image(suggestion.supplement_name, api_key=api_key)
    if image_store is None:
        return image_url

    path = f"{GENERATED_IMAGES_PREFIX}/{uuid.uuid4().hex}"
    try:
        return image_store.upload_data_uri(path, image_url)
    except Exception as e:
        logger.warning(
            "Could not store image for %s, keeping inline data: %s",
            suggestion.supplement_name,
            e,
        )
        return image_url


def _generate_images(
    suggestions: List[SupplementSuggestion],
    api_key: str | None,
    image_store: ImageStore | None,
) -> List[str]:
    """
    Generates one image per suggestion concurrently, in suggestion order.

    A failed generation is replaced by the placeholder image.
    """
    if not suggestions:
        return []

    image_urls = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(suggestions)) as executor:
        futures = [
            executor.submit(_image_for, suggestion, api_key, image_store)
            for suggestion in suggestions
        ]
        for suggestion, future in zip(suggestions, futures):
            try:
                image_urls.append(future.result())
            except Exception as e:
                logger.error(
                    "Image generation failed for %s: %s", suggestion.supplement_name, e
                )
                image_urls.append(PLACEHOLDER_IMAGE_URL)
    return image_urls


def suggest_supplements(
    advisor_input: SupplementAdvisorInput,
    api_key: str | None = None,
    image_store: ImageStore | None = None,
    affiliate_tag: str = AFFILIATE_TAG,
) -> SupplementAdvisorOutput:
    """
    Runs the advisor flow for a user profile.

    Args:
        advisor_input: The user's questionnaire answers.
        api_key: Optional user-provided Gemini key.
        image_store: When set, generated images are uploaded and referenced by
            URL instead of being returned inline.
        affiliate_tag: Retailer tracking tag for the order links.

    Raises:
        AdvisorError: If the model returns no suggestions.
    """
    prompt = prompts.make_advisor_prompt(_sanitize_input(advisor_input))
    try:
        llm_output = gemini.call_predict_with_schema(
            prompt, AdvisorOutputSchema, api_key=api_key
        )
    except gemini.GeminiInvalidResponseException:
        llm_output = None

    if not llm_output or not llm_output.suggestions:
        raise AdvisorError(
            "Failed to get supplement suggestions from AI. The model may be "
            "overloaded, please try again."
        )

    suggestions = [
        SupplementSuggestion(**schema.model_dump()) for schema in llm_output.suggestions
    ]
    image_urls = _generate_images(suggestions, api_key, image_store)

    for suggestion, image_url in zip(suggestions, image_urls):
        suggestion.where_to_order = affiliate.build_search_url(
            suggestion.brand, suggestion.supplement_name, tag=affiliate_tag
        )
        suggestion.image_url = image_url or PLACEHOLDER_IMAGE_URL

    return SupplementAdvisorOutput(
        suggestions=suggestions,
        daily_schedule=llm_output.daily_schedule,
        additional_notes=llm_output.additional_notes,
    )

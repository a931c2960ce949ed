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


import base64
import time
import logging
from google import genai
from google.api_core import exceptions
from google.genai import errors as genai_errors
from google.genai import types
from models import api_config
from typing import List, Type, TypeVar

logger = logging.getLogger(__name__)

API_KEY_LOGGING_MESSAGE = "Ran with user-specified API key"
QUERY_RESPONSE_MAX_OUTPUT_TOKENS = 1500
ADVISOR_TEMPERATURE = 0.2

# The advisor talks about dosing, which the default filter tends to block.
DANGEROUS_CONTENT_SAFETY_SETTINGS = [
    types.SafetySetting(
        category=types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        threshold=types.HarmBlockThreshold.BLOCK_NONE,
    )
]

T = TypeVar("T")


class GeminiInvalidResponseException(Exception):
    pass


def _get_client(api_key: str | None) -> genai.Client:
    if not api_key:
        api_key = api_config.DEFAULT_API_KEY
    else:
        logger.info(API_KEY_LOGGING_MESSAGE)
    return genai.Client(api_key=api_key)


def _truncate(text: str, limit: int = 200) -> str:
    return (text[:limit] + "...") if len(text) > limit else text


def is_quota_error(e: Exception) -> bool:
    """True for rate-limit errors from either the genai SDK or google-api-core."""
    if isinstance(e, exceptions.TooManyRequests):
        return True
    return isinstance(e, genai_errors.APIError) and e.code == 429


def call_predict_with_schema(
    query: str,
    response_schema: Type[T],
    model: str = api_config.DEFAULT_TEXT_MODEL,
    api_key: str | None = None,
    temperature: float = ADVISOR_TEMPERATURE,
) -> T | List[T]:
    """Calls Gemini with a response schema for structured output."""
    client = _get_client(api_key)
    start_time = time.time()
    logger.info("Calling Gemini with schema, prompt: '%s'", _truncate(query))

    response = client.models.generate_content(
        model=model,
        contents=query,
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
            temperature=temperature,
            safety_settings=DANGEROUS_CONTENT_SAFETY_SETTINGS,
        ),
    )
    logger.info("Gemini with schema call took: %.2fs", time.time() - start_time)
    if not response.parsed:
        raise GeminiInvalidResponseException("Gemini returned no parseable output.")
    return response.parsed


def call_predict_with_tools(
    query: str,
    tools: List[types.Tool],
    model: str = api_config.DEFAULT_TEXT_MODEL,
    api_key: str | None = None,
) -> types.GenerateContentResponse:
    """
    Calls Gemini with function declarations and returns the raw response.

    Automatic function calling is disabled: the caller decides what to do with
    `response.function_calls`.
    """
    client = _get_client(api_key)
    logger.info("Calling Gemini with tools, prompt: '%s'", _truncate(query))

    return client.models.generate_content(
        model=model,
        contents=query,
        config=types.GenerateContentConfig(
            tools=tools,
            automatic_function_calling=types.AutomaticFunctionCallingConfig(
                disable=True
            ),
            max_output_tokens=QUERY_RESPONSE_MAX_OUTPUT_TOKENS,
        ),
    )


def generate_image(
    prompt: str,
    model: str = api_config.DEFAULT_IMAGE_MODEL,
    api_key: str | None = None,
) -> str:
    """
    Generates an image and returns it as a data URI.

    Args:
        prompt (str): The image prompt.
        model (str): An image-capable model.
        api_key (str | None): Optional user-provided key.

    Returns:
        str: "data:<mime type>;base64,<encoded image>".
    """
    client = _get_client(api_key)
    start_time = time.time()

    response = client.models.generate_content(
        model=model,
        contents=prompt,
        config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
    )
    logger.info("Gemini image call took: %.2fs", time.time() - start_time)

    for candidate in response.candidates or []:
        if not candidate.content:
            continue
        for part in candidate.content.parts or []:
            if part.inline_data and part.inline_data.data:
                mime_type = part.inline_data.mime_type or "image/png"
                encoded = base64.b64encode(part.inline_data.data).decode("ascii")
                return f"data:{mime_type};base64,{encoded}"

    raise GeminiInvalidResponseException("Image generation failed.")

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

# Cloud functions for NutriWise - supplement advisor, chatbot and schedule flows.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
import os
from dataclasses import asdict
from unittest.mock import MagicMock

# Third-party library imports
from dacite import Config, DaciteError, from_dict
from firebase_admin import initialize_app
from firebase_functions import https_fn, logger, options

# Local application imports
from advisor import chatbot, supplement_advisor, supplement_schedule
import main_testing_utils
from models.gemini import is_quota_error
from shared.api import (
    AIChatbotInterfaceInput,
    GenerateSupplementScheduleInput,
    SupplementAdvisorInput,
)
from shared.constants import MAX_CHAT_HISTORY_ITEMS, MAX_CHAT_MESSAGE_LENGTH
from shared.json_utils import convert_keys

if os.environ.get("FUNCTION_RUN_MODE") == "testing":
    supplement_advisor = MagicMock()
    supplement_advisor.suggest_supplements.return_value = (
        main_testing_utils.create_mock_advisor_output()
    )
    supplement_schedule = MagicMock()
    supplement_schedule.generate_supplement_schedule.return_value = (
        main_testing_utils.create_mock_schedule_output()
    )

initialize_app()

# Dataclass fields are typed loosely on the wire (ages arrive as strings from
# some form widgets), so cast scalars and skip strict type checks.
_LOAD_CONFIG = Config(check_types=False, cast=[int, float])


def _load(data_class, data: dict):
    try:
        return from_dict(
            data_class=data_class,
            data=convert_keys(data, "camel_to_snake"),
            config=_LOAD_CONFIG,
        )
    except (DaciteError, TypeError, ValueError) as e:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            f"Invalid request: {e}",
        )


def _model_error(e: Exception) -> https_fn.HttpsError:
    if is_quota_error(e):
        return https_fn.HttpsError(
            https_fn.FunctionsErrorCode.RESOURCE_EXHAUSTED,
            f"Gemini quota exceeded: {e}",
        )
    if isinstance(e, ValueError):
        return https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT, str(e)
        )
    return https_fn.HttpsError(
        https_fn.FunctionsErrorCode.UNAVAILABLE,
        f"Model call failed: {e}",
    )


@https_fn.on_call(timeout_sec=300, memory=options.MemoryOption.GB_1)
def suggest_supplements(req: https_fn.CallableRequest) -> dict:
    """
    Recommends a supplement stack for the submitted profile.

    Args:
        req (https_fn.CallableRequest): The request, containing the advisor
            `input` and an optional `apiKey`.

    Returns:
        A dictionary representation of the SupplementAdvisorOutput object.
    """
    input_dict = req.data.get("input")
    api_key = req.data.get("apiKey")

    if not input_dict:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Must specify 'input' parameter.",
        )

    advisor_input = _load(SupplementAdvisorInput, input_dict)

    try:
        output = supplement_advisor.suggest_supplements(advisor_input, api_key=api_key)
    except Exception as e:
        logger.error(f"Supplement suggestion failed: {e}")
        raise _model_error(e)

    return convert_keys(asdict(output), "snake_to_camel")


@https_fn.on_call(timeout_sec=300, memory=options.MemoryOption.GB_1)
def chatbot_response(req: https_fn.CallableRequest) -> dict:
    """
    Answers a chat message, possibly generating a new stack.

    Args:
        req (https_fn.CallableRequest): The request, containing the chat
            `input` and an optional `apiKey`. The caller's auth uid, when
            present, takes precedence over `input.userId`.

    Returns:
        A dictionary representation of the AIChatbotInterfaceOutput object.
    """
    input_dict = req.data.get("input")
    api_key = req.data.get("apiKey")

    if not input_dict or not input_dict.get("message"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Must specify 'input' with a 'message'.",
        )

    if req.auth and req.auth.uid:
        input_dict = {**input_dict, "userId": req.auth.uid}
    if not input_dict.get("userId"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Must specify a user.",
        )

    chat_input = _load(AIChatbotInterfaceInput, input_dict)

    if len(chat_input.message) > MAX_CHAT_MESSAGE_LENGTH:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Message exceeds max length.",
        )
    if len(chat_input.chat_history) > MAX_CHAT_HISTORY_ITEMS:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Chat history is too long.",
        )

    try:
        output = chatbot.ai_chatbot_interface(chat_input, api_key=api_key)
    except Exception as e:
        logger.error(f"Chatbot failed: {e}")
        raise _model_error(e)

    return convert_keys(asdict(output), "snake_to_camel")


@https_fn.on_call(timeout_sec=120, memory=options.MemoryOption.MB_512)
def generate_supplement_schedule(req: https_fn.CallableRequest) -> dict:
    """
    Builds a daily schedule for the given supplements.

    Args:
        req (https_fn.CallableRequest): The request, containing the schedule
            `input` and an optional `apiKey`.

    Returns:
        A dictionary representation of the GenerateSupplementScheduleOutput object.
    """
    input_dict = req.data.get("input")
    api_key = req.data.get("apiKey")

    if not input_dict or not input_dict.get("supplements"):
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.INVALID_ARGUMENT,
            "Must specify 'input' with at least one supplement.",
        )

    schedule_input = _load(GenerateSupplementScheduleInput, input_dict)

    try:
        output = supplement_schedule.generate_supplement_schedule(
            schedule_input, api_key=api_key
        )
    except Exception as e:
        logger.error(f"Schedule generation failed: {e}")
        raise _model_error(e)

    return convert_keys(asdict(output), "snake_to_camel")

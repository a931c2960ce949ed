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

"""A single-shot chatbot that can hand off to the advisor flow."""

import logging

from dacite import Config, DaciteError, from_dict
from google.genai import types

from advisor.supplement_advisor import suggest_supplements
from backend.storage import ImageStore
from models import gemini
from models import prompts
from shared.api import (
    AIChatbotInterfaceInput,
    AIChatbotInterfaceOutput,
    SupplementAdvisorInput,
)
from shared.constants import CHATBOT_RECOMMENDATION_RESPONSE, MAX_AGE, MAX_WEIGHT
from shared.json_utils import convert_keys

logger = logging.getLogger(__name__)

RECOMMEND_SUPPLEMENTS_TOOL_NAME = "recommendSupplements"
REQUIRED_TEXT_FIELDS = (
    "fitness_goals",
    "gender",
    "activity_level",
    "diet",
    "sleep_quality",
    "race",
)


class ChatbotError(Exception):
    pass


def _string(description: str) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description)


recommend_supplements_tool = types.Tool(
    function_declarations=[
        types.FunctionDeclaration(
            name=RECOMMEND_SUPPLEMENTS_TOOL_NAME,
            description=(
                "Generates a new supplement recommendation stack based on "
                "user-provided criteria. Use this tool if the user explicitly asks "
                "for a new or different recommendation, or provides new personal "
                "details like goals, age, weight, etc."
            ),
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "fitnessGoals": _string(
                        "The user's primary fitness goals, e.g., weight lifting, cardio, weight loss."
                    ),
                    "gender": _string("The user's gender."),
                    "age": types.Schema(
                        type=types.Type.NUMBER, description="The user's age."
                    ),
                    "weight": types.Schema(
                        type=types.Type.NUMBER,
                        description="The user's weight in kilograms.",
                    ),
                    "activityLevel": _string("The user's weekly activity level."),
                    "diet": _string(
                        "The user's dietary preference (e.g., Balanced, Vegan, Keto)."
                    ),
                    "sleepQuality": _string("The user's self-reported sleep quality."),
                    "healthConcerns": types.Schema(
                        type=types.Type.ARRAY,
                        items=types.Schema(type=types.Type.STRING),
                        description="A list of specific health concerns the user has.",
                    ),
                    "otherCriteria": _string(
                        "Any other relevant criteria from the user, like allergies."
                    ),
                    "budget": _string("The user specified budget for supplements."),
                    "race": _string("The user's race or ethnicity."),
                },
                required=[
                    "fitnessGoals",
                    "gender",
                    "age",
                    "weight",
                    "activityLevel",
                    "diet",
                    "sleepQuality",
                    "race",
                ],
            ),
        )
    ]
)


def parse_recommendation_args(args: dict) -> SupplementAdvisorInput:
    """Loads the model's tool arguments as advisor input."""
    try:
        advisor_input = from_dict(
            data_class=SupplementAdvisorInput,
            data=convert_keys(dict(args or {}), "camel_to_snake"),
            config=Config(check_types=False, cast=[int, float]),
        )
    except (DaciteError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid recommendation request from the model: {e}")

    # Same bounds the REST advisor payload enforces.
    missing = [
        name
        for name in REQUIRED_TEXT_FIELDS
        if not str(getattr(advisor_input, name) or "").strip()
    ]
    if missing:
        raise ValueError(
            "Invalid recommendation request from the model: empty "
            + ", ".join(missing)
        )
    if not 0 < advisor_input.age < MAX_AGE:
        raise ValueError(
            f"Invalid recommendation request from the model: age {advisor_input.age}"
        )
    if not 0 < advisor_input.weight < MAX_WEIGHT:
        raise ValueError(
            "Invalid recommendation request from the model: "
            f"weight {advisor_input.weight}"
        )
    return advisor_input


def ai_chatbot_interface(
    chat_input: AIChatbotInterfaceInput,
    api_key: str | None = None,
    image_store: ImageStore | None = None,
) -> AIChatbotInterfaceOutput:
    """
    Answers a chat message, or generates a new stack when the model asks for one.

    Only the first tool request is honored and there is no follow-up turn.
    """
    prompt = prompts.make_chatbot_prompt(chat_input)
    response = gemini.call_predict_with_tools(
        prompt, tools=[recommend_supplements_tool], api_key=api_key
    )

    function_calls = response.function_calls or []
    if function_calls:
        function_call = function_calls[0]
        if function_call.name != RECOMMEND_SUPPLEMENTS_TOOL_NAME:
            raise ChatbotError(f"The AI requested an unknown tool: {function_call.name}")

        tool_input = parse_recommendation_args(function_call.args)
        logger.info("Chatbot requested a new recommendation for %s", chat_input.user_id)
        recommendation = suggest_supplements(
            tool_input, api_key=api_key, image_store=image_store
        )
        return AIChatbotInterfaceOutput(
            response=CHATBOT_RECOMMENDATION_RESPONSE,
            recommendation=recommendation,
            recommendation_input=tool_input,
        )

    text = response.text
    if not text or not text.strip():
        raise ChatbotError("The AI returned an empty response.")
    return AIChatbotInterfaceOutput(response=text.strip())

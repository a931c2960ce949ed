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

"""Prompt templates for the advisor, chatbot, schedule and image flows."""

from shared.api import (
    AIChatbotInterfaceInput,
    GenerateSupplementScheduleInput,
    SupplementAdvisorInput,
)

ADVISOR_PROMPT = """You are an expert AI-powered supplement advisor. Your goal is to create a personalized supplement plan for the user based on their profile.

CRITICAL INSTRUCTIONS:
1.  Analyze the user's complete profile (age, gender, diet, health concerns, etc.).
2.  Recommend a stack of 3-5 of the most effective supplements for their primary fitness goal.
3.  For each supplement, provide a fictional but realistic brand name, price, and a brief summary of user reviews and scientific data.
4.  Ensure the total monthly cost of the recommended stack aligns with the user's specified budget, if provided.
5.  For each supplement, provide a FAKE but realistic-looking Amazon Standard Identification Number (ASIN), like "B0B1J2K3L4".
6.  Create a personalized daily dosing schedule for the selected supplements. This should be detailed and easy to follow.
7.  Provide any additional important notes for the user.
8.  Do NOT recommend any illegal or dangerous substances.
9.  Do NOT generate a URL or a link for where to order. This will be handled programmatically.

USER PROFILE:
- Primary Fitness Goal: {fitness_goals}
- Gender: {gender}
- Age: {age}
- Weight: {weight} kg
- Activity Level: {activity_level}
- Diet: {diet}
- Typical Sleep Quality: {sleep_quality}
- Stated Health Concerns: {health_concerns}
{other_criteria_line}- Ethnicity: {race}
{budget_line}"""

CHATBOT_PROMPT = """You are a friendly, helpful, and expert AI-driven chatbot specializing in supplement recommendations.
Your goal is to provide personalized recommendations based on the user's questions and preferences.

Greet the user by name and maintain chat history.

If the user asks for a new recommendation or provides details to generate one, use the 'recommendSupplements' tool.
Otherwise, answer their questions based on the provided context.

Take into account the following user information to provide recommendations:
- User ID: {user_id}
{recommendation_context}{chat_history}
Now, respond to the following user message:
User: {message}
"""

RECOMMENDATION_CONTEXT = """
The user has previously received the following recommendation. Use this as the primary context for answering their questions, unless they ask for a new recommendation.

RECOMMENDATION CONTEXT:
---
User's Profile for Recommendation:
- Fitness Goals: {fitness_goals}
- Age: {age}
- Weight: {weight} kg
- Race: {race}
{other_criteria_line}{budget_line}
Recommended Stack:
{stack}

Daily Schedule:
{daily_schedule}

Additional Notes:
{additional_notes}
---
END OF RECOMMENDATION CONTEXT
"""

SCHEDULE_PROMPT = """You are a personal supplement advisor that creates personalized daily schedules based on the input.

Given the following supplements and user lifestyle, generate a clear and easy-to-follow daily schedule detailing when and how to take each supplement for optimal results. Take into consideration the user's lifestyle and any timing or duration specifications.

Supplements:
{supplements}

User Lifestyle: {user_lifestyle}

Schedule:"""

IMAGE_PROMPT = (
    'Generate a photorealistic product image of a supplement bottle for "{name}". '
    "The bottle should have modern, clean packaging and be displayed on a neutral "
    "studio background. The label should be minimalist and clearly feature the "
    "supplement name."
)


def _optional_line(label: str, value) -> str:
    return f"- {label}: {value}\n" if value else ""


def make_advisor_prompt(advisor_input: SupplementAdvisorInput) -> str:
    concerns = advisor_input.health_concerns
    return ADVISOR_PROMPT.format(
        fitness_goals=advisor_input.fitness_goals,
        gender=advisor_input.gender,
        age=advisor_input.age,
        weight=advisor_input.weight,
        activity_level=advisor_input.activity_level,
        diet=advisor_input.diet,
        sleep_quality=advisor_input.sleep_quality,
        health_concerns=", ".join(concerns) if concerns else "None specified",
        other_criteria_line=_optional_line(
            "Other Notes (Allergies, etc.)", advisor_input.other_criteria
        ),
        race=advisor_input.race,
        budget_line=_optional_line("Monthly Budget", advisor_input.budget),
    )


def make_chatbot_prompt(chat_input: AIChatbotInterfaceInput) -> str:
    context_string = ""
    context = chat_input.recommendation_context
    if context:
        stack = "\n".join(
            f"- {s.supplement_name}" for s in context.output.suggestions
        )
        context_string = RECOMMENDATION_CONTEXT.format(
            fitness_goals=context.input.fitness_goals,
            age=context.input.age,
            weight=context.input.weight,
            race=context.input.race,
            other_criteria_line=_optional_line(
                "Other Criteria", context.input.other_criteria
            ),
            budget_line=_optional_line("Budget", context.input.budget),
            stack=stack,
            daily_schedule=context.output.daily_schedule,
            additional_notes=context.output.additional_notes or "",
        )

    history_string = ""
    if chat_input.chat_history:
        lines = [f"{m.role}: {m.content}" for m in chat_input.chat_history]
        history_string = "\nHere is the chat history:\n" + "\n".join(lines) + "\n"

    return CHATBOT_PROMPT.format(
        user_id=chat_input.user_id,
        recommendation_context=context_string,
        chat_history=history_string,
        message=chat_input.message,
    )


def make_schedule_prompt(schedule_input: GenerateSupplementScheduleInput) -> str:
    supplements = "\n".join(
        f"- Name: {s.name}, Dosage: {s.dosage}, Timing: {s.timing}, "
        f"Duration: {s.duration}, Notes: {s.notes or ''}"
        for s in schedule_input.supplements
    )
    return SCHEDULE_PROMPT.format(
        supplements=supplements, user_lifestyle=schedule_input.user_lifestyle
    )


def make_image_prompt(supplement_name: str) -> str:
    return IMAGE_PROMPT.format(name=supplement_name)

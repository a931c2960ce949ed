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

"""Builders for realistic request/response objects used in tests and emulator runs."""

from shared.api import (
    GenerateSupplementScheduleOutput,
    ScheduleSupplement,
    SupplementAdvisorInput,
    SupplementAdvisorOutput,
    SupplementSuggestion,
)


def create_mock_advisor_input() -> SupplementAdvisorInput:
    return SupplementAdvisorInput(
        fitness_goals="Muscle gain",
        gender="Female",
        age=32,
        weight=64.5,
        activity_level="Very active (6-7 days/week)",
        diet="Balanced",
        sleep_quality="Fair",
        race="Prefer not to say",
        health_concerns=["Joint pain", "Low energy"],
        other_criteria="Allergic to shellfish",
        budget="$50-$100",
    )


def create_mock_suggestion(
    supplement_name: str = "Creatine Monohydrate", asin: str = "B00E9M4XEE"
) -> SupplementSuggestion:
    return SupplementSuggestion(
        supplement_name=supplement_name,
        brand="Optimum Nutrition",
        price="$29.99",
        user_reviews_summary="Users report steady strength gains.",
        scientific_data_summary="Well studied for strength and power output.",
        where_to_order=(
            "https://www.amazon.com/s?k=Optimum%20Nutrition%20"
            f"{supplement_name.replace(' ', '%20')}&tag=nutriwiseai-20"
        ),
        image_url="https://placehold.co/150x150.png",
        asin=asin,
        dosage="5g",
        timing="Post-workout",
        description="Supports ATP regeneration during short, intense efforts.",
    )


def create_mock_advisor_output() -> SupplementAdvisorOutput:
    return SupplementAdvisorOutput(
        suggestions=[
            create_mock_suggestion(),
            create_mock_suggestion("Fish Oil", asin="B00CAZAU62"),
        ],
        daily_schedule="Morning: Fish Oil with breakfast. Post-workout: Creatine.",
        additional_notes="Consult your physician before starting new supplements.",
    )


def create_mock_schedule_supplements() -> list[ScheduleSupplement]:
    return [
        ScheduleSupplement(
            name="Creatine Monohydrate",
            dosage="5g",
            timing="Post-workout",
            duration="3 months",
        ),
        ScheduleSupplement(
            name="Vitamin D3",
            dosage="2000 IU",
            timing="With breakfast",
            duration="Ongoing",
            notes="Take with a fat-containing meal.",
        ),
    ]


def create_mock_schedule_output() -> GenerateSupplementScheduleOutput:
    return GenerateSupplementScheduleOutput(
        schedule="07:30 Vitamin D3 with breakfast\n18:00 Creatine after training"
    )

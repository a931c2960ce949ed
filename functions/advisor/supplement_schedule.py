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

"""Generates a personalized daily supplement schedule."""

from pydantic import BaseModel

from models import gemini
from models import prompts
from shared.api import (
    GenerateSupplementScheduleInput,
    GenerateSupplementScheduleOutput,
)


class ScheduleSchema(BaseModel):
    schedule: str


def generate_supplement_schedule(
    schedule_input: GenerateSupplementScheduleInput, api_key: str | None = None
) -> GenerateSupplementScheduleOutput:
    if not schedule_input.supplements:
        raise ValueError("At least one supplement is required to build a schedule.")

    prompt = prompts.make_schedule_prompt(schedule_input)
    parsed = gemini.call_predict_with_schema(prompt, ScheduleSchema, api_key=api_key)
    if not parsed.schedule:
        raise gemini.GeminiInvalidResponseException("The AI returned an empty schedule.")
    return GenerateSupplementScheduleOutput(schedule=parsed.schedule)

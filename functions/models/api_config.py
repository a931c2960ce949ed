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


import os

DEFAULT_API_KEY = os.environ.get("GEMINI_API_KEY", "")

DEFAULT_TEXT_MODEL = os.environ.get("NUTRIWISE_TEXT_MODEL", "gemini-2.5-flash")
DEFAULT_IMAGE_MODEL = os.environ.get(
    "NUTRIWISE_IMAGE_MODEL", "gemini-2.0-flash-preview-image-generation"
)

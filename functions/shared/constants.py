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

AFFILIATE_TAG = "nutriwiseai-20"
PLACEHOLDER_IMAGE_URL = "https://placehold.co/150x150.png"

MAX_CHAT_MESSAGE_LENGTH = 2000
MAX_COMMUNITY_MESSAGE_LENGTH = 1000
MAX_CHAT_HISTORY_ITEMS = 50
COMMUNITY_CHAT_PAGE_SIZE = 50

# Exclusive upper bounds for the advisor questionnaire.
MAX_AGE = 1000
MAX_WEIGHT = 10000

CHATBOT_RECOMMENDATION_RESPONSE = (
    "I've generated a new supplement recommendation for you based on our "
    "conversation! I'm updating the main window with the details now."
)

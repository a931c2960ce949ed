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


import unittest
from unittest.mock import MagicMock, patch

from advisor import chatbot
import main_testing_utils
from shared.api import AIChatbotInterfaceInput, ChatMessage
from shared.constants import CHATBOT_RECOMMENDATION_RESPONSE


def _response(text=None, function_calls=None):
    response = MagicMock()
    response.text = text
    response.function_calls = function_calls
    return response


def _function_call(name, args):
    call = MagicMock()
    call.name = name
    call.args = args
    return call


TOOL_ARGS = {
    "fitnessGoals": "Endurance",
    "gender": "Male",
    "age": 41,
    "weight": 78.2,
    "activityLevel": "Moderate",
    "diet": "Vegan",
    "sleepQuality": "Good",
    "race": "Asian",
    "healthConcerns": ["Low energy"],
}


class ChatbotTest(unittest.TestCase):

    def setUp(self):
        self.chat_input = AIChatbotInterfaceInput(
            user_id="user-1",
            message="Can you suggest something for running?",
            chat_history=[ChatMessage(role="user", content="Hi")],
        )

    @patch("advisor.chatbot.gemini.call_predict_with_tools")
    def test_returns_model_text(self, mock_predict):
        mock_predict.return_value = _response(text="  Try electrolytes.  ")

        output = chatbot.ai_chatbot_interface(self.chat_input)

        self.assertEqual(output.response, "Try electrolytes.")
        self.assertIsNone(output.recommendation)
        prompt = mock_predict.call_args.args[0]
        self.assertIn("user: Hi", prompt)
        self.assertIn("Can you suggest something for running?", prompt)
        self.assertEqual(
            mock_predict.call_args.kwargs["tools"], [chatbot.recommend_supplements_tool]
        )

    @patch("advisor.chatbot.gemini.call_predict_with_tools")
    def test_empty_text_raises(self, mock_predict):
        mock_predict.return_value = _response(text="   ")
        with self.assertRaises(chatbot.ChatbotError):
            chatbot.ai_chatbot_interface(self.chat_input)

    @patch("advisor.chatbot.suggest_supplements")
    @patch("advisor.chatbot.gemini.call_predict_with_tools")
    def test_tool_call_runs_advisor(self, mock_predict, mock_suggest):
        recommendation = main_testing_utils.create_mock_advisor_output()
        mock_suggest.return_value = recommendation
        mock_predict.return_value = _response(
            function_calls=[
                _function_call(chatbot.RECOMMEND_SUPPLEMENTS_TOOL_NAME, TOOL_ARGS)
            ]
        )

        output = chatbot.ai_chatbot_interface(self.chat_input)

        self.assertEqual(output.response, CHATBOT_RECOMMENDATION_RESPONSE)
        self.assertIs(output.recommendation, recommendation)
        self.assertEqual(output.recommendation_input.fitness_goals, "Endurance")
        self.assertEqual(output.recommendation_input.health_concerns, ["Low energy"])
        mock_suggest.assert_called_once()

    @patch("advisor.chatbot.gemini.call_predict_with_tools")
    def test_unknown_tool_raises(self, mock_predict):
        mock_predict.return_value = _response(
            function_calls=[_function_call("orderPizza", {})]
        )
        with self.assertRaises(chatbot.ChatbotError):
            chatbot.ai_chatbot_interface(self.chat_input)

    @patch("advisor.chatbot.gemini.call_predict_with_tools")
    def test_invalid_tool_args_raise_value_error(self, mock_predict):
        mock_predict.return_value = _response(
            function_calls=[
                _function_call(chatbot.RECOMMEND_SUPPLEMENTS_TOOL_NAME, {"gender": "Male"})
            ]
        )
        with self.assertRaises(ValueError):
            chatbot.ai_chatbot_interface(self.chat_input)

    @patch("advisor.chatbot.suggest_supplements")
    @patch("advisor.chatbot.gemini.call_predict_with_tools")
    def test_blank_tool_args_skip_advisor(self, mock_predict, mock_suggest):
        args = {**TOOL_ARGS, "sleepQuality": "", "race": ""}
        mock_predict.return_value = _response(
            function_calls=[_function_call(chatbot.RECOMMEND_SUPPLEMENTS_TOOL_NAME, args)]
        )

        with self.assertRaises(ValueError) as ctx:
            chatbot.ai_chatbot_interface(self.chat_input)

        self.assertIn("sleep_quality", str(ctx.exception))
        self.assertIn("race", str(ctx.exception))
        mock_suggest.assert_not_called()


class ParseRecommendationArgsTest(unittest.TestCase):

    def test_casts_numbers(self):
        args = {**TOOL_ARGS, "age": "41", "weight": 78}
        advisor_input = chatbot.parse_recommendation_args(args)
        self.assertEqual(advisor_input.age, 41)
        self.assertEqual(advisor_input.weight, 78.0)
        self.assertIsInstance(advisor_input.weight, float)

    def test_rejects_zero_age(self):
        with self.assertRaises(ValueError):
            chatbot.parse_recommendation_args({**TOOL_ARGS, "age": 0})

    def test_rejects_negative_weight(self):
        with self.assertRaises(ValueError):
            chatbot.parse_recommendation_args({**TOOL_ARGS, "weight": -3})

    def test_rejects_whitespace_goal(self):
        with self.assertRaises(ValueError):
            chatbot.parse_recommendation_args({**TOOL_ARGS, "fitnessGoals": "  "})


if __name__ == "__main__":
    unittest.main()

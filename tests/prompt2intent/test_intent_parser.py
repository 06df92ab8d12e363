"""
Tests for the intent parser.
"""

import json
import pytest
from unittest.mock import MagicMock

from marketmate.core.error_handler import (
    ValidationError,
    GenerationUnavailableError,
    LLMParsingError
)
from marketmate.prompt2intent.intent_parser import IntentParser
from marketmate.prompt2intent.campaign_intent import (
    CampaignIntent,
    ContentSpec,
    AudienceCriteria
)

class TestIntentParser:
    """
    Tests for the IntentParser class.
    """

    @pytest.fixture
    def llm_client(self):
        client = MagicMock()
        client.complete.return_value = json.dumps({
            "goal": "drive traffic to the spring sale",
            "channels": ["email", "sms"],
            "contentSpec": {"keyMessage": "30% off everything this weekend"},
            "needsClarification": False
        })
        return client

    @pytest.fixture
    def error_reporter(self):
        return MagicMock()

    @pytest.fixture
    def parser(self, llm_client, error_reporter):
        return IntentParser(llm_client, error_reporter=error_reporter, temperature=0.3)

    def test_parse_campaign_intent(self, parser, llm_client):
        """
        Test parsing a complete request.
        """
        intent = parser.parse_campaign_intent("Text and email our customers about the spring sale")

        assert intent.goal == "drive traffic to the spring sale"
        assert intent.channels == ["email", "sms"]
        assert intent.needs_clarification is False

        prompt = llm_client.complete.call_args[0][0]
        assert "Current User Prompt: Text and email our customers about the spring sale" in prompt
        assert "No previous conversation" in prompt
        assert llm_client.complete.call_args[1]["temperature"] == 0.3

    def test_parse_uses_history(self, parser, llm_client):
        """
        Test that prior turns are included in the prompt.
        """
        history = [
            {"role": "user", "content": "I want a campaign"},
            {"role": "assistant", "content": "What is the goal?"}
        ]

        parser.parse_campaign_intent("More spring sale traffic", history)

        prompt = llm_client.complete.call_args[0][0]
        assert "user: I want a campaign\nassistant: What is the goal?" in prompt

    def test_empty_prompt(self, parser, llm_client):
        """
        Test that an empty prompt is rejected before calling the LLM.
        """
        with pytest.raises(ValidationError):
            parser.parse_campaign_intent("   ")

        assert not llm_client.complete.called

    def test_unavailable_is_reported(self, parser, llm_client, error_reporter):
        """
        Test that an unreachable model is reported and re-raised.
        """
        llm_client.complete.side_effect = GenerationUnavailableError("Request timed out")

        with pytest.raises(GenerationUnavailableError):
            parser.parse_campaign_intent("Promote the sale", [{"role": "user", "content": "Hi"}])

        args, kwargs = error_reporter.capture_exception.call_args
        assert isinstance(args[0], GenerationUnavailableError)
        assert kwargs["tags"] == {"component": "IntentParser", "method": "parse_campaign_intent"}
        assert kwargs["extra"]["prompt"] == "Promote the sale"
        assert kwargs["extra"]["historyLength"] == 1
        assert "rawOutput" not in kwargs["extra"]

    def test_malformed_output_is_reported(self, parser, llm_client, error_reporter):
        """
        Test that unparseable output is reported with the raw text.
        """
        llm_client.complete.return_value = "Sorry, I can't do that."

        with pytest.raises(LLMParsingError):
            parser.parse_campaign_intent("Promote the sale")

        kwargs = error_reporter.capture_exception.call_args[1]
        assert kwargs["extra"]["rawOutput"] == "Sorry, I can't do that."

    def test_long_prompt_truncated_in_report(self, parser, llm_client, error_reporter):
        """
        Test that only the start of the prompt is attached to reports.
        """
        llm_client.complete.return_value = "not json"

        with pytest.raises(LLMParsingError):
            parser.parse_campaign_intent("x" * 500)

        assert len(error_reporter.capture_exception.call_args[1]["extra"]["prompt"]) == 200

    def test_clarification_response(self, parser):
        """
        Test the numbered clarification reply.
        """
        intent = CampaignIntent(
            needs_clarification=True,
            clarification_questions=["What is the goal?", "Which channels should we use?"]
        )

        response = parser.generate_response(intent)

        assert response == (
            "I'd love to help you create this campaign! To get started, I need a bit more information:\n\n"
            "1. What is the goal?\n"
            "2. Which channels should we use?\n\n"
            "Please provide these details so I can create the perfect campaign for you."
        )

    def test_clarification_response_without_questions(self, parser):
        """
        Test that a clarification with no questions still asks something.
        """
        response = parser.generate_response(CampaignIntent(needs_clarification=True))

        assert "1. " in response

    def test_confirmation_response(self, parser):
        """
        Test the confirmation reply for a complete intent.
        """
        intent = CampaignIntent(
            goal="increase signups",
            channels=["email", "social"],
            content_spec=ContentSpec(key_message="Join today"),
            audience_criteria=AudienceCriteria(demographics="students"),
            budget=500.0
        )

        response = parser.generate_response(intent)

        assert response.startswith(
            "Perfect! I'm creating a email, social campaign with a budget of $500 to increase signups."
        )
        assert "Key Message: Join today" in response
        assert "Target Audience: students" in response
        assert response.endswith("Would you like to review the content before we launch?")

    def test_confirmation_response_defaults(self, parser):
        """
        Test the confirmation reply without budget or audience.
        """
        intent = CampaignIntent(
            goal="increase signups",
            channels=["sms"],
            content_spec=ContentSpec(key_message="Join today")
        )

        response = parser.generate_response(intent)

        assert "Perfect! I'm creating a sms campaign to increase signups." in response
        assert "budget" not in response
        assert "Target Audience: General audience" in response

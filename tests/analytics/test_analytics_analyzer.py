"""
Tests for the analytics analyzer.
"""

import json
import pytest
from unittest.mock import MagicMock

from marketmate.core.error_handler import AnalyticsError, GenerationUnavailableError, LLMParsingError
from marketmate.analytics.analytics_analyzer import AnalyticsAnalyzer

class TestAnalyticsAnalyzer:
    """
    Tests for the AnalyticsAnalyzer class.
    """

    @pytest.fixture
    def llm_client(self):
        return MagicMock()

    @pytest.fixture
    def error_reporter(self):
        return MagicMock()

    @pytest.fixture
    def analyzer(self, llm_client, error_reporter):
        return AnalyticsAnalyzer(llm_client, error_reporter=error_reporter, temperature=0.5)

    @pytest.fixture
    def metrics(self):
        return {"impressions": 12000, "clicks": 340, "conversions": 21, "spend": 180.5}

    def test_analyze_performance(self, analyzer, llm_client, metrics):
        """
        Test a successful analysis.
        """
        llm_client.complete.return_value = "Analysis:\n" + json.dumps({
            "summary": "Email drives most conversions.",
            "keyMetrics": [{"label": "CTR", "value": "2.8%", "trend": "up"}],
            "recommendations": ["Send on Tuesdays"],
            "optimizations": ["Shift spend from PPC to email"]
        })

        insights = analyzer.analyze_performance("grow signups", ["email", "ppc"], metrics)

        assert insights["summary"] == "Email drives most conversions."
        assert insights["keyMetrics"][0]["trend"] == "up"
        assert insights["recommendations"] == ["Send on Tuesdays"]

        prompt = llm_client.complete.call_args[0][0]
        assert "Campaign Goal: grow signups" in prompt
        assert "Channels: email, ppc" in prompt
        assert '"clicks": 340' in prompt
        assert llm_client.complete.call_args[1]["temperature"] == 0.5

    def test_key_metrics_default(self, analyzer, llm_client, metrics):
        llm_client.complete.return_value = json.dumps({
            "summary": "Steady.",
            "recommendations": [],
            "optimizations": []
        })

        insights = analyzer.analyze_performance("grow signups", ["sms"], metrics)

        assert insights["keyMetrics"] == []

    @pytest.mark.parametrize("response", [
        {"recommendations": [], "optimizations": []},
        {"summary": "  ", "recommendations": [], "optimizations": []},
        {"summary": "Fine.", "recommendations": "none", "optimizations": []},
        {"summary": "Fine.", "recommendations": []},
    ])
    def test_invalid_structure(self, analyzer, llm_client, error_reporter, metrics, response):
        """
        Test that incomplete insights are rejected and reported.
        """
        llm_client.complete.return_value = json.dumps(response)

        with pytest.raises(AnalyticsError) as excinfo:
            analyzer.analyze_performance("grow signups", ["email"], metrics)

        assert str(excinfo.value) == "Failed to generate analytics insights. Please try again later."
        args, kwargs = error_reporter.capture_exception.call_args
        assert isinstance(args[0], LLMParsingError)
        assert kwargs["tags"] == {"component": "AnalyticsAnalyzer", "method": "analyze_performance"}
        assert kwargs["extra"]["rawOutput"] == json.dumps(response)

    def test_analyze_unavailable(self, analyzer, llm_client, error_reporter, metrics):
        llm_client.complete.side_effect = GenerationUnavailableError("Request timed out")

        with pytest.raises(AnalyticsError):
            analyzer.analyze_performance("grow signups", ["email"], metrics)

        assert "rawOutput" not in error_reporter.capture_exception.call_args[1]["extra"]

    def test_optimization_suggestions(self, analyzer, llm_client, metrics):
        """
        Test extracting a suggestion list.
        """
        llm_client.complete.return_value = 'Here you go:\n["Narrow the audience", "Test new subject lines"]'

        suggestions = analyzer.generate_optimization_suggestions(
            "grow signups", ["email"], metrics, target_metrics={"conversions": 50}
        )

        assert suggestions == ["Narrow the audience", "Test new subject lines"]
        prompt = llm_client.complete.call_args[0][0]
        assert '"conversions": 50' in prompt

    def test_optimization_suggestions_without_targets(self, analyzer, llm_client, metrics):
        llm_client.complete.return_value = '["Raise bids"]'

        analyzer.generate_optimization_suggestions("grow signups", ["ppc"], metrics)

        assert "Target Metrics: Not specified" in llm_client.complete.call_args[0][0]

    def test_optimization_suggestions_failure(self, analyzer, llm_client, error_reporter, metrics):
        llm_client.complete.return_value = "No suggestions today."

        with pytest.raises(AnalyticsError) as excinfo:
            analyzer.generate_optimization_suggestions("grow signups", ["ppc"], metrics)

        assert str(excinfo.value) == "Failed to generate optimization suggestions. Please try again later."
        assert error_reporter.capture_exception.call_args[1]["tags"]["method"] == "generate_optimization_suggestions"

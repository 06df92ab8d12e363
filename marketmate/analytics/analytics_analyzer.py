"""
Campaign analytics with an LLM.

This module asks the LLM to interpret a campaign's performance metrics and to
suggest optimizations.
"""

import json
from typing import Dict, Any, List, Optional

from marketmate.core.logging_config import get_logger
from marketmate.core.config import get_config_value
from marketmate.core.constants import DEFAULT_ANALYTICS_TEMPERATURE
from marketmate.core.error_handler import APIError, LLMParsingError, AnalyticsError
from marketmate.core.error_reporting import ErrorReporter, LoggingErrorReporter
from marketmate.prompt2intent.llm_templates import extract_json_object, extract_json_array

# Initialize logger
logger = get_logger(__name__)

PERFORMANCE_PROMPT_TEMPLATE = """You are a marketing analytics expert. Analyze campaign performance and provide actionable insights.

Campaign Goal: {goal}
Channels: {channels}
Performance Metrics: {metrics}

Provide:
1. Executive summary (2-3 sentences)
2. Key metrics analysis (identify 3-5 most important metrics with trends)
3. Specific recommendations (3-5 actionable items)
4. Optimization opportunities (2-3 concrete suggestions)

Format as JSON:
{{
  "summary": "...",
  "keyMetrics": [
    {{"label": "...", "value": "...", "trend": "up|down|stable"}}
  ],
  "recommendations": ["...", "..."],
  "optimizations": ["...", "..."]
}}

Output:"""

OPTIMIZATION_PROMPT_TEMPLATE = """You are a campaign optimization specialist. Generate specific, actionable optimization suggestions.

Campaign Goal: {goal}
Channels: {channels}
Current Performance: {current_performance}
Target Metrics: {target_metrics}

Generate 5-7 specific optimization suggestions that can improve campaign performance.
Focus on:
- Audience targeting refinements
- Content improvements
- Budget allocation
- Timing and scheduling
- Channel-specific tactics

Format as JSON array:
["suggestion 1", "suggestion 2", ...]

Output:"""


class AnalyticsAnalyzer:
    """
    Generates performance insights and optimization suggestions for campaigns.
    """

    def __init__(
        self,
        llm_client,
        error_reporter: Optional[ErrorReporter] = None,
        temperature: Optional[float] = None
    ):
        """
        Initialize the analyzer.

        Args:
            llm_client: Client with a complete(prompt, temperature) method
            error_reporter (ErrorReporter, optional): Where failures are reported
            temperature (float, optional): Sampling temperature for analytics calls
        """
        self.llm_client = llm_client
        self.error_reporter = error_reporter or LoggingErrorReporter()
        self.temperature = temperature if temperature is not None else get_config_value(
            "analytics.temperature", DEFAULT_ANALYTICS_TEMPERATURE
        )

    def analyze_performance(self, goal: str, channels: List[str], metrics: Dict[str, Any]) -> Dict[str, Any]:
        """
        Analyze campaign performance.

        Args:
            goal (str): Campaign goal
            channels (List[str]): Campaign channels
            metrics (Dict[str, Any]): Performance metrics

        Returns:
            Dict[str, Any]: {"summary", "keyMetrics", "recommendations", "optimizations"}

        Raises:
            AnalyticsError: If insights could not be generated
        """
        prompt = PERFORMANCE_PROMPT_TEMPLATE.format(
            goal=goal,
            channels=", ".join(channels),
            metrics=json.dumps(metrics, indent=2, default=str)
        )

        raw_output = None
        try:
            raw_output = self.llm_client.complete(prompt, temperature=self.temperature)
            insights = extract_json_object(raw_output)
            self._check_insights(insights, raw_output)
        except (APIError, LLMParsingError) as e:
            self._report(e, "analyze_performance", goal, channels, raw_output, {"metrics": metrics})
            raise AnalyticsError("Failed to generate analytics insights. Please try again later.") from e

        insights.setdefault("keyMetrics", [])
        logger.info(f"Generated analytics insights with {len(insights['recommendations'])} recommendation(s)")
        return insights

    def generate_optimization_suggestions(
        self,
        goal: str,
        channels: List[str],
        current_performance: Dict[str, Any],
        target_metrics: Optional[Dict[str, Any]] = None
    ) -> List[str]:
        """
        Suggest optimizations for a running campaign.

        Args:
            goal (str): Campaign goal
            channels (List[str]): Campaign channels
            current_performance (Dict[str, Any]): Current metrics
            target_metrics (Dict[str, Any], optional): Metrics the campaign should reach

        Returns:
            List[str]: Suggestions

        Raises:
            AnalyticsError: If suggestions could not be generated
        """
        prompt = OPTIMIZATION_PROMPT_TEMPLATE.format(
            goal=goal,
            channels=", ".join(channels),
            current_performance=json.dumps(current_performance, indent=2, default=str),
            target_metrics=json.dumps(target_metrics, indent=2, default=str) if target_metrics else "Not specified"
        )

        raw_output = None
        try:
            raw_output = self.llm_client.complete(prompt, temperature=self.temperature)
            suggestions = extract_json_array(raw_output)
        except (APIError, LLMParsingError) as e:
            self._report(
                e, "generate_optimization_suggestions", goal, channels, raw_output,
                {"currentPerformance": current_performance, "targetMetrics": target_metrics}
            )
            raise AnalyticsError("Failed to generate optimization suggestions. Please try again later.") from e

        return [str(suggestion) for suggestion in suggestions]

    @staticmethod
    def _check_insights(insights: Dict[str, Any], raw_output: str) -> None:
        summary = insights.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise LLMParsingError("Invalid response structure from AI: missing summary", raw_output=raw_output)
        for field in ("recommendations", "optimizations"):
            if not isinstance(insights.get(field), list):
                raise LLMParsingError(f"Invalid response structure from AI: missing {field}", raw_output=raw_output)

    def _report(self, error, method, goal, channels, raw_output, extra):
        report_extra = {"goal": goal, "channels": channels, **extra}
        if raw_output is not None:
            report_extra["rawOutput"] = raw_output
        self.error_reporter.capture_exception(
            error,
            tags={"component": "AnalyticsAnalyzer", "method": method},
            extra=report_extra
        )

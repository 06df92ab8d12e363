"""
Campaign analytics insights.
"""

from marketmate.analytics.analytics_analyzer import AnalyticsAnalyzer

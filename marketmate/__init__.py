"""
MarketMate - Conversational Marketing Campaign Generation

A Python package that turns a plain-language marketing request into a
structured campaign intent, generates content for email, social, PPC and SMS
with an LLM, and stores, launches and analyzes the resulting campaigns.
"""

__version__ = "0.1.0"

# Import main components for easier access
from marketmate.prompt2intent.intent_parser import IntentParser
from marketmate.prompt2intent.intent_validator import IntentValidator
from marketmate.intent2content.content_generator import ContentGenerator
from marketmate.pipeline.campaign_orchestrator import CampaignOrchestrator
from marketmate.pipeline.campaign_launcher import CampaignLauncher
from marketmate.analytics.analytics_analyzer import AnalyticsAnalyzer
from marketmate.storage.campaign_store import CampaignStore

"""
Campaign pipeline: chat-turn orchestration and campaign launch.
"""

from marketmate.pipeline.campaign_orchestrator import CampaignOrchestrator
from marketmate.pipeline.campaign_launcher import CampaignLauncher, ChannelDispatcher, QueuedDispatcher

"""
Persistence for conversations, campaigns, brand kits and audit logs.
"""

from marketmate.storage.database import Base, create_session_factory, init_db
from marketmate.storage.campaign_store import CampaignStore

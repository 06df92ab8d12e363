"""
Campaign store.

Persistence for conversations, campaigns, brand kits and audit logs. Every
lookup is scoped to a user id; a record that is missing or owned by someone
else raises NotFoundError. Records are returned as plain dictionaries, except
campaign content, which is returned as a typed content map.
"""

import math
import datetime
from contextlib import contextmanager
from typing import Dict, Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from marketmate.core.logging_config import get_logger
from marketmate.core.constants import CAMPAIGN_STATUSES, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from marketmate.core.error_handler import NotFoundError, ValidationError
from marketmate.intent2content.generated_content import (
    GeneratedContent,
    content_map_to_dict,
    content_map_from_dict
)
from marketmate.prompt2intent.campaign_intent import CampaignIntent
from marketmate.storage import models

# Initialize logger
logger = get_logger(__name__)

UPDATABLE_CAMPAIGN_FIELDS = ["goal", "status", "content", "budget", "schedule", "metrics"]


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _isoformat(value: Optional[datetime.datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class CampaignStore:
    """
    SQLAlchemy-backed store for campaign pipeline records.
    """

    def __init__(self, session_factory):
        """
        Initialize the store.

        Args:
            session_factory: Callable returning a new SQLAlchemy session
        """
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # Conversations

    def create_conversation(self, user_id: str, messages: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Create a conversation.

        Args:
            user_id (str): Owner of the conversation
            messages (List[Dict[str, Any]], optional): Initial messages with "role" and "content"

        Returns:
            Dict[str, Any]: The conversation record
        """
        stamped = [self._stamp(message) for message in messages or []]
        with self._session() as session:
            conversation = models.Conversation(user_id=user_id, messages=stamped, conversation_metadata={})
            session.add(conversation)
            session.flush()
            logger.debug(f"Created conversation {conversation.id} for user {user_id}")
            return self._conversation_to_dict(conversation)

    def append_message(
        self,
        user_id: str,
        conversation_id: str,
        role: str,
        content: str,
        campaign_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Append a message to a conversation.

        Args:
            user_id (str): Owner of the conversation
            conversation_id (str): Conversation id
            role (str): "user" or "assistant"
            content (str): Message text
            campaign_id (str, optional): Campaign this message announces

        Returns:
            Dict[str, Any]: The appended message

        Raises:
            NotFoundError: If the conversation does not exist for this user
        """
        message = {"role": role, "content": content}
        if campaign_id:
            message["campaignId"] = campaign_id
        message = self._stamp(message)

        with self._session() as session:
            conversation = self._get_owned(session, models.Conversation, user_id, conversation_id, "Conversation")
            # Assign a new list so the JSON column change is detected
            conversation.messages = list(conversation.messages or []) + [message]
            conversation.updated_at = _now()
        return message

    def set_current_campaign(self, user_id: str, conversation_id: str, campaign_id: str) -> None:
        """
        Record the campaign a conversation is currently about.

        Raises:
            NotFoundError: If the conversation does not exist for this user
        """
        with self._session() as session:
            conversation = self._get_owned(session, models.Conversation, user_id, conversation_id, "Conversation")
            metadata = dict(conversation.conversation_metadata or {})
            metadata["currentCampaignId"] = campaign_id
            conversation.conversation_metadata = metadata

    def get_conversation(self, user_id: str, conversation_id: str) -> Dict[str, Any]:
        """
        Get a conversation.

        Raises:
            NotFoundError: If the conversation does not exist for this user
        """
        with self._session() as session:
            conversation = self._get_owned(session, models.Conversation, user_id, conversation_id, "Conversation")
            return self._conversation_to_dict(conversation)

    def list_conversations(self, user_id: str, limit: int = DEFAULT_PAGE_LIMIT) -> List[Dict[str, Any]]:
        """List a user's conversations, most recently updated first."""
        with self._session() as session:
            conversations = (
                session.query(models.Conversation)
                .filter(models.Conversation.user_id == user_id)
                .order_by(models.Conversation.updated_at.desc())
                .limit(self._clamp_limit(limit))
                .all()
            )
            return [self._conversation_to_dict(conversation) for conversation in conversations]

    def delete_conversation(self, user_id: str, conversation_id: str) -> None:
        """
        Delete a conversation.

        Raises:
            NotFoundError: If the conversation does not exist for this user
        """
        with self._session() as session:
            conversation = self._get_owned(session, models.Conversation, user_id, conversation_id, "Conversation")
            session.delete(conversation)
        logger.info(f"Deleted conversation {conversation_id}")

    # Campaigns

    def create_campaign(
        self,
        user_id: str,
        intent: CampaignIntent,
        content: Dict[str, GeneratedContent],
        status: str = "ready"
    ) -> Dict[str, Any]:
        """
        Create a campaign from an intent and its generated content.

        Args:
            user_id (str): Owner of the campaign
            intent (CampaignIntent): The complete campaign intent
            content (Dict[str, GeneratedContent]): Content keyed by channel or social platform
            status (str): Initial status

        Returns:
            Dict[str, Any]: The campaign record
        """
        self._check_status(status)
        with self._session() as session:
            campaign = models.Campaign(
                user_id=user_id,
                goal=intent.goal,
                channels=list(intent.channels),
                content=content_map_to_dict(content),
                audience=intent.audience_criteria.to_dict(),
                budget=intent.budget,
                schedule=intent.schedule.to_dict() if intent.schedule else {},
                status=status,
                metrics={}
            )
            session.add(campaign)
            session.flush()
            logger.info(f"Created campaign {campaign.id} with status {status}")
            return self._campaign_to_dict(campaign)

    def get_campaign(self, user_id: str, campaign_id: str) -> Dict[str, Any]:
        """
        Get a campaign.

        Raises:
            NotFoundError: If the campaign does not exist for this user
        """
        with self._session() as session:
            campaign = self._get_owned(session, models.Campaign, user_id, campaign_id, "Campaign")
            return self._campaign_to_dict(campaign)

    def list_campaigns(self, user_id: str, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        """
        List a user's campaigns, newest first.

        Args:
            user_id (str): Owner of the campaigns
            page (int): 1-based page number
            limit (int): Page size, at most MAX_PAGE_LIMIT

        Returns:
            Dict[str, Any]: {"campaigns": [...], "pagination": {"page", "limit", "total", "totalPages"}}

        Raises:
            ValidationError: If page or limit is not positive
        """
        if page < 1:
            raise ValidationError("Page must be a positive integer", field="page", value=page)
        limit = self._clamp_limit(limit)

        with self._session() as session:
            query = session.query(models.Campaign).filter(models.Campaign.user_id == user_id)
            total = query.count()
            campaigns = (
                query.order_by(models.Campaign.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return {
                "campaigns": [self._campaign_to_dict(campaign) for campaign in campaigns],
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": math.ceil(total / limit)
                }
            }

    def update_campaign(self, user_id: str, campaign_id: str, **updates) -> Dict[str, Any]:
        """
        Update selected campaign fields.

        Content may be given as a typed content map. Metrics are merged into
        the existing metrics.

        Raises:
            NotFoundError: If the campaign does not exist for this user
            ValidationError: If a field is not updatable or the status is unknown
        """
        unknown = [field for field in updates if field not in UPDATABLE_CAMPAIGN_FIELDS]
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0])
        if "status" in updates:
            self._check_status(updates["status"])

        with self._session() as session:
            campaign = self._get_owned(session, models.Campaign, user_id, campaign_id, "Campaign")
            for field, value in updates.items():
                if field == "content":
                    value = content_map_to_dict(value)
                elif field == "metrics":
                    value = {**(campaign.metrics or {}), **value}
                setattr(campaign, field, value)
            campaign.updated_at = _now()
            session.flush()
            return self._campaign_to_dict(campaign)

    def record_launch(self, user_id: str, campaign_id: str, status: str, metrics: Dict[str, Any]) -> Dict[str, Any]:
        """
        Mark a campaign as launched.

        Args:
            user_id (str): Owner of the campaign
            campaign_id (str): Campaign id
            status (str): launched or partially_launched
            metrics (Dict[str, Any]): Initial metrics, including per-channel launch results

        Returns:
            Dict[str, Any]: The updated campaign record
        """
        self._check_status(status)
        with self._session() as session:
            campaign = self._get_owned(session, models.Campaign, user_id, campaign_id, "Campaign")
            campaign.status = status
            campaign.metrics = dict(metrics)
            campaign.launched_at = _now()
            campaign.updated_at = campaign.launched_at
            session.flush()
            return self._campaign_to_dict(campaign)

    def delete_campaign(self, user_id: str, campaign_id: str) -> None:
        """
        Delete a campaign.

        Raises:
            NotFoundError: If the campaign does not exist for this user
        """
        with self._session() as session:
            campaign = self._get_owned(session, models.Campaign, user_id, campaign_id, "Campaign")
            session.delete(campaign)
        logger.info(f"Deleted campaign {campaign_id}")

    # Brand kits

    def create_brand_kit(
        self,
        user_id: str,
        name: str,
        tone: str,
        values: str = "",
        primary_color: Optional[str] = None,
        secondary_color: Optional[str] = None,
        font_family: Optional[str] = None,
        logo_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a brand kit and make it the user's active one.

        Returns:
            Dict[str, Any]: The brand kit record
        """
        with self._session() as session:
            session.query(models.BrandKit).filter(
                models.BrandKit.user_id == user_id,
                models.BrandKit.is_active.is_(True)
            ).update({"is_active": False}, synchronize_session=False)

            brand_kit = models.BrandKit(
                user_id=user_id,
                name=name,
                tone=tone,
                values=values,
                primary_color=primary_color,
                secondary_color=secondary_color,
                font_family=font_family,
                logo_url=logo_url,
                is_active=True
            )
            session.add(brand_kit)
            session.flush()
            logger.info(f"Created active brand kit {brand_kit.id} for user {user_id}")
            return {
                "id": brand_kit.id,
                "name": brand_kit.name,
                "tone": brand_kit.tone,
                "values": brand_kit.values,
                "primaryColor": brand_kit.primary_color,
                "secondaryColor": brand_kit.secondary_color,
                "fontFamily": brand_kit.font_family,
                "logoUrl": brand_kit.logo_url,
                "isActive": brand_kit.is_active
            }

    def get_active_brand_voice(self, user_id: str) -> Optional[str]:
        """
        Get the tone of the user's active brand kit.

        Returns:
            str: The brand voice, or None if the user has no active brand kit
        """
        with self._session() as session:
            brand_kit = (
                session.query(models.BrandKit)
                .filter(models.BrandKit.user_id == user_id, models.BrandKit.is_active.is_(True))
                .first()
            )
            return brand_kit.tone if brand_kit else None

    # Audit log

    def create_audit_log(
        self,
        user_id: Optional[str],
        action: str,
        resource: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        status: str = "success"
    ) -> None:
        """
        Write an audit log entry.

        A failure to write the entry is logged and does not interrupt the
        action being audited.
        """
        try:
            with self._session() as session:
                session.add(models.AuditLog(
                    user_id=user_id,
                    action=action,
                    resource=resource,
                    log_metadata=metadata or {},
                    status=status
                ))
        except SQLAlchemyError as e:
            logger.error(f"Failed to create audit log for {action}: {str(e)}")

    def list_audit_logs(self, user_id: str, action: Optional[str] = None) -> List[Dict[str, Any]]:
        """List a user's audit log entries, oldest first."""
        with self._session() as session:
            query = session.query(models.AuditLog).filter(models.AuditLog.user_id == user_id)
            if action:
                query = query.filter(models.AuditLog.action == action)
            return [
                {
                    "id": entry.id,
                    "action": entry.action,
                    "resource": entry.resource,
                    "metadata": entry.log_metadata,
                    "status": entry.status,
                    "createdAt": _isoformat(entry.created_at)
                }
                for entry in query.order_by(models.AuditLog.created_at.asc()).all()
            ]

    # Helpers

    @staticmethod
    def _get_owned(session, model, user_id: str, record_id: str, label: str):
        record = session.query(model).filter(model.id == record_id, model.user_id == user_id).first()
        if record is None:
            raise NotFoundError(f"{label} not found", resource=record_id)
        return record

    @staticmethod
    def _stamp(message: Dict[str, Any]) -> Dict[str, Any]:
        stamped = dict(message)
        stamped.setdefault("timestamp", _now().isoformat())
        return stamped

    @staticmethod
    def _clamp_limit(limit: int) -> int:
        if limit < 1:
            raise ValidationError("Limit must be a positive integer", field="limit", value=limit)
        return min(limit, MAX_PAGE_LIMIT)

    @staticmethod
    def _check_status(status: str) -> None:
        if status not in CAMPAIGN_STATUSES:
            raise ValidationError(f"Unknown campaign status: {status}", field="status", value=status)

    @staticmethod
    def _conversation_to_dict(conversation) -> Dict[str, Any]:
        return {
            "id": conversation.id,
            "user_id": conversation.user_id,
            "messages": list(conversation.messages or []),
            "metadata": dict(conversation.conversation_metadata or {}),
            "created_at": _isoformat(conversation.created_at),
            "updated_at": _isoformat(conversation.updated_at)
        }

    @staticmethod
    def _campaign_to_dict(campaign) -> Dict[str, Any]:
        return {
            "id": campaign.id,
            "user_id": campaign.user_id,
            "goal": campaign.goal,
            "channels": list(campaign.channels or []),
            "content": content_map_from_dict(campaign.content),
            "audience": dict(campaign.audience or {}),
            "budget": campaign.budget,
            "schedule": dict(campaign.schedule or {}),
            "status": campaign.status,
            "metrics": dict(campaign.metrics or {}),
            "launched_at": _isoformat(campaign.launched_at),
            "created_at": _isoformat(campaign.created_at),
            "updated_at": _isoformat(campaign.updated_at)
        }

"""
Campaign launcher.

This module hands a ready campaign's content to a dispatcher per channel and
records the outcome. Channels are launched independently; the campaign is
marked launched when every channel succeeds and partially_launched when only
some do.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional

from marketmate.core.logging_config import get_logger
from marketmate.core.config import get_config_value
from marketmate.core.constants import CHANNELS
from marketmate.core.error_handler import ValidationError, CampaignLaunchError
from marketmate.intent2content.generated_content import GeneratedContent

logger = get_logger(__name__)


class ChannelDispatcher(ABC):
    """
    Base class for sending one channel's content to a marketing integration.
    """

    @abstractmethod
    def dispatch(self, campaign: Dict[str, Any], channel: str, content: Dict[str, GeneratedContent]) -> Dict[str, Any]:
        """
        Send content for one channel.

        Args:
            campaign: The campaign record.
            channel: Channel being launched.
            content: The channel's content, keyed by channel or social platform.

        Returns:
            Launch result with at least "channel" and "status".

        Raises:
            Exception: If the integration rejects the content.
        """
        pass


class QueuedDispatcher(ChannelDispatcher):
    """
    Dispatcher that accepts content and reports it as queued for launch.
    """

    def dispatch(self, campaign: Dict[str, Any], channel: str, content: Dict[str, GeneratedContent]) -> Dict[str, Any]:
        logger.info(f"Queued {channel} content ({', '.join(content)}) for campaign {campaign['id']}")
        return {
            "channel": channel,
            "status": "queued",
            "message": "Campaign queued for launch"
        }


def default_dispatchers() -> Dict[str, ChannelDispatcher]:
    """
    Build queued dispatchers for the channels listed under integrations.connected.

    Returns:
        Mapping of channel to dispatcher.
    """
    connected = get_config_value("integrations.connected", CHANNELS)
    return {channel: QueuedDispatcher() for channel in connected if channel in CHANNELS}


class CampaignLauncher:
    """
    Launches stored campaigns through channel dispatchers.
    """

    def __init__(self, store, dispatchers: Optional[Dict[str, ChannelDispatcher]] = None):
        """
        Initialize the launcher.

        Args:
            store: CampaignStore instance.
            dispatchers: Mapping of channel to dispatcher. Channels without a
                dispatcher fail with "No integration connected".
        """
        self.store = store
        self.dispatchers = dispatchers if dispatchers is not None else default_dispatchers()

    def launch_campaign(
        self,
        user_id: str,
        campaign_id: str,
        channels: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Launch a campaign.

        Args:
            user_id: Owner of the campaign.
            campaign_id: Campaign to launch.
            channels: Channels to launch; defaults to the campaign's channels.

        Returns:
            {"campaign", "launch_results", "success_count", "total_channels"}.

        Raises:
            NotFoundError: If the campaign does not exist for this user.
            ValidationError: If the campaign was already launched or a channel is unknown.
            CampaignLaunchError: If no channel could be launched.
        """
        try:
            campaign = self.store.get_campaign(user_id, campaign_id)

            if campaign["status"] == "launched":
                raise ValidationError("Campaign already launched", field="status", value=campaign["status"])

            channels_to_launch = list(channels or campaign["channels"])
            unknown = [channel for channel in channels_to_launch if channel not in CHANNELS]
            if unknown:
                raise ValidationError(f"Unsupported channel: {unknown[0]}", field="channels", value=unknown[0])

            launch_results = [self._launch_channel(campaign, channel) for channel in channels_to_launch]
            success_count = sum(1 for result in launch_results if result["status"] != "failed")

            if success_count == 0:
                raise CampaignLaunchError("Failed to launch campaign on any channel", launch_results=launch_results)

            status = "launched" if success_count == len(channels_to_launch) else "partially_launched"
            updated = self.store.record_launch(user_id, campaign_id, status, {
                "launchResults": launch_results,
                "impressions": 0,
                "clicks": 0,
                "conversions": 0,
                "spend": 0
            })
        except Exception as e:
            self.store.create_audit_log(
                user_id,
                "campaign.launch",
                resource=campaign_id,
                metadata={"error": str(e)},
                status="failure"
            )
            raise

        self.store.create_audit_log(
            user_id,
            "campaign.launch",
            resource=campaign_id,
            metadata={
                "channels": channels_to_launch,
                "successCount": success_count,
                "totalChannels": len(channels_to_launch)
            },
            status="success"
        )
        logger.info(f"Campaign {campaign_id} {status} on {success_count}/{len(channels_to_launch)} channel(s)")

        return {
            "campaign": updated,
            "launch_results": launch_results,
            "success_count": success_count,
            "total_channels": len(channels_to_launch)
        }

    def _launch_channel(self, campaign: Dict[str, Any], channel: str) -> Dict[str, Any]:
        dispatcher = self.dispatchers.get(channel)
        if dispatcher is None:
            return {"channel": channel, "status": "failed", "error": "No integration connected"}

        content = self._channel_content(campaign["content"], channel)
        if not content:
            return {"channel": channel, "status": "failed", "error": f"No content generated for {channel}"}

        try:
            return dispatcher.dispatch(campaign, channel, content)
        except Exception as e:
            logger.error(f"Error launching {channel} for campaign {campaign['id']}: {str(e)}")
            return {"channel": channel, "status": "failed", "error": str(e)}

    @staticmethod
    def _channel_content(content: Dict[str, GeneratedContent], channel: str) -> Dict[str, GeneratedContent]:
        # Social content is stored per platform
        return {key: item for key, item in content.items() if item.channel == channel}

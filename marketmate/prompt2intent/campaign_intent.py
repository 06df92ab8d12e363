"""
Campaign intent value types.

A CampaignIntent is the structured form of a user's marketing request. It is
produced by the intent parser and consumed by the content generator. The
dictionary form uses the camelCase field names the LLM is asked to return.
"""

from typing import Dict, Any, List, Optional


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class ContentSpec:
    """
    What the campaign content should say.

    Attributes:
        key_message: The core message every channel must carry.
        tone: Optional tone of voice requested by the user.
        call_to_action: Optional call to action.
    """

    def __init__(
        self,
        key_message: Optional[str] = None,
        tone: Optional[str] = None,
        call_to_action: Optional[str] = None
    ):
        self.key_message = key_message
        self.tone = tone
        self.call_to_action = call_to_action

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ContentSpec":
        data = data or {}
        return cls(
            key_message=data.get("keyMessage"),
            tone=data.get("tone"),
            call_to_action=data.get("callToAction")
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "tone": self.tone,
            "keyMessage": self.key_message,
            "callToAction": self.call_to_action
        })

    def __eq__(self, other):
        return isinstance(other, ContentSpec) and self.to_dict() == other.to_dict()


class AudienceCriteria:
    """Who the campaign targets. Every field is optional free text."""

    def __init__(
        self,
        demographics: Optional[str] = None,
        interests: Optional[str] = None,
        location: Optional[str] = None
    ):
        self.demographics = demographics
        self.interests = interests
        self.location = location

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AudienceCriteria":
        data = data or {}
        return cls(
            demographics=data.get("demographics"),
            interests=data.get("interests"),
            location=data.get("location")
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "demographics": self.demographics,
            "interests": self.interests,
            "location": self.location
        })

    def __eq__(self, other):
        return isinstance(other, AudienceCriteria) and self.to_dict() == other.to_dict()


class Schedule:
    """Optional start and end dates, kept as the strings the user gave."""

    def __init__(self, start_date: Optional[str] = None, end_date: Optional[str] = None):
        self.start_date = start_date
        self.end_date = end_date

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Schedule"]:
        if data is None:
            return None
        return cls(start_date=data.get("startDate"), end_date=data.get("endDate"))

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"startDate": self.start_date, "endDate": self.end_date})

    def __eq__(self, other):
        return isinstance(other, Schedule) and self.to_dict() == other.to_dict()


class CampaignIntent:
    """
    Structured representation of a marketing campaign request.

    When needs_clarification is True the channel list and content spec may be
    incomplete and must not be used for content generation.

    Attributes:
        goal: Free-text objective.
        channels: Ordered, de-duplicated channel names (email, social, ppc, sms).
        content_spec: ContentSpec for the campaign.
        audience_criteria: AudienceCriteria for the campaign.
        budget: Optional positive budget in USD.
        schedule: Optional Schedule.
        needs_clarification: Whether more information is needed before generating content.
        clarification_questions: Ordered questions for the user.
    """

    def __init__(
        self,
        goal: Optional[str] = None,
        channels: Optional[List[str]] = None,
        content_spec: Optional[ContentSpec] = None,
        audience_criteria: Optional[AudienceCriteria] = None,
        budget: Optional[float] = None,
        schedule: Optional[Schedule] = None,
        needs_clarification: bool = False,
        clarification_questions: Optional[List[str]] = None
    ):
        self.goal = goal
        self.channels = list(channels or [])
        self.content_spec = content_spec or ContentSpec()
        self.audience_criteria = audience_criteria or AudienceCriteria()
        self.budget = budget
        self.schedule = schedule
        self.needs_clarification = needs_clarification
        self.clarification_questions = list(clarification_questions or [])

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CampaignIntent":
        """
        Build an intent from its wire form.

        Args:
            data (Dict[str, Any]): Dictionary with camelCase keys

        Returns:
            CampaignIntent: The intent
        """
        return cls(
            goal=data.get("goal"),
            channels=data.get("channels"),
            content_spec=ContentSpec.from_dict(data.get("contentSpec")),
            audience_criteria=AudienceCriteria.from_dict(data.get("audienceCriteria")),
            budget=data.get("budget"),
            schedule=Schedule.from_dict(data.get("schedule")),
            needs_clarification=bool(data.get("needsClarification", False)),
            clarification_questions=data.get("clarificationQuestions")
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the intent to its wire form.

        Returns:
            Dict[str, Any]: Dictionary with camelCase keys; unset optional fields are omitted
        """
        data = {
            "goal": self.goal,
            "channels": list(self.channels),
            "contentSpec": self.content_spec.to_dict(),
            "audienceCriteria": self.audience_criteria.to_dict(),
            "needsClarification": self.needs_clarification
        }
        if self.budget is not None:
            data["budget"] = self.budget
        if self.schedule is not None:
            data["schedule"] = self.schedule.to_dict()
        if self.clarification_questions:
            data["clarificationQuestions"] = list(self.clarification_questions)
        return _drop_none(data)

    def __eq__(self, other):
        return isinstance(other, CampaignIntent) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"CampaignIntent(goal={self.goal!r}, channels={self.channels!r}, "
            f"needs_clarification={self.needs_clarification!r})"
        )

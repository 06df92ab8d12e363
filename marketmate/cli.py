"""
Command-line interface for the marketmate package.

This module provides the CLI commands for the marketmate package:
- chat: Turn a marketing request into a campaign, or get clarification questions
- content: Generate content for one channel from a campaign intent file
- campaigns: List stored campaigns
- launch: Launch a stored campaign
- analyze: Generate performance insights for a stored campaign
- brand: Create the active brand kit whose tone is used as brand voice
"""

import sys
import json
import click
from typing import Optional, List

from marketmate import __version__
from marketmate.core.config import set_config_value
from marketmate.core.constants import CHANNELS, SOCIAL_PLATFORMS, DEFAULT_PAGE_LIMIT
from marketmate.core.logging_config import get_logger, configure_logging
from marketmate.core.error_handler import ValidationError
from marketmate.prompt2intent.llm_client import OpenRouterLLMClient
from marketmate.prompt2intent.intent_parser import IntentParser
from marketmate.prompt2intent.intent_validator import IntentValidator
from marketmate.intent2content.content_generator import ContentGenerator
from marketmate.intent2content.generated_content import content_map_to_dict
from marketmate.pipeline.campaign_orchestrator import CampaignOrchestrator
from marketmate.pipeline.campaign_launcher import CampaignLauncher
from marketmate.analytics.analytics_analyzer import AnalyticsAnalyzer
from marketmate.storage.database import create_session_factory
from marketmate.storage.campaign_store import CampaignStore

# Initialize logging
configure_logging()
logger = get_logger(__name__)


def _build_store(ctx) -> CampaignStore:
    return CampaignStore(create_session_factory(ctx.obj["db"]))


def _build_llm_client(log_file: Optional[str] = None) -> OpenRouterLLMClient:
    return OpenRouterLLMClient(log_file=log_file)


def _fail(message: str, error: Exception) -> None:
    logger.error(f"{message}: {str(error)}")
    click.echo(f"Error: {str(error)}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--user-id', default='local', show_default=True, help='User that owns conversations and campaigns')
@click.option('--db', type=str, help='SQLAlchemy database URL (default: ~/.marketmate/marketmate.db)')
@click.option('--model', type=str, help='LLM model to use (default: openai/gpt-4o-mini)')
@click.pass_context
def main(ctx, user_id: str, db: Optional[str] = None, model: Optional[str] = None):
    """
    MarketMate - conversational marketing campaign generation.

    Describe a campaign in plain language and get ready-to-review content
    for email, social, PPC and SMS.
    """
    ctx.ensure_object(dict)
    ctx.obj["user_id"] = user_id
    ctx.obj["db"] = db

    # Runtime override only, the user config file is left alone
    if model:
        set_config_value("llm.model", model)


@main.command()
@click.argument('prompt', type=str)
@click.option('--conversation-id', '-c', type=str, help='Continue an existing conversation')
@click.option('--log', 'log_file', type=click.Path(file_okay=True, dir_okay=False),
              help='Log LLM requests and responses to this file')
@click.pass_context
def chat(ctx, prompt: str, conversation_id: Optional[str] = None, log_file: Optional[str] = None):
    """
    Send a marketing request and generate a campaign.

    PROMPT: What you want the campaign to do, e.g.
    "Email and social campaign to increase signups for our new feature"

    If the request is missing details, the reply lists clarification
    questions. Answer them with --conversation-id to continue.
    """
    user_id = ctx.obj["user_id"]
    try:
        store = _build_store(ctx)
        llm_client = _build_llm_client(log_file)
        orchestrator = CampaignOrchestrator(
            IntentParser(llm_client),
            ContentGenerator(llm_client),
            store
        )

        history = []
        if conversation_id:
            conversation = store.get_conversation(user_id, conversation_id)
            history = [
                {"role": message["role"], "content": message["content"]}
                for message in conversation["messages"]
            ]

        result = orchestrator.handle_turn(user_id, prompt, history, conversation_id)

        click.echo(result["message"])
        if result["type"] == "campaign":
            click.echo(f"\nCampaign: {result['campaign_id']}")
            click.echo(json.dumps(content_map_to_dict(result["content"]), indent=2))
            for warning in result.get("warnings", []):
                click.echo(f"Warning: {warning}", err=True)
        click.echo(f"\nConversation: {result['conversation_id']}")

    except Exception as e:
        _fail("Error handling chat turn", e)


@main.command()
@click.argument('intent_path', type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True))
@click.option('--channel', required=True, type=click.Choice(CHANNELS), help='Channel to generate content for')
@click.option('--platform', type=click.Choice(SOCIAL_PLATFORMS), help='Social platform (required for --channel social)')
@click.option('--brand-voice', type=str, help='Brand voice to write in')
def content(intent_path: str, channel: str, platform: Optional[str] = None, brand_voice: Optional[str] = None):
    """
    Generate content for one channel from a campaign intent file.

    INTENT_PATH: Path to a campaign intent JSON file
    """
    try:
        with open(intent_path, 'r') as f:
            data = json.load(f)

        intent = IntentValidator().validate(data)
        if intent.needs_clarification:
            raise ValidationError("Campaign intent still needs clarification", field="needsClarification")

        generator = ContentGenerator(_build_llm_client())
        generated = generator.generate_content(intent, channel, platform=platform, brand_voice=brand_voice)

        click.echo(json.dumps({generated.key: generated.to_dict()}, indent=2))

    except Exception as e:
        _fail("Error generating content", e)


@main.command()
@click.option('--page', type=int, default=1, show_default=True, help='Page number')
@click.option('--limit', type=int, default=DEFAULT_PAGE_LIMIT, show_default=True, help='Campaigns per page')
@click.pass_context
def campaigns(ctx, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT):
    """
    List stored campaigns, newest first.
    """
    try:
        result = _build_store(ctx).list_campaigns(ctx.obj["user_id"], page=page, limit=limit)

        if not result["campaigns"]:
            click.echo("No campaigns found.")
            return

        for campaign in result["campaigns"]:
            click.echo(
                f"{campaign['id']}  [{campaign['status']}]  {campaign['goal']}  "
                f"({', '.join(campaign['channels'])})"
            )
        pagination = result["pagination"]
        click.echo(f"\nPage {pagination['page']} of {pagination['totalPages']} ({pagination['total']} total)")

    except Exception as e:
        _fail("Error listing campaigns", e)


@main.command()
@click.argument('campaign_id', type=str)
@click.option('--channel', 'channels', multiple=True, type=click.Choice(CHANNELS),
              help='Channel to launch (repeatable; default: all campaign channels)')
@click.pass_context
def launch(ctx, campaign_id: str, channels: List[str]):
    """
    Launch a stored campaign.

    CAMPAIGN_ID: Id of the campaign to launch
    """
    try:
        launcher = CampaignLauncher(_build_store(ctx))
        result = launcher.launch_campaign(ctx.obj["user_id"], campaign_id, list(channels) or None)

        for launch_result in result["launch_results"]:
            detail = launch_result.get("error") or launch_result.get("message", "")
            click.echo(f"{launch_result['channel']}: {launch_result['status']} {detail}".rstrip())
        click.echo(
            f"\nCampaign {campaign_id} is {result['campaign']['status']} "
            f"({result['success_count']}/{result['total_channels']} channel(s))"
        )

    except Exception as e:
        _fail("Error launching campaign", e)


@main.command()
@click.argument('campaign_id', type=str)
@click.option('--suggestions', is_flag=True, default=False, help='Also generate optimization suggestions')
@click.pass_context
def analyze(ctx, campaign_id: str, suggestions: bool = False):
    """
    Generate performance insights for a stored campaign.

    CAMPAIGN_ID: Id of the campaign to analyze
    """
    try:
        campaign = _build_store(ctx).get_campaign(ctx.obj["user_id"], campaign_id)
        analyzer = AnalyticsAnalyzer(_build_llm_client())

        insights = analyzer.analyze_performance(campaign["goal"], campaign["channels"], campaign["metrics"])
        if suggestions:
            insights["suggestions"] = analyzer.generate_optimization_suggestions(
                campaign["goal"], campaign["channels"], campaign["metrics"]
            )

        click.echo(json.dumps(insights, indent=2))

    except Exception as e:
        _fail("Error analyzing campaign", e)


@main.command()
@click.argument('name', type=str)
@click.option('--tone', required=True, type=str, help='Brand voice used for generated content')
@click.option('--values', type=str, default="", help='Brand values')
@click.pass_context
def brand(ctx, name: str, tone: str, values: str = ""):
    """
    Create a brand kit and make it active.

    NAME: Brand kit name
    """
    try:
        brand_kit = _build_store(ctx).create_brand_kit(ctx.obj["user_id"], name, tone, values=values)
        click.echo(f"Active brand kit: {brand_kit['name']} (tone: {brand_kit['tone']})")

    except Exception as e:
        _fail("Error creating brand kit", e)


if __name__ == '__main__':
    main()

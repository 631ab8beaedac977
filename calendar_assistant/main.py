"""Main entry point for the Slack calendar assistant."""

import asyncio
import logging
import sys

from .agent.chat_handler import ChatHandler
from .agent.turn_loop import AgentTurnLoop
from .config.config_loader import load_config
from .config.profiles import ProfileDirectory
from .context.conversation_store import ConversationStore
from .digest.scheduler import DailyDigestScheduler
from .digest.weather import WeatherClient
from .gcal.auth import build_credentials
from .gcal.client import GoogleCalendarGateway
from .llm.anthropic_llm import AnthropicLLM
from .llm.ollama_llm import OllamaLLM
from .llm.openai_llm import OpenAILLM
from .slack.client import SlackNotifier
from .slack.event_extractor import EventExtractor
from .tools.dispatcher import ToolDispatcher
from .tools.registry import ToolRegistry
from .utils.logging import parse_verbosity, setup_logging
from .web.server import SlackEventServer

logger = logging.getLogger(__name__)


def create_llm(config):
    """
    Create LLM instance based on configuration.

    Args:
        config: Application configuration

    Returns:
        BaseLLM instance
    """
    provider = config.llm.provider.lower()

    if provider == "anthropic":
        if not config.llm.anthropic:
            raise ValueError("Anthropic configuration is required")
        return AnthropicLLM(
            api_key=config.llm.anthropic.api_key,
            model=config.llm.anthropic.model,
            max_tokens=config.llm.anthropic.max_tokens,
            temperature=config.llm.anthropic.temperature,
        )

    elif provider == "openai":
        if not config.llm.openai:
            raise ValueError("OpenAI configuration is required")
        return OpenAILLM(
            api_key=config.llm.openai.api_key,
            model=config.llm.openai.model,
            temperature=config.llm.openai.temperature,
            max_tokens=config.llm.openai.max_tokens,
            organization_id=config.llm.openai.organization_id,
        )

    elif provider == "ollama":
        if not config.llm.ollama:
            raise ValueError("Ollama configuration is required")
        return OllamaLLM(
            model=config.llm.ollama.model,
            base_url=config.llm.ollama.base_url,
            temperature=config.llm.ollama.temperature,
            max_tokens=config.llm.ollama.max_tokens,
            context_window=config.llm.ollama.context_window,
        )

    else:
        raise ValueError(f"Unknown LLM provider: {provider}")


async def main(config_path: str = "config.yaml"):
    """Load configuration, wire components and serve until interrupted."""
    logger.info("=" * 60)
    logger.info("Calendar Assistant - Starting")
    logger.info("=" * 60)

    logger.info(f"[1/6] Loading configuration from: {config_path}")
    try:
        config = load_config(config_path)
        logger.info("✓ Configuration loaded successfully")
    except Exception as e:
        logger.error(f"✗ Failed to load configuration: {e}")
        sys.exit(1)

    profiles = ProfileDirectory(config)
    logger.info(f"  Users: {len(config.users)} configured, {len(config.slack.allowed_user_ids)} allowed")

    logger.info("[2/6] Initializing LLM")
    logger.info(f"  Provider: {config.llm.provider}")
    llm = create_llm(config)
    logger.info(f"✓ LLM initialized: {llm.get_model_name()}")

    logger.info("  Validating LLM connection...")
    try:
        await llm.validate()
    except Exception as e:
        logger.error(f"✗ LLM validation failed: {e}")
        if config.llm.provider.lower() == "ollama":
            logger.error(f"  Check that Ollama is running at {config.llm.ollama.base_url}")
        else:
            logger.error(f"  Check the {config.llm.provider} api_key and model in the config")
        sys.exit(1)
    logger.info("✓ LLM connection validated")

    logger.info("[3/6] Initializing Google Calendar")
    try:
        credentials = build_credentials(config.google_calendar)
        gateway = GoogleCalendarGateway(
            credentials=credentials,
            default_timezone=config.agent.default_timezone,
        )
        await gateway.validate()
    except Exception as e:
        logger.error(f"✗ Google Calendar credentials invalid: {e}")
        logger.error("  Run: python -m calendar_assistant.gcal.token_cli client_secret.json")
        sys.exit(1)
    logger.info("✓ Calendar gateway ready")

    logger.info("[4/6] Initializing Slack client")
    notifier = SlackNotifier(bot_token=config.slack.bot_token)
    extractor = EventExtractor(config.slack.allowed_user_ids)
    logger.info("✓ Slack client ready")

    logger.info("[5/6] Initializing agent")
    store = ConversationStore(
        ttl_seconds=config.conversation.ttl_minutes * 60,
        max_turns=config.conversation.max_turns,
        sweep_interval_seconds=config.conversation.sweep_interval_minutes * 60,
    )
    store.start()

    registry = ToolRegistry()
    registry.initialize_tools(gateway)
    registered_tools = registry.get_all_tools()
    logger.info(f"  Registered tools ({len(registered_tools)}):")
    for tool in registered_tools:
        logger.info(f"    - {tool.get_name()}")

    turn_loop = AgentTurnLoop(
        llm=llm,
        registry=registry,
        dispatcher=ToolDispatcher(registry),
        max_rounds=config.agent.max_rounds,
    )
    chat_handler = ChatHandler(
        profiles=profiles,
        store=store,
        turn_loop=turn_loop,
        notifier=notifier,
        assistant_name=config.agent.assistant_name,
    )
    logger.info(f"✓ Agent ready: {config.agent.assistant_name}")

    logger.info("[6/6] Initializing daily summary")
    weather = WeatherClient(
        api_key=config.weather.api_key,
        base_url=config.weather.base_url,
        timeout=config.weather.timeout_seconds,
    )
    digest = DailyDigestScheduler(
        profiles=profiles,
        gateway=gateway,
        notifier=notifier,
        weather=weather,
        cron=config.digest.cron,
        timezone_name=config.digest.timezone,
        enabled=config.digest.enabled,
    )
    digest.start()

    server = SlackEventServer(
        signing_secret=config.slack.signing_secret,
        extractor=extractor,
        chat_handler=chat_handler,
        digest=digest,
        host=config.server.host,
        port=config.server.port,
    )

    logger.info("=" * 60)
    logger.info("✓ SYSTEM READY - Listening for Slack events")
    logger.info("=" * 60)
    logger.info(f"  URL: {server.get_url()}/slack/events")
    logger.info(f"  LLM: {llm.get_model_name()}")
    logger.info("")
    logger.info("Press Ctrl+C to stop")
    logger.info("=" * 60)

    try:
        await server.start()
    finally:
        logger.info("Shutdown initiated")
        digest.shutdown()
        await store.stop()
        await weather.close()
        logger.info("✓ Calendar Assistant shutdown complete")


def run():
    """Console script entry point: calendar-assistant [config.yaml] [-v|-vv]."""
    verbosity = parse_verbosity(sys.argv)
    setup_logging(verbosity=verbosity)

    args = [arg for arg in sys.argv[1:] if arg not in ["-v", "-vv", "-vvv"]]
    config_path = args[0] if args else "config.yaml"
    try:
        asyncio.run(main(config_path))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    run()

"""
AI Service Module

This module handles AI operations using Google's Gemini API.
It provides the raw generation call used by the mention search, plus the
auxiliary assistant features: strategic insight, reply drafting and
action plans.
"""

from typing import Optional, List, Any

from google import genai
from google.genai import types

from config import settings
from data.models import Mention, ResponsePolicy
from utils.exceptions import AIServiceError, RateLimitedError, ProviderError
from utils.logger import get_logger

logger = get_logger(__name__)


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Decide whether a provider exception means quota exhaustion.

    Args:
        error: Exception raised by the provider client

    Returns:
        bool: True for HTTP 429, RESOURCE_EXHAUSTED or quota messages
    """
    for attr in ('code', 'status_code', 'status'):
        if getattr(error, attr, None) == settings.RATE_LIMIT_STATUS_CODE:
            return True

    message = f"{error} {getattr(error, 'status', '') or ''}".lower()
    return any(marker in message for marker in settings.RATE_LIMIT_MARKERS)


class AIService:
    """Service for AI operations with Google's Gemini API."""

    def __init__(self, client: Optional[Any] = None, model_name: Optional[str] = None):
        """
        Initialize the AI service with the Gemini API.

        Args:
            client: Pre-built genai.Client (tests inject a mock here)
            model_name: Model to use; when omitted one is picked from
                settings.DEFAULT_AI_MODELS based on availability
        """
        if client is None:
            api_key = settings.GOOGLE_AI_API_KEY
            if not api_key:
                raise ValueError("Missing required GOOGLE_AI_API_KEY")

            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=settings.FETCH_TIMEOUT_SECONDS * 1000),
            )

        self.client = client
        self.model_name = model_name or self._select_model()
        logger.info(f"Selected AI model: {self.model_name}")

    def _select_model(self) -> str:
        """Pick the first preferred model the key can see."""
        try:
            available_models = [m.name for m in self.client.models.list()]
        except Exception as e:
            logger.error(f"Error listing Gemini models: {e}")
            raise

        for preferred in settings.DEFAULT_AI_MODELS:
            for available in available_models:
                if available == preferred or available.endswith(f"/{preferred}"):
                    return available

        if available_models:
            # If none of our preferred models are available, just use the first one
            return available_models[0]

        raise ValueError("No Gemini models available")

    async def generate_text(self, prompt: str, use_search: bool = False) -> str:
        """
        Run one generation request.

        Args:
            prompt: Full prompt text
            use_search: Enable the Google Search grounding tool

        Returns:
            str: Response text (may be empty)

        Raises:
            RateLimitedError: The provider reported quota exhaustion
            ProviderError: Any other failure
        """
        config = None
        if use_search:
            config = types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())]
            )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            if is_rate_limit_error(e):
                logger.warning(f"Gemini rate limit hit: {e}")
                raise RateLimitedError(str(e)) from e
            logger.error(f"Gemini API error: {e}")
            raise ProviderError(str(e)) from e

        return (getattr(response, 'text', None) or "").strip()

    async def fetch_strategic_insight(self, brand: str, mentions: List[Mention]) -> str:
        """
        Produce a short strategic insight about recent mentions.

        Args:
            brand: Brand being monitored
            mentions: Current feed, newest first

        Returns:
            str: The insight, or a canned message when there is no data or
            the provider fails. Never raises.
        """
        if not mentions:
            return settings.INSIGHT_NO_DATA_MESSAGE.format(brand=brand)

        recent = mentions[:settings.INSIGHT_CONTEXT_LIMIT]
        context = "\n".join(f"[{m.platform.upper()}] {m.content}" for m in recent)

        prompt = f"""You are a senior brand strategist. Analyze these real search results for "{brand}":
{context}

Provide a single, high-impact strategic insight (max {settings.INSIGHT_WORD_LIMIT} words).
Highlight if there is activity on BlueSky, Reddit, or LinkedIn specifically.
Use bolding (**) for key phrases."""

        try:
            text = await self.generate_text(prompt)
        except AIServiceError as e:
            logger.warning(f"Insight generation failed: {e}")
            return settings.INSIGHT_UNAVAILABLE_MESSAGE

        return text or settings.INSIGHT_EMPTY_MESSAGE

    async def generate_smart_reply(self, mention: Mention, policies: List[ResponsePolicy]) -> str:
        """
        Draft a reply to a mention following the active tone and rule SOPs.

        Template SOPs are left out of the prompt; they are applied locally
        through SOPService.apply_template.

        Args:
            mention: The mention to reply to
            policies: All response policies (inactive ones are ignored)

        Returns:
            str: Reply text, or a canned message on failure. Never raises.
        """
        guidelines = [p for p in policies if p.is_active and p.type != 'template']

        sop_context = "\n---\n".join(
            f"TYPE: {p.type.upper()}\nTITLE: {p.title}\nCONTENT: {p.content}"
            for p in guidelines
        )

        prompt = f"""You are a social media manager for a brand.
Draft a reply to the following user post.

USER POST:
Platform: {mention.platform}
Author: {mention.author}
Content: "{mention.content}"

YOUR GUIDELINES (SOPs):
{sop_context or "No specific SOPs provided. Be professional and helpful."}

INSTRUCTIONS:
- Draft a response that strictly follows the SOPs.
- {self._platform_instruction(mention.platform)}
- Output ONLY the reply text."""

        try:
            text = await self.generate_text(prompt)
        except AIServiceError as e:
            logger.error(f"Reply generation failed: {e}")
            return settings.REPLY_UNAVAILABLE_MESSAGE

        return text or settings.REPLY_EMPTY_MESSAGE

    @staticmethod
    def _platform_instruction(platform: str) -> str:
        if platform in settings.SHORT_FORM_PLATFORMS:
            return f"Keep it under {settings.REPLY_CHARACTER_LIMIT} characters."
        if platform == 'linkedin':
            return "Keep it professional and constructive."
        if platform == 'reddit':
            return "You can be slightly more detailed but keep it conversational."
        return "Keep it concise and helpful."

    async def generate_action_plan(self, brand: str, mentions: List[Mention]) -> str:
        """
        Generate a short markdown action plan from recent chatter.

        Args:
            brand: Brand being monitored
            mentions: Current feed, newest first

        Returns:
            str: Markdown list, or a canned message. Never raises.
        """
        if not mentions:
            return settings.PLAN_NO_DATA_MESSAGE

        recent = mentions[:settings.INSIGHT_CONTEXT_LIMIT]
        context = "\n".join(f"- {m.content} ({m.display_sentiment})" for m in recent)

        prompt = f"""You are a Crisis Manager and Brand Strategist.
Based on the following recent social media chatter about "{brand}", generate a {settings.ACTION_PLAN_STEPS}-step IMMEDIATE ACTION PLAN.

CHATTER:
{context}

INSTRUCTIONS:
- Create a Markdown list.
- Each item should be a concrete tactical step (e.g., "Draft an apology regarding X", "Amplify positive review from Y").
- Prioritize actions based on sentiment (Negative = High Priority).
- Keep it concise.
- Do not include introductory text, just the list."""

        try:
            text = await self.generate_text(prompt)
        except AIServiceError as e:
            logger.error(f"Action plan generation failed: {e}")
            return settings.PLAN_UNAVAILABLE_MESSAGE

        return text or settings.PLAN_EMPTY_MESSAGE

"""Reply generation providers behind a single interface.

Supports:
- A deterministic template generator (default, no credentials needed)
- Google Gemini
- OpenAI
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from google import genai
from google.genai import types as genai_types
from openai import AsyncOpenAI

from smartreplies.core.config import get_settings
from smartreplies.core.exceptions import GenerationProviderError
from smartreplies.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TONE = "neutral"
DEFAULT_LENGTH = "medium"

TONE_OPENERS = {
    "neutral": "Thanks for your message",
    "professional": "Thank you for reaching out",
    "casual": "Hey, thanks for the note",
    "funny": "Ha, you made my day",
    "empathetic": "I really appreciate you sharing this",
}

LENGTH_CLOSERS = {
    "short": "",
    "medium": " I'll get back to you soon.",
    "long": (
        " I'll take a closer look and follow up with more details soon."
        " Let me know if there is anything else I can help with in the meantime."
    ),
}

LENGTH_TOKENS = {"short": 60, "medium": 150, "long": 300}

EXCERPT_LIMIT = 80


@dataclass
class ReplyRequest:
    """Normalized input for a generation call."""

    message: str
    tone: str = DEFAULT_TONE
    length: str = DEFAULT_LENGTH
    site: str = ""

    def __post_init__(self) -> None:
        if self.tone not in TONE_OPENERS:
            self.tone = DEFAULT_TONE
        if self.length not in LENGTH_CLOSERS:
            self.length = DEFAULT_LENGTH


def _excerpt(message: str) -> str:
    text = " ".join(message.split())
    if len(text) > EXCERPT_LIMIT:
        return text[: EXCERPT_LIMIT - 3].rstrip() + "..."
    return text


def build_system_prompt(request: ReplyRequest) -> str:
    """Build the instruction sent to LLM providers."""
    where = f" on {request.site}" if request.site else ""
    return (
        f"You write reply suggestions for messages received{where}. "
        f"Write a single {request.length} reply in a {request.tone} tone. "
        "Return only the reply text, without quotes or commentary."
    )


class ReplyGenerator(ABC):
    """Abstract base class for reply generators."""

    provider_name: str = "base"

    @abstractmethod
    async def generate(self, request: ReplyRequest) -> str:
        """Produce a reply suggestion for the request."""
        ...


class TemplateReplyGenerator(ReplyGenerator):
    """Placeholder generator that quotes the incoming message."""

    provider_name = "template"

    async def generate(self, request: ReplyRequest) -> str:
        opener = TONE_OPENERS[request.tone]
        closer = LENGTH_CLOSERS[request.length]
        return f'{opener} about "{_excerpt(request.message)}".{closer}'


class OpenAIReplyGenerator(ReplyGenerator):
    """Generator backed by OpenAI chat completions."""

    provider_name = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        settings = get_settings()
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_model
        self.client = AsyncOpenAI(api_key=self.api_key)

    async def generate(self, request: ReplyRequest) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(request)},
                    {"role": "user", "content": request.message},
                ],
                temperature=0.7,
                max_tokens=LENGTH_TOKENS[request.length],
            )
        except Exception as e:
            logger.error("OpenAI generation error", error=str(e), model=self.model)
            raise GenerationProviderError(self.provider_name, str(e))

        content = completion.choices[0].message.content if completion.choices else None
        if not content or not content.strip():
            raise GenerationProviderError(self.provider_name, "empty completion")
        return content.strip()


class GeminiReplyGenerator(ReplyGenerator):
    """Generator backed by Google Gemini."""

    provider_name = "gemini"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.client = genai.Client(api_key=self.api_key)

    async def generate(self, request: ReplyRequest) -> str:
        config = genai_types.GenerateContentConfig(
            system_instruction=build_system_prompt(request),
            temperature=0.7,
            max_output_tokens=LENGTH_TOKENS[request.length],
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=request.message,
                config=config,
            )
        except Exception as e:
            logger.error("Gemini generation error", error=str(e), model=self.model)
            raise GenerationProviderError(self.provider_name, str(e))

        if not response.text or not response.text.strip():
            raise GenerationProviderError(self.provider_name, "empty completion")
        return response.text.strip()


class GenerationService:
    """Selects the configured generator and produces replies."""

    def __init__(self, generator: ReplyGenerator | None = None) -> None:
        self._generator = generator or self._build_generator()
        logger.info("Reply generator selected", provider=self._generator.provider_name)

    @staticmethod
    def _build_generator() -> ReplyGenerator:
        settings = get_settings()
        provider = settings.generation_provider

        if provider == "openai":
            if settings.openai_api_key:
                return OpenAIReplyGenerator()
            logger.warning("OpenAI API key not configured, using template replies")
        elif provider == "gemini":
            if settings.gemini_api_key:
                return GeminiReplyGenerator()
            logger.warning("Gemini API key not configured, using template replies")

        return TemplateReplyGenerator()

    @property
    def provider_name(self) -> str:
        return self._generator.provider_name

    async def generate_reply(
        self,
        message: str,
        tone: str | None = None,
        length: str | None = None,
        site: str | None = None,
    ) -> str:
        request = ReplyRequest(
            message=message,
            tone=tone or DEFAULT_TONE,
            length=length or DEFAULT_LENGTH,
            site=site or "",
        )
        reply = await self._generator.generate(request)
        logger.debug(
            "Reply generated",
            provider=self._generator.provider_name,
            tone=request.tone,
            length=request.length,
            site=request.site,
        )
        return reply


# Global generation service instance
_generation_service: GenerationService | None = None


def get_generation_service() -> GenerationService:
    """Get or create the global generation service instance."""
    global _generation_service

    if _generation_service is None:
        _generation_service = GenerationService()

    return _generation_service

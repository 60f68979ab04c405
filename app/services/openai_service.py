"""OpenAI proxy for improving or generating prompts.

Each call uses the caller's own API key. The key is passed in, used for one
request and dropped; it is never logged or stored here.
"""
import logging
from typing import Optional
import openai
from openai import OpenAI

from app.core.config import settings
from app.core.exceptions import ValidationError, InvalidCredential, ServiceError

logger = logging.getLogger(__name__)

MODES = ("improve", "generate")

SYSTEM_PROMPT = (
    "You are an expert prompt engineer specializing in creating high-quality, detailed, "
    "and comprehensive prompts for AI models. Your task is to craft thorough, well-structured, "
    "and production-ready prompts that are clear, specific, and actionable. Include relevant "
    "context, constraints, and examples when appropriate."
)


class PromptGenerator:
    """Service for generating prompt text with the OpenAI API."""

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client_factory=OpenAI,
    ):
        self.model = model or settings.OPENAI_MODEL
        self.base_url = base_url if base_url is not None else settings.OPENAI_BASE_URL
        self.timeout = timeout if timeout is not None else settings.OPENAI_TIMEOUT_SECONDS
        self.temperature = temperature if temperature is not None else settings.OPENAI_TEMPERATURE
        self.max_tokens = max_tokens if max_tokens is not None else settings.OPENAI_MAX_TOKENS
        self.client_factory = client_factory

    def generate(
        self,
        api_key: str,
        mode: str,
        category: str,
        existing_text: Optional[str] = None,
        idea_text: Optional[str] = None,
    ) -> str:
        """
        Improve an existing prompt or generate one from an idea.

        Args:
            api_key: Decoded OpenAI API key of the caller
            mode: "improve" (needs existing_text) or "generate" (needs idea_text)
            category: Prompt category used to steer the wording

        Returns:
            The generated prompt text, stripped

        Raises:
            ValidationError: Unknown mode or missing input text
            InvalidCredential: OpenAI rejected the API key
            ServiceError: Any other OpenAI failure or an empty completion
        """
        user_prompt = self._build_user_prompt(mode, category, existing_text, idea_text)

        client = self.client_factory(api_key=api_key, base_url=self.base_url, timeout=self.timeout)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.AuthenticationError:
            logger.warning("OpenAI rejected the configured API key")
            raise InvalidCredential("Invalid OpenAI API key. Please check your API key in Settings.")
        except openai.OpenAIError as e:
            logger.exception("OpenAI API error")
            raise ServiceError(getattr(e, "message", None) or "Failed to call OpenAI API")

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if not content or not content.strip():
            raise ServiceError("No response from OpenAI API")
        return content.strip()

    def _build_user_prompt(
        self,
        mode: str,
        category: str,
        existing_text: Optional[str],
        idea_text: Optional[str],
    ) -> str:
        if mode == "improve":
            if not existing_text or not existing_text.strip():
                raise ValidationError("Existing text is required for improve mode")
            return (
                f"Please improve and enhance this {category} prompt to make it more effective, "
                f"detailed, and comprehensive:\n\n{existing_text}\n\n"
                "Provide a thoroughly improved version with better structure, clarity, and detail. "
                "Include any relevant context or examples that would make the prompt more effective. "
                "Provide only the improved prompt text, without any explanation or preamble."
            )
        if mode == "generate":
            if not idea_text or not idea_text.strip():
                raise ValidationError("Idea text is required for generate mode")
            return (
                f"Create a comprehensive, detailed, and well-structured {category} prompt based on "
                f"this idea:\n\n{idea_text}\n\n"
                "Generate a thorough prompt that includes clear instructions, relevant context, "
                "specific requirements, and examples where applicable. The prompt should be "
                "production-ready and highly effective for AI models. Provide only the generated "
                "prompt text, without any explanation or preamble."
            )
        raise ValidationError(f"Unsupported mode: {mode}")

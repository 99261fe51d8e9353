"""Google Gemini embedding service."""

import logging

from google import genai

from notionrag.constants import get_embedding_model

logger = logging.getLogger(__name__)


class GeminiService:
    """Embeds text with the Gemini API.

    The SDK reads its key from GEMINI_API_KEY.
    """

    def __init__(self) -> None:
        logger.info("🤖 Initializing GeminiService")
        self.client = genai.Client()

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        embedding_model = model or get_embedding_model("gemini")
        try:
            response = self.client.models.embed_content(model=embedding_model, contents=texts)
        except Exception as e:
            logger.error(f"❌ Gemini embedding error: {e}")
            raise

        return [list(item.values) for item in response.embeddings]

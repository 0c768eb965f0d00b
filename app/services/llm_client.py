"""
LLM API Client

The gateway model is reached through an OpenAI-compatible API, so we use the
openai library. The default base URL is Gemini's OpenAI-compatible endpoint;
any compatible provider works by changing LLM_BASE_URL / LLM_MODEL.

Used for:
- Interview question generation
- Interview transcript scoring
- Resume review

Callers decide what to do on failure; this client only raises.
"""
import json
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from app.core.config import get_settings
from app.core.exceptions import GatewayConfigError, GatewayError

logger = logging.getLogger(__name__)


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} span in text, or None.

    Braces inside JSON string literals are ignored, so prose like
    'Here you go: {"a": "}"} hope it helps' yields '{"a": "}"}'.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def extract_json(text: str) -> dict:
    """
    Extract a JSON object from an API response.

    Order: strict parse, then strip markdown code fences, then the first
    balanced {...} span. Raises ValueError if no object can be decoded.
    """
    if text is None:
        raise ValueError("Empty response")

    text = text.strip()
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    unfenced = text
    if unfenced.startswith("```json"):
        unfenced = unfenced[7:]
    elif unfenced.startswith("```"):
        unfenced = unfenced[3:]
    if unfenced.endswith("```"):
        unfenced = unfenced[:-3]
    try:
        data = json.loads(unfenced.strip())
        if isinstance(data, dict):
            return data
    except json.JSONDecodeError:
        pass

    span = find_json_object(text)
    if span is None:
        raise ValueError("No JSON object found in response")
    data = json.loads(span)
    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


class LLMClient:
    """
    Wrapper for the generative-language API.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 model: Optional[str] = None):
        settings = get_settings()
        self.api_key = settings.llm_api_key if api_key is None else api_key
        self.base_url = base_url or settings.llm_base_url
        self.model = model or settings.llm_model
        self._client: Optional[OpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> OpenAI:
        if not self.configured:
            raise GatewayConfigError("LLM_API_KEY not configured")
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _call_api(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        json_mode: bool = False
    ) -> str:
        """
        Call the chat completions API and return the raw text response.
        Any transport or API failure is raised as GatewayError.
        """
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                max_tokens=max_tokens,
                temperature=temperature,
                **kwargs
            )
        except OpenAIError as e:
            logger.warning("LLM call failed: %s", e)
            raise GatewayError(f"LLM call failed: {e}") from e

        if not response.choices or response.choices[0].message.content is None:
            raise GatewayError("LLM returned an empty response")
        return response.choices[0].message.content

    def test_connection(self) -> bool:
        """Test if the LLM API is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10,
                temperature=0
            )
            return "OK" in response.upper()
        except GatewayError as e:
            logger.warning("LLM connection failed: %s", e.message)
            return False


# Singleton instance
_llm_client: LLMClient = None


def get_llm_client() -> LLMClient:
    """Get or create the LLM client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client

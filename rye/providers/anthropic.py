import os

from rye.exceptions import ProviderError, StreamError
from rye.llm import litellm

from .base import Provider

DEFAULT_MODEL = "anthropic/claude-sonnet-4-20250514"
MODEL_ENV = "ANTHROPIC_MODEL"

DEFAULT_MAX_TOKENS = 4096
TITLE_MAX_TOKENS = 100
TITLE_MAX_CHARS = 50

request_timeout = 600

SYSTEM_PROMPT = (
    "You are a helpful assistant. Always respond in markdown format. When referring to"
    " information you've previously provided in this conversation, reference the relevant"
    " sections instead of repeating the information. Be concise and avoid unnecessary"
    " repetition."
)

TITLE_PROMPT = (
    "Generate a concise, descriptive title (max {max_chars} characters) for a conversation"
    ' that starts with this user message: "{message}"\n\n'
    "Respond with ONLY the title, no additional text or formatting."
)


def clean_title(text):
    """First non-empty line of a model reply, without quotes or heading marks."""
    if not text:
        return ""
    for line in text.splitlines():
        line = line.strip().lstrip("#").strip().strip("\"'`").strip()
        if line:
            return line
    return ""


def chunk_text(chunk):
    try:
        return chunk.choices[0].delta.content
    except (AttributeError, IndexError, TypeError):
        return None


class AnthropicProvider(Provider):
    NAME = "anthropic"

    def __init__(self, model=None, max_tokens=DEFAULT_MAX_TOKENS, timeout=None):
        self.model = model or os.environ.get(MODEL_ENV) or DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.timeout = timeout or request_timeout

    def __str__(self):
        return self.model

    def build_messages(self, turns):
        messages = [dict(role="system", content=SYSTEM_PROMPT)]
        messages.extend(turn.to_dict() for turn in turns)
        return messages

    async def stream_response(self, turns):
        kwargs = dict(
            model=self.model,
            messages=self.build_messages(turns),
            stream=True,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
        )
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as err:
            raise StreamError(f"LiteLLM API Error: {err}") from err

        try:
            async for chunk in response:
                text = chunk_text(chunk)
                if text:
                    yield text
        except Exception as err:
            raise StreamError(str(err) or type(err).__name__) from err

    async def summarize_title(self, text):
        prompt = TITLE_PROMPT.format(max_chars=TITLE_MAX_CHARS, message=text)
        try:
            response = await litellm.acompletion(
                model=self.model,
                messages=[dict(role="user", content=prompt)],
                stream=False,
                max_tokens=TITLE_MAX_TOKENS,
                timeout=self.timeout,
            )
        except Exception as err:
            raise ProviderError(f"Failed to generate title: {err}") from err

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None

        title = clean_title(content)
        if not title:
            raise ProviderError("No title generated")
        return title

    def check_environment(self):
        try:
            res = litellm.validate_environment(self.model)
        except Exception as err:
            return [f"Unable to check environment for {self.model}: {err}"]

        missing = res.get("missing_keys") or []
        return [f"Missing environment variable: {key}" for key in missing]

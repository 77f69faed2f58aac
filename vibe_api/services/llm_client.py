"""
LLM access via LiteLLM.

LiteLLMChat is the chat-completion capability behind the vibe judge and the
vibe profile writer. Model strings follow LiteLLM conventions
("gpt-4o-mini", "gemini/gemini-2.5-flash", ...).
"""

import logging
from typing import Optional

import litellm
from litellm import acompletion

# Suppress LiteLLM's verbose logging
litellm.suppress_debug_info = True

# Drop unsupported params for models with restrictions
litellm.drop_params = True

logger = logging.getLogger(__name__)

DEFAULT_JUDGE_MODEL = "gpt-4o-mini"


class LiteLLMChat:
    """System + user prompt in, message content out."""

    def __init__(
        self,
        model: str = DEFAULT_JUDGE_MODEL,
        api_key: Optional[str] = None,
        max_tokens: int = 1500,
        timeout: float = 60.0,
    ):
        self.model = model
        self.api_key = api_key
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        response = await acompletion(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
            api_key=self.api_key,
        )
        if not response.choices:
            raise ValueError("no choices in response")
        return response.choices[0].message.content or ""


# ============================================================================
# Vibe profiles
# ============================================================================

PROFILE_SYSTEM_PROMPT = """You are a film/TV critic who specializes in describing the AESTHETIC and FEELING of media,
not the plot. You focus on style, pacing, visual language, emotional texture, and "vibe."

Your descriptions should be evocative and specific, using terms like:
- Visual style: "neon-noir", "pastel dreamscape", "gritty realism", "hyperkinetic animation"
- Pacing: "meditative slowburn", "frenetic energy", "deliberate tension"
- Emotional texture: "existential dread", "cozy melancholy", "manic joy", "contemplative silence"
- Atmosphere: "rain-soaked streets", "sun-drenched nostalgia", "clinical coldness"

DO NOT summarize the plot. Focus ONLY on how it FEELS to watch.
Keep the response to 2-3 sentences maximum."""


def build_profile_prompt(title: str, media_type: str, year: Optional[int], synopsis: str) -> str:
    year_text = str(year) if year else "year unknown"
    return (
        f'Describe the aesthetic, pacing, and emotional "vibe" of {title} ({year_text}) [{media_type}].\n'
        f"{synopsis}\n\n"
        "Remember: Focus on STYLE, not story. How does it FEEL to watch?"
    )


class VibeProfileWriter:
    """Writes vibe profiles with a chat model at a higher temperature than judging."""

    def __init__(self, chat: LiteLLMChat, temperature: float = 0.7):
        self.chat = chat
        self.temperature = temperature

    async def write_profile(self, title: str, media_type: str, year: Optional[int], synopsis: str) -> str:
        logger.info("[profile] GENERATE title=%r model=%s", title, self.chat.model)
        content = await self.chat.complete(
            PROFILE_SYSTEM_PROMPT,
            build_profile_prompt(title, media_type, year, synopsis),
            temperature=self.temperature,
        )
        return content.strip()

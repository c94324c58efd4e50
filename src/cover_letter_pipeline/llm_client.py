"""LLM completion clients for OpenAI, Anthropic and Groq."""

import os
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import openai
from anthropic import Anthropic
from dotenv import load_dotenv
from groq import Groq

from .config import DEFAULT_MODEL
from .logging_config import get_logger

# Load environment variables
load_dotenv()

logger = get_logger("llm_client")

# Groq model (fast and free)
GROQ_MODEL = "meta-llama/llama-4-maverick-17b-128e-instruct"

# Available models
AVAILABLE_MODELS = {
    "gpt-4o": "gpt-4o",
    "opus": "claude-3-opus-20240229",
    "opus-4": "claude-3-opus-20240229",
    "sonnet": "claude-3-5-sonnet-20241022",
    "llama": GROQ_MODEL,
}

# Request limits applied before every call
MAX_HISTORY_ITEMS = 8
MAX_TEXT_CHARS = 16000

DEFAULT_MAX_TOKENS = 2500
DEFAULT_TEMPERATURE = 0.3

# USD per million tokens (input, output)
MODEL_PRICING = {
    "opus": (15.00, 75.00),
    "gpt-4o": (2.50, 10.00),
    "sonnet": (3.00, 15.00),
    "llama": (0.0, 0.0),
}


@dataclass(frozen=True)
class HistoryItem:
    """One turn of the conversation sent with each prompt."""
    role: str  # "user" or "model"
    text: str


def truncate_history(
    history: Sequence[HistoryItem],
    message: str,
) -> Tuple[List[HistoryItem], str]:
    """Keep the last 8 history items and cap every text at 16,000 characters."""
    recent = list(history or [])[-MAX_HISTORY_ITEMS:]
    safe_history = [HistoryItem(role=item.role, text=(item.text or "")[:MAX_TEXT_CHARS]) for item in recent]
    return safe_history, (message or "")[:MAX_TEXT_CHARS]


def to_chat_messages(history: Sequence[HistoryItem], message: str) -> List[Dict[str, str]]:
    """Convert history plus the new prompt into chat-completion messages."""
    messages = [
        {"role": "assistant" if item.role == "model" else "user", "content": item.text}
        for item in history
    ]
    messages.append({"role": "user", "content": message})
    return messages


def estimate_cost(model: str, input_tokens: int, output_tokens: int) -> Tuple[float, float]:
    """Estimate the input and output cost of one call in USD."""
    for key, (input_price, output_price) in MODEL_PRICING.items():
        if key in model:
            return (
                (input_tokens / 1_000_000) * input_price,
                (output_tokens / 1_000_000) * output_price,
            )
    logger.warning("Unknown model '%s' - cost tracking may be inaccurate", model)
    return 0.0, 0.0


class CompletionClient:
    """Base completion client.

    Subclasses implement `_send`, which receives the truncated chat messages
    and returns the completion text plus token usage. Cost tracking is
    guarded by a lock so one client can serve concurrent requests.
    """

    def __init__(
        self,
        model_name: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature

        # Cost tracking
        self.total_cost = 0.0
        self.api_calls = []
        self._cost_lock = threading.Lock()

    def complete(self, history: Sequence[HistoryItem], message: str) -> str:
        """Send the conversation history plus a new prompt and return the reply.

        Args:
            history: Earlier turns, oldest first
            message: New user prompt

        Returns:
            Completion text (may be empty)
        """
        safe_history, safe_message = truncate_history(history, message)
        content, input_tokens, output_tokens = self._send(to_chat_messages(safe_history, safe_message))
        self._track_api_cost(self.model_name, input_tokens, output_tokens)
        return content or ""

    def _send(self, messages: List[Dict[str, str]]) -> Tuple[str, int, int]:
        raise NotImplementedError

    def _track_api_cost(self, model: str, input_tokens: int, output_tokens: int) -> float:
        """Track API costs for transparency.

        Args:
            model: Model name
            input_tokens: Number of input tokens
            output_tokens: Number of output tokens

        Returns:
            Cost of the call in USD
        """
        input_cost, output_cost = estimate_cost(model, input_tokens, output_tokens)
        total_cost = input_cost + output_cost

        call_info = {
            "model": model,
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "input_cost": input_cost,
            "output_cost": output_cost,
            "cost": total_cost
        }
        with self._cost_lock:
            self.total_cost += total_cost
            self.api_calls.append(call_info)

        return total_cost

    def get_cost_summary(self) -> dict:
        """Get summary of API costs.

        Returns:
            Dictionary with cost information
        """
        with self._cost_lock:
            return {
                "total_cost": self.total_cost,
                "total_calls": len(self.api_calls),
                "calls": list(self.api_calls)
            }


class OpenAICompletionClient(CompletionClient):
    """Completion client for OpenAI chat models."""

    def __init__(self, model_name: str = "gpt-4o", api_key: Optional[str] = None, **kwargs):
        super().__init__(model_name, **kwargs)
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY not found in environment variables")
        self.client = openai.Client(api_key=api_key)

    def _send(self, messages):
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )
        return (
            response.choices[0].message.content,
            response.usage.prompt_tokens,
            response.usage.completion_tokens,
        )


class AnthropicCompletionClient(CompletionClient):
    """Completion client for Claude models."""

    def __init__(self, model_name: str = AVAILABLE_MODELS["sonnet"], api_key: Optional[str] = None, **kwargs):
        super().__init__(model_name, **kwargs)
        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY not found in environment variables")
        self.client = Anthropic(api_key=api_key)

    def _send(self, messages):
        response = self.client.messages.create(
            model=self.model_name,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=messages
        )
        text = "".join(getattr(block, "text", "") for block in response.content)
        return text, response.usage.input_tokens, response.usage.output_tokens


class GroqCompletionClient(CompletionClient):
    """Completion client for models served by Groq."""

    def __init__(self, model_name: str = GROQ_MODEL, api_key: Optional[str] = None, **kwargs):
        super().__init__(model_name, **kwargs)
        api_key = api_key or os.getenv("GROQ_API_KEY")
        if not api_key:
            raise ValueError("GROQ_API_KEY not found in environment variables")
        self.client = Groq(api_key=api_key)

    def _send(self, messages):
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )
        return (
            response.choices[0].message.content,
            response.usage.prompt_tokens,
            response.usage.completion_tokens,
        )


def resolve_model_name(model_name: Optional[str] = None) -> str:
    """Map a model alias (or full model id) to the model id, defaulting to GPT-4o."""
    model_selection = (model_name or os.getenv("LLM_MODEL", DEFAULT_MODEL)).strip()
    if model_selection.lower() in AVAILABLE_MODELS:
        return AVAILABLE_MODELS[model_selection.lower()]
    if model_selection in AVAILABLE_MODELS.values():
        return model_selection
    logger.warning("Unknown model '%s', falling back to %s", model_selection, DEFAULT_MODEL)
    return AVAILABLE_MODELS[DEFAULT_MODEL]


def create_completion_client(model_name: Optional[str] = None, **kwargs) -> CompletionClient:
    """Create the completion client for a model alias.

    Args:
        model_name: "gpt-4o" (default), "opus", "sonnet" or "llama".
                    Can also use environment variable LLM_MODEL.

    Returns:
        CompletionClient for the provider serving that model

    Raises:
        ValueError: If the provider's API key is not set
    """
    resolved = resolve_model_name(model_name)
    if "gpt" in resolved:
        client_class = OpenAICompletionClient
    elif "claude" in resolved:
        client_class = AnthropicCompletionClient
    else:
        client_class = GroqCompletionClient
    logger.info("Using %s for cover letter generation", resolved)
    return client_class(model_name=resolved, **kwargs)

# src/soil_dashboard/chat.py
from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional

from openai import OpenAI

from .config import Config
from .display import check_persona

logger = logging.getLogger(__name__)

ACK_MESSAGE = "I understand. I will respond according to these guidelines and incorporate the soil data you provided."

GENERATION_SETTINGS = {
    "child": {"max_tokens": 150, "temperature": 0.8},
    "elder": {"max_tokens": 300, "temperature": 0.7},
}

RATE_LIMIT_MESSAGES = {
    "child": "Whoa! You're asking so many questions! 🤯 Let me catch my breath for a minute!",
    "elder": "Rate limit exceeded. Please wait a moment before sending another message.",
}


class RateLimiter:
    """
    Sliding-window request counter. Owned by whoever constructs it; pass one
    instance to every assistant that should share the same budget.
    """

    def __init__(
        self,
        max_requests: int = Config.CHAT_RATE_LIMIT,
        window_seconds: float = Config.CHAT_RATE_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._history: Deque[float] = deque()

    def _expire(self, now: float) -> None:
        while self._history and self._history[0] < now - self.window_seconds:
            self._history.popleft()

    def allow(self) -> bool:
        """Records a request and returns True, or returns False if the window is full."""
        now = self.clock()
        self._expire(now)
        if len(self._history) >= self.max_requests:
            return False
        self._history.append(now)
        return True

    def remaining(self) -> int:
        self._expire(self.clock())
        return max(0, self.max_requests - len(self._history))


def soil_status_line(reading: Dict[str, float]) -> str:
    return (
        f"Current soil conditions: Moisture {reading['moisture']}%, pH {reading['ph']}, "
        f"Temperature {reading['temperature']}°C, Nutrients {reading['nutrients']}%"
    )


def build_system_prompt(persona: str, reading: Dict[str, float]) -> str:
    check_persona(persona)
    status = soil_status_line(reading)

    if persona == "child":
        return f"""You are Soily the Worm 🪱, a friendly and enthusiastic garden helper who talks to children aged 6-12.

Your personality:
- Use simple, fun language that kids can understand
- Be encouraging and positive
- Use emojis and exclamation points
- Explain things like you're talking to a curious friend
- Make gardening sound exciting and magical
- Use analogies kids can relate to (like comparing roots to straws)

{status}

Always relate your advice to their actual soil conditions when relevant. Keep responses short (2-3 sentences max) and age-appropriate. If they ask about something not related to gardening, gently redirect them back to garden topics in a fun way."""

    return f"""You are a professional Garden Assistant providing expert advice to adult gardeners and elderly users.

Your personality:
- Professional but friendly tone
- Provide detailed, accurate information
- Use proper gardening terminology
- Give practical, actionable advice
- Be patient and thorough in explanations
- Consider accessibility needs for elderly users

{status}

Always incorporate their actual soil data into your responses when relevant. Provide specific recommendations based on their current conditions. Keep responses informative but concise (3-4 sentences max)."""


def fallback_response(message: str, persona: str, reading: Dict[str, float]) -> str:
    """Canned answer used when the completion API is unavailable."""
    check_persona(persona)
    text = message.lower()
    moisture = reading["moisture"]
    ph = reading["ph"]

    if persona == "child":
        if "water" in text or "moisture" in text:
            if moisture < 50:
                tail = "Your plants are a bit thirsty! Let's give them some water - they'll be so happy! 💧"
            else:
                tail = "Your plants have plenty to drink! Great job keeping them happy! 😊"
            return f"Hi there! 🪱 Your soil moisture is {moisture}%! {tail}"

        if "ph" in text or "soil" in text:
            if 6.0 <= ph <= 7.0:
                tail = "Your soil is super happy! Perfect for growing amazing plants! 🌟"
            else:
                tail = "Your soil needs a little help to be happier. We can make it perfect together! 🌱"
            return f"Your soil happiness level is {ph}! 🧪 {tail}"

        return (
            "That's a great question! 🌟 I'm having trouble thinking right now, but I love talking "
            "about gardens! Ask me about watering, soil, or how to help your plants grow! 🌱"
        )

    if "moisture" in text or "water" in text:
        if moisture < 40:
            tail = "This is below optimal levels. I recommend immediate watering with 1-2 inches of water applied slowly."
        elif moisture < 60:
            tail = "This is within acceptable range. Monitor daily and water when the top inch feels dry."
        else:
            tail = "Excellent moisture levels. Your current watering schedule is working well."
        return f"Your current soil moisture is {moisture}%. {tail}"

    if "ph" in text:
        if ph < 6.0:
            tail = "This indicates acidic soil. Consider adding lime to raise pH to the optimal 6.0-7.0 range."
        elif ph > 7.5:
            tail = "This indicates alkaline soil. Add organic matter or sulfur to lower pH naturally."
        else:
            tail = "Excellent pH range for most plants. This supports optimal nutrient uptake."
        return f"Your soil pH is {ph}. {tail}"

    return (
        "I'm currently experiencing connectivity issues, but I can provide guidance on soil moisture, "
        "pH levels, temperature management, and nutrient requirements. What specific aspect would you like to discuss?"
    )


class GardenAssistant:
    """
    Persona-aware chat over an OpenAI-compatible completions endpoint
    (Gemini by default). Failures degrade to fallback_response().
    """

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        api_key = api_key or Config.GEMINI_API_KEY
        if client is None and api_key:
            client = OpenAI(api_key=api_key, base_url=Config.GEMINI_BASE_URL)
        self.client = client
        self.model = model or Config.GEMINI_MODEL
        self.rate_limiter = rate_limiter or RateLimiter()

    def _messages(self, message: str, persona: str, reading: Dict[str, float], history: Iterable[dict]) -> List[dict]:
        messages = [
            {"role": "user", "content": build_system_prompt(persona, reading)},
            {"role": "assistant", "content": ACK_MESSAGE},
        ]
        recent = list(history)[-Config.CHAT_HISTORY_TURNS:]
        for turn in recent:
            role = "assistant" if turn.get("role") == "assistant" else "user"
            messages.append({"role": role, "content": turn["content"]})
        messages.append({"role": "user", "content": message})
        return messages

    def send_message(
        self,
        message: str,
        reading: Dict[str, float],
        persona: str = "elder",
        history: Iterable[dict] = (),
    ) -> dict:
        """
        Returns {"success": bool, "message": str, "error": str | None}.
        """
        check_persona(persona)

        if self.client is None:
            logger.warning("Gemini API key not available, using fallback response")
            return {
                "success": False,
                "message": fallback_response(message, persona, reading),
                "error": "API key not configured",
            }

        if not self.rate_limiter.allow():
            logger.info("Chat rate limit reached (%d per %.0fs)", self.rate_limiter.max_requests, self.rate_limiter.window_seconds)
            return {
                "success": False,
                "message": RATE_LIMIT_MESSAGES[persona],
                "error": "Rate limit exceeded",
            }

        settings = GENERATION_SETTINGS[persona]
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self._messages(message, persona, reading, history),
                max_tokens=settings["max_tokens"],
                temperature=settings["temperature"],
            )
            text = (response.choices[0].message.content or "").strip()
            if not text:
                raise RuntimeError("No response from Gemini model")

            return {"success": True, "message": text, "error": None}

        except Exception as e:
            logger.error(f"Gemini API error: {str(e)}")
            return {
                "success": False,
                "message": fallback_response(message, persona, reading),
                "error": str(e),
            }

    def check_connection(self) -> bool:
        """Sends a tiny prompt; True when the endpoint answers with text."""
        if self.client is None:
            logger.warning("Gemini API key not available")
            return False

        logger.info(f"Testing Gemini API connection (model={self.model})")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "Hello"}],
                max_tokens=10,
                temperature=0.7,
            )
            return bool(response.choices[0].message.content)
        except Exception as e:
            logger.error(f"Gemini API connection test failed: {str(e)}")
            return False

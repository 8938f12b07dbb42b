"""
AI Gateway Service.

Talks to an OpenAI-compatible chat-completions gateway for two features:
- Weather analysis: one non-streaming completion, returned as text
- Support chat: streamed completion relayed to the caller byte for byte

Rate limiting (429) and exhausted credits (402) are surfaced as distinct
errors so callers can tell throttling apart from quota exhaustion.
Every call is attempted once. No retries.
"""

import os
import logging
from typing import Dict, Iterator, List, NoReturn, Optional

import openai
import requests
from openai import OpenAI

logger = logging.getLogger(__name__)

AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
WEATHER_MODEL = os.getenv("WEATHER_MODEL", "google/gemini-2.5-flash")
CHAT_MODEL = os.getenv("CHAT_MODEL", "openai/gpt-5")
AI_GATEWAY_TIMEOUT = float(os.getenv("AI_GATEWAY_TIMEOUT", "60"))


class GatewayError(Exception):
    """AI gateway failure. `status_code` is what the API hands back to the caller."""
    status_code = 500

    def __init__(self, message: str = "AI gateway error"):
        super().__init__(message)
        self.message = message


class GatewayRateLimitError(GatewayError):
    status_code = 429

    def __init__(self, message: str = "Rate limits exceeded, please try again later."):
        super().__init__(message)


class GatewayPaymentRequiredError(GatewayError):
    status_code = 402

    def __init__(self, message: str = "Payment required, please add funds to your workspace."):
        super().__init__(message)


class GatewayConfigurationError(GatewayError):
    """Raised when the gateway API key is missing."""


WEATHER_SYSTEM_PROMPT = """You are an expert meteorologist and rocket launch coordinator with deep knowledge of:
- Weather patterns and atmospheric conditions optimal for rocket launches
- Seasonal weather variations across different geographical locations
- Risk assessment for launch operations based on weather conditions
- Historical weather data analysis

Your task is to analyze launch site weather patterns and provide:
1. Current season assessment for the location
2. Optimal launch windows (best months/periods)
3. Weather risks and considerations
4. Specific recommendations for launch timing

Be detailed, scientific, and practical in your analysis."""

CHAT_SYSTEM_PROMPT = """You are a precise, knowledgeable customer support assistant for the Rocket Launch Feasibility Calculator.

IMPORTANT GUIDELINES:
- Be accurate and factual - do not make up information
- Use proper spelling and grammar at all times
- If you don't know something, admit it rather than guessing
- Keep responses concise and directly relevant to the user's question
- Only provide information about features that exist in the app

YOUR EXPERTISE:
- Guiding users through the 3-step process: rocket type selection -> location selection -> analysis results
- Explaining the 6 analysis categories:
  1. Resources & Availability (materials, suppliers, technical expertise)
  2. Government & Legality (permits, regulations, airspace)
  3. Geographical Status (terrain, population density, climate)
  4. Geopolitical Status (stability, restrictions, cooperation)
  5. Best Time (seasonal conditions, weather patterns)
  6. Practicality (timeline, budget, team requirements)
- Distinguishing between Model Rockets (hobby/solo-team projects) and Industrial Applications
- Understanding location selection using the interactive map
- Interpreting feasibility levels: High (green), Medium (yellow), Low (red)

WHAT YOU CANNOT DO:
- Access real-time weather data (the app shows general seasonal info)
- Provide specific legal advice (refer to local authorities)
- Guarantee launch success (you provide feasibility analysis only)
- Modify user's analysis results

Be professional, encouraging, and helpful while maintaining accuracy."""


def _get_api_key() -> str:
    api_key = os.getenv("AI_GATEWAY_API_KEY")
    if not api_key:
        raise GatewayConfigurationError("AI_GATEWAY_API_KEY is not configured")
    return api_key


def raise_for_gateway_status(status_code: int, body: str = "") -> NoReturn:
    """
    Map a non-2xx gateway status to the matching GatewayError.

    Args:
        status_code: HTTP status returned by the gateway
        body: Response body, logged for diagnostics only

    Raises:
        GatewayRateLimitError: On 429
        GatewayPaymentRequiredError: On 402
        GatewayError: On anything else
    """
    if status_code == 429:
        raise GatewayRateLimitError()
    if status_code == 402:
        raise GatewayPaymentRequiredError()
    logger.error(f"AI gateway error: {status_code} {body}")
    raise GatewayError("AI gateway error")


def build_weather_prompt(latitude: float, longitude: float, location_name: Optional[str] = None) -> str:
    return f"""Analyze the weather patterns for rocket launches at this location:
Location: {location_name or 'Custom Location'}
Coordinates: {latitude}°N, {longitude}°E

Provide:
1. **Climate Overview**: General climate characteristics of this location
2. **Optimal Launch Windows**: Best months and time periods for launches, with reasoning
3. **Weather Risks**: Potential weather hazards (storms, high winds, fog, etc.)
4. **Seasonal Analysis**: Month-by-month breakdown of launch feasibility
5. **Specific Recommendations**: Actionable advice for launch planning

Format your response in clear sections with headers."""


def analyze_weather(
    latitude: float,
    longitude: float,
    location_name: Optional[str] = None,
    client: Optional[OpenAI] = None,
) -> str:
    """
    Ask the gateway for a narrative weather / launch-window analysis.

    Args:
        latitude: Site latitude
        longitude: Site longitude
        location_name: Display name of the site, if known
        client: Pre-built OpenAI client (built from the environment otherwise)

    Returns:
        Markdown analysis text

    Raises:
        GatewayError: On configuration problems, upstream failures or empty content
    """
    if client is None:
        client = OpenAI(
            api_key=_get_api_key(),
            base_url=AI_GATEWAY_URL,
            max_retries=0,
            timeout=AI_GATEWAY_TIMEOUT,
        )

    logger.info(f"Analyzing weather for: {location_name or 'Custom Location'} ({latitude}, {longitude})")

    try:
        response = client.chat.completions.create(
            model=WEATHER_MODEL,
            messages=[
                {"role": "system", "content": WEATHER_SYSTEM_PROMPT},
                {"role": "user", "content": build_weather_prompt(latitude, longitude, location_name)},
            ],
            stream=False,
        )
    except openai.APIStatusError as e:
        raise_for_gateway_status(e.status_code, str(e))
    except openai.APIConnectionError as e:
        logger.error(f"AI gateway unreachable: {e}")
        raise GatewayError("AI gateway error") from e

    analysis = response.choices[0].message.content if response.choices else None
    if not analysis:
        raise GatewayError("No analysis received from AI")

    logger.info("Weather analysis completed successfully")
    return analysis


def open_chat_stream(
    messages: List[Dict[str, str]],
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """
    Start a streamed support-chat completion.

    The support system prompt is prepended to the conversation history.
    The caller owns the returned response and must close it (relay_stream
    does this).

    Args:
        messages: Conversation history as [{"role": ..., "content": ...}]
        session: Optional requests session

    Returns:
        Open streaming requests.Response with a 2xx status

    Raises:
        GatewayError: On configuration problems or upstream failures
    """
    api_key = _get_api_key()
    http = session or requests

    logger.info("Chat support request received")

    try:
        upstream = http.post(
            f"{AI_GATEWAY_URL}/chat/completions",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            json={
                "model": CHAT_MODEL,
                "messages": [{"role": "system", "content": CHAT_SYSTEM_PROMPT}, *messages],
                "stream": True,
            },
            stream=True,
            timeout=AI_GATEWAY_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"AI gateway unreachable: {e}")
        raise GatewayError("AI gateway error") from e

    if not upstream.ok:
        try:
            raise_for_gateway_status(upstream.status_code, upstream.text)
        finally:
            upstream.close()

    return upstream


def relay_stream(upstream: requests.Response) -> Iterator[bytes]:
    """Yield the upstream event stream unchanged, closing it when iteration stops."""
    try:
        for chunk in upstream.iter_content(chunk_size=None):
            if chunk:
                yield chunk
    finally:
        upstream.close()

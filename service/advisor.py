"""Prompt building and the LLM call behind the two-sentence verdicts."""

import json
from typing import Any, Dict, List, Optional

import anthropic

from logging_config import get_logger

logger = get_logger("advisor")

MAX_TOKENS = 250

FALLBACK_VERDICT = "Unable to verify. Check manually."


def search_context(query: str) -> Dict[str, Any]:
    """Placeholder for a news search. Always returns the same shape, never hits the web."""
    return {
        "query": query,
        "results": [
            {"title": "Recent news placeholder", "snippet": "Search results would appear here"}
        ],
    }


def _fmt_rsi(technicals):
    rsi = technicals.get("rsi")
    return round(rsi, 1) if rsi is not None else "N/A"


def build_system_prompt(symbol: str, technicals: Dict[str, Any]) -> str:
    price = technicals.get("price", 0)
    change = technicals.get("change", 0)
    rsi = _fmt_rsi(technicals)

    return f"""You are the Penguin-Burry AI - an elite tactical trading analyst specializing in high-probability setups using technical confluence and market psychology.

METHODOLOGY:
You identify two types of setups:

1. BURRY SHORT (Exhaustion Hunter)
   - Parabolic moves showing exhaustion
   - Signals: RSI >80, volume spike 2-3x, MACD turning negative, price change >15%
   - Critical check: Is the trend exhausted or still strong? Never short strength.
   - Look for: Retail FOMO, blow-off volume, momentum divergence

2. PENGUIN LONG (Divergence Hunter)
   - Fear rotations where smart money accumulates
   - Signals: RSI 70-85 (momentum without exhaustion), strong volume, solid support
   - Look for: Market weakness but stock holding, institutional accumulation, sector rotation strength

3. NO SETUP
   - If signals don't align, say HOLD
   - Don't force trades that aren't there

CRITICAL RULES:
- Analyze ONLY {symbol} - no comparisons to other stocks unless explaining direct sector rotation
- State which setup type this is (Burry/Penguin/None)
- Use the actual technical numbers provided: Price ${price}, Change {change}%, RSI {rsi}
- Check disqualifiers: Fake volume? Conflicting signals? Already extended?
- Give specific entry price or HOLD command

RESPONSE FORMAT (EXACTLY 2 SENTENCES):

Sentence 1 - SETUP ANALYSIS:
State the setup type and technical confluence. Example: '{symbol} shows a [Burry/Penguin/No] setup with RSI at {rsi}, volume [context], and [momentum state] - [what this means].'

Sentence 2 - VERDICT:
Give decisive action with specific price. Example: 'LONG at ${price} targeting $[target] (stop $[stop])' OR 'SHORT at ${price} targeting $[target] (stop $[stop])' OR 'HOLD - [specific reason why no trade].'

Focus on THIS stock's technicals and price action. Use the Penguin-Burry signal framework. No generic advice."""


def build_user_prompt(
    symbol: str,
    name: str,
    context: Dict[str, Any],
    technicals: Dict[str, Any],
    history: Optional[List[Dict[str, Any]]] = None,
) -> str:
    price = technicals.get("price", 0)
    change = technicals.get("change", 0)
    volume = technicals.get("volume", 0) or 0
    gap = round(technicals["gap"], 2) if technicals.get("gap") is not None else 0
    high = technicals.get("high", 0)
    low = technicals.get("low", 0)

    prompt = f"""STOCK: {symbol} ({name})

TECHNICAL SNAPSHOT:
- Current Price: ${price}
- Price Change: {change}%
- RSI: {_fmt_rsi(technicals)}
- Volume: {volume:,.0f}
- Day Range: ${low} - ${high}
- Gap: {gap}%

MARKET CONTEXT & NEWS:
{json.dumps(context, indent=4, default=str)}
"""
    if history:
        prompt += f"\nPREVIOUS ANALYSIS:\n{json.dumps(history, indent=4, default=str)}\n"

    prompt += "\nApply Penguin-Burry methodology. Which setup is this? What's the play?"
    return prompt


class AnthropicAdvisor:
    """Sends one system + user prompt pair to the Messages API and returns the reply text."""

    def __init__(self, api_key, model="claude-sonnet-4-20250514", client=None):
        self.model = model
        # One attempt per verdict; a failed call falls back instead of retrying
        self.client = client or anthropic.Anthropic(api_key=api_key, max_retries=0)

    def ask(self, symbol, name, context, technicals=None, history=None) -> str:
        technicals = technicals or {}
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                system=build_system_prompt(symbol, technicals),
                messages=[
                    {"role": "user", "content": build_user_prompt(symbol, name, context, technicals, history)}
                ],
            )
        except anthropic.APIError as e:
            logger.warning("Advisory call failed for %s: %s", symbol, e)
            return FALLBACK_VERDICT

        text = extract_text(message)
        if text is None:
            logger.warning("Advisory response for %s had no text content", symbol)
            return FALLBACK_VERDICT
        return text


def extract_text(message) -> Optional[str]:
    content = getattr(message, "content", None)
    if not content:
        return None
    text = getattr(content[0], "text", None)
    return text if isinstance(text, str) else None

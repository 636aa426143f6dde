"""
AI unit classification service for Pantrify application.

Asks an OpenAI-compatible chat completions endpoint (OpenAI or a local
LM Studio server) whether an ingredient is measured in grams, liters or
pieces. Any failure or unexpected answer falls back to pieces so ingredient
entry is never blocked.
"""

from concurrent.futures import Future
from typing import Optional

import requests

from services.unit_service import DEFAULT_CATEGORY, parse_category
from utils import get_config, get_logger, log_remote_call, LatestTaskRunner

logger = get_logger(__name__)

SYSTEM_PROMPT = "You are a food unit classifier. Respond only with 'grams', 'liters', or 'pieces'."


class UnitClassifier:
    """
    Classifies ingredient names into a unit category.
    """

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None,
                 model: Optional[str] = None, timeout: Optional[int] = None):
        config = get_config()
        self.base_url = (base_url or config.ai_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else config.ai_api_key
        self.model = model or config.ai_model
        self.timeout = timeout or config.ai_timeout_seconds
        self._runner = LatestTaskRunner("unit-classifier", max_workers=1)

    def classify(self, ingredient_name: str) -> str:
        """
        Classify an ingredient name.

        Returns:
            'grams', 'liters' or 'pieces' (also the fallback)
        """
        answer = self._call_chat_completion(f"Ingredient: {ingredient_name}")
        if answer is None:
            return DEFAULT_CATEGORY.value

        category = parse_category(answer)
        if category is None:
            logger.warning(f"Unexpected unit classifier response: {answer!r}")
            return DEFAULT_CATEGORY.value

        logger.debug(f"Classified '{ingredient_name}' as {category.value}")
        return category.value

    def classify_async(self, ingredient_name: str) -> Future:
        """Classify in the background; a newer call supersedes this one"""
        return self._runner.submit(self.classify, ingredient_name)

    def is_current(self, future: Future) -> bool:
        return self._runner.is_current(future)

    def _call_chat_completion(self, prompt: str) -> Optional[str]:
        """
        Make a chat completions call.

        Returns:
            Response text or None if failed
        """
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f"Bearer {self.api_key}"

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            "stream": False
        }

        try:
            with log_remote_call(logger, "unit classification", model=self.model, prompt=prompt) as call:
                response = requests.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    timeout=self.timeout,
                    headers=headers
                )
                call.note(status=response.status_code)
        except requests.RequestException:
            return None

        if response.status_code != 200:
            logger.warning(f"Unit classifier API returned status {response.status_code}")
            return None

        try:
            result = response.json()
            content = result['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"No valid unit classifier response: {e}")
            return None

        if not isinstance(content, str):
            return None
        return content.strip()

    def close(self):
        self._runner.shutdown()


# Service factory function
_unit_classifier: Optional[UnitClassifier] = None


def get_unit_classifier() -> UnitClassifier:
    """Get singleton unit classifier instance"""
    global _unit_classifier
    if _unit_classifier is None:
        _unit_classifier = UnitClassifier()
    return _unit_classifier

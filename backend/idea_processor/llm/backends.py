from abc import ABC, abstractmethod
from typing import Any, Dict

import requests


class GenerationBackend(ABC):
    @abstractmethod
    def run(self, prompt: str, max_tokens: int, temperature: float) -> Any:
        """Submit a prompt and return the provider's raw (decoded) response."""
        pass


class ChatCompletionsBackend(GenerationBackend):
    """OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(self, base_url: str, model: str, api_key: str = "", timeout: float = 300):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def run(self, prompt: str, max_tokens: int, temperature: float) -> Any:
        response = requests.post(
            f"{self.base_url}/chat/completions",
            json={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


class CompletionsBackend(ChatCompletionsBackend):
    """Plain text-completion ``/completions`` endpoint (``choices[].text``)."""

    def run(self, prompt: str, max_tokens: int, temperature: float) -> Any:
        response = requests.post(
            f"{self.base_url}/completions",
            json={
                "model": self.model,
                "prompt": prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


class OllamaBackend(GenerationBackend):
    """Ollama ``/api/chat`` (answers with ``message.content``)."""

    def __init__(self, base_url: str, model: str, timeout: float = 300):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    def run(self, prompt: str, max_tokens: int, temperature: float) -> Any:
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt,
                }
            ],
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
            "stream": False,
        }

        response = requests.post(
            f"{self.base_url}/api/chat",
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


def build_backend(
    provider: str,
    base_url: str,
    model: str,
    api_key: str = "",
    timeout: float = 300,
) -> GenerationBackend:
    if provider == "chat_completions":
        return ChatCompletionsBackend(base_url, model, api_key=api_key, timeout=timeout)
    if provider == "completions":
        return CompletionsBackend(base_url, model, api_key=api_key, timeout=timeout)
    if provider == "ollama":
        return OllamaBackend(base_url, model, timeout=timeout)
    raise ValueError(f"Unknown LLM_PROVIDER: {provider}")

"""Question provider — turns note text into review questions and answers.

Any object satisfying :class:`QuestionProvider` can drive a review session.
:class:`OllamaProvider` talks to a local Ollama server over HTTP:

- connection failures and timeouts raise :class:`ProviderUnavailableError`
- bad status codes, non-JSON bodies and empty replies raise
  :class:`ProviderProtocolError`

Calls are synchronous and all-or-nothing; no partial text is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from neuron.domain.content import extract_summary
from neuron.domain.errors import ProviderProtocolError, ProviderUnavailableError
from neuron.domain.types import QuestionStyle

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3:8b-instruct-q4_K_M"
DEFAULT_TIMEOUT = 120.0

QUESTION_PROMPT = """\
You are a helpful study assistant helping me review my notes using active recall.
Based ONLY on the following text from my notes, write one single, clear and concise
question that tests the main concept.
{guidance}
RULES:
1. Ask only ONE question.
2. Do NOT include the answer in the question.
3. The question must be answerable from the provided text.
4. Do not add introductory text such as "Here is a question for you:". Only the question.
TEXT:
---
{text}
---"""

ANSWER_PROMPT = """\
You are a helpful study assistant. Give a concise, direct answer to the question,
using ONLY the provided text as your source of truth.
RULES:
1. Base the answer STRICTLY on the text. Do not add outside information.
2. Answer directly and concisely; a few sentences or a short bulleted list.
3. Do not add introductory text such as "The answer is:". Only the answer.
QUESTION: {question}
TEXT TO USE:
---
{text}
---"""


class QuestionProvider(Protocol):
    """Contract for anything that can write review questions."""

    def generate_question(self, note_body: str, style: QuestionStyle) -> str: ...

    def generate_answer(self, question: str, note_body: str) -> str: ...


def build_question_prompt(note_body: str, style: QuestionStyle) -> str:
    return QUESTION_PROMPT.format(guidance=style.guidance, text=extract_summary(note_body))


def build_answer_prompt(question: str, note_body: str) -> str:
    return ANSWER_PROMPT.format(question=question, text=extract_summary(note_body))


class OllamaProvider:
    """QuestionProvider backed by Ollama's ``/api/generate`` endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.api_url = f"{self.base_url}/api/generate"

    def generate_question(self, note_body: str, style: QuestionStyle) -> str:
        return self.generate(build_question_prompt(note_body, QuestionStyle(style)))

    def generate_answer(self, question: str, note_body: str) -> str:
        return self.generate(build_answer_prompt(question, note_body))

    def generate(self, prompt: str) -> str:
        """Send one non-streaming generate request and return the reply text."""
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        logger.debug("POST %s model=%s", self.api_url, self.model)
        try:
            response = requests.post(self.api_url, json=payload, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            msg = f"Ollama is not reachable at {self.base_url}: {exc}. Is Ollama running?"
            raise ProviderUnavailableError(msg) from exc
        except requests.RequestException as exc:
            raise ProviderProtocolError(f"Ollama request failed: {exc}") from exc

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise ProviderProtocolError(f"Ollama returned HTTP {response.status_code}") from exc

        try:
            data: Any = response.json()
        except ValueError as exc:
            msg = f"Ollama returned a non-JSON body: {response.text[:200]!r}"
            raise ProviderProtocolError(msg) from exc

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise ProviderProtocolError("Ollama reply has no 'response' text")
        return text.strip()

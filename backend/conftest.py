"""Shared stubs: a scripted model backend and ready-made pipelines."""

import copy
import json
from datetime import datetime, timezone

import pytest

from idea_processor.llm.backends import GenerationBackend
from idea_processor.llm.gateway import ModelGateway
from idea_processor.pipeline import IdeaPipeline
from idea_processor.registry import InMemoryIdeaRegistry
from idea_processor.schemas import Idea


IDEA_MAP = {
    "root": {
        "label": "DreamSaaS",
        "branches": [
            {
                "label": "User Journey",
                "children": ["Sign up via OAuth", "Dream Journal Entry", "Video Generation Request", "View Generated Videos", "Share & Export"],
            },
            {
                "label": "Core Functions",
                "children": ["Dream Recording", "AI Dream Analysis", "Video Generation", "Content Library", "Sharing Tools"],
            },
            {
                "label": "Data Output",
                "children": ["Generated Videos", "Dream Analytics", "Mood Reports"],
            },
            {
                "label": "Internal Engine",
                "children": ["LLaMA 3.3 70B", "Video Generation AI", "Dream Processing Pipeline", "Content Moderation"],
            },
            {
                "label": "Automation & Logic",
                "children": ["Daily Dream Reminders", "Smart Video Suggestions", "Trend Detection"],
            },
        ],
    },
    "insight": {
        "summary": "A SaaS platform that transforms users' dreams into engaging video content using AI technology.",
        "themes": ["Creative Expression", "AI-Powered Visualization", "Personal Storytelling"],
        "nextSteps": ["Develop dream capture interface", "Integrate video generation API", "Create user dashboard"],
    },
}

TECH_STACK = [
    {"name": "Next.js", "category": "Frontend", "reason": "Fast React rendering"},
    {"name": "FastAPI", "category": "Backend", "reason": "Async Python APIs"},
    {"name": "PostgreSQL", "category": "Database", "reason": "Reliable relational storage"},
    {"name": "Clerk", "category": "Auth", "reason": "Drop-in user management"},
    {"name": "Vercel", "category": "Deployment", "reason": "Zero-config hosting"},
    {"name": "Runway", "category": "AI/ML", "reason": "Text to video"},
]

MVP_PLAN = {
    "todo": ["User Auth", "Dream Journal", "Video Pipeline", "Billing"],
    "inProgress": ["Database Schema", "Landing Page"],
    "done": ["Repo Init"],
}


def idea_map(**overrides):
    data = copy.deepcopy(IDEA_MAP)
    data.update(overrides)
    return data


def as_text(data) -> str:
    return json.dumps(data)


def fenced(text: str, tag: str = "json") -> str:
    return f"```{tag}\n{text}\n```"


class ScriptedBackend(GenerationBackend):
    """
    Answers each call with the next scripted response.

    A response may be a raw value (returned as-is, so any provider shape can
    be simulated), an exception instance (raised), or a callable taking the
    prompt. The last response repeats once the script runs out.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    def run(self, prompt, max_tokens, temperature):
        self.prompts.append(prompt)
        if not self.responses:
            raise RuntimeError("no scripted response")

        index = min(len(self.prompts), len(self.responses)) - 1
        response = self.responses[index]

        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response


def text_response(text: str) -> dict:
    """A provider answer in the single ``text`` field shape."""
    return {"text": text}


def make_pipeline(*responses, registry=None, **kwargs):
    backend = ScriptedBackend(*responses)
    pipeline = IdeaPipeline(
        gateway=ModelGateway(backend),
        registry=registry if registry is not None else InMemoryIdeaRegistry(),
        **kwargs,
    )
    return pipeline, backend


def make_idea(idea_id: str = "idea_1_abc", text: str = "A SaaS for habit tracking", **overrides) -> Idea:
    fields = dict(
        id=idea_id,
        original_text=text,
        memory_context="",
        generated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        root=IDEA_MAP["root"],
        insight=IDEA_MAP["insight"],
    )
    fields.update(overrides)
    return Idea(**fields)


@pytest.fixture
def registry():
    return InMemoryIdeaRegistry()


@pytest.fixture
def stored_idea(registry):
    idea = make_idea()
    registry.put(idea)
    return idea

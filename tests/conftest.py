"""
Pytest Configuration
====================

Ensures project root is in Python path for imports and provides in-memory
collaborators so no test touches the network.
"""

import sys
import asyncio
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from models.payloads import BranchDescriptor, ExpansionDescriptor


WATER_CYCLE_BRANCHES = [
    {
        "name": "Evaporation",
        "description": "Liquid water turns into vapor",
        "relation_label": "begins with",
        "sub_branches": [
            {"name": "Solar heat", "description": "The sun warms oceans and lakes", "example_items": ["Drying puddles", "Warm seas"]},
            {"name": "Transpiration", "description": "Plants release water vapor", "example_items": ["Leaves", "Forests"]},
        ],
    },
    {
        "name": "Condensation",
        "description": "Vapor cools into droplets",
        "sub_branches": [
            {"name": "Clouds", "description": "Droplets gather in the sky", "example_items": ["Cumulus", "Fog"]},
            {"name": "Dew", "description": "Droplets form on cool surfaces", "example_items": ["Wet grass", "Cold glass"]},
        ],
    },
    {
        "name": "Precipitation",
        "description": "Water falls back to the ground",
        "sub_branches": [
            {"name": "Rain", "description": "Liquid drops", "example_items": ["Showers", "Storms"]},
            {"name": "Snow", "description": "Frozen crystals", "example_items": ["Snowflakes", "Blizzards"]},
        ],
    },
]


class FakeGenerator:
    """Content-generation collaborator returning canned branches."""

    def __init__(self, branches=None, error=None, gate=None):
        self.branches = WATER_CYCLE_BRANCHES if branches is None else branches
        self.error = error
        self.gate = gate
        self.calls = []

    async def generate_branches(self, topic, education_level, grade, depth_profile, language='en'):
        self.calls.append({
            "topic": topic,
            "education_level": education_level,
            "grade": grade,
            "depth_profile": depth_profile,
            "language": language,
        })
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return [BranchDescriptor.model_validate(b) for b in self.branches]


class FakeExpander:
    """Expansion collaborator adding two details under every requested name."""

    def __init__(self, error=None, gate=None, details_per_target=2):
        self.error = error
        self.gate = gate
        self.details_per_target = details_per_target
        self.calls = []

    async def generate_expansions(self, topic, education_level, grade, target_names, language='en'):
        self.calls.append({"topic": topic, "target_names": list(target_names), "language": language})
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return [
            ExpansionDescriptor(
                target_name=name,
                details=[
                    {"name": f"{name} detail {i + 1}", "description": f"More about {name}"}
                    for i in range(self.details_per_target)
                ],
            )
            for name in target_names
        ]


class FakeLLM:
    """Stands in for llm_service: returns queued responses and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def chat(self, prompt, model='qwen', temperature=None, max_tokens=None,
                   system_message=None, timeout=None):
        self.calls.append({
            "prompt": prompt,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "system_message": system_message,
        })
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def water_cycle_branches():
    return [dict(b) for b in WATER_CYCLE_BRANCHES]


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def fake_expander():
    return FakeExpander()


@pytest.fixture
def make_generator():
    return FakeGenerator


@pytest.fixture
def make_expander():
    return FakeExpander


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def gate():
    return asyncio.Event()

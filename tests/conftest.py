"""Shared test fixtures."""

import json
import logging
from dataclasses import dataclass, field

import pytest

from nutrition_relay.config import Settings
from nutrition_relay.containers import AppContainer
from nutrition_relay.services.nutrition import (
    NutritionService,
    ToolCallClient,
    ToolCallOutcome,
)
from nutrition_relay.services.uploads import ObjectStore, UploadService

SAMPLE_FACTS: dict[str, object] = {
    "sicknesses": ["gout", "diabetes"],
    "kcal": 520,
    "protein": 32.5,
    "carbs": 48,
    "fat": 21,
    "sugar": 6,
    "fiber": 3.5,
    "sodium": 980,
    "purines": 210,
    "ingredients": ["ramen noodles", "pork belly", "soy broth", "scallion"],
    "highPurineIngredients": [
        {"ingredient": "pork belly", "purineLevel": 120},
        {"ingredient": "soy broth", "purineLevel": 80},
    ],
    "riskLevels": {"gout": "High", "diabetes": "Moderate"},
    "recommendations": {
        "gout": ["Skip the broth", "Drink plenty of water"],
        "diabetes": ["Eat half the noodles"],
    },
}


@dataclass
class FakeToolCallClient(ToolCallClient):
    """Fake tool-calling client returning a fixed outcome."""

    outcome: ToolCallOutcome = field(
        default_factory=lambda: ToolCallOutcome(
            tool_name="extract_nutrition_facts",
            arguments=json.dumps(SAMPLE_FACTS),
            raw_response='{"id": "chatcmpl-1"}',
        )
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def call_tool(
        self,
        *,
        model: str,
        max_tokens: int,
        prompt: str,
        image_url: str,
        tool: dict[str, object],
    ) -> ToolCallOutcome:
        self.calls.append(
            {
                "model": model,
                "max_tokens": max_tokens,
                "prompt": prompt,
                "image_url": image_url,
                "tool": tool,
            }
        )
        if self.error is not None:
            raise self.error
        return self.outcome


@dataclass
class InMemoryObjectStore(ObjectStore):
    """In-memory object store for tests."""

    objects: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str | None] = field(default_factory=dict)
    base_url: str = "https://bucket.example.com"

    def put(self, key: str, content: bytes, content_type: str | None = None) -> str:
        self.objects[key] = content
        self.content_types[key] = content_type
        return f"{self.base_url}/{key}"


@dataclass
class FailingObjectStore(ObjectStore):
    """Object store that always fails."""

    message: str = "AccessDenied: invalid credentials"

    def put(self, key: str, content: bytes, content_type: str | None = None) -> str:
        raise RuntimeError(self.message)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        base_url="https://llm.example.com/v1",
        api_key="llm-key",
        oss_region="oss-cn-hangzhou",
        oss_access_key_id="key-id",
        oss_access_secret_key="key-secret",
        bucket_name="food-photos",
        environment="test",
    )


@pytest.fixture
def tool_client() -> FakeToolCallClient:
    return FakeToolCallClient()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def container(
    settings: Settings,
    tool_client: FakeToolCallClient,
    object_store: InMemoryObjectStore,
) -> AppContainer:
    nutrition_service = NutritionService(
        client=tool_client,
        model=settings.nutrition_model,
        max_tokens=settings.nutrition_max_tokens,
    )
    upload_service = UploadService(store=object_store)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        upload_service=upload_service,
        close_resources=close_resources,
    )


@pytest.fixture
def propagate_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let caplog see records from the package logger."""
    monkeypatch.setattr(logging.getLogger("nutrition_relay"), "propagate", True)

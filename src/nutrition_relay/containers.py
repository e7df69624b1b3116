"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_relay.adapters.openai_chat_client import OpenAIChatClient
from nutrition_relay.adapters.oss_object_store import OssObjectStore
from nutrition_relay.adapters.supabase_object_store import SupabaseObjectStore
from nutrition_relay.config import Settings
from nutrition_relay.services.nutrition import NutritionService
from nutrition_relay.services.uploads import ObjectStore, UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    upload_service: UploadService
    close_resources: Callable[[], Awaitable[None]]


def build_object_store(settings: Settings) -> ObjectStore:
    """Create the object store selected by ``storage_backend``."""
    if settings.storage_backend == "supabase":
        return SupabaseObjectStore(
            url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            bucket_name=settings.bucket_name,
        )
    return OssObjectStore(
        region=settings.oss_region,
        access_key_id=settings.oss_access_key_id,
        access_key_secret=settings.oss_access_secret_key,
        bucket_name=settings.bucket_name,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    chat_client = OpenAIChatClient.create(
        api_key=resolved_settings.api_key,
        base_url=resolved_settings.base_url,
    )
    nutrition_service = NutritionService(
        client=chat_client,
        model=resolved_settings.nutrition_model,
        max_tokens=resolved_settings.nutrition_max_tokens,
    )
    upload_service = UploadService(store=build_object_store(resolved_settings))

    async def close_resources() -> None:
        await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        upload_service=upload_service,
        close_resources=close_resources,
    )

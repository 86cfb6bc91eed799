"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from image_describer.adapters.argon2_password_hasher import Argon2PasswordHasher
from image_describer.adapters.openai_description_client import (
    OpenAIDescriptionClient,
)
from image_describer.adapters.s3_object_store import S3ObjectStore
from image_describer.adapters.smtp_mailer import SmtpMailer
from image_describer.adapters.supabase_description_repository import (
    SupabaseDescriptionRepository,
)
from image_describer.adapters.supabase_image_repository import SupabaseImageRepository
from image_describer.adapters.supabase_user_repository import SupabaseUserRepository
from image_describer.config import Settings
from image_describer.services.accounts import AccountService
from image_describer.services.descriptions import DescriptionService
from image_describer.services.images import ImagePipelineService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    image_service: ImagePipelineService
    account_service: AccountService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    object_store = S3ObjectStore.create(
        bucket=resolved_settings.s3_bucket_name,
        region=resolved_settings.aws_region,
        access_key_id=resolved_settings.aws_access_key_id,
        secret_access_key=resolved_settings.aws_secret_access_key,
    )
    openai_client = OpenAIDescriptionClient.create(resolved_settings.openai_api_key)
    description_service = DescriptionService(
        client=openai_client,
        default_model=resolved_settings.openai_model,
    )
    image_service = ImagePipelineService(
        object_store=object_store,
        image_repository=SupabaseImageRepository(supabase_client),
        description_repository=SupabaseDescriptionRepository(supabase_client),
        description_service=description_service,
    )
    account_service = AccountService(
        repository=SupabaseUserRepository(supabase_client),
        hasher=Argon2PasswordHasher(),
        mailer=SmtpMailer(
            host=resolved_settings.smtp_host,
            port=resolved_settings.smtp_port,
            username=resolved_settings.email_address,
            password=resolved_settings.email_password,
        ),
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        image_service=image_service,
        account_service=account_service,
        close_resources=close_resources,
    )

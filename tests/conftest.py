"""Shared test fixtures."""

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from image_describer.config import Settings
from image_describer.containers import AppContainer
from image_describer.domain.errors import MailDeliveryError
from image_describer.domain.models import DescriptionRecord, UploadedImage, UserRecord
from image_describer.services.accounts import (
    AccountService,
    Mailer,
    PasswordHasher,
    UserRepository,
)
from image_describer.services.descriptions import DescriptionClient, DescriptionService
from image_describer.services.images import (
    DescriptionRepository,
    ImagePipelineService,
    ImageRepository,
    ObjectStore,
)

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class FakeObjectStore(ObjectStore):
    """Object store that keeps uploads in memory."""

    bucket: str = "test-bucket"
    region: str = "us-east-1"
    objects: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str | None] = field(default_factory=dict)
    fail: bool = False
    put_thread_ids: list[int] = field(default_factory=list)

    def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str | None,
        metadata: dict[str, str],
    ) -> None:
        if self.fail:
            raise RuntimeError("S3 unavailable")
        self.put_thread_ids.append(threading.get_ident())
        self.objects[key] = body
        self.content_types[key] = content_type

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


@dataclass
class InMemoryImageRepository(ImageRepository):
    """In-memory uploaded image repository for tests."""

    images: list[UploadedImage] = field(default_factory=list)

    def create_image(self, name: str, url: str) -> UploadedImage:
        image = UploadedImage(id=uuid4(), name=name, url=url, created_at=FIXED_NOW)
        self.images.append(image)
        return image


@dataclass
class InMemoryDescriptionRepository(DescriptionRepository):
    """In-memory description repository for tests."""

    records: list[DescriptionRecord] = field(default_factory=list)
    fail: bool = False

    def create_record(self, image_url: str, description: str) -> DescriptionRecord:
        if self.fail:
            raise RuntimeError("database unavailable")
        record = DescriptionRecord(
            id=uuid4(),
            image_url=image_url,
            description=description,
            created_at=FIXED_NOW,
        )
        self.records.append(record)
        return record

    def list_records(self) -> list[DescriptionRecord]:
        if self.fail:
            raise RuntimeError("database unavailable")
        return list(self.records)


@dataclass
class FakeDescriptionClient(DescriptionClient):
    """Fake description client that records each call."""

    description: str = "A cat sitting on a windowsill."
    calls: list[dict[str, str]] = field(default_factory=list)
    fail: bool = False

    async def describe(self, *, model: str, image_url: str, prompt: str) -> str:
        self.calls.append({"model": model, "image_url": image_url, "prompt": prompt})
        if self.fail:
            raise RuntimeError("quota exceeded")
        return self.description


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)

    def get_by_username(self, username: str) -> UserRecord | None:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def get_by_email(self, email: str) -> UserRecord | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        user = UserRecord(
            id=uuid4(), username=username, email=email, password_hash=password_hash
        )
        self.users[user.id] = user
        return user

    def set_otp(self, user_id: UUID, otp: str, expires_at: datetime) -> None:
        current = self.users[user_id]
        self.users[user_id] = UserRecord(
            id=current.id,
            username=current.username,
            email=current.email,
            password_hash=current.password_hash,
            otp=otp,
            otp_expires_at=expires_at,
        )

    def update_password(self, user_id: UUID, password_hash: str) -> None:
        current = self.users[user_id]
        self.users[user_id] = UserRecord(
            id=current.id,
            username=current.username,
            email=current.email,
            password_hash=password_hash,
        )


class FakePasswordHasher(PasswordHasher):
    """Reversible hasher so tests can inspect stored hashes."""

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password_hash: str, password: str) -> bool:
        return password_hash == f"hashed:{password}"


@dataclass
class FakeMailer(Mailer):
    """Mailer that records outgoing messages."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)
    fail: bool = False

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise MailDeliveryError("SMTP relay refused connection")
        self.sent.append((to, subject, body))


@dataclass
class FakeClock:
    """Settable clock for OTP expiry tests."""

    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(
        aws_region="us-east-1",
        aws_access_key_id="access-key",
        aws_secret_access_key="secret-key",
        s3_bucket_name="test-bucket",
        openai_api_key="openai-key",
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        email_address="noreply@example.com",
        email_password="email-password",
        environment="test",
    )


@pytest.fixture
def description_client() -> FakeDescriptionClient:
    return FakeDescriptionClient()


@pytest.fixture
def image_service(description_client: FakeDescriptionClient) -> ImagePipelineService:
    return ImagePipelineService(
        object_store=FakeObjectStore(),
        image_repository=InMemoryImageRepository(),
        description_repository=InMemoryDescriptionRepository(),
        description_service=DescriptionService(
            client=description_client, default_model="gpt-4o"
        ),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def account_service(clock: FakeClock) -> AccountService:
    return AccountService(
        repository=InMemoryUserRepository(),
        hasher=FakePasswordHasher(),
        mailer=FakeMailer(),
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    image_service: ImagePipelineService,
    account_service: AccountService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        image_service=image_service,
        account_service=account_service,
        close_resources=close_resources,
    )

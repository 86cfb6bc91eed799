"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Header, Request, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from image_describer.api.models import (
    DescriptionRecordPayload,
    ForgetPasswordRequest,
    GenerateDescriptionRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SaveRecordRequest,
)
from image_describer.app_logging import configure_logging
from image_describer.config import parse_cors_origins
from image_describer.containers import AppContainer
from image_describer.domain.errors import (
    InvalidCredentialsError,
    InvalidOtpError,
    MailDeliveryError,
    NoImageToDescribeError,
    UsernameTakenError,
    UserNotFoundError,
)
from image_describer.services.images import ANONYMOUS_CLIENT

UPLOAD_CHUNK_BYTES = 1024 * 1024


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Image describer started")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/upload")
    async def upload_image(
        request: Request,
        image: UploadFile = File(...),
        x_client_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Store an uploaded image and return its public URL."""
        state_container: AppContainer = request.app.state.container
        if not image.filename:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "Uploaded file has no name"},
            )
        file_bytes = await _read_limited(
            image, state_container.settings.max_upload_bytes
        )
        if file_bytes is None:
            return JSONResponse(
                status_code=413,
                content={"error": "File too large"},
            )
        try:
            uploaded = await state_container.image_service.handle_upload(
                file_bytes=file_bytes,
                file_name=image.filename,
                content_type=image.content_type,
                client_key=x_client_id or ANONYMOUS_CLIENT,
            )
        except Exception as exc:
            logger.exception(
                "Failed to upload image", extra={"file_name": image.filename}
            )
            return _error_response(
                state_container, exc, {"error": "Failed to upload image"}
            )
        return JSONResponse(
            content={"message": "File uploaded successfully", "imageUrl": uploaded.url}
        )

    @app.post("/api/generate-description")
    async def generate_description(
        body: GenerateDescriptionRequest,
        request: Request,
        x_client_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Describe the requested image or the client's last upload."""
        state_container: AppContainer = request.app.state.container
        try:
            description = await state_container.image_service.generate_description(
                model=body.model,
                image_url=body.image_url,
                client_key=x_client_id or ANONYMOUS_CLIENT,
            )
        except NoImageToDescribeError:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "No uploaded image to describe"},
            )
        except Exception as exc:
            logger.exception(
                "Image description failed", extra={"requested_model": body.model}
            )
            return _error_response(
                state_container, exc, {"error": "Internal server error"}
            )
        return JSONResponse(
            content={
                "message": "Image description generated successfully",
                "description": description,
            }
        )

    @app.post("/save")
    async def save_record(body: SaveRecordRequest, request: Request) -> JSONResponse:
        """Persist a description record."""
        state_container: AppContainer = request.app.state.container
        try:
            record = state_container.image_service.save_record(
                image_url=body.image_url, description=body.description
            )
        except Exception as exc:
            logger.exception("Failed to save description record")
            return _error_response(
                state_container, exc, {"message": "Failed to save data"}
            )
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=_record_content(DescriptionRecordPayload.from_record(record)),
        )

    @app.get("/api/images")
    async def list_records(request: Request) -> JSONResponse:
        """Return all saved description records."""
        state_container: AppContainer = request.app.state.container
        try:
            records = state_container.image_service.list_records()
        except Exception as exc:
            logger.exception("Failed to list description records")
            return _error_response(
                state_container, exc, {"error": "Internal server error"}
            )
        return JSONResponse(
            content=[
                _record_content(DescriptionRecordPayload.from_record(record))
                for record in records
            ]
        )

    @app.post("/forget-password")
    async def forget_password(
        body: ForgetPasswordRequest, request: Request
    ) -> JSONResponse:
        """Email a password reset OTP to the user."""
        state_container: AppContainer = request.app.state.container
        try:
            await state_container.account_service.request_password_reset(body.email)
        except UserNotFoundError:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"message": "User not found"},
            )
        except MailDeliveryError as exc:
            logger.exception("Failed to send reset email")
            return _error_response(
                state_container, exc, {"message": "Error sending email"}
            )
        except Exception as exc:
            logger.exception("Password reset request failed")
            return _error_response(
                state_container, exc, {"message": "Internal server error"}
            )
        return JSONResponse(content={"message": "OTP sent to email"})

    @app.post("/reset-password")
    async def reset_password(
        body: ResetPasswordRequest, request: Request
    ) -> JSONResponse:
        """Reset a password using a previously issued OTP."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.account_service.reset_password(
                email=body.email, otp=body.otp, new_password=body.new_password
            )
        except UserNotFoundError:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"message": "User not found"},
            )
        except InvalidOtpError:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"message": "Invalid or expired OTP"},
            )
        except Exception as exc:
            logger.exception("Password reset failed")
            return _error_response(
                state_container, exc, {"message": "Internal server error"}
            )
        return JSONResponse(content={"message": "Password reset successful"})

    @app.post("/login")
    async def login(body: LoginRequest, request: Request) -> JSONResponse:
        """Check a username and password."""
        state_container: AppContainer = request.app.state.container
        try:
            user = state_container.account_service.login(body.username, body.password)
        except InvalidCredentialsError:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"success": False, "message": "Invalid credentials"},
            )
        except Exception as exc:
            logger.exception("Login failed")
            return _error_response(
                state_container,
                exc,
                {"success": False, "error": "Internal server error"},
            )
        return JSONResponse(
            content={
                "success": True,
                "message": "Login successful",
                "user": {"username": user.username},
            }
        )

    @app.post("/api/register")
    async def register(body: RegisterRequest, request: Request) -> JSONResponse:
        """Create a new user account."""
        state_container: AppContainer = request.app.state.container
        try:
            state_container.account_service.register(
                username=body.username, password=body.password, email=body.email
            )
        except UsernameTakenError:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"message": "Username already exists"},
            )
        except Exception as exc:
            logger.exception("Registration failed")
            return _error_response(
                state_container, exc, {"error": "Internal server error"}
            )
        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content={"message": "User registered successfully"},
        )

    return app


def _record_content(payload: DescriptionRecordPayload) -> dict[str, object]:
    return payload.model_dump(mode="json", by_alias=True)


def _error_response(
    state_container: AppContainer, exc: Exception, content: dict[str, object]
) -> JSONResponse:
    """Return a 500 response, adding debug detail in the local environment."""
    body = dict(content)
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            body["debug"] = detail
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body
    )


async def _read_limited(upload: UploadFile, limit: int) -> bytes | None:
    """Read the upload in chunks, returning None once it exceeds limit bytes."""
    if upload.size is not None and upload.size > limit:
        return None
    chunks: list[bytes] = []
    total = 0
    while chunk := await upload.read(UPLOAD_CHUNK_BYTES):
        total += len(chunk)
        if total > limit:
            return None
        chunks.append(chunk)
    return b"".join(chunks)

# services/users/src/users/app.py
"""
Users service: user CRUD endpoints plus the weather, users-by-city and
delete-by-email lookups that the chat tools call.
"""

from typing import Annotated, List, Optional

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from libs.relay_shared.errors import (
    not_found_error,
    service_error,
    unauthorized_error,
    validation_error,
)
from libs.relay_shared.health import run_health_check
from libs.relay_shared.logging import get_logger
from libs.relay_shared.middleware import CorrelationIdMiddleware, MetricsMiddleware
from libs.relay_shared.models import HealthResponse, PaginatedResponse, PaginationParams

from .config import UsersConfig
from .data_service import UserDataService
from .models import DeleteResult, User, UserCreate, UserUpdate, WeatherReport

logger = get_logger(__name__)

VERSION = "1.0.0"


def get_user_service(request: Request) -> UserDataService:
    """
    Dependency provider for UserDataService.
    In tests, this can be overridden to provide a different store.
    """
    return request.app.state.user_service


def get_config(request: Request) -> UsersConfig:
    return request.app.state.config


def register_routes(app: FastAPI) -> None:
    @app.get("/health", response_model=HealthResponse, tags=["users"])
    async def health(service: UserDataService = Depends(get_user_service)):
        """Service health check endpoint. Returns the user count."""
        return run_health_check(lambda: {"user_count": service.count()}, VERSION)

    # --- Collaborator endpoints used by the chat tools ------------------

    @app.get("/getWeatherDetails", response_model=WeatherReport, tags=["tools"])
    async def get_weather_details(
        city: str = Query(..., min_length=1),
        service: UserDataService = Depends(get_user_service),
    ):
        """Return the current temperature for a city."""
        logger.info(f"Weather requested for {city}")
        return WeatherReport(temp=service.weather_for(city))

    @app.get("/getUserByCity", response_model=List[User], tags=["tools"])
    async def get_user_by_city(
        city: str = Query(..., min_length=1),
        service: UserDataService = Depends(get_user_service),
    ):
        """List every user whose location matches the city (case-insensitive)."""
        users = service.get_users_by_city(city)
        logger.info(f"Found {len(users)} users in {city}")
        return users

    @app.get(
        "/deleteUser",
        response_model=DeleteResult,
        response_model_by_alias=True,
        tags=["tools"],
    )
    async def delete_user_by_email(
        email: str = Query(..., min_length=1),
        token: str = Query(...),
        service: UserDataService = Depends(get_user_service),
        config: UsersConfig = Depends(get_config),
    ):
        """
        Delete a user by email.

        Authorization is a single shared-secret equality check on `token`.
        """
        if token != config.delete_token:
            logger.warning("Rejected deleteUser call with invalid token")
            raise unauthorized_error("Invalid delete token")

        try:
            deleted = service.delete_by_email(email)
        except OSError as e:
            logger.error("Failed to persist user deletion", exc_info=e)
            raise service_error(str(e))
        return DeleteResult(deleted_count=deleted)

    # --- CRUD -----------------------------------------------------------

    @app.get("/users", response_model=PaginatedResponse[User], tags=["users"])
    async def list_users(
        pagination: Annotated[PaginationParams, Query()],
        service: UserDataService = Depends(get_user_service),
    ):
        """List users page by page."""
        users = service.list_users(limit=pagination.limit, offset=pagination.offset)
        return PaginatedResponse[User](
            items=users,
            total_count=service.count(),
            limit=pagination.limit,
            offset=pagination.offset,
        )

    @app.post(
        "/users",
        response_model=User,
        status_code=status.HTTP_201_CREATED,
        tags=["users"],
    )
    async def create_user(
        payload: UserCreate,
        service: UserDataService = Depends(get_user_service),
    ):
        try:
            return service.create_user(payload)
        except OSError as e:
            logger.error("Failed to persist new user", exc_info=e)
            raise service_error(str(e))

    @app.get("/users/{user_id}", response_model=User, tags=["users"])
    async def get_user(
        user_id: str,
        service: UserDataService = Depends(get_user_service),
    ):
        try:
            return service.get_user(user_id)
        except ValueError:
            raise not_found_error("user", user_id)

    @app.put("/users/{user_id}", response_model=User, tags=["users"])
    async def update_user(
        user_id: str,
        payload: UserUpdate,
        service: UserDataService = Depends(get_user_service),
    ):
        """Partially update a user; fields left out of the body are unchanged."""
        if not payload.model_fields_set:
            raise validation_error("At least one field must be provided")
        try:
            return service.update_user(user_id, payload)
        except ValueError:
            raise not_found_error("user", user_id)

    @app.delete(
        "/users/{user_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        tags=["users"],
    )
    async def delete_user(
        user_id: str,
        service: UserDataService = Depends(get_user_service),
    ):
        try:
            service.delete_user(user_id)
        except ValueError:
            raise not_found_error("user", user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(
    config: Optional[UsersConfig] = None,
    service: Optional[UserDataService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or UsersConfig()

    app = FastAPI(
        title="Users Service",
        description="User management API and chat tool collaborators",
        version=VERSION,
    )
    app.state.config = config
    app.state.user_service = service or UserDataService(config.users_data_path)

    app.add_middleware(MetricsMiddleware, exclude_paths=["/health"])
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app

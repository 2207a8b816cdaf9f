"""
factory - Composition root for the meal-ordering backend.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (REST, CLI) and the tests call this factory to get
fully configured services.

Usage:
    from messhub.factory import ServiceFactory
    from messhub.infrastructure.config import Settings

    factory = ServiceFactory(Settings.from_env())
    await factory.initialize()  # one-time startup

    orders = factory.create_order_service()
    order = await orders.create(identity.account_id, request)
"""

from __future__ import annotations

import logging

from messhub.application.services.access import AccessGuard
from messhub.application.services.authentication import AuthenticationService
from messhub.application.services.contact import ContactService
from messhub.application.services.meal import MealService
from messhub.application.services.mess import MessService
from messhub.application.services.order import OrderService
from messhub.application.services.owner import OwnerService
from messhub.application.services.profile import ProfileService
from messhub.application.services.review import ReviewService
from messhub.application.services.tokens import TokenService
from messhub.application.services.users import UserAdminService
from messhub.infrastructure.config import Settings
from messhub.infrastructure.persistence.account_repo import SQLiteAccountRepository
from messhub.infrastructure.persistence.connection import AsyncSQLiteConnection
from messhub.infrastructure.persistence.contact_repo import SQLiteContactRepository
from messhub.infrastructure.persistence.meal_repo import SQLiteMealRepository
from messhub.infrastructure.persistence.mess_repo import SQLiteMessRepository
from messhub.infrastructure.persistence.migrations import run_migrations
from messhub.infrastructure.persistence.order_repo import SQLiteOrderRepository
from messhub.infrastructure.persistence.profile_repo import (
    CUSTOMER_PROFILES,
    OWNER_PROFILES,
    SQLiteProfileRepository,
)
from messhub.infrastructure.persistence.review_repo import SQLiteReviewRepository

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Wires every repository and service together.

    Call initialize() once at startup, then create services as needed.
    Services are cheap: repositories hold only the connection provider.
    """

    def __init__(self, config: Settings):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)
        self._tokens = TokenService(
            jwt_secret=config.jwt_secret,
            jwt_expiry_days=config.jwt_expiry_days,
            jwt_algorithm=config.jwt_algorithm,
        )
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    async def initialize(self) -> None:
        """One-time startup: run migrations. Safe to call more than once."""
        logger.info("Initializing ServiceFactory (db=%s)...", self._config.db_path)
        await run_migrations(self._connection)
        self._initialized = True
        logger.info("ServiceFactory ready")

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def create_token_service(self) -> TokenService:
        return self._tokens

    def create_access_guard(self) -> AccessGuard:
        return AccessGuard(self._tokens)

    def create_authentication_service(self) -> AuthenticationService:
        self._ensure_initialized()
        return AuthenticationService(
            account_repo=SQLiteAccountRepository(self._connection),
            tokens=self._tokens,
        )

    # ------------------------------------------------------------------
    # Domain services
    # ------------------------------------------------------------------

    def create_profile_service(self) -> ProfileService:
        self._ensure_initialized()
        return ProfileService(
            customer_repo=SQLiteProfileRepository(self._connection, CUSTOMER_PROFILES),
            owner_repo=SQLiteProfileRepository(self._connection, OWNER_PROFILES),
        )

    def create_mess_service(self) -> MessService:
        self._ensure_initialized()
        return MessService(mess_repo=SQLiteMessRepository(self._connection))

    def create_meal_service(self) -> MealService:
        self._ensure_initialized()
        return MealService(
            meal_repo=SQLiteMealRepository(self._connection),
            mess_repo=SQLiteMessRepository(self._connection),
        )

    def create_order_service(self) -> OrderService:
        self._ensure_initialized()
        return OrderService(
            order_repo=SQLiteOrderRepository(self._connection),
            meal_repo=SQLiteMealRepository(self._connection),
            mess_repo=SQLiteMessRepository(self._connection),
            trust_client_prices=self._config.trust_client_prices,
            enforce_status_transitions=self._config.enforce_status_transitions,
        )

    def create_review_service(self) -> ReviewService:
        self._ensure_initialized()
        return ReviewService(
            review_repo=SQLiteReviewRepository(self._connection),
            mess_repo=SQLiteMessRepository(self._connection),
        )

    def create_contact_service(self) -> ContactService:
        self._ensure_initialized()
        return ContactService(
            contact_repo=SQLiteContactRepository(self._connection),
            account_repo=SQLiteAccountRepository(self._connection),
        )

    def create_user_admin_service(self) -> UserAdminService:
        self._ensure_initialized()
        return UserAdminService(
            account_repo=SQLiteAccountRepository(self._connection),
            customer_repo=SQLiteProfileRepository(self._connection, CUSTOMER_PROFILES),
            owner_repo=SQLiteProfileRepository(self._connection, OWNER_PROFILES),
        )

    def create_owner_service(self) -> OwnerService:
        self._ensure_initialized()
        return OwnerService(
            mess_repo=SQLiteMessRepository(self._connection),
            meal_repo=SQLiteMealRepository(self._connection),
            order_repo=SQLiteOrderRepository(self._connection),
            review_repo=SQLiteReviewRepository(self._connection),
        )

    def create_account_repository(self) -> SQLiteAccountRepository:
        """Direct repository access for the CLI (admin bootstrap)."""
        return SQLiteAccountRepository(self._connection)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import FastAPI

from marketplace.adapters.inbound.web.fastapi_app import create_app
from marketplace.adapters.outbound.bcrypt_credentials import BcryptCredentialVerifier
from marketplace.adapters.outbound.fixed_window_rate_limit import FixedWindowRateLimiter
from marketplace.adapters.outbound.json_file_documents import JsonFileDocumentStore
from marketplace.adapters.outbound.logging_events import LoggingEventPublisher
from marketplace.adapters.outbound.jwt_tokens import JwtTokenIssuer
from marketplace.config import Settings
from marketplace.core.domain.model.product import demo_products
from marketplace.core.domain.service.admin_auth_service import (
    AdminAuthDeps,
    AdminAuthService,
)
from marketplace.core.domain.service.catalog_service import CatalogDeps, CatalogService
from marketplace.core.domain.service.order_admin_service import (
    OrderAdminDeps,
    OrderAdminService,
)
from marketplace.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from marketplace.core.ports.outbound.documents import DocumentName, DocumentStore
from marketplace.core.ports.outbound.events import EventPublisher

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class UseCases:
    place_order: PlaceOrderService
    catalog: CatalogService
    order_admin: OrderAdminService
    admin_auth: AdminAuthService


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def initialize_documents(documents: DocumentStore, seed_demo: bool = True) -> None:
    seed = tuple(p.to_dict() for p in demo_products()) if seed_demo else ()
    documents.ensure(DocumentName.PRODUCTS, seed)
    documents.ensure(DocumentName.ORDERS, ())


def build_usecases(
    settings: Settings,
    documents: DocumentStore | None = None,
    events: EventPublisher | None = None,
) -> UseCases:
    if documents is None:
        documents = JsonFileDocumentStore(settings.data_dir)
    if events is None:
        events = LoggingEventPublisher()
    credentials = BcryptCredentialVerifier(
        username_hash=settings.admin_username_hash,
        password_hash=settings.admin_password_hash,
    )
    tokens = JwtTokenIssuer(
        secret=settings.jwt_secret.get_secret_value(),
        ttl_seconds=settings.token_ttl_seconds,
    )

    return UseCases(
        place_order=PlaceOrderService(PlaceOrderDeps(documents=documents, events=events)),
        catalog=CatalogService(CatalogDeps(documents=documents)),
        order_admin=OrderAdminService(
            OrderAdminDeps(documents=documents, events=events)
        ),
        admin_auth=AdminAuthService(AdminAuthDeps(credentials=credentials, tokens=tokens)),
    )


def build_app(
    settings: Settings,
    documents: DocumentStore | None = None,
    events: EventPublisher | None = None,
) -> FastAPI:
    if documents is None:
        documents = JsonFileDocumentStore(settings.data_dir)
    initialize_documents(documents, seed_demo=settings.seed_demo_products)

    usecases = build_usecases(settings, documents=documents, events=events)
    return create_app(
        usecases.place_order,
        usecases.catalog,
        usecases.order_admin,
        usecases.admin_auth,
        limiter=FixedWindowRateLimiter(
            window_seconds=settings.rate_limit_window_seconds,
            limit=settings.rate_limit_max_requests,
        ),
        login_limiter=FixedWindowRateLimiter(
            window_seconds=settings.login_rate_limit_window_seconds,
            limit=settings.login_rate_limit_max_requests,
        ),
        max_body_bytes=settings.max_body_bytes,
        public_dir=settings.public_dir,
        admin_dir=settings.admin_dir,
    )


def create_asgi_app() -> FastAPI:
    settings = Settings()
    configure_logging(settings.log_level)
    return build_app(settings)

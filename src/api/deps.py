import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.catalog_http import ModrinthCatalogClient
from src.adapters.clock import SystemClock
from src.adapters.local_storage import LocalObjectStore
from src.adapters.memory_auth import InMemoryAuthProvider
from src.adapters.memory_rows import InMemoryRowStore
from src.components.attachments import AttachmentManager, kinds_from_rules
from src.core.ports import AuthProviderPort, CatalogPort, ObjectStorePort, RowStorePort
from src.domain.entities import User
from src.rules.loader import load_rules
from src.rules.models import Rules

FORUM_TABLES = ["forums", "threads", "replies"]


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("FORUM_DATA_DIR", "./data"))
        self.storage_dir = self.data_dir / "storage"
        self.public_base_url = os.environ.get(
            "FORUM_PUBLIC_BASE_URL", "http://localhost:8000/media"
        )
        self.rules_path = Path(os.environ.get("FORUM_RULES_PATH", self.base_dir / "rules.yaml"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Adapters ---
_object_store_instance: LocalObjectStore | None = None
_row_store_instance: InMemoryRowStore | None = None
_auth_instance: InMemoryAuthProvider | None = None


def get_object_store(settings: Settings = Depends(get_settings)) -> ObjectStorePort:
    """Get object store singleton."""
    global _object_store_instance
    if _object_store_instance is None:
        _object_store_instance = LocalObjectStore(settings.storage_dir, settings.public_base_url)
    return _object_store_instance


def get_row_store() -> RowStorePort:
    """Get row store singleton."""
    global _row_store_instance
    if _row_store_instance is None:
        _row_store_instance = InMemoryRowStore(FORUM_TABLES)
    return _row_store_instance


def get_auth_provider() -> AuthProviderPort:
    """Get auth provider singleton."""
    global _auth_instance
    if _auth_instance is None:
        _auth_instance = InMemoryAuthProvider()
    return _auth_instance


def get_catalog(rules: Rules = Depends(get_rules)) -> CatalogPort:
    return ModrinthCatalogClient(
        base_url=rules.catalog.base_url,
        user_agent=rules.catalog.user_agent,
        timeout=rules.catalog.timeout_seconds,
    )


def get_clock() -> SystemClock:
    return SystemClock()


# --- Component Services ---
def get_attachment_manager(
    storage: ObjectStorePort = Depends(get_object_store),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> AttachmentManager:
    return AttachmentManager(storage=storage, clock=clock, kinds=kinds_from_rules(rules.uploads))


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    auth: AuthProviderPort = Depends(get_auth_provider),
) -> User | None:
    # Cookie first (HttpOnly), then Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]
    return auth.get_current_user(token)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "not_authenticated",
                "message": "Please sign in first",
                "sign_in": "/auth",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user

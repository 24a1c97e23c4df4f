"""
Administration endpoints (Admin only):
  GET    /admin/stats                 – Total users, stores and ratings
  GET    /admin/users                 – List users (filter by role / text)
  POST   /admin/users                 – Create a user with any role
  PUT    /admin/users/{id}/role       – Change a user's role
  DELETE /admin/users/{id}            – Delete a user (ratings cascade)
  POST   /admin/stores                – Create a store
  PUT    /admin/stores/{id}           – Update a store
  DELETE /admin/stores/{id}           – Delete a store (ratings cascade)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from rating_platform.core.authorization import ADMIN_ONLY
from rating_platform.core.dependencies import (
    db_dependency,
    get_session_store,
    require_roles,
)
from rating_platform.core.session_store import SessionStore
from rating_platform.models.session import Principal
from rating_platform.models.user import UserRole
from rating_platform.schemas.store import (
    DashboardStats,
    StoreCreate,
    StoreResponse,
    StoreUpdate,
)
from rating_platform.schemas.user import RoleUpdate, UserCreate, UserResponse
from rating_platform.services.stats_service import StatsService
from rating_platform.services.store_service import StoreService
from rating_platform.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["Admin"])

require_admin = require_roles(ADMIN_ONLY)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("/stats", response_model=DashboardStats, summary="Platform totals")
def admin_stats(
    conn=Depends(db_dependency, scope="function"),
    _: Principal = Depends(require_admin),
):
    return StatsService(conn).dashboard()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users", response_model=list[UserResponse], summary="List users")
def list_users(
    role: Optional[UserRole] = Query(None),
    search: Optional[str] = Query(None, description="Match on name, email or address"),
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
    _: Principal = Depends(require_admin),
):
    return UserService(conn, store).list_users(role=role, search=search)


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user with any role",
)
def create_user(
    body: UserCreate,
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
    _: Principal = Depends(require_admin),
):
    return UserService(conn, store).create_user(body)


@router.put(
    "/users/{user_id}/role",
    response_model=UserResponse,
    summary="Change a user's role",
)
def set_role(
    user_id: str,
    body: RoleUpdate,
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
    _: Principal = Depends(require_admin),
):
    """Sessions already issued to the user keep their old role until they end."""
    return UserService(conn, store).set_role(user_id, body.role)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
def delete_user(
    user_id: str,
    conn=Depends(db_dependency, scope="function"),
    store: SessionStore = Depends(get_session_store),
    _: Principal = Depends(require_admin),
):
    """
    Removes the user and their ratings, detaches stores they owned and ends
    all of their sessions.
    """
    UserService(conn, store).delete_user(user_id)


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

@router.post(
    "/stores",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a store",
)
def create_store(
    body: StoreCreate,
    conn=Depends(db_dependency, scope="function"),
    _: Principal = Depends(require_admin),
):
    return StoreService(conn).create_store(body)


@router.put("/stores/{store_id}", response_model=StoreResponse, summary="Update a store")
def update_store(
    store_id: int,
    body: StoreUpdate,
    conn=Depends(db_dependency, scope="function"),
    _: Principal = Depends(require_admin),
):
    return StoreService(conn).update_store(store_id, body)


@router.delete(
    "/stores/{store_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a store and its ratings",
)
def delete_store(
    store_id: int,
    conn=Depends(db_dependency, scope="function"),
    _: Principal = Depends(require_admin),
):
    StoreService(conn).delete_store(store_id)

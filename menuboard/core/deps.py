"""
Shared route dependencies: current user, ownership checks and the
injected broadcast/event/storage collaborators.
"""
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from menuboard.core.errors import AccessDenied, NotFound, Unauthenticated
from menuboard.core.security import user_id_from_token
from menuboard.db.session import get_db
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User
from menuboard.services.broadcast import Broadcaster
from menuboard.services.events import MutationEvents
from menuboard.services.media import MediaStorage

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user, or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Access token required")

    user_id = user_id_from_token(credentials.credentials)
    if not user_id:
        raise Unauthenticated("Invalid or expired token")

    try:
        user = db.get(User, UUID(user_id))
    except ValueError:
        user = None
    if user is None:
        raise Unauthenticated("Invalid or expired token")
    return user


def require_owner(restaurant: Restaurant | None, user: User) -> Restaurant:
    """404 when the restaurant is missing, 403 when the caller does not own it."""
    if restaurant is None:
        raise NotFound("Restaurant not found")
    if not restaurant.is_owned_by(user.id):
        raise AccessDenied()
    return restaurant


def get_owned_restaurant(
    restaurant_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Restaurant:
    """Path dependency for ``/{restaurant_id}`` routes."""
    return require_owner(db.get(Restaurant, restaurant_id), current_user)


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_events(broadcaster: Broadcaster = Depends(get_broadcaster)) -> MutationEvents:
    return MutationEvents(broadcaster)


def get_media_storage(request: Request) -> MediaStorage:
    return request.app.state.media_storage

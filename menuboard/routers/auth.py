"""
Authentication router with register, login and current-user endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menuboard.core.deps import get_current_user
from menuboard.core.errors import Conflict, Unauthenticated
from menuboard.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from menuboard.db.session import get_db
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User
from menuboard.schemas.auth import (
    AuthResponse,
    RestaurantRef,
    UserLogin,
    UserRegister,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def user_response(user: User) -> UserResponse:
    restaurant = user.restaurant
    restaurant_ref = None
    if restaurant is not None:
        restaurant_ref = RestaurantRef(
            id=restaurant.id,
            name=restaurant.name,
            owner=restaurant.owner_id,
            menus=[menu.id for menu in restaurant.menus],
            items=[item.id for item in restaurant.items],
            displays=[display.id for display in restaurant.displays],
        )
    return UserResponse(id=user.id, email=user.email, restaurant=restaurant_ref)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Register a new owner together with their restaurant.
    Returns an access token on success.
    """
    existing_user = db.query(User).filter(User.email == user_data.email).first()
    if existing_user:
        raise Conflict("User already exists")

    # User and restaurant are written in one transaction
    new_user = User(
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
    )
    new_user.restaurant = Restaurant(name=user_data.restaurant_name)
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise Conflict("User already exists")
    db.refresh(new_user)

    token = create_access_token(subject=str(new_user.id))
    return AuthResponse(token=token, user=user_response(new_user))


@router.post("/login", response_model=AuthResponse)
def login(user_data: UserLogin, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Authenticate user and return a token.
    """
    user = db.query(User).filter(User.email == user_data.email).first()
    if not user or not verify_password(user_data.password, user.hashed_password):
        raise Unauthenticated("Invalid credentials")

    token = create_access_token(subject=str(user.id))
    return AuthResponse(token=token, user=user_response(user))


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """
    Get the current authenticated user's profile.
    """
    return user_response(current_user)

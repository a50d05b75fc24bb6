# barberbook/routers/users_routes.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from barberbook.auth import get_current_user, hash_password, verify_password
from barberbook.config import get_settings
from barberbook.deps import get_repository, require_role
from barberbook.models import Barber, User
from barberbook.repository import Repository
from barberbook.schemas import UserCreate, UserPublic, UserRole, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    repo: Repository = Depends(get_repository),
):
    # 1) Admins are seeded, never self-registered
    if user.role == UserRole.admin:
        raise HTTPException(status_code=403, detail="Cannot register as admin")

    # 2) Check if email already exists
    if repo.get_user_by_email(user.email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 3) Create user and, for barbers, an empty profile
    with repo.atomic():
        db_user = repo.add_user(
            User(
                name=user.name,
                email=user.email,
                phone=user.phone,
                password_hash=hash_password(user.password),
                role=user.role.value,
            )
        )
        if user.role == UserRole.barber:
            repo.save_barber(
                Barber(
                    user_id=db_user.id,
                    name=user.name,
                    phone=user.phone,
                    slot_duration=get_settings().DEFAULT_SLOT_DURATION,
                )
            )

    logger.info(f"Registered {db_user.role} {db_user.email}")
    return db_user


@router.get("/users", response_model=List[UserPublic])
def list_users(
    role: Optional[UserRole] = None,
    repo: Repository = Depends(get_repository),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return repo.list_users(role.value if role else None)


@router.patch("/users/{user_id}", response_model=UserPublic)
def update_user(
    user_id: int,
    update: UserUpdate,
    repo: Repository = Depends(get_repository),
    current_user: dict = Depends(get_current_user),
):
    is_admin = current_user["role"] == "admin"
    if current_user["id"] != user_id and not is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")

    db_user = repo.get_user(user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    if update.email and update.email != db_user.email:
        if repo.get_user_by_email(update.email) is not None:
            raise HTTPException(status_code=409, detail="Email already registered")
        db_user.email = update.email

    if update.new_password:
        # admins may reset someone else's password without the old one
        if not is_admin or current_user["id"] == user_id:
            if not update.old_password or not verify_password(update.old_password, db_user.password_hash):
                raise HTTPException(status_code=400, detail="Old password is incorrect")
        db_user.password_hash = hash_password(update.new_password)

    if update.name is not None:
        db_user.name = update.name
    if update.phone is not None:
        db_user.phone = update.phone

    with repo.atomic():
        db_user = repo.save_user(db_user)
        barber = repo.get_barber_by_user(db_user.id)
        if barber is not None:
            barber.name = db_user.name
            barber.phone = db_user.phone
            repo.save_barber(barber)

    logger.info(f"Updated user {db_user.id}")
    return db_user

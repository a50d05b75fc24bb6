# barberbook/routers/auth_routes.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from barberbook.auth import verify_password, create_access_token
from barberbook.deps import get_repository
from barberbook.repository import Repository
from barberbook.schemas import Token

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    repo: Repository = Depends(get_repository),
):
    user = repo.get_user_by_email(form_data.username)

    if user is None or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email})
    return {"access_token": token, "token_type": "bearer"}

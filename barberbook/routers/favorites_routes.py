# barberbook/routers/favorites_routes.py

from typing import List

from fastapi import APIRouter, Depends

from barberbook.auth import get_current_user
from barberbook.deps import get_favorite_service, require_role
from barberbook.favorites import FavoriteService
from barberbook.schemas import BarberPublic, FavoriteToggleResult

router = APIRouter(
    prefix="/favorites",
    tags=["favorites"],
)


@router.get("", response_model=List[BarberPublic])
def list_favorites(
    favorites: FavoriteService = Depends(get_favorite_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user")
    return favorites.favorites(current_user["id"])


@router.get("/ids", response_model=List[int])
def list_favorite_ids(
    favorites: FavoriteService = Depends(get_favorite_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user")
    return favorites.favorite_ids(current_user["id"])


@router.post("/{barber_id}/toggle", response_model=FavoriteToggleResult)
def toggle_favorite(
    barber_id: int,
    favorites: FavoriteService = Depends(get_favorite_service),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "user")
    return {
        "barber_id": barber_id,
        "is_favorite": favorites.toggle(current_user["id"], barber_id),
    }

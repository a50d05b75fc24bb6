# barberbook/favorites.py
"""Customers' favorite barbers."""
import logging
from typing import List

from barberbook.barbers import BarberService
from barberbook.models import Barber
from barberbook.repository import Repository

logger = logging.getLogger(__name__)


class FavoriteService:
    def __init__(self, repo: Repository):
        self.repo = repo
        self.barbers = BarberService(repo)

    def favorite_ids(self, user_id: int) -> List[int]:
        return [f.barber_id for f in self.repo.list_favorites(user_id)]

    def favorites(self, user_id: int) -> List[Barber]:
        # barbers removed since being favorited are skipped
        found = (self.repo.get_barber(barber_id) for barber_id in self.favorite_ids(user_id))
        return [b for b in found if b is not None]

    def toggle(self, user_id: int, barber_id: int) -> bool:
        """Favorite or unfavorite a barber. Returns True if it is now a favorite."""
        self.barbers.get(barber_id)
        is_favorite = self.repo.toggle_favorite(user_id, barber_id)
        logger.info(
            f"User {user_id} {'added' if is_favorite else 'removed'} barber {barber_id} "
            f"{'to' if is_favorite else 'from'} favorites"
        )
        return is_favorite

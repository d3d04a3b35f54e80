from favorites_api.models.favorite import Favorite

__all__ = ["Favorite"]

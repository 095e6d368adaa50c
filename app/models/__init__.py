"""SQLAlchemy models.

All models are imported here so that ``Base.metadata`` knows every table
before ``create_all`` runs. If you add a new model, import it in this file.
"""

from app.models.favorite import Favorite
from app.models.property import Property
from app.models.seasonal_price import SeasonalPrice
from app.models.user import User

__all__ = [
    "Favorite",
    "Property",
    "SeasonalPrice",
    "User",
]

"""
Route modules for the API.

Each module exports a FastAPI APIRouter with endpoints
for a specific domain/feature.
"""

from api.routes import feedback
from api.routes import health
from api.routes import indices
from api.routes import suggestions
from api.routes import tasks

__all__ = ["feedback", "health", "indices", "suggestions", "tasks"]

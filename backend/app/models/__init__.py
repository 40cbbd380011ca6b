"""
TIL Backend — ORM Models
=========================

What:  SQLAlchemy declarative models for every table.
Who:   Services query them; Alembic and the test fixtures read Base.metadata.

All models are imported here so that importing `app.models` registers the
full schema with Base.metadata before create_all or autogenerate runs.
"""

from app.models.user import User  # noqa: F401
from app.models.acronym import Acronym  # noqa: F401
from app.models.category import Category, AcronymCategoryPivot  # noqa: F401
from app.models.token import Token  # noqa: F401

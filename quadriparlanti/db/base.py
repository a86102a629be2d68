# /quadriparlanti/db/base.py

# Central registry for every SQLAlchemy model, so that `Base.metadata` knows
# about all tables when Alembic or the test suite creates the schema.

from .base_class import Base

from .models.user_model import AuthAccount, User
from .models.work_models import Work, WorkAttachment, WorkLink, WorkReview

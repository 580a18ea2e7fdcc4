"""Database base for DDD architecture"""

from sqlalchemy.orm import declarative_base

# Keep Base for ORM models
Base = declarative_base()

# NOTE: All model classes live in infrastructure/orm/ so domain code never
# imports SQLAlchemy.

"""
Base Model Mixins
"""
from sqlalchemy import Column, Integer

class IntegerPKMixin:
    """Mixin for store-generated sequential primary key"""
    id = Column(Integer, primary_key=True, autoincrement=True)

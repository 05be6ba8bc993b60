"""
Setting model: string key/value pairs (markup, production constants).
"""

from sqlalchemy import Column, String, Text

from .base import BaseModel


class Setting(BaseModel):
    """
    Application setting.

    Attributes:
        key: Setting name (e.g., "MarkupPercent", "ProductionLayersPerTier")
        value: Raw string value; parsed by the consumer
    """

    __tablename__ = "settings"

    key = Column(String(100), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=False)

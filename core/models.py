"""
Core — Base Models

Reusable abstract models shared by the inventory and operations apps.

@file core/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


# ---------------------------------------------------------------------------
# Abstract base models (mixins)
# ---------------------------------------------------------------------------

class TimestampMixin(models.Model):
    """Adds created_at / updated_at to any model."""

    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )
    updated_at = models.DateTimeField(
        _('updated at'), auto_now=True,
    )

    class Meta:
        abstract = True


class BaseModel(TimestampMixin):
    """
    Standard base for all StockFlow models.
    Numeric auto PK (DEFAULT_AUTO_FIELD) + timestamps.
    """

    class Meta:
        abstract = True

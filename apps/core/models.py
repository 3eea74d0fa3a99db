"""
Abstract base models for Storefront applications
"""
from django.db import models


class TimestampedModel(models.Model):
    """
    Abstract model with a creation timestamp.
    """
    created_at = models.DateTimeField(auto_now_add=True, null=True)

    class Meta:
        abstract = True

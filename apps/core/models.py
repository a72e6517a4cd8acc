"""
Core base model mixins shared by the catalog, member and booking apps.
"""
import uuid
from django.db import models


class UUIDModel(models.Model):
    """Primary key is a UUID, not an auto-incrementing integer."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """Automatically tracks creation and last-update timestamps."""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ActiveQuerySet(models.QuerySet):
    """Catalog records are retired by flipping is_active, never deleted."""
    def active(self):
        return self.filter(is_active=True)

    def retired(self):
        return self.filter(is_active=False)


class BaseModel(UUIDModel, TimestampedModel):
    """
    Convenience base combining UUID pk + timestamps + an is_active flag.
    Use this for catalog and member records.
    """
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        abstract = True

    def retire(self):
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])

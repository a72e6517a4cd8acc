"""
Profile model: the local record of a member.

Authentication lives with the external identity provider; `auth_subject`
is that provider's user id and is the canonical identity key. The booking
engine trusts whatever profile id the presentation layer hands it.
"""
from django.db import models
from apps.core.models import BaseModel


class Profile(BaseModel):
    auth_subject = models.CharField(
        max_length=255, unique=True,
        help_text='User id issued by the identity provider',
    )
    full_name = models.CharField(max_length=120)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.CharField(max_length=255, blank=True)
    birth_date = models.DateField(null=True, blank=True)

    class Meta:
        verbose_name = 'Profile'
        verbose_name_plural = 'Profiles'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name} <{self.email or 'no email'}>"

    @classmethod
    def get_or_create_for_subject(cls, auth_subject, full_name, email=''):
        """
        Look up the profile for an identity-provider user, creating it on
        first sight. Keeps the most recent name and email.
        """
        profile, created = cls.objects.get_or_create(
            auth_subject=auth_subject,
            defaults={'full_name': full_name, 'email': email},
        )
        if not created:
            update_fields = []
            if full_name and profile.full_name != full_name:
                profile.full_name = full_name
                update_fields.append('full_name')
            if email and profile.email != email:
                profile.email = email
                update_fields.append('email')
            if update_fields:
                update_fields.append('updated_at')
                profile.save(update_fields=update_fields)
        return profile, created

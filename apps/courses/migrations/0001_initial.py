import uuid

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Course',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('name', models.CharField(max_length=150)),
                ('description', models.TextField(blank=True)),
                ('course_type', models.CharField(choices=[('gym', 'Machine gym (open access)'), ('yoga', 'Yoga / Pilates (small group)'), ('personal', 'Personal training (one-on-one)')], db_index=True, max_length=10)),
                ('duration_minutes', models.PositiveIntegerField(blank=True, help_text='Session length. Not used by open-access courses.', null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('capacity', models.PositiveIntegerField(blank=True, help_text='Maximum participants per slot (small-group courses only).', null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('price', models.DecimalField(decimal_places=0, max_digits=8)),
                ('is_monthly', models.BooleanField(default=False, help_text='Monthly plan rather than per session')),
                ('sessions_per_month', models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Course',
                'verbose_name_plural': 'Courses',
                'ordering': ['course_type', 'name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(models.Q(('capacity__gte', 1), ('capacity__isnull', False), ('course_type', 'yoga')), models.Q(models.Q(('course_type', 'yoga'), _negated=True), ('capacity__isnull', True)), _connector='OR'), name='ck_course_capacity_matches_type'),
                    models.CheckConstraint(condition=models.Q(('course_type', 'gym'), models.Q(('duration_minutes__gte', 1), ('duration_minutes__isnull', False)), _connector='OR'), name='ck_course_session_has_duration'),
                ],
            },
        ),
    ]

import uuid

import apps.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Service',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(decimal_places=2, max_digits=7, validators=[apps.core.validators.validate_service_price])),
                ('duration_minutes', models.PositiveIntegerField(validators=[apps.core.validators.validate_service_duration])),
                ('category', models.CharField(choices=[('haircut', 'Haircut'), ('beard', 'Beard'), ('combo', 'Combo'), ('coloring', 'Coloring'), ('treatment', 'Treatment')], default='haircut', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Service',
                'verbose_name_plural': 'Services',
                'db_table': 'services',
                'ordering': ['category', 'name'],
                'indexes': [models.Index(fields=['category', 'is_active'], name='services_category_active_idx')],
            },
        ),
    ]

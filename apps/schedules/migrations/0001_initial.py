import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('barbers', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WorkingHours',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('weekday', models.PositiveSmallIntegerField(choices=[(0, 'Sunday'), (1, 'Monday'), (2, 'Tuesday'), (3, 'Wednesday'), (4, 'Thursday'), (5, 'Friday'), (6, 'Saturday')])),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('barber', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='working_hours', to='barbers.barber')),
            ],
            options={
                'verbose_name': 'Working Hours',
                'verbose_name_plural': 'Working Hours',
                'db_table': 'working_hours',
                'ordering': ['weekday', 'start_time'],
                'indexes': [models.Index(fields=['barber', 'weekday'], name='working_hours_barber_day_idx')],
                'constraints': [models.CheckConstraint(check=models.Q(('start_time__lt', models.F('end_time'))), name='working_hours_start_before_end')],
            },
        ),
        migrations.CreateModel(
            name='Closure',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(db_index=True)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('barber', models.ForeignKey(blank=True, help_text='Leave empty to close the whole shop', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='closures', to='barbers.barber')),
            ],
            options={
                'verbose_name': 'Closure',
                'verbose_name_plural': 'Closures',
                'db_table': 'closures',
                'ordering': ['date'],
            },
        ),
    ]

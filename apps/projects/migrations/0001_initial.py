from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Manager',
            fields=[
                ('nric', models.CharField(max_length=9, primary_key=True, serialize=False)),
                ('name', models.CharField(blank=True, max_length=150)),
            ],
            options={
                'verbose_name': 'Manager',
                'verbose_name_plural': 'Managers',
                'ordering': ['nric'],
            },
        ),
        migrations.CreateModel(
            name='Project',
            fields=[
                ('name', models.CharField(max_length=150, primary_key=True, serialize=False)),
                ('neighbourhood', models.CharField(max_length=150)),
                ('open_date', models.DateField()),
                ('close_date', models.DateField()),
                ('officer_slots', models.PositiveSmallIntegerField(default=0, help_text='Remaining number of officers that can still be approved.')),
                ('visible', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('manager', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='projects', to='projects.manager')),
            ],
            options={
                'verbose_name': 'Project',
                'verbose_name_plural': 'Projects',
                'ordering': ['open_date', 'name'],
                'indexes': [models.Index(fields=['manager', 'open_date', 'close_date'], name='project_manager_period_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('close_date__gte', models.F('open_date'))), name='project_valid_period')],
            },
        ),
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_type', models.CharField(choices=[('TwoRoom', '2-Room'), ('ThreeRoom', '3-Room')], max_length=16)),
                ('total_units', models.PositiveIntegerField(default=0)),
                ('available_units', models.PositiveIntegerField(default=0)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rooms', to='projects.project')),
            ],
            options={
                'verbose_name': 'Room',
                'verbose_name_plural': 'Rooms',
                'ordering': ['project', 'room_type'],
                'constraints': [
                    models.UniqueConstraint(fields=('project', 'room_type'), name='room_type_unique_per_project'),
                    models.CheckConstraint(condition=models.Q(('available_units__lte', models.F('total_units'))), name='room_available_within_total'),
                    models.CheckConstraint(condition=models.Q(('available_units__gte', 0)), name='room_available_non_negative'),
                ],
            },
        ),
    ]

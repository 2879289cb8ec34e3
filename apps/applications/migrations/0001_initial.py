import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Applicant',
            fields=[
                ('nric', models.CharField(max_length=9, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=150)),
                ('age', models.PositiveSmallIntegerField()),
                ('is_married', models.BooleanField(default=False)),
                ('chosen_room_type', models.CharField(blank=True, choices=[('TwoRoom', '2-Room'), ('ThreeRoom', '3-Room')], max_length=16)),
                ('status', models.CharField(blank=True, choices=[('PENDING', 'Pending'), ('SUCCESSFUL', 'Successful'), ('UNSUCCESSFUL', 'Unsuccessful'), ('BOOKED', 'Booked'), ('PENDING_WITHDRAWAL', 'Pending withdrawal')], max_length=20)),
                ('status_before_withdrawal', models.CharField(blank=True, choices=[('PENDING', 'Pending'), ('SUCCESSFUL', 'Successful'), ('UNSUCCESSFUL', 'Unsuccessful'), ('BOOKED', 'Booked'), ('PENDING_WITHDRAWAL', 'Pending withdrawal')], help_text='Status recorded when the withdrawal was requested.', max_length=20)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('applied_project', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='applicants', to='projects.project')),
            ],
            options={
                'verbose_name': 'Applicant',
                'verbose_name_plural': 'Applicants',
                'ordering': ['nric'],
                'indexes': [models.Index(fields=['applied_project', 'status'], name='applicant_project_status_idx')],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            ('status__in', ['', 'UNSUCCESSFUL']),
                            models.Q(('applied_project__isnull', False), models.Q(('chosen_room_type', ''), _negated=True)),
                            _connector='OR',
                        ),
                        name='applicant_live_application_has_project',
                    ),
                ],
            },
        ),
    ]

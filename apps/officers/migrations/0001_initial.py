import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('applications', '0001_initial'),
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Officer',
            fields=[
                ('applicant', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='officer_role', serialize=False, to='applications.applicant')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Officer',
                'verbose_name_plural': 'Officers',
                'ordering': ['applicant'],
            },
        ),
        migrations.CreateModel(
            name='OfficerRegistration',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected')], default='PENDING', max_length=16)),
                ('requested_at', models.DateTimeField()),
                ('decided_at', models.DateTimeField(blank=True, null=True)),
                ('decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='officer_decisions', to='projects.manager')),
                ('officer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registrations', to='officers.officer')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='officer_registrations', to='projects.project')),
            ],
            options={
                'verbose_name': 'Officer registration',
                'verbose_name_plural': 'Officer registrations',
                'ordering': ['requested_at'],
                'indexes': [models.Index(fields=['project', 'status'], name='officer_reg_project_status_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'PENDING')), fields=('officer',), name='officer_single_pending_registration')],
            },
        ),
    ]

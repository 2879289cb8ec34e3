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
            name='Enquiry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('message', models.TextField()),
                ('reply', models.TextField(blank=True, null=True)),
                ('replied_by', models.CharField(blank=True, help_text='NRIC of the manager or officer who replied.', max_length=9)),
                ('created_at', models.DateTimeField()),
                ('replied_at', models.DateTimeField(blank=True, null=True)),
                ('applicant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='enquiries', to='applications.applicant')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='enquiries', to='projects.project')),
            ],
            options={
                'verbose_name': 'Enquiry',
                'verbose_name_plural': 'Enquiries',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['project', 'created_at'], name='enquiry_project_created_idx'),
                    models.Index(fields=['applicant', 'created_at'], name='enquiry_applicant_created_idx'),
                ],
            },
        ),
    ]

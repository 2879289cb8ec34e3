from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('projects', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SavedProjectFilter',
            fields=[
                ('nric', models.CharField(max_length=9, primary_key=True, serialize=False)),
                ('neighbourhood', models.CharField(blank=True, max_length=150)),
                ('room_type', models.CharField(blank=True, choices=[('TwoRoom', '2-Room'), ('ThreeRoom', '3-Room')], max_length=16)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Saved project filter',
                'verbose_name_plural': 'Saved project filters',
                'ordering': ['nric'],
            },
        ),
    ]

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CachedReading',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cache_key', models.CharField(db_index=True, max_length=64, unique=True)),
                ('lat', models.DecimalField(decimal_places=6, max_digits=9)),
                ('lon', models.DecimalField(decimal_places=6, max_digits=9)),
                ('payload', models.JSONField(default=dict)),
                ('aqi', models.IntegerField()),
                ('source', models.CharField(max_length=100)),
                ('cached_at', models.DateTimeField(db_index=True)),
                ('hit_count', models.IntegerField(default=0)),
            ],
            options={
                'verbose_name': 'Cached Reading',
                'verbose_name_plural': 'Cached Readings',
                'indexes': [
                    models.Index(fields=['lat', 'lon'], name='gateway_reading_latlon_idx'),
                    models.Index(fields=['-cached_at'], name='gateway_reading_cached_idx'),
                ],
            },
        ),
    ]

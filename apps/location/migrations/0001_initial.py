from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='LocationCache',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('postal_code', models.CharField(db_index=True, max_length=10, unique=True)),
                ('lat', models.DecimalField(decimal_places=6, max_digits=9)),
                ('lon', models.DecimalField(decimal_places=6, max_digits=9)),
                ('formatted_address', models.TextField(blank=True)),
                ('cached_at', models.DateTimeField(auto_now=True, db_index=True)),
                ('hit_count', models.IntegerField(default=0)),
            ],
            options={
                'verbose_name': 'Location Cache',
                'verbose_name_plural': 'Location Cache Entries',
                'indexes': [
                    models.Index(fields=['cached_at'], name='location_cache_cached_idx'),
                ],
            },
        ),
    ]

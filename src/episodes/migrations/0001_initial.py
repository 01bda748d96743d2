from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SpotifyLink",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("url", models.URLField(max_length=500)),
                ("description", models.TextField(blank=True, default="")),
                ("duration", models.CharField(blank=True, default="", max_length=32)),
                ("episode_date", models.DateField(blank=True, null=True)),
                ("video_link", models.URLField(blank=True, max_length=500, null=True)),
                ("cover_image", models.CharField(blank=True, max_length=255, null=True)),
                ("guests", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "spotify_links",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]

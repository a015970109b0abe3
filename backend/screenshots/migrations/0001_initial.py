import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Group",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="Image",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("file_path", models.CharField(max_length=512, unique=True)),
                ("file_name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "category",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Typography", "Typography"),
                            ("UI Design", "UI Design"),
                            ("App Design", "App Design"),
                            ("Visual Design", "Visual Design"),
                            ("Illustration", "Illustration"),
                            ("Graphic Design", "Graphic Design"),
                            ("Motion Design", "Motion Design"),
                            ("Branding", "Branding"),
                            ("Icon Design", "Icon Design"),
                            ("Web Design", "Web Design"),
                            ("Mobile Design", "Mobile Design"),
                            ("Dashboard Design", "Dashboard Design"),
                            ("Landing Page", "Landing Page"),
                            ("Color Palette", "Color Palette"),
                            ("Layout", "Layout"),
                            ("Photography", "Photography"),
                            ("Other", "Other"),
                        ],
                        max_length=32,
                        null=True,
                    ),
                ),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="images",
                        to="screenshots.group",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["group", "category"], name="screenshots_group_category_idx"),
                    models.Index(fields=["group", "created_at"], name="screenshots_group_created_idx"),
                ],
            },
        ),
    ]

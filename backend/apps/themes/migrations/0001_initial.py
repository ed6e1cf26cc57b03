import apps.themes.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Theme',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, unique=True)),
                ('description', models.TextField(blank=True)),
                ('thumbnail', models.CharField(blank=True, max_length=500)),
                ('category', models.CharField(choices=[('modern', 'Modern'), ('classic', 'Classic'), ('minimal', 'Minimal'), ('bold', 'Bold'), ('elegant', 'Elegant'), ('dark', 'Dark'), ('light', 'Light'), ('custom', 'Custom')], default='custom', max_length=20)),
                ('colors', models.JSONField(default=apps.themes.models.default_colors)),
                ('fonts', models.JSONField(default=apps.themes.models.default_fonts)),
                ('spacing', models.JSONField(default=apps.themes.models.default_spacing)),
                ('border_radius', models.JSONField(default=apps.themes.models.default_border_radius)),
                ('shadows', models.JSONField(default=apps.themes.models.default_shadows)),
                ('effects', models.JSONField(default=apps.themes.models.default_effects)),
                ('custom_css', models.TextField(blank=True, max_length=10000)),
                ('is_public', models.BooleanField(default=True)),
                ('is_premium', models.BooleanField(default=False)),
                ('usage_count', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='themes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-usage_count', '-created_at'],
                'indexes': [models.Index(fields=['category', 'is_public'], name='theme_category_public_idx')],
            },
        ),
    ]

import apps.sites.models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('themes', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Site',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('site_name', models.CharField(max_length=100, validators=[django.core.validators.MinLengthValidator(2)])),
                ('subdomain', models.CharField(max_length=50, unique=True, validators=[django.core.validators.MinLengthValidator(3, 'Subdomain must be at least 3 characters'), django.core.validators.RegexValidator('^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$', 'Subdomain can only contain lowercase letters, numbers, and hyphens')])),
                ('custom_domain', models.CharField(blank=True, error_messages={'unique': 'Custom domain already in use'}, max_length=253, null=True, unique=True)),
                ('description', models.CharField(blank=True, max_length=500)),
                ('favicon', models.CharField(blank=True, max_length=500)),
                ('logo', models.CharField(blank=True, max_length=500)),
                ('logo_width', models.CharField(default='120px', max_length=20, validators=[django.core.validators.RegexValidator('^\\d+(\\.\\d+)?(px|%|rem|em|vw)$', 'Logo width must be a CSS length such as 120px')])),
                ('custom_theme', models.JSONField(blank=True, default=apps.sites.models.default_custom_theme)),
                ('seo', models.JSONField(blank=True, default=apps.sites.models.default_seo)),
                ('analytics', models.JSONField(blank=True, default=apps.sites.models.default_analytics)),
                ('settings', models.JSONField(blank=True, default=apps.sites.models.default_site_settings)),
                ('is_published', models.BooleanField(default=False)),
                ('published_at', models.DateTimeField(blank=True, null=True)),
                ('last_edited_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('theme', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sites', to='themes.theme')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sites', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-updated_at'],
                'indexes': [models.Index(fields=['user', 'is_published'], name='site_user_published_idx')],
            },
        ),
        migrations.CreateModel(
            name='Page',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('page_name', models.CharField(max_length=100)),
                ('slug', models.CharField(blank=True, max_length=200, validators=[django.core.validators.RegexValidator('^[a-z0-9-/]*$', 'Slug can only contain lowercase letters, numbers, hyphens, and slashes')])),
                ('content', models.JSONField(blank=True, default=list)),
                ('sections', models.JSONField(blank=True, default=list)),
                ('is_home', models.BooleanField(default=False)),
                ('order', models.IntegerField(default=0)),
                ('is_visible', models.BooleanField(default=True)),
                ('seo', models.JSONField(blank=True, default=apps.sites.models.default_seo)),
                ('settings', models.JSONField(blank=True, default=apps.sites.models.default_page_settings)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='pages', to='sites.site')),
            ],
            options={
                'ordering': ['order', 'created_at'],
                'indexes': [models.Index(fields=['site', 'order'], name='page_site_order_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('slug', ''), _negated=True), fields=('site', 'slug'), name='unique_page_slug_per_site')],
            },
        ),
    ]

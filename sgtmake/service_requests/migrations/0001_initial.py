# Generated manually for the ServiceRequest model

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
            name='ServiceRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file_name', models.CharField(blank=True, max_length=255, null=True)),
                ('file_url', models.URLField(blank=True, max_length=500, null=True)),
                ('file_type', models.CharField(blank=True, max_length=100, null=True)),
                ('file_public_id', models.CharField(blank=True, max_length=500, null=True)),
                ('form_details', models.JSONField(blank=True, default=dict, help_text='Service form answers; `type` holds the service type')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('testing', 'Testing'), ('production', 'Production'), ('cancelled', 'Cancelled'), ('cancel_requested', 'Cancel Requested'), ('shipped', 'Shipped'), ('delivered', 'Delivered')], db_index=True, default='pending', max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='service_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'service_requests',
                'ordering': ['-created_at'],
            },
        ),
    ]

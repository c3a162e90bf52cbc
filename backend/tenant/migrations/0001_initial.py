import decimal
import uuid

import django.core.validators
from django.db import migrations, models

import tenant.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text="Display name for the tenant (e.g., Joe's Pizza)", max_length=255)),
                ('slug', models.SlugField(help_text='URL-safe identifier used in API paths (/api/tenants/<slug>/)', unique=True)),
                ('currency', models.CharField(default=tenant.models.default_currency, help_text="ISO 4217 code; all money is stored in this currency's minor unit", max_length=3)),
                ('tax_rate', models.DecimalField(decimal_places=4, default=tenant.models.default_tax_rate, help_text='Fraction applied to the discounted subtotal (0.0825 = 8.25%)', max_digits=6, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0')), django.core.validators.MaxValueValidator(decimal.Decimal('1'))])),
                ('is_active', models.BooleanField(default=True, help_text='Inactive tenants cannot access the system')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenants',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['is_active'], name='tenants_is_active_idx')],
            },
        ),
    ]

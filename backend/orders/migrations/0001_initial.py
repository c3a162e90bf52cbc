import decimal
import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenant', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='DiningTable',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="e.g. 'T4' or 'Patio 2'", max_length=50)),
                ('seats', models.PositiveSmallIntegerField(default=4)),
                ('is_active', models.BooleanField(default=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='dining_tables', to='tenant.tenant')),
            ],
            options={
                'ordering': ['name'],
                'default_manager_name': 'all_objects',
                'constraints': [models.UniqueConstraint(fields=('tenant', 'name'), name='unique_table_name_per_tenant')],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('order_number', models.CharField(blank=True, max_length=20)),
                ('status', models.CharField(choices=[('OPEN', 'Open'), ('IN_KITCHEN', 'In Kitchen'), ('READY', 'Ready'), ('FOR_PAYMENT', 'For Payment'), ('PAID', 'Paid'), ('CANCELLED', 'Cancelled')], default='OPEN', max_length=12)),
                ('currency', models.CharField(max_length=3)),
                ('tax_rate', models.DecimalField(decimal_places=4, default=decimal.Decimal('0'), max_digits=6)),
                ('subtotal_cents', models.BigIntegerField(default=0)),
                ('discount_cents', models.BigIntegerField(default=0)),
                ('tax_cents', models.BigIntegerField(default=0)),
                ('total_cents', models.BigIntegerField(default=0)),
                ('tip_cents', models.BigIntegerField(default=0)),
                ('notes', models.TextField(blank=True)),
                ('opened_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('sent_to_kitchen_at', models.DateTimeField(blank=True, null=True)),
                ('closed_at', models.DateTimeField(blank=True, db_index=True, help_text='Set when the order becomes PAID or CANCELLED.', null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cashier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders_as_cashier', to=settings.AUTH_USER_MODEL)),
                ('table', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='orders.diningtable')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-opened_at', 'order_number'],
                'default_manager_name': 'all_objects',
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='order_tenant_stat_idx'),
                    models.Index(fields=['tenant', 'opened_at'], name='order_tenant_opened_idx'),
                ],
                'constraints': [models.UniqueConstraint(fields=('tenant', 'order_number'), name='unique_order_number_per_tenant')],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_ref', models.CharField(blank=True, help_text='Catalog identifier at the time of sale. Informational only.', max_length=64)),
                ('product_name', models.CharField(max_length=200)),
                ('unit_price_cents', models.PositiveIntegerField()),
                ('quantity', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(99)])),
                ('discount_percent', models.DecimalField(decimal_places=2, default=decimal.Decimal('0'), max_digits=5, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0')), django.core.validators.MaxValueValidator(decimal.Decimal('100'))])),
                ('status', models.CharField(choices=[('NEW', 'New'), ('SENT', 'Sent to Kitchen'), ('IN_PROGRESS', 'In Progress'), ('READY', 'Ready'), ('SERVED', 'Served'), ('VOID', 'Void')], default='NEW', max_length=12)),
                ('notes', models.TextField(blank=True, help_text="Customer notes, e.g., 'no onions'")),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('status_changed_at', models.DateTimeField(blank=True, null=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='order_items', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Order Item',
                'verbose_name_plural': 'Order Items',
                'ordering': ['created_at', 'id'],
                'default_manager_name': 'all_objects',
                'indexes': [
                    models.Index(fields=['tenant', 'order'], name='item_tenant_order_idx'),
                    models.Index(fields=['tenant', 'status'], name='item_tenant_stat_idx'),
                ],
            },
        ),
    ]

import uuid

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
            name='CashSession',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('OPEN', 'Open'), ('CLOSED', 'Closed')], default='OPEN', max_length=6)),
                ('currency', models.CharField(max_length=3)),
                ('opening_cash_cents', models.PositiveBigIntegerField()),
                ('closing_cash_cents', models.PositiveBigIntegerField(blank=True, null=True)),
                ('expected_cash_cents', models.BigIntegerField(blank=True, null=True)),
                ('variance_cents', models.BigIntegerField(blank=True, help_text='closing - expected; negative is a shortage', null=True)),
                ('opened_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.CharField(blank=True, max_length=500)),
                ('closing_notes', models.CharField(blank=True, max_length=500)),
                ('closed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='closed_cash_sessions', to=settings.AUTH_USER_MODEL)),
                ('opened_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='opened_cash_sessions', to=settings.AUTH_USER_MODEL)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cash_sessions', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Cash Session',
                'verbose_name_plural': 'Cash Sessions',
                'ordering': ['-opened_at'],
                'default_manager_name': 'all_objects',
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='cash_sess_tenant_stat_idx'),
                    models.Index(fields=['tenant', 'opened_at'], name='cash_sess_tenant_open_idx'),
                ],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'OPEN')), fields=('tenant',), name='unique_open_cash_session_per_tenant')],
            },
        ),
    ]

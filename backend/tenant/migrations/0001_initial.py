import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text="Display name for the restaurant (e.g., Joe's Pizza)", max_length=255)),
                ('slug', models.SlugField(help_text='URL-safe identifier used in customer links', unique=True)),
                ('currency', models.CharField(default='usd', help_text='ISO 4217 currency code, lower case as Stripe expects', max_length=3)),
                ('tax_rate_bps', models.PositiveIntegerField(default=0, help_text='Sales tax in basis points (875 = 8.75%)', validators=[django.core.validators.MaxValueValidator(10000)])),
                ('default_tip_bps', models.PositiveIntegerField(default=0, help_text='Tip applied when the customer does not choose one', validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(10000)])),
                ('service_type', models.CharField(choices=[('TABLE', 'Table service'), ('PICKUP', 'Pickup')], default='TABLE', max_length=10)),
                ('stripe_account_id', models.CharField(blank=True, max_length=255, null=True)),
                ('charges_enabled', models.BooleanField(default=False, help_text="Mirrors the connected account's charges_enabled flag")),
                ('is_active', models.BooleanField(default=True, help_text='Inactive tenants cannot take orders')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenants',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['stripe_account_id'], name='tenants_stripe__6a1f0b_idx'),
                    models.Index(fields=['is_active'], name='tenants_is_acti_2c9d4e_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Table',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('label', models.CharField(help_text="Shown to staff, e.g. 'Patio 4'", max_length=50)),
                ('code', models.SlugField(max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tables', to='tenant.tenant')),
            ],
            options={
                'ordering': ['label'],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'code'), name='unique_table_code_per_tenant'),
                ],
            },
        ),
    ]

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('menu', '0001_initial'),
        ('tenant', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('code', models.CharField(blank=True, help_text='Short code shown to the customer and on the board; unique per tenant', max_length=6)),
                ('status', models.CharField(choices=[('NEW', 'New'), ('PAID', 'Paid'), ('IN_PROGRESS', 'In progress'), ('READY', 'Ready'), ('DELIVERED', 'Delivered'), ('CANCELED', 'Canceled')], db_index=True, default='NEW', max_length=20)),
                ('subtotal_cents', models.PositiveIntegerField(default=0)),
                ('tax_cents', models.PositiveIntegerField(default=0)),
                ('tip_cents', models.PositiveIntegerField(default=0)),
                ('total_cents', models.PositiveIntegerField(default=0, help_text='subtotal + tax + tip; replaced by the captured amount when payment completes')),
                ('stripe_session_id', models.CharField(blank=True, help_text='Checkout Session id; set once, right after the session is created', max_length=255, null=True, unique=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('paid_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('table', models.ForeignKey(blank=True, help_text='Null for pickup orders', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='tenant.table')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to='tenant.tenant')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['tenant', 'status', '-created_at'], name='order_board_idx'),
                    models.Index(fields=['status', 'created_at'], name='order_abandoned_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'code'), name='unique_order_code_per_tenant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Item name at time of sale', max_length=200)),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price_cents', models.PositiveIntegerField(help_text='Item price at time of sale, excluding modifiers')),
                ('selected_modifiers', models.JSONField(blank=True, default=list, help_text='Ordered list of {name, price_delta_cents} snapshots')),
                ('notes', models.TextField(blank=True, null=True)),
                ('position', models.PositiveIntegerField(default=0)),
                ('menu_item', models.ForeignKey(blank=True, help_text='Source item; kept for reporting, never used for pricing', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_lines', to='menu.menuitem')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='orders.order')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
    ]

# Generated migration for restaurant app
import uuid
from decimal import Decimal
import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='MenuCategory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('description', models.TextField(blank=True)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Menu Category',
                'verbose_name_plural': 'Menu Categories',
                'db_table': 'restaurant_menu_categories',
                'ordering': ['display_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='MenuItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('dietary_info', models.JSONField(blank=True, default=dict, help_text='Dietary flags: vegetarian, vegan, gluten_free, contains_nuts, etc.')),
                ('image_url', models.URLField(blank=True)),
                ('is_takeaway', models.BooleanField(default=False)),
                ('stripe_price_id', models.CharField(blank=True, help_text='Stripe Price ID charged when ordered for takeaway', max_length=100)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('is_available', models.BooleanField(default=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='restaurant.menucategory')),
            ],
            options={
                'verbose_name': 'Menu Item',
                'verbose_name_plural': 'Menu Items',
                'db_table': 'restaurant_menu_items',
                'ordering': ['display_order', 'name'],
                'indexes': [models.Index(fields=['category', 'is_active', 'is_available'], name='restaurant__categor_5b1e0c_idx')],
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, max_length=320)),
                ('phone', models.CharField(blank=True, max_length=50)),
                ('booking_date', models.DateField()),
                ('booking_time', models.TimeField(blank=True, null=True)),
                ('party_size', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('special_requests', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('request', 'Request'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled'), ('from_resend', 'From email history')], default='pending', max_length=20)),
                ('review_reason', models.CharField(blank=True, help_text='Why the booking was held for approval (request_only_date, large_party, ...)', max_length=50)),
                ('source', models.CharField(choices=[('website', 'Website'), ('admin', 'Admin import'), ('wix', 'Wix export'), ('resend', 'Email history')], default='website', max_length=20)),
                ('sent_emails', models.JSONField(blank=True, default=list)),
                ('confirmed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Booking',
                'verbose_name_plural': 'Bookings',
                'db_table': 'restaurant_bookings',
                'ordering': ['booking_date', 'booking_time'],
                'indexes': [
                    models.Index(fields=['booking_date', 'status'], name='restaurant__booking_8c2f4a_idx'),
                    models.Index(fields=['email'], name='restaurant__email_3d9e71_idx'),
                ],
            },
        ),
    ]

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def money(**kwargs):
    opts = dict(max_digits=14, decimal_places=2, default=0)
    opts.update(kwargs)
    return models.DecimalField(**opts)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Doctor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('specialization', models.CharField(default='Dokter Gigi Umum', max_length=255)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('email', models.EmailField(blank=True, db_index=True, max_length=254)),
                ('license_number', models.CharField(blank=True, help_text='Nomor SIP', max_length=64)),
                ('shifts', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('status_updated_at', models.DateTimeField(blank=True, null=True)),
                ('status_updated_by', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at', '-id']},
        ),
        migrations.CreateModel(
            name='Employee',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('position', models.CharField(default='Staff', max_length=128)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('email', models.EmailField(db_index=True, max_length=254)),
                ('join_date', models.DateField(default=django.utils.timezone.localdate)),
                ('base_salary', money()),
                ('status', models.CharField(choices=[('aktif', 'Aktif'), ('nonaktif', 'Nonaktif')], db_index=True, default='aktif', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at', '-id']},
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('address', models.TextField()),
                ('birth_date', models.DateField()),
                ('gender', models.CharField(max_length=16)),
                ('blood_type', models.CharField(blank=True, max_length=8)),
                ('allergies', models.TextField(blank=True)),
                ('emergency_contact', models.CharField(blank=True, max_length=255)),
                ('emergency_phone', models.CharField(blank=True, max_length=32)),
                ('medical_record_number', models.CharField(max_length=32, unique=True)),
                ('registration_date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('status', models.CharField(choices=[('aktif', 'Aktif'), ('nonaktif', 'Nonaktif')], db_index=True, default='aktif', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at', '-id']},
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('category', models.CharField(db_index=True, max_length=128)),
                ('price', money()),
                ('stock', models.IntegerField(default=0)),
                ('min_stock', models.IntegerField(default=5)),
                ('unit', models.CharField(default='pcs', max_length=32)),
                ('description', models.TextField(blank=True)),
                ('supplier', models.CharField(blank=True, max_length=255)),
                ('barcode', models.CharField(blank=True, max_length=64)),
                ('status', models.CharField(choices=[('aktif', 'Aktif'), ('nonaktif', 'Nonaktif')], db_index=True, default='aktif', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at', '-id']},
        ),
        migrations.CreateModel(
            name='FieldTripProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('category', models.CharField(default='Kunjungan Klinik', max_length=128)),
                ('price', money()),
                ('unit', models.CharField(default='paket', max_length=32)),
                ('description', models.TextField(blank=True)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('duration', models.CharField(blank=True, max_length=64)),
                ('min_participants', models.PositiveIntegerField(default=0)),
                ('max_participants', models.PositiveIntegerField(default=0)),
                ('age_range', models.CharField(blank=True, max_length=64)),
                ('included', models.TextField(blank=True)),
                ('not_included', models.TextField(blank=True)),
                ('requirements', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at', '-id']},
        ),
        migrations.CreateModel(
            name='ClinicSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('address', models.TextField(blank=True)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('admin_fee', money()),
                ('logo_url', models.CharField(blank=True, max_length=500)),
                ('page_access', models.JSONField(blank=True, default=dict)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(blank=True, choices=[('doctor', 'Dokter'), ('employee', 'Karyawan')], db_index=True, max_length=16)),
                ('access_level', models.CharField(choices=[('Owner', 'Owner'), ('Co-owner', 'Co-owner'), ('Admin', 'Admin'), ('Dokter', 'Dokter')], default='Dokter', max_length=16)),
                ('doctor', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='account', to='backoffice.doctor')),
                ('employee', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='account', to='backoffice.employee')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.IntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FeeSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('category', models.CharField(blank=True, max_length=128)),
                ('treatment_types', models.JSONField(blank=True, default=list)),
                ('fee_percentage', models.DecimalField(decimal_places=2, max_digits=5)),
                ('is_default', models.BooleanField(default=False)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('doctors', models.ManyToManyField(blank=True, related_name='fee_settings', to='backoffice.doctor')),
            ],
            options={'ordering': ['created_at', 'id']},
        ),
        migrations.CreateModel(
            name='Voucher',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('discount_type', models.CharField(choices=[('percentage', 'Persentase'), ('nominal', 'Nominal')], max_length=16)),
                ('discount_value', money()),
                ('max_discount', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('min_purchase', money()),
                ('expiry_date', models.DateField()),
                ('usage_limit', models.PositiveIntegerField(default=0, help_text='0 = tanpa batas')),
                ('usage_count', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('created_by', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={'ordering': ['-created_at', '-id']},
        ),
        migrations.CreateModel(
            name='Treatment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('doctor_name', models.CharField(max_length=255)),
                ('patient_name', models.CharField(max_length=255)),
                ('items', models.JSONField(default=list)),
                ('medications', models.JSONField(blank=True, default=list)),
                ('description', models.TextField(blank=True)),
                ('shift', models.CharField(blank=True, max_length=64)),
                ('date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('subtotal', money()),
                ('total_discount', money()),
                ('total_nominal', money()),
                ('medication_cost', money()),
                ('admin_fee', money()),
                ('voucher_code', models.CharField(blank=True, max_length=64)),
                ('voucher_discount', money()),
                ('total_amount', money()),
                ('payment_method', models.CharField(blank=True, max_length=64)),
                ('payment_status', models.CharField(choices=[('lunas', 'Lunas'), ('dp', 'DP')], db_index=True, default='lunas', max_length=8)),
                ('dp_amount', money()),
                ('outstanding_amount', money()),
                ('payment_notes', models.TextField(blank=True)),
                ('fee_percentage', models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ('calculated_fee', money()),
                ('fee_details', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('doctor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='treatments', to='backoffice.doctor')),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='treatments', to='backoffice.patient')),
                ('voucher', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='treatments', to='backoffice.voucher')),
            ],
            options={
                'ordering': ['-date', '-created_at', '-id'],
                'indexes': [models.Index(fields=['doctor', 'date'], name='treatment_doctor_date_idx')],
            },
        ),
        migrations.CreateModel(
            name='VoucherUsage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('voucher_code', models.CharField(max_length=64)),
                ('patient_name', models.CharField(blank=True, max_length=255)),
                ('original_amount', money()),
                ('discount_amount', money()),
                ('final_total_amount', money()),
                ('admin_fee', money()),
                ('transaction_type', models.CharField(choices=[('treatment', 'Tindakan'), ('sale', 'Penjualan'), ('field_trip', 'Field Trip')], default='treatment', max_length=16)),
                ('transaction_id', models.CharField(blank=True, max_length=64)),
                ('used_by', models.CharField(blank=True, max_length=255)),
                ('used_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('patient', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='backoffice.patient')),
                ('voucher', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='usages', to='backoffice.voucher')),
            ],
            options={'ordering': ['-used_at', '-id']},
        ),
        migrations.CreateModel(
            name='Salary',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('employee_name', models.CharField(max_length=255)),
                ('base_salary', money()),
                ('bonus', money()),
                ('holiday_allowance', money()),
                ('total_salary', money()),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveIntegerField()),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='salaries', to='backoffice.employee')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('employee', 'month', 'year'), name='uniq_salary_employee_period'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FieldTripSale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_name', models.CharField(max_length=255)),
                ('customer_phone', models.CharField(max_length=32)),
                ('customer_email', models.EmailField(blank=True, max_length=254)),
                ('customer_address', models.TextField(blank=True)),
                ('organization', models.CharField(blank=True, max_length=255)),
                ('product_name', models.CharField(max_length=255)),
                ('product_price', money()),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('participants', models.PositiveIntegerField(default=1)),
                ('total_amount', money()),
                ('discount', money()),
                ('final_amount', money()),
                ('sale_date', models.DateField(db_index=True, default=django.utils.timezone.localdate)),
                ('event_date', models.DateField(blank=True, null=True)),
                ('event_end_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('confirmed', 'Dikonfirmasi'), ('paid', 'Dibayar'), ('completed', 'Selesai'), ('cancelled', 'Dibatalkan')], db_index=True, default='draft', max_length=16)),
                ('payment_method', models.CharField(blank=True, max_length=64)),
                ('payment_status', models.CharField(choices=[('lunas', 'Lunas'), ('dp', 'DP')], default='lunas', max_length=8)),
                ('dp_amount', money()),
                ('outstanding_amount', money()),
                ('payment_notes', models.TextField(blank=True)),
                ('selected_doctors', models.JSONField(blank=True, default=list)),
                ('selected_employees', models.JSONField(blank=True, default=list)),
                ('total_doctor_fees', money()),
                ('total_employee_bonuses', money()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales', to='backoffice.fieldtripproduct')),
            ],
            options={'ordering': ['-sale_date', '-created_at', '-id']},
        ),
    ]

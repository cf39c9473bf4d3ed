"""
Database models for the clinic back-office.

Each business record (doctor, employee, patient, product, treatment,
salary, voucher, field-trip sale) is a plain table.  Money is stored as
``DecimalField`` and converted to JSON numbers at the view layer; amounts
derived from other fields (totals, fees, outstanding balances) are
computed by the services and stored alongside the inputs so that reports
do not need to replay the calculations.
"""
from __future__ import annotations

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

MONEY = dict(max_digits=14, decimal_places=2, default=0)


class Doctor(models.Model):
    name = models.CharField(max_length=255)
    specialization = models.CharField(max_length=255, default='Dokter Gigi Umum')
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True, db_index=True)
    license_number = models.CharField(max_length=64, blank=True, help_text="Nomor SIP")
    shifts = models.JSONField(default=list, blank=True)
    # dokter nonaktif tidak muncul di daftar praktik
    is_active = models.BooleanField(default=True, db_index=True)
    status_updated_at = models.DateTimeField(null=True, blank=True)
    status_updated_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    @property
    def status(self) -> str:
        return 'active' if self.is_active else 'inactive'

    def __str__(self) -> str:
        return self.name


class Employee(models.Model):
    STATUS_CHOICES = [('aktif', 'Aktif'), ('nonaktif', 'Nonaktif')]

    name = models.CharField(max_length=255)
    position = models.CharField(max_length=128, default='Staff')
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(db_index=True)
    join_date = models.DateField(default=timezone.localdate)
    base_salary = models.DecimalField(**MONEY)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='aktif', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    @property
    def is_active(self) -> bool:
        return self.status == 'aktif'

    def __str__(self) -> str:
        return f"{self.name} ({self.position})"


class User(AbstractUser):
    """Login account for a doctor or an employee.

    ``access_level`` drives the security level used for menu filtering
    and endpoint permissions (see :mod:`backoffice.access`).  Disabling
    login sets ``is_active`` to False but keeps the row so that the
    account can be re-enabled later.
    """

    ROLE_CHOICES = [('doctor', 'Dokter'), ('employee', 'Karyawan')]
    ACCESS_LEVEL_CHOICES = [
        ('Owner', 'Owner'),
        ('Co-owner', 'Co-owner'),
        ('Admin', 'Admin'),
        ('Dokter', 'Dokter'),
    ]

    role = models.CharField(max_length=16, choices=ROLE_CHOICES, blank=True, db_index=True)
    access_level = models.CharField(max_length=16, choices=ACCESS_LEVEL_CHOICES, default='Dokter')
    doctor = models.OneToOneField(
        Doctor, on_delete=models.SET_NULL, null=True, blank=True, related_name='account'
    )
    employee = models.OneToOneField(
        Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='account'
    )

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    def __str__(self) -> str:
        return f"{self.username} ({self.access_level})"


class Patient(models.Model):
    STATUS_CHOICES = [('aktif', 'Aktif'), ('nonaktif', 'Nonaktif')]

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField()
    birth_date = models.DateField()
    gender = models.CharField(max_length=16)
    blood_type = models.CharField(max_length=8, blank=True)
    allergies = models.TextField(blank=True)
    emergency_contact = models.CharField(max_length=255, blank=True)
    emergency_phone = models.CharField(max_length=32, blank=True)
    medical_record_number = models.CharField(max_length=32, unique=True)
    registration_date = models.DateField(default=timezone.localdate, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='aktif', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.name} ({self.medical_record_number})"


class Product(models.Model):
    STATUS_CHOICES = [('aktif', 'Aktif'), ('nonaktif', 'Nonaktif')]

    name = models.CharField(max_length=255)
    category = models.CharField(max_length=128, db_index=True)
    price = models.DecimalField(**MONEY)
    stock = models.IntegerField(default=0)
    min_stock = models.IntegerField(default=5)
    unit = models.CharField(max_length=32, default='pcs')
    description = models.TextField(blank=True)
    supplier = models.CharField(max_length=255, blank=True)
    barcode = models.CharField(max_length=64, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='aktif', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    @property
    def low_stock(self) -> bool:
        return self.stock <= self.min_stock

    def __str__(self) -> str:
        return self.name


class FieldTripProduct(models.Model):
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=128, default='Kunjungan Klinik')
    price = models.DecimalField(**MONEY)
    unit = models.CharField(max_length=32, default='paket')
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    duration = models.CharField(max_length=64, blank=True)
    min_participants = models.PositiveIntegerField(default=0)
    max_participants = models.PositiveIntegerField(default=0)
    age_range = models.CharField(max_length=64, blank=True)
    included = models.TextField(blank=True)
    not_included = models.TextField(blank=True)
    requirements = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return self.name


class FeeSetting(models.Model):
    """A commission rule mapping doctor/treatment/category to a percentage.

    Rules are evaluated in creation order by the multi-fee calculator, so
    the default ordering must stay stable (``created_at``, ``id``).
    """

    doctors = models.ManyToManyField(Doctor, blank=True, related_name='fee_settings')
    category = models.CharField(max_length=128, blank=True)
    treatment_types = models.JSONField(default=list, blank=True)
    fee_percentage = models.DecimalField(max_digits=5, decimal_places=2)
    is_default = models.BooleanField(default=False)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.fee_percentage}% {self.description or ''}".strip()


class Voucher(models.Model):
    DISCOUNT_TYPES = [('percentage', 'Persentase'), ('nominal', 'Nominal')]

    code = models.CharField(max_length=64, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    discount_type = models.CharField(max_length=16, choices=DISCOUNT_TYPES)
    discount_value = models.DecimalField(**MONEY)
    max_discount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    min_purchase = models.DecimalField(**MONEY)
    expiry_date = models.DateField()
    usage_limit = models.PositiveIntegerField(default=0, help_text="0 = tanpa batas")
    usage_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)
    created_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return self.code


class Treatment(models.Model):
    PAYMENT_STATUS = [('lunas', 'Lunas'), ('dp', 'DP')]

    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='treatments')
    doctor_name = models.CharField(max_length=255)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='treatments')
    patient_name = models.CharField(max_length=255)
    # items: [{id, productId, name, price, discount, discountType, discountAmount, finalPrice}]
    items = models.JSONField(default=list)
    medications = models.JSONField(default=list, blank=True)
    description = models.TextField(blank=True)
    shift = models.CharField(max_length=64, blank=True)
    date = models.DateField(default=timezone.localdate, db_index=True)

    subtotal = models.DecimalField(**MONEY)
    total_discount = models.DecimalField(**MONEY)
    total_nominal = models.DecimalField(**MONEY)
    medication_cost = models.DecimalField(**MONEY)
    admin_fee = models.DecimalField(**MONEY)
    voucher = models.ForeignKey(Voucher, on_delete=models.SET_NULL, null=True, blank=True, related_name='treatments')
    voucher_code = models.CharField(max_length=64, blank=True)
    voucher_discount = models.DecimalField(**MONEY)
    total_amount = models.DecimalField(**MONEY)

    payment_method = models.CharField(max_length=64, blank=True)
    payment_status = models.CharField(max_length=8, choices=PAYMENT_STATUS, default='lunas', db_index=True)
    dp_amount = models.DecimalField(**MONEY)
    outstanding_amount = models.DecimalField(**MONEY)
    payment_notes = models.TextField(blank=True)

    fee_percentage = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    calculated_fee = models.DecimalField(**MONEY)
    fee_details = models.JSONField(default=dict, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at', '-id']
        indexes = [
            models.Index(fields=['doctor', 'date'], name='treatment_doctor_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_name} / {self.doctor_name} ({self.date})"


class VoucherUsage(models.Model):
    TRANSACTION_TYPES = [('treatment', 'Tindakan'), ('sale', 'Penjualan'), ('field_trip', 'Field Trip')]

    voucher = models.ForeignKey(Voucher, on_delete=models.SET_NULL, null=True, related_name='usages')
    voucher_code = models.CharField(max_length=64)
    patient = models.ForeignKey(Patient, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    patient_name = models.CharField(max_length=255, blank=True)
    original_amount = models.DecimalField(**MONEY)
    discount_amount = models.DecimalField(**MONEY)
    final_total_amount = models.DecimalField(**MONEY)
    admin_fee = models.DecimalField(**MONEY)
    transaction_type = models.CharField(max_length=16, choices=TRANSACTION_TYPES, default='treatment')
    transaction_id = models.CharField(max_length=64, blank=True)
    used_by = models.CharField(max_length=255, blank=True)
    used_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-used_at', '-id']

    def __str__(self) -> str:
        return f"{self.voucher_code} -{self.discount_amount}"


class Salary(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name='salaries')
    employee_name = models.CharField(max_length=255)
    base_salary = models.DecimalField(**MONEY)
    bonus = models.DecimalField(**MONEY)
    holiday_allowance = models.DecimalField(**MONEY)
    total_salary = models.DecimalField(**MONEY)
    month = models.PositiveSmallIntegerField()
    year = models.PositiveIntegerField()
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['employee', 'month', 'year'], name='uniq_salary_employee_period'),
        ]

    def __str__(self) -> str:
        return f"{self.employee_name} {self.month:02d}/{self.year}"


class FieldTripSale(models.Model):
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('confirmed', 'Dikonfirmasi'),
        ('paid', 'Dibayar'),
        ('completed', 'Selesai'),
        ('cancelled', 'Dibatalkan'),
    ]
    PAYMENT_STATUS = [('lunas', 'Lunas'), ('dp', 'DP')]

    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=32)
    customer_email = models.EmailField(blank=True)
    customer_address = models.TextField(blank=True)
    organization = models.CharField(max_length=255, blank=True)
    product = models.ForeignKey(FieldTripProduct, on_delete=models.PROTECT, related_name='sales')
    product_name = models.CharField(max_length=255)
    product_price = models.DecimalField(**MONEY)
    quantity = models.PositiveIntegerField(default=1)
    participants = models.PositiveIntegerField(default=1)
    total_amount = models.DecimalField(**MONEY)
    discount = models.DecimalField(**MONEY)
    final_amount = models.DecimalField(**MONEY)
    sale_date = models.DateField(default=timezone.localdate, db_index=True)
    event_date = models.DateField(null=True, blank=True)
    event_end_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='draft', db_index=True)
    payment_method = models.CharField(max_length=64, blank=True)
    payment_status = models.CharField(max_length=8, choices=PAYMENT_STATUS, default='lunas')
    dp_amount = models.DecimalField(**MONEY)
    outstanding_amount = models.DecimalField(**MONEY)
    payment_notes = models.TextField(blank=True)
    # [{doctorId, doctorName, specialization, fee}] / [{employeeId, employeeName, position, bonus}]
    selected_doctors = models.JSONField(default=list, blank=True)
    selected_employees = models.JSONField(default=list, blank=True)
    total_doctor_fees = models.DecimalField(**MONEY)
    total_employee_bonuses = models.DecimalField(**MONEY)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-sale_date', '-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.customer_name} - {self.product_name}"


class ClinicSettings(models.Model):
    """Singleton row (pk=1) holding clinic-wide configuration."""

    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    admin_fee = models.DecimalField(**MONEY)
    logo_url = models.CharField(max_length=500, blank=True)
    # {pageId: level} overrides on top of the static page table
    page_access = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    @classmethod
    def load(cls) -> 'ClinicSettings':
        obj, _ = cls.objects.get_or_create(
            pk=1,
            defaults={
                'name': settings.CLINIC_NAME,
                'address': settings.CLINIC_ADDRESS,
                'admin_fee': settings.CLINIC_ADMIN_FEE,
            },
        )
        return obj

    def __str__(self) -> str:
        return self.name


class AuditEvent(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.object_type}:{self.object_id}"

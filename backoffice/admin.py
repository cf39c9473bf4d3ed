"""
Django admin registrations for the back-office models.

Superusers can inspect and correct records through ``/admin/``.  Money
fields that are computed by the services are shown read-only so manual
edits cannot leave a treatment inconsistent with its lines.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    AuditEvent,
    ClinicSettings,
    Doctor,
    Employee,
    FeeSetting,
    FieldTripProduct,
    FieldTripSale,
    Patient,
    Product,
    Salary,
    Treatment,
    User,
    Voucher,
    VoucherUsage,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'role', 'access_level', 'is_active', 'is_superuser')
    list_filter = ('role', 'access_level', 'is_active')
    search_fields = ('username', 'email', 'first_name')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Klinik', {'fields': ('role', 'access_level', 'doctor', 'employee')}),
    )


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'specialization', 'phone', 'email', 'is_active')
    list_filter = ('is_active', 'specialization')
    search_fields = ('name', 'email', 'license_number')


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'position', 'email', 'base_salary', 'status')
    list_filter = ('status', 'position')
    search_fields = ('name', 'email')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('medical_record_number', 'name', 'phone', 'gender', 'registration_date', 'status')
    list_filter = ('status', 'gender')
    search_fields = ('name', 'phone', 'medical_record_number')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price', 'stock', 'min_stock', 'status')
    list_filter = ('status', 'category')
    search_fields = ('name', 'barcode')


@admin.register(FieldTripProduct)
class FieldTripProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'category', 'price', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'location')


@admin.register(FeeSetting)
class FeeSettingAdmin(admin.ModelAdmin):
    list_display = ('id', 'fee_percentage', 'category', 'is_default', 'description', 'created_at')
    list_filter = ('is_default',)
    filter_horizontal = ('doctors',)


@admin.register(Voucher)
class VoucherAdmin(admin.ModelAdmin):
    list_display = ('code', 'title', 'discount_type', 'discount_value', 'expiry_date', 'usage_count', 'is_active')
    list_filter = ('is_active', 'discount_type')
    search_fields = ('code', 'title')


@admin.register(VoucherUsage)
class VoucherUsageAdmin(admin.ModelAdmin):
    list_display = ('voucher_code', 'patient_name', 'discount_amount', 'transaction_type', 'used_at')
    list_filter = ('transaction_type',)
    search_fields = ('voucher_code', 'patient_name')


@admin.register(Treatment)
class TreatmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'date', 'doctor_name', 'patient_name', 'total_amount', 'payment_status', 'calculated_fee')
    list_filter = ('payment_status', 'date')
    search_fields = ('doctor_name', 'patient_name', 'voucher_code')
    readonly_fields = ('subtotal', 'total_discount', 'total_nominal', 'medication_cost', 'voucher_discount',
                       'total_amount', 'outstanding_amount', 'fee_percentage', 'calculated_fee', 'fee_details')


@admin.register(Salary)
class SalaryAdmin(admin.ModelAdmin):
    list_display = ('employee_name', 'month', 'year', 'total_salary')
    list_filter = ('year', 'month')
    search_fields = ('employee_name',)


@admin.register(FieldTripSale)
class FieldTripSaleAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer_name', 'product_name', 'sale_date', 'final_amount', 'status')
    list_filter = ('status', 'payment_status')
    search_fields = ('customer_name', 'organization', 'customer_phone')


@admin.register(ClinicSettings)
class ClinicSettingsAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'admin_fee', 'updated_at')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'object_type', 'object_id', 'user')
    list_filter = ('action', 'object_type')
    search_fields = ('action', 'object_type')

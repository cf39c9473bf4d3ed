"""
URL mappings for the clinic back-office API.

Every business endpoint lives under ``/api/``.  Trailing slashes are
deliberately omitted (``APPEND_SLASH`` is off) to match the front-end
endpoint table.
"""
from django.urls import path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view, me_view, register_view, verify_user_view
from .views import accounts, clinic, dashboard, doctors, employees, field_trips, health, patients
from .views import products, salaries, treatments, vouchers

urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/verify-user', verify_user_view, name='verify_user_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    path('api/auth/me', me_view, name='me_view'),
    # Clinic profile and menu
    path('api/clinic-settings', clinic.clinic_settings, name='clinic_settings'),
    path('api/menu', clinic.menu, name='menu'),
    path('api/dashboard', dashboard.dashboard, name='dashboard'),
    path('api/reports/doctor-fees', dashboard.doctor_fees, name='doctor_fee_report'),
    # Doctors
    path('api/doctors', doctors.doctors, name='doctors'),
    path('api/doctors/active', doctors.doctors_active, name='doctors_active'),
    path('api/doctors/<int:pk>', doctors.doctor_detail, name='doctor_detail'),
    path('api/doctors/<int:pk>/status', doctors.doctor_status, name='doctor_status'),
    # Employees and payroll
    path('api/employees', employees.employees, name='employees'),
    path('api/employees/<int:pk>', employees.employee_detail, name='employee_detail'),
    path('api/salaries', salaries.salaries, name='salaries'),
    path('api/salaries/<int:pk>', salaries.salary_detail, name='salary_detail'),
    # Patients
    path('api/patients', patients.patients, name='patients'),
    path('api/patients/<int:pk>', patients.patient_detail, name='patient_detail'),
    # Products
    path('api/products', products.products, name='products'),
    path('api/products/<int:pk>', products.product_detail, name='product_detail'),
    path('api/treatment-products', products.treatment_product_list, name='treatment_products'),
    path('api/medication-products', products.medication_product_list, name='medication_products'),
    path('api/field-trip-products', products.field_trip_products, name='field_trip_products'),
    path('api/field-trip-products/<int:pk>', products.field_trip_product_detail, name='field_trip_product_detail'),
    # Treatments and doctor fees
    path('api/treatments', treatments.treatments, name='treatments'),
    path('api/treatments/<int:pk>', treatments.treatment_detail, name='treatment_detail'),
    path('api/fee-settings', treatments.fee_settings, name='fee_settings'),
    path('api/fee-settings/calculate', treatments.fee_settings_calculate, name='fee_settings_calculate'),
    path('api/fee-settings/<int:pk>', treatments.fee_setting_detail, name='fee_setting_detail'),
    # Vouchers
    path('api/vouchers', vouchers.vouchers, name='vouchers'),
    path('api/vouchers/validate', vouchers.voucher_validate, name='voucher_validate'),
    path('api/vouchers/use', vouchers.voucher_use, name='voucher_use'),
    path('api/vouchers/usage', vouchers.voucher_usage, name='voucher_usage'),
    path('api/vouchers/stats', vouchers.voucher_statistics, name='voucher_stats'),
    path('api/vouchers/<int:pk>', vouchers.voucher_detail, name='voucher_detail'),
    # Field trips
    path('api/field-trip-sales', field_trips.field_trip_sales, name='field_trip_sales'),
    path('api/field-trip-sales/<int:pk>', field_trips.field_trip_sale_detail, name='field_trip_sale_detail'),
    # User accounts
    path('api/user-accounts', accounts.user_accounts, name='user_accounts'),
    path('api/user-accounts/<int:pk>', accounts.user_account_detail, name='user_account_detail'),
]

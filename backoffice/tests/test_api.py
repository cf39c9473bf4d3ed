"""
Integration tests for the clinic back-office API.

These tests exercise the main record flows (doctors, patients, products,
treatments, salaries and field-trip sales) through DRF's APIClient
within the APITestCase base class.

To run the tests:

```
pytest -q backoffice/tests
```
"""
from datetime import date, timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import (
    AuditEvent, Doctor, Employee, FeeSetting, FieldTripProduct, FieldTripSale, Patient, Product, Salary, Treatment,
    User, Voucher, VoucherUsage,
)


class ClinicAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            username='owner', password='P@ssw0rd1', role='employee', access_level='Owner',
        )
        self.cashier = User.objects.create_user(
            username='kasir', password='P@ssw0rd1', role='employee', access_level='Admin',
        )
        self.doctor = Doctor.objects.create(
            name='drg. Ani', specialization='Dokter Gigi Umum', phone='0811', email='ani@klinik.id',
            license_number='SIP-1',
        )
        self.other_doctor = Doctor.objects.create(
            name='drg. Budi', specialization='Ortodonti', phone='0812', email='budi@klinik.id',
            license_number='SIP-2',
        )
        self.doctor_user = User.objects.create_user(
            username='ani@klinik.id', email='ani@klinik.id', password='P@ssw0rd1', role='doctor',
            access_level='Dokter', doctor=self.doctor,
        )
        self.patient = Patient.objects.create(
            name='Siti', address='Jl. Mawar 1', birth_date=date(1990, 1, 1), gender='P',
            medical_record_number='RM-20240101-001', registration_date=date(2024, 1, 1),
        )
        Product.objects.create(name='Scaling', category='Tindakan', price=Decimal('300000'))
        Product.objects.create(name='Amoxicillin', category='Obat', price=Decimal('5000'))

    def authenticate(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    # ------------------------------------------------------------------
    # Doctors
    # ------------------------------------------------------------------
    def test_doctor_create_normalises_name_and_email(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/doctors', {
            'name': 'drg. drg.  Citra', 'specialization': 'Konservasi', 'phone': '0813',
            'email': 'Citra@Klinik.ID', 'licenseNumber': 'SIP-3',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['name'], 'drg. Citra')
        self.assertEqual(r.data['data']['email'], 'citra@klinik.id')
        self.assertFalse(r.data['data']['hasLoginAccess'])
        self.assertTrue(AuditEvent.objects.filter(action='doctor.create').exists())

    def test_doctor_create_requires_license(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/doctors', {'name': 'Dedi', 'specialization': 'Umum', 'phone': '1',
                                         'email': 'dedi@klinik.id'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['code'], 'validation_error')

    def test_doctor_with_password_gets_login(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/doctors', {
            'name': 'Eka', 'specialization': 'Umum', 'phone': '1', 'email': 'eka@klinik.id',
            'licenseNumber': 'SIP-9', 'password': 'rahasia123',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        account = User.objects.get(email='eka@klinik.id')
        self.assertEqual(account.role, 'doctor')
        self.assertEqual(account.access_level, 'Dokter')
        self.assertEqual(account.doctor_id, r.data['data']['id'])

    def test_doctor_and_employee_lists_are_newest_first(self):
        client = self.authenticate(self.cashier)
        ids = [d['id'] for d in client.get('/api/doctors').data['data']]
        self.assertEqual(ids, [self.other_doctor.id, self.doctor.id])
        first = Employee.objects.create(name='Zaki', email='zaki@klinik.id')
        second = Employee.objects.create(name='Ayu', email='ayu@klinik.id')
        ids = [e['id'] for e in client.get('/api/employees').data['data']]
        self.assertEqual(ids, [second.id, first.id])

    def test_doctor_writes_need_staff_level(self):
        client = self.authenticate(self.doctor_user)
        self.assertEqual(client.get('/api/doctors').status_code, status.HTTP_200_OK)
        r = client.put(f'/api/doctors/{self.doctor.id}', {'phone': '000'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_doctor_status_toggle_refreshes_active_list(self):
        client = self.authenticate(self.cashier)
        r = client.get('/api/doctors/active')
        self.assertEqual(len(r.data['data']), 2)
        r = client.patch(f'/api/doctors/{self.other_doctor.id}/status', {'isActive': False}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['data']['status'], 'inactive')
        self.assertTrue(r.data['data']['statusUpdatedAt'])
        r = client.get('/api/doctors/active')
        self.assertEqual([d['id'] for d in r.data['data']], [self.doctor.id])

    def test_doctor_with_treatments_cannot_be_deleted(self):
        Treatment.objects.create(doctor=self.doctor, doctor_name=self.doctor.name, patient=self.patient,
                                 patient_name=self.patient.name, items=[])
        client = self.authenticate(self.cashier)
        r = client.delete(f'/api/doctors/{self.doctor.id}')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Doctor.objects.filter(pk=self.doctor.id).exists())
        r = client.delete(f'/api/doctors/{self.other_doctor.id}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------
    def test_patient_record_number_counts_todays_registrations(self):
        client = self.authenticate(self.doctor_user)
        today = timezone.localdate()
        payload = {'name': 'Rudi', 'address': 'Jl. Melati', 'birthDate': '1985-05-05', 'gender': 'L'}
        first = client.post('/api/patients', payload, format='json')
        second = client.post('/api/patients', {**payload, 'name': 'Rina'}, format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data['data']['medicalRecordNumber'], f'RM-{today:%Y%m%d}-001')
        self.assertEqual(second.data['data']['medicalRecordNumber'], f'RM-{today:%Y%m%d}-002')

    def test_patient_list_hides_inactive_by_default(self):
        Patient.objects.create(name='Lama', address='-', birth_date=date(1970, 1, 1), gender='L',
                               medical_record_number='RM-20200101-001', registration_date=date(2020, 1, 1),
                               status='nonaktif')
        client = self.authenticate(self.cashier)
        names = [p['name'] for p in client.get('/api/patients').data['data']]
        self.assertEqual(names, ['Siti'])
        names = [p['name'] for p in client.get('/api/patients?status=all').data['data']]
        self.assertIn('Lama', names)
        found = client.get('/api/patients?q=20240101').data['data']
        self.assertEqual([p['name'] for p in found], ['Siti'])

    def test_patient_search_matches_name_and_phone(self):
        Patient.objects.create(name='Bambang', address='-', birth_date=date(1980, 2, 2), gender='L',
                               phone='08561234', medical_record_number='RM-20240102-001',
                               registration_date=date(2024, 1, 2))
        client = self.authenticate(self.cashier)
        by_name = client.get('/api/patients?q=bamb').data['data']
        self.assertEqual([p['name'] for p in by_name], ['Bambang'])
        by_phone = client.get('/api/patients?q=561234').data['data']
        self.assertEqual([p['name'] for p in by_phone], ['Bambang'])

    def test_patient_record_number_skips_taken_numbers(self):
        client = self.authenticate(self.cashier)
        today = timezone.localdate()
        payload = {'name': 'Rudi', 'address': 'Jl. Melati', 'birthDate': '1985-05-05', 'gender': 'L'}
        first = client.post('/api/patients', payload, format='json').data['data']
        second = client.post('/api/patients', {**payload, 'name': 'Rina'}, format='json').data['data']
        Patient.objects.filter(pk=first['id']).delete()
        # one registration left today, but -002 is still taken
        r = client.post('/api/patients', {**payload, 'name': 'Rosa'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second['medicalRecordNumber'], f'RM-{today:%Y%m%d}-002')
        self.assertEqual(r.data['data']['medicalRecordNumber'], f'RM-{today:%Y%m%d}-003')

    def test_patient_create_requires_birth_date(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/patients', {'name': 'X', 'address': 'Y', 'gender': 'L'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def test_product_lists_split_by_category(self):
        Product.objects.create(name='Kapas', category='Umum', price=Decimal('1000'))
        Product.objects.create(name='Lama', category='Tindakan', price=Decimal('1'), status='nonaktif')
        client = self.authenticate(self.doctor_user)
        treatment = {p['name'] for p in client.get('/api/treatment-products').data['data']}
        medication = {p['name'] for p in client.get('/api/medication-products').data['data']}
        self.assertEqual(treatment, {'Scaling', 'Kapas'})
        self.assertEqual(medication, {'Amoxicillin', 'Kapas'})

    def test_shared_category_rule_is_exact_and_case_insensitive(self):
        Product.objects.create(name='Sarung Tangan', category='UMUM', price=Decimal('1000'))
        Product.objects.create(name='Alat Umum Bedah', category='Umum Bedah', price=Decimal('1000'))
        client = self.authenticate(self.cashier)
        treatment = {p['name'] for p in client.get('/api/treatment-products').data['data']}
        medication = {p['name'] for p in client.get('/api/medication-products').data['data']}
        self.assertIn('Sarung Tangan', treatment)
        self.assertIn('Sarung Tangan', medication)
        # only the exact shared category lands in both lists
        self.assertNotIn('Alat Umum Bedah', treatment)
        self.assertNotIn('Alat Umum Bedah', medication)
        self.assertNotIn('Amoxicillin', treatment)
        self.assertNotIn('Scaling', medication)

    def test_product_low_stock_flag(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/products', {'name': 'Masker', 'category': 'Bahan', 'price': 2000, 'stock': 3},
                        format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertTrue(r.data['data']['lowStock'])
        r = client.put(f"/api/products/{r.data['data']['id']}", {'stock': 50}, format='json')
        self.assertFalse(r.data['data']['lowStock'])

    def test_field_trip_product_participant_range(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/field-trip-products', {'name': 'Kunjungan TK', 'price': 50000,
                                                     'minParticipants': 30, 'maxParticipants': 10}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    # ------------------------------------------------------------------
    # Treatments
    # ------------------------------------------------------------------
    def _treatment_payload(self, **extra):
        payload = {
            'doctorId': self.doctor.id,
            'patientId': self.patient.id,
            'treatmentTypes': [
                {'name': 'Scaling', 'price': 300000, 'discount': 10, 'discountType': 'percentage'},
                {'name': 'Tambal', 'price': 200000},
            ],
            'selectedMedications': [{'name': 'Amoxicillin', 'price': 5000, 'quantity': 2}],
        }
        payload.update(extra)
        return payload

    def test_treatment_totals_and_fee(self):
        FeeSetting.objects.create(fee_percentage=Decimal('30'), is_default=True)
        specific = FeeSetting.objects.create(fee_percentage=Decimal('40'), treatment_types=['Scaling'])
        specific.doctors.set([self.doctor])

        client = self.authenticate(self.cashier)
        r = client.post('/api/treatments', self._treatment_payload(), format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        data = r.data['data']
        self.assertEqual(data['subtotal'], 500000.0)
        self.assertEqual(data['totalDiscount'], 30000.0)
        self.assertEqual(data['totalNominal'], 470000.0)
        self.assertEqual(data['medicationCost'], 10000.0)
        self.assertEqual(data['adminFee'], 20000.0)
        self.assertEqual(data['totalTindakan'], 500000.0)
        # 270000 * 40% + 200000 * 30%
        self.assertEqual(data['calculatedFee'], 168000.0)
        fees = data['feeDetails']['treatmentFees']
        self.assertEqual([f['ruleId'] for f in fees], [specific.id, FeeSetting.objects.first().id])
        self.assertEqual(data['doctorName'], 'drg. Ani')

    def test_treatment_flat_fee_percentage_and_admin_override(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/treatments', self._treatment_payload(feePercentage=10, adminFeeOverride=50000),
                        format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self.assertEqual(r.data['data']['adminFee'], 50000.0)
        self.assertEqual(r.data['data']['calculatedFee'], 47000.0)
        self.assertTrue(r.data['data']['feeDetails']['hasManualOverrides'])

    def test_treatment_down_payment(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/treatments', self._treatment_payload(paymentStatus='dp', dpAmount=600000),
                        format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = client.post('/api/treatments', self._treatment_payload(paymentStatus='dp', dpAmount=100000),
                        format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['outstandingAmount'], 400000.0)

    def test_treatment_with_voucher_records_usage(self):
        voucher = Voucher.objects.create(code='HEMAT10', title='Hemat', discount_type='percentage',
                                         discount_value=Decimal('10'), max_discount=Decimal('25000'),
                                         expiry_date=timezone.localdate() + timedelta(days=5))
        client = self.authenticate(self.cashier)
        r = client.post('/api/treatments', self._treatment_payload(voucherCode='hemat10'), format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self.assertEqual(r.data['data']['voucherDiscount'], 25000.0)
        self.assertEqual(r.data['data']['totalTindakan'], 475000.0)
        voucher.refresh_from_db()
        self.assertEqual(voucher.usage_count, 1)
        usage = VoucherUsage.objects.get()
        self.assertEqual(usage.transaction_type, 'treatment')
        self.assertEqual(usage.transaction_id, str(r.data['data']['id']))

    def test_treatment_update_recomputes(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/treatments', self._treatment_payload(), format='json')
        tid = r.data['data']['id']
        r = client.put(f'/api/treatments/{tid}', {'treatmentTypes': [{'name': 'Cabut', 'price': 100000}]},
                       format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK, r.data)
        self.assertEqual(r.data['data']['subtotal'], 100000.0)
        self.assertEqual(r.data['data']['totalTindakan'], 130000.0)
        self.assertEqual(r.data['data']['patientId'], self.patient.id)

    def _voucher_treatment(self, client, **voucher):
        values = dict(code='MIN200', title='Minimal', discount_type='nominal', discount_value=Decimal('20000'),
                      min_purchase=Decimal('200000'), expiry_date=timezone.localdate() + timedelta(days=5))
        values.update(voucher)
        Voucher.objects.create(**values)
        payload = self._treatment_payload(voucherCode='MIN200', selectedMedications=[],
                                          treatmentTypes=[{'name': 'Scaling', 'price': 300000}])
        r = client.post('/api/treatments', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        return r.data['data']['id']

    def test_treatment_update_rechecks_voucher_minimum(self):
        client = self.authenticate(self.cashier)
        tid = self._voucher_treatment(client)
        r = client.put(f'/api/treatments/{tid}', {'treatmentTypes': [{'name': 'Scaling', 'price': 60000}]},
                       format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('voucherCode', r.data['error']['message'])
        self.assertEqual(Treatment.objects.get(pk=tid).total_nominal, Decimal('300000'))

    def test_treatment_update_syncs_voucher_usage(self):
        client = self.authenticate(self.cashier)
        tid = self._voucher_treatment(client)
        r = client.put(f'/api/treatments/{tid}', {'treatmentTypes': [{'name': 'Scaling', 'price': 250000}]},
                       format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK, r.data)
        usage = VoucherUsage.objects.get(transaction_id=str(tid))
        self.assertEqual(usage.original_amount, Decimal('250000'))
        self.assertEqual(usage.discount_amount, Decimal('20000'))
        self.assertEqual(usage.final_total_amount, Decimal('250000'))

    def test_treatment_delete_releases_voucher(self):
        client = self.authenticate(self.cashier)
        tid = self._voucher_treatment(client, usage_limit=1)
        self.assertEqual(Voucher.objects.get(code='MIN200').usage_count, 1)
        r = client.delete(f'/api/treatments/{tid}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(Voucher.objects.get(code='MIN200').usage_count, 0)
        self.assertFalse(VoucherUsage.objects.filter(transaction_id=str(tid)).exists())

    def test_doctor_account_only_sees_own_treatments(self):
        for doctor in (self.doctor, self.other_doctor):
            Treatment.objects.create(doctor=doctor, doctor_name=doctor.name, patient=self.patient,
                                     patient_name=self.patient.name, items=[])
        client = self.authenticate(self.doctor_user)
        r = client.get('/api/treatments')
        self.assertEqual([t['doctorId'] for t in r.data['data']], [self.doctor.id])
        r = client.post('/api/treatments', self._treatment_payload(doctorId=self.other_doctor.id), format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_fee_calculate_preview_saves_nothing(self):
        FeeSetting.objects.create(fee_percentage=Decimal('25'), is_default=True)
        client = self.authenticate(self.doctor_user)
        r = client.post('/api/fee-settings/calculate', {
            'doctorId': self.doctor.id,
            'items': [{'id': 'x', 'name': 'Scaling', 'price': 100000, 'finalPrice': 80000}],
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['data']['totalFeeAmount'], 20000.0)
        self.assertEqual(Treatment.objects.count(), 0)

    def test_fee_setting_writes_need_owner_level(self):
        payload = {'doctorIds': [self.doctor.id], 'feePercentage': 35, 'description': 'spesifik'}
        r = self.authenticate(self.cashier).post('/api/fee-settings', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        r = self.authenticate(self.owner).post('/api/fee-settings', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['doctorNames'], ['drg. Ani'])

    # ------------------------------------------------------------------
    # Salaries
    # ------------------------------------------------------------------
    def test_salary_total_and_duplicate_period(self):
        employee = Employee.objects.create(name='Dewi', email='dewi@klinik.id', base_salary=Decimal('3000000'))
        client = self.authenticate(self.owner)
        payload = {'employeeId': employee.id, 'bonus': 250000, 'holidayAllowance': 500000, 'month': 4, 'year': 2024}
        r = client.post('/api/salaries', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['data']['totalSalary'], 3750000.0)
        self.assertEqual(r.data['data']['employeeName'], 'Dewi')
        r = client.post('/api/salaries', payload, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Salary.objects.count(), 1)
        # cashier cannot see payroll
        self.assertEqual(self.authenticate(self.cashier).get('/api/salaries').status_code,
                         status.HTTP_403_FORBIDDEN)

    def test_employee_with_salary_cannot_be_deleted(self):
        employee = Employee.objects.create(name='Dewi', email='dewi@klinik.id')
        Salary.objects.create(employee=employee, employee_name='Dewi', month=1, year=2024)
        r = self.authenticate(self.cashier).delete(f'/api/employees/{employee.id}')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)

    def test_employee_email_taken_by_account(self):
        client = self.authenticate(self.cashier)
        r = client.post('/api/employees', {'name': 'Ani 2', 'email': 'ani@klinik.id', 'password': 'rahasia123'},
                        format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    # ------------------------------------------------------------------
    # Field trips
    # ------------------------------------------------------------------
    def test_field_trip_sale_snapshots_and_totals(self):
        product = FieldTripProduct.objects.create(name='Edukasi Gigi', price=Decimal('75000'))
        employee = Employee.objects.create(name='Dewi', email='dewi@klinik.id', position='Perawat')
        client = self.authenticate(self.cashier)
        r = client.post('/api/field-trip-sales', {
            'customerName': 'TK Ceria', 'customerPhone': '0899', 'productId': product.id, 'quantity': 20,
            'discount': 100000, 'paymentStatus': 'dp', 'dpAmount': 500000,
            'selectedDoctors': [{'doctorId': self.doctor.id, 'fee': 200000}],
            'selectedEmployees': [{'employeeId': employee.id, 'bonus': 50000}],
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        data = r.data['data']
        self.assertEqual(data['productName'], 'Edukasi Gigi')
        self.assertEqual(data['totalAmount'], 1500000.0)
        self.assertEqual(data['finalAmount'], 1400000.0)
        self.assertEqual(data['outstandingAmount'], 900000.0)
        self.assertEqual(data['selectedDoctors'][0]['doctorName'], 'drg. Ani')
        self.assertEqual(data['selectedEmployees'][0]['position'], 'Perawat')
        self.assertEqual(data['totalDoctorFees'], 200000.0)
        self.assertEqual(data['status'], 'draft')

    def test_field_trip_sale_rejects_duplicate_doctor(self):
        product = FieldTripProduct.objects.create(name='Edukasi Gigi', price=Decimal('75000'))
        client = self.authenticate(self.cashier)
        r = client.post('/api/field-trip-sales', {
            'customerName': 'TK Ceria', 'customerPhone': '0899', 'productId': product.id,
            'selectedDoctors': [{'doctorId': self.doctor.id, 'fee': 1}, {'doctorId': self.doctor.id, 'fee': 2}],
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_field_trip_sale_end_date_before_event_date(self):
        product = FieldTripProduct.objects.create(name='Edukasi Gigi', price=Decimal('75000'))
        client = self.authenticate(self.cashier)
        r = client.post('/api/field-trip-sales', {
            'customerName': 'TK Ceria', 'customerPhone': '0899', 'productId': product.id,
            'eventDate': '2024-05-10', 'eventEndDate': '2024-05-09',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('eventEndDate', r.data['error']['message'])
        self.assertEqual(FieldTripSale.objects.count(), 0)

    # ------------------------------------------------------------------
    # Dashboard / reports
    # ------------------------------------------------------------------
    def test_dashboard_and_fee_report(self):
        FeeSetting.objects.create(fee_percentage=Decimal('50'), is_default=True)
        client = self.authenticate(self.cashier)
        client.post('/api/treatments', self._treatment_payload(), format='json')
        r = client.get('/api/dashboard')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['data']['treatmentsToday'], 1)
        self.assertEqual(r.data['data']['revenueToday'], 500000.0)
        self.assertEqual(r.data['data']['activeDoctors'], 2)

        r = self.authenticate(self.owner).get('/api/reports/doctor-fees')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        rows = r.data['data']['rows']
        self.assertEqual(rows[0]['doctorId'], self.doctor.id)
        self.assertEqual(rows[0]['treatmentFees'], 235000.0)
        self.assertEqual(r.data['data']['grandTotal'], 235000.0)

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from backoffice.access import build_menu
from backoffice.models import AuditEvent, ClinicSettings, Doctor, Employee, User

pytestmark = pytest.mark.django_db


def login(client, login_name, password):
    return client.post(reverse('login_view'), {'username': login_name, 'password': password}, format='json')


def make_user(username, level, role='employee', **extra):
    return User.objects.create_user(username=username, password='P@ssw0rd1', role=role, access_level=level, **extra)


def test_login_returns_jwt_and_legacy_token():
    client = APIClient()
    make_user('kasir', 'Admin')
    r = login(client, 'kasir', 'P@ssw0rd1')
    assert r.status_code == 200
    assert r.data['token']
    assert r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['accessLevel'] == 'Admin'
    assert 'treatments' in r.data['menu']['items']
    assert AuditEvent.objects.filter(action='login', detail__result='ok').exists()


def test_login_by_email_and_bad_password():
    client = APIClient()
    make_user('dewi', 'Admin', email='dewi@klinik.id')
    assert login(client, 'Dewi@Klinik.id', 'P@ssw0rd1').status_code == 200
    r = login(client, 'dewi', 'salah')
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_both_token_kinds_are_accepted():
    client = APIClient()
    make_user('kasir', 'Admin')
    r = login(client, 'kasir', 'P@ssw0rd1')
    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert client.get(reverse('me_view')).status_code == 200
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
    me = client.get(reverse('me_view'))
    assert me.status_code == 200
    assert me.data['user']['username'] == 'kasir'


def test_refresh_and_logout():
    client = APIClient()
    make_user('kasir', 'Admin')
    r = login(client, 'kasir', 'P@ssw0rd1')
    refresh = r.data['jwt_refresh']
    rr = client.post(reverse('jwt_refresh_view'), {'refresh': refresh}, format='json')
    assert rr.status_code == 200
    assert rr.data['jwt_access']
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {rr.data['jwt_access']}")
    out = client.post(reverse('jwt_logout_view'), {}, format='json')
    assert out.status_code == 200
    # legacy token is gone
    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    assert client.get(reverse('me_view')).status_code == 401


def test_anonymous_requests_are_rejected():
    client = APIClient()
    r = client.get('/api/patients')
    assert r.status_code == 401
    assert r.data['error']['code'] == 'not_authenticated'


def test_menu_for_doctor_account():
    doctor = Doctor.objects.create(name='drg. Ani', phone='1', email='ani@klinik.id', license_number='SIP')
    user = make_user('ani', 'Dokter', role='doctor', doctor=doctor)
    client = APIClient()
    client.force_authenticate(user=user)
    r = client.get(reverse('menu'))
    assert r.status_code == 200
    assert r.data['items'] == ['dashboard', 'treatments', 'medical-record-summary']
    assert [s['level'] for s in r.data['sections']] == [0]


def test_menu_levels_and_overrides():
    staff = make_user('kasir', 'Admin')
    owner = make_user('owner', 'Owner')
    staff_menu = build_menu(staff)
    assert 'salaries' not in staff_menu['items']
    assert 'field-trip-sales' in staff_menu['items']
    assert [s['level'] for s in staff_menu['sections']] == [0, 1]
    assert build_menu(owner)['items'][-1] == 'security-settings'
    # lowering salaries to staff level shows it in the staff section
    overridden = build_menu(staff, {'salaries': 1})
    staff_section = [s for s in overridden['sections'] if s['level'] == 1][0]
    assert 'salaries' in [i['id'] for i in staff_section['items']]


def test_superuser_is_top_level():
    admin = User.objects.create_superuser(username='root', password='P@ssw0rd1', email='root@klinik.id')
    assert build_menu(admin)['items'][-1] == 'security-settings'


def test_clinic_settings_public_read_owner_write():
    client = APIClient()
    r = client.get(reverse('clinic_settings'))
    assert r.status_code == 200
    assert r.data['data']['adminFee'] == 20000.0

    staff = make_user('kasir', 'Admin')
    client.force_authenticate(user=staff)
    assert client.put(reverse('clinic_settings'), {'adminFee': 1}, format='json').status_code == 403

    owner = make_user('owner', 'Owner')
    client.force_authenticate(user=owner)
    r = client.put(reverse('clinic_settings'), {'name': 'Klinik Senyum', 'adminFee': 25000,
                                                'pageAccess': {'reports': 1}}, format='json')
    assert r.status_code == 200
    assert ClinicSettings.load().name == 'Klinik Senyum'
    # cached payload was invalidated
    assert APIClient().get(reverse('clinic_settings')).data['data']['adminFee'] == 25000.0
    bad = client.put(reverse('clinic_settings'), {'pageAccess': {'nope': 1}}, format='json')
    assert bad.status_code == 400


def test_verify_user_and_register():
    Employee.objects.create(name='Dewi', email='dewi@klinik.id', position='Perawat')
    client = APIClient()
    r = client.post(reverse('verify_user_view'), {'email': 'unknown@klinik.id'}, format='json')
    assert r.status_code == 403
    assert r.data['needsRegistration'] is True
    r = client.post(reverse('verify_user_view'), {'email': 'DEWI@klinik.id'}, format='json')
    assert r.status_code == 200
    assert r.data['userType'] == 'employee'
    r = client.post(reverse('register_view'), {'email': 'dewi@klinik.id', 'password': 'rahasia123',
                                               'name': 'Dewi', 'role': 'employee'}, format='json')
    assert r.status_code == 201
    assert r.data['user']['employeeId'] is not None
    assert r.data['accessLevel'] == 'Admin'


def test_user_accounts_need_super_user():
    client = APIClient()
    client.force_authenticate(user=make_user('coowner', 'Co-owner'))
    assert client.get(reverse('user_accounts')).status_code == 403


def test_user_account_lifecycle():
    owner = make_user('owner', 'Owner')
    doctor = Doctor.objects.create(name='drg. Ani', phone='1', email='ani@klinik.id', license_number='SIP')
    client = APIClient()
    client.force_authenticate(user=owner)

    rows = client.get(reverse('user_accounts'), {'role': 'doctor'}).data['data']
    assert rows[0]['has_login'] is False and rows[0]['source_id'] == doctor.id

    r = client.post(reverse('user_accounts'), {'password': 'rahasia123', 'role': 'doctor',
                                               'access_level': 'Dokter', 'source_id': doctor.id}, format='json')
    assert r.status_code == 201
    account_id = r.data['data']['id']
    assert r.data['data']['email'] == 'ani@klinik.id'

    # the doctor is already linked now
    dup = client.post(reverse('user_accounts'), {'password': 'rahasia123', 'role': 'doctor',
                                                 'access_level': 'Dokter', 'source_id': doctor.id}, format='json')
    assert dup.status_code == 400

    r = client.put(reverse('user_account_detail', args=[account_id]), {'access_level': 'Admin'}, format='json')
    assert r.data['data']['access_level'] == 'Admin'

    r = client.delete(reverse('user_account_detail', args=[account_id]))
    assert r.status_code == 200
    assert r.data['data']['has_login'] is False
    assert User.objects.filter(pk=account_id).exists()
    assert login(APIClient(), 'ani@klinik.id', 'rahasia123').status_code == 400

    # re-enabling reuses the row
    r = client.post(reverse('user_accounts'), {'password': 'baru12345', 'role': 'doctor',
                                               'access_level': 'Dokter', 'source_id': doctor.id}, format='json')
    assert r.status_code == 201
    assert r.data['data']['id'] == account_id


def test_account_cannot_disable_or_demote_itself():
    owner = make_user('owner', 'Owner')
    client = APIClient()
    client.force_authenticate(user=owner)
    assert client.delete(reverse('user_account_detail', args=[owner.id])).status_code == 403
    r = client.put(reverse('user_account_detail', args=[owner.id]), {'access_level': 'Admin'}, format='json')
    assert r.status_code == 403


def test_retired_endpoints_return_gone():
    client = APIClient()
    assert client.get('/functions/v1/make-server-xyz/doctors').status_code == 410
    assert client.get('/make-server-abc/patients').status_code == 410


def test_healthz():
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_register_cannot_reenable_a_disabled_account():
    owner = make_user('owner', 'Owner')
    doctor = Doctor.objects.create(name='drg. Ani', phone='1', email='ani@klinik.id', license_number='SIP')
    admin = APIClient()
    admin.force_authenticate(user=owner)
    r = admin.post(reverse('user_accounts'), {'password': 'rahasia123', 'role': 'doctor',
                                              'access_level': 'Dokter', 'source_id': doctor.id}, format='json')
    account_id = r.data['data']['id']
    assert admin.delete(reverse('user_account_detail', args=[account_id])).status_code == 200

    r = APIClient().post(reverse('register_view'), {'email': 'ani@klinik.id', 'password': 'ambilalih99',
                                                    'name': 'Ani', 'role': 'doctor'}, format='json')
    assert r.status_code == 403
    assert User.objects.get(pk=account_id).is_active is False
    assert login(APIClient(), 'ani@klinik.id', 'ambilalih99').status_code == 400


def test_register_rejects_email_with_active_account():
    Employee.objects.create(name='Dewi', email='dewi@klinik.id', position='Perawat')
    client = APIClient()
    payload = {'email': 'dewi@klinik.id', 'password': 'rahasia123', 'name': 'Dewi', 'role': 'employee'}
    assert client.post(reverse('register_view'), payload, format='json').status_code == 201
    assert client.post(reverse('register_view'), payload, format='json').status_code == 400

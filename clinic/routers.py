"""
URL mappings for the wellness clinic API.

Trailing slashes are deliberately omitted; the dashboard calls every path
without one.
"""
from django.urls import include, path

from .auth_views import login_view, profile_view, register_view
from .views import admin, appointments, doctors, health, patients, reporting

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('register', register_view, name='register'),
    path('login', login_view, name='login'),
    path('profile', profile_view, name='profile'),
    # Patients
    path('patients', patients.patients_collection, name='patients'),
    path('patients/next-id', patients.next_patient_id, name='patients-next-id'),
    path('patients/age-distribution', reporting.age_distribution, name='age-distribution'),
    path('patients/gender-distribution', reporting.gender_distribution, name='gender-distribution'),
    path('patients/my-appointments', appointments.my_appointments, name='my-appointments'),
    path('patients/appointments', appointments.book_appointment, name='book-appointment'),
    path('patients/<int:pk>', patients.patient_detail, name='patient-detail'),
    path('patients/<int:pk>/prescription', patients.patient_prescription, name='patient-prescription'),
    # Doctors
    path('doctors', doctors.list_doctors, name='doctors'),
    path('doctors/appointment-requests', appointments.appointment_requests, name='appointment-requests'),
    path('doctors/appointments', appointments.doctor_appointments, name='doctor-appointments'),
    path('doctors/appointments/<str:appointment_id>/approve', appointments.approve_appointment,
         name='approve-appointment'),
    path('doctors/appointments/<str:appointment_id>/reject', appointments.reject_appointment,
         name='reject-appointment'),
    # FHIR projection
    path('fhir/Patient', reporting.fhir_patients, name='fhir-patients'),
    path('fhir/Patient/<int:pk>', reporting.fhir_patient_detail, name='fhir-patient'),
    # Administration
    path('admin/users', admin.list_users, name='admin-users'),
    path('admin/users/<str:role>/<int:pk>', admin.user_detail, name='admin-user-detail'),
    path('admin/stats', admin.stats, name='admin-stats'),
]

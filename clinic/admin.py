"""
Django admin registrations for the clinic models.

Password hashes are shown read-only; accounts are created through the API
or the ``create_admin`` management command so the hash is always produced
by the configured hasher.
"""

from django.contrib import admin

from .models import Admin, Appointment, AuditEvent, Doctor, Patient


@admin.register(Admin)
class AdminAccountAdmin(admin.ModelAdmin):
    list_display = ('id', 'email', 'name', 'created_at')
    search_fields = ('email', 'name')
    readonly_fields = ('password', 'created_at')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'email', 'name', 'specialization', 'experience')
    list_filter = ('specialization',)
    search_fields = ('email', 'name')
    readonly_fields = ('password', 'created_at')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('patient_id', 'email', 'name', 'gender', 'age', 'dob')
    list_filter = ('gender',)
    search_fields = ('patient_id', 'email', 'name')
    readonly_fields = ('patient_id', 'password', 'created_at')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor_id', 'doctor_name', 'date', 'time', 'status')
    list_filter = ('status', 'department')
    search_fields = ('id', 'doctor_name', 'patient__patient_id')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'actor_role', 'actor_id', 'object_type', 'object_id')
    list_filter = ('action', 'actor_role')
    readonly_fields = ('actor_role', 'actor_id', 'action', 'object_type', 'object_id', 'detail', 'created_at')

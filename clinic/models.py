"""
Database models for the wellness clinic backend.

Accounts live in three parallel tables (admins, doctors and patients), each
with its own email uniqueness and its own password hash.  Appointments are
owned by exactly one patient and are only reachable through that patient;
prescriptions and medical history are stored inline on the patient row as
JSON lists, mirroring the documents the dashboard edits.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.hashers import check_password, make_password
from django.db import models


def _appointment_id() -> str:
    return uuid.uuid4().hex


class Account(models.Model):
    """Fields and credential helpers shared by the three account tables.

    ``role`` is a class constant rather than a column so a client can never
    write it.  Emails are stored lower-cased; lookups go through
    :meth:`normalize_email` so they are case-insensitive.
    """
    role: str = ''

    email = models.EmailField(max_length=254, unique=True)
    password = models.CharField(max_length=255)
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    @staticmethod
    def normalize_email(email: str | None) -> str:
        return (email or '').strip().lower()

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)

    def save(self, *args, **kwargs):
        self.email = self.normalize_email(self.email)
        super().save(*args, **kwargs)


class Admin(Account):
    role = 'admin'

    class Meta:
        db_table = 'clinic_admins'


class Doctor(Account):
    """A doctor account.

    ``appointments`` is the doctor-side copy of approved appointments.  It is
    appended to on approval and never touched on rejection.
    """
    role = 'doctor'

    specialization = models.CharField(max_length=255)
    experience = models.PositiveIntegerField(default=0)
    contact_number = models.CharField(max_length=32, blank=True)
    availability = models.JSONField(default=list, blank=True)
    appointments = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'clinic_doctors'


class Patient(Account):
    """A patient account and its clinical record."""
    role = 'patient'

    patient_id = models.CharField(max_length=16, unique=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    dob = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    medical_history = models.JSONField(default=list, blank=True)
    prescriptions = models.JSONField(default=list, blank=True)
    # Legacy single prescription written by the prescription endpoint
    prescription = models.JSONField(default=dict, blank=True)
    prescription_pdf = models.TextField(blank=True)

    class Meta:
        db_table = 'clinic_patients'


class AppointmentStatus(models.TextChoices):
    # Written by older clients; still read as "awaiting decision"
    PENDING = 'Pending', 'Pending'
    SCHEDULED = 'scheduled', 'Scheduled'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


AWAITING_DECISION = (AppointmentStatus.PENDING, AppointmentStatus.SCHEDULED)


class Appointment(models.Model):
    id = models.CharField(max_length=32, primary_key=True, default=_appointment_id, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='appointments')
    # Stored as the doctor's id string; the doctor may since have been deleted
    doctor_id = models.CharField(max_length=32)
    doctor_name = models.CharField(max_length=255, blank=True)
    department = models.CharField(max_length=255, blank=True)
    date = models.CharField(max_length=32)
    time = models.CharField(max_length=16)
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=AppointmentStatus.choices, default=AppointmentStatus.SCHEDULED)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'clinic_appointments'
        indexes = [
            models.Index(fields=['doctor_id', 'status']),
        ]

    def __str__(self) -> str:
        return f"appt {self.id} p={self.patient_id} d={self.doctor_id} {self.status}"


class Sequence(models.Model):
    """Named monotonic counter, used for human-readable patient identifiers."""
    name = models.CharField(max_length=32, primary_key=True)
    value = models.PositiveIntegerField(default=0)

    def __str__(self) -> str:
        return f"{self.name}={self.value}"


class AuditEvent(models.Model):
    actor_role = models.CharField(max_length=16, blank=True)
    actor_id = models.CharField(max_length=32, blank=True, null=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at']),
            models.Index(fields=['object_type', 'object_id', 'created_at']),
        ]

    def __str__(self):
        return f"{self.action}:{self.actor_role}/{self.actor_id}@{self.created_at:%F %T}"

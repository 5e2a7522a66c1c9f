"""
Seed a handful of demo doctors and patients for local development.

Existing emails are skipped, so the command can be re-run safely.  Every
seeded account shares the password given by ``--password``.
"""
import datetime

from django.core.management.base import BaseCommand

from clinic.services.accounts import email_in_use, register_account

DOCTORS = [
    ("sarah.johnson@wellness.com", "Dr. Sarah Johnson", "Cardiology", 12),
    ("michael.chen@wellness.com", "Dr. Michael Chen", "Pediatrics", 8),
    ("amina.okafor@wellness.com", "Dr. Amina Okafor", "General Medicine", 15),
]

PATIENTS = [
    ("john.smith@example.com", "John Smith", "male", datetime.date(1985, 3, 15), "555-0101"),
    ("maria.garcia@example.com", "Maria Garcia", "female", datetime.date(1992, 7, 22), "555-0102"),
    ("robert.brown@example.com", "Robert Brown", "male", datetime.date(1958, 11, 2), "555-0103"),
    ("emily.davis@example.com", "Emily Davis", "female", datetime.date(2010, 1, 30), "555-0104"),
    ("alex.kim@example.com", "Alex Kim", "other", datetime.date(1976, 5, 9), "555-0105"),
]


class Command(BaseCommand):
    help = "Seed demo doctors and patients (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--password', default='password123')

    def handle(self, *args, **opts):
        password = opts['password']
        for email, name, specialization, experience in DOCTORS:
            if email_in_use(email):
                self.stdout.write(f"skip: {email}")
                continue
            register_account('doctor', email=email, password=password, name=name,
                             specialization=specialization, experience=experience)
            self.stdout.write(self.style.SUCCESS(f"doctor: {email}"))

        for email, name, gender, dob, phone in PATIENTS:
            if email_in_use(email):
                self.stdout.write(f"skip: {email}")
                continue
            patient, _ = register_account('patient', email=email, password=password, name=name,
                                          gender=gender, dob=dob, phone=phone)
            self.stdout.write(self.style.SUCCESS(f"patient: {patient.patient_id} {email}"))
        self.stdout.write(self.style.SUCCESS("Demo data seeded."))

"""
Account registration, lookup and the sequential patient identifier.

Every role has its own table; ``ROLES`` maps the role tag carried in
credentials and request bodies to the model holding that role's accounts.
"""
from __future__ import annotations

import logging
import re
import secrets
from typing import Optional

from django.conf import settings
from django.db import transaction

from clinic.exceptions import AccountNotFound, BadRequest
from clinic.models import Account, Admin, Doctor, Patient, Sequence

logger = logging.getLogger(__name__)

ROLES: dict[str, type[Account]] = {
    'admin': Admin,
    'doctor': Doctor,
    'patient': Patient,
}

PATIENT_SEQUENCE = 'patient_id'
_PATIENT_ID_RE = re.compile(r'^P(\d+)$')


def model_for_role(role: Optional[str]) -> type[Account]:
    model = ROLES.get((role or '').strip().lower())
    if model is None:
        raise BadRequest('Invalid user type')
    return model


def find_account(role: str, email: str) -> Optional[Account]:
    """Look up an account by email within one role's table."""
    model = model_for_role(role)
    return model.objects.filter(email=Account.normalize_email(email)).first()


def get_account(role: str, pk) -> Account:
    model = model_for_role(role)
    account = model.objects.filter(pk=pk).first()
    if account is None:
        raise AccountNotFound()
    return account


def email_in_use(email: str) -> bool:
    email = Account.normalize_email(email)
    return any(model.objects.filter(email=email).exists() for model in ROLES.values())


def format_patient_id(number: int) -> str:
    return f"P{number:03d}"


def _highest_patient_number() -> int:
    highest = 0
    for pid in Patient.objects.values_list('patient_id', flat=True):
        m = _PATIENT_ID_RE.match(pid or '')
        if m:
            highest = max(highest, int(m.group(1)))
    return highest


def preview_next_patient_id() -> str:
    """Return the identifier the next registration would get, without allocating it."""
    seq = Sequence.objects.filter(name=PATIENT_SEQUENCE).first()
    current = max(seq.value if seq else 0, _highest_patient_number())
    return format_patient_id(current + 1)


@transaction.atomic
def next_patient_id() -> str:
    """Allocate the next ``P%03d`` identifier.

    The counter row is locked for the rest of the transaction, so two
    concurrent registrations serialise here instead of reading the same
    maximum.  Identifiers written outside the counter (imports, fixtures)
    are honoured by never going below the highest one stored.
    """
    Sequence.objects.get_or_create(name=PATIENT_SEQUENCE)
    seq = Sequence.objects.select_for_update().get(name=PATIENT_SEQUENCE)
    seq.value = max(seq.value, _highest_patient_number()) + 1
    seq.save(update_fields=['value'])
    return format_patient_id(seq.value)


def _validate_password(password: str) -> None:
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise BadRequest(f'Password must be at least {settings.MIN_PASSWORD_LENGTH} characters')


@transaction.atomic
def register_account(role: str, *, email: str, password: Optional[str], name: str,
                     generate_password: bool = False, **extra) -> tuple[Account, Optional[str]]:
    """Create an account in the table for ``role``.

    Returns the account and, when ``generate_password`` produced one, the
    initial password so the caller can hand it over.  Emails must be unique
    across all three tables.
    """
    model = model_for_role(role)
    email = Account.normalize_email(email)
    if not email or not name or not (password or generate_password):
        raise BadRequest('All fields are required')
    if model is Doctor and not (extra.get('specialization') or '').strip():
        raise BadRequest('Specialization is required for doctors')
    if email_in_use(email):
        raise BadRequest('User already exists')

    initial_password = None
    if password:
        _validate_password(password)
    else:
        password = initial_password = secrets.token_urlsafe(12)

    fields = {k: v for k, v in extra.items() if v is not None}
    if model is Patient:
        fields['patient_id'] = next_patient_id()
    account = model(email=email, name=name, **fields)
    account.set_password(password)
    account.save()
    logger.info('registered %s account id=%s email=%s', model.role, account.pk, email)
    return account, initial_password


def update_password(account: Account, raw_password: Optional[str]) -> bool:
    """Re-hash only when the password actually changed."""
    if not raw_password or account.check_password(raw_password):
        return False
    _validate_password(raw_password)
    account.set_password(raw_password)
    return True


def authenticate(role: Optional[str], email: Optional[str], password: Optional[str]) -> Optional[Account]:
    """Lookup-then-compare; ``None`` for an unknown email or a wrong password."""
    account = find_account(role or '', email or '')
    if account is None:
        logger.info('login failed: no %s account for %s', role, Account.normalize_email(email))
        return None
    if not account.check_password(password or ''):
        logger.info('login failed: bad password for %s', account.email)
        return None
    return account


def account_payload(account: Account) -> dict:
    """Public representation of an account; never includes the password hash."""
    data = {
        'id': account.pk,
        'email': account.email,
        'name': account.name,
        'role': account.role,
        'createdAt': account.created_at.isoformat() if account.created_at else None,
    }
    if isinstance(account, Doctor):
        data.update({
            'specialization': account.specialization,
            'experience': account.experience,
            'contactNumber': account.contact_number,
            'availability': account.availability,
        })
    elif isinstance(account, Patient):
        from clinic.services.patients import patient_payload
        data.update(patient_payload(account))
    return data


def user_counts() -> dict:
    admins = Admin.objects.count()
    doctors = Doctor.objects.count()
    patients = Patient.objects.count()
    return {
        'totalUsers': admins + doctors + patients,
        'admins': admins,
        'doctors': doctors,
        'patients': patients,
    }


_ACCOUNT_FIELDS = {
    'email': 'email',
    'name': 'name',
    'specialization': 'specialization',
    'experience': 'experience',
    'contactNumber': 'contact_number',
    'availability': 'availability',
    'gender': 'gender',
    'phone': 'phone',
    'address': 'address',
}


@transaction.atomic
def update_account(account: Account, data: dict) -> Account:
    """Apply an admin edit; keys that do not exist on the account's table are ignored."""
    changed = []
    for key, attr in _ACCOUNT_FIELDS.items():
        if key not in data or not hasattr(account, attr):
            continue
        value = data[key]
        if attr == 'email':
            value = Account.normalize_email(value)
            if value != account.email and email_in_use(value):
                raise BadRequest('User already exists')
        setattr(account, attr, value)
        changed.append(attr)
    if changed:
        account.save(update_fields=changed)
    return account


def delete_account(role: str, pk) -> Account:
    account = get_account(role, pk)
    account.delete()
    logger.info('deleted %s account id=%s email=%s', role, pk, account.email)
    return account


def all_accounts() -> list[dict]:
    rows = []
    for model in ROLES.values():
        rows.extend(account_payload(a) for a in model.objects.order_by('created_at'))
    return rows

from django.contrib.auth.hashers import BCryptSHA256PasswordHasher


class ClinicBCryptPasswordHasher(BCryptSHA256PasswordHasher):
    """bcrypt (SHA-256 prehashed) with a cost factor of 10."""

    rounds = 10

import importlib.util
import os
import subprocess
import sys

import pytest
from django.conf import settings

SETTINGS_FILE = settings.BASE_DIR / 'wellness' / 'settings.py'


def load_settings_copy():
    spec = importlib.util.spec_from_file_location('wellness_settings_copy', SETTINGS_FILE)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def prod_env(monkeypatch):
    monkeypatch.setenv('ENV', 'prod')
    monkeypatch.setenv('DEBUG', '0')
    monkeypatch.setenv('ALLOWED_HOSTS', 'api.wellness.example')
    monkeypatch.setenv('SECRET_KEY', 'k' * 50)
    monkeypatch.delenv('JWT_SECRET', raising=False)


def test_prod_refuses_default_jwt_secret(prod_env):
    with pytest.raises(RuntimeError, match='JWT_SECRET'):
        load_settings_copy()


def test_prod_accepts_configured_jwt_secret(prod_env, monkeypatch):
    monkeypatch.setenv('JWT_SECRET', 's' * 40)
    loaded = load_settings_copy()
    assert loaded.SIMPLE_JWT['SIGNING_KEY'] == 's' * 40


def test_dev_falls_back_to_development_secret(monkeypatch):
    monkeypatch.setenv('ENV', 'dev')
    monkeypatch.delenv('JWT_SECRET', raising=False)
    loaded = load_settings_copy()
    assert loaded.JWT_SECRET == loaded.DEV_JWT_SECRET


def test_project_boots_in_a_fresh_interpreter():
    # Import order at startup must not depend on what tests imported first
    env = dict(os.environ, DJANGO_SETTINGS_MODULE='wellness.settings', ENV='dev')
    result = subprocess.run(
        [sys.executable, 'manage.py', 'check'],
        cwd=settings.BASE_DIR, env=env, capture_output=True, text=True,
    )
    assert result.returncode == 0, result.stderr

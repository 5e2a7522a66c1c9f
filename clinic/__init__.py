"""Clinic application for the wellness backend.

Accounts for the three roles, appointments, patient records and the
reporting endpoints consumed by the dashboard.
"""

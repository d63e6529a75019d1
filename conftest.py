"""
Pytest configuration for Django tests.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'storefront.settings')

"""
Service settings. Module-level constants, overridable from the environment.
"""
import os

SERVICE_NAME = 'household-projection-api'
API_VERSION = '1.0.0'

LOG_LEVEL = os.environ.get('PROJECTION_LOG_LEVEL', 'INFO').upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        'PROJECTION_CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080',
    ).split(',')
    if origin.strip()
]

ALLOWED_EXTENSIONS = {'csv'}
MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB

MAX_SAVED_SCENARIOS = int(os.environ.get('PROJECTION_MAX_SCENARIOS', '5'))

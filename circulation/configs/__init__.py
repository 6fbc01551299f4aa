#!/usr/bin/env python

"""
    Configurations for Circulation

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import os


# Determine environment
TESTING = os.getenv("TESTING", "false").lower() == "true"

# API server configuration
HOST = os.environ.get('CIRCULATION_HOST', 'localhost')
PORT = int(os.environ.get('CIRCULATION_PORT', 8080))
WORKERS = int(os.environ.get('CIRCULATION_WORKERS', 1))
DEBUG = bool(int(os.environ.get('CIRCULATION_DEBUG', 0)))
LOG_LEVEL = os.environ.get('CIRCULATION_LOG_LEVEL', 'info')

OPTIONS = {
    'host': HOST,
    'port': PORT,
    'log_level': LOG_LEVEL,
    'reload': DEBUG,
    'workers': WORKERS,
}

DB_CONFIG = {
    'user': os.environ.get('DB_USER', 'postgres'),
    'password': os.environ.get('DB_PASSWORD'),
    'host': os.environ.get('DB_HOST', 'localhost'),
    'port': int(os.environ.get('DB_PORT', '5432')),
    'dbname': os.environ.get('DB_NAME', 'circulation'),
}

# Database configuration
DB_URI = os.environ.get('DATABASE_URL') or (
    "sqlite:///:memory:" if TESTING else
    'postgresql+psycopg2://{user}:{password}@{host}:{port}/{dbname}'.format(**DB_CONFIG)
)

# Lending policy
LOAN_LIMIT = int(os.environ.get('CIRCULATION_LOAN_LIMIT', 0))  # 0 disables the cap
LOAN_PERIOD_DAYS = int(os.environ.get('CIRCULATION_LOAN_PERIOD_DAYS', 14))
MAX_LOAN_DAYS = 3650

__all__ = [
    'HOST', 'PORT', 'DEBUG', 'LOG_LEVEL', 'OPTIONS', 'DB_URI', 'DB_CONFIG',
    'TESTING', 'LOAN_LIMIT', 'LOAN_PERIOD_DAYS', 'MAX_LOAN_DAYS'
]

"""Shared pytest configuration: AWS defaults for boto3 and moto."""

import os

# Handlers build their services at import time; boto3 needs a region and
# the services need a table name before that happens.
os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('AWS_SECURITY_TOKEN', 'testing')
os.environ.setdefault('AWS_SESSION_TOKEN', 'testing')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('EXPENSES_TABLE', 'test-expenses')

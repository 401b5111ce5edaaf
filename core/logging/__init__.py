"""
Logging utilities for the GDPR admin.

This package provides:
- Structured JSON logging
- Sensitive data filtering for PII protection
- Security and business event helpers
"""

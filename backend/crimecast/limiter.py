"""Shared rate limiter for the LLM-backed endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from crimecast.config import get_settings

settings = get_settings()

limiter = Limiter(key_func=get_remote_address)

ORACLE_RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"

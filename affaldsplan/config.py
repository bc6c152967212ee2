"""
This module contains configuration settings for the application.
"""
import logging
import os
from datetime import timedelta

# Renoweb legacy JSON service of the municipality
RENOWEB_BASE_URL = os.environ.get(
    "RENOWEB_BASE_URL", "https://esbjerg.renoweb.dk/Legacy/JService.asmx/"
)
REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", 10))

# Text Renoweb returns instead of dates when a material has no pickups.
# Verify against the live provider when it changes locale or wording.
NO_PICKUPS_SENTINEL = os.environ.get("NO_PICKUPS_SENTINEL", "Ingen planlagte tømninger")

# Calendar artifact cache
CACHE_DIR = os.environ.get("CACHE_DIR", os.path.join("var", "cache"))
CACHE_TTL = timedelta(days=1)

# Calendar document
CALENDAR_NAME = os.environ.get("CALENDAR_NAME", "Affaldsplan")
CALENDAR_PRODID = "-//affald.skytte.it//Affaldsplan//DA"
UID_DOMAIN = os.environ.get("UID_DOMAIN", "affald.skytte.it")
ALARM_TIME_HOUR = 20
REMINDER_DAYS_BEFORE = 1
ICS_FILENAME = "affaldsafhentning.ics"

# Logging
LOG_LEVEL = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
LOG_FILE = os.environ.get("LOG_FILE")

# Web server
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("SERVER_PORT", 8080))

from enum import StrEnum


class TTL:
    """Link lifetimes in seconds."""

    ONE_HOUR = 3_600  # 60 * 60
    ONE_DAY = 86_400  # 60 * 60 * 24


class Limits:
    """Fixed limits for link records and identifiers."""

    SINGLE_CLICK_MAX_CLICKS = 1
    SHORT_ID_LENGTH = 12  # Minimum length of a public short identifier
    SHORT_ID_ATTEMPTS = 5  # Fresh identifiers tried before giving up on a collision
    REDIS_CAS_ATTEMPTS = 32  # WATCH/MULTI retries before a mutation is abandoned


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_FILE = 'TEMPLINKS_CONFIG_FILE'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

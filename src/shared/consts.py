from enum import Enum


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnumPredictionAction(str, Enum):
    PREDICT_SINGLE = "predict_single"
    PREDICT_BATCH = "predict_batch"
    TRAIN_MODEL = "train_model"


# Loggers that echo full request URLs (provider API keys travel in the query).
NOISY_HTTP_LOGGERS = ("httpx", "httpcore")

PERSISTENCE_LOG_CHANNEL = "persistence"

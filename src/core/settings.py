"""generalised settings for the journal importer project.

per-instance settings are in /path/to/project/app.cfg
example settings can be found in /path/to/project/example.cfg

every setting has a default suitable for development and testing. without an `app.cfg`
a sqlite database in the project directory is used and no events are sent."""

import os
from os.path import join
import configparser
from pythonjsonlogger import jsonlogger

PROJECT_NAME = "bepress-import"

# Build paths inside the project like this: os.path.join(SRC_DIR, ...)
SRC_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # "/path/to/project/src/"
PROJECT_DIR = os.path.dirname(SRC_DIR)  # "/path/to/project/"

CFG_NAME = os.environ.get("APP_CFG", "app.cfg")
DYNCONFIG = configparser.ConfigParser(
    **{"allow_no_value": True, "defaults": {"dir": SRC_DIR, "project": PROJECT_NAME}}
)
DYNCONFIG.read(join(PROJECT_DIR, CFG_NAME))  # "/path/to/project/app.cfg"


def cfg(path, default=0xDEADBEEF):
    lu = {
        "True": True,
        "true": True,
        "False": False,
        "false": False,
    }  # cast any obvious booleans
    try:
        val = DYNCONFIG.get(*path.split("."))
        return lu.get(val, val)
    # given key in section hasn't been defined
    except (
        configparser.NoOptionError,
        configparser.NoSectionError,
    ):
        if default == 0xDEADBEEF:
            raise ValueError("no value/section set for setting at %r" % path)
        return default


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = cfg("general.secret-key", "these-are-dev-settings.DO.NOT.USE.IN.PROD.EVER")

DEBUG = cfg("general.debug", True)
assert isinstance(
    DEBUG, bool
), "'debug' must be either True or False as a boolean, not %r" % (DEBUG,)

ALLOWED_HOSTS = [host for host in cfg("general.allowed-hosts", "").split(",") if host]

# Application definition

INSTALLED_APPS = (
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "journal",
)

# Database
# https://docs.djangoproject.com/en/stable/ref/settings/#databases

DATABASES = {
    "default": {
        "ENGINE": cfg("database.engine", "django.db.backends.sqlite3"),
        "NAME": cfg("database.name", join(PROJECT_DIR, "db.sqlite3")),
        "USER": cfg("database.user", ""),
        "PASSWORD": cfg("database.password", ""),
        "HOST": cfg("database.host", ""),
        "PORT": cfg("database.port", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

# Internationalization

LANGUAGE_CODE = "en-us"

TIME_ZONE = "UTC"

USE_I18N = True

USE_TZ = True

# imported files are written to the default file storage, rooted here
MEDIA_ROOT = cfg("general.media-root", join(PROJECT_DIR, "media"))
MEDIA_URL = "/media/"

#
# importer
#

# genre of the submission files created for galleys
IMPORT_GENRE_KEY = cfg("import.genre-key", "SUBMISSION")

# policy text of sections created by the importer
IMPORT_SECTION_POLICY = cfg(
    "import.section-policy", "Section created automatically while importing articles."
)

#
# notification events
#

EVENT_BUS = {
    "region": cfg("bus.region", "us-east-1"),
    "subscriber": cfg("bus.subscriber", None),
    "name": cfg("bus.name", "bus-submissions"),
    "env": cfg("bus.env", "dev"),
}

#
# logging
#

LOG_NAME = "%s.log" % PROJECT_NAME  # "bepress-import.log"

INGESTION_LOG_NAME = "ingestion-%s.log" % PROJECT_NAME

LOG_DIR = cfg("general.log-dir", PROJECT_DIR if DEBUG else "/var/log/")
LOG_FILE = join(LOG_DIR, LOG_NAME)  # "/var/log/bepress-import.log"
INGESTION_LOG_FILE = join(LOG_DIR, INGESTION_LOG_NAME)

ATTRS = [
    "asctime",
    "created",
    "levelname",
    "message",
    "filename",
    "funcName",
    "lineno",
    "module",
    "pathname",
]
FORMAT_STR = " ".join(["%(" + v + ")s" for v in ATTRS])

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {"()": jsonlogger.JsonFormatter, "format": FORMAT_STR},
        "brief": {"format": "%(levelname)s - %(message)s"},
    },
    "handlers": {
        "stderr": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "brief",
        },
        "project.log": {
            "level": "DEBUG",
            "class": "logging.FileHandler",
            "filename": LOG_FILE,
            "formatter": "json",
            "delay": True,
        },
        # entries go to the ingestion-bepress-import.log file
        "ingestion.log": {
            "level": "DEBUG",
            "class": "logging.FileHandler",
            "filename": INGESTION_LOG_FILE,
            "formatter": "json",
            "delay": True,
        },
    },
    "loggers": {
        "": {"handlers": ["stderr", "project.log"], "level": "INFO", "propagate": True},
    },
}

module_loggers = [
    "journal.bepress_ingestor",
    "journal.logic",
    "journal.submissions",
    "journal.authors",
    "journal.galleys",
    "journal.files",
    "journal.events",
    "journal.management.commands.bepress_import",
]
logger = {
    "level": "INFO",
    "handlers": ["ingestion.log", "project.log", "stderr"],
    "propagate": False,  # don't propagate up to root logger
}
LOGGING["loggers"].update(
    dict(list(zip(module_loggers, [logger] * len(module_loggers))))
)

# ---

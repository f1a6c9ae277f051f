"""
imports a single bepress article record and its PDF files into a journal.

    ./manage.py bepress_import --journal my-journal --user admin --editor jdoe \\
        --volume 3 --number 2 --email noreply@example.org record.xml paper.pdf

a JSON result is written to stdout. the exit code is 0 on success, 1 if the article was
rejected and 2 on an unhandled error.
"""

from collections import OrderedDict
import sys
from xml.etree import ElementTree
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from journal import bepress_ingestor, codes, models
from journal.utils import StateError, RollbackError, json_dumps, formatted_traceback
import logging

LOG = logging.getLogger(__name__)

IMPORTED, INVALID, ERROR = "imported", "invalid", "error"


def load(options):
    "returns the importer arguments for the given command options"
    try:
        journal = models.Journal.objects.get(path=options["journal"])
    except models.Journal.DoesNotExist:
        raise StateError(codes.BAD_REQUEST, "journal not found: %r" % options["journal"])

    User = get_user_model()
    users = {}
    for key in ["user", "editor"]:
        try:
            users[key] = User.objects.get(**{User.USERNAME_FIELD: options[key]})
        except User.DoesNotExist:
            raise StateError(codes.BAD_REQUEST, "%s not found: %r" % (key, options[key]))

    try:
        xml_article = ElementTree.parse(options["infile"]).getroot()
    except (ElementTree.ParseError, OSError) as err:
        raise StateError(codes.BAD_REQUEST, "could not read the xml you gave me: %s" % err)

    return {
        "journal": journal,
        "user": users["user"],
        "editor": users["editor"],
        "xml_article": xml_article,
        "pdf_paths": options["pdfs"],
        "volume": options["volume"],
        "number": options["number"],
        "default_email": options["email"],
        "genre_key": options["genre"],
    }


class Command(BaseCommand):
    help = "Imports a bepress article record and its PDF files"

    def add_arguments(self, parser):
        parser.add_argument("--journal", required=True, help="path of the journal")
        parser.add_argument("--user", required=True)
        parser.add_argument("--editor", required=True)
        parser.add_argument("--volume", required=True)
        parser.add_argument("--number", required=True)
        parser.add_argument(
            "--email", required=True, help="email for authors without one"
        )
        parser.add_argument("--genre", default=None, help="file genre of the galleys")
        parser.add_argument("infile", help="bepress article record")
        parser.add_argument("pdfs", nargs="+", help="PDF files of the article")

    def write(self, struct, exit_code):
        self.stdout.write(json_dumps(struct))
        sys.exit(exit_code)

    def invalid(self, errors):
        self.write(
            OrderedDict(
                [
                    ("status", INVALID),
                    ("errors", [{"code": code, "message": msg} for code, msg in errors]),
                ]
            ),
            1,
        )

    def error(self, code, message, trace=None):
        self.write(
            OrderedDict(
                [
                    ("status", ERROR),
                    ("code", code),
                    ("message", message),
                    ("trace", trace),
                ]
            ),
            2,
        )

    def handle(self, *args, **options):
        log_context = {"journal": options["journal"], "infile": options["infile"]}
        try:
            kwargs = load(options)
        except StateError as err:
            LOG.warning(err.message, extra=log_context)
            self.invalid([(err.code, err.message)])

        importer = bepress_ingestor.BepressImporter(**kwargs)
        try:
            result = importer.import_article()
        except RollbackError as err:
            self.error(err.code, importer.catalog(err.code, importer.errors[-1][1]), err.trace)
        except Exception as err:
            LOG.exception("unhandled exception importing %r", options["infile"], extra=log_context)
            self.error(codes.UNKNOWN, str(err), formatted_traceback(err))

        if not result:
            errors = list(zip([key for key, _ in importer.errors], importer.messages()))
            self.invalid(
                errors or [(codes.BAD_REQUEST, "no 'document' found in the record")]
            )

        self.write(
            OrderedDict(
                [
                    ("status", IMPORTED),
                    ("issue", result["issue"].pk),
                    ("section", result["section"].pk),
                    ("article", result["article"].pk),
                ]
            ),
            0,
        )

"""these constants classify the errors raised while importing an article.

each key maps to an English template. the templates are the default localization
catalog, a calling batch job may supply its own."""

from collections import defaultdict

idx = {}

UNKNOWN = "unknown"
idx[UNKNOWN] = (
    "an error occured that we haven't seen before to know how to best handle it"
)

BAD_REQUEST = "bad-request"
idx[BAD_REQUEST] = "the import request couldn't be parsed or refers to things that don't exist"

MISSING_VOLUME_NUMBER = "missing-volume-number"
idx[MISSING_VOLUME_NUMBER] = (
    "article %(title)r has no usable volume and issue number. both must be present and numeric"
)

MISSING_PUB_DATE = "missing-pub-date"
idx[MISSING_PUB_DATE] = (
    "article %(title)r has no publication date with at least a year and a month. an issue can't be created without one"
)

MISSING_ISSUE = "missing-issue"
idx[MISSING_ISSUE] = "no issue could be found or created for article %(title)r"

MISSING_SECTION = "missing-section"
idx[MISSING_SECTION] = "no section could be found or created for article %(title)r"

MISSING_TITLE = "missing-title"
idx[MISSING_TITLE] = "article has no title in any locale"

MISSING_EDITOR_GROUP = "missing-editor-group"
idx[MISSING_EDITOR_GROUP] = (
    "the journal has no manager user group assigned to the production stage. the editor can't be assigned to article %(title)r"
)

MISSING_GENRE = "missing-genre"
idx[MISSING_GENRE] = (
    "the journal has no file genre %(genre)r. files for article %(title)r can't be attached"
)

ROLLBACK_FAILED = "rollback-failed"
idx[ROLLBACK_FAILED] = (
    "failed to remove %(item)s while cleaning up after a failed import of article %(title)r. records have been left behind"
)

# ---


def explain(code):
    return idx.get(code)


def message(code, params=None):
    "renders the template for `code` with the given `params`"
    # absent parameters render as None rather than raising a KeyError
    params = defaultdict(lambda: None, params or {})
    template = idx.get(code) or idx[UNKNOWN]
    return template % params

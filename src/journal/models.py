from functools import partial
from django.db import models
from django.conf import settings
from annoying.fields import JSONField
from .utils import json_dumps, ordered_json_loads, utcnow, firstnn

# localized values are stored as {locale: value} maps. insertion order is significant.
JSONField = partial(JSONField, serializer=json_dumps, deserializer=ordered_json_loads)

# roles
ROLE_MANAGER, ROLE_SUB_EDITOR, ROLE_AUTHOR, ROLE_READER = (
    "manager",
    "sub-editor",
    "author",
    "reader",
)

# workflow stages
STAGE_SUBMISSION, STAGE_INTERNAL_REVIEW, STAGE_EXTERNAL_REVIEW, STAGE_EDITING, STAGE_PRODUCTION = (
    1,
    2,
    3,
    4,
    5,
)

# submission and publication status
STATUS_QUEUED, STATUS_PUBLISHED, STATUS_DECLINED, STATUS_SCHEDULED = (
    "queued",
    "published",
    "declined",
    "scheduled",
)

ACCESS_OPEN, ACCESS_SUBSCRIPTION = "open", "subscription"

# journal licensing policy
HOLDER_AUTHOR, HOLDER_CONTEXT, HOLDER_OTHER = "author", "context", "other"
YEAR_BASIS_ISSUE, YEAR_BASIS_SUBMISSION = "issue", "submission"
COPYRIGHT_HOLDER, COPYRIGHT_YEAR, LICENSE_URL = (
    "copyright_holder",
    "copyright_year",
    "license_url",
)

FILE_STAGE_PROOF = "proof"
ASSOC_REPRESENTATION = "representation"

KEYWORD, SUBJECT, DISCIPLINE = "keyword", "subject", "discipline"


def role_choices():
    return [
        (ROLE_MANAGER, "Journal manager"),
        (ROLE_SUB_EDITOR, "Section editor"),
        (ROLE_AUTHOR, "Author"),
        (ROLE_READER, "Reader"),
    ]


def stage_choices():
    return [
        (STAGE_SUBMISSION, "Submission"),
        (STAGE_INTERNAL_REVIEW, "Internal review"),
        (STAGE_EXTERNAL_REVIEW, "External review"),
        (STAGE_EDITING, "Copyediting"),
        (STAGE_PRODUCTION, "Production"),
    ]


def status_choices():
    return [
        (STATUS_QUEUED, "Queued"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_DECLINED, "Declined"),
        (STATUS_SCHEDULED, "Scheduled"),
    ]


def access_choices():
    return [(ACCESS_OPEN, "Open access"), (ACCESS_SUBSCRIPTION, "Subscription")]


def vocab_choices():
    return [(KEYWORD, "Keyword"), (SUBJECT, "Subject"), (DISCIPLINE, "Discipline")]


def localized(value, locale):
    "returns the `locale` entry of a localized map, if any"
    if not value:
        return None
    return value.get(locale)


class Journal(models.Model):
    path = models.SlugField(
        max_length=32, unique=True, help_text="short unique name used in urls"
    )
    name = JSONField(default=dict, help_text="name of the journal, keyed by locale")
    primary_locale = models.CharField(max_length=14, default="en_US")

    copyright_holder_type = models.CharField(
        max_length=10,
        blank=True,
        null=True,
        choices=[
            (HOLDER_AUTHOR, "Author"),
            (HOLDER_CONTEXT, "Journal"),
            (HOLDER_OTHER, "Other"),
        ],
        help_text="who holds copyright of published articles by default. unset means the journal",
    )
    copyright_holder_other = JSONField(
        null=True, blank=True, help_text="copyright holder when type is 'other'"
    )
    copyright_year_basis = models.CharField(
        max_length=10,
        default=YEAR_BASIS_ISSUE,
        choices=[
            (YEAR_BASIS_ISSUE, "Issue publication date"),
            (YEAR_BASIS_SUBMISSION, "Article publication date"),
        ],
    )
    license_url = models.URLField(
        max_length=255, blank=True, null=True, help_text="default license for articles"
    )

    def localized_name(self, locale=None):
        "the journal name in the given locale, falling back to any name at all"
        locale = locale or self.primary_locale
        return localized(self.name, locale) or firstnn(list((self.name or {}).values())) or ""

    def license_default(self, field, publication):
        "returns this journal's default value for one of the licensing fields of `publication`"
        if field == COPYRIGHT_HOLDER:
            if self.copyright_holder_type == HOLDER_AUTHOR:
                groups = UserGroup.objects.filter(
                    pk__in=publication.author_set.values_list("user_group", flat=True)
                )
                return {self.primary_locale: publication.author_string(groups)}
            if self.copyright_holder_type in [HOLDER_CONTEXT, None, ""]:
                return self.name
            return self.copyright_holder_other

        if field == COPYRIGHT_YEAR:
            year = utcnow().year
            if self.copyright_year_basis == YEAR_BASIS_SUBMISSION:
                if publication.date_published:
                    year = publication.date_published.year
            elif self.copyright_year_basis == YEAR_BASIS_ISSUE:
                issue = publication.issue
                if issue and issue.published and issue.date_published:
                    year = issue.date_published.year
            return year

        if field == LICENSE_URL:
            return self.license_url

        raise ValueError("unknown licensing field %r" % field)

    def __str__(self):
        return self.path

    def __repr__(self):
        return "<Journal %s>" % self.path


class UserGroup(models.Model):
    journal = models.ForeignKey(Journal, on_delete=models.CASCADE)
    role = models.CharField(max_length=15, choices=role_choices())
    name = JSONField(default=dict)
    show_title = models.BooleanField(
        default=False,
        help_text="display the group name after its members in author listings",
    )
    stages = JSONField(
        default=list, help_text="list of workflow stages this group is assigned to"
    )

    def assigned_to_stage(self, stage):
        return stage in (self.stages or [])

    def localized_name(self, locale=None):
        return localized(self.name, locale or self.journal.primary_locale) or ""

    class Meta:
        ordering = ("id",)

    def __str__(self):
        return "%s %s" % (self.journal, self.role)

    def __repr__(self):
        return "<UserGroup %s>" % self


class Genre(models.Model):
    journal = models.ForeignKey(Journal, on_delete=models.CASCADE)
    entry_key = models.CharField(
        max_length=30, help_text="upper case key, for example 'SUBMISSION'"
    )
    name = JSONField(default=dict)

    class Meta:
        unique_together = ("journal", "entry_key")

    def __str__(self):
        return self.entry_key

    def __repr__(self):
        return "<Genre %s>" % self.entry_key


class Issue(models.Model):
    journal = models.ForeignKey(Journal, on_delete=models.CASCADE)
    title = JSONField(default=dict)
    volume = models.PositiveIntegerField()
    number = models.PositiveIntegerField()
    year = models.PositiveSmallIntegerField()
    published = models.BooleanField(default=False)
    current = models.BooleanField(default=False)
    date_published = models.DateTimeField(blank=True, null=True)
    access_status = models.CharField(
        max_length=15, choices=access_choices(), default=ACCESS_OPEN
    )
    show_volume = models.BooleanField(default=True)
    show_number = models.BooleanField(default=True)
    show_year = models.BooleanField(default=True)
    show_title = models.BooleanField(default=False)

    datetime_record_created = models.DateTimeField(auto_now_add=True)
    datetime_record_updated = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("id",)

    def __str__(self):
        return localized(self.title, self.journal.primary_locale) or "%s.%s" % (
            self.volume,
            self.number,
        )

    def __repr__(self):
        return "<Issue %s>" % self


class Section(models.Model):
    journal = models.ForeignKey(Journal, on_delete=models.CASCADE)
    title = JSONField(default=dict)
    abbrev = JSONField(default=dict)
    policy = JSONField(default=dict)
    seq = models.PositiveSmallIntegerField(default=0)
    abstracts_not_required = models.BooleanField(default=False)
    meta_indexed = models.BooleanField(default=True)
    meta_reviewed = models.BooleanField(default=True)
    editor_restricted = models.BooleanField(default=False)
    hide_title = models.BooleanField(default=False)
    hide_author = models.BooleanField(default=False)

    class Meta:
        ordering = ("seq", "id")

    def __str__(self):
        return localized(self.title, self.journal.primary_locale) or str(self.pk)

    def __repr__(self):
        return "<Section %s>" % self


class Submission(models.Model):
    journal = models.ForeignKey(Journal, on_delete=models.CASCADE)
    locale = models.CharField(max_length=14)
    status = models.CharField(
        max_length=10, choices=status_choices(), default=STATUS_QUEUED
    )
    stage = models.PositiveSmallIntegerField(
        choices=stage_choices(), default=STAGE_SUBMISSION
    )
    submission_progress = models.PositiveSmallIntegerField(default=0)
    date_submitted = models.DateTimeField(blank=True, null=True)
    date_last_activity = models.DateTimeField(blank=True, null=True)
    last_modified = models.DateTimeField(auto_now=True)
    current_publication = models.ForeignKey(
        "Publication",
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="+",
        help_text="the publication version currently presented for this submission",
    )

    class Meta:
        ordering = ("id",)

    def __str__(self):
        return "submission %s" % self.pk

    def __repr__(self):
        return "<Submission %s>" % self.pk


class Publication(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE)
    section = models.ForeignKey(
        Section, on_delete=models.SET_NULL, blank=True, null=True
    )
    issue = models.ForeignKey(Issue, on_delete=models.SET_NULL, blank=True, null=True)
    version = models.PositiveSmallIntegerField(default=1)
    status = models.CharField(
        max_length=10, choices=status_choices(), default=STATUS_QUEUED
    )
    languages = JSONField(default=list, help_text="ISO 639-1 language codes")
    title = JSONField(default=dict)
    abstract = JSONField(default=dict)
    pages = models.CharField(max_length=255, blank=True, null=True)
    copyright_holder = JSONField(blank=True, null=True)
    copyright_year = models.PositiveSmallIntegerField(blank=True, null=True)
    license_url = models.URLField(max_length=255, blank=True, null=True)
    access_status = models.CharField(
        max_length=15, choices=access_choices(), default=ACCESS_OPEN
    )
    seq = models.PositiveIntegerField(default=0)
    date_published = models.DateTimeField(blank=True, null=True)
    doi = models.CharField(max_length=255, blank=True, null=True)
    last_modified = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("version",)  # ASC, earliest to latest

    def author_string(self, user_groups, locale=None):
        """formats this publication's authors for display, for example:
        'Jane Doe, John Smith (Translator); Ann Other'.
        a group's name follows its members only if the group is in `user_groups` and shows its title"""
        locale = locale or self.submission.locale
        groups = {group.pk: group for group in user_groups}

        def group_title(group_id):
            group = groups.get(group_id)
            if group and group.show_title:
                return " (%s)" % group.localized_name(locale)
            return ""

        string = ""
        last_group_id = None
        author_list = list(self.author_set.order_by("seq"))
        for author in author_list:
            if string:
                if last_group_id != author.user_group_id:
                    string += group_title(last_group_id) + "; "
                else:
                    string += ", "
            string += author.full_name(locale)
            last_group_id = author.user_group_id
        if author_list:
            string += group_title(last_group_id)
        return string

    def __str__(self):
        return "%s v%s" % (self.submission_id, self.version)

    def __repr__(self):
        return "<Publication %s>" % self


class Author(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE)
    publication = models.ForeignKey(Publication, on_delete=models.CASCADE)
    given_name = JSONField(default=dict)
    family_name = JSONField(default=dict)
    preferred_public_name = JSONField(default=dict)
    affiliation = JSONField(default=dict)
    email = models.EmailField(max_length=255)
    seq = models.PositiveSmallIntegerField(help_text="1-based position in author list")
    primary_contact = models.BooleanField(default=False)
    include_in_browse = models.BooleanField(default=True)
    user_group = models.ForeignKey(
        UserGroup, on_delete=models.SET_NULL, blank=True, null=True
    )

    class Meta:
        ordering = ("seq",)

    def full_name(self, locale):
        "preferred public name if there is one, else given and family names"
        preferred = localized(self.preferred_public_name, locale)
        if preferred:
            return preferred
        given = localized(self.given_name, locale) or ""
        family = localized(self.family_name, locale) or ""
        return ("%s %s" % (given, family)).strip()

    def __str__(self):
        return self.full_name(self.submission.locale)

    def __repr__(self):
        return "<Author %s>" % self


class StageAssignment(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE)
    user_group = models.ForeignKey(UserGroup, on_delete=models.CASCADE)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)
    date_assigned = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return "%s => %s" % (self.user, self.submission)

    def __repr__(self):
        return "<StageAssignment %s>" % self


class StoredFile(models.Model):
    path = models.CharField(max_length=255, help_text="path within file storage")
    mimetype = models.CharField(max_length=255)

    def __str__(self):
        return self.path

    def __repr__(self):
        return "<StoredFile %s>" % self.path


class SubmissionFile(models.Model):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE)
    file = models.ForeignKey(StoredFile, on_delete=models.PROTECT)
    genre = models.ForeignKey(Genre, on_delete=models.SET_NULL, blank=True, null=True)
    file_stage = models.CharField(max_length=20, default=FILE_STAGE_PROOF)
    uploader = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, blank=True, null=True
    )
    assoc_type = models.CharField(max_length=20, blank=True, null=True)
    assoc_id = models.PositiveIntegerField(blank=True, null=True)
    name = JSONField(default=dict)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    def __str__(self):
        return localized(self.name, self.submission.locale) or self.file.path

    def __repr__(self):
        return "<SubmissionFile %s>" % self


class Galley(models.Model):
    "a representation of a publication, a PDF for example"

    publication = models.ForeignKey(Publication, on_delete=models.CASCADE)
    locale = models.CharField(max_length=14)
    name = JSONField(default=dict)
    seq = models.PositiveSmallIntegerField(default=1)
    label = models.CharField(max_length=32)
    submission_file = models.ForeignKey(
        SubmissionFile,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="+",
    )

    class Meta:
        ordering = ("seq", "id")

    def __str__(self):
        return "%s %s" % (self.label, self.locale)

    def __repr__(self):
        return "<Galley %s>" % self


class ControlledVocabEntry(models.Model):
    publication = models.ForeignKey(Publication, on_delete=models.CASCADE)
    vocab = models.CharField(max_length=15, choices=vocab_choices())
    locale = models.CharField(max_length=14)
    seq = models.PositiveSmallIntegerField()
    term = models.CharField(max_length=255)

    class Meta:
        ordering = ("vocab", "locale", "seq")

    def __str__(self):
        return "%s: %s" % (self.vocab, self.term)

    def __repr__(self):
        return "<ControlledVocabEntry %s>" % self

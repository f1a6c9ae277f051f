import annoying.fields
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import journal.utils


def json_field(**kwargs):
    return annoying.fields.JSONField(
        serializer=journal.utils.json_dumps,
        deserializer=journal.utils.ordered_json_loads,
        **kwargs
    )


STATUS_CHOICES = [
    ("queued", "Queued"),
    ("published", "Published"),
    ("declined", "Declined"),
    ("scheduled", "Scheduled"),
]

ACCESS_CHOICES = [("open", "Open access"), ("subscription", "Subscription")]

STAGE_CHOICES = [
    (1, "Submission"),
    (2, "Internal review"),
    (3, "External review"),
    (4, "Copyediting"),
    (5, "Production"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Journal",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("path", models.SlugField(help_text="short unique name used in urls", max_length=32, unique=True)),
                ("name", json_field(default=dict, help_text="name of the journal, keyed by locale")),
                ("primary_locale", models.CharField(default="en_US", max_length=14)),
                ("copyright_holder_type", models.CharField(blank=True, choices=[("author", "Author"), ("context", "Journal"), ("other", "Other")], help_text="who holds copyright of published articles by default. unset means the journal", max_length=10, null=True)),
                ("copyright_holder_other", json_field(blank=True, help_text="copyright holder when type is 'other'", null=True)),
                ("copyright_year_basis", models.CharField(choices=[("issue", "Issue publication date"), ("submission", "Article publication date")], default="issue", max_length=10)),
                ("license_url", models.URLField(blank=True, help_text="default license for articles", max_length=255, null=True)),
            ],
        ),
        migrations.CreateModel(
            name="Genre",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_key", models.CharField(help_text="upper case key, for example 'SUBMISSION'", max_length=30)),
                ("name", json_field(default=dict)),
                ("journal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.journal")),
            ],
            options={
                "unique_together": {("journal", "entry_key")},
            },
        ),
        migrations.CreateModel(
            name="Issue",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", json_field(default=dict)),
                ("volume", models.PositiveIntegerField()),
                ("number", models.PositiveIntegerField()),
                ("year", models.PositiveSmallIntegerField()),
                ("published", models.BooleanField(default=False)),
                ("current", models.BooleanField(default=False)),
                ("date_published", models.DateTimeField(blank=True, null=True)),
                ("access_status", models.CharField(choices=ACCESS_CHOICES, default="open", max_length=15)),
                ("show_volume", models.BooleanField(default=True)),
                ("show_number", models.BooleanField(default=True)),
                ("show_year", models.BooleanField(default=True)),
                ("show_title", models.BooleanField(default=False)),
                ("datetime_record_created", models.DateTimeField(auto_now_add=True)),
                ("datetime_record_updated", models.DateTimeField(auto_now=True)),
                ("journal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.journal")),
            ],
            options={
                "ordering": ("id",),
            },
        ),
        migrations.CreateModel(
            name="Section",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", json_field(default=dict)),
                ("abbrev", json_field(default=dict)),
                ("policy", json_field(default=dict)),
                ("seq", models.PositiveSmallIntegerField(default=0)),
                ("abstracts_not_required", models.BooleanField(default=False)),
                ("meta_indexed", models.BooleanField(default=True)),
                ("meta_reviewed", models.BooleanField(default=True)),
                ("editor_restricted", models.BooleanField(default=False)),
                ("hide_title", models.BooleanField(default=False)),
                ("hide_author", models.BooleanField(default=False)),
                ("journal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.journal")),
            ],
            options={
                "ordering": ("seq", "id"),
            },
        ),
        migrations.CreateModel(
            name="StoredFile",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("path", models.CharField(help_text="path within file storage", max_length=255)),
                ("mimetype", models.CharField(max_length=255)),
            ],
        ),
        migrations.CreateModel(
            name="UserGroup",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("manager", "Journal manager"), ("sub-editor", "Section editor"), ("author", "Author"), ("reader", "Reader")], max_length=15)),
                ("name", json_field(default=dict)),
                ("show_title", models.BooleanField(default=False, help_text="display the group name after its members in author listings")),
                ("stages", json_field(default=list, help_text="list of workflow stages this group is assigned to")),
                ("journal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.journal")),
            ],
            options={
                "ordering": ("id",),
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("locale", models.CharField(max_length=14)),
                ("status", models.CharField(choices=STATUS_CHOICES, default="queued", max_length=10)),
                ("stage", models.PositiveSmallIntegerField(choices=STAGE_CHOICES, default=1)),
                ("submission_progress", models.PositiveSmallIntegerField(default=0)),
                ("date_submitted", models.DateTimeField(blank=True, null=True)),
                ("date_last_activity", models.DateTimeField(blank=True, null=True)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("journal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.journal")),
            ],
            options={
                "ordering": ("id",),
            },
        ),
        migrations.CreateModel(
            name="Publication",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("version", models.PositiveSmallIntegerField(default=1)),
                ("status", models.CharField(choices=STATUS_CHOICES, default="queued", max_length=10)),
                ("languages", json_field(default=list, help_text="ISO 639-1 language codes")),
                ("title", json_field(default=dict)),
                ("abstract", json_field(default=dict)),
                ("pages", models.CharField(blank=True, max_length=255, null=True)),
                ("copyright_holder", json_field(blank=True, null=True)),
                ("copyright_year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("license_url", models.URLField(blank=True, max_length=255, null=True)),
                ("access_status", models.CharField(choices=ACCESS_CHOICES, default="open", max_length=15)),
                ("seq", models.PositiveIntegerField(default=0)),
                ("date_published", models.DateTimeField(blank=True, null=True)),
                ("doi", models.CharField(blank=True, max_length=255, null=True)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("issue", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="journal.issue")),
                ("section", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="journal.section")),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.submission")),
            ],
            options={
                "ordering": ("version",),
            },
        ),
        migrations.AddField(
            model_name="submission",
            name="current_publication",
            field=models.ForeignKey(blank=True, help_text="the publication version currently presented for this submission", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="journal.publication"),
        ),
        migrations.CreateModel(
            name="Author",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("given_name", json_field(default=dict)),
                ("family_name", json_field(default=dict)),
                ("preferred_public_name", json_field(default=dict)),
                ("affiliation", json_field(default=dict)),
                ("email", models.EmailField(max_length=255)),
                ("seq", models.PositiveSmallIntegerField(help_text="1-based position in author list")),
                ("primary_contact", models.BooleanField(default=False)),
                ("include_in_browse", models.BooleanField(default=True)),
                ("publication", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.publication")),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.submission")),
                ("user_group", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="journal.usergroup")),
            ],
            options={
                "ordering": ("seq",),
            },
        ),
        migrations.CreateModel(
            name="ControlledVocabEntry",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("vocab", models.CharField(choices=[("keyword", "Keyword"), ("subject", "Subject"), ("discipline", "Discipline")], max_length=15)),
                ("locale", models.CharField(max_length=14)),
                ("seq", models.PositiveSmallIntegerField()),
                ("term", models.CharField(max_length=255)),
                ("publication", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.publication")),
            ],
            options={
                "ordering": ("vocab", "locale", "seq"),
            },
        ),
        migrations.CreateModel(
            name="StageAssignment",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_assigned", models.DateTimeField(auto_now_add=True)),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.submission")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to=settings.AUTH_USER_MODEL)),
                ("user_group", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.usergroup")),
            ],
        ),
        migrations.CreateModel(
            name="SubmissionFile",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file_stage", models.CharField(default="proof", max_length=20)),
                ("assoc_type", models.CharField(blank=True, max_length=20, null=True)),
                ("assoc_id", models.PositiveIntegerField(blank=True, null=True)),
                ("name", json_field(default=dict)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                ("file", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="journal.storedfile")),
                ("genre", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="journal.genre")),
                ("submission", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.submission")),
                ("uploader", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="Galley",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("locale", models.CharField(max_length=14)),
                ("name", json_field(default=dict)),
                ("seq", models.PositiveSmallIntegerField(default=1)),
                ("label", models.CharField(max_length=32)),
                ("publication", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="journal.publication")),
                ("submission_file", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="journal.submissionfile")),
            ],
            options={
                "ordering": ("seq", "id"),
            },
        ),
    ]

"""tells the search index when imported submissions have changed.

messages are published to an AWS SNS topic. a search indexer subscribed to the topic
re-indexes the submission's metadata and files."""

from ordered_set import OrderedSet
import json
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
import boto3
import logging

LOG = logging.getLogger(__name__)

METADATA, FILES = "metadata", "files"


def sns_topic_arn():
    "returns an arn path to an AWS event bus. this is used to connect and send/receive events"
    vals = {}
    vals.update(settings.EVENT_BUS)
    missing = [key for key, val in vals.items() if not val]
    if missing:
        raise ImproperlyConfigured("event bus settings missing: %s" % ", ".join(sorted(missing)))
    # ll: arn:aws:sns:us-east-1:112634557572:bus-submissions--ci
    arn = "arn:aws:sns:{region}:{subscriber}:{name}--{env}".format(**vals)
    LOG.info("using topic arn: %s", arn)
    return arn


def event_bus_conn():
    arn = sns_topic_arn()
    sns = boto3.resource("sns")
    return sns.Topic(arn)


def notify(submission_id, change):
    "notify event bus that the `change` part of this submission needs re-indexing"
    if settings.DEBUG:
        LOG.debug("application is in DEBUG mode, no notifications will be sent")
        return
    msg_json = None
    try:
        msg = {"type": "submission", "id": submission_id, "change": change}
        msg_json = json.dumps(msg)
        LOG.debug("writing message to event bus", extra={"bus-message": msg_json})
        event_bus_conn().publish(Message=msg_json)
        return msg_json  # used only for testing
    except ValueError as err:
        # probably serializing value
        LOG.error(
            "failed to serialize event bus payload %s",
            err,
            extra={"bus-message": msg_json},
        )

    except Exception as err:
        LOG.exception(
            "unhandled error attempting to notify event bus of submission change: %s",
            err,
        )


class SearchIndexNotifier:
    """collects changes to submissions and sends them all together once the changes are finished.
    the same change to the same submission is only sent once."""

    def __init__(self, target=notify):
        self.calls = OrderedSet()
        self.target = target

    def submission_metadata_changed(self, submission):
        self.calls.add((submission.pk, METADATA))

    def submission_files_changed(self, submission):
        self.calls.add((submission.pk, FILES))

    def submission_changes_finished(self):
        "sends the collected changes. returns the list of results"
        calls, self.calls = self.calls, OrderedSet()
        LOG.info("%s unique changes to be sent to %s", len(calls), self.target)
        return [self.target(*args) for args in calls]

"""Serializers that check the shape of incoming request bodies.

Field-level rules are deliberately absent: events keep whatever keys the
caller sends. Only the envelope is checked here.
"""

from collections.abc import Mapping

from rest_framework import serializers


class EventPayloadSerializer(serializers.Serializer):
    """A single event object. All keys pass through untouched."""

    default_error_messages = {
        "not_an_object": "Expected an event object.",
    }

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            self.fail("not_an_object")
        return dict(data)

    def to_representation(self, instance):
        return dict(instance)


class BulkEventsSerializer(serializers.Serializer):
    """Envelope for POST /api/events/bulk."""

    events = serializers.ListField(child=EventPayloadSerializer(), allow_empty=True)

# emtct_core/infants/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from emtct_core.infants.classifier import classify
from emtct_core.infants.records import FinalOutcome, InfantStatus, LabResult, Prophylaxis, ScheduleSlot

MASKED_NAME = "***"


class _ScopedOutputMixin:
    """Output serializers read `show_names` and `now` from context."""

    def _name(self, name: str) -> str:
        return name if self.context.get("show_names", False) else MASKED_NAME


# ----------------------------------------------------------------------
# input
# ----------------------------------------------------------------------

class InfantRegisterSerializer(serializers.Serializer):
    # presence is checked by the repository so every refusal names its field the same way
    infant_name = serializers.CharField(required=False, allow_blank=True, default="")
    mother_id = serializers.CharField(required=False, allow_blank=True, default="")
    dob = serializers.CharField(required=False, allow_blank=True, default="")
    prophylaxis = serializers.ChoiceField(choices=Prophylaxis.choices, default=Prophylaxis.NVP)


class RecordTestSerializer(serializers.Serializer):
    slot = serializers.ChoiceField(choices=ScheduleSlot.choices)
    done_date = serializers.DateField()
    result = serializers.ChoiceField(choices=LabResult.choices)


class ChangeStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=InfantStatus.choices)


class FinalOutcomeSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(choices=FinalOutcome.choices)


# ----------------------------------------------------------------------
# output
# ----------------------------------------------------------------------

class ScheduledTestSerializer(serializers.Serializer):
    slot = serializers.CharField()
    name = serializers.CharField()
    due_date = serializers.DateField()
    done_date = serializers.DateField(allow_null=True)
    result = serializers.CharField(allow_null=True)
    state = serializers.CharField()


class InfantSerializer(_ScopedOutputMixin, serializers.Serializer):
    id = serializers.CharField()
    infant_name = serializers.SerializerMethodField()
    mother_id = serializers.CharField()
    dob = serializers.DateField()
    facility = serializers.CharField()
    district = serializers.CharField()
    prophylaxis = serializers.CharField()
    status = serializers.CharField()
    final_outcome = serializers.CharField(allow_null=True)
    tests = serializers.SerializerMethodField()

    def get_infant_name(self, obj) -> str:
        return self._name(obj.infant_name)

    def get_tests(self, obj) -> list[dict]:
        now = self.context.get("now")
        window = self.context.get("window_days")
        rows = []
        for slot, test in obj.tests():
            state = classify(test, now, window_days=window).value if now is not None else None
            rows.append(
                {
                    "slot": slot.value,
                    "name": slot.label,
                    "due_date": test.due_date.isoformat(),
                    "done_date": test.done_date.isoformat() if test.done_date else None,
                    "result": test.result.value if test.result else None,
                    "state": state,
                }
            )
        return rows


class ReminderSerializer(_ScopedOutputMixin, serializers.Serializer):
    infant_id = serializers.CharField(source="infant.id")
    infant_name = serializers.SerializerMethodField()
    facility = serializers.CharField(source="infant.facility")
    district = serializers.CharField(source="infant.district")
    slot = serializers.CharField()
    test_name = serializers.CharField()
    status = serializers.CharField()
    due_date = serializers.DateField()

    def get_infant_name(self, obj) -> str:
        return self._name(obj.infant.infant_name)


class DashboardStatsSerializer(serializers.Serializer):
    total_infants = serializers.IntegerField()
    due_soon = serializers.IntegerField()
    overdue = serializers.IntegerField()
    positivity_rate = serializers.FloatField()


class StatusCountSerializer(serializers.Serializer):
    status = serializers.CharField()
    count = serializers.IntegerField()


class FacilityCountSerializer(serializers.Serializer):
    facility = serializers.CharField()
    count = serializers.IntegerField()


class DashboardSerializer(serializers.Serializer):
    as_of = serializers.DateTimeField()
    stats = DashboardStatsSerializer()
    reminders = ReminderSerializer(many=True)
    status_breakdown = StatusCountSerializer(many=True)
    facility_caseload = FacilityCountSerializer(many=True)

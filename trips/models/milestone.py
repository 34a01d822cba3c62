# trips/models/milestone.py
from django.db import models

from trips.milestones import MilestoneType


class TripMilestone(models.Model):
    """One completed checkpoint. Append-only: rows are never updated or deleted."""

    trip = models.ForeignKey("trips.Trip", on_delete=models.CASCADE, related_name="milestones")
    milestone_number = models.PositiveSmallIntegerField()
    milestone_type = models.CharField(max_length=32, choices=MilestoneType.CHOICES)
    backend_meaning = models.CharField(max_length=120)

    timestamp = models.DateTimeField()
    latitude = models.FloatField()
    longitude = models.FloatField()
    photo = models.CharField(max_length=500, blank=True, default="")
    recorded_by = models.ForeignKey("fleet.Driver", null=True, on_delete=models.SET_NULL, related_name="+")

    class Meta:
        db_table = "trips_milestone"
        ordering = ["milestone_number"]
        constraints = [
            models.UniqueConstraint(fields=["trip", "milestone_number"], name="uq_trip_milestone_number"),
            models.CheckConstraint(
                condition=models.Q(milestone_number__gte=1, milestone_number__lte=5),
                name="ck_trip_milestone_number_range",
            ),
        ]

    def __str__(self):
        return f"{self.trip_id}#{self.milestone_number} {self.milestone_type}"

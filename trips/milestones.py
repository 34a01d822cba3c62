# trips/milestones.py
"""
Fixed five-step milestone catalog.

Each step has one driver-facing label and an operational meaning that depends
on whether the trip is an EXPORT (empty box out, loaded box to port) or an
IMPORT (loaded box from port, empty box back to the yard).
"""
from dataclasses import dataclass

TOTAL_MILESTONES = 5


class MilestoneType:
    CONTAINER_PICKED = "CONTAINER_PICKED"
    REACHED_LOCATION = "REACHED_LOCATION"
    LOADING_UNLOADING = "LOADING_UNLOADING"
    REACHED_DESTINATION = "REACHED_DESTINATION"
    TRIP_COMPLETED = "TRIP_COMPLETED"

    ORDER = (
        CONTAINER_PICKED,
        REACHED_LOCATION,
        LOADING_UNLOADING,
        REACHED_DESTINATION,
        TRIP_COMPLETED,
    )

    CHOICES = [(t, t.replace("_", " ").title()) for t in ORDER]


DRIVER_LABELS = {
    MilestoneType.CONTAINER_PICKED: "Container Pick up",
    MilestoneType.REACHED_LOCATION: "Reached Location",
    MilestoneType.LOADING_UNLOADING: "Loading / Unloading",
    MilestoneType.REACHED_DESTINATION: "Reached Destination",
    MilestoneType.TRIP_COMPLETED: "Trip Completed",
}

MEANINGS = {
    "EXPORT": {
        MilestoneType.CONTAINER_PICKED: "Empty container picked from CFS / yard",
        MilestoneType.REACHED_LOCATION: "Reached factory for loading",
        MilestoneType.LOADING_UNLOADING: "Loading completed and vehicle exited factory",
        MilestoneType.REACHED_DESTINATION: "Reached port",
        MilestoneType.TRIP_COMPLETED: "Container gate-in completed",
    },
    "IMPORT": {
        MilestoneType.CONTAINER_PICKED: "Loaded container picked from port / terminal",
        MilestoneType.REACHED_LOCATION: "Reached factory / warehouse for unloading",
        MilestoneType.LOADING_UNLOADING: "Unloading completed and vehicle exited warehouse",
        MilestoneType.REACHED_DESTINATION: "Reached empty yard / CFS",
        MilestoneType.TRIP_COMPLETED: "Empty container offloaded",
    },
}


@dataclass(frozen=True)
class CurrentMilestone:
    number: int
    type: str
    label: str

    def as_dict(self):
        return {"number": self.number, "type": self.type, "label": self.label}


def milestone_type(number: int) -> str:
    if not 1 <= number <= TOTAL_MILESTONES:
        raise ValueError(f"Milestone number must be 1-{TOTAL_MILESTONES}, got {number}")
    return MilestoneType.ORDER[number - 1]


def driver_label(mtype: str) -> str:
    return DRIVER_LABELS.get(mtype, "Unknown")


def backend_meaning(mtype: str, trip_type: str) -> str:
    return MEANINGS.get(trip_type, {}).get(mtype, "Unknown milestone")


def next_milestone(completed_count: int) -> CurrentMilestone | None:
    """Next due milestone given how many are done; None once all five exist."""
    if completed_count >= TOTAL_MILESTONES:
        return None
    number = completed_count + 1
    mtype = milestone_type(number)
    return CurrentMilestone(number=number, type=mtype, label=driver_label(mtype))

"""
Sample clients for first-run setup and demos.
"""

from datetime import date

from .models import ClientRecord, FitnessGoal, Gender, TrainingSession


def sample_clients() -> list[ClientRecord]:
    """Fresh copies of the demo clients, with fixed ids."""
    return [
        ClientRecord(
            id="client-1",
            name="John Smith",
            age=28,
            gender=Gender.MALE,
            email="john.smith@email.com",
            phone="+15551234567",
            fitness_goal=FitnessGoal.WEIGHT_LOSS,
            membership_start=date(2024, 12, 15),
            training_history=[
                TrainingSession(date(2025, 10, 1), "Leg day - squat focus"),
                TrainingSession(date(2025, 10, 8), "Upper body - push"),
            ],
        ),
        ClientRecord(
            id="client-2",
            name="Sarah Johnson",
            age=32,
            gender=Gender.FEMALE,
            email="sarah.j@email.com",
            phone="+15552345678",
            fitness_goal=FitnessGoal.WEIGHT_LOSS,
            membership_start=date(2025, 2, 1),
        ),
        ClientRecord(
            id="client-3",
            name="Mike Davis",
            age=25,
            gender=Gender.MALE,
            email="mike.davis@email.com",
            phone="+15553456789",
            fitness_goal=FitnessGoal.GENERAL_FITNESS,
            membership_start=date(2025, 1, 20),
        ),
    ]

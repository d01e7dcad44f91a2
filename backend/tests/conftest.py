"""
Shared fixtures: services wired over fresh in-memory stores.
"""
import pytest

from api.deps import Services, build_services
from db.factory import build_stores


@pytest.fixture
def stores():
    return build_stores("in_memory")


@pytest.fixture
def services(stores) -> Services:
    return build_services(stores)


@pytest.fixture
def tourist(services):
    return services.users.register(
        username="asha",
        full_name="Asha Kulkarni",
        email="asha@example.com",
        role="tourist",
        phone="+91 90000 00001",
    )


@pytest.fixture
def guide(services):
    return services.users.register(
        username="rohan",
        full_name="Rohan Patil",
        email="rohan@example.com",
        role="guide",
        guide_profile={
            "location": "Pune",
            "experience_years": 6,
            "languages": ["Marathi", "Hindi", "English"],
            "specialties": ["Forts", "Trekking"],
            "rating": 4.7,
            "bio": "Sahyadri trek leader.",
        },
    )


@pytest.fixture
def other_guide(services):
    return services.users.register(
        username="meera",
        full_name="Meera Joshi",
        email="meera@example.com",
        role="guide",
    )

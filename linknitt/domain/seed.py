"""
Demo dataset for /seed and scripts/seed_neo4j.py.

Every demo account uses the password "x", stored hashed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEMO_PASSWORD = "x"


@dataclass
class SeedUser:
    """User node data."""

    name: str
    email: str
    role: str
    dept: str | None
    password: str = DEMO_PASSWORD


@dataclass
class SeedJob:
    """Job node data with its poster's email."""

    title: str
    desc: str
    poster: str


@dataclass
class SeedMentorship:
    """Mentorship offer owned by a faculty member."""

    email: str
    topic: str
    note: str
    capacity: int = 1


@dataclass
class SeedMentorshipRequest:
    """REQUESTS_MENTORSHIP edge data."""

    student_email: str
    faculty_email: str
    topic: str


@dataclass
class SeedPurchase:
    """BOUGHT edge data."""

    email: str
    item: str
    qty: int = 1


@dataclass
class SeedDataset:
    """Complete demo graph, loaded in field order."""

    users: list[SeedUser] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    sells: list[tuple[str, str]] = field(default_factory=list)
    jobs: list[SeedJob] = field(default_factory=list)
    applications: list[tuple[str, str]] = field(default_factory=list)
    mentorships: list[SeedMentorship] = field(default_factory=list)
    mentorship_requests: list[SeedMentorshipRequest] = field(default_factory=list)
    connections: list[tuple[str, str]] = field(default_factory=list)
    purchases: list[SeedPurchase] = field(default_factory=list)


DEMO_USERS = [
    SeedUser("Dr. Meena", "meena@nitt.edu", "Faculty", "CSE"),
    SeedUser("Prof. Kumar", "kumar@nitt.edu", "Faculty", "ECE"),
    SeedUser("Priya", "priya@nitt.edu", "Student", "ECE"),
    SeedUser("Arjun", "arjun@nitt.edu", "Student", "CSE"),
    SeedUser("Rahul", "rahul@nitt.edu", "Alumni", "CSE"),
    SeedUser("Anita", "anita@nitt.edu", "Staff", "CSE"),
    SeedUser("Riya", "riya@nitt.edu", "Student", "CSE"),
]


def build_demo_dataset(hash_password: Any) -> SeedDataset:
    """Build the demo graph.

    Args:
        hash_password: Callable turning a plain password into a stored digest

    Returns:
        SeedDataset with hashed passwords
    """
    users = [
        SeedUser(u.name, u.email, u.role, u.dept, hash_password(u.password))
        for u in DEMO_USERS
    ]
    return SeedDataset(
        users=users,
        items=["Algorithms Textbook", "Discrete Math Book", "Homemade Cake", "Samosa Pack"],
        sells=[
            ("meena@nitt.edu", "Algorithms Textbook"),
            ("meena@nitt.edu", "Homemade Cake"),
            ("kumar@nitt.edu", "Discrete Math Book"),
        ],
        jobs=[
            SeedJob(
                "Club Design Project",
                "UI/UX and frontend for robotics club",
                "meena@nitt.edu",
            ),
            SeedJob(
                "Admin Event Management",
                "Manage event logistics for fests",
                "kumar@nitt.edu",
            ),
        ],
        applications=[("rahul@nitt.edu", "Club Design Project")],
        mentorships=[
            SeedMentorship("meena@nitt.edu", "Algorithms", "Open for 1:1 mentoring"),
        ],
        mentorship_requests=[
            SeedMentorshipRequest("priya@nitt.edu", "meena@nitt.edu", "Algorithms"),
        ],
        connections=[("rahul@nitt.edu", "arjun@nitt.edu")],
        purchases=[
            SeedPurchase("priya@nitt.edu", "Algorithms Textbook"),
            SeedPurchase("arjun@nitt.edu", "Algorithms Textbook"),
            SeedPurchase("arjun@nitt.edu", "Discrete Math Book"),
            SeedPurchase("rahul@nitt.edu", "Discrete Math Book"),
            SeedPurchase("anita@nitt.edu", "Homemade Cake", qty=2),
            SeedPurchase("riya@nitt.edu", "Algorithms Textbook"),
            SeedPurchase("riya@nitt.edu", "Samosa Pack"),
        ],
    )

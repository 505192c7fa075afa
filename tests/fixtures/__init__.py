"""Sample data and helpers shared by unit and integration tests."""

from typing import Optional

from app.core.security import create_access_token

FREE_FEATURES = [
    {"text": "2 bookmarks", "is_quota": True, "key": "bookmarks", "limit": 2, "period": "lifetime"},
    {"text": "1 download per day", "is_quota": True, "key": "downloads", "limit": 1, "period": "daily"},
]
SCHOLAR_FEATURES = [
    {"text": "Unlimited bookmarks", "is_quota": True, "key": "bookmarks", "limit": -1, "period": "lifetime"},
    {"text": "50 downloads per month", "is_quota": True, "key": "downloads", "limit": 50, "period": "monthly"},
    {"text": "1 priority request", "is_quota": True, "key": "priority_support", "limit": 1, "period": "monthly"},
]

SAMPLE_CONTACT = {
    "name": "Student One",
    "email": "student@example.com",
    "topic": "General Inquiry",
    "subject": "Question about plans",
    "message": "How do I upgrade my plan to Scholar?",
}


def bearer(uid: str, email: Optional[str] = None, name: str = "Test User") -> dict:
    """Authorization header for an identity the API accepts."""
    token = create_access_token({"sub": uid, "email": email or f"{uid}@example.com", "name": name})
    return {"Authorization": f"Bearer {token}"}

from datetime import date, timedelta

from courtside.models import User
from courtside.security_utils import create_access_token

CDN = "https://cdn.test"


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def error_of(response) -> dict:
    """The {message, code, details} payload of a domain error response"""
    return response.json()["detail"]


def receipt_file(name: str = "receipt.png", content_type: str = "image/png") -> dict:
    return {"receipt": (name, b"\x89PNG fake receipt", content_type)}


def days_from_today(days: int) -> date:
    return date.today() + timedelta(days=days)


def blind_first_lookup(real):
    """Wrap a repository's booked-slots query so only its first call sees nothing booked.

    Lets a booking pass the availability check as if a concurrent request
    had not committed yet, leaving the unique constraint to catch it.
    """
    calls = []

    def lookup(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return []
        return real(*args, **kwargs)

    return staticmethod(lookup)

"""Bearer-token authentication for the parcel endpoints."""

from parcelmap.auth.provider import AuthProvider, MockAuthProvider

__all__ = ["AuthProvider", "MockAuthProvider"]

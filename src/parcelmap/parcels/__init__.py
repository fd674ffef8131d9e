"""Parcel search: geocoding and placeholder boundary synthesis."""

"""parcelmap: map annotation for Turkish land parcels."""

__version__ = "0.1.0"

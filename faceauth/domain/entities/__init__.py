"""Domain entities package."""
from .identity import FaceDescriptor, Identity, descriptor_distance, make_descriptor

__all__ = ["FaceDescriptor", "Identity", "descriptor_distance", "make_descriptor"]

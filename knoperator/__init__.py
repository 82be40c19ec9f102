"""Models for the Knative operator API: specs, statuses, conditions and registration."""

__version__ = "0.1.0"
__all__ = ["base", "register", "conditions", "v1beta1"]
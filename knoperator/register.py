"""API group, version and kind identifiers, and a registry of known types."""

from __future__ import annotations

from dataclasses import dataclass

GROUP_NAME = "operator.knative.dev"
"""The group of the API."""

KIND_KNATIVE_EVENTING = "KnativeEventing"
"""The kind of Knative Eventing in a group-version-kind context."""

KIND_KNATIVE_SERVING = "KnativeServing"
"""The kind of Knative Serving in a group-version-kind context."""

SCHEMA_VERSION = "v1beta1"
"""The current version of the API."""


@dataclass(frozen=True)
class GroupResource:
    """A resource qualified by its API group."""

    group: str = ""
    resource: str = ""

    def __str__(self) -> str:
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.group}"


@dataclass(frozen=True)
class GroupKind:
    """A kind qualified by its API group."""

    group: str = ""
    kind: str = ""

    def __str__(self) -> str:
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"


@dataclass(frozen=True)
class GroupVersionKind:
    """A kind qualified by its API group and version."""

    group: str = ""
    version: str = ""
    kind: str = ""

    def group_kind(self) -> GroupKind:
        """Drop the version."""
        return GroupKind(self.group, self.kind)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Kind={self.kind}"


@dataclass(frozen=True)
class GroupVersionResource:
    """A resource qualified by its API group and version."""

    group: str = ""
    version: str = ""
    resource: str = ""

    def group_resource(self) -> GroupResource:
        """Drop the version."""
        return GroupResource(self.group, self.resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str = ""
    version: str = ""

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def with_kind(self, kind: str) -> GroupVersionKind:
        """Qualify an unqualified kind with this group and version."""
        return GroupVersionKind(self.group, self.version, kind)

    def with_resource(self, resource: str) -> GroupVersionResource:
        """Qualify an unqualified resource with this group and version."""
        return GroupVersionResource(self.group, self.version, resource)


KNATIVE_SERVING_RESOURCE = GroupResource(GROUP_NAME, "knativeservings")
"""The group-qualified resource of a Knative Serving."""

KNATIVE_EVENTING_RESOURCE = GroupResource(GROUP_NAME, "knativeeventings")
"""The group-qualified resource of a Knative Eventing."""

SCHEME_GROUP_VERSION = GroupVersion(GROUP_NAME, SCHEMA_VERSION)
"""The group version used to register the operator's objects."""


def kind(kind: str) -> GroupKind:
    """Return the group-qualified form of an unqualified kind."""
    return SCHEME_GROUP_VERSION.with_kind(kind).group_kind()


def resource(resource: str) -> GroupResource:
    """Return the group-qualified form of an unqualified resource."""
    return SCHEME_GROUP_VERSION.with_resource(resource).group_resource()


class Scheme:
    """A registry mapping group-version-kinds to the classes that represent them."""

    def __init__(self) -> None:
        self._types: dict[GroupVersionKind, type] = {}

    def add_known_types(self, group_version: GroupVersion, *args: object) -> None:
        """Register classes (or instances of them) under their class name as kind."""
        for obj in args:
            cls = obj if isinstance(obj, type) else type(obj)
            gvk = group_version.with_kind(cls.__name__)
            existing = self._types.get(gvk)
            if existing is not None and existing is not cls:
                raise ValueError(
                    f"double registration of different types for {gvk}: "
                    f"{existing.__qualname__} and {cls.__qualname__}"
                )
            self._types[gvk] = cls

    def known_types(self, group_version: GroupVersion) -> dict[str, type]:
        """Return the kinds registered for a group version, mapped to their classes."""
        return {
            gvk.kind: cls
            for gvk, cls in self._types.items()
            if gvk.group == group_version.group and gvk.version == group_version.version
        }
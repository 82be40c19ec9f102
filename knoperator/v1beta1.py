"""The v1beta1 KnativeServing and KnativeEventing resources and their lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field

from .base import (
    CommonSpec,
    ConditionType,
    ContourIngressConfiguration,
    CustomCerts,
    IstioIngressConfiguration,
    KourierIngressConfiguration,
    SourceConfiguration,
    _attr,
)
from .conditions import Condition, ConditionSet, Status
from .register import (
    KIND_KNATIVE_EVENTING,
    KIND_KNATIVE_SERVING,
    SCHEME_GROUP_VERSION,
    GroupVersionKind,
    Scheme,
)

_COMPONENT_CONDITIONS = ConditionSet(
    ConditionType.DEPENDENCIES_INSTALLED,
    ConditionType.DEPLOYMENTS_AVAILABLE,
    ConditionType.INSTALL_SUCCEEDED,
    ConditionType.VERSION_MIGRATION_ELIGIBLE,
)


class ConversionError(Exception):
    """Raised when a resource cannot be converted to or from another version."""


def _highest_version_error(other: object) -> ConversionError:
    return ConversionError(
        f"v1beta1 is the highest known version, got: {type(other).__name__}"
    )


@dataclass
class ObjectMeta:
    """Identifying metadata of a resource."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    generation: int = 0


@dataclass
class ComponentStatus(Status):
    """Observed state of an installed component, with its lifecycle conditions."""

    version: str = ""
    manifests: list[str] = field(default_factory=list)

    def _manager(self):
        return _COMPONENT_CONDITIONS.manage(self)

    def get_condition(self, condition_type) -> Condition | None:
        """Return the current condition of the given type, or None."""
        return self._manager().get_condition(condition_type)

    def initialize_conditions(self) -> None:
        """Set every lifecycle condition that is missing to unknown."""
        self._manager().initialize_conditions()

    def is_ready(self) -> bool:
        """Whether all lifecycle conditions are true."""
        return self._manager().is_happy()

    def mark_install_succeeded(self) -> None:
        """Mark the installation as succeeded; unknown dependencies count as installed."""
        self._manager().mark_true(ConditionType.INSTALL_SUCCEEDED)
        deps = self.get_condition(ConditionType.DEPENDENCIES_INSTALLED)
        if deps is None or deps.is_unknown():
            self.mark_dependencies_installed()

    def mark_install_failed(self, msg: str) -> None:
        """Mark the installation as failed with the given message."""
        self._manager().mark_false(
            ConditionType.INSTALL_SUCCEEDED,
            "Error",
            "Install failed with message: %s",
            msg,
        )

    def mark_deployments_available(self) -> None:
        """Mark the deployments as available."""
        self._manager().mark_true(ConditionType.DEPLOYMENTS_AVAILABLE)

    def mark_deployments_not_ready(self, deployments) -> None:
        """Mark the deployments as not ready, naming those still awaited."""
        self._manager().mark_false(
            ConditionType.DEPLOYMENTS_AVAILABLE,
            "NotReady",
            "Waiting on deployments: %s",
            ", ".join(deployments),
        )

    def mark_version_migration_eligible(self) -> None:
        """Mark the target version as reachable from the installed one."""
        self._manager().mark_true(ConditionType.VERSION_MIGRATION_ELIGIBLE)

    def mark_version_migration_not_eligible(self, msg: str) -> None:
        """Mark the target version as not reachable, with the given message."""
        self._manager().mark_false(
            ConditionType.VERSION_MIGRATION_ELIGIBLE,
            "Error",
            "Version migration is not eligible with message: %s",
            msg,
        )

    def mark_dependencies_installed(self) -> None:
        """Mark the dependencies as installed."""
        self._manager().mark_true(ConditionType.DEPENDENCIES_INSTALLED)

    def mark_dependency_installing(self, msg: str) -> None:
        """Mark a dependency as still installing."""
        self._manager().mark_false(
            ConditionType.DEPENDENCIES_INSTALLED,
            "Installing",
            "Dependency installing: %s",
            msg,
        )

    def mark_dependency_missing(self, msg: str) -> None:
        """Mark a dependency as missing."""
        self._manager().mark_false(
            ConditionType.DEPENDENCIES_INSTALLED,
            "Error",
            "Dependency missing: %s",
            msg,
        )


@dataclass
class KnativeServingStatus(ComponentStatus):
    """Observed state of a KnativeServing."""


@dataclass
class KnativeEventingStatus(ComponentStatus):
    """Observed state of a KnativeEventing."""


@dataclass
class IngressConfigs:
    """Which ingress adapters are shipped, and their options."""

    istio: IstioIngressConfiguration = _attr(
        "istio", omitempty=False, nested=IstioIngressConfiguration,
        factory=IstioIngressConfiguration,
    )
    kourier: KourierIngressConfiguration = _attr(
        "kourier", omitempty=False, nested=KourierIngressConfiguration,
        factory=KourierIngressConfiguration,
    )
    contour: ContourIngressConfiguration = _attr(
        "contour", omitempty=False, nested=ContourIngressConfiguration,
        factory=ContourIngressConfiguration,
    )


def _source(json_name: str):
    return _attr(
        json_name, omitempty=False, nested=SourceConfiguration, factory=SourceConfiguration
    )


@dataclass
class SourceConfigs:
    """Which eventing sources are shipped."""

    ceph: SourceConfiguration = _source("ceph")
    github: SourceConfiguration = _source("github")
    gitlab: SourceConfiguration = _source("gitlab")
    kafka: SourceConfiguration = _source("kafka")
    rabbitmq: SourceConfiguration = _source("rabbitmq")
    redis: SourceConfiguration = _source("redis")


@dataclass
class KnativeServingSpec(CommonSpec):
    """Desired state of a KnativeServing."""

    controller_custom_certs: CustomCerts = _attr(
        "controller-custom-certs", nested=CustomCerts, factory=CustomCerts
    )
    ingress: IngressConfigs | None = _attr("ingress", nested=IngressConfigs)


@dataclass
class KnativeEventingSpec(CommonSpec):
    """Desired state of a KnativeEventing."""

    default_broker_class: str = _attr("defaultBrokerClass", default="")
    sink_binding_selection_mode: str = _attr("sinkBindingSelectionMode", default="")
    source: SourceConfigs | None = _attr("source", nested=SourceConfigs)


@dataclass
class KnativeServing:
    """A request to install Knative Serving."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: KnativeServingSpec = field(default_factory=KnativeServingSpec)
    status: KnativeServingStatus = field(default_factory=KnativeServingStatus)

    def group_version_kind(self) -> GroupVersionKind:
        """Return the group, version and kind of this resource."""
        return SCHEME_GROUP_VERSION.with_kind(KIND_KNATIVE_SERVING)

    def convert_to(self, sink: object) -> None:
        """Always fails: there is no higher version to convert to."""
        raise _highest_version_error(sink)

    def convert_from(self, source: object) -> None:
        """Always fails: there is no higher version to convert from."""
        raise _highest_version_error(source)


@dataclass
class KnativeEventing:
    """A request to install Knative Eventing."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: KnativeEventingSpec = field(default_factory=KnativeEventingSpec)
    status: KnativeEventingStatus = field(default_factory=KnativeEventingStatus)

    def group_version_kind(self) -> GroupVersionKind:
        """Return the group, version and kind of this resource."""
        return SCHEME_GROUP_VERSION.with_kind(KIND_KNATIVE_EVENTING)

    def convert_to(self, sink: object) -> None:
        """Always fails: there is no higher version to convert to."""
        raise _highest_version_error(sink)

    def convert_from(self, source: object) -> None:
        """Always fails: there is no higher version to convert from."""
        raise _highest_version_error(source)


@dataclass
class KnativeServingList:
    """A list of KnativeServing resources."""

    items: list[KnativeServing] = field(default_factory=list)


@dataclass
class KnativeEventingList:
    """A list of KnativeEventing resources."""

    items: list[KnativeEventing] = field(default_factory=list)


def add_known_types(scheme: Scheme) -> None:
    """Register the resource types of this version in the given scheme."""
    scheme.add_known_types(
        SCHEME_GROUP_VERSION,
        KnativeServing,
        KnativeServingList,
        KnativeEventing,
        KnativeEventingList,
    )
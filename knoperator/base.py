"""Common spec, override and configuration types shared by all operator resources."""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ConfigMapData = dict[str, dict[str, str]]
"""Upstream ConfigMap overrides: ConfigMap key (e.g. "logging") to its data."""


class ConditionType(str, Enum):
    """Condition types reported on the status of every component."""

    DEPENDENCIES_INSTALLED = "DependenciesInstalled"
    INSTALL_SUCCEEDED = "InstallSucceeded"
    DEPLOYMENTS_AVAILABLE = "DeploymentsAvailable"
    VERSION_MIGRATION_ELIGIBLE = "VersionMigrationEligible"

    def __str__(self) -> str:
        return self.value


def _attr(
    json_name: str,
    *,
    omitempty: bool = True,
    nested: type | None = None,
    many: bool = False,
    default: Any = None,
    factory: Any = None,
) -> Any:
    """Declare a dataclass field together with its serialized name and rules."""
    meta = {"json": json_name, "omitempty": omitempty, "nested": nested, "many": many}
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _is_empty(value: Any) -> bool:
    # Embedded structures are never considered empty, only absent pointers are.
    if dataclasses.is_dataclass(value):
        return False
    if value is None:
        return True
    if isinstance(value, (bool, str, list, dict, tuple)):
        return not value
    return False


def _to_json(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in dataclasses.fields(obj):
        meta = f.metadata
        value = getattr(obj, f.name)
        if meta["omitempty"] and _is_empty(value):
            continue
        if meta["nested"] is not None and value is not None:
            value = [_to_json(v) for v in value] if meta["many"] else _to_json(value)
        else:
            value = copy.deepcopy(value)
        out[meta["json"]] = value
    return out


def _from_json(cls: type, data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a mapping for {cls.__name__}, got {type(data).__name__}")
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        meta = f.metadata
        key = meta["json"]
        if key not in data or data[key] is None:
            continue
        value = data[key]
        nested = meta["nested"]
        if nested is not None:
            if meta["many"]:
                if not isinstance(value, list):
                    raise TypeError(f"expected a list for {key!r}")
                value = [_from_json(nested, v) for v in value]
            else:
                value = _from_json(nested, value)
        else:
            value = copy.deepcopy(value)
        kwargs[f.name] = value
    return cls(**kwargs)


@dataclass
class Registry:
    """Image overrides for the component's deployments and cached images."""

    default: str = _attr("default", default="")
    override: dict[str, str] = _attr("override", factory=dict)
    image_pull_secrets: list[dict[str, Any]] = _attr("imagePullSecrets", factory=list)


@dataclass
class ResourceRequirementsOverride:
    """Resource requests and limits for one named container."""

    container: str = _attr("container", omitempty=False, default="")
    limits: dict[str, Any] = _attr("limits", factory=dict)
    requests: dict[str, Any] = _attr("requests", factory=dict)


@dataclass
class EnvRequirementsOverride:
    """Environment variables for one named container."""

    container: str = _attr("container", omitempty=False, default="")
    env_vars: list[dict[str, Any]] = _attr("envVars", factory=list)


@dataclass
class DeploymentOverride:
    """Overrides applied to one named deployment."""

    name: str = _attr("name", omitempty=False, default="")
    labels: dict[str, str] = _attr("labels", factory=dict)
    annotations: dict[str, str] = _attr("annotations", factory=dict)
    replicas: int | None = _attr("replicas")
    node_selector: dict[str, str] = _attr("nodeSelector", factory=dict)
    tolerations: list[dict[str, Any]] = _attr("tolerations", factory=list)
    affinity: dict[str, Any] | None = _attr("affinity")
    resources: list[ResourceRequirementsOverride] = _attr(
        "resources", nested=ResourceRequirementsOverride, many=True, factory=list
    )
    env: list[EnvRequirementsOverride] = _attr(
        "env", nested=EnvRequirementsOverride, many=True, factory=list
    )


@dataclass
class ServiceOverride:
    """Overrides applied to one named service."""

    name: str = _attr("name", omitempty=False, default="")
    labels: dict[str, str] = _attr("labels", factory=dict)
    annotations: dict[str, str] = _attr("annotations", factory=dict)
    selector: dict[str, str] = _attr("selector", factory=dict)


@dataclass
class PodDisruptionBudgetOverride:
    """Overrides applied to one named PodDisruptionBudget."""

    name: str = _attr("name", omitempty=False, default="")
    min_available: int | str | None = _attr("minAvailable")
    selector: dict[str, Any] | None = _attr("selector")
    max_unavailable: int | str | None = _attr("maxUnavailable")


@dataclass
class Manifest:
    """A link to a manifest to install."""

    url: str = _attr("URL", omitempty=False, default="")


@dataclass
class HighAvailability:
    """Number of replicas for the highly available parts of the control plane."""

    replicas: int | None = _attr("replicas", omitempty=False)


@dataclass
class CustomCerts:
    """A ConfigMap or Secret holding trusted CA certificates."""

    type: str = _attr("type", omitempty=False, default="")
    name: str = _attr("name", omitempty=False, default="")


@dataclass
class CommonSpec:
    """Fields shared by the spec of every component."""

    config: ConfigMapData = _attr("config", factory=dict)
    registry: Registry = _attr("registry", nested=Registry, factory=Registry)
    deprecated_resources: list[ResourceRequirementsOverride] = _attr(
        "resources", nested=ResourceRequirementsOverride, many=True, factory=list
    )
    deployment_override: list[DeploymentOverride] = _attr(
        "deployments", nested=DeploymentOverride, many=True, factory=list
    )
    service_override: list[ServiceOverride] = _attr(
        "services", nested=ServiceOverride, many=True, factory=list
    )
    version: str = _attr("version", default="")
    manifests: list[Manifest] = _attr("manifests", nested=Manifest, many=True, factory=list)
    additional_manifests: list[Manifest] = _attr(
        "additionalManifests", nested=Manifest, many=True, factory=list
    )
    high_availability: HighAvailability | None = _attr(
        "high-availability", nested=HighAvailability
    )
    pod_disruption_budget_override: list[PodDisruptionBudgetOverride] = _attr(
        "podDisruptionBudgets", nested=PodDisruptionBudgetOverride, many=True, factory=list
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the resource's wire form, leaving out empty optional fields."""
        return _to_json(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CommonSpec:
        """Build a spec from its wire form; unknown keys are ignored."""
        return _from_json(cls, data)


@dataclass
class IstioGatewayOverride:
    """Overrides for the knative ingress and local gateways."""

    selector: dict[str, str] = _attr("selector", factory=dict)
    servers: list[dict[str, Any]] = _attr("servers", factory=list)


@dataclass
class IstioIngressConfiguration:
    """Options for the istio ingress."""

    enabled: bool = _attr("enabled", omitempty=False, default=False)
    knative_ingress_gateway: IstioGatewayOverride | None = _attr(
        "knative-ingress-gateway", nested=IstioGatewayOverride
    )
    knative_local_gateway: IstioGatewayOverride | None = _attr(
        "knative-local-gateway", nested=IstioGatewayOverride
    )


@dataclass
class KourierIngressConfiguration:
    """Options for the kourier ingress."""

    enabled: bool = _attr("enabled", omitempty=False, default=False)
    service_type: str = _attr("service-type", default="")


@dataclass
class ContourIngressConfiguration:
    """Options for the contour ingress."""

    enabled: bool = _attr("enabled", omitempty=False, default=False)


@dataclass
class SourceConfiguration:
    """Whether an eventing source is shipped."""

    enabled: bool = _attr("enabled", omitempty=False, default=False)
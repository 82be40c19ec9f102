# knoperator

Python models for the `operator.knative.dev/v1beta1` API. They describe how
Knative Serving and Knative Eventing are to be installed and how the status of
an installation is tracked.

## Modules

- `knoperator.base` holds the shared spec building blocks:
  - `CommonSpec`, `Registry`, `DeploymentOverride`, `ServiceOverride`,
    `PodDisruptionBudgetOverride`, `ResourceRequirementsOverride` and
    `EnvRequirementsOverride`.
  - `HighAvailability`, `Manifest` and `CustomCerts`.
  - The ingress configurations `IstioIngressConfiguration`,
    `IstioGatewayOverride`, `KourierIngressConfiguration` and
    `ContourIngressConfiguration`.
  - `SourceConfiguration`.
  - The `ConditionType` names.

  `CommonSpec.to_dict()` serializes a spec under its JSON field names and
  leaves out empty optional fields. `CommonSpec.from_dict()` builds a spec from
  that form and ignores unknown keys.
- `knoperator.register` holds the identifier types `GroupResource`,
  `GroupKind`, `GroupVersion`, `GroupVersionKind` and `GroupVersionResource`,
  together with constants such as `GROUP_NAME` and `SCHEME_GROUP_VERSION`. It
  also has the `kind()` and `resource()` helpers, which qualify a name with the
  operator's group. `Scheme` is a small registry that maps kinds to classes.
  Registering two different classes under the same kind raises `ValueError`.
- `knoperator.conditions` holds `Condition`, `ConditionStatus`, `Status` and a
  living `ConditionSet`. Its `ConditionManager` marks conditions true, false or
  unknown and keeps the top-level `Ready` condition in step with the dependent
  conditions.
- `knoperator.v1beta1` holds the `KnativeServing` and `KnativeEventing`
  resources. It also has their specs, statuses and list types, plus
  `IngressConfigs`, `SourceConfigs` and `add_known_types()`, which registers the
  four resource types in a `Scheme`.

## Installation

```
pip install .
```

## Example

```python
from knoperator.base import ConditionType
from knoperator.register import Scheme, SCHEME_GROUP_VERSION
from knoperator.v1beta1 import KnativeServing, add_known_types

ks = KnativeServing()
ks.status.initialize_conditions()

ks.status.mark_install_succeeded()      # unknown dependencies count as installed
ks.status.mark_deployments_not_ready(["activator", "controller"])
print(ks.status.is_ready())             # False

ks.status.mark_deployments_available()
ks.status.mark_version_migration_eligible()
print(ks.status.is_ready())             # True

cond = ks.status.get_condition(ConditionType.DEPLOYMENTS_AVAILABLE)
print(cond.is_true())                   # True
print(ks.group_version_kind())          # operator.knative.dev/v1beta1, Kind=KnativeServing

scheme = Scheme()
add_known_types(scheme)
print(sorted(scheme.known_types(SCHEME_GROUP_VERSION)))
# ['KnativeEventing', 'KnativeEventingList', 'KnativeServing', 'KnativeServingList']
```

`v1beta1` is the highest version the package knows. Because of that,
`convert_to()` and `convert_from()` always raise `ConversionError`.

## What it does not do

The package only models the resources and their status. It does not do any of
the following:

- talk to a cluster;
- watch or reconcile resources;
- apply manifests;
- fetch release artifacts.

It also provides no command-line tool and no webhook server.

## Tests

```
pip install .[test]
pytest
```
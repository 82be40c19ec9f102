import pytest

from knoperator.base import ConditionType, KourierIngressConfiguration
from knoperator.conditions import ConditionStatus
from knoperator.register import (
    GROUP_NAME,
    KIND_KNATIVE_EVENTING,
    KIND_KNATIVE_SERVING,
    SCHEMA_VERSION,
    SCHEME_GROUP_VERSION,
    GroupVersionKind,
    Scheme,
)
from knoperator.v1beta1 import (
    ConversionError,
    IngressConfigs,
    KnativeEventing,
    KnativeEventingList,
    KnativeEventingSpec,
    KnativeEventingStatus,
    KnativeServing,
    KnativeServingList,
    KnativeServingSpec,
    KnativeServingStatus,
    SourceConfigs,
    add_known_types,
)

DI = ConditionType.DEPENDENCIES_INSTALLED
DA = ConditionType.DEPLOYMENTS_AVAILABLE
IS = ConditionType.INSTALL_SUCCEEDED
VME = ConditionType.VERSION_MIGRATION_ELIGIBLE


def status_of(status, condition_type):
    cond = status.get_condition(condition_type)
    assert cond is not None
    return cond.status


def expect(status, ongoing=(), succeeded=(), failed=()):
    for t in ongoing:
        assert status_of(status, t) is ConditionStatus.UNKNOWN, t
    for t in succeeded:
        assert status_of(status, t) is ConditionStatus.TRUE, t
    for t in failed:
        assert status_of(status, t) is ConditionStatus.FALSE, t


@pytest.mark.parametrize("resource", [KnativeServing, KnativeEventing])
def test_conversion_highest_version(resource):
    source, sink = resource(), resource()
    with pytest.raises(ConversionError, match="highest known version"):
        source.convert_to(sink)
    with pytest.raises(ConversionError, match="highest known version"):
        source.convert_from(sink)


def test_conversion_error_names_type():
    with pytest.raises(ConversionError) as info:
        KnativeServing().convert_to(KnativeEventing())
    assert str(info.value) == "v1beta1 is the highest known version, got: KnativeEventing"


def test_serving_group_version_kind():
    assert KnativeServing().group_version_kind() == GroupVersionKind(
        GROUP_NAME, SCHEMA_VERSION, KIND_KNATIVE_SERVING
    )


def test_eventing_group_version_kind():
    assert KnativeEventing().group_version_kind() == GroupVersionKind(
        GROUP_NAME, SCHEMA_VERSION, KIND_KNATIVE_EVENTING
    )


@pytest.mark.parametrize("serving", [True, False], ids=["serving", "eventing"])
def test_happy_path(serving):
    st = KnativeServingStatus() if serving else KnativeEventingStatus()
    st.initialize_conditions()
    expect(st, ongoing=(DI, DA, IS))

    st.mark_version_migration_eligible()
    st.mark_install_succeeded()
    expect(st, succeeded=(DI, IS), ongoing=(DA,))

    st.mark_deployments_not_ready(["test"])
    expect(st, succeeded=(DI, IS), failed=(DA,))
    assert st.is_ready() is False

    st.mark_deployments_available()
    expect(st, succeeded=(DI, DA, IS))
    assert st.is_ready() is True


@pytest.mark.parametrize("serving", [True, False], ids=["serving", "eventing"])
def test_error_path(serving):
    st = KnativeServingStatus() if serving else KnativeEventingStatus()
    st.initialize_conditions()
    expect(st, ongoing=(DI, DA, IS))

    st.mark_version_migration_eligible()
    st.mark_install_failed("test")
    expect(st, ongoing=(DI, DA), failed=(IS,))

    st.mark_dependency_installing("testing")
    expect(st, failed=(DI, IS), ongoing=(DA,))

    st.mark_install_succeeded()
    expect(st, failed=(DI,), ongoing=(DA,), succeeded=(IS,))
    assert st.is_ready() is False

    st.mark_deployments_available()
    expect(st, failed=(DI,), succeeded=(DA, IS))
    assert st.is_ready() is False

    st.mark_dependencies_installed()
    expect(st, succeeded=(DI, DA, IS))
    assert st.is_ready() is True


@pytest.mark.parametrize("serving", [True, False], ids=["serving", "eventing"])
def test_external_dependency(serving):
    st = KnativeServingStatus() if serving else KnativeEventingStatus()
    st.initialize_conditions()
    st.mark_dependency_missing("test")

    st.mark_install_succeeded()
    expect(st, failed=(DI,), ongoing=(DA,), succeeded=(IS,))

    st.mark_dependencies_installed()
    expect(st, succeeded=(DI, IS), ongoing=(DA,))


@pytest.mark.parametrize("serving", [True, False], ids=["serving", "eventing"])
def test_version_migration_not_eligible(serving):
    st = KnativeServingStatus() if serving else KnativeEventingStatus()
    st.initialize_conditions()
    st.mark_version_migration_not_eligible("Version migration not eligible.")
    expect(st, failed=(VME,))
    cond = st.get_condition(VME)
    assert cond.reason == "Error"
    assert cond.message == (
        "Version migration is not eligible with message: Version migration not eligible."
    )


def test_deployments_not_ready_message():
    st = KnativeServingStatus()
    st.initialize_conditions()
    st.mark_deployments_not_ready(["activator", "controller"])
    cond = st.get_condition(DA)
    assert cond.reason == "NotReady"
    assert cond.message == "Waiting on deployments: activator, controller"


def test_install_failed_message():
    st = KnativeEventingStatus()
    st.initialize_conditions()
    st.mark_install_failed("boom")
    cond = st.get_condition(IS)
    assert (cond.reason, cond.message) == ("Error", "Install failed with message: boom")


def test_dependency_installing_reason():
    st = KnativeEventingStatus()
    st.initialize_conditions()
    st.mark_dependency_installing("istio")
    cond = st.get_condition(DI)
    assert (cond.reason, cond.message) == ("Installing", "Dependency installing: istio")


def test_serving_spec_version():
    ks = KnativeServing(spec=KnativeServingSpec(version="1.2"))
    assert ks.spec.version == "1.2"


def test_eventing_spec_version():
    ke = KnativeEventing(spec=KnativeEventingSpec(version="1.2"))
    assert ke.spec.version == "1.2"


def test_serving_status_version():
    ks = KnativeServing(status=KnativeServingStatus(version="1.2"))
    assert ks.status.version == "1.2"


def test_eventing_status_version():
    ke = KnativeEventing(status=KnativeEventingStatus(version="1.2"))
    assert ke.status.version == "1.2"


def test_specs_carry_common_fields():
    config = {"logging": {"loglevel.controller": "debug"}}
    serving = KnativeServingSpec(version="1.3", config=config).to_dict()
    eventing = KnativeEventingSpec(version="1.4", config=config).to_dict()
    assert (serving["version"], serving["config"]) == ("1.3", config)
    assert (eventing["version"], eventing["config"]) == ("1.4", config)


def test_serving_spec_round_trip():
    spec = KnativeServingSpec(
        version="1.5",
        ingress=IngressConfigs(kourier=KourierIngressConfiguration(enabled=True)),
    )
    data = spec.to_dict()
    assert data["version"] == "1.5"
    assert data["ingress"]["kourier"] == {"enabled": True}
    assert data["ingress"]["istio"] == {"enabled": False}
    assert data["controller-custom-certs"] == {"type": "", "name": ""}
    assert KnativeServingSpec.from_dict(data) == spec


def test_eventing_spec_round_trip():
    spec = KnativeEventingSpec(default_broker_class="Kafka", source=SourceConfigs())
    spec.source.kafka.enabled = True
    data = spec.to_dict()
    assert data["defaultBrokerClass"] == "Kafka"
    assert data["source"]["kafka"] == {"enabled": True}
    assert data["source"]["redis"] == {"enabled": False}
    assert "sinkBindingSelectionMode" not in data
    assert KnativeEventingSpec.from_dict(data) == spec


def test_add_known_types():
    scheme = Scheme()
    add_known_types(scheme)
    assert scheme.known_types(SCHEME_GROUP_VERSION) == {
        "KnativeServing": KnativeServing,
        "KnativeServingList": KnativeServingList,
        "KnativeEventing": KnativeEventing,
        "KnativeEventingList": KnativeEventingList,
    }


def test_add_known_types_twice_is_idempotent():
    scheme = Scheme()
    add_known_types(scheme)
    add_known_types(scheme)
    assert len(scheme.known_types(SCHEME_GROUP_VERSION)) == 4
import pytest

from ctxbuilder.constants import ContextPhase
from ctxbuilder.datacls import IntegrationContext
from ctxbuilder.digest import compute_for_integration_context

SPEC = {
    "image": "example.io/custom:1",
    "dependencies": ["camel-core.jar", "camel-http.jar"],
    "routes": ["route1.xml"],
    "property_files": ["app.properties"],
    "configuration": [{"type": "property", "value": "a=b"}],
    "repositories": ["https://repo.example.io/maven2"],
}


def make(spec=None, **meta):
    return IntegrationContext.model_validate({
        "metadata": {"name": "ctx-a", **meta},
        "spec": SPEC if spec is None else spec,
    })


class TestDigest:

    def test_deterministic(self):
        assert compute_for_integration_context(make()) == compute_for_integration_context(make())

    def test_format(self):
        digest = compute_for_integration_context(make())
        assert digest.startswith("v")
        assert "=" not in digest

    def test_ignores_metadata_and_status(self):
        ctx = make()
        other = make(name="ctx-b", namespace="other", resource_version=7)
        other.status.phase = ContextPhase.READY
        other.status.image = "example.io/ctx-b:latest"
        assert compute_for_integration_context(ctx) == compute_for_integration_context(other)

    @pytest.mark.parametrize("field, value", [
        ("image", "example.io/custom:2"),
        ("dependencies", ["camel-core.jar"]),
        ("dependencies", ["camel-http.jar", "camel-core.jar"]),
        ("routes", ["route2.xml"]),
        ("property_files", []),
        ("configuration", [{"type": "env", "value": "a=b"}]),
        ("repositories", []),
    ])
    def test_any_spec_change_changes_digest(self, field, value):
        changed = make({**SPEC, field: value})
        assert compute_for_integration_context(changed) != compute_for_integration_context(make())

    def test_moving_item_between_lists_changes_digest(self):
        a = make({"dependencies": ["x"], "routes": []})
        b = make({"dependencies": [], "routes": ["x"]})
        assert compute_for_integration_context(a) != compute_for_integration_context(b)

    def test_configuration_type_and_value_are_separate(self):
        a = make({"configuration": [{"type": "a=b", "value": "c"}]})
        b = make({"configuration": [{"type": "a", "value": "b=c"}]})
        assert compute_for_integration_context(a) != compute_for_integration_context(b)

    def test_empty_spec(self):
        assert compute_for_integration_context(make({})).startswith("v")

import pytest

from pipeflow.config import DEFAULT_SETTINGS, FlowSettings


class TestFlowSettingsDefaults:
    def test_defaults(self):
        settings = FlowSettings()
        assert settings.connect_distance == 50.0
        assert settings.block_distance == 3.0
        assert settings.association_distance == 15.0
        assert settings.utilization == 0.8
        assert settings.household_flow_rate == 10.0
        assert settings.low_fill_percent == 10.0
        assert settings.high_fill_percent == 80.0

    def test_default_instance(self):
        assert DEFAULT_SETTINGS == FlowSettings()

    def test_is_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_SETTINGS.connect_distance = 10.0


class TestFlowSettingsValidation:
    @pytest.mark.parametrize(
        "field", ["connect_distance", "block_distance", "association_distance", "household_flow_rate"]
    )
    def test_rejects_non_positive(self, field):
        with pytest.raises(ValueError, match=field):
            FlowSettings(**{field: 0})

    @pytest.mark.parametrize("utilization", [0.0, 1.5, -0.2])
    def test_rejects_utilization_out_of_range(self, utilization):
        with pytest.raises(ValueError, match="utilization"):
            FlowSettings(utilization=utilization)

    def test_accepts_full_utilization(self):
        assert FlowSettings(utilization=1.0).utilization == 1.0

    def test_rejects_inverted_thresholds(self):
        with pytest.raises(ValueError, match="fill thresholds"):
            FlowSettings(low_fill_percent=90, high_fill_percent=80)


class TestFromDict:
    def test_snake_case_keys(self):
        settings = FlowSettings.from_dict({"connect_distance": 25, "block_distance": 5})
        assert settings.connect_distance == 25.0
        assert settings.block_distance == 5.0

    def test_camel_case_keys(self):
        settings = FlowSettings.from_dict({"connectDistance": 30, "valveBlockDistance": 2, "householdFlowRate": 12})
        assert settings.connect_distance == 30.0
        assert settings.block_distance == 2.0
        assert settings.household_flow_rate == 12.0

    def test_ignores_unknown_keys(self):
        settings = FlowSettings.from_dict({"port": 3000})
        assert settings == FlowSettings()

    def test_validates(self):
        with pytest.raises(ValueError):
            FlowSettings.from_dict({"utilization": 2})


class TestWithOverrides:
    def test_returns_new_instance(self):
        updated = DEFAULT_SETTINGS.with_overrides(block_distance=5.0)
        assert updated.block_distance == 5.0
        assert DEFAULT_SETTINGS.block_distance == 3.0

    def test_rejects_unknown(self):
        with pytest.raises(ValueError, match="Unknown settings"):
            DEFAULT_SETTINGS.with_overrides(radius=1.0)

    def test_validates(self):
        with pytest.raises(ValueError):
            DEFAULT_SETTINGS.with_overrides(connect_distance=-1.0)

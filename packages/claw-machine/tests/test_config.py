"""Tests for prize definitions, game options and geometry."""
import pytest

from claw_machine import ConfigError, GameOptions, GameplaySettings, MachineGeometry, PrizeDef
from claw_machine.config import FALLBACK_GLYPH, parse_prizes


class TestPrizeDef:
    def test_from_dict_defaults_name_to_id(self):
        prize = PrizeDef.from_dict({"id": "duck"})
        assert prize.name == "duck"
        assert prize.rarity == "common"

    def test_missing_id(self):
        with pytest.raises(ConfigError):
            PrizeDef.from_dict({"name": "Nameless"})

    def test_unknown_rarity(self):
        with pytest.raises(ConfigError):
            PrizeDef(id="x", rarity="shiny")

    def test_display_prefers_image(self):
        assert PrizeDef(id="a", image="a.png", emoji="A").display == "a.png"
        assert PrizeDef(id="b", emoji="B").display == "B"
        assert PrizeDef(id="c").display == FALLBACK_GLYPH

    def test_to_dict_omits_empty_media(self):
        assert PrizeDef(id="a", name="A", rarity="rare").to_dict() == {
            "id": "a", "name": "A", "rarity": "rare",
        }

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            PrizeDef(id="")


class TestGameOptions:
    def test_defaults(self):
        options = GameOptions.from_dict(None)
        assert (options.claw_strength, options.drop_chance, options.max_tries) == (70, 20, 0)
        assert options.prizes == ()

    def test_camel_case_keys(self):
        options = GameOptions.from_dict(
            {"clawStrength": 55, "dropChance": 5, "maxTries": 3, "prizes": [{"id": "a"}]}
        )
        assert (options.claw_strength, options.drop_chance, options.max_tries) == (55, 5, 3)
        assert options.prizes == (PrizeDef(id="a", name="a"),)

    def test_snake_case_keys(self):
        options = GameOptions.from_dict({"claw_strength": 10, "max_tries": 2})
        assert options.claw_strength == 10
        assert options.max_tries == 2

    def test_explicit_zero_is_kept(self):
        options = GameOptions.from_dict({"clawStrength": 0, "dropChance": 0})
        assert options.claw_strength == 0
        assert options.drop_chance == 0

    def test_null_falls_back_to_default(self):
        assert GameOptions.from_dict({"clawStrength": None}).claw_strength == 70

    @pytest.mark.parametrize("data", [
        {"clawStrength": 101},
        {"dropChance": -1},
        {"clawStrength": "strong"},
        {"maxTries": -2},
        {"maxTries": 1.5},
        {"maxTries": True},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            GameOptions.from_dict(data)

    def test_parse_prizes_accepts_mixed_input(self):
        prizes = parse_prizes([PrizeDef(id="a"), {"id": "b", "rarity": "epic"}])
        assert [p.id for p in prizes] == ["a", "b"]
        assert prizes[1].rarity == "epic"


class TestGameplaySettings:
    def test_unlimited(self):
        settings = GameplaySettings(max_tries=0, tries_used=99)
        assert not settings.exhausted
        assert settings.tries_remaining is None

    def test_limited(self):
        settings = GameplaySettings(max_tries=2, tries_used=1)
        assert settings.tries_remaining == 1
        settings.tries_used = 2
        assert settings.exhausted
        assert settings.tries_remaining == 0


class TestMachineGeometry:
    def test_derived_measurements(self):
        g = MachineGeometry()
        assert g.bed_top == 250
        assert g.bed_height == 170
        assert g.max_arm_length == 234
        assert g.joint_home_y == 234
        assert g.rail_far_x == 264
        assert g.slip_rest_y == 326

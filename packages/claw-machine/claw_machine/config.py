"""Game options, prize definitions, machine geometry and timings."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from claw_machine.types import ConfigError

RARITIES: tuple[str, ...] = ("common", "uncommon", "rare", "epic", "legendary", "mythic")
FALLBACK_GLYPH = "\U0001F381"

DEFAULT_CLAW_STRENGTH = 70
DEFAULT_DROP_CHANCE = 20
DEFAULT_MAX_TRIES = 0


@dataclass(frozen=True)
class PrizeDef:
    """A prize the machine can hold. ``image`` wins over ``emoji`` for display."""

    id: str
    name: str = ""
    rarity: str = "common"
    image: str | None = None
    emoji: str | None = None

    def __post_init__(self) -> None:
        if self.id is None or str(self.id) == "":
            raise ConfigError("Prize is missing an id")
        if self.rarity not in RARITIES:
            raise ConfigError(f"Prize {self.id!r} has unknown rarity {self.rarity!r}")

    @property
    def display(self) -> str:
        return self.image or self.emoji or FALLBACK_GLYPH

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PrizeDef:
        if "id" not in data:
            raise ConfigError(f"Prize is missing an id: {dict(data)!r}")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            rarity=data.get("rarity") or "common",
            image=data.get("image") or None,
            emoji=data.get("emoji") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "name": self.name, "rarity": self.rarity}
        if self.image:
            out["image"] = self.image
        if self.emoji:
            out["emoji"] = self.emoji
        return out


def _percent(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if not 0 <= value <= 100:
        raise ConfigError(f"{name} must be between 0 and 100, got {value!r}")
    return value


@dataclass(frozen=True)
class GameOptions:
    """Options accepted by ``ClawMachine.start``.

    Attributes:
        claw_strength: Grab success probability, 0-100.
        drop_chance: Mid-lift slip probability given a successful grab, 0-100.
        max_tries: Tries allowed per game. 0 means unlimited.
        prizes: Prizes to load. Empty means the built-in catalog.
    """

    claw_strength: float = DEFAULT_CLAW_STRENGTH
    drop_chance: float = DEFAULT_DROP_CHANCE
    max_tries: int = DEFAULT_MAX_TRIES
    prizes: tuple[PrizeDef, ...] = ()

    def __post_init__(self) -> None:
        _percent("claw_strength", self.claw_strength)
        _percent("drop_chance", self.drop_chance)
        if isinstance(self.max_tries, bool) or not isinstance(self.max_tries, int):
            raise ConfigError(f"max_tries must be an integer, got {self.max_tries!r}")
        if self.max_tries < 0:
            raise ConfigError(f"max_tries must be >= 0, got {self.max_tries!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> GameOptions:
        """Build options from wire-style (camelCase) or snake_case keys.

        Missing or null values fall back to defaults; explicit zeros are kept.
        """
        data = data or {}

        def pick(camel: str, snake: str, default: Any) -> Any:
            for key in (camel, snake):
                if data.get(key) is not None:
                    return data[key]
            return default

        return cls(
            claw_strength=pick("clawStrength", "claw_strength", DEFAULT_CLAW_STRENGTH),
            drop_chance=pick("dropChance", "drop_chance", DEFAULT_DROP_CHANCE),
            max_tries=pick("maxTries", "max_tries", DEFAULT_MAX_TRIES),
            prizes=parse_prizes(data.get("prizes") or ()),
        )


def parse_prizes(items: Iterable[PrizeDef | Mapping[str, Any]]) -> tuple[PrizeDef, ...]:
    return tuple(p if isinstance(p, PrizeDef) else PrizeDef.from_dict(p) for p in items)


@dataclass
class GameplaySettings:
    """Live gameplay settings. Only ``tries_used`` changes during a game."""

    claw_strength: float = DEFAULT_CLAW_STRENGTH
    drop_chance: float = DEFAULT_DROP_CHANCE
    max_tries: int = DEFAULT_MAX_TRIES
    tries_used: int = 0

    @classmethod
    def from_options(cls, options: GameOptions) -> GameplaySettings:
        return cls(
            claw_strength=options.claw_strength,
            drop_chance=options.drop_chance,
            max_tries=options.max_tries,
        )

    @property
    def exhausted(self) -> bool:
        return self.max_tries > 0 and self.tries_used >= self.max_tries

    @property
    def tries_remaining(self) -> int | None:
        """Remaining tries, or None when unlimited."""
        if self.max_tries == 0:
            return None
        return max(0, self.max_tries - self.tries_used)


@dataclass(frozen=True)
class MachineGeometry:
    """Machine-space measurements, in pixel-equivalent units.

    The bed (machine bottom) starts at ``top_height`` and runs to the
    bottom of the machine.
    """

    width: float = 340.0
    height: float = 420.0
    top_height: float = 250.0
    corner_buffer: float = 16.0
    buffer_x: float = 36.0
    buffer_y: float = 16.0
    rail_size: tuple[float, float] = (8.0, 250.0)
    joint_size: tuple[float, float] = (40.0, 24.0)
    arm_rest_length: float = 20.0
    claw_offset: float = 7.0
    claw_size: tuple[float, float] = (40.0, 32.0)
    max_step: float = 10.0
    toy_scale: int = 2
    custom_prize_size: tuple[float, float] = (45.0, 45.0)
    shelf_margin: float = 30.0
    slip_depth: float = 60.0

    @property
    def bed_top(self) -> float:
        return self.top_height

    @property
    def bed_height(self) -> float:
        return self.height - self.top_height

    @property
    def max_arm_length(self) -> float:
        return self.bed_top - self.buffer_y

    @property
    def joint_home_y(self) -> float:
        return self.top_height - self.buffer_y

    @property
    def rail_far_x(self) -> float:
        return self.width - self.joint_size[0] - self.buffer_x

    @property
    def slip_rest_y(self) -> float:
        return self.bed_top + self.corner_buffer + self.slip_depth


@dataclass(frozen=True)
class Timing:
    """Tick cadences and delays, in milliseconds."""

    move_interval: int = 100
    homing_interval: int = 50
    settle_delay: int = 500
    grab_delay: int = 500
    slip_window: tuple[int, int] = (300, 800)
    slip_fall_interval: int = 30
    deliver_interval: int = 50
    drop_settle: int = 700
    overlay: int = 1000

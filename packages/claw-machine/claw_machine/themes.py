"""Colour themes a host can paint the machine with."""
from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    name: str
    background: str
    machine: str
    claw: str
    button: str
    wrapper: str

    def rgb(self, part: str) -> tuple[int, int, int]:
        """Colour of ``part`` as an (r, g, b) tuple."""
        value = getattr(self, part).lstrip("#")
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


THEMES: tuple[Theme, ...] = (
    Theme("Ocean", "#1a1a2e", "#32c2db", "#f1c40f", "#3498db", "#84dfe2"),
    Theme("Sunset", "#2c1810", "#e74c3c", "#f39c12", "#e67e22", "#f5b041"),
    Theme("Forest", "#1a2e1a", "#27ae60", "#2ecc71", "#16a085", "#82e0aa"),
    Theme("Galaxy", "#1a1a2e", "#9b59b6", "#e74c3c", "#8e44ad", "#d7bde2"),
    Theme("Candy", "#2e1a2e", "#ff6b9d", "#c44569", "#f8b500", "#ffc0cb"),
    Theme("Arctic", "#1a2e3e", "#5dade2", "#aed6f1", "#3498db", "#d4e6f1"),
    Theme("Lava", "#2e1a1a", "#c0392b", "#f39c12", "#e74c3c", "#f1948a"),
    Theme("Toxic", "#1a2e1a", "#00ff41", "#39ff14", "#32cd32", "#90ee90"),
    Theme("Royal", "#1a1a3e", "#6c3483", "#f4d03f", "#9b59b6", "#bb8fce"),
    Theme("Retro", "#2e2e1a", "#f4d03f", "#e74c3c", "#f39c12", "#f9e79f"),
    Theme("Midnight", "#0d0d1a", "#2c3e50", "#ecf0f1", "#34495e", "#85929e"),
    Theme("Tropical", "#1a3e2e", "#1abc9c", "#f1c40f", "#16a085", "#76d7c4"),
)


def random_theme(rng: random.Random) -> Theme:
    return rng.choice(THEMES)

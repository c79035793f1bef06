"""
Claw Arcade
Interactive pygame host for claw-machine: hold the buttons, grab a prize, collect it.
"""

import random
import sys

import pygame

from claw_machine import (
    HORIZONTAL,
    THEMES,
    VERTICAL,
    ClawBusyError,
    ClawMachine,
    Engine,
    PrizeState,
    claw_hitbox,
    random_theme,
    signals,
)

# --- Configuration ---
SCALE = 1.6
MARGIN = 40
HUD_HEIGHT = 70
FPS = 60
TITLE = "Claw Arcade"

OPTIONS = {"clawStrength": 70, "dropChance": 20, "maxTries": 10}

HUD_COLOR = (230, 230, 240)
GLASS_COLOR = (255, 255, 255)
SHADOW_COLOR = (0, 0, 0)
RARITY_COLORS = {
    "common": (170, 170, 170),
    "uncommon": (46, 204, 113),
    "rare": (52, 152, 219),
    "epic": (155, 89, 182),
    "legendary": (241, 196, 15),
    "mythic": (231, 76, 60),
}
KIND_COLORS = {
    "bear": (160, 110, 70),
    "bunny": (240, 220, 230),
    "golem": (130, 130, 140),
    "cucumber": (90, 170, 80),
    "penguin": (40, 40, 60),
    "robot": (170, 190, 210),
}


def to_screen(x: float, y: float) -> tuple[int, int]:
    return int(MARGIN + x * SCALE), int(HUD_HEIGHT + y * SCALE)


def scaled_rect(x: float, y: float, w: float, h: float) -> pygame.Rect:
    left, top = to_screen(x, y)
    return pygame.Rect(left, top, max(1, int(w * SCALE)), max(1, int(h * SCALE)))


def prize_color(prize) -> tuple[int, int, int]:
    if prize.kind in KIND_COLORS:
        return KIND_COLORS[prize.kind]
    rarity = prize.definition.rarity if prize.definition else "common"
    return RARITY_COLORS.get(rarity, RARITY_COLORS["common"])


def draw_machine(screen, font, machine: ClawMachine, theme) -> None:
    g = machine.geometry
    rig = machine.rig

    # Cabinet and bed
    pygame.draw.rect(screen, theme.rgb("wrapper"), scaled_rect(-8, -8, g.width + 16, g.height + 16))
    pygame.draw.rect(screen, theme.rgb("machine"), scaled_rect(0, 0, g.width, g.height))
    pygame.draw.rect(screen, theme.rgb("background"), scaled_rect(0, g.bed_top, g.width, g.bed_height))

    # Claw shadow over the bed
    claw = claw_hitbox(rig.joint, g)
    shadow_w = claw.w * rig.shadow_scale
    shadow = scaled_rect(claw.x + (claw.w - shadow_w) / 2, claw.y, shadow_w, claw.h / 2)
    pygame.draw.ellipse(screen, SHADOW_COLOR, shadow)

    # Prizes, lowest z first
    for prize in sorted(machine.prizes, key=lambda p: (p.z, p.y)):
        rect = scaled_rect(prize.x, prize.y, prize.w, prize.h)
        pygame.draw.rect(screen, prize_color(prize), rect, border_radius=6)
        if prize.state is PrizeState.SELECTED:
            pygame.draw.rect(screen, GLASS_COLOR, rect, 2, border_radius=6)
        label = font.render(prize.name[:6], True, SHADOW_COLOR)
        screen.blit(label, label.get_rect(center=rect.center))

    # Rail, joint, arm and claw
    pygame.draw.rect(screen, theme.rgb("claw"), scaled_rect(rig.rail.x, 0, rig.rail.w, g.top_height))
    pygame.draw.rect(screen, theme.rgb("claw"), scaled_rect(rig.joint.x, rig.joint.y, rig.joint.w, rig.joint.h))
    arm_x = rig.joint.x + rig.joint.w / 2 - 3
    pygame.draw.rect(screen, theme.rgb("button"), scaled_rect(arm_x, rig.joint.y, 6, rig.arm.h))
    jaw_y = rig.joint.y + rig.arm.h
    spread = 14 if rig.claw_open else 6
    for side in (-1, 1):
        start = to_screen(arm_x + 3, jaw_y)
        end = to_screen(arm_x + 3 + side * spread, jaw_y + 14)
        pygame.draw.line(screen, theme.rgb("claw"), start, end, 4)

    # Glass front
    pygame.draw.rect(screen, GLASS_COLOR, scaled_rect(0, 0, g.width, g.height), 2)


def main():
    pygame.init()
    rng = random.Random()
    engine = Engine(tick_ms=10)
    machine = ClawMachine(engine)
    g = machine.geometry

    width = int(g.width * SCALE) + MARGIN * 2
    height = int(g.height * SCALE) + HUD_HEIGHT + MARGIN
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)
    small = pygame.font.SysFont("monospace", 11)

    theme = random_theme(rng)
    status = ["Starting..."]

    def on_signal(name, data):
        if name == signals.TRY_USED:
            status[0] = f"Try {data['tries_used']}"
        elif name == signals.NO_TRIES_LEFT:
            status[0] = "No tries left! N = new game"
        elif name == signals.PRIZE_GRABBED:
            status[0] = f"Got {data['prize']['name']}..."
        elif name == signals.PRIZE_SLIPPED:
            status[0] = f"{data['prize']['name']} slipped!"
        elif name == signals.GRAB_MISSED:
            status[0] = "Missed."
        elif name == signals.PRIZE_DELIVERED:
            status[0] = f"Won {data['prize']['name']}! Click it to collect"
        elif name == signals.PRIZE_COLLECTED:
            status[0] = f"Collected {data['prize']['name']} ({data['collected']} total)"
        elif name == signals.READY:
            status[0] = "Hold RIGHT, then hold UP"

    for name in (
        signals.TRY_USED, signals.NO_TRIES_LEFT, signals.PRIZE_GRABBED,
        signals.PRIZE_SLIPPED, signals.GRAB_MISSED, signals.PRIZE_DELIVERED,
        signals.PRIZE_COLLECTED, signals.READY,
    ):
        machine.subscribe(name, on_signal)

    machine.start(OPTIONS)
    keymap = {pygame.K_RIGHT: HORIZONTAL, pygame.K_UP: VERTICAL}
    running = True

    while running:
        dt = pg_clock.tick(FPS)

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in keymap:
                    machine.press(keymap[event.key])
                elif event.key == pygame.K_r:
                    machine.reshuffle()
                elif event.key == pygame.K_t:
                    theme = THEMES[(THEMES.index(theme) + 1) % len(THEMES)]
                elif event.key == pygame.K_n:
                    try:
                        machine.start(OPTIONS)
                    except ClawBusyError:
                        status[0] = "Finish this turn first"
            elif event.type == pygame.KEYUP and event.key in keymap:
                machine.release(keymap[event.key])
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                for prize in machine.prizes:
                    rect = scaled_rect(prize.x, prize.y, prize.w, prize.h)
                    if prize.state is PrizeState.SELECTED and rect.collidepoint(event.pos):
                        machine.collect(prize)
                        break

        # --- Update ---
        engine.advance(dt)

        # --- Draw ---
        screen.fill(theme.rgb("background"))
        draw_machine(screen, small, machine, theme)

        tries = machine.settings
        left = "unlimited" if tries.tries_remaining is None else tries.tries_remaining
        hud_lines = [
            f"{status[0]}",
            f"Tries left: {left}   Collected: {len(machine.collected)}   Theme: {theme.name}",
            "RIGHT=Move  UP=Lower  R=Shuffle  T=Theme  N=New  Esc=Quit",
        ]
        for i, line in enumerate(hud_lines):
            surf = font.render(line, True, HUD_COLOR)
            screen.blit(surf, (10, 6 + i * 20))
        if machine.show_overlay and machine.collected:
            banner = font.render(f"* {machine.collected[-1].name} *", True, HUD_COLOR)
            screen.blit(banner, banner.get_rect(center=to_screen(g.width / 2, g.height / 2 - 40)))

        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()

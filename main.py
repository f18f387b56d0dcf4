"""
CHIP-8 front end: pygame window, or headless recording to MP4.

    python main.py rom=games/pong.ch8 speed=12
    python main.py rom=games/pong.ch8 headless=true ticks=1800 video=pong.mp4
"""

import time

import hydra
import jax
import pygame
from omegaconf import DictConfig

from chipax import Chip8, Chip8Config, ExecutionFault, create_state, load_rom, run_ticks
from chipax.errors import raise_for_fault
from chipax.logging import EmulatorLogger
from chipax.rendering import chip8_display_to_rgb, create_color_scheme, create_video

# 1 2 3 4 / Q W E R / A S D F / Z X C V  ->  1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay_height = len(text_lines) * line_height + 8
    overlay_width = max_width + 16

    overlay = pygame.Surface((overlay_width, overlay_height))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def debug_lines(machine: Chip8, fps: float):
    state = machine.state
    if machine.paused:
        status = "PAUSED"
    elif machine.awaiting_key:
        status = "WAITING FOR KEY"
    else:
        status = "RUNNING"
    registers = [
        " ".join(f"V{j:X}:{int(state.V[j]):02X}" for j in range(i, i + 4))
        for i in range(0, 16, 4)
    ]
    return [
        f"PC: 0x{int(state.pc):03X}  I: 0x{int(state.I):03X}",
        f"DT: {int(state.delay_timer)}  ST: {int(state.sound_timer)}",
        f"Speed: {machine.speed} IPT  FPS: {fps:.1f}",
        f"Status: {status}",
        *registers,
    ]


def run_window(machine: Chip8, cfg: DictConfig, logger: EmulatorLogger):
    """Interactive loop: one machine tick per frame at cfg.tick_rate."""
    scale = cfg.scale
    on_color, off_color = create_color_scheme(cfg.color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((64 * scale, 32 * scale))
    pygame.display.set_caption("chipax")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)

    show_debug = cfg.debug_overlay
    faulted = False
    frame_count = 0
    fps_start_time = time.time()
    current_fps = float(cfg.tick_rate)

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset, +/-=Speed, F1=Debug")

    running = True
    while running:
        clock.tick(cfg.tick_rate)

        frame_count += 1
        current_time = time.time()
        if current_time - fps_start_time >= 1.0:
            current_fps = frame_count / (current_time - fps_start_time)
            frame_count = 0
            fps_start_time = current_time

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    machine.toggle_pause()
                elif event.key == pygame.K_F1:
                    show_debug = not show_debug
                elif event.key == pygame.K_F5:
                    machine.reset()
                    faulted = False
                elif event.key == pygame.K_EQUALS:
                    machine.set_speed(min(100, machine.speed + 2))
                elif event.key == pygame.K_MINUS:
                    machine.set_speed(max(1, machine.speed - 2))
                elif event.key in KEY_MAP:
                    machine.press_key(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    machine.release_key(KEY_MAP[event.key])

        if not faulted:
            try:
                machine.run_one_tick()
            except ExecutionFault:
                # Keep the last frame on screen; F5 restarts
                faulted = True

        rgb = chip8_display_to_rgb(machine.display, scale, on_color, off_color)
        screen.blit(pygame.surfarray.make_surface(rgb.swapaxes(0, 1)), (0, 0))

        if show_debug:
            draw_overlay_text(screen, debug_lines(machine, current_fps), (5, 5), font, alpha=100)
        if faulted:
            draw_overlay_text(screen, ["FAULT - F5 to reset"], (5, 32 * scale - 25), font,
                              text_color=(255, 64, 64), alpha=150)

        pygame.display.flip()

    pygame.quit()


def run_headless(cfg: DictConfig, logger: EmulatorLogger):
    """Run cfg.ticks ticks without a window, optionally saving an MP4."""
    state = create_state(jax.random.PRNGKey(cfg.seed), stack_size=cfg.stack_size)
    state = load_rom(state, cfg.rom)
    logger.log_headless_start(cfg.rom, cfg.ticks, cfg.speed)

    start = time.time()
    state, frames = run_ticks(state, cfg.ticks, cfg.speed, True)
    frames.block_until_ready()
    logger.log_headless_done(time.time() - start, int(state.pc))

    try:
        raise_for_fault(state)
    except ExecutionFault as error:
        logger.log_fault(error)

    if cfg.video:
        create_video(frames, filename=cfg.video, fps=cfg.tick_rate, scale=cfg.scale,
                     color_scheme=cfg.color_scheme)
        logger.log_video_saved(cfg.video, len(frames))


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    logger = EmulatorLogger(log_level=cfg.log_level)

    if cfg.headless:
        run_headless(cfg, logger)
        return

    machine = Chip8(
        Chip8Config(speed=cfg.speed, tick_rate=cfg.tick_rate, seed=cfg.seed, stack_size=cfg.stack_size),
        logger=logger,
    )
    machine.load_rom(cfg.rom)
    run_window(machine, cfg, logger)


if __name__ == "__main__":
    main()

"""
main.py - Demo runner for the Morse pattern engine
--------------------------------------------------

Responsible for:
- loading configuration and configuring the logger
- wiring the event bus, pattern cache and preset library
- playing a preset through FrameSequencer on the asyncio clock
- cycling labels with TransitionOrchestrator
- graceful shutdown on Ctrl+C or when the requested run time is over
"""

import sys

# Set UTF-8 encoding for output (block characters in the terminal preview)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

import argparse
import asyncio
import signal
from typing import List, Optional

from engine import AsyncioClock, FrameSequencer, TransitionOrchestrator
from managers import ConfigManager
from models.events import Event, EventType
from patterns import PatternCache, pattern_to_string
from patterns.presets import PresetLibrary
from services import EventBus
from services.middleware import log_middleware
from utils.logger import get_logger, configure_logger
from utils.serialization import Serializer
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a Morse pixel-grid preset in the terminal")
    parser.add_argument("--preset", help="Preset name (default: from config)")
    parser.add_argument("--seconds", type=float, default=None, help="Stop after this many seconds")
    parser.add_argument("--list", action="store_true", help="List presets and exit")
    return parser.parse_args(argv)


async def main(args: argparse.Namespace) -> int:
    """Main async entry point (dependency wiring and event loop startup)."""

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    config_manager = ConfigManager()
    config = config_manager.load()
    configure_logger(config.logging.level, config.logging.use_colors)

    log.info("Starting Morse pattern demo...")

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    cache = PatternCache(config.cache.capacity)
    library = PresetLibrary(cache)

    if args.list:
        for preset in library.get_all():
            print(f"{preset.name:<12} {len(preset.frames):>3} frames @ {preset.tempo}ms  {preset.description}")
        return 0

    preset_name = args.preset or config_manager.preset_name
    preset = library.get_preset_by_name(preset_name) if preset_name else None
    if preset is None:
        log.warn(f"Preset '{preset_name}' not found, picking one at random")
        preset = library.get_random_preset()

    # ========================================================================
    # 2. TIMING COMPONENTS
    # ========================================================================

    clock = AsyncioClock(asyncio.get_running_loop())

    sequencer = FrameSequencer(
        preset.copy_frames(),
        tempo_ms=preset.tempo,
        iterations=config.sequencer.iterations,
        clock=clock,
        tick_interval_ms=config.sequencer.tick_interval_ms,
        max_catch_up_frames=config.sequencer.max_catch_up_frames,
        event_bus=event_bus,
    )

    orchestrator = TransitionOrchestrator(
        config_manager.labels or [preset.name],
        hold_duration_ms=config.orchestrator.hold_duration_ms,
        transition_duration_ms=config.orchestrator.transition_duration_ms,
        clock=clock,
        event_bus=event_bus,
    )

    shutdown = asyncio.Event()
    current_label = {"text": preset.name}

    def on_label(event: Event) -> None:
        state = event.state
        current_label["text"] = (
            f"{state.current_label} → {state.next_label}" if state.is_transitioning else state.current_label
        )

    def on_frame(event: Event) -> None:
        print(f"\n{current_label['text']}  [frame {event.frame_index + 1}/{sequencer.frame_count}]")
        print(pattern_to_string(event.pattern))

    def on_complete(event: Event) -> None:
        log.info("Preset finished", iterations=event.iterations)
        shutdown.set()

    orchestrator.subscribe(on_label, EventType.LABEL_STATE_CHANGED)
    sequencer.subscribe(on_frame, EventType.FRAME_CHANGED)
    sequencer.subscribe(on_complete, EventType.SEQUENCE_COMPLETED)

    # ========================================================================
    # 3. RUN
    # ========================================================================

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            pass

    log.info(f"Playing '{preset.name}'", frames=len(preset.frames), tempo=f"{preset.tempo}ms")
    sequencer.reset()
    sequencer.start()
    orchestrator.start()

    try:
        if args.seconds is not None:
            await asyncio.wait_for(shutdown.wait(), timeout=args.seconds)
        else:
            await shutdown.wait()
    except asyncio.TimeoutError:
        log.info("Run time elapsed")
    finally:
        final_state = sequencer.get_state()
        sequencer.destroy()
        orchestrator.destroy()

    log.info(
        "Demo shut down cleanly",
        cache=str(cache.get_stats()),
        **Serializer.sequencer_state_to_dict(final_state),
    )
    return 0


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
def run() -> None:
    exit_code = 0
    try:
        exit_code = asyncio.run(main(parse_args()))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    run()

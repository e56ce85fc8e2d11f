import pytest

from pixellava.config import LampConfig
from pixellava.engine import DEFAULT_PARAMS, Bounds
from pixellava.modes import Mode, ModeController, TickGate
from pixellava.palettes import DEFAULT_COLOR_ARGB
from pixellava.renderer import ImageSurface

BOUNDS = Bounds(0, 0, 320, 200)
BLUE = 0xFF1428B4


def make_controller(seed=11):
    return ModeController(seed=seed)


def test_starts_in_placement():
    controller = make_controller()
    assert controller.mode is Mode.PLACEMENT
    assert not controller.ticking
    assert controller.particle_count == 0


def test_bootstrap_without_config_places():
    controller = make_controller()
    assert controller.bootstrap(None) is Mode.PLACEMENT


def test_bootstrap_with_unusable_config_places():
    controller = make_controller()
    assert controller.bootstrap(LampConfig(x=5, y=5, width=0, height=40)) is Mode.PLACEMENT


def test_bootstrap_with_saved_config_animates():
    controller = make_controller()
    config = LampConfig(x=100, y=900, width=160, height=40, color_argb=BLUE)
    assert controller.bootstrap(config) is Mode.ANIMATION
    assert controller.particle_count == 10
    assert controller.color_argb == BLUE
    assert controller.bounds == Bounds(0, 0, 160, 40)


def test_commit_defaults_unset_color():
    controller = make_controller()
    controller.commit(BOUNDS, 0)
    assert controller.color_argb == DEFAULT_COLOR_ARGB
    assert controller.color == (245, 110, 30, 255)


def test_commit_with_empty_bounds_routes_to_placement():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    assert controller.commit(Bounds.from_size(0, 40), BLUE) is Mode.PLACEMENT
    assert controller.particle_count == 0


def test_reposition_in_placement_is_noop():
    controller = make_controller()
    assert controller.reposition() is Mode.PLACEMENT
    assert controller.mode is Mode.PLACEMENT


def test_reposition_discards_particles():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    assert controller.reposition() is Mode.PLACEMENT
    assert controller.particle_count == 0
    assert controller.particles == ()
    assert not controller.on_tick(BOUNDS)


def test_recommit_respawns_single_simulation():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    system = controller._system
    old = controller.particles

    controller.commit(Bounds.from_size(800, 60), DEFAULT_COLOR_ARGB)
    assert controller.mode is Mode.ANIMATION
    assert controller._system is system
    assert controller.particle_count == 50
    assert controller.color_argb == DEFAULT_COLOR_ARGB
    assert not set(map(id, old)) & set(map(id, controller.particles))


def test_reentry_after_reposition_spawns_fresh():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    old = controller.particles
    controller.reposition()
    controller.commit(BOUNDS, BLUE)
    assert controller.particle_count == 20
    assert not set(map(id, old)) & set(map(id, controller.particles))


def test_tick_updates_and_marks_dirty():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    controller.render(ImageSurface(320, 200))
    assert not controller.dirty
    before = [p.position for p in controller.particles]

    assert controller.on_tick(BOUNDS)
    assert controller.dirty
    assert [p.position for p in controller.particles] != before


def test_tick_skips_empty_bounds():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    before = [p.position for p in controller.particles]
    assert not controller.on_tick(Bounds.from_size(320, 0))
    assert [p.position for p in controller.particles] == before
    assert controller.particle_count == 20


def test_tick_in_placement_does_nothing():
    controller = make_controller()
    assert not controller.on_tick(BOUNDS)


def test_resized_bounds_respawn_population():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    controller.on_tick(Bounds.from_size(160, 200))
    assert controller.particle_count == 10
    assert controller.bounds == Bounds.from_size(160, 200)


def test_reload_color_keeps_mode_and_particles():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    particles = controller.particles
    controller.reload_color(0)
    assert controller.mode is Mode.ANIMATION
    assert controller.color_argb == DEFAULT_COLOR_ARGB
    assert controller.particles == particles


def test_render_placement_draws_instructions():
    controller = make_controller()
    surface = ImageSurface(300, 48)
    controller.render(surface, Bounds.from_size(300, 48))
    assert len(surface.texts) == 2
    assert surface.coverage() == 300 * 48


def test_render_animation_paints_lava():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    surface = ImageSurface(320, 200)
    controller.render(surface)
    assert surface.texts == []
    assert surface.coverage() > 0
    painted = surface.pixels[surface.pixels[..., 3] > 0]
    assert (painted == (0x14, 0x28, 0xB4, 0xFF)).all()


def test_end_to_end_commit_and_run():
    controller = make_controller(seed=2024)
    assert controller.bootstrap(None) is Mode.PLACEMENT

    controller.commit(Bounds(0, 0, 320, 200), 0xFFF56E1E)
    assert controller.mode is Mode.ANIMATION
    assert controller.particle_count == 20

    # one particle about to sink through the floor
    diver = controller.particles[0]
    diver.y = 200 + diver.radius - 0.5
    diver.vy = 1.0

    wraps = 0
    for _ in range(100):
        previous = [p.y for p in controller.particles]
        assert controller.on_tick(BOUNDS)
        for p, y in zip(controller.particles, previous):
            assert -p.radius <= p.x <= 320 + p.radius
            assert abs(p.vx) <= DEFAULT_PARAMS.max_speed_x
            assert abs(p.vy) <= DEFAULT_PARAMS.max_speed_y
            if abs(p.y - y) > 100:
                wraps += 1
        controller.render(ImageSurface(320, 200))
        assert not controller.dirty
    assert wraps >= 1
    assert controller.particle_count == 20


def test_invalid_params_rejected_at_construction():
    from pixellava.engine import LavaParams
    with pytest.raises(ValueError):
        ModeController(params=LavaParams(drag=2.0))


def test_render_without_bounds_uses_ticked_bounds():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    controller.on_tick(BOUNDS)
    surface = ImageSurface(640, 400)
    controller.render(surface)
    assert surface.coverage() > 0
    assert (surface.pixels[:, 320:, 3] == 0).all()
    assert (surface.pixels[200:, :, 3] == 0).all()


def test_gate_refuses_tick_until_painted():
    controller = make_controller()
    controller.commit(BOUNDS, BLUE)
    gate = TickGate()

    assert gate.tick(controller, BOUNDS)
    assert gate.pending
    frozen = [p.position for p in controller.particles]

    assert not gate.tick(controller, BOUNDS)
    assert [p.position for p in controller.particles] == frozen

    controller.render(ImageSurface(320, 200))
    gate.painted()
    assert not gate.pending
    assert gate.tick(controller, BOUNDS)
    assert [p.position for p in controller.particles] != frozen


def test_gate_stays_open_when_nothing_ticked():
    controller = make_controller()
    gate = TickGate()
    assert not gate.tick(controller, BOUNDS)
    assert not gate.pending

    controller.commit(BOUNDS, BLUE)
    assert not gate.tick(controller, Bounds.from_size(0, 0))
    assert not gate.pending
    assert gate.tick(controller, BOUNDS)

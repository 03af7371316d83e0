import pytest

from observatory.layout import LayoutSimulator
from observatory.viewport import ViewController, Viewport, clamp_scale


class TestViewport:

    def test_identity(self):
        assert Viewport().to_screen((123.0, 45.0)) == (123.0, 45.0)

    def test_scale_about_center(self):
        """The canvas center is the fixed point of a zoom."""
        v = Viewport(k=2.0)
        assert v.to_screen((400.0, 300.0)) == (400.0, 300.0)
        assert v.to_screen((500.0, 300.0)) == (600.0, 300.0)

    def test_pan_applied_in_screen_pixels(self):
        v = Viewport(x=10.0, y=-5.0, k=2.0)
        assert v.to_screen((500.0, 300.0)) == (610.0, 295.0)

    def test_to_world_inverts(self):
        v = Viewport(x=37.0, y=-12.0, k=1.7)
        wx, wy = v.to_world(v.to_screen((250.0, 410.0)))
        assert wx == pytest.approx(250.0)
        assert wy == pytest.approx(410.0)

    def test_sizes_stay_constant_on_screen(self):
        v = Viewport(k=4.0)
        assert v.stroke_width(2) == 0.5
        assert v.font_size(10) == 2.5

    def test_labels_hidden_when_zoomed_out(self):
        assert not Viewport(k=0.5).labels_visible()
        assert Viewport(k=0.6).labels_visible()

    @pytest.mark.parametrize("k, expected", [(0.0, 0.1), (-2.0, 0.1), (80.0, 5.0)])
    def test_scale_clamped_on_construction(self, k, expected):
        """A viewport built with a zero or huge scale still maps both ways."""
        v = Viewport(k=k)
        assert v.k == expected
        assert v.stroke_width(1) == pytest.approx(1 / expected)
        wx, wy = v.to_world(v.to_screen((300.0, 200.0)))
        assert (wx, wy) == (pytest.approx(300.0), pytest.approx(200.0))

    def test_clamp_scale(self):
        assert clamp_scale(0.01) == 0.1
        assert clamp_scale(50) == 5.0
        assert clamp_scale(2.0) == 2.0


class TestViewController:

    def test_wheel_zoom(self):
        """Scrolling up zooms in, proportional to the delta."""
        view = ViewController()
        view.wheel(-100)
        assert view.viewport.k == pytest.approx(1.1)

    def test_wheel_clamped(self):
        view = ViewController()
        for _ in range(100):
            view.wheel(-1000)
        assert view.viewport.k == 5.0
        view.wheel(5000)
        assert view.viewport.k == 0.1

    def test_zoom_buttons(self):
        view = ViewController()
        view.zoom_in()
        assert view.viewport.k == pytest.approx(1.2)
        view.zoom_out()
        view.zoom_out()
        assert view.viewport.k == pytest.approx(1 / 1.2)

    def test_drag_pans(self):
        view = ViewController()
        view.press(0, 0)
        view.move(10, 5)
        view.move(15, 5)
        view.release()
        view.move(100, 100)
        assert (view.viewport.x, view.viewport.y) == (15, 5)
        assert not view.dragging

    def test_reset_keeps_canvas(self):
        view = ViewController(Viewport(x=50, y=20, k=3.0, width=1024, height=768))
        view.reset()
        assert view.viewport == Viewport(0.0, 0.0, 1.0, 1024, 768)

    def test_resize(self):
        view = ViewController()
        view.resize(1000, 500)
        assert view.viewport.center == (500.0, 250.0)

    def test_fit_empty(self):
        assert ViewController().fit([]).k == 0.8

    def test_fit_box(self):
        """The bounding box is centered and scaled into the padded canvas."""
        view = ViewController()
        points = [(100.0, 100.0), (300.0, 200.0)]
        v = view.fit(points)
        assert v.k == pytest.approx(3.6)
        sx, sy = v.to_screen((200.0, 150.0))
        assert sx == pytest.approx(400.0)
        assert sy == pytest.approx(300.0)
        for p in points:
            x, y = v.to_screen(p)
            assert 0 <= x <= 800 and 0 <= y <= 600

    def test_never_moves_nodes(self):
        """View changes leave the simulation's coordinates alone."""
        sim = LayoutSimulator(5, seed=3)
        before = sim.positions()
        view = ViewController()
        view.zoom_in()
        view.pan_by(40, -20)
        view.fit(before)
        assert sim.positions() == before

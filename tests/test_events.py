import json
from pupiltrack.runtime.events import PupilEvent, Ellipse
from pupiltrack.eye.ellipse import TrackingResult

def test_event_json():
    r = TrackingResult(1.5, 2.5, 30.0, 20.0, 45.0)
    ev = PupilEvent.build(True, r, frame=3, proc_ms=1.25)
    d = json.loads(ev.model_dump_json())
    assert d["ok"] is True and d["frame"] == 3
    assert d["ellipse"] == {"cx":1.5, "cy":2.5, "width":30.0, "height":20.0, "angle":45.0}

def test_failed_frame_has_no_ellipse():
    ev = PupilEvent.build(False, TrackingResult(1, 2, 3, 4, 5))
    assert ev.ellipse is None and not ev.ok

def test_ellipse_from_result():
    e = Ellipse.from_result(TrackingResult(1, 2, 3, 4, 5))
    assert (e.cx, e.angle) == (1, 5)

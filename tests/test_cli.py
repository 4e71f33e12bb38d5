import json
import numpy as np, cv2, pytest
from typer.testing import CliRunner
from pupiltrack.cli import app

runner = CliRunner()

def write_eye(path):
    img = np.full((240,320,3), 200, np.uint8)
    cv2.ellipse(img, (160,120), (25,18), 0, 0, 360, (30,30,30), -1)
    cv2.imwrite(str(path), img)

def test_image_command(tmp_path):
    write_eye(tmp_path / "eye.png")
    res = runner.invoke(app, ["image", str(tmp_path / "eye.png"), "--out", str(tmp_path / "out")])
    assert res.exit_code == 0, res.output
    ev = json.loads(res.output.strip().splitlines()[-1])
    assert ev["ok"] is True
    assert abs(ev["ellipse"]["cx"] - 160) <= 3 and abs(ev["ellipse"]["cy"] - 120) <= 3
    assert (tmp_path / "out" / "eye.png").exists()

def test_image_command_missing_file(tmp_path):
    res = runner.invoke(app, ["image", str(tmp_path / "nope.png")])
    assert res.exit_code == 1

def test_params_command(tmp_path):
    res = runner.invoke(app, ["params"])
    assert res.exit_code == 0
    assert "canny_threshold: 159" in res.output
    cfg = tmp_path / "t.yaml"; cfg.write_text("cannyAperture: 3\n")
    res = runner.invoke(app, ["params", "--config", str(cfg)])
    assert "canny_aperture: 3" in res.output

def test_track_command_on_video(tmp_path):
    clip = tmp_path / "eye.avi"
    vw = cv2.VideoWriter(str(clip), cv2.VideoWriter_fourcc(*"MJPG"), 10, (320,240))
    if not vw.isOpened():
        pytest.skip("no MJPG writer in this OpenCV build")
    img = np.full((240,320,3), 200, np.uint8)
    cv2.ellipse(img, (160,120), (25,18), 0, 0, 360, (30,30,30), -1)
    for _ in range(5):
        vw.write(img)
    vw.release()

    res = runner.invoke(app, ["track", "--source", str(clip), "--width", "320", "--height", "240",
                              "--no-display", "--debug"])
    assert res.exit_code == 0, res.output
    events = [json.loads(l) for l in res.output.splitlines() if l.startswith("{")]
    assert [e["frame"] for e in events] == [0, 1, 2, 3, 4]
    assert all(e["source"] == str(clip) for e in events)
    found = [e for e in events if e["ok"]]
    assert found
    for e in found:
        assert abs(e["ellipse"]["cx"] - 160) <= 4 and abs(e["ellipse"]["cy"] - 120) <= 4

def test_track_command_bad_source(tmp_path):
    res = runner.invoke(app, ["track", "--source", str(tmp_path / "missing.avi"), "--no-display"])
    assert res.exit_code == 1

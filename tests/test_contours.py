import numpy as np, cv2
from pupiltrack.eye.contours import select_mergeable, merge_contours, max_relax_passes, draw

def pts(n):
    return np.zeros((n,1,2), np.int32)

def test_large_contours_merge_without_relaxing():
    flags, thr = select_mergeable([pts(100), pts(10), pts(80)], 80)
    assert flags == [True, False, True] and thr == 80

def test_relaxes_until_one_qualifies():
    flags, thr = select_mergeable([pts(10), pts(30)], 80)
    assert flags == [False, True] and thr == 30

def test_empty_contour_set_stops_immediately():
    flags, thr = select_mergeable([], 80)
    assert flags == [] and thr == 80

def test_non_positive_min_size_is_bounded():
    assert max_relax_passes(0) == 1 and max_relax_passes(-7) == 1
    flags, _ = select_mergeable([pts(1), pts(3)], 0)
    assert flags == [True, True]
    flags, _ = select_mergeable([pts(1)], -5)
    assert flags == [True]

def test_relaxation_always_finds_a_contour():
    for min_size in (1, 2, 79, 80, 81, 500):
        flags, thr = select_mergeable([pts(1)], min_size)
        assert flags == [True] and thr <= 1

def test_merge_on_edge_map():
    edges = np.zeros((100,100), np.uint8)
    cv2.circle(edges, (50,50), 30, 255, 1)
    cv2.line(edges, (2,2), (4,2), 255, 1)
    m = merge_contours(edges, 80)
    assert m.ok and len(m.contours) >= 2
    assert len(m.points) == sum(len(c) for c, f in zip(m.contours, m.mergeable) if f)
    d = np.hypot(m.points[:,0,0] - 50, m.points[:,0,1] - 50)
    assert np.all(np.abs(d - 30) < 2)

def test_merge_on_empty_edge_map():
    m = merge_contours(np.zeros((50,50), np.uint8), 80)
    assert not m.ok and m.points.shape == (0,1,2)

def test_draw_filters_by_flag():
    c = [np.array([[[5,5]],[[5,20]]], np.int32), np.array([[[30,30]],[[40,30]]], np.int32)]
    assert draw((50,50), c).sum() > draw((50,50), c, [True, False]).sum() > 0

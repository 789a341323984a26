# vionav

Building blocks for a monocular visual-inertial navigation pipeline, in plain
Python on top of NumPy.

## What is in the package

- `vionav.tracker`: `FeatureTracker` keeps the bookkeeping of features tracked
  from frame to frame. It holds the points of the previous, current and
  incoming frame, their global ids and track counts, a spacing mask, and the
  normalised coordinates and velocities of the current points. It also has the
  helpers `in_border` and `reduce_by_status`.
- `vionav.tracker_node`: `PublishRateController` classifies each incoming
  image as a `FrameDecision` (first frame, restart, track only, first publish,
  publish). `build_feature_cloud` packs a tracker's current features into a
  `PointCloud`. `track_color` gives a BGR drawing colour by track count.
- `vionav.depth`: `DepthRecovery` pairs feature clouds with 8-bit depth
  images of the same stamp and adds a `Z_of_point` channel.
  `depth_from_pixel` converts one pixel value to a depth.
- `vionav.dataset`: `DatasetPlayer` steps through a dataset directory holding
  `imu_measure.txt`, `ground_truth.txt`, `mono_pic/` and `depth_pic/`. The
  helpers `parse_imu_line`, `parse_ground_truth_line` and `image_name` read
  single records.
- `vionav.trajectory`: `TrajectoryRecorder` writes odometry messages as text
  lines. `format_odometry_line` formats a single line.
- `vionav.messages`: the records passed between stages. These are `Header`,
  `Channel`, `PointCloud` (with `channel(name)`), `Odometry` and
  `ImuMeasurement`.
- `vionav.parameters`: `TrackerParameters` is a frozen dataclass of the
  tracker's settings, with validation. `FeatureStrategy` is an enum with the
  values `SHI_TOMASI` and `AKAZE`.
- Geometry and helpers:
  - `vionav.quaternion`: `quaternion_product`, `quaternion_plus` and
    `quaternion_jacobian`. Quaternions are stored as (x, y, z, w).
  - `vionav.transform`: `Transform`, a quaternion plus a translation, with
    `from_matrix` and `to_matrix`.
  - `vionav.utm`: `ll_to_utm`, `utm_to_ll`, `utm_letter_designator` and
    `UTMCoordinate`, for WGS84.
  - `vionav.mathutil`: `bres_line`, `bres_circle`, `fit_circle`,
    `intersect_circles`, `hypot3`, `d2r`, `r2d`, `sinc`, `timestamp_diff`,
    `time_in_seconds` and `time_in_microseconds`.
  - `vionav.colormap`: `colormap(name, idx)` for the `"jet"` and `"autumn"`
    maps, and `color_depth_image`.
  - `vionav.timing`: `TicToc`, a stopwatch that reports milliseconds.

## Requirements

Python 3.10 or later and NumPy.

## Examples

### Geometry

```python
from vionav.mathutil import bres_line, intersect_circles
from vionav.utm import ll_to_utm, utm_to_ll

cells = bres_line(0, 0, 4, 2)                        # list of (x, y) cells
points = intersect_circles(0.0, 0.0, 1.0, 1.0, 0.0, 1.0)

utm = ll_to_utm(48.137, 11.575)                      # UTMCoordinate(northing, easting, zone)
latitude, longitude = utm_to_ll(utm.northing, utm.easting, utm.zone)
```

### Quaternions and transforms

```python
import numpy as np

from vionav.quaternion import quaternion_jacobian, quaternion_plus
from vionav.transform import Transform

q = np.array([0.0, 0.0, 0.0, 1.0])                   # x, y, z, w
q_next = quaternion_plus(q, np.array([0.01, 0.0, 0.0]))
jacobian = quaternion_jacobian(q_next)               # 4 x 3

transform = Transform.from_matrix(np.eye(4))
matrix = transform.to_matrix()
```

### Depth colouring

```python
import numpy as np

from vionav.colormap import color_depth_image

depth = np.array([[0.0, 1.0], [4.0, 8.0]], dtype=np.float32)
bgr = color_depth_image(depth, 0.0, 8.0)             # uint8, shape (2, 2, 3)
```

Pixels with zero depth stay black. Near depths map to the red end of the jet
map, and far depths to the blue end.

### Recording a trajectory

```python
from vionav.messages import Header, Odometry
from vionav.trajectory import TrajectoryRecorder

with TrajectoryRecorder(open("estimate.txt", "w")) as recorder:
    recorder.record(Odometry(header=Header(stamp=1500.0), position=(1.0, 2.0, 3.0)))
```

Each line holds the following values, separated by spaces and written with
eight decimal places:

1. the header stamp divided by 1000
2. the quaternion (x, y, z, w)
3. the linear velocity
4. the position

Leaving the `with` block closes the stream.

### Recovering depth for tracked features

```python
import numpy as np

from vionav.depth import DepthRecovery
from vionav.messages import Channel, Header, PointCloud

recovery = DepthRecovery(min_range=0.01, max_range=8.0)
recovery.add_depth_image(1000.0, np.full((480, 640), 128, dtype=np.uint8))

cloud = PointCloud(
    header=Header(stamp=1000.0),
    points=[(0.1, 0.2, 1.0)],
    channels=[Channel("u_of_point", [10.0]), Channel("v_of_point", [20.0])],
)
with_depth = recovery.process(cloud)                 # None if no image has this stamp
depths = with_depth.channel("Z_of_point").values
```

Depth values follow these rules:

- Pixel value 255 means out of range and gives a depth of 0.
- Pixel value 0 gives no depth entry.
- Points outside the image are logged and skipped.

### Tracking features

`FeatureTracker` does no image processing itself. You pass in the operations
it needs:

- `camera.lift_projective(point)` returns an undistorted ray `(x, y, z)` for
  a pixel.
- `flow(cur_img, forw_img, points)` returns `(points, status, errors)`.
- `fundamental(un_cur, un_forw, threshold, confidence)` returns a status per
  match.
- `detector(image, max_count, quality_level, min_dist, mask)` returns new
  points.
- `equalizer(image)` is optional. It is used when
  `TrackerParameters.equalize` is set.

```python
from vionav.parameters import TrackerParameters
from vionav.tracker import FeatureTracker
from vionav.tracker_node import PublishRateController, build_feature_cloud
from vionav.messages import Header

params = TrackerParameters()
tracker = FeatureTracker(camera, params, flow, fundamental, detector)
controller = PublishRateController(params.freq)

for stamp, image in frames:
    decision = controller.update(stamp)
    if decision.process_image:
        tracker.read_image(image, stamp / 1000, publish=decision.publish_frame)
    if decision.send_cloud:
        cloud = build_feature_cloud(tracker, Header(stamp=stamp))
```

### Replaying a dataset

```python
from vionav.dataset import DatasetPlayer

for frame in DatasetPlayer("path/to/dataset").frames():
    frame.imu, frame.ground_truth, frame.mono_image, frame.depth_image
```

Every fifth step names the mono and depth image files for that time. The
player does not load them. Playback stops in either of two cases:

- the last IMU time token equals `end_flag` (`"60.32800000"` by default)
- both text files are exhausted

## What the package does not do

- It has no image-processing backend. Optical flow, fundamental-matrix
  estimation, corner detection, histogram equalisation and camera models must
  be supplied by the caller.
- It does not read or draw images.
- It has no message transport between stages, and no command-line programs.
- It has no filter or estimator that produces the odometry it records.
- It does not calibrate cameras.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.
from typing import Literal

import numpy as np
from numpy.typing import NDArray

SpringKind = Literal["structural", "shear", "flexion"]
POSITIONS = NDArray[np.float64]
INDICES = NDArray[np.int32]
MASK = NDArray[np.bool_]

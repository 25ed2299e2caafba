from typing import Union

import numpy as np
import numpy.typing as npt

DOUBLE_ARRAY = npt.NDArray[np.float64]
INT_ARRAY = npt.NDArray[np.int64]
ARRAY_LIKE_2D = npt.ArrayLike
F_SCALAR_OR_ARRAY = Union[float, DOUBLE_ARRAY]
I_SCALAR_OR_ARRAY = Union[int, INT_ARRAY]

"""Distance and similarity functions over face descriptors.

All functions are pure and deterministic. Inputs may be any 1-D sequence of
finite numbers; they are coerced with :func:`as_descriptor`. Comparing
descriptors of unequal length raises :class:`DimensionMismatchError`.
"""
import math
from typing import Sequence, Union

import numpy as np

from faceauth.core.exceptions import DimensionMismatchError, InvalidDescriptorError

DescriptorLike = Union[Sequence[float], np.ndarray]


def as_descriptor(values: DescriptorLike) -> np.ndarray:
    """Convert a sequence of numbers into a read-only float64 descriptor.

    Args:
        values: 1-D sequence of finite numbers

    Returns:
        np.ndarray: Read-only copy of the values

    Raises:
        InvalidDescriptorError: If the values are not a 1-D sequence of finite numbers
    """
    if isinstance(values, (str, bytes)):
        raise InvalidDescriptorError("Descriptor must be a sequence of numbers")
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidDescriptorError(f"Descriptor must be a sequence of numbers: {e}")

    if array.ndim != 1:
        raise InvalidDescriptorError(
            "Descriptor must be one-dimensional", details={"shape": list(array.shape)}
        )
    if not np.all(np.isfinite(array)):
        raise InvalidDescriptorError("Descriptor values must be finite")

    array.setflags(write=False)
    return array


def _pair(a: DescriptorLike, b: DescriptorLike):
    left, right = as_descriptor(a), as_descriptor(b)
    if left.shape[0] != right.shape[0]:
        raise DimensionMismatchError(left.shape[0], right.shape[0])
    return left, right


def euclidean(a: DescriptorLike, b: DescriptorLike) -> float:
    """Square root of the sum of squared differences."""
    left, right = _pair(a, b)
    return float(np.sqrt(np.sum((left - right) ** 2)))


def manhattan(a: DescriptorLike, b: DescriptorLike) -> float:
    """Sum of absolute differences."""
    left, right = _pair(a, b)
    return float(np.sum(np.abs(left - right)))


def cosine(a: DescriptorLike, b: DescriptorLike) -> float:
    """Cosine similarity in [-1, 1].

    Returns 0.0 when either descriptor has zero magnitude, so a degenerate
    all-zero descriptor scores as dissimilar instead of producing NaN.
    """
    left, right = _pair(a, b)
    scale_a = float(np.max(np.abs(left), initial=0.0))
    scale_b = float(np.max(np.abs(right), initial=0.0))
    if scale_a == 0 or scale_b == 0:
        return 0.0
    # Rescale to max-abs 1 so large finite values cannot overflow the dot products
    left, right = left / scale_a, right / scale_b
    magnitude_a = float(np.sqrt(np.dot(left, left)))
    magnitude_b = float(np.sqrt(np.dot(right, right)))
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    return float(np.dot(left, right) / (magnitude_a * magnitude_b))


def euclidean_many(probe: DescriptorLike, descriptors: Sequence[DescriptorLike]) -> np.ndarray:
    """Euclidean distance from one probe to each of several descriptors.

    Raises:
        DimensionMismatchError: If any descriptor differs in length from the probe
    """
    query = as_descriptor(probe)
    if len(descriptors) == 0:
        return np.empty(0, dtype=np.float64)

    rows = [as_descriptor(d) for d in descriptors]
    for row in rows:
        if row.shape[0] != query.shape[0]:
            raise DimensionMismatchError(query.shape[0], row.shape[0])

    matrix = np.vstack(rows)
    return np.sqrt(np.sum((matrix - query) ** 2, axis=1))


def distance_to_similarity(distance: float) -> float:
    """Map a distance in [0, inf) to a similarity in (0, 1] as exp(-distance)."""
    return math.exp(-distance)

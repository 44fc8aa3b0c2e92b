"""
Integer data types used by binary resource formats.

Each DataType maps to a numpy dtype so that range checks use numpy's
own integer limits instead of hand-written constants.
"""

import numbers
from enum import Enum

import numpy as np


class DataType(Enum):
    """Fixed-width integer types that appear in resource keys and tables."""
    Int8 = 'int8'
    UInt8 = 'uint8'
    Int16 = 'int16'
    UInt16 = 'uint16'
    Int32 = 'int32'
    UInt32 = 'uint32'
    Int64 = 'int64'
    UInt64 = 'uint64'

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

    @property
    def min(self) -> int:
        return int(np.iinfo(self.value).min)

    @property
    def max(self) -> int:
        return int(np.iinfo(self.value).max)


def is_integer(value) -> bool:
    """Check for a real integer (numpy integers count, bools do not)."""
    return isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_))


def is_number_in_range(value, data_type: DataType) -> bool:
    """
    Check whether a value fits in the given integer type.

    Args:
        value: Value to check
        data_type: Target integer type

    Returns:
        True if value is an integer within the type's limits
    """
    if not is_integer(value):
        return False
    limits = np.iinfo(data_type.value)
    return int(limits.min) <= int(value) <= int(limits.max)

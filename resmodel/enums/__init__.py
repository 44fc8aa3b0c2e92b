from .data_type import DataType, is_integer, is_number_in_range

__all__ = ['DataType', 'is_integer', 'is_number_in_range']

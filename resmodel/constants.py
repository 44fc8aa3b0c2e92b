"""
Constants used across the library.

Consolidates magic numbers of the internal compression format and the
resource key layout.
"""

# Internal compression header: u8 flags, u8 magic, big-endian size
INTERNAL_HEADER_FLAGS = 0x10
INTERNAL_HEADER_MAGIC = 0xFB
INTERNAL_LARGE_SIZE_FLAG = 0x80  # set on byte 0 when the size takes 4 bytes
INTERNAL_HEADER_SIZE = 5
INTERNAL_MAX_SMALL_SIZE = 0xFFFFFF

# First control byte of each code range (short copies start at 0x00: 2 bytes, copy 3-10, offset < 1024)
CONTROL_MEDIUM_COPY = 0x80    # 3 bytes, copy 4-67, offset < 16384
CONTROL_LONG_COPY = 0xC0      # 4 bytes, copy 5-1028, offset < 131072
CONTROL_LITERAL = 0xE0        # 1 byte, 4-112 literals
CONTROL_TERMINAL = 0xFC       # 1 byte, 0-3 literals, ends the stream

# Limits of each code range (copy lengths, distances are offset + 1)
SHORT_COPY_MIN, SHORT_COPY_MAX, SHORT_COPY_DISTANCE = 3, 10, 1024
MEDIUM_COPY_MIN, MEDIUM_COPY_MAX, MEDIUM_COPY_DISTANCE = 4, 67, 16384
LONG_COPY_MIN, LONG_COPY_MAX, LONG_COPY_DISTANCE = 5, 1028, 131072
MAX_LITERAL_RUN = 112
MAX_TRAILING_LITERALS = 3

# Resource key parts
RESOURCE_KEY_FIELDS = ('type', 'group', 'instance')

# Leading bytes of an XML document
XML_DECLARATION = b'<?xml'

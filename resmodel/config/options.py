"""
Reading Options

Options that control how resources are loaded, optionally read from an INI
file:

    [options]
    save_buffer = yes
    save_compressed_buffer = no
    load_errors_as_raw = true
"""

import configparser
from dataclasses import dataclass, fields
from pathlib import Path

from ..utils import log, logWarning

_TRUE_VALUES = ('true', '1', 'yes', 'on')


@dataclass
class ReadingOptions:
    """Options used when loading resources from their stored form"""
    save_buffer: bool = False  # Keep the decompressed buffer as the resource's cache
    save_compressed_buffer: bool = False  # Keep the compressed bytes as the record's cache
    load_raw: bool = False  # Never parse, load every resource as a RawResource
    load_errors_as_raw: bool = False  # Load resources that fail to parse as RawResource
    never_cache: bool = False  # Serialize on every get_buffer() call

    def __post_init__(self):
        """Validate option types"""
        for option in fields(self):
            value = getattr(self, option.name)
            if not isinstance(value, bool):
                raise ValueError(f"Option '{option.name}' must be a bool, got {value!r}")

    @classmethod
    def from_ini(cls, config_path: str, section: str = "options") -> 'ReadingOptions':
        """
        Load options from an INI file.

        Args:
            config_path: Path to the INI file
            section: Section holding the options; a missing section gives defaults

        Returns:
            ReadingOptions with the values found in the file
        """
        if not Path(config_path).exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        config = configparser.ConfigParser()
        config.read(config_path)

        if not config.has_section(section):
            logWarning(f"No [{section}] section in {config_path}, using default reading options")
            return cls()

        known = {option.name for option in fields(cls)}
        values = {}
        for name, raw in config[section].items():
            if name not in known:
                logWarning(f"Unknown reading option '{name}' in [{section}] of {config_path}")
                continue
            values[name] = raw.strip().lower() in _TRUE_VALUES

        options = cls(**values)
        log(f"Reading options: {options}")
        return options

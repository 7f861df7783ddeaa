"""Package version and the config file format it understands."""

__all__ = ["__version__", "CONFIG_SCHEMA_VERSION"]

__version__ = "0.2.0"

#: Bumped whenever HarvestConfig fields are renamed or removed; see config.migrate_config.
CONFIG_SCHEMA_VERSION = 1

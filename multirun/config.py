import logging
from typing import Any, Dict

import multirun.settings as default_settings

log = logging.getLogger(__name__)


class MergedSettings:
    """
    A singleton class that merges default settings with runtime overrides.

    This class provides a unified, attribute-based access point for all
    configuration. It follows a clear precedence:
    1. Base values from `settings.py`.
    2. Overrides from the environment / `.env` file (handled by `python-dotenv` in settings.py).
    3. Runtime overrides (e.g. command-line flags) for settings in `MODIFIABLE_SETTINGS`.
    """

    def __init__(self) -> None:
        """Initializes the settings object by loading defaults."""
        self._load_defaults()

    def _load_defaults(self) -> None:
        """
        Loads all uppercase attributes from the settings.py module as defaults.
        """
        for key in dir(default_settings):
            if key.isupper():
                setattr(self, key, getattr(default_settings, key))

    def apply_overrides(self, overrides: Dict[str, Any]) -> None:
        """
        Applies runtime overrides on top of the defaults.

        Only keys listed in `MODIFIABLE_SETTINGS` are applied; anything else
        is ignored with a warning. A value of None leaves the setting untouched.

        :param overrides: A dictionary of setting names to new values.
        """
        for key, value in overrides.items():
            if value is None:
                continue
            if not hasattr(self, key):
                log.warning(f"Override setting '{key}' not found in default settings. Ignoring.")
                continue
            if key not in self.MODIFIABLE_SETTINGS:
                log.warning(f"Attempted to override non-modifiable setting '{key}'. Ignoring.")
                continue

            # Coerce the new value to the type of the default
            original_value = getattr(self, key)
            if isinstance(original_value, bool):
                value = str(value).lower() in ('true', '1', 't', 'yes', 'y')
            setattr(self, key, value)
            log.debug(f"Overridden setting: {key} = {value}")

    def reset(self) -> None:
        """Discards all overrides and reloads the defaults."""
        self._load_defaults()


# Create a singleton instance to be imported by other modules
effective_settings = MergedSettings()

"""
Core imports for clipstash.

This module centralizes imports from third-party libraries used by the
configuration layer, ensuring consistency and simplifying dependency
management.
"""

import os  # noqa: F401
import json  # noqa: F401


from pydantic_settings import (  # noqa: F401
    BaseSettings,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)
from pydantic import (  # noqa: F401
    Field,
    BaseModel,
    ValidationError,
    field_validator,
)

from typing import Any, Dict, Mapping, Optional, Literal  # noqa: F401

from pathlib import Path  # noqa: F401

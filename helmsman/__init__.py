__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'helmsman'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .commands import *
from .dispatcher import *
from .faults import *
from .parsers import *
from .references import *
from .registry import *
from .writers import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of each layer
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += parsers.__all__  # type: ignore[attr-defined]
__all__ += references.__all__  # type: ignore[attr-defined]
__all__ += registry.__all__  # type: ignore[attr-defined]
__all__ += writers.__all__  # type: ignore[attr-defined]
